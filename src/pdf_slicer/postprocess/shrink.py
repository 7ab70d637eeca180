"""
Module: postprocess.shrink

Purpose:
    Reduce exported slice size by rewriting each PDF through Ghostscript.
    All argument building, process spawning and exit-code handling stays
    in this module; callers only see paths in and sizes out.

Key Functions:
    - shrink_pdf(): Shrink one PDF
    - shrink_exports(): Shrink every exported slice into another directory
    - build_command(): Ghostscript argument list for one file

Key Classes:
    - ShrinkResult: Before/after sizes for one file

Dependencies:
    - subprocess (std): Ghostscript invocation
    - shutil (std): Executable lookup
    - tempfile (std): Partial output kept out of the optimized directory

Used By:
    - pipeline: Optional last step of a run
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from pdf_slicer.config import ShrinkConfig
from pdf_slicer.errors import PostProcessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShrinkResult:
    """
    Outcome of shrinking one file.

    Attributes:
        input_path: Exported slice
        output_path: Size-reduced copy
        input_bytes: Size of input_path
        output_bytes: Size of output_path

    Example:
        >>> result = shrink_pdf(Path("outputs/ch1.pdf"), Path("optimized/ch1.pdf"))
        >>> f"{result.ratio:.0%}"
        '42%'
    """
    input_path: Path
    output_path: Path
    input_bytes: int
    output_bytes: int

    @property
    def saved_bytes(self) -> int:
        """Bytes saved (negative if the output grew)."""
        return self.input_bytes - self.output_bytes

    @property
    def ratio(self) -> float:
        """Output size as a fraction of input size."""
        if self.input_bytes == 0:
            return 1.0
        return self.output_bytes / self.input_bytes


def build_command(
    executable: str,
    input_path: Path,
    output_path: Path,
    config: ShrinkConfig,
) -> List[str]:
    """
    Build the Ghostscript argument list for one file.

    Example:
        >>> build_command("gs", Path("a.pdf"), Path("b.pdf"), ShrinkConfig())[:3]
        ['gs', '-sDEVICE=pdfwrite', '-dCompatibilityLevel=1.4']
    """
    dpi = config.image_resolution
    return [
        executable,
        "-sDEVICE=pdfwrite",
        f"-dCompatibilityLevel={config.compatibility_level}",
        f"-dPDFSETTINGS={config.pdf_settings}",
        "-dDownsampleColorImages=true",
        "-dDownsampleGrayImages=true",
        "-dDownsampleMonoImages=true",
        f"-dColorImageResolution={dpi}",
        f"-dGrayImageResolution={dpi}",
        f"-dMonoImageResolution={dpi}",
        "-dNOPAUSE",
        "-dQUIET",
        "-dBATCH",
        f"-sOutputFile={output_path}",
        str(input_path),
    ]


def shrink_pdf(
    input_path: Path,
    output_path: Path,
    *,
    config: Optional[ShrinkConfig] = None,
) -> ShrinkResult:
    """
    Write a size-reduced copy of a PDF.

    The input file is never modified. The output directory is created
    if needed. A failed run leaves output_path as it was.

    Args:
        input_path: PDF to shrink.
        output_path: Where to write the reduced PDF.
        config: Ghostscript settings.

    Returns:
        ShrinkResult with before/after sizes.

    Raises:
        PostProcessError: If Ghostscript is missing, exits non-zero,
            exceeds config.timeout_seconds or produces no output.
    """
    config = config or ShrinkConfig()

    if not input_path.exists():
        raise PostProcessError(f"Cannot shrink missing file: {input_path}")

    executable = shutil.which(config.executable)
    if executable is None:
        raise PostProcessError(f"Ghostscript executable not found: {config.executable!r}")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PostProcessError(f"Failed to create {output_path.parent}: {e}") from e

    # Ghostscript writes beside the target; only a complete file replaces it
    temp_path = _temp_output(output_path)
    try:
        _run_ghostscript(executable, input_path, temp_path, config)
        try:
            temp_path.replace(output_path)
        except OSError as e:
            raise PostProcessError(f"Failed to write {output_path}: {e}") from e
    finally:
        temp_path.unlink(missing_ok=True)

    shrunk = ShrinkResult(
        input_path=input_path,
        output_path=output_path,
        input_bytes=input_path.stat().st_size,
        output_bytes=output_path.stat().st_size,
    )
    logger.info(
        f"Shrunk {input_path.name}: {shrunk.input_bytes} -> {shrunk.output_bytes} bytes "
        f"({shrunk.ratio:.0%})"
    )
    return shrunk


def _temp_output(output_path: Path) -> Path:
    """Reserve an empty temp file in the output directory."""
    try:
        with tempfile.NamedTemporaryFile(
            suffix=".pdf",
            prefix=f".{output_path.stem}-",
            dir=output_path.parent,
            delete=False,
        ) as f:
            return Path(f.name)
    except OSError as e:
        raise PostProcessError(f"Failed to create temp file in {output_path.parent}: {e}") from e


def _run_ghostscript(
    executable: str,
    input_path: Path,
    output_path: Path,
    config: ShrinkConfig,
) -> None:
    """Run Ghostscript once and check that it wrote a non-empty file."""
    cmd = build_command(executable, input_path, output_path, config)
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=config.timeout_seconds,
        )
    except subprocess.TimeoutExpired as e:
        raise PostProcessError(
            f"Ghostscript timed out after {config.timeout_seconds}s on {input_path.name}"
        ) from e
    except OSError as e:
        raise PostProcessError(f"Failed to run Ghostscript on {input_path.name}: {e}") from e

    if result.stdout:
        logger.debug(f"Ghostscript stdout: {result.stdout.strip()}")
    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip()
        raise PostProcessError(
            f"Ghostscript failed on {input_path.name} (exit {result.returncode}): {detail}"
        )
    if not output_path.exists() or output_path.stat().st_size == 0:
        raise PostProcessError(f"Ghostscript produced no output for {input_path.name}")


def shrink_exports(
    paths: Iterable[Path],
    optimized_dir: Path,
    *,
    config: Optional[ShrinkConfig] = None,
) -> List[ShrinkResult]:
    """
    Shrink each exported slice into optimized_dir under the same name.

    Files are processed in order and the first failure propagates; the
    exported slices themselves are left untouched.

    Args:
        paths: Exported PDF paths.
        optimized_dir: Directory for reduced copies.
        config: Ghostscript settings.

    Returns:
        ShrinkResult per file, in order.

    Raises:
        PostProcessError: On the first file that fails.
    """
    results = []
    for path in paths:
        results.append(shrink_pdf(path, optimized_dir / path.name, config=config))
    return results
