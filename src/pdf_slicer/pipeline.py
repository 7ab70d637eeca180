"""
Module: pipeline

Purpose:
    Orchestrate a complete slicing run.
    Read → Validate → Load source → Export → Shrink (optional)

Key Functions:
    - run_slicer(): Main entry point for a run

Key Classes:
    - SliceRunResult: Complete run result

Dependencies:
    - pdf_slicer.loading: Request CSV and source PDF
    - pdf_slicer.slicing: Validation, planning, export
    - pdf_slicer.postprocess: Ghostscript size reduction

Used By:
    - pdf_slicer.cli: Command-line front end
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import SlicerConfig
from .core.models import SliceRequestCollection
from .loading import load_source, read_requests
from .postprocess import ShrinkResult, shrink_exports
from .slicing.exporter import ExportResult, export_slices
from .slicing.validator import validate_requests
from .timing import TimingLog, timed_phase

logger = logging.getLogger(__name__)


@dataclass
class SliceRunResult:
    """
    Result of a slicing run.

    Attributes:
        requests: Validated requests, in input order.
        export: Export result (written slices and recorded failures).
        shrunk: Shrink results, empty unless shrinking was enabled.
        warnings: Non-fatal issues noticed during the run.
        timing: Phase and per-slice timings.

    Example:
        >>> result = run_slicer(config)
        >>> print(f"Wrote {len(result.export.exported)} slices")
    """
    requests: SliceRequestCollection
    export: ExportResult
    shrunk: List[ShrinkResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    timing: TimingLog = field(default_factory=TimingLog)

    @property
    def output_paths(self) -> List[Path]:
        return [s.path for s in self.export.exported]


def run_slicer(config: SlicerConfig, *, timing_log: Optional[TimingLog] = None) -> SliceRunResult:
    """
    Run the slicer from start to finish.

    Pipeline:
    1. Read raw requests from the CSV
    2. Validate every request (nothing is written if any row is bad)
    3. Load the source PDF snapshot
    4. Export one PDF per request
    5. (Optional) Shrink each exported PDF with Ghostscript

    Args:
        config: Run configuration.
        timing_log: Optional timing log to fill; a new one is used otherwise.

    Returns:
        SliceRunResult with written paths, shrink sizes and warnings.

    Raises:
        ParseError: If the request CSV is missing or malformed.
        RequestValidationError: If any request has a degenerate range.
        SourceLoadError: If the source PDF cannot be loaded.
        ExportError / PageOutOfRangeError: If a slice fails to export and
            continue_on_error is off.
        PostProcessError: If Ghostscript fails on a slice.

    Example:
        >>> config = SlicerConfig(
        ...     requests_path=Path("inputs/slices.csv"),
        ...     source_path=Path("inputs/guide.pdf"),
        ...     output_dir=Path("outputs"),
        ... )
        >>> result = run_slicer(config)
    """
    timing = timing_log if timing_log is not None else TimingLog()
    warnings: List[str] = []

    logger.info(f"Slicing {config.source_path.name} using {config.requests_path.name}")

    # 1-2. Requests are read and validated before the source is touched
    with timed_phase(timing, "read_requests"):
        raw_requests = read_requests(config.requests_path)
    with timed_phase(timing, "validate"):
        collection = validate_requests(raw_requests)

    for stem, descriptions in collection.output_collisions().items():
        names = ", ".join(repr(d) for d in descriptions)
        message = f"Slices {names} all write {stem}.pdf; the last slice wins"
        logger.warning(message)
        warnings.append(message)

    # 3. Load source
    with timed_phase(timing, "load_source"):
        source = load_source(
            config.source_path,
            first_page_number=config.export.first_page_number,
        )

    unused = collection.unnecessary_pages(source.page_ids)
    if unused:
        logger.debug(f"{len(unused)} source pages are not used by any slice")

    # 4. Export
    with timed_phase(timing, "export"):
        export = export_slices(
            source,
            collection,
            config.output_dir,
            config=config.export,
            timing_log=timing,
        )
    warnings.extend(export.warnings)
    for failure in export.failures:
        warnings.append(f"Slice {failure.description!r} failed: {failure.error}")

    # 5. Shrink
    shrunk: List[ShrinkResult] = []
    if config.shrink and config.optimized_dir is not None:
        with timed_phase(timing, "shrink"):
            shrunk = shrink_exports(
                [s.path for s in export.exported],
                config.optimized_dir,
                config=config.shrink_config,
            )
        saved = sum(r.saved_bytes for r in shrunk)
        logger.info(f"Shrunk {len(shrunk)} slices into {config.optimized_dir}, saved {saved} bytes")

    logger.debug(timing.summary())
    return SliceRunResult(
        requests=collection,
        export=export,
        shrunk=shrunk,
        warnings=warnings,
        timing=timing,
    )
