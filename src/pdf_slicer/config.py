"""
Module: config

Purpose:
    Configuration dataclasses for the slicing pipeline. Immutable
    settings with validation on construction.

Key Classes:
    - ExportConfig: Settings for per-request export
    - ShrinkConfig: Ghostscript settings for size reduction
    - SlicerConfig: Main configuration for a run

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - pipeline: run_slicer()
    - slicing.exporter: Uses ExportConfig
    - postprocess.shrink: Uses ShrinkConfig
    - cli: Builds SlicerConfig from arguments
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pdf_slicer.slicing.policy import MissingPagePolicy

PDF_SETTINGS_PRESETS = ("/screen", "/ebook", "/printer", "/prepress", "/default")


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration for exporting slices.

    Attributes:
        first_page_number: Identifier of the source's first page. 1 matches
            the PDF library's native numbering, 0 gives 0-based ids.
        compact: Drop unreferenced objects and deflate streams on save.
        missing_pages: What to do when a request names absent pages.
        continue_on_error: Record a failed request and carry on instead of
            aborting the batch.
    """
    first_page_number: int = 1
    compact: bool = True
    missing_pages: MissingPagePolicy = MissingPagePolicy.WARN
    continue_on_error: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.first_page_number not in (0, 1):
            raise ValueError(
                f"first_page_number must be 0 or 1: {self.first_page_number}"
            )


@dataclass(frozen=True)
class ShrinkConfig:
    """
    Ghostscript settings for the size-reduction pass.

    Attributes:
        executable: Ghostscript binary name or path
        compatibility_level: Target PDF version (-dCompatibilityLevel)
        pdf_settings: Distiller preset (-dPDFSETTINGS)
        image_resolution: Downsampling resolution for images, in DPI
        timeout_seconds: Max seconds to wait for one file

    Example:
        >>> ShrinkConfig(pdf_settings="/screen", image_resolution=72)
    """
    executable: str = "gs"
    compatibility_level: str = "1.4"
    pdf_settings: str = "/ebook"
    image_resolution: int = 150
    timeout_seconds: float = 120.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.executable:
            raise ValueError("executable must not be empty")
        if self.pdf_settings not in PDF_SETTINGS_PRESETS:
            raise ValueError(
                f"pdf_settings must be one of {PDF_SETTINGS_PRESETS}: {self.pdf_settings!r}"
            )
        if self.image_resolution <= 0:
            raise ValueError(f"image_resolution must be positive: {self.image_resolution}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive: {self.timeout_seconds}")


@dataclass(frozen=True)
class SlicerConfig:
    """
    Configuration for a slicing run (immutable).

    Attributes:
        requests_path: CSV with description,start_page,end_page rows
        source_path: PDF to slice
        output_dir: Directory for sliced PDFs (created if needed)
        optimized_dir: Directory for shrunk PDFs (required when shrink=True)
        shrink: Run Ghostscript over every exported slice
        export: Export settings
        shrink_config: Ghostscript settings

    Example:
        >>> config = SlicerConfig(
        ...     requests_path=Path("inputs/slices.csv"),
        ...     source_path=Path("inputs/guide.pdf"),
        ...     output_dir=Path("outputs"),
        ... )
    """

    # Required
    requests_path: Path
    source_path: Path
    output_dir: Path

    # Post-processing
    optimized_dir: Optional[Path] = None
    shrink: bool = False

    export: ExportConfig = field(default_factory=ExportConfig)
    shrink_config: ShrinkConfig = field(default_factory=ShrinkConfig)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.shrink and self.optimized_dir is None:
            raise ValueError("optimized_dir is required when shrink is enabled")
        if self.optimized_dir is not None and Path(self.optimized_dir) == Path(self.output_dir):
            raise ValueError(
                f"optimized_dir must differ from output_dir: {self.optimized_dir}"
            )
