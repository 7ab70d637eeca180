"""
Module: cli

Purpose:
    Command-line front end: parse arguments into a SlicerConfig, set up
    logging, run the pipeline and map failures to an exit status.

Key Functions:
    - main(): Console entry point, returns the exit status
    - build_parser(): argparse parser
    - config_from_args(): Parsed arguments to SlicerConfig

Dependencies:
    - argparse (std)
    - pdf_slicer.pipeline: run_slicer()

Used By:
    - run_slicer.py launcher
    - pdf-slicer console script
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .config import PDF_SETTINGS_PRESETS, ExportConfig, ShrinkConfig, SlicerConfig
from .errors import RequestValidationError, SlicerError
from .pipeline import run_slicer
from .slicing.policy import MissingPagePolicy
from .timing import TimingLog

logger = logging.getLogger("pdf_slicer")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-slicer",
        description="Split a PDF into named slices described by a CSV of page ranges.",
    )
    parser.add_argument("requests", type=Path, help="CSV with description,start_page,end_page columns")
    parser.add_argument("source", type=Path, help="PDF to slice")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("outputs"),
                        help="Directory for sliced PDFs (default: ./outputs)")
    parser.add_argument("--zero-based", action="store_true",
                        help="Number source pages from 0 instead of 1")
    parser.add_argument("--no-compact", action="store_true",
                        help="Skip garbage collection and stream compression on save")
    parser.add_argument("--missing-pages", choices=[p.value for p in MissingPagePolicy],
                        default=MissingPagePolicy.WARN.value,
                        help="How to treat requested pages the source lacks (default: warn)")
    parser.add_argument("--continue-on-error", action="store_true",
                        help="Skip a slice that fails to export instead of stopping")

    shrink = parser.add_argument_group("size reduction")
    shrink.add_argument("--shrink", action="store_true",
                        help="Also write Ghostscript-reduced copies of every slice")
    shrink.add_argument("--optimized-dir", type=Path, default=None,
                        help="Directory for reduced copies; implies --shrink "
                             "(default: ./outputs_optimized)")
    shrink.add_argument("--gs", dest="gs_executable", default="gs",
                        help="Ghostscript executable (default: gs)")
    shrink.add_argument("--pdf-settings", choices=PDF_SETTINGS_PRESETS, default="/ebook",
                        help="Ghostscript -dPDFSETTINGS preset (default: /ebook)")
    shrink.add_argument("--compatibility-level", default="1.4",
                        help="Target PDF version (default: 1.4)")
    shrink.add_argument("--image-resolution", type=int, default=150,
                        help="Image downsampling resolution in DPI (default: 150)")
    shrink.add_argument("--gs-timeout", type=float, default=120.0,
                        help="Seconds to wait for Ghostscript per file (default: 120)")

    parser.add_argument("--timings", type=Path, default=None,
                        help="Write phase timings as JSON to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> SlicerConfig:
    """Build a SlicerConfig from parsed arguments."""
    optimized_dir = args.optimized_dir
    shrink = args.shrink or optimized_dir is not None
    if shrink and optimized_dir is None:
        optimized_dir = Path("outputs_optimized")

    return SlicerConfig(
        requests_path=args.requests,
        source_path=args.source,
        output_dir=args.output_dir,
        optimized_dir=optimized_dir,
        shrink=shrink,
        export=ExportConfig(
            first_page_number=0 if args.zero_based else 1,
            compact=not args.no_compact,
            missing_pages=MissingPagePolicy(args.missing_pages),
            continue_on_error=args.continue_on_error,
        ),
        shrink_config=ShrinkConfig(
            executable=args.gs_executable,
            compatibility_level=args.compatibility_level,
            pdf_settings=args.pdf_settings,
            image_resolution=args.image_resolution,
            timeout_seconds=args.gs_timeout,
        ),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    timing = TimingLog()
    try:
        result = run_slicer(config, timing_log=timing)
    except RequestValidationError as e:
        logger.error("Invalid slice requests:")
        for error in e.errors or [e]:
            logger.error(f"  {error}")
        return EXIT_FAILURE
    except SlicerError as e:
        logger.error(str(e))
        return EXIT_FAILURE
    finally:
        if args.timings is not None:
            timing.save(args.timings)

    if result.export.failures:
        logger.error(f"{len(result.export.failures)} slices failed to export")
        return EXIT_FAILURE

    logger.info(f"Done: {len(result.output_paths)} slices in {config.output_dir}")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
