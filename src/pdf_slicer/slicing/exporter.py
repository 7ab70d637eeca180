"""
Module: slicing.exporter

Purpose:
    Write one PDF per slice request. Each request gets its own working
    copy of the source, has every page outside its range deleted, and is
    saved atomically under a name derived from its description.

Key Functions:
    - export_slices(): Export every request in a collection
    - export_slice(): Export a single request

Key Classes:
    - ExportedSlice: One written output
    - ExportFailure: One request that failed under continue_on_error
    - ExportResult: Container for export output

Dependencies:
    - fitz (PyMuPDF): Page deletion and PDF serialization
    - pdf_slicer.slicing.planner: Deletion sets

Used By:
    - pipeline: Third step of a run
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import fitz

from pdf_slicer.common.page_ranges import format_page_ids
from pdf_slicer.common.path_utils import output_path_for
from pdf_slicer.config import ExportConfig
from pdf_slicer.core.models import SliceRequest, SliceRequestCollection
from pdf_slicer.errors import ExportError, PageOutOfRangeError, SlicerError
from pdf_slicer.loading.source import SourceDocument
from pdf_slicer.timing import TimingLog, timed_phase

from .planner import missing_pages, plan_deletions, retained_pages
from .policy import MissingPagePolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportedSlice:
    """
    A slice written to disk.

    Attributes:
        description: Request description
        path: Output PDF path
        pages: Source page identifiers the output holds, in order
        missing: Requested page identifiers the source lacks
    """
    description: str
    path: Path
    pages: Tuple[int, ...]
    missing: Tuple[int, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass(frozen=True)
class ExportFailure:
    """A request that failed while continue_on_error was set."""
    description: str
    error: str


@dataclass
class ExportResult:
    """
    Result of exporting a collection.

    Attributes:
        exported: Written slices, in request order, one per output file.
        failures: Requests that failed (only with continue_on_error).
        output_dir: Directory the slices were written to.
        warnings: Missing-page reports under MissingPagePolicy.WARN.
    """
    output_dir: Path
    exported: List[ExportedSlice] = field(default_factory=list)
    failures: List[ExportFailure] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def export_slices(
    source: SourceDocument,
    collection: SliceRequestCollection,
    output_dir: Path,
    *,
    config: Optional[ExportConfig] = None,
    timing_log: Optional[TimingLog] = None,
) -> ExportResult:
    """
    Export every request in the collection.

    Requests are processed in collection order. The source snapshot is
    never modified; each request works on its own copy.

    By default the first failing request aborts the batch and its error
    propagates; slices written before it stay on disk. With
    config.continue_on_error the failure is logged and recorded instead.

    Args:
        source: Immutable source snapshot.
        collection: Validated requests.
        output_dir: Directory for output PDFs (created if needed).
        config: Export settings.
        timing_log: Optional log for per-request timings.

    Returns:
        ExportResult listing written slices and any recorded failures.

    Raises:
        ExportError: If the output directory or a file cannot be written.
        PageOutOfRangeError: If a request selects no source pages, or
            names missing pages under MissingPagePolicy.ERROR.

    Example:
        >>> result = export_slices(source, collection, Path("outputs"))
        >>> [s.path.name for s in result.exported]
        ['ch1.pdf', 'ch2.pdf']
    """
    config = config or ExportConfig()
    result = ExportResult(output_dir=output_dir)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Failed to create output directory {output_dir}: {e}") from e

    for request in collection:
        try:
            with timed_phase(timing_log, "export", request=request.description):
                exported = export_slice(source, request, output_dir, config=config)
        except SlicerError as e:
            if not config.continue_on_error:
                raise
            logger.error(f"Skipping slice {request.description!r}: {e}")
            result.failures.append(ExportFailure(request.description, str(e)))
            continue
        _record(result, exported, config.missing_pages)

    logger.info(
        f"Exported {len(result.exported)} of {len(collection)} slices to {output_dir}"
    )
    return result


def export_slice(
    source: SourceDocument,
    request: SliceRequest,
    output_dir: Path,
    *,
    config: Optional[ExportConfig] = None,
) -> ExportedSlice:
    """
    Export a single request.

    Args:
        source: Immutable source snapshot.
        request: Request to export.
        output_dir: Existing output directory.
        config: Export settings.

    Returns:
        ExportedSlice describing the written file.

    Raises:
        ExportError: If the file cannot be written.
        PageOutOfRangeError: If nothing would be retained, or pages are
            missing under MissingPagePolicy.ERROR.
    """
    config = config or ExportConfig()
    source_pages = source.page_ids

    absent = missing_pages(source_pages, request)
    kept = retained_pages(source_pages, request)
    if not kept:
        raise PageOutOfRangeError(
            request.description,
            absent,
            f"Slice {request.description!r} selects no pages of the source "
            f"({source.page_count} pages): {request.start_page}..{request.end_page}",
        )
    if absent:
        _report_missing(request, absent, config.missing_pages)

    deletions = plan_deletions(source_pages, request)
    logger.debug(
        f"Slice {request.description!r}: keeping {len(kept)} pages, deleting {len(deletions)}"
    )

    path = output_path_for(output_dir, request.description)
    doc = source.open_copy()
    try:
        if deletions:
            doc.delete_pages([source.to_index(page_id) for page_id in deletions])
        data = _serialize(doc, compact=config.compact)
    except (RuntimeError, ValueError) as e:
        raise ExportError(f"Failed to build slice {request.description!r}: {e}") from e
    finally:
        doc.close()

    try:
        _atomic_write_bytes(data, path)
    except OSError as e:
        raise ExportError(f"Failed to write slice {request.description!r} to {path}: {e}") from e

    logger.info(f"Wrote {path.name} ({len(kept)} pages)")
    return ExportedSlice(
        description=request.description,
        path=path,
        pages=kept,
        missing=absent,
    )


def _report_missing(
    request: SliceRequest,
    absent: Tuple[int, ...],
    policy: MissingPagePolicy,
) -> None:
    """Apply the missing-page policy to one request."""
    if policy is MissingPagePolicy.ERROR:
        raise PageOutOfRangeError(request.description, absent)
    if policy is MissingPagePolicy.WARN:
        logger.warning(_missing_message(request.description, absent))


def _missing_message(description: str, absent: Tuple[int, ...]) -> str:
    return f"Slice {description!r} references pages missing from source: {format_page_ids(absent)}"


def _record(
    result: ExportResult,
    exported: ExportedSlice,
    policy: MissingPagePolicy,
) -> None:
    """Add a written slice to the result, replacing any earlier slice at the same path."""
    earlier = [s for s in result.exported if s.path == exported.path]
    for replaced in earlier:
        logger.debug(
            f"Slice {exported.description!r} replaced {replaced.description!r} "
            f"at {exported.path.name}"
        )
        result.exported.remove(replaced)
    result.exported.append(exported)
    if exported.missing and policy is MissingPagePolicy.WARN:
        result.warnings.append(_missing_message(exported.description, exported.missing))


def _serialize(doc: fitz.Document, *, compact: bool) -> bytes:
    """Serialize a document, optionally dropping unused objects."""
    if compact:
        return doc.tobytes(garbage=4, deflate=True)
    return doc.tobytes()


def _atomic_write_bytes(data: bytes, path: Path) -> None:
    """Write bytes atomically using temp file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=".pdf",
        dir=path.parent,
        delete=False,
    ) as f:
        f.write(data)
        temp_path = Path(f.name)

    # replace() overwrites an existing slice on all platforms
    try:
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
