"""
Module: errors

Purpose:
    Exception hierarchy for the slicer. Every failure that should stop a
    run derives from SlicerError so the CLI can report it with one handler.

Key Classes:
    - SlicerError: Base class
    - ParseError: Request CSV unreadable or malformed
    - RangeError / EmptyRangeError / InvalidRangeError: Degenerate requests
    - RequestValidationError: Aggregated validation failures
    - SourceLoadError: Source PDF cannot be opened
    - PageOutOfRangeError: Requested pages missing from the source
    - ExportError: Output directory or file write failure
    - PostProcessError: Ghostscript missing or failing

Used By:
    - every pdf_slicer module
"""

from __future__ import annotations

from typing import List, Sequence

from pdf_slicer.common.page_ranges import format_page_ids


class SlicerError(Exception):
    """Base error for the slicing pipeline."""
    pass


class ParseError(SlicerError):
    """Error reading the request CSV."""
    pass


class RangeError(SlicerError, ValueError):
    """A slice request's page range is degenerate."""

    def __init__(self, description: str, message: str):
        super().__init__(message)
        self.description = description


class EmptyRangeError(RangeError):
    """start_page == end_page, so the slice would hold no pages."""

    def __init__(self, description: str):
        super().__init__(
            description,
            f"Empty page range for {description!r} (start == end)",
        )


class InvalidRangeError(RangeError):
    """start_page > end_page, or a bound outside the accepted page numbers."""

    def __init__(self, description: str, start_page: int, end_page: int, reason: str = ""):
        message = f"Invalid page range for {description!r}: {start_page}, {end_page}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(description, message)
        self.start_page = start_page
        self.end_page = end_page


class RequestValidationError(SlicerError):
    """
    One or more requests failed validation.

    Attributes:
        errors: Every RangeError found, in input order. Empty when the batch
            itself was rejected (e.g. no requests at all).
    """

    def __init__(self, message: str, errors: Sequence[RangeError] = ()):
        self.errors: List[RangeError] = list(errors)
        if self.errors:
            details = "; ".join(str(e) for e in self.errors)
            message = f"{message}: {details}"
        super().__init__(message)


class SourceLoadError(SlicerError):
    """Error loading the source PDF."""
    pass


class PageOutOfRangeError(SlicerError):
    """A request references pages the source does not have."""

    def __init__(self, description: str, missing: Sequence[int], message: str = ""):
        self.description = description
        self.missing = tuple(missing)
        super().__init__(
            message
            or f"Slice {description!r} references pages missing from source: {format_page_ids(self.missing)}"
        )


class ExportError(SlicerError):
    """Error writing a slice to disk."""
    pass


class PostProcessError(SlicerError):
    """Error running the external size-reduction tool."""
    pass
