"""
Module: slicing.planner

Purpose:
    Page set algebra for one slice: which source pages to delete so only
    the requested range remains, and which requested pages the source
    does not have.

Key Functions:
    - plan_deletions(): Source pages minus requested pages
    - missing_pages(): Requested pages absent from the source
    - retained_pages(): Requested pages present in the source

Used By:
    - slicing.exporter: Applies the plan to each working copy
"""

from __future__ import annotations

from typing import AbstractSet, Tuple

from pdf_slicer.core.models import SliceRequest


def plan_deletions(source_pages: AbstractSet[int], request: SliceRequest) -> Tuple[int, ...]:
    """
    Compute the pages to delete for one request.

    Requested pages that the source lacks contribute nothing. Only the
    source pages are scanned, so a request far larger than the source
    costs no more than one that fits.

    Args:
        source_pages: Page identifiers present in the source.
        request: Validated slice request.

    Returns:
        Ascending tuple of page identifiers to delete.

    Example:
        >>> plan_deletions({0, 1, 2, 3, 4, 5}, SliceRequest("ch1", 1, 4))
        (0, 4, 5)
    """
    return tuple(sorted(page for page in source_pages if not request.contains(page)))


def missing_pages(source_pages: AbstractSet[int], request: SliceRequest) -> Tuple[int, ...]:
    """Requested page identifiers the source does not contain, ascending."""
    return tuple(
        page for page in range(request.start_page, request.end_page)
        if page not in source_pages
    )


def retained_pages(source_pages: AbstractSet[int], request: SliceRequest) -> Tuple[int, ...]:
    """Page identifiers that survive the deletions, in source order."""
    return tuple(sorted(page for page in source_pages if request.contains(page)))
