"""
Module: loading.source

Purpose:
    Load the source PDF once into an immutable snapshot. Every slice is
    cut from its own working copy opened from the snapshot bytes, so no
    export can see another export's deletions.

Key Functions:
    - load_source(): Read and check the source PDF

Key Classes:
    - SourceDocument: Immutable source snapshot

Dependencies:
    - fitz (PyMuPDF): PDF parsing

Used By:
    - pipeline: Loads the source after requests validate
    - slicing.exporter: Opens working copies
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import FrozenSet

import fitz

from pdf_slicer.errors import SourceLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceDocument:
    """
    Read-only snapshot of the source PDF.

    Attributes:
        path: Where the PDF was loaded from
        data: Raw PDF bytes (never modified)
        page_count: Number of pages at load time
        first_page_number: Identifier of the first page (0 or 1)

    Example:
        >>> source = load_source(Path("inputs/guide.pdf"))
        >>> sorted(source.page_ids)[:3]
        [1, 2, 3]
    """
    path: Path
    data: bytes = field(repr=False)
    page_count: int
    first_page_number: int = 1

    @cached_property
    def page_ids(self) -> FrozenSet[int]:
        """Page identifiers present in the source."""
        start = self.first_page_number
        return frozenset(range(start, start + self.page_count))

    def to_index(self, page_id: int) -> int:
        """Convert a page identifier to a 0-based PyMuPDF page index."""
        return page_id - self.first_page_number

    def open_copy(self) -> fitz.Document:
        """
        Open an independent working copy.

        The caller owns the returned document and must close it.
        """
        return fitz.open(stream=self.data, filetype="pdf")


def load_source(path: Path, *, first_page_number: int = 1) -> SourceDocument:
    """
    Load a PDF into an immutable SourceDocument.

    Args:
        path: Path to the source PDF.
        first_page_number: Identifier given to the first page.

    Returns:
        SourceDocument snapshot.

    Raises:
        SourceLoadError: If the file is missing, unreadable, not a PDF,
            encrypted, or has no pages.
    """
    if not path.exists():
        raise SourceLoadError(f"Source PDF not found: {path}")

    try:
        data = path.read_bytes()
    except OSError as e:
        raise SourceLoadError(f"Failed to read source PDF {path}: {e}") from e

    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            if doc.needs_pass:
                raise SourceLoadError(f"Source PDF is encrypted: {path}")
            page_count = doc.page_count
    except (RuntimeError, ValueError) as e:
        raise SourceLoadError(f"Failed to open source PDF {path}: {e}") from e

    if page_count == 0:
        raise SourceLoadError(f"Source PDF has no pages: {path}")

    logger.info(f"Loaded source {path.name} with {page_count} pages")
    return SourceDocument(
        path=path,
        data=data,
        page_count=page_count,
        first_page_number=first_page_number,
    )
