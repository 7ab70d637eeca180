"""
Module: requests

Purpose:
    Provides the slice request models - the raw CSV row, the validated
    half-open page range it becomes, and the write-once collection the
    exporter consumes.

Key Functions:
    - check_page_range(): Ordering policy shared by construction and validation
    - SliceRequest.pages: Page identifiers covered by the request
    - SliceRequestCollection.required_pages: Union over all requests
    - SliceRequestCollection.unnecessary_pages(): Source pages no slice uses
    - SliceRequestCollection.output_collisions(): Requests sharing an output file

Dependencies:
    - dataclasses (std)
    - functools (std)
    - pdf_slicer.errors: Range errors
    - pdf_slicer.common.path_utils: Output stems

Used By:
    - loading.reader: Produces RawSliceRequest rows
    - slicing.validator: Builds SliceRequest / SliceRequestCollection
    - slicing.planner, slicing.exporter: Consume validated requests
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from functools import cached_property
from typing import AbstractSet, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from pdf_slicer.common.path_utils import sanitize_stem
from pdf_slicer.errors import EmptyRangeError, InvalidRangeError

# Largest accepted page identifier
MAX_PAGE_NUMBER = 1_000_000


def check_page_range(description: str, start_page: int, end_page: int) -> None:
    """
    Apply the ordering policy to a (start, end) pair.

    Args:
        description: Request name, used in error messages.
        start_page: First page of the range (inclusive).
        end_page: Page after the last one (exclusive).

    Raises:
        InvalidRangeError: If either bound is negative or above
            MAX_PAGE_NUMBER, or start > end.
        EmptyRangeError: If start == end.
    """
    if start_page < 0 or end_page < 0:
        raise InvalidRangeError(description, start_page, end_page)
    if max(start_page, end_page) > MAX_PAGE_NUMBER:
        raise InvalidRangeError(
            description, start_page, end_page, f"pages above {MAX_PAGE_NUMBER} are not supported"
        )
    if start_page == end_page:
        raise EmptyRangeError(description)
    if start_page > end_page:
        raise InvalidRangeError(description, start_page, end_page)


@dataclass(frozen=True)
class RawSliceRequest:
    """
    One unvalidated row from the request CSV.

    Attributes:
        description: Output name (used as the file stem after sanitizing)
        start_page: First page identifier (inclusive)
        end_page: Page identifier after the last one (exclusive)
        line_number: CSV line the row came from, if known
    """
    description: str
    start_page: int
    end_page: int
    line_number: Optional[int] = None


@dataclass(frozen=True)
class SliceRequest:
    """
    A named half-open page range to extract into its own document.

    The range is [start_page, end_page): start is included, end is not.

    Attributes:
        description: Output name
        start_page: First page identifier (inclusive)
        end_page: Page identifier after the last one (exclusive)

    Invariants:
        - 0 <= start_page < end_page
        - pages == {start_page, ..., end_page - 1}

    Example:
        >>> req = SliceRequest("ch1", 1, 4)
        >>> sorted(req.pages)
        [1, 2, 3]
        >>> req.page_count
        3
    """

    description: str
    start_page: int
    end_page: int

    def __post_init__(self) -> None:
        """Validate range on construction."""
        check_page_range(self.description, self.start_page, self.end_page)

    @cached_property
    def pages(self) -> FrozenSet[int]:
        """Page identifiers covered by this request."""
        return frozenset(range(self.start_page, self.end_page))

    @property
    def page_count(self) -> int:
        return self.end_page - self.start_page

    def contains(self, page_id: int) -> bool:
        """True if page_id falls in [start_page, end_page)."""
        return self.start_page <= page_id < self.end_page


@dataclass(frozen=True)
class SliceRequestCollection:
    """
    Ordered, write-once collection of validated slice requests.

    Order is the input order and determines output/log order.
    required_pages is derived from the requests and never stored separately.

    Attributes:
        requests: Validated requests in input order

    Example:
        >>> coll = SliceRequestCollection((SliceRequest("a", 0, 2), SliceRequest("b", 1, 3)))
        >>> sorted(coll.required_pages)
        [0, 1, 2]
    """

    requests: Tuple[SliceRequest, ...]

    def __post_init__(self) -> None:
        # Accept any iterable but always store a tuple
        if not isinstance(self.requests, tuple):
            object.__setattr__(self, "requests", tuple(self.requests))

    @classmethod
    def build(cls, requests: Iterable[SliceRequest]) -> "SliceRequestCollection":
        """Create a collection from validated requests."""
        return cls(tuple(requests))

    @cached_property
    def required_pages(self) -> FrozenSet[int]:
        """Union of every request's pages."""
        required: set[int] = set()
        for request in self.requests:
            required.update(request.pages)
        return frozenset(required)

    def unnecessary_pages(self, all_pages: AbstractSet[int]) -> FrozenSet[int]:
        """
        Source pages that no request references.

        Advisory only: the exporter does not trim the source with it.
        """
        return frozenset(
            page for page in all_pages
            if not any(request.contains(page) for request in self.requests)
        )

    def output_collisions(self) -> Dict[str, Tuple[str, ...]]:
        """
        Output stems written by more than one request.

        Descriptions are compared after sanitizing, so "a/b" and "a_b"
        collide because both write a_b.pdf.

        Returns:
            Mapping of stem -> descriptions in input order, for each stem
            used more than once, in first-seen order.

        Example:
            >>> coll = SliceRequestCollection((SliceRequest("a/b", 0, 1), SliceRequest("a_b", 1, 2)))
            >>> coll.output_collisions()
            {'a_b': ('a/b', 'a_b')}
        """
        by_stem: Dict[str, List[str]] = defaultdict(list)
        for request in self.requests:
            by_stem[sanitize_stem(request.description)].append(request.description)
        return {
            stem: tuple(descriptions)
            for stem, descriptions in by_stem.items()
            if len(descriptions) > 1
        }

    def __iter__(self) -> Iterator[SliceRequest]:
        return iter(self.requests)

    def __len__(self) -> int:
        return len(self.requests)
