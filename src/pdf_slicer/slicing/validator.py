"""
Module: slicing.validator

Purpose:
    Turn raw CSV rows into validated slice requests. Validation is pure:
    no file or source access, so it runs before the source is loaded.

Key Functions:
    - validate_request(): Validate one row
    - validate_requests(): Validate a batch, reporting every bad row

Dependencies:
    - pdf_slicer.core.models: RawSliceRequest, SliceRequest, SliceRequestCollection

Used By:
    - pipeline: Second step of a run
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from pdf_slicer.core.models import RawSliceRequest, SliceRequest, SliceRequestCollection
from pdf_slicer.errors import RangeError, RequestValidationError

logger = logging.getLogger(__name__)


def validate_request(raw: RawSliceRequest) -> SliceRequest:
    """
    Validate one raw request.

    Args:
        raw: Untrusted row from the request CSV.

    Returns:
        SliceRequest covering [start_page, end_page).

    Raises:
        EmptyRangeError: If start_page == end_page.
        InvalidRangeError: If start_page > end_page.

    Example:
        >>> validate_request(RawSliceRequest("ch1", 1, 4)).pages
        frozenset({1, 2, 3})
    """
    return SliceRequest(raw.description, raw.start_page, raw.end_page)


def validate_requests(raws: Iterable[RawSliceRequest]) -> SliceRequestCollection:
    """
    Validate a batch of raw requests.

    Every row is checked before reporting, so one run surfaces all bad
    rows at once. Nothing is returned unless the whole batch is valid.

    Args:
        raws: Raw requests in input order.

    Returns:
        SliceRequestCollection in input order.

    Raises:
        RequestValidationError: If the batch is empty or any row fails.
            Its errors attribute lists each RangeError in input order.
    """
    valid: List[SliceRequest] = []
    errors: List[RangeError] = []
    count = 0

    for raw in raws:
        count += 1
        try:
            valid.append(validate_request(raw))
        except RangeError as e:
            where = f" (line {raw.line_number})" if raw.line_number is not None else ""
            logger.debug(f"Rejected request{where}: {e}")
            errors.append(e)

    if count == 0:
        raise RequestValidationError("No slice requests to process")
    if errors:
        raise RequestValidationError(
            f"{len(errors)} of {count} slice requests are invalid", errors
        )

    logger.info(f"Validated {len(valid)} slice requests")
    return SliceRequestCollection.build(valid)
