"""
Module: loading.reader

Purpose:
    Read slice requests from a CSV file. Each row becomes one
    RawSliceRequest; range ordering is checked later by the validator.

Key Functions:
    - read_requests(): Read all rows from a CSV path
    - parse_rows(): Parse already-opened CSV rows

Dependencies:
    - csv (std)
    - pdf_slicer.core.models: RawSliceRequest

Used By:
    - pipeline: First step of a run
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from pdf_slicer.core.models import RawSliceRequest
from pdf_slicer.errors import ParseError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("description", "start_page", "end_page")


def read_requests(csv_path: Path) -> List[RawSliceRequest]:
    """
    Read raw slice requests from a CSV file.

    The file must have a header row naming at least the columns
    description, start_page and end_page. Extra columns are ignored.

    Args:
        csv_path: Path to the request CSV.

    Returns:
        RawSliceRequest per data row, in file order.

    Raises:
        ParseError: If the file is missing or unreadable, a required
            column is absent, or a page value is not a non-negative integer.

    Example:
        >>> rows = read_requests(Path("inputs/slices.csv"))
        >>> rows[0]
        RawSliceRequest(description='ch1', start_page=1, end_page=4, line_number=2)
    """
    if not csv_path.exists():
        raise ParseError(f"Request file not found: {csv_path}")

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            reader.fieldnames = _check_header(reader.fieldnames, csv_path)
            # line_num is the physical line a row ends on, blank lines included
            numbered = ((reader.line_num, row) for row in reader)
            requests = _parse_numbered(numbered, csv_path.name)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise ParseError(f"Failed to read {csv_path}: {e}") from e

    logger.info(f"Read {len(requests)} slice requests from {csv_path.name}")
    return requests


def parse_rows(
    rows: Iterable[Dict[str, Optional[str]]],
    *,
    source: str = "<rows>",
) -> List[RawSliceRequest]:
    """
    Parse CSV dict rows into RawSliceRequest objects.

    Line numbers assume a single header line and one line per row, so the
    first data row is line 2. Rows where every cell is blank are skipped.

    Args:
        rows: Mappings with description/start_page/end_page keys.
        source: Name used in error messages.

    Returns:
        Parsed rows in order.

    Raises:
        ParseError: On a missing or malformed value.
    """
    return _parse_numbered(enumerate(rows, start=2), source)


def _parse_numbered(
    numbered_rows: Iterable[Tuple[int, Dict[str, Optional[str]]]],
    source: str,
) -> List[RawSliceRequest]:
    """Parse (line_number, row) pairs into RawSliceRequest objects."""
    requests: List[RawSliceRequest] = []
    for line_number, row in numbered_rows:
        if all(not (value or "").strip() for value in row.values() if isinstance(value, str)):
            logger.debug(f"Skipping blank row at {source}:{line_number}")
            continue

        description = (row.get("description") or "").strip()
        if not description:
            raise ParseError(f"{source}:{line_number}: description is empty")

        requests.append(
            RawSliceRequest(
                description=description,
                start_page=_parse_page(row.get("start_page"), "start_page", source, line_number),
                end_page=_parse_page(row.get("end_page"), "end_page", source, line_number),
                line_number=line_number,
            )
        )
    return requests


def _check_header(fieldnames: Optional[List[str]], csv_path: Path) -> List[str]:
    """Ensure every required column is present; return stripped names."""
    if not fieldnames:
        raise ParseError(f"Request file has no header row: {csv_path}")
    names = [(name or "").strip() for name in fieldnames]
    missing = [col for col in REQUIRED_COLUMNS if col not in names]
    if missing:
        raise ParseError(f"Request file {csv_path.name} is missing columns: {missing}")
    return names


def _parse_page(value: Optional[str], column: str, source: str, line_number: int) -> int:
    """Parse one page cell as a non-negative integer."""
    text = (value or "").strip()
    try:
        page = int(text)
    except ValueError:
        raise ParseError(
            f"{source}:{line_number}: {column} must be an integer, got {text!r}"
        ) from None
    if page < 0:
        raise ParseError(f"{source}:{line_number}: {column} must be non-negative, got {page}")
    return page
