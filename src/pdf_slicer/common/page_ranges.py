"""Compact text rendering of page identifier lists for log and error messages."""

from __future__ import annotations

from typing import Iterable, List


def format_page_ids(page_ids: Iterable[int]) -> str:
    """Render sorted page identifiers with consecutive runs collapsed.

    Examples:
        >>> format_page_ids([6, 7, 8])
        '[6-8]'
        >>> format_page_ids([1, 3, 4, 9])
        '[1, 3-4, 9]'
        >>> format_page_ids([])
        '[]'
    """
    parts: List[str] = []
    run_start = run_end = None
    for page in sorted(page_ids):
        if run_end is not None and page == run_end + 1:
            run_end = page
            continue
        if run_start is not None:
            parts.append(_run(run_start, run_end))
        run_start = run_end = page
    if run_start is not None:
        parts.append(_run(run_start, run_end))
    return f"[{', '.join(parts)}]"


def _run(start: int, end: int) -> str:
    return str(start) if start == end else f"{start}-{end}"
