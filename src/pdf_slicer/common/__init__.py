"""Common utilities shared across the slicer."""

from __future__ import annotations

from .page_ranges import format_page_ids
from .path_utils import DEFAULT_STEM, output_path_for, sanitize_stem

__all__ = [
    "DEFAULT_STEM",
    "format_page_ids",
    "output_path_for",
    "sanitize_stem",
]
