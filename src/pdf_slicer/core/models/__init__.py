"""
Core Models Package

Immutable, validated data models shared by the reader, validator,
planner and exporter. All models are frozen dataclasses, so a request
cannot change between validation and export.
"""

from .requests import (
    MAX_PAGE_NUMBER,
    RawSliceRequest,
    SliceRequest,
    SliceRequestCollection,
    check_page_range,
)

__all__ = [
    "MAX_PAGE_NUMBER",
    "RawSliceRequest",
    "SliceRequest",
    "SliceRequestCollection",
    "check_page_range",
]
