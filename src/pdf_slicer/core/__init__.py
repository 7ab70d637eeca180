"""Core models for the PDF slicer."""

from .models import RawSliceRequest, SliceRequest, SliceRequestCollection

__all__ = [
    "RawSliceRequest",
    "SliceRequest",
    "SliceRequestCollection",
]
