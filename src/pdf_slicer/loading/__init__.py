"""
Module: loading

Purpose:
    Input loading for the slicer: the request CSV and the source PDF.

Key Functions:
    - read_requests(): Read RawSliceRequest rows from CSV
    - load_source(): Load the source PDF snapshot

Key Classes:
    - SourceDocument: Immutable source snapshot

Used By:
    - pipeline: run_slicer()
"""

from .reader import read_requests, parse_rows
from .source import SourceDocument, load_source

__all__ = [
    "read_requests",
    "parse_rows",
    "SourceDocument",
    "load_source",
]
