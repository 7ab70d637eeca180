"""
Module: slicing

Purpose:
    Slicing subpackage: validate page-range requests, plan which pages
    each slice drops, and export one PDF per request.

Key Modules:
    - validator: Raw rows to validated requests
    - planner: Deletion sets via page set algebra
    - exporter: Per-request working copies written to disk
    - policy: MissingPagePolicy enum

Dependencies:
    - fitz (PyMuPDF): Page deletion and serialization
    - pdf_slicer.core.models: SliceRequest, SliceRequestCollection

Used By:
    - pipeline: Uses slicing for output generation
"""
