"""
Module: postprocess

Purpose:
    Size reduction for exported slices using Ghostscript.

Key Functions:
    - shrink_pdf(): Shrink one PDF
    - shrink_exports(): Shrink a batch into another directory

Used By:
    - pipeline: Optional last step of a run
"""

from .shrink import ShrinkResult, build_command, shrink_exports, shrink_pdf

__all__ = [
    "ShrinkResult",
    "build_command",
    "shrink_exports",
    "shrink_pdf",
]
