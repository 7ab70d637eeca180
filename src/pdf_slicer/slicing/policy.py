"""
Module: slicing.policy

Purpose:
    Enum defining what happens when a slice request names pages the
    source document does not have.

Key Classes:
    - MissingPagePolicy: Three-state enum for out-of-range pages

Used By:
    - config: ExportConfig
    - slicing.exporter: export_slices
    - cli: --missing-pages option
"""

from enum import Enum


class MissingPagePolicy(Enum):
    """
    Controls how requested pages absent from the source are handled.

    Missing pages never contribute to the deletion set, so the output
    simply holds fewer pages than requested. The policy only decides
    whether that is reported.

    Attributes:
        IGNORE: Drop missing pages silently.
        WARN: Drop missing pages and log a warning naming them.
        ERROR: Raise PageOutOfRangeError for the request.

    Example:
        >>> MissingPagePolicy("warn") is MissingPagePolicy.WARN
        True
    """

    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"
