"""Path and filename utilities.

Provides shared functions for turning slice descriptions into safe
output filenames.
"""

from __future__ import annotations

import re
from pathlib import Path

DEFAULT_STEM = "slice"

# Path separators, characters reserved on Windows, and control characters
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')


def sanitize_stem(description: str) -> str:
    """Convert a slice description into a filesystem-safe file stem.

    Unsafe characters become underscores and leading/trailing dots and
    spaces are stripped, so a description can never escape the output
    directory or name a hidden file.

    Args:
        description: Description from the request CSV.

    Returns:
        Safe stem, or "slice" if nothing usable remains.

    Examples:
        >>> sanitize_stem("Chapter 1")
        'Chapter 1'
        >>> sanitize_stem("../etc/passwd")
        '_etc_passwd'
        >>> sanitize_stem("a:b?")
        'a_b_'
    """
    cleaned = _UNSAFE_CHARS.sub("_", description).strip(" .")
    return cleaned or DEFAULT_STEM


def output_path_for(output_dir: Path, description: str, suffix: str = ".pdf") -> Path:
    """Build the output path for a slice description.

    Examples:
        >>> output_path_for(Path("outputs"), "ch1")
        PosixPath('outputs/ch1.pdf')
    """
    return output_dir / f"{sanitize_stem(description)}{suffix}"
