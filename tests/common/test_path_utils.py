from pathlib import Path

import pytest

from pdf_slicer.common.path_utils import DEFAULT_STEM, output_path_for, sanitize_stem


@pytest.mark.parametrize(
    "description,expected",
    [
        ("Chapter 1", "Chapter 1"),
        ("../etc/passwd", "_etc_passwd"),
        ("a:b?", "a_b_"),
        ('x<y>"z"|w*', "x_y__z__w_"),
        ("tab\there", "tab_here"),
        ("  padded.  ", "padded"),
        ("Übersicht", "Übersicht"),
    ],
)
def test_sanitize_stem_when_description_given_then_returns_safe_stem(description, expected):
    assert sanitize_stem(description) == expected


@pytest.mark.parametrize("description", ["", "...", "  ", " . "])
def test_sanitize_stem_when_nothing_usable_then_falls_back(description):
    assert sanitize_stem(description) == DEFAULT_STEM


def test_output_path_for_when_unsafe_description_then_stays_in_dir():
    out = Path("outputs")
    path = output_path_for(out, "../../secret")
    assert path.parent == out
    assert path.name == "_.._secret.pdf"


def test_output_path_for_when_suffix_given_then_uses_it():
    assert output_path_for(Path("o"), "ch1", suffix=".bin") == Path("o") / "ch1.bin"
