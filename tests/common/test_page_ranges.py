import pytest

from pdf_slicer.common.page_ranges import format_page_ids


@pytest.mark.parametrize(
    "page_ids,expected",
    [
        ([], "[]"),
        ([5], "[5]"),
        ([6, 7, 8], "[6-8]"),
        ([1, 3, 4, 9], "[1, 3-4, 9]"),
        ({10, 2, 1}, "[1-2, 10]"),
    ],
)
def test_format_page_ids_when_given_ids_then_collapses_runs(page_ids, expected):
    assert format_page_ids(page_ids) == expected


def test_format_page_ids_when_long_run_then_stays_short():
    assert format_page_ids(range(7, 500_007)) == "[7-500006]"
