import re
import pytest
import sys
from pathlib import Path
from typing import List

from pypdf import PdfReader
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

# Add src to sys.path so we can import pdf_slicer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

PAGE_LABEL = re.compile(r"PAGE-(\d{3})")


def write_labelled_pdf(path: Path, page_count: int) -> Path:
    """Write a PDF whose page at index i carries the text PAGE-00i."""
    path.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(path), pagesize=A4)
    for index in range(page_count):
        c.setFont("Helvetica", 24)
        c.drawString(72, 720, f"PAGE-{index:03d}")
        c.showPage()
    c.save()
    return path


def read_page_labels(path: Path) -> List[int]:
    """Return the PAGE-nnn index printed on each page of a PDF, in order."""
    labels = []
    for page in PdfReader(path).pages:
        match = PAGE_LABEL.search(page.extract_text() or "")
        labels.append(int(match.group(1)) if match else -1)
    return labels


# Common test fixtures
@pytest.fixture
def make_pdf(tmp_path: Path):
    """Factory creating labelled PDFs in tmp_path."""
    def _make(page_count: int, name: str = "source.pdf") -> Path:
        return write_labelled_pdf(tmp_path / "inputs" / name, page_count)
    return _make


@pytest.fixture
def six_page_pdf(make_pdf) -> Path:
    """A six-page labelled PDF (PAGE-000 .. PAGE-005)."""
    return make_pdf(6)


@pytest.fixture
def write_csv(tmp_path: Path):
    """Factory writing a request CSV from (description, start, end) rows."""
    def _write(rows, name: str = "slices.csv", header: str = "description,start_page,end_page") -> Path:
        path = tmp_path / "inputs" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = [header] + [",".join(str(v) for v in row) for row in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def page_labels():
    """Expose read_page_labels to tests."""
    return read_page_labels
