from __future__ import annotations

from pathlib import Path
from typing import Callable
import io
import sys

import pytest
from pypdf import PdfReader, PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfcraft import SourceDocument  # noqa: E402

# Page N of a generated PDF is (BASE_WIDTH + N) points wide so tests can tell pages apart.
BASE_WIDTH = 100
PAGE_HEIGHT = 200


def build_pdf(pages: int, *, title: str | None = None, offset: int = 0) -> bytes:
    writer = PdfWriter()
    for number in range(1, pages + 1):
        writer.add_blank_page(width=BASE_WIDTH + offset + number, height=PAGE_HEIGHT)
    if title is not None:
        writer.add_metadata({"/Title": title, "/Producer": "pdfcraft-tests"})
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_widths(data: bytes) -> list[int]:
    reader = PdfReader(io.BytesIO(data))
    return [round(float(page.mediabox.width)) for page in reader.pages]


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    pdf_path.write_bytes(build_pdf(5, title="Sample"))
    return pdf_path


@pytest.fixture()
def sample_source(sample_pdf: Path) -> SourceDocument:
    return SourceDocument.from_path(sample_pdf)


@pytest.fixture()
def empty_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "empty.pdf"
    writer = PdfWriter()
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def encrypted_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "locked.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    writer.encrypt("secret")
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def corrupt_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "corrupt.pdf"
    pdf_path.write_bytes(b"this is not a pdf at all")
    return pdf_path


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, pages: int = 1, title: str | None = None, offset: int = 0) -> Path:
        path = tmp_path / filename
        path.write_bytes(build_pdf(pages, title=title, offset=offset))
        return path

    return _create


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> list[Path]:
    pdf1 = pdf_factory("one.pdf", pages=2, title="Document One")
    pdf2 = pdf_factory("two.pdf", pages=3, offset=50)
    return [pdf1, pdf2]
