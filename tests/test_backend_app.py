from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pdfcraft import SourceDocument

from apps.backend.app.main import app
from conftest import BASE_WIDTH, page_widths


client = TestClient(app)


@pytest.fixture(autouse=True)
def _no_qpdf(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("pdfcraft.compress.optimizers._qpdf_available", lambda: None)


def _upload(path: Path) -> tuple[str, bytes, str]:
    return (path.name, path.read_bytes(), "application/pdf")


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_merge_endpoint(sample_pdfs: list[Path]) -> None:
    files = [("files", _upload(path)) for path in sample_pdfs]

    response = client.post("/merge", files=files, data={"add_bookmarks": "true"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "merged.pdf" in response.headers["content-disposition"]
    assert SourceDocument.from_bytes(response.content).page_count == 5


def test_merge_endpoint_drops_duplicate_uploads(sample_pdfs: list[Path]) -> None:
    files = [("files", _upload(sample_pdfs[0])), ("files", _upload(sample_pdfs[0]))]

    response = client.post("/merge", files=files)

    assert response.status_code == 400
    assert "at least two" in response.json()["detail"]


def test_merge_endpoint_unreadable_input(sample_pdfs: list[Path]) -> None:
    files = [
        ("files", _upload(sample_pdfs[0])),
        ("files", ("broken.pdf", b"garbage", "application/pdf")),
    ]

    response = client.post("/merge", files=files)

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert "broken.pdf" in detail
    assert "position 2" in detail


def test_split_endpoint(sample_pdf: Path) -> None:
    response = client.post(
        "/split",
        files={"file": _upload(sample_pdf)},
        data={"ranges": "1-2, 5; 9-4"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert archive.namelist() == [
            "sample_pages_1-2.pdf",
            "sample_pages_5-5.pdf",
            "sample_pages_4-5.pdf",
        ]
        assert page_widths(archive.read("sample_pages_5-5.pdf")) == [BASE_WIDTH + 5]


def test_split_endpoint_repeated_ranges_get_unique_entries(sample_pdf: Path) -> None:
    response = client.post("/split", files={"file": _upload(sample_pdf)}, data={"ranges": "1, 1, 2"})

    assert response.status_code == 200
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert archive.namelist() == [
            "sample_pages_1-1.pdf",
            "sample_pages_1-1_2.pdf",
            "sample_pages_2-2.pdf",
        ]
        assert page_widths(archive.read("sample_pages_1-1_2.pdf")) == [BASE_WIDTH + 1]


def test_split_endpoint_strict(sample_pdf: Path) -> None:
    response = client.post(
        "/split",
        files={"file": _upload(sample_pdf)},
        data={"ranges": "1-9", "strict": "true"},
    )
    assert response.status_code == 400


@pytest.mark.parametrize("ranges", ["abc", " , ; "])
def test_split_endpoint_bad_ranges(sample_pdf: Path, ranges: str) -> None:
    response = client.post("/split", files={"file": _upload(sample_pdf)}, data={"ranges": ranges})
    assert response.status_code == 400


def test_split_endpoint_encrypted(encrypted_pdf: Path) -> None:
    response = client.post("/split", files={"file": _upload(encrypted_pdf)}, data={"ranges": "1"})
    assert response.status_code == 400
    assert "encrypted" in response.json()["detail"]


def test_compress_endpoint(sample_pdf: Path) -> None:
    response = client.post(
        "/compress",
        files={"file": _upload(sample_pdf)},
        data={"quality": "0.5", "scale": "1.0"},
    )

    assert response.status_code == 200
    assert "sample_compressed.pdf" in response.headers["content-disposition"]
    assert response.headers["x-original-size"] == str(sample_pdf.stat().st_size)
    assert response.headers["x-compressed-size"] == str(len(response.content))
    assert SourceDocument.from_bytes(response.content).page_count == 5


def test_compress_endpoint_invalid_settings(sample_pdf: Path) -> None:
    response = client.post(
        "/compress",
        files={"file": _upload(sample_pdf)},
        data={"quality": "0", "scale": "1.0"},
    )
    assert response.status_code == 400


def test_empty_upload_rejected() -> None:
    response = client.post("/compress", files={"file": ("empty.pdf", b"", "application/pdf")})
    assert response.status_code == 400
