from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

from pdfcraft import SourceDocument
from pdfcraft.cli import cli


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_qpdf(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("pdfcraft.compress.optimizers._qpdf_available", lambda: None)


def test_info(runner: CliRunner, sample_pdf: Path) -> None:
    result = runner.invoke(cli, ["info", str(sample_pdf)])

    assert result.exit_code == 0
    assert "Number of Pages" in result.output
    assert "Sample" in result.output


def test_info_corrupt(runner: CliRunner, corrupt_pdf: Path) -> None:
    result = runner.invoke(cli, ["info", str(corrupt_pdf)])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_split(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "parts"

    result = runner.invoke(cli, ["split", str(sample_pdf), "-r", "1-2; 4", "-o", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in output_dir.iterdir()) == [
        "sample_pages_1-2.pdf",
        "sample_pages_4-4.pdf",
    ]
    assert SourceDocument.from_path(output_dir / "sample_pages_1-2.pdf").page_count == 2


def test_split_clamps_ranges_by_default(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "parts"

    result = runner.invoke(cli, ["split", str(sample_pdf), "-r", "10-4", "-o", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert [path.name for path in output_dir.iterdir()] == ["sample_pages_4-5.pdf"]


def test_split_strict_rejects_out_of_bounds(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "parts"

    result = runner.invoke(
        cli, ["split", str(sample_pdf), "-r", "1-9", "-o", str(output_dir), "--strict"]
    )

    assert result.exit_code == 1
    assert "out of bounds" in result.output
    assert not output_dir.exists()


def test_split_strict_accepts_reversed_range(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "parts"

    result = runner.invoke(
        cli, ["split", str(sample_pdf), "-r", "3-1", "-o", str(output_dir), "--strict"]
    )

    assert result.exit_code == 0, result.output
    assert [path.name for path in output_dir.iterdir()] == ["sample_pages_1-3.pdf"]
    assert SourceDocument.from_path(output_dir / "sample_pages_1-3.pdf").page_count == 3


def test_split_bad_syntax(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    result = runner.invoke(cli, ["split", str(sample_pdf), "-r", "1-x", "-o", str(tmp_path)])
    assert result.exit_code == 1
    assert "Invalid page range" in result.output


def test_merge(runner: CliRunner, sample_pdfs: list[Path], tmp_path: Path) -> None:
    output = tmp_path / "combined.pdf"

    result = runner.invoke(cli, ["merge", *map(str, sample_pdfs), "-o", str(output), "--bookmarks"])

    assert result.exit_code == 0, result.output
    assert SourceDocument.from_path(output).page_count == 5


def test_merge_skips_duplicates(runner: CliRunner, sample_pdfs: list[Path], tmp_path: Path) -> None:
    output = tmp_path / "combined.pdf"
    first, second = map(str, sample_pdfs)

    result = runner.invoke(cli, ["merge", first, second, first, "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert "Skipped 1 duplicate" in result.output
    assert SourceDocument.from_path(output).page_count == 5


def test_merge_single_input_fails(runner: CliRunner, pdf_factory: Callable[..., Path], tmp_path: Path) -> None:
    only = pdf_factory("only.pdf")
    result = runner.invoke(cli, ["merge", str(only), "-o", str(tmp_path / "out.pdf")])
    assert result.exit_code == 1
    assert "at least two" in result.output


def test_compress_default_output(runner: CliRunner, sample_pdf: Path) -> None:
    result = runner.invoke(cli, ["compress", str(sample_pdf), "-s", "1.0"])

    assert result.exit_code == 0, result.output
    assert "rasterizes" in result.output
    expected = sample_pdf.with_name("sample_compressed.pdf")
    assert expected.exists()
    assert SourceDocument.from_path(expected).page_count == 5


def test_compress_with_level(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "small.pdf"
    result = runner.invoke(cli, ["compress", str(sample_pdf), "--level", "high", "-o", str(output)])
    assert result.exit_code == 0, result.output
    assert output.exists()


def test_compress_invalid_quality(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "bad.pdf"
    result = runner.invoke(cli, ["compress", str(sample_pdf), "-q", "2", "-o", str(output)])
    assert result.exit_code == 1
    assert "Quality" in result.output
    assert not output.exists()
