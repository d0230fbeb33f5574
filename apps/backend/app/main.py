"""FastAPI application exposing the pdfcraft engines over HTTP."""

from __future__ import annotations

import io
from pathlib import Path
from typing import List
from zipfile import ZIP_DEFLATED, ZipFile

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response

from pdfcraft import __version__
from pdfcraft.aio import compress_async, load_async, merge_async, split_async
from pdfcraft.compress import compression_report
from pdfcraft.config import DEFAULT_QUALITY, DEFAULT_SCALE
from pdfcraft.core.document import SourceDocument
from pdfcraft.core.utils import base_name, get_logger
from pdfcraft.exceptions import DocumentUnreadableError, PDFCraftError, SourceUnreadableError
from pdfcraft.merge import dedupe_sources
from pdfcraft.split import SplitPart, normalize_ranges, parse_ranges

LOGGER = get_logger("pdfcraft.service")

app = FastAPI(title="pdfcraft API", version=__version__)


def _safe_filename(filename: str | None, default: str) -> str:
    """Return a filesystem-safe filename derived from user input."""

    if not filename:
        return default

    candidate = Path(filename).name
    return candidate or default


def _pdf_response(data: bytes, filename: str, headers: dict[str, str] | None = None) -> Response:
    disposition = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=data, media_type="application/pdf", headers={**disposition, **(headers or {})})


def _bad_request(exc: PDFCraftError) -> HTTPException:
    LOGGER.info("Rejected request: %s", exc.message)
    return HTTPException(status_code=400, detail=exc.message)


def _archive_names(parts: list[SplitPart], source_name: str | None) -> list[str]:
    """Entry names for the split archive; repeated ranges get ``_2``, ``_3``..."""

    names: list[str] = []
    seen: dict[str, int] = {}
    for part in parts:
        name = part.filename(source_name)
        seen[name] = seen.get(name, 0) + 1
        if seen[name] > 1:
            name = f"{Path(name).stem}_{seen[name]}.pdf"
        names.append(name)
    return names


async def _load_upload(upload: UploadFile, default_name: str) -> SourceDocument:
    """Read an uploaded file and decode it as a PDF."""

    contents = await upload.read()
    if not contents:
        raise HTTPException(status_code=400, detail=f"File '{upload.filename}' is empty.")

    try:
        return await load_async(contents, _safe_filename(upload.filename, default_name))
    except PDFCraftError as exc:
        raise _bad_request(exc) from exc


@app.get("/health", response_class=JSONResponse)
async def health() -> dict[str, str]:
    """Simple health-check endpoint."""

    return {"status": "ok"}


@app.post("/merge", summary="Merge PDFs in upload order")
async def merge_documents(
    files: List[UploadFile] = File(..., description="PDF files to merge, in order"),
    add_bookmarks: bool = Form(False, description="Create one bookmark per merged document."),
) -> Response:
    """Merge multiple PDF uploads into a single document.

    Uploads sharing a filename and size with an earlier upload are dropped
    before merging.
    """

    sources: list[SourceDocument] = []
    for index, upload in enumerate(files, start=1):
        contents = await upload.read()
        if not contents:
            raise HTTPException(status_code=400, detail=f"File '{upload.filename}' is empty.")
        name = _safe_filename(upload.filename, f"document_{index}.pdf")
        try:
            sources.append(await load_async(contents, name))
        except DocumentUnreadableError as exc:
            raise _bad_request(SourceUnreadableError(index - 1, name, exc.message)) from exc

    try:
        merged = await merge_async(dedupe_sources(sources), bookmarks=add_bookmarks)
    except PDFCraftError as exc:
        raise _bad_request(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive conversion to HTTP error
        LOGGER.exception("Merge failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return _pdf_response(merged.data, "merged.pdf")


@app.post("/split", summary="Split a PDF into one file per page range")
async def split_document(
    file: UploadFile = File(..., description="Source PDF to split."),
    ranges: str = Form(..., description="Page ranges separated by commas, semicolons or newlines."),
    strict: bool = Form(False, description="Reject out-of-bounds ranges instead of clamping them."),
) -> Response:
    """Return a zip archive containing ``<name>_pages_<from>-<to>.pdf`` entries."""

    source = await _load_upload(file, "document.pdf")

    try:
        parsed = parse_ranges(ranges)
        if not strict:
            parsed = normalize_ranges(parsed, source.page_count)
        parts = await split_async(source, parsed)
    except PDFCraftError as exc:
        raise _bad_request(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive conversion to HTTP error
        LOGGER.exception("Split failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    buffer = io.BytesIO()
    with ZipFile(buffer, "w", compression=ZIP_DEFLATED) as archive:
        for name, part in zip(_archive_names(parts, source.name), parts):
            archive.writestr(name, part.document.data)

    archive_name = f"{base_name(source.name)}_split.zip"
    return Response(
        content=buffer.getvalue(),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{archive_name}"'},
    )


@app.post("/compress", summary="Compress a PDF by rasterizing its pages")
async def compress_document(
    file: UploadFile = File(..., description="Source PDF to compress."),
    quality: float = Form(DEFAULT_QUALITY, description="JPEG quality in (0, 1]."),
    scale: float = Form(DEFAULT_SCALE, description="Render scale, greater than 0."),
) -> Response:
    """Rasterize every page and return the rebuilt PDF.

    Text in the result is no longer selectable.
    """

    source = await _load_upload(file, "document.pdf")

    try:
        compressed = await compress_async(source, quality, scale)
    except PDFCraftError as exc:
        raise _bad_request(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive conversion to HTTP error
        LOGGER.exception("Compression failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    report = compression_report(source, compressed)
    return _pdf_response(
        compressed.data,
        f"{base_name(source.name)}_compressed.pdf",
        headers={
            "X-Original-Size": str(report.original_size),
            "X-Compressed-Size": str(report.compressed_size),
        },
    )
