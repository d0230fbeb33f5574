"""pypdf backend implementation for pdfcraft."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from pypdf import PageObject, PasswordType, PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from pypdf.generic import (
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    NumberObject,
    StreamObject,
)

from ...exceptions import DocumentUnreadableError, EncryptedDocumentError
from .base import BackendDocument, ImagePage, PDFBackend

LOGGER = logging.getLogger("pdfcraft.core")

_IMAGE_NAME = "/Im0"


def _fmt(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return text or "0"


@dataclass
class PypdfDocument(BackendDocument):
    reader: PdfReader

    def get_page(self, index: int) -> object:
        return self.reader.pages[index]

    def metadata(self) -> dict[str, str]:
        metadata = self.reader.metadata
        if not metadata:
            return {}
        return {
            str(key): str(value)
            for key, value in metadata.items()
            if value is not None
        }

    @property
    def is_encrypted(self) -> bool:
        return bool(self.reader.is_encrypted)


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def load(self, data: bytes) -> PypdfDocument:
        try:
            reader = PdfReader(io.BytesIO(data))
        except PdfReadError as exc:
            raise DocumentUnreadableError(
                f"Corrupted or invalid PDF. Error: {exc}", reason=str(exc)
            ) from exc
        except Exception as exc:
            raise DocumentUnreadableError(
                f"Unexpected error reading PDF. Error: {exc}", reason=str(exc)
            ) from exc

        if reader.is_encrypted:
            # Owner-password-only files open with an empty user password.
            try:
                result = reader.decrypt("")
            except Exception as exc:
                raise EncryptedDocumentError(reason=str(exc)) from exc
            if result == PasswordType.NOT_DECRYPTED:
                raise EncryptedDocumentError()
            LOGGER.debug("Opened encrypted PDF with an empty user password")

        try:
            page_count = len(reader.pages)
        except Exception as exc:
            raise DocumentUnreadableError(
                f"Unable to read the page tree. Error: {exc}", reason=str(exc)
            ) from exc
        if page_count == 0:
            raise DocumentUnreadableError("PDF contains no pages.", reason="empty")

        return PypdfDocument(page_count=page_count, file_size=len(data), reader=reader)

    def new_writer(self) -> PdfWriter:
        return PdfWriter()

    def copy_pages(self, writer: PdfWriter, document: BackendDocument, indexes: Iterable[int]) -> int:
        start = len(writer.pages)
        for index in indexes:
            writer.add_page(document.get_page(index))
        return start

    def add_image_page(self, writer: PdfWriter, image: ImagePage) -> None:
        page = PageObject.create_blank_page(width=image.width, height=image.height)

        xobject = StreamObject()
        xobject.update(
            {
                NameObject("/Type"): NameObject("/XObject"),
                NameObject("/Subtype"): NameObject("/Image"),
                NameObject("/Width"): NumberObject(image.pixel_width),
                NameObject("/Height"): NumberObject(image.pixel_height),
                NameObject("/ColorSpace"): NameObject(
                    "/DeviceGray" if image.grayscale else "/DeviceRGB"
                ),
                NameObject("/BitsPerComponent"): NumberObject(8),
                NameObject("/Filter"): NameObject("/DCTDecode"),
            }
        )
        xobject.set_data(image.data)

        # Unit image square scaled to the page, origin at the bottom-left corner.
        content = DecodedStreamObject()
        content.set_data(
            f"q {_fmt(image.width)} 0 0 {_fmt(image.height)} 0 0 cm {_IMAGE_NAME} Do Q".encode("ascii")
        )
        page[NameObject("/Resources")] = DictionaryObject(
            {
                NameObject("/XObject"): DictionaryObject(
                    {NameObject(_IMAGE_NAME): xobject}
                )
            }
        )
        page[NameObject("/Contents")] = content
        # add_page clones the page; both streams become indirect objects of the writer.
        writer.add_page(page)

    def page_count(self, writer: PdfWriter) -> int:
        return len(writer.pages)

    def set_metadata(self, writer: PdfWriter, metadata: Mapping[str, str]) -> None:
        cleaned = {
            (key if key.startswith("/") else f"/{key}"): value
            for key, value in metadata.items()
            if value is not None
        }
        if cleaned:
            writer.add_metadata(cleaned)

    def add_bookmark(self, writer: PdfWriter, title: str, page_index: int) -> None:
        writer.add_outline_item(title, writer.pages[page_index])

    def write(self, writer: PdfWriter) -> bytes:
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()
