"""Page rasterization (pypdfium2) and lossy re-encoding (Pillow)."""

from __future__ import annotations

import io
import logging
import threading
from dataclasses import dataclass
from typing import Protocol

import pypdfium2 as pdfium
from PIL import Image

from ..core.backends import ImagePage
from ..exceptions import DocumentUnreadableError

_LOGGER = logging.getLogger("pdfcraft.compress")

# pdfium is not thread-safe; every call into it goes through this lock.
_PDFIUM_LOCK = threading.RLock()


@dataclass
class RasterFrame:
    """Pixels for one page plus the page size they must fill, in points."""

    image: Image.Image
    width: float
    height: float

    def close(self) -> None:
        self.image.close()


class Rasterizer(Protocol):
    def __len__(self) -> int: ...

    def render(self, index: int, scale: float) -> RasterFrame: ...

    def close(self) -> None: ...


class ImageEncoder(Protocol):
    def encode(self, frame: RasterFrame) -> ImagePage: ...


class PdfiumRasterizer:
    """Renders pages of a PDF byte buffer with pypdfium2."""

    def __init__(self, data: bytes) -> None:
        with _PDFIUM_LOCK:
            try:
                self._pdf = pdfium.PdfDocument(data)
            except pdfium.PdfiumError as exc:
                raise DocumentUnreadableError(
                    f"Renderer could not open the PDF. Error: {exc}", reason=str(exc)
                ) from exc
            self._page_count = len(self._pdf)

    def __len__(self) -> int:
        return self._page_count

    def render(self, index: int, scale: float) -> RasterFrame:
        with _PDFIUM_LOCK:
            page = self._pdf[index]
            try:
                width, height = page.get_size()
                bitmap = page.render(scale=scale)
                try:
                    # to_pil() shares the bitmap buffer; convert() takes a copy.
                    image = bitmap.to_pil().convert("RGB")
                finally:
                    bitmap.close()
            finally:
                page.close()

        _LOGGER.debug(
            "Rendered page %d at scale %.2f: %dx%d px", index + 1, scale, image.width, image.height
        )
        return RasterFrame(image=image, width=width * scale, height=height * scale)

    def close(self) -> None:
        with _PDFIUM_LOCK:
            self._pdf.close()

    def __enter__(self) -> "PdfiumRasterizer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class JpegEncoder:
    """Encodes frames as baseline JPEG at a Pillow quality of 1-100."""

    def __init__(self, quality: int) -> None:
        self.quality = quality

    def encode(self, frame: RasterFrame) -> ImagePage:
        image = frame.image
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=self.quality, optimize=True)
        return ImagePage(
            data=buffer.getvalue(),
            pixel_width=image.width,
            pixel_height=image.height,
            width=frame.width,
            height=frame.height,
            grayscale=image.mode == "L",
        )


__all__ = [
    "RasterFrame",
    "Rasterizer",
    "ImageEncoder",
    "PdfiumRasterizer",
    "JpegEncoder",
]
