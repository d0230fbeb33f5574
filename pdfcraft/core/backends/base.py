"""Backend protocol for PDF codec operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Protocol


@dataclass
class BackendDocument:
    """Represents a decoded PDF document with backend-specific helpers."""

    page_count: int
    file_size: int

    def get_page(self, index: int) -> object:
        raise NotImplementedError

    def metadata(self) -> dict[str, str]:
        raise NotImplementedError

    @property
    def is_encrypted(self) -> bool:
        return False


@dataclass(frozen=True)
class ImagePage:
    """An encoded raster image placed so it fills a page exactly."""

    data: bytes
    pixel_width: int
    pixel_height: int
    width: float
    height: float
    grayscale: bool = False


class PDFBackend(Protocol):
    """Protocol defining the codec capabilities the engines rely on."""

    def load(self, data: bytes) -> BackendDocument:
        """Decode *data* and return a backend document wrapper."""

    def new_writer(self) -> object:
        """Return an empty output document."""

    def copy_pages(self, writer: object, document: BackendDocument, indexes: Iterable[int]) -> int:
        """Append pages *indexes* of *document*; return the first new page index."""

    def add_image_page(self, writer: object, image: ImagePage) -> None:
        """Append a page whose only content is *image*."""

    def page_count(self, writer: object) -> int:
        """Return the number of pages currently in *writer*."""

    def set_metadata(self, writer: object, metadata: Mapping[str, str]) -> None:
        """Apply document info entries to *writer*."""

    def add_bookmark(self, writer: object, title: str, page_index: int) -> None:
        """Add a top-level outline entry pointing at *page_index*."""

    def write(self, writer: object) -> bytes:
        """Serialize *writer* into a complete PDF byte string."""
