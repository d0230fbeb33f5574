"""Backend abstractions for pdfcraft."""

from .base import BackendDocument, ImagePage, PDFBackend
from .pypdf_backend import PypdfBackend


def default_backend() -> PDFBackend:
    return PypdfBackend()


__all__ = [
    "BackendDocument",
    "ImagePage",
    "PDFBackend",
    "PypdfBackend",
    "default_backend",
]
