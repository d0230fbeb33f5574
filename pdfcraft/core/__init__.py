"""Document abstraction shared by the split, merge and compress engines."""

from __future__ import annotations

from .backends import BackendDocument, ImagePage, PDFBackend, PypdfBackend, default_backend
from .document import DocumentInfo, OutputDocument, SourceDocument, describe, finish

__all__ = [
    "BackendDocument",
    "ImagePage",
    "PDFBackend",
    "PypdfBackend",
    "default_backend",
    "DocumentInfo",
    "OutputDocument",
    "SourceDocument",
    "describe",
    "finish",
]
