"""In-memory document types passed into and returned from the engines."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..exceptions import DocumentUnreadableError
from .backends import BackendDocument, PDFBackend, default_backend
from .utils import ensure_parent_dir, resolve_path

LOGGER = logging.getLogger("pdfcraft.core")


@dataclass(frozen=True)
class SourceDocument:
    """
    An immutable PDF byte buffer plus its decoded page count.

    Engines never mutate a source; every transformation reads ``data`` and
    produces a new :class:`OutputDocument`.

    Attributes:
        data: Raw PDF bytes
        page_count: Number of pages decoded from ``data``
        name: Optional file name used for output naming and de-duplication
    """

    data: bytes = field(repr=False)
    page_count: int
    name: str | None = None

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        name: str | None = None,
        *,
        backend: PDFBackend | None = None,
    ) -> "SourceDocument":
        payload = bytes(data)
        document = (backend or default_backend()).load(payload)
        LOGGER.debug("Loaded %s with %d page(s)", name or "<bytes>", document.page_count)
        return cls(data=payload, page_count=document.page_count, name=name)

    @classmethod
    def from_path(cls, path: str | Path, *, backend: PDFBackend | None = None) -> "SourceDocument":
        pdf_path = resolve_path(path)
        try:
            payload = pdf_path.read_bytes()
        except OSError as exc:
            raise DocumentUnreadableError(
                f"Unable to read PDF file: {pdf_path}. Error: {exc}", reason=str(exc)
            ) from exc
        return cls.from_bytes(payload, name=pdf_path.name, backend=backend)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def identity(self) -> tuple[str | None, int]:
        """Key used by callers to spot the same file selected twice."""

        return (self.name, self.size)

    def open(self, backend: PDFBackend | None = None) -> BackendDocument:
        return (backend or default_backend()).load(self.data)


@dataclass(frozen=True)
class OutputDocument:
    """A freshly assembled PDF, already serialized to bytes."""

    data: bytes = field(repr=False)
    page_count: int

    @property
    def size(self) -> int:
        return len(self.data)

    def to_source(self, name: str | None = None) -> SourceDocument:
        return SourceDocument(data=self.data, page_count=self.page_count, name=name)

    def save(self, path: str | Path) -> Path:
        destination = ensure_parent_dir(resolve_path(path))
        destination.write_bytes(self.data)
        return destination


@dataclass(frozen=True)
class DocumentInfo:
    """Summary information describing a source document."""

    name: str | None
    page_count: int
    file_size: int
    title: str | None = None
    author: str | None = None
    producer: str | None = None
    encrypted: bool = False
    metadata: dict[str, str] = field(default_factory=dict)


def finish(backend: PDFBackend, writer: object) -> OutputDocument:
    """Serialize *writer* and detach it from the caller."""

    return OutputDocument(data=backend.write(writer), page_count=backend.page_count(writer))


def describe(source: SourceDocument, *, backend: PDFBackend | None = None) -> DocumentInfo:
    """Return :class:`DocumentInfo` for *source*."""

    document = source.open(backend)
    metadata = document.metadata()
    return DocumentInfo(
        name=source.name,
        page_count=source.page_count,
        file_size=source.size,
        title=metadata.get("/Title"),
        author=metadata.get("/Author"),
        producer=metadata.get("/Producer"),
        encrypted=document.is_encrypted,
        metadata=metadata,
    )


__all__ = ["SourceDocument", "OutputDocument", "DocumentInfo", "describe", "finish"]
