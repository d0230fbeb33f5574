"""Merge functionality for the :mod:`pdfcraft.merge` package."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Union

from ..core.backends import BackendDocument, PDFBackend, default_backend
from ..core.document import OutputDocument, SourceDocument, finish
from ..core.utils import base_name
from ..exceptions import DocumentUnreadableError, InsufficientInputsError, SourceUnreadableError

LOGGER = logging.getLogger("pdfcraft.merge")

MergeInput = Union[SourceDocument, bytes]
ProgressCallback = Callable[[int, int], None]

_METADATA_KEY_MAP = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
}


def _open_source(item: MergeInput, index: int, backend: PDFBackend) -> tuple[BackendDocument, str | None]:
    name = item.name if isinstance(item, SourceDocument) else None
    data = item.data if isinstance(item, SourceDocument) else bytes(item)
    try:
        return backend.load(data), name
    except DocumentUnreadableError as exc:
        LOGGER.error("Failed to read merge input %d (%s): %s", index + 1, name, exc)
        raise SourceUnreadableError(index, name, exc.message) from exc


def _document_info(document_info: Mapping[str, object]) -> dict[str, str]:
    metadata: dict[str, str] = {}
    for key, value in document_info.items():
        if value is None:
            continue
        string_value = str(value).strip()
        if not string_value:
            continue
        pdf_key = _METADATA_KEY_MAP.get(str(key).lower())
        if pdf_key is None:
            pdf_key = key if str(key).startswith("/") else f"/{key}"
        metadata[str(pdf_key)] = string_value
    return metadata


def merge_documents(
    sources: Sequence[MergeInput],
    *,
    backend: Optional[PDFBackend] = None,
    metadata: bool = True,
    document_info: Mapping[str, object] | None = None,
    bookmarks: Sequence[str] | bool | None = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> OutputDocument:
    """Concatenate all pages of *sources*, in list order, into one document.

    Args:
        sources: At least two documents, as :class:`SourceDocument` objects
            or raw PDF bytes. They are merged exactly as given; duplicates
            are not removed.
        metadata: When ``True`` the document info of the first source is
            copied into the result.
        document_info: Explicit document info that replaces the copied one.
        bookmarks: ``True`` to add one outline entry per source named after
            it, or a sequence of titles matching the sources.

    Raises:
        InsufficientInputsError: If fewer than two sources are given.
        SourceUnreadableError: If any source cannot be decoded. No partial
            document is produced.
    """

    items = list(sources)
    if len(items) < 2:
        raise InsufficientInputsError(len(items))

    backend = backend or default_backend()
    # Decode everything first so an unreadable input fails before assembly.
    opened = [_open_source(item, index, backend) for index, item in enumerate(items)]

    writer = backend.new_writer()
    bookmark_targets: list[tuple[str, int]] = []
    first_metadata: dict[str, str] | None = None

    for index, (document, name) in enumerate(opened):
        LOGGER.debug("Appending %d page(s) from input %d", document.page_count, index + 1)
        start_page_index = backend.copy_pages(writer, document, range(document.page_count))

        if bookmarks:
            title = None
            if not isinstance(bookmarks, bool) and index < len(bookmarks):
                title = bookmarks[index]
            if not title:
                title = base_name(name, default="") or f"Document {index + 1}"
            bookmark_targets.append((title, start_page_index))

        if metadata and first_metadata is None:
            first_metadata = document.metadata()

        if progress_callback:
            progress_callback(index + 1, len(opened))

    metadata_to_apply: dict[str, str] | None = None
    if document_info:
        metadata_to_apply = _document_info(document_info)
    elif metadata and first_metadata:
        metadata_to_apply = first_metadata

    if metadata_to_apply:
        LOGGER.debug("Setting metadata on merged PDF: %s", metadata_to_apply)
        backend.set_metadata(writer, metadata_to_apply)

    for title, page_index in bookmark_targets:
        backend.add_bookmark(writer, title, page_index)

    output = finish(backend, writer)
    LOGGER.info("Merged %d PDFs into %d page(s)", len(opened), output.page_count)
    return output


def dedupe_sources(sources: Iterable[SourceDocument]) -> List[SourceDocument]:
    """Drop sources whose ``(name, size)`` repeats an earlier one, keeping order.

    This is a caller-side helper; :func:`merge_documents` never calls it.
    """

    seen: set[tuple[str | None, int]] = set()
    unique: List[SourceDocument] = []
    for source in sources:
        if source.identity in seen:
            LOGGER.warning("Skipping duplicate input %s (%d bytes)", source.name, source.size)
            continue
        seen.add(source.identity)
        unique.append(source)
    return unique


__all__ = ["MergeInput", "merge_documents", "dedupe_sources"]
