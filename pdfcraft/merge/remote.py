"""Merge by delegating to an HTTP merge service."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import httpx

from ..config import DEFAULT_REMOTE_TIMEOUT, remote_merge_url
from ..core.backends import PDFBackend, default_backend
from ..core.document import OutputDocument, SourceDocument
from ..exceptions import DocumentUnreadableError, InsufficientInputsError, RemoteMergeError
from .merger import MergeInput

LOGGER = logging.getLogger("pdfcraft.merge")


class RemoteMerger:
    """Satisfies the :func:`~pdfcraft.merge.merge_documents` contract remotely.

    The sources are posted as the multipart field ``files`` and the response
    body must be the merged PDF.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_REMOTE_TIMEOUT,
        backend: Optional[PDFBackend] = None,
    ) -> None:
        self.url = url or remote_merge_url()
        self.timeout = timeout
        self._client = client
        self._backend = backend or default_backend()

    def _files(self, sources: Sequence[MergeInput]) -> list[tuple[str, tuple[str, bytes, str]]]:
        files = []
        for index, item in enumerate(sources, start=1):
            if isinstance(item, SourceDocument):
                name, data = item.name or f"document_{index}.pdf", item.data
            else:
                name, data = f"document_{index}.pdf", bytes(item)
            files.append(("files", (name, data, "application/pdf")))
        return files

    def _post(self, files: list) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.url, files=files, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.url, files=files)

    def merge(self, sources: Sequence[MergeInput]) -> OutputDocument:
        items = list(sources)
        if len(items) < 2:
            raise InsufficientInputsError(len(items))

        LOGGER.debug("Posting %d input(s) to %s", len(items), self.url)
        try:
            response = self._post(self._files(items))
        except httpx.HTTPError as exc:
            LOGGER.error("Remote merge request to %s failed: %s", self.url, exc)
            raise RemoteMergeError(f"Could not reach merge service at {self.url}: {exc}") from exc

        if response.status_code != 200:
            detail = response.text.strip()
            raise RemoteMergeError(
                f"Merge service returned HTTP {response.status_code}: {detail or 'no details'}"
            )

        try:
            document = self._backend.load(response.content)
        except DocumentUnreadableError as exc:
            raise RemoteMergeError(f"Merge service returned an invalid PDF: {exc.message}") from exc

        LOGGER.info("Remote merge of %d PDFs returned %d page(s)", len(items), document.page_count)
        return OutputDocument(data=response.content, page_count=document.page_count)

    __call__ = merge


__all__ = ["RemoteMerger"]
