"""Awaitable variants of the engines for use from an event loop.

Blocking steps run in worker threads so the loop is never blocked for a whole
operation. Compression yields at load, at every page render and encode, and
at serialization. Cancelling the awaiting task abandons the operation: no
partial output is returned, and the rasterizer is closed in a worker once the
step that was running at cancellation time has returned. The loop itself
never waits on the renderer.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Optional, Sequence

from .compress.compressor import (
    CompressionJob,
    ImageEncoder,
    ProgressCallback,
    RasterizerFactory,
    resolve_options,
)
from .config import CompressionOptions
from .core.backends import PDFBackend
from .core.document import OutputDocument, SourceDocument
from .merge.merger import MergeInput, merge_documents
from .split.ranges import PageRange, RangeInput
from .split.splitter import SplitPart, split_document

LOGGER = logging.getLogger("pdfcraft.aio")


async def load_async(data: bytes, name: str | None = None, *, backend: Optional[PDFBackend] = None) -> SourceDocument:
    return await asyncio.to_thread(functools.partial(SourceDocument.from_bytes, data, name, backend=backend))


async def split_async(
    source: SourceDocument,
    ranges: RangeInput | Sequence[PageRange],
    **kwargs: object,
) -> list[SplitPart]:
    return await asyncio.to_thread(functools.partial(split_document, source, ranges, **kwargs))


async def merge_async(sources: Sequence[MergeInput], **kwargs: object) -> OutputDocument:
    return await asyncio.to_thread(functools.partial(merge_documents, list(sources), **kwargs))


async def compress_async(
    source: SourceDocument,
    quality: float | None = None,
    scale: float | None = None,
    *,
    options: CompressionOptions | None = None,
    backend: Optional[PDFBackend] = None,
    rasterizer_factory: Optional[RasterizerFactory] = None,
    encoder: Optional[ImageEncoder] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> OutputDocument:
    """Awaitable :func:`~pdfcraft.compress.compress_document`."""

    resolved = resolve_options(quality, scale, options)
    job = CompressionJob(
        source,
        resolved,
        backend=backend,
        rasterizer_factory=rasterizer_factory,
        encoder=encoder,
    )
    loop = asyncio.get_running_loop()
    cancelled = False
    try:
        total = await asyncio.to_thread(job.open)
        for index in range(total):
            frame = await asyncio.to_thread(job.render, index)
            image = await asyncio.to_thread(job.encode, index, frame)
            job.add_page(index, image)
            if progress_callback:
                progress_callback(index + 1, total)
        return await asyncio.to_thread(job.finish)
    except asyncio.CancelledError:
        cancelled = True
        LOGGER.info("Compression of %s cancelled", source.name or "<bytes>")
        job.abandon()
        raise
    finally:
        if cancelled:
            # A worker may still be inside pdfium; close once it lets go.
            loop.run_in_executor(None, job.close).add_done_callback(_log_close_failure)
        else:
            await asyncio.to_thread(job.close)


def _log_close_failure(future: asyncio.Future[None]) -> None:
    if not future.cancelled() and future.exception() is not None:
        LOGGER.warning("Closing an abandoned compression failed: %s", future.exception())


__all__ = ["load_async", "split_async", "merge_async", "compress_async"]
