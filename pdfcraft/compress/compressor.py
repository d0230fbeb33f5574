"""Lossy compression by rasterizing every page and rebuilding the document.

The output keeps page order and page count, but every page becomes a single
JPEG image: text is no longer selectable and vector graphics are flattened.
This is irreversible and callers should say so to users.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Callable, Optional

from ..config import DEFAULT_QUALITY, DEFAULT_SCALE, CompressionOptions
from ..core.backends import ImagePage, PDFBackend, default_backend
from ..core.document import OutputDocument, SourceDocument
from ..exceptions import PageRenderFailedError
from .optimizers import repack_object_streams
from .raster import ImageEncoder, JpegEncoder, PdfiumRasterizer, RasterFrame, Rasterizer

_LOGGER = logging.getLogger("pdfcraft.compress")

RasterizerFactory = Callable[[bytes], Rasterizer]
ProgressCallback = Callable[[int, int], None]

RASTERIZATION_NOTICE = (
    "Compression rasterizes every page: text will no longer be selectable "
    "or searchable, and vector graphics become images."
)


@dataclasses.dataclass(slots=True)
class CompressionReport:
    """Size comparison between a source and its compressed output."""

    original_size: int
    compressed_size: int
    page_count: int

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size


def compression_report(source: SourceDocument, output: OutputDocument) -> CompressionReport:
    return CompressionReport(
        original_size=source.size,
        compressed_size=output.size,
        page_count=output.page_count,
    )


class CompressionJob:
    """One compression run split into its suspendable steps.

    :func:`compress_document` drives the steps in a plain loop;
    :func:`pdfcraft.aio.compress_async` awaits each one in a worker thread.
    Only one :class:`RasterFrame` is alive at a time.
    """

    def __init__(
        self,
        source: SourceDocument,
        options: CompressionOptions,
        *,
        backend: Optional[PDFBackend] = None,
        rasterizer_factory: Optional[RasterizerFactory] = None,
        encoder: Optional[ImageEncoder] = None,
    ) -> None:
        self.source = source
        self.options = options
        self._backend = backend or default_backend()
        self._rasterizer_factory = rasterizer_factory or PdfiumRasterizer
        self._encoder = encoder or JpegEncoder(options.jpeg_quality)
        self._rasterizer: Rasterizer | None = None
        self._writer: object | None = None
        self._metadata: dict[str, str] = {}
        # Guards the fields below, which worker threads and abandon() share.
        self._state = threading.Lock()
        self._abandoned = False
        self._pending_frame: RasterFrame | None = None

    def open(self) -> int:
        """Load the source for rendering and return its page count."""

        if self.options.preserve_metadata:
            self._metadata = self.source.open(self._backend).metadata()
        rasterizer = self._rasterizer_factory(self.source.data)
        with self._state:
            if self._abandoned:
                rasterizer.close()
                raise RuntimeError("CompressionJob was abandoned")
            self._rasterizer = rasterizer
            self._writer = self._backend.new_writer()
        page_count = len(rasterizer)
        _LOGGER.debug(
            "Compressing %s: %d page(s), quality=%.2f, scale=%.2f",
            self.source.name or "<bytes>",
            page_count,
            self.options.quality,
            self.options.scale,
        )
        return page_count

    def render(self, index: int) -> RasterFrame:
        rasterizer = self._rasterizer
        if rasterizer is None:
            raise RuntimeError("CompressionJob.open() must be called first")
        try:
            frame = rasterizer.render(index, self.options.scale)
        except Exception as exc:
            _LOGGER.error("Rendering page %d failed: %s", index + 1, exc)
            raise PageRenderFailedError(index, str(exc)) from exc

        with self._state:
            if self._abandoned:
                # Nobody is waiting for this frame any more.
                frame.close()
                raise RuntimeError("CompressionJob was abandoned")
            self._pending_frame = frame
        return frame

    def encode(self, index: int, frame: RasterFrame) -> ImagePage:
        """Encode *frame* and release its pixels."""

        with self._state:
            if self._pending_frame is frame:
                self._pending_frame = None
        try:
            return self._encoder.encode(frame)
        except Exception as exc:
            _LOGGER.error("Encoding page %d failed: %s", index + 1, exc)
            raise PageRenderFailedError(index, str(exc)) from exc
        finally:
            frame.close()

    def add_page(self, index: int, image: ImagePage) -> None:
        try:
            self._backend.add_image_page(self._writer, image)
        except Exception as exc:
            raise PageRenderFailedError(index, str(exc)) from exc

    def finish(self) -> OutputDocument:
        """Serialize the rebuilt document."""

        writer = self._writer
        if writer is None:
            raise RuntimeError("CompressionJob.open() must be called first")
        if self._metadata:
            self._backend.set_metadata(writer, self._metadata)
        data = self._backend.write(writer)
        if self.options.optimize:
            data = repack_object_streams(data)
        return OutputDocument(data=data, page_count=self._backend.page_count(writer))

    def abandon(self) -> None:
        """Give up on the run from another thread.

        The rendered frame awaiting encoding is released now. A render or
        open still running in a worker releases its result as it finishes.
        Call :meth:`close` afterwards to release the rasterizer.
        """

        with self._state:
            self._abandoned = True
            frame, self._pending_frame = self._pending_frame, None
        if frame is not None:
            frame.close()

    def close(self) -> None:
        with self._state:
            rasterizer, self._rasterizer = self._rasterizer, None
            self._writer = None
        if rasterizer is not None:
            rasterizer.close()

    def __enter__(self) -> "CompressionJob":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def resolve_options(
    quality: float | None,
    scale: float | None,
    options: CompressionOptions | None,
) -> CompressionOptions:
    if options is not None:
        if quality is None and scale is None:
            return options
        return dataclasses.replace(
            options,
            quality=options.quality if quality is None else quality,
            scale=options.scale if scale is None else scale,
        )
    return CompressionOptions(
        quality=DEFAULT_QUALITY if quality is None else quality,
        scale=DEFAULT_SCALE if scale is None else scale,
    )


def compress_document(
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
    """Rasterize every page of *source* and rebuild it from JPEG images.

    Args:
        source: Document to compress.
        quality: JPEG fidelity in ``(0, 1]``; defaults to ``0.6``.
        scale: Render resolution multiplier, ``> 0``; defaults to ``1.2``.
            Output pages measure ``scale`` times the source page size.
        options: Full :class:`CompressionOptions`; ``quality`` and ``scale``
            override its fields when given.

    Raises:
        InvalidCompressionSettingsError: If ``quality`` or ``scale`` are out
            of range.
        PageRenderFailedError: If any single page cannot be rendered or
            encoded. Nothing is returned in that case.
    """

    resolved = resolve_options(quality, scale, options)
    with CompressionJob(
        source,
        resolved,
        backend=backend,
        rasterizer_factory=rasterizer_factory,
        encoder=encoder,
    ) as job:
        total = job.open()
        for index in range(total):
            frame = job.render(index)
            image = job.encode(index, frame)
            job.add_page(index, image)
            if progress_callback:
                progress_callback(index + 1, total)
        output = job.finish()

    _LOGGER.info(
        "Compressed %s: %d -> %d bytes", source.name or "<bytes>", source.size, output.size
    )
    return output


__all__ = [
    "RASTERIZATION_NOTICE",
    "CompressionJob",
    "CompressionReport",
    "compress_document",
    "compression_report",
    "resolve_options",
]
