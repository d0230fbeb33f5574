from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import dataclass

import pytest
from PIL import Image

from pdfcraft import DocumentUnreadableError, PageRange, SourceDocument
from pdfcraft.aio import compress_async, load_async, merge_async, split_async
from pdfcraft.compress import PdfiumRasterizer, RasterFrame
from pdfcraft.compress.raster import _PDFIUM_LOCK

from conftest import build_pdf


@pytest.fixture(autouse=True)
def _no_qpdf(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("pdfcraft.compress.optimizers._qpdf_available", lambda: None)


class BlockingRasterizer:
    """Blocks inside the first render until released."""

    def __init__(self, data: bytes) -> None:
        self.started = threading.Event()
        self.release = threading.Event()
        self.rendered: list[int] = []
        self.closed = False

    def __len__(self) -> int:
        return 3

    def render(self, index: int, scale: float) -> RasterFrame:
        self.rendered.append(index)
        self.started.set()
        self.release.wait(timeout=5)
        return RasterFrame(image=Image.new("RGB", (10, 10)), width=10, height=10)

    def close(self) -> None:
        self.closed = True


class SlowRasterizer:
    def __init__(self, data: bytes) -> None:
        pass

    def __len__(self) -> int:
        return 3

    def render(self, index: int, scale: float) -> RasterFrame:
        time.sleep(0.05)
        return RasterFrame(image=Image.new("RGB", (10, 10)), width=10, height=10)

    def close(self) -> None:
        pass


def test_load_async() -> None:
    source = asyncio.run(load_async(build_pdf(3), "three.pdf"))
    assert source.page_count == 3
    assert source.name == "three.pdf"


def test_load_async_propagates_errors() -> None:
    with pytest.raises(DocumentUnreadableError):
        asyncio.run(load_async(b"garbage"))


def test_split_and_merge_async(sample_source: SourceDocument) -> None:
    async def run() -> int:
        parts = await split_async(sample_source, "1-2, 3-5")
        merged = await merge_async([part.document.to_source() for part in parts])
        return merged.page_count

    assert asyncio.run(run()) == 5


def test_compress_async(sample_source: SourceDocument) -> None:
    progress: list[int] = []
    output = asyncio.run(
        compress_async(sample_source, 0.5, 1.0, progress_callback=lambda current, total: progress.append(current))
    )

    assert output.page_count == 5
    assert progress == [1, 2, 3, 4, 5]


def test_compress_async_concurrent_jobs() -> None:
    first = SourceDocument.from_bytes(build_pdf(2))
    second = SourceDocument.from_bytes(build_pdf(3, offset=20))

    async def run() -> list[int]:
        results = await asyncio.gather(
            compress_async(first, scale=1.0),
            compress_async(second, scale=1.0),
        )
        return [result.page_count for result in results]

    assert asyncio.run(run()) == [2, 3]


def test_compress_async_does_not_block_loop(sample_source: SourceDocument) -> None:
    ticks = 0

    async def heartbeat(stop: asyncio.Event) -> None:
        nonlocal ticks
        while not stop.is_set():
            ticks += 1
            await asyncio.sleep(0.01)

    async def run() -> None:
        stop = asyncio.Event()
        beat = asyncio.create_task(heartbeat(stop))
        await compress_async(sample_source, rasterizer_factory=SlowRasterizer)
        stop.set()
        await beat

    asyncio.run(run())
    assert ticks > 3


def test_compress_async_cancellation(sample_source: SourceDocument) -> None:
    rasterizers: list[BlockingRasterizer] = []

    def factory(data: bytes) -> BlockingRasterizer:
        rasterizer = BlockingRasterizer(data)
        rasterizers.append(rasterizer)
        return rasterizer

    async def run() -> None:
        task = asyncio.create_task(compress_async(sample_source, rasterizer_factory=factory))
        while not rasterizers:
            await asyncio.sleep(0.01)
        await asyncio.to_thread(rasterizers[0].started.wait, 5)

        task.cancel()
        rasterizers[0].release.set()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(run())

    assert rasterizers[0].closed
    assert rasterizers[0].rendered == [0]


def test_split_async_accepts_page_ranges(sample_source: SourceDocument) -> None:
    parts = asyncio.run(split_async(sample_source, [PageRange(2, 2)]))
    assert parts[0].document.page_count == 1


@dataclass
class TrackedFrame(RasterFrame):
    closed: bool = False

    def close(self) -> None:
        self.closed = True
        super().close()


class LockHoldingRasterizer(PdfiumRasterizer):
    """A real pdfium rasterizer whose renders keep the renderer busy."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.started = threading.Event()
        self.closed = threading.Event()
        self.frames: list[TrackedFrame] = []

    def render(self, index: int, scale: float) -> RasterFrame:
        with _PDFIUM_LOCK:
            self.started.set()
            time.sleep(0.5)
            frame = super().render(index, scale)
        tracked = TrackedFrame(image=frame.image, width=frame.width, height=frame.height)
        self.frames.append(tracked)
        return tracked

    def close(self) -> None:
        super().close()
        self.closed.set()


def test_compress_async_cancellation_keeps_loop_responsive(sample_source: SourceDocument) -> None:
    rasterizers: list[LockHoldingRasterizer] = []
    gaps: list[float] = []

    def factory(data: bytes) -> LockHoldingRasterizer:
        rasterizer = LockHoldingRasterizer(data)
        rasterizers.append(rasterizer)
        return rasterizer

    async def heartbeat(stop: asyncio.Event) -> None:
        last = time.monotonic()
        while not stop.is_set():
            await asyncio.sleep(0.01)
            now = time.monotonic()
            gaps.append(now - last)
            last = now

    async def run() -> None:
        stop = asyncio.Event()
        task = asyncio.create_task(compress_async(sample_source, scale=1.0, rasterizer_factory=factory))
        while not rasterizers:
            await asyncio.sleep(0.01)
        await asyncio.to_thread(rasterizers[0].started.wait, 5)

        beat = asyncio.create_task(heartbeat(stop))
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.to_thread(rasterizers[0].closed.wait, 5)
        stop.set()
        await beat

    asyncio.run(run())

    rasterizer = rasterizers[0]
    assert rasterizer.closed.is_set()
    assert gaps and max(gaps) < 0.3

    deadline = time.monotonic() + 5
    while not all(frame.closed for frame in rasterizer.frames) and time.monotonic() < deadline:
        time.sleep(0.01)
    assert len(rasterizer.frames) == 1
    assert rasterizer.frames[0].closed
