"""Split a source document into one output per page range."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence

from ..core.backends import BackendDocument, PDFBackend, default_backend
from ..core.document import OutputDocument, SourceDocument, finish
from ..core.utils import base_name
from ..exceptions import PDFCraftError, RangeAssemblyError
from .ranges import PageRange, RangeInput, parse_ranges, validate_ranges

LOGGER = logging.getLogger("pdfcraft.split")

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class SplitPart:
    """One split output tagged with the range it came from."""

    page_range: PageRange
    document: OutputDocument

    def filename(self, base: str | None) -> str:
        return self.page_range.filename(base_name(base))


def _title_suffix(page_range: PageRange) -> str:
    if page_range.start == page_range.end:
        return f" - Page {page_range.start}"
    return f" - Pages {page_range.start}-{page_range.end}"


def _split_metadata(metadata: dict[str, str], page_range: PageRange) -> dict[str, str]:
    copied = dict(metadata)
    title = copied.get("/Title")
    if title:
        copied["/Title"] = f"{title}{_title_suffix(page_range)}"
    return copied


def build_range(
    document: BackendDocument,
    page_range: PageRange,
    *,
    backend: PDFBackend,
    metadata: dict[str, str] | None = None,
) -> OutputDocument:
    """Copy the pages of *page_range* from *document* into a new output."""

    writer = backend.new_writer()
    backend.copy_pages(writer, document, page_range.page_indexes())
    if metadata:
        backend.set_metadata(writer, _split_metadata(metadata, page_range))
    return finish(backend, writer)


def _coerce_ranges(ranges: RangeInput | Sequence[PageRange]) -> List[PageRange]:
    if isinstance(ranges, (list, tuple)) and ranges and all(isinstance(r, PageRange) for r in ranges):
        return list(ranges)
    return parse_ranges(ranges)


def iter_split(
    source: SourceDocument,
    ranges: RangeInput | Sequence[PageRange],
    *,
    backend: Optional[PDFBackend] = None,
    metadata: bool = True,
    progress_callback: Optional[ProgressCallback] = None,
) -> Iterator[SplitPart]:
    """Yield one :class:`SplitPart` per range, in input order.

    Bounds typed high to low are swapped, then every range is validated
    against ``source.page_count`` before the first part is produced.
    A failure while building range *i* raises
    :class:`RangeAssemblyError`; parts yielded before it remain valid.
    """

    backend = backend or default_backend()
    page_ranges = [page_range.ordered() for page_range in _coerce_ranges(ranges)]
    validate_ranges(page_ranges, source.page_count)

    document = source.open(backend)
    source_metadata = document.metadata() if metadata else None

    total = len(page_ranges)
    for index, page_range in enumerate(page_ranges):
        LOGGER.debug("Building pages %s of %s", page_range, source.name or "<bytes>")
        try:
            output = build_range(document, page_range, backend=backend, metadata=source_metadata)
        except PDFCraftError:
            raise
        except Exception as exc:
            LOGGER.error("Failed to build pages %s: %s", page_range, exc)
            raise RangeAssemblyError(page_range, index, str(exc)) from exc

        yield SplitPart(page_range=page_range, document=output)
        if progress_callback:
            progress_callback(index + 1, total)

    LOGGER.info("Split %s into %d document(s)", source.name or "<bytes>", total)


def split_document(
    source: SourceDocument,
    ranges: RangeInput | Sequence[PageRange],
    *,
    backend: Optional[PDFBackend] = None,
    metadata: bool = True,
    progress_callback: Optional[ProgressCallback] = None,
) -> List[SplitPart]:
    """Split *source* into one document per range and return them all."""

    return list(
        iter_split(
            source,
            ranges,
            backend=backend,
            metadata=metadata,
            progress_callback=progress_callback,
        )
    )


__all__ = ["SplitPart", "build_range", "iter_split", "split_document"]
