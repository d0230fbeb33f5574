"""
pdfcraft - split, merge and compress PDF documents in memory.

Every engine takes PDF bytes (wrapped in :class:`SourceDocument`) and returns
new PDF bytes (:class:`OutputDocument`). Nothing is written to disk or sent
over the network unless the caller asks for it.

Quick Start:
    >>> from pdfcraft import SourceDocument, split_document
    >>> source = SourceDocument.from_path('input.pdf')
    >>> for part in split_document(source, '1-3, 5; 7-9'):
    ...     part.document.save(part.filename(source.name))

Engines:
    - split_document / iter_split: one output per page range
    - merge_documents / RemoteMerger: concatenate documents in order
    - compress_document: rasterize pages to JPEG and rebuild

Async variants live in :mod:`pdfcraft.aio`; the command line interface is the
``pdfcraft`` command.
"""

from __future__ import annotations

from .compress import (
    RASTERIZATION_NOTICE,
    CompressionJob,
    CompressionReport,
    compress_document,
    compression_report,
)
from .config import CompressionLevel, CompressionOptions
from .core import DocumentInfo, OutputDocument, PDFBackend, PypdfBackend, SourceDocument, describe
from .exceptions import (
    DocumentUnreadableError,
    EncryptedDocumentError,
    InsufficientInputsError,
    InvalidCompressionSettingsError,
    InvalidRangeSyntaxError,
    NoRangesProvidedError,
    PageRenderFailedError,
    PDFCraftError,
    RangeAssemblyError,
    RangeError,
    RangeOutOfBoundsError,
    RemoteMergeError,
    SourceUnreadableError,
)
from .merge import RemoteMerger, dedupe_sources, merge_documents
from .split import PageRange, SplitPart, iter_split, normalize_ranges, parse_ranges, split_document

__version__ = "1.0.0"

__all__ = [
    # Documents
    "SourceDocument",
    "OutputDocument",
    "DocumentInfo",
    "describe",
    "PDFBackend",
    "PypdfBackend",
    # Ranges and split
    "PageRange",
    "parse_ranges",
    "normalize_ranges",
    "SplitPart",
    "iter_split",
    "split_document",
    # Merge
    "merge_documents",
    "dedupe_sources",
    "RemoteMerger",
    # Compress
    "CompressionLevel",
    "CompressionOptions",
    "CompressionJob",
    "CompressionReport",
    "compress_document",
    "compression_report",
    "RASTERIZATION_NOTICE",
    # Exceptions
    "PDFCraftError",
    "RangeError",
    "InvalidRangeSyntaxError",
    "NoRangesProvidedError",
    "RangeOutOfBoundsError",
    "RangeAssemblyError",
    "DocumentUnreadableError",
    "EncryptedDocumentError",
    "InsufficientInputsError",
    "SourceUnreadableError",
    "RemoteMergeError",
    "PageRenderFailedError",
    "InvalidCompressionSettingsError",
    "__version__",
]
