"""Rasterizing compression for :mod:`pdfcraft`."""

from __future__ import annotations

from .compressor import (
    RASTERIZATION_NOTICE,
    CompressionJob,
    CompressionReport,
    compress_document,
    compression_report,
)
from .optimizers import repack_object_streams
from .raster import JpegEncoder, PdfiumRasterizer, RasterFrame

__all__ = [
    "RASTERIZATION_NOTICE",
    "CompressionJob",
    "CompressionReport",
    "compress_document",
    "compression_report",
    "repack_object_streams",
    "JpegEncoder",
    "PdfiumRasterizer",
    "RasterFrame",
]
