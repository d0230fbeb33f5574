"""Page range parsing and splitting for :mod:`pdfcraft`."""

from __future__ import annotations

from .ranges import PageRange, normalize_ranges, parse_ranges, parse_token, validate_ranges
from .splitter import SplitPart, build_range, iter_split, split_document

__all__ = [
    "PageRange",
    "parse_ranges",
    "parse_token",
    "normalize_ranges",
    "validate_ranges",
    "SplitPart",
    "build_range",
    "iter_split",
    "split_document",
]
