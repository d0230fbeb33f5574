"""Merge utilities for the :mod:`pdfcraft` toolkit."""

from __future__ import annotations

from .merger import MergeInput, dedupe_sources, merge_documents
from .remote import RemoteMerger

__all__ = [
    "MergeInput",
    "merge_documents",
    "dedupe_sources",
    "RemoteMerger",
]
