"""
Custom exceptions for pdfcraft.

Every failure surfaced by the split, merge and compress engines derives from
:class:`PDFCraftError` so callers can tell a syntax mistake in a range from a
structural problem with a document.
"""

from __future__ import annotations

from typing import Any


class PDFCraftError(Exception):
    """Base exception for all pdfcraft errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown pdfcraft error occurred."


# ----------------------------------------------------------------------
# Ranges
# ----------------------------------------------------------------------
class RangeError(PDFCraftError):
    """Base class for page range problems."""

    @property
    def default_message(self) -> str:
        return "Invalid page range specification."


class InvalidRangeSyntaxError(RangeError):
    """Raised when a range token does not match ``N`` or ``A-B``."""

    def __init__(self, token: Any) -> None:
        self.token = token
        super().__init__(
            f"Invalid page range '{token}'. Expected a page number like '5' or a range like '1-3'."
        )


class NoRangesProvidedError(RangeError):
    """Raised when no range tokens remain after trimming blanks."""

    @property
    def default_message(self) -> str:
        return "No page ranges provided."


class RangeOutOfBoundsError(RangeError):
    """Raised when a range falls outside ``1..page_count``."""

    def __init__(self, page_range: Any, page_count: int) -> None:
        self.page_range = page_range
        self.page_count = page_count
        super().__init__(
            f"Page range {page_range} is out of bounds for a document with {page_count} page(s)."
        )


class RangeAssemblyError(PDFCraftError):
    """Raised when building the output for one range fails."""

    def __init__(self, page_range: Any, index: int, reason: str = "") -> None:
        self.page_range = page_range
        self.index = index
        message = f"Failed to build output for pages {page_range}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# ----------------------------------------------------------------------
# Documents
# ----------------------------------------------------------------------
class DocumentUnreadableError(PDFCraftError):
    """Raised when a PDF cannot be decoded."""

    def __init__(self, message: str = "", *, reason: str = "") -> None:
        self.reason = reason
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "Could not read the PDF. It may be corrupted or password-protected."


class EncryptedDocumentError(DocumentUnreadableError):
    """Raised for password-protected PDFs, which are not supported."""

    @property
    def default_message(self) -> str:
        return "PDF is encrypted or password-protected and cannot be processed."


# ----------------------------------------------------------------------
# Merge
# ----------------------------------------------------------------------
class InsufficientInputsError(PDFCraftError):
    """Raised when fewer than two documents are given to merge."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Merging requires at least two PDFs, got {count}.")


class SourceUnreadableError(PDFCraftError):
    """Raised when one of the merge inputs cannot be decoded."""

    def __init__(self, index: int, name: str | None = None, reason: str = "") -> None:
        self.index = index
        self.name = name
        label = f"'{name}'" if name else f"#{index + 1}"
        message = f"Input {label} (position {index + 1}) could not be read"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RemoteMergeError(PDFCraftError):
    """Raised when a remote merge service fails or is unreachable."""

    @property
    def default_message(self) -> str:
        return "Remote merge service failed."


# ----------------------------------------------------------------------
# Compress
# ----------------------------------------------------------------------
class PageRenderFailedError(PDFCraftError):
    """Raised when rendering or encoding a single page fails."""

    def __init__(self, page_index: int, reason: str = "") -> None:
        self.page_index = page_index
        message = f"Failed to rasterize page {page_index + 1}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidCompressionSettingsError(PDFCraftError, ValueError):
    """Raised when quality or scale fall outside their accepted ranges."""

    @property
    def default_message(self) -> str:
        return "Invalid compression settings."


__all__ = [
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
]
