"""Defaults and per-call settings for pdfcraft operations."""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import Literal

from .exceptions import InvalidCompressionSettingsError

_LOGGER = logging.getLogger("pdfcraft.compress")

DEFAULT_QUALITY = 0.6
DEFAULT_SCALE = 1.2
RECOMMENDED_SCALE_RANGE = (0.8, 2.0)

DEFAULT_REMOTE_MERGE_URL = "http://localhost:5000/merge"
DEFAULT_REMOTE_TIMEOUT = 120.0
MERGE_URL_ENV = "PDFCRAFT_MERGE_URL"

CompressionLevelName = Literal["low", "medium", "high"]


@dataclasses.dataclass(frozen=True, slots=True)
class CompressionLevel:
    """Named quality/scale preset."""

    name: CompressionLevelName
    quality: float
    scale: float


_LEVELS: dict[str, CompressionLevel] = {
    "low": CompressionLevel("low", quality=0.85, scale=1.6),
    "medium": CompressionLevel("medium", quality=DEFAULT_QUALITY, scale=DEFAULT_SCALE),
    "high": CompressionLevel("high", quality=0.4, scale=1.0),
}


def get_level(name: str) -> CompressionLevel:
    try:
        return _LEVELS[name.lower()]
    except KeyError as exc:
        raise InvalidCompressionSettingsError(
            f"Unknown compression level: {name!r}. Expected one of {', '.join(_LEVELS)}."
        ) from exc


@dataclasses.dataclass(frozen=True, slots=True)
class CompressionOptions:
    """Settings for one compression run.

    ``quality`` runs from just above 0 (smallest, blurriest) to 1 (largest,
    sharpest). ``scale`` multiplies the page size in points to get the render
    size in pixels.
    """

    quality: float = DEFAULT_QUALITY
    scale: float = DEFAULT_SCALE
    preserve_metadata: bool = True
    optimize: bool = True

    def __post_init__(self) -> None:
        if not 0.0 < self.quality <= 1.0:
            raise InvalidCompressionSettingsError(
                f"Quality must be in (0, 1], got {self.quality}."
            )
        if not self.scale > 0.0:
            raise InvalidCompressionSettingsError(f"Scale must be > 0, got {self.scale}.")
        low, high = RECOMMENDED_SCALE_RANGE
        if not low <= self.scale <= high:
            _LOGGER.warning(
                "Scale %.2f is outside the recommended range %.1f-%.1f", self.scale, low, high
            )

    @classmethod
    def from_level(cls, name: str, **overrides: object) -> "CompressionOptions":
        level = get_level(name)
        return cls(quality=level.quality, scale=level.scale, **overrides)  # type: ignore[arg-type]

    @property
    def jpeg_quality(self) -> int:
        """Pillow's 1-100 JPEG quality for :attr:`quality`."""

        return max(1, min(100, round(self.quality * 100)))


def remote_merge_url() -> str:
    return os.environ.get(MERGE_URL_ENV) or DEFAULT_REMOTE_MERGE_URL


__all__ = [
    "DEFAULT_QUALITY",
    "DEFAULT_SCALE",
    "RECOMMENDED_SCALE_RANGE",
    "DEFAULT_REMOTE_MERGE_URL",
    "DEFAULT_REMOTE_TIMEOUT",
    "MERGE_URL_ENV",
    "CompressionLevel",
    "CompressionOptions",
    "get_level",
    "remote_merge_url",
]
