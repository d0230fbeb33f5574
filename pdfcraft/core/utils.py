"""Utilities shared by pdfcraft engines and front-ends."""

from __future__ import annotations

import logging
from pathlib import Path


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def resolve_path(path: str | Path | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    return Path(path).expanduser().resolve()


def ensure_parent_dir(path: Path) -> Path:
    """Create the parent directory for *path* if it does not exist."""

    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def base_name(name: str | None, default: str = "document") -> str:
    """Return *name* without directories or a trailing ``.pdf`` suffix."""

    if not name:
        return default
    stem = Path(name).name
    if stem.lower().endswith(".pdf"):
        stem = stem[:-4]
    return stem or default


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500 KB")
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"


__all__ = ["get_logger", "resolve_path", "ensure_parent_dir", "base_name", "format_file_size"]
