"""Utility functions for LyricSync."""

import os
from .exceptions import FileSystemError

def ensure_dir_exists(dir_path: str) -> None:
    """
    Creates dir_path (and its parents) unless it is already a directory.

    Raises:
        ValueError: If dir_path is empty.
        FileSystemError: If dir_path names a file or cannot be created.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    if os.path.exists(dir_path) and not os.path.isdir(dir_path):
        raise FileSystemError(f"{dir_path} exists and is not a directory.")
    try:
        os.makedirs(dir_path, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"Cannot create directory {dir_path}: {e}") from e

def format_offset(offset_ms: int) -> str:
    """
    Formats a millisecond offset the way LRC files write it: mm:ss.cc

    Args:
        offset_ms: Offset from track start in milliseconds.

    Returns:
        Formatted time string.
    """
    if offset_ms < 0:
        offset_ms = 0
    centis = round(offset_ms / 10)
    mins = centis // 6000
    centis %= 6000
    secs = centis // 100
    centis %= 100
    return f"{mins:02d}:{secs:02d}.{centis:02d}"

def shorten(text: str, limit: int = 50) -> str:
    """Trims text for log messages."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
