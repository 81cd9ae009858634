"""
Helper utilities for Screen Scribe.

Common functions used across domains.
"""

import re
from pathlib import Path
from typing import Iterable

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg")


def has_suffix(name: str, suffixes: Iterable[str] = IMAGE_SUFFIXES, case_sensitive: bool = True) -> bool:
    """
    Check whether a file name ends with one of the given suffixes.

    Args:
        name: File name to check
        suffixes: Accepted suffixes, including the leading dot
        case_sensitive: When False, "SHOT.PNG" matches ".png"

    Returns:
        True if the name ends with an accepted suffix
    """
    if not case_sensitive:
        name = name.lower()
        suffixes = [s.lower() for s in suffixes]
    return any(name.endswith(suffix) for suffix in suffixes)


def sanitize_filename(filename: str) -> str:
    """Sanitize filename by removing invalid characters."""
    # Remove invalid filename characters
    sanitized = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '_', filename)
    # Remove leading/trailing spaces and dots
    sanitized = sanitized.strip('. ')
    # Limit length
    if len(sanitized) > 255:
        sanitized = sanitized[:255]
    return sanitized


def safe_path(path: str) -> Path:
    """
    Convert string to Path, handling edge cases.

    Args:
        path: Path string

    Returns:
        Path object
    """
    return Path(path).expanduser().resolve()
