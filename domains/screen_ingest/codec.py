"""Image to data-URI encoding for the OCR request."""

import base64
from pathlib import Path

MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


def mime_type_for(path: Path) -> str:
    """Return the image MIME type for ``path``, defaulting to PNG."""
    return MIME_TYPES.get(path.suffix.lower(), "image/png")


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def encode_image(path: Path) -> str:
    """
    Read an image and return it as a base64 data URI.

    Args:
        path: Image file path

    Returns:
        ``data:<mime>;base64,<payload>`` string

    Raises:
        OSError: If the file cannot be read
    """
    return f"data:{mime_type_for(path)};base64,{encode_base64(path.read_bytes())}"
