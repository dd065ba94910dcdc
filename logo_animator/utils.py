"""
Utility functions for AI Logo Animator.
"""

from __future__ import annotations
import base64
import binascii
import io
import logging
import os
from typing import Tuple

from PIL import Image

_ROOT_LOGGER = "logo_animator"


def get_logger(name: str) -> logging.Logger:
    """
    Return a package logger, configuring the package handler on first use.

    Args:
        name: Short module name, e.g. "orchestrator"

    Returns:
        Logger named ``logo_animator.<name>``
    """
    root = logging.getLogger(_ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s"))
        root.addHandler(handler)
        root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


def load_image_bytes(file) -> Tuple[bytes, str]:
    """
    Load and convert uploaded file to PNG bytes.

    Args:
        file: Streamlit UploadedFile object or any binary file-like object

    Returns:
        Tuple of (image_bytes, mime_type)
    """
    image = Image.open(file).convert("RGB")
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue(), "image/png"


def to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    """Encode raw bytes as a base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def split_data_url(data_url: str) -> Tuple[bytes, str]:
    """
    Decode a base64 data URL.

    Args:
        data_url: String like ``data:image/png;base64,iVBOR...``

    Returns:
        Tuple of (raw_bytes, mime_type)

    Raises:
        ValueError: if the string is not a base64 data URL
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Expected a base64 data URL")
    mime_type = header[len("data:"):-len(";base64")] or "application/octet-stream"
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc
