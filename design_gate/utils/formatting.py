"""Small formatting and validation helpers shared by the CLI and reports."""

from typing import Iterable, Optional

from design_gate.core.constants import SUPPORTED_MIME_TYPES

FILE_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_file_size(size_bytes: int) -> str:
    """Render a byte count using 1024-based units, e.g. ``1.5 KB``."""
    if size_bytes <= 0:
        return "0 Bytes"

    index = 0
    value = float(size_bytes)
    while value >= 1024 and index < len(FILE_SIZE_UNITS) - 1:
        value /= 1024
        index += 1

    # :g drops trailing zeros, 2.0 -> "2"
    return f"{round(value, 2):g} {FILE_SIZE_UNITS[index]}"


def normalize_mime_type(mime_type: Optional[str]) -> str:
    """Lower-case a mimetype and strip any parameters."""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def is_supported_mime_type(
    mime_type: Optional[str], allowed: Optional[Iterable[str]] = None
) -> bool:
    accepted = SUPPORTED_MIME_TYPES if allowed is None else set(allowed)
    return normalize_mime_type(mime_type) in accepted
