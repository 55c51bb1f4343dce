"""Human-readable renderings of sizes and timestamps."""

from __future__ import annotations

from datetime import datetime

_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(size_bytes: int) -> str:
    """Render a byte count with 1024-based units, e.g. ``2.5 MB``."""
    if size_bytes <= 0:
        return "0 Bytes"
    exponent = 0
    while exponent < len(_UNITS) - 1 and size_bytes >= 1024 ** (exponent + 1):
        exponent += 1
    value = size_bytes / 1024 ** exponent
    return f"{value:.2f}".rstrip("0").rstrip(".") + f" {_UNITS[exponent]}"


def format_date(moment: datetime) -> str:
    """Render an instant in local time."""
    return moment.astimezone().strftime("%Y-%m-%d %H:%M:%S")


__all__ = ["format_date", "format_file_size"]
