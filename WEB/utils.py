"""
Zypher Web — Utility Helpers
============================

File size formatting and upload size checks shared by the tabs.
"""

from __future__ import annotations

from zypher.config import settings


# ---------------------------------------------------------------------------
# Human-readable file size
# ---------------------------------------------------------------------------

def human_file_size(size_bytes: int) -> str:
    """Convert byte count to a human-readable string (e.g. '1.5 MB')."""
    if size_bytes < 0:
        return "0 B"
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if abs(size_bytes) < 1024.0:
            if unit == "B":
                return f"{size_bytes} {unit}"
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0  # type: ignore[assignment]
    return f"{size_bytes:.1f} PB"


# ---------------------------------------------------------------------------
# Upload limit
# ---------------------------------------------------------------------------

def upload_too_large(size_bytes: int) -> bool:
    """True when an upload exceeds ``ZYPHER_MAX_UPLOAD_MB``."""
    return size_bytes > settings.max_upload_mb * 1024 * 1024
