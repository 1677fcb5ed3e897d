# Listing normalizer — raw entries → sorted, display-ready rows.
# Created: 2026-10-19

from __future__ import annotations

import locale
import logging
from collections.abc import Iterable
from datetime import date, datetime

from peanutfm.files.models import DirectoryEntry, DisplayEntry, EntryKind

logger = logging.getLogger(__name__)

SIZE_PLACEHOLDER = "-"

_SIZE_TIERS: tuple[tuple[int, str], ...] = (
    (1_000_000_000, "GB"),
    (1_000_000, "MB"),
    (1_000, "KB"),
)

# Extension → MIME type. Lookup is case-insensitive on the extension.
MIME_TYPES: dict[str, str] = {
    # images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "heic": "image/heic",
    # text
    "txt": "text/plain",
    "md": "text/markdown",
    "csv": "text/csv",
    "log": "text/plain",
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "xml": "text/xml",
    "py": "text/x-python",
    "js": "text/javascript",
    "ts": "text/typescript",
    "tsx": "text/typescript",
    "sh": "text/x-shellscript",
    "yaml": "text/yaml",
    "yml": "text/yaml",
    # audio / video
    "mp3": "audio/mpeg",
    "flac": "audio/flac",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "m4a": "audio/mp4",
    "mp4": "video/mp4",
    "mkv": "video/x-matroska",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "webm": "video/webm",
    # documents / archives
    "pdf": "application/pdf",
    "json": "application/json",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "zip": "application/zip",
    "tar": "application/x-tar",
    "gz": "application/gzip",
    "7z": "application/x-7z-compressed",
    "rar": "application/vnd.rar",
    # fonts
    "ttf": "font/ttf",
    "otf": "font/otf",
    "woff": "font/woff",
    "woff2": "font/woff2",
}


# ---------------------------------------------------------------------------
# Field formatting
# ---------------------------------------------------------------------------


def format_size(size: int | None) -> str:
    """Format a byte count using decimal units (1 KB = 1000 B)."""
    if size is None:
        return SIZE_PLACEHOLDER
    for i, (threshold, unit) in enumerate(_SIZE_TIERS):
        if size < threshold:
            continue
        value = round(size / threshold, 1)
        # 999_950 B rounds to 1000.0 KB; show it as 1.0 MB instead
        if value >= 1000 and i > 0:
            threshold, unit = _SIZE_TIERS[i - 1]
            value = round(size / threshold, 1)
        return f"{value:.1f} {unit}"
    return f"{size} B"


def classify_mime(name: str, kind: EntryKind) -> tuple[str, str]:
    """Return ``(mime_type, mime_class)`` for an entry.

    Directories classify as ``("", "directory")`` whatever their name;
    names without a known extension classify as ``("", "unknown")``.
    """
    if kind is EntryKind.DIRECTORY:
        return "", "directory"
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return "", "unknown"
    mime = MIME_TYPES.get(ext.lower())
    if mime is None:
        return "", "unknown"
    return mime, mime.split("/", 1)[0]


def format_modified(value: str) -> str:
    """Render an ISO date/timestamp; anything unparseable passes through."""
    value = value.strip()
    if not value:
        return ""
    try:
        if len(value) == 10:
            return date.fromisoformat(value).isoformat()
        return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return value


# ---------------------------------------------------------------------------
# Collation
# ---------------------------------------------------------------------------


def configure_collation(locale_name: str) -> bool:
    """Set the LC_COLLATE locale used by ``collation_key``.

    Returns False (and keeps the current locale) if the locale is not
    installed on this system.
    """
    if not locale_name:
        return True
    try:
        locale.setlocale(locale.LC_COLLATE, locale_name)
    except locale.Error:
        logger.warning("Collation locale %s not available, using current locale", locale_name)
        return False
    return True


def collation_key(name: str) -> tuple[str, str]:
    # strxfrm can map distinct names to the same key; the raw name breaks ties
    return locale.strxfrm(name), name


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def to_display_entry(entry: DirectoryEntry) -> DisplayEntry:
    kind = entry.kind
    mime_type, mime_class = classify_mime(entry.name, kind)
    return DisplayEntry(
        id=entry.name,
        name=entry.name,
        kind=kind,
        size_label=SIZE_PLACEHOLDER if kind is EntryKind.DIRECTORY else format_size(entry.size),
        mime_type=mime_type,
        mime_class=mime_class,
        modified_label=format_modified(entry.last_modified),
    )


def sort_key(entry: DisplayEntry) -> tuple[int, tuple[str, str]]:
    """Directories before files, then by locale collation of the name."""
    return (0 if entry.is_dir else 1), collation_key(entry.name)


def normalize_listing(entries: Iterable[DirectoryEntry]) -> list[DisplayEntry]:
    """Convert a raw listing into a fresh, sorted list of display rows.

    A name repeated within one payload keeps its first occurrence.
    """
    seen: set[str] = set()
    rows: list[DisplayEntry] = []
    for entry in entries:
        if entry.name in seen:
            logger.warning("Duplicate entry %r in listing, ignoring repeat", entry.name)
            continue
        seen.add(entry.name)
        rows.append(to_display_entry(entry))
    rows.sort(key=sort_key)
    return rows
