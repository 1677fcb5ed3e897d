"""Listing data models.

Created: 2026-10-19

- ``DirectoryEntry``: raw entry as the server returns it (validated).
- ``DisplayEntry``: normalized, display-ready row. Built only by
  ``peanutfm.files.normalizer``; the UI layer reads it and never mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

# ============================================================================
# Enums
# ============================================================================


class EntryKind(str, Enum):
    """Kind of a listing row."""

    FILE = "file"
    DIRECTORY = "directory"


# ============================================================================
# Raw server payload
# ============================================================================


class DirectoryEntry(BaseModel):
    """A single entry of ``GET /api/files/{path}``."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    type: Literal["file", "directory"]
    size: int | None = Field(default=None, ge=0)
    last_modified: str = ""

    @field_validator("name")
    @classmethod
    def _plain_name(cls, v: str) -> str:
        # names become path segments and local file names
        if v in (".", "..") or "/" in v or "\x00" in v:
            raise ValueError(f"invalid entry name {v!r}")
        return v

    @property
    def kind(self) -> EntryKind:
        return EntryKind(self.type)


DirectoryListing = TypeAdapter(list[DirectoryEntry])


# ============================================================================
# Display model
# ============================================================================


@dataclass(frozen=True)
class DisplayEntry:
    """A normalized listing row.

    Attributes:
        id: Row identity; equal to ``name`` and unique within one listing.
        name: File or directory name.
        kind: ``EntryKind.FILE`` or ``EntryKind.DIRECTORY``.
        size_label: Human readable size ("500 B", "2.4 MB") or "-" for directories.
        mime_type: Full MIME type derived from the extension, "" when unknown.
        mime_class: Coarse class ("image", "text", ..., "unknown", "directory").
        modified_label: Last-modified date as shown to the user.
        placeholder: True for local rows created by "new file" and never persisted.
    """

    id: str
    name: str
    kind: EntryKind
    size_label: str
    mime_type: str
    mime_class: str
    modified_label: str
    placeholder: bool = False

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY
