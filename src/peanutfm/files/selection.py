"""Context-menu target and inline-rename state.

Created: 2026-10-19

``SelectionState`` records which row (if any) a context action applies
to. ``RenameState`` tracks the single row being renamed inline:

    Idle --begin(id)--> Active(id) --finish()/cancel()--> Idle
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum

from peanutfm.files.models import DisplayEntry


class TargetKind(str, Enum):
    NONE = "none"
    ENTRY = "entry"


class ContextAction(str, Enum):
    """Actions a context menu can offer."""

    OPEN = "open"
    RENAME = "rename"
    DELETE = "delete"
    DOWNLOAD = "download"
    COPY_LINK = "copy_link"
    NEW_FILE = "new_file"
    UPLOAD = "upload"
    REFRESH = "refresh"


BACKGROUND_ACTIONS = (ContextAction.NEW_FILE, ContextAction.UPLOAD, ContextAction.REFRESH)
DIRECTORY_ACTIONS = (ContextAction.OPEN, ContextAction.RENAME, ContextAction.DELETE)
FILE_ACTIONS = (
    ContextAction.RENAME,
    ContextAction.DELETE,
    ContextAction.DOWNLOAD,
    ContextAction.COPY_LINK,
)


@dataclass(frozen=True)
class ContextTarget:
    kind: TargetKind = TargetKind.NONE
    entry_id: str | None = None

    @classmethod
    def none(cls) -> ContextTarget:
        return cls()

    @classmethod
    def entry(cls, entry_id: str) -> ContextTarget:
        return cls(TargetKind.ENTRY, entry_id)

    @property
    def is_entry(self) -> bool:
        return self.kind is TargetKind.ENTRY


def available_actions(entry: DisplayEntry | None) -> tuple[ContextAction, ...]:
    """Actions for a row, or for the background when *entry* is None."""
    if entry is None:
        return BACKGROUND_ACTIONS
    return DIRECTORY_ACTIONS if entry.is_dir else FILE_ACTIONS


class SelectionState:
    """Holds at most one context target."""

    def __init__(self):
        self._target = ContextTarget.none()

    @property
    def target(self) -> ContextTarget:
        return self._target

    def open_on_entry(self, entry_id: str) -> None:
        self._target = ContextTarget.entry(entry_id)

    def open_on_background(self) -> None:
        self._target = ContextTarget.none()

    def dismiss(self) -> None:
        self._target = ContextTarget.none()

    def consume(self) -> ContextTarget:
        """Return the current target and reset to none."""
        target, self._target = self._target, ContextTarget.none()
        return target


class RenameState:
    """At most one row in rename mode at a time."""

    def __init__(self):
        self._active_id: str | None = None

    @property
    def active_id(self) -> str | None:
        return self._active_id

    @property
    def active(self) -> bool:
        return self._active_id is not None

    def begin(self, entry_id: str) -> None:
        self._active_id = entry_id

    def finish(self) -> str | None:
        entry_id, self._active_id = self._active_id, None
        return entry_id

    def cancel(self) -> None:
        self._active_id = None

    def reconcile(self, ids: Collection[str]) -> bool:
        """Leave rename mode if the row vanished. Returns True if cleared."""
        if self._active_id is not None and self._active_id not in ids:
            self._active_id = None
            return True
        return False
