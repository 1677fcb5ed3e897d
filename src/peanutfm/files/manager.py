"""File manager state machine.

Created: 2026-10-19

``FileManager`` owns the listing for the current directory and applies
every user action to it:

- navigation (descend / ascend / jump) re-lists the new path; responses
  for superseded requests are dropped by generation
- rename and new-file are local only: the server has no rename or create
  endpoint, so both are lost on the next refresh
- delete and upload go through the API, report one notification, and
  then re-list from the server rather than patching the listing
- download / copy-link work on file rows only

Front-ends observe ``state`` via ``subscribe()`` and never touch the
listing directly.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Any

from peanutfm.api.client import FileAPIClient
from peanutfm.config import Settings, get_settings
from peanutfm.errors import ClipboardFailure, ListFailure, MutationFailure
from peanutfm.files.models import DisplayEntry, EntryKind
from peanutfm.files.navigation import NavigationState, join_path
from peanutfm.files.normalizer import classify_mime, format_size, normalize_listing
from peanutfm.files.selection import (
    ContextAction,
    ContextTarget,
    RenameState,
    SelectionState,
    available_actions,
)
from peanutfm.notifications import Notification, NotificationChannel

logger = logging.getLogger(__name__)

ClipboardWriter = Callable[[str], Awaitable[Any] | Any]

MSG_DELETE_FAILED = "Delete failed"
MSG_UPLOAD_DONE = "Upload complete"
MSG_UPLOAD_FAILED = "Upload failed"
MSG_DOWNLOAD_FAILED = "Download failed"
MSG_LINK_COPIED = "Link copied"


@dataclass(frozen=True)
class AppState:
    """Immutable snapshot published to subscribers after every change."""

    path: tuple[str, ...]
    entries: tuple[DisplayEntry, ...]
    target: ContextTarget
    renaming: str | None
    notification: Notification | None
    loading: bool


StateListener = Callable[[AppState], None]


class FileManager:
    """Listing synchronization plus file operations for one server."""

    def __init__(
        self,
        api: FileAPIClient,
        notifications: NotificationChannel | None = None,
        *,
        settings: Settings | None = None,
        clipboard: ClipboardWriter | None = None,
        path: Iterable[str] = (),
    ):
        self.settings = settings or get_settings()
        self._api = api
        self._notifications = notifications or NotificationChannel(
            self.settings.notification_display_seconds,
            self.settings.notification_exit_seconds,
        )
        self._clipboard = clipboard
        self._nav = NavigationState(path)
        self._selection = SelectionState()
        self._rename = RenameState()
        self._entries: list[DisplayEntry] = []
        self._loading = False
        self._listeners: list[StateListener] = []
        self._notifications.subscribe(lambda _n: self._publish())

    # =========================================================================
    # State
    # =========================================================================

    @property
    def notifications(self) -> NotificationChannel:
        return self._notifications

    @property
    def navigation(self) -> NavigationState:
        return self._nav

    @property
    def entries(self) -> tuple[DisplayEntry, ...]:
        return tuple(self._entries)

    @property
    def state(self) -> AppState:
        return AppState(
            path=self._nav.segments,
            entries=tuple(self._entries),
            target=self._selection.target,
            renaming=self._rename.active_id,
            notification=self._notifications.current,
            loading=self._loading,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def get_entry(self, entry_id: str) -> DisplayEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def _require_entry(self, entry_id: str) -> DisplayEntry:
        entry = self.get_entry(entry_id)
        if entry is None:
            raise KeyError(f"No entry '{entry_id}' in /{self._nav.path}")
        return entry

    def _publish(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.warning("State listener failed", exc_info=True)

    # =========================================================================
    # Listing & navigation
    # =========================================================================

    async def refresh(self) -> bool:
        """Re-list the current path and replace the listing wholesale.

        Returns True if the listing was replaced. On ``ListFailure`` the
        previous listing stays as it is; a response that arrives after a
        newer request was issued is discarded.
        """
        generation = self._nav.begin_request()
        segments = self._nav.segments
        self._loading = True
        self._publish()

        try:
            raw = await self._api.list_files(segments)
            if not self._nav.is_current(generation):
                logger.debug(
                    "Discarding stale listing for /%s (generation %d, current %d)",
                    join_path(segments),
                    generation,
                    self._nav.generation,
                )
                return False
            self._entries = normalize_listing(raw)
            self._loading = False
            ids = {e.id for e in self._entries}
            self._rename.reconcile(ids)
            target = self._selection.target
            if target.is_entry and target.entry_id not in ids:
                self._selection.dismiss()
            self._publish()
            return True
        except ListFailure as e:
            logger.warning("%s", e)
            return False
        except ValueError as e:
            logger.warning("Failed to normalize listing for /%s: %s", join_path(segments), e)
            return False
        finally:
            # only the latest request owns the loading flag
            if self._loading and self._nav.is_current(generation):
                self._loading = False
                self._publish()

    async def descend(self, name: str) -> bool:
        self._nav.descend(name)
        self._reset_interaction()
        return await self.refresh()

    async def ascend(self) -> bool:
        """Go up one level. No request is made at root."""
        if not self._nav.ascend():
            return False
        self._reset_interaction()
        return await self.refresh()

    async def navigate(self, segments: Iterable[str]) -> bool:
        self._nav.reset(segments)
        self._reset_interaction()
        return await self.refresh()

    async def open_entry(self, entry_id: str) -> bool:
        """Clicking a row: directories are entered, files are left alone."""
        entry = self._require_entry(entry_id)
        if not entry.is_dir:
            return False
        return await self.descend(entry.name)

    def _reset_interaction(self) -> None:
        self._selection.dismiss()
        self._rename.cancel()

    # =========================================================================
    # Context menu
    # =========================================================================

    def open_context_menu(self, entry_id: str | None = None) -> tuple[ContextAction, ...]:
        """Open the menu on a row (or the background) and return its actions."""
        if entry_id is None:
            self._selection.open_on_background()
        else:
            self._require_entry(entry_id)
            self._selection.open_on_entry(entry_id)
        self._publish()
        return self.available_actions()

    def dismiss_context_menu(self) -> None:
        self._selection.dismiss()
        self._publish()

    def available_actions(self) -> tuple[ContextAction, ...]:
        target = self._selection.target
        entry = self.get_entry(target.entry_id) if target.is_entry else None
        return available_actions(entry)

    async def run_action(self, action: ContextAction, **kwargs: Any) -> Any:
        """Run a menu action against the current target and close the menu.

        ``UPLOAD`` takes ``files=[...]``; ``DOWNLOAD`` takes an optional
        ``destination``.
        """
        target = self._selection.consume()
        entry = self.get_entry(target.entry_id) if target.is_entry else None
        if target.is_entry and entry is None:
            logger.info("Context target %s is gone, ignoring %s", target.entry_id, action.value)
            self._publish()
            return None
        if action not in available_actions(entry):
            self._publish()
            raise ValueError(f"Action {action.value} is not available here")

        if action is ContextAction.OPEN:
            return await self.open_entry(entry.id)
        if action is ContextAction.RENAME:
            return self.begin_rename(entry.id)
        if action is ContextAction.DELETE:
            return await self.delete(entry.id)
        if action is ContextAction.DOWNLOAD:
            return await self.download(entry.id, kwargs.get("destination"))
        if action is ContextAction.COPY_LINK:
            return await self.copy_link(entry.id)
        if action is ContextAction.NEW_FILE:
            self._publish()
            return self.new_file()
        if action is ContextAction.UPLOAD:
            return await self.upload(kwargs.get("files", ()))
        return await self.refresh()

    # =========================================================================
    # Rename (local only)
    # =========================================================================

    def begin_rename(self, entry_id: str | None = None) -> bool:
        """Put a row into rename mode (defaults to the context target)."""
        if entry_id is None:
            target = self._selection.target
            entry_id = target.entry_id if target.is_entry else None
        if entry_id is None or self.get_entry(entry_id) is None:
            return False
        self._selection.dismiss()
        self._rename.begin(entry_id)
        self._publish()
        return True

    def commit_rename(self, new_name: str) -> bool:
        """Apply the edited name to the in-memory row and leave rename mode.

        Nothing is sent to the server. Blank or unchanged names leave the
        row as it was; a name held by another row is refused with an error
        notification.
        """
        entry_id = self._rename.finish()
        if entry_id is None:
            return False
        entry = self.get_entry(entry_id)
        new_name = new_name.strip()
        if entry is None or not new_name or new_name == entry.name:
            self._publish()
            return False
        if "/" in new_name:
            self._notifications.error("Name cannot contain '/'")
            return False
        if self.get_entry(new_name) is not None:
            self._notifications.error(f"'{new_name}' already exists")
            return False

        mime_type, mime_class = classify_mime(new_name, entry.kind)
        patched = replace(entry, id=new_name, name=new_name, mime_type=mime_type, mime_class=mime_class)
        self._entries = [patched if e.id == entry_id else e for e in self._entries]
        logger.debug("Renamed %s -> %s locally", entry_id, new_name)
        self._publish()
        return True

    def cancel_rename(self) -> None:
        """Leave rename mode without saving (Escape)."""
        self._rename.cancel()
        self._publish()

    # =========================================================================
    # New file (local placeholder)
    # =========================================================================

    def _unique_name(self, base: str) -> str:
        if self.get_entry(base) is None:
            return base
        stem, dot, ext = base.rpartition(".")
        if not dot or not stem:
            stem, ext = base, ""
        n = 1
        while True:
            candidate = f"{stem} ({n}).{ext}" if ext else f"{stem} ({n})"
            if self.get_entry(candidate) is None:
                return candidate
            n += 1

    def new_file(self) -> DisplayEntry:
        """Append a placeholder row. It exists only until the next refresh."""
        name = self._unique_name(self.settings.new_file_name)
        mime_type, mime_class = classify_mime(name, EntryKind.FILE)
        entry = DisplayEntry(
            id=name,
            name=name,
            kind=EntryKind.FILE,
            size_label=format_size(0),
            mime_type=mime_type,
            mime_class=mime_class,
            modified_label=date.today().isoformat(),
            placeholder=True,
        )
        self._entries = [*self._entries, entry]
        self._publish()
        return entry

    # =========================================================================
    # Server mutations
    # =========================================================================

    async def delete(self, entry_id: str) -> bool:
        """Delete a row on the server, then re-list.

        Placeholder rows were never stored remotely and are only dropped
        from the listing.
        """
        entry = self._require_entry(entry_id)
        if entry.placeholder:
            self._entries = [e for e in self._entries if e.id != entry_id]
            self._rename.reconcile({e.id for e in self._entries})
            self._notifications.success(f"Deleted {entry.name}")
            return True

        try:
            await self._api.delete(self._nav.segments, entry.name)
        except MutationFailure as e:
            logger.warning("%s", e)
            self._notifications.error(MSG_DELETE_FAILED)
            return False

        self._notifications.success(f"Deleted {entry.name}")
        await self.refresh()
        return True

    async def upload(self, files: Sequence[Path | str]) -> bool:
        """Upload a batch one file at a time.

        Emits a single notification for the whole batch and re-lists once,
        whatever the per-file outcome. Returns True only if every file was
        accepted. An empty batch (picker cancelled) does nothing.
        """
        if not files:
            return True

        segments = self._nav.segments
        failed: list[str] = []
        for file in files:
            try:
                await self._api.upload(segments, Path(file))
            except MutationFailure as e:
                logger.warning("%s", e)
                failed.append(e.name)

        if failed:
            logger.info("Upload batch: %d of %d failed", len(failed), len(files))
            self._notifications.error(MSG_UPLOAD_FAILED)
        else:
            self._notifications.success(MSG_UPLOAD_DONE)
        await self.refresh()
        return not failed

    async def download(self, entry_id: str, destination: Path | str | None = None) -> Path | None:
        entry = self._require_file(entry_id)
        dest = Path(destination) if destination else self.settings.resolved_download_dir()
        try:
            local = await self._api.download(self._nav.segments, entry.name, dest)
        except MutationFailure as e:
            logger.warning("%s", e)
            self._notifications.error(MSG_DOWNLOAD_FAILED)
            return None
        self._notifications.success(f"Downloaded {entry.name}")
        return local

    # =========================================================================
    # Links
    # =========================================================================

    def _require_file(self, entry_id: str) -> DisplayEntry:
        entry = self._require_entry(entry_id)
        if entry.is_dir:
            raise ValueError(f"'{entry.name}' is a directory")
        return entry

    def download_link(self, entry_id: str) -> str:
        entry = self._require_file(entry_id)
        return self._api.build_download_link(self._nav.segments, entry.name, self._api.token)

    def share_link(self, entry_id: str) -> str:
        entry = self._require_file(entry_id)
        return self._api.build_share_link(self._nav.segments, entry.name, self._api.token)

    async def copy_link(self, entry_id: str) -> bool:
        """Hand the share link to the clipboard writer."""
        link = self.share_link(entry_id)
        try:
            if self._clipboard is None:
                raise ClipboardFailure("No clipboard available")
            try:
                result = self._clipboard(link)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                raise ClipboardFailure(str(e) or type(e).__name__) from e
        except ClipboardFailure as e:
            logger.warning("Copy link failed: %s", e, exc_info=e.__cause__ is not None)
            self._notifications.error(str(e))
            return False
        self._notifications.success(MSG_LINK_COPIED)
        return True
