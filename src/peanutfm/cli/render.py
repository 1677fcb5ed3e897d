# Rich renderables for the listing and the notification banner.
# Created: 2026-10-19

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from peanutfm.files.manager import AppState
from peanutfm.files.selection import ContextAction
from peanutfm.notifications import Notification, NotificationKind

_KIND_STYLE = {
    NotificationKind.SUCCESS: ("✅", "green"),
    NotificationKind.ERROR: ("❌", "red"),
}

ACTION_LABELS: dict[ContextAction, str] = {
    ContextAction.OPEN: "Open",
    ContextAction.RENAME: "Rename",
    ContextAction.DELETE: "Delete",
    ContextAction.DOWNLOAD: "Download",
    ContextAction.COPY_LINK: "Copy link",
    ContextAction.NEW_FILE: "New file",
    ContextAction.UPLOAD: "Upload",
    ContextAction.REFRESH: "Refresh",
}


def render_listing(state: AppState) -> Table:
    title = "/" + "/".join(state.path)
    if state.loading:
        title += " (loading…)"
    table = Table(title=title, title_justify="left", expand=False)
    table.add_column("Name", no_wrap=True)
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Modified")

    for entry in state.entries:
        if entry.is_dir:
            name = Text(f"📁 {entry.name}", style="bold blue")
        else:
            name = Text(f"📄 {entry.name}")
        if entry.placeholder:
            name.append(" (not saved)", style="dim")
        if state.renaming == entry.id:
            name.stylize("reverse")
        table.add_row(name, entry.mime_class, entry.size_label, entry.modified_label)

    if not state.entries:
        table.add_row(Text("(empty)", style="dim"), "", "", "")
    return table


def render_notification(notification: Notification | None) -> Text | None:
    if notification is None:
        return None
    icon, color = _KIND_STYLE[notification.kind]
    return Text.assemble(f"{icon} ", (notification.message, f"bold {color}"))


def render_actions(actions: tuple[ContextAction, ...]) -> Text:
    return Text(" · ".join(f"{ACTION_LABELS[a]} [{a.value}]" for a in actions), style="cyan")
