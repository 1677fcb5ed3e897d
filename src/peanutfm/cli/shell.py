"""Interactive file shell.

Created: 2026-10-19

A thin front-end over ``FileManager``: each command maps to one manager
operation, the listing is re-rendered after navigation, and notifications
are printed as they appear.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
from collections.abc import Awaitable, Callable

from rich.console import Console

from peanutfm.cli.render import render_actions, render_listing, render_notification
from peanutfm.files.manager import FileManager
from peanutfm.files.navigation import parse_path
from peanutfm.files.selection import ContextAction
from peanutfm.notifications import Notification, NotificationPhase

logger = logging.getLogger(__name__)

HELP = """\
Commands:
  ls                      show the current directory
  cd NAME | cd .. | cd /P enter a directory, go up, or jump to a path
  up                      go up one level
  refresh                 re-list the current directory
  menu [NAME]             show the actions for an entry (or the background)
  do ACTION [NAME] [ARGS] run a menu action (e.g. do copy_link a.txt)
  rename NAME NEW         rename an entry (local only, not saved on the server)
  new                     add a placeholder file (local only)
  rm NAME                 delete an entry on the server
  upload FILE...          upload local files into the current directory
  get NAME [DIR]          download a file
  link NAME               print the share link of a file
  help                    show this help
  quit                    leave the shell"""

Command = Callable[[list[str]], Awaitable[None]]


class FileShell:
    """Read-eval loop over a ``FileManager``."""

    def __init__(self, manager: FileManager, console: Console | None = None):
        self.manager = manager
        self.console = console or Console()
        self._running = False
        self._commands: dict[str, Command] = {
            "ls": self._ls,
            "cd": self._cd,
            "up": self._up,
            "refresh": self._refresh,
            "menu": self._menu,
            "do": self._do,
            "rename": self._rename,
            "new": self._new,
            "rm": self._rm,
            "upload": self._upload,
            "get": self._get,
            "link": self._link,
            "help": self._help,
            "quit": self._quit,
            "exit": self._quit,
        }
        manager.notifications.subscribe(self._on_notification)

    def _on_notification(self, notification: Notification | None) -> None:
        if notification is not None and notification.phase is NotificationPhase.VISIBLE:
            self.console.print(render_notification(notification))

    def _show(self) -> None:
        self.console.print(render_listing(self.manager.state))

    async def run(self) -> None:
        self._running = True
        await self.manager.refresh()
        self._show()
        while self._running:
            prompt = f"[bold]/{self.manager.navigation.path}[/bold] > "
            try:
                line = await asyncio.to_thread(self.console.input, prompt)
            except (EOFError, KeyboardInterrupt):
                break
            await self.execute(line)

    async def execute(self, line: str) -> None:
        try:
            argv = shlex.split(line)
        except ValueError as e:
            self.console.print(f"[red]{e}[/red]")
            return
        if not argv:
            return
        command = self._commands.get(argv[0])
        if command is None:
            self.console.print(f"[red]Unknown command: {argv[0]}[/red] (try 'help')")
            return
        try:
            await command(argv[1:])
        except (KeyError, ValueError) as e:
            self.console.print(f"[red]{e.args[0] if e.args else e}[/red]")

    # -- commands --

    async def _ls(self, args: list[str]) -> None:
        self._show()

    async def _cd(self, args: list[str]) -> None:
        if len(args) != 1:
            raise ValueError("usage: cd NAME | cd .. | cd /PATH")
        target = args[0]
        if target == "..":
            await self.manager.ascend()
        elif target.startswith("/"):
            await self.manager.navigate(parse_path(target))
        else:
            if not await self.manager.open_entry(target):
                raise ValueError(f"'{target}' is not a directory")
        self._show()

    async def _up(self, args: list[str]) -> None:
        await self.manager.ascend()
        self._show()

    async def _refresh(self, args: list[str]) -> None:
        await self.manager.refresh()
        self._show()

    async def _menu(self, args: list[str]) -> None:
        actions = self.manager.open_context_menu(args[0] if args else None)
        self.console.print(render_actions(actions))
        self.manager.dismiss_context_menu()

    async def _do(self, args: list[str]) -> None:
        if not args:
            raise ValueError("usage: do ACTION [NAME] [ARGS...]")
        action = ContextAction(args[0])
        rest = args[1:]
        if action in (ContextAction.NEW_FILE, ContextAction.UPLOAD, ContextAction.REFRESH):
            self.manager.open_context_menu(None)
            result = await self.manager.run_action(action, files=rest)
        else:
            if not rest:
                raise ValueError(f"usage: do {action.value} NAME")
            self.manager.open_context_menu(rest[0])
            result = await self.manager.run_action(
                action, destination=rest[1] if len(rest) > 1 else None
            )
        if action is ContextAction.RENAME and result:
            new_name = await asyncio.to_thread(self.console.input, "New name (empty cancels): ")
            if new_name.strip():
                self.manager.commit_rename(new_name)
            else:
                self.manager.cancel_rename()
        self._show()

    async def _rename(self, args: list[str]) -> None:
        if len(args) != 2:
            raise ValueError("usage: rename NAME NEW")
        if not self.manager.begin_rename(args[0]):
            raise ValueError(f"No entry '{args[0]}'")
        self.manager.commit_rename(args[1])
        self._show()

    async def _new(self, args: list[str]) -> None:
        self.manager.new_file()
        self._show()

    async def _rm(self, args: list[str]) -> None:
        if len(args) != 1:
            raise ValueError("usage: rm NAME")
        await self.manager.delete(args[0])
        self._show()

    async def _upload(self, args: list[str]) -> None:
        if not args:
            raise ValueError("usage: upload FILE...")
        await self.manager.upload(args)
        self._show()

    async def _get(self, args: list[str]) -> None:
        if len(args) not in (1, 2):
            raise ValueError("usage: get NAME [DIR]")
        local = await self.manager.download(args[0], args[1] if len(args) == 2 else None)
        if local is not None:
            self.console.print(f"Saved to {local}")

    async def _link(self, args: list[str]) -> None:
        if len(args) != 1:
            raise ValueError("usage: link NAME")
        await self.manager.copy_link(args[0])

    async def _help(self, args: list[str]) -> None:
        self.console.print(HELP, markup=False)

    async def _quit(self, args: list[str]) -> None:
        self._running = False
