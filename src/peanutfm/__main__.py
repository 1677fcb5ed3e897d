"""peanutfm entry point.

Changes:
  - 2026-10-19: Subcommands for login/logout, ls, upload, rm, get, link and the interactive shell.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

from rich.console import Console
from rich.prompt import Prompt

from peanutfm import lifecycle
from peanutfm.api.client import FileAPIClient, create_http_client
from peanutfm.auth.login import LoginFlow, title_for
from peanutfm.cli.render import render_listing, render_notification
from peanutfm.cli.shell import FileShell
from peanutfm.config import Settings, get_settings
from peanutfm.files.manager import FileManager
from peanutfm.files.navigation import parse_path
from peanutfm.files.normalizer import configure_collation
from peanutfm.logging_setup import setup_logging
from peanutfm.notifications import NotificationChannel

logger = logging.getLogger(__name__)

console = Console()


def _version() -> str:
    try:
        return get_version("peanutfm")
    except PackageNotFoundError:
        from peanutfm import __version__

        return __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="peanutfm",
        description="🥜 peanutfm - browse and manage files on a Peanut-NAS server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  peanutfm login -u alice                Log in (password is prompted)
  peanutfm ls docs                       List /docs
  peanutfm upload docs a.txt b.png       Upload two files into /docs
  peanutfm get docs a.txt -o ~/Downloads Download /docs/a.txt
  peanutfm shell                         Interactive shell at /
""",
    )
    parser.add_argument(
        "--server",
        "-s",
        default=None,
        help="File server URL (default: PEANUTFM_SERVER_URL or http://127.0.0.1:3000)",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--version", "-v", action="version", version=f"%(prog)s {_version()}"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Log in and store the session token")
    p.add_argument("--username", "-u", default=None)
    p.add_argument("--path", default=None, help="Directory to open after login")
    p.add_argument("--shell", action="store_true", help="Open the shell after login")

    sub.add_parser("logout", help="Forget the stored session token")

    p = sub.add_parser("ls", help="List a directory")
    p.add_argument("path", nargs="?", default="/")

    p = sub.add_parser("upload", help="Upload files into a directory")
    p.add_argument("path")
    p.add_argument("files", nargs="+", type=Path)

    p = sub.add_parser("rm", help="Delete an entry")
    p.add_argument("path")
    p.add_argument("name")

    p = sub.add_parser("get", help="Download a file")
    p.add_argument("path")
    p.add_argument("name")
    p.add_argument("--output", "-o", type=Path, default=None)

    p = sub.add_parser("link", help="Print the share link of a file")
    p.add_argument("path")
    p.add_argument("name")

    p = sub.add_parser("shell", help="Interactive file shell")
    p.add_argument("path", nargs="?", default="/")

    return parser


def _print_link(link: str) -> None:
    console.print(link, markup=False, soft_wrap=True)


def _print_notification(channel: NotificationChannel) -> None:
    banner = render_notification(channel.current)
    if banner is not None:
        console.print(banner)


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    http = create_http_client(settings)
    lifecycle.register("http_client", shutdown=http.aclose)

    notifications = NotificationChannel(
        settings.notification_display_seconds, settings.notification_exit_seconds
    )
    auth = LoginFlow(http, notifications)

    if args.command == "login":
        username = args.username or Prompt.ask("Username")
        console.print(f"[bold]{title_for(username)}[/bold]")
        password = Prompt.ask("Password", password=True)
        redirect = await auth.login(username, password, return_path=args.path)
        if redirect is None:
            _print_notification(notifications)
            return 1
        console.print(f"Logged in to {auth.server}")
        if not args.shell:
            return 0
        args.path = redirect
    elif args.command == "logout":
        removed = auth.logout()
        console.print("Logged out" if removed else "No stored session")
        return 0
    elif auth.restore() is None:
        logger.info("No stored session for %s; run 'peanutfm login' first", auth.server)

    api = FileAPIClient(http, transfer_timeout=settings.transfer_timeout)
    manager = FileManager(
        api,
        notifications,
        settings=settings,
        clipboard=_print_link,
        path=parse_path(args.path),
    )

    if args.command in ("shell", "login"):
        await FileShell(manager, console).run()
        return 0

    if args.command == "upload":
        ok = await manager.upload(args.files)
        _print_notification(notifications)
        return 0 if ok else 1

    if not await manager.refresh():
        logger.error("Could not list /%s", manager.navigation.path)
        return 1

    if args.command == "ls":
        console.print(render_listing(manager.state))
        return 0

    if manager.get_entry(args.name) is None:
        logger.error("No entry '%s' in /%s", args.name, manager.navigation.path)
        return 1

    try:
        if args.command == "rm":
            ok = await manager.delete(args.name)
        elif args.command == "get":
            ok = await manager.download(args.name, args.output) is not None
        else:
            _print_link(manager.share_link(args.name))
            return 0
    except ValueError as e:
        logger.error("%s", e)
        return 1
    _print_notification(notifications)
    return 0 if ok else 1


async def _main(args: argparse.Namespace, settings: Settings) -> int:
    try:
        return await _run(args, settings)
    finally:
        await lifecycle.shutdown_all()


def main() -> None:
    """Main entry point."""
    args = build_parser().parse_args()

    settings = get_settings()
    if args.server:
        settings = settings.model_copy(update={"server_url": args.server.rstrip("/")})

    setup_logging(level="DEBUG" if args.debug else settings.log_level)
    configure_collation(settings.collation_locale)

    try:
        exit_code = asyncio.run(_main(args, settings))
    except KeyboardInterrupt:
        exit_code = 130
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
