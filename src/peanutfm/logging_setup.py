"""Console logging with Rich.

Created: 2026-10-19
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "peanutfm-rich"


def setup_logging(level: str | int = "INFO", console: Console | None = None) -> None:
    """Install a Rich handler on the root logger (idempotent).

    Calling again only updates the level. Logs go to stderr so they never
    mix with listing output piped from the CLI.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if any(getattr(h, "name", None) == _HANDLER_NAME for h in root.handlers):
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
