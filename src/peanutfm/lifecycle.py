"""Coordinated shutdown and reset of long-lived objects.

Modules register cleanup callbacks via ``register()``; the CLI teardown
path calls ``shutdown_all()`` (closing the shared HTTP client), and tests
call ``reset_all()`` to drop cached singletons such as the settings.

Created: 2026-10-19
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# Registry: name → (shutdown_callback_or_None, reset_callback_or_None)
_registry: dict[str, tuple[Callable | None, Callable | None]] = {}


def register(
    name: str,
    *,
    shutdown: Callable[[], Any] | None = None,
    reset: Callable[[], Any] | None = None,
) -> None:
    """Register lifecycle callbacks under *name*.

    Args:
        name: Unique identifier (e.g. ``"settings"``, ``"http_client"``).
        shutdown: Async or sync callable for graceful teardown.
        reset: Sync callable that clears a cached instance (for tests).
    """
    _registry[name] = (shutdown, reset)


def unregister(name: str) -> None:
    _registry.pop(name, None)


async def shutdown_all() -> None:
    """Run every shutdown callback, awaiting async ones.

    Errors are logged but don't prevent other shutdowns from running.
    Shutdown entries are one-shot and removed once they have run.
    """
    for name, (shutdown_cb, reset_cb) in list(_registry.items()):
        if shutdown_cb is None:
            continue
        try:
            result = shutdown_cb()
            if asyncio.iscoroutine(result):
                await result
            logger.debug("Shut down %s", name)
        except Exception:
            logger.warning("Error shutting down %s", name, exc_info=True)
        if reset_cb is None:
            _registry.pop(name, None)
        else:
            _registry[name] = (None, reset_cb)


def reset_all() -> None:
    """Call every registered reset callback.

    Reset hooks stay registered so module-level registrations survive
    repeated test teardowns.
    """
    for name, (_, reset_cb) in list(_registry.items()):
        if reset_cb is None:
            continue
        try:
            reset_cb()
            logger.debug("Reset %s", name)
        except Exception:
            logger.warning("Error resetting %s", name, exc_info=True)
