# Session store — file-based session token persistence at ~/.peanutfm/sessions/.
# Created: 2026-10-19

from __future__ import annotations

import json
import logging
import os
import re
import stat
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path

import httpx

from peanutfm.config import get_config_dir

logger = logging.getLogger(__name__)


@dataclass
class SessionToken:
    """Session token issued by one server's login endpoint."""

    server: str
    token: str
    username: str = ""
    created_at: float = field(default_factory=time.time)  # Unix timestamp


def _get_sessions_dir() -> Path:
    """Get/create the session token directory."""
    d = get_config_dir() / "sessions"
    d.mkdir(exist_ok=True)
    return d


def _server_key(server: str) -> str:
    url = httpx.URL(server)
    key = f"{url.host}_{url.port}" if url.port else url.host
    return re.sub(r"[^A-Za-z0-9_.-]", "_", key) or "default"


class TokenStore:
    """File-based store at ~/.peanutfm/sessions/{host}[_{port}].json.

    Files are chmod 0600 (owner-only read/write).
    """

    def _path(self, server: str) -> Path:
        return _get_sessions_dir() / f"{_server_key(server)}.json"

    def save(self, session: SessionToken) -> None:
        """Save the session for its server."""
        path = self._path(session.server)
        path.write_text(json.dumps(asdict(session), indent=2))
        os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)
        logger.info("Saved session for %s", session.server)

    def load(self, server: str) -> SessionToken | None:
        """Load the session for a server. Returns None if not found."""
        path = self._path(server)
        if not path.exists():
            return None

        try:
            data = json.loads(path.read_text())
            return SessionToken(**data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Failed to load session for %s: %s", server, e)
            return None

    def delete(self, server: str) -> bool:
        """Delete the session for a server. Returns True if deleted."""
        path = self._path(server)
        if path.exists():
            path.unlink()
            logger.info("Deleted session for %s", server)
            return True
        return False

    def list_servers(self) -> list[str]:
        """List the servers that have a stored session."""
        servers = []
        for f in sorted(_get_sessions_dir().glob("*.json")):
            try:
                servers.append(json.loads(f.read_text())["server"])
            except (OSError, ValueError, KeyError):
                logger.debug("Skipping unreadable session file %s", f)
        return servers
