# File API client — HTTP client for the /api/files endpoints.
# Created: 2026-10-19

from __future__ import annotations

import logging
import urllib.parse
from collections.abc import Sequence
from pathlib import Path

import httpx
from pydantic import ValidationError

from peanutfm.config import Settings, get_settings
from peanutfm.errors import ListFailure, MutationFailure
from peanutfm.files.models import DirectoryEntry, DirectoryListing, EntryKind
from peanutfm.files.navigation import join_path
from peanutfm.files.normalizer import classify_mime

logger = logging.getLogger(__name__)

_FILES_ROOT = "api/files"
TOKEN_COOKIE = "token"


def create_http_client(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build the shared ``httpx.AsyncClient`` for one file server.

    The same client carries the session cookie for login and file calls.
    """
    settings = settings or get_settings()
    return httpx.AsyncClient(
        base_url=settings.server_url,
        timeout=settings.request_timeout,
        transport=transport,
        follow_redirects=True,
    )


def install_token(http: httpx.AsyncClient, token: str) -> None:
    """Replace the session cookie held by *http*."""
    http.cookies.delete(TOKEN_COOKIE)
    http.cookies.set(TOKEN_COOKIE, token, domain=http.base_url.host)


def files_url(path: Sequence[str], name: str | None = None) -> str:
    """Relative URL for a directory (or an entry inside it).

    Each segment is percent-encoded; root is ``api/files``.
    """
    segments = [*path, name] if name is not None else list(path)
    return _FILES_ROOT + "".join("/" + urllib.parse.quote(seg, safe="") for seg in segments)


def _reason(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    return str(exc) or type(exc).__name__


class FileAPIClient:
    """Client for list / upload / delete / download against one server.

    Every call raises a ``PeanutError`` subclass on failure; nothing is
    retried here.
    """

    def __init__(self, http: httpx.AsyncClient, *, transfer_timeout: float | None = None):
        self._http = http
        self._transfer_timeout = transfer_timeout or get_settings().transfer_timeout

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    # ---------- session token ----------

    @property
    def token(self) -> str | None:
        """Session token from the ``token`` cookie, if logged in."""
        return self._http.cookies.get(TOKEN_COOKIE)

    def set_token(self, token: str) -> None:
        """Install a previously persisted session token."""
        install_token(self._http, token)

    # ---------- listing ----------

    async def list_files(self, path: Sequence[str]) -> list[DirectoryEntry]:
        """List one directory.

        Args:
            path: Directory segments (``()`` for root).

        Returns:
            Raw entries in server order.

        Raises:
            ListFailure: network error, non-2xx status, or a body that is not
                a JSON array of entries.
        """
        try:
            resp = await self._http.get(files_url(path))
            resp.raise_for_status()
            return DirectoryListing.validate_python(resp.json())
        except httpx.HTTPError as e:
            raise ListFailure(join_path(path), _reason(e)) from e
        except ValidationError as e:
            raise ListFailure(join_path(path), f"malformed listing ({e.error_count()} errors)") from e
        except ValueError as e:
            raise ListFailure(join_path(path), "response is not JSON") from e

    # ---------- mutations ----------

    async def upload(self, path: Sequence[str], file: Path, name: str | None = None) -> None:
        """Upload one local file into *path*.

        Args:
            path: Target directory segments.
            file: Local file path.
            name: Remote name (defaults to the local file name).

        Raises:
            MutationFailure: the file could not be read or the server rejected it.
        """
        local = Path(file).expanduser()
        upload_name = name or local.name
        try:
            file_bytes = local.read_bytes()
        except OSError as e:
            raise MutationFailure("upload", upload_name, e.strerror or str(e)) from e

        mime_type, _ = classify_mime(upload_name, EntryKind.FILE)
        try:
            resp = await self._http.post(
                files_url(path, upload_name),
                files={"file": (upload_name, file_bytes, mime_type or "application/octet-stream")},
                timeout=self._transfer_timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise MutationFailure("upload", upload_name, _reason(e)) from e
        logger.info("Uploaded %s to /%s (%d bytes)", upload_name, join_path(path), len(file_bytes))

    async def delete(self, path: Sequence[str], name: str) -> None:
        """Delete one entry. Raises ``MutationFailure``; never retried."""
        try:
            resp = await self._http.delete(files_url(path, name))
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise MutationFailure("delete", name, _reason(e)) from e
        logger.info("Deleted /%s", join_path([*path, name]))

    async def download(self, path: Sequence[str], name: str, destination: Path) -> Path:
        """Stream a file to disk through its token download link.

        Args:
            path: Directory segments.
            name: File name.
            destination: Target directory, or a file path to write to.

        Returns:
            The local path written.
        """
        destination = Path(destination).expanduser()
        if destination.is_dir():
            target = destination / Path(name).name
            if target.resolve().parent != destination.resolve():
                raise MutationFailure("download", name, "unsafe file name")
        else:
            target = destination
        params = {TOKEN_COOKIE: self.token} if self.token else None
        written = False
        try:
            async with self._http.stream(
                "GET", files_url(path, name), params=params, timeout=self._transfer_timeout
            ) as resp:
                resp.raise_for_status()
                with open(target, "wb") as fh:
                    written = True
                    async for chunk in resp.aiter_bytes():
                        fh.write(chunk)
        except httpx.HTTPError as e:
            if written:
                target.unlink(missing_ok=True)
            raise MutationFailure("download", name, _reason(e)) from e
        except OSError as e:
            if written:
                target.unlink(missing_ok=True)
            raise MutationFailure("download", name, e.strerror or str(e)) from e
        logger.info("Downloaded /%s to %s", join_path([*path, name]), target)
        return target

    # ---------- links (no network) ----------

    def build_download_link(self, path: Sequence[str], name: str, token: str | None) -> str:
        """Absolute URL serving the raw file bytes.

        The session token rides along as the ``token`` query parameter, so
        the link is a bearer credential: it ends up in browser history,
        proxy logs and Referer headers.
        """
        url = self._http.base_url.join(files_url(path, name))
        if token:
            url = url.copy_merge_params({TOKEN_COOKIE: token})
        return str(url)

    def build_share_link(self, path: Sequence[str], name: str, token: str | None) -> str:
        """Link handed out by "copy link"; same URL shape as the download link."""
        return self.build_download_link(path, name, token)
