"""Login flow against ``GET /api/login``.

Created: 2026-10-19

The endpoint takes the credentials as query parameters (``name`` and
``psw``) and answers ``{"code": 200}`` on success or ``{"code": ...,
"msg": "..."}`` on failure. The session token comes back as the
``token`` cookie, which the shared HTTP client keeps and which is also
persisted through ``TokenStore`` so later runs stay logged in.

There is no lockout or rate limiting on repeated failures.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ValidationError

from peanutfm.api.client import TOKEN_COOKIE, install_token
from peanutfm.auth.token_store import SessionToken, TokenStore
from peanutfm.errors import LoginFailure
from peanutfm.notifications import NotificationChannel

logger = logging.getLogger(__name__)

LOGIN_URL = "api/login"
DEFAULT_REDIRECT = "/"
DEFAULT_TITLE = "Welcome Peanut-NAS"
MSG_LOGIN_FAILED = "Login failed"


class LoginResponse(BaseModel):
    code: int
    msg: str | None = None


def title_for(username: str) -> str:
    """Greeting shown above the login form."""
    username = username.strip()
    return f"Welcome {username}" if username else DEFAULT_TITLE


class LoginFlow:
    """Submits credentials and reports failures on the notification channel."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        notifications: NotificationChannel,
        token_store: TokenStore | None = None,
    ):
        self._http = http
        self._notifications = notifications
        self._store = token_store or TokenStore()

    @property
    def server(self) -> str:
        return str(self._http.base_url).rstrip("/")

    async def authenticate(self, username: str, password: str) -> str | None:
        """Call the login endpoint.

        Returns:
            The session token from the ``token`` cookie (None if the server
            did not set one).

        Raises:
            LoginFailure: with the server's ``msg`` when present.
        """
        self._http.cookies.delete(TOKEN_COOKIE)
        try:
            resp = await self._http.get(LOGIN_URL, params={"name": username, "psw": password})
        except httpx.HTTPError as e:
            raise LoginFailure(str(e) or MSG_LOGIN_FAILED) from e

        try:
            result = LoginResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise LoginFailure(MSG_LOGIN_FAILED) from e

        if not resp.is_success or result.code != 200:
            raise LoginFailure(result.msg or MSG_LOGIN_FAILED)

        return resp.cookies.get(TOKEN_COOKIE) or self._http.cookies.get(TOKEN_COOKIE)

    async def login(self, username: str, password: str, return_path: str | None = None) -> str | None:
        """Log in and return the path to redirect to.

        On failure an error notification is shown (it expires on its own)
        and None is returned.
        """
        try:
            token = await self.authenticate(username, password)
        except LoginFailure as e:
            logger.info("Login as %s failed: %s", username, e)
            self._notifications.error(str(e))
            return None

        if token:
            self._store.save(SessionToken(server=self.server, token=token, username=username))
        else:
            logger.warning("Login succeeded but %s set no session cookie", self.server)
        return return_path or DEFAULT_REDIRECT

    def restore(self) -> SessionToken | None:
        """Load a persisted session and install it on the HTTP client."""
        session = self._store.load(self.server)
        if session is not None:
            install_token(self._http, session.token)
        return session

    def logout(self) -> bool:
        self._http.cookies.delete(TOKEN_COOKIE)
        return self._store.delete(self.server)
