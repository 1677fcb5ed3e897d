"""Login flow and session persistence."""

from peanutfm.auth.login import LoginFlow, title_for
from peanutfm.auth.token_store import SessionToken, TokenStore

__all__ = ["LoginFlow", "SessionToken", "TokenStore", "title_for"]
