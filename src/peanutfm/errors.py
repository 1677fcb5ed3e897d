"""Exception hierarchy for peanutfm.

Created: 2026-10-19

The API client raises these; ``FileManager`` and ``LoginFlow`` catch them
at the call site and turn them into notifications or log records.
"""

from __future__ import annotations

__all__ = [
    "ClipboardFailure",
    "ListFailure",
    "LoginFailure",
    "MutationFailure",
    "PeanutError",
]


class PeanutError(Exception):
    """Base class for all peanutfm errors."""


class ListFailure(PeanutError):
    """A directory listing could not be fetched or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to list '/{path}': {reason}")


class MutationFailure(PeanutError):
    """An upload, delete or download call failed."""

    def __init__(self, operation: str, name: str, reason: str):
        self.operation = operation
        self.name = name
        self.reason = reason
        super().__init__(f"{operation} '{name}' failed: {reason}")


class LoginFailure(PeanutError):
    """The login endpoint rejected the credentials or could not be reached."""


class ClipboardFailure(PeanutError):
    """Writing a link to the clipboard failed."""
