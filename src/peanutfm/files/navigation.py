# Navigation state — current path plus a request generation counter.
# Created: 2026-10-19

from __future__ import annotations

from collections.abc import Iterable


def parse_path(path: str) -> tuple[str, ...]:
    """Split a slash path ("/docs/sub/") into segments, dropping empties."""
    return tuple(seg for seg in path.split("/") if seg)


def join_path(segments: Iterable[str]) -> str:
    return "/".join(segments)


def _check_segment(name: str) -> str:
    if not name or "/" in name:
        raise ValueError(f"Invalid path segment: {name!r}")
    return name


class NavigationState:
    """Current directory as an ordered tuple of segments.

    Root is ``()``. Every listing request takes a new generation via
    ``begin_request()``; a response is only applied while
    ``is_current(generation)`` holds, so a slow response for a path the
    user already left can never overwrite the newer listing.
    """

    def __init__(self, segments: Iterable[str] = ()):
        self._segments: tuple[str, ...] = tuple(_check_segment(s) for s in segments)
        self._generation = 0

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def path(self) -> str:
        return join_path(self._segments)

    @property
    def at_root(self) -> bool:
        return not self._segments

    @property
    def generation(self) -> int:
        return self._generation

    def descend(self, name: str) -> None:
        self._segments = (*self._segments, _check_segment(name))

    def ascend(self) -> bool:
        """Drop the last segment. Returns False (no-op) at root."""
        if not self._segments:
            return False
        self._segments = self._segments[:-1]
        return True

    def reset(self, segments: Iterable[str]) -> None:
        self._segments = tuple(_check_segment(s) for s in segments)

    def begin_request(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def __repr__(self) -> str:
        return f"NavigationState(path='/{self.path}', generation={self._generation})"
