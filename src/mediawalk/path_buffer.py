"""Bounded scratch path reused for a whole traversal."""

from __future__ import annotations

import os

from mediawalk.result import ScanResult

PATH_MAX = 4096
SEPARATOR = "/"


class PathTooLongError(ValueError):
    """The root path does not fit in the buffer."""


def _byte_length(text: str) -> int:
    return len(os.fsencode(text))


class PathBuffer:
    """A path string with a hard byte capacity.

    Segments are appended at the fill point and removed again with
    ``truncate_to(mark)``. Appends that would exceed the capacity are
    rejected, never truncated.
    """

    def __init__(self, root: str, max_length: int = PATH_MAX) -> None:
        length = _byte_length(root)
        if length >= max_length:
            raise PathTooLongError(
                f"path is {length} bytes, limit is {max_length}: {root!r}"
            )
        self._max_length = max_length
        self._text = root
        self._remaining = max_length - length
        if root and not root.endswith(SEPARATOR):
            self._text += SEPARATOR
            self._remaining -= 1

    @property
    def path(self) -> str:
        return self._text

    @property
    def remaining(self) -> int:
        """Bytes still available after the fill point."""
        return self._remaining

    @property
    def max_length(self) -> int:
        return self._max_length

    def __len__(self) -> int:
        return self._max_length - self._remaining

    def mark(self) -> int:
        """Return the current fill point for a later ``truncate_to``."""
        return len(self._text)

    def fits(self, segment: str, reserve: int = 0) -> bool:
        return _byte_length(segment) + reserve <= self._remaining

    def append(self, segment: str, reserve: int = 0) -> ScanResult:
        """Write ``segment`` at the fill point.

        ``reserve`` bytes must stay free afterwards (room for a trailing
        separator). Returns SKIPPED without touching the buffer when the
        segment does not fit.
        """
        size = _byte_length(segment)
        if size + reserve > self._remaining:
            return ScanResult.SKIPPED
        self._text += segment
        self._remaining -= size
        return ScanResult.OK

    def truncate_to(self, mark: int) -> None:
        """Drop everything written after ``mark``."""
        if mark < 0 or mark > len(self._text):
            raise ValueError(f"invalid mark {mark} for path of length {len(self._text)}")
        dropped = self._text[mark:]
        self._text = self._text[:mark]
        self._remaining += _byte_length(dropped)
