"""Deny-list of exact directory paths excluded from traversal."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

SKIP_LIST_ENV_VAR = "MEDIAWALK_SKIPLIST"


class SkipListPolicy:
    """Answer whether a path is deny-listed.

    Built from a comma-separated string of absolute directory paths. A
    candidate matches only when it equals an entry exactly; entries are
    whole paths, not prefixes or patterns. An empty or missing string
    yields a policy that never skips.
    """

    def __init__(self, raw: str | None = None) -> None:
        self._entries: frozenset[str] = frozenset(
            segment for segment in (raw or "").split(",") if segment
        )
        if self._entries:
            logger.debug("Skip list has %d entries", len(self._entries))

    @property
    def entries(self) -> frozenset[str]:
        return self._entries

    @property
    def enabled(self) -> bool:
        return bool(self._entries)

    def is_skipped(self, path: str) -> bool:
        return path in self._entries
