"""Optional allow-list of subdirectories under the monitored storage roots."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_ALLOW_LIST_FILE = Path("/sdcard/.mediascanner_whitelist")
MONITORED_ROOTS: tuple[str, ...] = ("/storage/emulated/0/", "/storage/sdcard0/")
MAX_ALLOW_ENTRIES = 100

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


class AllowVerdict(Enum):
    """Result of testing a path against the allow-list."""

    NOT_APPLICABLE = "not_applicable"
    ALLOWED = "allowed"
    DENIED = "denied"


def ascii_lower(text: str) -> str:
    """Lower-case A-Z only, leaving every other character untouched."""
    return text.translate(_ASCII_LOWER)


def read_allow_list(path: Path, max_entries: int = MAX_ALLOW_ENTRIES) -> list[str] | None:
    """Read allow-list entries from ``path``.

    Returns None when the file is missing or cannot be read (allow-list mode
    disabled). Blank lines are dropped; lines past ``max_entries`` are ignored.
    """
    entries: list[str] = []
    try:
        with path.open("r", encoding="utf-8", errors="surrogateescape") as f:
            for line in f:
                if len(entries) >= max_entries:
                    logger.warning(
                        "Allow-list too long (>%d), ignoring remaining lines", max_entries
                    )
                    break
                line = line.removesuffix("\n")
                if not line:
                    continue
                entries.append(ascii_lower(line))
    except FileNotFoundError:
        logger.info("Allow-list file not found: %s, allow-list mode disabled", path)
        return None
    except OSError as e:
        logger.warning("Cannot read allow-list %s, allow-list mode disabled: %s", path, e)
        return None

    logger.info("Found allow-list %s, %d entries, allow-list mode enabled", path, len(entries))
    for entry in entries:
        logger.debug("allow-list: %s", entry)
    return entries


class AllowListPolicy:
    """Restrict traversal under the monitored roots to listed subdirectories.

    The file is read on the first call to ``verdict`` and cached for the
    lifetime of this object. Construct one instance at startup and share it.
    Passing ``path=None`` disables the policy.
    """

    def __init__(
        self,
        path: Path | None = DEFAULT_ALLOW_LIST_FILE,
        *,
        roots: tuple[str, ...] = MONITORED_ROOTS,
        max_entries: int = MAX_ALLOW_ENTRIES,
    ) -> None:
        self._path = path
        self._roots = tuple(ascii_lower(root) for root in roots)
        self._max_entries = max_entries
        self._entries: tuple[str, ...] | None = None
        self._loaded = False
        self._lock = threading.Lock()

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def enabled(self) -> bool:
        self._ensure_loaded()
        return self._entries is not None

    @property
    def entries(self) -> tuple[str, ...]:
        self._ensure_loaded()
        return self._entries or ()

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            try:
                if self._path is not None:
                    loaded = read_allow_list(self._path, self._max_entries)
                    self._entries = tuple(loaded) if loaded is not None else None
            finally:
                self._loaded = True

    def verdict(self, path: str) -> AllowVerdict:
        """Classify ``path`` against the first monitored root it falls under."""
        self._ensure_loaded()
        if self._entries is None:
            return AllowVerdict.NOT_APPLICABLE

        lowered = ascii_lower(path)
        for root in self._roots:
            if not lowered.startswith(root):
                continue
            if len(lowered) == len(root):
                return AllowVerdict.ALLOWED
            remainder = lowered[len(root):]
            for entry in self._entries:
                if remainder.startswith(entry):
                    logger.debug("In allow-list: %s", path)
                    return AllowVerdict.ALLOWED
            return AllowVerdict.DENIED

        return AllowVerdict.NOT_APPLICABLE
