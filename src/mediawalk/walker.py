"""Directory walking and media entry discovery."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from mediawalk.allow_list import AllowListPolicy, AllowVerdict
from mediawalk.collector import ScanCollector
from mediawalk.path_buffer import PATH_MAX, SEPARATOR, PathBuffer, PathTooLongError
from mediawalk.result import ScanResult
from mediawalk.skip_list import SkipListPolicy

logger = logging.getLogger(__name__)

# Completely skip any directory containing this file.
NO_SCAN_MARKER = ".noscanandnomtp"
# Treat every file in and below a directory containing this file as non-media.
NO_MEDIA_MARKER = ".nomedia"
HIDDEN_PREFIX = "."
CONTROL_MARKERS = frozenset({NO_SCAN_MARKER, NO_MEDIA_MARKER})


class EntryKind(Enum):
    """What a directory entry turned out to be."""

    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"
    UNKNOWN = "unknown"


def _kind_from_mode(mode: int) -> EntryKind:
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    return EntryKind.OTHER


def resolve_entry_kind(entry: os.DirEntry[str], path: str) -> EntryKind:
    """Classify a directory entry without following symlinks.

    Uses the type reported by the directory listing when available and
    falls back to lstat() on ``path``. A failed lstat yields UNKNOWN.
    """
    try:
        if entry.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        if entry.is_file(follow_symlinks=False):
            return EntryKind.FILE
        return EntryKind.OTHER
    except OSError:
        pass

    try:
        return _kind_from_mode(os.lstat(path).st_mode)
    except OSError as e:
        logger.debug("lstat() failed for %s: %s", path, e)
        return EntryKind.UNKNOWN


@dataclass
class _Frame:
    """One open directory on the walk stack.

    ``mark`` is the buffer fill point to restore once the directory is done.
    """

    mark: int
    no_media: bool
    entries: Iterator[os.DirEntry[str]]


class DirectoryWalker:
    """Depth-first walker that reports files and directories to a collector.

    Args:
        skip_list: Exact directory paths to leave out entirely.
        allow_list: Allow-list policy for the monitored storage roots. It takes
            priority over ``skip_list`` for paths under those roots.
        locale: Locale tag handed to the collector before each walk.
        max_path_length: Byte limit for any path the walker builds.
    """

    def __init__(
        self,
        skip_list: SkipListPolicy | None = None,
        allow_list: AllowListPolicy | None = None,
        *,
        locale: str | None = None,
        max_path_length: int = PATH_MAX,
    ) -> None:
        self._skip_list = skip_list if skip_list is not None else SkipListPolicy()
        self._allow_list = allow_list if allow_list is not None else AllowListPolicy(None)
        self._locale = locale
        self._max_path_length = max_path_length

    @property
    def locale(self) -> str | None:
        return self._locale

    def set_locale(self, locale: str | None) -> None:
        self._locale = locale

    def process_directory(
        self,
        path: str,
        collector: ScanCollector,
        locale: str | None = None,
    ) -> ScanResult:
        """Walk the tree rooted at ``path`` and report every entry.

        Returns SKIPPED if the root is too long (nothing on disk is touched)
        and ERROR as soon as the collector reports a failure.
        """
        try:
            buffer = PathBuffer(path, self._max_path_length)
        except PathTooLongError as e:
            logger.warning("Skipping root: %s", e)
            return ScanResult.SKIPPED

        collector.set_locale(locale if locale is not None else self._locale)

        return self._walk(buffer, collector)

    def should_skip_directory(self, path: str) -> bool:
        """Apply the allow-list, then the skip list when it does not apply."""
        verdict = self._allow_list.verdict(path)
        if verdict is AllowVerdict.ALLOWED:
            return False
        if verdict is AllowVerdict.DENIED:
            return True
        return self._skip_list.is_skipped(path)

    def _walk(self, buffer: PathBuffer, collector: ScanCollector) -> ScanResult:
        opened = self._open_directory(buffer, False, buffer.mark())
        if not isinstance(opened, _Frame):
            return opened

        stack = [opened]
        while stack:
            frame = stack[-1]
            entry = next(frame.entries, None)
            if entry is None:
                stack.pop()
                buffer.truncate_to(frame.mark)
                continue

            mark = buffer.mark()
            outcome = self._process_entry(buffer, collector, frame.no_media, entry, mark)
            if isinstance(outcome, _Frame):
                stack.append(outcome)
                continue

            buffer.truncate_to(mark)
            if outcome is ScanResult.ERROR:
                return ScanResult.ERROR

        return ScanResult.OK

    def _has_marker(self, buffer: PathBuffer, marker: str) -> bool:
        mark = buffer.mark()
        if buffer.append(marker) is not ScanResult.OK:
            return False
        try:
            return os.access(buffer.path, os.F_OK)
        finally:
            buffer.truncate_to(mark)

    def _open_directory(
        self,
        buffer: PathBuffer,
        no_media: bool,
        mark: int,
    ) -> _Frame | ScanResult:
        """Evaluate the directory in ``buffer`` and list its children.

        Returns a frame to descend into, OK for a filtered-out directory or
        SKIPPED when a marker or an open failure stops enumeration.
        """
        path = buffer.path

        if self.should_skip_directory(path):
            logger.debug("Skipping: %s", path)
            return ScanResult.OK

        if self._has_marker(buffer, NO_SCAN_MARKER):
            logger.debug("Found %s in %s, skipping completely", NO_SCAN_MARKER, path)
            return ScanResult.SKIPPED

        if self._has_marker(buffer, NO_MEDIA_MARKER):
            logger.debug("Found %s in %s, setting no-media flag", NO_MEDIA_MARKER, path)
            no_media = True

        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.warning("Error opening directory '%s', skipping: %s", path, e)
            return ScanResult.SKIPPED

        return _Frame(mark=mark, no_media=no_media, entries=iter(entries))

    def _process_entry(
        self,
        buffer: PathBuffer,
        collector: ScanCollector,
        no_media: bool,
        entry: os.DirEntry[str],
        mark: int,
    ) -> _Frame | ScanResult:
        name = entry.name
        if name in (".", ".."):
            return ScanResult.SKIPPED

        # Leave room for the separator a directory would need.
        if buffer.append(name, reserve=1) is not ScanResult.OK:
            logger.debug("Path too long, skipping %s%s", buffer.path, name)
            return ScanResult.SKIPPED
        path = buffer.path

        kind = resolve_entry_kind(entry, path)

        if kind is EntryKind.DIRECTORY:
            child_no_media = no_media or name.startswith(HIDDEN_PREFIX)

            try:
                st = os.stat(path)
            except OSError as e:
                logger.debug("stat() failed for %s: %s", path, e)
            else:
                if not collector.scan_file(path, int(st.st_mtime), 0, True, child_no_media):
                    logger.error("Collector failed on %s, aborting scan", path)
                    return ScanResult.ERROR

            buffer.append(SEPARATOR)
            return self._open_directory(buffer, child_no_media, mark)

        if kind is EntryKind.FILE:
            if name in CONTROL_MARKERS:
                return ScanResult.SKIPPED
            try:
                st = os.stat(path)
            except OSError as e:
                logger.debug("stat() failed for %s: %s", path, e)
                return ScanResult.SKIPPED
            if not collector.scan_file(path, int(st.st_mtime), st.st_size, False, no_media):
                logger.error("Collector failed on %s, aborting scan", path)
                return ScanResult.ERROR

        return ScanResult.OK
