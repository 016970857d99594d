"""Receivers for discovered entries and JSON listing output."""

from __future__ import annotations

import json
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Protocol


class ScanCollector(Protocol):
    """Receives every entry the walker discovers.

    ``scan_file`` returns False to signal failure, which aborts the
    remaining traversal.
    """

    def set_locale(self, locale: str | None) -> None: ...

    def scan_file(
        self,
        path: str,
        mtime: int,
        size: int,
        is_directory: bool,
        no_media: bool,
    ) -> bool: ...


@dataclass(frozen=True)
class ScannedEntry:
    """A single reported filesystem entry."""

    path: str
    mtime: int
    size: int
    is_directory: bool
    no_media: bool


class RecordingCollector:
    """Collector that keeps every report in arrival order.

    Args:
        fail_on: Optional predicate; when it returns True for an entry, the
            entry is still recorded and the collector reports failure.
    """

    def __init__(self, fail_on: Callable[[ScannedEntry], bool] | None = None) -> None:
        self.entries: list[ScannedEntry] = []
        self.locale: str | None = None
        self._fail_on = fail_on

    def set_locale(self, locale: str | None) -> None:
        self.locale = locale

    def scan_file(
        self,
        path: str,
        mtime: int,
        size: int,
        is_directory: bool,
        no_media: bool,
    ) -> bool:
        entry = ScannedEntry(
            path=path,
            mtime=mtime,
            size=size,
            is_directory=is_directory,
            no_media=no_media,
        )
        self.entries.append(entry)
        if self._fail_on is not None and self._fail_on(entry):
            return False
        return True

    @property
    def paths(self) -> list[str]:
        return [e.path for e in self.entries]

    @property
    def files(self) -> list[ScannedEntry]:
        return [e for e in self.entries if not e.is_directory]

    @property
    def directories(self) -> list[ScannedEntry]:
        return [e for e in self.entries if e.is_directory]


def build_listing(entries: list[ScannedEntry], metadata: dict[str, Any]) -> dict[str, Any]:
    """Structure collected entries and run metadata into a JSON document."""
    return {
        "entries": [asdict(e) for e in entries],
        "metadata": {
            "root": metadata.get("root"),
            "locale": metadata.get("locale"),
            "result": metadata.get("result"),
            "scanned_at": metadata.get("scanned_at"),
        },
    }


def write_listing(
    entries: list[ScannedEntry],
    output_path: Path,
    metadata: dict[str, Any],
) -> None:
    """Create parent directories and write the listing atomically."""
    document = build_listing(entries, metadata)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path_str = tempfile.mkstemp(
        dir=output_path.parent, suffix=".tmp"
    )
    tmp_path = Path(tmp_path_str)
    try:
        with open(fd, "w", encoding="utf-8", errors="surrogateescape") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        tmp_path.replace(output_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
