"""Tests for collector module."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import pytest

from mediawalk.collector import (
    RecordingCollector,
    ScanCollector,
    ScannedEntry,
    build_listing,
    write_listing,
)


def _entries() -> list[ScannedEntry]:
    return [
        ScannedEntry(path="/r/dcim", mtime=100, size=0, is_directory=True, no_media=False),
        ScannedEntry(path="/r/dcim/a.jpg", mtime=200, size=42, is_directory=False, no_media=False),
    ]


class TestRecordingCollector:
    """Tests for RecordingCollector."""

    def test_satisfies_protocol(self) -> None:
        collector: ScanCollector = RecordingCollector()
        assert collector.scan_file("/x", 1, 2, False, False) is True

    def test_records_in_order(self) -> None:
        collector = RecordingCollector()
        collector.scan_file("/r/dcim", 100, 0, True, False)
        collector.scan_file("/r/dcim/a.jpg", 200, 42, False, False)
        assert collector.entries == _entries()
        assert collector.paths == ["/r/dcim", "/r/dcim/a.jpg"]
        assert [e.path for e in collector.directories] == ["/r/dcim"]
        assert [e.path for e in collector.files] == ["/r/dcim/a.jpg"]

    def test_set_locale(self) -> None:
        collector = RecordingCollector()
        assert collector.locale is None
        collector.set_locale("de_DE")
        assert collector.locale == "de_DE"

    def test_fail_on_records_then_fails(self) -> None:
        collector = RecordingCollector(fail_on=lambda e: e.size > 10)
        assert collector.scan_file("/a", 1, 5, False, False) is True
        assert collector.scan_file("/b", 1, 50, False, False) is False
        assert collector.paths == ["/a", "/b"]


def test_scanned_entry_is_frozen() -> None:
    entry = _entries()[0]
    assert dataclasses.is_dataclass(entry)
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.size = 999  # type: ignore[misc]


def test_build_listing() -> None:
    doc = build_listing(_entries(), {"root": "/r", "locale": "en", "result": "ok", "extra": 1})
    assert doc["metadata"] == {"root": "/r", "locale": "en", "result": "ok", "scanned_at": None}
    assert doc["entries"][1] == {
        "path": "/r/dcim/a.jpg",
        "mtime": 200,
        "size": 42,
        "is_directory": False,
        "no_media": False,
    }


def test_write_listing_creates_parents(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "dir" / "listing.json"
    write_listing(_entries(), out, {"root": "/r", "result": "ok"})

    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["entries"]) == 2
    assert data["metadata"]["result"] == "ok"
    assert not list(out.parent.glob("*.tmp"))


def test_write_listing_overwrites(tmp_path: Path) -> None:
    out = tmp_path / "listing.json"
    out.write_text("stale", encoding="utf-8")
    write_listing([], out, {})
    assert json.loads(out.read_text(encoding="utf-8"))["entries"] == []
