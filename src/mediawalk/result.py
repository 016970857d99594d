"""Traversal outcome shared by every walker step."""

from __future__ import annotations

from enum import Enum


class ScanResult(Enum):
    """Outcome of one traversal step.

    OK means the step was processed normally, SKIPPED means it was
    intentionally left out (not an error), and ERROR means the collector
    signalled failure and the enclosing traversal must stop.
    """

    OK = "ok"
    SKIPPED = "skipped"
    ERROR = "error"
