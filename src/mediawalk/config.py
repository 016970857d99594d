"""Configuration loading, merging, and validation."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mediawalk.allow_list import DEFAULT_ALLOW_LIST_FILE
from mediawalk.path_buffer import PATH_MAX
from mediawalk.skip_list import SKIP_LIST_ENV_VAR


@dataclass(frozen=True)
class WalkerConfig:
    """Immutable configuration for a walk."""

    root: Path
    locale: str | None = None
    skip_list: str = ""
    allow_list_file: Path | None = DEFAULT_ALLOW_LIST_FILE
    max_path_length: int = PATH_MAX
    log_level: str = "INFO"
    log_file: Path | None = None


_DEFAULTS: dict[str, Any] = {
    "locale": None,
    "skip_list": "",
    "allow_list_file": str(DEFAULT_ALLOW_LIST_FILE),
    "max_path_length": PATH_MAX,
    "log_level": "INFO",
    "log_file": None,
}


def load_config(path: Path) -> dict[str, Any]:
    """Read a TOML config file and return a dict."""
    with path.open("rb") as f:
        return tomllib.load(f)


def merge_config(
    file_config: dict[str, Any],
    cli_overrides: dict[str, Any],
) -> WalkerConfig:
    """Merge defaults, file config, and CLI overrides into a validated config.

    Priority: defaults < file config < CLI overrides.
    The skip list falls back to the MEDIAWALK_SKIPLIST environment variable.
    An empty ``allow_list_file`` disables allow-list mode.
    """
    merged: dict[str, Any] = {**_DEFAULTS}
    merged.update({k: v for k, v in file_config.items() if v is not None})
    merged.update({k: v for k, v in cli_overrides.items() if v is not None})

    if not merged.get("skip_list"):
        env_skip = os.environ.get(SKIP_LIST_ENV_VAR, "")
        if env_skip:
            merged["skip_list"] = env_skip

    if "root" in merged:
        merged["root"] = Path(merged["root"])
    merged["allow_list_file"] = (
        Path(merged["allow_list_file"]) if merged.get("allow_list_file") else None
    )
    merged["log_file"] = Path(merged["log_file"]) if merged.get("log_file") else None

    return _validate(merged)


def _validate(merged: dict[str, Any]) -> WalkerConfig:
    """Validate the merged config and return a WalkerConfig."""
    errors: list[str] = []

    if "root" not in merged:
        errors.append("root is required")

    try:
        max_path_length = int(merged["max_path_length"])
    except (TypeError, ValueError):
        errors.append(f"max_path_length must be an integer: {merged['max_path_length']!r}")
        max_path_length = 0
    else:
        if max_path_length <= 0:
            errors.append("max_path_length must be positive")

    if not isinstance(merged["skip_list"], str):
        errors.append("skip_list must be a comma-separated string")

    if errors:
        raise ValueError("Configuration errors:\n  " + "\n  ".join(errors))

    root = merged["root"]
    if not root.is_dir():
        raise ValueError(f"root does not exist: {root}")

    return WalkerConfig(
        root=root,
        locale=merged.get("locale"),
        skip_list=merged["skip_list"],
        allow_list_file=merged["allow_list_file"],
        max_path_length=max_path_length,
        log_level=merged.get("log_level", _DEFAULTS["log_level"]),
        log_file=merged.get("log_file"),
    )
