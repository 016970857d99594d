"""CLI entry point for mediawalk."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import typer

from mediawalk import __version__
from mediawalk.allow_list import DEFAULT_ALLOW_LIST_FILE, AllowListPolicy
from mediawalk.collector import RecordingCollector, write_listing
from mediawalk.config import WalkerConfig, load_config, merge_config
from mediawalk.logging_setup import setup_logging
from mediawalk.path_buffer import SEPARATOR
from mediawalk.reporter import compute_statistics, format_report
from mediawalk.result import ScanResult
from mediawalk.skip_list import SKIP_LIST_ENV_VAR, SkipListPolicy
from mediawalk.walker import DirectoryWalker

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="mediawalk",
    help="Walk a directory tree and report media-relevant files and directories.",
    invoke_without_command=True,
    no_args_is_help=True,
)

_EXIT_CODES = {
    ScanResult.OK: 0,
    ScanResult.ERROR: 1,
    ScanResult.SKIPPED: 2,
}


def _build_config(config: Optional[str], cli_overrides: dict[str, Any]) -> WalkerConfig:
    """Load the optional TOML config and merge CLI overrides into it."""
    file_config: dict[str, Any] = {}
    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            raise ValueError(f"Config file not found: {config_path}")
        file_config = load_config(config_path)
    return merge_config(file_config, cli_overrides)


def _build_walker(cfg: WalkerConfig) -> DirectoryWalker:
    return DirectoryWalker(
        SkipListPolicy(cfg.skip_list),
        AllowListPolicy(cfg.allow_list_file),
        locale=cfg.locale,
        max_path_length=cfg.max_path_length,
    )


@app.command()
def scan(
    config: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file"),
    root: Optional[str] = typer.Option(None, "--root", help="Directory to walk (overrides config)"),
    locale: Optional[str] = typer.Option(None, "--locale", help="Locale tag passed to the collector"),
    skip_list: Optional[str] = typer.Option(None, "--skip-list", help="Comma-separated directories to skip"),
    allow_list: Optional[str] = typer.Option(None, "--allow-list", help="Allow-list file (empty string disables)"),
    output: Optional[str] = typer.Option(None, "--output", help="Write the JSON listing to this file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override log level"),
) -> None:
    """Walk a directory tree and summarise what was found."""
    try:
        cfg = _build_config(config, {
            "root": root,
            "locale": locale,
            "skip_list": skip_list,
            "allow_list_file": allow_list,
            "log_level": log_level,
        })
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    setup_logging(cfg.log_level, cfg.log_file)

    logger.info("mediawalk v%s, scanning %s", __version__, cfg.root)
    if cfg.skip_list:
        logger.info("Skip list: %s", cfg.skip_list)

    walker = _build_walker(cfg)
    collector = RecordingCollector()
    result = walker.process_directory(str(cfg.root), collector)

    if result is ScanResult.ERROR:
        logger.error("Scan aborted after %d entries", len(collector.entries))
    elif result is ScanResult.SKIPPED:
        logger.warning("Root was skipped: %s", cfg.root)

    if output is not None:
        write_listing(collector.entries, Path(output), {
            "root": str(cfg.root),
            "locale": collector.locale,
            "result": result.value,
            "scanned_at": datetime.now(timezone.utc).isoformat(),
        })
        logger.info("Listing written to %s", output)

    typer.echo(format_report(compute_statistics(collector.entries), result))
    raise typer.Exit(code=_EXIT_CODES[result])


@app.command()
def check(
    path: str = typer.Argument(..., help="Directory path to test against the policies"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file"),
    skip_list: Optional[str] = typer.Option(None, "--skip-list", help="Comma-separated directories to skip"),
    allow_list: Optional[str] = typer.Option(None, "--allow-list", help="Allow-list file (empty string disables)"),
) -> None:
    """Show how the skip list and allow-list treat a directory path."""
    file_config: dict[str, Any] = {}
    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Error: Config file not found: {config_path}", err=True)
            raise typer.Exit(code=1)
        try:
            file_config = load_config(config_path)
        except ValueError as e:
            typer.echo(f"Error: Invalid config file {config_path}: {e}", err=True)
            raise typer.Exit(code=1)

    skip_value = skip_list if skip_list is not None else file_config.get("skip_list", "")
    if not skip_value:
        skip_value = os.environ.get(SKIP_LIST_ENV_VAR, "")

    allow_value = allow_list if allow_list is not None else file_config.get(
        "allow_list_file", str(DEFAULT_ALLOW_LIST_FILE)
    )
    allow_path = Path(allow_value) if allow_value else None

    if not path.endswith(SEPARATOR):
        path += SEPARATOR

    skip_policy = SkipListPolicy(skip_value)
    allow_policy = AllowListPolicy(allow_path)
    walker = DirectoryWalker(skip_policy, allow_policy)

    typer.echo(f"path: {path}")
    typer.echo(f"allow-list: {allow_policy.verdict(path).value}")
    typer.echo(f"skip-list: {'skipped' if skip_policy.is_skipped(path) else 'not skipped'}")
    typer.echo(f"walk: {'skip' if walker.should_skip_directory(path) else 'visit'}")


@app.command()
def version() -> None:
    """Print version and exit."""
    typer.echo(f"mediawalk {__version__}")
