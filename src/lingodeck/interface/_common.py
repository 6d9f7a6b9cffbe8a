"""Shared helpers for CLI subgroups."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn

import typer

from lingodeck.application.app_data import AppDataStore
from lingodeck.application.config import AppConfig, resolve_config
from lingodeck.application.factory import get_app_data
from lingodeck.domain.errors import (
    ExternalFetchError,
    LingodeckError,
    PartialPersistenceError,
    StructuralValidationError,
)


def _apply_verbosity(verbose: int) -> None:
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger().setLevel(logging.INFO)
    else:
        logging.getLogger().setLevel(logging.WARNING)


def _resolve_with_overrides(ctx: typer.Context | None = None, **overrides: Any) -> AppConfig:
    """Merge global callback options with command-level overrides."""
    merged: dict[str, Any] = {}
    if ctx is not None and isinstance(ctx.obj, dict):
        merged.update(ctx.obj.get("overrides", {}))
    merged.update(overrides)
    config = resolve_config(merged)
    _apply_verbosity(config.verbose)
    return config


def open_app_data(ctx: typer.Context) -> tuple[AppConfig, AppDataStore]:
    config = _resolve_with_overrides(ctx)
    return config, get_app_data(config)


def humanize_error(e: Exception) -> str:
    """Turn an exception into a one-line message for the terminal."""
    if isinstance(e, StructuralValidationError):
        return f"Invalid data: {e}"
    if isinstance(e, PartialPersistenceError):
        return f"Could not save {e.ledger}: {e.cause}"
    if isinstance(e, ExternalFetchError):
        return f"Network error: {e}"
    if isinstance(e, LingodeckError):
        return str(e)
    return f"Unexpected error: {e}"


def fail(e: Exception) -> NoReturn:
    typer.secho(humanize_error(e), fg="red", err=True)
    raise typer.Exit(1)


def read_json_file(path: Path) -> Any:
    """
    Raises:
        StructuralValidationError: If the file does not contain JSON.
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise StructuralValidationError(f"{path.name} is not valid JSON: {e}") from e


def format_ts(epoch_ms: int) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000).strftime("%Y-%m-%d %H:%M")
