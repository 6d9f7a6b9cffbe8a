"""lingodeck CLI: root commands and subgroup registration."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from lingodeck.consts import VERSION
from lingodeck.interface._common import _resolve_with_overrides, open_app_data


# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="lingodeck: spaced-repetition lessons, vocabulary and backups.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

from lingodeck.interface.data_commands import (  # noqa: E402
    backup_app,
    cloud_app,
    history_app,
    vocab_app,
)
from lingodeck.interface.lesson_commands import lessons_app  # noqa: E402

app.add_typer(lessons_app, name="lessons")
app.add_typer(vocab_app, name="vocab")
app.add_typer(history_app, name="history")
app.add_typer(backup_app, name="backup")
app.add_typer(cloud_app, name="cloud")

config_app = typer.Typer(help="Manage lingodeck configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding the ledgers.")
    ] = None,
    language: Annotated[
        str | None, typer.Option("--language", "-l", help="Target language code, e.g. ko.")
    ] = None,
):
    """Global settings for lingodeck."""
    ctx.ensure_object(dict)
    # Unset flags stay None so env and config file values apply
    ctx.obj["overrides"] = {
        "data_dir": data_dir,
        "target_language": language,
        "verbose": verbose or None,
    }


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def version():
    """Print the installed version."""
    typer.echo(VERSION)


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show streak, totals and the SRS level distribution."""
    _, data = open_app_data(ctx)
    summary = data.stats()

    if json_output:
        typer.echo(json.dumps(asdict(summary), indent=2))
        return

    typer.echo(f"Streak: {summary.streak} day(s)")
    typer.echo(
        f"Sessions: {summary.total_sessions}  Words: {summary.total_vocab}  "
        f"Lessons learned: {summary.total_learned_lessons}"
    )
    typer.echo(
        "Levels: " + ", ".join(f"{k} {v}" for k, v in summary.level_counts.items())
    )
    typer.echo("SRS distribution:")
    for level, count in enumerate(summary.srs_distribution):
        typer.echo(f"  L{level}: {'#' * count} {count}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = config.model_dump(mode="json")
    typer.echo(json.dumps(d, indent=2))


@config_app.command("path")
def config_path():
    """Print where the config file is read from."""
    from lingodeck.application.config import config_file_path

    typer.echo(str(config_file_path()))
