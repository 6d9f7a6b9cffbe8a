"""Subgroups for the personal ledgers: vocabulary, history, backups and cloud sync."""

import asyncio
from datetime import date
from pathlib import Path
from typing import Annotated

import typer

from lingodeck.application.app_data import RestoreReport, backup_filename
from lingodeck.application.factory import get_remote_store
from lingodeck.application.snapshot_merge import MergePolicy
from lingodeck.application.vocabulary import entries_for, search_vocabulary
from lingodeck.domain.errors import LingodeckError
from lingodeck.interface._common import fail, format_ts, open_app_data, read_json_file

vocab_app = typer.Typer(help="Practiced vocabulary.", no_args_is_help=True)
history_app = typer.Typer(help="Practice session history.", no_args_is_help=True)
backup_app = typer.Typer(help="Export and import snapshot files.", no_args_is_help=True)
cloud_app = typer.Typer(help="Share snapshots through a paste service.", no_args_is_help=True)


def _print_report(report: RestoreReport) -> None:
    if report.ok:
        typer.secho(f"Restore complete ({report.policy.value}).", fg="green")
        return
    typer.secho(
        f"Restore partially failed. Saved: {', '.join(report.persisted) or 'nothing'}.",
        fg="yellow",
    )
    for failure in report.failures:
        typer.secho(f"  {failure}", fg="red", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------


@vocab_app.command("record")
def vocab_record(
    ctx: typer.Context,
    words: Annotated[list[str], typer.Argument(help="Words as they appeared in the lesson.")],
    language: Annotated[str | None, typer.Option(help="Defaults to the target language.")] = None,
):
    """Count one occurrence of each word."""
    config, data = open_app_data(ctx)
    try:
        data.record_occurrences(words, language or config.target_language)
    except LingodeckError as e:
        fail(e)
    typer.echo(f"Vocabulary size: {len(data.vocabulary)}")


@vocab_app.command("list")
def vocab_list(
    ctx: typer.Context,
    language: Annotated[str | None, typer.Option(help="Defaults to the target language.")] = None,
    search: Annotated[str, typer.Option(help="Substring to look for.")] = "",
    limit: Annotated[int, typer.Option(help="Maximum rows.")] = 50,
):
    """Show the most frequent words first."""
    config, data = open_app_data(ctx)
    lang = language or config.target_language
    entries = (
        search_vocabulary(data.vocabulary, search, lang)
        if search
        else entries_for(data.vocabulary, lang)
    )
    if not entries:
        typer.secho("No words yet.", fg="yellow")
        return
    for entry in entries[:limit]:
        typer.echo(f"{entry.count:>5}  {entry.text}  (last seen {format_ts(entry.last_seen)})")


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


@history_app.command("list")
def history_list(ctx: typer.Context):
    """List saved sessions, newest first."""
    _, data = open_app_data(ctx)
    if not data.history:
        typer.secho("No sessions yet.", fg="yellow")
        return
    for s in data.history:
        restart = "" if s.can_restart else "  (legacy)"
        typer.echo(
            f"{s.id}  {format_ts(s.timestamp)}  {s.topic}  "
            f"[{s.lesson_type.value}, {s.target_lang}]  {len(s.messages)} msgs{restart}"
        )


@history_app.command("delete")
def history_delete(
    ctx: typer.Context,
    session_id: Annotated[str, typer.Argument(help="Session id.")],
):
    """Delete one session from history."""
    _, data = open_app_data(ctx)
    try:
        removed = data.delete_session(session_id)
    except LingodeckError as e:
        fail(e)
    if not removed:
        typer.secho(f"No session with id {session_id}.", fg="yellow")
        raise typer.Exit(1)
    typer.secho(f"Deleted {session_id}.", fg="green")


# ---------------------------------------------------------------------------
# Backup files
# ---------------------------------------------------------------------------


@backup_app.command("export")
def backup_export(
    ctx: typer.Context,
    path: Annotated[Path | None, typer.Argument(help="Output file.")] = None,
):
    """Write a full snapshot of all ledgers to a JSON file."""
    _, data = open_app_data(ctx)
    target = path or Path.cwd() / backup_filename(date.today())
    target.write_text(data.export_json(), encoding="utf-8")
    typer.secho(f"Exported to {target}", fg="green")


@backup_app.command("import")
def backup_import(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Snapshot file.", exists=True, dir_okay=False)],
    policy: Annotated[
        MergePolicy | None,
        typer.Option(help="'smart' merges; 'overwrite' replaces local data (lossy)."),
    ] = None,
):
    """Merge a snapshot file into local data."""
    config, data = open_app_data(ctx)
    try:
        report = data.restore(read_json_file(path), policy or config.merge_policy)
    except LingodeckError as e:
        fail(e)
    _print_report(report)


# ---------------------------------------------------------------------------
# Cloud (paste service)
# ---------------------------------------------------------------------------


@cloud_app.command("push")
def cloud_push(ctx: typer.Context):
    """Upload a snapshot and print its URL."""
    config, data = open_app_data(ctx)
    remote = get_remote_store(config)

    async def run() -> str:
        try:
            return await remote.upload(data.export_snapshot())
        finally:
            await remote.aclose()

    try:
        url = asyncio.run(run())
    except LingodeckError as e:
        fail(e)
    typer.echo(url)


@cloud_app.command("pull")
def cloud_pull(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="URL printed by 'cloud push'.")],
    policy: Annotated[
        MergePolicy | None,
        typer.Option(help="'smart' merges; 'overwrite' replaces local data (lossy)."),
    ] = None,
):
    """Download a snapshot and merge it into local data."""
    config, data = open_app_data(ctx)
    remote = get_remote_store(config)

    async def run() -> dict:
        try:
            return await remote.download(url)
        finally:
            await remote.aclose()

    try:
        report = data.restore(asyncio.run(run()), policy or config.merge_policy)
    except LingodeckError as e:
        fail(e)
    _print_report(report)
