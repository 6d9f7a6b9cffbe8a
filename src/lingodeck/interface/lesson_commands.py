"""`lingodeck lessons` subgroup: catalog, import, completion, deletion."""

from pathlib import Path
from typing import Annotated

import typer

from lingodeck.application.catalog import LibraryFilter, filter_library, level_group
from lingodeck.application.srs_scheduler import ReviewKind
from lingodeck.domain.errors import LingodeckError
from lingodeck.interface._common import fail, format_ts, open_app_data, read_json_file

lessons_app = typer.Typer(help="Browse, import and review lessons.", no_args_is_help=True)


def _status_label(kind: ReviewKind, days_left: int | None) -> str:
    if kind == ReviewKind.WAITING:
        return f"in {days_left}d"
    return kind.value


@lessons_app.command("due")
def due(ctx: typer.Context):
    """List lessons due for review, soonest first."""
    config, data = open_app_data(ctx)
    view = data.resolve_catalog(config.target_language)

    if not view.due:
        typer.secho("Nothing due. Come back later!", fg="green")
        return

    for lesson in view.due:
        state = data.progress[lesson.id]
        typer.echo(
            f"{lesson.id}  {lesson.title}  "
            f"(level {state.srs_level}, due since {format_ts(state.next_review)})"
        )


@lessons_app.command("library")
def library(
    ctx: typer.Context,
    search: Annotated[str, typer.Option(help="Match title or topic.")] = "",
    kind: Annotated[LibraryFilter, typer.Option(help="Filter chip.")] = LibraryFilter.ALL,
):
    """List lessons that are not due, with their review status."""
    config, data = open_app_data(ctx)
    view = data.resolve_catalog(config.target_language)
    lessons = filter_library(view.library, search=search, kind=kind)

    if not lessons:
        typer.secho("No lessons match.", fg="yellow")
        return

    for lesson in lessons:
        status = data.review_status(lesson.id)
        typer.echo(
            f"{lesson.id}  {lesson.title}  [{lesson.type.value}, {level_group(lesson.level)}]  "
            f"{_status_label(status.kind, status.days_left)}"
        )


@lessons_app.command("import")
def import_lesson(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Lesson JSON file.", exists=True, dir_okay=False)],
):
    """Import (or update) a custom lesson from a JSON file."""
    config, data = open_app_data(ctx)
    try:
        lesson = data.import_lesson(read_json_file(path), config.target_language)
    except LingodeckError as e:
        fail(e)
    typer.secho(f"Imported: \"{lesson.title}\" ({lesson.type.value}) as {lesson.id}", fg="green")


@lessons_app.command("complete")
def complete(
    ctx: typer.Context,
    lesson_id: Annotated[str, typer.Argument(help="Lesson id.")],
):
    """Mark a lesson as reviewed and schedule the next review."""
    _, data = open_app_data(ctx)
    if data.find_lesson(lesson_id) is None:
        typer.secho(f"Unknown lesson: {lesson_id}", fg="red", err=True)
        raise typer.Exit(1)
    try:
        state = data.advance(lesson_id)
    except LingodeckError as e:
        fail(e)
    typer.secho(
        f"{lesson_id}: level {state.srs_level}, next review {format_ts(state.next_review)}",
        fg="green",
    )


@lessons_app.command("delete")
def delete(
    ctx: typer.Context,
    lesson_id: Annotated[str, typer.Argument(help="Custom lesson id.")],
):
    """Delete a custom lesson and its review progress."""
    _, data = open_app_data(ctx)
    try:
        removed = data.delete_custom_lesson(lesson_id)
    except LingodeckError as e:
        fail(e)
    if not removed:
        typer.secho(f"No custom lesson with id {lesson_id}.", fg="yellow")
        raise typer.Exit(1)
    typer.secho(f"Deleted {lesson_id}.", fg="green")
