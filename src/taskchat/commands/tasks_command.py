"""Tasks command - query, filter and count tasks from the indexing backend."""

import typer
from pydantic import ValidationError

from taskchat.models import (
    DateRange,
    FilterSpec,
    LocationFilters,
    PropertyFilters,
    SortSpec,
)
from taskchat.services.config_service import get_config_service
from taskchat.services.engine_context import close_clients, get_task_query_service
from taskchat.utils.exit_codes import ERROR_INVALID_ARGS
from taskchat.utils.ui.formatters import format_output

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Query tasks")

FolderOpt = typer.Option(None, "--folder", "-f", help="Include tasks under a folder")
NoteOpt = typer.Option(None, "--note", "-n", help="Include tasks of a note")
NoteTagOpt = typer.Option(None, "--note-tag", help="Include notes with a tag")
TaskTagOpt = typer.Option(None, "--task-tag", "-t", help="Include tasks with a tag")
ExFolderOpt = typer.Option(None, "--exclude-folder", help="Exclude a folder")
ExNoteOpt = typer.Option(None, "--exclude-note", help="Exclude a note")
ExNoteTagOpt = typer.Option(None, "--exclude-note-tag", help="Exclude notes with a tag")
ExTaskTagOpt = typer.Option(None, "--exclude-task-tag", help="Exclude tasks with a tag")
PriorityOpt = typer.Option(
    None, "--priority", "-p", help="Priority: all, none, or comma-separated levels"
)
DueOpt = typer.Option(
    None, "--due", help="Due bucket (today, overdue, week, ...) or YYYY-MM-DD"
)
DueFromOpt = typer.Option(None, "--due-from", help="Range start (keyword or date)")
DueToOpt = typer.Option(None, "--due-to", help="Range end (keyword or date)")
StatusOpt = typer.Option(None, "--status", "-s", help="Status symbol, category or alias")
BackendOpt = typer.Option(
    None, "--backend", "-b", help="Backend to query: auto, datacore or dataview"
)

BACKEND_CHOICES = ("auto", "datacore", "dataview")


def parse_priority(value: str | None):
    """Parse the --priority option into a PropertyFilters value."""
    if value is None:
        return None
    value = value.strip().lower()
    if value in ("all", "any", "none"):
        return value
    try:
        levels = [int(part) for part in value.split(",") if part.strip()]
    except ValueError as e:
        raise AppError(f"Invalid priority: {value}", ERROR_INVALID_ARGS) from e
    return levels[0] if len(levels) == 1 else levels


def parse_backend(value: str | None):
    """Validate the --backend option."""
    if value is None:
        return None
    value = value.strip().lower()
    if value not in BACKEND_CHOICES:
        raise AppError(f"Invalid backend: {value}", ERROR_INVALID_ARGS)
    return value


def build_filter_spec(
    folder: list[str] | None = None,
    note: list[str] | None = None,
    note_tag: list[str] | None = None,
    task_tag: list[str] | None = None,
    exclude_folder: list[str] | None = None,
    exclude_note: list[str] | None = None,
    exclude_note_tag: list[str] | None = None,
    exclude_task_tag: list[str] | None = None,
    priority: str | None = None,
    due: list[str] | None = None,
    due_from: str | None = None,
    due_to: str | None = None,
    status: list[str] | None = None,
) -> FilterSpec:
    """Build a FilterSpec from CLI options."""
    due_range = None
    if due_from or due_to:
        due_range = DateRange(start=due_from, end=due_to)
    try:
        return FilterSpec(
            inclusions=LocationFilters(
                folders=folder or [],
                notes=note or [],
                note_tags=note_tag or [],
                task_tags=task_tag or [],
            ),
            exclusions=LocationFilters(
                folders=exclude_folder or [],
                notes=exclude_note or [],
                note_tags=exclude_note_tag or [],
                task_tags=exclude_task_tag or [],
            ),
            properties=PropertyFilters(
                priority=parse_priority(priority),
                due_date=due or None,
                due_date_range=due_range,
                status_values=status or None,
            ),
        )
    except ValidationError as e:
        raise AppError(f"Invalid filter: {e}", ERROR_INVALID_ARGS) from e


@app.command("list")
@command_wrapper
async def list_tasks(
    folder: list[str] | None = FolderOpt,
    note: list[str] | None = NoteOpt,
    note_tag: list[str] | None = NoteTagOpt,
    task_tag: list[str] | None = TaskTagOpt,
    exclude_folder: list[str] | None = ExFolderOpt,
    exclude_note: list[str] | None = ExNoteOpt,
    exclude_note_tag: list[str] | None = ExNoteTagOpt,
    exclude_task_tag: list[str] | None = ExTaskTagOpt,
    priority: str | None = PriorityOpt,
    due: list[str] | None = DueOpt,
    due_from: str | None = DueFromOpt,
    due_to: str | None = DueToOpt,
    status: list[str] | None = StatusOpt,
    backend: str | None = BackendOpt,
    sort: list[str] | None = typer.Option(
        None, "--sort", help="Sort criteria in order (dueDate, priority, ...)"
    ),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    limit: int | None = typer.Option(None, "--limit", help="Show at most N tasks"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
    json_opt: bool = typer.Option(
        False, "--json", help="Output as JSON (alias for --output json)"
    ),
) -> None:
    """List tasks matching the filters."""
    if json_opt:
        output = "json"

    filter_spec = build_filter_spec(
        folder, note, note_tag, task_tag,
        exclude_folder, exclude_note, exclude_note_tag, exclude_task_tag,
        priority, due, due_from, due_to, status,
    )
    preference = parse_backend(backend)
    defaults = get_config_service().config.sort
    try:
        sort_spec = SortSpec(
            criteria=sort or defaults.criteria,
            direction="desc" if desc else defaults.direction,
        )
    except ValidationError as e:
        raise AppError(f"Invalid sort criteria: {sort}", ERROR_INVALID_ARGS) from e

    service = get_task_query_service()
    try:
        tasks = await service.query_tasks(filter_spec, sort_spec, preference=preference)
    finally:
        await close_clients(service)

    if limit is not None:
        tasks = tasks[:limit]
    format_output({"tasks": [t.model_dump() for t in tasks]}, output)


@app.command("count")
@command_wrapper
async def count_tasks(
    folder: list[str] | None = FolderOpt,
    note: list[str] | None = NoteOpt,
    note_tag: list[str] | None = NoteTagOpt,
    task_tag: list[str] | None = TaskTagOpt,
    exclude_folder: list[str] | None = ExFolderOpt,
    exclude_note: list[str] | None = ExNoteOpt,
    exclude_note_tag: list[str] | None = ExNoteTagOpt,
    exclude_task_tag: list[str] | None = ExTaskTagOpt,
    priority: str | None = PriorityOpt,
    due: list[str] | None = DueOpt,
    due_from: str | None = DueFromOpt,
    due_to: str | None = DueToOpt,
    status: list[str] | None = StatusOpt,
    backend: str | None = BackendOpt,
    json_opt: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Count tasks matching the filters."""
    filter_spec = build_filter_spec(
        folder, note, note_tag, task_tag,
        exclude_folder, exclude_note, exclude_note_tag, exclude_task_tag,
        priority, due, due_from, due_to, status,
    )
    preference = parse_backend(backend)
    service = get_task_query_service()
    try:
        count = await service.count_tasks(filter_spec, preference=preference)
    finally:
        await close_clients(service)

    if json_opt:
        format_output({"count": count}, "json")
    else:
        typer.echo(count)
