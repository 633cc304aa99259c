"""Backends command - inspect and wait for the task indexing backends."""

import typer

from taskchat.services.config_service import get_config_service
from taskchat.services.engine_context import close_clients, get_task_query_service
from taskchat.utils.exit_codes import ERROR_BACKEND_UNAVAILABLE
from taskchat.utils.ui.formatters import format_output, format_success, format_warning

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Task indexing backends")


@app.command("status")
@command_wrapper
async def status(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Show which backends are available and which one is active."""
    preference = get_config_service().config.backend.preference
    service = get_task_query_service()
    try:
        summary = await service.selector.describe(preference)
    finally:
        await close_clients(service)
    format_output(summary, output)
    if summary["active"] is None:
        format_warning("No task indexing backend is available")


@app.command("wait")
@command_wrapper
async def wait(
    attempts: int | None = typer.Option(
        None, "--attempts", help="Maximum polling attempts"
    ),
    interval: int | None = typer.Option(
        None, "--interval", help="Delay between attempts in milliseconds"
    ),
) -> None:
    """Wait until a task indexing backend is ready."""
    settings = get_config_service().config.backend
    service = get_task_query_service()
    try:
        ready = await service.selector.wait_for_ready(
            max_attempts=attempts or settings.ready_max_attempts,
            interval_ms=interval if interval is not None else settings.ready_interval_ms,
            preference=settings.preference,
        )
    finally:
        await close_clients(service)

    if not ready:
        raise AppError("No task indexing backend became ready", ERROR_BACKEND_UNAVAILABLE)
    format_success("Task indexing backend is ready")
