"""Configuration management commands."""

from typing import Any

import typer
from pydantic import BaseModel, ValidationError

from taskchat.services.config_service import get_config_service
from taskchat.utils.exit_codes import ERROR_INVALID_ARGS
from taskchat.utils.ui.formatters import format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Configuration management commands")


def parse_value(raw: str, current: Any) -> Any:
    """Convert a command-line string to the shape of the current value.

    Lists are given comma-separated; "null" clears an optional value. Other
    strings are left for pydantic to coerce.
    """
    if raw.lower() in ("null", "none") and not isinstance(current, (list, bool)):
        return None
    if isinstance(current, list):
        return [part.strip() for part in raw.split(",") if part.strip()]
    if isinstance(current, bool):
        return raw.lower() in ("true", "yes", "1", "on")
    return raw


def _lookup(key: str) -> Any:
    try:
        return get_config_service().get_value(key)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", ERROR_INVALID_ARGS) from e


@app.command("view")
@command_wrapper
def view_config(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    format_output(get_config_service().config.model_dump(), output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., backend.preference)"),
) -> None:
    """Get a configuration value."""
    value = _lookup(key)
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if isinstance(value, (dict, list)):
        format_output(value, "json")
    else:
        typer.echo(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., backend.preference)"),
    value: str = typer.Argument(..., help="New value; lists are comma-separated"),
) -> None:
    """Set a configuration value."""
    parsed = parse_value(value, _lookup(key))
    try:
        get_config_service().set_value(key, parsed)
    except ValidationError as e:
        raise AppError(f"Invalid value for '{key}': {e}", ERROR_INVALID_ARGS) from e
    format_success(f"Configuration '{key}' set to '{parsed}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        target = f"'{key}'" if key else "entire configuration"
        if not typer.confirm(f"Are you sure you want to reset {target}?"):
            raise typer.Exit(0)

    service = get_config_service()
    if key:
        _lookup(key)
        try:
            service.reset_value(key)
        except KeyError as e:
            raise AppError(f"Configuration key '{key}' has no default", ERROR_INVALID_ARGS) from e
        format_success(f"Configuration '{key}' reset to default")
    else:
        service.reset_config()
        format_success("Configuration reset to defaults")
