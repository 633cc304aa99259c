"""Output formatters for different formats."""

import json
from datetime import date
from typing import Any

import yaml
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from taskchat.utils.ui.console import get_console

console = get_console()
err_console = get_console(stderr=True)

STATUS_ICONS = {
    "open": "☐",
    "inProgress": "◐",
    "completed": "☑",
    "cancelled": "☒",
}
PRIORITY_COLORS = {1: "bold red", 2: "yellow", 3: "blue", 4: "dim"}


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True))
    elif output_format == "table":
        format_table(data)
    else:
        format_pretty(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, dict) and "tasks" in data:
        data = data["tasks"]

    if isinstance(data, list):
        if not data:
            console.print("[yellow]No items found[/yellow]")
            return
        if isinstance(data[0], dict):
            format_dict_table(data)
        else:
            for item in data:
                console.print(f"• {item}")
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    return str(value)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())
    for item in items:
        table.add_row(*(_cell(item.get(col)) for col in columns))
    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for key, value in item.items():
        if isinstance(value, dict):
            value = ", ".join(f"{k}={_cell(v)}" for k, v in value.items())
        table.add_row(key.replace("_", " ").title(), _cell(value))
    console.print(table)


def format_pretty(data: Any) -> None:
    """Format data in pretty format with colors and icons."""
    if isinstance(data, dict) and "tasks" in data:
        format_tasks_pretty(data["tasks"])
    elif isinstance(data, dict):
        format_single_item(data)
    elif isinstance(data, list):
        format_table(data)
    else:
        console.print(data)


def format_tasks_pretty(tasks: list[dict]) -> None:
    """Format tasks grouped by document."""
    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    header = Text()
    header.append("📋 Tasks ", style="bold cyan")
    header.append(f"({len(tasks)})", style="dim")
    console.print(header)
    console.print()

    current_path = None
    for task in tasks:
        if task.get("source_path") != current_path:
            if current_path is not None:
                console.print()
            current_path = task.get("source_path")
            console.print(f"[bold]{current_path}[/bold]")
        format_task_item(task, indent="  ")


def format_task_item(task: dict, indent: str = "") -> None:
    """Format a single task line."""
    line = Text(indent)
    icon = STATUS_ICONS.get(task.get("status_category", ""), "?")
    line.append(f"{icon} ")
    priority = task.get("priority")
    line.append(task.get("text") or "", style=PRIORITY_COLORS.get(priority, ""))
    due = task.get("due_date")
    if due:
        line.append(f"  📅 {format_due_date(due)}", style=_due_style(due))
    tags = task.get("tags") or []
    if tags:
        line.append("  " + " ".join(tags), style="cyan")
    console.print(line)


def _due_style(due: str) -> str:
    today = date.today().isoformat()
    if due < today:
        return "bold red"
    if due == today:
        return "yellow"
    return "dim"


def format_due_date(due: str) -> str:
    """Format an ISO due date as 'YYYY-MM-DD Day'."""
    try:
        day = date.fromisoformat(due)
    except ValueError:
        return due
    return f"{due} {day.strftime('%a')}"


def format_error(message: str) -> None:
    """Format and display an error message."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {escape(message)}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    err_console.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")
