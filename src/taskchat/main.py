"""Main entry point for the taskchat CLI."""

import typer

from taskchat import __version__
from taskchat.commands import backends_command, config_command, tasks_command
from taskchat.utils.ui.console import get_console

app = typer.Typer(
    name="taskchat",
    help="Query, filter and sort tasks from an indexed Markdown vault",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(tasks_command.app, name="tasks", help="Query and count tasks")
app.add_typer(backends_command.app, name="backends", help="Task indexing backends")
app.add_typer(config_command.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]taskchat[/bold] version [cyan]{__version__}[/cyan]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
