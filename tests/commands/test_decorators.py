"""Unit tests for command decorators."""

import typer
from typer.testing import CliRunner

from taskchat.commands.decorators import AppError, command_wrapper

runner = CliRunner()


def _app(func) -> typer.Typer:
    app = typer.Typer()
    app.command()(command_wrapper(func))
    # a second command keeps typer from collapsing the app into one command
    app.command("noop")(lambda: None)
    return app


def test_sync_command_runs():
    def hello():
        typer.echo("hi")

    result = runner.invoke(_app(hello), ["hello"])
    assert result.exit_code == 0
    assert "hi" in result.output


def test_async_command_runs():
    async def hello(name: str = typer.Option("x", "--name")):
        typer.echo(f"hi {name}")

    result = runner.invoke(_app(hello), ["hello", "--name", "bob"])
    assert result.exit_code == 0
    assert "hi bob" in result.output


def test_app_error_sets_exit_code():
    async def broken():
        raise AppError("backend gone", exit_code=4)

    result = runner.invoke(_app(broken), ["broken"])
    assert result.exit_code == 4
    assert "backend gone" in result.output


def test_unexpected_error_exits_1():
    def broken():
        raise KeyError("boom")

    result = runner.invoke(_app(broken), ["broken"])
    assert result.exit_code == 1
    assert "An unexpected error occurred" in result.output


def test_typer_exit_passes_through():
    def leave():
        raise typer.Exit(code=3)

    result = runner.invoke(_app(leave), ["leave"])
    assert result.exit_code == 3
