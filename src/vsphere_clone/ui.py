"""User-facing output sinks used by pipeline steps."""

from typing import Protocol

import click


class Ui(Protocol):
    """Presentation sink read from the build state."""

    def say(self, message: str) -> None: ...

    def message(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ClickUi:
    """Writes progress to stdout and errors to stderr through click."""

    def __init__(self, quiet: bool = False) -> None:
        self.quiet = quiet

    def say(self, message: str) -> None:
        if not self.quiet:
            click.secho(f"==> {message}", bold=True)

    def message(self, message: str) -> None:
        if not self.quiet:
            click.echo(f"    {message}")

    def error(self, message: str) -> None:
        click.secho(f"==> {message}", fg="red", err=True)


class NullUi:
    """Discards everything."""

    def say(self, message: str) -> None:
        pass

    def message(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass
