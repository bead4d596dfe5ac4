"""Main Typer application — imports and registers all CLI commands.

Entry point: ``qgafetch`` (configured via pyproject.toml [project.scripts]).
"""

from __future__ import annotations

import logging

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from qgafetch import __version__
from qgafetch.config import FetchSettings
from qgafetch.cli.commands.acquire import acquire_cmd
from qgafetch.cli.commands.digest import digest_cmd, verify_cmd
from qgafetch.cli.commands.resolve_cmd import resolve_cmd

app = typer.Typer(
    name="qgafetch",
    help="qgafetch: Configuration-Driven, Integrity-Verified Guest Agent Acquisition.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def configure_logging(level: str) -> None:
    """Route log records to stderr through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"qgafetch {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level (default: QGAFETCH_LOG_LEVEL or INFO).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Configure logging for every subcommand."""
    try:
        settings = FetchSettings(log_level=log_level) if log_level else FetchSettings()
    except ValidationError as exc:
        messages = "; ".join(error["msg"] for error in exc.errors())
        raise typer.BadParameter(messages, param_hint="'--log-level' / QGAFETCH_*")
    configure_logging(settings.log_level)


# Register subcommands
app.command(name="resolve", help="Show which installer the configuration selects.")(resolve_cmd)
app.command(name="acquire", help="Download and verify the guest agent installer.")(acquire_cmd)
app.command(name="digest", help="Print the SHA-256 of a file.")(digest_cmd)
app.command(name="verify", help="Verify a file against an expected SHA-256.")(verify_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
