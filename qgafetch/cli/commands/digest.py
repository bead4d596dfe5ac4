"""``qgafetch digest`` and ``qgafetch verify`` — standalone checksum tools."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from qgafetch.config import FetchSettings
from qgafetch.core.errors import DigestIOError, FormatError, VerificationError
from qgafetch.core.hasher import compute_file_digest
from qgafetch.core.schema import validate_digest_format
from qgafetch.core.verifier import verify_artifact
from qgafetch.cli.commands._common import render_error

console = Console()


def digest_cmd(
    file: Path = typer.Argument(..., help="File to hash."),
) -> None:
    """Print the canonical (lowercase) SHA-256 of a file."""
    settings = FetchSettings()
    try:
        digest = compute_file_digest(file, settings.chunk_size)
    except DigestIOError as exc:
        render_error(console, exc)
        raise typer.Exit(code=exc.exit_code)
    console.print(f"{digest}  {file}", highlight=False, soft_wrap=True)


def verify_cmd(
    file: Path = typer.Argument(..., help="File to verify."),
    expected: str = typer.Argument(..., help="Expected SHA-256 (any case)."),
) -> None:
    """Verify a file against an expected SHA-256.

    The file is deleted if it does not match.
    """
    settings = FetchSettings()
    try:
        canonical = validate_digest_format(expected)
        verify_artifact(file, canonical, chunk_size=settings.chunk_size)
    except (FormatError, VerificationError) as exc:
        render_error(console, exc)
        raise typer.Exit(code=exc.exit_code)
    console.print(f"[green]OK[/green] {file}")
