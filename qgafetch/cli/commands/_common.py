"""Helpers shared by the CLI commands: config assembly and error rendering."""

from __future__ import annotations

import os
import platform
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from qgafetch.config import FetchSettings
from qgafetch.config_file import load_raw_config, raw_config_from_mapping
from qgafetch.core.errors import (
    AcquisitionError,
    DigestMismatchError,
    DownloadError,
    FormatError,
    InvalidChecksumError,
    InvalidUrlError,
    QgaFetchError,
)


def detect_arch() -> str:
    """Architecture hint: PROCESSOR_ARCHITECTURE on Windows, else the machine type."""
    return os.environ.get("PROCESSOR_ARCHITECTURE") or platform.machine() or "x86"


def build_raw_config(
    config_file: Path | None,
    url: str | None,
    checksum: str | None,
    install_directive: str | None,
    settings: FetchSettings,
) -> dict[str, str]:
    """Load *config_file* (if any) and overlay explicit command-line values."""
    raw = load_raw_config(config_file, settings) if config_file else {}
    raw.update(
        raw_config_from_mapping(
            {"url": url, "checksum": checksum, "install_directive": install_directive}
        )
    )
    return raw


def render_error(console: Console, exc: QgaFetchError) -> None:
    """Print a failure with enough context for the user to act on it."""

    def _line(label: str, value: object) -> None:
        console.print(f"  [bold]{label}:[/bold] {escape(str(value))}", soft_wrap=True)

    if isinstance(exc, AcquisitionError):
        cause = exc.cause
        heading = f"Acquisition failed ({exc.stage.value}):"
    else:
        cause = exc
        heading = "Error:"
    console.print(f"[bold red]{heading}[/bold red] {escape(str(cause))}", soft_wrap=True)

    if isinstance(cause, (FormatError, InvalidUrlError, InvalidChecksumError)):
        _line("Value", repr(cause.value))
        _line("Expected", cause.expected)
    elif isinstance(cause, DigestMismatchError):
        _line("Artifact", cause.path)
        _line("Expected", cause.expected)
        _line("Actual", cause.actual)
        if cause.cleanup_error is not None:
            _line("Artifact could not be removed", cause.cleanup_error)
        else:
            console.print("  [dim]The artifact has been deleted.[/dim]")
    elif isinstance(cause, DownloadError):
        _line("URL", cause.url)
        if cause.attempts is not None:
            _line("Attempts", cause.attempts)
