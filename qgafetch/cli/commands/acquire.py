"""``qgafetch acquire DESTINATION`` — resolve, download, and verify.

Exit codes: 0 on success or skip, 2 for configuration errors, 3 when the
download fails, 4 when verification fails, 130 when cancelled.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from qgafetch.config import FetchSettings
from qgafetch.core.errors import QgaFetchError
from qgafetch.core.orchestrator import AcquisitionOrchestrator
from qgafetch.models.artifacts import Skipped
from qgafetch.cli.commands._common import build_raw_config, detect_arch, render_error

console = Console()


def acquire_cmd(
    destination: Path = typer.Argument(
        ...,
        help="Where to write the installer.",
    ),
    config_file: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Image configuration INI file.",
    ),
    url: str = typer.Option(None, "--url", help="Installer URL (current section)."),
    checksum: str = typer.Option(
        None, "--checksum", help="Expected SHA-256 of the installer (current section)."
    ),
    install_directive: str = typer.Option(
        None,
        "--install-qemu-ga",
        help="Legacy directive: True, False, or a custom installer URL.",
    ),
    arch: str = typer.Option(
        None, "--arch", help="Processor architecture hint (default: detected)."
    ),
) -> None:
    """Acquire the QEMU guest agent installer.

    When a checksum is configured the download is verified; a mismatching
    file is deleted and the command fails.
    """
    settings = FetchSettings()
    arch_hint = arch or detect_arch()
    try:
        raw = build_raw_config(config_file, url, checksum, install_directive, settings)
        outcome = AcquisitionOrchestrator(settings=settings).acquire(
            raw, arch_hint, destination
        )
    except QgaFetchError as exc:
        render_error(console, exc)
        raise typer.Exit(code=exc.exit_code)

    if isinstance(outcome, Skipped):
        console.print(f"[yellow]Skipped:[/yellow] {outcome.reason}")
        return

    verified = (
        f"[green]Yes[/green] ({outcome.digest})"
        if outcome.was_verified
        else "[yellow]No checksum configured[/yellow]"
    )
    console.print(
        Panel(
            "\n".join([
                "[bold green]Guest agent installer acquired.[/bold green]",
                "",
                f"[bold]Path:[/bold]     {outcome.path}",
                f"[bold]Source:[/bold]   {outcome.source_url}",
                f"[bold]Size:[/bold]     {outcome.size_bytes} bytes",
                f"[bold]Verified:[/bold] {verified}",
            ]),
            title="[bold]qgafetch[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
