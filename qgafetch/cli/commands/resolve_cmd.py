"""``qgafetch resolve`` — show which installer the configuration selects.

Runs only the resolver: nothing is downloaded.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from qgafetch.config import FetchSettings
from qgafetch.core.errors import ConfigError
from qgafetch.core.resolver import resolve
from qgafetch.cli.commands._common import build_raw_config, detect_arch, render_error

console = Console()


def resolve_cmd(
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
    """Resolve the guest agent configuration and print the intent."""
    settings = FetchSettings()
    arch_hint = arch or detect_arch()
    try:
        raw = build_raw_config(config_file, url, checksum, install_directive, settings)
        intent = resolve(raw, arch_hint, url_template=settings.default_url_template)
    except ConfigError as exc:
        render_error(console, exc)
        raise typer.Exit(code=exc.exit_code)

    table = Table(title="Resolved Guest Agent Intent")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Source", intent.source.value)
    table.add_row("Architecture", arch_hint)
    table.add_row(
        "Install",
        "[green]Yes[/green]" if intent.should_install else "[yellow]No[/yellow]",
    )
    table.add_row("URL", intent.url or "[dim]-[/dim]")
    table.add_row("SHA-256", intent.digest or "[dim]not configured[/dim]")
    console.print(table)

    for advisory in intent.advisories:
        console.print(f"[yellow]Warning:[/yellow] {advisory}")
