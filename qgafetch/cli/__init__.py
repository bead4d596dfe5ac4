"""qgafetch CLI — Typer-based command-line interface.

Provides the ``qgafetch`` command with subcommands for resolving the guest
agent configuration, acquiring and verifying the installer, and computing
or checking SHA-256 digests of local files.

All output uses Rich for formatted terminal display.
"""
