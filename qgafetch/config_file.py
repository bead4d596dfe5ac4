"""Load the guest agent settings out of an INI image configuration file.

The image builder's configuration is an INI file.  The current section
(``[qemu_guest_agent]`` by default) carries ``url`` and ``checksum``; the
legacy ``install_qemu_ga`` key lives in ``[DEFAULT]``.  Both are flattened
into the ``RawConfig`` mapping the resolver consumes::

    [DEFAULT]
    install_qemu_ga = True

    [qemu_guest_agent]
    url = https://example.org/qemu-ga-x64.msi
    checksum = 9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08

Only keys that actually appear in the file are emitted, so a key present
with a blank value stays distinguishable from an absent key.
"""

from __future__ import annotations

import configparser
from collections.abc import Mapping
from pathlib import Path

from qgafetch.config import FetchSettings
from qgafetch.core.errors import ConfigFileError

RAW_KEYS: tuple[str, ...] = ("url", "checksum", "install_directive")

# Every section, "DEFAULT" included, is read literally; no key inheritance.
_NO_DEFAULT_SECTION = "qgafetch:no-default"


def raw_config_from_mapping(values: Mapping[str, object]) -> dict[str, str]:
    """Keep only recognized keys whose value is not None, as strings."""
    return {
        key: str(values[key])
        for key in RAW_KEYS
        if key in values and values[key] is not None
    }


def parse_raw_config(text: str, settings: FetchSettings | None = None) -> dict[str, str]:
    """Parse INI *text* into a RawConfig mapping."""
    settings = settings or FetchSettings()
    parser = configparser.ConfigParser(
        default_section=_NO_DEFAULT_SECTION,
        interpolation=None,
    )
    try:
        parser.read_string(text)
    except configparser.Error as exc:
        raise ConfigFileError(f"Malformed image configuration: {exc}") from exc

    raw: dict[str, str] = {}
    if parser.has_section(settings.current_section):
        section = parser[settings.current_section]
        for key in ("url", "checksum"):
            if key in section:
                raw[key] = section[key]
    if parser.has_section(settings.legacy_section):
        section = parser[settings.legacy_section]
        if settings.legacy_key in section:
            raw["install_directive"] = section[settings.legacy_key]
    return raw


def load_raw_config(path: Path, settings: FetchSettings | None = None) -> dict[str, str]:
    """Read the INI file at *path* and return its RawConfig mapping."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigFileError(f"Image configuration not found: {path}") from exc
    except OSError as exc:
        raise ConfigFileError(f"Cannot read image configuration {path}: {exc}") from exc
    return parse_raw_config(text, settings)
