"""Resolution models — the typed inputs and output of the config resolver."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

# Flat key mapping produced by the config loader.  Recognized keys:
# "url", "checksum" (current section) and "install_directive" (legacy).
RawConfig = Mapping[str, str]


class DirectiveKind(str, Enum):
    """Parsed form of the legacy ``install_qemu_ga`` value."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    CUSTOM_URL = "custom_url"


class LegacyDirective(BaseModel):
    """The legacy boolean-or-URL directive, parsed once at the boundary."""

    model_config = ConfigDict(frozen=True)

    kind: DirectiveKind
    url: str | None = None

    @model_validator(mode="after")
    def _url_only_for_custom(self) -> "LegacyDirective":
        if (self.kind == DirectiveKind.CUSTOM_URL) != (self.url is not None):
            raise ValueError("url must be set iff kind is custom_url")
        return self


class ConfigSource(str, Enum):
    """Which resolution rule produced the intent."""

    CURRENT = "current"
    LEGACY_DEFAULT = "legacy_default"
    LEGACY_CUSTOM = "legacy_custom"
    NONE = "none"


class ResolvedIntent(BaseModel):
    """The single, deterministic outcome of merging all configuration sources.

    ``digest`` is always canonical (lowercase, 64 hex characters) when set.
    ``advisories`` carries non-fatal notices for the caller to log.
    """

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    digest: str | None = None
    should_install: bool = False
    source: ConfigSource = ConfigSource.NONE
    advisories: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_invariants(self) -> "ResolvedIntent":
        if self.digest is not None and not self.should_install:
            raise ValueError("a digest requires should_install=True")
        if not self.should_install and self.url is not None:
            raise ValueError("should_install=False requires url=None")
        if self.should_install and self.url is None:
            raise ValueError("should_install=True requires a url")
        return self

    @property
    def will_verify(self) -> bool:
        return self.digest is not None
