"""Acquisition results handed to the installer step."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict

from qgafetch.models.intent import ConfigSource


class AcquiredArtifact(BaseModel):
    """A downloaded installer whose ownership passes to the caller.

    When ``was_verified`` is True, ``digest`` is the SHA-256 that was
    computed and matched against the configured checksum.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    source_url: str
    was_verified: bool
    digest: str | None = None
    size_bytes: int = 0


class Skipped(BaseModel):
    """Configuration asked for no installation.  Not an error."""

    model_config = ConfigDict(frozen=True)

    reason: str
    source: ConfigSource = ConfigSource.NONE


AcquisitionOutcome = Union[AcquiredArtifact, Skipped]
