"""qgafetch data models — all Pydantic v2, all frozen (immutable)."""

from qgafetch.models.artifacts import AcquiredArtifact, AcquisitionOutcome, Skipped
from qgafetch.models.intent import (
    ConfigSource,
    DirectiveKind,
    LegacyDirective,
    RawConfig,
    ResolvedIntent,
)

__all__ = [
    # intent
    "RawConfig",
    "DirectiveKind",
    "LegacyDirective",
    "ConfigSource",
    "ResolvedIntent",
    # artifacts
    "AcquiredArtifact",
    "Skipped",
    "AcquisitionOutcome",
]
