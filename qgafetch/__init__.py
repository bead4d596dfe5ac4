"""qgafetch: Configuration-Driven, Integrity-Verified Guest Agent Acquisition.

Resolves the QEMU guest agent installer from an image configuration (the
current ``[qemu_guest_agent]`` section or the legacy ``install_qemu_ga``
directive), downloads it, and verifies its SHA-256 before handing it to
the installer step:
  - Strict precedence: a configured ``url`` always wins over the legacy value
  - Legacy behaviour reproduced exactly when no current section exists
  - Checksum format checked before any network access
  - Streaming SHA-256, case-insensitive comparison
  - Mismatched artifacts are deleted, never handed off
"""

__version__ = "0.1.0"
__description__ = (
    "Configuration-driven, integrity-verified QEMU guest agent acquisition"
)

from qgafetch.core.orchestrator import AcquisitionOrchestrator, acquire
from qgafetch.core.resolver import resolve
from qgafetch.core.verifier import verify_artifact
from qgafetch.cli.app import app as cli

__all__ = [
    "AcquisitionOrchestrator",
    "acquire",
    "resolve",
    "verify_artifact",
    "cli",
    "__version__",
]
