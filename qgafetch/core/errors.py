"""Error taxonomy for configuration, digesting, verification, and download.

Every failure the acquisition pipeline can produce is a concrete subclass of
``QgaFetchError`` carrying the structured context a user needs to act on it:
the offending value and expected pattern for format problems, both digests
and the artifact path for mismatches, the URL and attempt count for
downloads.

``Skipped`` is deliberately absent here: "nothing to install" is a result
value (see ``qgafetch.models.artifacts``), not an error.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class QgaFetchError(RuntimeError):
    """Base class for every qgafetch failure."""

    exit_code: int = 1


# ---------------------------------------------------------------------------
# Format and configuration errors, raised before any network access
# ---------------------------------------------------------------------------


class FormatError(QgaFetchError):
    """Raised by the schema validators when a raw value has the wrong shape."""

    exit_code = 2

    def __init__(self, value: str, expected: str) -> None:
        super().__init__(f"Invalid value {value!r}: expected {expected}")
        self.value = value
        self.expected = expected


class ConfigError(QgaFetchError):
    """Raised when the configuration cannot be resolved into an intent.

    Always recoverable by editing the configuration; never retried.
    """

    exit_code = 2


class EmptyUrlError(ConfigError):
    """The current section names a ``url`` key whose value is blank."""

    def __init__(self) -> None:
        super().__init__(
            "Guest agent 'url' is present but empty; "
            "set a http:// or https:// URL or remove the key."
        )


class InvalidUrlError(ConfigError):
    """A configured URL does not start with a supported scheme."""

    def __init__(self, value: str, expected: str) -> None:
        super().__init__(f"Invalid guest agent URL {value!r}: expected {expected}")
        self.value = value
        self.expected = expected


class InvalidChecksumError(ConfigError):
    """A configured checksum is not a 64-character hexadecimal SHA-256 digest."""

    def __init__(self, value: str, expected: str) -> None:
        super().__init__(f"Invalid guest agent checksum {value!r}: expected {expected}")
        self.value = value
        self.expected = expected


class ConfigFileError(ConfigError):
    """The image configuration file is missing or cannot be parsed."""


# ---------------------------------------------------------------------------
# Digest I/O errors
# ---------------------------------------------------------------------------


class DigestIOError(QgaFetchError):
    """Raised when an artifact cannot be read for digesting."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = Path(path)


class ArtifactNotFoundError(DigestIOError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Artifact not found: {path}")


class ArtifactReadError(DigestIOError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(path, f"Failed to read artifact {path}: {reason}")
        self.reason = reason


# ---------------------------------------------------------------------------
# Verification errors, terminal for the current attempt
# ---------------------------------------------------------------------------


class VerificationError(QgaFetchError):
    """Base class for verification failures."""

    exit_code = 4

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = Path(path)


class DigestComputationError(VerificationError):
    """The digest of the artifact could not be computed."""

    def __init__(self, path: Path, cause: DigestIOError) -> None:
        super().__init__(path, f"Could not compute digest of {path}: {cause}")
        self.cause = cause


class DigestMismatchError(VerificationError):
    """The artifact's digest differs from the expected value.

    The artifact has already been deleted when this is raised.  If the
    deletion itself failed, ``cleanup_error`` holds the reason.
    """

    def __init__(
        self,
        path: Path,
        expected: str,
        actual: str,
        cleanup_error: OSError | None = None,
    ) -> None:
        message = (
            f"SHA-256 mismatch for {path}: expected {expected}, got {actual}"
        )
        if cleanup_error is not None:
            message += f" (artifact could not be removed: {cleanup_error})"
        super().__init__(path, message)
        self.expected = expected
        self.actual = actual
        self.cleanup_error = cleanup_error


# ---------------------------------------------------------------------------
# Download errors
# ---------------------------------------------------------------------------


class DownloadError(QgaFetchError):
    """The download executor gave up after exhausting its retries.

    ``attempts`` is None when the failure was detected after the executor
    returned, so the number of attempts it made is unknown.
    """

    exit_code = 3

    def __init__(self, url: str, attempts: int | None, reason: str = "") -> None:
        message = f"Download of {url} failed"
        if attempts is not None:
            message += f" after {attempts} attempt(s)"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.url = url
        self.attempts = attempts
        self.reason = reason


class DownloadCancelledError(DownloadError):
    """The download was cancelled by the caller."""

    exit_code = 130

    def __init__(self, url: str, attempts: int | None = None) -> None:
        super().__init__(url, attempts, "cancelled")


# ---------------------------------------------------------------------------
# Acquisition
# ---------------------------------------------------------------------------


class AcquisitionStage(str, Enum):
    """Pipeline step at which an acquisition failed."""

    CONFIG = "config"
    DOWNLOAD = "download"
    VERIFICATION = "verification"
    CANCELLED = "cancelled"


class AcquisitionError(QgaFetchError):
    """Wraps the failure of one ``acquire`` call, tagged by pipeline step."""

    def __init__(self, stage: AcquisitionStage, cause: QgaFetchError) -> None:
        super().__init__(f"Acquisition failed during {stage.value}: {cause}")
        self.stage = stage
        self.cause = cause
        self.exit_code = cause.exit_code
