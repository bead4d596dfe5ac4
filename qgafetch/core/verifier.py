"""Digest verifier — compare an artifact against its expected SHA-256.

On mismatch the artifact is deleted before the error is raised, so a
tampered or corrupted installer can never reach the install step.
Verification is never retried: the same bytes always give the same digest.
"""

from __future__ import annotations

import hmac
import logging
from pathlib import Path

from qgafetch.core.errors import (
    DigestComputationError,
    DigestIOError,
    DigestMismatchError,
)
from qgafetch.core.hasher import DEFAULT_CHUNK_SIZE, compute_file_digest

logger = logging.getLogger(__name__)


def verify_artifact(
    path: Path,
    expected_digest: str,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    log: logging.Logger | None = None,
) -> str:
    """Verify that *path* hashes to *expected_digest*.

    Returns the computed canonical digest on success.

    Raises
    ------
    DigestComputationError
        If the artifact is missing or unreadable.  A second call after a
        mismatch lands here, because the file is already gone.
    DigestMismatchError
        If the digests differ.  The artifact has been deleted.
    """
    log = log or logger
    path = Path(path)

    try:
        actual = compute_file_digest(path, chunk_size)
    except DigestIOError as exc:
        log.error("Cannot compute digest of %s: %s", path, exc)
        raise DigestComputationError(path, exc) from exc

    expected = expected_digest.strip().lower()
    if hmac.compare_digest(actual.encode("utf-8"), expected.encode("utf-8")):
        log.info("SHA-256 verified for %s: %s", path, actual)
        return actual

    cleanup_error: OSError | None = None
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        cleanup_error = exc
        log.warning("Could not delete mismatched artifact %s: %s", path, exc)

    log.error(
        "SHA-256 mismatch for %s: expected %s, got %s",
        path,
        expected,
        actual,
    )
    raise DigestMismatchError(path, expected, actual, cleanup_error)
