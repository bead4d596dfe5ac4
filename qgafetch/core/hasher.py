"""SHA-256 digest engine for downloaded artifacts.

Files are hashed in fixed-size chunks so memory use stays constant no
matter how large the installer is.  Digests are always returned in
canonical lowercase hexadecimal form.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from qgafetch.core.errors import ArtifactNotFoundError, ArtifactReadError

DEFAULT_CHUNK_SIZE = 64 * 1024


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def compute_file_digest(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Stream *path* through SHA-256 and return the lowercase hex digest.

    Raises
    ------
    ArtifactNotFoundError
        If *path* does not exist (or is not a regular file).
    ArtifactReadError
        On any other I/O error while opening or reading.
    """
    path = Path(path)
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")

    digest = hashlib.sha256()
    try:
        with path.open("rb") as stream:
            for chunk in iter(lambda: stream.read(chunk_size), b""):
                digest.update(chunk)
    except FileNotFoundError as exc:
        raise ArtifactNotFoundError(path) from exc
    except IsADirectoryError as exc:
        raise ArtifactNotFoundError(path) from exc
    except OSError as exc:
        raise ArtifactReadError(path, exc.strerror or str(exc)) from exc

    return digest.hexdigest()
