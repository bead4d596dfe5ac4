"""Shape validation for raw configuration values.

These checks run before any network I/O.  They are pure: they never
block, never touch the filesystem, and either return the canonical value
or raise ``FormatError``.
"""

from __future__ import annotations

import re

from qgafetch.core.errors import FormatError

DIGEST_PATTERN = re.compile(r"[0-9a-fA-F]{64}")
DIGEST_EXPECTED = "64 hexadecimal characters matching ^[0-9a-fA-F]{64}$"

# Scheme match is case-sensitive: "HTTPS://" is rejected.
URL_SCHEMES: tuple[str, ...] = ("http://", "https://")
URL_EXPECTED = "a URL starting with 'http://' or 'https://'"


def validate_digest_format(value: str) -> str:
    """Return the lowercase canonical form of a SHA-256 hex digest.

    The whole string must match; no surrounding whitespace is tolerated.
    """
    if not isinstance(value, str) or DIGEST_PATTERN.fullmatch(value) is None:
        raise FormatError(str(value), DIGEST_EXPECTED)
    return value.lower()


def validate_url_format(value: str) -> None:
    """Accept only values beginning with a literal ``http://`` or ``https://``."""
    if not isinstance(value, str) or not value.startswith(URL_SCHEMES):
        raise FormatError(str(value), URL_EXPECTED)
