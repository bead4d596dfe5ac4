"""Config resolver — merge the current section and the legacy directive.

Precedence, first match wins:

1. ``url`` key present           -> current section (blank value is an error)
2. legacy directive ``True``     -> default installer URL for the architecture
3. legacy ``False``/blank/absent -> nothing to install
4. any other legacy value        -> that value as a custom installer URL

A ``checksum`` without a ``url`` is ignored with an advisory.  When no
current section is supplied, steps 2-4 reproduce the legacy behaviour
exactly.

``resolve`` is a pure function of its arguments: no I/O, no logging, no
hidden state.  Advisories are returned on the intent for the caller to
report.
"""

from __future__ import annotations

from qgafetch.config import DEFAULT_URL_TEMPLATE
from qgafetch.core.errors import (
    EmptyUrlError,
    FormatError,
    InvalidChecksumError,
    InvalidUrlError,
)
from qgafetch.core.schema import validate_digest_format, validate_url_format
from qgafetch.models.intent import (
    ConfigSource,
    DirectiveKind,
    LegacyDirective,
    RawConfig,
    ResolvedIntent,
)

# Windows PROCESSOR_ARCHITECTURE value for 64-bit x86; every other hint gets the x86 installer.
AMD64_HINT = "AMD64"

CHECKSUM_IGNORED_ADVISORY = (
    "A guest agent checksum is configured without a url; "
    "the checksum is ignored and no verification will run."
)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def arch_suffix(arch_hint: str) -> str:
    """Return the installer suffix for a processor architecture hint."""
    return "x64" if arch_hint.strip().upper() == AMD64_HINT else "x86"


def default_installer_url(arch_hint: str, template: str = DEFAULT_URL_TEMPLATE) -> str:
    """Fill the installer URL template for *arch_hint*."""
    return template.format(arch=arch_suffix(arch_hint))


def parse_legacy_directive(raw: str | None) -> LegacyDirective:
    """Parse the legacy ``install_qemu_ga`` value into a typed directive.

    ``True``/``False`` are matched case-insensitively; blank or missing means
    disabled; anything else is taken as a custom installer URL.
    """
    if _is_blank(raw):
        return LegacyDirective(kind=DirectiveKind.DISABLED)
    token = raw.strip()
    lowered = token.lower()
    if lowered == "true":
        return LegacyDirective(kind=DirectiveKind.ENABLED)
    if lowered == "false":
        return LegacyDirective(kind=DirectiveKind.DISABLED)
    return LegacyDirective(kind=DirectiveKind.CUSTOM_URL, url=token)


def _resolve_current(config: RawConfig) -> ResolvedIntent:
    url = config["url"].strip()
    if not url:
        raise EmptyUrlError()
    try:
        validate_url_format(url)
    except FormatError as exc:
        raise InvalidUrlError(exc.value, exc.expected) from exc

    digest = None
    checksum = config.get("checksum")
    if checksum is not None:
        try:
            digest = validate_digest_format(checksum)
        except FormatError as exc:
            raise InvalidChecksumError(exc.value, exc.expected) from exc

    return ResolvedIntent(
        url=url,
        digest=digest,
        should_install=True,
        source=ConfigSource.CURRENT,
    )


def _resolve_legacy(
    directive: LegacyDirective,
    arch_hint: str,
    template: str,
    advisories: tuple[str, ...],
) -> ResolvedIntent:
    if directive.kind == DirectiveKind.ENABLED:
        return ResolvedIntent(
            url=default_installer_url(arch_hint, template),
            should_install=True,
            source=ConfigSource.LEGACY_DEFAULT,
            advisories=advisories,
        )
    if directive.kind == DirectiveKind.DISABLED:
        return ResolvedIntent(
            should_install=False,
            source=ConfigSource.NONE,
            advisories=advisories,
        )

    try:
        validate_url_format(directive.url)
    except FormatError as exc:
        raise InvalidUrlError(exc.value, exc.expected) from exc
    return ResolvedIntent(
        url=directive.url,
        should_install=True,
        source=ConfigSource.LEGACY_CUSTOM,
        advisories=advisories,
    )


def resolve(
    config: RawConfig,
    arch_hint: str,
    *,
    url_template: str = DEFAULT_URL_TEMPLATE,
) -> ResolvedIntent:
    """Resolve *config* into a single download intent.

    Parameters
    ----------
    config:
        Flat mapping with optional ``url``, ``checksum`` and
        ``install_directive`` keys.  Never mutated.
    arch_hint:
        Processor architecture (e.g. ``"AMD64"``), used only for the
        default installer URL.
    url_template:
        Template for the default installer URL, with an ``{arch}`` field.

    Raises
    ------
    EmptyUrlError, InvalidUrlError, InvalidChecksumError
        When the configuration is malformed.
    """
    if config.get("url") is not None:
        return _resolve_current(config)

    advisories: tuple[str, ...] = ()
    if not _is_blank(config.get("checksum")):
        advisories = (CHECKSUM_IGNORED_ADVISORY,)

    directive = parse_legacy_directive(config.get("install_directive"))
    return _resolve_legacy(directive, arch_hint, url_template, advisories)
