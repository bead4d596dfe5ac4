"""Adversarial tests — malformed configuration never reaches the network.

These tests verify that:
1. Digest validation agrees with an independent oracle on random inputs
2. Every malformed checksum next to a url fails as a configuration error
3. Any legacy value resolves without raising when a valid url is present
4. Odd legacy values map to a custom URL or fail format validation, never crash
"""

from __future__ import annotations

import random
import string

import pytest

from qgafetch.core.errors import (
    AcquisitionError,
    AcquisitionStage,
    FormatError,
    InvalidChecksumError,
    InvalidUrlError,
)
from qgafetch.core.resolver import resolve
from qgafetch.core.schema import validate_digest_format
from qgafetch.models.intent import ConfigSource

SEED = 20240611
ALPHABET = string.hexdigits + "gGzZ -_:\t\n\x00é"
URL = "https://h/qemu-ga-x64.msi"


def _oracle_is_digest(value: str) -> bool:
    return len(value) == 64 and all(c in "0123456789abcdefABCDEF" for c in value)


def _random_candidates(count: int) -> list[str]:
    rng = random.Random(SEED)
    out: list[str] = []
    for _ in range(count):
        length = rng.choice([0, 1, 63, 64, 64, 64, 65, 128])
        out.append("".join(rng.choice(ALPHABET) for _ in range(length)))
    # Near-misses around a valid digest.
    base = "ab" * 32
    out += [base[:-1] + "g", " " + base, base + "\n", base.upper()[:63], base + "0"]
    return out


CANDIDATES = _random_candidates(300)


class TestDigestOracle:
    @pytest.mark.parametrize("value", CANDIDATES)
    def test_validation_matches_oracle(self, value):
        if _oracle_is_digest(value):
            assert validate_digest_format(value) == value.lower()
        else:
            with pytest.raises(FormatError):
                validate_digest_format(value)

    @pytest.mark.parametrize("value", [v for v in CANDIDATES if not _oracle_is_digest(v)][:60])
    def test_resolver_rejects_malformed_checksum(self, value):
        with pytest.raises(InvalidChecksumError) as excinfo:
            resolve({"url": URL, "checksum": value}, "AMD64")
        assert excinfo.value.value == value


class TestNothingDownloadedOnBadConfig:
    @pytest.mark.parametrize(
        "config",
        [
            {"url": URL, "checksum": "zz" * 32},
            {"url": "", "checksum": "aa" * 32},
            {"url": "ftp://h/f.msi"},
            {"install_directive": "yes please"},
        ],
    )
    def test_config_failure_skips_download(self, config, tmp_path, make_downloader, make_orchestrator):
        downloader = make_downloader()
        with pytest.raises(AcquisitionError) as excinfo:
            make_orchestrator(downloader).acquire(config, "AMD64", tmp_path / "ga.msi")
        assert excinfo.value.stage == AcquisitionStage.CONFIG
        assert downloader.calls == []
        assert not (tmp_path / "ga.msi").exists()


class TestPrecedenceFuzz:
    def _legacy_values(self) -> list[str]:
        rng = random.Random(SEED + 1)
        values = ["True", "true", "TRUE", "False", "false", "", "   ", "https://x/y.msi", "http://x/y.msi"]
        for _ in range(100):
            length = rng.randint(1, 20)
            values.append("".join(rng.choice(string.printable) for _ in range(length)))
        return values

    def test_current_section_always_wins(self):
        for legacy in self._legacy_values():
            intent = resolve({"url": URL, "install_directive": legacy}, "x86")
            assert intent.source == ConfigSource.CURRENT
            assert intent.url == URL

    def test_legacy_alone_never_crashes_unexpectedly(self):
        for legacy in self._legacy_values():
            try:
                intent = resolve({"install_directive": legacy}, "AMD64")
            except InvalidUrlError:
                token = legacy.strip()
                assert token.lower() not in ("true", "false", "")
                assert not token.startswith(("http://", "https://"))
                continue
            if intent.source == ConfigSource.LEGACY_CUSTOM:
                assert intent.url == legacy.strip()
            assert intent.digest is None
