"""Acquisition orchestrator — resolve, download, verify, hand off.

The orchestrator is the only component with side effects beyond logging.
For one artifact it runs a strict sequence:

1. Resolve the configuration (no I/O; config errors abort here).
2. Return ``Skipped`` if nothing should be installed.
3. Download the installer to the caller's destination.
4. Verify its SHA-256 when a checksum was configured.
5. Return an ``AcquiredArtifact``; the file now belongs to the caller.

Whatever the failure (download error, cancellation, verification failure,
interrupt), nothing is left at the destination afterwards.  No state is
kept between calls, so concurrent calls with distinct destinations are
safe and a failed call can be retried from scratch.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from qgafetch.config import FetchSettings
from qgafetch.core.downloader import DownloadExecutor, HttpDownloader, remove_partial
from qgafetch.core.errors import (
    AcquisitionError,
    AcquisitionStage,
    ConfigError,
    DownloadCancelledError,
    DownloadError,
    VerificationError,
)
from qgafetch.core.resolver import resolve
from qgafetch.core.verifier import verify_artifact
from qgafetch.models.artifacts import AcquiredArtifact, AcquisitionOutcome, Skipped
from qgafetch.models.intent import ConfigSource, RawConfig, ResolvedIntent

logger = logging.getLogger(__name__)

_SOURCE_DESCRIPTIONS: dict[ConfigSource, str] = {
    ConfigSource.CURRENT: "current [qemu_guest_agent] section",
    ConfigSource.LEGACY_DEFAULT: "legacy install_qemu_ga=True (default installer)",
    ConfigSource.LEGACY_CUSTOM: "legacy install_qemu_ga custom URL",
    ConfigSource.NONE: "no guest agent configuration",
}


class AcquisitionOrchestrator:
    """Runs the resolve -> download -> verify pipeline for one artifact.

    Parameters
    ----------
    downloader:
        The download executor.  Defaults to an ``HttpDownloader`` built from
        *settings*.
    settings:
        Settings snapshot.  Loaded from the environment when omitted.
    log:
        Logger receiving the pipeline's records.  Defaults to this
        module's logger.
    """

    def __init__(
        self,
        downloader: DownloadExecutor | None = None,
        *,
        settings: FetchSettings | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or FetchSettings()
        self.downloader = downloader or HttpDownloader(self.settings)
        self._log = log or logger

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, config: RawConfig, arch_hint: str) -> ResolvedIntent:
        """Resolve *config*, logging the source and any advisories.

        Raises ``AcquisitionError`` tagged ``config`` on malformed input.
        """
        try:
            intent = resolve(
                config,
                arch_hint,
                url_template=self.settings.default_url_template,
            )
        except ConfigError as exc:
            self._log.error("Guest agent configuration rejected: %s", exc)
            raise AcquisitionError(AcquisitionStage.CONFIG, exc) from exc

        self._log.info(
            "Guest agent source: %s", _SOURCE_DESCRIPTIONS[intent.source]
        )
        for advisory in intent.advisories:
            self._log.warning(advisory)
        return intent

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def acquire(
        self,
        config: RawConfig,
        arch_hint: str,
        destination: Path,
        *,
        cancel_event: threading.Event | None = None,
    ) -> AcquisitionOutcome:
        """Acquire the guest agent installer into *destination*.

        Returns ``AcquiredArtifact`` on success or ``Skipped`` when the
        configuration asks for no installation.

        Raises
        ------
        AcquisitionError
            Tagged with the failing stage; ``cause`` holds the underlying
            ``ConfigError``, ``DownloadError`` or ``VerificationError``.
        """
        destination = Path(destination)
        intent = self.resolve(config, arch_hint)

        if not intent.should_install:
            self._log.info("Guest agent installation skipped: not requested")
            return Skipped(reason="guest agent installation not requested", source=intent.source)

        if intent.will_verify:
            self._log.info("SHA-256 verification will run for %s", intent.url)
        else:
            self._log.info("No checksum configured; verification skipped for %s", intent.url)

        self._download(intent.url, destination, cancel_event)

        if cancel_event is not None and cancel_event.is_set():
            remove_partial(destination)
            self._log.warning("Guest agent download cancelled: %s", intent.url)
            cause = DownloadCancelledError(intent.url)
            raise AcquisitionError(AcquisitionStage.CANCELLED, cause)

        if not destination.is_file():
            cause = DownloadError(intent.url, None, "executor produced no file")
            self._log.error("Guest agent download failed: %s", cause)
            raise AcquisitionError(AcquisitionStage.DOWNLOAD, cause)

        try:
            return self._verify_and_hand_off(intent, destination)
        except VerificationError as exc:
            remove_partial(destination)
            raise AcquisitionError(AcquisitionStage.VERIFICATION, exc) from exc
        except BaseException:
            remove_partial(destination)
            raise

    def _verify_and_hand_off(self, intent: ResolvedIntent, destination: Path) -> AcquiredArtifact:
        digest = None
        if intent.digest is not None:
            digest = verify_artifact(
                destination,
                intent.digest,
                chunk_size=self.settings.chunk_size,
                log=self._log,
            )
        return AcquiredArtifact(
            path=destination,
            source_url=intent.url,
            was_verified=digest is not None,
            digest=digest,
            size_bytes=destination.stat().st_size,
        )

    def _download(
        self,
        url: str,
        destination: Path,
        cancel_event: threading.Event | None,
    ) -> None:
        self._log.info("Downloading guest agent installer from %s", url)
        try:
            self.downloader.download(url, destination, cancel_event=cancel_event)
        except DownloadCancelledError as exc:
            remove_partial(destination)
            self._log.warning("Guest agent download cancelled: %s", url)
            raise AcquisitionError(AcquisitionStage.CANCELLED, exc) from exc
        except DownloadError as exc:
            remove_partial(destination)
            self._log.error(
                "Guest agent download failed: %s (attempts: %s)", exc.url, exc.attempts
            )
            raise AcquisitionError(AcquisitionStage.DOWNLOAD, exc) from exc
        except BaseException:
            remove_partial(destination)
            raise


def acquire(
    config: RawConfig,
    arch_hint: str,
    destination: Path,
    *,
    settings: FetchSettings | None = None,
    downloader: DownloadExecutor | None = None,
    cancel_event: threading.Event | None = None,
) -> AcquisitionOutcome:
    """Convenience wrapper: build an orchestrator and run one acquisition."""
    orchestrator = AcquisitionOrchestrator(downloader, settings=settings)
    return orchestrator.acquire(
        config, arch_hint, destination, cancel_event=cancel_event
    )
