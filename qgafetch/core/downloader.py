"""HTTP download executor with exponential-backoff retries.

The orchestrator only depends on the ``DownloadExecutor`` protocol: put
the bytes at ``url`` into ``destination`` or raise ``DownloadError``.
``HttpDownloader`` is the default implementation on top of
``requests.Session``.  It streams the body to disk in chunks, removes any
partial file before retrying or giving up, and honours an optional
cancellation event between chunks.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

import requests

from qgafetch.config import FetchSettings
from qgafetch.core.errors import DownloadCancelledError, DownloadError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class DownloadExecutor(Protocol):
    """Anything that can deposit the bytes of a URL at a local path."""

    def download(
        self,
        url: str,
        destination: Path,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        ...


class _Cancelled(Exception):
    pass


def is_retryable_error(exc: BaseException) -> bool:
    """Return True for transient network failures worth another attempt."""
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        return response is not None and response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(
        exc,
        (
            requests.ConnectionError,
            requests.Timeout,
            requests.exceptions.ChunkedEncodingError,
        ),
    )


def remove_partial(path: Path) -> None:
    """Delete whatever a failed download left at *path*."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove partial download %s: %s", path, exc)


class HttpDownloader:
    """Stream a URL to disk, retrying transient failures.

    Parameters
    ----------
    settings:
        Attempts, backoff, timeout and chunk size.  Defaults are loaded from
        the environment when omitted.
    session:
        A ``requests.Session`` (or compatible object).  A new session is
        created when omitted.
    sleep:
        Called with the backoff delay between attempts.
    """

    def __init__(
        self,
        settings: FetchSettings | None = None,
        *,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings or FetchSettings()
        self._session = session or requests.Session()
        self._sleep = sleep

    def download(
        self,
        url: str,
        destination: Path,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        max_attempts = self._settings.download_max_attempts

        attempt = 0
        while True:
            attempt += 1
            try:
                self._fetch_once(url, destination, cancel_event)
                logger.debug("Downloaded %s to %s (attempt %d)", url, destination, attempt)
                return
            except _Cancelled:
                remove_partial(destination)
                logger.info("Download of %s cancelled on attempt %d", url, attempt)
                raise DownloadCancelledError(url, attempt) from None
            except requests.RequestException as exc:
                remove_partial(destination)
                if attempt >= max_attempts or not is_retryable_error(exc):
                    raise DownloadError(url, attempt, str(exc)) from exc
                delay = self._settings.download_backoff_seconds * (2 ** (attempt - 1))
                logger.warning(
                    "Download of %s failed on attempt %d/%d (%s); retrying in %.1fs",
                    url,
                    attempt,
                    max_attempts,
                    exc,
                    delay,
                )
                self._sleep(delay)
            except OSError as exc:
                # Local write failure; retrying cannot help.
                remove_partial(destination)
                raise DownloadError(url, attempt, str(exc)) from exc

    def _fetch_once(
        self,
        url: str,
        destination: Path,
        cancel_event: threading.Event | None,
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise _Cancelled()
        response = self._session.get(
            url,
            stream=True,
            timeout=self._settings.download_timeout_seconds,
        )
        with response:
            response.raise_for_status()
            with destination.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=self._settings.chunk_size):
                    if cancel_event is not None and cancel_event.is_set():
                        raise _Cancelled()
                    if chunk:
                        handle.write(chunk)
