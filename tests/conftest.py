"""Shared test fixtures for qgafetch."""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest
import requests

from qgafetch.config import FetchSettings
from qgafetch.core.orchestrator import AcquisitionOrchestrator

INSTALLER_BYTES = b"MZ\x90\x00 fake qemu-ga msi payload " * 64
INSTALLER_SHA256 = hashlib.sha256(INSTALLER_BYTES).hexdigest()


@pytest.fixture
def settings() -> FetchSettings:
    """Settings with no backoff delay and a small chunk size."""
    return FetchSettings(
        download_max_attempts=3,
        download_backoff_seconds=0.0,
        chunk_size=16,
    )


@pytest.fixture
def installer_bytes() -> bytes:
    return INSTALLER_BYTES


@pytest.fixture
def installer_sha256() -> str:
    return INSTALLER_SHA256


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write bytes to a file under tmp_path."""

    def _factory(content: bytes = INSTALLER_BYTES, name: str = "qemu-ga-x64.msi") -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _factory


# ---------------------------------------------------------------------------
# Download executor fakes
# ---------------------------------------------------------------------------


class FakeDownloader:
    """Writes a fixed payload to the destination, optionally then failing."""

    def __init__(self, payload: bytes = INSTALLER_BYTES, error: BaseException | None = None):
        self.payload = payload
        self.error = error
        self.calls: list[tuple[str, Path]] = []

    def download(
        self,
        url: str,
        destination: Path,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.calls.append((url, Path(destination)))
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        Path(destination).write_bytes(self.payload)
        if self.error is not None:
            raise self.error


@pytest.fixture
def make_downloader() -> Callable[..., FakeDownloader]:
    """Factory fixture: build a FakeDownloader."""

    def _factory(payload: bytes = INSTALLER_BYTES, error: BaseException | None = None) -> FakeDownloader:
        return FakeDownloader(payload=payload, error=error)

    return _factory


@pytest.fixture
def make_orchestrator(settings: FetchSettings) -> Callable[..., AcquisitionOrchestrator]:
    """Factory fixture: an orchestrator wired to the given executor."""

    def _factory(downloader: Any) -> AcquisitionOrchestrator:
        return AcquisitionOrchestrator(downloader, settings=settings)

    return _factory


# ---------------------------------------------------------------------------
# requests.Session fakes (no network in tests)
# ---------------------------------------------------------------------------


class FakeResponse:
    """Minimal stand-in for a streamed ``requests.Response``."""

    def __init__(self, status_code: int = 200, chunks: Iterable[Any] = (INSTALLER_BYTES,)):
        self.status_code = status_code
        self._chunks = chunks
        self.closed = False

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: Any) -> bool:
        self.closed = True
        return False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def iter_content(self, chunk_size: int = 1):
        for chunk in self._chunks:
            if isinstance(chunk, BaseException):
                raise chunk
            yield chunk


class FakeSession:
    """Returns (or raises) queued items from ``get`` in order."""

    def __init__(self, responses: Iterable[Any]):
        self._responses = list(responses)
        self.requested: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requested.append({"url": url, **kwargs})
        item = self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def make_response() -> Callable[..., FakeResponse]:
    def _factory(status_code: int = 200, chunks: Iterable[Any] = (INSTALLER_BYTES,)) -> FakeResponse:
        return FakeResponse(status_code=status_code, chunks=chunks)

    return _factory


@pytest.fixture
def make_session() -> Callable[..., FakeSession]:
    def _factory(*responses: Any) -> FakeSession:
        return FakeSession(responses)

    return _factory
