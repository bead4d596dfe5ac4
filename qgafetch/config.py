"""Runtime settings — env-driven via pydantic-settings.

Reads from a .env file and QGAFETCH_* environment variables.  There is no
module-level instance: callers build a ``FetchSettings`` snapshot and pass
it explicitly into the loader, downloader, and orchestrator.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# Installer published alongside virtio-win; {arch} is "x64" or "x86".
DEFAULT_URL_TEMPLATE = (
    "https://fedorapeople.org/groups/virt/virtio-win/direct-downloads/"
    "archive-qemu-ga/qemu-ga-win-100.0.0.0-3.el7ev/qemu-ga-{arch}.msi"
)


class FetchSettings(BaseSettings):
    """Settings for resolving, downloading, and verifying the guest agent.

    Examples
    --------
    Override via environment::

        export QGAFETCH_LOG_LEVEL=DEBUG
        export QGAFETCH_DOWNLOAD_MAX_ATTEMPTS=5

    Or via .env file::

        QGAFETCH_DOWNLOAD_TIMEOUT_SECONDS=120
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="QGAFETCH_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Resolution
    default_url_template: str = DEFAULT_URL_TEMPLATE

    # Download executor
    download_max_attempts: int = Field(default=3, ge=1)
    download_backoff_seconds: float = Field(default=1.0, ge=0.0)
    download_timeout_seconds: float = Field(default=60.0, gt=0.0)

    # Digest engine
    chunk_size: int = Field(default=64 * 1024, ge=1)

    # Image configuration file layout
    current_section: str = "qemu_guest_agent"
    legacy_section: str = "DEFAULT"
    legacy_key: str = "install_qemu_ga"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Upper-case the level and reject names ``logging`` does not know."""
        upper = str(value).strip().upper()
        if upper not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {list(LOG_LEVELS)}, got {value!r}")
        return upper
