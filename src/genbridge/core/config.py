"""
Runtime settings for genbridge.

This module holds transport timeouts, job polling parameters and file
locations. Provider endpoints and credentials live in ProviderConfig values,
not here.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from genbridge.logging_config import get_logger
from genbridge.utils.exceptions import ConfigurationError

logger = get_logger(__name__)

# Load environment variables from .env file
load_dotenv()

# Default configuration constants
DEFAULT_CONNECT_TIMEOUT = 60
DEFAULT_READ_TIMEOUT = 120
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_POLL_MAX_ATTEMPTS = 60  # 60 x 5s = 5 minutes
DEFAULT_PROVIDERS_FILE = "providers.yaml"
DEFAULT_OUTPUT_DIR = "."


@dataclass
class Settings:
    """Settings shared by the client, the job poller and the media fetcher."""

    # Timeout Configuration (seconds)
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    read_timeout: int = DEFAULT_READ_TIMEOUT  # replaced by ProviderConfig.timeout_seconds when set

    # Video job polling
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS

    # Files
    providers_file: Path = Path(DEFAULT_PROVIDERS_FILE)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)

    # Debug: log raw API payload/response with image data truncated
    debug_api: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Create a Settings instance from environment variables.

        Environment variables:
            GENBRIDGE_CONNECT_TIMEOUT: Connect timeout in seconds (default 60)
            GENBRIDGE_READ_TIMEOUT: Read timeout in seconds (default 120)
            GENBRIDGE_POLL_INTERVAL: Seconds between video status checks (default 5)
            GENBRIDGE_POLL_MAX_ATTEMPTS: Status checks before giving up (default 60)
            GENBRIDGE_PROVIDERS_FILE: YAML file listing provider configs
            GENBRIDGE_OUTPUT_DIR: Directory for downloaded media
            GENBRIDGE_DEBUG_API: 1/true/yes to log truncated payloads

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """

        def _number_env(name: str, default: float, cast: type) -> float:
            val = os.getenv(name)
            if val is None or val.strip() == "":
                return default
            try:
                return cast(val.strip())
            except ValueError as e:
                raise ConfigurationError(f"{name} must be a number, got {val!r}.") from e

        debug_api = os.getenv("GENBRIDGE_DEBUG_API", "").strip().lower() in ("1", "true", "yes")

        return cls(
            connect_timeout=int(_number_env("GENBRIDGE_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT, int)),
            read_timeout=int(_number_env("GENBRIDGE_READ_TIMEOUT", DEFAULT_READ_TIMEOUT, int)),
            poll_interval=float(
                _number_env("GENBRIDGE_POLL_INTERVAL", DEFAULT_POLL_INTERVAL, float)
            ),
            poll_max_attempts=int(
                _number_env("GENBRIDGE_POLL_MAX_ATTEMPTS", DEFAULT_POLL_MAX_ATTEMPTS, int)
            ),
            providers_file=Path(os.getenv("GENBRIDGE_PROVIDERS_FILE") or DEFAULT_PROVIDERS_FILE),
            output_dir=Path(os.getenv("GENBRIDGE_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR),
            debug_api=debug_api,
        )

    def validate(self) -> None:
        """
        Validate the settings.

        Raises:
            ConfigurationError: If a timeout or polling value is not positive
        """
        logger.debug("Validating settings")
        for name in ("connect_timeout", "read_timeout", "poll_max_attempts"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}.")
        if self.poll_interval < 0:
            raise ConfigurationError(
                f"poll_interval must not be negative, got {self.poll_interval}."
            )

    def timeout_for(self, provider_timeout: int | None) -> tuple[int, int]:
        """Return the (connect, read) timeout pair for one request."""
        read = provider_timeout if provider_timeout else self.read_timeout
        return (self.connect_timeout, read)


# Global settings instance
_global_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance.

    Returns:
        The global Settings instance (loaded from the environment on first use)
    """
    global _global_settings
    if _global_settings is None:
        _global_settings = Settings.from_env()
    return _global_settings


def set_settings(settings: Settings) -> None:
    """
    Set the global settings instance.

    Args:
        settings: The Settings instance to use globally
    """
    global _global_settings
    _global_settings = settings
