"""Configuration management for environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

from product_qa.common.constants import (
    DEFAULT_DATA_FILE,
    DEFAULT_SEARCH_LIMIT,
    PARSE_ERROR_LOG_LIMIT,
    RecordDialect,
)
from product_qa.utils.exceptions import ConfigurationError
from product_qa.utils.logger import LOG_FORMATS


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Load configuration from .env file and environment."""
        env_path = Path(".env")
        if env_path.exists():
            load_dotenv(env_path)

        self.data_file = Path(os.getenv("DATA_FILE", DEFAULT_DATA_FILE))
        self.record_dialect = self._get_dialect("RECORD_DIALECT", RecordDialect.TOLERANT)
        self.search_default_limit = self._get_int(
            "SEARCH_DEFAULT_LIMIT", DEFAULT_SEARCH_LIMIT, minimum=1
        )
        self.parse_error_log_limit = self._get_int(
            "PARSE_ERROR_LOG_LIMIT", PARSE_ERROR_LOG_LIMIT, minimum=0
        )

        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "json").lower()
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(
                f"LOG_FORMAT must be one of: {', '.join(LOG_FORMATS)}; got {self.log_format!r}"
            )

    def _get_int(self, key: str, default: int, minimum: int) -> int:
        """Get an integer environment variable.

        Args:
            key: Environment variable name
            default: Value used when the variable is unset or blank
            minimum: Smallest accepted value

        Returns:
            Parsed integer

        Raises:
            ConfigurationError: If the value is not an integer or is out of range
        """
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default

        try:
            value = int(raw)
        except ValueError as e:
            raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from e

        if value < minimum:
            raise ConfigurationError(f"{key} must be >= {minimum}, got {value}")
        return value

    def _get_dialect(self, key: str, default: RecordDialect) -> RecordDialect:
        """Get the record dialect from the environment.

        Raises:
            ConfigurationError: If the value is not a known dialect
        """
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default

        try:
            return RecordDialect(raw.strip().lower())
        except ValueError as e:
            choices = ", ".join(d.value for d in RecordDialect)
            raise ConfigurationError(f"{key} must be one of: {choices}; got {raw!r}") from e
