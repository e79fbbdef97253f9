"""Tests for configuration management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from product_qa.common.constants import DEFAULT_DATA_FILE, RecordDialect
from product_qa.utils.config import Config, ConfigurationError

CONFIG_ENV_VARS = (
    "DATA_FILE",
    "RECORD_DIALECT",
    "SEARCH_DEFAULT_LIMIT",
    "PARSE_ERROR_LOG_LIMIT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test from an environment without configuration variables."""
    for key in CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


def test_config_defaults() -> None:
    """Test that Config falls back to defaults when nothing is set."""
    with patch("product_qa.utils.config.load_dotenv"):
        config = Config()

        assert config.data_file == Path(DEFAULT_DATA_FILE)
        assert config.record_dialect is RecordDialect.TOLERANT
        assert config.search_default_limit == 10
        assert config.parse_error_log_limit == 5
        assert config.log_level == "INFO"
        assert config.log_format == "json"


def test_config_reads_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that Config loads every supported environment variable."""
    monkeypatch.setenv("DATA_FILE", "/data/qa_Appliances.json.gz")
    monkeypatch.setenv("RECORD_DIALECT", "JSON")
    monkeypatch.setenv("SEARCH_DEFAULT_LIMIT", "25")
    monkeypatch.setenv("PARSE_ERROR_LOG_LIMIT", "0")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FORMAT", "Console")

    with patch("product_qa.utils.config.load_dotenv"):
        config = Config()

        assert config.data_file == Path("/data/qa_Appliances.json.gz")
        assert config.record_dialect is RecordDialect.JSON
        assert config.search_default_limit == 25
        assert config.parse_error_log_limit == 0
        assert config.log_level == "DEBUG"
        assert config.log_format == "console"


def test_config_blank_int_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a blank integer variable is treated as unset."""
    monkeypatch.setenv("SEARCH_DEFAULT_LIMIT", "  ")

    with patch("product_qa.utils.config.load_dotenv"):
        assert Config().search_default_limit == 10


@pytest.mark.parametrize(
    ("key", "value", "message"),
    [
        ("SEARCH_DEFAULT_LIMIT", "ten", "must be an integer"),
        ("SEARCH_DEFAULT_LIMIT", "0", "must be >= 1"),
        ("PARSE_ERROR_LOG_LIMIT", "-1", "must be >= 0"),
        ("RECORD_DIALECT", "yaml", "must be one of: tolerant, json"),
        ("LOG_FORMAT", "xml", "LOG_FORMAT must be one of"),
    ],
)
def test_config_invalid_values(
    monkeypatch: pytest.MonkeyPatch, key: str, value: str, message: str
) -> None:
    """Test that invalid values raise ConfigurationError naming the variable."""
    monkeypatch.setenv(key, value)

    with patch("product_qa.utils.config.load_dotenv"):
        with pytest.raises(ConfigurationError, match=message) as exc_info:
            Config()

    assert key in str(exc_info.value)


def test_config_loads_dotenv_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test that a .env file in the working directory is loaded."""
    (tmp_path / ".env").write_text("SEARCH_DEFAULT_LIMIT=7\nDATA_FILE=corpus.json.gz\n")
    monkeypatch.chdir(tmp_path)

    with patch.dict(os.environ):
        config = Config()

    assert config.search_default_limit == 7
    assert config.data_file == Path("corpus.json.gz")
