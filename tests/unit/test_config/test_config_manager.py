"""
Unit tests for configuration loading and the configuration singleton.
"""

import tomllib

import pytest

from proclabel.config import manager
from proclabel.config import (
    clear_config_cache,
    get_config,
    set_config_path,
)
from proclabel.models import AppConfig
from proclabel.validation import ValidationError


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Restore the configuration path and singleton after each test."""
    monkeypatch.setattr(manager, "_CONFIG_FILE_PATH", manager._CONFIG_FILE_PATH)
    clear_config_cache()
    yield
    clear_config_cache()


def write_config(path, text):
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.unit
class TestConfigManager:
    """Test cases for get_config and friends."""

    def test_repository_config_loads(self):
        """Test that the shipped conf/config.toml is valid."""
        config = get_config()

        assert config.identifier.max_entries == 1000
        assert config.identifier.ttl_seconds == 10.0
        assert config.monitor.listening_only is True

    def test_custom_path(self, tmp_path):
        path = write_config(
            tmp_path / "config.toml",
            "[identifier.cache]\nttl_seconds = 3.0\n\n[monitor]\nlog_level = \"warning\"\n",
        )
        set_config_path(path)

        config = get_config()

        assert config.identifier.ttl_seconds == 3.0
        assert config.identifier.max_entries == 1000
        assert config.monitor.log_level == "WARNING"

    def test_config_is_memoised(self, tmp_path):
        set_config_path(write_config(tmp_path / "config.toml", ""))

        first = get_config()

        assert get_config() is first

    def test_clear_config_cache_forces_reload(self, tmp_path):
        path = write_config(tmp_path / "config.toml", "[identifier.cache]\nmax_entries = 10\n")
        set_config_path(path)
        assert get_config().identifier.max_entries == 10

        write_config(path, "[identifier.cache]\nmax_entries = 20\n")
        assert get_config().identifier.max_entries == 10
        clear_config_cache()

        assert get_config().identifier.max_entries == 20

    def test_explicit_missing_file_raises(self, tmp_path):
        set_config_path(tmp_path / "missing.toml")

        with pytest.raises(FileNotFoundError):
            get_config()

    def test_missing_default_file_uses_defaults(self, tmp_path, monkeypatch):
        missing = tmp_path / "absent.toml"
        monkeypatch.setattr(manager, "_DEFAULT_CONFIG_FILE_PATH", missing)
        monkeypatch.setattr(manager, "_CONFIG_FILE_PATH", missing)

        assert get_config() == AppConfig()

    def test_malformed_toml_raises(self, tmp_path):
        set_config_path(write_config(tmp_path / "config.toml", "[identifier.cache\n"))

        with pytest.raises(tomllib.TOMLDecodeError):
            get_config()

    def test_invalid_value_raises(self, tmp_path):
        set_config_path(
            write_config(tmp_path / "config.toml", "[identifier.cache]\nmax_entries = -5\n")
        )

        with pytest.raises(ValidationError):
            get_config()
