"""Tests for configuration loading."""

import pytest

from lyt.core.config import Config, ensure_directories, load_config, parse_config


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Isolated XDG config dir with no local config.toml in the cwd."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LYT_API_BASE_URL", raising=False)
    monkeypatch.delenv("LYT_LOG_LEVEL", raising=False)
    return tmp_path / "xdg" / "lyt"


class TestParseConfig:
    """Tests for parse_config."""

    def test_defaults(self) -> None:
        """Test empty TOML yields the defaults."""
        config = parse_config({})
        assert config == Config()
        assert config.api.base_url == "https://api.dr.dk/radio/v4"
        assert config.cache.ttl_seconds == 600
        assert config.streams.fallback_urls == {}

    def test_sections(self) -> None:
        """Test values from every section are read."""
        config = parse_config(
            {
                "api": {"base_url": "https://mirror/radio/v4/", "timeout_seconds": 5},
                "streams": {
                    "fallback_base": "https://icy/AAC/",
                    "fallback_urls": {"P1": "https://icy/p1"},
                },
                "cache": {"ttl_seconds": 120},
                "player": {"volume": 40},
                "logging": {"level": "DEBUG"},
            }
        )
        assert config.api.base_url == "https://mirror/radio/v4"
        assert config.api.timeout_seconds == 5.0
        assert config.streams.fallback_base == "https://icy/AAC"
        assert config.streams.fallback_urls == {"p1": "https://icy/p1"}
        assert config.cache.ttl_seconds == 120
        assert config.player.volume == 40
        assert config.logging.level == "DEBUG"

    def test_invalid_ttl_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_config({"cache": {"ttl_seconds": 0}})


class TestLoadConfig:
    """Tests for load_config."""

    def test_creates_default_file(self, config_home) -> None:
        """Test first run writes a default config file."""
        config = load_config()
        assert (config_home / "config.toml").exists()
        assert config.cache.ttl_seconds == 600

    def test_reads_existing_file(self, config_home) -> None:
        config_home.mkdir(parents=True)
        (config_home / "config.toml").write_text('[cache]\nttl_seconds = 60\n')
        assert load_config().cache.ttl_seconds == 60

    def test_broken_file_falls_back_to_defaults(self, config_home) -> None:
        """Test a malformed or invalid file does not crash loading."""
        config_home.mkdir(parents=True)
        (config_home / "config.toml").write_text("[cache\nttl_seconds = ")
        assert load_config() == Config()

    def test_environment_overrides(self, config_home, monkeypatch) -> None:
        """Test LYT_* variables win over the file."""
        monkeypatch.setenv("LYT_API_BASE_URL", "http://localhost:8080/")
        monkeypatch.setenv("LYT_LOG_LEVEL", "debug")
        config = load_config()
        assert config.api.base_url == "http://localhost:8080"
        assert config.logging.level == "DEBUG"

    def test_ensure_directories(self, config_home, tmp_path, monkeypatch) -> None:
        """Test config and data directories are created."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        ensure_directories()
        assert config_home.is_dir()
        assert (tmp_path / "data" / "lyt").is_dir()
