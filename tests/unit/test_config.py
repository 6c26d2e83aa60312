"""
Unit tests for ServerConfig.
"""

import pytest

from echoserver.config import ServerConfig
from echoserver.errors import ConfigError, SetupError


class TestServerConfig:
    """Tests for defaults, validation and environment loading."""

    def test_defaults(self):
        """Test the reference sizing."""
        config = ServerConfig()

        assert config.host == "0.0.0.0"
        assert config.backlog == 10
        assert config.buffer_size == 1024
        config.validate()

    @pytest.mark.parametrize("port", [1, 80, 9000, 65535])
    def test_valid_ports(self, port):
        """Test that the whole port range is accepted."""
        ServerConfig(port=port).validate()

    @pytest.mark.parametrize("port", [0, -1, 65536, 100000])
    def test_invalid_ports(self, port):
        """Test that out-of-range ports fail validation."""
        with pytest.raises(ConfigError) as exc_info:
            ServerConfig(port=port).validate()

        assert "Invalid port" in str(exc_info.value)

    @pytest.mark.parametrize("field, value", [
        ("backlog", 0),
        ("buffer_size", 0),
        ("accept_timeout", 0),
        ("log_level", "LOUD"),
    ])
    def test_invalid_values(self, field, value):
        """Test the remaining validation rules."""
        config = ServerConfig()
        setattr(config, field, value)

        with pytest.raises(ConfigError):
            config.validate()

    def test_config_error_is_setup_error(self):
        """Test that config errors are fatal setup errors and ValueErrors."""
        assert issubclass(ConfigError, SetupError)
        assert issubclass(ConfigError, ValueError)

    def test_from_env(self, monkeypatch):
        """Test loading values from environment variables."""
        monkeypatch.setenv("ECHO_HOST", "127.0.0.1")
        monkeypatch.setenv("ECHO_PORT", "4242")
        monkeypatch.setenv("ECHO_BACKLOG", "3")
        monkeypatch.setenv("ECHO_BUFFER_SIZE", "2048")
        monkeypatch.setenv("ECHO_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 4242
        assert config.backlog == 3
        assert config.buffer_size == 2048
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        """Test that unset variables fall back to defaults."""
        for name in ("ECHO_HOST", "ECHO_PORT", "ECHO_BACKLOG",
                     "ECHO_BUFFER_SIZE", "ECHO_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    def test_from_env_not_a_number(self, monkeypatch):
        """Test that non-numeric values are reported as ConfigError."""
        monkeypatch.setenv("ECHO_PORT", "eighty")

        with pytest.raises(ConfigError):
            ServerConfig.from_env()
