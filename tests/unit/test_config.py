"""
Unit tests for server configuration and the command line.
"""

import pytest

from httpgate.config import ServerConfig
from httpgate.__main__ import build_parser, config_from_args


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.backlog == 10
        assert config.max_request_size == 4096
        assert config.protected_prefixes == ("/admin",)
        assert config.auth_marker == "Authorization:"
        assert config.strict_params is False
        config.validate()

    def test_from_env(self):
        config = ServerConfig.from_env({
            "HTTPGATE_HOST": "0.0.0.0",
            "HTTPGATE_PORT": "3000",
            "HTTPGATE_WORKERS": "8",
            "HTTPGATE_TIMEOUT": "2.5",
            "HTTPGATE_MAX_REQUEST_SIZE": "8192",
            "HTTPGATE_LOG_LEVEL": "debug",
            "HTTPGATE_LOG_FORMAT": "JSON",
        })

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.workers == 8
        assert config.timeout == 2.5
        assert config.max_request_size == 8192
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_from_env_defaults(self):
        assert ServerConfig.from_env({}) == ServerConfig()

    @pytest.mark.parametrize("overrides", [
        {"port": 0},
        {"port": 70000},
        {"workers": 0},
        {"backlog": 0},
        {"queue_size": 0},
        {"timeout": 0},
        {"max_request_size": 10},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
    ])
    def test_validate_rejects(self, overrides):
        with pytest.raises(ValueError):
            ServerConfig(**overrides).validate()

    def test_validate_accepts_no_timeout(self):
        ServerConfig(timeout=None).validate()


class TestCommandLine:
    """Tests for argument handling in __main__."""

    def test_flags_override(self):
        args = build_parser().parse_args([
            "--host", "0.0.0.0",
            "--port", "9000",
            "--workers", "3",
            "--log-level", "DEBUG",
            "--log-format", "json",
            "--strict-params",
            "--strict-parsing",
        ])
        config = config_from_args(args, ServerConfig())

        assert config.host == "0.0.0.0"
        assert config.port == 9000
        assert config.workers == 3
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.strict_params is True
        assert config.strict_parsing is True

    def test_missing_flags_keep_base(self):
        base = ServerConfig(port=1234)
        config = config_from_args(build_parser().parse_args([]), base)

        assert config.port == 1234
        assert config.strict_params is False

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "httpgate" in capsys.readouterr().out
