"""Tests for configuration loading and the composition root helpers."""

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest

from rackbridge.config import load_settings
from rackbridge.core.models import RackServletConfig
from rackbridge.main import JsonFormatter, configure_logging


class TestConfigurationLoading:
    """Test configuration loading and validation."""

    def test_load_settings_with_defaults(self) -> None:
        """Load settings with default values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        assert settings.rack_config_path == "rack/config.py"
        assert settings.http_host == "0.0.0.0"
        assert settings.http_port == 8080
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"
        assert settings.debug is False

    def test_load_settings_from_env(self) -> None:
        """Load settings from environment variables."""
        with patch.dict(
            os.environ,
            {
                "RACK_CONFIG_PATH": "apps/hello/config.py",
                "HTTP_PORT": "9090",
                "LOG_LEVEL": "DEBUG",
            },
        ):
            settings = load_settings()
            assert settings.rack_config_path == "apps/hello/config.py"
            assert settings.http_port == 9090
            assert settings.log_level == "DEBUG"

    def test_load_settings_from_env_file(self, tmp_path) -> None:
        """Load settings from an explicit .env file."""
        env_file = tmp_path / "test.env"
        env_file.write_text("RACK_CONFIG_PATH=from/env/file.py\nHTTP_HOST=127.0.0.1\n")

        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings(str(env_file))

        assert settings.rack_config_path == "from/env/file.py"
        assert settings.http_host == "127.0.0.1"

    @pytest.mark.parametrize("port", ["0", "70000", "-1"])
    def test_load_settings_validates_http_port(self, port: str) -> None:
        """HTTP port validation rejects out-of-range values."""
        with patch.dict(os.environ, {"HTTP_PORT": port}):
            with pytest.raises(Exception):  # ValidationError
                load_settings()

    def test_load_settings_validates_rack_config_path(self) -> None:
        """A blank rackup path is rejected."""
        with patch.dict(os.environ, {"RACK_CONFIG_PATH": "  "}):
            with pytest.raises(Exception):  # ValidationError
                load_settings()

    def test_load_settings_rejects_unknown_log_level(self) -> None:
        with patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}):
            with pytest.raises(Exception):  # ValidationError
                load_settings()

    def test_servlet_config(self) -> None:
        """Settings produce the servlet configuration."""
        with patch.dict(os.environ, {"RACK_CONFIG_PATH": "apps/config.py"}):
            settings = load_settings()

        assert settings.servlet_config() == RackServletConfig(rack_config_path="apps/config.py")


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_quotes_in_message_stay_valid_json(self) -> None:
        record = logging.LogRecord(
            "rackbridge.test", logging.INFO, __file__, 1, 'said "hello"\nand left', None, None
        )

        entry = json.loads(JsonFormatter().format(record))

        assert entry["message"] == 'said "hello"\nand left'
        assert entry["level"] == "INFO"
        assert entry["logger"] == "rackbridge.test"

    def test_exception_included(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "rackbridge.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        entry = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: boom" in entry["exc_info"]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_root_level(self) -> None:
        root = logging.getLogger()
        original_handlers = root.handlers[:]
        original_level = root.level
        try:
            root.handlers = []
            configure_logging("WARNING", "json")
            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers = original_handlers
            root.setLevel(original_level)
