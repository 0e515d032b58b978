# Area: Shared Tests
"""Tests for logging setup."""

import json
import logging
from unittest.mock import patch

import pytest

from periselene._shared.logging_config import (
    JSONFormatter,
    disable_quiet_mode,
    enable_quiet_mode,
    is_quiet_mode_enabled,
    log_error,
    setup_logging,
)
from periselene.errors import ConfigError


@pytest.fixture
def restore_logger():
    """Put the package logger back the way it was."""
    pkg_logger = logging.getLogger("periselene")
    handlers = list(pkg_logger.handlers)
    level, propagate = pkg_logger.level, pkg_logger.propagate
    yield pkg_logger
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers = handlers
    pkg_logger.setLevel(level)
    pkg_logger.propagate = propagate
    disable_quiet_mode()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_writes_json_lines(self, tmp_path, restore_logger):
        """Test that the file log gets one JSON object per record."""
        log_file = tmp_path / "logs" / "mission.log"
        setup_logging(log_file_path=str(log_file))

        logging.getLogger("periselene.director").info("Phase IDLE → BUILD")

        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        data = json.loads(line)
        assert data["level"] == "INFO"
        assert data["logger"] == "periselene.director"
        assert data["message"] == "Phase IDLE → BUILD"

    def test_quiet_mode_toggle(self, restore_logger):
        """Test quiet mode flags."""
        enable_quiet_mode()
        assert is_quiet_mode_enabled() is True
        disable_quiet_mode()
        assert is_quiet_mode_enabled() is False


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_extra_fields_included(self):
        """Test that structured extras reach the JSON line."""
        record = logging.LogRecord("periselene", logging.WARNING, __file__, 1, "down", None, None)
        record.operation = "store.read"
        record.error_type = "ADAPTER_UNAVAILABLE"
        data = json.loads(JSONFormatter().format(record))
        assert data["operation"] == "store.read"
        assert data["error_type"] == "ADAPTER_UNAVAILABLE"
        assert "participant_id" not in data


class TestLogError:
    """Tests for log_error."""

    def test_block_to_stderr_and_summary_logged(self, capsys):
        """Test the formatted block on stderr and the one-line log entry."""
        error = ConfigError(["build_duration_seconds must be a positive number"])
        with patch("periselene._shared.logging_config.logger") as mock_logger:
            log_error(error)

        stderr = capsys.readouterr().err
        assert "CONFIG_ERROR" in stderr
        assert "build_duration_seconds" in stderr
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["extra"] == {"error_type": "CONFIG_ERROR"}
