"""
Unit Tests for Logging Module

Tests logger configuration and logging utilities.
"""

from unittest.mock import MagicMock

import pytest
import structlog

from memocache.core.config.constants import Stage
from memocache.core.logging.logger import (
    add_log_level_name,
    add_timestamp,
    get_logger,
    log_stage,
    preview_key,
    setup_logging,
)


@pytest.mark.unit
class TestLoggerCreation:
    """Test logger creation and configuration."""

    def test_get_logger_returns_logger_instance(self):
        logger = get_logger(__name__)

        assert logger is not None
        assert hasattr(logger, "info")

    @pytest.mark.parametrize("log_format", ["json", "console"])
    def test_setup_logging(self, log_format):
        """Test that both output formats configure structlog."""
        setup_logging(log_level="DEBUG", log_format=log_format)

        assert structlog.is_configured()
        structlog.reset_defaults()


@pytest.mark.unit
class TestProcessors:
    """Test custom structlog processors."""

    def test_add_timestamp(self):
        event = add_timestamp(None, "info", {})

        assert event["timestamp"].endswith("Z")

    def test_add_log_level_name(self):
        assert add_log_level_name(None, "info", {"level": "warning"})["level"] == "WARNING"
        assert add_log_level_name(None, "info", {}) == {}


@pytest.mark.unit
class TestLogStage:
    """Test stage logging helper."""

    def test_log_stage_with_enum(self):
        logger = MagicMock()

        log_stage(logger, Stage.HIT, "Cache hit", level="debug", cache_key="abc")

        logger.debug.assert_called_once_with("Cache hit", stage="MEMO.HIT", cache_key="abc")

    def test_log_stage_with_string(self):
        logger = MagicMock()

        log_stage(logger, "REDIS.GET", "Getting key")

        logger.info.assert_called_once_with("Getting key", stage="REDIS.GET")

    def test_preview_key(self):
        assert preview_key("a" * 40) == "a" * 20
        assert preview_key("short") == "short"
