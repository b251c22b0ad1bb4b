"""
Tests for the structlog setup used by the CLI entry points.
"""
import json

import pytest
import structlog

from gatehouse.core.config import Settings
from gatehouse.core.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestConfigureLogging:

    def test_events_carry_service_name(self, capsys):
        configure_logging(Settings(app_env="production", app_name="north-gate"))

        structlog.get_logger().info("gate_opened", unit="A-101")

        event = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert event["event"] == "gate_opened"
        assert event["service"] == "north-gate"
        assert event["level"] == "info"
        assert event["unit"] == "A-101"

    def test_default_service_name(self):
        configure_logging(Settings(app_env="production"))
        assert structlog.contextvars.get_contextvars()["service"] == "gatehouse"

    def test_level_filter(self, capsys):
        configure_logging(Settings(app_env="production", log_level="WARNING"))

        structlog.get_logger().info("quiet")
        structlog.get_logger().warning("loud")

        out = capsys.readouterr().out
        assert "quiet" not in out
        assert "loud" in out
