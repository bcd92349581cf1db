"""Unit tests for logging configuration."""

import logging

import pytest
import structlog

from digital_readiness_assessment.observability import configure_logging
from digital_readiness_assessment.settings import Settings


class TestConfigureLogging:
    """configure_logging applies level filtering and the chosen renderer."""

    def test_json_renderer(self) -> None:
        configure_logging(Settings(log_json=True, log_level="WARNING"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_by_default(self) -> None:
        configure_logging(Settings())

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(Settings(log_json=True, log_level="WARNING"))
        logger = structlog.get_logger("test")

        logger.info("hidden event")
        logger.warning("shown event", question_id="q1")

        out = capsys.readouterr().out
        assert "hidden event" not in out
        assert "shown event" in out
        assert '"question_id": "q1"' in out

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(Settings(log_level="verbose"))
        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper is structlog.make_filtering_bound_logger(logging.INFO)
