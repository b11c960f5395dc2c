"""Tests for logging configuration."""

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import structlog

from dojo.api.dependencies import get_session_controller
from dojo.core.exceptions import ConfigurationError
from dojo.core.logging import bind_context, clear_context, configure_logging, get_logger


def test_configure_logging_writes_run_file(tmp_path):
    """configure_logging() creates a timestamped log file."""
    log_file = configure_logging(logs_dir=tmp_path)

    assert log_file.parent == tmp_path
    assert list(tmp_path.glob("dojo_*.log")) == [log_file]


def test_old_logs_are_culled(tmp_path):
    """Only the most recent runs are kept."""
    for i in range(6):
        (tmp_path / f"dojo_2020010{i}_000000.log").write_text("")

    configure_logging(log_runs_to_keep=3, logs_dir=tmp_path)

    assert len(list(tmp_path.glob("dojo_*.log"))) <= 3


def test_level_and_noisy_loggers(tmp_path):
    configure_logging(logs_dir=tmp_path, level="debug")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging(logs_dir=tmp_path, level="INFO")


def test_unknown_level_rejected(tmp_path):
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging(logs_dir=tmp_path, level="chatty")


def test_get_logger_returns_usable_logger(tmp_path):
    configure_logging(logs_dir=tmp_path)
    log = get_logger("test")

    assert callable(log.info)
    assert callable(log.error)
    bound = log.bind(identifier="Ada")
    bound.info("test_message")


def test_context_binding(tmp_path):
    """Context variables can be bound and cleared."""
    configure_logging(logs_dir=tmp_path)

    bind_context(request_id="req-123")
    assert structlog.contextvars.get_contextvars()["request_id"] == "req-123"

    clear_context()
    assert structlog.contextvars.get_contextvars() == {}


class TestControllerDependency:
    """The controller dependency tags request logs with the trainee."""

    @staticmethod
    def _request(controller):
        return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(
            session_controller=controller
        )))

    @pytest.mark.asyncio
    async def test_binds_logged_in_trainee(self):
        controller = MagicMock(identifier="Ada")
        clear_context()

        result = await get_session_controller(self._request(controller))

        assert result is controller
        assert structlog.contextvars.get_contextvars()["trainee"] == "Ada"
        clear_context()

    @pytest.mark.asyncio
    async def test_no_trainee_before_login(self):
        clear_context()

        await get_session_controller(self._request(MagicMock(identifier=None)))

        assert "trainee" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_missing_controller_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            await get_session_controller(self._request(None))
