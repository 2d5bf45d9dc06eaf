"""Tests for the two-phase logging setup used by the CLI."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest

import knowledge_scorer.logging_config as logging_config
from knowledge_scorer.logging_config import (
    _LITELLM_LOGGERS,
    _SUPPRESSED_LOGGERS,
    LOG_DATEFMT,
    LOG_FORMAT,
    apply_log_level,
    cleanup_third_party_handlers,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_flags() -> Iterator[None]:
    logging_config._phase1_done = False
    logging_config._phase2_done = False
    saved = os.environ.pop("LITELLM_LOG", None)
    yield
    os.environ.pop("LITELLM_LOG", None)
    if saved is not None:
        os.environ["LITELLM_LOG"] = saved


class TestSetupLogging:
    def test_runs_once(self) -> None:
        with patch.object(logging_config.logging, "basicConfig") as mock_bc:
            setup_logging()
            setup_logging("DEBUG")
        mock_bc.assert_called_once()

    def test_level_passed_to_root(self) -> None:
        with patch.object(logging_config.logging, "basicConfig") as mock_bc:
            setup_logging("debug")
        kwargs = mock_bc.call_args.kwargs
        assert kwargs["level"] == logging.DEBUG
        assert kwargs["format"] == LOG_FORMAT
        assert kwargs["datefmt"] == LOG_DATEFMT

    def test_litellm_env_defaulted(self) -> None:
        setup_logging()
        assert os.environ["LITELLM_LOG"] == "WARNING"

    def test_litellm_env_not_overwritten(self) -> None:
        os.environ["LITELLM_LOG"] = "ERROR"
        setup_logging()
        assert os.environ["LITELLM_LOG"] == "ERROR"

    def test_noisy_loggers_pinned_to_warning(self) -> None:
        setup_logging()
        assert "httpcore" in _SUPPRESSED_LOGGERS
        for name in _SUPPRESSED_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING, name


class TestCleanupHandlers:
    def test_handlers_cleared_and_propagating(self) -> None:
        for name in _LITELLM_LOGGERS:
            lg = logging.getLogger(name)
            lg.addHandler(logging.StreamHandler())
            lg.propagate = False

        cleanup_third_party_handlers()

        for name in _LITELLM_LOGGERS:
            lg = logging.getLogger(name)
            assert lg.handlers == []
            assert lg.propagate is True

    def test_second_call_is_noop(self) -> None:
        lg = logging.getLogger("LiteLLM")
        cleanup_third_party_handlers()

        handler = logging.StreamHandler()
        lg.addHandler(handler)
        try:
            cleanup_third_party_handlers()
            assert handler in lg.handlers
        finally:
            lg.removeHandler(handler)


class TestApplyLogLevel:
    @pytest.fixture(autouse=True)
    def _restore_root_level(self) -> Iterator[None]:
        root = logging.getLogger()
        saved = root.level
        yield
        root.setLevel(saved)

    def test_sets_root_level(self) -> None:
        apply_log_level("debug")
        assert logging.getLogger().level == logging.DEBUG
        apply_log_level("ERROR")
        assert logging.getLogger().level == logging.ERROR

    def test_applies_after_phase_one(self) -> None:
        setup_logging("INFO")
        apply_log_level("DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_third_party_stays_pinned(self) -> None:
        logging.getLogger("httpx").setLevel(logging.DEBUG)
        apply_log_level("DEBUG")
        for name in _SUPPRESSED_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING, name
