"""Tests for usergraph.logging_config — unified logging configuration."""
from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from unittest import mock

from usergraph.app_config import AppConfig
from usergraph.logging_config import _running_in_container, configure_logging, reset_logging
from usergraph.request_tracing import RequestIdFilter, request_scope
from usergraph.structured_logging import StructuredFormatter, StructuredLogHandler


def _console(logger):
    return [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ][0]


class TestConfigureLogging:

    def test_returns_logger(self):
        logger = configure_logging(force_text=True)
        assert isinstance(logger, logging.Logger)
        assert logger.name == "usergraph"

    def test_idempotent(self):
        l1 = configure_logging(force_text=True)
        handler_count = len(l1.handlers)
        l2 = configure_logging(force_text=True)
        assert l1 is l2
        assert len(l2.handlers) == handler_count

    def test_text_format_console(self):
        logger = configure_logging(force_text=True)
        assert not isinstance(_console(logger).formatter, StructuredFormatter)

    def test_json_format_console(self):
        logger = configure_logging(force_json=True)
        assert isinstance(_console(logger).formatter, StructuredFormatter)

    def test_json_auto_in_production(self):
        logger = configure_logging(AppConfig.from_dict({"_production": True}))
        assert isinstance(_console(logger).formatter, StructuredFormatter)

    def test_json_via_env_var(self):
        with mock.patch.dict(os.environ, {"UG_LOG_FORMAT": "json"}):
            logger = configure_logging()
        assert isinstance(_console(logger).formatter, StructuredFormatter)

    def test_force_text_overrides_production(self):
        logger = configure_logging(AppConfig.from_dict({"_production": True}), force_text=True)
        assert not isinstance(_console(logger).formatter, StructuredFormatter)

    def test_debug_level(self):
        logger = configure_logging(AppConfig.from_dict({"_debug": True}), force_text=True)
        assert _console(logger).level == logging.DEBUG

    def test_level_from_api_config(self):
        logger = configure_logging(AppConfig.from_dict({"__loglevel": "warning"}), force_text=True)
        assert _console(logger).level == logging.WARNING

    def test_quiet_mode(self):
        logger = configure_logging(AppConfig.from_dict({"__logging": False}), force_text=True)
        assert _console(logger).level == logging.WARNING

    def test_request_id_filter_on_console(self):
        logger = configure_logging(force_text=True)
        assert any(isinstance(f, RequestIdFilter) for f in _console(logger).filters)

    def test_json_console_is_structured_handler(self):
        logger = configure_logging(force_json=True)
        assert isinstance(_console(logger), StructuredLogHandler)

    def test_text_lines_carry_request_id(self):
        console = _console(configure_logging(force_text=True))
        record = logging.LogRecord("usergraph.test", logging.INFO, __file__, 1, "hello", None, None)
        with request_scope("req-7"):
            assert console.filter(record)
        assert "[req-7]" in console.format(record)

    def test_no_file_handlers_by_default(self):
        logger = configure_logging(force_text=True)
        assert not [h for h in logger.handlers if isinstance(h, logging.handlers.TimedRotatingFileHandler)]

    def test_file_handlers_created(self, tmp_path):
        logger = configure_logging(force_text=True, log_dir=str(tmp_path))
        file_handlers = [
            h for h in logger.handlers
            if isinstance(h, logging.handlers.TimedRotatingFileHandler)
        ]
        assert len(file_handlers) == 2  # debug + error
        for handler in file_handlers:
            assert any(isinstance(f, RequestIdFilter) for f in handler.filters)
        reset_logging()
        assert logger.handlers == []

    def test_docker_detection(self):
        with mock.patch.dict(os.environ, {"DOCKER_CONTAINER": "1"}):
            assert _running_in_container()

    def test_kubernetes_detection(self):
        with mock.patch.dict(os.environ, {"KUBERNETES_SERVICE_HOST": "10.0.0.1"}):
            assert _running_in_container()
