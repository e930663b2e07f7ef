"""logger 单元测试"""

from __future__ import annotations

import json
import logging

from devmanager.utils.logger import (
    LOG_JSON_ENV,
    LOG_LEVEL_ENV,
    JSONFormatter,
    reset_logging,
    setup_logging,
    setup_logging_from_env,
)


class TestLogging:
    def test_setup_replaces_handlers(self) -> None:
        setup_logging("INFO")
        setup_logging("DEBUG")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self) -> None:
        setup_logging("chatty")
        assert logging.getLogger().level == logging.WARNING

    def test_json_output(self) -> None:
        setup_logging(json_output=True)
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)

    def test_json_formatter_keeps_unicode(self) -> None:
        record = logging.LogRecord("devmanager.x", logging.INFO, __file__, 1, "同步完成 %s", ("api",), None)
        entry = json.loads(JSONFormatter().format(record))
        assert entry["message"] == "同步完成 api"
        assert entry["level"] == "INFO"
        assert "同步完成" in JSONFormatter().format(record)

    def test_reset(self) -> None:
        setup_logging()
        reset_logging()
        assert logging.getLogger().handlers == []

    def test_llm_client_loggers_stay_quiet(self) -> None:
        setup_logging("DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("openai").level == logging.WARNING

    def test_from_env(self) -> None:
        setup_logging_from_env({LOG_LEVEL_ENV: "info", LOG_JSON_ENV: "1"})
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_from_env_defaults(self) -> None:
        setup_logging_from_env({})
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)
