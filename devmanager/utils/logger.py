"""dev-manager 日志配置

提供统一的日志配置，支持普通文本和结构化 JSON 两种输出格式。
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Mapping
from datetime import datetime, timezone

LOG_LEVEL_ENV = "DEV_MANAGER_LOG_LEVEL"
LOG_JSON_ENV = "DEV_MANAGER_LOG_JSON"

# LLM 客户端在 INFO 级别逐条记录 HTTP 请求，这些日志器最低只放到 WARNING
_QUIET_LOGGERS = ("openai", "httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器，便于脚本/CI 消费"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: 为 True 时使用 JSON 格式，否则使用人类可读格式

    说明:
        - 输出到 stderr，stdout 留给命令结果
        - 自动清理已有 handlers，避免重复输出
    """
    root = logging.getLogger()

    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    root.setLevel(getattr(logging, level.upper(), logging.WARNING))

    handler = logging.StreamHandler(sys.stderr)

    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
        handler.setFormatter(logging.Formatter(fmt))

    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


def setup_logging_from_env(environ: Mapping[str, str] | None = None) -> None:
    """按环境变量配置日志

    DEV_MANAGER_LOG_LEVEL 指定级别（默认 WARNING），
    DEV_MANAGER_LOG_JSON=1 时输出 JSON。
    """
    env = os.environ if environ is None else environ
    setup_logging(
        level=env.get(LOG_LEVEL_ENV, "") or "WARNING",
        json_output=env.get(LOG_JSON_ENV, "") == "1",
    )


def reset_logging() -> None:
    """清理根日志器上所有 handlers（测试用）"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
