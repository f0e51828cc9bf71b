"""Logging utilities for Policy QA.

Records are emitted as JSON lines. Fields bound with :func:`log_context`
(the collection being written, the retrieval mode of a question, ...) are
attached to every record logged inside the block as ``ctx_<name>``.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

import orjson

_DEFAULT_LEVEL = os.environ.get("POLQA_LOG_LEVEL", "INFO")
_CTX_PREFIX = "ctx_"

_LOG_CONTEXT: ContextVar[dict[str, Any]] = ContextVar("polqa_log_context", default={})

# Chatty per-request loggers of the HTTP clients behind OpenAI and Qdrant.
_QUIET_LOGGERS = ("httpx", "httpcore", "openai")


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` to every record logged in this block (nesting merges)."""
    token = _LOG_CONTEXT.set({**_LOG_CONTEXT.get(), **fields})
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def current_log_context() -> dict[str, Any]:
    return dict(_LOG_CONTEXT.get())


class ContextFilter(logging.Filter):
    """Copy the bound context onto records; explicit ``extra`` wins."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _LOG_CONTEXT.get().items():
            attr = f"{_CTX_PREFIX}{key}"
            if not hasattr(record, attr):
                setattr(record, attr, value)
        return True


class JsonFormatter(logging.Formatter):
    """JSON log formatter emitting ``ctx_*`` attributes as top-level fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in sorted(record.__dict__.items()) if key.startswith(_CTX_PREFIX)
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


def build_handler(stream: Any = None, use_json: bool = True) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout if stream is None else stream)
    handler.addFilter(ContextFilter())
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    return handler


def configure_logging(level: str | int = _DEFAULT_LEVEL, use_json: bool = True) -> None:
    """Install a single context-aware handler on the root logger."""
    logging.captureWarnings(True)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [build_handler(use_json=use_json)]
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = "policy_qa") -> logging.Logger:
    """Return configured logger, configuring root on first call."""
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


__all__ = [
    "ContextFilter",
    "JsonFormatter",
    "build_handler",
    "configure_logging",
    "current_log_context",
    "get_logger",
    "log_context",
]
