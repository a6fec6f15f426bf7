"""
Logging setup for ingestion runs.

The "longevity_feed" logger writes human-readable lines to the console
through Rich and, when a log directory is configured, structured JSONL to a
file. Generation-service responses go to a separate "longevity_feed.llm"
logger so they can be kept, trimmed or redacted independently.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import re
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig


LOGGER_NAME = "longevity_feed"
LLM_LOGGER_NAME = f"{LOGGER_NAME}.llm"
REDACTION_MODES = ("none", "redact_content", "redact_urls")
MAX_LOGGED_CHARS = 20000

_URL_RE = re.compile(r"https?://\S+")


def setup_logging(cfg: LoggingConfig, log_dir: Path | None = None) -> logging.Logger:
    """Configure the run logger from scratch.

    Handlers from a previous run in the same process are dropped, so calling
    this once per run never duplicates output.
    """
    level = _level_from_string(cfg.level)
    logger = _fresh_logger(LOGGER_NAME, level)

    if cfg.console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        _attach(logger, console_handler, level)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / cfg.filename, encoding="utf-8")
        file_handler.setFormatter(_build_file_formatter(cfg.format))
        _attach(logger, file_handler, level)

    return logger


def setup_llm_logger(cfg: LoggingConfig, log_dir: Path | None = None) -> logging.Logger | None:
    """Return the JSONL logger for generation responses, or None when disabled.

    LLM logging needs a log directory; it never writes to the console.
    """
    if not cfg.llm_log_enabled or log_dir is None:
        return None

    level = _level_from_string(cfg.level)
    logger = _fresh_logger(LLM_LOGGER_NAME, level)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_dir / cfg.llm_log_file, encoding="utf-8")
    file_handler.setFormatter(JsonlFormatter())
    _attach(logger, file_handler, level)
    return logger


def log_event(logger: logging.Logger | None, message: str, **fields: Any) -> None:
    """Log an INFO message with structured fields; a None logger is a no-op."""
    if logger is None:
        return
    logger.info(message, extra=fields)


def redact_text(text: str, mode: str) -> str:
    """Apply a redaction mode to free text such as a prompt or raw response."""
    if mode == "redact_content":
        return ""
    if mode == "redact_urls":
        return _URL_RE.sub("[REDACTED_URL]", text)
    return text


def redact_value(value: str | None, mode: str) -> str | None:
    """Apply a redaction mode to a single field such as a source URL."""
    if value is None or mode == "none":
        return value
    if mode == "redact_content":
        return None
    return "[REDACTED]"


def truncate_text(text: str, max_chars: int = MAX_LOGGED_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...(truncated)"


class JsonlFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extract_extras(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


# Attributes every LogRecord has; anything else came in through `extra=`.
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _extract_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RESERVED}


def _fresh_logger(name: str, level: int) -> logging.Logger:
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    logger.propagate = False
    return logger


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    logger.addHandler(handler)


def _build_file_formatter(fmt: str) -> logging.Formatter:
    if fmt == "jsonl":
        return JsonlFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")


def _level_from_string(level: str) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)
