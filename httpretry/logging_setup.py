"""Structured JSON logging for retry events."""

from __future__ import annotations

from enum import Enum
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .client import LOGGER_NAME


RESERVED_ATTRS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", args=(), exc_info=None).__dict__
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in record.__dict__.items() if key not in RESERVED_ATTRS
        )

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=True, default=_json_default)


class TruncatingFileHandler(logging.FileHandler):
    """File handler that drops the oldest lines once the file exceeds ``max_bytes``."""

    def __init__(self, filename: str | Path, max_bytes: int) -> None:
        super().__init__(filename, mode="a", encoding="utf-8", delay=False)
        self.max_bytes = max_bytes

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        try:
            self._truncate_if_needed()
        except OSError:
            self.handleError(record)

    def _truncate_if_needed(self) -> None:
        if self.max_bytes <= 0:
            return

        self.stream.flush()
        if os.path.getsize(self.baseFilename) <= self.max_bytes:
            return

        with open(self.baseFilename, "rb+") as handle:
            handle.seek(-self.max_bytes, os.SEEK_END)
            tail = handle.read()
            newline_index = tail.find(b"\n")
            if newline_index != -1:
                tail = tail[newline_index + 1 :]
            handle.seek(0)
            handle.write(tail)
            handle.truncate()


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


class MergeExtraAdapter(logging.LoggerAdapter):
    """Adapter whose fixed extras are merged with, not replaced by, per-call extras."""

    def process(self, msg, kwargs):
        merged = dict(self.extra)
        merged.update(kwargs.get("extra") or {})
        kwargs["extra"] = merged
        return msg, kwargs


def setup_logging(
    level: str,
    log_file: Optional[str] = None,
    client_id: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
) -> logging.LoggerAdapter:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = JsonFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TruncatingFileHandler(log_path, max_bytes=max_bytes)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    extra = {"clientId": client_id} if client_id else {}
    return MergeExtraAdapter(logger, extra)
