"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import List, Optional

from dotenv import load_dotenv

from .backoff import BackoffPolicy
from .transport_errors import DEFAULT_EOF_MARKERS, ErrorClassifier


@dataclass(frozen=True)
class Config:
    http_timeout: float
    retry_initial_interval: float
    retry_multiplier: float
    retry_max_interval: float
    retry_jitter: float
    retry_max_elapsed: Optional[float]
    retry_max_attempts: Optional[int]
    eof_markers: List[str]
    log_level: str
    log_file: Optional[str]

    def backoff_policy(self) -> BackoffPolicy:
        return BackoffPolicy(
            initial_interval=self.retry_initial_interval,
            multiplier=self.retry_multiplier,
            max_interval=self.retry_max_interval,
            jitter=self.retry_jitter,
            max_elapsed_time=self.retry_max_elapsed,
            max_attempts=self.retry_max_attempts,
        )

    def error_classifier(self) -> ErrorClassifier:
        return ErrorClassifier(eof_markers=self.eof_markers)


def _parse_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid number in environment variable {name}: {raw!r}") from None


def _parse_optional_float(name: str, default: Optional[str]) -> Optional[float]:
    raw = _normalize_optional(os.getenv(name, default))
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid number in environment variable {name}: {raw!r}") from None
    return value if value > 0 else None


def _parse_optional_int(name: str) -> Optional[int]:
    raw = _normalize_optional(os.getenv(name))
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Invalid integer in environment variable {name}: {raw!r}") from None


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config() -> Config:
    load_dotenv()

    eof_markers = os.getenv("RETRY_EOF_MARKERS", ",".join(DEFAULT_EOF_MARKERS))

    return Config(
        http_timeout=_parse_float("HTTP_TIMEOUT", "30"),
        retry_initial_interval=_parse_float("RETRY_INITIAL_INTERVAL", "0.5"),
        retry_multiplier=_parse_float("RETRY_MULTIPLIER", "1.5"),
        retry_max_interval=_parse_float("RETRY_MAX_INTERVAL", "60"),
        retry_jitter=_parse_float("RETRY_JITTER", "0.25"),
        retry_max_elapsed=_parse_optional_float("RETRY_MAX_ELAPSED", "900"),
        retry_max_attempts=_parse_optional_int("RETRY_MAX_ATTEMPTS"),
        eof_markers=_parse_list(eof_markers),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=_normalize_optional(os.getenv("LOG_FILE")),
    )


def _normalize_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned if cleaned else None
