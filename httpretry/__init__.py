"""Retrying HTTP client with exponential backoff and pluggable response classification."""

from .backoff import BackoffPolicy, BackoffSchedule, no_wait_policy
from .client import RetryClient, new_default_5xx_client, request_with_retry
from .conditions import (
    Classification,
    Verdict,
    accept,
    default_5xx_classifier,
    legacy_conditioner,
    permanent,
    retry,
    status_classifier,
)
from .errors import HttpRetryError, ResponseRejected, RetryCancelled
from .result import RetryResult, attempts
from .transport_errors import ErrorClassifier

__all__ = [
    "BackoffPolicy",
    "BackoffSchedule",
    "Classification",
    "ErrorClassifier",
    "HttpRetryError",
    "ResponseRejected",
    "RetryCancelled",
    "RetryClient",
    "RetryResult",
    "Verdict",
    "accept",
    "attempts",
    "default_5xx_classifier",
    "legacy_conditioner",
    "new_default_5xx_client",
    "no_wait_policy",
    "permanent",
    "request_with_retry",
    "retry",
    "status_classifier",
]
