"""HTTP client that retries requests with exponential backoff."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Optional

import requests

from .backoff import BackoffPolicy
from .conditions import Classifier, Verdict, default_5xx_classifier
from .errors import RetryCancelled
from .result import AttemptCounter, RetryResult
from .transport_errors import ErrorClassifier


LOGGER_NAME = "httpretry"

SEND_OPTIONS = {"timeout", "verify", "stream", "proxies", "cert", "allow_redirects"}


class RetryClient:
    """Wraps a transport and retries each request until it is settled.

    ``session`` is anything with a ``requests.Session``-style
    ``send(prepared_request, **kwargs)``. It is shared by all calls; every
    call gets its own attempt counter and backoff schedule, so one client may
    serve several threads.
    """

    def __init__(
        self,
        session,
        policy: Optional[BackoffPolicy] = None,
        classifier: Classifier = default_5xx_classifier,
        *,
        error_classifier: Optional[ErrorClassifier] = None,
        logger=None,
        timeout: Optional[float] = None,
    ) -> None:
        self.session = session
        self.policy = policy or BackoffPolicy()
        self.classifier = classifier
        self.error_classifier = error_classifier or ErrorClassifier()
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.timeout = timeout

    @classmethod
    def from_config(
        cls,
        config,
        session=None,
        classifier: Classifier = default_5xx_classifier,
        logger=None,
    ) -> "RetryClient":
        return cls(
            session if session is not None else requests.Session(),
            config.backoff_policy(),
            classifier,
            error_classifier=config.error_classifier(),
            logger=logger,
            timeout=config.http_timeout,
        )

    def request(
        self,
        method: str,
        url: str,
        *,
        cancel: Optional[threading.Event] = None,
        **kwargs,
    ) -> RetryResult:
        send_kwargs = {key: kwargs.pop(key) for key in list(kwargs) if key in SEND_OPTIONS}
        request = requests.Request(method, url, **kwargs)
        prepare = getattr(self.session, "prepare_request", None)
        prepared = prepare(request) if prepare is not None else request.prepare()
        return self.send(prepared, cancel=cancel, **send_kwargs)

    def send(
        self,
        request,
        *,
        cancel: Optional[threading.Event] = None,
        **send_kwargs,
    ) -> RetryResult:
        if self.timeout is not None:
            send_kwargs.setdefault("timeout", self.timeout)

        schedule = self.policy.schedule()
        counter = AttemptCounter()
        url = getattr(request, "url", None)

        while True:
            attempt = counter.increment()
            response = None
            try:
                response = self.session.send(request, **send_kwargs)
            except Exception as exc:
                classification = self.error_classifier.classify(exc)
                outcome: Any = exc
            else:
                classification = self.classifier(response)
                outcome = response

            if classification.verdict is Verdict.ACCEPT:
                return RetryResult(response, None, attempt)

            error = classification.error
            extra: Dict[str, Any] = {
                "attempt": attempt,
                "detail": str(error),
                "url": url,
                "statusCode": getattr(response, "status_code", None),
            }

            if classification.verdict is Verdict.PERMANENT:
                self.logger.warning(
                    "http_permanent_failure",
                    extra={"event": "http_permanent_failure", **extra},
                )
                return RetryResult(response, error, attempt)

            delay = schedule.next_delay(outcome)
            if delay is None:
                self.logger.warning(
                    "http_retry_exhausted",
                    extra={
                        "event": "http_retry_exhausted",
                        "elapsedSeconds": round(schedule.elapsed, 3),
                        **extra,
                    },
                )
                return RetryResult(response, error, attempt)

            self.logger.warning(
                "http_retry",
                extra={"event": "http_retry", "delaySeconds": round(delay, 3), **extra},
            )
            _release(response)
            if _wait(delay, cancel):
                self.logger.info(
                    "http_retry_cancelled",
                    extra={"event": "http_retry_cancelled", **extra},
                )
                return RetryResult(response, RetryCancelled(attempt), attempt)


def new_default_5xx_client(
    session: Optional[requests.Session] = None,
    policy: Optional[BackoffPolicy] = None,
    **kwargs,
) -> RetryClient:
    """Client that retries 5xx, accepts 2xx and gives up on anything else."""
    return RetryClient(
        session if session is not None else requests.Session(),
        policy or BackoffPolicy(),
        default_5xx_classifier,
        **kwargs,
    )


def request_with_retry(
    session,
    method: str,
    url: str,
    *,
    logger,
    timeout: float,
    policy: Optional[BackoffPolicy] = None,
    classifier: Classifier = default_5xx_classifier,
    cancel: Optional[threading.Event] = None,
    **kwargs,
) -> RetryResult:
    client = RetryClient(session, policy, classifier, logger=logger, timeout=timeout)
    return client.request(method, url, cancel=cancel, **kwargs)


def _wait(delay: float, cancel: Optional[threading.Event]) -> bool:
    if cancel is None:
        time.sleep(delay)
        return False
    return cancel.wait(delay)


def _release(response) -> None:
    close = getattr(response, "close", None)
    if close is not None:
        close()
