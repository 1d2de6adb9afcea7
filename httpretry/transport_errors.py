"""Transport error classification."""

from __future__ import annotations

import http.client
import ssl
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Type

import requests
import urllib3.exceptions

from .conditions import Classification, permanent_error, retry_error


EOF_ERRORS: Tuple[Type[BaseException], ...] = (
    requests.exceptions.ChunkedEncodingError,
    http.client.IncompleteRead,
    http.client.RemoteDisconnected,
    urllib3.exceptions.ProtocolError,
    urllib3.exceptions.IncompleteRead,
    ssl.SSLEOFError,
    EOFError,
)

TIMEOUT_ERRORS: Tuple[Type[BaseException], ...] = (
    requests.Timeout,
    TimeoutError,
    urllib3.exceptions.TimeoutError,
)

# urllib3 derives these from ConnectTimeoutError although they report a refused
# connection or a failed DNS lookup, not a timeout.
CONNECT_FAILURE_ERRORS: Tuple[Type[BaseException], ...] = (urllib3.exceptions.NewConnectionError,)

TEMPORARY_ERRORS: Tuple[Type[BaseException], ...] = (
    ConnectionResetError,
    ConnectionAbortedError,
    BrokenPipeError,
)

DEFAULT_EOF_MARKERS: Tuple[str, ...] = ("EOF", "Remote end closed connection")


class ErrorClassifier:
    """Decides whether a transport failure is worth another attempt.

    Structured exception types are checked first across the whole cause
    chain. The text markers are only a fallback for transports that report a
    closed stream without a dedicated exception type.
    """

    def __init__(
        self,
        *,
        eof_errors: Sequence[Type[BaseException]] = EOF_ERRORS,
        timeout_errors: Sequence[Type[BaseException]] = TIMEOUT_ERRORS,
        temporary_errors: Sequence[Type[BaseException]] = TEMPORARY_ERRORS,
        connect_failure_errors: Sequence[Type[BaseException]] = CONNECT_FAILURE_ERRORS,
        eof_markers: Iterable[str] = DEFAULT_EOF_MARKERS,
    ) -> None:
        self.eof_errors = tuple(eof_errors)
        self.timeout_errors = tuple(timeout_errors)
        self.temporary_errors = tuple(temporary_errors)
        self.connect_failure_errors = tuple(connect_failure_errors)
        self.eof_markers = tuple(marker for marker in eof_markers if marker)

    def classify(self, exc: BaseException) -> Classification:
        reason = self.retry_reason(exc)
        if reason is None:
            return permanent_error(exc)
        return retry_error(exc)

    def retry_reason(self, exc: BaseException) -> Optional[str]:
        causes = list(iter_causes(exc))
        if any(isinstance(cause, self.eof_errors) for cause in causes):
            return "eof"
        if self.eof_markers and any(_has_marker(cause, self.eof_markers) for cause in causes):
            return "eof"
        if any(self._is_timeout(cause) for cause in causes):
            return "timeout"
        if any(isinstance(cause, self.temporary_errors) for cause in causes):
            return "temporary"
        return None

    def _is_timeout(self, cause: BaseException) -> bool:
        if isinstance(cause, self.connect_failure_errors):
            return False
        return isinstance(cause, self.timeout_errors)

    def is_retriable(self, exc: BaseException) -> bool:
        return self.retry_reason(exc) is not None


def iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` and every exception reachable from it.

    requests wraps urllib3 errors in ``args`` and urllib3 keeps the socket
    level error in ``reason``, so both are followed alongside the implicit
    and explicit exception chain.
    """
    seen = set()
    pending = [exc]
    while pending:
        current = pending.pop(0)
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current

        linked = [current.__cause__, current.__context__, getattr(current, "reason", None)]
        linked.extend(current.args)
        pending.extend(item for item in linked if isinstance(item, BaseException))


def _has_marker(exc: BaseException, markers: Tuple[str, ...]) -> bool:
    text = str(exc)
    return any(marker in text for marker in markers)
