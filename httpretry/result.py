"""Outcome of a retried call and the attempt count that produced it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class AttemptCounter:
    def __init__(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> int:
        self._value += 1
        return self._value


@dataclass(frozen=True)
class RetryResult:
    """Final response and/or error of one logical call.

    ``response`` may accompany ``error`` when the server answered but the
    classifier rejected the answer.
    """

    response: Optional[Any]
    error: Optional[BaseException]
    attempts: int

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_code(self) -> Optional[int]:
        if self.response is None:
            return None
        return self.response.status_code

    def raise_for_error(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.response


def attempts(result: Optional[RetryResult]) -> int:
    """Number of transport calls behind ``result``; 0 when there is none."""
    if result is None:
        return 0
    return result.attempts
