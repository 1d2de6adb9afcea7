"""Response classification: accept, retry or give up on a received response."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Container, Optional, Tuple

from .errors import ResponseRejected


class Verdict(str, Enum):
    ACCEPT = "accept"
    RETRY = "retry"
    PERMANENT = "permanent"


@dataclass(frozen=True)
class Classification:
    """Outcome of inspecting one response or one transport error.

    ``ACCEPT`` never carries an error; ``RETRY`` and ``PERMANENT`` always do.
    """

    verdict: Verdict
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if self.verdict is Verdict.ACCEPT and self.error is not None:
            raise ValueError("an accepted classification cannot carry an error")
        if self.verdict is not Verdict.ACCEPT and self.error is None:
            raise ValueError(f"a {self.verdict.value} classification needs an error")

    @property
    def accepted(self) -> bool:
        return self.verdict is Verdict.ACCEPT

    @property
    def should_retry(self) -> bool:
        return self.verdict is Verdict.RETRY

    @classmethod
    def from_pair(cls, should_retry: bool, error: Optional[BaseException]) -> "Classification":
        """Adapt the ``(should_retry, error)`` shape used by older conditioners."""
        if error is None:
            if should_retry:
                raise ValueError("should_retry=True requires an error")
            return ACCEPTED
        if should_retry:
            return cls(Verdict.RETRY, error)
        return cls(Verdict.PERMANENT, error)

    def as_pair(self) -> Tuple[bool, Optional[BaseException]]:
        return self.should_retry, self.error


ACCEPTED = Classification(Verdict.ACCEPT)

Classifier = Callable[[Any], Classification]


def accept() -> Classification:
    return ACCEPTED


def retry(message: str, *args: Any) -> Classification:
    return Classification(Verdict.RETRY, ResponseRejected(_format(message, args)))


def permanent(message: str, *args: Any) -> Classification:
    return Classification(Verdict.PERMANENT, ResponseRejected(_format(message, args)))


def retry_error(error: BaseException) -> Classification:
    return Classification(Verdict.RETRY, error)


def permanent_error(error: BaseException) -> Classification:
    return Classification(Verdict.PERMANENT, error)


def _format(message: str, args: Tuple[Any, ...]) -> str:
    return message % args if args else message


def legacy_conditioner(
    fn: Callable[[Any], Tuple[bool, Optional[BaseException]]],
) -> Classifier:
    def classify(response: Any) -> Classification:
        should_retry, error = fn(response)
        return Classification.from_pair(should_retry, error)

    classify.__name__ = getattr(fn, "__name__", "classify")
    return classify


def default_5xx_classifier(response: Any) -> Classification:
    """Retry 5xx, accept 2xx, give up on anything else."""
    status = response.status_code
    if 500 <= status < 600:
        return retry("bad status code %d", status)
    if 200 <= status < 300:
        return accept()
    return permanent("bad status code %d", status)


def status_classifier(
    retry_statuses: Container[int],
    accept_statuses: Container[int] = range(200, 300),
) -> Classifier:
    def classify(response: Any) -> Classification:
        status = response.status_code
        if status in retry_statuses:
            return retry("bad status code %d", status)
        if status in accept_statuses:
            return accept()
        return permanent("bad status code %d", status)

    return classify
