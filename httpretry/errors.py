"""Exceptions raised or returned by the retry client."""

from __future__ import annotations


class HttpRetryError(Exception):
    pass


class ResponseRejected(HttpRetryError):
    """Diagnostic attached to a response the classifier did not accept."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class RetryCancelled(HttpRetryError):
    def __init__(self, attempts: int) -> None:
        super().__init__(f"retry cancelled after {attempts} attempt(s)")
        self.attempts = attempts
