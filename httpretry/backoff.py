"""Exponential backoff schedules built on tenacity wait/stop strategies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from tenacity import (
    RetryCallState,
    stop_after_attempt,
    stop_after_delay,
    stop_never,
    wait_exponential,
    wait_random,
)


@dataclass(frozen=True)
class BackoffPolicy:
    initial_interval: float = 0.5
    multiplier: float = 1.5
    max_interval: float = 60.0
    jitter: float = 0.25
    max_elapsed_time: Optional[float] = 900.0
    max_attempts: Optional[int] = None

    def __post_init__(self) -> None:
        if self.initial_interval < 0:
            raise ValueError("initial_interval must be >= 0")
        if self.multiplier < 1:
            raise ValueError("multiplier must be >= 1")
        if self.max_interval < self.initial_interval:
            raise ValueError("max_interval must be >= initial_interval")
        if self.jitter < 0:
            raise ValueError("jitter must be >= 0")
        if self.max_elapsed_time is not None and self.max_elapsed_time <= 0:
            raise ValueError("max_elapsed_time must be > 0")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    def wait_strategy(self):
        wait = wait_exponential(
            multiplier=self.initial_interval,
            exp_base=self.multiplier,
            max=self.max_interval,
        )
        if self.jitter:
            wait = wait + wait_random(0, self.jitter)
        return wait

    def stop_strategy(self):
        stop = None
        if self.max_elapsed_time is not None:
            stop = stop_after_delay(self.max_elapsed_time)
        if self.max_attempts is not None:
            by_attempts = stop_after_attempt(self.max_attempts)
            stop = by_attempts if stop is None else stop | by_attempts
        return stop if stop is not None else stop_never

    def schedule(self) -> "BackoffSchedule":
        return BackoffSchedule(self.wait_strategy(), self.stop_strategy())


class BackoffSchedule:
    """Per-call view of a backoff policy.

    Each call to :meth:`next_delay` records the outcome of the attempt that
    just finished and answers with the number of seconds to wait before the
    next one, or ``None`` once the stop strategy says the call is over.
    Schedules are not reusable: build a fresh one per logical call.
    """

    def __init__(self, wait, stop) -> None:
        self._wait = wait
        self._stop = stop
        self._state = RetryCallState(None, None, (), {})

    @property
    def attempt_number(self) -> int:
        return self._state.attempt_number

    @property
    def elapsed(self) -> float:
        return self._state.seconds_since_start or 0.0

    def next_delay(self, outcome: Any = None) -> Optional[float]:
        if isinstance(outcome, BaseException):
            self._state.set_exception((type(outcome), outcome, outcome.__traceback__))
        else:
            self._state.set_result(outcome)

        if self._stop(self._state):
            return None

        delay = max(0.0, float(self._wait(self._state)))
        self._state.idle_for += delay
        self._state.prepare_for_next_attempt()
        return delay


def no_wait_policy(max_attempts: int) -> BackoffPolicy:
    """Retry up to ``max_attempts`` times without sleeping in between."""
    return BackoffPolicy(
        initial_interval=0.0,
        multiplier=1.0,
        max_interval=0.0,
        jitter=0.0,
        max_elapsed_time=None,
        max_attempts=max_attempts,
    )
