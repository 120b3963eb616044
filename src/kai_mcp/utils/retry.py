"""Bounded retry for read calls against the cluster."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt
from tenacity.wait import wait_base

from kai_mcp.utils.deadline import Deadline
from kai_mcp.utils.errors import DeadlineExceededError, is_not_found

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Backoff:
    """Retry schedule.

    The defaults match client-go's ``retry.DefaultRetry``: five attempts
    10ms apart with 10% jitter.
    """

    steps: int = 5
    duration: float = 0.01
    factor: float = 1.0
    jitter: float = 0.1
    cap: float | None = None

    def delay(self, retry_number: int) -> float:
        """Wait before retry ``retry_number``, counting from 1."""
        duration = self.duration * self.factor ** (retry_number - 1)
        if self.cap is not None:
            duration = min(duration, self.cap)
        if self.jitter > 0:
            duration += random.uniform(0, self.jitter * duration)
        return duration

    def delays(self) -> Iterator[float]:
        """Yield the wait before each retry (``steps - 1`` values)."""
        for retry_number in range(1, max(self.steps, 1)):
            yield self.delay(retry_number)


class wait_backoff(wait_base):
    """Tenacity wait strategy following a Backoff schedule."""

    def __init__(self, backoff: Backoff) -> None:
        self.backoff = backoff

    def __call__(self, retry_state: RetryCallState) -> float:
        return self.backoff.delay(retry_state.attempt_number)


@dataclass
class RetryResult(Generic[T]):
    """Outcome of a retried call: either a value or the final error."""

    value: T | None = None
    error: BaseException | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the final error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def is_retryable(exc: BaseException) -> bool:
    """Retry everything except a not-found answer."""
    return not is_not_found(exc)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.debug(
        f"Attempt {retry_state.attempt_number} failed, retrying in {delay:.3f}s: {error}"
    )


def retry_on_error(
    operation: Callable[[], T],
    should_retry: Callable[[BaseException], bool] = is_retryable,
    backoff: Backoff | None = None,
    deadline: Deadline | None = None,
) -> RetryResult[T]:
    """Call ``operation`` until it succeeds or retrying stops making sense.

    Args:
        operation: Zero-argument callable performing one attempt.
        should_retry: Predicate deciding whether a failure is worth retrying.
        backoff: Attempt limit and delays between attempts.
        deadline: Optional deadline; cancelling it stops pending retries.

    Returns:
        RetryResult with the value of the first successful attempt, or the
        last error and the number of attempts made.
    """
    backoff = backoff or Backoff()
    attempts = 0
    last_error: BaseException | None = None

    def attempt() -> T:
        nonlocal attempts, last_error
        if deadline is not None and deadline.expired:
            raise DeadlineExceededError(
                "Deadline reached before the call could complete"
                + (f": {last_error}" if last_error else ""),
                cause=last_error,
            )
        attempts += 1
        try:
            return operation()
        except Exception as e:
            last_error = e
            raise

    retrying = Retrying(
        stop=stop_after_attempt(max(backoff.steps, 1)),
        wait=wait_backoff(backoff),
        retry=retry_if_exception(
            lambda e: not isinstance(e, DeadlineExceededError) and should_retry(e)
        ),
        sleep=deadline.wait if deadline is not None else time.sleep,
        before_sleep=_log_retry,
        reraise=True,
    )
    try:
        value = retrying(attempt)
    except Exception as e:
        logger.debug(f"Giving up after {attempts} attempt(s): {e}")
        return RetryResult(error=e, attempts=attempts)
    return RetryResult(value=value, attempts=attempts)
