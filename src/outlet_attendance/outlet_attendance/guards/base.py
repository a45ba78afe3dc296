"""Shared machinery for route guards: retry policy, cancellation and the Guard interface."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Protocol, Tuple, Type, TypeVar

from ..core.constants import DEFAULT_RETRY_BACKOFF, DEFAULT_RETRY_COUNT, DEFAULT_RETRY_INTERVAL_SECONDS
from ..core.enums import GuardState
from ..core.exceptions import ResolutionCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded backoff: ``count`` retries after the first attempt.

    Delay before retry n (1-based) is ``interval_seconds * backoff ** (n - 1)``.
    """

    count: int = DEFAULT_RETRY_COUNT
    interval_seconds: float = DEFAULT_RETRY_INTERVAL_SECONDS
    backoff: float = DEFAULT_RETRY_BACKOFF

    def delays(self) -> Iterator[float]:
        for n in range(max(0, self.count)):
            yield self.interval_seconds * (self.backoff ** n)


class CancelToken:
    """Cancellation flag for one guard mount.

    ``wait`` doubles as the backoff sleep so a cancel interrupts it at once.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        return self._event.wait(timeout=max(0.0, seconds))

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ResolutionCancelled("guard mount was cancelled")


def call_with_retry(
    fn: Callable[[], T],
    *,
    retry_on: Tuple[Type[BaseException], ...],
    policy: RetryPolicy,
    cancel: CancelToken,
    label: str = "call",
) -> T:
    """Run ``fn``; on a ``retry_on`` error wait and try again until the policy is exhausted.

    The last error is re-raised on exhaustion. Cancellation raises
    ResolutionCancelled before the next attempt.
    """

    delays = policy.delays()
    attempt = 1
    while True:
        cancel.raise_if_cancelled()
        try:
            return fn()
        except retry_on as e:
            delay = next(delays, None)
            if delay is None:
                logger.warning("%s failed after %d attempt(s): %s", label, attempt, e)
                raise
            logger.info("%s failed (attempt %d), retrying in %.2fs: %s", label, attempt, delay, e)
            if cancel.wait(delay):
                raise ResolutionCancelled(f"{label} cancelled during backoff")
            attempt += 1


class Guard(Protocol):
    state: GuardState

    def resolve(self) -> GuardState:
        raise NotImplementedError


class GuardMount:
    """One guarded navigation: resolve the guard, then apply its outcome unless cancelled."""

    def __init__(self, guard: Guard, cancel: CancelToken):
        self._guard = guard
        self._cancel = cancel

    @property
    def guard(self) -> Guard:
        return self._guard

    def cancel(self) -> None:
        self._cancel.cancel()

    def run(self, apply: Callable[[GuardState], T]) -> Optional[T]:
        try:
            state = self._guard.resolve()
        except ResolutionCancelled:
            logger.debug("guard resolution cancelled before completion")
            return None

        # A late result must not redirect or write anything.
        if self._cancel.cancelled:
            logger.debug("guard resolved to %s after cancellation; dropped", state.value)
            return None
        return apply(state)
