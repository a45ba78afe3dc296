from __future__ import annotations

from datetime import timedelta

import pytest

from src.outlet_attendance.outlet_attendance.core.enums import GuardState
from src.outlet_attendance.outlet_attendance.core.exceptions import IdentityUnavailable, ResolutionCancelled
from src.outlet_attendance.outlet_attendance.guards.auth_guard import AuthGuard
from src.outlet_attendance.outlet_attendance.guards.base import CancelToken, GuardMount, RetryPolicy, call_with_retry
from src.outlet_attendance.outlet_attendance.sessions.model import Session, SessionValidation

FAST = RetryPolicy(count=2, interval_seconds=0, backoff=1)


class ScriptedIdentity:
    """Answers from a script; exceptions in the script are raised."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = 0

    def validate_session(self, marker):
        self.calls += 1
        answer = self.answers.pop(0) if len(self.answers) > 1 else self.answers[0]
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def live_session(fixed_now):
    return Session(session_marker="sid-1", user_id="u-1", expires_at=fixed_now + timedelta(hours=1), access_token="tok")


def make_guard(session, identity, fixed_now, **kw):
    return AuthGuard(session, identity, policy=FAST, clock=lambda: fixed_now, **kw)


def test_no_session_is_unauthenticated_without_calling_provider(fixed_now):
    identity = ScriptedIdentity(SessionValidation(valid=True))

    assert make_guard(None, identity, fixed_now).resolve() == GuardState.UNAUTHENTICATED
    assert identity.calls == 0


def test_locally_expired_session_is_unauthenticated(fixed_now):
    s = Session(session_marker="sid-1", user_id="u-1", expires_at=fixed_now, access_token="tok")
    identity = ScriptedIdentity(SessionValidation(valid=True))

    assert make_guard(s, identity, fixed_now).resolve() == GuardState.UNAUTHENTICATED
    assert identity.calls == 0


def test_valid_session_is_authenticated(live_session, fixed_now):
    guard = make_guard(live_session, ScriptedIdentity(SessionValidation(valid=True, user_id="u-1")), fixed_now)

    assert guard.state == GuardState.CHECKING
    assert guard.resolve() == GuardState.AUTHENTICATED
    assert guard.user_id == "u-1"


def test_transient_failure_is_retried_then_authenticated(live_session, fixed_now):
    identity = ScriptedIdentity(IdentityUnavailable("blip"), SessionValidation(valid=True))

    assert make_guard(live_session, identity, fixed_now).resolve() == GuardState.AUTHENTICATED
    assert identity.calls == 2


def test_exhausted_retries_mean_unauthenticated(live_session, fixed_now):
    identity = ScriptedIdentity(IdentityUnavailable("down"))

    assert make_guard(live_session, identity, fixed_now).resolve() == GuardState.UNAUTHENTICATED
    assert identity.calls == 1 + FAST.count


def test_explicit_rejection_is_not_retried(live_session, fixed_now):
    identity = ScriptedIdentity(SessionValidation(valid=False))

    assert make_guard(live_session, identity, fixed_now).resolve() == GuardState.UNAUTHENTICATED
    assert identity.calls == 1


def test_provider_reported_expiry_is_honored(live_session, fixed_now):
    identity = ScriptedIdentity(SessionValidation(valid=True, expires_at=fixed_now - timedelta(seconds=1)))

    assert make_guard(live_session, identity, fixed_now).resolve() == GuardState.UNAUTHENTICATED


def test_cancelled_mount_applies_nothing(live_session, fixed_now):
    cancel = CancelToken()
    applied = []

    class CancelDuringCall(ScriptedIdentity):
        def validate_session(self, marker):
            cancel.cancel()
            return super().validate_session(marker)

    guard = make_guard(live_session, CancelDuringCall(SessionValidation(valid=True)), fixed_now, cancel=cancel)
    result = GuardMount(guard, cancel).run(applied.append)

    assert result is None
    assert applied == []


def test_cancel_interrupts_backoff(live_session, fixed_now):
    cancel = CancelToken()
    slow = RetryPolicy(count=3, interval_seconds=60, backoff=2)

    class CancelOnFailure(ScriptedIdentity):
        def validate_session(self, marker):
            cancel.cancel()
            return super().validate_session(marker)

    identity = CancelOnFailure(IdentityUnavailable("down"))
    guard = AuthGuard(live_session, identity, policy=slow, cancel=cancel, clock=lambda: fixed_now)

    with pytest.raises(ResolutionCancelled):
        guard.resolve()
    assert identity.calls == 1


def test_retry_policy_delays_grow_by_backoff():
    assert list(RetryPolicy(count=3, interval_seconds=0.5, backoff=2).delays()) == [0.5, 1.0, 2.0]
    assert list(RetryPolicy(count=0).delays()) == []


def test_call_with_retry_reraises_last_error():
    calls = []

    def boom():
        calls.append(1)
        raise IdentityUnavailable(f"attempt {len(calls)}")

    with pytest.raises(IdentityUnavailable, match="attempt 3"):
        call_with_retry(boom, retry_on=(IdentityUnavailable,), policy=FAST, cancel=CancelToken())


def test_call_with_retry_does_not_retry_other_errors():
    calls = []

    def boom():
        calls.append(1)
        raise KeyError("x")

    with pytest.raises(KeyError):
        call_with_retry(boom, retry_on=(IdentityUnavailable,), policy=FAST, cancel=CancelToken())
    assert len(calls) == 1
