from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
import requests

from src.outlet_attendance.outlet_attendance.core.exceptions import (
    AuthenticationError,
    IdentityUnavailable,
    ValidationError,
)
from src.outlet_attendance.outlet_attendance.sessions.identity import has_session_changed
from src.outlet_attendance.outlet_attendance.sessions.model import SessionValidation
from src.outlet_attendance.outlet_attendance.sessions.provider import HttpIdentityProvider
from src.outlet_attendance.outlet_attendance.sessions.service import SessionService
from src.outlet_attendance.outlet_attendance.sessions.tokens import (
    expires_at_from_token,
    session_marker_from_token,
    user_id_from_token,
)

SIGNING_KEY = "unit-test-signing-key-0123456789abcdef"


def make_token(**claims) -> str:
    return jwt.encode(claims, SIGNING_KEY, algorithm="HS256")


@pytest.mark.parametrize(
    "last_seen,current,expected",
    [
        (None, "A", False),
        ("", "A", False),
        ("A", "A", False),
        ("A", "B", True),
        ("A", None, False),
        ("A", "", False),
        (None, None, False),
    ],
)
def test_has_session_changed(last_seen, current, expected):
    assert has_session_changed(last_seen, current) is expected


def test_marker_prefers_sid_then_session_state_then_raw_token():
    assert session_marker_from_token(make_token(sid="s-1", session_state="ss-1")) == "s-1"
    assert session_marker_from_token(make_token(session_state="ss-1")) == "ss-1"
    assert session_marker_from_token("opaque-token") == "opaque-token"


def test_claims_are_read_without_signature_check(fixed_now):
    exp = int((fixed_now + timedelta(hours=1)).timestamp())
    token = jwt.encode({"sub": "u-7", "exp": exp}, "some-other-key-that-we-never-see-000000", algorithm="HS256")

    assert user_id_from_token(token) == "u-7"
    assert expires_at_from_token(token) == fixed_now + timedelta(hours=1)


def test_expired_token_claims_are_still_readable(fixed_now):
    exp = int((fixed_now - timedelta(days=3)).timestamp())

    assert expires_at_from_token(make_token(exp=exp)) == fixed_now - timedelta(days=3)


class FakeResponse:
    def __init__(self, status_code: int, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeHttp:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def test_provider_sends_bearer_token_and_reads_user():
    http = FakeHttp(FakeResponse(200, {"data": {"id": 42, "username": "an", "isActive": True, "expiresAt": "2030-01-01T00:00:00Z"}}))
    provider = HttpIdentityProvider("https://id.example.com/", timeout=3, http=http)

    v = provider.validate_session("tok")

    assert http.calls == [("https://id.example.com/api/auth/verify", {"Authorization": "Bearer tok"}, 3)]
    assert v.valid is True
    assert v.user_id == "42"
    assert v.username == "an"
    assert v.expires_at.year == 2030
    assert v.expires_at.tzinfo is not None


def test_provider_inactive_user_is_invalid():
    http = FakeHttp(FakeResponse(200, {"data": {"id": 1, "isActive": False}}))

    assert HttpIdentityProvider("http://id", http=http).validate_session("tok").valid is False


@pytest.mark.parametrize("status", [401, 403, 404])
def test_provider_explicit_rejection_is_invalid_not_unavailable(status):
    http = FakeHttp(FakeResponse(status, {"message": "nope"}))

    assert HttpIdentityProvider("http://id", http=http).validate_session("tok").valid is False


@pytest.mark.parametrize(
    "outcome",
    [
        requests.ConnectionError("down"),
        requests.Timeout("slow"),
        FakeResponse(502, {}),
        FakeResponse(200, None),
    ],
)
def test_provider_transport_failures_raise_unavailable(outcome):
    provider = HttpIdentityProvider("http://id", http=FakeHttp(outcome))

    with pytest.raises(IdentityUnavailable):
        provider.validate_session("tok")


class FakeIdentity:
    def __init__(self, validation=None, error=None):
        self.validation = validation
        self.error = error

    def validate_session(self, marker):
        if self.error:
            raise self.error
        return self.validation


def test_login_builds_session_from_token_claims(fixed_now):
    exp = int((fixed_now + timedelta(hours=8)).timestamp())
    token = make_token(sid="sid-1", sub="u-1", exp=exp)
    svc = SessionService(FakeIdentity(SessionValidation(valid=True)))

    s = svc.login(token, now=fixed_now)

    assert s.session_marker == "sid-1"
    assert s.user_id == "u-1"
    assert s.expires_at == fixed_now + timedelta(hours=8)
    assert s.access_token == token


def test_login_prefers_provider_user_and_expiry(fixed_now):
    token = make_token(sid="sid-1", sub="token-user")
    svc = SessionService(FakeIdentity(SessionValidation(valid=True, user_id="provider-user", expires_at=fixed_now + timedelta(minutes=5))))

    s = svc.login(token, now=fixed_now)

    assert s.user_id == "provider-user"
    assert s.expires_at == fixed_now + timedelta(minutes=5)


def test_login_rejects_invalid_and_expired_sessions(fixed_now):
    token = make_token(sid="sid-1", sub="u-1")

    with pytest.raises(AuthenticationError):
        SessionService(FakeIdentity(SessionValidation(valid=False))).login(token, now=fixed_now)

    expired = SessionValidation(valid=True, expires_at=fixed_now - timedelta(seconds=1))
    with pytest.raises(AuthenticationError):
        SessionService(FakeIdentity(expired)).login(token, now=fixed_now)


def test_login_requires_token_and_propagates_unavailable(fixed_now):
    with pytest.raises(ValidationError):
        SessionService(FakeIdentity(SessionValidation(valid=True))).login("  ", now=fixed_now)

    with pytest.raises(IdentityUnavailable):
        SessionService(FakeIdentity(error=IdentityUnavailable("down"))).login(make_token(sub="u"), now=fixed_now)


def test_session_dict_roundtrip(fixed_now):
    token = make_token(sid="sid-1", sub="u-1", exp=int((fixed_now + timedelta(hours=1)).timestamp()))
    s = SessionService(FakeIdentity(SessionValidation(valid=True))).login(token, now=fixed_now)

    assert SessionService.from_dict(SessionService.to_dict(s)) == s
    assert SessionService.from_dict({}) is None
