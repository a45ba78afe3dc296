from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import from_timestamp, now_utc
from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from .model import Session
from .provider import IdentityProvider
from .tokens import expires_at_from_token, session_marker_from_token, user_id_from_token


class SessionService:
    """Use case: open a login session from an access token (login) and (de)serialize it."""

    def __init__(self, identity: IdentityProvider):
        self._identity = identity

    def login(self, access_token: str, *, now: datetime | None = None) -> Session:
        now = now or now_utc()
        access_token = require_non_empty(access_token, "Access token")

        # IdentityUnavailable propagates: the caller can ask the user to retry.
        validation = self._identity.validate_session(access_token)
        if not validation.valid:
            raise AuthenticationError("Phiên đăng nhập không hợp lệ")

        expires_at = validation.expires_at or expires_at_from_token(access_token)
        if expires_at is not None and expires_at <= now:
            raise AuthenticationError("Phiên đăng nhập đã hết hạn")

        user_id = validation.user_id or user_id_from_token(access_token)
        if not user_id:
            raise AuthenticationError("Không xác định được người dùng")

        return Session(
            session_marker=session_marker_from_token(access_token),
            user_id=user_id,
            expires_at=expires_at,
            access_token=access_token,
        )

    @staticmethod
    def to_dict(s: Session) -> dict[str, Any]:
        """What we store into Flask session after login."""
        return {
            "session_marker": s.session_marker,
            "user_id": s.user_id,
            "expires_at": s.expires_at.timestamp() if s.expires_at else None,
            "access_token": s.access_token,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Optional[Session]:
        marker = data.get("session_marker")
        token = data.get("access_token")
        user_id = data.get("user_id")
        if not marker or not token or not user_id:
            return None
        exp = data.get("expires_at")
        return Session(
            session_marker=str(marker),
            user_id=str(user_id),
            expires_at=from_timestamp(exp) if exp is not None else None,
            access_token=str(token),
        )
