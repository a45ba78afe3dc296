from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Session:
    """Phiên đăng nhập hiện tại của thiết bị (lưu trong Flask session sau khi login).

    ``session_marker`` là token mờ dùng để nhận biết phiên mới; ``access_token``
    là credential gửi tới identity provider.
    """

    session_marker: str
    user_id: str
    expires_at: Optional[datetime]
    access_token: str

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


@dataclass(frozen=True)
class SessionValidation:
    """Câu trả lời của identity provider cho một token."""

    valid: bool
    expires_at: Optional[datetime] = None
    user_id: Optional[str] = None
    username: Optional[str] = None
