from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Protocol

import requests

from ..common.datetime_utils import ensure_aware, from_timestamp
from ..core.constants import DEFAULT_IDENTITY_TIMEOUT_SECONDS
from ..core.exceptions import IdentityUnavailable
from .model import SessionValidation
from .tokens import expires_at_from_token

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Identity collaborator consumed by AuthGuard.

    ``validate_session`` returns ``valid=False`` for an explicitly rejected
    session and raises IdentityUnavailable when the provider cannot answer.
    """

    def validate_session(self, marker: str) -> SessionValidation:
        raise NotImplementedError


def _parse_expiry(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return from_timestamp(value)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_aware(parsed)


class HttpIdentityProvider(IdentityProvider):
    """``GET {base_url}/api/auth/verify`` with the bearer token."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_IDENTITY_TIMEOUT_SECONDS,
        http: requests.Session | None = None,
    ):
        self._url = base_url.rstrip("/") + "/api/auth/verify"
        self._timeout = timeout
        self._http = http or requests.Session()

    def validate_session(self, marker: str) -> SessionValidation:
        try:
            res = self._http.get(
                self._url,
                headers={"Authorization": f"Bearer {marker}"},
                timeout=self._timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise IdentityUnavailable(f"identity provider unreachable: {e}") from e

        if res.status_code >= 500:
            raise IdentityUnavailable(f"identity provider error: HTTP {res.status_code}")
        if res.status_code != 200:
            logger.info("session rejected by identity provider: HTTP %s", res.status_code)
            return SessionValidation(valid=False)

        try:
            body = res.json()
        except ValueError:
            raise IdentityUnavailable("identity provider returned a non-JSON body")

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not data.get("isActive", True):
            return SessionValidation(valid=False)

        expires_at = _parse_expiry(data.get("expiresAt")) or expires_at_from_token(marker)
        user_id = data.get("id")
        return SessionValidation(
            valid=True,
            expires_at=expires_at,
            user_id=str(user_id) if user_id is not None else None,
            username=data.get("username"),
        )
