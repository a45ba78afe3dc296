"""Read claims from an access token without verifying it.

Verification is the identity provider's job; here we only need the session id
and expiry to drive local decisions.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import jwt

from ..common.datetime_utils import from_timestamp

logger = logging.getLogger(__name__)


def decode_unverified(token: str) -> Optional[dict[str, Any]]:
    try:
        return jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.InvalidTokenError as e:
        logger.debug("token payload not decodable: %s", e)
        return None


def session_marker_from_token(token: str) -> str:
    """Keycloak puts the login session id in ``sid`` (older realms: ``session_state``)."""
    payload = decode_unverified(token) or {}
    return str(payload.get("sid") or payload.get("session_state") or token)


def user_id_from_token(token: str) -> Optional[str]:
    payload = decode_unverified(token) or {}
    value = payload.get("sub") or payload.get("user_id") or payload.get("preferred_username")
    return str(value) if value else None


def expires_at_from_token(token: str) -> Optional[datetime]:
    payload = decode_unverified(token) or {}
    exp = payload.get("exp")
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        return from_timestamp(exp)
    return None
