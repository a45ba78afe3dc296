from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..core.enums import GuardState
from ..core.exceptions import IdentityUnavailable
from ..sessions.model import Session, SessionValidation
from ..sessions.provider import IdentityProvider
from .base import CancelToken, RetryPolicy, call_with_retry

logger = logging.getLogger(__name__)


class AuthGuard:
    """CHECKING -> AUTHENTICATED | UNAUTHENTICATED.

    Network failures are retried under ``policy``; an explicit rejection is
    final. Exhausted retries count as UNAUTHENTICATED.
    """

    def __init__(
        self,
        session: Optional[Session],
        identity: IdentityProvider,
        *,
        policy: RetryPolicy | None = None,
        cancel: CancelToken | None = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._session = session
        self._identity = identity
        self._policy = policy or RetryPolicy()
        self._cancel = cancel or CancelToken()
        self._clock = clock
        self.state = GuardState.CHECKING
        self.validation: Optional[SessionValidation] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def cancel_token(self) -> CancelToken:
        return self._cancel

    @property
    def user_id(self) -> Optional[str]:
        if self.validation and self.validation.user_id:
            return self.validation.user_id
        return self._session.user_id if self._session else None

    def resolve(self) -> GuardState:
        self.state = GuardState.CHECKING
        self.state = self._check()
        return self.state

    def _check(self) -> GuardState:
        s = self._session
        if s is None or not s.session_marker or not s.access_token:
            return GuardState.UNAUTHENTICATED
        if s.is_expired(self._clock()):
            logger.info("session expired for user=%s", s.user_id)
            return GuardState.UNAUTHENTICATED

        try:
            validation = call_with_retry(
                lambda: self._identity.validate_session(s.access_token),
                retry_on=(IdentityUnavailable,),
                policy=self._policy,
                cancel=self._cancel,
                label="validate_session",
            )
        except IdentityUnavailable:
            return GuardState.UNAUTHENTICATED

        self.validation = validation
        if not validation.valid:
            return GuardState.UNAUTHENTICATED
        if validation.expires_at is not None and validation.expires_at <= self._clock():
            return GuardState.UNAUTHENTICATED
        return GuardState.AUTHENTICATED
