from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import GuardState
from ..core.exceptions import ShiftLookupUnavailable
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from .auth_guard import AuthGuard
from .base import RetryPolicy, call_with_retry

logger = logging.getLogger(__name__)


class AttendanceGuard:
    """AuthGuard, then CHECKING -> HAS_ACTIVE_SHIFT | NO_ACTIVE_SHIFT.

    UNAUTHENTICATED from the inner guard is passed through unchanged. A shift
    is never created here.
    """

    def __init__(
        self,
        auth: AuthGuard,
        shifts: ShiftRepository,
        outlet_id: Optional[int],
        *,
        policy: RetryPolicy | None = None,
    ):
        self._auth = auth
        self._shifts = shifts
        self._outlet_id = outlet_id
        self._policy = policy or RetryPolicy()
        self.state = GuardState.CHECKING
        self.shift: Optional[Shift] = None

    @property
    def auth(self) -> AuthGuard:
        return self._auth

    def resolve(self) -> GuardState:
        self.state = GuardState.CHECKING
        auth_state = self._auth.resolve()
        if auth_state != GuardState.AUTHENTICATED:
            self.state = auth_state
            return self.state

        self.state = self._check_shift()
        return self.state

    def _check_shift(self) -> GuardState:
        user_id = self._auth.user_id
        if self._outlet_id is None or not user_id:
            return GuardState.NO_ACTIVE_SHIFT

        try:
            shift = call_with_retry(
                lambda: self._shifts.get_active_shift(user_id, self._outlet_id),
                retry_on=(ShiftLookupUnavailable,),
                policy=self._policy,
                cancel=self._auth.cancel_token,
                label="get_active_shift",
            )
        except ShiftLookupUnavailable:
            return GuardState.NO_ACTIVE_SHIFT

        if shift is None or not shift.is_active:
            return GuardState.NO_ACTIVE_SHIFT
        self.shift = shift
        return GuardState.HAS_ACTIVE_SHIFT
