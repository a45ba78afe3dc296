from __future__ import annotations

from typing import Optional


def has_session_changed(last_seen_marker: Optional[str], current_marker: Optional[str]) -> bool:
    """True when a new login session replaced the one last seen on this device.

    The first observation (no ``last_seen_marker``) only seeds the baseline and
    is not a change. An absent ``current_marker`` is never a change either.
    """

    if not current_marker:
        return False
    if not last_seen_marker:
        return False
    return current_marker != last_seen_marker
