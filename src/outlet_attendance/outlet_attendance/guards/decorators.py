"""Flask glue: run AuthGuard / AttendanceGuard before a view and redirect on failure."""

from __future__ import annotations

import uuid
from functools import wraps
from typing import Optional

from flask import Flask, g, redirect, request, session

from ..common.routing import build_path, split_tenant_project
from ..core.constants import DEVICE_COOKIE_MAX_AGE, DEVICE_COOKIE_NAME
from ..core.enums import GuardState
from ..container import Container
from ..sessions.model import Session
from ..sessions.service import SessionService
from .attendance_guard import AttendanceGuard
from .auth_guard import AuthGuard
from .base import CancelToken, GuardMount

LOGIN_PATH = "/login"
SHIFT_PATH = "/shift"


def register_device_cookie(app: Flask) -> None:
    """Give every browser a long-lived device id; progress is stored per device."""

    @app.before_request
    def _load_device_id():
        device_id = request.cookies.get(DEVICE_COOKIE_NAME)
        g.new_device = not device_id
        g.device_id = device_id or uuid.uuid4().hex

    @app.after_request
    def _store_device_id(response):
        if getattr(g, "new_device", False):
            response.set_cookie(
                DEVICE_COOKIE_NAME,
                g.device_id,
                max_age=DEVICE_COOKIE_MAX_AGE,
                httponly=True,
                samesite="Lax",
            )
        return response


def current_session() -> Optional[Session]:
    return SessionService.from_dict(session)


def current_device_id() -> str:
    return g.device_id


def current_outlet_id() -> Optional[int]:
    value = session.get("outlet_id")
    return int(value) if value is not None else None


def tenant_path(path: str) -> str:
    """Prefix ``path`` with the tenant/project of the current request."""
    tenant_code, project_code = split_tenant_project(request.path)
    return build_path(path, tenant_code, project_code)


def redirect_for(state: GuardState):
    if state == GuardState.NO_ACTIVE_SHIFT:
        return redirect(tenant_path(SHIFT_PATH))
    return redirect(tenant_path(LOGIN_PATH))


def _auth_guard(container: Container, cancel: CancelToken) -> AuthGuard:
    return AuthGuard(current_session(), container.identity, policy=container.retry_policy, cancel=cancel)


def auth_required(container: Container):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            cancel = CancelToken()
            guard = _auth_guard(container, cancel)
            g.cancel_token = cancel

            def apply(state: GuardState):
                if state != GuardState.AUTHENTICATED:
                    return redirect_for(state)
                g.session = guard.session
                g.user_id = guard.user_id
                return view(*args, **kwargs)

            result = GuardMount(guard, cancel).run(apply)
            # Cancelled mounts neither redirect nor render.
            return result if result is not None else ("", 204)

        return wrapper

    return decorator


def attendance_required(container: Container):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            cancel = CancelToken()
            auth = _auth_guard(container, cancel)
            guard = AttendanceGuard(auth, container.shifts_repo, current_outlet_id(), policy=container.retry_policy)
            g.cancel_token = cancel

            def apply(state: GuardState):
                if state != GuardState.HAS_ACTIVE_SHIFT:
                    return redirect_for(state)
                g.session = auth.session
                g.user_id = auth.user_id
                g.shift = guard.shift
                return view(*args, **kwargs)

            result = GuardMount(guard, cancel).run(apply)
            # Cancelled mounts neither redirect nor render.
            return result if result is not None else ("", 204)

        return wrapper

    return decorator
