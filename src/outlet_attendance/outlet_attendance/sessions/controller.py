from __future__ import annotations

from flask import Flask, jsonify, redirect, request, session

from ..common.routing import build_path
from ..core.exceptions import AuthenticationError, IdentityUnavailable, ValidationError
from ..container import Container
from ..guards.decorators import tenant_path


def register(app: Flask, container: Container) -> None:
    @app.route("/<tenant_code>/<project_code>/", endpoint="project_root")
    def project_root(tenant_code: str, project_code: str):
        return redirect(build_path("/lobby", tenant_code, project_code))

    @app.route("/<tenant_code>/<project_code>/login", methods=["GET", "POST"], endpoint="login")
    def login(tenant_code: str, project_code: str):
        if request.method == "GET":
            return jsonify({"authenticated": "session_marker" in session, "tenant": tenant_code, "project": project_code})

        payload = request.get_json(silent=True) or request.form
        access_token = payload.get("access_token", "")
        try:
            s = container.session_service.login(access_token)
        except (AuthenticationError, ValidationError) as e:
            return jsonify({"success": False, "message": str(e)}), 401
        except IdentityUnavailable:
            app.logger.warning("login failed: identity provider unavailable")
            return jsonify({"success": False, "message": "Không kết nối được máy chủ xác thực, vui lòng thử lại"}), 503

        # New login: forget the previous outlet context but keep the device id cookie.
        session.clear()
        session.update(container.session_service.to_dict(s))
        session["tenant_code"] = tenant_code
        session["project_code"] = project_code
        return redirect(tenant_path("/lobby"))

    @app.route("/<tenant_code>/<project_code>/logout", methods=["GET", "POST"], endpoint="logout")
    def logout(tenant_code: str, project_code: str):
        session.clear()
        return redirect(tenant_path("/login"))
