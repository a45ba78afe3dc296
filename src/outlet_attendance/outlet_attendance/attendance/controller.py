from __future__ import annotations

from flask import Flask, g, jsonify, request, session

from ..core.exceptions import ShiftLookupUnavailable, ValidationError
from ..container import Container
from ..guards.decorators import attendance_required, auth_required, current_outlet_id


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)
    shift_required = attendance_required(container)

    def _outlet_payload(outlet_id):
        if outlet_id is None:
            return None
        outlet = container.outlets_repo.get_by_id(outlet_id)
        if not outlet:
            return None
        return {
            "outlet_id": outlet.outlet_id,
            "name": outlet.name,
            "address": outlet.address,
            "lat": outlet.center.lat,
            "lng": outlet.center.lng,
            "radius_meters": outlet.effective_radius(container.settings.default_radius_meters),
        }

    @app.route("/<tenant_code>/<project_code>/lobby", endpoint="lobby")
    @login_required
    def lobby(tenant_code: str, project_code: str):
        return jsonify({"user_id": g.user_id, "outlet": _outlet_payload(current_outlet_id())})

    @app.route("/<tenant_code>/<project_code>/outlet", methods=["POST"], endpoint="select_outlet")
    @login_required
    def select_outlet(tenant_code: str, project_code: str):
        payload = request.get_json(silent=True) or request.form
        try:
            outlet_id = int(payload.get("outlet_id") or 0)
        except (TypeError, ValueError):
            outlet_id = 0
        outlet = container.outlets_repo.get_by_id(outlet_id) if outlet_id > 0 else None
        if not outlet:
            return jsonify({"success": False, "message": "Outlet không tồn tại"}), 400

        session["outlet_id"] = outlet.outlet_id
        return jsonify({"success": True, "outlet": _outlet_payload(outlet.outlet_id)})

    @app.route("/<tenant_code>/<project_code>/shift", endpoint="shift")
    @login_required
    def shift(tenant_code: str, project_code: str):
        """Where NO_ACTIVE_SHIFT lands. Shows the current state; never starts a shift."""
        outlet_id = current_outlet_id()
        active = None
        if outlet_id is not None:
            try:
                active = container.shifts_repo.get_active_shift(g.user_id, outlet_id)
            except ShiftLookupUnavailable:
                return jsonify({"success": False, "message": "Không kiểm tra được ca làm việc, vui lòng thử lại"}), 503

        return jsonify(
            {
                "outlet": _outlet_payload(outlet_id),
                "active_shift": {"shift_id": active.shift_id, "started_at": active.started_at.isoformat()} if active else None,
            }
        )

    @app.route("/<tenant_code>/<project_code>/attendance/tracking", endpoint="attendance_tracking")
    @shift_required
    def attendance_tracking(tenant_code: str, project_code: str):
        return jsonify(
            {
                "shift_id": g.shift.shift_id,
                "started_at": g.shift.started_at.isoformat(),
                "outlet": _outlet_payload(g.shift.outlet_id),
                "events": container.attendance_service.history(g.shift.shift_id),
            }
        )

    def _attempt(action: str):
        payload = request.get_json(silent=True) or request.form
        try:
            if action == "checkin":
                outcome = container.attendance_service.check_in(g.user_id, g.shift.outlet_id, payload)
            else:
                outcome = container.attendance_service.check_out(g.user_id, g.shift.outlet_id, payload)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            app.logger.exception("%s failed", action)
            return jsonify({"success": False, "message": "Lỗi hệ thống khi chấm công"}), 500

        return jsonify(
            {
                "success": outcome.accepted,
                "accepted": outcome.accepted,
                "error": outcome.error,
                "event_id": outcome.event.event_id,
                "distance_meters": round(outcome.event.distance_meters, 1),
                "radius_meters": outcome.event.radius_meters,
                "message": outcome.message(),
            }
        )

    @app.route("/<tenant_code>/<project_code>/checkin", methods=["POST"], endpoint="checkin")
    @shift_required
    def checkin(tenant_code: str, project_code: str):
        return _attempt("checkin")

    @app.route("/<tenant_code>/<project_code>/attendance/checkout", methods=["POST"], endpoint="checkout")
    @shift_required
    def checkout(tenant_code: str, project_code: str):
        return _attempt("checkout")
