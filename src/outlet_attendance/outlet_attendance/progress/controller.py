from __future__ import annotations

from flask import Flask, g, jsonify, request, session

from ..common.otp import generate_otp, otp_matches
from ..core.enums import TransitionResult
from ..core.exceptions import ValidationError
from ..container import Container
from ..guards.decorators import attendance_required, current_device_id, current_session
from .flows import flow_for_slug
from .reset_policy import SessionResetPolicy
from .state_machine import SurveyProgressStateMachine

OTP_SESSION_KEY = "survey_otp"


def register(app: Flask, container: Container) -> None:
    shift_required = attendance_required(container)

    def _policy(store) -> SessionResetPolicy:
        return SessionResetPolicy(store, reset_on_unload=container.settings.reset_progress_on_unload)

    def _machine(flow_slug: str) -> SurveyProgressStateMachine:
        flow = flow_for_slug(flow_slug, variant=container.settings.survey_flow_variant)
        store = container.progress_store(current_device_id())
        return SurveyProgressStateMachine.mount(
            flow, store, _policy(store), g.session.session_marker, cancel=g.cancel_token
        )

    def _result(machine: SurveyProgressStateMachine, result: TransitionResult):
        body = {"result": result.value, **machine.snapshot()}
        return jsonify(body), 200 if result == TransitionResult.OK else 409

    @app.route("/<tenant_code>/<project_code>/attendance/report/<flow_slug>/progress", endpoint="progress_get")
    @shift_required
    def progress_get(tenant_code: str, project_code: str, flow_slug: str):
        try:
            machine = _machine(flow_slug)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        return jsonify(machine.snapshot())

    @app.route(
        "/<tenant_code>/<project_code>/attendance/report/<flow_slug>/progress/advance",
        methods=["POST"],
        endpoint="progress_advance",
    )
    @shift_required
    def progress_advance(tenant_code: str, project_code: str, flow_slug: str):
        try:
            machine = _machine(flow_slug)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        return _result(machine, machine.advance())

    @app.route(
        "/<tenant_code>/<project_code>/attendance/report/<flow_slug>/progress/go-to",
        methods=["POST"],
        endpoint="progress_go_to",
    )
    @shift_required
    def progress_go_to(tenant_code: str, project_code: str, flow_slug: str):
        payload = request.get_json(silent=True) or request.form
        try:
            machine = _machine(flow_slug)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        return _result(machine, machine.go_to(str(payload.get("step", ""))))

    @app.route(
        "/<tenant_code>/<project_code>/attendance/report/<flow_slug>/progress/back",
        methods=["POST"],
        endpoint="progress_back",
    )
    @shift_required
    def progress_back(tenant_code: str, project_code: str, flow_slug: str):
        try:
            machine = _machine(flow_slug)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        return _result(machine, machine.back())

    @app.route(
        "/<tenant_code>/<project_code>/attendance/report/survey/progress/flow-choice",
        methods=["POST"],
        endpoint="survey_flow_choice",
    )
    @shift_required
    def survey_flow_choice(tenant_code: str, project_code: str):
        """quick | full | no-games, picked at the flow-choice step."""
        payload = request.get_json(silent=True) or request.form
        machine = _machine("survey")
        return _result(machine, machine.choose_flow(str(payload.get("flow", ""))))

    @app.route(
        "/<tenant_code>/<project_code>/attendance/report/<flow_slug>/progress/unload",
        methods=["POST"],
        endpoint="progress_unload",
    )
    def progress_unload(tenant_code: str, project_code: str, flow_slug: str):
        """sendBeacon target from the page's unload handler; no guard, nothing to redirect."""
        try:
            flow = flow_for_slug(flow_slug, variant=container.settings.survey_flow_variant)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 404

        s = current_session()
        store = container.progress_store(current_device_id())
        cleared = _policy(store).on_unload(flow.name, s.session_marker if s else None)
        return jsonify({"cleared": cleared})

    @app.route("/<tenant_code>/<project_code>/attendance/report/survey/otp/send", methods=["POST"], endpoint="survey_otp_send")
    @shift_required
    def survey_otp_send(tenant_code: str, project_code: str):
        machine = _machine("survey")
        if machine.current_step != "otp":
            return jsonify({"success": False, "message": "Chưa tới bước xác thực OTP"}), 409

        code = generate_otp(container.settings.otp_length)
        session[OTP_SESSION_KEY] = code
        body = {"success": True, "length": len(code)}
        # The code is echoed back only under TESTING.
        if app.config.get("TESTING"):
            body["code"] = code
        return jsonify(body)

    @app.route("/<tenant_code>/<project_code>/attendance/report/survey/otp/verify", methods=["POST"], endpoint="survey_otp_verify")
    @shift_required
    def survey_otp_verify(tenant_code: str, project_code: str):
        payload = request.get_json(silent=True) or request.form
        machine = _machine("survey")
        if machine.current_step != "otp":
            return jsonify({"success": False, "message": "Chưa tới bước xác thực OTP"}), 409

        if not otp_matches(session.get(OTP_SESSION_KEY), payload.get("code")):
            return jsonify({"success": False, "message": "Mã OTP không đúng"}), 400

        session.pop(OTP_SESSION_KEY, None)
        return _result(machine, machine.advance())
