from __future__ import annotations

import pytest

from src.outlet_attendance.outlet_attendance.core.enums import ProgressState
from src.outlet_attendance.outlet_attendance.core.exceptions import ValidationError
from src.outlet_attendance.outlet_attendance.progress.model import ProgressRecord
from src.outlet_attendance.outlet_attendance.progress.reset_policy import SessionResetPolicy


class InMemoryProgressStore:
    def __init__(self):
        self.data = {}

    def get(self, flow_name):
        return self.data.get(flow_name)

    def set(self, flow_name, record):
        self.data[flow_name] = record

    def clear(self, flow_name):
        self.data.pop(flow_name, None)


def record(marker: str, step: str = "games") -> ProgressRecord:
    return ProgressRecord(
        flow_name="survey-progress",
        current_step=step,
        step_history=("info", "otp", step),
        session_marker=marker,
    )


def test_mount_without_record_is_fresh():
    result = SessionResetPolicy(InMemoryProgressStore()).on_mount("survey-progress", "A")

    assert result.state == ProgressState.FRESH
    assert result.record is None
    assert result.was_reset is False


def test_mount_with_same_marker_resumes():
    store = InMemoryProgressStore()
    store.set("survey-progress", record("A"))

    result = SessionResetPolicy(store).on_mount("survey-progress", "A")

    assert result.state == ProgressState.BOUND
    assert result.record.current_step == "games"


def test_mount_with_new_marker_clears_and_is_idempotent():
    store = InMemoryProgressStore()
    store.set("survey-progress", record("A"))
    policy = SessionResetPolicy(store)

    first = policy.on_mount("survey-progress", "B")
    second = policy.on_mount("survey-progress", "B")

    assert first.state == ProgressState.FRESH and first.was_reset is True
    assert second.state == ProgressState.FRESH and second.was_reset is False
    assert store.get("survey-progress") is None


def test_reset_leaves_other_flows_alone():
    store = InMemoryProgressStore()
    store.set("survey-progress", record("A"))
    store.set("gift-progress", ProgressRecord("gift-progress", "gift-games", ("gift-check-phone", "gift-games"), "B"))

    SessionResetPolicy(store).on_mount("survey-progress", "B")

    assert store.get("gift-progress") is not None


def test_mount_without_live_marker_keeps_record():
    store = InMemoryProgressStore()
    store.set("survey-progress", record("A"))

    assert SessionResetPolicy(store).on_mount("survey-progress", None).state == ProgressState.BOUND
    assert store.get("survey-progress") is not None


def test_legacy_record_without_marker_is_bound_to_current_session():
    store = InMemoryProgressStore()
    store.set("survey-progress", record(""))

    result = SessionResetPolicy(store).on_mount("survey-progress", "A")

    assert result.state == ProgressState.BOUND
    assert store.get("survey-progress").session_marker == "A"


def test_classify_is_read_only():
    store = InMemoryProgressStore()
    store.set("survey-progress", record("A"))
    policy = SessionResetPolicy(store)

    assert policy.classify("survey-progress", "B") == ProgressState.STALE
    assert policy.classify("survey-progress", "A") == ProgressState.BOUND
    assert policy.classify("gift-progress", "A") == ProgressState.FRESH
    assert store.get("survey-progress") is not None


def test_unload_keeps_progress_bound_to_live_session():
    store = InMemoryProgressStore()
    store.set("survey-progress", record("A"))

    assert SessionResetPolicy(store).on_unload("survey-progress", "A") is False
    assert store.get("survey-progress") is not None


def test_unload_clears_progress_from_another_session_once():
    store = InMemoryProgressStore()
    store.set("survey-progress", record("A"))
    policy = SessionResetPolicy(store)

    assert policy.on_unload("survey-progress", "B") is True
    assert policy.on_unload("survey-progress", "B") is False
    assert store.get("survey-progress") is None


def test_unload_after_logout_clears():
    store = InMemoryProgressStore()
    store.set("survey-progress", record("A"))

    assert SessionResetPolicy(store).on_unload("survey-progress", None) is True


def test_unload_trigger_can_be_disabled():
    store = InMemoryProgressStore()
    store.set("survey-progress", record("A"))

    assert SessionResetPolicy(store, reset_on_unload=False).on_unload("survey-progress", "B") is False
    assert store.get("survey-progress") is not None


def test_record_json_roundtrip_keeps_marker_and_history():
    r = record("A")

    assert ProgressRecord.from_json("survey-progress", r.to_json()) == r


@pytest.mark.parametrize(
    "payload",
    ["not json", "[]", '{"step_history": []}', '{"current_step": 3}', '{"current_step": "info", "survey_flow": 2}'],
)
def test_corrupt_record_is_rejected(payload):
    with pytest.raises(ValidationError):
        ProgressRecord.from_json("survey-progress", payload)


def test_record_json_roundtrip_keeps_chosen_branch():
    r = ProgressRecord("survey-progress", "lucky-wheel", ("info", "otp", "games", "flow-choice", "lucky-wheel"), "A", survey_flow="quick")

    again = ProgressRecord.from_json("survey-progress", r.to_json())

    assert again == r
    assert again.spin_count == 1


def test_record_stored_before_branches_reads_without_one():
    again = ProgressRecord.from_json("survey-progress", '{"current_step": "info", "step_history": ["info"], "session_marker": "A"}')

    assert again.survey_flow is None
    assert again.spin_count == 0


def test_legacy_binding_keeps_chosen_branch():
    store = InMemoryProgressStore()
    store.set("survey-progress", ProgressRecord("survey-progress", "flow-choice", ("flow-choice",), "", survey_flow="full"))

    SessionResetPolicy(store).on_mount("survey-progress", "A")

    assert store.get("survey-progress").survey_flow == "full"
