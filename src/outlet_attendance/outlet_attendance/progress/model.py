from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..core.constants import SPIN_COUNTS
from ..core.exceptions import StaleProgress, ValidationError


@dataclass(frozen=True)
class ProgressRecord:
    """Tiến trình đã lưu của một flow (quà tặng/khảo sát).

    ``session_marker`` là marker của phiên đăng nhập lúc bản ghi được tạo.
    ``survey_flow`` là luồng khách đã chọn ở bước flow-choice (nếu có).
    """

    flow_name: str
    current_step: str
    step_history: Tuple[str, ...] = field(default_factory=tuple)
    session_marker: str = ""
    survey_flow: Optional[str] = None

    @property
    def spin_count(self) -> int:
        return SPIN_COUNTS.get(self.survey_flow or "", 0)

    def ensure_bound(self, live_marker: str) -> "ProgressRecord":
        if self.session_marker != live_marker:
            raise StaleProgress(f"progress for {self.flow_name!r} belongs to another login session")
        return self

    def to_json(self) -> str:
        return json.dumps(
            {
                "current_step": self.current_step,
                "step_history": list(self.step_history),
                "session_marker": self.session_marker,
                "survey_flow": self.survey_flow,
            },
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, flow_name: str, payload: str) -> "ProgressRecord":
        try:
            data = json.loads(payload)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Dữ liệu tiến trình {flow_name} bị hỏng") from e
        if not isinstance(data, dict) or not isinstance(data.get("current_step"), str):
            raise ValidationError(f"Dữ liệu tiến trình {flow_name} bị hỏng")

        survey_flow = data.get("survey_flow")
        if survey_flow is not None and not isinstance(survey_flow, str):
            raise ValidationError(f"Dữ liệu tiến trình {flow_name} bị hỏng")

        history = data.get("step_history") or []
        return cls(
            flow_name=flow_name,
            current_step=data["current_step"],
            step_history=tuple(str(s) for s in history),
            session_marker=str(data.get("session_marker") or ""),
            survey_flow=survey_flow,
        )
