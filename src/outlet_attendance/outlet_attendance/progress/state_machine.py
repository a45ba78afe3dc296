from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..core.enums import ProgressState, TransitionResult
from ..guards.base import CancelToken
from .flows import FlowDefinition
from .model import ProgressRecord
from .repository import ProgressStore
from .reset_policy import SessionResetPolicy

logger = logging.getLogger(__name__)


class SurveyProgressStateMachine:
    """Step sequencing for the gift/survey flows.

    Every accepted transition is appended to the history and written to the
    store before the call returns. Misuse (``TERMINAL_STEP``,
    ``INVALID_TRANSITION``) is reported as a result flag and leaves the state
    untouched. A branching flow cannot move past its ``branch_at`` step until
    a branch is chosen with ``choose_flow``.
    """

    def __init__(
        self,
        flow: FlowDefinition,
        store: ProgressStore,
        session_marker: str,
        record: Optional[ProgressRecord] = None,
        *,
        cancel: CancelToken | None = None,
    ):
        self._flow = flow
        self._store = store
        self._marker = session_marker
        self._cancel = cancel or CancelToken()

        if record is not None:
            record.ensure_bound(session_marker)
            if record.survey_flow is not None and not flow.has_branch(record.survey_flow):
                logger.warning("stored branch %r is not part of %s; restarting", record.survey_flow, flow.name)
                record = None
            elif flow.index_of(record.current_step, record.survey_flow) is None:
                logger.warning("stored step %r is not part of %s; restarting", record.current_step, flow.name)
                record = None

        if record is None:
            record = ProgressRecord(
                flow_name=flow.name,
                current_step=flow.first_step,
                step_history=(flow.first_step,),
                session_marker=session_marker,
            )
            self._write(record)
        self._record = record

    @classmethod
    def mount(
        cls,
        flow: FlowDefinition,
        store: ProgressStore,
        policy: SessionResetPolicy,
        session_marker: str,
        *,
        cancel: CancelToken | None = None,
    ) -> "SurveyProgressStateMachine":
        """Run the reset policy, then resume the bound record or start fresh."""
        result = policy.on_mount(flow.name, session_marker)
        record = result.record if result.state == ProgressState.BOUND else None
        return cls(flow, store, session_marker, record, cancel=cancel)

    @property
    def flow(self) -> FlowDefinition:
        return self._flow

    @property
    def current_step(self) -> str:
        return self._record.current_step

    @property
    def step_history(self) -> tuple[str, ...]:
        return self._record.step_history

    @property
    def survey_flow(self) -> Optional[str]:
        return self._record.survey_flow

    @property
    def spin_count(self) -> int:
        return self._record.spin_count

    @property
    def steps(self) -> tuple[str, ...]:
        return self._flow.steps_for(self._record.survey_flow)

    @property
    def is_terminal(self) -> bool:
        return self._record.current_step == self._flow.last_step(self._record.survey_flow)

    def advance(self) -> TransitionResult:
        if self.is_terminal:
            return TransitionResult.TERMINAL_STEP
        if self._awaiting_choice():
            return TransitionResult.INVALID_TRANSITION
        self._transition(self._flow.next_step(self._record.current_step, self._record.survey_flow))
        return TransitionResult.OK

    def back(self) -> TransitionResult:
        prev = self._flow.previous_step(self._record.current_step, self._record.survey_flow)
        if prev is None:
            return TransitionResult.INVALID_TRANSITION
        self._transition(prev)
        return TransitionResult.OK

    def go_to(self, step: str) -> TransitionResult:
        """Jump back anywhere, or forward by at most one step."""
        target = self._flow.index_of(step, self._record.survey_flow)
        limit = self._reachable_limit()
        if target is None or limit is None or target > limit:
            return TransitionResult.INVALID_TRANSITION
        if step == self._record.current_step:
            return TransitionResult.OK
        self._transition(step)
        return TransitionResult.OK

    def choose_flow(self, branch: str) -> TransitionResult:
        """Record the branch picked at the flow-choice step; the step itself does not change."""
        if not self._flow.has_branch(branch) or self._record.current_step != self._flow.branch_at:
            return TransitionResult.INVALID_TRANSITION
        if branch != self._record.survey_flow:
            record = replace(self._record, survey_flow=branch)
            self._write(record)
            self._record = record
        return TransitionResult.OK

    def can_access(self, step: str) -> bool:
        target = self._flow.index_of(step, self._record.survey_flow)
        limit = self._reachable_limit()
        return target is not None and limit is not None and target <= limit

    def snapshot(self) -> dict:
        return {
            "flow": self._flow.name,
            "steps": list(self.steps),
            "current_step": self._record.current_step,
            "step_history": list(self._record.step_history),
            "survey_flow": self._record.survey_flow,
            "spin_count": self._record.spin_count,
            "is_terminal": self.is_terminal,
        }

    def _awaiting_choice(self) -> bool:
        if not self._flow.branches or self._record.survey_flow is not None:
            return False
        current = self._flow.index_of(self._record.current_step)
        return current is not None and current >= self._flow.index_of(self._flow.branch_at)

    def _reachable_limit(self) -> Optional[int]:
        current = self._flow.index_of(self._record.current_step, self._record.survey_flow)
        if current is None:
            return None
        return current if self._awaiting_choice() else current + 1

    def _transition(self, step: str) -> None:
        record = replace(
            self._record,
            current_step=step,
            step_history=self._record.step_history + (step,),
            session_marker=self._marker,
        )
        self._write(record)
        self._record = record

    def _write(self, record: ProgressRecord) -> None:
        self._cancel.raise_if_cancelled()
        self._store.set(self._flow.name, record)
