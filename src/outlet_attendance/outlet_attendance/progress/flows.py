from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from ..core.constants import GIFT_PROGRESS, SURVEY_PROGRESS
from ..core.enums import SurveyBranch, SurveyFlowVariant
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class FlowDefinition:
    """Fixed, ordered steps of one progress flow.

    A flow may fork at ``branch_at``: once a branch is chosen, the steps after
    ``branch_at`` are that branch's tail instead of the default tail. Every
    branch is still a fixed ordered sequence.
    """

    name: str
    steps: Tuple[str, ...]
    branch_at: Optional[str] = None
    branches: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self):
        if not self.steps:
            raise ValueError(f"flow {self.name!r} has no steps")
        if len(set(self.steps)) != len(self.steps):
            raise ValueError(f"flow {self.name!r} repeats a step")
        if self.branches and self.branch_at not in self.steps:
            raise ValueError(f"flow {self.name!r} branches at unknown step {self.branch_at!r}")
        for branch in self.branches:
            seq = self.steps_for(branch)
            if len(set(seq)) != len(seq):
                raise ValueError(f"branch {branch!r} of flow {self.name!r} repeats a step")

    @property
    def first_step(self) -> str:
        return self.steps[0]

    def has_branch(self, branch: Optional[str]) -> bool:
        return branch is not None and branch in self.branches

    def steps_for(self, branch: Optional[str] = None) -> Tuple[str, ...]:
        if not self.has_branch(branch):
            return self.steps
        cut = self.steps.index(self.branch_at) + 1
        return self.steps[:cut] + tuple(self.branches[branch])

    def last_step(self, branch: Optional[str] = None) -> str:
        return self.steps_for(branch)[-1]

    def index_of(self, step: str, branch: Optional[str] = None) -> Optional[int]:
        try:
            return self.steps_for(branch).index(step)
        except ValueError:
            return None

    def next_step(self, step: str, branch: Optional[str] = None) -> Optional[str]:
        seq = self.steps_for(branch)
        idx = self.index_of(step, branch)
        if idx is None or idx == len(seq) - 1:
            return None
        return seq[idx + 1]

    def previous_step(self, step: str, branch: Optional[str] = None) -> Optional[str]:
        idx = self.index_of(step, branch)
        if not idx:
            return None
        return self.steps_for(branch)[idx - 1]


GIFT_FLOW = FlowDefinition(
    name=GIFT_PROGRESS,
    steps=("gift-check-phone", "gift-games", "gift-lucky-wheel"),
)


def survey_flow(variant: SurveyFlowVariant = SurveyFlowVariant.OTP) -> FlowDefinition:
    """info -> (otp | camera) -> games -> flow-choice, then the chosen branch.

    full: questions -> lucky-wheel -> complete
    quick: lucky-wheel -> complete
    no-games: questions -> complete
    """
    verification = "otp" if variant == SurveyFlowVariant.OTP else "camera"
    return FlowDefinition(
        name=SURVEY_PROGRESS,
        steps=("info", verification, "games", "flow-choice", "questions", "lucky-wheel", "complete"),
        branch_at="flow-choice",
        branches={
            SurveyBranch.FULL.value: ("questions", "lucky-wheel", "complete"),
            SurveyBranch.QUICK.value: ("lucky-wheel", "complete"),
            SurveyBranch.NO_GAMES.value: ("questions", "complete"),
        },
    )


FLOW_SLUGS = {
    "gift": GIFT_PROGRESS,
    "survey": SURVEY_PROGRESS,
}


def flow_for_slug(slug: str, *, variant: SurveyFlowVariant = SurveyFlowVariant.OTP) -> FlowDefinition:
    name = FLOW_SLUGS.get(slug)
    if name == GIFT_PROGRESS:
        return GIFT_FLOW
    if name == SURVEY_PROGRESS:
        return survey_flow(variant)
    raise ValidationError(f"Flow không tồn tại: {slug}")
