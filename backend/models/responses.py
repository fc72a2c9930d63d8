from pydantic import BaseModel

from models.schemas.composite import (
    CompositeScoreSet,
    GovernanceCheck,
    PipelineHygiene,
    ScorePreset,
)
from models.schemas.execution import (
    FeatureDefinition,
    FeatureExecutionPackage,
    FeatureRollout,
    Lane,
    ReminderOutcome,
)


class CompositeScoreResponse(BaseModel):
    preset: ScorePreset
    risk_tolerance: int
    hygiene: PipelineHygiene
    scores: CompositeScoreSet
    governance: list[GovernanceCheck] = []
    unavailable: list[str] = []


class FeatureEntry(BaseModel):
    feature: FeatureDefinition
    rollout: FeatureRollout
    lane: Lane


class FeatureSuiteSummary(BaseModel):
    total: int = 0
    live: int = 0
    in_progress: int = 0
    planned: int = 0
    backlog: int = 0
    avg_priority: int = 0
    completion_pct: int = 0


class FeatureListResponse(BaseModel):
    features: list[FeatureEntry] = []
    summary: FeatureSuiteSummary = FeatureSuiteSummary()


class LaneResponse(BaseModel):
    feature_id: str
    lane: Lane
    label: str
    lane_score: int
    module_href: str
    unavailable: list[str] = []


class NarrativeBrief(BaseModel):
    headline: str = ""
    brief: str = ""
    first_steps: list[str] = []


class ExecutionResponse(BaseModel):
    package: FeatureExecutionPackage
    reminders: ReminderOutcome = ReminderOutcome()
    unavailable: list[str] = []
    brief: NarrativeBrief | None = None
    # True when a brief was requested but could not be generated
    degraded: bool = False
