"""Pydantic contracts shared by the engine, the record store and the API."""

from models.schemas.composite import (
    CompositeScoreSet,
    ExecutionWeights,
    GovernanceCheck,
    PipelineHygiene,
    ScorePreset,
)
from models.schemas.execution import (
    ExecutionFocus,
    FeatureDefinition,
    FeatureExecutionPackage,
    FeatureRollout,
    Lane,
    ReminderOutcome,
)
from models.schemas.forecast import (
    ForecastSnapshot,
    FunnelMetrics,
    ProjectionParams,
    ProjectionResult,
    ScenarioDefinition,
    ScenarioProjection,
)
from models.schemas.records import (
    ApplicationRecord,
    GoalRecord,
    InterviewSessionRecord,
    ReminderRecord,
    ResumeRecord,
    RoleRecord,
)
from models.schemas.signals import RuntimeSignals, UserSnapshot

__all__ = [
    "ApplicationRecord",
    "CompositeScoreSet",
    "ExecutionFocus",
    "ExecutionWeights",
    "FeatureDefinition",
    "FeatureExecutionPackage",
    "FeatureRollout",
    "ForecastSnapshot",
    "FunnelMetrics",
    "GoalRecord",
    "GovernanceCheck",
    "InterviewSessionRecord",
    "Lane",
    "PipelineHygiene",
    "ProjectionParams",
    "ProjectionResult",
    "ReminderOutcome",
    "ReminderRecord",
    "ResumeRecord",
    "RoleRecord",
    "RuntimeSignals",
    "ScenarioDefinition",
    "ScenarioProjection",
    "ScorePreset",
    "UserSnapshot",
]
