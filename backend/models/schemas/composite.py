"""Operational dashboard scores."""

from enum import Enum

from pydantic import BaseModel


class ScorePreset(str, Enum):
    """Weighting used for ``execution_score``."""
    PIPELINE_CONTROL = "pipeline-control"
    PROGRAM_OFFICE = "program-office"


class ExecutionWeights(BaseModel):
    sla: float
    quality: float
    efficiency: float
    goals: float = 0.0


class PipelineHygiene(BaseModel):
    active: int = 0
    overdue: int = 0
    stale: int = 0  # no action date, 14+ days old
    no_action: int = 0
    recent_applications_7d: int = 0
    recent_applications_30d: int = 0


class CompositeScoreSet(BaseModel):
    """Six composite scores, each an integer in [0, 100]."""
    execution_score: int = 0
    sla_compliance: int = 0
    quality_index: int = 0
    pipeline_efficiency: int = 0
    velocity_score: int = 0
    risk_score: int = 0


class GovernanceCheck(BaseModel):
    title: str
    detail: str
    status: str  # Pass | Watch | Risk
