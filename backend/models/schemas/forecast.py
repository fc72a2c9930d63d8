"""Funnel metrics and scenario projection contracts."""

from datetime import datetime

from pydantic import BaseModel


class FunnelMetrics(BaseModel):
    total_applications: int = 0
    response_rate: float = 0.0  # 0-100
    interview_rate: float = 0.0  # 0-100
    offer_rate: float = 0.0  # 0-100
    avg_applications_per_week: float = 0.0


class ProjectionParams(BaseModel):
    """Engine-side projection input. Assumed pre-validated."""
    applications_per_week: float
    weeks: int
    response_rate: float
    interview_rate: float
    offer_rate: float
    quality_lift_pct: float = 0.0


class ProjectionResult(BaseModel):
    """Expected funnel counts over a horizon.

    Counts always satisfy
    ``expected_offers <= expected_interviews <= expected_responses <= total_applications``.
    """
    weeks: int
    applications_per_week: float = 0.0
    total_applications: int = 0
    effective_response_rate: float = 0.0
    effective_interview_rate: float = 0.0
    effective_offer_rate: float = 0.0
    expected_responses: int = 0
    expected_interviews: int = 0
    expected_offers: int = 0


class ScenarioDefinition(BaseModel):
    id: str  # conservative | balanced | aggressive
    label: str
    applications_per_week: int
    quality_lift_pct: float
    note: str = ""


class ScenarioProjection(BaseModel):
    scenario: ScenarioDefinition
    projections: list[ProjectionResult] = []  # ascending horizon


class ForecastSnapshot(BaseModel):
    generated_at: datetime
    metrics: FunnelMetrics
    recommended_weekly_target: int
    scenarios: list[ScenarioProjection] = []
    recommendations: list[str] = []
