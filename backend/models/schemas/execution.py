"""Feature catalog entries and the execution package built for them."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class Lane(str, Enum):
    AI = "ai"
    PIPELINE = "pipeline"
    RESUME = "resume"
    INTERVIEW = "interview"
    NETWORKING = "networking"
    COLLABORATION = "collaboration"
    INTEGRATION = "integration"
    ANALYTICS = "analytics"
    SECURITY = "security"
    GROWTH = "growth"


class ExecutionFocus(str, Enum):
    SPEED = "speed"
    QUALITY = "quality"
    CONVERSION = "conversion"
    RISK = "risk"


RiskLevel = Literal["low", "medium", "high"]
Priority = Literal["high", "medium", "low"]
Trend = Literal["up", "down", "stable"]
RolloutStatus = Literal["backlog", "planned", "in_progress", "live"]


class FeatureDefinition(BaseModel):
    id: str
    title: str
    category: str = ""
    summary: str = ""
    impact: str = ""
    default_href: str = ""
    kpis: list[str] = []
    sprint_template: list[str] = []


class FeatureRollout(BaseModel):
    feature_id: str
    status: RolloutStatus = "planned"
    priority: int = Field(default=70, ge=0, le=100)
    owner: str = ""
    notes: str = ""


class KpiTarget(BaseModel):
    name: str
    current: str
    target: str
    trend: Trend


class ExecutionAction(BaseModel):
    id: str
    title: str
    detail: str
    module_href: str
    priority: Priority
    due_at: datetime
    owner: str
    kpi: str
    checklist: list[str] = []


class EvidenceItem(BaseModel):
    source: str
    detail: str
    href: str


class FeatureExecutionPackage(BaseModel):
    feature_id: str
    title: str
    lane: Lane
    focus: ExecutionFocus
    generated_at: datetime
    summary: str = ""
    value_score: int = 0
    risk_level: RiskLevel = "medium"
    kpi_targets: list[KpiTarget] = []
    actions: list[ExecutionAction] = []
    evidence: list[EvidenceItem] = []
    quick_prompts: list[str] = []


class ReminderOutcome(BaseModel):
    """Result of the best-effort reminder write. Never affects the package."""
    created: int = 0
    persistence_enabled: bool = True
    failed: bool = False
    error: str | None = None


class SprintDay(BaseModel):
    day: str
    objective: str
    actions: list[str] = []
    success_metric: str


class FeatureSprintPlan(BaseModel):
    """Five-weekday sprint built from a feature's sprint template."""
    feature_id: str
    title: str
    summary: str = ""
    sprint_days: list[SprintDay] = []
    quick_prompts: list[str] = []
    confidence: float = 0.74
