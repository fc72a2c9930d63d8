from pydantic import BaseModel, Field

from models.schemas.execution import ExecutionFocus


class ProjectScenarioRequest(BaseModel):
    applications_per_week: float = Field(..., ge=0, le=500, description="Weekly application volume")
    weeks: int = Field(..., ge=1, le=52, description="Projection horizon in weeks")
    response_rate: float = Field(..., ge=0, le=100, description="Response rate percent")
    interview_rate: float = Field(..., ge=0, le=100, description="Interview rate percent")
    offer_rate: float = Field(..., ge=0, le=100, description="Offer rate percent")
    quality_lift_pct: float = Field(0.0, ge=-100, le=200, description="Relative lift applied to every rate")


class ExecuteFeatureRequest(BaseModel):
    focus: ExecutionFocus = ExecutionFocus.CONVERSION
    notes: str | None = Field(None, max_length=1200, description="Free-form note appended to each checklist")
    priority: int | None = Field(None, ge=0, le=100, description="Override rollout priority")
    owner: str | None = Field(None, max_length=120, description="Override rollout owner")
    create_reminders: bool = True
    narrative: bool = False


class SprintPlanRequest(BaseModel):
    notes: str | None = Field(None, max_length=500, description="Directive appended to each sprint day")
