"""Cross-entity runtime snapshot feeding the feature execution engine."""

from datetime import datetime

from pydantic import BaseModel

from models.schemas.records import (
    ApplicationRecord,
    GoalRecord,
    InterviewSessionRecord,
    ResumeRecord,
    RoleRecord,
)


class UserSnapshot(BaseModel):
    """Point-in-time reads for one user, joined before any computation.

    ``unavailable`` lists resources whose table or column is absent in the
    store; their fields hold empty defaults.
    """
    applications: list[ApplicationRecord] = []
    resumes: list[ResumeRecord] = []
    roles: list[RoleRecord] = []
    goals: list[GoalRecord] = []
    interview_sessions: list[InterviewSessionRecord] = []
    notifications_unread: int = 0
    anomalies_open: int = 0
    unavailable: list[str] = []


class ApplicationSignals(BaseModel):
    total: int = 0
    open: int = 0
    interviews: int = 0
    offers: int = 0
    rejected: int = 0
    stale: int = 0
    followup_due: int = 0
    avg_match: int = 0


class RoleSignals(BaseModel):
    total: int = 0
    parsed: int = 0


class ResumeSignals(BaseModel):
    total: int = 0
    avg_ats: int = 0
    below80: int = 0


class GoalSignals(BaseModel):
    total: int = 0
    completed: int = 0


class RuntimeSignals(BaseModel):
    generated_at: datetime
    applications: ApplicationSignals = ApplicationSignals()
    roles: RoleSignals = RoleSignals()
    resumes: ResumeSignals = ResumeSignals()
    goals: GoalSignals = GoalSignals()
    notifications_unread: int = 0
    anomalies_open: int = 0
    momentum_score: int = 0
    unavailable: list[str] = []
