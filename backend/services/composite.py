"""Composite operational scores for the control-tower and program-office views.

Both dashboards share one calculator; they differ only in the weight preset
used for ``execution_score``. Every function here is pure given its
snapshot and ``now``.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from config import settings
from models.schemas.composite import (
    CompositeScoreSet,
    ExecutionWeights,
    GovernanceCheck,
    PipelineHygiene,
    ScorePreset,
)
from models.schemas.records import (
    ApplicationRecord,
    GoalRecord,
    InterviewSessionRecord,
    ResumeRecord,
    RoleRecord,
)
from services.clock import ensure_aware, start_of_day, whole_days_between
from services.scoring import clamp, clamp_score, mean_or, pct

logger = logging.getLogger(__name__)

PRESET_WEIGHTS: dict[ScorePreset, ExecutionWeights] = {
    ScorePreset.PIPELINE_CONTROL: ExecutionWeights(sla=0.45, quality=0.35, efficiency=0.2),
    ScorePreset.PROGRAM_OFFICE: ExecutionWeights(sla=0.35, quality=0.3, efficiency=0.2, goals=0.15),
}

MONTHLY_TARGET_BASELINE = 20
GOAL_DUE_WINDOW_DAYS = 14


def _local_day(value: datetime, now: datetime) -> datetime:
    return start_of_day(value.astimezone(now.tzinfo))


def assess_pipeline_hygiene(
    applications: Sequence[ApplicationRecord],
    now: datetime,
) -> PipelineHygiene:
    """Count overdue, stale and no-action records among active applications."""
    now = ensure_aware(now)
    today = start_of_day(now)
    overdue = stale = no_action = 0

    for app in applications:
        if not app.is_active:
            continue
        action = app.action_date
        if action is not None:
            if _local_day(action, now) < today:
                overdue += 1
            continue
        no_action += 1
        anchor = app.effective_date
        if anchor is None:
            continue
        if whole_days_between(today, _local_day(anchor, now)) >= settings.stale_after_days:
            stale += 1

    week_ago = now - timedelta(days=7)
    window_start = now - timedelta(days=settings.recent_window_days)
    dated = [app.effective_date for app in applications if app.effective_date is not None]

    return PipelineHygiene(
        active=sum(1 for app in applications if app.is_active),
        overdue=overdue,
        stale=stale,
        no_action=no_action,
        recent_applications_7d=sum(1 for d in dated if d >= week_ago),
        recent_applications_30d=sum(1 for d in dated if d >= window_start),
    )


def quality_index(
    applications: Sequence[ApplicationRecord],
    resumes: Sequence[ResumeRecord],
) -> int:
    """Mean of role-match and ATS averages; each defaults when absent."""
    default = settings.default_quality_score
    avg_match = mean_or((a.match_score for a in applications if a.match_score is not None), default)
    avg_ats = mean_or((r.ats_score for r in resumes if r.ats_score is not None), default)
    return clamp_score((avg_match + avg_ats) / 2)


def funnel_rates(applications: Sequence[ApplicationRecord]) -> tuple[float, float, float]:
    total = len(applications)
    responses = sum(1 for a in applications if a.has_responded)
    interviews = sum(1 for a in applications if a.status == "interview")
    offers = sum(1 for a in applications if a.status == "offer")
    return pct(responses, total), pct(interviews, total), pct(offers, total)


def _active_pods(
    applications: Sequence[ApplicationRecord],
    resumes: Sequence[ResumeRecord],
    roles: Sequence[RoleRecord],
) -> int:
    pods = [
        len(resumes) > 0,
        len(roles) > 0,
        len(applications) > 0,
        any(a.has_responded for a in applications),
        any(a.status == "interview" for a in applications),
    ]
    return sum(pods)


def risk_score(
    applications: Sequence[ApplicationRecord],
    resumes: Sequence[ResumeRecord],
    roles: Sequence[RoleRecord],
    hygiene: PipelineHygiene,
    risk_tolerance: float,
) -> int:
    """Expansion risk: 100 minus weighted readiness, shifted by tolerance."""
    avg_ats = mean_or(
        (r.ats_score for r in resumes if r.ats_score is not None),
        settings.default_quality_score,
    )
    response_rate, _, _ = funnel_rates(applications)
    parsing_coverage = pct(sum(1 for r in roles if r.is_parsed), len(roles))
    control = max(0, 100 - hygiene.overdue * 10 - hygiene.no_action * 8)
    pods = clamp(_active_pods(applications, resumes, roles) * 15, 0, 100)

    readiness = (
        avg_ats * 0.35
        + response_rate * 0.2
        + parsing_coverage * 0.15
        + control * 0.2
        + pods * 0.1
    )
    tolerance_penalty = clamp((50 - risk_tolerance) * 0.5, -20, 25)
    return clamp_score(100 - readiness + tolerance_penalty)


def compute_composite_scores(
    applications: Sequence[ApplicationRecord],
    resumes: Sequence[ResumeRecord],
    goals: Sequence[GoalRecord],
    sessions: Sequence[InterviewSessionRecord],
    now: datetime,
    preset: ScorePreset = ScorePreset.PIPELINE_CONTROL,
    roles: Sequence[RoleRecord] = (),
    risk_tolerance: float | None = None,
) -> CompositeScoreSet:
    """Compute the six dashboard scores from one point-in-time snapshot.

    ``sessions`` does not feed any score directly; it is accepted so every
    dashboard can pass the same snapshot.
    """
    now = ensure_aware(now)
    weights = PRESET_WEIGHTS[ScorePreset(preset)]
    if risk_tolerance is None:
        risk_tolerance = settings.default_risk_tolerance

    hygiene = assess_pipeline_hygiene(applications, now)
    quality = quality_index(applications, resumes)

    sla = clamp_score(
        100 * (hygiene.active - hygiene.overdue - hygiene.stale) / max(1, hygiene.active)
    )
    response_rate, interview_rate, offer_rate = funnel_rates(applications)
    efficiency = clamp_score((response_rate + interview_rate + offer_rate) / 3)
    goal_rate = 100 * sum(1 for g in goals if g.completed) / max(1, len(goals))

    execution = clamp_score(
        sla * weights.sla
        + quality * weights.quality
        + efficiency * weights.efficiency
        + goal_rate * weights.goals
    )

    recent = hygiene.recent_applications_30d
    velocity = clamp_score(100 * recent / max(MONTHLY_TARGET_BASELINE, max(1, recent)))

    return CompositeScoreSet(
        execution_score=execution,
        sla_compliance=sla,
        quality_index=quality,
        pipeline_efficiency=efficiency,
        velocity_score=velocity,
        risk_score=risk_score(applications, resumes, roles, hygiene, risk_tolerance),
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def build_governance_checks(
    hygiene: PipelineHygiene,
    goals: Sequence[GoalRecord],
    now: datetime,
) -> list[GovernanceCheck]:
    """Program-office governance checklist with Pass/Watch/Risk statuses."""
    now = ensure_aware(now)
    today = start_of_day(now)
    goals_due_soon = 0
    for goal in goals:
        if goal.completed or goal.target_date is None:
            continue
        days_left = whole_days_between(_local_day(goal.target_date, now), today)
        if 0 <= days_left <= GOAL_DUE_WINDOW_DAYS:
            goals_due_soon += 1

    return [
        GovernanceCheck(
            title="Follow-up SLA",
            detail=f"{_plural(hygiene.overdue, 'overdue follow-up item')}.",
            status="Pass" if hygiene.overdue == 0 else "Risk",
        ),
        GovernanceCheck(
            title="Pipeline Hygiene",
            detail=f"{_plural(hygiene.no_action, 'active record')} without next action.",
            status="Pass" if hygiene.no_action <= 2 else "Watch",
        ),
        GovernanceCheck(
            title="Stale Opportunity Control",
            detail=(
                f"{_plural(hygiene.stale, 'stale active application')} "
                f"({settings.stale_after_days}+ days)."
            ),
            status="Pass" if hygiene.stale == 0 else "Watch",
        ),
        GovernanceCheck(
            title="Goal Delivery Window",
            detail=f"{_plural(goals_due_soon, 'goal')} due in next {GOAL_DUE_WINDOW_DAYS} days.",
            status="Pass" if goals_due_soon == 0 else "Watch",
        ),
    ]
