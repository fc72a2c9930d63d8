"""Runtime signal aggregation: one cross-entity snapshot plus momentum."""

import logging
from collections.abc import Sequence
from datetime import datetime

from config import settings
from models.schemas.records import (
    CLOSED_STATUSES,
    ApplicationRecord,
    GoalRecord,
    ResumeRecord,
    RoleRecord,
)
from models.schemas.signals import (
    ApplicationSignals,
    GoalSignals,
    ResumeSignals,
    RoleSignals,
    RuntimeSignals,
    UserSnapshot,
)
from services.clock import ensure_aware, whole_days_between
from services.scoring import clamp_score, mean_or, round_int

logger = logging.getLogger(__name__)


def application_signals(
    applications: Sequence[ApplicationRecord],
    now: datetime,
) -> ApplicationSignals:
    open_count = interviews = offers = rejected = stale = followup_due = 0

    for app in applications:
        closed = app.status in CLOSED_STATUSES
        if app.status == "interview":
            interviews += 1
        elif app.status == "offer":
            offers += 1
        elif app.status == "rejected":
            rejected += 1
        if closed:
            continue
        open_count += 1

        anchor = app.action_date or app.effective_date
        if anchor is None:
            continue
        days_old = whole_days_between(now, anchor)
        if days_old >= settings.runtime_stale_days:
            stale += 1
        if days_old >= settings.followup_due_days:
            followup_due += 1

    scores = [
        a.match_score for a in applications
        if a.match_score is not None and 0 <= a.match_score <= 100
    ]
    return ApplicationSignals(
        total=len(applications),
        open=open_count,
        interviews=interviews,
        offers=offers,
        rejected=rejected,
        stale=stale,
        followup_due=followup_due,
        avg_match=round_int(mean_or(scores, 0)),
    )


def resume_signals(resumes: Sequence[ResumeRecord]) -> ResumeSignals:
    ats = [r.ats_score for r in resumes if r.ats_score is not None]
    return ResumeSignals(
        total=len(resumes),
        avg_ats=round_int(mean_or(ats, 0)),
        below80=sum(1 for value in ats if value < 80),
    )


def role_signals(roles: Sequence[RoleRecord]) -> RoleSignals:
    return RoleSignals(total=len(roles), parsed=sum(1 for r in roles if r.is_parsed))


def goal_signals(goals: Sequence[GoalRecord]) -> GoalSignals:
    return GoalSignals(total=len(goals), completed=sum(1 for g in goals if g.completed))


def momentum_score(
    apps: ApplicationSignals,
    resumes: ResumeSignals,
    roles: RoleSignals,
) -> int:
    return clamp_score(
        46
        + apps.open * 0.8
        + apps.interviews * 4
        + apps.offers * 8
        - apps.rejected * 1.8
        - apps.stale * 3.6
        + resumes.avg_ats * 0.22
        + roles.total * 0.35
    )


def aggregate_runtime_signals(snapshot: UserSnapshot, now: datetime) -> RuntimeSignals:
    """Collapse a user snapshot into counts and a 0-100 momentum score.

    Sources listed in ``snapshot.unavailable`` contribute zeros and are
    carried through so callers can surface them.
    """
    now = ensure_aware(now)
    apps = application_signals(snapshot.applications, now)
    resumes = resume_signals(snapshot.resumes)
    roles = role_signals(snapshot.roles)

    signals = RuntimeSignals(
        generated_at=now,
        applications=apps,
        roles=roles,
        resumes=resumes,
        goals=goal_signals(snapshot.goals),
        notifications_unread=max(0, snapshot.notifications_unread),
        anomalies_open=max(0, snapshot.anomalies_open),
        momentum_score=momentum_score(apps, resumes, roles),
        unavailable=list(snapshot.unavailable),
    )
    if signals.unavailable:
        logger.warning("Runtime signals degraded, unavailable: %s", ", ".join(signals.unavailable))
    return signals
