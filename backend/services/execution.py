"""Feature execution package: value score, risk, KPI targets and a 5-step plan.

Template-based and deterministic. Given the same feature, rollout, signals,
focus, notes and ``now``, the package is identical.
"""

import logging
import re
from datetime import datetime, timedelta

from models.schemas.execution import (
    EvidenceItem,
    ExecutionAction,
    ExecutionFocus,
    FeatureDefinition,
    FeatureExecutionPackage,
    FeatureRollout,
    FeatureSprintPlan,
    KpiTarget,
    RiskLevel,
    SprintDay,
)
from models.schemas.signals import RuntimeSignals
from services.clock import ensure_aware, utc_now
from services.lanes import LANE_CONFIG, classify_lane, lane_signal_score
from services.scoring import clamp, clamp_score, round_int, safe_ratio

logger = logging.getLogger(__name__)

DEFAULT_OWNER = "AI Program Owner"
DEFAULT_KPI = "Execution quality"
MAX_KPI_TARGETS = 4
SPRINT_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
SPRINT_TEMPLATE_STEPS = 4

ACTION_TITLES = (
    "Baseline {title}",
    "Ship first slice for {title}",
    "Run KPI check for {title}",
    "Scale {title} to daily workflow",
    "Close weekly review for {title}",
)

FOCUS_CHECKLIST_ITEM: dict[ExecutionFocus, str] = {
    ExecutionFocus.SPEED: "Reduce cycle time for this feature by removing blockers.",
    ExecutionFocus.QUALITY: "Run QA pass and document quality checks before rollout.",
    ExecutionFocus.CONVERSION: "Track conversion impact after activation.",
    ExecutionFocus.RISK: "Review risk controls and fallback path before launch.",
}

_PERCENT_KPI = re.compile(
    r"rate|score|coverage|quality|readiness|compliance|accuracy|health|velocity|lift", re.I
)
_HOURS_KPI = re.compile(r"time|sla|latency", re.I)
_NUMBER = re.compile(r"[^0-9.\-]")


def value_score(lane_score: int, momentum: int, priority: int) -> int:
    return clamp_score(lane_score * 0.58 + momentum * 0.28 + priority * 0.14)


def risk_level(score: int, signals: RuntimeSignals) -> RiskLevel:
    stale_ratio = safe_ratio(signals.applications.stale, signals.applications.open)
    if score < 48 or stale_ratio >= 0.35 or signals.anomalies_open >= 2:
        return "high"
    if score < 72 or stale_ratio >= 0.2:
        return "medium"
    return "low"


def current_for_kpi(kpi: str, signals: RuntimeSignals) -> str:
    """Current KPI reading, matched by keyword in priority order."""
    name = kpi.lower()
    if re.search(r"ats|resume", name):
        return f"{signals.resumes.avg_ats}%"
    if re.search(r"pipeline|follow|application|response|conversion|velocity", name):
        return f"{int(clamp(signals.momentum_score - 12, 20, 95))}%"
    if "interview" in name:
        return f"{int(clamp(40 + signals.applications.interviews * 8, 20, 95))}%"
    if re.search(r"security|risk|compliance|anomaly", name):
        return f"{int(clamp(85 - signals.anomalies_open * 12, 10, 99))}%"
    return f"{signals.momentum_score}%"


def target_for_kpi(kpi: str, score: int) -> str:
    target = int(clamp(score + 8, 45, 98))
    if _PERCENT_KPI.search(kpi):
        return f"{target}%"
    if _HOURS_KPI.search(kpi):
        return f"{max(4, 48 - round_int(target / 2))}h"
    return f"{target}%"


def _numeric(value: str) -> float:
    try:
        return float(_NUMBER.sub("", value))
    except ValueError:
        return 0.0


def kpi_trend(current: str, target: str) -> str:
    current_num, target_num = _numeric(current), _numeric(target)
    if target_num > current_num:
        return "up"
    if target_num < current_num:
        return "down"
    return "stable"


def build_kpi_targets(
    feature: FeatureDefinition,
    signals: RuntimeSignals,
    score: int,
) -> list[KpiTarget]:
    targets = []
    for kpi in feature.kpis[:MAX_KPI_TARGETS]:
        current = current_for_kpi(kpi, signals)
        target = target_for_kpi(kpi, score)
        targets.append(KpiTarget(name=kpi, current=current, target=target, trend=kpi_trend(current, target)))
    return targets


def build_action_checklist(
    feature_title: str,
    focus: ExecutionFocus,
    kpi: str,
    notes: str | None = None,
) -> list[str]:
    items = [
        f"Define scope and owner for {feature_title}.",
        "Ship the first production-ready change this week.",
        f"Measure KPI movement for {kpi}.",
        FOCUS_CHECKLIST_ITEM[focus],
    ]
    if notes and notes.strip():
        items.append(f"Apply custom note: {notes.strip()}")
    return items


def build_actions(
    feature: FeatureDefinition,
    rollout: FeatureRollout,
    signals: RuntimeSignals,
    focus: ExecutionFocus,
    now: datetime,
    notes: str | None = None,
) -> list[ExecutionAction]:
    lane_info = LANE_CONFIG[classify_lane(feature)]
    owner = rollout.owner or DEFAULT_OWNER
    actions = []

    for index, template in enumerate(ACTION_TITLES):
        kpi = feature.kpis[index % len(feature.kpis)] if feature.kpis else DEFAULT_KPI
        priority = "high" if index < 2 else "medium" if index < 4 else "low"
        detail = " ".join([
            f"Use {lane_info.label} signals to execute this step.",
            f"Current momentum is {signals.momentum_score} with "
            f"{signals.applications.open} open applications.",
            f"Expected KPI impact: {kpi}.",
        ])
        actions.append(ExecutionAction(
            id=f"{feature.id}-action-{index + 1}",
            title=template.format(title=feature.title),
            detail=detail,
            module_href=feature.default_href or lane_info.module_href,
            priority=priority,
            due_at=now + timedelta(days=index),
            owner=owner,
            kpi=kpi,
            checklist=build_action_checklist(feature.title, focus, kpi, notes),
        ))
    return actions


def build_evidence(signals: RuntimeSignals) -> list[EvidenceItem]:
    apps = signals.applications
    return [
        EvidenceItem(
            source="Applications",
            detail=f"{apps.open} open, {apps.stale} stale, {apps.interviews} interview-stage.",
            href="/app/applications",
        ),
        EvidenceItem(
            source="Resumes",
            detail=(
                f"{signals.resumes.total} resumes tracked, "
                f"average ATS {signals.resumes.avg_ats}%."
            ),
            href="/app/resumes",
        ),
        EvidenceItem(
            source="Roles",
            detail=(
                f"{signals.roles.total} roles in queue, "
                f"{signals.roles.parsed} parsed for AI matching."
            ),
            href="/app/roles",
        ),
        EvidenceItem(
            source="Goals",
            detail=f"{signals.goals.completed}/{signals.goals.total} goals completed.",
            href="/app/goals",
        ),
    ]


def build_execution_package(
    feature: FeatureDefinition,
    rollout: FeatureRollout,
    signals: RuntimeSignals,
    focus: ExecutionFocus = ExecutionFocus.CONVERSION,
    notes: str | None = None,
    now: datetime | None = None,
) -> FeatureExecutionPackage:
    """Score a catalog feature against current signals and plan its rollout."""
    now = ensure_aware(now) if now is not None else utc_now()
    focus = ExecutionFocus(focus)
    lane = classify_lane(feature)
    lane_score = lane_signal_score(lane, signals)
    score = value_score(lane_score, signals.momentum_score, rollout.priority)
    level = risk_level(score, signals)

    package = FeatureExecutionPackage(
        feature_id=feature.id,
        title=feature.title,
        lane=lane,
        focus=focus,
        generated_at=now,
        summary=(
            f"{feature.summary} This run produced a practical execution package with "
            f"measurable actions, KPI targets, and module-level next steps."
        ).strip(),
        value_score=score,
        risk_level=level,
        kpi_targets=build_kpi_targets(feature, signals, score),
        actions=build_actions(feature, rollout, signals, focus, now, notes),
        evidence=build_evidence(signals),
        quick_prompts=[
            f"Turn {feature.title} actions into a 48-hour checklist.",
            f"What blockers can reduce value score for {feature.title}?",
            f"Which KPI should I prioritize first for {feature.title}?",
            "Convert this plan into mobile-first tasks.",
        ],
    )
    logger.info(
        "Execution package for %s: lane=%s lane_score=%d value=%d risk=%s",
        feature.id, lane.value, lane_score, score, level,
    )
    return package


def build_feature_sprint_plan(
    feature: FeatureDefinition,
    notes: str | None = None,
) -> FeatureSprintPlan:
    """Weekday sprint cycling through the first four template steps."""
    steps = feature.sprint_template[:SPRINT_TEMPLATE_STEPS]
    directive = notes.strip() if notes else ""
    days = []

    for offset, day in enumerate(SPRINT_DAYS):
        if offset == 0:
            objective = f"Initialize {feature.title} operating baseline."
        elif offset == len(SPRINT_DAYS) - 1:
            objective = f"Close sprint with measurable {feature.category.lower()} outcomes."
        else:
            objective = f"Advance {feature.title} execution lane."

        actions = [
            steps[offset % len(steps)] if steps else objective,
            f"Capture decisions and blockers for {feature.title.lower()}.",
            f"Record KPI movement for: {feature.kpis[0] if feature.kpis else DEFAULT_KPI}.",
        ]
        if directive:
            actions.append(f"Apply custom directive: {directive}")

        days.append(SprintDay(
            day=day,
            objective=objective,
            actions=actions,
            success_metric=feature.kpis[offset % len(feature.kpis)] if feature.kpis else DEFAULT_KPI,
        ))

    return FeatureSprintPlan(
        feature_id=feature.id,
        title=f"{feature.title} - 7 Day Sprint",
        summary=(
            f"{feature.summary} This sprint is optimized for immediate execution "
            f"with KPI checkpoints and daily action loops."
        ).strip(),
        sprint_days=days,
        quick_prompts=[
            f"How do I accelerate {feature.title.lower()} impact this week?",
            f"Create a risk mitigation ladder for {feature.title.lower()}.",
            f"What KPIs should I review daily for {feature.title.lower()}?",
            "Turn this sprint into mobile-first tasks.",
        ],
    )
