"""Scenario projection and forecast reporting.

Flow:
    applications → derive_funnel_metrics() → FunnelMetrics
      ├─ recommended_weekly_target()      → weekly target (>= 5)
      ├─ build_scenario_bank()            → 3 scenarios × N horizons
      │       └─ project_scenario()       → ProjectionResult per horizon
      └─ build_forecast_recommendations() → up to 4 action strings
"""

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from config import settings
from models.schemas.forecast import (
    ForecastSnapshot,
    FunnelMetrics,
    ProjectionParams,
    ProjectionResult,
    ScenarioDefinition,
    ScenarioProjection,
)
from models.schemas.records import ApplicationRecord
from services.clock import ensure_aware, utc_now
from services.funnel import derive_funnel_metrics
from services.scoring import round_int

logger = logging.getLogger(__name__)

MIN_WEEKLY_TARGET = 5

# (id, label, weekly offset from target, quality lift %, note)
SCENARIO_TEMPLATES: tuple[tuple[str, str, int, float, str], ...] = (
    ("conservative", "Conservative", -2, 2.0, "Protect quality while building steady volume."),
    ("balanced", "Balanced", 0, 6.0, "Default operating cadence."),
    ("aggressive", "Aggressive", 3, 10.0, "Push pipeline growth with stronger optimization."),
)


def _effective_rate(rate: float, lift: float) -> float:
    # Lift scales conversion probability, never raw volume.
    return min(100.0, rate * lift)


def project_scenario(params: ProjectionParams) -> ProjectionResult:
    """Project expected funnel counts for one scenario and horizon."""
    if params.weeks < 1:
        raise ValueError(f"weeks must be >= 1, got {params.weeks}")
    if params.applications_per_week < 0:
        raise ValueError("applications_per_week must be non-negative")

    lift = 1 + params.quality_lift_pct / 100
    total = round_int(params.applications_per_week * params.weeks)
    response_rate = _effective_rate(params.response_rate, lift)
    interview_rate = _effective_rate(params.interview_rate, lift)
    offer_rate = _effective_rate(params.offer_rate, lift)

    # Rates are independent shares of total; clamp so later stages never
    # exceed earlier ones.
    responses = min(round_int(total * response_rate / 100), total)
    interviews = min(round_int(total * interview_rate / 100), responses)
    offers = min(round_int(total * offer_rate / 100), interviews)

    return ProjectionResult(
        weeks=params.weeks,
        applications_per_week=params.applications_per_week,
        total_applications=total,
        effective_response_rate=response_rate,
        effective_interview_rate=interview_rate,
        effective_offer_rate=offer_rate,
        expected_responses=max(0, responses),
        expected_interviews=max(0, interviews),
        expected_offers=max(0, offers),
    )


def recommended_weekly_target(metrics: FunnelMetrics) -> int:
    return max(MIN_WEEKLY_TARGET, round_int(metrics.avg_applications_per_week + 2))


def build_scenario_definitions(weekly_target: int) -> list[ScenarioDefinition]:
    return [
        ScenarioDefinition(
            id=scenario_id,
            label=label,
            applications_per_week=max(3, weekly_target + offset),
            quality_lift_pct=lift,
            note=note,
        )
        for scenario_id, label, offset, lift, note in SCENARIO_TEMPLATES
    ]


def _normalize_horizons(horizons: Iterable[int]) -> list[int]:
    ordered = sorted(set(horizons))
    if not ordered:
        raise ValueError("at least one horizon is required")
    if ordered[0] < 1:
        raise ValueError(f"horizons must be >= 1, got {ordered[0]}")
    return ordered


def build_scenario_bank(
    metrics: FunnelMetrics,
    horizons: Iterable[int] = (4, 8, 12),
) -> list[ScenarioProjection]:
    """Project the conservative/balanced/aggressive scenarios at each horizon."""
    weeks_list = _normalize_horizons(horizons)
    target = recommended_weekly_target(metrics)
    bank = []
    for scenario in build_scenario_definitions(target):
        projections = [
            project_scenario(ProjectionParams(
                applications_per_week=scenario.applications_per_week,
                weeks=weeks,
                response_rate=metrics.response_rate,
                interview_rate=metrics.interview_rate,
                offer_rate=metrics.offer_rate,
                quality_lift_pct=scenario.quality_lift_pct,
            ))
            for weeks in weeks_list
        ]
        bank.append(ScenarioProjection(scenario=scenario, projections=projections))
    return bank


def build_forecast_recommendations(metrics: FunnelMetrics) -> list[str]:
    """Benchmark-driven guidance for the forecast report."""
    recommendations: list[str] = []

    if metrics.avg_applications_per_week < MIN_WEEKLY_TARGET:
        recommendations.append(
            "Increase weekly application volume to at least 5 for stronger pipeline coverage."
        )
    if metrics.response_rate < 20:
        recommendations.append(
            "Response rate is low. Prioritize role-fit keyword alignment and personalized follow-ups."
        )
    if metrics.interview_rate < 8:
        recommendations.append(
            "Interview conversion is below benchmark. Refresh resume bullets with measurable impact."
        )
    if metrics.offer_rate < 2:
        recommendations.append(
            "Offer conversion is limited. Add interview drills and decision-maker follow-up sequences."
        )
    if not recommendations:
        recommendations.append(
            "Pipeline conversion is stable. Maintain cadence and monitor quality lift weekly."
        )

    return recommendations[:4]


def build_forecast_snapshot(
    applications: Sequence[ApplicationRecord],
    now: datetime | None = None,
    horizons: Iterable[int] | None = None,
) -> ForecastSnapshot:
    now = ensure_aware(now) if now is not None else utc_now()
    metrics = derive_funnel_metrics(applications, now=now)
    snapshot = ForecastSnapshot(
        generated_at=now,
        metrics=metrics,
        recommended_weekly_target=recommended_weekly_target(metrics),
        scenarios=build_scenario_bank(metrics, horizons or settings.forecast_horizons),
        recommendations=build_forecast_recommendations(metrics),
    )
    logger.info(
        "Forecast built: %d apps, target %d/wk, %d scenarios",
        metrics.total_applications,
        snapshot.recommended_weekly_target,
        len(snapshot.scenarios),
    )
    return snapshot


def to_forecast_csv(snapshot: ForecastSnapshot) -> str:
    """Flatten a forecast snapshot into ``section,metric,value`` rows."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["section", "metric", "value"])

    m = snapshot.metrics
    rows: list[tuple[str, str, object]] = [
        ("meta", "generated_at", snapshot.generated_at.isoformat()),
        ("meta", "recommended_weekly_target", snapshot.recommended_weekly_target),
        ("metrics", "total_applications", m.total_applications),
        ("metrics", "avg_applications_per_week", f"{m.avg_applications_per_week:.2f}"),
        ("metrics", "response_rate", f"{m.response_rate:.2f}"),
        ("metrics", "interview_rate", f"{m.interview_rate:.2f}"),
        ("metrics", "offer_rate", f"{m.offer_rate:.2f}"),
    ]
    for bank_entry in snapshot.scenarios:
        s = bank_entry.scenario
        rows.append(("scenario", f"{s.id}.applications_per_week", s.applications_per_week))
        rows.append(("scenario", f"{s.id}.quality_lift_pct", s.quality_lift_pct))
        for p in bank_entry.projections:
            prefix = f"{s.id}.{p.weeks}w"
            rows.append(("projection", f"{prefix}.total_applications", p.total_applications))
            rows.append(("projection", f"{prefix}.expected_responses", p.expected_responses))
            rows.append(("projection", f"{prefix}.expected_interviews", p.expected_interviews))
            rows.append(("projection", f"{prefix}.expected_offers", p.expected_offers))
    for index, recommendation in enumerate(snapshot.recommendations, start=1):
        rows.append(("recommendation", f"item_{index}", recommendation))

    writer.writerows(rows)
    return buffer.getvalue()
