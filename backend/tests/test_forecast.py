from datetime import datetime, timezone

import pytest

from models.schemas.forecast import FunnelMetrics, ProjectionParams
from models.schemas.records import ApplicationRecord
from services.forecast import (
    build_forecast_recommendations,
    build_forecast_snapshot,
    build_scenario_bank,
    build_scenario_definitions,
    project_scenario,
    recommended_weekly_target,
    to_forecast_csv,
)

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


def test_worked_example():
    result = project_scenario(ProjectionParams(
        applications_per_week=6,
        weeks=8,
        response_rate=25,
        interview_rate=12,
        offer_rate=4,
        quality_lift_pct=5,
    ))
    assert result.total_applications == 48
    assert result.expected_responses == 13
    assert result.expected_interviews == 6
    assert result.expected_offers == 2
    assert result.effective_response_rate == pytest.approx(26.25)


def test_zero_volume_projects_zero():
    result = project_scenario(ProjectionParams(
        applications_per_week=0, weeks=4, response_rate=50, interview_rate=20, offer_rate=5,
    ))
    assert result.total_applications == 0
    assert result.expected_offers == 0


def test_effective_rate_is_capped_at_100():
    result = project_scenario(ProjectionParams(
        applications_per_week=10, weeks=2, response_rate=95, interview_rate=10, offer_rate=1,
        quality_lift_pct=50,
    ))
    assert result.effective_response_rate == 100
    assert result.expected_responses == 20


@pytest.mark.parametrize("rates", [
    (10, 50, 90),
    (0, 100, 100),
    (5, 5, 60),
    (100, 0, 100),
])
def test_stage_counts_are_monotone(rates):
    response, interview, offer = rates
    result = project_scenario(ProjectionParams(
        applications_per_week=7, weeks=12,
        response_rate=response, interview_rate=interview, offer_rate=offer,
        quality_lift_pct=10,
    ))
    assert 0 <= result.expected_offers <= result.expected_interviews
    assert result.expected_interviews <= result.expected_responses <= result.total_applications


@pytest.mark.parametrize("weeks,volume", [(0, 5), (-1, 5), (4, -1)])
def test_invalid_params_raise(weeks, volume):
    with pytest.raises(ValueError):
        project_scenario(ProjectionParams(
            applications_per_week=volume, weeks=weeks,
            response_rate=10, interview_rate=5, offer_rate=1,
        ))


def test_recommended_target_is_monotone_with_floor():
    paces = [0, 1, 2.4, 2.5, 3, 3.5, 10, 20]
    targets = [
        recommended_weekly_target(FunnelMetrics(avg_applications_per_week=p)) for p in paces
    ]
    assert all(t >= 5 for t in targets)
    assert targets == sorted(targets)
    assert targets[-1] == 22
    # 3.5 + 2 rounds half up
    assert targets[5] == 6


def test_scenario_definitions_apply_offsets():
    definitions = {d.id: d for d in build_scenario_definitions(5)}
    assert definitions["conservative"].applications_per_week == 3
    assert definitions["balanced"].applications_per_week == 5
    assert definitions["aggressive"].applications_per_week == 8
    assert definitions["aggressive"].quality_lift_pct == 10


def test_scenario_bank_horizons_sorted_and_deduplicated():
    metrics = FunnelMetrics(
        total_applications=20, response_rate=30, interview_rate=10, offer_rate=3,
        avg_applications_per_week=4,
    )
    bank = build_scenario_bank(metrics, horizons=[12, 4, 8, 4])
    assert [s.scenario.id for s in bank] == ["conservative", "balanced", "aggressive"]
    for entry in bank:
        assert [p.weeks for p in entry.projections] == [4, 8, 12]
        totals = [p.total_applications for p in entry.projections]
        assert totals == sorted(totals)


@pytest.mark.parametrize("horizons", [[], [0, 4]])
def test_scenario_bank_rejects_bad_horizons(horizons):
    with pytest.raises(ValueError):
        build_scenario_bank(FunnelMetrics(), horizons=horizons)


def test_recommendations_for_weak_funnel():
    recs = build_forecast_recommendations(FunnelMetrics())
    assert len(recs) == 4
    assert recs[0].startswith("Increase weekly application volume")


def test_recommendations_for_healthy_funnel():
    recs = build_forecast_recommendations(FunnelMetrics(
        avg_applications_per_week=8, response_rate=30, interview_rate=12, offer_rate=3,
    ))
    assert recs == [
        "Pipeline conversion is stable. Maintain cadence and monitor quality lift weekly."
    ]


def test_forecast_snapshot_and_csv():
    apps = [
        ApplicationRecord(id=f"a{i}", status=status, applied_date="2026-03-02")
        for i, status in enumerate(["applied", "screening", "interview", "offer"])
    ]
    snapshot = build_forecast_snapshot(apps, now=NOW, horizons=[4, 8])
    assert snapshot.generated_at == NOW
    assert snapshot.metrics.total_applications == 4
    assert snapshot.recommended_weekly_target == 5
    assert len(snapshot.scenarios) == 3

    lines = to_forecast_csv(snapshot).splitlines()
    assert lines[0] == "section,metric,value"
    assert "metrics,total_applications,4" in lines
    assert "meta,recommended_weekly_target,5" in lines
