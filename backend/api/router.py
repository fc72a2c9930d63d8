from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_gemini_client, get_record_store, get_user_id
from config import settings
from models.requests import ExecuteFeatureRequest, ProjectScenarioRequest, SprintPlanRequest
from models.responses import (
    CompositeScoreResponse,
    ExecutionResponse,
    FeatureEntry,
    FeatureListResponse,
    FeatureSuiteSummary,
    LaneResponse,
)
from models.schemas.composite import ScorePreset
from models.schemas.execution import FeatureSprintPlan, ReminderOutcome
from models.schemas.forecast import ForecastSnapshot, ProjectionParams, ProjectionResult
from models.schemas.signals import RuntimeSignals
from services import catalog
from services.clock import utc_now
from services.composite import (
    assess_pipeline_hygiene,
    build_governance_checks,
    compute_composite_scores,
)
from services.execution import build_execution_package, build_feature_sprint_plan
from services.forecast import build_forecast_snapshot, project_scenario, to_forecast_csv
from services.lanes import LANE_CONFIG, classify_lane, lane_signal_score
from services.narrative import build_execution_brief
from services.record_store import RecordStore
from services.reminders import create_execution_reminders
from services.signals import aggregate_runtime_signals
from services.snapshot import load_user_snapshot

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
    }


@router.post("/forecast/project", response_model=ProjectionResult)
@limiter.limit(settings.read_rate_limit)
async def forecast_project(request: Request, body: ProjectScenarioRequest):
    try:
        return project_scenario(ProjectionParams(**body.model_dump()))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/forecast", response_model=ForecastSnapshot)
@limiter.limit(settings.read_rate_limit)
async def forecast(
    request: Request,
    output: str = Query("json", alias="format", pattern="^(json|csv)$"),
    horizons: list[int] | None = Query(None),
    user_id: str = Depends(get_user_id),
    store: RecordStore = Depends(get_record_store),
):
    snapshot = await load_user_snapshot(store, user_id)
    try:
        result = build_forecast_snapshot(snapshot.applications, now=utc_now(), horizons=horizons)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if output == "csv":
        return Response(
            content=to_forecast_csv(result),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="forecast.csv"'},
        )
    return result


@router.get("/scores/composite", response_model=CompositeScoreResponse)
@limiter.limit(settings.read_rate_limit)
async def composite_scores(
    request: Request,
    preset: ScorePreset = ScorePreset.PIPELINE_CONTROL,
    risk_tolerance: int | None = Query(None, ge=0, le=100),
    user_id: str = Depends(get_user_id),
    store: RecordStore = Depends(get_record_store),
):
    snapshot = await load_user_snapshot(store, user_id)
    now = utc_now()
    tolerance = settings.default_risk_tolerance if risk_tolerance is None else risk_tolerance
    hygiene = assess_pipeline_hygiene(snapshot.applications, now)

    return CompositeScoreResponse(
        preset=preset,
        risk_tolerance=tolerance,
        hygiene=hygiene,
        scores=compute_composite_scores(
            snapshot.applications,
            snapshot.resumes,
            snapshot.goals,
            snapshot.interview_sessions,
            now,
            preset=preset,
            roles=snapshot.roles,
            risk_tolerance=tolerance,
        ),
        governance=build_governance_checks(hygiene, snapshot.goals, now),
        unavailable=snapshot.unavailable,
    )


@router.get("/runtime/signals", response_model=RuntimeSignals)
@limiter.limit(settings.read_rate_limit)
async def runtime_signals(
    request: Request,
    user_id: str = Depends(get_user_id),
    store: RecordStore = Depends(get_record_store),
):
    snapshot = await load_user_snapshot(store, user_id)
    return aggregate_runtime_signals(snapshot, utc_now())


@router.get("/features", response_model=FeatureListResponse)
@limiter.limit(settings.read_rate_limit)
async def list_features(request: Request):
    entries = [
        FeatureEntry(
            feature=feature,
            rollout=catalog.build_default_rollout(feature.id),
            lane=classify_lane(feature),
        )
        for feature in catalog.FEATURE_CATALOG
    ]
    summary = catalog.summarize_feature_suite([e.rollout for e in entries])
    return FeatureListResponse(features=entries, summary=FeatureSuiteSummary(**summary))


@router.get("/features/{feature_id}/lane", response_model=LaneResponse)
@limiter.limit(settings.read_rate_limit)
async def feature_lane(
    request: Request,
    feature_id: str,
    user_id: str = Depends(get_user_id),
    store: RecordStore = Depends(get_record_store),
):
    feature = catalog.get_feature(feature_id)
    if feature is None:
        raise HTTPException(status_code=404, detail=f"Unknown feature: {feature_id}")

    snapshot = await load_user_snapshot(store, user_id)
    signals = aggregate_runtime_signals(snapshot, utc_now())
    lane = classify_lane(feature)
    return LaneResponse(
        feature_id=feature.id,
        lane=lane,
        label=LANE_CONFIG[lane].label,
        lane_score=lane_signal_score(lane, signals),
        module_href=LANE_CONFIG[lane].module_href,
        unavailable=signals.unavailable,
    )


@router.post("/features/{feature_id}/execute", response_model=ExecutionResponse)
@limiter.limit(settings.execute_rate_limit)
async def execute_feature(
    request: Request,
    feature_id: str,
    body: ExecuteFeatureRequest,
    user_id: str = Depends(get_user_id),
    store: RecordStore = Depends(get_record_store),
):
    feature = catalog.get_feature(feature_id)
    if feature is None:
        raise HTTPException(status_code=404, detail=f"Unknown feature: {feature_id}")

    snapshot = await load_user_snapshot(store, user_id)
    now = utc_now()
    signals = aggregate_runtime_signals(snapshot, now)

    overrides = {}
    if body.priority is not None:
        overrides["priority"] = body.priority
    if body.owner:
        overrides["owner"] = body.owner.strip()
    rollout = catalog.build_default_rollout(feature.id).model_copy(update=overrides)

    package = build_execution_package(
        feature, rollout, signals, focus=body.focus, notes=body.notes, now=now
    )

    reminders = ReminderOutcome(created=0)
    if body.create_reminders:
        reminders = await create_execution_reminders(store, user_id, package)

    brief = None
    if body.narrative:
        brief = await build_execution_brief(package, get_gemini_client())

    return ExecutionResponse(
        package=package,
        reminders=reminders,
        unavailable=signals.unavailable,
        brief=brief,
        degraded=body.narrative and brief is None,
    )


@router.post(
    "/features/{feature_id}/sprint",
    response_model=FeatureSprintPlan,
    dependencies=[Depends(get_user_id)],
)
@limiter.limit(settings.execute_rate_limit)
async def feature_sprint(
    request: Request,
    feature_id: str,
    body: SprintPlanRequest,
):
    feature = catalog.get_feature(feature_id)
    if feature is None:
        raise HTTPException(status_code=404, detail=f"Unknown feature: {feature_id}")
    return build_feature_sprint_plan(feature, body.notes)
