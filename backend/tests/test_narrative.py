from datetime import datetime, timezone

import pytest

from models.schemas.signals import RuntimeSignals
from services import narrative
from services.catalog import build_default_rollout, get_feature
from services.execution import build_execution_package
from services.prompt_builder import build_execution_brief_prompt

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


def _package():
    feature = get_feature("offer-probability-forecasting")
    return build_execution_package(
        feature, build_default_rollout(feature.id), RuntimeSignals(generated_at=NOW), now=NOW
    )


def test_prompt_carries_computed_numbers():
    package = _package()
    prompt = build_execution_brief_prompt(package)
    assert f"VALUE SCORE: {package.value_score}/100" in prompt
    assert "lane: analytics" in prompt
    assert package.actions[0].title in prompt
    assert '"first_steps"' in prompt


@pytest.mark.asyncio
async def test_no_client_returns_none():
    assert await narrative.build_execution_brief(_package(), None) is None


@pytest.mark.asyncio
async def test_brief_is_validated(monkeypatch):
    async def fake_generate(prompt, client=None):
        return {"headline": "Forecast is on track", "brief": "Steady.", "first_steps": ["Refresh data"]}

    monkeypatch.setattr(narrative, "generate_json", fake_generate)
    brief = await narrative.build_execution_brief(_package(), object())
    assert brief.headline == "Forecast is on track"
    assert brief.first_steps == ["Refresh data"]


@pytest.mark.asyncio
async def test_model_failure_returns_none(monkeypatch):
    async def fake_generate(prompt, client=None):
        return None

    monkeypatch.setattr(narrative, "generate_json", fake_generate)
    assert await narrative.build_execution_brief(_package(), object()) is None


@pytest.mark.asyncio
async def test_malformed_brief_returns_none(monkeypatch):
    async def fake_generate(prompt, client=None):
        return {"first_steps": "not a list"}

    monkeypatch.setattr(narrative, "generate_json", fake_generate)
    assert await narrative.build_execution_brief(_package(), object()) is None
