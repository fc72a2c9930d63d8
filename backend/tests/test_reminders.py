from datetime import datetime, timezone

import pytest

from models.schemas.signals import RuntimeSignals
from services.catalog import build_default_rollout, get_feature
from services.execution import build_execution_package
from services.record_store import InMemoryRecordStore
from services.reminders import build_reminders, create_execution_reminders

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


def _package():
    feature = get_feature("application-autopilot")
    return build_execution_package(
        feature,
        build_default_rollout(feature.id),
        RuntimeSignals(generated_at=NOW, momentum_score=55),
        now=NOW,
    )


def test_build_reminders_uses_first_three_actions():
    rows = build_reminders("u1", _package())
    assert len(rows) == 3
    assert rows[0].title == "Feature action: Baseline Application Autopilot"
    assert [r.type for r in rows] == ["warning", "warning", "info"]
    assert all(r.link == "/app/command-center" for r in rows)
    assert all(r.user_id == "u1" and not r.read for r in rows)


@pytest.mark.asyncio
async def test_reminders_persisted():
    store = InMemoryRecordStore()
    outcome = await create_execution_reminders(store, "u1", _package())
    assert outcome.created == 3
    assert outcome.persistence_enabled
    assert not outcome.failed
    assert len(store.notifications) == 3


@pytest.mark.asyncio
async def test_missing_table_disables_persistence():
    store = InMemoryRecordStore(missing={"notifications"})
    outcome = await create_execution_reminders(store, "u1", _package())
    assert outcome.created == 0
    assert outcome.persistence_enabled is False
    assert not outcome.failed


@pytest.mark.asyncio
async def test_failure_is_flagged_and_package_unchanged():
    package = _package()
    before = package.model_dump()
    store = InMemoryRecordStore(failing={"notifications_insert": "disk full"})
    outcome = await create_execution_reminders(store, "u1", package)
    assert outcome.failed
    assert outcome.error == "disk full"
    assert store.notifications == []
    assert package.model_dump() == before


@pytest.mark.asyncio
async def test_exception_is_flagged():
    class BrokenStore(InMemoryRecordStore):
        async def insert_notifications(self, rows):
            raise ConnectionError("socket closed")

    outcome = await create_execution_reminders(BrokenStore(), "u1", _package())
    assert outcome.failed
    assert outcome.error == "socket closed"
