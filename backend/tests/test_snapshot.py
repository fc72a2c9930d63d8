import asyncio

import pytest

from models.schemas.records import ApplicationRecord, RoleRecord
from services.record_store import (
    Failure,
    InMemoryRecordStore,
    Ok,
    RecordStoreError,
    SchemaMissing,
    UserRecords,
)
from services.snapshot import load_user_snapshot


def _store(**kwargs):
    users = {
        "u1": UserRecords(
            applications=[ApplicationRecord(id="a1", status="applied")],
            roles=[RoleRecord(id="r1", parsed={"keywords": ["sql"]})],
            notifications_unread=2,
            anomalies_open=1,
        )
    }
    return InMemoryRecordStore(users=users, **kwargs)


@pytest.mark.asyncio
async def test_loads_all_resources():
    snapshot = await load_user_snapshot(_store(), "u1")
    assert [a.id for a in snapshot.applications] == ["a1"]
    assert snapshot.roles[0].is_parsed
    assert snapshot.notifications_unread == 2
    assert snapshot.anomalies_open == 1
    assert snapshot.unavailable == []


@pytest.mark.asyncio
async def test_unknown_user_is_empty():
    snapshot = await load_user_snapshot(_store(), "nobody")
    assert snapshot.applications == []
    assert snapshot.notifications_unread == 0


@pytest.mark.asyncio
async def test_missing_schema_degrades_to_empty():
    store = _store(missing={"roles", "security_anomalies", "career_goals"})
    snapshot = await load_user_snapshot(store, "u1")
    assert snapshot.roles == []
    assert snapshot.goals == []
    assert snapshot.anomalies_open == 0
    assert snapshot.unavailable == ["roles", "goals", "anomalies_open"]
    assert len(snapshot.applications) == 1


@pytest.mark.asyncio
async def test_failure_raises():
    store = _store(failing={"applications": "connection reset"})
    with pytest.raises(RecordStoreError) as exc_info:
        await load_user_snapshot(store, "u1")
    assert exc_info.value.resource == "applications"
    assert exc_info.value.reason == "connection reset"


@pytest.mark.asyncio
async def test_reads_run_concurrently():
    class SlowStore(InMemoryRecordStore):
        def __init__(self):
            super().__init__()
            self.in_flight = 0
            self.peak = 0

        async def _slow(self, result):
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            await asyncio.sleep(0.01)
            self.in_flight -= 1
            return result

        async def fetch_applications(self, user_id):
            return await self._slow(Ok([]))

        async def fetch_resumes(self, user_id):
            return await self._slow(Ok([]))

    store = SlowStore()
    await load_user_snapshot(store, "u1")
    assert store.peak == 2


@pytest.mark.asyncio
async def test_in_memory_store_results():
    store = _store(missing={"resumes"}, failing={"career_goals": "timeout"})
    assert isinstance(await store.fetch_applications("u1"), Ok)
    assert isinstance(await store.fetch_resumes("u1"), SchemaMissing)
    assert await store.fetch_goals("u1") == Failure("timeout")


@pytest.mark.asyncio
async def test_failing_write_leaves_reads_healthy():
    store = _store(failing={"notifications_insert": "read-only replica"})
    assert await store.count_unread_notifications("u1") == Ok(2)
    assert await store.insert_notifications([]) == Failure("read-only replica")
    snapshot = await load_user_snapshot(store, "u1")
    assert snapshot.notifications_unread == 2


@pytest.mark.asyncio
async def test_raising_read_cancels_pending_reads():
    class RaisingStore(InMemoryRecordStore):
        def __init__(self):
            super().__init__()
            self.cancelled = False

        async def fetch_applications(self, user_id):
            raise ConnectionError("socket closed")

        async def fetch_resumes(self, user_id):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
            return Ok([])

    store = RaisingStore()
    with pytest.raises(ConnectionError):
        await load_user_snapshot(store, "u1")
    await asyncio.sleep(0.01)
    assert store.cancelled
