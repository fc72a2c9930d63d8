"""Per-user snapshot loading: parallel fan-out reads, joined before scoring.

    load_user_snapshot(store, user_id)
      ├─ applications ─┐
      ├─ resumes       │
      ├─ roles         │  asyncio.gather (disjoint resources, order irrelevant)
      ├─ goals         │
      ├─ sessions      │
      ├─ unread count  │
      └─ anomalies   ──┘→ UserSnapshot (+ unavailable resources)
"""

import asyncio
import logging

from models.schemas.signals import UserSnapshot
from services.record_store import (
    Failure,
    Ok,
    RecordStore,
    RecordStoreError,
    SchemaMissing,
    StoreResult,
)

logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = (
    "applications",
    "resumes",
    "roles",
    "goals",
    "interview_sessions",
    "notifications_unread",
    "anomalies_open",
)


def _unwrap(field: str, result: StoreResult, unavailable: list[str]):
    if isinstance(result, Ok):
        return result.data
    if isinstance(result, SchemaMissing):
        logger.warning("Schema missing for %s (%s), using empty default", field, result.resource)
        unavailable.append(field)
        return UserSnapshot.model_fields[field].get_default(call_default_factory=True)
    if isinstance(result, Failure):
        logger.error("Record store read failed for %s: %s", field, result.reason)
        raise RecordStoreError(field, result.reason)
    raise TypeError(f"Unexpected store result for {field}: {result!r}")


async def load_user_snapshot(store: RecordStore, user_id: str) -> UserSnapshot:
    """Read every per-user resource concurrently and join them.

    Missing tables degrade to empty values listed in ``unavailable``; any
    other failure raises ``RecordStoreError``. Cancelling the caller, or a
    read raising instead of returning ``Failure``, cancels the remaining reads.
    """
    tasks = [
        asyncio.ensure_future(read)
        for read in (
            store.fetch_applications(user_id),
            store.fetch_resumes(user_id),
            store.fetch_roles(user_id),
            store.fetch_goals(user_id),
            store.fetch_interview_sessions(user_id),
            store.count_unread_notifications(user_id),
            store.count_open_anomalies(user_id),
        )
    ]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise

    unavailable: list[str] = []
    values = {
        field: _unwrap(field, result, unavailable)
        for field, result in zip(SNAPSHOT_FIELDS, results)
    }
    snapshot = UserSnapshot(**values, unavailable=unavailable)
    logger.info(
        "Loaded snapshot for user %s: %d applications, %d resumes, %d roles, %d goals",
        user_id,
        len(snapshot.applications),
        len(snapshot.resumes),
        len(snapshot.roles),
        len(snapshot.goals),
    )
    return snapshot
