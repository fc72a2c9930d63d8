"""Best-effort reminder writes for a generated execution package."""

import logging

from config import settings
from models.schemas.execution import FeatureExecutionPackage, ReminderOutcome
from models.schemas.records import ReminderRecord
from services.record_store import Failure, Ok, RecordStore, SchemaMissing

logger = logging.getLogger(__name__)


def build_reminders(user_id: str, package: FeatureExecutionPackage) -> list[ReminderRecord]:
    return [
        ReminderRecord(
            user_id=user_id,
            title=f"Feature action: {action.title}",
            message=action.detail,
            type="warning" if action.priority == "high" else "info",
            link=action.module_href,
        )
        for action in package.actions[: settings.reminder_limit]
    ]


async def create_execution_reminders(
    store: RecordStore,
    user_id: str,
    package: FeatureExecutionPackage,
) -> ReminderOutcome:
    """Persist the first few actions as notifications.

    Never raises: a failed write is reported on the outcome and the package
    is left untouched.
    """
    rows = build_reminders(user_id, package)
    if not rows:
        return ReminderOutcome(created=0)

    try:
        result = await store.insert_notifications(rows)
    except Exception as e:
        logger.warning("Reminder write skipped for %s: %s", package.feature_id, e)
        return ReminderOutcome(created=0, failed=True, error=str(e))

    if isinstance(result, Ok):
        return ReminderOutcome(created=len(rows))
    if isinstance(result, SchemaMissing):
        logger.warning("Notifications table missing; reminders not persisted")
        return ReminderOutcome(created=0, persistence_enabled=False)
    if isinstance(result, Failure):
        logger.warning("Reminder write failed for %s: %s", package.feature_id, result.reason)
        return ReminderOutcome(created=0, failed=True, error=result.reason)
    return ReminderOutcome(created=0, failed=True, error=f"unexpected store result: {result!r}")
