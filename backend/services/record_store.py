"""Record store collaborator boundary.

Every store call returns one of three typed outcomes:

    Ok(data)                 read/write succeeded
    SchemaMissing(resource)  the table or column does not exist (degrade to empty)
    Failure(reason)          anything else (propagate)

Callers branch on the type, never on error text.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

from models.schemas.records import (
    ApplicationRecord,
    GoalRecord,
    InterviewSessionRecord,
    ReminderRecord,
    ResumeRecord,
    RoleRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T


@dataclass(frozen=True)
class SchemaMissing:
    resource: str
    detail: str = ""


@dataclass(frozen=True)
class Failure:
    reason: str


StoreResult = Ok[T] | SchemaMissing | Failure


class RecordStoreError(RuntimeError):
    """A store read failed for a reason other than a missing schema."""

    def __init__(self, resource: str, reason: str) -> None:
        super().__init__(f"{resource}: {reason}")
        self.resource = resource
        self.reason = reason


class RecordStore(Protocol):
    async def fetch_applications(self, user_id: str) -> StoreResult[list[ApplicationRecord]]: ...

    async def fetch_resumes(self, user_id: str) -> StoreResult[list[ResumeRecord]]: ...

    async def fetch_roles(self, user_id: str) -> StoreResult[list[RoleRecord]]: ...

    async def fetch_goals(self, user_id: str) -> StoreResult[list[GoalRecord]]: ...

    async def fetch_interview_sessions(self, user_id: str) -> StoreResult[list[InterviewSessionRecord]]: ...

    async def count_unread_notifications(self, user_id: str) -> StoreResult[int]: ...

    async def count_open_anomalies(self, user_id: str) -> StoreResult[int]: ...

    async def insert_notifications(self, rows: Sequence[ReminderRecord]) -> StoreResult[int]: ...


@dataclass
class UserRecords:
    applications: list[ApplicationRecord] = field(default_factory=list)
    resumes: list[ResumeRecord] = field(default_factory=list)
    roles: list[RoleRecord] = field(default_factory=list)
    goals: list[GoalRecord] = field(default_factory=list)
    interview_sessions: list[InterviewSessionRecord] = field(default_factory=list)
    notifications_unread: int = 0
    anomalies_open: int = 0


class InMemoryRecordStore:
    """Dict-backed store used by the default app wiring and tests.

    ``missing`` names resources to report as ``SchemaMissing``; ``failing``
    maps resources to a ``Failure`` reason. A failing notification write is
    keyed ``notifications_insert``, independent of the unread-count read.
    """

    INSERT_RESOURCE = "notifications_insert"

    def __init__(
        self,
        users: dict[str, UserRecords] | None = None,
        missing: set[str] | None = None,
        failing: dict[str, str] | None = None,
    ) -> None:
        self.users: dict[str, UserRecords] = users or {}
        self.missing: set[str] = set(missing or ())
        self.failing: dict[str, str] = dict(failing or {})
        self.notifications: list[ReminderRecord] = []

    def _result(self, resource: str, data):
        if resource in self.missing:
            return SchemaMissing(resource, f"relation '{resource}' does not exist")
        if resource in self.failing:
            return Failure(self.failing[resource])
        return Ok(data)

    def _user(self, user_id: str) -> UserRecords:
        return self.users.get(user_id) or UserRecords()

    async def fetch_applications(self, user_id: str) -> StoreResult[list[ApplicationRecord]]:
        return self._result("applications", list(self._user(user_id).applications))

    async def fetch_resumes(self, user_id: str) -> StoreResult[list[ResumeRecord]]:
        return self._result("resumes", list(self._user(user_id).resumes))

    async def fetch_roles(self, user_id: str) -> StoreResult[list[RoleRecord]]:
        return self._result("roles", list(self._user(user_id).roles))

    async def fetch_goals(self, user_id: str) -> StoreResult[list[GoalRecord]]:
        return self._result("career_goals", list(self._user(user_id).goals))

    async def fetch_interview_sessions(self, user_id: str) -> StoreResult[list[InterviewSessionRecord]]:
        return self._result("interview_sessions", list(self._user(user_id).interview_sessions))

    async def count_unread_notifications(self, user_id: str) -> StoreResult[int]:
        return self._result("notifications", self._user(user_id).notifications_unread)

    async def count_open_anomalies(self, user_id: str) -> StoreResult[int]:
        return self._result("security_anomalies", self._user(user_id).anomalies_open)

    async def insert_notifications(self, rows: Sequence[ReminderRecord]) -> StoreResult[int]:
        if "notifications" in self.missing:
            return SchemaMissing("notifications", "relation 'notifications' does not exist")
        result = self._result(self.INSERT_RESOURCE, len(rows))
        if isinstance(result, Ok):
            self.notifications.extend(rows)
        return result
