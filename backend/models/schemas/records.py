"""Pipeline records as returned by the record store.

Rows are normalized on the way in: statuses are lower-cased, timestamps
become timezone-aware datetimes (or ``None``), and non-numeric scores are
dropped. The engine never has to probe raw row shapes.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from services.clock import parse_timestamp
from services.scoring import is_finite_number

ACTIVE_STATUSES = frozenset({"applied", "screening", "interview"})
RESPONSE_STATUSES = frozenset({"screening", "interview", "offer"})
CLOSED_STATUSES = frozenset({"offer", "rejected", "withdrawn"})


def _coerce_score(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    return float(value) if is_finite_number(value) else None


Timestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
Score = Annotated[float | None, BeforeValidator(_coerce_score)]


class ApplicationRecord(BaseModel):
    id: str
    company: str | None = None
    position: str | None = None
    status: str = ""
    applied_date: Timestamp = None
    created_at: Timestamp = None
    follow_up_date: Timestamp = None
    next_action_at: Timestamp = None
    match_score: Score = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> str:
        return str(value or "").strip().lower()

    @property
    def effective_date(self) -> datetime | None:
        """Date the application entered the pipeline."""
        return self.applied_date or self.created_at

    @property
    def action_date(self) -> datetime | None:
        return self.next_action_at or self.follow_up_date

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def has_responded(self) -> bool:
        return self.status in RESPONSE_STATUSES


class ResumeRecord(BaseModel):
    id: str
    ats_score: Score = None
    status: str | None = None


class ParsedRole(BaseModel):
    """Structured extraction of a role posting."""
    kind: Literal["parsed"] = "parsed"
    keywords: list[str] = []
    requirements: list[str] = []
    must_haves: list[str] = []


class UnparsedRole(BaseModel):
    kind: Literal["unparsed"] = "unparsed"


def _tag_parsed_blob(value: Any) -> Any:
    # Legacy rows store the raw extraction object without a tag.
    if isinstance(value, (ParsedRole, UnparsedRole)):
        return value
    if isinstance(value, dict):
        if "kind" in value:
            return value
        if not value:
            return {"kind": "unparsed"}
        return {
            "kind": "parsed",
            "keywords": value.get("keywords") or [],
            "requirements": value.get("requirements") or [],
            "must_haves": value.get("must_haves") or value.get("mustHaves") or [],
        }
    return {"kind": "unparsed"}


class RoleRecord(BaseModel):
    id: str
    parsed: ParsedRole | UnparsedRole = Field(default_factory=UnparsedRole, discriminator="kind")

    @field_validator("parsed", mode="before")
    @classmethod
    def _tag_parsed(cls, value: Any) -> Any:
        return _tag_parsed_blob(value)

    @property
    def is_parsed(self) -> bool:
        return isinstance(self.parsed, ParsedRole)


class GoalRecord(BaseModel):
    id: str
    completed: bool = False
    target_date: Timestamp = None

    @field_validator("completed", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)


class InterviewSessionRecord(BaseModel):
    id: str
    score: Score = None
    created_at: Timestamp = None


class ReminderRecord(BaseModel):
    """Append-only notification row written after a feature execution."""
    user_id: str
    title: str
    message: str
    type: Literal["warning", "info"] = "info"
    read: bool = False
    link: str = ""
