"""Funnel conversion metrics derived from application records."""

import logging
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timedelta, tzinfo

from models.schemas.forecast import FunnelMetrics
from models.schemas.records import ApplicationRecord
from services.clock import ensure_aware, start_of_week, utc_now
from services.scoring import pct, round_half_up

logger = logging.getLogger(__name__)


def weekly_buckets(
    applications: Sequence[ApplicationRecord],
    tz: tzinfo | None = None,
) -> Counter[datetime]:
    """Count applications per Monday-anchored calendar week.

    Records without an applied or created date are not bucketed.
    """
    buckets: Counter[datetime] = Counter()
    for app in applications:
        d = app.effective_date
        if d is None:
            continue
        if tz is not None:
            d = d.astimezone(tz)
        buckets[start_of_week(d)] += 1
    return buckets


def average_weekly_pace(
    applications: Sequence[ApplicationRecord],
    now: datetime,
) -> float:
    """Applications per elapsed week, from the earliest week to this week."""
    buckets = weekly_buckets(applications, tz=now.tzinfo)
    if not buckets:
        return 0.0
    dated_total = sum(buckets.values())
    elapsed_weeks = (start_of_week(now) - min(buckets)) // timedelta(weeks=1)
    return round_half_up(dated_total / max(1, elapsed_weeks), 1)


def derive_funnel_metrics(
    applications: Sequence[ApplicationRecord],
    now: datetime | None = None,
) -> FunnelMetrics:
    """Conversion rates (percent of all applications) and weekly pace.

    Rates are independent shares of the total, not conditional stage
    probabilities. Every rate is 0 for an empty list.
    """
    now = ensure_aware(now) if now is not None else utc_now()
    total = len(applications)
    responses = sum(1 for app in applications if app.has_responded)
    interviews = sum(1 for app in applications if app.status == "interview")
    offers = sum(1 for app in applications if app.status == "offer")

    metrics = FunnelMetrics(
        total_applications=total,
        response_rate=pct(responses, total),
        interview_rate=pct(interviews, total),
        offer_rate=pct(offers, total),
        avg_applications_per_week=average_weekly_pace(applications, now),
    )
    logger.debug(
        "Funnel metrics: %d apps, response %.1f%%, pace %.1f/wk",
        total, metrics.response_rate, metrics.avg_applications_per_week,
    )
    return metrics
