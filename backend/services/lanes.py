"""Lane classification and per-lane signal scoring for catalog features.

``LANE_RULES`` is evaluated top to bottom against the lower-cased
``id title summary`` text; the first matching rule wins and anything
unmatched falls into the ``ai`` lane.
"""

import re
from typing import NamedTuple

from models.schemas.execution import FeatureDefinition, Lane
from models.schemas.signals import RuntimeSignals
from services.scoring import clamp, round_int, safe_ratio


class LaneRule(NamedTuple):
    pattern: re.Pattern[str]
    lane: Lane


class LaneConfig(NamedTuple):
    module_href: str
    label: str


LANE_RULES: tuple[LaneRule, ...] = (
    LaneRule(
        re.compile(r"sso|scim|gdpr|ccpa|security|encryption|audit|anomaly|session|policy|compliance|trust"),
        Lane.SECURITY,
    ),
    LaneRule(
        re.compile(r"resume|cover letter|jd|ats|bullet|story|writing|keyword|portfolio site"),
        Lane.RESUME,
    ),
    LaneRule(
        re.compile(r"interview|whiteboard|system design|persona|debrief|negotiation"),
        Lane.INTERVIEW,
    ),
    LaneRule(
        re.compile(r"network|referral|intro|alumni|coffee chat|crm|outreach"),
        Lane.NETWORKING,
    ),
    LaneRule(
        re.compile(r"workspace|mentor|advisor|approval|stakeholder|comments|review|team role|rollback"),
        Lane.COLLABORATION,
    ),
    LaneRule(
        re.compile(
            r"gmail|outlook|linkedin|greenhouse|lever|workday|notion|slack|teams|webhook"
            r"|api sync|integration|export"
        ),
        Lane.INTEGRATION,
    ),
    LaneRule(
        re.compile(r"funnel|cohort|benchmark|scenario|drop-off|kpi|roi|experiment|forecast|analytics"),
        Lane.ANALYTICS,
    ),
    LaneRule(
        re.compile(
            r"onboarding|walkthrough|command palette|offline|mobile|accessibility|billing"
            r"|marketplace|plugin|sdk|performance"
        ),
        Lane.GROWTH,
    ),
    LaneRule(
        re.compile(r"application|kanban|follow-up|deadline|pipeline|next-best-action|duplicate posting|win-probability"),
        Lane.PIPELINE,
    ),
)

DEFAULT_LANE = Lane.AI

LANE_CONFIG: dict[Lane, LaneConfig] = {
    Lane.PIPELINE: LaneConfig("/app/applications", "pipeline health"),
    Lane.RESUME: LaneConfig("/app/resumes", "resume quality"),
    Lane.INTERVIEW: LaneConfig("/app/interviews", "interview readiness"),
    Lane.NETWORKING: LaneConfig("/app/program-office", "network growth"),
    Lane.COLLABORATION: LaneConfig("/app/workspaces", "team collaboration"),
    Lane.INTEGRATION: LaneConfig("/app/settings/preferences", "integration reliability"),
    Lane.ANALYTICS: LaneConfig("/app/forecast", "forecast quality"),
    Lane.SECURITY: LaneConfig("/app/security-center", "security posture"),
    Lane.GROWTH: LaneConfig("/app/help", "adoption and UX quality"),
    Lane.AI: LaneConfig("/app/ai-studio", "AI execution quality"),
}


def classify_text(text: str) -> Lane:
    lowered = text.lower()
    for rule in LANE_RULES:
        if rule.pattern.search(lowered):
            return rule.lane
    return DEFAULT_LANE


def classify_lane(feature: FeatureDefinition) -> Lane:
    return classify_text(f"{feature.id} {feature.title} {feature.summary}")


def lane_signal_score(lane: Lane, signals: RuntimeSignals) -> int:
    """Lane-specific 0-100 readiness score, bounded away from 0 and 100."""
    apps = signals.applications
    stale_ratio = safe_ratio(apps.stale, apps.open)
    momentum = signals.momentum_score
    unread = signals.notifications_unread

    if lane is Lane.PIPELINE:
        raw, low, high = 100 - stale_ratio * 100 - apps.followup_due * 2, 25, 98
    elif lane is Lane.RESUME:
        raw, low, high = (signals.resumes.avg_ats or 52) - signals.resumes.below80 * 2, 20, 98
    elif lane is Lane.INTERVIEW:
        raw, low, high = 42 + apps.interviews * 8 + apps.offers * 10, 20, 98
    elif lane is Lane.NETWORKING:
        raw, low, high = 38 + signals.roles.total * 1.5 + apps.open * 0.9, 20, 96
    elif lane is Lane.COLLABORATION:
        raw, low, high = 45 + signals.goals.completed * 6 - unread * 0.8, 18, 96
    elif lane is Lane.INTEGRATION:
        raw, low, high = 55 + min(20, apps.total) - unread * 0.6, 20, 97
    elif lane is Lane.ANALYTICS:
        raw, low, high = momentum * 0.9 + 8, 25, 98
    elif lane is Lane.SECURITY:
        raw, low, high = 82 - signals.anomalies_open * 12, 20, 98
    elif lane is Lane.GROWTH:
        raw, low, high = 52 + signals.goals.completed * 4 - signals.resumes.below80, 20, 97
    else:
        raw, low, high = momentum * 0.8 + 10, 25, 98

    return int(clamp(round_int(raw), low, high))
