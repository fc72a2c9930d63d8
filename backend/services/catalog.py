"""Built-in improvement-initiative catalog and default rollouts."""

from collections.abc import Sequence

from models.schemas.execution import FeatureDefinition, FeatureRollout
from services.scoring import round_int

SECURITY_CATEGORY = "Security & Compliance"
DEFAULT_PRIORITY = 85

FEATURE_CATALOG: tuple[FeatureDefinition, ...] = (
    FeatureDefinition(
        id="jd-resume-tailor",
        title="One-Click JD Resume Tailor",
        category="AI Intelligence",
        summary="Generates job-description aligned resume variants with section-level diffs.",
        impact="Increases response probability for each targeted role.",
        default_href="/app/resumes",
        kpis=["Tailored resume count", "ATS delta vs baseline"],
        sprint_template=[
            "Select 10 top-priority roles for tailoring.",
            "Generate role-specific summary and impact bullets.",
            "Run ATS scan and resolve low-confidence sections.",
            "Ship final tailored packs to application queue.",
        ],
    ),
    FeatureDefinition(
        id="voice-interview-simulator",
        title="Voice Interview Simulator",
        category="AI Intelligence",
        summary="Runs timed mock interviews with scoring on structure, clarity, and confidence.",
        impact="Raises interview-to-offer conversion through repetition.",
        default_href="/app/interviews",
        kpis=["Mock score trend", "Confidence index"],
        sprint_template=[
            "Schedule three timed mock sessions.",
            "Review scoring breakdown after each session.",
            "Drill the two weakest competencies.",
            "Re-run a full mock and compare scores.",
        ],
    ),
    FeatureDefinition(
        id="referral-graph",
        title="Referral Graph + Warm Intro Finder",
        category="Collaboration & Governance",
        summary="Maps referral paths and recommends highest-probability intro routes.",
        impact="Shifts volume toward warm channels with higher response.",
        default_href="/app/workspaces",
        kpis=["Referral path coverage", "Warm intro success rate"],
        sprint_template=[
            "List second-degree contacts at target companies.",
            "Rank intro routes by relationship strength.",
            "Send three warm intro requests.",
            "Log outcomes against each route.",
        ],
    ),
    FeatureDefinition(
        id="shared-workspaces",
        title="Shared Workspaces",
        category="Collaboration & Governance",
        summary="Supports mentor and team collaboration across modules and decisions.",
        impact="Shortens feedback loops on documents and decisions.",
        default_href="/app/workspaces",
        kpis=["Active collaborators", "Shared decision cycle time"],
        sprint_template=[
            "Invite mentor or peer to a workspace.",
            "Share current resume and target list.",
            "Collect feedback on one decision.",
            "Close the loop and record the outcome.",
        ],
    ),
    FeatureDefinition(
        id="linkedin-optimizer",
        title="LinkedIn Optimizer",
        category="Conversion Engine",
        summary="Optimizes headline, summary, and evidence blocks for recruiter discovery.",
        impact="Increases inbound recruiter activity.",
        default_href="/app/help",
        kpis=["Profile strength score", "Inbound recruiter activity"],
        sprint_template=[
            "Audit headline against target role titles.",
            "Rewrite summary with quantified evidence.",
            "Refresh featured section.",
            "Track recruiter views for a week.",
        ],
    ),
    FeatureDefinition(
        id="scenario-planning-dashboard",
        title="Scenario Planning Dashboard",
        category="Conversion Engine",
        summary="Evaluates plan scenarios and recommends the best weekly execution mix.",
        impact="Aligns weekly volume with realistic offer targets.",
        default_href="/app/forecast",
        kpis=["Scenario adoption rate", "KPI variance reduction"],
        sprint_template=[
            "Review the three forecast scenarios.",
            "Pick a weekly target and commit to it.",
            "Compare actuals to the chosen scenario midweek.",
            "Adjust the mix for next week.",
        ],
    ),
    FeatureDefinition(
        id="offer-probability-forecasting",
        title="Offer Probability Forecasting",
        category="Conversion Engine",
        summary="Estimates offer likelihood by stage velocity, quality signals, and historical conversion.",
        impact="Focuses effort on opportunities most likely to close.",
        default_href="/app/forecast",
        kpis=["Projected offers (8-12w)", "Forecast error rate"],
        sprint_template=[
            "Refresh stage data for every open application.",
            "Review projected offers by horizon.",
            "Flag low-probability opportunities.",
            "Reallocate time toward high-probability roles.",
        ],
    ),
    FeatureDefinition(
        id="mobile-push-companion",
        title="Mobile Companion + Push Alerts",
        category="Ecosystem & Mobility",
        summary="Provides mobile-first daily operating actions with high-priority alerting.",
        impact="Keeps follow-ups on time away from the desk.",
        default_href="/app/help",
        kpis=["Mobile action completion", "Alert response time"],
        sprint_template=[
            "Enable push alerts for overdue follow-ups.",
            "Complete daily actions from mobile.",
            "Measure alert response time.",
            "Tune alert thresholds.",
        ],
    ),
    FeatureDefinition(
        id="application-autopilot",
        title="Application Autopilot",
        category="Workflow Automation",
        summary="Automatically schedules next actions, reminders, and escalation paths.",
        impact="Removes manual follow-up scheduling.",
        default_href="/app/command-center",
        kpis=["Autopilot coverage", "On-time follow-up rate"],
        sprint_template=[
            "Set next-action dates on every active application.",
            "Enable automatic reminders.",
            "Define escalation for silent applications.",
            "Review autopilot coverage.",
        ],
    ),
    FeatureDefinition(
        id="pipeline-sla-tracker",
        title="Pipeline SLA Tracker",
        category="Workflow Automation",
        summary="Surfaces stale, overdue, and no-action records with severity-level queues.",
        impact="Prevents opportunities from going cold.",
        default_href="/app/control-tower",
        kpis=["SLA compliance", "Stale record count"],
        sprint_template=[
            "Clear all overdue follow-ups.",
            "Assign next actions to no-action records.",
            "Revive or close stale applications.",
            "Review SLA compliance trend.",
        ],
    ),
    FeatureDefinition(
        id="security-compliance-center",
        title="Security + Compliance Center",
        category=SECURITY_CATEGORY,
        summary="Centralizes audit logs, retention controls, exports, and deletion workflows.",
        impact="Keeps account data governed and auditable.",
        default_href="/app/security-center",
        kpis=["Audit completeness", "Request SLA compliance"],
        sprint_template=[
            "Review open security anomalies.",
            "Verify retention and export request handling.",
            "Revoke stale sessions.",
            "Document controls for the weekly review.",
        ],
    ),
    FeatureDefinition(
        id="contextual-ai-copilot",
        title="Contextual AI Copilot Everywhere",
        category="AI Intelligence",
        summary="Injects screen-aware AI guidance with one-click action execution across modules.",
        impact="Turns recommendations into completed tasks.",
        default_href="/app/ai-studio",
        kpis=["Copilot action adoption", "Task-to-outcome cycle time"],
        sprint_template=[
            "Map top copilot prompts to modules.",
            "Attach one-click actions to AI recommendations.",
            "Measure prompt adoption and completion impact.",
            "Refine prompts using usage data.",
        ],
    ),
)

_BY_ID = {feature.id: feature for feature in FEATURE_CATALOG}


def get_feature(feature_id: str) -> FeatureDefinition | None:
    return _BY_ID.get(feature_id)


def build_default_rollout(feature_id: str) -> FeatureRollout:
    feature = get_feature(feature_id)
    owner = "Security Lead" if feature and feature.category == SECURITY_CATEGORY else "AI Program Owner"
    return FeatureRollout(
        feature_id=feature_id,
        status="live",
        priority=DEFAULT_PRIORITY,
        owner=owner,
        notes="Activated in feature suite rollout.",
    )


def summarize_feature_suite(rollouts: Sequence[FeatureRollout]) -> dict[str, int]:
    total = len(rollouts)
    live = sum(1 for r in rollouts if r.status == "live")
    avg_priority = round_int(sum(r.priority for r in rollouts) / total) if total else 0
    return {
        "total": total,
        "live": live,
        "in_progress": sum(1 for r in rollouts if r.status == "in_progress"),
        "planned": sum(1 for r in rollouts if r.status == "planned"),
        "backlog": sum(1 for r in rollouts if r.status == "backlog"),
        "avg_priority": avg_priority,
        "completion_pct": round_int(live / total * 100) if total else 0,
    }
