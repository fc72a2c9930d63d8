"""Prompt templates for narrative briefs over engine output."""

from models.schemas.execution import FeatureExecutionPackage

_RESPONSE_FORMAT = """Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{
  "headline": "<one sentence, under 20 words>",
  "brief": "<3-4 sentence plain-language explanation>",
  "first_steps": [<2-3 short imperative steps taken from the plan>]
}"""


def build_execution_brief_prompt(package: FeatureExecutionPackage) -> str:
    """Brief for a feature execution package.

    The numbers are already computed; the model only explains them.
    """
    kpis = "\n".join(
        f"- {k.name}: current {k.current}, target {k.target} ({k.trend})"
        for k in package.kpi_targets
    )
    actions = "\n".join(
        f"- [{a.priority}] {a.title} (due {a.due_at.date().isoformat()}, owner {a.owner})"
        for a in package.actions
    )
    evidence = "\n".join(f"- {e.source}: {e.detail}" for e in package.evidence)

    return f"""You are a job-search program coach writing a short status brief.

Do NOT change or recompute any number below. Explain what they mean and what
to do first.

FEATURE: {package.title} (lane: {package.lane.value}, focus: {package.focus.value})
VALUE SCORE: {package.value_score}/100
RISK LEVEL: {package.risk_level}

KPI TARGETS:
{kpis or "- none"}

PLAN:
{actions or "- none"}

EVIDENCE:
{evidence or "- none"}

{_RESPONSE_FORMAT}"""
