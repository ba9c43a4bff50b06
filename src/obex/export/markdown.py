"""Markdown export: one section per insight with a summary header."""

from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime

from obex.constants import InsightSeverity
from obex.models.insight import Insight


def export_markdown(insights: list[Insight]) -> str:
    """Export insights as a single Markdown report."""
    parts: list[str] = []

    # Metadata header
    parts.append("---")
    parts.append(f"generated: {datetime.now(UTC).isoformat()}")
    parts.append(f"insights: {len(insights)}")
    parts.append("---\n")

    parts.append("# Workflow Insights\n")
    if not insights:
        parts.append("No insights found.")
        parts.append("")
        return "\n".join(parts)

    counts = Counter(i.severity for i in insights)
    for severity in InsightSeverity:
        parts.append(f"- **{severity.value}**: {counts.get(severity, 0)}")
    parts.append("")

    for insight in insights:
        parts.append(_insight_section(insight))

    return "\n".join(parts)


def _insight_section(insight: Insight) -> str:
    lines = [
        f"## {insight.title}\n",
        f"*Severity:* {insight.severity} · "
        f"*Confidence:* {insight.confidence}% · "
        f"*Category:* {insight.category} · "
        f"*Level:* {insight.level}",
    ]
    if insight.location:
        lines.append(
            f"*Location:* `{insight.location.file}:{insight.location.line}`"
        )
    lines.append("")
    lines.append(insight.summary)
    lines.append("")
    lines.append(insight.rendered_explanation)
    lines.append("")
    if insight.recommendations:
        lines.append("**Recommendations**\n")
        lines.extend(f"- {r}" for r in insight.recommendations)
        lines.append("")
    return "\n".join(lines)
