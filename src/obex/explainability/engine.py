"""Human-readable enrichment of analyzer insights.

The engine never edits ``Insight.explanation``. Each paragraph it
produces is stored under an ExplanationSection key on a copy of the
insight, so enriching the same insight twice overwrites the same keys
instead of stacking duplicate paragraphs. Text is joined only at the
presentation boundary (``Insight.rendered_explanation``).
"""

from __future__ import annotations

import logging

from obex.constants import (
    HIGH_CONFIDENCE_THRESHOLD,
    ExplanationSection,
    InsightCategory,
)
from obex.explainability import catalog
from obex.models.context import AnalysisContext
from obex.models.insight import Insight

logger = logging.getLogger(__name__)

Sections = dict[ExplanationSection, str]


class ExplainabilityEngine:
    """Adds severity, context, impact and confidence paragraphs."""

    def enhance_explanations(
        self, insights: list[Insight], context: AnalysisContext
    ) -> list[Insight]:
        """Enrich every insight; failures fall back per item."""
        logger.info(
            "event=enrichment_start insights=%d", len(insights)
        )
        return [self.enhance_insight(i, context) for i in insights]

    def enhance_insight(
        self, insight: Insight, context: AnalysisContext
    ) -> Insight:
        """Return an enriched copy, or ``insight`` itself on failure."""
        try:
            sections: Sections = dict(insight.explanation_sections)
            sections.update(category_sections(insight))
            sections.update(context_sections(insight, context))
            sections[ExplanationSection.IMPACT] = impact_paragraph(insight)
            if insight.confidence > HIGH_CONFIDENCE_THRESHOLD:
                sections[ExplanationSection.CONFIDENCE] = (
                    confidence_paragraph(insight)
                )
            return insight.model_copy(
                update={"explanation_sections": sections}
            )
        except Exception:
            logger.warning(
                "event=enrichment_failed insight=%s",
                insight.id,
                exc_info=True,
            )
            return insight


def category_sections(insight: Insight) -> Sections:
    """Severity paragraph plus an optional topic paragraph."""
    by_severity = catalog.SEVERITY_PARAGRAPHS.get(
        insight.category, catalog.SEVERITY_PARAGRAPHS[catalog.GENERAL]
    )
    sections: Sections = {
        ExplanationSection.SEVERITY: by_severity[insight.severity]
    }
    topic = _topic_paragraph(insight)
    if topic:
        sections[ExplanationSection.TOPIC] = topic
    return sections


def _topic_paragraph(insight: Insight) -> str | None:
    title, text = insight.title, insight.explanation

    def mentions(word: str) -> bool:
        return word in title or word in text

    if insight.category == InsightCategory.SECURITY:
        if mentions("injection"):
            return catalog.INJECTION_PARAGRAPH
        if mentions("permission"):
            return catalog.LEAST_PRIVILEGE_PARAGRAPH
    elif insight.category == InsightCategory.EFFICIENCY:
        if mentions("cache"):
            return catalog.CACHE_PARAGRAPH
        if mentions("checkout"):
            return catalog.CHECKOUT_PARAGRAPH
    elif insight.category == InsightCategory.MAINTENANCE:
        # title only
        if "version" in title or "deprecated" in title:
            return catalog.VERSION_PARAGRAPH
    return None


def context_sections(
    insight: Insight, context: AnalysisContext
) -> Sections:
    """Project, branch and level sentences for this context."""
    sections: Sections = {}
    git = context.git

    if git is not None and git.available:
        name = context.package_name
        if git.github and name:
            sections[ExplanationSection.PROJECT] = (
                catalog.PROJECT_TEMPLATE.format(name=name)
            )
        if git.branch:
            branch_text = branch_paragraph(git.branch)
            if branch_text:
                sections[ExplanationSection.BRANCH] = branch_text

    sections[ExplanationSection.LEVEL] = catalog.LEVEL_PARAGRAPHS[
        insight.level
    ]
    return sections


def branch_paragraph(branch: str) -> str | None:
    """Main/master, then feature, then release; first match wins."""
    if branch in ("main", "master"):
        return catalog.MAIN_BRANCH_TEMPLATE.format(branch=branch)
    if branch.startswith("feature/") or "feature" in branch:
        return catalog.FEATURE_BRANCH_TEMPLATE.format(branch=branch)
    if "release" in branch:
        return catalog.RELEASE_BRANCH_TEMPLATE.format(branch=branch)
    return None


def impact_paragraph(insight: Insight) -> str:
    template = catalog.IMPACT_TEMPLATES.get(insight.category)
    if template is None:
        body = catalog.GENERAL_IMPACT
    else:
        verb = catalog.IMPACT_VERBS[insight.category][insight.severity]
        body = template.format(verb=verb)
    return f"{catalog.IMPACT_MARKER} {body}"


def confidence_paragraph(insight: Insight) -> str:
    body = catalog.CONFIDENCE_TEMPLATE.format(
        confidence=insight.confidence
    )
    return f"{catalog.CONFIDENCE_MARKER} {body}"
