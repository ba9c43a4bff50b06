"""Insight value objects shared by analyzers, the engine, and the API."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from obex.constants import (
    PARAGRAPH_SEPARATOR,
    SECTION_ORDER,
    ExplanationSection,
    InsightLevel,
    InsightSeverity,
)


def utc_now() -> datetime:
    return datetime.now(UTC)


class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CodeLocation(CamelModel):
    """Location in a source file (1-based lines)."""

    file: str
    line: int = Field(default=1, ge=1)
    column: int | None = Field(default=None, ge=0)
    end_line: int | None = Field(default=None, ge=1)
    end_column: int | None = Field(default=None, ge=0)


class Evidence(CamelModel):
    """A fact supporting an insight."""

    type: str
    description: str
    source: str | None = None
    location: CodeLocation | None = None
    details: dict[str, Any] | None = None


class Insight(CamelModel):
    """A single structured finding.

    ``explanation`` holds the analyzer's own text. Enrichment never
    edits it; paragraphs produced by the explainability engine live in
    ``explanation_sections`` and are joined only when rendered.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str
    title: str
    summary: str
    explanation: str
    level: InsightLevel
    severity: InsightSeverity
    confidence: int = Field(ge=0, le=100)
    category: str
    location: CodeLocation | None = None
    fixable: bool = False
    recommendations: list[str] = Field(
        default_factory=lambda: list[str]()
    )
    evidence: list[Evidence] = Field(
        default_factory=lambda: list[Evidence]()
    )
    rule: str | None = None
    explanation_sections: dict[ExplanationSection, str] = Field(
        default_factory=lambda: dict[ExplanationSection, str]()
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def rendered_explanation(self) -> str:
        """Base explanation followed by sections in canonical order."""
        parts = [self.explanation]
        parts.extend(
            self.explanation_sections[section]
            for section in SECTION_ORDER
            if section in self.explanation_sections
        )
        return PARAGRAPH_SEPARATOR.join(p for p in parts if p)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with the explanation rendered to text."""
        payload = self.model_dump(mode="json", by_alias=True)
        payload["explanation"] = self.rendered_explanation
        return payload


class CodeAnnotation(CamelModel):
    """Editor-facing projection of an insight with a location."""

    id: str
    title: str
    summary: str
    severity: InsightSeverity
    confidence: int = Field(ge=0, le=100)
    location: CodeLocation
    insight_id: str

    @classmethod
    def from_insight(cls, insight: Insight) -> CodeAnnotation | None:
        if insight.location is None:
            return None
        return cls(
            id=f"annotation-{insight.id}",
            title=insight.title,
            summary=insight.summary,
            severity=insight.severity,
            confidence=insight.confidence,
            location=insight.location,
            insight_id=insight.id,
        )
