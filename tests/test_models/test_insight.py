"""Tests for insight value objects and their wire format."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from obex.constants import ExplanationSection
from obex.models.insight import CodeAnnotation, CodeLocation, Insight
from tests.conftest import make_insight


class TestInsight:
    def test_is_frozen(self) -> None:
        insight = make_insight()
        with pytest.raises(ValidationError):
            insight.title = "changed"  # type: ignore[misc]

    @pytest.mark.parametrize("confidence", [-1, 101])
    def test_confidence_bounds(self, confidence: int) -> None:
        with pytest.raises(ValidationError):
            make_insight(confidence=confidence)

    def test_camel_case_payload(self) -> None:
        payload = make_insight().to_payload()
        assert "createdAt" in payload
        assert "explanationSections" in payload
        assert payload["location"]["file"] == ".github/workflows/ci.yml"

    def test_accepts_camel_case_input(self) -> None:
        data = make_insight().to_payload()
        assert Insight.model_validate(data).id == "insight-1"

    def test_rendered_explanation_skips_missing_sections(self) -> None:
        insight = make_insight(
            explanation_sections={
                ExplanationSection.CONFIDENCE: "Confidence: high.",
                ExplanationSection.SEVERITY: "Severe.",
            }
        )
        assert insight.rendered_explanation == (
            "Base explanation.\n\nSevere.\n\nConfidence: high."
        )

    def test_rendered_explanation_without_sections(self) -> None:
        assert make_insight().rendered_explanation == "Base explanation."


class TestCodeLocation:
    def test_line_is_one_based(self) -> None:
        with pytest.raises(ValidationError):
            CodeLocation(file="x", line=0)


class TestCodeAnnotation:
    def test_from_insight(self) -> None:
        annotation = CodeAnnotation.from_insight(make_insight(id="abc"))
        assert annotation is not None
        assert annotation.id == "annotation-abc"
        assert annotation.insight_id == "abc"
        assert annotation.location.line == 3

    def test_none_without_location(self) -> None:
        assert CodeAnnotation.from_insight(make_insight(location=None)) is None
