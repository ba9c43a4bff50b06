"""Fix descriptions returned by the fix service."""

from __future__ import annotations

from pydantic import Field

from obex.constants import InsightSeverity
from obex.models.insight import CamelModel, CodeLocation


class FixChange(CamelModel):
    """A single literal text replacement."""

    old_code: str
    new_code: str
    description: str


class FixInfo(CamelModel):
    """What a fix for an insight would change."""

    applicable: bool
    description: str
    severity: InsightSeverity
    location: CodeLocation | None = None
    changes: list[FixChange] = Field(
        default_factory=lambda: list[FixChange]()
    )


class FixApplicationResponse(CamelModel):
    success: bool
    error: str | None = None
    message: str | None = None
    applied_changes: int = 0
