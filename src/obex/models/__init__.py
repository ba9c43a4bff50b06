"""Pydantic value objects shared across all layers."""

from obex.models.context import (
    AnalysisContext,
    FileContext,
    GitContext,
    GitHubActionsContext,
    PackageInfo,
    WorkflowDefinition,
    WorkspaceContext,
)
from obex.models.fix import FixApplicationResponse, FixChange, FixInfo
from obex.models.insight import (
    CodeAnnotation,
    CodeLocation,
    Evidence,
    Insight,
)

__all__ = [
    "AnalysisContext",
    "CodeAnnotation",
    "CodeLocation",
    "Evidence",
    "FileContext",
    "FixApplicationResponse",
    "FixChange",
    "FixInfo",
    "GitContext",
    "GitHubActionsContext",
    "Insight",
    "PackageInfo",
    "WorkflowDefinition",
    "WorkspaceContext",
]
