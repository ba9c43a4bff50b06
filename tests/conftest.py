"""Shared test fixtures: insight/context builders and app wiring."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from obex.api.app_state import AppState
from obex.config import Settings
from obex.constants import InsightCategory, InsightLevel, InsightSeverity
from obex.main import app, build_app_state, install_state
from obex.models.context import (
    AnalysisContext,
    GitContext,
    GitHubActionsContext,
    PackageInfo,
    WorkflowDefinition,
    WorkspaceContext,
)
from obex.models.insight import CodeLocation, Evidence, Insight

TIMESTAMP = "2024-05-01T12:00:00Z"


def make_insight(**overrides: Any) -> Insight:
    """Insight with sensible defaults; any field can be overridden."""
    fields: dict[str, Any] = {
        "id": "insight-1",
        "title": "Example finding",
        "summary": "Something worth looking at.",
        "explanation": "Base explanation.",
        "level": InsightLevel.MESO,
        "severity": InsightSeverity.MEDIUM,
        "confidence": 80,
        "category": InsightCategory.SECURITY,
        "location": CodeLocation(file=".github/workflows/ci.yml", line=3),
        "recommendations": ["Do the thing."],
        "evidence": [Evidence(type="Pattern Match", description="found")],
    }
    fields.update(overrides)
    return Insight(**fields)


def make_workflow(
    content: str,
    name: str = "ci.yml",
    path: str | None = None,
) -> WorkflowDefinition:
    return WorkflowDefinition(
        name=name,
        path=path or f".github/workflows/{name}",
        content=content,
    )


def make_context(
    *workflows: WorkflowDefinition,
    branch: str | None = None,
    github: bool = False,
    package: str | None = None,
    **extra: Any,
) -> AnalysisContext:
    """Context with the given workflows and optional git/workspace info."""
    fields: dict[str, Any] = {"timestamp": TIMESTAMP}
    if workflows:
        fields["github_actions"] = GitHubActionsContext(
            available=True, workflows=list(workflows)
        )
    if branch is not None or github:
        fields["git"] = GitContext(
            available=True,
            branch=branch,
            github={"owner": "acme", "repo": "app"} if github else None,
        )
    if package is not None:
        fields["workspace"] = WorkspaceContext(
            available=True, package=PackageInfo(name=package)
        )
    fields.update(extra)
    return AnalysisContext(**fields)


UNPINNED_WORKFLOW = """\
name: CI
on: push
jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - name: Checkout
        uses: actions/checkout@v4
      - name: Third party
        uses: octo-org/some-action@v1
"""

PINNED_WORKFLOW = """\
name: CI
on: push
jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - name: Checkout
        uses: actions/checkout@v4
      - name: Third party
        uses: octo-org/some-action@a1b2c3d4e5f60718293a4b5c6d7e8f9012345678
"""


def setup_test_app(
    tmp_path: Path,
    **settings_overrides: Any,
) -> AppState:
    """Install freshly wired services on the shared app.

    ASGITransport does not run the lifespan, so tests install state
    directly. File logging goes to ``tmp_path``.
    """
    settings = Settings(
        _env_file=None,  # type: ignore[call-arg]
        log_dir=tmp_path / "logs",
        **settings_overrides,
    )
    state = build_app_state(settings, file_logging=False)
    install_state(app, state)
    return state


@pytest.fixture
def unpinned_workflow() -> WorkflowDefinition:
    return make_workflow(UNPINNED_WORKFLOW)
