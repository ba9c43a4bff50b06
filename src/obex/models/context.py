"""AnalysisContext: the open bag of environment data analyzers read.

Only ``timestamp`` is required. Every sub-context is optional and keeps
unknown keys (``extra="allow"``) so editor clients can send more than
the analyzers currently use.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from obex.models.insight import CamelModel

_OPEN = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="allow",
)


class PackageInfo(CamelModel):
    model_config = _OPEN

    name: str | None = None
    version: str | None = None


class WorkspaceContext(CamelModel):
    model_config = _OPEN

    available: bool = False
    name: str | None = None
    path: str | None = None
    package: PackageInfo | None = None


class GitContext(CamelModel):
    model_config = _OPEN

    available: bool = False
    branch: str | None = None
    remote_url: str | None = None
    github: dict[str, Any] | None = None


class WorkflowDefinition(CamelModel):
    """A pipeline-definition document, already read by the caller."""

    model_config = _OPEN

    name: str
    path: str
    content: str


class GitHubActionsContext(CamelModel):
    model_config = _OPEN

    available: bool = False
    workflows: list[WorkflowDefinition] = Field(
        default_factory=lambda: list[WorkflowDefinition]()
    )


class FileContext(CamelModel):
    model_config = _OPEN

    path: str
    content: str = ""


class AnalysisContext(CamelModel):
    """Environment snapshot for one analysis pass."""

    model_config = _OPEN

    timestamp: str
    event_type: str | None = None
    workspace: WorkspaceContext | None = None
    git: GitContext | None = None
    editor: dict[str, Any] | None = None
    github_actions: GitHubActionsContext | None = None
    system: dict[str, Any] | None = None
    extensions: dict[str, Any] | None = None
    task: dict[str, Any] | None = None
    test_run: dict[str, Any] | None = None
    test_run_results: dict[str, Any] | None = None
    build_log: str | dict[str, Any] | None = None
    file: FileContext | None = None
    pull_request: dict[str, Any] | None = None

    def with_updates(self, **fields: Any) -> AnalysisContext:
        """Copy with the given fields replaced; the original is untouched."""
        return self.model_copy(update=fields)

    @property
    def package_name(self) -> str | None:
        if self.workspace and self.workspace.package:
            return self.workspace.package.name
        return None
