"""Lexical checks over GitHub Actions workflow definitions.

Every check reads raw workflow text; nothing is parsed as YAML. Checks
are independent and cumulative, so one workflow can yield several
insights across categories. Ids are derived from the workflow name,
the rule, and the matched fact, so identical input yields identical
ids on every run.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

from obex.agents.base import AnalysisResult
from obex.constants import (
    EOL_NODE_VERSIONS,
    GITHUB_OWNED_ACTION_PREFIX,
    ID_PREFIX_GITHUB_ACTIONS,
    MAX_WORKFLOW_STEPS,
    PINNED_SHA_LENGTH,
    InsightCategory,
    InsightLevel,
    InsightSeverity,
)
from obex.models.context import AnalysisContext, WorkflowDefinition
from obex.models.insight import CodeLocation, Evidence, Insight

logger = logging.getLogger(__name__)

_USES_RE = re.compile(r"uses:\s+['\"]?([^@\s'\"]+)@([^\s'\"#]+)")
_SHA_RE = re.compile(rf"^[0-9a-f]{{{PINNED_SHA_LENGTH}}}$")
_STEP_RE = re.compile(r"\s+- name: ")
_NODE_VERSION_RE = re.compile(
    r"node-version:\s*['\"]("
    + "|".join(EOL_NODE_VERSIONS)
    + r")['\"]"
)
_DEPRECATED_ACTION_RE = re.compile(
    r"uses:\s+(actions/(?:checkout|setup-node)@v1)(?![\w.])"
)
_UNTRUSTED_INPUTS = (
    "${{ github.event.issue.title }}",
    "${{ github.event.issue.body }}",
    "${{ github.event.pull_request.title }}",
    "${{ github.event.pull_request.body }}",
)
_INSTALL_COMMANDS = ("npm ci", "npm install")
_DEPRECATED_COMMANDS = ("::set-output", "::set-env")

_PATTERN_MATCH = "Pattern Match"
_BEST_PRACTICE = "Best Practice"

WorkflowCheck = Callable[[WorkflowDefinition], list[Insight]]


class GitHubActionsWorkflowAgent:
    """Security, efficiency and maintenance checks for workflow files."""

    name = "GitHub Actions Workflow Analysis Agent"

    async def analyze(self, context: AnalysisContext) -> AnalysisResult:
        actions = context.github_actions
        if actions is None or not actions.available:
            return AnalysisResult(agent_name=self.name)

        insights: list[Insight] = []
        for workflow in actions.workflows:
            insights.extend(analyze_workflow(workflow))

        logger.debug(
            "event=workflows_scanned workflows=%d insights=%d",
            len(actions.workflows),
            len(insights),
        )
        return AnalysisResult(
            agent_name=self.name,
            insights=insights,
            metadata={"workflows": len(actions.workflows)},
        )


def analyze_workflow(workflow: WorkflowDefinition) -> list[Insight]:
    """Run the full check catalog, in order, against one workflow."""
    insights: list[Insight] = []
    for check in WORKFLOW_CHECKS:
        insights.extend(check(workflow))
    return insights


# ── Helpers ──────────────────────────────────────────────


def line_number(content: str, needle: str) -> int:
    """1-based line of the first line containing ``needle``, else 1."""
    for number, line in enumerate(content.splitlines(), 1):
        if needle in line:
            return number
    return 1


def _first_line(content: str, needles: Iterable[str]) -> int:
    for needle in needles:
        if needle in content:
            return line_number(content, needle)
    return 1


def _column(content: str, offset: int) -> int:
    """0-based column of ``offset`` within its line."""
    return offset - (content.rfind("\n", 0, offset) + 1)


def insight_id(
    workflow: WorkflowDefinition, rule: str, detail: str | None = None
) -> str:
    parts = [ID_PREFIX_GITHUB_ACTIONS, workflow.name, rule]
    if detail:
        parts.append(detail)
    return "-".join(parts)


def _build(
    workflow: WorkflowDefinition,
    rule: str,
    *,
    detail: str | None = None,
    line: int = 1,
    column: int | None = None,
    pattern: str,
    reference: tuple[str, str],
    **fields: Any,
) -> Insight:
    """Assemble an insight with the two standard evidence items."""
    return Insight(
        id=insight_id(workflow, rule, detail),
        level=InsightLevel.MESO,
        location=CodeLocation(
            file=workflow.path, line=line, column=column
        ),
        rule=rule,
        evidence=[
            Evidence(
                type=_PATTERN_MATCH,
                description=pattern,
                source=workflow.path,
            ),
            Evidence(type=reference[0], description=reference[1]),
        ],
        **fields,
    )


# ── Security ─────────────────────────────────────────────


def check_unpinned_actions(workflow: WorkflowDefinition) -> list[Insight]:
    """Third-party ``uses:`` references not pinned to a commit SHA.

    One insight per distinct action; later references to the same
    action are reported through the first one.
    """
    content = workflow.content
    insights: list[Insight] = []
    seen: set[str] = set()

    for match in _USES_RE.finditer(content):
        action, ref = match.group(1), match.group(2)
        if action.startswith(GITHUB_OWNED_ACTION_PREFIX):
            continue
        if _SHA_RE.match(ref) or action in seen:
            continue
        seen.add(action)

        insights.append(
            _build(
                workflow,
                "unpinned-action",
                detail=action,
                line=line_number(content, match.group(0)),
                column=_column(content, match.start()),
                title=f"Unpinned third-party action: {action}",
                summary=(
                    f'The workflow "{workflow.name}" uses the third-party'
                    f' action "{action}" without pinning it to a commit'
                    " SHA, which is a security risk."
                ),
                explanation=(
                    "Third-party actions referenced by tag or branch can"
                    " be changed by their author at any time, silently"
                    " altering what runs in your pipeline. Pinning to a"
                    " full commit SHA makes the reference immutable."
                ),
                severity=InsightSeverity.MEDIUM,
                confidence=90,
                category=InsightCategory.SECURITY,
                fixable=True,
                recommendations=[
                    f"Pin the action to a full commit SHA instead of {ref}.",
                    "Look up the SHA of the release you want in the"
                    " action's repository.",
                    f"Use the format: uses: {action}@<full-sha>",
                ],
                pattern=f"Found unpinned third-party action: {action}@{ref}",
                reference=(
                    _BEST_PRACTICE,
                    "Third-party actions should be pinned to specific"
                    " SHAs for security",
                ),
            )
        )
    return insights


def check_write_all_permissions(
    workflow: WorkflowDefinition,
) -> list[Insight]:
    content = workflow.content
    if "permissions:" not in content or "write-all" not in content:
        return []
    return [
        _build(
            workflow,
            "overly-permissive-token",
            line=line_number(content, "write-all"),
            title=(
                "Overly permissive token permissions in"
                f' "{workflow.name}"'
            ),
            summary=(
                f'The workflow "{workflow.name}" grants "write-all"'
                " permissions, more access than it is likely to need."
            ),
            explanation=(
                'A "write-all" grant gives the GITHUB_TOKEN broad write'
                " access to the repository, which violates the principle"
                " of least privilege. A compromised step could push code,"
                " edit releases or change settings with it."
            ),
            severity=InsightSeverity.HIGH,
            confidence=95,
            category=InsightCategory.SECURITY,
            fixable=True,
            recommendations=[
                "Limit permissions to what the workflow needs.",
                'Declare individual scopes instead of "write-all".',
                'Use the "permissions:" key per job for granular scopes.',
            ],
            pattern='Found "write-all" permissions in workflow',
            reference=(
                _BEST_PRACTICE,
                "Workflow permissions should follow the principle of"
                " least privilege",
            ),
        )
    ]


def check_script_injection(workflow: WorkflowDefinition) -> list[Insight]:
    content = workflow.content
    found = [expr for expr in _UNTRUSTED_INPUTS if expr in content]
    if not found:
        return []
    return [
        _build(
            workflow,
            "script-injection",
            line=line_number(content, found[0]),
            title=(
                "Potential script injection vulnerability in"
                f' "{workflow.name}"'
            ),
            summary=(
                f'The workflow "{workflow.name}" interpolates'
                " user-controllable input in a way that might allow"
                " script injection."
            ),
            explanation=(
                "Issue and pull request titles and bodies are written by"
                " external users. Substituting them directly into a run"
                " command lets crafted text execute as shell code with"
                " the job's token and secrets."
            ),
            severity=InsightSeverity.HIGH,
            confidence=85,
            category=InsightCategory.SECURITY,
            fixable=False,
            recommendations=[
                "Do not interpolate user-controllable input directly"
                " into commands or scripts.",
                "Pass the value through an environment variable and"
                " quote it in the script.",
                "Restrict GITHUB_TOKEN permissions for jobs that handle"
                " untrusted input.",
            ],
            pattern=(
                "Found user-controllable input in workflow: "
                + ", ".join(found)
            ),
            reference=(
                "Security Vulnerability",
                "Script injection in GitHub Actions can lead to"
                " repository compromise",
            ),
        )
    ]


# ── Efficiency ───────────────────────────────────────────


def check_missing_cache(workflow: WorkflowDefinition) -> list[Insight]:
    content = workflow.content
    installs = any(cmd in content for cmd in _INSTALL_COMMANDS)
    if not installs or "actions/cache" in content:
        return []
    return [
        _build(
            workflow,
            "missing-cache",
            line=_first_line(content, _INSTALL_COMMANDS),
            title=f'Missing dependency caching in "{workflow.name}"',
            summary=(
                f'The workflow "{workflow.name}" installs dependencies'
                " but does not cache them between runs."
            ),
            explanation=(
                "This workflow installs npm dependencies without the"
                " actions/cache action, so every run downloads the full"
                " dependency tree again. Caching the npm cache directory"
                " keyed on the lockfile avoids that work."
            ),
            severity=InsightSeverity.MEDIUM,
            confidence=80,
            category=InsightCategory.EFFICIENCY,
            fixable=True,
            recommendations=[
                "Add the actions/cache action to cache npm dependencies.",
                "For npm, cache the ~/.npm directory or node_modules.",
                "Use a cache key that includes the hash of"
                " package-lock.json.",
            ],
            pattern="Found npm dependency installation without caching",
            reference=(
                _BEST_PRACTICE,
                "Caching dependencies shortens workflow run times",
            ),
        )
    ]


def check_full_history_checkout(
    workflow: WorkflowDefinition,
) -> list[Insight]:
    content = workflow.content
    if "actions/checkout@" not in content or "fetch-depth: 0" not in content:
        return []
    return [
        _build(
            workflow,
            "inefficient-checkout",
            line=line_number(content, "fetch-depth: 0"),
            title=f'Inefficient git checkout in "{workflow.name}"',
            summary=(
                f'The workflow "{workflow.name}" fetches the complete git'
                " history, which is usually unnecessary and slow."
            ),
            explanation=(
                "Setting 'fetch-depth: 0' on actions/checkout downloads"
                " every commit in the repository. Unless the job needs"
                " history (changelogs, version numbers from tags), a"
                " shallow clone is faster and lighter."
            ),
            severity=InsightSeverity.LOW,
            confidence=85,
            category=InsightCategory.EFFICIENCY,
            fixable=True,
            recommendations=[
                'Remove "fetch-depth: 0" if the full history is not'
                " needed.",
                "Use a small fetch depth (fetch-depth: 1) for most jobs.",
                "Fetch full history only in the jobs that need it.",
            ],
            pattern="Found checkout action with fetch-depth: 0",
            reference=(
                "Performance Impact",
                "Fetching complete git history increases checkout time"
                " and network usage",
            ),
        )
    ]


def check_excessive_steps(workflow: WorkflowDefinition) -> list[Insight]:
    steps = len(_STEP_RE.findall(workflow.content))
    if steps <= MAX_WORKFLOW_STEPS:
        return []
    insight = _build(
        workflow,
        "excessive-steps",
        line=1,
        title=f'Excessive number of steps in "{workflow.name}"',
        summary=(
            f'The workflow "{workflow.name}" contains {steps} steps,'
            " which may indicate inefficiency or complexity."
        ),
        explanation=(
            f"This workflow has {steps} named steps. Long workflows are"
            " harder to maintain and more likely to fail. Composite"
            " actions, reusable workflows or scripts can group related"
            " steps."
        ),
        severity=InsightSeverity.LOW,
        confidence=70,
        category=InsightCategory.EFFICIENCY,
        fixable=False,
        recommendations=[
            "Refactor related steps into composite actions.",
            "Use scripts to combine multiple command-line steps.",
            "Extract common patterns into reusable workflows.",
            "Remove redundant or unnecessary steps.",
        ],
        pattern=f"Workflow contains {steps} steps",
        reference=(
            _BEST_PRACTICE,
            "Concise, modular workflows are easier to maintain",
        ),
    )
    # The step count is a metric, not a lexical hit.
    evidence = [
        insight.evidence[0].model_copy(update={"type": "Metric"}),
        insight.evidence[1],
    ]
    return [insight.model_copy(update={"evidence": evidence})]


# ── Maintenance ──────────────────────────────────────────


def check_eol_node_versions(workflow: WorkflowDefinition) -> list[Insight]:
    content = workflow.content
    insights: list[Insight] = []
    seen: set[str] = set()

    for match in _NODE_VERSION_RE.finditer(content):
        version = match.group(1)
        if version in seen:
            continue
        seen.add(version)
        insights.append(
            _build(
                workflow,
                "deprecated-node",
                detail=version,
                line=line_number(content, match.group(0)),
                title=(
                    f"Deprecated Node.js version {version} in"
                    f' "{workflow.name}"'
                ),
                summary=(
                    f'The workflow "{workflow.name}" uses Node.js'
                    f" {version}, which has reached end-of-life."
                ),
                explanation=(
                    f"Node.js {version} no longer receives security"
                    " patches. Workflows pinned to it are exposed to"
                    " known vulnerabilities and will break as runners"
                    " and dependencies drop support."
                ),
                severity=InsightSeverity.MEDIUM,
                confidence=95,
                category=InsightCategory.MAINTENANCE,
                fixable=True,
                recommendations=[
                    f"Update the Node.js version from {version} to a"
                    " current LTS version.",
                    'Use "node-version: lts/*" to track the latest LTS.',
                    "If specific features are needed, pin the minimum"
                    " supported version.",
                ],
                pattern=f"Found deprecated Node.js version: {version}",
                reference=(
                    "End of Life",
                    f"Node.js {version} has reached end-of-life",
                ),
            )
        )
    return insights


def check_deprecated_commands(
    workflow: WorkflowDefinition,
) -> list[Insight]:
    content = workflow.content
    if not any(cmd in content for cmd in _DEPRECATED_COMMANDS):
        return []
    return [
        _build(
            workflow,
            "deprecated-workflow-commands",
            line=_first_line(content, _DEPRECATED_COMMANDS),
            title=f'Deprecated workflow commands in "{workflow.name}"',
            summary=(
                f'The workflow "{workflow.name}" uses deprecated workflow'
                " commands like set-output or set-env."
            ),
            explanation=(
                'The "::set-output" and "::set-env" commands were'
                " deprecated in favour of the GITHUB_OUTPUT and"
                " GITHUB_ENV environment files. Runners warn on them"
                " today and may reject them later."
            ),
            severity=InsightSeverity.MEDIUM,
            confidence=95,
            category=InsightCategory.MAINTENANCE,
            fixable=True,
            recommendations=[
                'Replace "::set-output name=foo::" with'
                ' echo "foo=$value" >> $GITHUB_OUTPUT',
                'Replace "::set-env name=foo::" with'
                ' echo "foo=$value" >> $GITHUB_ENV',
                "Review the workflow command documentation for the"
                " current syntax",
            ],
            pattern="Found deprecated workflow commands",
            reference=(
                "Deprecation Notice",
                "These workflow commands are officially deprecated",
            ),
        )
    ]


def check_deprecated_action_versions(
    workflow: WorkflowDefinition,
) -> list[Insight]:
    content = workflow.content
    insights: list[Insight] = []
    seen: set[str] = set()

    for match in _DEPRECATED_ACTION_RE.finditer(content):
        ref = match.group(1)
        if ref in seen:
            continue
        seen.add(ref)
        insights.append(
            _build(
                workflow,
                "deprecated-action",
                detail=ref,
                line=line_number(content, match.group(0)),
                title=(
                    f'Deprecated GitHub Action version in "{workflow.name}"'
                ),
                summary=(
                    f'The workflow "{workflow.name}" uses {ref}, a'
                    " deprecated version of a GitHub Action."
                ),
                explanation=(
                    "Old major versions of GitHub-provided actions run on"
                    " retired runtimes and miss bug fixes and security"
                    " updates. Update to the latest major version."
                ),
                severity=InsightSeverity.LOW,
                confidence=90,
                category=InsightCategory.MAINTENANCE,
                fixable=True,
                recommendations=[
                    "Update the action to a newer major version.",
                    "Check the action's changelog for migration notes.",
                    "Keep actions updated with a dependency bot.",
                ],
                pattern=f"Found deprecated action version: {ref}",
                reference=(
                    _BEST_PRACTICE,
                    "Actions should be kept on their latest stable"
                    " major version",
                ),
            )
        )
    return insights


WORKFLOW_CHECKS: tuple[WorkflowCheck, ...] = (
    check_unpinned_actions,
    check_write_all_permissions,
    check_script_injection,
    check_missing_cache,
    check_full_history_checkout,
    check_excessive_steps,
    check_eol_node_versions,
    check_deprecated_commands,
    check_deprecated_action_versions,
)
