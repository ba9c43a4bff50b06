"""Derive and apply text fixes for stored workflow insights."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

from obex.constants import CURRENT_ACTION_MAJORS, CURRENT_NODE_VERSION
from obex.models.fix import FixApplicationResponse, FixChange, FixInfo
from obex.models.insight import Insight
from obex.repositories.protocols import InsightRepository

logger = logging.getLogger(__name__)

_WORKFLOW_COMMAND_RE = re.compile(
    r"""echo\s+['"]?::set-(output|env)\s+name=([^:\s]+)::([^'"\n]*)['"]?"""
)
_WRITE_ALL_RE = re.compile(r"^([ \t]*)permissions:[ \t]*write-all[ \t]*$", re.M)


class FixService:
    """Fixes are literal replacements derived from an insight's rule.

    When ``workspace_root`` is set, the insight's file is read from it
    so replacements match the exact text on disk, and ``apply_fix``
    may write the result back. Without it, fixes are descriptive only.
    """

    def __init__(
        self,
        repo: InsightRepository,
        workspace_root: Path | None = None,
    ) -> None:
        self._repo = repo
        self._root = workspace_root.resolve() if workspace_root else None

    @property
    def apply_enabled(self) -> bool:
        return self._root is not None

    async def get_fix(self, insight_id: str) -> FixInfo | None:
        insight = await self._repo.get(insight_id)
        if insight is None:
            return None
        if not insight.fixable:
            return FixInfo(
                applicable=False,
                description="No automatic fix is available for this insight.",
                severity=insight.severity,
                location=insight.location,
            )

        content = await self._read_target(insight)
        changes = derive_changes(insight, content)
        description = (
            f"Apply {len(changes)} change(s) for {insight.rule}"
            if changes
            else _advisory(insight)
        )
        return FixInfo(
            applicable=True,
            description=description,
            severity=insight.severity,
            location=insight.location,
            changes=changes,
        )

    async def apply_fix(self, insight_id: str) -> FixApplicationResponse:
        if self._root is None:
            return FixApplicationResponse(
                success=False, error="Fix application is disabled"
            )
        insight = await self._repo.get(insight_id)
        if insight is None:
            return FixApplicationResponse(
                success=False, error="Insight not found"
            )

        fix = await self.get_fix(insight_id)
        if fix is None or not fix.applicable:
            return FixApplicationResponse(
                success=False, error="Insight is not automatically fixable"
            )
        if not fix.changes:
            return FixApplicationResponse(
                success=False,
                error="No concrete changes available for this insight",
            )

        target = self._resolve(insight)
        if target is None:
            return FixApplicationResponse(
                success=False, error="Target path is outside the workspace"
            )

        if not target.is_file():
            return FixApplicationResponse(
                success=False, error="Target file not found"
            )

        try:
            text = await asyncio.to_thread(target.read_text, encoding="utf-8")
        except OSError as exc:
            return _io_failure(insight_id, target, exc)
        applied = 0
        for change in fix.changes:
            if change.old_code in text:
                text = text.replace(change.old_code, change.new_code)
                applied += 1
        if not applied:
            return FixApplicationResponse(
                success=False, error="File no longer matches the insight"
            )

        try:
            await asyncio.to_thread(target.write_text, text, encoding="utf-8")
        except OSError as exc:
            return _io_failure(insight_id, target, exc)
        logger.info(
            "event=fix_applied insight_id=%s file=%s changes=%d",
            insight_id,
            target,
            applied,
        )
        return FixApplicationResponse(
            success=True,
            message=f"Applied {applied} change(s) to {insight.location.file}"
            if insight.location
            else f"Applied {applied} change(s)",
            applied_changes=applied,
        )

    def _resolve(self, insight: Insight) -> Path | None:
        """Insight file under the workspace root, or None if it escapes."""
        if self._root is None or insight.location is None:
            return None
        candidate = (self._root / insight.location.file).resolve()
        if not candidate.is_relative_to(self._root):
            logger.warning(
                "event=fix_path_rejected insight_id=%s file=%s",
                insight.id,
                insight.location.file,
            )
            return None
        return candidate

    async def _read_target(self, insight: Insight) -> str | None:
        target = self._resolve(insight)
        if target is None or not target.is_file():
            return None
        return await asyncio.to_thread(target.read_text, encoding="utf-8")


def _io_failure(
    insight_id: str, target: Path, exc: OSError
) -> FixApplicationResponse:
    logger.warning(
        "event=fix_io_error insight_id=%s file=%s error=%s",
        insight_id,
        target,
        exc,
    )
    return FixApplicationResponse(
        success=False, error=f"Could not update file: {exc.strerror or exc}"
    )


def rule_detail(insight: Insight) -> str | None:
    """The matched fact encoded after the rule in the insight id.

    Ids end with the rule or with ``-{rule}-{detail}``; the workflow
    name before them may itself contain the rule text.
    """
    if not insight.rule or insight.id.endswith(f"-{insight.rule}"):
        return None
    marker = f"-{insight.rule}-"
    _, sep, detail = insight.id.rpartition(marker)
    return detail if sep else None


def derive_changes(insight: Insight, content: str | None) -> list[FixChange]:
    """Replacements for ``insight.rule``; matched against ``content`` if known."""
    match insight.rule:
        case "deprecated-workflow-commands":
            return _workflow_command_changes(content)
        case "deprecated-action":
            return _action_version_changes(rule_detail(insight))
        case "inefficient-checkout":
            return [
                FixChange(
                    old_code="fetch-depth: 0",
                    new_code="fetch-depth: 1",
                    description="Use a shallow clone",
                )
            ]
        case "overly-permissive-token":
            return _permission_changes(content)
        case "deprecated-node":
            return _node_version_changes(rule_detail(insight), content)
        case _:
            return []


def _workflow_command_changes(content: str | None) -> list[FixChange]:
    if content is None:
        return []
    changes: list[FixChange] = []
    seen: set[str] = set()
    for match in _WORKFLOW_COMMAND_RE.finditer(content):
        old = match.group(0)
        if old in seen:
            continue
        seen.add(old)
        kind, name, value = match.groups()
        env_file = "GITHUB_OUTPUT" if kind == "output" else "GITHUB_ENV"
        changes.append(
            FixChange(
                old_code=old,
                new_code=f'echo "{name}={value}" >> "${env_file}"',
                description=f"Write {name} to ${env_file}",
            )
        )
    return changes


def _action_version_changes(ref: str | None) -> list[FixChange]:
    if not ref or "@" not in ref:
        return []
    action, _ = ref.split("@", 1)
    major = CURRENT_ACTION_MAJORS.get(action)
    if major is None:
        return []
    return [
        FixChange(
            old_code=ref,
            new_code=f"{action}@{major}",
            description=f"Update {action} to {major}",
        )
    ]


def _permission_changes(content: str | None) -> list[FixChange]:
    if content is None:
        return [
            FixChange(
                old_code="permissions: write-all",
                new_code="permissions:\n  contents: read",
                description="Grant read-only repository contents",
            )
        ]
    return [
        FixChange(
            old_code=match.group(0),
            new_code=(
                f"{match.group(1)}permissions:\n"
                f"{match.group(1)}  contents: read"
            ),
            description="Grant read-only repository contents",
        )
        for match in _WRITE_ALL_RE.finditer(content)
    ]


def _node_version_changes(
    version: str | None, content: str | None
) -> list[FixChange]:
    if not version:
        return []
    description = f"Update Node.js {version} to {CURRENT_NODE_VERSION}"
    if content is None:
        return [
            FixChange(
                old_code=f"node-version: '{version}'",
                new_code=f"node-version: '{CURRENT_NODE_VERSION}'",
                description=description,
            )
        ]
    pattern = re.compile(
        rf"node-version:\s*(['\"]){re.escape(version)}\1"
    )
    olds = dict.fromkeys(m.group(0) for m in pattern.finditer(content))
    return [
        FixChange(
            old_code=old,
            new_code=f"node-version: '{CURRENT_NODE_VERSION}'",
            description=description,
        )
        for old in olds
    ]


def _advisory(insight: Insight) -> str:
    if insight.recommendations:
        return insight.recommendations[0]
    return f"Manual fix required for {insight.title}"
