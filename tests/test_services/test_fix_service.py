"""Tests for fix derivation and application."""

from __future__ import annotations

from pathlib import Path

import pytest

from obex.agents.github_actions import analyze_workflow
from obex.models.insight import CodeLocation, Insight
from obex.repositories.memory import InMemoryInsightRepository
from obex.services.fix_service import FixService, derive_changes, rule_detail
from tests.conftest import make_insight, make_workflow

WORKFLOW_PATH = ".github/workflows/ci.yml"

LEGACY_WORKFLOW = """\
name: Legacy
on: push
permissions: write-all
jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v1
        with:
          fetch-depth: 0
      - uses: actions/setup-node@v1
        with:
          node-version: '14'
      - run: echo "::set-output name=version::1.2.3"
      - run: echo "::set-env name=MODE::ci"
"""


def _insight(rule: str, content: str = LEGACY_WORKFLOW) -> Insight:
    matches = [
        i
        for i in analyze_workflow(make_workflow(content, path=WORKFLOW_PATH))
        if i.rule == rule
    ]
    return matches[0]


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    target = tmp_path / WORKFLOW_PATH
    target.parent.mkdir(parents=True)
    target.write_text(LEGACY_WORKFLOW, encoding="utf-8")
    return tmp_path


@pytest.fixture
def repo() -> InMemoryInsightRepository:
    return InMemoryInsightRepository()


class TestDeriveChanges:
    def test_rule_detail_from_id(self) -> None:
        assert rule_detail(_insight("deprecated-node")) == "14"
        assert rule_detail(_insight("missing-cache", "run: npm ci\n")) is None
        named = make_workflow("run: npm ci\n", name="missing-cache-x.yml")
        (insight,) = analyze_workflow(named)
        assert rule_detail(insight) is None

    def test_rule_detail_with_rule_in_workflow_name(self) -> None:
        workflow = make_workflow(
            LEGACY_WORKFLOW,
            name="deprecated-node-check.yml",
            path=WORKFLOW_PATH,
        )
        (insight,) = [
            i for i in analyze_workflow(workflow) if i.rule == "deprecated-node"
        ]
        assert rule_detail(insight) == "14"
        (change,) = derive_changes(insight, None)
        assert change.old_code == "node-version: '14'"

    def test_checkout_depth(self) -> None:
        (change,) = derive_changes(_insight("inefficient-checkout"), None)
        assert change.old_code == "fetch-depth: 0"
        assert change.new_code == "fetch-depth: 1"

    def test_action_major_bump(self) -> None:
        insights = [
            i
            for i in analyze_workflow(
                make_workflow(LEGACY_WORKFLOW, path=WORKFLOW_PATH)
            )
            if i.rule == "deprecated-action"
        ]
        new_codes = [derive_changes(i, None)[0].new_code for i in insights]
        assert new_codes == ["actions/checkout@v4", "actions/setup-node@v4"]

    def test_node_version_from_content(self) -> None:
        (change,) = derive_changes(
            _insight("deprecated-node"), LEGACY_WORKFLOW
        )
        assert change.old_code == "node-version: '14'"
        assert change.new_code == "node-version: '20'"

    def test_write_all_keeps_indentation(self) -> None:
        content = "jobs:\n  build:\n    permissions: write-all\n"
        insight = make_insight(rule="overly-permissive-token")
        (change,) = derive_changes(insight, content)
        assert change.old_code == "    permissions: write-all"
        assert change.new_code == (
            "    permissions:\n      contents: read"
        )

    def test_workflow_commands_become_env_files(self) -> None:
        changes = derive_changes(
            _insight("deprecated-workflow-commands"), LEGACY_WORKFLOW
        )
        assert [c.new_code for c in changes] == [
            'echo "version=1.2.3" >> "$GITHUB_OUTPUT"',
            'echo "MODE=ci" >> "$GITHUB_ENV"',
        ]

    def test_workflow_commands_need_content(self) -> None:
        assert derive_changes(
            _insight("deprecated-workflow-commands"), None
        ) == []

    def test_unknown_rule_has_no_changes(self) -> None:
        assert derive_changes(make_insight(rule="missing-cache"), "") == []


class TestGetFix:
    @pytest.mark.asyncio
    async def test_unknown_insight(
        self, repo: InMemoryInsightRepository
    ) -> None:
        assert await FixService(repo).get_fix("missing") is None

    @pytest.mark.asyncio
    async def test_not_fixable(self, repo: InMemoryInsightRepository) -> None:
        await repo.save_many([make_insight(id="x", fixable=False)])
        fix = await FixService(repo).get_fix("x")
        assert fix is not None
        assert fix.applicable is False
        assert fix.changes == []

    @pytest.mark.asyncio
    async def test_advisory_fix_without_changes(
        self, repo: InMemoryInsightRepository
    ) -> None:
        insight = _insight("missing-cache", "steps:\n  - run: npm ci\n")
        await repo.save_many([insight])
        fix = await FixService(repo).get_fix(insight.id)
        assert fix is not None
        assert fix.applicable is True
        assert fix.changes == []
        assert fix.description == insight.recommendations[0]

    @pytest.mark.asyncio
    async def test_reads_workspace_file(
        self, repo: InMemoryInsightRepository, workspace: Path
    ) -> None:
        insight = _insight("deprecated-workflow-commands")
        await repo.save_many([insight])
        fix = await FixService(repo, workspace).get_fix(insight.id)
        assert fix is not None
        assert len(fix.changes) == 2


class TestApplyFix:
    @pytest.mark.asyncio
    async def test_disabled_without_workspace(
        self, repo: InMemoryInsightRepository
    ) -> None:
        insight = _insight("inefficient-checkout")
        await repo.save_many([insight])
        result = await FixService(repo).apply_fix(insight.id)
        assert result.success is False
        assert result.error == "Fix application is disabled"

    @pytest.mark.asyncio
    async def test_applies_changes_to_file(
        self, repo: InMemoryInsightRepository, workspace: Path
    ) -> None:
        insight = _insight("deprecated-node")
        await repo.save_many([insight])
        result = await FixService(repo, workspace).apply_fix(insight.id)

        assert result.success is True
        assert result.applied_changes == 1
        text = (workspace / WORKFLOW_PATH).read_text(encoding="utf-8")
        assert "node-version: '20'" in text
        assert "node-version: '14'" not in text

    @pytest.mark.asyncio
    async def test_second_apply_finds_nothing(
        self, repo: InMemoryInsightRepository, workspace: Path
    ) -> None:
        insight = _insight("inefficient-checkout")
        await repo.save_many([insight])
        service = FixService(repo, workspace)
        assert (await service.apply_fix(insight.id)).success is True
        again = await service.apply_fix(insight.id)
        assert again.success is False

    @pytest.mark.asyncio
    async def test_path_outside_workspace_rejected(
        self, repo: InMemoryInsightRepository, workspace: Path
    ) -> None:
        outside = workspace.parent / "outside.yml"
        outside.write_text("fetch-depth: 0\n", encoding="utf-8")
        insight = _insight("inefficient-checkout").model_copy(
            update={"location": CodeLocation(file="../outside.yml")}
        )
        await repo.save_many([insight])
        result = await FixService(repo, workspace).apply_fix(insight.id)
        assert result.success is False
        assert "outside the workspace" in (result.error or "")
        assert outside.read_text(encoding="utf-8") == "fetch-depth: 0\n"

    @pytest.mark.asyncio
    async def test_missing_target_file(
        self, repo: InMemoryInsightRepository, workspace: Path
    ) -> None:
        insight = _insight("inefficient-checkout").model_copy(
            update={
                "location": CodeLocation(file=".github/workflows/gone.yml")
            }
        )
        await repo.save_many([insight])
        result = await FixService(repo, workspace).apply_fix(insight.id)
        assert result.success is False
        assert result.error == "Target file not found"

    @pytest.mark.asyncio
    async def test_write_error_is_reported(
        self,
        repo: InMemoryInsightRepository,
        workspace: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def deny(self: Path, *args: object, **kwargs: object) -> int:
            raise PermissionError(13, "Permission denied")

        insight = _insight("inefficient-checkout")
        await repo.save_many([insight])
        monkeypatch.setattr(Path, "write_text", deny)

        result = await FixService(repo, workspace).apply_fix(insight.id)
        assert result.success is False
        assert result.error == "Could not update file: Permission denied"
        assert result.applied_changes == 0

    @pytest.mark.asyncio
    async def test_not_fixable_insight(
        self, repo: InMemoryInsightRepository, workspace: Path
    ) -> None:
        await repo.save_many([make_insight(id="x", fixable=False)])
        result = await FixService(repo, workspace).apply_fix("x")
        assert result.success is False
        assert result.error == "Insight is not automatically fixable"
