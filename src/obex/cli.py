"""CLI entry point: ``obex analyze`` and ``obex serve``."""

from __future__ import annotations

# Configure logging before any obex imports that log at import time
from obex.logging_config import setup_logging

setup_logging("WARNING")

import argparse  # noqa: E402
import asyncio  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

from obex import __version__  # noqa: E402
from obex.config import WORKFLOW_AGENTS, Settings  # noqa: E402
from obex.constants import (  # noqa: E402
    GIT_REVPARSE_TIMEOUT,
    WORKFLOW_DIR,
    WORKFLOW_SUFFIXES,
    ExportFormat,
    InsightLevel,
)
from obex.logging_config import set_level  # noqa: E402
from obex.models.context import (  # noqa: E402
    AnalysisContext,
    GitContext,
    GitHubActionsContext,
    WorkflowDefinition,
    WorkspaceContext,
)
from obex.models.insight import Insight, utc_now  # noqa: E402


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"obex {__version__}")
        return

    if args.command == "analyze":
        _run_analyze(args)
    elif args.command == "serve":
        _run_serve(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="obex",
        description=(
            "Explainable insights for GitHub Actions workflows."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    analyze = sub.add_parser(
        "analyze",
        help="Analyze workflow files or repositories",
    )
    analyze.add_argument(
        "paths",
        nargs="+",
        help=(
            "Workflow files, or repository directories whose "
            f"{WORKFLOW_DIR} is scanned"
        ),
    )
    analyze.add_argument(
        "--branch",
        "-b",
        default=None,
        help="Branch name for context (default: detected via git)",
    )
    analyze.add_argument(
        "--level",
        "-l",
        choices=[lvl.value for lvl in InsightLevel],
        default=None,
        help="Only report insights at this level",
    )
    analyze.add_argument(
        "--min-confidence",
        type=int,
        default=None,
        help="Only report insights with at least this confidence (0-100)",
    )
    analyze.add_argument(
        "--format",
        "-f",
        choices=[fmt.value for fmt in ExportFormat],
        default=ExportFormat.MARKDOWN.value,
        help="Report format (default: markdown)",
    )
    analyze.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the report to this file instead of stdout",
    )
    analyze.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    serve = sub.add_parser("serve", help="Start the HTTP API")
    serve.add_argument(
        "--host",
        default=None,
        help="Bind address (default: from settings)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port (default: from settings)",
    )

    return parser


def collect_workflows(paths: list[Path]) -> list[WorkflowDefinition]:
    """Read workflow files; directories contribute their workflow dir.

    Raises FileNotFoundError for a path that does not exist.
    """
    workflows: list[WorkflowDefinition] = []
    for path in paths:
        if not path.exists():
            msg = f"{path} does not exist"
            raise FileNotFoundError(msg)
        if path.is_file():
            workflows.append(_read_workflow(path, path.as_posix()))
            continue

        workflow_dir = path / WORKFLOW_DIR
        if not workflow_dir.is_dir():
            continue
        for file in sorted(workflow_dir.iterdir()):
            if file.is_file() and file.suffix in WORKFLOW_SUFFIXES:
                workflows.append(
                    _read_workflow(file, file.relative_to(path).as_posix())
                )
    return workflows


def _read_workflow(file: Path, display_path: str) -> WorkflowDefinition:
    return WorkflowDefinition(
        name=file.name,
        path=display_path,
        content=file.read_text(encoding="utf-8"),
    )


async def detect_branch(repo_dir: Path) -> str | None:
    """Current branch of ``repo_dir``, or None outside a git checkout."""
    try:
        proc = await asyncio.create_subprocess_exec(
            "git",
            "-C",
            str(repo_dir),
            "rev-parse",
            "--abbrev-ref",
            "HEAD",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        return None
    try:
        stdout, _ = await asyncio.wait_for(
            proc.communicate(), timeout=GIT_REVPARSE_TIMEOUT
        )
    except TimeoutError:
        proc.kill()
        return None
    if proc.returncode != 0:
        return None
    branch = stdout.decode().strip()
    return branch if branch and branch != "HEAD" else None


def build_context(
    workflows: list[WorkflowDefinition],
    root: Path,
    branch: str | None,
) -> AnalysisContext:
    return AnalysisContext(
        timestamp=utc_now().isoformat(),
        workspace=WorkspaceContext(
            available=True, name=root.name, path=str(root)
        ),
        git=GitContext(available=branch is not None, branch=branch),
        github_actions=GitHubActionsContext(
            available=True, workflows=workflows
        ),
    )


async def analyze_paths(
    paths: list[Path],
    *,
    branch: str | None = None,
    level: InsightLevel | None = None,
    min_confidence: int | None = None,
    disabled: list[str] | None = None,
) -> list[Insight]:
    """Analyze the workflows found under ``paths`` with a fresh orchestrator."""
    from obex.orchestration.service import (
        AnalyzeOptions,
        create_default_orchestrator,
        flatten,
    )

    workflows = collect_workflows(paths)
    root = paths[0].resolve()
    if root.is_file():
        root = root.parent
    if branch is None:
        branch = await detect_branch(root)

    orchestrator = create_default_orchestrator(disabled=disabled)
    results = await orchestrator.analyze(
        build_context(workflows, root, branch),
        AnalyzeOptions(
            level=level,
            agent_ids=WORKFLOW_AGENTS,
            min_confidence=min_confidence,
        ),
    )
    return flatten(results)


def _run_analyze(args: argparse.Namespace) -> None:
    """Execute the analyze command."""
    from obex.export import export_insights

    settings = Settings()
    if args.verbose or settings.debug_mode:
        set_level("DEBUG")

    paths = [Path(p) for p in args.paths]
    missing = [p for p in paths if not p.exists()]
    if missing:
        for path in missing:
            print(f"Error: {path} does not exist", file=sys.stderr)
        sys.exit(1)

    min_confidence = (
        args.min_confidence
        if args.min_confidence is not None
        else settings.default_min_confidence
    )
    insights = asyncio.run(
        analyze_paths(
            paths,
            branch=args.branch,
            level=InsightLevel(args.level) if args.level else None,
            min_confidence=min_confidence,
            disabled=settings.disabled_agents,
        )
    )

    report = export_insights(insights, args.format)
    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(report, encoding="utf-8")
        print(f"{len(insights)} insight(s) written to {output}")
    else:
        print(report)


def _run_serve(args: argparse.Namespace) -> None:
    """Run the FastAPI app with uvicorn."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "obex.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
