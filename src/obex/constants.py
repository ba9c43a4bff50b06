"""Shared constants: single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON payloads,
log lines, dict keys) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class InsightLevel(StrEnum):
    """Scope of impact: local branch, integration, production."""

    MICRO = "micro"
    MESO = "meso"
    MACRO = "macro"


class InsightSeverity(StrEnum):
    """Severity of a finding."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InsightCategory(StrEnum):
    """Categories the explainability catalog knows about.

    ``Insight.category`` is an open string; anything outside this set
    gets the general paragraphs.
    """

    SECURITY = "Security"
    EFFICIENCY = "Efficiency"
    MAINTENANCE = "Maintenance"


class ExplanationSection(StrEnum):
    """Enrichment paragraph kinds, in rendering order."""

    SEVERITY = "severity"
    TOPIC = "topic"
    PROJECT = "project"
    BRANCH = "branch"
    LEVEL = "level"
    IMPACT = "impact"
    CONFIDENCE = "confidence"


class AnalysisEventType(StrEnum):
    """Editor/CI events that trigger an analysis pass."""

    SAVE = "save"
    EDIT = "edit"
    BRANCH_CHANGE = "branchChange"
    TASK_START = "taskStart"
    TASK_END = "taskEnd"
    TEST_RUN_START = "testRunStart"
    TEST_RUN_END = "testRunEnd"
    BUILD_LOG_ANALYSIS = "buildLogAnalysis"


class ExportFormat(StrEnum):
    """Supported insight export formats."""

    MARKDOWN = "markdown"
    JSON = "json"


# Rendering order for enrichment sections
SECTION_ORDER: tuple[ExplanationSection, ...] = tuple(ExplanationSection)

# ── Workflow Analysis ────────────────────────────────────

GITHUB_OWNED_ACTION_PREFIX = "actions/"
PINNED_SHA_LENGTH = 40
MAX_WORKFLOW_STEPS = 20
EOL_NODE_VERSIONS = ("8", "10", "12", "14", "16")
CURRENT_NODE_VERSION = "20"
CURRENT_ACTION_MAJORS = {
    "actions/checkout": "v4",
    "actions/setup-node": "v4",
}
ID_PREFIX_GITHUB_ACTIONS = "github-actions-workflow"

# ── Explainability ───────────────────────────────────────

HIGH_CONFIDENCE_THRESHOLD = 90
PARAGRAPH_SEPARATOR = "\n\n"

# ── Insight Store ────────────────────────────────────────

DEFAULT_STORE_CAPACITY = 500
DEFAULT_LATEST_LIMIT = 50

# ── Misc ─────────────────────────────────────────────────

GIT_REVPARSE_TIMEOUT = 10
ERROR_TRUNCATION_CHARS = 200
WORKFLOW_DIR = ".github/workflows"
WORKFLOW_SUFFIXES = (".yml", ".yaml")

# ── Auth Exempt Paths ────────────────────────────────────

AUTH_EXEMPT_PATHS = frozenset({
    "/api/health",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
})

AUTH_EXEMPT_PREFIXES = ("/api/docs/",)
