"""Environment-based configuration and application constants."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from obex.constants import DEFAULT_STORE_CAPACITY, AnalysisEventType

logger = logging.getLogger(__name__)


# Agent identifiers (registry keys)
AGENT_IDS = {
    "GITHUB_ACTIONS": "githubActions",
    "CODE_IMPACT": "codeImpact",
    "BRANCH_CONFLICT": "branchConflict",
    "TEST_RELEVANCE": "testRelevance",
    "DEFECT_PREDICTOR": "defectPredictor",
    "ANOMALY_DETECTOR": "anomalyDetector",
    "ROOT_CAUSE": "rootCause",
}

KNOWN_AGENT_IDS = frozenset(AGENT_IDS.values())


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Logging
    log_level: str = "INFO"
    debug_mode: bool = False
    log_dir: Path = Path("logs")

    # API
    api_key: str = ""
    cors_origins: str = "http://localhost:3000"
    host: str = "127.0.0.1"
    port: int = 3000

    # Analysis
    default_min_confidence: int | None = None
    disabled_agents: Annotated[list[str], NoDecode] = []

    # Insight store + fixes
    insight_store_capacity: int = DEFAULT_STORE_CAPACITY
    fix_workspace_root: str = ""  # empty = fix application disabled

    # Observability
    trace_enabled: bool = True

    @field_validator("disabled_agents", mode="before")
    @classmethod
    def _parse_disabled(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("disabled_agents")
    @classmethod
    def _validate_disabled(cls, v: list[str]) -> list[str]:
        unknown = [a for a in v if a not in KNOWN_AGENT_IDS]
        if unknown:
            logger.warning(
                "Unknown agent ids in DISABLED_AGENTS: %s",
                ", ".join(unknown),
            )
        return v

    @field_validator("default_min_confidence")
    @classmethod
    def _validate_min_confidence(cls, v: int | None) -> int | None:
        if v is not None and not 0 <= v <= 100:
            raise ValueError(
                "default_min_confidence must be between 0 and 100"
            )
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }


# Endpoint presets: agent subset + default event type.
# Ids that are not registered are dropped by the orchestrator.
ANALYSIS_PRESETS: dict[str, dict[str, Any]] = {
    "pre-build": {
        "agent_ids": [
            AGENT_IDS["CODE_IMPACT"],
            AGENT_IDS["GITHUB_ACTIONS"],
            AGENT_IDS["DEFECT_PREDICTOR"],
        ],
        "event_type": AnalysisEventType.TASK_START,
        "required": "task",
        "label": "pre-build",
    },
    "post-build": {
        "agent_ids": [
            AGENT_IDS["GITHUB_ACTIONS"],
            AGENT_IDS["ROOT_CAUSE"],
        ],
        "event_type": AnalysisEventType.TASK_END,
        "required": "task",
        "label": "post-build",
    },
    "build-log": {
        "agent_ids": [
            AGENT_IDS["GITHUB_ACTIONS"],
            AGENT_IDS["ROOT_CAUSE"],
        ],
        "event_type": AnalysisEventType.BUILD_LOG_ANALYSIS,
        "required": "build_log",
        "label": "build log",
    },
    "pre-test": {
        "agent_ids": [AGENT_IDS["TEST_RELEVANCE"]],
        "event_type": AnalysisEventType.TEST_RUN_START,
        "required": "test_run",
        "label": "pre-test",
    },
    "post-test": {
        "agent_ids": [
            AGENT_IDS["TEST_RELEVANCE"],
            AGENT_IDS["ROOT_CAUSE"],
        ],
        "event_type": AnalysisEventType.TEST_RUN_END,
        "required": "test_run_results",
        "label": "post-test",
    },
}

FILE_ANALYSIS_AGENTS = [
    AGENT_IDS["CODE_IMPACT"],
    AGENT_IDS["DEFECT_PREDICTOR"],
]

PULL_REQUEST_AGENTS = [
    AGENT_IDS["BRANCH_CONFLICT"],
    AGENT_IDS["GITHUB_ACTIONS"],
    AGENT_IDS["TEST_RELEVANCE"],
]

WORKFLOW_AGENTS = [AGENT_IDS["GITHUB_ACTIONS"]]
