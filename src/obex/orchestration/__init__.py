"""Agent orchestration -- selection, isolation, filtering, enrichment."""

from obex.orchestration.service import (
    AnalyzeOptions,
    Orchestrator,
    create_default_orchestrator,
    flatten,
)

__all__ = [
    "AnalyzeOptions",
    "Orchestrator",
    "create_default_orchestrator",
    "flatten",
]
