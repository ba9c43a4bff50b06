"""Analysis audit trail: one JSON object per line in ``analysis.log``."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from obex.constants import ERROR_TRUNCATION_CHARS
from obex.logging_config import LOG_DATEFMT, LOG_FORMAT

__all__ = ["AgentLogger", "LOG_FORMAT", "LOG_DATEFMT"]

AUDIT_LOGGER = "obex.analysis"


class AgentLogger:
    """Writes analysis passes and agent failures keyed by request id.

    Records share ``type``, ``timestamp`` and ``request_id``; the rest
    depends on the record type.
    """

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        log_dir.mkdir(parents=True, exist_ok=True)
        self.path = log_dir / "analysis.log"
        self._logger = logging.getLogger(AUDIT_LOGGER)
        self._logger.setLevel(level.upper())

        if not self._logger.handlers:
            handler = logging.FileHandler(self.path, encoding="utf-8")
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    def _record(
        self, level: int, kind: str, request_id: str, **fields: Any
    ) -> None:
        record = {
            "type": kind,
            "timestamp": datetime.now(UTC).isoformat(),
            "request_id": request_id,
            **fields,
        }
        self._logger.log(level, json.dumps(record, default=str))

    def log_analysis(
        self,
        request_id: str,
        event_type: str,
        agents: list[str],
        insight_count: int,
        duration_ms: float,
    ) -> None:
        self._record(
            logging.INFO,
            "analysis",
            request_id,
            event_type=event_type,
            agents=agents,
            insight_count=insight_count,
            duration_ms=duration_ms,
        )

    def log_error(
        self,
        request_id: str,
        component: str,
        error: str,
        error_class: str | None = None,
    ) -> None:
        """Agent failure; the message is cut to ERROR_TRUNCATION_CHARS."""
        self._record(
            logging.ERROR,
            "error",
            request_id,
            component=component,
            error=error[:ERROR_TRUNCATION_CHARS],
            error_class=error_class,
        )
