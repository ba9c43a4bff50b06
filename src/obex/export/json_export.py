"""JSON export: structured envelope."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from obex.models.insight import Insight


def export_json(insights: list[Insight]) -> str:
    """Export insights as a JSON envelope with rendered explanations."""
    payload: dict[str, Any] = {
        "generatedAt": datetime.now(UTC).isoformat(),
        "count": len(insights),
        "insights": [i.to_payload() for i in insights],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)
