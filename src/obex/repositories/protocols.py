"""Protocol-based repository interfaces.

Implementations satisfy these protocols structurally (no inheritance).
Test doubles can be plain classes matching the same signatures.
"""

from typing import Protocol

from obex.constants import InsightLevel
from obex.models.insight import Insight


class InsightRepository(Protocol):
    async def save_many(self, insights: list[Insight]) -> None: ...
    async def get(self, insight_id: str) -> Insight | None: ...
    async def latest(self, limit: int) -> list[Insight]: ...
    async def by_level(
        self, level: InsightLevel, limit: int
    ) -> list[Insight]: ...
    async def count(self) -> int: ...
    async def clear(self) -> None: ...
