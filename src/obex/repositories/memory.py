"""Bounded in-memory insight store.

Insights are kept newest first. Saving an id that is already stored
replaces the old copy and moves it to the front. Once ``capacity`` is
reached the oldest insights are evicted.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from obex.constants import DEFAULT_STORE_CAPACITY, InsightLevel
from obex.models.insight import Insight

logger = logging.getLogger(__name__)


class InMemoryInsightRepository:
    """Dict-backed InsightRepository."""

    def __init__(self, capacity: int = DEFAULT_STORE_CAPACITY) -> None:
        if capacity < 1:
            msg = f"capacity must be >= 1, got {capacity}"
            raise ValueError(msg)
        self._capacity = capacity
        # insertion order == oldest first
        self._store: OrderedDict[str, Insight] = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    async def save_many(self, insights: list[Insight]) -> None:
        for insight in insights:
            self._store.pop(insight.id, None)
            self._store[insight.id] = insight

        evicted = 0
        while len(self._store) > self._capacity:
            self._store.popitem(last=False)
            evicted += 1
        if evicted:
            logger.debug(
                "event=insights_evicted count=%d capacity=%d",
                evicted,
                self._capacity,
            )

    async def get(self, insight_id: str) -> Insight | None:
        return self._store.get(insight_id)

    async def latest(self, limit: int) -> list[Insight]:
        return list(reversed(self._store.values()))[: max(limit, 0)]

    async def by_level(
        self, level: InsightLevel, limit: int
    ) -> list[Insight]:
        matching = [
            i for i in reversed(self._store.values()) if i.level == level
        ]
        return matching[: max(limit, 0)]

    async def count(self) -> int:
        return len(self._store)

    async def clear(self) -> None:
        self._store.clear()
