"""Insight storage."""

from obex.repositories.memory import InMemoryInsightRepository
from obex.repositories.protocols import InsightRepository

__all__ = ["InMemoryInsightRepository", "InsightRepository"]
