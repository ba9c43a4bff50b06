"""Explainability engine -- severity and context aware insight text."""

from obex.explainability.engine import ExplainabilityEngine

__all__ = ["ExplainabilityEngine"]
