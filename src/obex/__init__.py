"""OBEX -- workflow insight orchestration and explainability service."""

__version__ = "0.1.0"
