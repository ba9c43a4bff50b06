"""Failure classification for agent runs."""

from obex.resilience.errors import ErrorClass, classify_error, describe_error

__all__ = ["ErrorClass", "classify_error", "describe_error"]
