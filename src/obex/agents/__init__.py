"""Analyzers ("agents") and the contract they implement."""

from obex.agents.base import Agent, AnalysisResult
from obex.agents.github_actions import GitHubActionsWorkflowAgent

__all__ = ["Agent", "AnalysisResult", "GitHubActionsWorkflowAgent"]
