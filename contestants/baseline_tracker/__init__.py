"""
Baseline Tracker Agent Package

A simple heuristic agent that steers the basket under the most valuable
reachable item while dodging harmful ones. Serves as a benchmark and example.
"""

from .agent import CatcherAgent, create_agent

__all__ = ["CatcherAgent", "create_agent"]
