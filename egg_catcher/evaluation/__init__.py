"""
Evaluation Package
==================

Seed bank and harness for scoring agents over full sessions.
"""

from egg_catcher.evaluation.run_eval import Episode, Report, evaluate, load_policy, read_seed_bank

__all__ = ["Episode", "Report", "evaluate", "load_policy", "read_seed_bank"]
