"""
Scoring module - Final race placings.

This module contains:
- RaceResult: Placing, time and finishing speed of one competitor
- rank_results: Completion ranking rule
"""

from turfsprint.scoring.ranking import RaceResult, rank_results

__all__ = [
    "RaceResult",
    "rank_results",
]
