"""
Stable module - Competitor stat sheets.

This module contains:
- Competitor: Immutable ability sheet for one horse
- StableGenerator: Seeded random field generation
"""

from turfsprint.stable.competitor import Competitor
from turfsprint.stable.generator import StableGenerator, GeneratorConfig

__all__ = [
    "Competitor",
    "StableGenerator",
    "GeneratorConfig",
]
