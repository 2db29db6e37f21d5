"""
Track module - Race conditions and their generation.

This module contains:
- TrackSurface / Weather: Closed condition categories
- RaceConditions: Immutable per-race environment
- ConditionsGenerator: Seeded random conditions
"""

from turfsprint.track.conditions import RaceConditions, TrackSurface, Weather
from turfsprint.track.generator import ConditionsGenerator, GeneratorConfig

__all__ = [
    "RaceConditions",
    "TrackSurface",
    "Weather",
    "ConditionsGenerator",
    "GeneratorConfig",
]
