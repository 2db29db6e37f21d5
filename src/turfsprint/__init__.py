"""
turfsprint - Stat-weighted horse race simulation engine.

This package provides a tick-based race engine with:
- Immutable competitor stat sheets and race conditions
- A per-tick performance model (surface, weather, variance, fade)
- Host-driven tick scheduling and frame/completion notifications
- Ranked results and per-competitor telemetry
"""

__version__ = "0.1.0"

from turfsprint.simulation.simulator import RaceSimulator
from turfsprint.stable.competitor import Competitor
from turfsprint.track.conditions import RaceConditions, TrackSurface, Weather

__all__ = [
    "RaceSimulator",
    "Competitor",
    "RaceConditions",
    "TrackSurface",
    "Weather",
    "__version__",
]
