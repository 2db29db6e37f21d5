"""
Simulation module - Race engine and tick loop.

This module contains:
- RaceSimulator: Lifecycle, tick loop and notifications
- PerformanceModel: Per-tick velocity and position rules
- RaceWorld: Ordered per-competitor progress state
- TickSource: Host-driven tick scheduling
"""

from turfsprint.simulation.simulator import RaceSimulator, SimulatorConfig, SimulatorState
from turfsprint.simulation.physics import PerformanceModel, PerformanceConfig, DISTANCE_SCALE
from turfsprint.simulation.world import RaceWorld, CompetitorProgress, Frame
from turfsprint.simulation.scheduler import TickSource, ManualTickSource, RealTimeTickSource

__all__ = [
    "RaceSimulator",
    "SimulatorConfig",
    "SimulatorState",
    "PerformanceModel",
    "PerformanceConfig",
    "DISTANCE_SCALE",
    "RaceWorld",
    "CompetitorProgress",
    "Frame",
    "TickSource",
    "ManualTickSource",
    "RealTimeTickSource",
]
