"""
Simulator - Race lifecycle and tick loop.

Provides:
- Idle / running / stopped / finished lifecycle
- Host-driven tick scheduling through a TickSource
- Frame and completion notifications
- Progress queries
"""

from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Deque, List, Optional, Sequence
import logging
import numpy as np

from turfsprint.stable.competitor import Competitor
from turfsprint.track.conditions import RaceConditions
from turfsprint.simulation.world import RaceWorld, CompetitorProgress, Frame
from turfsprint.simulation.physics import PerformanceModel, PerformanceConfig
from turfsprint.simulation.scheduler import TickSource, ManualTickSource
from turfsprint.scoring.ranking import RaceResult, rank_results


logger = logging.getLogger(__name__)

FrameCallback = Callable[[Frame], None]
CompleteCallback = Callable[[List[RaceResult]], None]


@dataclass
class SimulatorConfig:
    """Simulator configuration."""
    # Simulated seconds per tick (nominal display refresh)
    tick_duration_s: float = 1.0 / 60.0

    # Overrides performance.distance_scale when set
    distance_scale: float | None = None

    # Diagnostics
    frame_history_size: int = 600

    # Random seed used when no generator is injected
    seed: int | None = None

    performance: PerformanceConfig | None = None

    def __post_init__(self):
        """Validate and normalize configuration."""
        if self.tick_duration_s <= 0:
            raise ValueError("tick_duration_s must be positive")
        if self.frame_history_size < 1:
            raise ValueError("frame_history_size must be at least 1")
        if self.performance is None:
            self.performance = PerformanceConfig()
        if self.distance_scale is not None:
            if self.distance_scale <= 0:
                raise ValueError("distance_scale must be positive")
            self.performance = replace(self.performance, distance_scale=self.distance_scale)


class SimulatorState(Enum):
    """Simulator lifecycle states."""
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    FINISHED = "finished"


class RaceSimulator:
    """Race simulator for a fixed field of competitors.

    Each tick advances every unfinished competitor through the
    performance model, emits a Frame, and completes the race once
    every competitor is finished. Ticks are scheduled by the
    injected tick source, never by the simulator itself.

    Usage:
        source = ManualTickSource()
        sim = RaceSimulator(field, conditions, on_complete=print, tick_source=source)
        sim.start()
        source.run()
    """

    def __init__(
        self,
        competitors: Sequence[Competitor],
        conditions: RaceConditions,
        on_frame: Optional[FrameCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
        config: SimulatorConfig | None = None,
        tick_source: TickSource | None = None,
        rng: np.random.Generator | None = None,
    ):
        """Initialize simulator.

        Args:
            competitors: Field in declaration order (may be empty)
            conditions: Race conditions
            on_frame: Called with each tick's Frame
            on_complete: Called once with the ranked results
            config: Simulator configuration. Uses defaults if None.
            tick_source: Tick scheduler. Uses a ManualTickSource if None.
            rng: Random generator. Seeded from config if None.
        """
        self.config = config or SimulatorConfig()
        self.model = PerformanceModel(self.config.performance)
        self.world = RaceWorld(competitors, conditions, self.config.tick_duration_s)
        self.tick_source = tick_source or ManualTickSource()

        self._rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self._on_frame = on_frame
        self._on_complete = on_complete

        self._state = SimulatorState.IDLE
        self._frames: Deque[Frame] = deque(maxlen=self.config.frame_history_size)
        self._results: Optional[List[RaceResult]] = None

    @property
    def state(self) -> SimulatorState:
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if simulation is running."""
        return self._state is SimulatorState.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._state is SimulatorState.FINISHED

    @property
    def tick(self) -> int:
        """Ticks elapsed."""
        return self.world.tick

    @property
    def time(self) -> float:
        """Simulated time in seconds."""
        return self.world.time

    @property
    def latest_frame(self) -> Optional[Frame]:
        return self._frames[-1] if self._frames else None

    @property
    def frames(self) -> List[Frame]:
        """Recent frames, oldest first."""
        return list(self._frames)

    @property
    def results(self) -> Optional[List[RaceResult]]:
        """Ranked results once finished."""
        return list(self._results) if self._results is not None else None

    def start(self) -> None:
        """Start or resume the race.

        No-op while running or after the race has finished.
        """
        if self._state in (SimulatorState.RUNNING, SimulatorState.FINISHED):
            return

        if self.world.competitor_count == 0:
            logger.info("Race started with an empty field")
            self._complete()
            return

        resumed = self._state is SimulatorState.STOPPED
        self._state = SimulatorState.RUNNING
        logger.info(
            "Race %s: %d competitors, %s",
            "resumed" if resumed else "started",
            self.world.competitor_count,
            self.world.conditions.describe(),
        )
        self.tick_source.request_tick(self._run_tick)

    def stop(self) -> None:
        """Stop the race, keeping accumulated progress."""
        if self._state is not SimulatorState.RUNNING:
            return

        self._state = SimulatorState.STOPPED
        self.tick_source.cancel()
        logger.info("Race stopped at tick %d", self.world.tick)

    def step(self) -> Optional[Frame]:
        """Advance the race by one tick.

        Returns:
            The emitted Frame, or None when not running
        """
        if self._state is not SimulatorState.RUNNING:
            return None

        tick = self.world.advance_tick()
        conditions = self.world.conditions

        for _, competitor, progress in self.world.entries():
            if progress.finished:
                continue

            draw = float(self._rng.random())
            velocity = self.model.velocity(competitor, progress.position, conditions, draw)

            progress.velocity = velocity
            progress.position = self.model.advance(progress.position, velocity)
            progress.stamina = self.model.effective_stamina(competitor, progress.position)

            if progress.position >= 1.0:
                progress.position = 1.0
                progress.finished = True
                progress.finish_tick = tick
                logger.debug("%s finished at tick %d", progress.competitor_id, tick)

        frame = self.world.make_frame()
        self._frames.append(frame)

        if self._on_frame is not None:
            self._on_frame(frame)

        if self.world.all_finished:
            self._complete()

        return frame

    def get_current_positions(self) -> List[CompetitorProgress]:
        """Get copies of every competitor's progress.

        Returns:
            Progress records in field order
        """
        return self.world.snapshot()

    def get_progress(self) -> float:
        """Mean position of the field in [0, 1]."""
        return self.world.mean_position()

    def get_state(self) -> dict:
        """Get complete simulation state.

        Returns:
            Dictionary containing simulation state
        """
        return {
            "config": {
                "tick_duration_s": self.config.tick_duration_s,
                "distance_scale": self.model.config.distance_scale,
                "seed": self.config.seed,
            },
            "state": self._state.value,
            "world": self.world.get_state(),
            "leader": self.world.leader(),
        }

    def _run_tick(self) -> None:
        if self._state is not SimulatorState.RUNNING:
            return

        try:
            self.step()
        except Exception:
            # No next tick gets scheduled; leave the race resumable via start()
            if self._state is SimulatorState.RUNNING:
                self._state = SimulatorState.STOPPED
                self.tick_source.cancel()
                logger.warning("Race stopped at tick %d: observer raised", self.world.tick)
            raise

        if self._state is SimulatorState.RUNNING:
            self.tick_source.request_tick(self._run_tick)

    def _complete(self) -> None:
        if self._results is not None:
            return

        self._state = SimulatorState.FINISHED
        self.tick_source.cancel()
        self._results = rank_results(self.world)

        winner = self._results[0].competitor_id if self._results else None
        logger.info("Race finished after %d ticks, winner: %s", self.world.tick, winner)

        if self._on_complete is not None:
            self._on_complete(list(self._results))
