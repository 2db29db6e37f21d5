"""
World - Race state owned by the simulator.

Manages:
- The ordered competitor field and the race conditions
- One progress record per competitor, in field order
- Tick count and simulated time
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np

from turfsprint.stable.competitor import Competitor
from turfsprint.track.conditions import RaceConditions


@dataclass
class CompetitorProgress:
    """Mutable progress of one competitor."""
    competitor_id: str
    position: float = 0.0
    velocity: float = 0.0
    stamina: float = 0.0
    finished: bool = False
    finish_tick: Optional[int] = None

    def copy(self) -> "CompetitorProgress":
        return replace(self)


@dataclass(frozen=True)
class Frame:
    """Snapshot emitted after one tick."""
    tick: int
    time: float
    positions: Tuple[CompetitorProgress, ...]
    leader: Optional[str]


class RaceWorld:
    """State container for one race.

    Progress is stored in a list parallel to the competitor field so
    iteration order always matches declaration order, with an
    id -> index lookup for direct access.
    """

    def __init__(
        self,
        competitors: Sequence[Competitor],
        conditions: RaceConditions,
        tick_duration_s: float,
    ):
        """Initialize world.

        Args:
            competitors: Field in declaration order
            conditions: Race conditions
            tick_duration_s: Simulated seconds per tick
        """
        self.conditions = conditions
        self.tick_duration_s = tick_duration_s

        self._competitors: List[Competitor] = list(competitors)
        self._progress: List[CompetitorProgress] = []
        self._index: Dict[str, int] = {}

        for i, competitor in enumerate(self._competitors):
            if competitor.competitor_id in self._index:
                raise ValueError(f"duplicate competitor id {competitor.competitor_id!r}")
            self._index[competitor.competitor_id] = i
            self._progress.append(CompetitorProgress(
                competitor_id=competitor.competitor_id,
                stamina=competitor.stamina,
            ))

        self._tick: int = 0

    @property
    def tick(self) -> int:
        """Number of ticks elapsed."""
        return self._tick

    @property
    def time(self) -> float:
        """Simulated time in seconds."""
        return self._tick * self.tick_duration_s

    @property
    def competitors(self) -> List[Competitor]:
        return list(self._competitors)

    @property
    def competitor_count(self) -> int:
        return len(self._competitors)

    @property
    def all_finished(self) -> bool:
        """True once every competitor is finished (vacuously for no field)."""
        return all(p.finished for p in self._progress)

    def entries(self) -> List[Tuple[int, Competitor, CompetitorProgress]]:
        """Internal (index, competitor, progress) triples in field order."""
        return [
            (i, competitor, self._progress[i])
            for i, competitor in enumerate(self._competitors)
        ]

    def index_of(self, competitor_id: str) -> int:
        return self._index[competitor_id]

    def get_progress(self, competitor_id: str) -> Optional[CompetitorProgress]:
        """Get a copy of one competitor's progress.

        Args:
            competitor_id: Competitor ID

        Returns:
            Progress copy if found, None otherwise
        """
        i = self._index.get(competitor_id)
        if i is None:
            return None
        return self._progress[i].copy()

    def snapshot(self) -> List[CompetitorProgress]:
        """Defensive copies of every progress record, in field order."""
        return [p.copy() for p in self._progress]

    def leader(self) -> Optional[str]:
        """Competitor with the greatest position; first encountered wins ties."""
        best: Optional[CompetitorProgress] = None
        for p in self._progress:
            if best is None or p.position > best.position:
                best = p
        return best.competitor_id if best else None

    def mean_position(self) -> float:
        if not self._progress:
            return 0.0
        return float(np.mean([p.position for p in self._progress]))

    def advance_tick(self) -> int:
        """Advance the tick counter.

        Returns:
            New tick number
        """
        self._tick += 1
        return self._tick

    def make_frame(self) -> Frame:
        return Frame(
            tick=self._tick,
            time=self.time,
            positions=tuple(self.snapshot()),
            leader=self.leader(),
        )

    def get_state(self) -> dict:
        """Get world state for serialization.

        Returns:
            Dictionary containing world state
        """
        return {
            "tick": self._tick,
            "time": self.time,
            "competitor_count": self.competitor_count,
            "finished_count": sum(1 for p in self._progress if p.finished),
            "mean_position": self.mean_position(),
            "conditions": self.conditions.get_state(),
        }
