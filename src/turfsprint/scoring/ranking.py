"""
Ranking - Final placings for a completed race.

Every finisher sits at exactly 1.0, so position alone cannot order the
field. Placings are decided by the tick each competitor finished on,
then by field order within the same tick.
"""

from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from turfsprint.simulation.world import RaceWorld


@dataclass(frozen=True)
class RaceResult:
    """Final placing of one competitor."""
    competitor_id: str
    rank: int
    time: float            # Simulated seconds elapsed when the race ended
    final_velocity: float
    finish_tick: Optional[int]
    position: float = 1.0

    def get_state(self) -> dict:
        return {
            "competitor_id": self.competitor_id,
            "rank": self.rank,
            "time": self.time,
            "final_velocity": self.final_velocity,
            "finish_tick": self.finish_tick,
            "position": self.position,
        }


def rank_results(world: "RaceWorld") -> List[RaceResult]:
    """Build ranked results from the world state.

    Sort key is (position desc, finish tick asc, field index asc).
    Competitors that never finished sort after all finishers.

    Args:
        world: Race world, normally with every competitor finished

    Returns:
        Results ordered by rank, ranks 1..N
    """
    never = world.tick + 1

    def sort_key(entry):
        index, _, progress = entry
        finish_tick = progress.finish_tick if progress.finish_tick is not None else never
        return (-progress.position, finish_tick, index)

    ordered = sorted(world.entries(), key=sort_key)

    # Elapsed simulated time at race end, shared by the whole field
    elapsed = world.tick * world.tick_duration_s

    results = []
    for rank, (_, _, progress) in enumerate(ordered, start=1):
        results.append(RaceResult(
            competitor_id=progress.competitor_id,
            rank=rank,
            time=elapsed,
            final_velocity=progress.velocity,
            finish_tick=progress.finish_tick,
            position=progress.position,
        ))

    return results
