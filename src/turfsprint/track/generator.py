"""
Conditions generator - Random race conditions for scheduled races.
"""

from dataclasses import dataclass
import numpy as np

from turfsprint.track.conditions import RaceConditions, TrackSurface, Weather


@dataclass
class GeneratorConfig:
    """Configuration for random race conditions."""
    min_distance_m: int = 1000
    max_distance_m: int = 2000  # Exclusive

    # Random seed (None for random)
    seed: int | None = None

    def __post_init__(self):
        if self.min_distance_m <= 0:
            raise ValueError("min_distance_m must be positive")
        if self.max_distance_m <= self.min_distance_m:
            raise ValueError("max_distance_m must be greater than min_distance_m")


class ConditionsGenerator:
    """Random race conditions generator.

    Every surface and weather category is equally likely; the
    distance is a whole number of metres in the configured range.

    Usage:
        generator = ConditionsGenerator()
        conditions = generator.generate()
    """

    def __init__(self, config: GeneratorConfig | None = None):
        """Initialize generator.

        Args:
            config: Generator configuration. Uses defaults if None.
        """
        self.config = config or GeneratorConfig()
        self._rng = np.random.default_rng(self.config.seed)

    def generate(self) -> RaceConditions:
        """Generate random race conditions.

        Returns:
            New RaceConditions
        """
        surfaces = list(TrackSurface)
        weathers = list(Weather)

        surface = surfaces[int(self._rng.integers(len(surfaces)))]
        weather = weathers[int(self._rng.integers(len(weathers)))]
        distance = int(self._rng.integers(
            self.config.min_distance_m, self.config.max_distance_m
        ))

        return RaceConditions(
            track_surface=surface,
            weather=weather,
            distance_m=float(distance),
        )

    def generate_with_seed(self, seed: int) -> RaceConditions:
        """Generate conditions with a specific seed.

        Args:
            seed: Random seed

        Returns:
            Generated conditions
        """
        self._rng = np.random.default_rng(seed)
        return self.generate()
