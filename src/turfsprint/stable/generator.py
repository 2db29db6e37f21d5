"""
Stable generator - Random competitor fields for races.

Generates:
- Unique horse names
- Ability sheets in the 70-100 band
- Surface preference and weather sensitivity
"""

from dataclasses import dataclass
from typing import List
import numpy as np

from turfsprint.stable.competitor import Competitor
from turfsprint.track.conditions import TrackSurface


BASE_NAMES = (
    "Thunder Strike", "Midnight Star", "Golden Dash", "Silver Bullet",
    "Storm Runner", "Lightning Bolt", "Fire Storm", "Wind Walker",
    "Shadow Dancer", "Sun Chaser", "Moon Walker", "Crystal Clear",
    "Diamond Dust", "Emerald Blaze", "Ruby Red", "Sapphire Sky",
    "Amber Glow", "Topaz Trail", "Pearl Flash", "Jade Jumper",
)


@dataclass
class GeneratorConfig:
    """Configuration for random competitor generation."""
    # Abilities are whole numbers in [min_ability, max_ability)
    min_ability: int = 70
    max_ability: int = 100

    # Weather sensitivity in [min, max)
    min_weather_sensitivity: float = 0.9
    max_weather_sensitivity: float = 1.1

    id_prefix: str = "horse"

    # Random seed (None for random)
    seed: int | None = None

    def __post_init__(self):
        if not 0 <= self.min_ability < self.max_ability <= 100:
            raise ValueError("ability range must satisfy 0 <= min < max <= 100")
        if not 0 <= self.min_weather_sensitivity <= self.max_weather_sensitivity:
            raise ValueError("invalid weather sensitivity range")


class StableGenerator:
    """Random field generator.

    Names are drawn without replacement from BASE_NAMES within one
    call to generate(); once exhausted, numbered names are used.

    Usage:
        generator = StableGenerator()
        field = generator.generate(8)
    """

    def __init__(self, config: GeneratorConfig | None = None):
        """Initialize generator.

        Args:
            config: Generator configuration. Uses defaults if None.
        """
        self.config = config or GeneratorConfig()
        self._rng = np.random.default_rng(self.config.seed)
        self._next_id: int = 0

    def generate(self, count: int) -> List[Competitor]:
        """Generate a field of competitors.

        Args:
            count: Number of competitors

        Returns:
            List of new competitors
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        names = list(BASE_NAMES)
        surfaces = list(TrackSurface)
        field = []

        for _ in range(count):
            competitor_id = f"{self.config.id_prefix}-{self._next_id}"
            self._next_id += 1

            if names:
                base = names.pop(int(self._rng.integers(len(names))))
            else:
                base = f"Runner {self._next_id}"
            name = f"{base} {int(self._rng.integers(100))}"

            field.append(Competitor(
                competitor_id=competitor_id,
                name=name,
                top_speed=self._ability(),
                acceleration=self._ability(),
                stamina=self._ability(),
                consistency=self._ability(),
                track_preference=surfaces[int(self._rng.integers(len(surfaces)))],
                weather_sensitivity=float(self._rng.uniform(
                    self.config.min_weather_sensitivity,
                    self.config.max_weather_sensitivity,
                )),
            ))

        return field

    def generate_with_seed(self, seed: int, count: int) -> List[Competitor]:
        """Generate a field with a specific seed.

        Args:
            seed: Random seed
            count: Number of competitors

        Returns:
            List of new competitors
        """
        self._rng = np.random.default_rng(seed)
        return self.generate(count)

    def _ability(self) -> float:
        return float(self._rng.integers(self.config.min_ability, self.config.max_ability))
