"""
Race conditions - Track surface, weather and distance for one race.

Defines:
- Surface categories (firm, soft, heavy)
- Weather categories (clear, rain, muddy)
- Immutable per-race conditions shared by the whole field
"""

from dataclasses import dataclass
from enum import Enum


class TrackSurface(Enum):
    """Track going categories, ordered from fastest to slowest."""
    FIRM = "firm"
    SOFT = "soft"
    HEAVY = "heavy"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Weather(Enum):
    """Weather categories."""
    CLEAR = "clear"
    RAIN = "rain"
    MUDDY = "muddy"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class RaceConditions:
    """Environmental conditions for a single race.

    Invariant for the lifetime of one simulation run.
    """
    track_surface: TrackSurface = TrackSurface.FIRM
    weather: Weather = Weather.CLEAR
    distance_m: float = 1200.0  # Nominal distance, informational

    def __post_init__(self):
        """Coerce string categories and validate distance."""
        if not isinstance(self.track_surface, TrackSurface):
            object.__setattr__(self, "track_surface", TrackSurface(self.track_surface))
        if not isinstance(self.weather, Weather):
            object.__setattr__(self, "weather", Weather(self.weather))
        if self.distance_m <= 0:
            raise ValueError(f"distance_m must be positive, got {self.distance_m}")

    def describe(self) -> str:
        """Short display string, e.g. 'Firm • Rain • 1400m'."""
        return (
            f"{self.track_surface.label} • {self.weather.label} • "
            f"{self.distance_m:.0f}m"
        )

    def get_state(self) -> dict:
        """Get conditions as a plain dictionary.

        Returns:
            Dictionary of condition values
        """
        return {
            "track_surface": self.track_surface.value,
            "weather": self.weather.value,
            "distance_m": self.distance_m,
        }
