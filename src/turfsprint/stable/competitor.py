"""
Competitor - Immutable stat sheet for one horse in one race.
"""

from dataclasses import dataclass

from turfsprint.track.conditions import TrackSurface


ABILITY_MIN = 0.0
ABILITY_MAX = 100.0

ABILITY_FIELDS = ("top_speed", "acceleration", "stamina", "consistency")


@dataclass(frozen=True)
class Competitor:
    """Ability sheet for a single competitor.

    Abilities are normalized to a 0-100 scale. The simulator only
    reads these values; history updates happen downstream.
    """
    competitor_id: str
    top_speed: float = 80.0
    acceleration: float = 80.0
    stamina: float = 80.0
    consistency: float = 80.0
    track_preference: TrackSurface = TrackSurface.FIRM
    weather_sensitivity: float = 1.0  # Scales weather penalties
    name: str = ""

    def __post_init__(self):
        """Validate abilities and coerce the surface preference."""
        if not isinstance(self.track_preference, TrackSurface):
            object.__setattr__(
                self, "track_preference", TrackSurface(self.track_preference)
            )
        for attr in ABILITY_FIELDS:
            value = getattr(self, attr)
            if not ABILITY_MIN <= value <= ABILITY_MAX:
                raise ValueError(
                    f"{attr} must be within [{ABILITY_MIN:.0f}, {ABILITY_MAX:.0f}], "
                    f"got {value} for {self.competitor_id!r}"
                )
        if self.weather_sensitivity < 0:
            raise ValueError("weather_sensitivity must be non-negative")
        if not self.name:
            object.__setattr__(self, "name", self.competitor_id)

    @property
    def rating(self) -> float:
        """Mean of the four abilities."""
        return (self.top_speed + self.acceleration + self.stamina + self.consistency) / 4.0

    def get_state(self) -> dict:
        """Get stat sheet as a plain dictionary.

        Returns:
            Dictionary of competitor values
        """
        return {
            "competitor_id": self.competitor_id,
            "name": self.name,
            "top_speed": self.top_speed,
            "acceleration": self.acceleration,
            "stamina": self.stamina,
            "consistency": self.consistency,
            "track_preference": self.track_preference.value,
            "weather_sensitivity": self.weather_sensitivity,
        }
