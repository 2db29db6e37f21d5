"""
Performance model - Stat-weighted per-tick velocity and position rules.

Provides:
- Base performance from ability weights
- Surface and weather modifiers
- Consistency-scaled random variance
- Late-race stamina fade and standing-start ramp
- Position advance and stamina drain
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from turfsprint.stable.competitor import Competitor
from turfsprint.track.conditions import RaceConditions, TrackSurface, Weather


# Tunable: controls race duration independently of the ability scale
DISTANCE_SCALE = 0.003


def _default_surface_penalties() -> Dict[Tuple[TrackSurface, TrackSurface], float]:
    firm, soft, heavy = TrackSurface.FIRM, TrackSurface.SOFT, TrackSurface.HEAVY
    return {
        (firm, firm): 1.0,
        (firm, soft): 0.95,
        (firm, heavy): 0.9,
        (soft, firm): 0.95,
        (soft, soft): 1.0,
        (soft, heavy): 0.95,
        (heavy, firm): 0.9,
        (heavy, soft): 0.95,
        (heavy, heavy): 1.0,
    }


@dataclass
class PerformanceConfig:
    """Tunable constants of the performance model."""
    # Base performance weights (must sum to 1.0)
    top_speed_weight: float = 0.4
    acceleration_weight: float = 0.3
    stamina_weight: float = 0.3

    # Surface
    preferred_surface_bonus: float = 1.1
    surface_penalties: Dict[Tuple[TrackSurface, TrackSurface], float] = field(
        default_factory=_default_surface_penalties
    )

    # Weather: maximum penalty for a zero-ability competitor
    rain_penalty: float = 0.1       # Keyed to lack of stamina
    muddy_penalty: float = 0.15     # Keyed to lack of acceleration

    # Variance: full range at zero consistency (+/- half of this)
    variance_range: float = 20.0

    # Stamina fade
    fade_start: float = 0.75
    max_fade: float = 0.3

    # Standing-start acceleration
    ramp_length: float = 0.1
    launch_floor: float = 0.1      # Minimum ramp factor at the start line

    # Position and stamina
    distance_scale: float = DISTANCE_SCALE
    stamina_drain: float = 0.3     # Fraction of stamina lost over the course

    def __post_init__(self):
        """Validate configuration."""
        total = self.top_speed_weight + self.acceleration_weight + self.stamina_weight
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"performance weights must sum to 1.0, got {total}")
        if self.distance_scale <= 0:
            raise ValueError("distance_scale must be positive")
        if not 0.0 <= self.fade_start < 1.0:
            raise ValueError("fade_start must be within [0, 1)")
        if not 0.0 < self.ramp_length <= 1.0:
            raise ValueError("ramp_length must be within (0, 1]")
        if not 0.0 < self.launch_floor <= 1.0:
            raise ValueError("launch_floor must be within (0, 1]")
        for name in ("max_fade", "stamina_drain"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must be within [0, 1]")
        if self.variance_range < 0:
            raise ValueError("variance_range must be non-negative")
        for (a, b), value in self.surface_penalties.items():
            if self.surface_penalties.get((b, a), value) != value:
                raise ValueError(f"surface penalty table is not symmetric for {a.value}/{b.value}")


class PerformanceModel:
    """Per-tick update rule for a single competitor.

    Each factor is a separate method so the branches can be
    exercised in isolation; velocity() composes them in order:
    base, surface, weather, variance, fade, ramp, clamp.
    """

    def __init__(self, config: PerformanceConfig | None = None):
        """Initialize model.

        Args:
            config: Model configuration. Uses defaults if None.
        """
        self.config = config or PerformanceConfig()

    def base_performance(self, competitor: Competitor) -> float:
        """Weighted blend of top speed, acceleration and stamina."""
        cfg = self.config
        return (
            competitor.top_speed * cfg.top_speed_weight
            + competitor.acceleration * cfg.acceleration_weight
            + competitor.stamina * cfg.stamina_weight
        )

    def surface_modifier(self, preference: TrackSurface, surface: TrackSurface) -> float:
        """Multiplier for the preferred vs. actual surface."""
        if preference == surface:
            return self.config.preferred_surface_bonus
        return self.config.surface_penalties.get((preference, surface), 1.0)

    def weather_modifier(self, competitor: Competitor, weather: Weather) -> float:
        """Multiplier for the race weather.

        Rain punishes low stamina, mud punishes low acceleration.
        """
        if weather == Weather.RAIN:
            lack = 1.0 - competitor.stamina / 100.0
            penalty = self.config.rain_penalty
        elif weather == Weather.MUDDY:
            lack = 1.0 - competitor.acceleration / 100.0
            penalty = self.config.muddy_penalty
        else:
            return 1.0

        return max(0.0, 1.0 - penalty * lack * competitor.weather_sensitivity)

    def variance(self, competitor: Competitor, draw: float) -> float:
        """Additive random swing from a uniform draw in [0, 1).

        Args:
            competitor: Competitor being updated
            draw: Uniform random value

        Returns:
            Performance points to add, centred on zero
        """
        spread = self.config.variance_range * (1.0 - competitor.consistency / 100.0)
        return (draw - 0.5) * spread

    def fade_factor(self, competitor: Competitor, position: float) -> float:
        """Late-race fade; 1.0 before fade_start."""
        cfg = self.config
        if position < cfg.fade_start:
            return 1.0

        through = min(1.0, (position - cfg.fade_start) / (1.0 - cfg.fade_start))
        susceptibility = 1.0 - competitor.stamina / 200.0  # 0.5 to 1.0
        return 1.0 - through * susceptibility * cfg.max_fade

    def ramp_factor(self, position: float) -> float:
        """Standing-start ramp over the first ramp_length of the course."""
        cfg = self.config
        if position >= cfg.ramp_length:
            return 1.0
        return max(position / cfg.ramp_length, cfg.launch_floor)

    def effective_stamina(self, competitor: Competitor, position: float) -> float:
        """Stamina remaining at a course position."""
        position = min(max(position, 0.0), 1.0)
        return max(0.0, competitor.stamina * (1.0 - position * self.config.stamina_drain))

    def velocity(
        self,
        competitor: Competitor,
        position: float,
        conditions: RaceConditions,
        draw: float,
    ) -> float:
        """Calculate velocity for one tick.

        Args:
            competitor: Competitor being updated
            position: Current normalized position
            conditions: Race conditions
            draw: Uniform random value in [0, 1)

        Returns:
            Non-negative velocity in performance points
        """
        performance = self.base_performance(competitor)
        performance *= self.surface_modifier(
            competitor.track_preference, conditions.track_surface
        )
        performance *= self.weather_modifier(competitor, conditions.weather)

        velocity = performance + self.variance(competitor, draw)
        velocity *= self.fade_factor(competitor, position)
        velocity *= self.ramp_factor(position)

        return max(0.0, velocity)

    def advance(self, position: float, velocity: float) -> float:
        """New position after one tick, clamped to [position, 1]."""
        new_position = position + velocity * self.config.distance_scale
        return min(1.0, max(position, new_position))
