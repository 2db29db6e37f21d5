"""
Telemetry channel - Time series of one measurement for one competitor.

Provides:
- Bounded sample storage
- Running statistics
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque
import numpy as np


@dataclass
class ChannelConfig:
    """Configuration for a telemetry channel."""
    name: str = "unnamed"
    unit: str = ""
    min_value: float = float('-inf')
    max_value: float = float('inf')
    precision: int = 4
    buffer_size: int = 10000


class TelemetryChannel:
    """Single telemetry data channel.

    Statistics cover the samples currently held in the buffer.
    """

    def __init__(self, config: ChannelConfig | None = None, name: str = "channel"):
        """Initialize channel.

        Args:
            config: Channel configuration
            name: Channel name (used if config not provided)
        """
        if config is None:
            config = ChannelConfig(name=name)
        self.config = config

        self._times: Deque[float] = deque(maxlen=config.buffer_size)
        self._values: Deque[float] = deque(maxlen=config.buffer_size)

    @property
    def name(self) -> str:
        """Channel name."""
        return self.config.name

    @property
    def count(self) -> int:
        """Number of buffered samples."""
        return len(self._values)

    @property
    def min_value(self) -> float:
        return float(min(self._values)) if self._values else 0.0

    @property
    def max_value(self) -> float:
        return float(max(self._values)) if self._values else 0.0

    @property
    def mean(self) -> float:
        """Mean of buffered values."""
        return float(np.mean(self._values)) if self._values else 0.0

    @property
    def last_value(self) -> float:
        """Most recent value."""
        return self._values[-1] if self._values else 0.0

    def record(self, time: float, value: float) -> None:
        """Record a new value.

        Args:
            time: Timestamp
            value: Value to record
        """
        value = float(np.clip(value, self.config.min_value, self.config.max_value))
        self._times.append(time)
        self._values.append(value)

    def get_values(self) -> np.ndarray:
        return np.array(self._values, dtype=float)

    def get_times(self) -> np.ndarray:
        return np.array(self._times, dtype=float)

    def clear(self) -> None:
        """Clear all recorded data."""
        self._times.clear()
        self._values.clear()

    def get_state(self) -> dict:
        """Get channel state.

        Returns:
            Dictionary with channel statistics
        """
        if not self._values:
            return {"name": self.name, "unit": self.config.unit, "count": 0}

        p = self.config.precision
        return {
            "name": self.name,
            "unit": self.config.unit,
            "count": self.count,
            "min": round(self.min_value, p),
            "max": round(self.max_value, p),
            "mean": round(self.mean, p),
            "last": round(self.last_value, p),
        }
