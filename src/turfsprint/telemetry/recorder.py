"""
Race recorder - Frame observer that records per-competitor telemetry.

Provides:
- Position, velocity and stamina channels per competitor
- Lead change tracking
- Summary statistics
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from turfsprint.simulation.world import Frame
from turfsprint.telemetry.channel import TelemetryChannel, ChannelConfig


STANDARD_CHANNELS = {
    "position": ChannelConfig("position", "", 0.0, 1.0, 4),
    "velocity": ChannelConfig("velocity", "pts", 0.0, float('inf'), 3),
    "stamina": ChannelConfig("stamina", "pts", 0.0, 100.0, 3),
}


@dataclass
class RecorderConfig:
    """Recorder configuration."""
    channels: List[str] | None = None  # Channels to record (None = all)
    buffer_size: int = 100000          # Per-channel buffer size


class RaceRecorder:
    """Records frames from a race into telemetry channels.

    Pass record as the simulator's frame observer, or call it from
    an observer that does other work.

    Usage:
        recorder = RaceRecorder()
        sim = RaceSimulator(field, conditions, on_frame=recorder.record)
    """

    def __init__(self, config: RecorderConfig | None = None):
        """Initialize recorder.

        Args:
            config: Recorder configuration
        """
        self.config = config or RecorderConfig()
        self._channel_names = self.config.channels or list(STANDARD_CHANNELS.keys())
        for name in self._channel_names:
            if name not in STANDARD_CHANNELS:
                raise ValueError(f"unknown channel {name!r}")

        self._channels: Dict[str, Dict[str, TelemetryChannel]] = {}
        self._order: List[str] = []
        self._lead_changes: List[Tuple[int, str]] = []
        self._frame_count: int = 0
        self._last_frame: Optional[Frame] = None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def competitor_ids(self) -> List[str]:
        """Recorded competitors in field order."""
        return list(self._order)

    @property
    def lead_changes(self) -> List[Tuple[int, str]]:
        """(tick, new leader) pairs, including the first leader."""
        return list(self._lead_changes)

    @property
    def last_frame(self) -> Optional[Frame]:
        return self._last_frame

    def record(self, frame: Frame) -> None:
        """Record one frame.

        Args:
            frame: Frame emitted by the simulator
        """
        for progress in frame.positions:
            channels = self._channels.get(progress.competitor_id)
            if channels is None:
                channels = self._create_channels(progress.competitor_id)

            for name, channel in channels.items():
                channel.record(frame.time, getattr(progress, name))

        if frame.leader is not None:
            if not self._lead_changes or self._lead_changes[-1][1] != frame.leader:
                self._lead_changes.append((frame.tick, frame.leader))

        self._frame_count += 1
        self._last_frame = frame

    __call__ = record

    def get_channel(self, competitor_id: str, name: str) -> Optional[TelemetryChannel]:
        """Get one competitor's channel.

        Args:
            competitor_id: Competitor ID
            name: Channel name

        Returns:
            Channel if recorded
        """
        return self._channels.get(competitor_id, {}).get(name)

    def mean_velocity(self, competitor_id: str, moving_only: bool = True) -> float:
        """Mean recorded velocity for a competitor.

        Args:
            competitor_id: Competitor ID
            moving_only: Skip samples taken after the competitor finished

        Returns:
            Mean velocity, 0 if nothing recorded
        """
        velocity = self.get_channel(competitor_id, "velocity")
        if velocity is None or velocity.count == 0:
            return 0.0
        if not moving_only:
            return velocity.mean

        values = velocity.get_values()
        position = self.get_channel(competitor_id, "position")
        if position is not None:
            # First sample at 1.0 is the finishing tick; later ones repeat it
            positions = position.get_values()
            finished = positions >= 1.0
            if finished.any():
                values = values[: int(finished.argmax()) + 1]
        return float(values.mean())

    def clear(self) -> None:
        """Clear all recorded data."""
        self._channels.clear()
        self._order.clear()
        self._lead_changes.clear()
        self._frame_count = 0
        self._last_frame = None

    def get_state(self) -> dict:
        """Get recorder summary.

        Returns:
            Dictionary with per-competitor channel statistics
        """
        return {
            "frames": self._frame_count,
            "lead_changes": len(self._lead_changes),
            "competitors": {
                cid: {name: ch.get_state() for name, ch in self._channels[cid].items()}
                for cid in self._order
            },
        }

    def _create_channels(self, competitor_id: str) -> Dict[str, TelemetryChannel]:
        channels = {}
        for name in self._channel_names:
            base = STANDARD_CHANNELS[name]
            channels[name] = TelemetryChannel(ChannelConfig(
                name=f"{competitor_id}.{name}",
                unit=base.unit,
                min_value=base.min_value,
                max_value=base.max_value,
                precision=base.precision,
                buffer_size=self.config.buffer_size,
            ))
        self._channels[competitor_id] = channels
        self._order.append(competitor_id)
        return channels
