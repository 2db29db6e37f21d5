"""
Telemetry module - Race data collection and export.

This module contains:
- RaceRecorder: Records frames into per-competitor channels
- TelemetryChannel: Individual data channel
- RaceExporter: Export frames, results and channels
"""

from turfsprint.telemetry.recorder import RaceRecorder, RecorderConfig
from turfsprint.telemetry.channel import TelemetryChannel, ChannelConfig
from turfsprint.telemetry.exporter import RaceExporter, ExporterConfig

__all__ = [
    "RaceRecorder",
    "RecorderConfig",
    "TelemetryChannel",
    "ChannelConfig",
    "RaceExporter",
    "ExporterConfig",
]
