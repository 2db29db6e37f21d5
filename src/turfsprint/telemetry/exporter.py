"""
Race exporter - Export frames, results and telemetry to files.

Provides:
- CSV export of frame history
- JSON export of results and recorder summary
- NumPy export of recorded channels
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence
from pathlib import Path
import json
import csv
import numpy as np

from turfsprint.simulation.world import Frame
from turfsprint.scoring.ranking import RaceResult
from turfsprint.telemetry.recorder import RaceRecorder
from turfsprint.track.conditions import RaceConditions


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types and enums."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


@dataclass
class ExporterConfig:
    """Exporter configuration."""
    output_dir: str = "./race_data"
    include_metadata: bool = True


class RaceExporter:
    """Export race data to files for analysis in external tools."""

    def __init__(self, config: ExporterConfig | None = None):
        """Initialize exporter.

        Args:
            config: Exporter configuration
        """
        self.config = config or ExporterConfig()

        self._output_path = Path(self.config.output_dir)
        self._output_path.mkdir(parents=True, exist_ok=True)

    def export_frames_csv(
        self,
        frames: Iterable[Frame],
        filename: str = "frames.csv",
    ) -> Path:
        """Export frames to CSV, one row per competitor per frame.

        Args:
            frames: Frames in tick order
            filename: Output filename

        Returns:
            Path to exported file
        """
        output_file = self._output_path / filename

        with open(output_file, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow([
                "tick", "time", "competitor_id", "position",
                "velocity", "stamina", "finished", "leader",
            ])

            for frame in frames:
                for p in frame.positions:
                    writer.writerow([
                        frame.tick,
                        f"{frame.time:.4f}",
                        p.competitor_id,
                        f"{p.position:.6f}",
                        f"{p.velocity:.4f}",
                        f"{p.stamina:.4f}",
                        int(p.finished),
                        int(p.competitor_id == frame.leader),
                    ])

        return output_file

    def export_results_json(
        self,
        results: Sequence[RaceResult],
        conditions: RaceConditions | None = None,
        recorder: RaceRecorder | None = None,
        filename: str = "results.json",
    ) -> Path:
        """Export ranked results to JSON.

        Args:
            results: Ranked results
            conditions: Race conditions for metadata
            recorder: Recorder whose summary is included as metadata
            filename: Output filename

        Returns:
            Path to exported file
        """
        output_file = self._output_path / filename

        data = {"results": [r.get_state() for r in results]}
        if self.config.include_metadata:
            data["metadata"] = {
                "conditions": conditions.get_state() if conditions else None,
                "telemetry": recorder.get_state() if recorder else None,
            }

        with open(output_file, 'w') as f:
            json.dump(data, f, indent=2, cls=NumpyEncoder)

        return output_file

    def export_numpy(
        self,
        recorder: RaceRecorder,
        filename: str = "telemetry.npz",
    ) -> Path:
        """Export recorded channels to a compressed NumPy file.

        Arrays are named '<competitor>.<channel>_times' / '_values'.

        Args:
            recorder: Race recorder with data
            filename: Output filename

        Returns:
            Path to exported file
        """
        output_file = self._output_path / filename

        arrays = {}
        for cid in recorder.competitor_ids:
            for name in ("position", "velocity", "stamina"):
                channel = recorder.get_channel(cid, name)
                if channel is None:
                    continue
                arrays[f"{channel.name}_times"] = channel.get_times()
                arrays[f"{channel.name}_values"] = channel.get_values()

        np.savez_compressed(output_file, **arrays)

        return output_file

    @staticmethod
    def load_results_json(path: str | Path) -> List[dict]:
        """Read results back from an exported JSON file.

        Args:
            path: File written by export_results_json

        Returns:
            List of result dictionaries in rank order
        """
        with open(path) as f:
            return json.load(f)["results"]
