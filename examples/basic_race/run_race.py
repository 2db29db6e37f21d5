#!/usr/bin/env python3
"""
Basic Race Example

This example demonstrates how to:
1. Generate a random field and race conditions
2. Run a race with a manually stepped tick source
3. Record telemetry from the frame stream
4. Export frames and results

Run with: python run_race.py
"""

import logging

from turfsprint import RaceSimulator
from turfsprint.stable import StableGenerator
from turfsprint.track import ConditionsGenerator
from turfsprint.simulation import ManualTickSource, SimulatorConfig
from turfsprint.telemetry import RaceRecorder, RaceExporter, ExporterConfig


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    print("=" * 60)
    print("turfsprint Basic Race Example")
    print("=" * 60)

    # Step 1: Field and conditions
    print("\n1. Generating field...")
    field = StableGenerator().generate_with_seed(42, 6)
    conditions = ConditionsGenerator().generate_with_seed(42)

    print(f"   Conditions: {conditions.describe()}")
    for horse in field:
        print(f"   {horse.competitor_id:<8} {horse.name:<20} "
              f"SPD {horse.top_speed:.0f} ACC {horse.acceleration:.0f} "
              f"STA {horse.stamina:.0f} CON {horse.consistency:.0f} "
              f"({horse.track_preference.value})")

    # Step 2: Simulator
    print("\n2. Running race...")
    recorder = RaceRecorder()
    results = []
    source = ManualTickSource()
    sim = RaceSimulator(
        field,
        conditions,
        on_frame=recorder.record,
        on_complete=results.extend,
        config=SimulatorConfig(seed=42),
        tick_source=source,
    )
    sim.start()
    ticks = source.run()

    print(f"   Ticks: {ticks}, simulated time: {sim.time:.2f}s")
    print(f"   Lead changes: {len(recorder.lead_changes)}")

    # Step 3: Results
    print("\n3. Results:")
    names = {horse.competitor_id: horse.name for horse in field}
    for result in results:
        print(f"   {result.rank}. {names[result.competitor_id]:<20} "
              f"{result.time:6.3f}s  final velocity {result.final_velocity:.1f}")

    # Step 4: Export
    print("\n4. Exporting...")
    exporter = RaceExporter(ExporterConfig(output_dir="./race_data"))
    print(f"   {exporter.export_frames_csv(sim.frames)}")
    print(f"   {exporter.export_results_json(results, conditions, recorder)}")

    print("\n" + "=" * 60)
    print("Race complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
