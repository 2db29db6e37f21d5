"""Tests for the race simulator lifecycle, tick loop and ranking."""

import pytest
import numpy as np

from turfsprint.simulation.simulator import RaceSimulator, SimulatorConfig, SimulatorState
from turfsprint.simulation.scheduler import ManualTickSource
from turfsprint.simulation.world import RaceWorld
from turfsprint.scoring.ranking import rank_results
from turfsprint.stable.competitor import Competitor
from turfsprint.track.conditions import RaceConditions, TrackSurface, Weather


def _field():
    return [
        Competitor("horse-1", 90, 85, 90, 80, TrackSurface.FIRM, 1.0),
        Competitor("horse-2", 85, 90, 85, 90, TrackSurface.SOFT, 0.95),
        Competitor("horse-3", 80, 80, 95, 85, TrackSurface.HEAVY, 1.05),
    ]


def _conditions():
    return RaceConditions(TrackSurface.FIRM, Weather.CLEAR, 1200)


def _simulator(competitors=None, seed=7, **kwargs):
    source = ManualTickSource()
    sim = RaceSimulator(
        _field() if competitors is None else competitors,
        _conditions(),
        config=SimulatorConfig(seed=seed),
        tick_source=source,
        **kwargs,
    )
    return sim, source


class TestInitialization:
    """Test simulator construction."""

    def test_initial_positions(self):
        """Every competitor starts at the line, in field order."""
        sim, _ = _simulator()
        positions = sim.get_current_positions()

        assert [p.competitor_id for p in positions] == ["horse-1", "horse-2", "horse-3"]
        for p in positions:
            assert p.position == 0.0
            assert p.velocity == 0.0
            assert not p.finished

    def test_initial_stamina_from_stats(self):
        sim, _ = _simulator()
        assert [p.stamina for p in sim.get_current_positions()] == [90, 85, 95]

    def test_does_not_tick_before_start(self):
        sim, source = _simulator()
        assert sim.state is SimulatorState.IDLE
        assert not source.pending
        assert sim.step() is None
        assert sim.tick == 0

    def test_duplicate_ids_rejected(self):
        field = [Competitor("a"), Competitor("a")]
        with pytest.raises(ValueError):
            RaceSimulator(field, _conditions())


class TestLifecycle:
    """Test start, stop and completion."""

    def test_start_schedules_first_tick(self):
        sim, source = _simulator()
        sim.start()
        assert sim.is_running
        assert source.pending

    def test_runs_to_completion(self):
        results = []
        sim, source = _simulator(on_complete=results.extend)
        sim.start()
        source.run()

        assert sim.state is SimulatorState.FINISHED
        assert not source.pending
        assert len(results) == 3
        assert all(p.finished and p.position == 1.0 for p in sim.get_current_positions())

    def test_double_start_is_noop(self):
        """Starting twice yields the same frames as starting once."""
        once_frames, twice_frames = [], []

        sim_once, source_once = _simulator(on_frame=once_frames.append)
        sim_once.start()
        source_once.run()

        sim_twice, source_twice = _simulator(on_frame=twice_frames.append)
        sim_twice.start()
        sim_twice.start()
        source_twice.run()

        assert len(once_frames) == len(twice_frames)
        assert [f.tick for f in twice_frames] == list(range(1, len(twice_frames) + 1))
        for a, b in zip(once_frames, twice_frames):
            assert a.positions == b.positions

    def test_stop_cancels_ticks_and_keeps_progress(self):
        sim, source = _simulator()
        sim.start()
        for _ in range(3):
            source.step()
        sim.stop()

        assert sim.state is SimulatorState.STOPPED
        assert not source.pending
        assert source.run() == 0
        assert sim.tick == 3
        positions = sim.get_current_positions()
        assert len(positions) == 3
        assert any(p.position > 0 for p in positions)

    def test_resume_after_stop(self):
        results = []
        sim, source = _simulator(on_complete=results.extend)
        sim.start()
        source.step()
        sim.stop()
        sim.start()
        source.run()

        assert sim.is_finished
        assert len(results) == 3

    def test_stop_when_idle_or_finished_is_noop(self):
        sim, source = _simulator()
        sim.stop()
        assert sim.state is SimulatorState.IDLE

        sim.start()
        source.run()
        sim.stop()
        assert sim.state is SimulatorState.FINISHED

    def test_completion_fires_once(self):
        calls = []
        sim, source = _simulator(on_complete=calls.append)
        sim.start()
        source.run()
        sim.start()
        source.run()
        sim.stop()

        assert len(calls) == 1

    def test_completion_after_last_frame(self):
        events = []
        sim, source = _simulator(
            on_frame=lambda frame: events.append(("frame", frame.tick)),
            on_complete=lambda results: events.append(("complete", None)),
        )
        sim.start()
        source.run()

        assert events[-1] == ("complete", None)
        assert events[-2] == ("frame", sim.tick)
        assert [e for e in events if e[0] == "complete"] == [("complete", None)]

    def test_stop_during_final_frame_still_completes(self):
        calls = []
        sim = None

        def on_frame(frame):
            if all(p.finished for p in frame.positions):
                sim.stop()

        source = ManualTickSource()
        sim = RaceSimulator(
            _field(), _conditions(),
            on_frame=on_frame, on_complete=calls.append,
            config=SimulatorConfig(seed=3), tick_source=source,
        )
        sim.start()
        source.run()

        assert len(calls) == 1
        assert sim.is_finished

    def test_observer_error_leaves_race_resumable(self):
        """A failing frame observer stops the race; start() resumes it."""
        frames = []

        def on_frame(frame):
            frames.append(frame.tick)
            if frame.tick == 2 and frames.count(2) == 1:
                raise RuntimeError("renderer failed")

        sim, source = _simulator(on_frame=on_frame)
        sim.start()
        with pytest.raises(RuntimeError):
            source.run()

        assert sim.state is SimulatorState.STOPPED
        assert not source.pending
        assert sim.tick == 2

        sim.start()
        assert source.pending
        source.run()

        assert sim.is_finished
        assert frames == list(range(1, sim.tick + 1))

    def test_missing_observers(self):
        sim, source = _simulator()
        sim.start()
        source.run()
        assert sim.is_finished
        assert len(sim.results) == 3


class TestInvariants:
    """Test per-tick invariants across a full race."""

    def test_monotonic_and_bounded(self):
        frames = []
        sim, source = _simulator(on_frame=frames.append, seed=11)
        sim.start()
        source.run()

        initial = {c.competitor_id: c.stamina for c in _field()}
        previous = {p.competitor_id: p for p in sim.frames[0].positions}
        for frame in frames:
            for p in frame.positions:
                assert 0.0 <= p.position <= 1.0
                assert 0.0 <= p.stamina <= initial[p.competitor_id]
                assert p.velocity >= 0.0
                assert p.position >= previous[p.competitor_id].position
                assert p.stamina <= previous[p.competitor_id].stamina
                previous[p.competitor_id] = p

    def test_finished_set_on_finishing_frame(self):
        frames = []
        sim, source = _simulator(on_frame=frames.append)
        sim.start()
        source.run()

        for result in sim.results:
            frame = frames[result.finish_tick - 1]
            p = next(p for p in frame.positions if p.competitor_id == result.competitor_id)
            assert p.finished
            assert p.position == 1.0
            if result.finish_tick > 1:
                earlier = frames[result.finish_tick - 2]
                q = next(q for q in earlier.positions if q.competitor_id == result.competitor_id)
                assert not q.finished

    def test_leader_has_max_position(self):
        frames = []
        sim, source = _simulator(on_frame=frames.append)
        sim.start()
        source.run()

        for frame in frames:
            best = max(p.position for p in frame.positions)
            leader = next(p for p in frame.positions if p.competitor_id == frame.leader)
            assert leader.position == best

    def test_fade_only_past_three_quarters(self):
        """A variance-free runner holds speed until 0.75, then slows."""
        horse = Competitor("steady", 80, 80, 80, 100, TrackSurface.FIRM)
        frames = []
        sim, source = _simulator([horse], on_frame=frames.append)
        sim.start()
        source.run()

        cruise = 88.0
        previous = 0.0
        for frame in frames:
            p = frame.positions[0]
            if 0.1 <= previous <= 0.75:
                assert p.velocity == pytest.approx(cruise)
            elif previous > 0.75:
                assert p.velocity < cruise
            previous = p.position

    def test_get_current_positions_is_a_copy(self):
        sim, source = _simulator()
        sim.start()
        source.step()

        positions = sim.get_current_positions()
        positions[0].position = 0.99
        positions[0].finished = True

        fresh = sim.get_current_positions()[0]
        assert fresh.position < 0.99
        assert not fresh.finished

    def test_frame_history_bounded(self):
        source = ManualTickSource()
        sim = RaceSimulator(
            _field(), _conditions(),
            config=SimulatorConfig(seed=1, frame_history_size=2),
            tick_source=source,
        )
        sim.start()
        source.run()

        assert len(sim.frames) == 2
        assert sim.latest_frame.tick == sim.tick


class TestResults:
    """Test completion ranking."""

    def test_ranks_are_dense_permutation(self):
        sim, source = _simulator(seed=5)
        sim.start()
        source.run()

        results = sim.results
        assert sorted(r.rank for r in results) == [1, 2, 3]
        assert [r.rank for r in results] == [1, 2, 3]
        assert {r.competitor_id for r in results} == {"horse-1", "horse-2", "horse-3"}

    def test_ranked_by_finish_tick(self):
        sim, source = _simulator(seed=9)
        sim.start()
        source.run()

        ticks = [r.finish_tick for r in sim.results]
        assert ticks == sorted(ticks)

    def test_result_time_and_velocity(self):
        sim, source = _simulator()
        sim.start()
        source.run()

        final = {p.competitor_id: p for p in sim.get_current_positions()}
        for result in sim.results:
            assert result.time == pytest.approx(sim.tick / 60.0)
            assert result.final_velocity == final[result.competitor_id].velocity
            assert result.position == 1.0

    def test_result_time_shared_across_spread_field(self):
        """Finishers on different ticks all report the race-end time."""
        field = [
            Competitor("fast", 100, 100, 100, 100, TrackSurface.FIRM),
            Competitor("slow", 20, 20, 20, 100, TrackSurface.HEAVY),
        ]
        sim, source = _simulator(field)
        sim.start()
        source.run()

        results = sim.results
        assert [r.competitor_id for r in results] == ["fast", "slow"]
        assert results[0].finish_tick < results[1].finish_tick
        assert results[1].finish_tick == sim.tick
        for result in results:
            assert result.time == pytest.approx(sim.tick / 60.0)

    def test_identical_stats_get_distinct_ranks(self):
        field = [Competitor(f"twin-{i}", 80, 80, 80, 80, TrackSurface.FIRM) for i in range(3)]
        sim, source = _simulator(field)
        sim.start()
        source.run()

        assert sim.is_finished
        assert sorted(r.rank for r in sim.results) == [1, 2, 3]

    def test_same_tick_finish_uses_field_order(self):
        """Variance-free twins finish together; field order breaks the tie."""
        field = [Competitor(f"twin-{i}", 80, 80, 80, 100, TrackSurface.FIRM) for i in range(3)]
        sim, source = _simulator(field)
        sim.start()
        source.run()

        results = sim.results
        assert len({r.finish_tick for r in results}) == 1
        assert [r.competitor_id for r in results] == ["twin-0", "twin-1", "twin-2"]
        assert sim.latest_frame.leader == "twin-0"

    def test_rank_results_direct(self):
        world = RaceWorld([Competitor("a"), Competitor("b")], _conditions(), 0.5)
        world.advance_tick()
        world.advance_tick()
        (_, _, a), (_, _, b) = world.entries()
        a.position, a.finished, a.finish_tick = 1.0, True, 2
        b.position, b.finished, b.finish_tick = 1.0, True, 1

        results = rank_results(world)
        assert [r.competitor_id for r in results] == ["b", "a"]
        assert [r.time for r in results] == [1.0, 1.0]
        assert [r.finish_tick for r in results] == [1, 2]

    def test_reproducible_with_seed(self):
        runs = []
        for _ in range(2):
            sim, source = _simulator(seed=1234)
            sim.start()
            source.run()
            runs.append([(r.competitor_id, r.finish_tick) for r in sim.results])
        assert runs[0] == runs[1]

    def test_injected_generator(self):
        sim_a, source_a = _simulator(rng=np.random.default_rng(99))
        sim_b, source_b = _simulator(rng=np.random.default_rng(99), seed=None)
        for sim, source in ((sim_a, source_a), (sim_b, source_b)):
            sim.start()
            source.run()
        assert sim_a.get_current_positions() == sim_b.get_current_positions()


class TestScenarios:
    """Edge-case fields."""

    def test_single_competitor(self):
        sizes = []
        sim, source = _simulator([_field()[0]])
        sim.start()
        while source.step():
            sizes.append(len(sim.get_current_positions()))

        assert set(sizes) == {1}
        assert [r.rank for r in sim.results] == [1]
        assert sim.results[0].competitor_id == "horse-1"

    def test_empty_field(self):
        frames, results = [], []
        sim, source = _simulator([], on_frame=frames.append, on_complete=results.append)

        assert sim.get_progress() == 0.0
        sim.start()
        assert source.run() == 0

        assert sim.get_progress() == 0.0
        assert sim.get_current_positions() == []
        assert frames == []
        assert results == [[]]
        assert sim.is_finished

    def test_all_zero_competitor_finishes(self):
        """Random variance alone carries a zero-ability runner home."""
        horse = Competitor("zero", 0, 0, 0, 0, TrackSurface.FIRM)
        sim, source = _simulator([horse], seed=2)
        sim.start()
        source.run(max_ticks=100_000)

        assert sim.is_finished
        assert sim.results[0].rank == 1

    def test_progress_is_mean_position(self):
        sim, source = _simulator()
        sim.start()
        source.step()
        source.step()

        positions = [p.position for p in sim.get_current_positions()]
        assert sim.get_progress() == pytest.approx(sum(positions) / 3)

        source.run()
        assert sim.get_progress() == pytest.approx(1.0)

    def test_distance_scale_controls_duration(self):
        ticks = []
        for scale in (0.003, 0.0015):
            source = ManualTickSource()
            sim = RaceSimulator(
                [Competitor("steady", 80, 80, 80, 100, TrackSurface.FIRM)],
                _conditions(),
                config=SimulatorConfig(seed=1, distance_scale=scale),
                tick_source=source,
            )
            sim.start()
            source.run()
            ticks.append(sim.tick)
        assert ticks[1] > ticks[0]

    def test_state_dictionary(self):
        sim, _ = _simulator()
        state = sim.get_state()
        assert state["state"] == "idle"
        assert state["world"]["competitor_count"] == 3
        assert state["world"]["conditions"]["track_surface"] == "firm"
