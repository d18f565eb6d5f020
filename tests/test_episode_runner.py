"""
Test script for the episode loop

Covers:
1. End-to-end episodes against the simulator (both strategies)
2. Unavailable oracle, timeouts and lost interactions
3. Loop control and error containment
4. Session statistics, timing and settings

Usage:
    python tests/test_episode_runner.py
    pytest tests/test_episode_runner.py
"""

import json
import sys
import tempfile
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trapsolver.difficulty import FixedSizeHint, SkillDifficultyHint
from trapsolver.episode_runner import EpisodeReport, EpisodeRunner, EpisodeTiming, SessionStats
from trapsolver.oracle import InteractionHandle, Oracle, SimulatedTrapOracle, SubmitResult
from trapsolver.settings import (
    DEFAULT_SETTINGS,
    default_settings,
    load_settings,
    policy_settings,
    save_settings,
)
from trapsolver.solver import (
    CandidateEliminationStrategy,
    CoordinateSearchStrategy,
    EpisodeStatus,
    Move,
    Outcome,
    PathLibrary,
    SearchPolicy,
    create_strategy,
    parse_moves,
)

R, D, L, U = Move.RIGHT, Move.DOWN, Move.LEFT, Move.UP


def banner(title: str) -> None:
    print("\n" + "="*60)
    print(f"TEST: {title}")
    print("="*60)


class ScriptedOracle(Oracle):
    """Oracle that replays a fixed list of submit results."""

    def __init__(self, results, fail_first_submit=False):
        self.results = list(results)
        self.fail_first_submit = fail_first_submit
        self.submitted = []
        self.opened = 0
        self.closed = 0

    @property
    def name(self):
        return "scripted"

    def open(self, timeout_sec):
        self.opened += 1
        return InteractionHandle(serial=self.opened)

    def submit(self, handle, move, timeout_sec):
        if self.fail_first_submit:
            self.fail_first_submit = False
            raise RuntimeError("surface crashed")
        self.submitted.append(move)
        return self.results.pop(0)

    def close(self, handle):
        self.closed += 1


class SleepRecorder:
    """Stands in for time.sleep."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def _runner(oracle, strategy, hint=None, timing=None):
    sleep = SleepRecorder()
    runner = EpisodeRunner(oracle, strategy, hint=hint or FixedSizeHint(3),
                           timing=timing or EpisodeTiming.instant(), sleep=sleep)
    return runner, sleep


def test_library_episode_solves():
    """Library strategy solves RDDR in four submissions."""
    banner("Runner: library solve")

    oracle = SimulatedTrapOracle(path="RDDR")
    strategy = CandidateEliminationStrategy(library=PathLibrary.from_sequences({3: ["RDDR", "DDRR"]}))
    runner, _ = _runner(oracle, strategy)

    report = runner.run_episode()
    assert report.status is EpisodeStatus.SOLVED
    assert report.moves == list(parse_moves("RDDR"))
    assert report.outcomes == [Outcome.ACCEPTED] * 3 + [Outcome.SOLVED]
    assert runner.stats.solved == 1
    assert runner.stats.episodes == 1
    assert runner.stats.moves_submitted == 4
    assert oracle.puzzles_solved == 1

    print("  [PASS] Runner: library solve")


def test_library_episode_recovers_after_rejection():
    """The eliminated candidate is not tried again on the next attempt."""
    banner("Runner: library rejection")

    oracle = SimulatedTrapOracle(path="DDRR")
    strategy = CandidateEliminationStrategy(library=PathLibrary.from_sequences({3: ["RDDR", "DDRR"]}))
    runner, _ = _runner(oracle, strategy)

    first = runner.run_episode()
    assert first.status is EpisodeStatus.REJECTED
    assert first.moves == [R]

    second = runner.run_episode()
    assert second.status is EpisodeStatus.SOLVED
    assert second.moves == list(parse_moves("DDRR"))
    assert runner.stats.summary() == "Solved=1 Failed=1 (50% success)"

    print("  [PASS] Runner: library rejection")


def test_coordinate_learns_across_episodes():
    """Coordinate search solves, then repeats the solve from its hint."""
    banner("Runner: coordinate learning")

    oracle = SimulatedTrapOracle(path="DDRR")
    strategy = CoordinateSearchStrategy(policy=SearchPolicy(keep_branch_history=True))
    runner, _ = _runner(oracle, strategy)

    stats = runner.run(max_episodes=4)
    assert stats.episodes == 4
    assert stats.solved == 2
    assert stats.rejected == 2

    assert runner.last_report.moves == list(parse_moves("DDRR"))
    paths = strategy.learned_paths
    assert len(paths) == 1
    assert paths[0].moves == parse_moves("DDRR")
    assert paths[0].count == 2

    print("  [PASS] Runner: coordinate learning")


def test_replayed_prefix_is_accepted_again():
    """Replaying a confirmed prefix against the same puzzle is accepted."""
    banner("Runner: replay idempotence")

    oracle = SimulatedTrapOracle(path="DDRR")
    strategy = CoordinateSearchStrategy(policy=SearchPolicy(keep_branch_history=True))
    runner, _ = _runner(oracle, strategy)

    runner.run_episode()                    # R rejected
    report = runner.run_episode()           # D accepted, R rejected
    assert report.moves == [D, R]
    assert strategy.confirmed == [D]

    report = runner.run_episode()
    assert report.moves[0] is D
    assert report.outcomes[0] is Outcome.ACCEPTED
    assert report.status is EpisodeStatus.SOLVED

    print("  [PASS] Runner: replay idempotence")


def test_unavailable_oracle_is_retried():
    """A failed open() is counted, waited on and retried."""
    banner("Runner: unavailable")

    oracle = SimulatedTrapOracle(path="RRDD", open_failures=2)
    timing = EpisodeTiming(cooldown_sec=0.0, fail_wait_sec=0.0, success_wait_sec=0.0,
                           unavailable_retry_sec=3.0)
    runner, sleep = _runner(oracle, CoordinateSearchStrategy(), timing=timing)

    stats = runner.run(max_episodes=1)
    assert stats.unavailable == 2
    assert stats.episodes == 1
    assert stats.solved == 1
    assert sleep.calls.count(3.0) == 2

    print("  [PASS] Runner: unavailable")


def test_timeout_counts_as_lost():
    """A stalled submit ends the episode as a lost interaction."""
    banner("Runner: timeout")

    oracle = SimulatedTrapOracle(path="RRDD", stall_every=1)
    strategy = CoordinateSearchStrategy()
    runner, _ = _runner(oracle, strategy)

    report = runner.run_episode()
    assert report.status is EpisodeStatus.REJECTED
    assert report.interaction_lost
    assert report.outcomes == [Outcome.INTERACTION_LOST]
    assert runner.stats.lost == 1
    assert runner.stats.rejected == 0
    assert runner.stats.failed == 1

    print("  [PASS] Runner: timeout")


def test_missing_handle_is_lost_without_submit():
    """No handle after an accepted move means the surface is gone."""
    banner("Runner: missing handle")

    oracle = ScriptedOracle([SubmitResult(Outcome.ACCEPTED, None)])
    runner, _ = _runner(oracle, CoordinateSearchStrategy())

    report = runner.run_episode()
    assert oracle.submitted == [R]
    assert report.outcomes == [Outcome.ACCEPTED, Outcome.INTERACTION_LOST]
    assert report.moves == [R, R]
    assert runner.stats.lost == 1
    assert oracle.closed == 1

    print("  [PASS] Runner: missing handle")


def test_exhausted_episode():
    """A library that runs out of moves ends the episode as exhausted."""
    banner("Runner: exhausted")

    oracle = SimulatedTrapOracle(path="RDDR")
    strategy = CandidateEliminationStrategy(library=PathLibrary.from_sequences({3: ["RD"]}))
    runner, _ = _runner(oracle, strategy)

    report = runner.run_episode()
    assert report.status is EpisodeStatus.EXHAUSTED
    assert report.moves == [R, D]
    assert runner.stats.exhausted == 1
    assert runner.stats.failed == 1

    print("  [PASS] Runner: exhausted")


def test_episode_errors_do_not_stop_loop():
    """An exception in one cycle is logged and the loop carries on."""
    banner("Runner: error containment")

    oracle = ScriptedOracle([SubmitResult(Outcome.SOLVED, None)], fail_first_submit=True)
    runner, sleep = _runner(oracle, CoordinateSearchStrategy())

    stats = runner.run(max_episodes=1)
    assert stats.episodes == 1
    assert stats.solved == 1
    assert oracle.opened == 2
    assert len(sleep.calls) >= 2
    assert not runner.is_running()

    print("  [PASS] Runner: error containment")


def test_aborted_episode_closes_handle_and_is_counted():
    """A crash mid-episode still releases the surface and shows in the tallies."""
    banner("Runner: aborted episode")

    oracle = ScriptedOracle([], fail_first_submit=True)
    runner, _ = _runner(oracle, CoordinateSearchStrategy())

    try:
        runner.run_episode()
    except RuntimeError:
        pass
    else:
        raise AssertionError("episode should have raised")

    assert oracle.opened == 1
    assert oracle.closed == 1
    assert runner.stats.errors == 1
    assert runner.stats.episodes == 0

    print("  [PASS] Runner: aborted episode")


def test_coordinate_converges_with_settings_policy():
    """Coordinate search built from the default settings solves a fixed puzzle."""
    banner("Runner: coordinate from settings")

    settings = default_settings()
    policy = SearchPolicy.from_settings(policy_settings(settings, "coordinate"))
    assert policy.keep_branch_history is True
    assert SearchPolicy.from_settings(policy_settings(settings, "library")).keep_branch_history is False

    oracle = SimulatedTrapOracle(path="RDRD")
    strategy = create_strategy("coordinate", policy=policy)
    runner, _ = _runner(oracle, strategy)

    stats = runner.run(max_episodes=5)
    assert stats.rejected == 1
    assert stats.solved == 4
    assert strategy.learned_paths[0].moves == parse_moves("RDRD")

    # Without carried branch memory the same wrong move repeats forever
    oracle = SimulatedTrapOracle(path="RDRD")
    runner, _ = _runner(oracle, CoordinateSearchStrategy(policy=SearchPolicy()))
    assert runner.run(max_episodes=10).solved == 0

    print("  [PASS] Runner: coordinate from settings")


def test_application_builds_converging_coordinate_strategy():
    """The CLI wiring applies the coordinate policy overrides."""
    banner("Application setup")

    import main

    with tempfile.TemporaryDirectory() as tmp:
        config = str(Path(tmp) / "config.json")
        app = main.Application(main.parse_args(["-s", "coordinate", "--size", "3", "--fast", "-c", config]))
        app.setup()
        assert isinstance(app.runner.strategy, CoordinateSearchStrategy)
        assert app.runner.strategy.policy.keep_branch_history is True
        assert app.runner.timing == EpisodeTiming.instant()

        app = main.Application(main.parse_args(["-s", "library", "--keep-branches", "-c", config]))
        app.setup()
        assert app.runner.strategy.policy.keep_branch_history is True
        assert not Path(config).exists()

    print("  [PASS] Application setup")


def test_request_stop_finishes_current_episode():
    """Stopping from inside a wait ends the loop after that episode."""
    banner("Runner: request_stop")

    oracle = SimulatedTrapOracle(path="RRDD")
    runner = None

    def stop_on_first_wait(seconds):
        runner.request_stop()

    runner = EpisodeRunner(oracle, CoordinateSearchStrategy(), hint=FixedSizeHint(3),
                           timing=EpisodeTiming.instant(), sleep=stop_on_first_wait)
    stats = runner.run()
    assert stats.episodes == 1
    assert not runner.is_running()

    print("  [PASS] Runner: request_stop")


def test_waits_follow_outcome():
    """Success and failure use their own waits."""
    banner("Runner: waits")

    timing = EpisodeTiming(cooldown_sec=0.25, fail_wait_sec=3.5, success_wait_sec=8.5)
    oracle = SimulatedTrapOracle(path="DDRR")
    strategy = CandidateEliminationStrategy(library=PathLibrary.from_sequences({3: ["RDDR", "DDRR"]}))
    runner, sleep = _runner(oracle, strategy, timing=timing)

    runner.run(max_episodes=2)
    assert sleep.calls == [3.5, 0.25, 8.5, 0.25]

    print("  [PASS] Runner: waits")


def test_session_stats():
    """Tallies, failure total and summary line."""
    banner("SessionStats")

    stats = SessionStats()
    assert stats.summary() == "Solved=0 Failed=0 (0% success)"

    stats.record(EpisodeReport(EpisodeStatus.SOLVED, [R, D], [Outcome.ACCEPTED, Outcome.SOLVED]))
    stats.record(EpisodeReport(EpisodeStatus.REJECTED, [R], [Outcome.REJECTED]))
    stats.record(EpisodeReport(EpisodeStatus.REJECTED, [D], [Outcome.INTERACTION_LOST]))
    stats.record(EpisodeReport(EpisodeStatus.EXHAUSTED, [], []))

    assert stats.episodes == 4
    assert (stats.solved, stats.rejected, stats.lost, stats.exhausted) == (1, 1, 1, 1)
    assert stats.failed == 3
    assert stats.moves_submitted == 4
    assert stats.summary() == "Solved=1 Failed=3 (25% success)"

    print("  [PASS] SessionStats")


def test_timing_from_settings():
    """Millisecond settings convert to second timings."""
    banner("EpisodeTiming")

    timing = EpisodeTiming.from_settings(default_settings())
    assert timing == EpisodeTiming()
    assert timing.fail_wait_sec == 3.5
    assert timing.success_wait_sec == 8.5

    timing = EpisodeTiming.from_settings({"timing": {"cooldown_ms": 1000}})
    assert timing.cooldown_sec == 1.0
    assert timing.submit_timeout_sec == 1.0

    instant = EpisodeTiming.instant()
    assert instant.fail_wait_sec == 0.0 and instant.success_wait_sec == 0.0

    print("  [PASS] EpisodeTiming")


def test_settings_roundtrip():
    """Saved settings load back, merged over the defaults."""
    banner("Settings")

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "config.json"
        assert load_settings(path) == DEFAULT_SETTINGS

        path.write_text(json.dumps({"strategy_name": "coordinate", "timing": {"fail_wait_ms": 100}}))
        settings = load_settings(path)
        assert settings["strategy_name"] == "coordinate"
        assert settings["timing"]["fail_wait_ms"] == 100
        assert settings["timing"]["success_wait_ms"] == 8500
        assert settings["skill"] == DEFAULT_SETTINGS["skill"]

        settings["skill"] = 101.0
        save_settings(settings, path)
        assert load_settings(path)["skill"] == 101.0

        path.write_text("{not json")
        assert load_settings(path) == DEFAULT_SETTINGS

    # Defaults are never shared
    copy = default_settings()
    copy["timing"]["cooldown_ms"] = 1
    assert DEFAULT_SETTINGS["timing"]["cooldown_ms"] == 250

    print("  [PASS] Settings")


def test_skill_hint_drives_simulated_session():
    """A full session with the default library and skill-based sizes."""
    banner("Runner: skill session")

    oracle = SimulatedTrapOracle(sizes=[3, 4], seed=5)
    runner, _ = _runner(oracle, CandidateEliminationStrategy(), hint=SkillDifficultyHint(85.0))

    runner.run(max_episodes=60)
    print(f"  {runner.stats.summary()}")
    assert runner.stats.solved >= 3
    assert runner.stats.exhausted == 0
    assert runner.stats.lost == 0

    print("  [PASS] Runner: skill session")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# EPISODE RUNNER TESTS")
    print("#"*60)

    tests = [obj for name, obj in sorted(globals().items()) if name.startswith("test_") and callable(obj)]
    failed = 0
    for test in tests:
        try:
            test()
        except AssertionError as e:
            failed += 1
            print(f"  [FAIL] {test.__name__}: {e}")

    print("\n" + "="*60)
    print(f"SUMMARY: {len(tests) - failed}/{len(tests)} passed")
    print("="*60)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
