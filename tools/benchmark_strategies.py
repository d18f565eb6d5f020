"""
Benchmark script comparing solving strategies on the trap simulator.

Runs each strategy until it has solved a fixed number of simulated puzzles
and reports how many failed attempts it needed per puzzle.

Usage:
    python tools/benchmark_strategies.py [puzzles] [size]

Examples:
    python tools/benchmark_strategies.py            # 50 puzzles, sizes 3-5
    python tools/benchmark_strategies.py 200 4      # 200 puzzles, 4x4 only
"""

import sys
import time
import logging
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trapsolver.difficulty import FixedSizeHint, SkillDifficultyHint
from trapsolver.episode_runner import EpisodeRunner, EpisodeTiming
from trapsolver.oracle import SimulatedTrapOracle
from trapsolver.settings import default_settings, policy_settings
from trapsolver.solver import SearchPolicy, create_strategy, get_strategy_names

# Safety valve so a strategy that never converges cannot hang the benchmark
MAX_EPISODES_PER_PUZZLE = 200


def benchmark(strategy_name: str, puzzles: int, size: int = None, path_source: str = "library", seed: int = 1):
    """Run one strategy against freshly seeded simulated puzzles."""
    if size:
        hint = FixedSizeHint(size)
        oracle = SimulatedTrapOracle(size=size, path_source=path_source, seed=seed)
    else:
        hint = SkillDifficultyHint(105.0)
        oracle = SimulatedTrapOracle(sizes=[3, 4, 5], path_source=path_source, seed=seed)

    policy = SearchPolicy.from_settings(policy_settings(default_settings(), strategy_name))
    strategy = create_strategy(strategy_name, policy=policy)
    runner = EpisodeRunner(oracle, strategy, hint=hint, timing=EpisodeTiming.instant(), sleep=lambda _: None)

    episodes_per_puzzle = []
    start = time.perf_counter()
    while oracle.puzzles_solved < puzzles:
        before = runner.stats.episodes
        solved_before = oracle.puzzles_solved
        while oracle.puzzles_solved == solved_before:
            runner.run_episode()
            if runner.stats.episodes - before >= MAX_EPISODES_PER_PUZZLE:
                print(f"  [{strategy_name}] gave up on a puzzle after {MAX_EPISODES_PER_PUZZLE} episodes")
                return None
        episodes_per_puzzle.append(runner.stats.episodes - before)
    elapsed = time.perf_counter() - start

    attempts = np.array(episodes_per_puzzle)
    stats = runner.stats
    print(f"\n  Strategy: {strategy_name}")
    print(f"    Puzzles solved:       {oracle.puzzles_solved}")
    print(f"    Episodes:             {stats.episodes} ({stats.summary()})")
    print(f"    Attempts per puzzle:  mean={attempts.mean():.2f} median={np.median(attempts):.0f} max={attempts.max()}")
    print(f"    First-try solves:     {int((attempts == 1).sum())}/{len(attempts)}")
    print(f"    Moves submitted:      {stats.moves_submitted}")
    print(f"    Exhausted episodes:   {stats.exhausted}")
    print(f"    Time:                 {elapsed*1000:.1f}ms")
    return attempts


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)

    puzzles = int(sys.argv[1]) if len(sys.argv) > 1 else 50
    size = int(sys.argv[2]) if len(sys.argv) > 2 else None

    print(f"{'='*60}")
    print(f"Benchmark: {puzzles} puzzles, size={size or '3-5'}")
    print(f"{'='*60}")

    for name in get_strategy_names():
        benchmark(name, puzzles, size)
