"""
Test script for the oracle layer

Covers:
1. Simulated trap oracle (accept / solve / reject / lost)
2. Fault injection (open failures, stalls)
3. Random path generation
4. Oracle factory

Usage:
    python tests/test_oracle.py
    pytest tests/test_oracle.py
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trapsolver.oracle import (
    MSG_FAIL,
    MSG_SUCCESS,
    Oracle,
    OracleTimeout,
    SimulatedTrapOracle,
    available_oracles,
    create_oracle,
    random_path,
    register_oracle,
)
from trapsolver.solver import Move, Outcome, PathLibrary

R, D, L, U = Move.RIGHT, Move.DOWN, Move.LEFT, Move.UP


def banner(title: str) -> None:
    print("\n" + "="*60)
    print(f"TEST: {title}")
    print("="*60)


def test_simulator_solves_fixed_path():
    """Correct moves are accepted, the last one solves and re-arms."""
    banner("Simulator solve")

    oracle = SimulatedTrapOracle(path="RDDR")
    handle = oracle.open(timeout_sec=1.0)
    assert handle is not None

    for move in (R, D, D):
        result = oracle.submit(handle, move, timeout_sec=1.0)
        assert result.outcome is Outcome.ACCEPTED
        assert result.handle is not None and result.handle != handle
        handle = result.handle

    result = oracle.submit(handle, R, timeout_sec=1.0)
    assert result.outcome is Outcome.SOLVED
    assert result.handle is None
    assert result.message == MSG_SUCCESS
    assert oracle.puzzles_solved == 1
    assert oracle.puzzles_armed == 2
    assert oracle.submissions == 4

    print("  [PASS] Simulator solve")


def test_simulator_rejects_and_keeps_puzzle():
    """A wrong move resets the trap; the puzzle stays the same."""
    banner("Simulator reject")

    oracle = SimulatedTrapOracle(path="RDDR")
    handle = oracle.open(timeout_sec=1.0)
    handle = oracle.submit(handle, R, timeout_sec=1.0).handle

    result = oracle.submit(handle, R, timeout_sec=1.0)
    assert result.outcome is Outcome.REJECTED
    assert result.handle is None
    assert result.message == MSG_FAIL
    assert oracle.puzzles_armed == 1

    # Starts over from the first tile
    handle = oracle.open(timeout_sec=1.0)
    assert oracle.submit(handle, R, timeout_sec=1.0).outcome is Outcome.ACCEPTED

    print("  [PASS] Simulator reject")


def test_simulator_new_puzzle_on_reject():
    """Optionally re-arm after every rejection."""
    banner("Simulator new puzzle on reject")

    oracle = SimulatedTrapOracle(size=4, seed=3, new_puzzle_on_reject=True)
    handle = oracle.open(timeout_sec=1.0)
    wrong = next(m for m in (U, L, R, D) if m is not oracle.path[0])
    assert oracle.submit(handle, wrong, timeout_sec=1.0).outcome is Outcome.REJECTED
    assert oracle.puzzles_armed == 2

    print("  [PASS] Simulator new puzzle on reject")


def test_simulator_stale_handle_is_lost():
    """Old or missing handles cannot be used."""
    banner("Simulator stale handle")

    oracle = SimulatedTrapOracle(path="RDDR")
    first = oracle.open(timeout_sec=1.0)
    second = oracle.submit(first, R, timeout_sec=1.0).handle

    assert oracle.submit(first, D, timeout_sec=1.0).outcome is Outcome.INTERACTION_LOST
    assert oracle.submit(None, D, timeout_sec=1.0).outcome is Outcome.INTERACTION_LOST
    assert oracle.submit(second, D, timeout_sec=1.0).outcome is Outcome.ACCEPTED

    oracle.close(oracle.open(timeout_sec=1.0))
    assert oracle.submit(second, R, timeout_sec=1.0).outcome is Outcome.INTERACTION_LOST

    print("  [PASS] Simulator stale handle")


def test_simulator_fault_injection():
    """Open failures and stalled submissions."""
    banner("Simulator faults")

    oracle = SimulatedTrapOracle(path="RDDR", open_failures=2, stall_every=2)
    assert oracle.open(timeout_sec=1.0) is None
    assert oracle.open(timeout_sec=1.0) is None

    handle = oracle.open(timeout_sec=1.0)
    handle = oracle.submit(handle, R, timeout_sec=1.0).handle
    with pytest.raises(OracleTimeout):
        oracle.submit(handle, D, timeout_sec=0.5)

    # The surface is gone after a stall
    assert oracle.submit(handle, D, timeout_sec=1.0).outcome is Outcome.INTERACTION_LOST

    oracle.configure(stall_every=0)
    handle = oracle.open(timeout_sec=1.0)
    assert oracle.submit(handle, R, timeout_sec=1.0).outcome is Outcome.ACCEPTED

    with pytest.raises(ValueError):
        oracle.configure(colour="blue")

    print("  [PASS] Simulator faults")


def test_simulator_library_source():
    """Library puzzles come from the path library with the drawn size."""
    banner("Simulator library source")

    library = PathLibrary.from_tile_paths()
    oracle = SimulatedTrapOracle(sizes=[3, 4, 5], seed=11, library=library)
    seen_sizes = set()
    for _ in range(30):
        assert oracle.path in [p.moves for p in library.all_candidates(oracle.size)]
        seen_sizes.add(oracle.size)
        handle = oracle.open(timeout_sec=1.0)
        for move in oracle.path:
            result = oracle.submit(handle, move, timeout_sec=1.0)
            handle = result.handle
        assert result.outcome is Outcome.SOLVED

    print(f"  Sizes seen: {sorted(seen_sizes)}")
    assert seen_sizes <= {3, 4, 5}
    assert len(seen_sizes) > 1
    assert oracle.puzzles_solved == 30

    with pytest.raises(ValueError):
        SimulatedTrapOracle(path_source="dream")

    print("  [PASS] Simulator library source")


def test_random_path_is_valid_walk():
    """Random paths are self-avoiding walks to the far corner."""
    banner("random_path")

    rng = np.random.default_rng(2024)
    lengths = []
    for size in (3, 4, 5):
        for _ in range(25):
            moves = random_path(size, rng)
            position = (0, 0)
            visited = {position}
            for move in moves:
                position = move.apply(position)
                assert 0 <= position[0] < size and 0 <= position[1] < size
                assert position not in visited
                visited.add(position)
            assert position == (size - 1, size - 1)
            lengths.append(len(moves))

    print(f"  Lengths: min={min(lengths)} max={max(lengths)}")
    assert min(lengths) >= 4

    print("  [PASS] random_path")


def test_oracle_factory():
    """Lazy registry, unknown types and custom registration."""
    banner("Oracle factory")

    assert "simulated" in available_oracles()
    oracle = create_oracle("simulated", size=4, seed=1)
    assert isinstance(oracle, SimulatedTrapOracle)
    assert oracle.name == "simulated"
    assert oracle.size == 4

    with pytest.raises(ValueError):
        create_oracle("telegraph")

    with pytest.raises(TypeError):
        register_oracle("broken", dict)

    class AlwaysLostOracle(Oracle):
        @property
        def name(self):
            return "lost"

        def open(self, timeout_sec):
            return None

        def submit(self, handle, move, timeout_sec):
            raise AssertionError("never opened")

    register_oracle("lost", AlwaysLostOracle)
    assert "lost" in available_oracles()
    assert create_oracle("lost").open(1.0) is None

    print("  [PASS] Oracle factory")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# ORACLE TESTS")
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
