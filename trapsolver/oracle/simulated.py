"""
Simulated Trap Oracle

In-process stand-in for the game's trap disarm mechanism. Hides a single
path in an NxN grid and answers moves the way the game does: a wrong move
resets the trap to its start, a solve arms a new trap.
"""

import itertools
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..solver.move import Move, moves_to_codes, parse_moves
from ..solver.outcome import Outcome
from ..solver.path_library import PathLibrary
from .base import Oracle, OracleTimeout
from .result import InteractionHandle, SubmitResult

logger = logging.getLogger(__name__)

MSG_SUCCESS = "You successfully disarm the trap!"
MSG_FAIL = "You fail to disarm the trap and reset it."

PATH_SOURCES = ("library", "random")

_MOVES: Tuple[Move, ...] = (Move.UP, Move.RIGHT, Move.DOWN, Move.LEFT)


def random_path(size: int, rng: np.random.Generator) -> Tuple[Move, ...]:
    """
    Random self-avoiding walk from (0, 0) to (size-1, size-1).

    Uses randomised depth-first search with backtracking.

    Args:
        size: Grid side length
        rng: numpy random generator

    Returns:
        Move sequence of the walk
    """
    goal = (size - 1, size - 1)
    positions = [(0, 0)]
    visited = {(0, 0)}
    moves: List[Move] = []
    options = [list(rng.permutation(len(_MOVES)))]

    while options:
        if positions[-1] == goal:
            return tuple(moves)

        if not options[-1]:
            options.pop()
            visited.discard(positions.pop())
            if moves:
                moves.pop()
            continue

        move = _MOVES[int(options[-1].pop())]
        x, y = move.apply(positions[-1])
        if 0 <= x < size and 0 <= y < size and (x, y) not in visited:
            visited.add((x, y))
            positions.append((x, y))
            moves.append(move)
            options.append(list(rng.permutation(len(_MOVES))))

    raise RuntimeError(f"No path to {goal} in a {size}x{size} grid")


class SimulatedTrapOracle(Oracle):
    """
    Simulated oracle with a hidden path.

    The same puzzle is kept across rejected attempts (the trap resets to
    its start tile) and replaced after it is solved.

    Example:
        oracle = SimulatedTrapOracle(size=4, seed=7)
        handle = oracle.open(timeout_sec=5.0)
        result = oracle.submit(handle, Move.RIGHT, timeout_sec=1.0)
    """

    def __init__(self, size: int = 3, sizes: Optional[Sequence[int]] = None,
                 path_source: str = "library", seed: Optional[int] = None,
                 path=None, library: Optional[PathLibrary] = None,
                 new_puzzle_on_reject: bool = False, open_failures: int = 0,
                 stall_every: int = 0):
        """
        Initialize the simulator.

        Args:
            size: Grid size for every puzzle (ignored if sizes is given)
            sizes: Grid sizes to draw each new puzzle from
            path_source: "library" (known paths) or "random" (random walks)
            seed: Seed for the numpy random generator
            path: Fixed hidden path ("RDDR" or moves); overrides path_source
            library: Path library for the "library" source
            new_puzzle_on_reject: Arm a new puzzle after every rejection
            open_failures: Number of initial open() calls that fail
            stall_every: Every Nth submission times out (0 disables)
        """
        if path_source not in PATH_SOURCES:
            raise ValueError(f"Unknown path source: {path_source}. Available: {', '.join(PATH_SOURCES)}")

        self.sizes = list(sizes) if sizes else [size]
        self.path_source = path_source
        self.new_puzzle_on_reject = new_puzzle_on_reject
        self.open_failures = open_failures
        self.stall_every = stall_every

        self._rng = np.random.default_rng(seed)
        self._fixed_path = parse_moves(path) if path is not None else None
        self._library = library
        self._serials = itertools.count(1)

        self._handle: Optional[InteractionHandle] = None
        self._size = self.sizes[0]
        self._path: Tuple[Move, ...] = ()
        self._step = 0

        self.submissions = 0
        self.puzzles_armed = 0
        self.puzzles_solved = 0

        self._arm_new_puzzle()

    @property
    def name(self) -> str:
        return "simulated"

    @property
    def size(self) -> int:
        """True grid size of the armed puzzle."""
        return self._size

    @property
    def path(self) -> Tuple[Move, ...]:
        """True hidden path of the armed puzzle."""
        return self._path

    def configure(self, **kwargs) -> None:
        for key in ("new_puzzle_on_reject", "open_failures", "stall_every"):
            if key in kwargs:
                setattr(self, key, kwargs.pop(key))
        if kwargs:
            raise ValueError(f"Unknown simulator options: {', '.join(kwargs)}")

    def _arm_new_puzzle(self) -> None:
        self.puzzles_armed += 1
        self._step = 0

        if self._fixed_path is not None:
            self._path = self._fixed_path
            return

        self._size = int(self._rng.choice(self.sizes))
        if self.path_source == "random":
            self._path = random_path(self._size, self._rng)
        else:
            if self._library is None:
                self._library = PathLibrary.from_tile_paths()
            candidates = self._library.all_candidates(self._size)
            if not candidates:
                raise ValueError(f"Library has no {self._size}x{self._size} paths")
            self._path = candidates[int(self._rng.integers(len(candidates)))].moves

        logger.debug(f"Armed {self._size}x{self._size} puzzle: {moves_to_codes(self._path)}")

    def _new_handle(self) -> InteractionHandle:
        self._handle = InteractionHandle(serial=next(self._serials))
        return self._handle

    def open(self, timeout_sec: float) -> Optional[InteractionHandle]:
        if self.open_failures > 0:
            self.open_failures -= 1
            logger.debug("Simulated open failure")
            return None
        self._step = 0
        return self._new_handle()

    def submit(self, handle: Optional[InteractionHandle], move: Move,
               timeout_sec: float) -> SubmitResult:
        self.submissions += 1

        if handle is None or handle != self._handle:
            return SubmitResult(Outcome.INTERACTION_LOST, None, "Trap mechanism not found")

        if self.stall_every and self.submissions % self.stall_every == 0:
            self._handle = None
            raise OracleTimeout(f"No answer within {timeout_sec:.1f}s")

        if move is self._path[self._step]:
            self._step += 1
            if self._step == len(self._path):
                self._handle = None
                self.puzzles_solved += 1
                self._arm_new_puzzle()
                return SubmitResult(Outcome.SOLVED, None, MSG_SUCCESS)
            return SubmitResult(Outcome.ACCEPTED, self._new_handle())

        self._step = 0
        self._handle = None
        if self.new_puzzle_on_reject:
            self._arm_new_puzzle()
        return SubmitResult(Outcome.REJECTED, None, MSG_FAIL)

    def close(self, handle: Optional[InteractionHandle]) -> None:
        if handle is not None and handle == self._handle:
            self._handle = None
