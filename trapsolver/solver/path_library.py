"""
Path Library Module - Fixed candidate paths and the live candidate set.

The library converts known tile-index chains into move sequences once at
startup. A CandidateSet is the subset of the library still consistent with
what the oracle has told us about the current puzzle; it is backed by a
padded numpy move matrix so each elimination is a single vectorised mask.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .move import Move, moves_to_codes, parse_moves
from .path_tables import TILE_PATHS

logger = logging.getLogger(__name__)

# Matrix cells past the end of a path hold this value (button ids start at 1)
NO_MOVE = 0


@dataclass(frozen=True)
class CandidatePath:
    """
    A precomputed path for one grid size.

    Attributes:
        size: Grid side length the path belongs to
        moves: Full move sequence from start to finish
    """
    size: int
    moves: Tuple[Move, ...]

    def __len__(self) -> int:
        return len(self.moves)

    def __str__(self) -> str:
        return f"{self.size}x{self.size}:{moves_to_codes(self.moves)}"


def convert_tile_path(tiles: Sequence[int]) -> Optional[CandidatePath]:
    """
    Convert a row-major tile-index chain into a move sequence.

    The grid size is inferred from the final tile (size = sqrt(last + 1)).

    Args:
        tiles: Tile indices, e.g. [0, 1, 2, 5, 8]

    Returns:
        CandidatePath, or None if the chain is not a valid grid walk
    """
    if len(tiles) < 2:
        logger.warning(f"Tile path too short: {list(tiles)}")
        return None

    size = math.isqrt(tiles[-1] + 1)
    if size * size != tiles[-1] + 1:
        logger.warning(f"Tile path does not end on a square grid corner: {list(tiles)}")
        return None

    moves = []
    for a, b in zip(tiles, tiles[1:]):
        if b == a - size:
            moves.append(Move.UP)
        elif b == a + 1 and a % size != size - 1:
            moves.append(Move.RIGHT)
        elif b == a + size:
            moves.append(Move.DOWN)
        elif b == a - 1 and a % size != 0:
            moves.append(Move.LEFT)
        else:
            logger.warning(f"Non-adjacent step in path: {a} -> {b}")
            return None

    return CandidatePath(size=size, moves=tuple(moves))


class PathLibrary:
    """
    Belief store for the candidate elimination strategy.

    Immutable after construction: one list of CandidatePath per grid size,
    kept in library order.
    """

    def __init__(self, paths_by_size: Mapping[int, Iterable[CandidatePath]]):
        self._paths: Dict[int, Tuple[CandidatePath, ...]] = {
            size: tuple(paths) for size, paths in sorted(paths_by_size.items())
        }

    @classmethod
    def from_tile_paths(cls, tables: Optional[Mapping[int, Iterable[Sequence[int]]]] = None) -> "PathLibrary":
        """
        Build a library from tile-index tables.

        Chains that fail conversion are skipped, as are chains whose
        inferred size disagrees with the table they were listed under.

        Args:
            tables: {size: [tile chain, ...]} (default: built-in tables)
        """
        tables = TILE_PATHS if tables is None else tables
        paths_by_size: Dict[int, List[CandidatePath]] = {}
        for size, chains in tables.items():
            converted = paths_by_size.setdefault(size, [])
            for chain in chains:
                path = convert_tile_path(chain)
                if path is None:
                    continue
                if path.size != size:
                    logger.warning(f"Tile path {list(chain)} is {path.size}x{path.size}, listed under {size}x{size}")
                    continue
                converted.append(path)

        library = cls(paths_by_size)
        logger.info("Loaded paths - " + ", ".join(
            f"{size}x{size}: {count}" for size, count in library.counts().items()
        ))
        return library

    @classmethod
    def from_sequences(cls, sequences: Mapping[int, Iterable]) -> "PathLibrary":
        """
        Build a library from move sequences.

        Args:
            sequences: {size: ["RDDR", ...]} or {size: [[Move, ...], ...]}
        """
        return cls({
            size: [CandidatePath(size=size, moves=parse_moves(seq)) for seq in seqs]
            for size, seqs in sequences.items()
        })

    def all_candidates(self, size: int) -> List[CandidatePath]:
        """Fixed path list for a grid size (empty if unknown)."""
        return list(self._paths.get(size, ()))

    def candidates_for(self, sizes: Iterable[int]) -> List[CandidatePath]:
        """Library paths for several sizes, in size then library order."""
        out: List[CandidatePath] = []
        for size in sizes:
            out.extend(self._paths.get(size, ()))
        return out

    @property
    def sizes(self) -> List[int]:
        return list(self._paths.keys())

    def counts(self) -> Dict[int, int]:
        return {size: len(paths) for size, paths in self._paths.items()}

    def __len__(self) -> int:
        return sum(len(paths) for paths in self._paths.values())


class CandidateSet:
    """
    Live candidate paths for one puzzle.

    Only ever shrinks; a fresh set is built from the library when a new
    puzzle starts.
    """

    def __init__(self, paths: Sequence[CandidatePath]):
        self._paths: List[CandidatePath] = list(paths)
        width = max((len(p) for p in self._paths), default=0)

        self._moves = np.full((len(self._paths), width), NO_MOVE, dtype=np.int8)
        for row, path in enumerate(self._paths):
            self._moves[row, :len(path)] = [m.button_id for m in path.moves]
        self._lengths = np.array([len(p) for p in self._paths], dtype=np.int32)
        self._sizes = np.array([p.size for p in self._paths], dtype=np.int32)

    def _column(self, step: int) -> np.ndarray:
        """Button ids at a step index (NO_MOVE where a path is shorter)."""
        if 0 <= step < self._moves.shape[1]:
            return self._moves[:, step]
        return np.full(len(self._paths), NO_MOVE, dtype=np.int8)

    def _apply(self, keep: np.ndarray) -> Tuple[int, int]:
        before = len(self._paths)
        self._moves = self._moves[keep]
        self._lengths = self._lengths[keep]
        self._sizes = self._sizes[keep]
        self._paths = [p for p, k in zip(self._paths, keep) if k]
        return before, len(self._paths)

    def keep_matching(self, step: int, move: Move) -> Tuple[int, int]:
        """
        Keep only paths whose move at a step equals the given move.

        Returns:
            (size before, size after)
        """
        return self._apply(self._column(step) == move.button_id)

    def eliminate(self, step: int, move: Move) -> Tuple[int, int]:
        """
        Remove every path whose move at a step equals the given move.

        Returns:
            (size before, size after)
        """
        return self._apply(self._column(step) != move.button_id)

    def viable_count(self, step: int) -> int:
        """Number of paths that still have a move at a step index."""
        return int(np.count_nonzero(self._lengths > step))

    def choose(self, step: int, expected_size: Optional[int] = None) -> Optional[CandidatePath]:
        """
        Pick the path to follow at a step index.

        Prefers viable paths of the expected size (falling back to all
        viable paths), then the shortest path, then library order.

        Args:
            step: Current step index
            expected_size: Soft size bias, or None for no bias

        Returns:
            Chosen CandidatePath, or None if no path has a move at step
        """
        viable = self._lengths > step
        if not viable.any():
            return None

        pool = viable
        if expected_size is not None:
            preferred = viable & (self._sizes == expected_size)
            if preferred.any():
                pool = preferred

        # argmin returns the first minimum, which keeps library order on ties
        lengths = np.where(pool, self._lengths, np.iinfo(np.int32).max)
        index = int(np.argmin(lengths))
        logger.debug(
            f"step {step} | expected={expected_size} | pool={int(np.count_nonzero(pool))} "
            f"| chosen {self._paths[index]}"
        )
        return self._paths[index]

    @property
    def paths(self) -> List[CandidatePath]:
        return list(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __bool__(self) -> bool:
        return bool(self._paths)
