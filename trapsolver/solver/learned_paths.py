"""
Learned Paths Module - Cross-episode memory of solved move sequences.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from .move import Move, format_moves

logger = logging.getLogger(__name__)


@dataclass
class LearnedPath:
    """
    A move sequence that reached the solved outcome.

    Attributes:
        size: Believed grid size when the path was solved
        moves: Full move sequence from start to completion
        count: Number of times this exact sequence solved a puzzle
    """
    size: int
    moves: Tuple[Move, ...]
    count: int = 1

    def next_move(self, step: int):
        """Move at a step index, or None if the path is too short."""
        if 0 <= step < len(self.moves):
            return self.moves[step]
        return None

    def starts_with(self, prefix: Sequence[Move]) -> bool:
        return self.moves[:len(prefix)] == tuple(prefix)

    def __len__(self) -> int:
        return len(self.moves)


class LearnedPathStore:
    """
    Belief store for the coordinate search strategy.

    Holds one LearnedPath per distinct (size, sequence) pair and a
    session-scoped set of failed sequences. A learned path that starts
    with a failed sequence is not offered as a hint until the failed set
    is cleared (after the next solve).

    Example:
        store = LearnedPathStore()
        store.record(3, (Move.RIGHT, Move.DOWN, Move.RIGHT))
        hints = store.query(3, (Move.RIGHT,))
    """

    def __init__(self):
        self._paths: Dict[Tuple[int, Tuple[Move, ...]], LearnedPath] = {}
        self._failed: Set[Tuple[Move, ...]] = set()

    def record(self, size: int, sequence: Iterable[Move]) -> LearnedPath:
        """
        Record a solved sequence.

        Increments the success count of an existing entry, otherwise
        inserts a new one with count 1.

        Args:
            size: Believed grid size at completion
            sequence: Full solved move sequence

        Returns:
            The stored LearnedPath
        """
        moves = tuple(sequence)
        key = (size, moves)
        path = self._paths.get(key)
        if path is None:
            path = LearnedPath(size=size, moves=moves)
            self._paths[key] = path
            logger.info(f"Learned new {size}x{size} path: [{format_moves(moves)}]")
        else:
            path.count += 1
            logger.info(f"Known {size}x{size} path solved again ({path.count}x): [{format_moves(moves)}]")
        return path

    def query(self, size: int, prefix: Sequence[Move]) -> List[LearnedPath]:
        """
        Find learned paths that extend a prefix.

        Args:
            size: Believed grid size
            prefix: Moves accepted so far

        Returns:
            Matching paths strictly longer than the prefix, excluding
            failed ones, most successful first (insertion order on ties)
        """
        prefix = tuple(prefix)
        matches = [
            p for p in self._paths.values()
            if p.size == size
            and len(p.moves) > len(prefix)
            and p.starts_with(prefix)
            and not self.is_failed(p.moves)
        ]
        # sorted() is stable, so equal counts keep insertion order
        matches = sorted(matches, key=lambda p: p.count, reverse=True)
        if matches:
            logger.debug(f"Matched {len(matches)} known path(s) starting with [{format_moves(prefix)}]")
        return matches

    def mark_failed(self, sequence: Iterable[Move]) -> None:
        """Exclude every path starting with this sequence for the session."""
        self._failed.add(tuple(sequence))

    def is_failed(self, moves: Sequence[Move]) -> bool:
        moves = tuple(moves)
        return any(moves[:len(f)] == f for f in self._failed)

    def clear_failed(self) -> None:
        """Forget session failures."""
        if self._failed:
            logger.debug(f"Clearing {len(self._failed)} failed hint(s)")
        self._failed.clear()

    @property
    def failed_sequences(self) -> Set[Tuple[Move, ...]]:
        return set(self._failed)

    @property
    def paths(self) -> List[LearnedPath]:
        """Snapshot of the learned path table, in insertion order."""
        return [LearnedPath(p.size, p.moves, p.count) for p in self._paths.values()]

    def __len__(self) -> int:
        return len(self._paths)
