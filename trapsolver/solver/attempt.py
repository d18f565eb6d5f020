"""
Attempt State Module - Mutable per-episode state.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .move import Move, Position
from .outcome import EpisodePhase


@dataclass
class AttemptState:
    """
    Everything the solver knows about the current episode only.

    A new instance is created at every episode boundary; nothing here
    outlives the episode unless a strategy copies it out explicitly.

    Attributes:
        believed_size: Current estimate of the grid side length
        phase: Episode state machine phase
        step: Number of accepted moves so far
        sequence: Moves accepted so far, in order
        position: Current (x, y), starts at (0, 0)
        visited: Positions reached this episode
        branch_history: Moves already tried from each position
        replay_queue: Retained moves still to be replayed
        candidate_counts: Candidate set size before each decision
    """
    believed_size: int
    phase: EpisodePhase = EpisodePhase.START
    step: int = 0
    sequence: List[Move] = field(default_factory=list)
    position: Position = (0, 0)
    visited: Set[Position] = field(default_factory=lambda: {(0, 0)})
    branch_history: Dict[Position, Set[Move]] = field(default_factory=dict)
    replay_queue: List[Move] = field(default_factory=list)
    candidate_counts: List[int] = field(default_factory=list)

    def advance(self, move: Move) -> Position:
        """
        Commit an accepted move.

        Args:
            move: Move the oracle accepted

        Returns:
            The new position
        """
        self.sequence.append(move)
        self.step += 1
        self.position = move.apply(self.position)
        self.visited.add(self.position)
        return self.position

    def tried_at(self, position: Optional[Position] = None) -> Set[Move]:
        """Moves already tried from a position (default: current)."""
        key = self.position if position is None else position
        return self.branch_history.setdefault(key, set())

    def mark_tried(self, move: Move, position: Optional[Position] = None) -> None:
        """Record that a move was attempted from a position."""
        self.tried_at(position).add(move)

    def fits(self, position: Optional[Position] = None) -> bool:
        """True if a position lies within the believed bounds."""
        x, y = self.position if position is None else position
        return 0 <= x < self.believed_size and 0 <= y < self.believed_size

    @property
    def is_replaying(self) -> bool:
        return self.phase is EpisodePhase.REPLAY
