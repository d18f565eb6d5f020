"""
Base Strategy Module - Abstract base class for solving strategies.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..difficulty import DifficultyHint, FixedSizeHint
from .attempt import AttemptState
from .move import Move
from .outcome import EpisodePhase, EpisodeStatus, Outcome
from .policy import SearchPolicy

logger = logging.getLogger(__name__)


class SolverStrategy(ABC):
    """
    Abstract base class for all solving strategies.

    A strategy owns its belief store for the whole process lifetime and a
    fresh AttemptState for every episode. The episode loop drives it with
    begin_episode(), then alternates select_move() and integrate() until a
    terminal status comes back. After a terminal status the attempt state
    is already reset for the next episode.

    Subclasses implement _enter(), _select() and _integrate() and define
    name and description class attributes.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description
        policy: Heuristic knobs (exploration order, size bounds)
    """
    name: str = "base"
    description: str = "Base strategy"

    def __init__(self, policy: Optional[SearchPolicy] = None):
        self.policy = policy or SearchPolicy()
        self._hint: DifficultyHint = FixedSizeHint(
            self.policy.min_grid_size,
            allowed=list(range(self.policy.min_grid_size, self.policy.max_grid_size + 1)),
        )
        self._attempt: Optional[AttemptState] = None
        self.last_status: Optional[EpisodeStatus] = None

    @property
    def attempt(self) -> Optional[AttemptState]:
        """Current episode state (None before the first episode)."""
        return self._attempt

    def begin_episode(self, hint: Optional[DifficultyHint] = None) -> AttemptState:
        """
        Start a new episode with fresh attempt state.

        Args:
            hint: Difficulty hint for this puzzle (keeps the previous one if None)

        Returns:
            The new AttemptState
        """
        if hint is not None:
            self._hint = hint
        self._attempt = self._new_attempt()
        self._enter(self._attempt)
        return self._attempt

    def select_move(self) -> Optional[Move]:
        """
        Choose the next move to submit.

        Returns:
            Move to submit, or None if the episode is exhausted (no move
            is consistent with the evidence). In that case the attempt
            state has already been reset.
        """
        attempt = self._require_attempt()
        if attempt.phase is EpisodePhase.START:
            self._enter(attempt)

        move = self._select(attempt)
        if move is None:
            attempt.phase = EpisodePhase.EXHAUSTED
            self._finish(EpisodeStatus.EXHAUSTED)
        return move

    def integrate(self, move: Move, outcome: Outcome) -> EpisodeStatus:
        """
        Apply the oracle's outcome for a submitted move.

        Args:
            move: Move that was submitted
            outcome: What the oracle reported

        Returns:
            CONTINUE, or the terminal status of the episode
        """
        attempt = self._require_attempt()
        if attempt.phase is EpisodePhase.START:
            self._enter(attempt)

        status = self._integrate(attempt, move, outcome)
        if status.is_terminal:
            attempt.phase = _TERMINAL_PHASES[status]
            self._finish(status)
        return status

    def snapshot(self) -> Dict[str, Any]:
        """Observable state for logging and tests."""
        attempt = self._attempt
        return {
            "strategy": self.name,
            "step": attempt.step if attempt else 0,
            "believed_size": attempt.believed_size if attempt else None,
        }

    @abstractmethod
    def _enter(self, attempt: AttemptState) -> None:
        """Move a START attempt into its first working phase."""
        pass

    @abstractmethod
    def _select(self, attempt: AttemptState) -> Optional[Move]:
        """Strategy-specific move selection (None means exhausted)."""
        pass

    @abstractmethod
    def _integrate(self, attempt: AttemptState, move: Move, outcome: Outcome) -> EpisodeStatus:
        """Strategy-specific outcome integration."""
        pass

    def _new_attempt(self) -> AttemptState:
        size = self.policy.clamp_size(self._hint.expected_size())
        return AttemptState(believed_size=size)

    def _finish(self, status: EpisodeStatus) -> None:
        """Record a terminal status and discard the episode state."""
        self.last_status = status
        logger.debug(f"Episode finished: {status.name}")
        self._attempt = self._new_attempt()

    def _require_attempt(self) -> AttemptState:
        if self._attempt is None:
            raise RuntimeError("No active episode. Call begin_episode() first.")
        return self._attempt


_TERMINAL_PHASES = {
    EpisodeStatus.SOLVED: EpisodePhase.SOLVED,
    EpisodeStatus.REJECTED: EpisodePhase.REJECTED,
    EpisodeStatus.EXHAUSTED: EpisodePhase.EXHAUSTED,
}
