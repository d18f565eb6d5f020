"""
Coordinate Search Strategy - Position tracking with learned-path hints.

Walks the grid from (0, 0), preferring the next move of any previously
solved path that extends the current prefix, and otherwise exploring in a
fixed direction order. Solved paths are remembered with a success count so
reliable paths are suggested first in later episodes.
"""

import logging
from typing import Any, Dict, List, Optional, Set

from ..attempt import AttemptState
from ..base import SolverStrategy
from ..factory import register_strategy
from ..learned_paths import LearnedPath, LearnedPathStore
from ..move import Move, Position, format_moves, legal_moves
from ..outcome import EpisodePhase, EpisodeStatus, Outcome
from ..policy import SearchPolicy

logger = logging.getLogger(__name__)


@register_strategy
class CoordinateSearchStrategy(SolverStrategy):
    """
    Online depth-first search over grid coordinates with learned hints.

    Algorithm (per decision):
        1. Ask the store for learned paths extending the current prefix
           and take the next move of the best one not yet tried here
        2. Otherwise take the first legal, untried move in the
           exploration order (Right, Down, Left, Up by default)
        3. If nothing is legal, grow the believed grid size and retry
        4. At the maximum size with nothing left, the episode is exhausted

    Between rejected attempts of the same puzzle the accepted prefix is
    retained and replayed first, to check the puzzle has not changed.

    Attributes:
        store: Learned paths shared by every episode
    """
    name = "coordinate"
    description = "Coordinate search - learned-path hints, then Right/Down/Left/Up exploration"

    def __init__(self, policy: Optional[SearchPolicy] = None,
                 store: Optional[LearnedPathStore] = None):
        super().__init__(policy)
        self.store = store if store is not None else LearnedPathStore()

        # Retained across rejected attempts of one puzzle
        self._confirmed: List[Move] = []
        self._kept_history: Dict[Position, Set[Move]] = {}

        self._pending_hint: Optional[LearnedPath] = None

    @property
    def confirmed(self) -> List[Move]:
        """Accepted prefix that the next episode will replay."""
        return list(self._confirmed)

    @property
    def learned_paths(self) -> List[LearnedPath]:
        return self.store.paths

    def snapshot(self) -> Dict[str, Any]:
        data = super().snapshot()
        data.update({
            "learned_paths": len(self.store),
            "failed_hints": len(self.store.failed_sequences),
            "confirmed": len(self._confirmed),
        })
        return data

    def _enter(self, attempt: AttemptState) -> None:
        self._pending_hint = None
        if self.policy.keep_branch_history:
            attempt.branch_history = {pos: set(moves) for pos, moves in self._kept_history.items()}

        attempt.replay_queue = list(self._confirmed)
        logger.info(
            f"Start (assumed {attempt.believed_size}x{attempt.believed_size}), "
            f"confirmed=[{format_moves(self._confirmed)}]"
        )
        if attempt.replay_queue:
            logger.info(f"Replaying: {format_moves(attempt.replay_queue)}")
            attempt.phase = EpisodePhase.REPLAY
        else:
            attempt.phase = EpisodePhase.SEARCHING

    def _select(self, attempt: AttemptState) -> Optional[Move]:
        if attempt.is_replaying:
            return attempt.replay_queue[0]

        move = self._hinted_move(attempt)
        if move is not None:
            return move

        self._pending_hint = None
        candidates = self._explorable(attempt)
        while not candidates and attempt.believed_size < self.policy.max_grid_size:
            attempt.believed_size += 1
            logger.info(f"Upgraded grid to {attempt.believed_size}x{attempt.believed_size} (no legal moves)")
            candidates = self._explorable(attempt)

        if not candidates:
            logger.info(f"Stuck at {attempt.position}; nothing left to try at {attempt.believed_size}x{attempt.believed_size}")
            self._forget_puzzle()
            return None

        move = candidates[0]
        logger.info(f"Exploring: {format_moves(attempt.sequence + [move])}")
        return move

    def _hinted_move(self, attempt: AttemptState) -> Optional[Move]:
        """Next move of the best learned path not yet tried from here."""
        tried = attempt.tried_at()
        for hint in self.store.query(attempt.believed_size, attempt.sequence):
            move = hint.next_move(attempt.step)
            if not isinstance(move, Move):
                logger.warning(f"Skipping malformed hint at step {attempt.step}: {hint}")
                continue
            if move in tried:
                continue
            self._pending_hint = hint
            logger.info(f"Hint: trying next from known path ({hint.count}x): {move}")
            return move
        return None

    def _explorable(self, attempt: AttemptState) -> List[Move]:
        legal = legal_moves(attempt.believed_size, attempt.position, attempt.visited)
        tried = attempt.tried_at()
        return [m for m in self.policy.exploration_order if m in legal and m not in tried]

    def _integrate(self, attempt: AttemptState, move: Move, outcome: Outcome) -> EpisodeStatus:
        replaying = attempt.is_replaying
        attempt.mark_tried(move, attempt.position)

        if outcome is Outcome.ACCEPTED:
            attempt.advance(move)
            self._upgrade_to_fit(attempt)
            if replaying:
                attempt.replay_queue.pop(0)
                if not attempt.replay_queue:
                    logger.info("Replay verified, resuming search")
                    attempt.phase = EpisodePhase.SEARCHING
            else:
                logger.info(f"{move} worked -> path=[{format_moves(attempt.sequence)}]")
                if self.policy.replay_confirmed:
                    self._confirmed = list(attempt.sequence)
            self._pending_hint = None
            return EpisodeStatus.CONTINUE

        if outcome is Outcome.SOLVED:
            attempt.sequence.append(move)
            self.store.record(attempt.believed_size, attempt.sequence)
            self.store.clear_failed()
            self._forget_puzzle()
            logger.info(f"Solved{' during replay' if replaying else ''}! Path=[{format_moves(attempt.sequence)}]")
            return EpisodeStatus.SOLVED

        # REJECTED and INTERACTION_LOST end the attempt the same way
        if replaying:
            logger.warning("Confirmed move failed -> puzzle changed. Clearing memory.")
            self._forget_puzzle()
            self.store.clear_failed()
            return EpisodeStatus.REJECTED

        if self._pending_hint is not None:
            self.store.mark_failed(attempt.sequence + [move])
            logger.info(f"Hint failed on {move}; marking path unusable this session")
        else:
            logger.info(f"Failed on {move} from {attempt.position} ({outcome.name})")

        if self.policy.keep_branch_history:
            self._kept_history = {pos: set(moves) for pos, moves in attempt.branch_history.items()}
        if not self.policy.replay_confirmed:
            self._confirmed = []
        self._pending_hint = None
        return EpisodeStatus.REJECTED

    def _upgrade_to_fit(self, attempt: AttemptState) -> None:
        while not attempt.fits() and attempt.believed_size < self.policy.max_grid_size:
            attempt.believed_size += 1
            logger.info(f"Auto-upgraded to {attempt.believed_size}x{attempt.believed_size} (progress exceeded bounds)")

    def _forget_puzzle(self) -> None:
        """Drop the retained prefix and branch memory (never the store)."""
        self._confirmed = []
        self._kept_history = {}
        self._pending_hint = None
