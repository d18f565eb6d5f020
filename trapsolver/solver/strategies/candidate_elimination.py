"""
Candidate Elimination Strategy - Shortest-path-first over a known path library.

Every puzzle is assumed to be one of the library paths. Each oracle
outcome narrows the live candidate set: an accepted move keeps only the
paths that agree with it, a rejected move removes every path that would
have made it. The candidate set survives rejected attempts of the same
puzzle and is rebuilt after a solve or a contradiction.
"""

import logging
from typing import Any, Dict, Optional

from ..attempt import AttemptState
from ..base import SolverStrategy
from ..factory import register_strategy
from ..move import Move, format_moves
from ..outcome import EpisodePhase, EpisodeStatus, Outcome
from ..path_library import CandidateSet, PathLibrary
from ..policy import SearchPolicy

logger = logging.getLogger(__name__)


@register_strategy
class CandidateEliminationStrategy(SolverStrategy):
    """
    Library search with per-puzzle elimination memory.

    Algorithm (per decision):
        1. Keep candidates that still have a move at the current step
        2. Prefer those of the expected grid size (else all of them)
        3. Follow the shortest one, library order breaking ties
        4. No viable candidate means the evidence contradicts the library

    Attributes:
        library: Fixed candidate paths, grouped by grid size
    """
    name = "library"
    description = "Library search - shortest known path first, eliminate on every outcome"

    def __init__(self, policy: Optional[SearchPolicy] = None,
                 library: Optional[PathLibrary] = None):
        super().__init__(policy)
        self.library = library if library is not None else PathLibrary.from_tile_paths()
        self._candidates: Optional[CandidateSet] = None

    @property
    def candidates(self) -> Optional[CandidateSet]:
        """Live candidate set for the current puzzle (None between puzzles)."""
        return self._candidates

    def snapshot(self) -> Dict[str, Any]:
        data = super().snapshot()
        data["candidates"] = len(self._candidates) if self._candidates is not None else None
        data["candidate_counts"] = list(self._attempt.candidate_counts) if self._attempt else []
        return data

    def _enter(self, attempt: AttemptState) -> None:
        if not self._candidates:
            sizes = [s for s in self._hint.allowed_sizes() if s in self.library.sizes]
            self._candidates = CandidateSet(self.library.candidates_for(sizes))
            logger.info(f"New puzzle candidates for sizes {sizes}, total={len(self._candidates)}")
        else:
            logger.info(f"Retrying puzzle with {len(self._candidates)} candidate(s) left")
        attempt.phase = EpisodePhase.SEARCHING

    def _select(self, attempt: AttemptState) -> Optional[Move]:
        candidates = self._candidates
        attempt.candidate_counts.append(len(candidates))

        chosen = candidates.choose(attempt.step, self._hint.expected_size())
        if chosen is None:
            logger.warning(f"No candidate has a move at step {attempt.step}; contradiction")
            self._reset_puzzle()
            return None

        attempt.believed_size = chosen.size
        return chosen.moves[attempt.step]

    def _integrate(self, attempt: AttemptState, move: Move, outcome: Outcome) -> EpisodeStatus:
        step = attempt.step

        if outcome is Outcome.ACCEPTED:
            before, after = self._candidates.keep_matching(step, move)
            logger.info(f"OK @ step {step} move {move}: candidates {before} -> {after}")
            attempt.advance(move)
            if after == 0:
                logger.warning("Contradiction after OK; puzzle matches no known path")
                self._reset_puzzle()
                return EpisodeStatus.EXHAUSTED
            return EpisodeStatus.CONTINUE

        if outcome is Outcome.SOLVED:
            before, after = self._candidates.keep_matching(step, move)
            logger.info(f"OK @ step {step} move {move}: candidates {before} -> {after}")
            attempt.sequence.append(move)
            logger.info(f"Solved! Path=[{format_moves(attempt.sequence)}]")
            self._reset_puzzle()
            return EpisodeStatus.SOLVED

        before, after = self._candidates.eliminate(step, move)
        logger.info(f"FAIL @ step {step} move {move} ({outcome.name}): candidates {before} -> {after}")
        if after == 0:
            logger.info("All candidates eliminated; fresh candidates next attempt")
            self._reset_puzzle()
        return EpisodeStatus.REJECTED

    def _reset_puzzle(self) -> None:
        self._candidates = None
