"""
Outcome Module - Move outcomes, episode phases and terminal statuses.
"""

from enum import Enum, auto


class Outcome(Enum):
    """
    Result of submitting one move to the oracle.

    States:
        ACCEPTED: Move was correct, puzzle continues
        SOLVED: Move completed the puzzle
        REJECTED: Move was wrong, puzzle reset to start
        INTERACTION_LOST: Oracle surface vanished without a clear signal
    """
    ACCEPTED = auto()
    SOLVED = auto()
    REJECTED = auto()
    INTERACTION_LOST = auto()


class EpisodePhase(Enum):
    """
    Per-episode state machine.

    State Flow:
        START -> REPLAY? -> SEARCHING -> {SOLVED | REJECTED | EXHAUSTED}
    """
    START = auto()
    REPLAY = auto()
    SEARCHING = auto()
    SOLVED = auto()
    REJECTED = auto()
    EXHAUSTED = auto()


class EpisodeStatus(Enum):
    """What the integrator decided after one outcome."""
    CONTINUE = auto()
    SOLVED = auto()
    REJECTED = auto()
    EXHAUSTED = auto()

    @property
    def is_terminal(self) -> bool:
        return self is not EpisodeStatus.CONTINUE
