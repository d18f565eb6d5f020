"""
Solver Package - Decision engine for the circuit trap puzzle.

The trap is an unknown NxN grid (N in 3..5) with a single hidden path from
the top-left to the bottom-right tile. The solver submits one move at a
time and learns only whether it was accepted, rejected or completed the
puzzle. Strategies are pluggable and selected by name.

Public API:
    - Move: Directional move (Up, Right, Down, Left)
    - Outcome / EpisodeStatus / EpisodePhase: Move results and episode states
    - AttemptState: Per-episode mutable state
    - SearchPolicy: Exploration order and grid size bounds
    - LearnedPathStore / LearnedPath: Solved paths with success counts
    - PathLibrary / CandidatePath / CandidateSet: Known path library
    - SolverStrategy: Abstract base for strategies
    - create_strategy(): Factory function
    - get_strategy_names(): List available strategies
    - get_strategy_info(): Get strategy metadata

Usage:
    from trapsolver.solver import create_strategy, Outcome
    from trapsolver.difficulty import SkillDifficultyHint

    strategy = create_strategy("library")
    strategy.begin_episode(SkillDifficultyHint(85.0))

    move = strategy.select_move()
    status = strategy.integrate(move, Outcome.ACCEPTED)
"""

# Core data structures
from .move import Move, Position, parse_moves, format_moves, moves_to_codes, legal_moves
from .outcome import Outcome, EpisodePhase, EpisodeStatus
from .attempt import AttemptState
from .policy import SearchPolicy, MIN_GRID_SIZE, MAX_GRID_SIZE, DEFAULT_EXPLORATION_ORDER
from .learned_paths import LearnedPath, LearnedPathStore
from .path_library import CandidatePath, CandidateSet, PathLibrary, convert_tile_path

# Strategy framework
from .base import SolverStrategy
from .factory import (
    create_strategy,
    get_strategy_names,
    get_strategy_info,
    get_default_strategy_name,
    register_strategy,
)

# Import strategies to register them
from . import strategies
from .strategies import CoordinateSearchStrategy, CandidateEliminationStrategy

__all__ = [
    # Data structures
    "Move",
    "Position",
    "parse_moves",
    "format_moves",
    "moves_to_codes",
    "legal_moves",
    "Outcome",
    "EpisodePhase",
    "EpisodeStatus",
    "AttemptState",
    "SearchPolicy",
    "MIN_GRID_SIZE",
    "MAX_GRID_SIZE",
    "DEFAULT_EXPLORATION_ORDER",
    # Belief stores
    "LearnedPath",
    "LearnedPathStore",
    "CandidatePath",
    "CandidateSet",
    "PathLibrary",
    "convert_tile_path",
    # Strategy framework
    "SolverStrategy",
    "create_strategy",
    "get_strategy_names",
    "get_strategy_info",
    "get_default_strategy_name",
    "register_strategy",
    "CoordinateSearchStrategy",
    "CandidateEliminationStrategy",
]
