"""
Search Policy Module - Tunable heuristics shared by the strategies.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .move import Move, parse_moves


MIN_GRID_SIZE = 3
MAX_GRID_SIZE = 5

DEFAULT_EXPLORATION_ORDER: Tuple[Move, ...] = (Move.RIGHT, Move.DOWN, Move.LEFT, Move.UP)


@dataclass(frozen=True)
class SearchPolicy:
    """
    Heuristic knobs for move selection.

    Attributes:
        exploration_order: Fallback order when no learned path applies
        min_grid_size: Smallest believed grid size
        max_grid_size: Largest believed grid size (upgrades stop here)
        replay_confirmed: Keep the accepted prefix of a rejected attempt
            and replay it at the start of the next attempt
        keep_branch_history: Carry branch history across rejected attempts
            of the same puzzle (the default clears it every attempt)
    """
    exploration_order: Tuple[Move, ...] = DEFAULT_EXPLORATION_ORDER
    min_grid_size: int = MIN_GRID_SIZE
    max_grid_size: int = MAX_GRID_SIZE
    replay_confirmed: bool = True
    keep_branch_history: bool = False

    def __post_init__(self):
        order = parse_moves(self.exploration_order)
        if len(set(order)) != len(order) or not order:
            raise ValueError(f"Exploration order must list distinct moves: {self.exploration_order}")
        object.__setattr__(self, "exploration_order", order)

        if not (MIN_GRID_SIZE <= self.min_grid_size <= self.max_grid_size <= MAX_GRID_SIZE):
            raise ValueError(
                f"Grid size bounds must satisfy {MIN_GRID_SIZE} <= min <= max <= {MAX_GRID_SIZE}, "
                f"got min={self.min_grid_size} max={self.max_grid_size}"
            )

    def clamp_size(self, size: int) -> int:
        """Clamp a grid size into the policy bounds."""
        return max(self.min_grid_size, min(self.max_grid_size, size))

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "SearchPolicy":
        """
        Build a policy from a settings dictionary.

        Missing keys fall back to the dataclass defaults.
        """
        kwargs: Dict[str, Any] = {}
        if "exploration_order" in settings:
            kwargs["exploration_order"] = parse_moves(settings["exploration_order"])
        for key in ("min_grid_size", "max_grid_size"):
            if key in settings:
                kwargs[key] = int(settings[key])
        for key in ("replay_confirmed", "keep_branch_history"):
            if key in settings:
                kwargs[key] = bool(settings[key])
        return cls(**kwargs)
