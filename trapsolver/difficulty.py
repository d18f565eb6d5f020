"""
Difficulty Hints - Soft grid size expectations from outside the solver.

The solver never treats these as ground truth; they only seed the
believed grid size and bias candidate selection.
"""

from abc import ABC, abstractmethod
from typing import List


class DifficultyHint(ABC):
    """Maps an external difficulty signal to grid size expectations."""

    @abstractmethod
    def expected_size(self) -> int:
        """Most likely grid side length."""
        pass

    @abstractmethod
    def allowed_sizes(self) -> List[int]:
        """Grid sizes the puzzle could plausibly have."""
        pass


class SkillDifficultyHint(DifficultyHint):
    """
    Grid size from the player's trap-removal skill.

    Below 80 skill the puzzle is usually 3x3, below 100 it is 4x4 and
    from 100 on it is 5x5. Players below 100 never get a 5x5 puzzle.

    Attributes:
        skill: Skill value in points (e.g. 85.0)
    """

    EXPECT_4X4_AT = 80.0
    EXPECT_5X5_AT = 100.0

    def __init__(self, skill: float):
        self.skill = float(skill)

    def expected_size(self) -> int:
        if self.skill < self.EXPECT_4X4_AT:
            return 3
        if self.skill < self.EXPECT_5X5_AT:
            return 4
        return 5

    def allowed_sizes(self) -> List[int]:
        if self.skill < self.EXPECT_5X5_AT:
            return [3, 4]
        return [3, 4, 5]

    def __repr__(self) -> str:
        return f"SkillDifficultyHint(skill={self.skill})"


class FixedSizeHint(DifficultyHint):
    """Hint that always names one size."""

    def __init__(self, size: int, allowed: List[int] = None):
        self.size = size
        self._allowed = list(allowed) if allowed else [size]

    def expected_size(self) -> int:
        return self.size

    def allowed_sizes(self) -> List[int]:
        return list(self._allowed)

    def __repr__(self) -> str:
        return f"FixedSizeHint(size={self.size})"
