"""
Move Module - The four directional buttons of the trap mechanism.
"""

from enum import Enum
from typing import Iterable, List, Sequence, Tuple, Union


Position = Tuple[int, int]


class Move(Enum):
    """
    One directional move on the trap grid.

    Values are the oracle button ids (Up=1, Right=2, Down=3, Left=4).
    Coordinates are (x, y) with (0, 0) in the top-left corner, so Down
    increases y and Right increases x.
    """
    UP = 1
    RIGHT = 2
    DOWN = 3
    LEFT = 4

    @property
    def button_id(self) -> int:
        """Button id sent to the oracle."""
        return self.value

    @property
    def delta(self) -> Tuple[int, int]:
        """Coordinate delta (dx, dy) for this move."""
        return _DELTAS[self]

    @property
    def label(self) -> str:
        """Lowercase name, e.g. "right"."""
        return self.name.lower()

    @property
    def code(self) -> str:
        """One-letter code, e.g. "R"."""
        return self.name[0]

    def apply(self, position: Position) -> Position:
        """
        Get the position reached by taking this move.

        Args:
            position: Starting (x, y) position

        Returns:
            New (x, y) position (not bounds-checked)
        """
        dx, dy = self.delta
        return (position[0] + dx, position[1] + dy)

    @classmethod
    def parse(cls, value: Union["Move", str, int]) -> "Move":
        """
        Parse a move from a label, one-letter code or button id.

        Args:
            value: "right", "R", 2 or a Move

        Returns:
            Move instance

        Raises:
            ValueError: If value does not name a move
        """
        if isinstance(value, Move):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"Unknown button id: {value}") from None
        if isinstance(value, str):
            text = value.strip().upper()
            for move in cls:
                if text == move.name or text == move.code:
                    return move
        raise ValueError(f"Unknown move: {value!r}")

    def __str__(self) -> str:
        return self.label


_DELTAS = {
    Move.UP: (0, -1),
    Move.RIGHT: (1, 0),
    Move.DOWN: (0, 1),
    Move.LEFT: (-1, 0),
}


def parse_moves(values: Union[str, Iterable[Union[Move, str, int]]]) -> Tuple[Move, ...]:
    """
    Parse a move sequence.

    Accepts a compact code string ("RDDR") or any iterable of values
    understood by Move.parse().

    Args:
        values: Code string or iterable of move values

    Returns:
        Tuple of Move
    """
    if isinstance(values, str):
        return tuple(Move.parse(ch) for ch in values if not ch.isspace() and ch != ",")
    return tuple(Move.parse(v) for v in values)


def format_moves(moves: Sequence[Move]) -> str:
    """Format moves for logging, e.g. "right, down, down"."""
    return ", ".join(str(m) for m in moves)


def moves_to_codes(moves: Sequence[Move]) -> str:
    """Compact code string, e.g. "RDDR"."""
    return "".join(m.code for m in moves)


def legal_moves(size: int, position: Position, visited) -> List[Move]:
    """
    Moves that stay inside a size x size grid and reach an unvisited tile.

    Args:
        size: Believed grid side length
        position: Current (x, y)
        visited: Set of positions already visited this episode

    Returns:
        Legal moves, in Right, Down, Left, Up order
    """
    out = []
    for move in (Move.RIGHT, Move.DOWN, Move.LEFT, Move.UP):
        x, y = move.apply(position)
        if 0 <= x < size and 0 <= y < size and (x, y) not in visited:
            out.append(move)
    return out
