"""
Path Tables - Known trap paths as tile-index chains.

Tiles are numbered row-major from 0 (top-left) to N*N-1 (bottom-right);
every chain runs from the first tile to the last one.
"""

from typing import Dict, List

PATHS_3X3: List[List[int]] = [
    [0, 1, 2, 5, 8],
    [0, 1, 4, 5, 8],
    [0, 1, 4, 3, 6, 7, 8],
    [0, 1, 4, 7, 8],
    [0, 3, 6, 7, 8],
    [0, 3, 4, 5, 8],
    [0, 3, 4, 7, 8],
    [0, 3, 6, 7, 4, 5, 8],
    [0, 3, 6, 7, 4, 1, 2, 5, 8],
]

PATHS_4X4: List[List[int]] = [
    [0, 1, 2, 3, 7, 11, 15],
    [0, 1, 2, 6, 7, 11, 15],
    [0, 1, 2, 3, 7, 6, 5, 4, 8, 9, 10, 11, 15],
    [0, 1, 5, 6, 7, 11, 15],
    [0, 1, 5, 4, 8, 12, 13, 14, 15],
    [0, 1, 5, 4, 8, 9, 10, 14, 15],
    [0, 4, 8, 12, 13, 14, 15],
    [0, 4, 8, 9, 10, 6, 2, 3, 7, 11, 15],
    [0, 4, 8, 9, 5, 6, 7, 11, 15],
    [0, 4, 5, 6, 2, 3, 7, 11, 15],
    [0, 4, 5, 6, 7, 11, 10, 9, 8, 12, 13, 14, 15],
    [0, 4, 5, 9, 10, 11, 15],
]

PATHS_5X5: List[List[int]] = [
    [0, 1, 2, 3, 4, 9, 14, 19, 24],
    [0, 1, 2, 7, 8, 9, 14, 13, 12, 11, 10, 15, 20, 21, 22, 23, 24],
    [0, 1, 2, 3, 4, 9, 14, 13, 12, 17, 22, 23, 24],
    [0, 1, 6, 7, 8, 13, 12, 17, 18, 19, 24],
    [0, 1, 6, 5, 10, 11, 12, 17, 18, 19, 24],
    [0, 1, 6, 5, 10, 15, 16, 17, 12, 7, 8, 9, 14, 19, 24],
    [0, 5, 6, 7, 2, 3, 4, 9, 14, 19, 24],
    [0, 5, 6, 11, 12, 13, 18, 19, 24],
    [0, 5, 6, 11, 16, 21, 22, 17, 12, 7, 8, 9, 14, 19, 24],
    [0, 5, 10, 15, 20, 21, 22, 23, 24],
    [0, 5, 10, 11, 12, 13, 8, 7, 6, 1, 2, 3, 4, 9, 14, 19, 24],
    [0, 5, 10, 11, 16, 17, 18, 23, 24],
]

TILE_PATHS: Dict[int, List[List[int]]] = {
    3: PATHS_3X3,
    4: PATHS_4X4,
    5: PATHS_5X5,
}
