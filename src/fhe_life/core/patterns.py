"""Classic Conway test patterns and placement on a toroidal grid."""

from typing import Iterable, Tuple

import numpy as np


def create_glider_pattern() -> np.ndarray:
    """Create classic Conway glider pattern (moves down-right)."""
    return np.array([
        [False, True, False],
        [False, False, True],
        [True, True, True]
    ], dtype=bool)


def create_blinker_pattern() -> np.ndarray:
    """Create horizontal blinker pattern (3 cells)."""
    return np.array([[True, True, True]], dtype=bool)


def create_block_pattern() -> np.ndarray:
    """Create stable 2x2 block still life."""
    return np.array([
        [True, True],
        [True, True]
    ], dtype=bool)


def place_pattern(shape: Tuple[int, int], pattern: np.ndarray, row: int = 0, col: int = 0) -> np.ndarray:
    """Place a pattern on an empty grid, wrapping at the edges.

    Args:
        shape: (rows, cols) of the grid
        pattern: 2D boolean array representing the pattern
        row: Top row for placement
        col: Left column for placement

    Returns:
        New boolean grid containing the pattern
    """
    rows, cols = shape
    grid = np.zeros((rows, cols), dtype=bool)
    pattern_rows, pattern_cols = pattern.shape

    for pr in range(pattern_rows):
        for pc in range(pattern_cols):
            if pattern[pr, pc]:
                grid[(row + pr) % rows, (col + pc) % cols] = True

    return grid


def grid_from_cells(shape: Tuple[int, int], alive: Iterable[Tuple[int, int]]) -> np.ndarray:
    """Build a grid with the given (row, col) cells alive."""
    grid = np.zeros(shape, dtype=bool)
    for row, col in alive:
        grid[row, col] = True
    return grid


def initial_glider_board() -> np.ndarray:
    """The 6x6 starting configuration used by the demo."""
    return grid_from_cells((6, 6), [(0, 0), (1, 1), (1, 2), (2, 0), (2, 1)])
