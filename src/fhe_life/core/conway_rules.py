"""
Plaintext Conway's Game of Life Reference

Standard B3/S23 rules on a toroidal grid, in the clear. The encrypted
strategies tabulate their lookup tables from these functions, and the test
suite checks decrypted generations against them.
"""

from typing import Dict, Set, Tuple

import numpy as np


# Standard Conway rules - unmodified
SURVIVAL_SET: Set[int] = {2, 3}  # Live cells survive with 2-3 neighbors
BIRTH_SET: Set[int] = {3}        # Dead cells born with exactly 3 neighbors

MAX_NEIGHBORS = 8


def update_cell(alive: bool, live_neighbors: int) -> bool:
    """Apply Conway's rules to determine next cell state.

    Equivalent to (count == 3) or (alive and count == 2).

    Args:
        alive: Current cell state (True=alive, False=dead)
        live_neighbors: Number of live neighbors (0-8)

    Returns:
        Next cell state (True=alive, False=dead)
    """
    if alive:
        return live_neighbors in SURVIVAL_SET
    return live_neighbors in BIRTH_SET


def count_live_neighbors(grid: np.ndarray, row: int, col: int) -> int:
    """Count live neighbors of cell at (row, col) using Moore neighborhood.

    Args:
        grid: 2D boolean numpy array
        row: Cell row
        col: Cell column

    Returns:
        Number of live neighbors (0-8), wrapping around both edges
    """
    rows, cols = grid.shape
    count = 0

    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue  # Skip center cell
            if grid[(row + dr) % rows, (col + dc) % cols]:
                count += 1

    return count


def step_grid(grid: np.ndarray) -> np.ndarray:
    """Compute the next generation of a toroidal grid.

    Args:
        grid: 2D array of cell states

    Returns:
        New boolean array; the input is not modified
    """
    grid = np.asarray(grid, dtype=bool)
    new_grid = np.zeros_like(grid)

    for row in range(grid.shape[0]):
        for col in range(grid.shape[1]):
            new_grid[row, col] = update_cell(bool(grid[row, col]),
                                             count_live_neighbors(grid, row, col))

    return new_grid


def evolve(grid: np.ndarray, generations: int) -> np.ndarray:
    """Apply step_grid repeatedly."""
    result = np.asarray(grid, dtype=bool).copy()
    for _ in range(generations):
        result = step_grid(result)
    return result


def get_rule_table() -> Dict[Tuple[bool, int], bool]:
    """Get the complete rule table.

    Returns:
        Dictionary mapping (current_state, neighbor_count) to next_state
        for all 18 combinations
    """
    return {
        (alive, neighbors): update_cell(alive, neighbors)
        for alive in (False, True)
        for neighbors in range(MAX_NEIGHBORS + 1)
    }
