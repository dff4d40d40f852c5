"""Console rendering of decrypted generations."""

import numpy as np

ALIVE_CHAR = '█'
DEAD_CHAR = '░'


def render_grid(grid: np.ndarray, alive_char: str = ALIVE_CHAR, dead_char: str = DEAD_CHAR) -> str:
    """String picture of a decrypted boolean grid, one line per row."""
    grid = np.asarray(grid, dtype=bool)
    return '\n'.join(
        ''.join(alive_char if cell else dead_char for cell in row)
        for row in grid
    )
