"""Toroidal board of encrypted cells.

The board owns two row-major ciphertext buffers. An update computes every
cell of the next generation into the back buffer from the front buffer
alone, then swaps them, so no reader ever sees a half-updated grid.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..crypto.ciphertext import Ciphertext
from ..crypto.keys import EvaluationContext
from ..errors import DimensionMismatch
from .scheduler import ParallelUpdateScheduler, neighbor_indices

logger = logging.getLogger(__name__)


class ToroidalBoard:
    """Grid of ciphertexts whose edges wrap in both axes.

    Attributes:
        rows: Number of rows
        cols: Number of columns
        generation: Number of completed updates
    """

    def __init__(self, columns: int, initial_ciphertexts: Sequence[Ciphertext]):
        """Initialize board from an encrypted initial configuration.

        Args:
            columns: Cells per row
            initial_ciphertexts: Row-major encrypted cells

        Raises:
            DimensionMismatch: If the cells don't fill whole rows of `columns`
        """
        length = len(initial_ciphertexts)
        if columns < 1 or length == 0 or length % columns != 0:
            raise DimensionMismatch(length, columns)

        self.cols = columns
        self.rows = length // columns
        self.generation = 0

        self._states: List[Ciphertext] = list(initial_ciphertexts)
        self._next_states: List[Optional[Ciphertext]] = [None] * length

        logger.debug(f"Created toroidal board {self.rows}x{self.cols}")

    @classmethod
    def truncated(cls, columns: int, initial_ciphertexts: Sequence[Ciphertext]) -> 'ToroidalBoard':
        """Build a board, dropping a trailing incomplete row.

        The dropped cells take no part in any update.

        Raises:
            DimensionMismatch: If not even one full row is available
        """
        if columns < 1:
            raise DimensionMismatch(len(initial_ciphertexts), columns)

        usable = (len(initial_ciphertexts) // columns) * columns
        if usable != len(initial_ciphertexts):
            logger.warning(f"Dropping {len(initial_ciphertexts) - usable} cell(s) of an incomplete trailing row")
        return cls(columns, initial_ciphertexts[:usable])

    @property
    def dimensions(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def states(self) -> Tuple[Ciphertext, ...]:
        """Snapshot of the current generation, row-major."""
        return tuple(self._states)

    def _check_position(self, row: int, col: int) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"Position ({row}, {col}) out of bounds for {self.rows}x{self.cols} board")

    def cell(self, row: int, col: int) -> Ciphertext:
        self._check_position(row, col)
        return self._states[row * self.cols + col]

    def neighbor_positions(self, row: int, col: int) -> List[Tuple[int, int]]:
        """The eight wrapped (row, col) neighbor positions in fixed order.

        Raises:
            IndexError: If (row, col) is outside the board
        """
        self._check_position(row, col)
        return [divmod(i, self.cols) for i in neighbor_indices(self.rows, self.cols, row, col)]

    def neighbors(self, row: int, col: int) -> List[Ciphertext]:
        """References to the eight neighbor ciphertexts of (row, col)."""
        self._check_position(row, col)
        return [self._states[i] for i in neighbor_indices(self.rows, self.cols, row, col)]

    def update(self,
               context: EvaluationContext,
               strategy,
               scheduler: Optional[ParallelUpdateScheduler] = None) -> None:
        """Advance the board by one generation.

        Args:
            context: Evaluation context for every homomorphic operation
            strategy: CountStrategy prepared for this context
            scheduler: Worker pool to use. Without one, every cell is computed
                inline in the calling thread, one at a time; pass a
                ParallelUpdateScheduler with max_workers > 1 for parallelism.

        Raises:
            Exception: Any failure of a cell computation; the run must be
                treated as unrecoverable
        """
        if scheduler is None:
            scheduler = ParallelUpdateScheduler(max_workers=1)

        try:
            scheduler.compute_generation(self.rows, self.cols, self._states,
                                         context, strategy, self._next_states)
        except Exception as e:
            logger.error(f"Update to generation {self.generation + 1} failed: {e}")
            raise

        # Swap buffers; the old front buffer is scratch space for the next update
        self._states, self._next_states = self._next_states, self._states
        self.generation += 1
        logger.debug(f"Board advanced to generation {self.generation}")

    def run(self,
            context: EvaluationContext,
            strategy,
            generations: int,
            scheduler: Optional[ParallelUpdateScheduler] = None) -> None:
        """Apply update `generations` times.

        The same scheduler is reused for every generation; None runs inline.
        """
        for _ in range(generations):
            self.update(context, strategy, scheduler)

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        return f"ToroidalBoard({self.rows}x{self.cols}, generation={self.generation})"
