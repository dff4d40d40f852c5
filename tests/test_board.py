"""Tests for the toroidal board: construction, indexing and buffer swap."""

import threading

import numpy as np
import pytest

from fhe_life.core.board import ToroidalBoard
from fhe_life.core.patterns import grid_from_cells
from fhe_life.errors import DimensionMismatch, FheLifeError
from fhe_life.strategies import IntegerSumStrategy


class TestBoardConstruction:
    """Dimension validation."""

    def test_dimensions_from_length(self, client_key):
        board = ToroidalBoard(4, client_key.encrypt_grid(np.zeros((3, 4), dtype=bool)))
        assert board.dimensions == (3, 4)
        assert board.rows == 3 and board.cols == 4
        assert len(board) == 12
        assert board.generation == 0

    def test_incomplete_row_rejected(self, client_key):
        cells = [client_key.encrypt(0) for _ in range(10)]
        with pytest.raises(DimensionMismatch) as excinfo:
            ToroidalBoard(4, cells)
        assert excinfo.value.length == 10
        assert excinfo.value.columns == 4
        assert isinstance(excinfo.value, ValueError)
        assert isinstance(excinfo.value, FheLifeError)

    def test_empty_and_zero_columns_rejected(self, client_key):
        with pytest.raises(DimensionMismatch):
            ToroidalBoard(3, [])
        with pytest.raises(DimensionMismatch):
            ToroidalBoard(0, [client_key.encrypt(0)])

    def test_truncated_drops_trailing_row(self, client_key):
        cells = [client_key.encrypt(i % 2) for i in range(10)]
        board = ToroidalBoard.truncated(4, cells)
        assert board.dimensions == (2, 4)
        assert board.states == tuple(cells[:8])

    def test_truncated_needs_one_full_row(self, client_key):
        with pytest.raises(DimensionMismatch):
            ToroidalBoard.truncated(4, [client_key.encrypt(0)] * 3)


class TestNeighborIndexing:
    """Periodic boundary conditions."""

    def test_corner_wraps_both_axes(self, client_key):
        board = ToroidalBoard(5, client_key.encrypt_grid(np.zeros((4, 5), dtype=bool)))
        assert board.neighbor_positions(0, 0) == [
            (3, 4), (3, 0), (3, 1),
            (0, 4), (0, 1),
            (1, 4), (1, 0), (1, 1),
        ]

    def test_interior_cell(self, client_key):
        board = ToroidalBoard(5, client_key.encrypt_grid(np.zeros((4, 5), dtype=bool)))
        assert board.neighbor_positions(2, 2) == [
            (1, 1), (1, 2), (1, 3),
            (2, 1), (2, 3),
            (3, 1), (3, 2), (3, 3),
        ]

    def test_neighbors_are_shared_references(self, client_key):
        board = ToroidalBoard(3, client_key.encrypt_grid(np.zeros((3, 3), dtype=bool)))
        refs = board.neighbors(1, 1)
        assert len(refs) == 8
        assert refs[0] is board.cell(0, 0)
        assert refs[7] is board.cell(2, 2)

    def test_out_of_bounds(self, client_key):
        board = ToroidalBoard(3, client_key.encrypt_grid(np.zeros((3, 3), dtype=bool)))
        with pytest.raises(IndexError):
            board.neighbors(3, 0)
        with pytest.raises(IndexError):
            board.cell(0, -1)


class TestBoardUpdate:
    """Generation replacement."""

    def test_update_replaces_every_cell(self, keys_2_2):
        client_key, context = keys_2_2
        grid = grid_from_cells((4, 4), [(1, 1), (1, 2), (2, 1)])
        board = ToroidalBoard(4, client_key.encrypt_grid(grid))
        before = board.states

        board.update(context, IntegerSumStrategy.from_context(context))

        assert board.generation == 1
        assert all(new is not old for new, old in zip(board.states, before))
        assert client_key.decrypt_board(board)[2, 2]  # birth completes the block

    def test_snapshot_unaffected_by_update(self, keys_2_2):
        client_key, context = keys_2_2
        grid = grid_from_cells((3, 3), [(0, 0), (0, 1), (0, 2)])
        board = ToroidalBoard(3, client_key.encrypt_grid(grid))
        snapshot = board.states

        board.update(context, IntegerSumStrategy.from_context(context))

        assert np.array_equal(client_key.decrypt_cells(snapshot, 3), grid)

    def test_default_update_runs_inline(self, keys_2_2):
        """Without a scheduler every cell is computed on the calling thread."""
        client_key, context = keys_2_2
        seen = set()

        class Recording(IntegerSumStrategy):
            def next_state(self, context, cell, neighbors):
                seen.add(threading.get_ident())
                return super().next_state(context, cell, neighbors)

        board = ToroidalBoard(3, client_key.encrypt_grid(np.zeros((3, 3), dtype=bool)))
        board.run(context, Recording.from_context(context), 2)

        assert seen == {threading.get_ident()}
        assert board.generation == 2

    def test_failed_update_propagates(self, keys_2_2):
        client_key, context = keys_2_2

        class Exploding(IntegerSumStrategy):
            def evaluate(self, context, cell, count):
                raise RuntimeError("bootstrap failed")

        board = ToroidalBoard(3, client_key.encrypt_grid(np.zeros((3, 3), dtype=bool)))
        strategy = Exploding.from_context(context)
        with pytest.raises(RuntimeError, match="bootstrap failed"):
            board.update(context, strategy)
        assert board.generation == 0
