"""Board, scheduler and plaintext reference rules."""

from .board import ToroidalBoard
from .scheduler import CellWork, ParallelUpdateScheduler, neighbor_indices, work_items

__all__ = [
    'ToroidalBoard',
    'ParallelUpdateScheduler',
    'CellWork',
    'neighbor_indices',
    'work_items',
]
