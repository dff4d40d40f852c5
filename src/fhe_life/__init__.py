"""
fhe-life: Conway's Game of Life over encrypted cells

A toroidal board of ciphertexts advanced one generation at a time by an
evaluator that holds only public evaluation material. Three neighbor-count
strategies (integer sum, bit-sliced accumulator, fused lookup) share one
interface and produce identical decrypted results.
"""

from .core.board import ToroidalBoard
from .core.scheduler import ParallelUpdateScheduler
from .crypto.keys import ClientKey, EvaluationContext, generate_keys
from .errors import CapacityOverflow, DimensionMismatch, FheLifeError, UnsupportedParameterRegime
from .strategies import CountStrategy, available_strategies, select_strategy

__version__ = "0.1.0"

__all__ = [
    'ToroidalBoard',
    'ParallelUpdateScheduler',
    'ClientKey',
    'EvaluationContext',
    'generate_keys',
    'CountStrategy',
    'available_strategies',
    'select_strategy',
    'FheLifeError',
    'DimensionMismatch',
    'UnsupportedParameterRegime',
    'CapacityOverflow',
]
