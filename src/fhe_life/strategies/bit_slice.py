"""Strategy B: bit-sliced ripple-carry neighbor count.

Cells are encrypted booleans. The count is a three-bit accumulator updated
one neighbor at a time with XOR/AND gates, so the eight updates for a cell
form a strict sequential fold. The accumulator is modulo 8; a count of 8
aliases to 0, which the rule never distinguishes from 0 because it only
tests for 2 and 3.
"""

import logging
from functools import reduce
from typing import NamedTuple, Sequence

from ..crypto.ciphertext import Ciphertext
from ..crypto.keys import GATE_DOMAIN, EvaluationContext
from ..errors import CapacityOverflow
from .base import CountStrategy

logger = logging.getLogger(__name__)


class BitTriple(NamedTuple):
    """Encrypted bits of a running count: value = bit0 + 2*bit1 + 4*bit2 (mod 8)."""

    bit0: Ciphertext
    bit1: Ciphertext
    bit2: Ciphertext


def encrypted_zero(context: EvaluationContext) -> BitTriple:
    """Accumulator start state."""
    return BitTriple(context.trivial_encrypt(0), context.trivial_encrypt(0), context.trivial_encrypt(0))


def ripple_add(context: EvaluationContext, acc: BitTriple, neighbor: Ciphertext) -> BitTriple:
    """Add one encrypted bit to the accumulator.

    Args:
        context: Evaluation context
        acc: Accumulator before this neighbor
        neighbor: Encrypted 0/1 cell

    Returns:
        New accumulator; acc is left untouched
    """
    bit0 = context.xor(acc.bit0, neighbor)
    carry1 = context.and_(acc.bit0, neighbor)
    bit1 = context.xor(acc.bit1, carry1)
    carry2 = context.and_(carry1, acc.bit1)
    bit2 = context.xor(acc.bit2, carry2)
    return BitTriple(bit0, bit1, bit2)


class BitSliceStrategy(CountStrategy):
    """Boolean-gate accumulator and gate-level survival rule."""

    name = "bit_slice"

    @classmethod
    def from_context(cls, context: EvaluationContext) -> 'BitSliceStrategy':
        if context.capacity < GATE_DOMAIN:
            raise CapacityOverflow(GATE_DOMAIN, context.capacity, what="bit-sliced gates")
        logger.debug(f"Bit-slice strategy using capacity {context.capacity}")
        return cls()

    def count(self, context: EvaluationContext, neighbors: Sequence[Ciphertext]) -> BitTriple:
        self._check_neighbors(neighbors)
        return reduce(lambda acc, n: ripple_add(context, acc, n), neighbors, encrypted_zero(context))

    def evaluate(self, context: EvaluationContext, cell: Ciphertext, count: BitTriple) -> Ciphertext:
        """Alive iff count is 2 or 3 and (count is odd or the cell is alive).

        bit1 AND NOT bit2 selects counts 2 and 3; bit0 separates them.
        """
        two_or_three = context.and_(count.bit1, context.not_(count.bit2))
        return context.and_(two_or_three, context.or_(count.bit0, cell))
