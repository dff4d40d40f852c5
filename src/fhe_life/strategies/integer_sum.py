"""Strategy A: neighbor count as an encrypted integer sum.

Each cell encrypts 0 or 1 in a plaintext space of at least 9 values, so the
sum of eight neighbors (0-8) is exact. Equality with 2 and 3 is tested by
lookup tables and combined with boolean gates.
"""

import logging
from functools import reduce
from typing import Sequence

from ..core.conway_rules import MAX_NEIGHBORS
from ..crypto.ciphertext import Ciphertext
from ..crypto.keys import EvaluationContext
from ..crypto.lookup import LookupTable
from ..errors import CapacityOverflow
from .base import CountStrategy

logger = logging.getLogger(__name__)

COUNT_DOMAIN = MAX_NEIGHBORS + 1


class IntegerSumStrategy(CountStrategy):
    """Modular integer sum followed by eq-2 / eq-3 tests."""

    name = "integer_sum"

    def __init__(self, eq2_table: LookupTable, eq3_table: LookupTable):
        self.eq2_table = eq2_table
        self.eq3_table = eq3_table

    @classmethod
    def from_context(cls, context: EvaluationContext) -> 'IntegerSumStrategy':
        if context.capacity < COUNT_DOMAIN:
            raise CapacityOverflow(COUNT_DOMAIN, context.capacity, what="integer neighbor sum")

        eq2 = context.generate_lookup_table(lambda x: int(x == 2), COUNT_DOMAIN, name="eq2")
        eq3 = context.generate_lookup_table(lambda x: int(x == 3), COUNT_DOMAIN, name="eq3")
        logger.debug(f"Integer sum strategy using capacity {context.capacity}")
        return cls(eq2, eq3)

    def count(self, context: EvaluationContext, neighbors: Sequence[Ciphertext]) -> Ciphertext:
        """Left-to-right sum starting from an encrypted zero."""
        self._check_neighbors(neighbors)
        return reduce(context.add, neighbors, context.trivial_encrypt(0))

    def evaluate(self, context: EvaluationContext, cell: Ciphertext, count: Ciphertext) -> Ciphertext:
        is_three = context.apply_lookup_table(count, self.eq3_table)
        is_two = context.apply_lookup_table(count, self.eq2_table)
        return context.or_(is_three, context.and_(cell, is_two))
