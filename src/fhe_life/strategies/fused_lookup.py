"""Strategy C: count and rule fused into programmable lookups.

The eight neighbors are summed with unchecked addition and the survival
rule is folded into lookup tables. Two table layouts exist, chosen once
from the context's (message, carry) moduli:

* two-table: the first table turns sum 2 into marker 1 and sum 3 into
  marker 2 (everything else 0); the cell is added and the second table
  maps marker + cell >= 2 to alive.
* packed: the cell is shifted into a high digit (x16) and added to the
  sum; one table splits the digits back apart and applies the rule.
"""

import logging
from typing import Dict, Sequence, Tuple

from ..core.conway_rules import MAX_NEIGHBORS, update_cell
from ..crypto.ciphertext import Ciphertext
from ..crypto.keys import EvaluationContext
from ..crypto.lookup import LookupTable
from ..errors import CapacityOverflow, UnsupportedParameterRegime
from .base import CountStrategy

logger = logging.getLogger(__name__)

TWO_TABLE = "two_table"
PACKED = "packed"

PACKING_FACTOR = 16
SUM_DOMAIN = MAX_NEIGHBORS + 1

# (message_modulus, carry_modulus) -> layout
LAYOUTS: Dict[Tuple[int, int], str] = {
    (4, 4): TWO_TABLE,
    (8, 8): PACKED,
    (16, 16): PACKED,
}

_MARKERS = {2: 1, 3: 2}


def _marker(neighbor_sum: int) -> int:
    return _MARKERS.get(neighbor_sum, 0)


def _fold_marker(marked: int) -> int:
    return int(marked >= 2)


def _unpack_rule(packed: int) -> int:
    cell, neighbor_sum = divmod(packed, PACKING_FACTOR)
    return int(update_cell(cell == 1, neighbor_sum))


def select_layout(context: EvaluationContext) -> str:
    """Pick the table layout for the context's declared moduli.

    Raises:
        UnsupportedParameterRegime: If the moduli pair is not a known layout
    """
    key = (context.message_modulus, context.carry_modulus)
    if key not in LAYOUTS:
        raise UnsupportedParameterRegime(context.message_modulus, context.carry_modulus,
                                         supported=LAYOUTS)
    return LAYOUTS[key]


class FusedLookupStrategy(CountStrategy):
    """Unchecked sum plus one or two rule lookup tables."""

    name = "fused_lookup"

    def __init__(self, layout: str, tables: Tuple[LookupTable, ...]):
        self.layout = layout
        self.tables = tables

    @classmethod
    def from_context(cls, context: EvaluationContext) -> 'FusedLookupStrategy':
        layout = select_layout(context)

        if layout == TWO_TABLE:
            if context.capacity < SUM_DOMAIN:
                raise CapacityOverflow(SUM_DOMAIN, context.capacity, what="fused neighbor sum")
            tables = (
                context.generate_lookup_table(_marker, SUM_DOMAIN, name="sum_marker"),
                context.generate_lookup_table(_fold_marker, max(_MARKERS.values()) + 2, name="fold_cell"),
            )
        else:
            packed_domain = PACKING_FACTOR + SUM_DOMAIN
            if context.capacity < packed_domain:
                raise CapacityOverflow(packed_domain, context.capacity, what="packed cell and sum")
            tables = (context.generate_lookup_table(_unpack_rule, packed_domain, name="packed_rule"),)

        logger.debug(f"Fused lookup strategy using {layout} layout for {context.params.name}")
        return cls(layout, tables)

    def count(self, context: EvaluationContext, neighbors: Sequence[Ciphertext]) -> Ciphertext:
        self._check_neighbors(neighbors)
        total = neighbors[0]
        for neighbor in neighbors[1:]:
            total = context.add(total, neighbor)
        return total

    def evaluate(self, context: EvaluationContext, cell: Ciphertext, count: Ciphertext) -> Ciphertext:
        if self.layout == TWO_TABLE:
            marker_table, fold_table = self.tables
            marked = context.add(context.apply_lookup_table(count, marker_table), cell)
            return context.apply_lookup_table(marked, fold_table)

        packed = context.add(context.scalar_mul(cell, PACKING_FACTOR), count)
        return context.apply_lookup_table(packed, self.tables[0])

    def __repr__(self) -> str:
        return f"FusedLookupStrategy(layout={self.layout!r})"
