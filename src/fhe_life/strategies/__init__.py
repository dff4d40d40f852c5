"""
Neighbor-count strategies

Three interchangeable encodings of the neighbor count and survival rule,
selected once per run for a given evaluation context.
"""

import logging
from typing import Dict, List, Type

from ..crypto.keys import EvaluationContext
from .base import CountStrategy
from .bit_slice import BitSliceStrategy, BitTriple
from .fused_lookup import FusedLookupStrategy
from .integer_sum import IntegerSumStrategy

logger = logging.getLogger(__name__)

STRATEGIES: Dict[str, Type[CountStrategy]] = {
    IntegerSumStrategy.name: IntegerSumStrategy,
    BitSliceStrategy.name: BitSliceStrategy,
    FusedLookupStrategy.name: FusedLookupStrategy,
}

# Short aliases (A/B/C) accepted wherever a strategy name is
ALIASES: Dict[str, str] = {
    "a": IntegerSumStrategy.name,
    "b": BitSliceStrategy.name,
    "c": FusedLookupStrategy.name,
}


def available_strategies() -> List[str]:
    return list(STRATEGIES)


def resolve_name(name: str) -> str:
    """Canonical strategy name for a name or alias.

    Raises:
        ValueError: If name is unknown
    """
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    if key not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {name} (available: {', '.join(STRATEGIES)})")
    return key


def select_strategy(name: str, context: EvaluationContext) -> CountStrategy:
    """Resolve a strategy by name and prepare it for context.

    Args:
        name: Strategy name or alias (a, b, c)
        context: Evaluation context the run will use

    Returns:
        Ready-to-use strategy instance

    Raises:
        ValueError: If name is unknown
        CapacityOverflow: If the context is too small for the strategy
        UnsupportedParameterRegime: If no fused table layout fits the context
    """
    strategy = STRATEGIES[resolve_name(name)].from_context(context)
    logger.info(f"Selected {strategy!r} for {context!r}")
    return strategy


__all__ = [
    'CountStrategy',
    'IntegerSumStrategy',
    'BitSliceStrategy',
    'BitTriple',
    'FusedLookupStrategy',
    'STRATEGIES',
    'available_strategies',
    'resolve_name',
    'select_strategy',
]
