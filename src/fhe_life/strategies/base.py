"""Common interface for encrypted neighbor counting and rule evaluation."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from ..core.conway_rules import MAX_NEIGHBORS
from ..crypto.ciphertext import Ciphertext
from ..crypto.keys import EvaluationContext


class CountStrategy(ABC):
    """One encoding of the neighbor count and the survival rule.

    Instances are built once per run by from_context, which validates the
    context's plaintext capacity and prepares lookup tables. Per-cell calls
    take the context explicitly and never branch on encrypted values.
    """

    name: str = "abstract"

    @classmethod
    @abstractmethod
    def from_context(cls, context: EvaluationContext) -> 'CountStrategy':
        """Validate context capacity and build the strategy.

        Raises:
            CapacityOverflow: If the context cannot represent the strategy's domain
            UnsupportedParameterRegime: If no table layout fits the context
        """

    @abstractmethod
    def count(self, context: EvaluationContext, neighbors: Sequence[Ciphertext]) -> Any:
        """Reduce the 8 neighbor ciphertexts to a strategy-specific count."""

    @abstractmethod
    def evaluate(self, context: EvaluationContext, cell: Ciphertext, count: Any) -> Ciphertext:
        """Map (cell, count) to the encrypted next state (0 or 1)."""

    def next_state(self, context: EvaluationContext, cell: Ciphertext,
                   neighbors: Sequence[Ciphertext]) -> Ciphertext:
        """Count neighbors and apply the survival rule for one cell."""
        return self.evaluate(context, cell, self.count(context, neighbors))

    @staticmethod
    def _check_neighbors(neighbors: Sequence[Ciphertext]) -> None:
        if len(neighbors) != MAX_NEIGHBORS:
            raise ValueError(f"Expected {MAX_NEIGHBORS} neighbors, got {len(neighbors)}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
