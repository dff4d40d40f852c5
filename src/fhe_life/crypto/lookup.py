"""Programmable lookup tables.

A table is generated once, at setup, from a plaintext function over a
bounded domain and then evaluated homomorphically by the context's
bootstrapping step.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..errors import CapacityOverflow


@dataclass(frozen=True)
class LookupTable:
    """Plaintext-function table over Z_capacity.

    Attributes:
        entries: Output for every input in [0, capacity)
        domain_size: Number of inputs the generating function was declared for
        name: Label used in logs and operation counters
    """

    entries: Tuple[int, ...]
    domain_size: int
    name: str = "lut"

    @property
    def capacity(self) -> int:
        return len(self.entries)

    @classmethod
    def from_function(cls,
                      function: Callable[[int], int],
                      capacity: int,
                      domain_size: Optional[int] = None,
                      name: str = "lut") -> 'LookupTable':
        """Tabulate function over the full plaintext space.

        Args:
            function: Plaintext function of one integer
            capacity: Combined plaintext capacity of the context
            domain_size: Inputs the function must handle (default: capacity)
            name: Table label

        Returns:
            LookupTable with outputs reduced modulo capacity

        Raises:
            CapacityOverflow: If domain_size exceeds capacity
        """
        if domain_size is None:
            domain_size = capacity
        if domain_size < 1:
            raise ValueError("domain_size must be positive")
        if domain_size > capacity:
            raise CapacityOverflow(domain_size, capacity, what=f"lookup table '{name}'")

        entries = tuple(int(function(x)) % capacity for x in range(capacity))
        return cls(entries=entries, domain_size=domain_size, name=name)

    def __call__(self, value: int) -> int:
        """Plaintext evaluation (used by the bootstrapping oracle and tests)."""
        return self.entries[value % self.capacity]
