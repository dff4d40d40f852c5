"""Error taxonomy for encrypted Game of Life evaluation.

Configuration problems (board dimensions, parameter regimes, plaintext
capacity) are detected before any homomorphic work starts. Only
DimensionMismatch is recoverable; the caller may choose to truncate.
"""


class FheLifeError(Exception):
    """Base class for all fhe_life errors."""


class DimensionMismatch(FheLifeError, ValueError):
    """Initial ciphertext count is incompatible with the column count."""

    def __init__(self, length: int, columns: int):
        self.length = length
        self.columns = columns
        super().__init__(
            f"Cannot lay out {length} cells in rows of {columns} columns"
        )


class UnsupportedParameterRegime(FheLifeError):
    """Context capacity matches no known lookup table layout."""

    def __init__(self, message_modulus: int, carry_modulus: int, supported=()):
        self.message_modulus = message_modulus
        self.carry_modulus = carry_modulus
        self.supported = tuple(supported)
        text = (f"No fused lookup layout for message_modulus={message_modulus}, "
                f"carry_modulus={carry_modulus}")
        if self.supported:
            text += f" (supported: {', '.join(f'{m}x{c}' for m, c in self.supported)})"
        super().__init__(text)


class CapacityOverflow(FheLifeError):
    """A required plaintext domain exceeds the context capacity."""

    def __init__(self, required: int, capacity: int, what: str = "domain"):
        self.required = required
        self.capacity = capacity
        super().__init__(
            f"{what} needs {required} plaintext values but the context only holds {capacity}"
        )
