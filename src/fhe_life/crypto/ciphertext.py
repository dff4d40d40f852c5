"""Ciphertext value type.

An LWE-style pair (a, b) with b = <a, s> + m over Z_p, where p is the
combined plaintext capacity. Without the secret vector s the body reveals
nothing the core is allowed to use; the core only passes ciphertexts back
into the evaluation context.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class Ciphertext:
    """Immutable encrypted scalar.

    Attributes:
        a: Mask vector (read-only int64 array)
        b: Body
        modulus: Plaintext capacity the value lives in
    """

    a: np.ndarray
    b: int
    modulus: int

    def __post_init__(self):
        mask = np.array(self.a, dtype=np.int64) % self.modulus
        mask.flags.writeable = False
        object.__setattr__(self, "a", mask)
        object.__setattr__(self, "b", int(self.b) % self.modulus)

    def __reduce__(self):
        # Rebuild through __init__ so the mask comes back read-only
        return (Ciphertext, (self.a, self.b, self.modulus))

    @property
    def dimension(self) -> int:
        return int(self.a.shape[0])

    def __repr__(self) -> str:
        return f"Ciphertext(dimension={self.dimension}, modulus={self.modulus})"
