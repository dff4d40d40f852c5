"""Parameter sets for the simulated shortint backend.

A parameter set fixes the plaintext space of every ciphertext: the message
modulus (values a fresh encryption may hold) times the carry modulus
(headroom for unreduced sums). Their product is the combined plaintext
capacity that lookup tables and strategies are validated against.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ParameterSet:
    """Named plaintext capacity configuration.

    Attributes:
        name: Preset identifier
        message_modulus: Size of the message space
        carry_modulus: Size of the carry space
        lwe_dimension: Length of the ciphertext mask vector
    """

    name: str
    message_modulus: int
    carry_modulus: int
    lwe_dimension: int = 16

    def __post_init__(self):
        if self.message_modulus < 2 or self.carry_modulus < 1:
            raise ValueError("message_modulus must be >= 2 and carry_modulus >= 1")
        if self.lwe_dimension < 1:
            raise ValueError("lwe_dimension must be positive")

    @property
    def plaintext_capacity(self) -> int:
        """Combined plaintext capacity (message x carry)."""
        return self.message_modulus * self.carry_modulus


PARAM_MESSAGE_1_CARRY_1 = ParameterSet("PARAM_MESSAGE_1_CARRY_1", 2, 2)
PARAM_MESSAGE_2_CARRY_1 = ParameterSet("PARAM_MESSAGE_2_CARRY_1", 4, 2)
PARAM_MESSAGE_2_CARRY_2 = ParameterSet("PARAM_MESSAGE_2_CARRY_2", 4, 4)
PARAM_MESSAGE_3_CARRY_3 = ParameterSet("PARAM_MESSAGE_3_CARRY_3", 8, 8)
PARAM_MESSAGE_4_CARRY_4 = ParameterSet("PARAM_MESSAGE_4_CARRY_4", 16, 16)

PARAMETER_SETS: Dict[str, ParameterSet] = {
    p.name: p for p in (
        PARAM_MESSAGE_1_CARRY_1,
        PARAM_MESSAGE_2_CARRY_1,
        PARAM_MESSAGE_2_CARRY_2,
        PARAM_MESSAGE_3_CARRY_3,
        PARAM_MESSAGE_4_CARRY_4,
    )
}

DEFAULT_PARAMETERS = PARAM_MESSAGE_2_CARRY_2


def get_parameter_set(name: str) -> ParameterSet:
    """Look up a preset by name (case-insensitive).

    Raises:
        ValueError: If no preset has that name
    """
    key = name.strip().upper()
    if key not in PARAMETER_SETS:
        raise ValueError(f"Unknown parameter set: {name}")
    return PARAMETER_SETS[key]
