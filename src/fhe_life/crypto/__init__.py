"""Key management boundary and the simulated homomorphic backend."""

from .ciphertext import Ciphertext
from .key_cache import KeyCache
from .keys import ClientKey, EvaluationContext, generate_keys
from .lookup import LookupTable
from .params import (
    DEFAULT_PARAMETERS,
    PARAM_MESSAGE_1_CARRY_1,
    PARAM_MESSAGE_2_CARRY_1,
    PARAM_MESSAGE_2_CARRY_2,
    PARAM_MESSAGE_3_CARRY_3,
    PARAM_MESSAGE_4_CARRY_4,
    PARAMETER_SETS,
    ParameterSet,
    get_parameter_set,
)

__all__ = [
    'Ciphertext',
    'ClientKey',
    'EvaluationContext',
    'KeyCache',
    'LookupTable',
    'ParameterSet',
    'generate_keys',
    'get_parameter_set',
    'DEFAULT_PARAMETERS',
    'PARAMETER_SETS',
    'PARAM_MESSAGE_1_CARRY_1',
    'PARAM_MESSAGE_2_CARRY_1',
    'PARAM_MESSAGE_2_CARRY_2',
    'PARAM_MESSAGE_3_CARRY_3',
    'PARAM_MESSAGE_4_CARRY_4',
]
