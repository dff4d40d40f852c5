"""Shared fixtures: seeded keys for the parameter regimes under test."""

import pytest

from fhe_life.crypto.keys import generate_keys
from fhe_life.crypto.params import PARAM_MESSAGE_2_CARRY_2, PARAM_MESSAGE_3_CARRY_3


@pytest.fixture(scope="session")
def keys_2_2():
    """Client key and context with capacity 16."""
    return generate_keys(PARAM_MESSAGE_2_CARRY_2, seed=1234)


@pytest.fixture(scope="session")
def keys_3_3():
    """Client key and context with capacity 64."""
    return generate_keys(PARAM_MESSAGE_3_CARRY_3, seed=4321)


@pytest.fixture
def client_key(keys_2_2):
    return keys_2_2[0]


@pytest.fixture
def context(keys_2_2):
    return keys_2_2[1]
