"""Shared fixtures for threshold_keys tests."""

import random

import pytest

from threshold_keys.keys import PrivateKey

FIXED_KEY_HEX = "eaf02ca348c524e6392655ba4d29603cd1a7347d9d65cfe93ce1ebffdca22694"


@pytest.fixture
def rng():
    """Deterministic RNG for reproducible tests."""
    return random.Random(42)


@pytest.fixture
def fixed_key():
    return PrivateKey.from_hex(FIXED_KEY_HEX)


@pytest.fixture
def random_key(rng):
    return PrivateKey.generate(rng)
