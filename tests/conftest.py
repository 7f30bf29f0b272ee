"""Shared fixtures."""

import random

import pytest


@pytest.fixture
def rng():
    """Seeded random source so tests are repeatable."""
    return random.Random(1234)
