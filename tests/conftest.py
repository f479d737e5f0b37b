import random

import pytest


@pytest.fixture
def rng():
    return random.Random(0x5EED)


@pytest.fixture(autouse=True)
def default_collision_policy(monkeypatch):
    monkeypatch.delenv('RELWRANGLE_ON_COLLISION', raising=False)
