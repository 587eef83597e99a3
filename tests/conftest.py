"""Shared fixtures: hand-built towns small enough to reason about."""

import numpy as np
import pytest

from epiagents.agents import Adult, Child, Retiree
from epiagents.model import TownModel
from epiagents.town import LocationType, Town

HOUSE_A, HOUSE_B, HOUSE_C = 1, 2, 3
WORKPLACE = 10
SCHOOL = 20
GROCERY = 30      # SIC 54, public facing
FACTORY = 31      # SIC 20, closed system
GATHERING = 40


class ScriptedRandom:
    """Stand-in for the model random stream with scripted uniform draws.

    `random()` returns the scripted values in order (repeating the last
    one); every other draw is delegated to a real seeded generator.
    """

    def __init__(self, values, seed=0):
        self.values = list(values)
        self.calls = 0
        self._rng = np.random.default_rng(seed)

    def random(self):
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value

    def __getattr__(self, name):
        return getattr(self._rng, name)


@pytest.fixture
def town() -> Town:
    t = Town()
    t.add_location(LocationType.HOUSE, node=HOUSE_A)
    t.add_location(LocationType.HOUSE, node=HOUSE_B)
    t.add_location(LocationType.HOUSE, node=HOUSE_C)
    t.add_location(LocationType.WORK, node=WORKPLACE)
    t.add_location(LocationType.SCHOOL, node=SCHOOL)
    t.add_location(LocationType.BUSINESS, node=GROCERY, sic=54)
    t.add_location(LocationType.BUSINESS, node=FACTORY, sic=20)
    t.add_location(LocationType.COMMUNITY_GATHERING, node=GATHERING)
    return t


def make_trio():
    """One adult on the (0, 8) shift, one school child, one retiree"""
    adult = Adult(1, 35, "F", HOUSE_A, work=WORKPLACE, shift=(0, 8), community_gathering=GATHERING, beta=0.8)
    child = Child(2, 8, "M", HOUSE_A, school=SCHOOL, community_gathering=GATHERING, beta=0.6)
    retiree = Retiree(3, 70, "F", HOUSE_B, beta=0.5)
    return adult, child, retiree


@pytest.fixture
def trio_model(town) -> TownModel:
    return TownModel(town, make_trio(), seed=1234)
