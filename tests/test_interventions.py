"""Tests for epiagents.interventions."""

import numpy as np
import pytest

from dataio.town_builder import populate, synthetic_businesses, synthetic_population
from epiagents.agents import DiseaseStatus, MaskContext
from epiagents.interventions import (adapt_masking, aloof, behave, heal, mask, sample,
                                     vaccinate)
from epiagents.model import TownModel


@pytest.fixture
def model() -> TownModel:
    return populate(synthetic_population(50, seed=5), synthetic_businesses(5, seed=5), seed=5)


# ═══════════════════════════════════════════════════════════════════════
# SAMPLING
# ═══════════════════════════════════════════════════════════════════════

def test_sample_portion_size(model):
    ids = sample(model, 20)
    assert len(ids) == round(0.2 * len(model.agents))
    assert len(set(ids)) == len(ids)
    assert set(ids) <= set(model.agents)


def test_sample_stratified_by_conditions(model):
    ids = sample(model, 30,
                 conditions=[lambda a: a.age < 18, lambda a: a.age >= 18],
                 distribution=[0.5, 0.5])
    n_total = round(0.3 * len(model.agents))
    children = [i for i in ids if model.agents[i].age < 18]
    assert len(children) == min(round(n_total * 0.5), sum(a.age < 18 for a in model.agents.values()))


@pytest.mark.parametrize("kwargs", [
    dict(conditions=[lambda a: True], distribution=[0.5, 0.5]),
    dict(conditions=[lambda a: True, lambda a: False], distribution=[0.5, 0.6]),
    dict(mode="Watts"),
])
def test_sample_configuration_errors(model, kwargs):
    with pytest.raises(ValueError):
        sample(model, 20, **kwargs)


def test_sample_portion_out_of_range(model):
    with pytest.raises(ValueError):
        sample(model, 120)


# ═══════════════════════════════════════════════════════════════════════
# MASKING & VACCINATION
# ═══════════════════════════════════════════════════════════════════════

def test_mask_only_agents_over_two(model):
    mask(model, 50, "Random")
    maskers = [a for a in model.agents.values() if all(a.will_mask)]
    assert len(maskers) > 0
    assert all(a.age >= 2 for a in maskers)
    assert model.mask_portion == 50
    assert model.mask_distribution_type == "Random"


def test_mask_lists_are_not_shared(model):
    mask(model, 100)
    maskers = [a for a in model.agents.values() if all(a.will_mask)]
    maskers[0].will_mask[MaskContext.GLOBAL] = False
    assert maskers[1].will_mask[MaskContext.GLOBAL] is True


def test_vaccinate_never_touches_infected(model):
    model.infect(10)
    infected = {a.id for a in model.agents.values() if a.infected}
    vaccinate(model, 100, "Random")

    vaccinated = [a for a in model.agents.values() if a.vaccinated]
    assert len(vaccinated) > 0
    assert all(a.status == DiseaseStatus.VACCINATED for a in vaccinated)
    assert all(model.agents[i].infected for i in infected)
    assert all(a.age >= 5 for a in vaccinated)


def test_vaccinated_agents_are_not_seeded(model):
    vaccinate(model, 40)
    seeded = model.infect(5)
    assert all(not a.vaccinated for a in seeded)


# ═══════════════════════════════════════════════════════════════════════
# OTHER INTERVENTIONS
# ═══════════════════════════════════════════════════════════════════════

def test_heal_clears_infections(model):
    model.infect(5)
    for _ in range(6):
        model.step()
    heal(model)
    assert not any(a.infected for a in model.agents.values())
    assert all(a.time_infected == 0 for a in model.agents.values() if a.status == DiseaseStatus.SUSCEPTIBLE)


def test_aloof_switches_off_gatherings(model):
    aloof(model)
    params = model.behavior_parameters
    for name in ("Adult_Community_Gathering", "Child_Community_Gathering", "Retiree_Community_Gathering"):
        assert np.array_equal(getattr(params, name), [0, 0, 0, 0, 1])
    assert params.Adult_House[0] == pytest.approx(0.6)


def test_behave_sets_attribute(model):
    ids = list(model.agents)[:3]
    behave(model, ids + [10_000], "beta", 0.0)
    assert all(model.agents[i].beta == 0.0 for i in ids)


def test_adapt_masking_against_thresholds(model):
    adapt_masking(model, risk_global=0.5, risk_local=0.0)
    for agent in model.agents.values():
        assert agent.will_mask[MaskContext.GLOBAL] == (agent.global_mask_threshold < 0.5)
        assert agent.will_mask[MaskContext.LOCAL] is False
    assert model.risk_parameters.risk_global == 0.5
