"""Tests for epiagents.sampler and the parameter tables it draws from."""

import numpy as np
import pytest

from epiagents.parameters import (BehaviorParameters, DiseaseParameters, get_ifr,
                                  is_public_facing, validate_distribution)
from epiagents.sampler import Action, spin, weighted_index


# ═══════════════════════════════════════════════════════════════════════
# SPIN
# ═══════════════════════════════════════════════════════════════════════

def test_spin_all_nothing_is_always_nothing():
    rng = np.random.default_rng(0)
    draws = {spin([0, 0, 0, 0, 1], rng) for _ in range(1000)}
    assert draws == {Action.NOTHING}


def test_spin_degenerate_on_first_action():
    rng = np.random.default_rng(1)
    assert all(spin([1, 0, 0, 0, 0], rng) == Action.SOCIALIZE_LOCAL for _ in range(200))


def test_spin_order_matches_distribution_slots():
    rng = np.random.default_rng(2)
    assert spin([0, 1, 0, 0, 0], rng) == Action.SOCIALIZE_GLOBAL
    assert spin([0, 0, 1, 0, 0], rng) == Action.HANG_WITH_FRIENDS
    assert spin([0, 0, 0, 1, 0], rng) == Action.SHOPPING


def test_spin_frequencies_follow_distribution():
    rng = np.random.default_rng(3)
    dist = [0.6, 0.1, 0.15, 0.1, 0.05]
    draws = [spin(dist, rng) for _ in range(20000)]
    freq_local = sum(d == Action.SOCIALIZE_LOCAL for d in draws) / len(draws)
    freq_nothing = sum(d == Action.NOTHING for d in draws) / len(draws)
    assert freq_local == pytest.approx(0.6, abs=0.02)
    assert freq_nothing == pytest.approx(0.05, abs=0.01)


def test_spin_is_deterministic_for_a_seed():
    dist = [0.2, 0.2, 0.2, 0.2, 0.2]
    rng1, rng2 = np.random.default_rng(99), np.random.default_rng(99)
    assert [spin(dist, rng1) for _ in range(100)] == [spin(dist, rng2) for _ in range(100)]


@pytest.mark.parametrize("dist", [
    [0.5, 0.5, 0.5, 0.0, 0.0],
    [0.2, 0.2, 0.2, 0.2],
    [1.2, -0.2, 0.0, 0.0, 0.0],
])
def test_spin_rejects_bad_distributions(dist):
    with pytest.raises(ValueError):
        spin(dist, np.random.default_rng(0))


# ═══════════════════════════════════════════════════════════════════════
# WEIGHTED INDEX
# ═══════════════════════════════════════════════════════════════════════

def test_weighted_index_never_draws_zero_weights():
    rng = np.random.default_rng(4)
    drawn = {weighted_index([0.0, 3.0, 0.0, 1.0], rng) for _ in range(500)}
    assert drawn == {1, 3}


def test_weighted_index_unnormalized_proportions():
    rng = np.random.default_rng(5)
    draws = [weighted_index([1.0, 3.0], rng) for _ in range(10000)]
    assert np.mean(draws) == pytest.approx(0.75, abs=0.02)


def test_weighted_index_requires_positive_weight():
    with pytest.raises(ValueError):
        weighted_index([0.0, 0.0], np.random.default_rng(0))
    with pytest.raises(ValueError):
        weighted_index([], np.random.default_rng(0))


# ═══════════════════════════════════════════════════════════════════════
# PARAMETERS
# ═══════════════════════════════════════════════════════════════════════

def test_default_behavior_tables_are_valid():
    params = BehaviorParameters()
    for name in BehaviorParameters.table_names():
        assert getattr(params, name).sum() == pytest.approx(1.0)


def test_behavior_table_not_summing_to_one_is_fatal():
    with pytest.raises(ValueError):
        BehaviorParameters(Adult_House=[0.5, 0.1, 0.1, 0.1, 0.1])


def test_validate_distribution_returns_array():
    arr = validate_distribution([0, 0, 0, 0, 1])
    assert isinstance(arr, np.ndarray)


def test_gamma_rises_then_decays():
    params = DiseaseParameters()
    assert params.gamma(0) == 0.0
    assert params.gamma(1) < params.gamma(3)
    assert params.gamma(30) < params.gamma(3)
    assert params.gamma(4) == pytest.approx(4 / (64 + 64))


def test_disease_parameters_validation():
    with pytest.raises(ValueError):
        DiseaseParameters(rp=1.5)
    with pytest.raises(ValueError):
        DiseaseParameters(infectious_period=0)
    with pytest.raises(ValueError):
        DiseaseParameters(beta_range=(0.9, 0.1))


def test_ifr_increases_with_age():
    ages = [0, 20, 40, 60, 80]
    ifrs = [get_ifr(a) for a in ages]
    assert ifrs == sorted(ifrs)
    assert get_ifr(0) == pytest.approx(10 ** -3.27 / 100)


def test_public_facing_from_sic_table():
    assert is_public_facing(54)       # food stores
    assert not is_public_facing(20)   # food manufacturing
    assert not is_public_facing(0)    # unknown code
