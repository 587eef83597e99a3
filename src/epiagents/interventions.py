"""
===============================================================================
interventions.py
Last Updated: 2026-10-19
===============================================================================
Non-pharmaceutical and vaccination interventions applied between runs.

- sample: pick a portion of the population, stratified by conditions
- mask: make a portion of agents (aged 2+) willing to mask everywhere
- vaccinate: vaccinate a portion of agents, 34% children (5-17) and
  66% adults (18+); infected agents are never vaccinated
- heal: clear all current infections
- aloof: switch off community gatherings
- behave: set an attribute on a list of agents
- adapt_masking: agents mask when perceived risk exceeds their threshold

Example Usage:
    mask(model, 20, "Random")
    vaccinate(model, 20, "Random")
    simulate(model)
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import logging
import numpy as np
from dataclasses import replace
from fractions import Fraction
from typing import Callable, List, Optional, Sequence

from .agents import Agent, DiseaseStatus, MaskContext

logger = logging.getLogger(__name__)

SAMPLING_MODES = ("Random",)
NO_GATHERING = [0.0, 0.0, 0.0, 0.0, 1.0]


def sample(model, portion: float,
           conditions: Optional[Sequence[Callable[[Agent], bool]]] = None,
           distribution: Optional[Sequence[float]] = None,
           mode: str = "Random") -> List[int]:
    """Sample a portion of the live agents.

    Parameters:
    model: TownModel
    portion: float. Percent (0-100) of the live population to sample
    conditions: list of callables. Agent filters, one per stratum
    distribution: list of float. Share of the sample drawn from each
        stratum, must sum to 1
    mode: str. Sampling scheme, only "Random" is supported

    Returns:
    ids: list of int. Sampled agent ids, without repeats
    """
    conditions = list(conditions) if conditions is not None else [lambda a: True]
    distribution = list(distribution) if distribution is not None else [1.0]
    if len(conditions) != len(distribution):
        raise ValueError("conditions and distribution must have the same length")
    if not np.isclose(sum(distribution), 1.0):
        raise ValueError(f"distribution must sum to 1, got {sum(distribution)}")
    if not 0 <= portion <= 100:
        raise ValueError(f"portion is a percentage, got {portion}")
    if mode not in SAMPLING_MODES:
        raise ValueError(f"unknown sampling mode {mode!r}, expected one of {SAMPLING_MODES}")

    n_total = round(portion / 100 * len(model.agents))
    chosen: List[int] = []
    taken = set()
    for condition, share in zip(conditions, distribution):
        pool = [a.id for a in model.agents.values() if a.id not in taken and condition(a)]
        k = min(round(n_total * share), len(pool))
        if k < round(n_total * share):
            logger.warning("only %d agents satisfy a sampling condition, wanted %d", len(pool), round(n_total * share))
        picks = model.rng.choice(pool, size=k, replace=False) if k else []
        for agent_id in picks:
            chosen.append(int(agent_id))
            taken.add(int(agent_id))
    return chosen


def behave(model, ids: Sequence[int], attr: str, value):
    """Set `attr` to `value` for the given live agents"""
    for agent_id in ids:
        agent = model.agents.get(agent_id)
        if agent is None:
            continue
        setattr(agent, attr, list(value) if isinstance(value, list) else value)
    return model


def mask(model, portion: float, mode: str = "Random"):
    threshold = model.age_parameters.mask_age_threshold
    ids = sample(model, portion, mode=mode, conditions=[lambda a: a.age >= threshold])

    model.mask_distribution_type = mode
    model.mask_portion = portion
    return behave(model, ids, "will_mask", [True, True, True])


def vaccinate(model, portion: float, mode: str = "Random"):
    lo, hi = model.age_parameters.vax_age_thresholds
    eligible = lambda a: a.status != DiseaseStatus.INFECTED
    ids = sample(
        model, portion, mode=mode,
        conditions=[lambda a: eligible(a) and lo <= a.age <= hi,
                    lambda a: eligible(a) and a.age > hi],
        distribution=list(model.age_parameters.vax_distribution_proportions),
    )

    model.vax_distribution_type = mode
    model.vax_portion = portion
    behave(model, ids, "status", DiseaseStatus.VACCINATED)
    return behave(model, ids, "vaccinated", True)


def heal(model):
    """Return every infected agent to the susceptible state"""
    for agent in model.agents.values():
        if agent.infected:
            agent.status = DiseaseStatus.SUSCEPTIBLE
            agent.time_infected = Fraction(0)
    return model


def aloof(model):
    """Disable community gathering behavior for all agents"""
    model.behavior_parameters = replace(
        model.behavior_parameters,
        Adult_Community_Gathering=NO_GATHERING,
        Child_Community_Gathering=NO_GATHERING,
        Retiree_Community_Gathering=NO_GATHERING,
    )
    return model


def adapt_masking(model, risk_global: Optional[float] = None, risk_local: Optional[float] = None):
    """Update global/local mask willingness from perceived risk.

    An agent masks in a context when its threshold is below the risk level
    for that context. Risk defaults to the model's risk parameters.
    """
    if risk_global is not None:
        model.risk_parameters.risk_global = risk_global
    if risk_local is not None:
        model.risk_parameters.risk_local = risk_local
    risk = model.risk_parameters

    for agent in model.agents.values():
        agent.will_mask[MaskContext.GLOBAL] = agent.global_mask_threshold < risk.risk_global
        agent.will_mask[MaskContext.LOCAL] = agent.local_mask_threshold < risk.risk_local
    return model
