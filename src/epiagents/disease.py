"""
===============================================================================
disease.py
Last Updated: 2026-10-19
===============================================================================
Infection dynamics for the hourly town model.

Infection states:
    S - Susceptible (default)
    I - Infected (symptomatic and infectious)
    R - Recovered
    V - Vaccinated
    D - Dead (removed from the town)

Infected agents advance their infection clock by one hour (1/12 day) per
tick, then either recover once the infectious period has elapsed or die
with a small, age and infectivity dependent probability. Transmission is
attempted whenever exactly one party of an interaction is infected.
Wearing a mask cuts the susceptible party's infection probability by 4x.
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import logging
from fractions import Fraction
from typing import List, Union

from .agents import Agent, DiseaseStatus
from .parameters import HOURS_PER_DAY, get_ifr

logger = logging.getLogger(__name__)

HOUR = Fraction(1, HOURS_PER_DAY)
MASK_FACTOR = 4.0


def update_infection(agent: Agent, model) -> bool:
    """Advance an infected agent by one hour.

    Returns:
    died: bool. True if the agent died and was removed from the town
    """
    agent.time_infected += HOUR
    return recover_or_die(agent, model)


def recover_or_die(agent: Agent, model) -> bool:
    params = model.disease_parameters

    # recovery is checked first
    if agent.time_infected >= params.infectious_period:
        agent.status = DiseaseStatus.RECOVERED
        agent.time_infected = Fraction(0)
        return False

    p_death = get_ifr(agent.age) * params.gamma(agent.time_infected) / (params.infectious_period * HOURS_PER_DAY)
    if model.rng.random() < p_death:
        logger.debug("agent %d died at hour %d", agent.id, model.absolute_hour)
        model.kill(agent)
        return True
    return False


def infection_probability(infected: Agent, healthy: Agent, model) -> float:
    """Per-interaction probability that `infected` infects `healthy`"""
    gamma = model.disease_parameters.gamma(infected.time_infected)
    return gamma * infected.beta * MASK_FACTOR ** (-int(healthy.masked))


def transmit(agent: Agent, contact: Agent, model) -> bool:
    """Attempt transmission after an interaction between two agents.

    Recovered and vaccinated agents must first pass a re-infection
    (rp) or breakthrough (vip) roll before an infection is attempted.

    Returns:
    infected: bool. True if a new infection occurred
    """
    if agent.infected == contact.infected:
        return False
    infected, healthy = (agent, contact) if agent.infected else (contact, agent)

    params = model.disease_parameters
    if healthy.status == DiseaseStatus.RECOVERED and model.rng.random() > params.rp:
        return False
    if healthy.status == DiseaseStatus.VACCINATED and model.rng.random() > params.vip:
        return False

    if model.rng.random() > infection_probability(infected, healthy, model):
        return False
    healthy.status = DiseaseStatus.INFECTED
    healthy.time_infected = Fraction(0)
    model.record_transmission(healthy.id, infected.id)
    return True


def seed_infections(model, n: int) -> Union[List[Agent], bool]:
    """Infect n random susceptible agents from outside the town.

    Each seeded case is logged in the transmission network with infector 0.

    Returns:
    seeded: list of infected agents (empty for n == 0), or False if
        nobody is susceptible
    """
    if n < 0:
        raise ValueError(f"number of infections must be non-negative, got {n}")
    susceptible = [a for a in model.agents.values() if a.status == DiseaseStatus.SUSCEPTIBLE]
    if not susceptible:
        logger.debug("No Susceptible agents")
        return False
    if n > len(susceptible):
        logger.warning("Requested %d infections, only %d susceptible agents", n, len(susceptible))
        n = len(susceptible)

    chosen = model.rng.choice(len(susceptible), size=n, replace=False)
    seeded = []
    for idx in sorted(chosen):
        agent = susceptible[idx]
        agent.status = DiseaseStatus.INFECTED
        agent.time_infected = Fraction(0)
        model.record_transmission(agent.id, 0)
        seeded.append(agent)
    return seeded
