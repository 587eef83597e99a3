"""
===============================================================================
town_builder.py
Last Updated: 2026-10-19
===============================================================================

Description:
    Builds a TownModel from a population table and a business table.
    Both tables can be passed as DataFrames or CSV paths, and seeded
    synthetic versions are provided for demos and tests.

Population columns:
    household (int), age (int), sex ('M'/'F'), income (optional)
Business columns:
    business (int), sic (int, 2-digit SIC major group), employees (int)

Notes:
    - Age < 18 -> Child, 18..64 -> Adult, 65+ -> Retiree.
    - Children under 5 have no school and stay home.
    - Adults fill business slots in proportion to the open positions;
      adults left without a local job commute to a shared out-of-town
      workplace (one Work node).
    - Each household joins one community gathering with probability
      `gathering_fraction`.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import logging
import numpy as np
import pandas as pd
from typing import List, Optional, Tuple, Union

from epiagents.agents import Adult, Child, Retiree
from epiagents.model import TownModel
from epiagents.parameters import (AgeParameters, BehaviorParameters, DEFAULT_SHIFTS,
                                  DiseaseParameters, SIC_CODES)
from epiagents.town import LocationType, Town

logger = logging.getLogger(__name__)

ADULT_AGE = 18
RETIREMENT_AGE = 65
SCHOOL_AGE = 5

TableLike = Union[pd.DataFrame, str]


def _as_frame(table: TableLike, required: list, name: str) -> pd.DataFrame:
    df = pd.read_csv(table) if isinstance(table, str) else table.copy()
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{name} table is missing columns {missing}")
    return df


def synthetic_population(n_households: int = 100, seed: Optional[int] = None) -> pd.DataFrame:
    """Generate a household population table.

    Households hold one or two adults, zero to three children, and about
    one in five households is a retiree household.
    """
    rng = np.random.default_rng(seed)
    rows = []
    for hh in range(1, n_households + 1):
        if rng.random() < 0.2:
            ages = list(rng.integers(RETIREMENT_AGE, 95, size=rng.integers(1, 3)))
        else:
            n_adults = int(rng.integers(1, 3))
            adult_ages = rng.integers(ADULT_AGE, RETIREMENT_AGE, size=n_adults)
            n_children = int(rng.integers(0, 4))
            child_ages = rng.integers(0, ADULT_AGE, size=n_children)
            ages = list(adult_ages) + list(child_ages)
        for age in ages:
            rows.append({
                "household": hh,
                "age": int(age),
                "sex": "M" if rng.random() < 0.5 else "F",
                "income": max(0, int(rng.normal(45_000, 15_000))) if age >= ADULT_AGE else 0,
            })
    return pd.DataFrame(rows)


def synthetic_businesses(n_businesses: int = 10, seed: Optional[int] = None) -> pd.DataFrame:
    """Generate a business table with SIC codes drawn from the SIC table"""
    rng = np.random.default_rng(seed)
    codes = SIC_CODES.index.to_numpy()
    return pd.DataFrame({
        "business": np.arange(1, n_businesses + 1),
        "sic": rng.choice(codes, size=n_businesses),
        "employees": rng.integers(1, 15, size=n_businesses),
    })


def populate(population: TableLike, businesses: TableLike,
             n_schools: int = 1,
             n_gatherings: int = 2,
             gathering_fraction: float = 0.5,
             behavior_parameters: Optional[BehaviorParameters] = None,
             disease_parameters: Optional[DiseaseParameters] = None,
             age_parameters: Optional[AgeParameters] = None,
             shifts: Optional[List[Tuple[int, int]]] = None,
             seed: Optional[int] = None) -> TownModel:
    """Construct the town graph and agents, returning a ready TownModel.

    Parameters:
    population: DataFrame or str. Population table (see module notes)
    businesses: DataFrame or str. Business table (see module notes)
    n_schools: int. Number of schools, children are spread round-robin
    n_gatherings: int. Number of community gathering sites
    gathering_fraction: float. Probability a household attends a gathering
    shifts: list of (start, end). Work shifts adults are drawn from,
        defaults to DEFAULT_SHIFTS
    seed: int, optional. Seed for construction and for the model stream

    Returns:
    model: TownModel
    """
    pop = _as_frame(population, ["household", "age", "sex"], "population")
    biz = _as_frame(businesses, ["business", "sic", "employees"], "business")
    if "income" not in pop.columns:
        pop["income"] = 0
    if not 0.0 <= gathering_fraction <= 1.0:
        raise ValueError("gathering_fraction must be between 0 and 1")

    shifts = [tuple(s) for s in (DEFAULT_SHIFTS if shifts is None else shifts)]
    if not shifts:
        raise ValueError("at least one work shift is required")

    rng = np.random.default_rng(seed)
    disease_parameters = disease_parameters or DiseaseParameters()
    town = Town()

    houses = {hh: town.add_location(LocationType.HOUSE) for hh in pop["household"].unique()}
    business_nodes = [town.add_location(LocationType.BUSINESS, sic=int(row.sic)) for row in biz.itertuples()]
    open_slots = biz["employees"].to_numpy(dtype=float).copy()
    commute = town.add_location(LocationType.WORK)
    schools = [town.add_location(LocationType.SCHOOL) for _ in range(n_schools)]
    gatherings = [town.add_location(LocationType.COMMUNITY_GATHERING) for _ in range(n_gatherings)]

    household_gathering = {}
    for hh in houses:
        joins = gatherings and rng.random() < gathering_fraction
        household_gathering[hh] = gatherings[rng.integers(len(gatherings))] if joins else 0

    agents = []
    n_children = 0
    for agent_id, row in enumerate(pop.itertuples(), start=1):
        home = houses[row.household]
        common = dict(
            community_gathering=household_gathering[row.household],
            beta=float(rng.uniform(*disease_parameters.beta_range)),
            global_mask_threshold=float(rng.random()),
            local_mask_threshold=float(rng.random()),
        )
        if row.age < ADULT_AGE:
            if row.age >= SCHOOL_AGE and schools:
                school = schools[n_children % len(schools)]
                n_children += 1
            else:
                school = home
            agent = Child(agent_id, int(row.age), row.sex, home, school=school, **common)
            town.connect(home, school)
        elif row.age < RETIREMENT_AGE:
            if open_slots.sum() > 0:
                idx = int(rng.choice(len(open_slots), p=open_slots / open_slots.sum()))
                open_slots[idx] -= 1
                work = business_nodes[idx]
            else:
                work = commute
            shift = shifts[rng.integers(len(shifts))]
            agent = Adult(agent_id, int(row.age), row.sex, home, work=work, shift=shift,
                          income=int(row.income), **common)
            town.connect(home, work)
        else:
            agent = Retiree(agent_id, int(row.age), row.sex, home, income=int(row.income), **common)
        town.connect(home, agent.community_gathering)
        agents.append(agent)

    logger.info("populated town with %d agents in %d houses, %d businesses",
                len(agents), len(houses), len(business_nodes))
    return TownModel(town, agents,
                     behavior_parameters=behavior_parameters,
                     disease_parameters=disease_parameters,
                     age_parameters=age_parameters,
                     shifts=shifts,
                     seed=seed)


def town_summary(model: TownModel) -> pd.DataFrame:
    """Counts of locations by type and agents by role"""
    counts = dict(model.town.summary())
    for agent in model.agents.values():
        counts[agent.role.value] = counts.get(agent.role.value, 0) + 1
    return pd.DataFrame([counts])
