"""
===============================================================================
behavior.py
Last Updated: 2026-10-19
===============================================================================
Hourly scheduling and decision rules.

Reset phase: every agent is moved to its canonical location for the hour.
    Weekday: adults go to work during their shift, children go to school
             during school hours, everyone else stays home.
    Weekend: agents with a community gathering attend it during gathering
             hours, otherwise they stay home.

Decision phase: every agent draws its pending action from the behavior
table matching its role and where the reset left it.
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import numpy as np
from typing import Callable, Dict

from .agents import Agent, Role
from .parameters import GATHERING_HOURS, SCHOOL_HOURS, WEEKEND_PERIOD
from .sampler import spin


def is_weekday(model) -> bool:
    return model.day % WEEKEND_PERIOD != 0


def attends_gathering(agent: Agent, model) -> bool:
    """Weekend gathering hours for an agent with a gathering assignment"""
    lo, hi = GATHERING_HOURS
    return lo <= model.time <= hi and agent.community_gathering != 0


# ==================== Reset ==================================================
def _adult_weekday_location(adult, model) -> int:
    start, end = adult.shift
    return adult.work if start <= model.time <= end else adult.home


def _child_weekday_location(child, model) -> int:
    lo, hi = SCHOOL_HOURS
    return child.school if lo <= model.time <= hi else child.home


def _retiree_weekday_location(retiree, model) -> int:
    return retiree.home


_WEEKDAY_LOCATION: Dict[Role, Callable] = {
    Role.ADULT: _adult_weekday_location,
    Role.CHILD: _child_weekday_location,
    Role.RETIREE: _retiree_weekday_location,
}


def canonical_location(agent: Agent, model) -> int:
    """Location an agent starts the current hour at"""
    if is_weekday(model):
        return _WEEKDAY_LOCATION[agent.role](agent, model)
    if attends_gathering(agent, model):
        return agent.community_gathering
    return agent.home


def reset_agent(agent: Agent, model) -> None:
    model.town.move_agent(agent, canonical_location(agent, model))


# ==================== Decide =================================================
# role -> (house table, work/school table, community gathering table)
_TABLES: Dict[Role, tuple] = {
    Role.ADULT: ("Adult_House", "Adult_Work", "Adult_Community_Gathering"),
    Role.CHILD: ("Child_House", "Child_School", "Child_Community_Gathering"),
    Role.RETIREE: ("Retiree_day", "Retiree_day", "Retiree_Community_Gathering"),
}


def behavior_table(agent: Agent, model) -> np.ndarray:
    """Pick the action distribution for an agent this hour.

    Must be called after the reset phase: on weekdays the choice between
    the house and work tables depends on where the agent currently is.
    """
    house, work, gathering = _TABLES[agent.role]
    params = model.behavior_parameters
    if is_weekday(model):
        name = house if model.town.is_house(agent.pos) else work
    elif attends_gathering(agent, model):
        name = gathering
    else:
        name = house
    return getattr(params, name)


def decide(agent: Agent, model) -> None:
    agent.next_action = spin(behavior_table(agent, model), model.rng)
