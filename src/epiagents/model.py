"""
===============================================================================
model.py
Last Updated: 2026-10-19
===============================================================================
Hourly Agent-Based Epidemic Model of a Small Town
=================================================

The TownModel holds everything a simulated hour needs: the location
graph, the registry of live agents, the calendar, the parameter tables,
the random stream and the epidemic ledgers (transmission network, dead
agents, end-of-day snapshots).

One call to `TownModel.step()` simulates one hour in four passes over
the live agents, each pass finishing for everyone before the next starts:
    1. clear pending actions, progress infections (recovery / death)
    2. move every agent to its canonical location for the hour
    3. draw every agent's action for the hour
    4. execute every agent's action

Twelve hours make a day. Every sixth day (day % 6 == 0) is a weekend.

Example Usage:
    model = populate(population, businesses, seed=1)
    model.infect(3)
    simulate(model)
    print_summary(model)
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import logging
import numpy as np
import pandas as pd
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .agents import Agent, DiseaseStatus, Role
from .analysis import analyze
from .behavior import decide, reset_agent
from .disease import seed_infections, update_infection
from .interactions import act
from .parameters import (AgeParameters, BehaviorParameters, DEFAULT_SHIFTS,
                         DiseaseParameters, HOURS_PER_DAY, RiskParameters)
from .sampler import Action
from .town import LocationType, Town

logger = logging.getLogger(__name__)

StopPredicate = Callable[["TownModel"], bool]


class TownModel:
    """Simulation context for the hourly town epidemic model.

    Parameters:
    town: Town. Location graph, built by the population provider
    agents: iterable of Agent. Initial population, placed at their homes
    behavior_parameters: BehaviorParameters. Action probability tables
    disease_parameters: DiseaseParameters. Infection parameters
    age_parameters: AgeParameters. Age thresholds and friend radii
    risk_parameters: RiskParameters. Perceived risk for adaptive masking
    shifts: list of (start, end). Work shifts available to adults
    seed: int, optional. Seed for the model random stream
    """
    def __init__(self, town: Town, agents: Iterable[Agent] = (),
                 behavior_parameters: Optional[BehaviorParameters] = None,
                 disease_parameters: Optional[DiseaseParameters] = None,
                 age_parameters: Optional[AgeParameters] = None,
                 risk_parameters: Optional[RiskParameters] = None,
                 shifts: Optional[List[Tuple[int, int]]] = None,
                 seed: Optional[int] = None):
        self.town = town
        self.rng = np.random.default_rng(seed)
        self.seed = seed

        self.behavior_parameters = behavior_parameters or BehaviorParameters()
        self.disease_parameters = disease_parameters or DiseaseParameters()
        self.age_parameters = age_parameters or AgeParameters()
        self.risk_parameters = risk_parameters or RiskParameters()
        self.shifts = list(shifts or DEFAULT_SHIFTS)

        # live registry, iteration order = insertion order
        self.agents: Dict[int, Agent] = {}
        self.initial_ids: List[int] = []
        self._known_ids = set()
        self.businesses: List[int] = town.businesses

        # calendar
        self.time = 0
        self.day = 0
        self.model_steps = 0

        # ledgers
        self.transmission_records: List[Tuple[int, int, int]] = []
        self.dead_records: List[dict] = []
        self.daily_records: List[dict] = []

        # intervention metadata
        self.mask_distribution_type = ""
        self.vax_distribution_type = ""
        self.mask_portion = 0
        self.vax_portion = 0

        # filled by simulate()
        self.epidemic_data: Optional[pd.DataFrame] = None
        self.epidemic_statistics: Optional[pd.DataFrame] = None

        for agent in agents:
            self.add_agent(agent)

    def __repr__(self) -> str:
        return (f"TownModel(agents={len(self.agents)}, day={self.day}, "
                f"hour={self.time}, steps={self.model_steps})")

    # ==================== Registry ===========================================
    def _check_location(self, agent: Agent, node: int, loc_type: LocationType,
                        optional: bool = False) -> None:
        if optional and node == 0:
            return
        if node not in self.town:
            raise ValueError(f"agent {agent.id}: unknown location {node}")
        if loc_type is not None and self.town.location_type(node) != loc_type:
            raise ValueError(f"agent {agent.id}: location {node} is not a {loc_type.value}")

    def add_agent(self, agent: Agent) -> Agent:
        """Register an agent and place it at its home"""
        if agent.id == 0 or agent.id in self._known_ids:
            raise ValueError(f"invalid or duplicate agent id {agent.id}")
        self._check_location(agent, agent.home, LocationType.HOUSE)
        self._check_location(agent, agent.community_gathering, LocationType.COMMUNITY_GATHERING, optional=True)
        if agent.role == Role.ADULT:
            self._check_location(agent, agent.work, None)
        elif agent.role == Role.CHILD:
            self._check_location(agent, agent.school, None)

        self.agents[agent.id] = agent
        self.initial_ids.append(agent.id)
        self._known_ids.add(agent.id)
        self.town.place_agent(agent, agent.home)
        return agent

    def kill(self, agent: Agent) -> None:
        """Remove an agent from the town, keeping its record in the dead ledger"""
        self.dead_records.append({
            "agent": agent.id,
            "home": agent.home,
            "contacts": dict(agent.contacts),
            "hour": self.absolute_hour,
        })
        agent.status = DiseaseStatus.DEAD
        agent.next_action = Action.NOTHING
        self.town.remove_agent(agent)
        del self.agents[agent.id]

    @property
    def init_pop_size(self) -> int:
        return len(self.initial_ids)

    @property
    def dead_ids(self) -> set:
        return {r["agent"] for r in self.dead_records}

    def random_agent(self, condition: Optional[Callable[[Agent], bool]] = None) -> Optional[Agent]:
        """Uniformly random live agent satisfying `condition`, or None"""
        candidates = [a for a in self.agents.values() if condition is None or condition(a)]
        if not candidates:
            return None
        return candidates[self.rng.integers(len(candidates))]

    def count(self, status: DiseaseStatus) -> int:
        return sum(1 for a in self.agents.values() if a.status == status)

    # ==================== Calendar ===========================================
    @property
    def absolute_hour(self) -> int:
        return self.day * HOURS_PER_DAY + self.time

    # ==================== Ledgers ============================================
    def record_transmission(self, agent_id: int, infected_by: int) -> None:
        self.transmission_records.append((agent_id, infected_by, self.absolute_hour))

    @property
    def transmission_network(self) -> pd.DataFrame:
        return pd.DataFrame(self.transmission_records,
                            columns=["agent", "infected_by", "time_infected"])

    @property
    def dead_agents(self) -> pd.DataFrame:
        return pd.DataFrame(self.dead_records, columns=["agent", "home", "contacts", "hour"])

    def _extraction_record(self, agent_id: int) -> dict:
        if agent_id not in self.agents:
            return {"id": agent_id, "will_mask": [False, False, False], "masked": False,
                    "status": DiseaseStatus.DEAD.value, "work": 0, "community_gathering": 0}
        agent = self.agents[agent_id]
        work, gathering = _EXTRACTION_IDS[agent.role](agent)
        return {"id": agent.id, "will_mask": list(agent.will_mask), "masked": agent.masked,
                "status": agent.status.value, "work": work, "community_gathering": gathering}

    def collect_end_of_day(self) -> None:
        """Snapshot every initial agent at the end of the day"""
        for agent_id in self.initial_ids:
            record = self._extraction_record(agent_id)
            record["day"] = self.day
            self.daily_records.append(record)

    # ==================== Stepping ===========================================
    def infect(self, n: int):
        """Seed n infections among susceptible agents (see disease.seed_infections)"""
        return seed_infections(self, n)

    def step(self) -> None:
        """Simulate one hour"""
        # 1. infection progression; deaths leave the registry here
        for agent in list(self.agents.values()):
            agent.next_action = Action.NOTHING
            if agent.infected:
                update_infection(agent, self)

        # 2. move agents to their default location for the hour
        for agent in list(self.agents.values()):
            reset_agent(agent, self)

        # 3. choose actions
        for agent in list(self.agents.values()):
            decide(agent, self)

        # 4. act
        for agent in list(self.agents.values()):
            act(agent, self)

        if self.time == HOURS_PER_DAY - 1:
            self.collect_end_of_day()
            self.day += 1
        self.time = (self.time + 1) % HOURS_PER_DAY
        self.model_steps += 1

    def snapshot(self) -> dict:
        """Per-tick population counts"""
        return {
            "step": self.model_steps,
            "day": self.day,
            "hour": self.time,
            "susceptible": self.count(DiseaseStatus.SUSCEPTIBLE),
            "infected": self.count(DiseaseStatus.INFECTED),
            "recovered": self.count(DiseaseStatus.RECOVERED),
            "vaccinated": self.count(DiseaseStatus.VACCINATED),
            "dead": len(self.dead_records),
            "population": len(self.agents),
        }

    def run(self, n_steps: Optional[int] = None, stop: Optional[StopPredicate] = None) -> pd.DataFrame:
        """Step the model n_steps times or until `stop(model)` is true.

        The stopping predicate is checked once before every tick. At least
        one of n_steps and stop must be given.

        Returns:
        data: pd.DataFrame. One row of counts per tick, including the start
        """
        if n_steps is None and stop is None:
            raise ValueError("run() needs n_steps or a stopping predicate")
        history = [self.snapshot()]
        taken = 0
        while n_steps is None or taken < n_steps:
            if stop is not None and stop(self):
                break
            self.step()
            taken += 1
            history.append(self.snapshot())
        return pd.DataFrame(history)


_EXTRACTION_IDS = {
    Role.ADULT: lambda a: (a.work, a.community_gathering),
    Role.CHILD: lambda a: (0, 0),
    Role.RETIREE: lambda a: (0, a.community_gathering),
}


def hazard(model: TownModel) -> bool:
    """True once no infected agents remain (the epidemic is over)"""
    return not any(agent.infected for agent in model.agents.values())


def simulate(model: TownModel, duration: int = 0, stop: Optional[StopPredicate] = None) -> TownModel:
    """Run the model and analyze the outcome.

    Parameters:
    model: TownModel. Model to step in place
    duration: int. Number of days to run for. If 0, run until no agents
        are infected (or until `stop` says so)
    stop: callable, optional. predicate(model) -> bool, True means stop

    Returns:
    model: TownModel. The same model with `epidemic_data` and
        `epidemic_statistics` filled in
    """
    if duration < 0:
        raise ValueError("duration must be non-negative")
    n_steps = HOURS_PER_DAY * duration if duration else None
    if n_steps is None and stop is None:
        stop = hazard

    logger.info("simulating %s from day %d", f"{duration} days" if duration else "until extinction", model.day)
    data = model.run(n_steps=n_steps, stop=stop)
    if model.epidemic_data is not None:
        data = pd.concat([model.epidemic_data, data.iloc[1:]], ignore_index=True)
    model.epidemic_data = data
    model.epidemic_statistics = analyze(model)
    logger.info("finished at day %d after %d steps", model.day, model.model_steps)
    return model
