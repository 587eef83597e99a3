"""
===============================================================================
agents.py
Last Updated: 2026-10-19
===============================================================================
Agent records for the town epidemic model.

Every agent shares a common base record (demographics, disease state,
masking behavior and contact history). The role variants add the
assignments used by the scheduling engine:
- Adult: workplace, income, work shift, community gathering
- Child: school, community gathering
- Retiree: community gathering, income

The set of roles is closed; stepping code dispatches on `agent.role`.
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
from enum import Enum, IntEnum
from fractions import Fraction
from typing import Dict, List, Optional, Tuple

from .sampler import Action


class Role(Enum):
    ADULT = "Adult"
    CHILD = "Child"
    RETIREE = "Retiree"


class DiseaseStatus(Enum):
    """Enumeration for infection states"""
    SUSCEPTIBLE = "S"
    INFECTED = "I"
    RECOVERED = "R"
    VACCINATED = "V"
    DEAD = "D"


class MaskContext(IntEnum):
    """Index into `Agent.will_mask`"""
    GLOBAL = 0
    LOCAL = 1
    SOCIAL = 2


class Agent:
    """Base agent record.

    Attributes:
    id: int. Unique identifier (never 0, which marks an external infector)
    age: int. Age in years
    sex: str. 'M' or 'F'
    home: int. House location id
    pos: int. Location id the agent currently occupies
    status: DiseaseStatus. Current infection state
    time_infected: Fraction. Days since infection, advanced by 1/12 per tick
    beta: float. Infectivity coefficient
    contacts: dict. Contact ledger, other agent id -> interaction weight
    masked: bool. Whether the agent wears a mask right now
    will_mask: list. Mask willingness per MaskContext
    vaccinated: bool. Whether the agent has been vaccinated
    next_action: Action. Pending action for the current hour
    """
    role: Role = None

    def __init__(self, id: int, age: int, sex: str, home: int,
                 community_gathering: int = 0,
                 beta: float = 0.5,
                 global_mask_threshold: float = 1.0,
                 local_mask_threshold: float = 1.0):
        self.id = id
        self.age = age
        self.sex = sex
        self.home = home
        self.community_gathering = community_gathering
        self.pos: Optional[int] = None

        self.status = DiseaseStatus.SUSCEPTIBLE
        self.time_infected = Fraction(0)
        self.beta = beta
        self.contacts: Dict[int, float] = {}

        self.masked = False
        self.will_mask: List[bool] = [False, False, False]
        self.vaccinated = False
        self.global_mask_threshold = global_mask_threshold
        self.local_mask_threshold = local_mask_threshold

        self.next_action = Action.NOTHING

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(id={self.id}, age={self.age}, "
                f"status={self.status.value}, pos={self.pos})")

    @property
    def at_home(self) -> bool:
        return self.pos == self.home

    @property
    def infected(self) -> bool:
        return self.status == DiseaseStatus.INFECTED


class Adult(Agent):
    role = Role.ADULT

    def __init__(self, id: int, age: int, sex: str, home: int, work: int,
                 shift: Tuple[int, int] = (0, 8), income: int = 0, **kwargs):
        super().__init__(id, age, sex, home, **kwargs)
        self.work = work
        self.shift = tuple(shift)
        self.income = income


class Child(Agent):
    role = Role.CHILD

    def __init__(self, id: int, age: int, sex: str, home: int, school: int, **kwargs):
        super().__init__(id, age, sex, home, **kwargs)
        self.school = school


class Retiree(Agent):
    role = Role.RETIREE

    def __init__(self, id: int, age: int, sex: str, home: int, income: int = 0, **kwargs):
        super().__init__(id, age, sex, home, **kwargs)
        self.income = income


def add_contact_weight(agent: Agent, contact: Agent, weight: float) -> None:
    """Add interaction weight to both ledgers of a pair in one update"""
    if weight < 0:
        raise ValueError("contact weight must be non-negative")
    total = agent.contacts.get(contact.id, 0.0) + weight
    agent.contacts[contact.id] = total
    contact.contacts[agent.id] = total
