"""
===============================================================================
parameters.py
Last Updated: 2026-10-19
===============================================================================
Model Parameters for the Hourly Town Epidemic ABM

This module contains the behavioral, epidemiological and demographic
parameters used by the agent stepping engine, along with the calendar
constants shared by the scheduling and decision phases.

Behavior distributions are 5-vectors over the social actions, always in
the order:
    [Socialize Local, Socialize Global, Hang With Friends, Shopping, Nothing]

References:
    - Phan et al. (2023), rational infectivity profile:
      https://doi.org/10.1016/j.scitotenv.2022.159326
    - Levin et al. (2020), age-specific infection fatality ratio
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import io
import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

# ==================== Calendar ===============================================
HOURS_PER_DAY = 12          # one tick = one hour, 12 hour days
WEEKEND_PERIOD = 6          # day % 6 == 0 is a weekend day
SCHOOL_HOURS = (3, 9)       # inclusive
GATHERING_HOURS = (1, 4)    # inclusive, weekend only
DEFAULT_SHIFTS: List[Tuple[int, int]] = [(0, 8), (2, 10), (4, 12)]

N_ACTIONS = 5


def validate_distribution(dist, name: str = "distribution") -> np.ndarray:
    """Check a probability vector over the five social actions.

    Raises ValueError if the vector has the wrong length, negative entries
    or does not sum to one.
    """
    arr = np.asarray(dist, dtype=float)
    if arr.shape != (N_ACTIONS,):
        raise ValueError(f"{name} must have {N_ACTIONS} entries, got {arr.shape}")
    if np.any(arr < 0):
        raise ValueError(f"{name} has negative probabilities: {list(arr)}")
    if not np.isclose(arr.sum(), 1.0, rtol=0.0, atol=1e-9):
        raise ValueError(f"{name} must sum to 1, sums to {arr.sum()}")
    return arr


@dataclass
class BehaviorParameters:
    """Per-role, per-context action probabilities.

    Each role has a House table and a Work (or School) table used on
    weekdays and a Community Gathering table used during weekend gathering
    hours. Retirees use a single day table at home and elsewhere.
    """
    Adult_House: List[float] = field(default_factory=lambda: [0.6, 0.1, 0.15, 0.1, 0.05])
    Adult_Work: List[float] = field(default_factory=lambda: [0.7, 0.1, 0.0, 0.2, 0.0])
    Adult_Community_Gathering: List[float] = field(default_factory=lambda: [0.8, 0.0, 0.0, 0.0, 0.2])

    Child_House: List[float] = field(default_factory=lambda: [0.6, 0.1, 0.15, 0.1, 0.05])
    Child_School: List[float] = field(default_factory=lambda: [0.6, 0.1, 0.2, 0.0, 0.1])
    Child_Community_Gathering: List[float] = field(default_factory=lambda: [0.8, 0.0, 0.0, 0.0, 0.2])

    Retiree_day: List[float] = field(default_factory=lambda: [0.5, 0.05, 0.15, 0.1, 0.2])
    Retiree_Community_Gathering: List[float] = field(default_factory=lambda: [0.8, 0.0, 0.0, 0.0, 0.2])

    def __post_init__(self):
        for name in self.table_names():
            setattr(self, name, validate_distribution(getattr(self, name), name))

    @staticmethod
    def table_names() -> List[str]:
        return [
            "Adult_House", "Adult_Work", "Adult_Community_Gathering",
            "Child_House", "Child_School", "Child_Community_Gathering",
            "Retiree_day", "Retiree_Community_Gathering",
        ]


@dataclass
class DiseaseParameters:
    """Epidemiological parameters for the hourly infection model.

    Attributes:
    beta_range: tuple. Range agents draw their infectivity coefficient from
    rp: float. Re-infection probability for recovered agents
    vip: float. Breakthrough infection probability for vaccinated agents
    infectious_period: int. Days until an infected agent recovers
    gamma_parameters: tuple. (peak height, peak location) of the rational
        infectivity profile
    rate_of_decay: int. Exponent controlling decay after the peak
    """
    beta_range: Tuple[float, float] = (0.5, 0.8)
    rp: float = 0.0
    vip: float = 0.15
    infectious_period: int = 10

    gamma_parameters: Tuple[float, float] = (1.0, 4.0)
    rate_of_decay: int = 3

    def __post_init__(self):
        lo, hi = self.beta_range
        if lo > hi:
            raise ValueError(f"beta_range must be (low, high), got {self.beta_range}")
        for name in ("rp", "vip"):
            p = getattr(self, name)
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"{name} must be a probability, got {p}")
        if self.infectious_period <= 0:
            raise ValueError("infectious_period must be positive")

    def gamma(self, t) -> float:
        """Infectivity after t days of infection: rises, peaks, then decays"""
        height, location = self.gamma_parameters
        k = self.rate_of_decay
        return float(height * t / (location ** k + t ** k))


@dataclass
class RiskParameters:
    """Perceived risk levels compared against agent mask thresholds"""
    risk_global: float = 0.0
    risk_local: float = 0.0


@dataclass
class AgeParameters:
    vax_age_thresholds: Tuple[int, int] = (5, 17)
    mask_age_threshold: int = 2

    # age ranges [5-17, 18+]
    vax_distribution_proportions: Tuple[float, float] = (0.34, 0.66)

    friend_radii: Dict[str, int] = field(default_factory=lambda: {
        "Adult": 10,
        "Child": 5,
        "Retiree": 20,
    })


def get_ifr(age: float) -> float:
    """Infection fatality ratio for a given age (fraction, not percent)"""
    return 10 ** (-3.27 + 0.0524 * age) / 100


# ==================== Industry Codes =========================================
# Two-digit SIC major groups. Public = customers stay on site after shopping.
_SIC_CSV = """SIC,Public,Client,Closed system
1,0,0,1
2,0,0,1
3,0,0,0
4,0,0,0
5,0,0,0
6,0,0,0
7,0,1,0
8,0,1,1
9,0,1,1
10,0,0,1
11,0,0,0
12,0,0,1
13,0,0,1
14,0,0,1
15,0,1,1
16,0,1,0
17,0,1,1
18,0,0,0
19,0,0,0
20,0,0,1
21,0,0,1
22,0,0,1
23,0,0,1
24,0,0,1
25,0,0,1
26,0,0,1
27,0,0,1
28,0,0,1
29,0,0,1
30,0,0,1
31,0,0,1
32,0,0,1
33,0,0,1
34,0,0,1
35,0,0,1
36,0,0,1
37,0,0,1
38,0,0,1
39,0,0,1
40,1,0,0
41,1,0,0
42,0,0,1
43,1,0,0
44,1,0,0
45,1,0,0
46,0,0,1
47,1,1,0
48,0,0,1
49,0,0,1
50,0,1,1
51,0,1,1
52,1,0,0
53,1,0,0
54,1,0,0
55,1,0,0
56,1,0,0
57,1,0,0
58,1,0,0
59,1,0,0
60,1,1,0
61,0,1,0
62,0,1,0
63,0,1,0
64,0,1,0
65,0,1,0
66,0,1,0
67,0,1,0
68,0,0,0
69,0,0,0
70,1,0,0
71,0,0,0
72,0,1,0
73,0,1,0
74,0,0,0
75,0,1,0
76,0,1,0
77,0,0,0
78,1,0,0
79,1,0,0
80,0,1,0
81,0,1,0
82,1,1,0
83,0,1,0
84,1,0,0
85,0,0,0
86,0,1,0
87,0,1,0
88,0,0,1
89,0,1,0
90,0,0,0
91,0,1,1
92,1,1,0
93,0,1,0
94,0,1,0
95,0,1,0
96,0,1,0
97,0,1,0
98,0,0,0
99,0,1,0
"""

SIC_CODES: pd.DataFrame = pd.read_csv(io.StringIO(_SIC_CSV)).set_index("SIC")


def is_public_facing(sic: int) -> bool:
    """Whether a business with this SIC major group keeps its customers on site.

    Unknown codes are treated as closed (not public facing).
    """
    sic = int(sic)
    if sic not in SIC_CODES.index:
        return False
    return bool(SIC_CODES.at[sic, "Public"] == 1)
