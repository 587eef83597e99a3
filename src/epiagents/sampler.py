"""
===============================================================================
sampler.py
Last Updated: 2026-10-19
===============================================================================
Weighted categorical draws.

A single inverse-CDF draw is used both for choosing an agent's action for
the hour and for picking a contact in proportion to interaction history.
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import numpy as np
from enum import IntEnum
from typing import Sequence

from .parameters import validate_distribution


class Action(IntEnum):
    """Pending action of an agent. NOTHING is also the cleared state."""
    NOTHING = 0
    SOCIALIZE_LOCAL = 1
    SOCIALIZE_GLOBAL = 2
    HANG_WITH_FRIENDS = 3
    SHOPPING = 4


# position in a behavior distribution -> action
DISTRIBUTION_ORDER = (
    Action.SOCIALIZE_LOCAL,
    Action.SOCIALIZE_GLOBAL,
    Action.HANG_WITH_FRIENDS,
    Action.SHOPPING,
    Action.NOTHING,
)


def weighted_index(weights: Sequence[float], rng: np.random.Generator) -> int:
    """Draw an index with probability proportional to its weight.

    Zero-weight entries are never drawn. Weights need not be normalized but
    must contain at least one positive entry.
    """
    cumulative = np.cumsum(np.asarray(weights, dtype=float))
    total = cumulative[-1] if cumulative.size else 0.0
    if total <= 0:
        raise ValueError("weights must contain a positive entry")
    idx = int(np.searchsorted(cumulative, rng.random() * total, side="right"))
    return min(idx, cumulative.size - 1)


def spin(distribution, rng: np.random.Generator) -> Action:
    """Draw one action from a 5-outcome probability vector.

    Parameters:
    distribution: array-like. Probabilities in DISTRIBUTION_ORDER, summing to 1
    rng: np.random.Generator. Model random stream

    Returns:
    action: Action. The drawn action, Action.NOTHING for the last slot
    """
    probs = validate_distribution(distribution)
    return DISTRIBUTION_ORDER[weighted_index(probs, rng)]
