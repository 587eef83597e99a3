"""
===============================================================================
interactions.py
Last Updated: 2026-10-19
===============================================================================
Social actions and interaction accounting.

Actions:
- Socialize Local: interact with someone at the current location
- Socialize Global: visit a random agent of similar age and interact
- Hang With Friends: visit a past contact (biased towards frequent
  contacts) and interact with someone there
- Shopping: visit a random business and interact with someone there

Every interaction adds the same weight to both agents' contact ledgers:
a full contact (1.0) at home or when nobody is masked, a quarter contact
(0.25) otherwise. Disease transmission is then attempted.

Action functions return True when an interaction took place.
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import logging
from typing import Callable, Dict

from .agents import Agent, MaskContext, add_contact_weight
from .disease import transmit
from .sampler import Action, weighted_index

logger = logging.getLogger(__name__)

FULL_CONTACT = 1.0
MASKED_CONTACT = 0.25


def contact_weight(agent: Agent, contact: Agent) -> float:
    if agent.at_home or contact.at_home:
        return FULL_CONTACT
    if not agent.masked and not contact.masked:
        return FULL_CONTACT
    return MASKED_CONTACT


def interact(agent: Agent, contact: Agent, model) -> None:
    add_contact_weight(agent, contact, contact_weight(agent, contact))
    transmit(agent, contact, model)


def _interact_with_stranger(agent: Agent, model) -> bool:
    """Interact with a random other agent at the agent's location"""
    strangers = [i for i in model.town.agents_at(agent.pos) if i != agent.id]
    if not strangers:
        return False
    stranger = model.agents[strangers[model.rng.integers(len(strangers))]]
    interact(agent, stranger, model)
    return True


def socialize_local(agent: Agent, model) -> bool:
    agent.masked = agent.will_mask[MaskContext.SOCIAL]
    return _interact_with_stranger(agent, model)


def socialize_global(agent: Agent, model) -> bool:
    agent.masked = agent.will_mask[MaskContext.GLOBAL]

    radius = model.age_parameters.friend_radii[agent.role.value]
    friend = model.random_agent(lambda x: x.id != agent.id and abs(x.age - agent.age) < radius)
    if friend is None:
        logger.debug("no global friend for agent %d", agent.id)
        return False

    model.town.move_agent(agent, friend.pos)
    interact(agent, friend, model)
    return True


def hang_with_friends(agent: Agent, model) -> bool:
    agent.masked = agent.will_mask[MaskContext.LOCAL]

    # dead contacts keep their ledger entry but can no longer be visited
    friend_ids = list(agent.contacts)
    weights = [0.0 if i not in model.agents else agent.contacts[i] for i in friend_ids]
    if sum(weights) == 0:
        return socialize_local(agent, model)

    friend = model.agents[friend_ids[weighted_index(weights, model.rng)]]
    model.town.move_agent(agent, friend.pos)
    return socialize_local(agent, model)


def go_shopping(agent: Agent, model) -> bool:
    agent.masked = agent.will_mask[MaskContext.GLOBAL]

    if not model.businesses:
        return False
    loc = model.businesses[model.rng.integers(len(model.businesses))]

    original_location = agent.pos
    model.town.move_agent(agent, loc)
    interacted = _interact_with_stranger(agent, model)

    # customers of closed-system businesses go back where they came from
    if not model.town.is_public(loc):
        model.town.move_agent(agent, original_location)
    return interacted


ACTIONS: Dict[Action, Callable[[Agent, object], bool]] = {
    Action.SOCIALIZE_LOCAL: socialize_local,
    Action.SOCIALIZE_GLOBAL: socialize_global,
    Action.HANG_WITH_FRIENDS: hang_with_friends,
    Action.SHOPPING: go_shopping,
}


def act(agent: Agent, model) -> bool:
    """Execute an agent's pending action"""
    if agent.next_action == Action.NOTHING:
        return False
    return ACTIONS[agent.next_action](agent, model)
