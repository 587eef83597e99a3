"""
===============================================================================
town.py
Last Updated: 2026-10-19
===============================================================================
Location graph of the town.

Locations are nodes of a networkx graph carrying a `type` attribute
(House, Work, School, Business, CommunityGathering). Businesses also
carry their SIC code and a `public` flag. Edges link a house to the
places its residents are assigned to. Occupancy is tracked per node so
that "who is here" lookups do not scan the population.

Location id 0 is reserved to mean "no location" (e.g. an agent without a
community gathering).
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import networkx as nx
from enum import Enum
from typing import Dict, List, Optional

from .parameters import is_public_facing


class LocationType(Enum):
    HOUSE = "House"
    WORK = "Work"
    SCHOOL = "School"
    BUSINESS = "Business"
    COMMUNITY_GATHERING = "CommunityGathering"


class Town:
    """Typed location graph with agent occupancy.

    Attributes:
    graph: nx.Graph. Location nodes keyed by integer id
    """
    def __init__(self):
        self.graph = nx.Graph()
        # node -> ordered set of agent ids (dict keeps insertion order)
        self._occupants: Dict[int, Dict[int, None]] = {}

    def add_location(self, loc_type: LocationType, node: Optional[int] = None,
                     sic: Optional[int] = None, public: Optional[bool] = None) -> int:
        """Add a location node and return its id.

        Business public-facing flags default to the SIC table lookup.
        """
        if node is None:
            node = max(self.graph.nodes, default=0) + 1
        if node == 0:
            raise ValueError("location id 0 is reserved")
        if node in self.graph:
            raise ValueError(f"location {node} already exists")
        if public is None:
            public = loc_type == LocationType.BUSINESS and sic is not None and is_public_facing(sic)
        self.graph.add_node(node, type=loc_type, sic=sic, public=bool(public))
        self._occupants[node] = {}
        return node

    def connect(self, u: int, v: int) -> None:
        if u and v and u != v:
            self.graph.add_edge(u, v)

    def __contains__(self, node) -> bool:
        return node in self.graph

    def location_type(self, node: int) -> LocationType:
        return self.graph.nodes[node]["type"]

    def is_house(self, node: int) -> bool:
        return self.location_type(node) == LocationType.HOUSE

    def is_public(self, node: int) -> bool:
        return self.graph.nodes[node]["public"]

    def locations(self, loc_type: LocationType) -> List[int]:
        return [n for n, t in self.graph.nodes(data="type") if t == loc_type]

    @property
    def houses(self) -> List[int]:
        return self.locations(LocationType.HOUSE)

    @property
    def businesses(self) -> List[int]:
        return self.locations(LocationType.BUSINESS)

    @property
    def schools(self) -> List[int]:
        return self.locations(LocationType.SCHOOL)

    @property
    def community_gatherings(self) -> List[int]:
        return self.locations(LocationType.COMMUNITY_GATHERING)

    # ---- occupancy ----
    def agents_at(self, node: int) -> List[int]:
        return list(self._occupants[node])

    def place_agent(self, agent, node: int) -> None:
        if node not in self._occupants:
            raise ValueError(f"unknown location {node}")
        agent.pos = node
        self._occupants[node][agent.id] = None

    def move_agent(self, agent, node: int) -> None:
        if agent.pos == node:
            return
        if agent.pos is not None:
            self._occupants[agent.pos].pop(agent.id, None)
        self.place_agent(agent, node)

    def remove_agent(self, agent) -> None:
        if agent.pos is not None:
            self._occupants[agent.pos].pop(agent.id, None)
        agent.pos = None

    def summary(self) -> Dict[str, int]:
        """Count of locations by type"""
        counts = {t.value: 0 for t in LocationType}
        for _, t in self.graph.nodes(data="type"):
            counts[t.value] += 1
        return counts
