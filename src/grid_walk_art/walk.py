"""Randomized spanning-tree walk over a ``GridGraph``.

The walk is an unweighted randomized Prim process: every step picks a visited
node that still has unvisited neighbours, then one of those neighbours, and
links them. Candidate lists are sorted before drawing so a seeded
``random.Random`` replays the same drawing regardless of set ordering.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .geometry import GridGraph

Edge = Tuple[str, str]


@dataclass
class WalkState:
    graph: GridGraph
    visited: List[str] = field(default_factory=list)
    visited_set: Set[str] = field(default_factory=set)
    link_count: Dict[str, int] = field(default_factory=dict)
    leaf_marked: Set[str] = field(default_factory=set)
    edges: List[Edge] = field(default_factory=list)

    @classmethod
    def start(cls, graph: GridGraph, key: Optional[str] = None) -> "WalkState":
        key = graph.start if key is None else key
        if key not in graph:
            raise KeyError(f"start key {key!r} is not in the {graph.kind} graph")
        return cls(graph=graph, visited=[key], visited_set={key}, link_count={key: 0})

    def unvisited_neighbors(self, key: str) -> List[str]:
        return sorted(k for k in self.graph.neighbors(key) if k not in self.visited_set)

    def has_unvisited_neighbor(self, key: str) -> bool:
        return any(k not in self.visited_set for k in self.graph.neighbors(key))

    def frontier(self) -> List[str]:
        return [k for k in self.visited if self.has_unvisited_neighbor(k)]

    @property
    def exhausted(self) -> bool:
        return not any(self.has_unvisited_neighbor(k) for k in self.visited)

    def step(self, rng: random.Random) -> Optional[Edge]:
        frontier = self.frontier()
        if not frontier:
            return None

        cur = rng.choice(frontier)
        nxt = rng.choice(self.unvisited_neighbors(cur))

        self.link_count[cur] = self.link_count.get(cur, 0) + 1
        self.link_count[nxt] = self.link_count.get(nxt, 0) + 1
        self.visited.append(nxt)
        self.visited_set.add(nxt)
        self.edges.append((cur, nxt))
        return cur, nxt

    def is_leaf(self, key: str) -> bool:
        return (
            key in self.visited_set
            and self.link_count.get(key, 0) == 1
            and not self.has_unvisited_neighbor(key)
        )

    def mark_leaves(self) -> List[str]:
        """Mark leaves not marked before; returns only the new ones."""
        fresh = [k for k in self.visited if k not in self.leaf_marked and self.is_leaf(k)]
        self.leaf_marked.update(fresh)
        return fresh
