"""
Graph: the immutable snapshot the simulator lays out.

A graph is a set of integer node ids plus weighted edges. An edge is an
unordered member set, so an edge with more than two members is a
hyper-relation: it is expanded into a force between every ordered pair of
its distinct members.

The weight cache is derived from the edges and rebuilt from scratch on
every graph assignment:

    cache[a][b] = weight of the edge containing both a and b

Edge members that are not graph nodes are allowed; they simply never meet
a node state, so they contribute no force.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from itertools import permutations
from typing import Iterable, Iterator, Literal

WeightPolicy = Literal["last", "max", "sum"]


@dataclass(frozen=True)
class Edge:
    """A weighted relation between two or more nodes."""

    nodes: frozenset[int]
    weight: float = 1.0

    def __post_init__(self):
        # Accept any iterable of ids and normalize to a frozenset
        object.__setattr__(self, "nodes", frozenset(int(n) for n in self.nodes))
        object.__setattr__(self, "weight", float(self.weight))

    def pairs(self) -> Iterator[tuple[int, int]]:
        """All ordered (a, b) pairs of distinct members."""
        return permutations(sorted(self.nodes), 2)


@dataclass(frozen=True)
class Graph:
    """
    Snapshot of node ids and weighted edges.

    Edges keep their insertion order (duplicates dropped, first one kept).
    The order matters for the "last" weight policy.
    """

    nodes: frozenset[int] = field(default_factory=frozenset)
    edges: tuple[Edge, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "nodes", frozenset(int(n) for n in self.nodes))
        object.__setattr__(self, "edges", tuple(dict.fromkeys(self.edges)))

    @classmethod
    def empty(cls) -> Graph:
        return cls()

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[Iterable[int], float]],
        nodes: Iterable[int] | None = None,
    ) -> Graph:
        """
        Build a graph from (members, weight) tuples.

        Args:
            edges: Iterable of (member ids, weight)
            nodes: Node ids; defaults to the union of all edge members
        """
        edge_list = [Edge(frozenset(members), weight) for members, weight in edges]
        if nodes is None:
            nodes = set().union(*(e.nodes for e in edge_list)) if edge_list else set()
        return cls(frozenset(nodes), tuple(edge_list))

    def edge_pairs(self) -> list[tuple[int, int, float]]:
        """
        Distinct node pairs joined by an edge, with the edge weight.

        Each unordered pair appears once per edge (a < b). This is what a
        renderer draws; hyper-relations show up as cliques.
        """
        return [
            (a, b, edge.weight)
            for edge in self.edges
            for a, b in edge.pairs()
            if a < b
        ]

    def to_dict(self) -> dict:
        """Plain-data representation (JSON friendly)."""
        return {
            "nodes": sorted(self.nodes),
            "edges": [
                {"nodes": sorted(edge.nodes), "weight": edge.weight}
                for edge in self.edges
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Graph:
        """Inverse of to_dict()."""
        edges = tuple(
            Edge(frozenset(item["nodes"]), item.get("weight", 1.0))
            for item in data.get("edges", [])
        )
        return cls(frozenset(data.get("nodes", [])), edges)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node: object) -> bool:
        return node in self.nodes


def build_weight_cache(
    edges: Iterable[Edge],
    policy: WeightPolicy = "last",
) -> dict[int, dict[int, float]]:
    """
    Expand edges into the node → node → weight lookup.

    Args:
        edges: Edges in processing order
        policy: How to combine several edges defining the same ordered pair:
                "last" keeps the last one processed, "max" the heaviest,
                "sum" adds them up

    Returns:
        Nested dict; pairs without an edge are absent (weight 0)
    """
    if policy not in ("last", "max", "sum"):
        raise ValueError(f"Unknown weight policy: {policy!r}")

    weights: dict[int, dict[int, float]] = {}
    for edge in edges:
        for a, b in edge.pairs():
            row = weights.setdefault(a, {})
            if policy == "last" or b not in row:
                row[b] = edge.weight
            elif policy == "max":
                row[b] = max(row[b], edge.weight)
            else:
                row[b] += edge.weight
    return weights
