from __future__ import annotations

__all__ = [
    "GraphConstructionError",
    "NonexistentNodeError",
    "IndexOutOfRangeError",
    "SelfEdgeError",
    "OccupiedIndexError",
    "ContractionInvariantError",
]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._network import Edge, IndexLocation


class GraphConstructionError(Exception):
    """Base of all errors describing an edge that cannot be added to a tensor network."""

    __slots__ = ()


@dataclass(eq=False, slots=True)
class NonexistentNodeError(GraphConstructionError):
    node: int

    def __str__(self):
        return (
            f"Expected edge endpoints to reference nodes of the network, but node {self.node} "
            f"does not exist"
        )


@dataclass(eq=False, slots=True)
class IndexOutOfRangeError(GraphConstructionError):
    location: IndexLocation
    rank: int

    def __str__(self):
        return (
            f"Expected edge endpoints to reference an index less than the rank of the node, but "
            f"{self.location} references a node of rank {self.rank}"
        )


@dataclass(eq=False, slots=True)
class SelfEdgeError(GraphConstructionError):
    location: IndexLocation

    def __str__(self):
        return f"Expected an edge to join two different indexes, but both ends are {self.location}"


@dataclass(eq=False, slots=True)
class OccupiedIndexError(GraphConstructionError):
    location: IndexLocation
    edge: Edge

    def __str__(self):
        return (
            f"Expected each index to be the end of at most one edge, but {self.location} is "
            f"already an end of {self.edge}"
        )


@dataclass(eq=False, slots=True)
class ContractionInvariantError(Exception):
    message: str

    def __str__(self):
        return f"Internal contraction invariant violated: {self.message}"
