from __future__ import annotations

__all__ = [
    "Node",
    "IndexLocation",
    "Edge",
    "TensorNetwork",
    "ConnectedTensorNetwork",
    "retained_indexes",
]

from dataclasses import dataclass
from typing import Iterable

from ..expression import ParsedExpression


@dataclass(frozen=True, slots=True)
class Node:
    id: int
    rank: int


@dataclass(frozen=True, slots=True)
class IndexLocation:
    """A specific dimension of a specific node."""

    node: int
    index: int

    def __str__(self) -> str:
        return f"{self.node}[{self.index}]"


@dataclass(frozen=True, slots=True, eq=False)
class Edge:
    left: IndexLocation
    right: IndexLocation

    def touches(self, node: int) -> bool:
        return self.left.node == node or self.right.node == node

    def within(self, *nodes: int) -> bool:
        """Whether both ends of this edge are on the given nodes."""
        return self.left.node in nodes and self.right.node in nodes

    def is_internode(self) -> bool:
        return self.left.node != self.right.node

    def __eq__(self, other: object):
        # It does not matter in which order left and right are
        if isinstance(other, Edge):
            return {self.left, self.right} == {other.left, other.right}
        else:
            return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset((self.left, self.right)))

    def __str__(self) -> str:
        return f"{self.left}--{self.right}"


def retained_indexes(node: Node, edges: Iterable[Edge]) -> list[int]:
    """Indexes of the node which are not an end of any of the edges, in order."""
    reduced = set()
    for edge in edges:
        for location in (edge.left, edge.right):
            if location.node == node.id:
                reduced.add(location.index)
    return [i for i in range(node.rank) if i not in reduced]


class TensorNetwork:
    """Graph of tensors (nodes) and the pairs of their dimensions which are contracted (edges)."""

    def __init__(self):
        self._nodes: list[Node] = []
        self._edges: list[Edge] = []
        self._next_id = 0

    @staticmethod
    def from_expression(expression: ParsedExpression) -> tuple[list[int], TensorNetwork]:
        """Build the network implied by the contractions of an expression.

        Returns:
            The id of the node of each factor and the network itself.
        """
        from ._exceptions import ContractionInvariantError

        network = TensorNetwork()
        node_ids = [network.add_node(len(factor)) for factor in expression.factors]

        for contraction in expression.contractions:
            match contraction.cursors:
                case (lhs, rhs):
                    network.add_edge(
                        IndexLocation(node_ids[lhs.factor], lhs.index),
                        IndexLocation(node_ids[rhs.factor], rhs.index),
                    )
                case cursors:
                    raise ContractionInvariantError(
                        f"contraction of {contraction.label!r} must join exactly two indexes, "
                        f"but has {len(cursors)}"
                    )

        return node_ids, network

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def edges(self) -> tuple[Edge, ...]:
        return tuple(self._edges)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: int) -> bool:
        return any(existing.id == node for existing in self._nodes)

    def node(self, node: int) -> Node:
        from ._exceptions import NonexistentNodeError

        for existing in self._nodes:
            if existing.id == node:
                return existing
        raise NonexistentNodeError(node)

    def rank(self) -> int:
        """Number of free dimensions of the whole network."""
        return sum(node.rank for node in self._nodes) - 2 * len(self._edges)

    def add_node(self, rank: int) -> int:
        node = Node(self._next_id, rank)
        self._nodes.append(node)
        self._next_id += 1
        return node.id

    def add_edge(self, a: IndexLocation, b: IndexLocation) -> None:
        from ._exceptions import IndexOutOfRangeError, OccupiedIndexError, SelfEdgeError

        if a == b:
            raise SelfEdgeError(a)

        for location in (a, b):
            node = self.node(location.node)
            if not 0 <= location.index < node.rank:
                raise IndexOutOfRangeError(location, node.rank)

        for edge in self._edges:
            for location in (a, b):
                if location in (edge.left, edge.right):
                    raise OccupiedIndexError(location, edge)

        self._edges.append(Edge(a, b))

    def _connect(self, other: TensorNetwork, edge: Edge) -> None:
        # Caller guarantees that other shares no node ids with self
        self._nodes = sorted([*self._nodes, *other._nodes], key=lambda node: node.id)
        self._edges = [*self._edges, *other._edges, edge]
        self._next_id = max(self._next_id, other._next_id)

    def connected_components(self) -> list[ConnectedTensorNetwork]:
        from ._exceptions import ContractionInvariantError

        # Each node is at least part of the component consisting of itself
        components = []
        for node in self._nodes:
            component = ConnectedTensorNetwork()
            component._nodes.append(node)
            components.append(component)

        def find_component(node: int) -> int:
            for i, component in enumerate(components):
                if node in component:
                    return i
            raise ContractionInvariantError(f"node {node} is not part of any component")

        for edge in self._edges:
            left_index = find_component(edge.left.node)
            right_index = find_component(edge.right.node)

            if left_index == right_index:
                # Edge connects a component to itself, which makes it a trace of that component
                components[left_index]._edges.append(edge)
            else:
                # Merge into whichever component came first so that order follows first membership
                keep, drop = sorted((left_index, right_index))
                components[keep]._connect(components[drop], edge)
                del components[drop]

        # Each contraction of two nodes creates one node, so reserve that many ids per component
        next_id = self._next_id
        for component in components:
            component._next_id = next_id
            next_id += len(component) - 1

        return components

    def copy(self):
        new = type(self)()
        new._nodes = list(self._nodes)
        new._edges = list(self._edges)
        new._next_id = self._next_id
        return new

    def __repr__(self) -> str:
        nodes = ", ".join(f"{node.id}:{node.rank}" for node in self._nodes)
        edges = ", ".join(str(edge) for edge in self._edges)
        return f"{type(self).__name__}(nodes=[{nodes}], edges=[{edges}])"


class ConnectedTensorNetwork(TensorNetwork):
    """A tensor network whose nodes are all reachable from each other through edges."""

    def group_edges_pairwise(self) -> list[tuple[Node, Node, tuple[Edge, ...]]]:
        """All edges which would be contracted by contracting each pair of nodes.

        A pair is only included if at least one edge joins its two nodes. Edges from a node to
        itself are included with every pair containing that node.
        """
        from ._exceptions import ContractionInvariantError

        if len(self._nodes) <= 1:
            raise ContractionInvariantError("grouping edges pairwise needs at least two nodes")

        groups = []
        for i, lhs in enumerate(self._nodes):
            for rhs in self._nodes[i + 1 :]:
                edges = tuple(edge for edge in self._edges if edge.within(lhs.id, rhs.id))
                if any(edge.is_internode() for edge in edges):
                    groups.append((lhs, rhs, edges))

        if len(groups) == 0:
            raise ContractionInvariantError(f"no pair of nodes is joined by an edge in {self!r}")

        return groups

    def pairwise_contraction(self, lhs: int, rhs: int) -> int:
        """Replace two nodes by the node resulting from contracting all edges between them.

        The new node has the retained indexes of lhs followed by the retained indexes of rhs.
        Edges to other nodes are moved to the corresponding index of the new node.

        Returns:
            The id of the new node.
        """
        from ._exceptions import ContractionInvariantError

        if lhs == rhs:
            raise ContractionInvariantError(f"cannot contract node {lhs} with itself")
        if lhs not in self or rhs not in self:
            raise ContractionInvariantError(
                f"cannot contract nodes {lhs} and {rhs} which are not both in {self!r}"
            )

        lhs_node = self.node(lhs)
        rhs_node = self.node(rhs)

        contracted_edges = [edge for edge in self._edges if edge.within(lhs, rhs)]
        moved_edges = [
            edge
            for edge in self._edges
            if (edge.touches(lhs) or edge.touches(rhs)) and not edge.within(lhs, rhs)
        ]

        self._nodes = [node for node in self._nodes if node.id not in (lhs, rhs)]
        self._edges = [edge for edge in self._edges if not (edge.touches(lhs) or edge.touches(rhs))]

        new_id = self.add_node(lhs_node.rank + rhs_node.rank - 2 * len(contracted_edges))

        new_positions = {}
        for node in (lhs_node, rhs_node):
            for index in retained_indexes(node, contracted_edges):
                new_positions[IndexLocation(node.id, index)] = len(new_positions)

        for edge in moved_edges:
            if edge.left.node in (lhs, rhs):
                partaker_end, bystander_end = edge.left, edge.right
            else:
                partaker_end, bystander_end = edge.right, edge.left

            self.add_edge(bystander_end, IndexLocation(new_id, new_positions[partaker_end]))

        return new_id
