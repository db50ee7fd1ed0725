__all__ = ["PairwiseContraction", "plan_contraction", "contraction_cost", "synthetic_label"]

import logging
import math
from dataclasses import dataclass
from string import ascii_letters
from typing import Iterable

from .network import ConnectedTensorNetwork, ContractionInvariantError, Edge, Node

log = logging.getLogger(__name__)


def synthetic_label(i: int) -> str:
    if i < len(ascii_letters):
        return ascii_letters[i]
    else:
        # Latin Extended letters are valid labels and never collide with ASCII ones
        return chr(0x100 + i - len(ascii_letters))


@dataclass(frozen=True, slots=True)
class PairwiseContraction:
    """One binary contraction of a plan.

    Attributes:
        lhs: The first node contracted.
        rhs: The second node contracted.
        edges: Every edge with both ends on lhs or rhs, all of which get summed over.
        output: The node that replaces lhs and rhs in the network.
    """

    lhs: Node
    rhs: Node
    edges: tuple[Edge, ...]
    output: Node

    def __post_init__(self):
        for edge in self.edges:
            if not edge.within(self.lhs.id, self.rhs.id):
                raise ContractionInvariantError(
                    f"reduction edge {edge} does not end at lhs {self.lhs.id} nor "
                    f"rhs {self.rhs.id}"
                )

    def cost(self, extent: int) -> int:
        return extent ** (self.lhs.rank + self.rhs.rank - len(self.edges))

    def index_labels(self) -> tuple[str, str]:
        """Labels of the two operands so that reduced edges share a label.

        The lhs gets consecutive labels starting at `a`, the rhs continues from there, and then
        the right end of each reduced edge takes the label of its left end.
        """
        lhs_labels = [synthetic_label(i) for i in range(self.lhs.rank)]
        rhs_labels = [synthetic_label(self.lhs.rank + i) for i in range(self.rhs.rank)]

        def labels_of(node: int) -> list[str]:
            return lhs_labels if node == self.lhs.id else rhs_labels

        for edge in self.edges:
            label = labels_of(edge.left.node)[edge.left.index]
            labels_of(edge.right.node)[edge.right.index] = label

        return "".join(lhs_labels), "".join(rhs_labels)

    def deparse(self) -> str:
        """The two-operand expression evaluating this contraction.

        The output is implicit, so the retained indexes of lhs come first, then those of rhs,
        matching the index order of the output node.
        """
        lhs_labels, rhs_labels = self.index_labels()
        return f"{lhs_labels},{rhs_labels}"

    def __str__(self) -> str:
        return f"{self.lhs.id},{self.rhs.id}->{self.output.id} ({self.deparse()})"


def contraction_cost(sequence: Iterable[PairwiseContraction], extent: int) -> int:
    return sum(contraction.cost(extent) for contraction in sequence)


def search(
    component: ConnectedTensorNetwork, extent: int, bound: float
) -> tuple[int, list[PairwiseContraction]] | None:
    """Cheapest sequence contracting the component to one node, if one costs less than bound."""
    if len(component) == 1:
        return 0, []

    best = None
    for lhs, rhs, edges in component.group_edges_pairwise():
        head_cost = extent ** (lhs.rank + rhs.rank - len(edges))
        if head_cost >= bound:
            continue

        contracted = component.copy()
        output_id = contracted.pairwise_contraction(lhs.id, rhs.id)
        head = PairwiseContraction(lhs, rhs, edges, contracted.node(output_id))

        match search(contracted, extent, bound - head_cost):
            case None:
                pass
            case (tail_cost, tail):
                best = (head_cost + tail_cost, [head, *tail])
                bound = best[0]

    return best


def plan_contraction(component: ConnectedTensorNetwork, extent: int) -> list[PairwiseContraction]:
    """Sequence of pairwise contractions with minimal total cost.

    Every order of contracting adjacent pairs of nodes is searched, pruning any branch already
    costing at least as much as the best sequence found so far. This is exponential in the number
    of nodes and is only intended for small networks.

    Args:
        component: A connected tensor network. If it has a single node, the sequence is empty and
            any edges are a trace left to the caller.
        extent: The size of every dimension.
    """
    match search(component, extent, math.inf):
        case None:
            raise ContractionInvariantError(f"no contraction sequence found for {component!r}")
        case (cost, sequence):
            pass

    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            "Planned %d pairwise contractions with cost %d for %r: %s",
            len(sequence),
            cost,
            component,
            "; ".join(str(step) for step in sequence),
        )
    return sequence
