__all__ = [
    "Einsum",
    "ComponentPlan",
    "cachable_einsum",
    "einsum_expression",
    "execute",
    "einsum",
]

import itertools
import logging
from dataclasses import dataclass
from functools import cached_property, lru_cache

from returns.functions import raise_exception
from returns.result import Result

from ._stable_set import argfind
from .algorithm import Algorithm
from .expression import ParsedExpression, parse_expression
from .network import (
    ConnectedTensorNetwork,
    ContractionInvariantError,
    TensorNetwork,
    retained_indexes,
)
from .planner import PairwiseContraction, plan_contraction
from .problem import ShapeMismatchError, deduce_extent, validate_operands, validate_shapes
from .tensor import ArrayView, Tensor

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ComponentPlan:
    """How one connected component of an expression is evaluated.

    Attributes:
        component: The connected component itself.
        factor: For a single-node component, the factor it stands for; otherwise None.
        steps: The pairwise contractions reducing a multi-node component to one node.
        labels: The original labels of the dimensions of the component's result, in order.
    """

    component: ConnectedTensorNetwork
    factor: int | None
    steps: tuple[PairwiseContraction, ...]
    labels: tuple[str, ...]

    def __post_init__(self):
        if self.factor is not None and len(self.steps) != 0:
            raise ContractionInvariantError(
                "a single node component should have an empty pairwise contraction sequence"
            )

    @property
    def is_passthrough(self) -> bool:
        """A single operand with no contractions, which is its own result."""
        return self.factor is not None and len(self.component.edges) == 0

    @property
    def is_trace(self) -> bool:
        """A single operand contracted with itself."""
        return self.factor is not None and len(self.component.edges) != 0

    @property
    def rank(self) -> int:
        return len(self.labels)


class Einsum:
    """A parsed einsum expression, ready to be evaluated any number of times.

    Everything derived from the expression alone (the index maps of direct evaluation and the
    contraction plans of network evaluation) is computed once and reused by every call.
    """

    def __init__(self, expression: ParsedExpression, algorithm: Algorithm = Algorithm.auto):
        self.expression = expression
        self.algorithm = algorithm
        self._plans: dict[int, tuple[ComponentPlan, ...]] = {}

    @property
    def uses_network(self) -> bool:
        match self.algorithm:
            case Algorithm.direct:
                return False
            case Algorithm.network:
                return True
            case Algorithm.auto:
                return (
                    self.expression.number_of_factors > 2
                    and len(self.expression.contractions) != 0
                )

    def validate(
        self, output: ArrayView, *operands: ArrayView
    ) -> Result[dict[str, int], ShapeMismatchError]:
        return validate_shapes(self.expression, output, operands)

    def __call__(self, output: ArrayView, *operands: ArrayView) -> None:
        sizes = self.validate(output, *operands).alt(raise_exception).unwrap()

        if self.uses_network:
            log.debug("Evaluating %s by tensor network with sizes %s", self.expression, sizes)
            self.evaluate_network(output, operands, sizes)
        else:
            log.debug("Evaluating %s directly with sizes %s", self.expression, sizes)
            self.evaluate_direct(output, operands, sizes)

    @cached_property
    def summed_labels(self) -> tuple[str, ...]:
        return (
            tuple(contraction.label for contraction in self.expression.contractions)
            + self.expression.summed_free_labels
        )

    @cached_property
    def index_maps(self) -> tuple[tuple[int, ...], ...]:
        """For each factor, the position in the combined index of each of its indexes.

        The combined index is the output index followed by the summed index, which has one element
        per contraction and then one per free label omitted from the output.
        """
        combined_labels = self.expression.output_labels + self.summed_labels
        positions = {label: i for i, label in enumerate(combined_labels)}
        return tuple(
            tuple(positions[label] for label in factor) for factor in self.expression.factors
        )

    def evaluate_direct(
        self, output: ArrayView, operands: tuple[ArrayView, ...], sizes: dict[str, int]
    ):
        index_maps = self.index_maps
        output_ranges = [range(sizes[label]) for label in self.expression.output_labels]
        summed_ranges = [range(sizes[label]) for label in self.summed_labels]
        summed_space = list(itertools.product(*summed_ranges))

        for output_index in itertools.product(*output_ranges):
            total = 0
            for summed_index in summed_space:
                combined_index = output_index + summed_index
                product = 1
                for operand, index_map in zip(operands, index_maps, strict=True):
                    product = product * operand[tuple(combined_index[i] for i in index_map)]
                total = total + product
            output[output_index] = total

    def plan(self, extent: int) -> tuple[ComponentPlan, ...]:
        if extent not in self._plans:
            self._plans[extent] = self._make_plans(extent)
        return self._plans[extent]

    def _make_plans(self, extent: int) -> tuple[ComponentPlan, ...]:
        factors = self.expression.factors
        node_ids, network = TensorNetwork.from_expression(self.expression)

        plans = []
        for component in network.connected_components():
            if len(component) == 1:
                factor = argfind(node_ids, component.nodes[0].id)
                if len(component.edges) == 0:
                    labels = factors[factor]
                else:
                    labels = ParsedExpression((factors[factor],)).output_labels
                plans.append(ComponentPlan(component, factor, (), labels))
            else:
                steps = plan_contraction(component, extent)

                register_labels = {
                    node_id: factor for node_id, factor in zip(node_ids, factors, strict=True)
                }
                for step in steps:
                    register_labels[step.output.id] = tuple(
                        register_labels[node.id][i]
                        for node in (step.lhs, step.rhs)
                        for i in retained_indexes(node, step.edges)
                    )

                labels = register_labels[steps[-1].output.id]
                plans.append(ComponentPlan(component, None, tuple(steps), labels))

        return tuple(plans)

    def evaluate_network(
        self, output: ArrayView, operands: tuple[ArrayView, ...], sizes: dict[str, int]
    ):
        # Contraction order is costed as if every dimension had the size of the first one
        plans = self.plan(deduce_extent(*operands, output))
        output_labels = self.expression.output_labels
        factors = self.expression.factors

        # A lone component already producing the output labels in order can write the output
        write_output = (
            len(plans) == 1 and not plans[0].is_passthrough and plans[0].labels == output_labels
        )

        results = []
        for plan in plans:
            if plan.is_passthrough:
                results.append(operands[plan.factor])
            elif plan.is_trace:
                if write_output:
                    target = output
                else:
                    target = Tensor.zeros(tuple(sizes[label] for label in plan.labels))
                trace = cachable_einsum(ParsedExpression((factors[plan.factor],)))
                trace(target, operands[plan.factor])
                results.append(target)
            else:
                # Factor nodes are numbered by factor ordinal
                registers: dict[int, ArrayView] = dict(enumerate(operands))
                for i, step in enumerate(plan.steps):
                    if write_output and i == len(plan.steps) - 1:
                        target = output
                    else:
                        target = Tensor.zeros(
                            tuple(
                                registers[node.id].shape[index]
                                for node in (step.lhs, step.rhs)
                                for index in retained_indexes(node, step.edges)
                            )
                        )
                    einsum_expression(step.deparse())(
                        target, registers[step.lhs.id], registers[step.rhs.id]
                    )
                    registers[step.output.id] = target
                results.append(registers[plan.steps[-1].output.id])

        if not write_output:
            # Outer product of the components, which also permutes and sums omitted free labels
            combine = cachable_einsum(
                ParsedExpression(tuple(plan.labels for plan in plans), output_labels)
            )
            combine(output, *results)


@lru_cache()
def cachable_einsum(expression: ParsedExpression, algorithm: Algorithm = Algorithm.auto) -> Einsum:
    return Einsum(expression, algorithm)


@lru_cache()
def einsum_expression(
    string: str, algorithm: Algorithm = Algorithm.auto, *, max_length: int | None = None
) -> Einsum:
    """Parse the expression and return its memoized evaluator.

    Raises:
        MalformedExpressionError: If the expression cannot be parsed.
    """
    expression = parse_expression(string, max_length=max_length).alt(raise_exception).unwrap()
    return cachable_einsum(expression, algorithm)


def execute(
    expression: ParsedExpression | str,
    output: ArrayView,
    *operands: ArrayView,
    algorithm: Algorithm = Algorithm.auto,
) -> None:
    """Evaluate the expression on the operands, writing every element of output."""
    if isinstance(expression, str):
        function = einsum_expression(expression, algorithm)
    else:
        function = cachable_einsum(expression, algorithm)

    function(output, *operands)


def einsum(
    expression: str,
    *operands: ArrayView,
    algorithm: Algorithm = Algorithm.auto,
    max_length: int | None = None,
) -> Tensor:
    """Evaluate the expression on the operands into a new tensor."""
    function = einsum_expression(expression, algorithm, max_length=max_length)

    sizes = validate_operands(function.expression, operands).alt(raise_exception).unwrap()
    output = Tensor.zeros(tuple(sizes[label] for label in function.expression.output_labels))

    function(output, *operands)

    return output
