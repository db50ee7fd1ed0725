from .algorithm import Algorithm
from .expression import MalformedExpressionError, ParsedExpression, parse_expression
from .function import Einsum, einsum, einsum_expression, execute
from .network import (
    ConnectedTensorNetwork,
    ContractionInvariantError,
    GraphConstructionError,
    IndexLocation,
    TensorNetwork,
)
from .planner import PairwiseContraction, contraction_cost, plan_contraction
from .problem import ShapeMismatchError
from .tensor import ArrayView, Tensor
