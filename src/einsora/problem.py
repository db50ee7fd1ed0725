__all__ = [
    "ShapeMismatchError",
    "OperandCountError",
    "OperandRankError",
    "OutputRankError",
    "LabelExtentMismatchError",
    "EmptyDimensionError",
    "deduce_extent",
    "validate_operands",
    "validate_shapes",
]

from dataclasses import dataclass
from typing import Iterable, Sequence

from returns.result import Failure, Result, Success

from .expression import ParsedExpression
from .tensor import ArrayView


class ShapeMismatchError(Exception):
    """Base of all errors describing operands or an output incompatible with an expression."""

    __slots__ = ()


def participant_name(operand: int | None) -> str:
    return "output" if operand is None else f"operand {operand}"


@dataclass(eq=False, slots=True)
class OperandCountError(ShapeMismatchError):
    expression: ParsedExpression
    actual: int

    def __str__(self):
        return (
            f"Expected one operand per factor of {self.expression}, which is "
            f"{self.expression.number_of_factors}, but got {self.actual}"
        )


@dataclass(eq=False, slots=True)
class OperandRankError(ShapeMismatchError):
    expression: ParsedExpression
    operand: int
    actual: int

    def __str__(self):
        factor = self.expression.factor_deparse(self.operand)
        return (
            f"Expected operand {self.operand} to have one dimension per label of its factor "
            f"{factor!r} in {self.expression}, which is {len(factor)}, but it has {self.actual}"
        )


@dataclass(eq=False, slots=True)
class OutputRankError(ShapeMismatchError):
    expression: ParsedExpression
    actual: int

    def __str__(self):
        return (
            f"Expected the output to have one dimension per output label of {self.expression}, "
            f"which is {self.expression.rank}, but it has {self.actual}"
        )


@dataclass(eq=False, slots=True)
class LabelExtentMismatchError(ShapeMismatchError):
    expression: ParsedExpression
    label: str
    first: tuple[int | None, int, int]
    second: tuple[int | None, int, int]

    def __str__(self):
        described = ", ".join(
            f"{participant_name(operand)} dimension {dimension} has size {size}"
            for operand, dimension, size in (self.first, self.second)
        )
        return (
            f"Expected all dimensions sharing label {self.label!r} in {self.expression} to have "
            f"the same size, but {described}"
        )


@dataclass(eq=False, slots=True)
class EmptyDimensionError(ShapeMismatchError):
    expression: ParsedExpression
    operand: int | None
    dimension: int

    def __str__(self):
        return (
            f"Expected every dimension to have a positive size, but "
            f"{participant_name(self.operand)} dimension {self.dimension} has size 0 "
            f"in {self.expression}"
        )


def deduce_extent(*views: ArrayView) -> int:
    """Size of the first dimension of the first view having any dimension, otherwise 1."""
    for view in views:
        if len(view.shape) != 0:
            return view.shape[0]
    return 1


# Where each label was first seen, as (operand or None for the output, dimension, size)
LabelSources = dict[str, tuple[int | None, int, int]]


def record_label_sizes(
    expression: ParsedExpression,
    participants: Iterable[tuple[int | None, tuple[str, ...], tuple[int, ...]]],
    sources: LabelSources,
) -> Result[LabelSources, ShapeMismatchError]:
    for operand, labels, shape in participants:
        for dimension, (label, size) in enumerate(zip(labels, shape, strict=True)):
            if size == 0:
                return Failure(EmptyDimensionError(expression, operand, dimension))
            elif label not in sources:
                sources[label] = (operand, dimension, size)
            elif sources[label][2] != size:
                return Failure(
                    LabelExtentMismatchError(
                        expression, label, sources[label], (operand, dimension, size)
                    )
                )
    return Success(sources)


def operand_label_sources(
    expression: ParsedExpression, operands: Sequence[ArrayView]
) -> Result[LabelSources, ShapeMismatchError]:
    if len(operands) != expression.number_of_factors:
        return Failure(OperandCountError(expression, len(operands)))

    for i, (operand, factor) in enumerate(zip(operands, expression.factors, strict=True)):
        if len(operand.shape) != len(factor):
            return Failure(OperandRankError(expression, i, len(operand.shape)))

    participants = [
        (i, factor, tuple(operand.shape))
        for i, (operand, factor) in enumerate(zip(operands, expression.factors, strict=True))
    ]
    return record_label_sizes(expression, participants, {})


def label_sizes(sources: LabelSources) -> dict[str, int]:
    return {label: size for label, (_, _, size) in sources.items()}


def validate_operands(
    expression: ParsedExpression, operands: Sequence[ArrayView]
) -> Result[dict[str, int], ShapeMismatchError]:
    """Check that the operands fit the expression.

    Dimensions sharing a label must have the same size. Dimensions with different labels may
    differ.

    Returns:
        The size of every label.
    """
    return operand_label_sources(expression, operands).map(label_sizes)


def validate_shapes(
    expression: ParsedExpression, output: ArrayView, operands: Sequence[ArrayView]
) -> Result[dict[str, int], ShapeMismatchError]:
    """Check that the operands and output fit the expression.

    Returns:
        The size of every label.
    """

    def check_output(sources: LabelSources) -> Result[LabelSources, ShapeMismatchError]:
        if len(output.shape) != expression.rank:
            return Failure(OutputRankError(expression, len(output.shape)))

        participants = [(None, expression.output_labels, tuple(output.shape))]
        return record_label_sizes(expression, participants, sources)

    return operand_label_sources(expression, operands).bind(check_output).map(label_sizes)
