__all__ = [
    "MalformedExpressionError",
    "EmptyExpressionError",
    "ExpressionTooLongError",
    "MultipleArrowsError",
    "InvalidCharacterError",
    "OverpairedLabelError",
    "DuplicateOutputLabelError",
    "UnknownOutputLabelError",
]

from dataclasses import dataclass

from .ast import IndexCursor


class MalformedExpressionError(Exception):
    """Base of all errors describing expression text that cannot be evaluated."""

    __slots__ = ()


@dataclass(eq=False, slots=True)
class EmptyExpressionError(MalformedExpressionError):
    expression: str

    def __str__(self):
        return (
            f"Expected an expression with at least one factor before any ->, "
            f"but got {self.expression!r}"
        )


@dataclass(eq=False, slots=True)
class ExpressionTooLongError(MalformedExpressionError):
    expression: str
    max_length: int

    def __str__(self):
        return (
            f"Expected an expression of at most {self.max_length} characters, "
            f"but got {len(self.expression)} characters in {self.expression!r}"
        )


@dataclass(eq=False, slots=True)
class MultipleArrowsError(MalformedExpressionError):
    expression: str
    count: int

    def __str__(self):
        return (
            f"Expected -> to appear at most once, but found it {self.count} times in "
            f"{self.expression!r}"
        )


@dataclass(eq=False, slots=True)
class InvalidCharacterError(MalformedExpressionError):
    expression: str
    message: str

    def __str__(self):
        return (
            f"Expected comma-separated factors of single-character labels, optionally followed by "
            f"-> and the output labels, but failed to parse {self.expression!r}:\n{self.message}"
        )


@dataclass(eq=False, slots=True)
class OverpairedLabelError(MalformedExpressionError):
    expression: str
    label: str
    cursors: tuple[IndexCursor, ...]

    def __str__(self):
        return (
            f"Expected each label to appear at most twice so that each cursor is in at most one "
            f"pairwise contraction, but label {self.label!r} is already fully paired and appears "
            f"again at (factor, index) {', '.join(str(cursor) for cursor in self.cursors)} "
            f"in {self.expression!r}"
        )


@dataclass(eq=False, slots=True)
class DuplicateOutputLabelError(MalformedExpressionError):
    expression: str
    label: str

    def __str__(self):
        return (
            f"Expected each output label to be listed once, but label {self.label!r} is repeated "
            f"after -> in {self.expression!r}"
        )


@dataclass(eq=False, slots=True)
class UnknownOutputLabelError(MalformedExpressionError):
    expression: str
    label: str
    contracted: bool

    def __str__(self):
        if self.contracted:
            reason = "is contracted between two factors"
        else:
            reason = "does not appear in any factor"
        return (
            f"Expected each output label to be a free label of the factors, but label "
            f"{self.label!r} {reason} in {self.expression!r}"
        )
