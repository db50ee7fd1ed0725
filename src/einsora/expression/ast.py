from __future__ import annotations

__all__ = ["IndexCursor", "Contraction", "ParsedExpression"]

from dataclasses import dataclass

from .._stable_set import StableSet, argfind


@dataclass(frozen=True, slots=True)
class IndexCursor:
    """A specific index of a specific factor."""

    factor: int
    index: int

    def __str__(self) -> str:
        return f"({self.factor}, {self.index})"


@dataclass(frozen=True, slots=True)
class Contraction:
    """The cursors sharing one label, which get summed over."""

    label: str
    cursors: tuple[IndexCursor, ...]

    def __contains__(self, cursor: IndexCursor) -> bool:
        return cursor in self.cursors

    def __str__(self) -> str:
        return f"{self.label}: {', '.join(str(cursor) for cursor in self.cursors)}"


@dataclass(frozen=True)
class ParsedExpression:
    """Structure of an einsum expression.

    Attributes:
        factors: The index labels of each operand, one label per dimension.
        explicit_output: The labels listed after `->`, or None if the expression has no arrow and
            the output is implicit.
    """

    factors: tuple[tuple[str, ...], ...]
    explicit_output: tuple[str, ...] | None = None

    def __post_init__(self):
        from ._exceptions import (
            DuplicateOutputLabelError,
            EmptyExpressionError,
            OverpairedLabelError,
            UnknownOutputLabelError,
        )

        if len(self.factors) == 0:
            raise EmptyExpressionError(self.deparse())

        # The cursor where each label was first seen and the contraction it opened, if any
        first_cursors: dict[str, IndexCursor] = {}
        groups: dict[str, StableSet[IndexCursor]] = {}

        for i_factor, factor in enumerate(self.factors):
            for i_index, label in enumerate(factor):
                cursor = IndexCursor(i_factor, i_index)
                if label not in first_cursors:
                    first_cursors[label] = cursor
                    continue

                if label not in groups:
                    groups[label] = StableSet(first_cursors[label])
                elif len(groups[label]) == 2:
                    raise OverpairedLabelError(self.deparse(), label, (*groups[label], cursor))

                groups[label].insert(cursor)

        contractions = tuple(
            Contraction(label, tuple(cursors)) for label, cursors in groups.items()
        )
        free_labels = tuple(label for label in first_cursors if label not in groups)

        if self.explicit_output is None:
            output_labels = free_labels
        else:
            seen = StableSet()
            for label in self.explicit_output:
                if not seen.insert(label):
                    raise DuplicateOutputLabelError(self.deparse(), label)
                if label not in free_labels:
                    raise UnknownOutputLabelError(self.deparse(), label, label in groups)
            output_labels = self.explicit_output

        self._contractions: tuple[Contraction, ...]
        object.__setattr__(self, "_contractions", contractions)
        self._free_labels: tuple[str, ...]
        object.__setattr__(self, "_free_labels", free_labels)
        self._output_labels: tuple[str, ...]
        object.__setattr__(self, "_output_labels", output_labels)

    @property
    def contractions(self) -> tuple[Contraction, ...]:
        return self._contractions

    @property
    def free_labels(self) -> tuple[str, ...]:
        """Labels appearing exactly once, in the order they were first seen."""
        return self._free_labels

    @property
    def output_labels(self) -> tuple[str, ...]:
        return self._output_labels

    @property
    def summed_free_labels(self) -> tuple[str, ...]:
        """Free labels omitted from an explicit output, which are summed over."""
        return tuple(label for label in self._free_labels if label not in self._output_labels)

    @property
    def number_of_factors(self) -> int:
        return len(self.factors)

    @property
    def rank(self) -> int:
        return len(self._output_labels)

    def contraction_ordinal(self, cursor: IndexCursor) -> int | None:
        return argfind(self._contractions, key=lambda contraction: cursor in contraction)

    def factor_deparse(self, factor: int) -> str:
        return "".join(self.factors[factor])

    def deparse(self) -> str:
        """Convert the expression back into a string."""
        inputs = ",".join("".join(factor) for factor in self.factors)
        if self.explicit_output is None:
            return inputs
        else:
            return inputs + "->" + "".join(self.explicit_output)

    def __str__(self) -> str:
        return self.deparse()
