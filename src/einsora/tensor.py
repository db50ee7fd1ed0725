from __future__ import annotations

__all__ = ["ArrayView", "Tensor"]

import itertools
import math
from numbers import Real
from typing import Any, Iterator, Protocol


class ArrayView(Protocol):
    """What the engine needs from operands and outputs.

    Operands are only read; outputs are also written. `Tensor` and numpy arrays both qualify.
    """

    @property
    def shape(self) -> tuple[int, ...]: ...

    def __getitem__(self, index: tuple[int, ...]) -> Any: ...

    def __setitem__(self, index: tuple[int, ...], value: Any) -> None: ...


def row_major_strides(dimensions: tuple[int, ...]) -> tuple[int, ...]:
    strides = []
    stride = 1
    for dimension in reversed(dimensions):
        strides.append(stride)
        stride *= dimension
    return tuple(reversed(strides))


class Tensor:
    """Dense tensor viewing a flat list of elements.

    The list is not owned by the tensor: several tensors may view the same list, for example when
    `select` is used to take a slice. Element `index` lives at
    `offset + sum(i * s for i, s in zip(index, strides))`.
    """

    def __init__(
        self,
        data: list,
        dimensions: tuple[int, ...],
        *,
        strides: tuple[int, ...] | None = None,
        offset: int = 0,
    ):
        dimensions = tuple(dimensions)
        if strides is None:
            strides = row_major_strides(dimensions)
        elif len(strides) != len(dimensions):
            raise ValueError(
                f"Expected one stride per dimension, but got strides {strides} for "
                f"dimensions {dimensions}"
            )

        self.data = data
        self._dimensions = dimensions
        self._strides = tuple(strides)
        self._offset = offset

    @staticmethod
    def zeros(dimensions: tuple[int, ...], *, zero: Any = 0) -> Tensor:
        return Tensor([zero] * math.prod(dimensions), dimensions)

    @staticmethod
    def from_lol(lol, *, dimensions: tuple[int, ...] | None = None) -> Tensor:
        if dimensions is None:
            dimensions = default_lol_dimensions(lol)

        data = []

        def recurse(tree: Any, depth: int):
            if depth == len(dimensions):
                if not isinstance(tree, Real):
                    raise ValueError(f"Expected a number at depth {depth} of {lol}, not {tree}")
                data.append(tree)
            else:
                if isinstance(tree, Real) or len(tree) != dimensions[depth]:
                    raise ValueError(
                        f"Expected a list of length {dimensions[depth]} at depth {depth} of "
                        f"{lol}, not {tree}"
                    )
                for element in tree:
                    recurse(element, depth + 1)

        recurse(lol, 0)

        return Tensor(data, dimensions)

    @staticmethod
    def from_dok(dictionary: dict[tuple[int, ...], Any], *, dimensions: tuple[int, ...]) -> Tensor:
        tensor = Tensor.zeros(dimensions)
        for coordinate, value in dictionary.items():
            tensor[coordinate] = value
        return tensor

    @staticmethod
    def from_scalar(scalar: Any) -> Tensor:
        return Tensor([scalar], ())

    @staticmethod
    def from_numpy(array) -> Tensor:
        import numpy

        array = numpy.asarray(array)
        return Tensor(array.ravel().tolist(), array.shape)

    @property
    def order(self) -> int:
        return len(self._dimensions)

    @property
    def dimensions(self) -> tuple[int, ...]:
        return self._dimensions

    @property
    def shape(self) -> tuple[int, ...]:
        return self._dimensions

    @property
    def strides(self) -> tuple[int, ...]:
        return self._strides

    @property
    def offset(self) -> int:
        return self._offset

    def _position(self, index: tuple[int, ...]) -> int:
        if len(index) != self.order:
            raise IndexError(f"Expected an index of length {self.order}, not {index}")

        position = self._offset
        for i, dimension, stride in zip(index, self._dimensions, self._strides, strict=True):
            if not 0 <= i < dimension:
                raise IndexError(
                    f"Index {index} is out of bounds for dimensions {self._dimensions}"
                )
            position += i * stride
        return position

    def __getitem__(self, index: tuple[int, ...]):
        return self.data[self._position(index)]

    def __setitem__(self, index: tuple[int, ...], value) -> None:
        self.data[self._position(index)] = value

    def select(self, dimension: int, index: int) -> Tensor:
        """View of the slice at `index` along `dimension`, sharing this tensor's data."""
        if not 0 <= dimension < self.order:
            raise IndexError(
                f"Dimension {dimension} does not exist in a tensor of order {self.order}"
            )
        if not 0 <= index < self._dimensions[dimension]:
            raise IndexError(
                f"Index {index} is out of bounds for dimension {dimension} of size "
                f"{self._dimensions[dimension]}"
            )

        return Tensor(
            self.data,
            self._dimensions[:dimension] + self._dimensions[dimension + 1 :],
            strides=self._strides[:dimension] + self._strides[dimension + 1 :],
            offset=self._offset + index * self._strides[dimension],
        )

    def items(self) -> Iterator[tuple[tuple[int, ...], Any]]:
        for coordinate in itertools.product(*(range(dimension) for dimension in self._dimensions)):
            yield coordinate, self[coordinate]

    def to_dok(self, *, explicit_zeros=False) -> dict[tuple[int, ...], Any]:
        if explicit_zeros:
            return {key: value for key, value in self.items()}
        else:
            return {key: value for key, value in self.items() if value != 0}

    def to_lol(self):
        def recurse(prefix: tuple[int, ...]):
            if len(prefix) == self.order:
                return self[prefix]
            else:
                return [recurse(prefix + (i,)) for i in range(self._dimensions[len(prefix)])]

        return recurse(())

    def to_numpy(self):
        import numpy

        return numpy.array(self.to_lol()).reshape(self._dimensions)

    def __float__(self):
        if self.order != 0:
            raise ValueError(f"Can only convert Tensor of order 0 to float, not order {self.order}")

        return float(self[()])

    def __eq__(self, other):
        if isinstance(other, Tensor):
            return self._dimensions == other._dimensions and list(self.items()) == list(
                other.items()
            )
        else:
            return NotImplemented

    def __repr__(self):
        return f"Tensor.from_lol({self.to_lol()!r}, dimensions={self._dimensions})"


def default_lol_dimensions(lol) -> tuple[int, ...]:
    dimensions = []
    while not isinstance(lol, Real):
        dimensions.append(len(lol))
        if len(lol) == 0:
            break
        lol = lol[0]
    return tuple(dimensions)
