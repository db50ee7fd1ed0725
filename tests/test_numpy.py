import pytest

from einsora import Algorithm, Tensor, einsum, execute


@pytest.mark.parametrize(
    "array",
    [
        0.0,
        4.5,
        [0, 0, 0],
        [[0, 1, 2], [0, 4, 5]],
        [[[0, 0, 3], [4, 5, 0]], [[0, 0, 0], [4, 5, 6]]],
    ],
)
def test_to_from_numpy(array):
    numpy = pytest.importorskip("numpy")

    expected = numpy.array(array)

    tensor = Tensor.from_numpy(expected)
    actual = Tensor.to_numpy(tensor)

    assert numpy.array_equal(actual, expected)


@pytest.mark.parametrize(
    "string",
    ["ij,jk->ik", "ii->", "ij,jk,kl->li", "ij,jk,ki->", "ijk,kl,lm->mji", "ii,jk,kj->", "ij->"],
)
@pytest.mark.parametrize("algorithm", [Algorithm.direct, Algorithm.network])
def test_execute_on_numpy_arrays(string, algorithm):
    numpy = pytest.importorskip("numpy")
    rng = numpy.random.default_rng(0)

    factors = string.split("->")[0].split(",")
    operands = [rng.integers(-5, 5, size=(3,) * len(factor)) for factor in factors]
    expected = numpy.einsum(string, *operands)

    output = numpy.zeros_like(expected)
    execute(string, output, *operands, algorithm=algorithm)

    assert numpy.array_equal(output, expected)


def test_einsum_of_numpy_arrays():
    numpy = pytest.importorskip("numpy")

    a = numpy.arange(4).reshape(2, 2)

    actual = einsum("ij,jk->ik", a, a)

    assert numpy.array_equal(actual.to_numpy(), a @ a)
