import hypothesis.strategies as st

from einsora import Tensor
from einsora.expression import ParsedExpression

label_pool = "abcdefghijklαβγ"


@st.composite
def expressions(draw, max_factors: int = 4, max_rank: int = 3) -> ParsedExpression:
    number_of_factors = draw(st.integers(min_value=1, max_value=max_factors))

    counts: dict[str, int] = {}
    factors = []
    for _ in range(number_of_factors):
        rank = draw(st.integers(min_value=0, max_value=max_rank))
        factor = []
        for _ in range(rank):
            # Every label appears at most twice
            label = draw(st.sampled_from(label_pool).filter(lambda x: counts.get(x, 0) < 2))
            counts[label] = counts.get(label, 0) + 1
            factor.append(label)
        factors.append(tuple(factor))

    free_labels = [label for label, count in counts.items() if count == 1]
    if len(free_labels) != 0 and draw(st.booleans()):
        output = tuple(draw(st.lists(st.sampled_from(free_labels), unique=True)))
    elif draw(st.booleans()):
        output = ()
    else:
        output = None

    return ParsedExpression(tuple(factors), output)


@st.composite
def operands(draw, expression: ParsedExpression, extent: int) -> list[Tensor]:
    return [
        Tensor.from_dok(
            draw(
                st.dictionaries(
                    st.tuples(*[st.integers(min_value=0, max_value=extent - 1) for _ in factor]),
                    st.integers(min_value=-8, max_value=8),
                )
            ),
            dimensions=(extent,) * len(factor),
        )
        for factor in expression.factors
    ]
