import hypothesis.strategies as st
from hypothesis import given
from returns.result import Failure, Success

from einsora.expression import MalformedExpressionError, ParsedExpression, parse_expression

from .strategies import expressions


@given(st.text())
def test_expression_parsing_cannot_crash(string):
    match parse_expression(string):
        case Success(ParsedExpression()):
            pass
        case Failure(MalformedExpressionError()):
            pass
        case _:
            raise RuntimeError("Unexpected result")


@given(st.text(alphabet="ijk,-> "))
def test_expression_parsing_of_einsum_alphabet_cannot_crash(string):
    match parse_expression(string):
        case Success(ParsedExpression()):
            pass
        case Failure(MalformedExpressionError()):
            pass
        case _:
            raise RuntimeError("Unexpected result")


@given(expressions())
def test_expression_parsing_round_trips(expression):
    text = expression.deparse()
    new_expression = parse_expression(text).unwrap()
    assert expression == new_expression
