__all__ = ["parse_expression"]

from parsita import ParseError, ParserContext, lit, opt, reg, rep, rep1sep
from parsita.util import splat
from returns import result

from ._exceptions import (
    EmptyExpressionError,
    ExpressionTooLongError,
    InvalidCharacterError,
    MalformedExpressionError,
    MultipleArrowsError,
)
from .ast import ParsedExpression


def make_expression(factors, maybe_output):
    match maybe_output:
        case []:
            return ParsedExpression(factors)
        case [output]:
            return ParsedExpression(factors, output)


class EinsumParsers(ParserContext):
    # Whitespace is stripped before parsing so that it may appear even inside an arrow
    label = reg(r"[^\s,>-]")

    factor = rep(label) > tuple
    factors = rep1sep(factor, ",") > tuple

    output = lit("->") >> factor

    expression = factors & opt(output) > splat(make_expression)


def parse_expression(
    string: str, /, *, max_length: int | None = None
) -> result.Result[ParsedExpression, MalformedExpressionError]:
    if max_length is not None and len(string) > max_length:
        return result.Failure(ExpressionTooLongError(string, max_length))

    stripped = "".join(string.split())

    arrows = stripped.count("->")
    if arrows > 1:
        return result.Failure(MultipleArrowsError(string, arrows))

    if stripped.partition("->")[0] == "":
        return result.Failure(EmptyExpressionError(string))

    try:
        match EinsumParsers.expression.parse(stripped):
            case result.Failure(ParseError() as error):
                return result.Failure(InvalidCharacterError(string, str(error)))
            case parsed:
                return parsed
    except MalformedExpressionError as e:
        return result.Failure(e)
