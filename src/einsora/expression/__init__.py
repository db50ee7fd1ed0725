from . import ast
from ._exceptions import (
    DuplicateOutputLabelError,
    EmptyExpressionError,
    ExpressionTooLongError,
    InvalidCharacterError,
    MalformedExpressionError,
    MultipleArrowsError,
    OverpairedLabelError,
    UnknownOutputLabelError,
)
from ._parser import parse_expression
from .ast import Contraction, IndexCursor, ParsedExpression
