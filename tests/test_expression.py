import pytest

from einsora.expression import (
    DuplicateOutputLabelError,
    EmptyExpressionError,
    ExpressionTooLongError,
    InvalidCharacterError,
    MalformedExpressionError,
    MultipleArrowsError,
    OverpairedLabelError,
    UnknownOutputLabelError,
    parse_expression,
)
from einsora.expression.ast import *


def parse(string):
    return parse_expression(string).unwrap()


def test_matrix_multiply():
    expression = parse("ij,jk->ik")

    assert expression.factors == (("i", "j"), ("j", "k"))
    assert expression.contractions == (Contraction("j", (IndexCursor(0, 1), IndexCursor(1, 0))),)
    assert expression.free_labels == ("i", "k")
    assert expression.output_labels == ("i", "k")
    assert expression.rank == 2


def test_trace():
    expression = parse("ii->")

    assert expression.factors == (("i", "i"),)
    assert expression.contractions == (Contraction("i", (IndexCursor(0, 0), IndexCursor(0, 1))),)
    assert expression.free_labels == ()
    assert expression.output_labels == ()


@pytest.mark.parametrize(
    ("string", "output"),
    [
        ("ij,jk", ("i", "k")),
        ("ba", ("b", "a")),
        ("ij,kl", ("i", "j", "k", "l")),
        ("ij,ji", ()),
        ("i,i", ()),
        ("kj,ji,ab", ("k", "i", "a", "b")),
        (",i", ("i",)),
    ],
)
def test_implicit_output_is_free_labels_in_first_seen_order(string, output):
    expression = parse(string)

    assert expression.explicit_output is None
    assert expression.output_labels == output


@pytest.mark.parametrize(
    ("string", "output"),
    [
        ("ij,jk->ki", ("k", "i")),
        ("ij->", ()),
        ("ij->j", ("j",)),
        ("ijk->kji", ("k", "j", "i")),
    ],
)
def test_explicit_output_is_kept_in_order(string, output):
    assert parse(string).output_labels == output


def test_omitted_free_labels_are_summed():
    expression = parse("ijk,kl->li")

    assert expression.free_labels == ("i", "j", "l")
    assert expression.summed_free_labels == ("j",)


def test_whitespace_is_ignored():
    assert parse(" i j , j k -> i k ") == parse("ij,jk->ik")
    assert parse("ij - > i") == parse("ij->i")
    assert parse("ij\t,\njk") == parse("ij,jk")


def test_non_ascii_labels():
    expression = parse("αβ,βγ->γα")

    assert expression.contractions == (Contraction("β", (IndexCursor(0, 1), IndexCursor(1, 0))),)
    assert expression.output_labels == ("γ", "α")


def test_rank_zero_factors():
    expression = parse(",ij,->ji")

    assert expression.factors == ((), ("i", "j"), ())
    assert expression.number_of_factors == 3


def test_contraction_ordinal():
    expression = parse("ij,jk,kl")

    assert expression.contraction_ordinal(IndexCursor(0, 0)) is None
    assert expression.contraction_ordinal(IndexCursor(1, 0)) == 0
    assert expression.contraction_ordinal(IndexCursor(1, 1)) == 1
    assert expression.contraction_ordinal(IndexCursor(2, 0)) == 1


@pytest.mark.parametrize(
    ("string", "deparsed"),
    [
        ("ij,jk->ik", "ij,jk->ik"),
        ("ij,jk", "ij,jk"),
        (" ii -> ", "ii->"),
        (",ij", ",ij"),
    ],
)
def test_deparse(string, deparsed):
    assert str(parse(string)) == deparsed
    assert parse(deparsed) == parse(string)


@pytest.mark.parametrize("string", ["ij->i->j", "->->", "i->->i"])
def test_multiple_arrows(string):
    assert isinstance(parse_expression(string).failure(), MultipleArrowsError)


@pytest.mark.parametrize("string", ["iii->i", "ij,ik,il", "i,i,i", "ii,i->"])
def test_overpaired_label(string):
    error = parse_expression(string).failure()

    assert isinstance(error, OverpairedLabelError)
    assert error.label == "i"
    assert len(error.cursors) == 3


@pytest.mark.parametrize("string", ["", "   ", "->", "->ij", " -> "])
def test_empty_expression(string):
    assert isinstance(parse_expression(string).failure(), EmptyExpressionError)


@pytest.mark.parametrize("string", ["i-j", "ij>k", "ij,jk-", "ij->i>"])
def test_invalid_character(string):
    assert isinstance(parse_expression(string).failure(), InvalidCharacterError)


def test_duplicate_output_label():
    error = parse_expression("ij->ii").failure()

    assert isinstance(error, DuplicateOutputLabelError)
    assert error.label == "i"


@pytest.mark.parametrize(
    ("string", "label", "contracted"),
    [
        ("ij,jk->ijk", "j", True),
        ("ij->k", "k", False),
        ("ii->i", "i", True),
    ],
)
def test_unknown_output_label(string, label, contracted):
    error = parse_expression(string).failure()

    assert isinstance(error, UnknownOutputLabelError)
    assert error.label == label
    assert error.contracted == contracted


def test_max_length():
    assert isinstance(
        parse_expression("ij,jk->ik", max_length=5).failure(), ExpressionTooLongError
    )
    assert parse_expression("ij,jk->ik", max_length=9).unwrap() == parse("ij,jk->ik")


@pytest.mark.parametrize(
    "string", ["ij->i->j", "iii", "", "i-j", "ij->ii", "ij->k", "ij,jk->ijk"]
)
def test_errors_are_malformed_expression_errors(string):
    error = parse_expression(string).failure()

    assert isinstance(error, MalformedExpressionError)
    assert string in str(error) or repr(string) in str(error)


def test_constructed_expression_validates():
    with pytest.raises(OverpairedLabelError):
        ParsedExpression((("i",), ("i",), ("i",)))

    with pytest.raises(EmptyExpressionError):
        ParsedExpression(())

    assert ParsedExpression((("i", "j"),), ("j", "i")) == parse("ij->ji")
