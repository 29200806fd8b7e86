import time

import pytest

from plugins.scientific_calculator.core import (
    EvaluationError,
    ExpressionSyntaxError,
    canonicalize,
    evaluate_normalized,
    get_registry,
    parse_expression,
    tokenize,
)
from plugins.scientific_calculator.core.parser import MAX_DEPTH, BinaryOp, Call, Number, UnaryOp


def _eval(text, angle_unit="radian"):
    return evaluate_normalized(text, registry=get_registry(), angle_unit=angle_unit)


def test_tokenize_skips_whitespace():
    kinds = [token.kind for token in tokenize("2 * (pi + 1)")]
    assert kinds == ["number", "op", "lparen", "name", "op", "number", "rparen"]


def test_parse_builds_typed_tree():
    tree = parse_expression("1+sin(2)")
    assert tree == BinaryOp("add", Number(1.0), Call("sin", (Number(2.0),)))


def test_multiplication_binds_tighter_than_addition():
    assert _eval("2+3*4") == 14
    assert _eval("(2+3)*4") == 20
    assert canonicalize(parse_expression("2+3*4")) == "(2 + (3 * 4))"


def test_subtraction_and_division_are_left_associative():
    assert _eval("10-4-3") == 3
    assert _eval("8/4/2") == 1


def test_power_is_right_associative_and_beats_unary_minus():
    assert _eval("2^3^2") == 512
    assert _eval("-2^2") == -4
    assert _eval("2^-1") == 0.5
    assert parse_expression("-2^2") == UnaryOp("neg", BinaryOp("pow", Number(2.0), Number(2.0)))


def test_modulo_keeps_sign_of_dividend():
    assert _eval("7%3") == 1
    assert _eval("-7%3") == -1


def test_binary_function_call():
    assert _eval("pow(2,10)") == 1024


@pytest.mark.parametrize("text", ["2+", "(1+2", "1+2)", "2 3", "1..2", "3$", "", "sin(,1)"])
def test_syntax_errors(text):
    with pytest.raises(ExpressionSyntaxError):
        parse_expression(text)


def test_nesting_depth_is_bounded():
    deep = "(" * (MAX_DEPTH + 1) + "1" + ")" * (MAX_DEPTH + 1)
    with pytest.raises(ExpressionSyntaxError):
        parse_expression(deep)
    shallow = "(" * 10 + "1" + ")" * 10
    assert _eval(shallow) == 1


def test_canonical_form_of_calls_and_signs():
    assert canonicalize(parse_expression("-sqrt(4)+2.5")) == "((-sqrt(4)) + 2.5)"


def test_evaluation_is_repeatable():
    assert _eval("sin(1)+ln(2)") == _eval("sin(1)+ln(2)")


@pytest.mark.parametrize(
    "text",
    [
        "5/0",
        "inv(0)",
        "asin(2)",
        "acosh(0.5)",
        "ln(0)",
        "log(-1)",
        "sqrt(-1)",
        "fact(-1)",
        "fact(2.5)",
        "fact(171)",
        "10^400",
        "(-8)^(1/3)",
        "exp(1000)",
        "sq(10^200)",
        "7%0",
    ],
)
def test_domain_errors(text):
    with pytest.raises(EvaluationError):
        _eval(text)


def test_arity_and_kind_are_checked():
    with pytest.raises(EvaluationError):
        _eval("sin(1,2)")
    with pytest.raises(EvaluationError):
        _eval("sin")
    with pytest.raises(EvaluationError):
        _eval("pi(2)")
    with pytest.raises(EvaluationError):
        _eval("nothing(1)")


def test_angle_unit_applies_to_trig_and_inverse_trig():
    assert _eval("sin(30)", "degree") == pytest.approx(0.5)
    assert _eval("asin(1)", "degree") == pytest.approx(90)
    assert _eval("asin(1)", "radian") == pytest.approx(1.5707963267948966)
    assert _eval("sinh(1)", "degree") == _eval("sinh(1)", "radian")


def test_registry_functions():
    assert _eval("log(1000)") == pytest.approx(3)
    assert _eval("pow10(2)") == pytest.approx(100)
    assert _eval("cbrt(-27)") == pytest.approx(-3)
    assert _eval("fact(5)") == 120
    assert _eval("inv(4)") == 0.25
    assert _eval("abs(-3)+sq(3)+cb(2)") == 20


@pytest.mark.parametrize("text", ["fact(171)", "fact(1000000)", "fact(10^9)"])
def test_large_factorial_fails_fast(text):
    started = time.perf_counter()
    with pytest.raises(EvaluationError):
        _eval(text)
    assert time.perf_counter() - started < 0.5


def test_largest_float_factorial():
    assert _eval("fact(170)") == pytest.approx(7.257415615307994e306)
