import time

import pytest

from plugins.scientific_calculator.core import (
    ExpressionError,
    NormalizationError,
    get_registry,
    normalize_expression,
)


def _normalize(text, last_result=None, **kwargs):
    return normalize_expression(text, registry=get_registry(), last_result=last_result, **kwargs)


def test_digit_before_constant_gets_multiplication():
    assert _normalize("2pi") == "2*pi"
    assert _normalize("2π") == "2*pi"
    assert _normalize("3e") == "3*e"


def test_digit_before_function_call_gets_multiplication():
    assert _normalize("2sin(30)") == "2*sin(30)"
    assert _normalize("4pow10(2)") == "4*pow10(2)"


def test_closing_paren_before_digit_or_call_gets_multiplication():
    assert _normalize("(1+2)3") == "(1+2)*3"
    assert _normalize("(1+2)cos(0)") == "(1+2)*cos(0)"


def test_uncovered_adjacency_is_left_alone():
    # Only the two adjacency patterns are rewritten.
    assert _normalize("2(3)") == "2(3)"
    assert _normalize("(2)pi") == "(2)pi"


def test_glyphs_are_canonicalised():
    assert _normalize("3×4÷2−1") == "3*4/2-1"
    assert _normalize("√(9)") == "sqrt(9)"
    assert _normalize("2**3") == "2^3"


def test_function_names_are_case_insensitive():
    assert _normalize("SIN(30)+Pi") == "sin(30)+pi"


def test_answer_token_substitution():
    assert _normalize("Ans+1", last_result="7") == "(7)+1"
    assert _normalize("Ans×2", last_result="-2.5") == "(-2.5)*2"
    assert _normalize("Ans", last_result="1.000000e9") == "(1000000000)"
    assert _normalize("Ans2", last_result="4") == "(4)*2"


def test_answer_before_any_result_is_zero():
    assert _normalize("Ans+2") == "(0)+2"


def test_normalization_is_idempotent():
    samples = [
        "2pi",
        "3×4÷2",
        "(1+2)3",
        "2sin(30)cos(60)",
        "Ans×Ans",
        "√(2)+π",
        "-2^-1",
        "fact(5)+inv(4)",
    ]
    for sample in samples:
        once = _normalize(sample, last_result="12")
        assert _normalize(once, last_result="12") == once


def test_unknown_identifier_rejected():
    with pytest.raises(NormalizationError):
        _normalize("foo(1)")
    with pytest.raises(NormalizationError):
        _normalize("2x")


def test_functions_must_be_called_and_constants_must_not():
    with pytest.raises(NormalizationError):
        _normalize("sin+1")
    with pytest.raises(NormalizationError):
        _normalize("pi(2)")


def test_empty_and_oversized_input_rejected():
    with pytest.raises(NormalizationError):
        _normalize("   ")
    with pytest.raises(NormalizationError):
        _normalize("1+" * 20 + "1", max_length=10)


def test_huge_answer_exponent_fails_fast():
    started = time.perf_counter()
    with pytest.raises(ExpressionError):
        _normalize("Ans+1", last_result="1e50000000")
    assert time.perf_counter() - started < 0.5


def test_length_is_checked_after_answer_substitution():
    with pytest.raises(NormalizationError):
        _normalize("Ans+1", last_result="1e300", max_length=100)
    assert _normalize("Ans+1", last_result="1e3", max_length=100) == "(1000)+1"
