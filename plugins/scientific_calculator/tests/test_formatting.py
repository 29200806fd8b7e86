import math

import pytest

from plugins.scientific_calculator.core import EvaluationError, format_result, plain_number


def test_upper_boundary_is_fixed_point():
    assert format_result(1_000_000_000.0) == "1000000000"
    assert format_result(1_000_000_001.0) == "1.000000e9"


def test_lower_boundary_is_fixed_point():
    assert format_result(1e-7) == "0.0000001"
    assert format_result(5e-8) == "5.000000e-8"


def test_negative_values_use_the_same_thresholds():
    assert format_result(-1_234_567_890.5) == "-1.234568e9"
    assert format_result(-0.25) == "-0.25"


def test_zero_is_never_exponential():
    assert format_result(0.0) == "0"
    assert format_result(-0.0) == "0"


def test_fixed_point_rounds_to_ten_decimals_and_strips_zeros():
    assert format_result(2 * math.pi) == "6.2831853072"
    assert format_result(0.1 + 0.2) == "0.3"
    assert format_result(1 / 3) == "0.3333333333"
    assert format_result(49.0) == "49"


def test_two_operand_results_are_correct():
    cases = [
        (3, 4),
        (12.5, 0.5),
        (-7, 2),
        (1000, 3),
        (0.1, 0.7),
    ]
    for a, b in cases:
        for value in (a + b, a - b, a * b, a / b):
            assert float(format_result(value)) == pytest.approx(value, abs=1e-10)


def test_non_finite_values_rejected():
    with pytest.raises(EvaluationError):
        format_result(math.inf)
    with pytest.raises(EvaluationError):
        format_result(math.nan)


def test_plain_number_removes_exponents():
    assert plain_number("1.000000e9") == "1000000000"
    assert plain_number("5.000000e-8") == "0.00000005"
    assert plain_number("-2.50") == "-2.5"
    assert plain_number("7") == "7"


def test_plain_number_rejects_text():
    with pytest.raises(EvaluationError):
        plain_number("Error")


def test_plain_number_rejects_exponents_beyond_float_range():
    assert plain_number("1e300") == "1" + "0" * 300
    with pytest.raises(EvaluationError):
        plain_number("1e401")
    with pytest.raises(EvaluationError):
        plain_number("1e-50000000")
    with pytest.raises(EvaluationError):
        plain_number("0e-999999")
