import pytest

from plugins.scientific_calculator.core import ExpressionError, evaluate_expression


def test_evaluate_basic_expression():
    result = evaluate_expression("3*4+5")
    assert result["result"] == 17
    assert result["formatted"] == "17"
    assert result["canonical"] == "((3 * 4) + 5)"


def test_evaluate_trig_degrees():
    result = evaluate_expression("sin(90)", angle_unit="degree")
    assert result["result"] == pytest.approx(1.0)
    assert result["angle_unit"] == "degree"


def test_evaluate_defaults_to_radians():
    result = evaluate_expression("cos(pi)")
    assert result["result"] == pytest.approx(-1.0)
    assert result["angle_unit"] == "radian"


def test_caret_is_power():
    result = evaluate_expression("2^3")
    assert result["result"] == 8.0
    assert result["canonical"] == "(2 ^ 3)"


def test_keypad_glyphs_are_accepted():
    result = evaluate_expression("6×7÷2−1")
    assert result["normalized"] == "6*7/2-1"
    assert result["formatted"] == "20"


def test_last_result_is_substituted():
    result = evaluate_expression("Ans×Ans", last_result="7")
    assert result["normalized"] == "(7)*(7)"
    assert result["formatted"] == "49"


def test_invalid_angle_unit_rejected():
    with pytest.raises(ExpressionError):
        evaluate_expression("1+1", angle_unit="gradian")


def test_invalid_expression_rejected():
    with pytest.raises(ExpressionError):
        evaluate_expression("__import__('os').system('echo')")  # disallowed syntax


def test_attribute_access_is_not_an_expression():
    with pytest.raises(ExpressionError):
        evaluate_expression("pi.real")
