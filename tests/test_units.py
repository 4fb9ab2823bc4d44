import pytest

from backend.services.units import KG_TO_LB, convert_weight, format_weight, round_half_up, to_kg


def test_convert_kg_is_identity():
    assert convert_weight(100.0, "kg") == 100.0


def test_convert_to_lb():
    assert convert_weight(100.0, "lb") == pytest.approx(220.462)


def test_format_weight_default_precision_is_integer():
    assert format_weight(100.0, "lb") == 220.0
    assert format_weight(62.6, "kg") == 63.0


def test_format_weight_precision_one_keeps_half_units():
    assert format_weight(12.5, "kg", 1) == 12.5
    assert format_weight(10.0, "lb", 1) == 22.0


@pytest.mark.parametrize("weight", [0.5, 12.5, 60.0, 102.5, 317.5])
def test_kg_lb_round_trip(weight: float):
    assert to_kg(convert_weight(weight, "lb"), "lb") == pytest.approx(weight, abs=1e-3)
    assert convert_weight(weight, "lb") / KG_TO_LB == pytest.approx(weight, abs=1e-3)


def test_round_half_up_rounds_halves_up():
    assert round_half_up(2.5) == 3.0
    assert round_half_up(2.25, 1) == 2.3
    assert round_half_up(-2.25, 1) == -2.2
    assert round_half_up(17.6470588, 1) == 17.6
