from decimal import Decimal

import pytest

from utils.rounding import mean, round_half_up


@pytest.mark.parametrize(
    "value,places,expected",
    [
        (10.5, 0, Decimal("11")),      # round() de Python daría 10
        (11.5, 0, Decimal("12")),
        (10.49, 0, Decimal("10")),
        (14.195, 2, Decimal("14.20")),
        (2.675, 2, Decimal("2.68")),   # en binario 2.675 es 2.67499...
        (Decimal("13.4"), 2, Decimal("13.40")),
    ],
)
def test_round_half_up(value, places, expected):
    assert round_half_up(value, places) == expected


def test_mean_of_nothing_is_none_not_zero():
    assert mean([]) is None


def test_mean_is_exact():
    assert mean([10, 12, 14]) == Decimal(12)
    assert mean([0.1, 0.2]) == Decimal("0.15")
