import pytest

from decimal import Decimal

from forgd_sale.common.math import within_relative_tolerance, to_units


@pytest.mark.parametrize(
    "actual, expected, tol, result",
    [
        (1000, 1000, Decimal("0.0001"), True),

        (9999, 10000, Decimal("0.0001"), True),

        (9998, 10000, Decimal("0.0001"), False),

        (10**18 - 10**14, 10**18, Decimal("0.0001"), True),

        (10**18 - 10**14 - 1, 10**18, Decimal("0.0001"), False),

        (0, 0, Decimal("0.0001"), True),

        (1, 0, Decimal("0.5"), False),
    ]
)
def test_within_relative_tolerance(actual, expected, tol, result):
    """
    Test the within_relative_tolerance function with various inputs
    """
    assert within_relative_tolerance(actual, expected, tol) == result, \
        f"Expected {result} for actual={actual}, expected={expected}, tol={tol}"


def test_to_units():
    assert to_units(15 * 10**17) == Decimal("1.5")
    assert to_units(5, unit=10) == Decimal("0.5")
