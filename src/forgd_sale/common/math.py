from decimal import Decimal


def within_relative_tolerance(actual: int, expected: int, tol: Decimal = Decimal("0.0001")) -> bool:
    """
    True if 'actual' is within 'tol' (a fraction, 0.0001 == 0.01%) of 'expected'.
    A zero 'expected' only matches a zero 'actual'.
    """
    if expected == 0:
        return actual == 0
    return abs(Decimal(actual) - Decimal(expected)) / abs(Decimal(expected)) <= tol


def to_units(amount: int, unit: int = 10**18) -> Decimal:
    """Render a base-unit integer as a Decimal number of whole units."""
    return Decimal(amount) / Decimal(unit)
