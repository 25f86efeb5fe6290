import logging

from forgd_sale.common.errors import ArithmeticBoundsExceeded
from forgd_sale.common.model import MAX_PAYMENT, UNIT


log = logging.getLogger(__name__)

UINT256_MAX = 2**256 - 1
SQRT_NEWTON_ROUNDS = 7


def _checked(value: int, what: str) -> int:
    """Fail fast if 'value' leaves the unsigned 256-bit range."""
    if value < 0 or value > UINT256_MAX:
        raise ArithmeticBoundsExceeded(f"{what} outside uint256 range: {value}")
    return value


class LinearCurveHelper:
    """
    Integer pricing math for a linearly increasing price curve.

    The marginal price of whole unit n (0-based) is:
        price(n) = price0 + inc * n

    so buying k whole units from the current point costs:
        cost(k) = k * price0 + inc * k * (k - 1) / 2

    Token quantities are fixed-point with 'unit' base units per whole unit.
    Fractional quantities interpolate the same quadratic.

    Safe operating range: price0 and inc in [5000, 1e18], payment up to 1e50.
    Intermediates grow like 2 * inc * payment, which reaches the uint256 limit
    around payment ~ 1e58 for inc = 1e18. Inputs outside the range raise
    ArithmeticBoundsExceeded.
    """

    @staticmethod
    def isqrt(x: int) -> int:
        """
        Floor integer square root: the largest r with r*r <= x.

        Starts from a power-of-two estimate at or above sqrt(x) taken from the
        bit length, runs a fixed number of Newton steps (enough for any uint256),
        then picks min(r, x // r) to drop a possible one-off overshoot.
        """
        _checked(x, "isqrt argument")
        if x == 0:
            return 0
        r = 1 << ((x.bit_length() + 1) // 2)
        for _ in range(SQRT_NEWTON_ROUNDS):
            r = (r + x // r) >> 1
        return min(r, x // r)

    @staticmethod
    def tokens_for_payment(payment: int, price0: int, inc: int, unit: int = UNIT,
                           max_payment: int = MAX_PAYMENT) -> int:
        """
        Solves payment = cost(n) for n with the quadratic formula:
            n = unit * (inc/2 + sqrt((price0 - inc/2)^2 + 2*inc*payment) - price0) / inc

        Every division floors, so the result never exceeds the exact solution.

        :param payment: int - value offered, in base units.
        :param price0: int - current marginal price of one whole unit.
        :param inc: int - price increase per whole unit sold.
        :return: int - token quantity in base units.
        """
        if payment < 0 or payment > max_payment:
            raise ArithmeticBoundsExceeded(f"Payment {payment} outside [0, {max_payment}].")
        if price0 <= 0 or inc <= 0:
            raise ArithmeticBoundsExceeded("Price and increase rate must be positive.")

        half = inc // 2
        offset = price0 - half
        discriminant = _checked(offset * offset + 2 * inc * payment, "discriminant")
        root = LinearCurveHelper.isqrt(discriminant)
        numerator = max(half + root - price0, 0)
        tokens = _checked(unit * numerator, "scaled numerator") // inc
        log.debug("tokens_for_payment payment=%d price0=%d inc=%d -> %d", payment, price0, inc, tokens)
        return tokens

    @staticmethod
    def expense_for_tokens(tokens: int, price0: int, inc: int, unit: int = UNIT) -> int:
        """
        Total cost of buying 'tokens' base units from marginal price 'price0':
            a = tokens * inc / unit
            b = 2 * price0 - inc
            expense = a * (a + b) / (2 * inc)

        Floors like tokens_for_payment, so
        expense_for_tokens(tokens_for_payment(p)) <= p. When inc > 2 * price0 a
        fraction of the first unit falls where a + b is negative; such a quantity
        has no valid cost and raises ArithmeticBoundsExceeded.
        """
        if tokens < 0:
            raise ArithmeticBoundsExceeded("Token amount cannot be negative.")
        if price0 <= 0 or inc <= 0:
            raise ArithmeticBoundsExceeded("Price and increase rate must be positive.")
        if tokens == 0:
            return 0

        a = _checked(tokens * inc, "tokens * inc") // unit
        b = 2 * price0 - inc
        span = _checked(a + b, "a + b")
        return _checked(a * span, "expense numerator") // (2 * inc)

    @staticmethod
    def price_after(price0: int, inc: int, tokens: int, unit: int = UNIT) -> int:
        """Marginal price once 'tokens' base units have been sold from 'price0'."""
        return _checked(price0 + inc * tokens // unit, "new price")
