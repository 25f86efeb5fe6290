from forgd_sale.common.model import SaleState, UNIT, MAX_PAYMENT
from forgd_sale.curves.single.base import BondingCurve
from forgd_sale.curves.utils.linear_curve_helper import LinearCurveHelper as helper


class LinearBondingCurve(BondingCurve):
    """
        A linear bonding curve over integer base units.

        The marginal price of whole unit n past the current point is:
          price(n) = current_price + increase_rate * n

        Cost of k whole units:
          cost(k) = k * current_price + increase_rate * k * (k - 1) / 2

        All arithmetic is integer and floors; see LinearCurveHelper.
    """

    def __init__(self, state: SaleState, unit: int = UNIT, max_payment: int = MAX_PAYMENT):
        super().__init__(state, unit)
        self._max_payment = max_payment

    @property
    def increase_rate(self) -> int:
        return self._state.increase_rate

    def get_spot_price(self, tokens_sold: int) -> int:
        return helper.price_after(self.current_price, self.increase_rate, tokens_sold, self._unit)

    def calculate_tokens_for_payment(self, payment: int) -> int:
        return helper.tokens_for_payment(
            payment,
            self.current_price,
            self.increase_rate,
            unit=self._unit,
            max_payment=self._max_payment,
        )

    def calculate_purchase_cost(self, tokens: int) -> int:
        return helper.expense_for_tokens(tokens, self.current_price, self.increase_rate, unit=self._unit)

    def buy(self, tokens: int) -> int:
        """
        Advances the curve past 'tokens' base units and returns the new marginal price.
        The caller is responsible for having charged for them.
        """
        self._update_state_after_buy(tokens)
        return self.current_price
