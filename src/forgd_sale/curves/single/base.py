from abc import ABC, abstractmethod

from forgd_sale.common.model import SaleState, UNIT


class BondingCurve(ABC):
    """Abstract base class defining the interface for a sale's bonding curve."""
    def __init__(self, state: 'SaleState', unit: int = UNIT):
        """
        Binds the curve to the state of one sale.

        :param state: SaleState - current price and increase rate of the sale
        :param unit: int - base units per whole token
        """
        self._state = state
        self._unit = unit

    @property
    def state(self) -> 'SaleState':
        """Returns the sale state the curve reads and updates."""
        return self._state

    @property
    def unit(self) -> int:
        """Returns the base units per whole token."""
        return self._unit

    @property
    def current_price(self) -> int:
        """Returns the current marginal price from the state."""
        return self._state.current_price

    @abstractmethod
    def get_spot_price(self, tokens_sold: int) -> int:
        """
        Returns the marginal price after 'tokens_sold' more base units are sold from the current point.

        :param tokens_sold: int - base units sold from the current point.
        :return: int: The marginal price at that point.
        """
        pass

    @abstractmethod
    def calculate_tokens_for_payment(self, payment: int) -> int:
        """
        Calculates how many base units 'payment' buys from the current point of the curve.

        :param payment: int - value offered.
        :return: Token quantity in base units.
        """
        pass

    @abstractmethod
    def calculate_purchase_cost(self, tokens: int) -> int:
        """
        Calculates how much it costs to buy 'tokens' base units from the current point of the curve.

        :param tokens: int - Number of base units to buy.
        :return: Total cost.
        """
        pass

    def _update_state_after_buy(self, tokens: int):
        """
        Moves the curve's current price past 'tokens' sold base units.

        :param tokens: int - Number of base units sold.
        """
        self._state.current_price = self.get_spot_price(tokens)
