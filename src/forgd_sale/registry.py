import logging
from dataclasses import replace
from typing import Dict, Iterator, Optional, Tuple

from forgd_sale.common.errors import InvalidListing, PriceOutOfRange, SaleNotAuthorized
from forgd_sale.common.model import MAX_PRICE, MIN_PRICE, SaleState
from forgd_sale.token.interfaces import TokenLedger


log = logging.getLogger(__name__)


class SaleRegistry:
    """
    Append-only table of sales keyed by the identifier of the token being sold.

    Callers only ever receive copies of SaleState; the stored price moves
    exclusively through 'set_price', which refuses to lower it.
    """

    def __init__(self, min_price: int = MIN_PRICE, max_price: int = MAX_PRICE):
        self._min_price = min_price
        self._max_price = max_price
        self._sales: Dict[str, SaleState] = {}
        self._tokens: Dict[str, TokenLedger] = {}

    def check_price_bounds(self, price_init: int, price_increase: int):
        if not self._min_price <= price_init <= self._max_price:
            raise PriceOutOfRange(
                f"Initial price {price_init} outside [{self._min_price}, {self._max_price}]."
            )
        if not self._min_price <= price_increase <= self._max_price:
            raise PriceOutOfRange(
                f"Price increase {price_increase} outside [{self._min_price}, {self._max_price}]."
            )

    def list(self, token: TokenLedger, receiver: str, price_init: int, price_increase: int) -> str:
        """
        Opens a sale for 'token'; proceeds go to 'receiver'.

        :raises PriceOutOfRange: if either price is outside the configured bounds.
        :raises InvalidListing: if the token identifier is already listed.
        :return: str - the sale identifier (the token identifier).
        """
        self.check_price_bounds(price_init, price_increase)
        sale_id = token.token_id
        if sale_id in self._sales:
            raise InvalidListing(f"Sale {sale_id} is already listed.")

        self._sales[sale_id] = SaleState(
            receiver=receiver,
            current_price=price_init,
            increase_rate=price_increase,
        )
        self._tokens[sale_id] = token
        return sale_id

    def lookup(self, sale_id: str) -> Optional[SaleState]:
        """Returns a copy of the sale state, or None for unknown or zero-valued entries."""
        state = self._sales.get(sale_id)
        if state is None or not state.is_listed:
            return None
        return replace(state)

    def require(self, sale_id: str) -> Tuple[SaleState, TokenLedger]:
        state = self.lookup(sale_id)
        if state is None:
            raise SaleNotAuthorized(f"Sale {sale_id} is not listed.")
        return state, self._tokens[sale_id]

    def set_price(self, sale_id: str, new_price: int):
        state = self._sales[sale_id]
        if new_price < state.current_price:
            raise ValueError(
                f"Sale {sale_id} price cannot decrease ({state.current_price} -> {new_price})."
            )
        state.current_price = new_price

    def token(self, sale_id: str) -> Optional[TokenLedger]:
        return self._tokens.get(sale_id)

    def __contains__(self, sale_id: str) -> bool:
        return self.lookup(sale_id) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._sales))

    def __len__(self) -> int:
        return len(self._sales)

    def snapshot(self):
        return {k: replace(v) for k, v in self._sales.items()}, dict(self._tokens)

    def restore(self, snapshot):
        sales, tokens = snapshot
        self._sales = {k: replace(v) for k, v in sales.items()}
        self._tokens = dict(tokens)
