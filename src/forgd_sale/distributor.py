"""
forgd_sale.distributor
======================

Entry points of a bonding-curve token distributor.

A Distributor is the explicit context every operation runs against: it owns
the sale registry, the balance ledger, the event log, the purchase executor
and a single re-entrant lock that serializes every call, reads included. Each mutating
call is a unit of work; if it fails, every change it made is rolled back and
the DistributorError naming the cause propagates to the caller.

Typical usage
-------------
    distributor = Distributor(owner="platform", token_factory=factory, payment_rail=rail)
    sale_id = distributor.list_sale(SaleListing(receiver="creator", ...))
    result = distributor.purchase(sale_id, buyer="alice", payment=10**18)
    distributor.creator_withdraw("creator")
"""
import logging
import threading
from typing import List, Optional

from forgd_sale.common.enums import SaleEvent
from forgd_sale.common.model import (
    DistributorConfig,
    EventRecord,
    PendingPurchase,
    PurchaseResult,
    SaleListing,
    SaleState,
)
from forgd_sale.common.transaction import atomic
from forgd_sale.events import EventLog
from forgd_sale.executor import SaleExecutor
from forgd_sale.ledger import BalanceLedger
from forgd_sale.registry import SaleRegistry
from forgd_sale.token.interfaces import PaymentTransfer, TokenFactory


log = logging.getLogger(__name__)


class Distributor:

    def __init__(
        self,
        owner: str,
        token_factory: TokenFactory,
        payment_rail: PaymentTransfer,
        config: Optional[DistributorConfig] = None,
        account: str = "distributor",
    ):
        self.config = config or DistributorConfig()
        self.account = account
        self._factory = token_factory
        self._rail = payment_rail
        self._lock = threading.RLock()
        self._events = EventLog()
        self._registry = SaleRegistry(self.config.min_price, self.config.max_price)
        self._ledger = BalanceLedger(
            owner,
            self._events,
            fee_bps=self.config.fee_bps,
            max_fee_bps=self.config.max_fee_bps,
        )
        self._executor = SaleExecutor(
            self._registry, self._ledger, self._events, self._rail, self._factory, account, self.config
        )

    # ---- Mutating entry points ------------------------------------------------

    def list_sale(self, listing: SaleListing) -> str:
        """
        Creates the token through the factory and opens its sale.

        Price bounds are checked before the token is deployed, so a rejected
        listing leaves nothing behind.

        :raises PriceOutOfRange: price_init or price_increase outside the configured bounds.
        :raises InvalidListing: premint lists mismatched or exceeding max_supply.
        :return: str - sale identifier.
        """
        with self._lock, atomic([self._registry, self._events, self._factory], "list_sale"):
            self._registry.check_price_bounds(listing.price_init, listing.price_increase)
            token = self._factory.deploy(
                listing.name,
                listing.symbol,
                listing.max_supply,
                list(listing.premint_addresses),
                list(listing.premint_amounts),
                self.account,
            )
            sale_id = self._registry.list(token, listing.receiver, listing.price_init, listing.price_increase)
            self._events.emit(
                SaleEvent.SALE_LISTED,
                token_id=sale_id,
                receiver=listing.receiver,
                max_supply=listing.max_supply,
            )
        return sale_id

    def purchase(self, sale_id: str, buyer: str, payment: int) -> PurchaseResult:
        """
        Buys as many tokens as 'payment' covers on the sale's curve.

        :raises SaleNotAuthorized, PaymentTooLow, InsufficientRemainingSupply,
            RefundTransferFailed, TokenTransferFailed, Reentrant, ArithmeticBoundsExceeded
        """
        with self._lock:
            return self._executor.purchase(sale_id, buyer, payment)

    def creator_withdraw(self, creator: str) -> int:
        with self._lock, atomic([self._ledger, self._events, self._rail], "creator_withdraw"):
            return self._ledger.creator_withdraw(creator, self._rail)

    def owner_withdraw(self, caller: str, receiver: str) -> int:
        with self._lock, atomic([self._ledger, self._events, self._rail], "owner_withdraw"):
            return self._ledger.owner_withdraw(caller, receiver, self._rail)

    def set_fee(self, caller: str, bps: int):
        with self._lock, atomic([self._ledger, self._events], "set_fee"):
            self._ledger.set_fee(caller, bps)

    # ---- Read-only views ------------------------------------------------------

    # Views take the lock too, so they never observe a unit of work in flight.
    def quote(self, sale_id: str, payment: int, buyer: str = "") -> PendingPurchase:
        with self._lock:
            return self._executor.quote(sale_id, buyer, payment)

    def get_sale(self, sale_id: str) -> Optional[SaleState]:
        with self._lock:
            return self._registry.lookup(sale_id)

    def remaining_supply(self, sale_id: str) -> int:
        with self._lock:
            token = self._registry.token(sale_id)
            return token.balance_of(self.account) if token is not None else 0

    def sale_ids(self) -> List[str]:
        with self._lock:
            return list(self._registry)

    def creator_balance(self, creator: str) -> int:
        with self._lock:
            return self._ledger.creator_balance(creator)

    def platform_balance(self) -> int:
        with self._lock:
            return self._ledger.platform_balance

    @property
    def fee_bps(self) -> int:
        with self._lock:
            return self._ledger.fee_bps

    @property
    def owner(self) -> str:
        return self._ledger.owner

    def events(self, event: Optional[SaleEvent] = None) -> List[EventRecord]:
        with self._lock:
            return self._events.records(event)
