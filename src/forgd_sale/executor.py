import logging
from datetime import datetime
from typing import Tuple

from forgd_sale.common.enums import SaleEvent
from forgd_sale.common.errors import (
    InsufficientRemainingSupply,
    PaymentTooLow,
    RefundTransferFailed,
    TokenTransferFailed,
)
from forgd_sale.common.model import DistributorConfig, PendingPurchase, PurchaseResult, SaleState
from forgd_sale.common.transaction import atomic
from forgd_sale.curves.single.linear import LinearBondingCurve
from forgd_sale.events import EventLog
from forgd_sale.guard import ReentrancyGuard, non_reentrant
from forgd_sale.ledger import BalanceLedger
from forgd_sale.registry import SaleRegistry
from forgd_sale.token.interfaces import PaymentTransfer, TokenFactory, TokenLedger


log = logging.getLogger(__name__)


class SaleExecutor:
    """
    Runs a purchase against one listed sale:

      1) resolve the sale, reject unknown sales and payments below the current price
      2) read remaining supply from the token ledger, reject if empty
      3) convert payment to a token quantity on the curve
      4) clamp to remaining supply, refunding the unspent payment
      5) persist the price bump, then transfer tokens
      6) split proceeds between receiver and platform

    The whole run is guarded against reentrancy and executes as one unit of
    work: any failure restores the registry, ledger, event log, token factory
    and every transactional collaborator touched so far, including sales
    listed by a re-entering recipient.
    """

    def __init__(
        self,
        registry: SaleRegistry,
        ledger: BalanceLedger,
        events: EventLog,
        rail: PaymentTransfer,
        factory: TokenFactory,
        holder: str,
        config: DistributorConfig,
    ):
        self._registry = registry
        self._ledger = ledger
        self._events = events
        self._rail = rail
        self._factory = factory
        self._holder = holder
        self._config = config
        self._guard = ReentrancyGuard("purchase")

    @property
    def guard(self) -> ReentrancyGuard:
        return self._guard

    def _curve(self, state: SaleState) -> LinearBondingCurve:
        return LinearBondingCurve(state, unit=self._config.unit, max_payment=self._config.max_payment)

    def _resolve(self, sale_id: str, buyer: str, payment: int) -> Tuple[PendingPurchase, SaleState, TokenLedger]:
        state, token = self._registry.require(sale_id)
        if payment < state.current_price:
            raise PaymentTooLow(f"Payment {payment} below current price {state.current_price}.")

        available = token.balance_of(self._holder)
        if available <= 0:
            raise InsufficientRemainingSupply(f"Sale {sale_id} has no supply left.")

        curve = self._curve(state)
        wanted = curve.calculate_tokens_for_payment(payment)
        pending = PendingPurchase(
            sale_id=sale_id,
            buyer=buyer,
            payment=payment,
            price_before=state.current_price,
        )
        if wanted > available:
            pending.tokens = available
            pending.expense = curve.calculate_purchase_cost(available)
            pending.refund = payment - pending.expense
        else:
            pending.tokens = wanted
            pending.expense = payment
        pending.price_after = curve.get_spot_price(pending.tokens)
        log.debug("Resolved %s", pending)
        return pending, state, token

    def quote(self, sale_id: str, buyer: str, payment: int) -> PendingPurchase:
        """Resolves a purchase without moving anything."""
        pending, _, _ = self._resolve(sale_id, buyer, payment)
        return pending

    @non_reentrant
    def purchase(self, sale_id: str, buyer: str, payment: int) -> PurchaseResult:
        _, token = self._registry.require(sale_id)
        participants = [self._registry, self._ledger, self._events, self._rail, self._factory, token]
        with atomic(participants, f"purchase on {sale_id}"):
            pending, state, token = self._resolve(sale_id, buyer, payment)

            if pending.refund > 0 and not self._rail.send(buyer, pending.refund):
                raise RefundTransferFailed(f"Refund of {pending.refund} to {buyer} failed.")

            # Price is persisted before the token transfer so a re-entering
            # recipient already sees the new price.
            new_price = self._curve(state).buy(pending.tokens)
            self._registry.set_price(sale_id, new_price)

            if not token.transfer(buyer, pending.tokens):
                raise TokenTransferFailed(f"Transfer of {pending.tokens} tokens to {buyer} failed.")

            creator_credit, platform_credit = self._ledger.credit_sale(state.receiver, pending.expense)

            self._events.emit(
                SaleEvent.SALE_COMPLETED,
                buyer=buyer,
                token_id=sale_id,
                tokens_transferred=pending.tokens,
            )
            if pending.refund > 0:
                self._events.emit(SaleEvent.REFUND_ISSUED, buyer=buyer, amount=pending.refund)

        return PurchaseResult(
            sale_id=sale_id,
            buyer=buyer,
            tokens_transferred=pending.tokens,
            refund=pending.refund,
            effective_payment=pending.expense,
            creator_credit=creator_credit,
            platform_credit=platform_credit,
            new_price=new_price,
            outcome=pending.outcome,
            timestamp=datetime.now(),
        )
