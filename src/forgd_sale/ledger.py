import logging
from typing import Dict, Tuple

from forgd_sale.common.enums import SaleEvent
from forgd_sale.common.errors import (
    CallerNotPrivileged,
    CreatorWithdrawalFailed,
    OwnerWithdrawalFailed,
    WrongFeeRate,
)
from forgd_sale.common.model import BPS_DENOMINATOR
from forgd_sale.events import EventLog
from forgd_sale.token.interfaces import PaymentTransfer


log = logging.getLogger(__name__)


class BalanceLedger:
    """
    Accumulates sale proceeds: net amounts per creator, fees for the platform.

    Withdrawals zero the balance before paying out and put it back if the
    payout is refused, so a failed transfer never destroys funds.
    """

    def __init__(self, owner: str, events: EventLog, fee_bps: int = 0, max_fee_bps: int = BPS_DENOMINATOR):
        self._owner = owner
        self._events = events
        self._max_fee_bps = max_fee_bps
        self._creator_balances: Dict[str, int] = {}
        self._platform_balance = 0
        self._fee_bps = fee_bps

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def fee_bps(self) -> int:
        return self._fee_bps

    @property
    def platform_balance(self) -> int:
        return self._platform_balance

    def creator_balance(self, creator: str) -> int:
        return self._creator_balances.get(creator, 0)

    def require_owner(self, caller: str):
        if caller != self._owner:
            raise CallerNotPrivileged(f"{caller} is not the platform owner.")

    def fee_for(self, amount: int) -> int:
        return amount * self._fee_bps // BPS_DENOMINATOR

    def credit_sale(self, receiver: str, amount: int) -> Tuple[int, int]:
        """
        Splits 'amount' between 'receiver' and the platform at the current fee rate.

        :return: (creator_credit, platform_credit); they always sum to 'amount'.
        """
        fee = self.fee_for(amount)
        net = amount - fee
        self._creator_balances[receiver] = self.creator_balance(receiver) + net
        self._platform_balance += fee
        return net, fee

    def set_fee(self, caller: str, bps: int):
        self.require_owner(caller)
        if bps < 0 or bps > self._max_fee_bps:
            raise WrongFeeRate(f"Fee {bps} bps outside [0, {self._max_fee_bps}].")
        self._fee_bps = bps
        self._events.emit(SaleEvent.FEE_CHANGED, new_fee_bps=bps)

    def creator_withdraw(self, creator: str, rail: PaymentTransfer) -> int:
        amount = self.creator_balance(creator)
        self._creator_balances[creator] = 0
        if not rail.send(creator, amount):
            self._creator_balances[creator] = amount
            log.warning("Creator payout of %d to %s refused", amount, creator)
            raise CreatorWithdrawalFailed(f"Payout of {amount} to {creator} failed.")
        self._events.emit(SaleEvent.CREATOR_WITHDREW, creator=creator, amount=amount)
        return amount

    def owner_withdraw(self, caller: str, receiver: str, rail: PaymentTransfer) -> int:
        self.require_owner(caller)
        amount = self._platform_balance
        self._platform_balance = 0
        if not rail.send(receiver, amount):
            self._platform_balance = amount
            log.warning("Platform payout of %d to %s refused", amount, receiver)
            raise OwnerWithdrawalFailed(f"Payout of {amount} to {receiver} failed.")
        self._events.emit(SaleEvent.OWNER_WITHDREW, owner=receiver, amount=amount)
        return amount

    def snapshot(self):
        return dict(self._creator_balances), self._platform_balance, self._fee_bps

    def restore(self, snapshot):
        balances, platform, fee = snapshot
        self._creator_balances = dict(balances)
        self._platform_balance = platform
        self._fee_bps = fee
