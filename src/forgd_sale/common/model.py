from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from forgd_sale.common.enums import PurchaseOutcome, SaleEvent


UNIT = 10**18
MIN_PRICE = 5000
MAX_PRICE = 10**18
MAX_PAYMENT = 10**50
BPS_DENOMINATOR = 10000


@dataclass
class SaleState:
    """Runtime pricing state of one listed sale. Both fields zero means 'not listed'."""
    receiver: Optional[str] = None
    current_price: int = 0
    increase_rate: int = 0

    @property
    def is_listed(self) -> bool:
        return self.current_price > 0 and self.increase_rate > 0


@dataclass
class SaleListing:
    """Everything needed to create the asset and open its sale."""
    receiver: str
    name: str
    symbol: str
    max_supply: int
    price_init: int
    price_increase: int
    premint_addresses: List[str] = field(default_factory=list)
    premint_amounts: List[int] = field(default_factory=list)


@dataclass
class PendingPurchase:
    """Resolved quantities of one purchase; lives only for the duration of that purchase."""
    sale_id: str
    buyer: str
    payment: int
    tokens: int = 0
    expense: int = 0
    refund: int = 0
    price_before: int = 0
    price_after: int = 0

    @property
    def outcome(self) -> PurchaseOutcome:
        return PurchaseOutcome.PARTIALLY_FILLED if self.refund > 0 else PurchaseOutcome.FILLED


@dataclass
class PurchaseResult:
    """Outcome of a committed purchase."""
    sale_id: str
    buyer: str
    tokens_transferred: int
    refund: int
    effective_payment: int
    creator_credit: int
    platform_credit: int
    new_price: int
    outcome: PurchaseOutcome
    timestamp: datetime


@dataclass
class EventRecord:
    """One append-only observability record."""
    event: SaleEvent
    fields: Dict[str, Any]
    sequence: int
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class DistributorConfig:
    """Numeric bounds and defaults for a Distributor instance."""
    unit: int = UNIT
    min_price: int = MIN_PRICE
    max_price: int = MAX_PRICE
    max_payment: int = MAX_PAYMENT
    fee_bps: int = 0
    max_fee_bps: int = BPS_DENOMINATOR

    def __post_init__(self):
        if self.unit <= 0:
            raise ValueError("Unit must be positive.")
        if self.min_price <= 0:
            raise ValueError("Minimum price must be positive.")
        if self.min_price > self.max_price:
            raise ValueError("Minimum price must not exceed maximum price.")
        if self.max_payment <= 0:
            raise ValueError("Maximum payment must be positive.")
        if self.max_fee_bps > BPS_DENOMINATOR:
            raise ValueError(f"Maximum fee cannot exceed {BPS_DENOMINATOR} basis points.")
        if not 0 <= self.fee_bps <= self.max_fee_bps:
            raise ValueError("Initial fee must be between 0 and max_fee_bps.")
