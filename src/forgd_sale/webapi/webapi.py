import logging
from dataclasses import asdict
from typing import List, Optional

from pydantic import BaseModel, Field

from flask import jsonify
from flask_openapi3 import Info, Tag
from flask_openapi3 import OpenAPI

from forgd_sale.common.enums import SaleEvent
from forgd_sale.common.errors import DistributorError
from forgd_sale.common.math import to_units
from forgd_sale.common.model import DistributorConfig, SaleListing
from forgd_sale.distributor import Distributor
from forgd_sale.token.memory import InMemoryPaymentRail, InMemoryTokenFactory
from forgd_sale.validation.sale_validator import LinearSaleValidator


log = logging.getLogger(__name__)

info = Info(title="Bonding Curve Sale API", version="1.0.0")


class ListSaleRequest(BaseModel):
    receiver: str = Field(description="Account credited with the sale proceeds")
    name: str = Field(description="Token name")
    symbol: str = Field(description="Token symbol")
    max_supply: int = Field(gt=0, description="Maximum token supply in base units")
    premint_addresses: List[str] = Field(default_factory=list, description="Accounts receiving a premint")
    premint_amounts: List[int] = Field(default_factory=list, description="Premint amounts, same order")
    price_init: int = Field(description="Initial price of one whole token")
    price_increase: int = Field(description="Price increase per whole token sold")

    def to_listing(self) -> SaleListing:
        return SaleListing(
            receiver=self.receiver,
            name=self.name,
            symbol=self.symbol,
            max_supply=self.max_supply,
            price_init=self.price_init,
            price_increase=self.price_increase,
            premint_addresses=list(self.premint_addresses),
            premint_amounts=list(self.premint_amounts),
        )


class PurchaseRequest(BaseModel):
    sale_id: str = Field(description="Sale identifier")
    buyer: str = Field(description="Buying account")
    payment: int = Field(ge=0, description="Value sent with the purchase")


class SaleQuery(BaseModel):
    sale_id: str = Field(description="Sale identifier")


class QuoteQuery(BaseModel):
    sale_id: str = Field(description="Sale identifier")
    payment: int = Field(ge=0, description="Value that would be sent")


class CreatorWithdrawRequest(BaseModel):
    creator: str = Field(description="Creator account to pay out")


class OwnerWithdrawRequest(BaseModel):
    caller: str = Field(description="Calling account, must be the platform owner")
    receiver: str = Field(description="Destination of the platform fees")


class SetFeeRequest(BaseModel):
    caller: str = Field(description="Calling account, must be the platform owner")
    fee_bps: int = Field(description="New fee in basis points")


class EventsQuery(BaseModel):
    event: Optional[str] = Field(None, description="Only return records of this kind")


sale_tag = Tag(name="Sale", description="List sales, buy from them and inspect their curve")
balance_tag = Tag(name="Balance", description="Withdraw accumulated proceeds and fees")
admin_tag = Tag(name="Admin", description="Platform owner operations")


def create_app(distributor: Distributor, config: Optional[DistributorConfig] = None) -> OpenAPI:
    """Builds the HTTP surface over an existing Distributor."""
    config = config or distributor.config
    app = OpenAPI(__name__, info=info)

    @app.errorhandler(DistributorError)
    def handle_distributor_error(err: DistributorError):
        log.info("Rejected request: %s", err.kind)
        return jsonify(err.to_dict()), 400

    @app.post("/sale/list", summary="List Sale", tags=[sale_tag])
    def list_sale(body: ListSaleRequest):
        """
        Creates the token and opens its sale on the bonding curve
        """
        sale_id = distributor.list_sale(body.to_listing())
        return jsonify({"sale_id": sale_id})

    @app.post("/sale/purchase", summary="Purchase", tags=[sale_tag])
    def purchase(body: PurchaseRequest):
        """
        Buys as many tokens as the payment covers, refunding what cannot be filled
        """
        result = distributor.purchase(body.sale_id, body.buyer, body.payment)
        payload = asdict(result)
        payload["outcome"] = str(result.outcome)
        payload["timestamp"] = result.timestamp.isoformat()
        return jsonify(payload)

    @app.get("/sale/status", summary="Sale Status", tags=[sale_tag])
    def status(query: SaleQuery):
        """
        Current price, increase rate and remaining supply of a sale
        """
        state = distributor.get_sale(query.sale_id)
        if state is None:
            return jsonify({"error": "SaleNotAuthorized", "message": query.sale_id}), 404
        remaining = distributor.remaining_supply(query.sale_id)
        return jsonify({
            "sale_id": query.sale_id,
            "receiver": state.receiver,
            "current_price": state.current_price,
            "increase_rate": state.increase_rate,
            "remaining_supply": remaining,
            "remaining_units": str(to_units(remaining, config.unit)),
            "fee_bps": distributor.fee_bps,
        })

    @app.get("/sale/quote", summary="Quote", tags=[sale_tag])
    def quote(query: QuoteQuery):
        """
        Resolves a purchase without executing it
        """
        pending = distributor.quote(query.sale_id, query.payment)
        payload = asdict(pending)
        payload["outcome"] = str(pending.outcome)
        return jsonify(payload)

    @app.post("/sale/validate", summary="Validate Listing", tags=[sale_tag])
    def validate(body: ListSaleRequest):
        """
        Runs parameter, boundary and round-trip checks on a proposed listing
        """
        return jsonify(LinearSaleValidator.run_all_validations(body.to_listing(), config))

    @app.post("/balance/creator/withdraw", summary="Creator Withdraw", tags=[balance_tag])
    def creator_withdraw(body: CreatorWithdrawRequest):
        amount = distributor.creator_withdraw(body.creator)
        return jsonify({"creator": body.creator, "amount": amount})

    @app.post("/balance/owner/withdraw", summary="Owner Withdraw", tags=[balance_tag, admin_tag])
    def owner_withdraw(body: OwnerWithdrawRequest):
        amount = distributor.owner_withdraw(body.caller, body.receiver)
        return jsonify({"owner": body.receiver, "amount": amount})

    @app.post("/fee", summary="Set Fee", tags=[admin_tag])
    def set_fee(body: SetFeeRequest):
        distributor.set_fee(body.caller, body.fee_bps)
        return jsonify({"fee_bps": distributor.fee_bps})

    @app.get("/events", summary="Events", tags=[sale_tag])
    def events(query: EventsQuery):
        """
        Append-only observability records, oldest first
        """
        try:
            kind = SaleEvent.from_str(query.event) if query.event else None
        except NotImplementedError as e:
            return jsonify({"error": "UnknownEvent", "message": str(e)}), 400
        return jsonify([
            {
                "event": str(record.event),
                "sequence": record.sequence,
                "fields": record.fields,
                "timestamp": record.timestamp.isoformat(),
            }
            for record in distributor.events(kind)
        ])

    return app


def build_demo_app(owner: str = "platform") -> OpenAPI:
    """An app backed by in-memory token and payment collaborators."""
    distributor = Distributor(
        owner=owner,
        token_factory=InMemoryTokenFactory(),
        payment_rail=InMemoryPaymentRail(),
    )
    return create_app(distributor)


def main():
    logging.basicConfig(level=logging.INFO)
    build_demo_app().run(debug=True)


if __name__ == "__main__":
    main()
