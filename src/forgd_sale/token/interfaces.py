from typing import Any, List, Protocol, runtime_checkable


@runtime_checkable
class Transactional(Protocol):
    """Anything whose state can be captured and put back by a unit of work."""

    def snapshot(self) -> Any:
        ...

    def restore(self, snapshot: Any) -> None:
        ...


@runtime_checkable
class TokenLedger(Protocol):
    """
    The fungible asset being sold, as seen from the distributor.
    'transfer' always moves tokens out of the distributor's own holding.
    """
    token_id: str

    def balance_of(self, holder: str) -> int:
        ...

    def transfer(self, to: str, amount: int) -> bool:
        ...


@runtime_checkable
class TokenFactory(Protocol):
    """Creates a new asset and hands back its ledger; the ledger's token_id is unique."""

    def deploy(
        self,
        name: str,
        symbol: str,
        max_supply: int,
        premint_addresses: List[str],
        premint_amounts: List[int],
        holder: str,
    ) -> TokenLedger:
        ...


@runtime_checkable
class PaymentTransfer(Protocol):
    """Push-based value transfer; never assumed to succeed."""

    def send(self, to: str, value: int) -> bool:
        ...
