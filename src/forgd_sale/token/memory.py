"""
In-memory collaborators: a capped fungible token, a factory for it, and a
payment rail. They are snapshot-able, so a distributor operation that aborts
also undoes whatever it already pushed through them.
"""
import hashlib
import logging
from typing import Dict, List, Optional, Set

from forgd_sale.common.errors import InvalidListing


log = logging.getLogger(__name__)


class InMemoryToken:
    """A fixed-supply fungible token whose unsold supply sits with 'holder'."""

    def __init__(self, token_id: str, name: str, symbol: str, max_supply: int, holder: str):
        self.token_id = token_id
        self.name = name
        self.symbol = symbol
        self.max_supply = max_supply
        self.holder = holder
        self.balances: Dict[str, int] = {}

    @property
    def total_supply(self) -> int:
        return sum(self.balances.values())

    def mint(self, to: str, amount: int):
        if amount < 0:
            raise ValueError("Cannot mint a negative amount.")
        if self.total_supply + amount > self.max_supply:
            raise InvalidListing(f"Minting {amount} would exceed max supply {self.max_supply}.")
        self.balances[to] = self.balances.get(to, 0) + amount

    def balance_of(self, holder: str) -> int:
        return self.balances.get(holder, 0)

    def transfer(self, to: str, amount: int) -> bool:
        if amount < 0 or self.balance_of(self.holder) < amount:
            return False
        self.balances[self.holder] -= amount
        self.balances[to] = self.balances.get(to, 0) + amount
        return True

    def snapshot(self) -> Dict[str, int]:
        return dict(self.balances)

    def restore(self, snapshot: Dict[str, int]) -> None:
        self.balances = dict(snapshot)


class InMemoryTokenFactory:
    """Deploys InMemoryToken instances with unique, address-like identifiers."""
    token_class = InMemoryToken

    def __init__(self):
        self._nonce = 0
        self.tokens: Dict[str, InMemoryToken] = {}

    def _next_token_id(self, name: str, symbol: str) -> str:
        self._nonce += 1
        digest = hashlib.sha256(f"{name}:{symbol}:{self._nonce}".encode()).hexdigest()
        return "0x" + digest[:40]

    def deploy(
        self,
        name: str,
        symbol: str,
        max_supply: int,
        premint_addresses: List[str],
        premint_amounts: List[int],
        holder: str,
    ) -> InMemoryToken:
        """
        Creates the token, mints the premints, then mints the rest of max_supply to 'holder'.

        :raises InvalidListing: on mismatched premint lists or premints above max_supply.
        """
        if len(premint_addresses) != len(premint_amounts):
            raise InvalidListing("Premint addresses and amounts must have the same length.")
        if max_supply <= 0:
            raise InvalidListing("Max supply must be positive.")
        if any(amount < 0 for amount in premint_amounts):
            raise InvalidListing("Premint amounts cannot be negative.")
        premint_total = sum(premint_amounts)
        if premint_total > max_supply:
            raise InvalidListing("Premint total exceeds max supply.")

        token = self.token_class(self._next_token_id(name, symbol), name, symbol, max_supply, holder)
        for address, amount in zip(premint_addresses, premint_amounts):
            token.mint(address, amount)
        token.mint(holder, max_supply - premint_total)
        self.tokens[token.token_id] = token
        log.debug("Deployed token %s (%s) max_supply=%d", token.token_id, symbol, max_supply)
        return token

    def snapshot(self):
        return self._nonce, dict(self.tokens)

    def restore(self, snapshot) -> None:
        self._nonce, tokens = snapshot
        self.tokens = dict(tokens)


class InMemoryPaymentRail:
    """Records value pushed to accounts. Accounts in 'rejecting' refuse every payment."""

    def __init__(self, rejecting: Optional[Set[str]] = None):
        self.received: Dict[str, int] = {}
        self.rejecting: Set[str] = set(rejecting or ())

    def send(self, to: str, value: int) -> bool:
        if value < 0 or to in self.rejecting:
            log.debug("Payment of %d to %s refused", value, to)
            return False
        self.received[to] = self.received.get(to, 0) + value
        return True

    def balance_of(self, account: str) -> int:
        return self.received.get(account, 0)

    def snapshot(self) -> Dict[str, int]:
        return dict(self.received)

    def restore(self, snapshot: Dict[str, int]) -> None:
        self.received = dict(snapshot)
