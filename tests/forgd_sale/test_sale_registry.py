import pytest

from forgd_sale.common.errors import InvalidListing, PriceOutOfRange, SaleNotAuthorized
from forgd_sale.common.model import SaleState, UNIT
from forgd_sale.registry import SaleRegistry
from forgd_sale.token.memory import InMemoryToken


def _make_token(token_id="0xabc") -> InMemoryToken:
    token = InMemoryToken(token_id, "Test", "TST", 100 * UNIT, "distributor")
    token.mint("distributor", 100 * UNIT)
    return token


@pytest.fixture
def registry():
    return SaleRegistry()


def test_list_returns_token_identifier(registry):
    sale_id = registry.list(_make_token("0x01"), "creator", 10**15, 10**12)
    assert sale_id == "0x01"
    assert "0x01" in registry
    assert len(registry) == 1


def test_lookup_returns_copy(registry):
    registry.list(_make_token(), "creator", 10**15, 10**12)
    state = registry.lookup("0xabc")
    assert state == SaleState("creator", 10**15, 10**12)

    state.current_price = 1
    assert registry.lookup("0xabc").current_price == 10**15


def test_lookup_unknown_is_none(registry):
    assert registry.lookup("0xmissing") is None
    assert "0xmissing" not in registry


def test_require_unknown_raises(registry):
    with pytest.raises(SaleNotAuthorized):
        registry.require("0xmissing")


def test_require_returns_state_and_token(registry):
    token = _make_token()
    registry.list(token, "creator", 10**15, 10**12)
    state, found = registry.require("0xabc")
    assert state.receiver == "creator"
    assert found is token


@pytest.mark.parametrize(
    "price_init, price_increase",
    [
        (4999, 5000),
        (5000, 4999),
        (10**18 + 1, 5000),
        (5000, 10**18 + 1),
        (100 * 10**18, 10**12),
        (0, 0),
    ],
)
def test_list_rejects_out_of_range_prices(registry, price_init, price_increase):
    with pytest.raises(PriceOutOfRange):
        registry.list(_make_token(), "creator", price_init, price_increase)
    assert len(registry) == 0


@pytest.mark.parametrize("price", [5000, 10**18])
def test_list_accepts_bounds_inclusive(registry, price):
    registry.list(_make_token(), "creator", price, price)
    assert registry.lookup("0xabc").current_price == price


def test_custom_bounds():
    registry = SaleRegistry(min_price=10, max_price=20)
    registry.list(_make_token(), "creator", 10, 20)
    with pytest.raises(PriceOutOfRange):
        registry.check_price_bounds(21, 10)


def test_duplicate_identifier_rejected(registry):
    registry.list(_make_token(), "creator", 10**15, 10**12)
    with pytest.raises(InvalidListing):
        registry.list(_make_token(), "other", 10**15, 10**12)
    assert registry.lookup("0xabc").receiver == "creator"


def test_set_price_only_increases(registry):
    registry.list(_make_token(), "creator", 10**15, 10**12)
    registry.set_price("0xabc", 10**15 + 1)
    assert registry.lookup("0xabc").current_price == 10**15 + 1
    with pytest.raises(ValueError):
        registry.set_price("0xabc", 10**15)


def test_snapshot_restore(registry):
    registry.list(_make_token("0x01"), "creator", 10**15, 10**12)
    snap = registry.snapshot()
    registry.set_price("0x01", 2 * 10**15)
    registry.list(_make_token("0x02"), "creator", 10**15, 10**12)

    registry.restore(snap)
    assert registry.lookup("0x01").current_price == 10**15
    assert registry.lookup("0x02") is None
    assert registry.token("0x02") is None
    assert list(registry) == ["0x01"]
