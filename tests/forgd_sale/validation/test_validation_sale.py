import pytest

from unittest.mock import patch

from forgd_sale.common.model import DistributorConfig, SaleListing, SaleState, UNIT
from forgd_sale.curves.single.linear import LinearBondingCurve
from forgd_sale.validation.sale_validator import LinearSaleValidator


@pytest.fixture
def valid_listing():
    """
    Returns a SaleListing priced inside the default bounds with a small premint.
    """
    return SaleListing(
        receiver="creator",
        name="Test Token",
        symbol="TST",
        max_supply=1000 * UNIT,
        price_init=10**15,
        price_increase=10**12,
        premint_addresses=["team"],
        premint_amounts=[100 * UNIT],
    )


@pytest.fixture
def config():
    return DistributorConfig()


@pytest.fixture
def linear_curve_fixture():
    """
    Returns a LinearBondingCurve at 1 ether rising by 5000 wei per unit.
    """
    return LinearBondingCurve(SaleState("creator", 10**18, 5000))


def test_validate_params_valid(valid_listing, config):
    result = LinearSaleValidator.validate_params(valid_listing, config)
    assert result["errors"] == []
    assert result["warnings"] == []
    summary = result["info"]["param_summary"]
    assert summary["premint_total"] == str(100 * UNIT)
    assert summary["for_sale"] == str(900 * UNIT)


@pytest.mark.parametrize(
    "overrides, fragment",
    [
        ({"price_init": 4999}, "'price_init' must be within"),
        ({"price_init": 100 * 10**18}, "'price_init' must be within"),
        ({"price_increase": 10**18 + 1}, "'price_increase' must be within"),
        ({"max_supply": 0}, "'max_supply' must be > 0"),
        ({"premint_amounts": [1, 2]}, "differ in length"),
        ({"premint_amounts": [1001 * UNIT]}, "premint total exceeds"),
    ],
)
def test_validate_params_errors(valid_listing, config, overrides, fragment):
    for key, value in overrides.items():
        setattr(valid_listing, key, value)
    result = LinearSaleValidator.validate_params(valid_listing, config)
    assert any(fragment in e for e in result["errors"]), result["errors"]


def test_validate_params_warns_when_nothing_left(valid_listing, config):
    valid_listing.premint_amounts = [1000 * UNIT]
    result = LinearSaleValidator.validate_params(valid_listing, config)
    assert result["errors"] == []
    assert any("nothing is left to sell" in w for w in result["warnings"])


def test_boundary_tests_pass(linear_curve_fixture):
    result = LinearSaleValidator.boundary_tests(linear_curve_fixture)
    assert result["errors"] == []
    assert result["info"]["boundary_tests_run"] is True
    assert result["info"]["tokens_at_current_price"] == str(UNIT)


def test_boundary_tests_report_exceptions(linear_curve_fixture):
    with patch.object(LinearBondingCurve, "calculate_purchase_cost", side_effect=RuntimeError("broken")):
        result = LinearSaleValidator.boundary_tests(linear_curve_fixture)
    assert any("calculate_purchase_cost(0)" in e for e in result["errors"])


def test_boundary_tests_flag_nonzero_cost(linear_curve_fixture):
    with patch.object(LinearBondingCurve, "calculate_purchase_cost", return_value=1):
        result = LinearSaleValidator.boundary_tests(linear_curve_fixture)
    assert any("not zero" in e for e in result["errors"])


def test_scenario_tests_round_trips(linear_curve_fixture):
    payments = [10**18, 10**21, 10**24]
    result = LinearSaleValidator.scenario_tests(linear_curve_fixture, payments)
    assert result["errors"] == []
    assert result["warnings"] == []
    assert set(result["info"]["round_trips"]) == {str(p) for p in payments}


def test_scenario_tests_skip_payments_below_price(linear_curve_fixture):
    result = LinearSaleValidator.scenario_tests(linear_curve_fixture, [1, 10**17])
    assert result["info"]["round_trips"] == {}


def test_scenario_tests_warn_on_drift():
    """
    With whole-token units, 1.5x the price still buys a single token.
    """
    curve = LinearBondingCurve(SaleState("creator", 10**18, 5000), unit=1)
    result = LinearSaleValidator.scenario_tests(curve, [15 * 10**17])
    assert result["errors"] == []
    assert len(result["warnings"]) == 1
    assert result["info"]["round_trips"][str(15 * 10**17)] == str(10**18)


def test_scenario_tests_flag_overcharge(linear_curve_fixture):
    with patch.object(LinearBondingCurve, "calculate_purchase_cost", return_value=10**30):
        result = LinearSaleValidator.scenario_tests(linear_curve_fixture, [10**18])
    assert any("overcharged" in e for e in result["errors"])


def test_run_all_validations(valid_listing):
    result = LinearSaleValidator.run_all_validations(valid_listing)
    assert result["errors"] == []
    assert "param_summary" in result["info"]
    assert result["info"]["boundary_tests_run"] is True
    assert len(result["info"]["round_trips"]) == 3


def test_run_all_validations_stops_after_param_errors(valid_listing):
    valid_listing.price_init = 1
    result = LinearSaleValidator.run_all_validations(valid_listing)
    assert result["errors"]
    assert "round_trips" not in result["info"]
