from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from forgd_sale.common.math import within_relative_tolerance
from forgd_sale.common.model import DistributorConfig, SaleListing, SaleState
from forgd_sale.curves.single.linear import LinearBondingCurve


ROUND_TRIP_TOLERANCE = Decimal("0.0001")


class LinearSaleValidator:
    """
    Diagnostic validator for a proposed sale listing.
    Performs:
      1) Param checks (price bounds, supply, premint lists)
      2) Boundary tests (zero-size buys, minimum payment)
      3) Scenario tests (payment -> tokens -> cost round trips)

    Each step returns a dict with:
      {
        "errors": [str...],
        "warnings": [str...],
        "info": {...}
      }
    and 'run_all_validations' aggregates them into a single result.
    Nothing here mutates a live sale.
    """

    @staticmethod
    def validate_params(listing: 'SaleListing', config: 'DistributorConfig') -> Dict[str, Any]:
        """
        Checks that the listing's parameters are acceptable:
          - min_price <= price_init <= max_price
          - min_price <= price_increase <= max_price
          - max_supply > 0
          - premint lists have equal length and fit in max_supply
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        if not config.min_price <= listing.price_init <= config.max_price:
            errors.append(
                f"Listing: 'price_init' must be within [{config.min_price}, {config.max_price}]."
            )
        if not config.min_price <= listing.price_increase <= config.max_price:
            errors.append(
                f"Listing: 'price_increase' must be within [{config.min_price}, {config.max_price}]."
            )
        if listing.max_supply <= 0:
            errors.append("Listing: 'max_supply' must be > 0.")

        if len(listing.premint_addresses) != len(listing.premint_amounts):
            errors.append("Listing: premint addresses and amounts differ in length.")
        premint_total = sum(listing.premint_amounts)
        if premint_total > listing.max_supply:
            errors.append("Listing: premint total exceeds 'max_supply'.")
        elif listing.max_supply > 0 and premint_total == listing.max_supply:
            warnings.append("Listing: premint consumes the whole supply; nothing is left to sell.")

        info["param_summary"] = {
            "price_init": str(listing.price_init),
            "price_increase": str(listing.price_increase),
            "max_supply": str(listing.max_supply),
            "premint_total": str(premint_total),
            "for_sale": str(max(listing.max_supply - premint_total, 0)),
        }

        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def boundary_tests(curve: 'LinearBondingCurve') -> Dict[str, Any]:
        """
        Calls a few boundary conditions on the curve:
          - calculate_purchase_cost(0) should be 0
          - a payment equal to the current price buys at most one whole unit
          - get_spot_price(0) equals the current price

        Returns a dict of errors/warnings/info.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        try:
            cost_zero = curve.calculate_purchase_cost(0)
            if cost_zero != 0:
                errors.append(f"Cost to buy 0 tokens is not zero: got {cost_zero}")
        except Exception as e:
            errors.append(f"Exception calling calculate_purchase_cost(0): {e}")

        try:
            min_tokens = curve.calculate_tokens_for_payment(curve.current_price)
            if min_tokens > curve.unit:
                errors.append(f"Paying the current price buys more than one unit: {min_tokens}")
            info["tokens_at_current_price"] = str(min_tokens)
        except Exception as e:
            errors.append(f"Exception calling calculate_tokens_for_payment(current_price): {e}")

        try:
            if curve.get_spot_price(0) != curve.current_price:
                errors.append("Spot price after selling nothing differs from the current price.")
        except Exception as e:
            warnings.append(f"Exception calling get_spot_price(0): {e}")

        info["boundary_tests_run"] = True
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def scenario_tests(curve: 'LinearBondingCurve', payments: Sequence[int]) -> Dict[str, Any]:
        """
        For each payment, converts it to tokens and back to a cost. The cost must never
        exceed the payment; drifting further than ROUND_TRIP_TOLERANCE is reported as a warning.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}
        round_trips: Dict[str, str] = {}

        for payment in payments:
            if payment < curve.current_price:
                continue
            try:
                tokens = curve.calculate_tokens_for_payment(payment)
                expense = curve.calculate_purchase_cost(tokens)
            except Exception as e:
                errors.append(f"Exception in round trip for payment {payment}: {e}")
                continue
            round_trips[str(payment)] = str(expense)
            if expense > payment:
                errors.append(f"Payment {payment} overcharged: cost {expense}.")
            elif not within_relative_tolerance(expense, payment, ROUND_TRIP_TOLERANCE):
                warnings.append(f"Payment {payment} round trip drifted to {expense}.")

        info["round_trips"] = round_trips
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def run_all_validations(
        listing: 'SaleListing',
        config: Optional['DistributorConfig'] = None,
        payments: Optional[Sequence[int]] = None,
    ) -> Dict[str, Any]:
        """
        Aggregates:
          - param check
          - boundary tests
          - scenario tests (skipped when the params are invalid)
        Returns a dict with keys: errors, warnings, info
        """
        config = config or DistributorConfig()
        results = {
            "errors": [],
            "warnings": [],
            "info": {}
        }

        # 1) Param checks
        param_check = LinearSaleValidator.validate_params(listing, config)
        results["errors"].extend(param_check["errors"])
        results["warnings"].extend(param_check["warnings"])
        results["info"].update(param_check["info"])
        if param_check["errors"]:
            return results

        state = SaleState(
            receiver=listing.receiver,
            current_price=listing.price_init,
            increase_rate=listing.price_increase,
        )
        curve = LinearBondingCurve(state, unit=config.unit, max_payment=config.max_payment)

        # 2) Boundary tests
        boundary = LinearSaleValidator.boundary_tests(curve)
        results["errors"].extend(boundary["errors"])
        results["warnings"].extend(boundary["warnings"])
        results["info"].update(boundary["info"])

        # 3) Scenario tests
        if payments is None:
            payments = [listing.price_init * multiple for multiple in (10, 1000, 10**6)]
        scenario = LinearSaleValidator.scenario_tests(curve, payments)
        results["errors"].extend(scenario["errors"])
        results["warnings"].extend(scenario["warnings"])
        results["info"].update(scenario["info"])

        return results
