"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Pool supply, fee schedules and tolerances
- curve_checks: Conversion and value-conservation checks run against every curve
"""

from tests.helpers.constants import (
    CONVERSION_BASIS_POINTS_GUARANTEE,
    NO_FEES,
    POOL_SUPPLY,
    STANDARD_FEES,
)
from tests.helpers.curve_checks import (
    check_curve_value_from_swap,
    check_deposit_token_conversion,
    check_pool_value_from_deposit,
    check_pool_value_from_withdraw,
    check_withdraw_token_conversion,
)

__all__ = [
    # Constants
    "CONVERSION_BASIS_POINTS_GUARANTEE",
    "NO_FEES",
    "POOL_SUPPLY",
    "STANDARD_FEES",
    # Checks
    "check_curve_value_from_swap",
    "check_deposit_token_conversion",
    "check_pool_value_from_deposit",
    "check_pool_value_from_withdraw",
    "check_withdraw_token_conversion",
]
