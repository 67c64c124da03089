"""
Input Validation - sanitization of everything that crosses the contract
boundary.

Validators return ``(is_valid, error_message)`` tuples so callers can
decide whether to raise, log, or report the failure.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Tuple

# =============================================================================
# Constants
# =============================================================================

MAX_ADDRESS_LENGTH = 128
MAX_TITLE_LENGTH = 1024

# Uint128 bounds
MIN_AMOUNT = 0
MAX_AMOUNT = 2**128 - 1

# Denominations follow the host ledger rules: a letter, then 2 to 127
# alphanumerics or '/', ':', '.', '_', '-'
DENOM_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9/:._-]{2,127}$")
ADDRESS_PATTERN = re.compile(r"^[a-zA-Z0-9_.:-]+$")


# =============================================================================
# Validation Functions
# =============================================================================


def validate_string(
    value: Any,
    name: str,
    max_length: int,
    allow_empty: bool = False,
) -> Tuple[bool, str]:
    """
    Validate a string input.

    Args:
        value: Value to validate
        name: Field name for error messages
        max_length: Maximum allowed length
        allow_empty: Whether the empty string is acceptable

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    if not allow_empty and not value:
        return False, f"{name} must not be empty"

    if len(value) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(value)}"

    return True, ""


def validate_address(address: Any) -> Tuple[bool, str]:
    """Validate an account or contract identity."""
    valid, err = validate_string(address, "address", MAX_ADDRESS_LENGTH)
    if not valid:
        return valid, err

    if not ADDRESS_PATTERN.match(address):
        return False, f"address contains invalid characters: {address!r}"

    return True, ""


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any) -> Tuple[bool, str]:
    """Validate a coin amount (Uint128)."""
    return validate_integer(amount, "amount", MIN_AMOUNT, MAX_AMOUNT)


def validate_denom(denom: Any) -> Tuple[bool, str]:
    """Validate a coin denomination."""
    valid, err = validate_string(denom, "denom", 128)
    if not valid:
        return valid, err

    if not DENOM_PATTERN.match(denom):
        return False, f"invalid denom: {denom!r}"

    return True, ""


def validate_commission(value: Any) -> Tuple[bool, str]:
    """Validate a commission rate: a decimal fraction in [0, 1]."""
    if isinstance(value, (bool, float)) or not isinstance(value, (Decimal, int, str)):
        return False, f"commission must be a decimal, got {type(value).__name__}"

    try:
        rate = Decimal(value)
    except InvalidOperation:
        return False, f"commission is not a decimal: {value!r}"

    if not rate.is_finite():
        return False, f"commission must be finite, got {value}"

    if rate < 0 or rate > 1:
        return False, f"commission must be within [0, 1], got {rate}"

    return True, ""


def validate_title(title: Any) -> Tuple[bool, str]:
    """Validate an auction item title."""
    return validate_string(title, "auction_item_title", MAX_TITLE_LENGTH, allow_empty=True)
