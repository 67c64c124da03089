"""
Error taxonomy for the auction contract and its host.

Every error is a terminal rejection of a single invocation: the host
discards the invocation's writes and re-raises the error unchanged.
"""


class ContractError(Exception):
    """Base class for all errors surfaced at the contract boundary."""

    message = "Contract error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


# =============================================================================
# Infrastructure errors
# =============================================================================


class StdError(ContractError):
    """Storage, serialization, or validation failure."""

    message = "Generic error"


class NotFound(StdError):
    """A required storage slot is absent."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"{kind} not found")


class ParseError(StdError):
    """A stored value or inbound message could not be decoded."""

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"Error parsing into type {target}: {reason}")


class InvalidInput(StdError):
    """An input failed validation."""


class Overflow(StdError):
    """An addition left the Uint128 range."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(f"Cannot Add with {left} and {right}")


class InsufficientFunds(StdError):
    """An account cannot cover a transfer."""

    def __init__(self, address: str, denom: str, available: int, required: int):
        self.address = address
        self.denom = denom
        self.available = available
        self.required = required
        super().__init__(
            f"Cannot Sub with {available} and {required}: "
            f"insufficient {denom} funds on {address}"
        )


# =============================================================================
# Auction errors
# =============================================================================


class Unauthorized(ContractError):
    def __init__(self, owner: str):
        self.owner = owner
        super().__init__(f"Unauthorized. Action only permitted for {owner}")


class AuctionInactive(ContractError):
    message = "Auction is not active"


class AuctionActive(ContractError):
    message = "Cannot perform action while auction is active"


class InvalidBidAmount(ContractError):
    message = "Invalid bid amount"


class BidTooLow(ContractError):
    """Carries what a client needs to display a better bid."""

    def __init__(self, minimum_bid_amount: int, bid_denom: str, current_bid_amount: int):
        self.minimum_bid_amount = minimum_bid_amount
        self.bid_denom = bid_denom
        self.current_bid_amount = current_bid_amount
        super().__init__(
            f"Bid too low. Minimum bid is {minimum_bid_amount} {bid_denom}. "
            f"Your current bid is {current_bid_amount}"
        )


class NothingToWithdraw(ContractError):
    message = "Nothing to withdraw"
