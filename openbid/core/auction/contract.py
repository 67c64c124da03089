"""
Auction contract - a single-item, open, ascending-price auction.

Lifecycle:
---------
    OPEN  --close_bidding (owner only)-->  CLOSED

- Bids are accepted only while OPEN and must strictly exceed the
  current highest cumulative bid.
- Retractions are accepted only once CLOSED, never from the leader,
  and at most once per participant (the entry is zeroed first).

Every entry point receives the storage handle of its contract and keeps
nothing between calls. The host runs each call in a transaction, so a
raised error leaves storage unchanged.
"""

from decimal import Decimal
from typing import Any, Optional

from openbid import __version__
from openbid.core.auction.msg import (
    AuctionStatusResponse,
    BidResponse,
    ExecuteMsg,
    InstantiateMsg,
    QueryMsg,
    parse_msg,
    to_binary,
)
from openbid.core.errors import (
    AuctionActive,
    AuctionInactive,
    BidTooLow,
    InvalidBidAmount,
    InvalidInput,
    NothingToWithdraw,
    Unauthorized,
)
from openbid.core.state.ledger import BidLedger
from openbid.core.state.slots import (
    ACTIVE,
    AUCTION_ITEM_TITLE,
    COMMISSION_PERCENTAGE,
    OWNER,
)
from openbid.core.state.version import set_contract_version
from openbid.core.storage.base import Storage
from openbid.core.types import BankSend, MessageInfo, Response, find_amount
from openbid.utils.logger import get_logger
from openbid.utils.validation import validate_address, validate_commission, validate_title

logger = get_logger("contract")


# =============================================================================
# Constants
# =============================================================================

CONTRACT_NAME = "openbid:auction"
CONTRACT_VERSION = __version__

# The only denomination honored for bids
BID_DENOM = "ubtc"

# Stored at instantiation, never applied
DEFAULT_COMMISSION = Decimal("0.05")


def _require(check) -> None:
    valid, error = check
    if not valid:
        raise InvalidInput(error)


def _ledger(storage: Storage) -> BidLedger:
    return BidLedger(storage, BID_DENOM)


# =============================================================================
# Instantiate
# =============================================================================


def instantiate(storage: Storage, info: MessageInfo, msg: Any) -> Response:
    """
    Create the auction.

    Writes the version info and AuctionConfig, opens the auction, and
    seeds the ledger with the creator's attached amount so that the
    highest-bid scan always has an entry.
    """
    msg = parse_msg(InstantiateMsg, msg)
    set_contract_version(storage, CONTRACT_NAME, CONTRACT_VERSION)

    owner = msg.owner if msg.owner is not None else info.sender
    _require(validate_address(owner))
    OWNER.save(storage, owner)

    commission = (
        msg.commission_percentage
        if msg.commission_percentage is not None
        else DEFAULT_COMMISSION
    )
    _require(validate_commission(commission))
    COMMISSION_PERCENTAGE.save(storage, commission)

    _require(validate_title(msg.auction_item_title))
    AUCTION_ITEM_TITLE.save(storage, msg.auction_item_title)
    ACTIVE.save(storage, True)

    seed = _ledger(storage).seed(info.sender, find_amount(info.funds, BID_DENOM))

    logger.info(
        f"Auction created: title={msg.auction_item_title!r}, owner={owner}, "
        f"commission={commission}, seed={seed}"
    )
    return (
        Response()
        .add_attribute("method", "instantiate")
        .add_attribute("sender", info.sender)
    )


# =============================================================================
# Execute
# =============================================================================


def execute(storage: Storage, info: MessageInfo, msg: Any) -> Response:
    """Route an execute message to its operation."""
    msg = parse_msg(ExecuteMsg, msg)

    if msg.bid is not None:
        return bid(storage, info)
    if msg.close_bidding is not None:
        return close(storage, info)
    return retract(storage, info, msg.retract_funds.withdraw_address)


def bid(storage: Storage, info: MessageInfo) -> Response:
    """
    Place a bid with the attached funds.

    Raises:
        AuctionInactive: auction is closed
        InvalidBidAmount: no positive amount of the bid denomination attached
        BidTooLow: new cumulative amount does not exceed the highest bid
        Overflow: new cumulative amount leaves the Uint128 range
    """
    if not ACTIVE.load(storage):
        raise AuctionInactive()

    incoming = find_amount(info.funds, BID_DENOM)
    if incoming <= 0:
        raise InvalidBidAmount()

    ledger = _ledger(storage)
    standing = ledger.standing(info.sender, incoming)

    if not standing.outbids_leader:
        raise BidTooLow(
            minimum_bid_amount=standing.leader_bid.amount,
            bid_denom=BID_DENOM,
            current_bid_amount=standing.previous_amount,
        )

    new_bid = ledger.record_bid(info.sender, incoming, standing)

    logger.info(f"Bid accepted: {info.sender} -> {new_bid} (was leader: {standing.leader})")
    return (
        Response()
        .add_attribute("action", "bid")
        .add_attribute("sender", info.sender)
        .add_attribute("bid_amount", new_bid)
    )


def close(storage: Storage, info: MessageInfo) -> Response:
    """
    Close bidding. One-way: a closed auction cannot be closed again.

    Raises:
        Unauthorized: caller is not the owner
        AuctionInactive: auction is already closed
    """
    owner = OWNER.load(storage)
    if info.sender != owner:
        raise Unauthorized(owner=owner)

    if not ACTIVE.load(storage):
        raise AuctionInactive()

    ACTIVE.save(storage, False)

    logger.info(f"Auction closed by {info.sender}")
    return (
        Response()
        .add_attribute("action", "close_bidding")
        .add_attribute("sender", info.sender)
    )


def retract(
    storage: Storage,
    info: MessageInfo,
    withdraw_address: Optional[str] = None,
) -> Response:
    """
    Return a non-winning participant's funds.

    The entry is zeroed before the transfer instruction is built, so the
    same amount can never be paid out twice.

    Raises:
        AuctionActive: auction is still open
        NothingToWithdraw: caller is the leader, never bid, or already retracted
    """
    if ACTIVE.load(storage):
        raise AuctionActive()

    ledger = _ledger(storage)
    leader, _ = ledger.highest_bid()
    if info.sender == leader:
        raise NothingToWithdraw()

    withdrawal = ledger.may_load(info.sender)
    if withdrawal is None or withdrawal.is_zero():
        raise NothingToWithdraw()

    to_address = withdraw_address if withdraw_address is not None else info.sender
    _require(validate_address(to_address))

    ledger.zero(info.sender)

    logger.info(f"Funds retracted: {info.sender} -> {withdrawal} to {to_address}")
    return (
        Response()
        .add_message(BankSend(to_address=to_address, amount=[withdrawal]))
        .add_attribute("action", "retract_funds")
        .add_attribute("sender", info.sender)
    )


# =============================================================================
# Query
# =============================================================================


def query(storage: Storage, msg: Any) -> bytes:
    """Route a query message and encode its response."""
    msg = parse_msg(QueryMsg, msg)

    if msg.get_auction_status is not None:
        return to_binary(query_status(storage))
    return to_binary(query_user_bid(storage, msg.get_user_bid.bidder))


def query_status(storage: Storage) -> AuctionStatusResponse:
    ledger = _ledger(storage)
    bidder, highest = ledger.highest_bid()

    return AuctionStatusResponse(
        owner=OWNER.load(storage),
        active=ACTIVE.load(storage),
        auction_item_title=AUCTION_ITEM_TITLE.load(storage),
        highest_bid=BidResponse(bidder=bidder, bid=highest),
        bidders_count=ledger.count(),
        commission_percentage=COMMISSION_PERCENTAGE.load(storage),
    )


def query_user_bid(storage: Storage, bidder: str) -> BidResponse:
    """A bidder's stored amount; zero for unknown or retracted identities."""
    logger.debug(f"Query user bid: {bidder}")
    return BidResponse(bidder=bidder, bid=_ledger(storage).bid_of(bidder))
