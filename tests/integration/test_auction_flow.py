"""
End-to-end auction flows through the App host.

Each scenario checks contract state and the bank balances the host
moves alongside it: the contract holds every attached amount until a
retraction returns it, and a rejected call moves nothing.
"""

import logging
from decimal import Decimal

import pytest

from openbid.core.auction import BID_DENOM, AuctionStatusResponse, BidResponse, InstantiateMsg
from openbid.core.errors import (
    AuctionActive,
    AuctionInactive,
    BidTooLow,
    InsufficientFunds,
    InvalidInput,
    NotFound,
    NothingToWithdraw,
    Overflow,
    Unauthorized,
)
from openbid.core.types import coin, coins
from openbid.host import App, AuctionContract
from openbid.utils.validation import MAX_AMOUNT


def ubtc(amount):
    return coins(amount, BID_DENOM)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def app():
    app = App()
    app.init_balance("sender", ubtc(100_000))
    app.init_balance("bidder", ubtc(150_000))
    app.init_balance("bidder_two", ubtc(200_000))
    return app


@pytest.fixture
def contract(app):
    return AuctionContract.instantiate(
        app,
        "sender",
        InstantiateMsg(auction_item_title="Test Auction"),
        ubtc(100_000),
        "Test auction contract",
    )


# =============================================================================
# Instantiation
# =============================================================================


def test_instantiate_with_defaults(app, contract):
    assert contract.query_auction_status(app) == AuctionStatusResponse(
        owner="sender",
        active=True,
        auction_item_title="Test Auction",
        highest_bid=BidResponse(bidder="sender", bid=coin(100_000, BID_DENOM)),
        bidders_count=1,
        commission_percentage=Decimal("0.05"),
    )

    assert app.query_all_balances(contract.address) == ubtc(100_000)
    assert app.query_all_balances("sender") == []


def test_instantiate_without_defaults(app):
    contract = AuctionContract.instantiate(
        app,
        "sender",
        InstantiateMsg(
            owner="auction_owner",
            auction_item_title="Test Auction 2",
            commission_percentage=Decimal("0.01"),
        ),
        ubtc(100_000),
        "Test auction contract",
    )

    assert contract.query_auction_status(app) == AuctionStatusResponse(
        owner="auction_owner",
        active=True,
        auction_item_title="Test Auction 2",
        highest_bid=BidResponse(bidder="sender", bid=coin(100_000, BID_DENOM)),
        bidders_count=1,
        commission_percentage=Decimal("0.01"),
    )
    assert app.query_all_balances(contract.address) == ubtc(100_000)


def test_failed_instantiation_commits_nothing(app):
    """A rejected instantiation keeps funds and does not consume an address."""
    with pytest.raises(InvalidInput):
        AuctionContract.instantiate(
            app,
            "sender",
            InstantiateMsg(auction_item_title="Bad", commission_percentage=Decimal("2")),
            ubtc(100_000),
        )

    assert app.query_all_balances("sender") == ubtc(100_000)
    assert app.contracts() == []

    contract = AuctionContract.instantiate(app, "sender", InstantiateMsg(auction_item_title="Good"))
    assert contract.address == "contract0"


def test_contract_metadata(app, contract):
    info = app.contract_info(contract.address)

    assert info.label == "Test auction contract"
    assert info.creator == "sender"
    assert contract.query_version(app).contract == "openbid:auction"
    assert app.contracts() == [contract.address]


def test_unknown_contract(app):
    with pytest.raises(NotFound):
        AuctionContract("contract42").query_auction_status(app)


# =============================================================================
# Bidding
# =============================================================================


def test_query_bids(app, contract):
    contract.bid(app, "bidder", ubtc(150_000))

    assert app.query_all_balances(contract.address) == ubtc(250_000)
    assert app.query_all_balances("sender") == []
    assert app.query_all_balances("bidder") == []

    assert contract.query_user_bid(app, "sender") == BidResponse(
        bidder="sender", bid=coin(100_000, BID_DENOM)
    )
    assert contract.query_user_bid(app, "bidder") == BidResponse(
        bidder="bidder", bid=coin(150_000, BID_DENOM)
    )
    assert contract.query_user_bid(app, "non_bidder") == BidResponse(
        bidder="non_bidder", bid=coin(0, BID_DENOM)
    )

    status = contract.query_auction_status(app)
    assert status.highest_bid == BidResponse(bidder="bidder", bid=coin(150_000, BID_DENOM))
    assert status.bidders_count == 2


def test_bids_must_beat_current_bid(app, contract):
    """An equal bid is rejected and its funds stay with the bidder."""
    with pytest.raises(BidTooLow):
        contract.bid(app, "bidder", ubtc(100_000))

    status = contract.query_auction_status(app)
    assert status.bidders_count == 1
    assert status.highest_bid.bidder == "sender"

    assert app.query_all_balances(contract.address) == ubtc(100_000)
    assert app.query_all_balances("bidder") == ubtc(150_000)


def test_bid_without_funds_available(app, contract):
    with pytest.raises(InsufficientFunds):
        contract.bid(app, "bidder", ubtc(1_000_000))

    assert contract.query_user_bid(app, "bidder").bid.amount == 0


def test_bid_with_other_denom_refunded(app, contract):
    """Rejected bids roll back the attached funds of every denomination."""
    app.init_balance("bidder", [coin(150_000, BID_DENOM), coin(10, "uatom")])

    with pytest.raises(BidTooLow):
        contract.bid(app, "bidder", [coin(10, "uatom"), coin(1, BID_DENOM)])

    assert app.query_all_balances("bidder") == [coin(10, "uatom"), coin(150_000, BID_DENOM)]


def test_overflowing_credit_rejected(app, caplog):
    """A bid that would push custody past Uint128 moves nothing and is logged."""
    app.init_balance("whale", ubtc(MAX_AMOUNT))
    contract = AuctionContract.instantiate(
        app, "whale", InstantiateMsg(auction_item_title="Big"), ubtc(MAX_AMOUNT)
    )

    with caplog.at_level(logging.INFO, logger="openbid"):
        with pytest.raises(Overflow):
            contract.bid(app, "bidder", ubtc(1))

    assert "rejected" in caplog.text
    assert any(r.name == f"openbid.contract.{contract.address}" for r in caplog.records)
    assert app.query_all_balances("bidder") == ubtc(150_000)
    assert app.query_balance(contract.address, BID_DENOM) == coin(MAX_AMOUNT, BID_DENOM)
    assert contract.query_user_bid(app, "bidder").bid.amount == 0


def test_outbid_and_raise(app, contract):
    contract.bid(app, "bidder", ubtc(120_000))
    contract.bid(app, "bidder_two", ubtc(130_000))
    response = contract.bid(app, "bidder", ubtc(20_000))

    assert response.attribute("bid_amount") == "140000ubtc"
    assert contract.query_auction_status(app).highest_bid.bidder == "bidder"
    assert app.query_balance(contract.address, BID_DENOM) == coin(370_000, BID_DENOM)


# =============================================================================
# Closing
# =============================================================================


def test_only_owner_can_close_bidding(app, contract):
    with pytest.raises(Unauthorized):
        contract.close_bidding(app, "bidder")

    assert contract.query_auction_status(app).active is True

    contract.close_bidding(app, "sender")

    assert contract.query_auction_status(app).active is False


def test_close_twice(app, contract):
    contract.close_bidding(app, "sender")

    with pytest.raises(AuctionInactive):
        contract.close_bidding(app, "sender")

    assert contract.query_auction_status(app).active is False


def test_no_bids_after_close(app, contract):
    contract.close_bidding(app, "sender")

    with pytest.raises(AuctionInactive):
        contract.bid(app, "bidder", ubtc(150_000))

    assert contract.query_auction_status(app).bidders_count == 1
    assert app.query_all_balances("bidder") == ubtc(150_000)


# =============================================================================
# Retracting
# =============================================================================


def test_cannot_retract_funds_while_active(app, contract):
    contract.bid(app, "bidder", ubtc(150_000))
    assert app.query_all_balances(contract.address) == ubtc(250_000)

    with pytest.raises(AuctionActive):
        contract.retract_funds(app, "sender")

    assert app.query_all_balances(contract.address) == ubtc(250_000)

    contract.close_bidding(app, "sender")
    contract.retract_funds(app, "sender")

    assert app.query_all_balances(contract.address) == ubtc(150_000)
    assert app.query_all_balances("sender") == ubtc(100_000)
    assert contract.query_auction_status(app).active is False


def test_winner_cannot_retract_funds(app, contract):
    contract.bid(app, "bidder", ubtc(150_000))
    contract.close_bidding(app, "sender")

    with pytest.raises(NothingToWithdraw):
        contract.retract_funds(app, "bidder")

    assert app.query_all_balances(contract.address) == ubtc(250_000)

    contract.retract_funds(app, "sender")

    assert app.query_all_balances(contract.address) == ubtc(150_000)

    with pytest.raises(NothingToWithdraw):
        contract.retract_funds(app, "bidder")


def test_retract_only_once(app, contract):
    contract.bid(app, "bidder", ubtc(150_000))
    contract.close_bidding(app, "sender")
    contract.retract_funds(app, "sender")

    with pytest.raises(NothingToWithdraw):
        contract.retract_funds(app, "sender")

    assert app.query_all_balances("sender") == ubtc(100_000)
    assert contract.query_user_bid(app, "sender").bid.amount == 0


def test_never_bid_cannot_retract(app, contract):
    contract.bid(app, "bidder", ubtc(150_000))
    contract.close_bidding(app, "sender")

    with pytest.raises(NothingToWithdraw):
        contract.retract_funds(app, "bidder_two")

    assert app.query_all_balances("bidder_two") == ubtc(200_000)


def test_retract_to_other_address(app, contract):
    contract.bid(app, "bidder", ubtc(150_000))
    contract.close_bidding(app, "sender")

    response = contract.retract_funds(app, "sender", withdraw_address="vault")

    assert response.messages[0].to_address == "vault"
    assert app.query_all_balances("vault") == ubtc(100_000)
    assert app.query_all_balances("sender") == []


def test_full_auction(app, contract):
    """Custody equals everything attached minus everything retracted."""
    contract.bid(app, "bidder", ubtc(120_000))
    contract.bid(app, "bidder_two", ubtc(200_000))
    contract.close_bidding(app, "sender")

    contract.retract_funds(app, "sender")
    contract.retract_funds(app, "bidder")

    status = contract.query_auction_status(app)
    assert status.highest_bid == BidResponse(bidder="bidder_two", bid=coin(200_000, BID_DENOM))
    assert status.bidders_count == 3

    assert app.query_all_balances(contract.address) == ubtc(200_000)
    assert app.query_all_balances("sender") == ubtc(100_000)
    assert app.query_all_balances("bidder") == ubtc(150_000)
    assert app.query_all_balances("bidder_two") == []


def test_independent_auctions(app, contract):
    other = AuctionContract.instantiate(app, "bidder_two", InstantiateMsg(auction_item_title="Other"))

    contract.bid(app, "bidder", ubtc(150_000))

    assert other.query_auction_status(app).bidders_count == 1
    assert other.query_auction_status(app).highest_bid.bidder == "bidder_two"
    assert contract.query_auction_status(app).bidders_count == 2
