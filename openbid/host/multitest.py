"""
Typed client for one auction contract hosted by an App.

Wraps the raw message plumbing so tests and the CLI can drive an
auction with plain method calls.
"""

from typing import Iterable, Optional

from openbid.core.auction.msg import (
    AuctionStatusResponse,
    BidResponse,
    InstantiateMsg,
    auction_status_query,
    bid_msg,
    close_bidding_msg,
    retract_funds_msg,
    to_binary,
    user_bid_query,
)
from openbid.core.state.version import ContractVersion
from openbid.core.types import Coin, Response
from openbid.host.app import App


class AuctionContract:
    """Handle on an instantiated auction."""

    def __init__(self, address: str):
        self.address = address

    @classmethod
    def instantiate(
        cls,
        app: App,
        sender: str,
        msg: InstantiateMsg,
        funds: Iterable[Coin] = (),
        label: str = "",
        admin: Optional[str] = None,
    ) -> "AuctionContract":
        address = app.instantiate_contract(sender, to_binary(msg), funds, label, admin)
        return cls(address)

    def query_auction_status(self, app: App) -> AuctionStatusResponse:
        raw = app.query_wasm_smart(self.address, to_binary(auction_status_query()))
        return AuctionStatusResponse.model_validate(raw)

    def query_user_bid(self, app: App, bidder: str) -> BidResponse:
        raw = app.query_wasm_smart(self.address, to_binary(user_bid_query(bidder)))
        return BidResponse.model_validate(raw)

    def query_version(self, app: App) -> ContractVersion:
        return app.contract_version(self.address)

    def bid(self, app: App, sender: str, funds: Iterable[Coin]) -> Response:
        return app.execute_contract(sender, self.address, to_binary(bid_msg()), funds)

    def close_bidding(self, app: App, sender: str) -> Response:
        return app.execute_contract(sender, self.address, to_binary(close_bidding_msg()))

    def retract_funds(
        self,
        app: App,
        sender: str,
        withdraw_address: Optional[str] = None,
    ) -> Response:
        msg = retract_funds_msg(withdraw_address)
        return app.execute_contract(sender, self.address, to_binary(msg))

    def __repr__(self) -> str:
        return f"AuctionContract({self.address!r})"
