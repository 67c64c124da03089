"""
openbid Auction Module.

This module provides the open ascending-price auction contract:
- Contract entry points (instantiate, execute, query)
- Message and response schemas
"""

from openbid.core.auction.contract import (
    instantiate,
    execute,
    query,
    BID_DENOM,
    CONTRACT_NAME,
    CONTRACT_VERSION,
    DEFAULT_COMMISSION,
)
from openbid.core.auction.msg import (
    InstantiateMsg,
    ExecuteMsg,
    QueryMsg,
    BidResponse,
    AuctionStatusResponse,
    bid_msg,
    close_bidding_msg,
    retract_funds_msg,
    auction_status_query,
    user_bid_query,
    parse_msg,
    to_binary,
    from_binary,
)

__all__ = [
    # Entry points
    "instantiate",
    "execute",
    "query",
    "BID_DENOM",
    "CONTRACT_NAME",
    "CONTRACT_VERSION",
    "DEFAULT_COMMISSION",
    # Messages
    "InstantiateMsg",
    "ExecuteMsg",
    "QueryMsg",
    "BidResponse",
    "AuctionStatusResponse",
    "bid_msg",
    "close_bidding_msg",
    "retract_funds_msg",
    "auction_status_query",
    "user_bid_query",
    "parse_msg",
    "to_binary",
    "from_binary",
]
