"""Auction state: typed slots, bid ledger, contract version"""
from openbid.core.state.items import Item, Map
from openbid.core.state.version import (
    ContractVersion,
    set_contract_version,
    get_contract_version,
)
from openbid.core.state.slots import (
    CONTRACT_INFO,
    OWNER,
    AUCTION_ITEM_TITLE,
    COMMISSION_PERCENTAGE,
    ACTIVE,
    BIDS,
)
from openbid.core.state.ledger import BidLedger, BidStanding

__all__ = [
    "Item",
    "Map",
    "ContractVersion",
    "set_contract_version",
    "get_contract_version",
    "CONTRACT_INFO",
    "OWNER",
    "AUCTION_ITEM_TITLE",
    "COMMISSION_PERCENTAGE",
    "ACTIVE",
    "BIDS",
    "BidLedger",
    "BidStanding",
]
