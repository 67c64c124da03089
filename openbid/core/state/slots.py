"""
Persisted layout of an auction contract.

Key names are kept identical to the deployed contract so that state
written by either implementation can be read by the other.
"""

from decimal import Decimal

from openbid.core.state.items import Item, Map
from openbid.core.state.version import CONTRACT_INFO
from openbid.core.types import Coin

__all__ = [
    "CONTRACT_INFO",
    "OWNER",
    "AUCTION_ITEM_TITLE",
    "COMMISSION_PERCENTAGE",
    "ACTIVE",
    "BIDS",
]

OWNER: Item[str] = Item("owner", str)
AUCTION_ITEM_TITLE: Item[str] = Item("auction_item_title", str)
COMMISSION_PERCENTAGE: Item[Decimal] = Item("commission_percentage", Decimal)
ACTIVE: Item[bool] = Item("active", bool)

BIDS: Map[Coin] = Map("bids", Coin)
