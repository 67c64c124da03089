"""
Contract messages.

Execute and query messages are externally tagged JSON objects with
exactly one snake_case key, e.g. ``{"bid": {}}`` or
``{"get_user_bid": {"bidder": "alice"}}``.
"""

import json
from decimal import Decimal
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from openbid.core.errors import ParseError
from openbid.core.types import Coin

M = TypeVar("M", bound=BaseModel)


class _Msg(BaseModel):
    model_config = ConfigDict(extra="forbid")


class Empty(_Msg):
    pass


class _Tagged(_Msg):
    """Exactly one variant field is set."""

    @model_validator(mode="after")
    def _one_variant(self):
        set_fields = [name for name in type(self).model_fields if getattr(self, name) is not None]
        if len(set_fields) != 1:
            raise ValueError(
                f"expected exactly one of {sorted(type(self).model_fields)}, got {set_fields}"
            )
        return self

    @property
    def variant(self) -> str:
        for name in type(self).model_fields:
            if getattr(self, name) is not None:
                return name
        raise AssertionError("validated message has no variant")


# =============================================================================
# Instantiate
# =============================================================================


class InstantiateMsg(_Msg):
    owner: Optional[str] = None
    auction_item_title: str
    commission_percentage: Optional[Decimal] = None


# =============================================================================
# Execute
# =============================================================================


class RetractFunds(_Msg):
    withdraw_address: Optional[str] = None


class ExecuteMsg(_Tagged):
    bid: Optional[Empty] = None
    close_bidding: Optional[Empty] = None
    retract_funds: Optional[RetractFunds] = None


def bid_msg() -> ExecuteMsg:
    return ExecuteMsg(bid=Empty())


def close_bidding_msg() -> ExecuteMsg:
    return ExecuteMsg(close_bidding=Empty())


def retract_funds_msg(withdraw_address: Optional[str] = None) -> ExecuteMsg:
    return ExecuteMsg(retract_funds=RetractFunds(withdraw_address=withdraw_address))


# =============================================================================
# Query
# =============================================================================


class GetUserBid(_Msg):
    bidder: str


class QueryMsg(_Tagged):
    get_auction_status: Optional[Empty] = None
    get_user_bid: Optional[GetUserBid] = None


def auction_status_query() -> QueryMsg:
    return QueryMsg(get_auction_status=Empty())


def user_bid_query(bidder: str) -> QueryMsg:
    return QueryMsg(get_user_bid=GetUserBid(bidder=bidder))


# =============================================================================
# Responses
# =============================================================================


class BidResponse(BaseModel):
    bidder: str
    bid: Coin


class AuctionStatusResponse(BaseModel):
    owner: str
    active: bool
    auction_item_title: str
    highest_bid: BidResponse
    bidders_count: int
    commission_percentage: Decimal


# =============================================================================
# Encoding
# =============================================================================


def parse_msg(model: Type[M], raw: Any) -> M:
    """
    Decode a message from a model instance, dict, JSON str, or JSON bytes.

    Raises:
        ParseError: if the input does not match the message schema
    """
    if isinstance(raw, model):
        return raw
    try:
        if isinstance(raw, (str, bytes, bytearray)):
            return model.model_validate_json(raw)
        return model.model_validate(raw)
    except ValidationError as e:
        raise ParseError(model.__name__, str(e)) from e


def to_binary(msg: BaseModel) -> bytes:
    """Encode a message or response as compact JSON."""
    return msg.model_dump_json(exclude_none=True).encode()


def from_binary(data: bytes) -> Any:
    """Decode JSON bytes into plain Python values."""
    try:
        return json.loads(data)
    except ValueError as e:
        raise ParseError("json", str(e)) from e
