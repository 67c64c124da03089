"""
Boundary types shared by the contract and its host.

- Coin: an amount of a single denomination
- MessageInfo: who is calling and what funds they attached
- Response: attributes and outbound transfer instructions of a call
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from openbid.core.errors import Overflow
from openbid.utils.validation import MAX_AMOUNT, validate_amount


class Coin(BaseModel):
    """An amount of one denomination. Serialized amounts are decimal strings."""

    model_config = ConfigDict(frozen=True)

    denom: str
    amount: int = Field(ge=0, le=MAX_AMOUNT)

    @field_serializer("amount")
    def _serialize_amount(self, amount: int) -> str:
        return str(amount)

    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


def coin(amount: int, denom: str) -> Coin:
    """Create a Coin."""
    return Coin(denom=denom, amount=amount)


def coins(amount: int, denom: str) -> List[Coin]:
    """Create a single-coin fund list."""
    return [coin(amount, denom)]


def checked_add(left: int, right: int) -> int:
    """
    Add two coin amounts.

    Raises:
        Overflow: if the sum exceeds the Uint128 range
    """
    total = left + right
    valid, _ = validate_amount(total)
    if not valid:
        raise Overflow(left, right)
    return total


def find_amount(funds: Iterable[Coin], denom: str) -> int:
    """Amount of the first coin of ``denom`` in ``funds``, zero if none."""
    for c in funds:
        if c.denom == denom:
            return c.amount
    return 0


@dataclass(frozen=True)
class MessageInfo:
    """Authenticated caller and the coins attached to the call."""
    sender: str
    funds: Tuple[Coin, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "funds", tuple(self.funds))


@dataclass
class BankSend:
    """Instruction to move coins out of the contract account."""
    to_address: str
    amount: List[Coin]


@dataclass
class Response:
    """Result of a successful instantiate or execute call."""
    messages: List[BankSend] = field(default_factory=list)
    attributes: List[Tuple[str, str]] = field(default_factory=list)

    def add_attribute(self, key: str, value) -> "Response":
        self.attributes.append((key, str(value)))
        return self

    def add_message(self, message: BankSend) -> "Response":
        self.messages.append(message)
        return self

    def attribute(self, key: str) -> Optional[str]:
        """First attribute value stored under ``key``."""
        for k, v in self.attributes:
            if k == key:
                return v
        return None
