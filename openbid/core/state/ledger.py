"""
Bid Ledger - cumulative outstanding bid per participant.

Conceptual Background:
---------------------
Every participant who has sent value to the auction has an entry equal
to their cumulative contribution. An absent participant has a zero
entry. Entries are never removed: a retraction overwrites the entry
with a zero coin, so "already retracted" and "never bid" read the same.

Highest Bid:
-----------
The leader is found by scanning entries in ascending identity order and
keeping the last entry whose amount is >= the running maximum. On a tie
the lexicographically greater identity therefore wins; arrival time is
not tracked and plays no part.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from openbid.core.errors import NotFound
from openbid.core.state.slots import BIDS
from openbid.core.storage.base import Storage
from openbid.core.types import Coin, checked_add, coin
from openbid.utils.logger import get_logger

logger = get_logger("ledger")


@dataclass(frozen=True)
class BidStanding:
    """
    Where a sender would stand after adding ``incoming`` to their bid.

    Attributes:
        leader: Current highest bidder
        leader_bid: Current highest bid
        previous_amount: Sender's standing before this bid
        candidate_amount: Sender's cumulative amount after this bid
    """
    leader: str
    leader_bid: Coin
    previous_amount: int
    candidate_amount: int

    @property
    def outbids_leader(self) -> bool:
        """A bid must strictly exceed the current highest amount."""
        return self.candidate_amount > self.leader_bid.amount


class BidLedger:
    """
    Identity -> cumulative bid, backed by the ``bids`` map.

    The ledger holds no state of its own; every call reads through the
    storage handle it was built with.
    """

    def __init__(self, storage: Storage, denom: str):
        self.storage = storage
        self.denom = denom

    # =========================================================================
    # State Access
    # =========================================================================

    def entries(self) -> Iterator[Tuple[str, Coin]]:
        """All (bidder, bid) entries in ascending identity order."""
        return BIDS.range(self.storage)

    def count(self) -> int:
        """Number of recorded identities, zeroed entries included."""
        return sum(1 for _ in BIDS.keys(self.storage))

    def may_load(self, bidder: str) -> Optional[Coin]:
        return BIDS.may_load(self.storage, bidder)

    def bid_of(self, bidder: str) -> Coin:
        """Stored bid, or a zero coin if the identity has no entry."""
        bid = self.may_load(bidder)
        return bid if bid is not None else coin(0, self.denom)

    def highest_bid(self) -> Tuple[str, Coin]:
        """
        Find the leader.

        Returns:
            (bidder, bid) with the maximum amount

        Raises:
            NotFound: if the ledger is empty
        """
        best: Optional[Tuple[str, Coin]] = None
        for bidder, bid in self.entries():
            if best is None or bid.amount >= best[1].amount:
                best = (bidder, bid)

        if best is None:
            raise NotFound("highest bid")
        return best

    # =========================================================================
    # Mutations
    # =========================================================================

    def seed(self, creator: str, amount: int) -> Coin:
        """Write the creator's entry at instantiation (amount may be zero)."""
        bid = coin(amount, self.denom)
        BIDS.save(self.storage, creator, bid)
        logger.debug(f"Seeded ledger: {creator} -> {bid}")
        return bid

    def standing(self, sender: str, incoming_amount: int) -> BidStanding:
        """
        Compute a sender's standing for a new contribution.

        The previous amount is the current highest amount when the sender
        is the leader, otherwise the sender's stored amount.

        Raises:
            Overflow: if the cumulative amount leaves the Uint128 range
        """
        leader, leader_bid = self.highest_bid()
        if leader == sender:
            previous_amount = leader_bid.amount
        else:
            previous_amount = self.bid_of(sender).amount

        return BidStanding(
            leader=leader,
            leader_bid=leader_bid,
            previous_amount=previous_amount,
            candidate_amount=checked_add(previous_amount, incoming_amount),
        )

    def record_bid(
        self,
        sender: str,
        incoming_amount: int,
        standing: Optional[BidStanding] = None,
    ) -> Coin:
        """
        Add ``incoming_amount`` to the sender's cumulative bid.

        Args:
            sender: Bidder identity
            incoming_amount: Newly attached amount
            standing: Precomputed standing for this sender and amount

        Returns:
            The new cumulative bid, which overwrites the stored entry
        """
        if standing is None:
            standing = self.standing(sender, incoming_amount)

        new_bid = coin(standing.candidate_amount, self.denom)
        BIDS.save(self.storage, sender, new_bid)
        logger.debug(f"Recorded bid: {sender} -> {new_bid}")
        return new_bid

    def zero(self, bidder: str) -> None:
        """Mark an entry as retracted."""
        BIDS.save(self.storage, bidder, coin(0, self.denom))

    def __repr__(self) -> str:
        return f"BidLedger(denom={self.denom!r})"
