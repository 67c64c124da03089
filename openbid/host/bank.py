"""
Bank - per-account, per-denomination balances.

Implements the value-transfer primitive the auction relies on. Balances
live in the host's root storage, so transfers commit or roll back
together with the contract writes of the same invocation.
"""

from typing import Dict, Iterable, List

from openbid.core.errors import InsufficientFunds, InvalidInput
from openbid.core.state.items import Map
from openbid.core.storage.base import Storage
from openbid.core.storage.transaction import PrefixedStorage
from openbid.core.types import Coin, checked_add, coin
from openbid.utils.logger import get_logger
from openbid.utils.validation import validate_address, validate_denom

logger = get_logger("host.bank")

BANK_NAMESPACE = b"bank"

BALANCES: Map[Dict[str, int]] = Map("balances", Dict[str, int])


def _check(result) -> None:
    valid, error = result
    if not valid:
        raise InvalidInput(error)


class Bank:
    """Balance bookkeeping over a storage handle."""

    def _store(self, storage: Storage) -> Storage:
        return PrefixedStorage(storage, BANK_NAMESPACE)

    def _load(self, storage: Storage, address: str) -> Dict[str, int]:
        return BALANCES.may_load(self._store(storage), address) or {}

    def _save(self, storage: Storage, address: str, balances: Dict[str, int]) -> None:
        balances = {denom: amount for denom, amount in balances.items() if amount > 0}
        if balances:
            BALANCES.save(self._store(storage), address, balances)
        else:
            BALANCES.remove(self._store(storage), address)

    # =========================================================================
    # Queries
    # =========================================================================

    def balance(self, storage: Storage, address: str, denom: str) -> Coin:
        return coin(self._load(storage, address).get(denom, 0), denom)

    def all_balances(self, storage: Storage, address: str) -> List[Coin]:
        """Non-zero balances sorted by denomination."""
        balances = self._load(storage, address)
        return [coin(balances[denom], denom) for denom in sorted(balances)]

    # =========================================================================
    # Mutations
    # =========================================================================

    def init_balance(self, storage: Storage, address: str, funds: Iterable[Coin]) -> None:
        """Set an account's balances, replacing whatever it held."""
        _check(validate_address(address))
        balances: Dict[str, int] = {}
        for c in funds:
            _check(validate_denom(c.denom))
            balances[c.denom] = checked_add(balances.get(c.denom, 0), c.amount)
        self._save(storage, address, balances)
        logger.debug(f"Initialized balance of {address}: {balances}")

    def send(
        self,
        storage: Storage,
        from_address: str,
        to_address: str,
        amount: Iterable[Coin],
    ) -> None:
        """
        Move coins between accounts.

        Raises:
            InsufficientFunds: sender cannot cover one of the coins
            Overflow: recipient balance would leave the Uint128 range
            InvalidInput: malformed address or denomination
        """
        _check(validate_address(from_address))
        _check(validate_address(to_address))

        amount = [c for c in amount if c.amount > 0]
        if not amount:
            return

        sender = self._load(storage, from_address)
        for c in amount:
            _check(validate_denom(c.denom))
            available = sender.get(c.denom, 0)
            if available < c.amount:
                raise InsufficientFunds(from_address, c.denom, available, c.amount)
            sender[c.denom] = available - c.amount
        self._save(storage, from_address, sender)

        # Reload in case sender and recipient are the same account
        recipient = self._load(storage, to_address)
        for c in amount:
            recipient[c.denom] = checked_add(recipient.get(c.denom, 0), c.amount)
        self._save(storage, to_address, recipient)

        logger.debug(f"Sent {', '.join(str(c) for c in amount)} from {from_address} to {to_address}")
