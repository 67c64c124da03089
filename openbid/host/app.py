"""
App - in-process host for auction contracts.

The App plays the role of the ledger runtime:

1. Serializes invocations (one at a time per App)
2. Moves funds attached to a call from the sender to the contract
3. Runs the contract entry point against the contract's own namespace
4. Executes the bank sends the contract returns
5. Commits all of the above as one transaction, or nothing on error

Queries read committed state and never write.
"""

import threading
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel

from openbid.core.auction import contract
from openbid.core.auction.msg import from_binary
from openbid.core.errors import ContractError, InvalidInput, NotFound
from openbid.core.state.items import Item, Map
from openbid.core.state.version import ContractVersion, get_contract_version
from openbid.core.storage.base import MemoryStorage, Storage
from openbid.core.storage.transaction import PrefixedStorage, StorageTransaction
from openbid.core.types import Coin, MessageInfo, Response
from openbid.host.bank import Bank
from openbid.utils.logger import contract_logger
from openbid.utils.validation import validate_address

APP_NAMESPACE = b"app"
CONTRACT_NAMESPACE_PREFIX = b"contract_data/"


class ContractRecord(BaseModel):
    """Host-side metadata of an instantiated contract."""
    address: str
    code: str
    label: str
    creator: str
    admin: Optional[str] = None


CONTRACT_COUNT: Item[int] = Item("contract_count", int)
CONTRACTS: Map[ContractRecord] = Map("contracts", ContractRecord)


class App:
    """
    Host for auction contracts over a root storage.

    Attributes:
        storage: Root store holding bank balances, contract registry,
            and every contract's namespace
        bank: Balance bookkeeping
    """

    def __init__(self, storage: Optional[Storage] = None):
        self.storage = storage if storage is not None else MemoryStorage()
        self.bank = Bank()
        self._lock = threading.RLock()

    # =========================================================================
    # Internals
    # =========================================================================

    def _app_store(self, storage: Storage) -> Storage:
        return PrefixedStorage(storage, APP_NAMESPACE)

    def _contract_store(self, storage: Storage, address: str) -> Storage:
        return PrefixedStorage(storage, CONTRACT_NAMESPACE_PREFIX + address.encode())

    def _require_contract(self, storage: Storage, address: str) -> ContractRecord:
        record = CONTRACTS.may_load(self._app_store(storage), address)
        if record is None:
            raise NotFound(f"contract {address}")
        return record

    def _call(self, txn: Storage, sender: str, address: str, funds: List[Coin], call) -> Response:
        """Move attached funds, run the entry point, then execute its bank sends."""
        valid, error = validate_address(sender)
        if not valid:
            raise InvalidInput(error)

        info = MessageInfo(sender=sender, funds=funds)
        self.bank.send(txn, sender, address, funds)
        response = call(self._contract_store(txn, address), info)
        for message in response.messages:
            self.bank.send(txn, address, message.to_address, message.amount)
        return response

    def _run(self, sender: str, address: str, funds: List[Coin], call) -> Response:
        """Run one contract call inside a transaction over the root store."""
        with self._lock, StorageTransaction(self.storage) as txn:
            return self._call(txn, sender, address, funds, call)

    # =========================================================================
    # Bank
    # =========================================================================

    def init_balance(self, address: str, funds: Iterable[Coin]) -> None:
        with self._lock, StorageTransaction(self.storage) as txn:
            self.bank.init_balance(txn, address, funds)

    def query_balance(self, address: str, denom: str) -> Coin:
        return self.bank.balance(self.storage, address, denom)

    def query_all_balances(self, address: str) -> List[Coin]:
        return self.bank.all_balances(self.storage, address)

    # =========================================================================
    # Contracts
    # =========================================================================

    def instantiate_contract(
        self,
        sender: str,
        msg: Any,
        funds: Iterable[Coin] = (),
        label: str = "",
        admin: Optional[str] = None,
    ) -> str:
        """
        Create a new auction contract.

        Returns:
            The new contract's address
        """
        funds = list(funds)
        with self._lock:
            count = CONTRACT_COUNT.may_load(self._app_store(self.storage)) or 0
            address = f"contract{count}"

            def call(store: Storage, info: MessageInfo) -> Response:
                return contract.instantiate(store, info, msg)

            try:
                with StorageTransaction(self.storage) as txn:
                    app_store = self._app_store(txn)
                    CONTRACT_COUNT.save(app_store, count + 1)
                    CONTRACTS.save(app_store, address, ContractRecord(
                        address=address,
                        code=contract.CONTRACT_NAME,
                        label=label,
                        creator=sender,
                        admin=admin,
                    ))
                    # Registry writes join the call's outcome
                    self._call(txn, sender, address, funds, call)
            except ContractError as e:
                contract_logger(address).info(f"Instantiation by {sender} rejected: {e}")
                raise

        contract_logger(address).info(f"Instantiated ({label or 'no label'}) by {sender}")
        return address

    def execute_contract(
        self,
        sender: str,
        address: str,
        msg: Any,
        funds: Iterable[Coin] = (),
    ) -> Response:
        """
        Execute a message against a contract with attached funds.

        Raises:
            ContractError: the call was rejected; nothing was committed
        """
        funds = list(funds)
        self._require_contract(self.storage, address)

        def call(store: Storage, info: MessageInfo) -> Response:
            return contract.execute(store, info, msg)

        try:
            response = self._run(sender, address, funds, call)
        except ContractError as e:
            contract_logger(address).info(f"Execution by {sender} rejected: {e}")
            raise

        contract_logger(address).debug(f"Executed by {sender}: {response.attributes}")
        return response

    def query_wasm_smart(self, address: str, msg: Any) -> Any:
        """Run a query and return the decoded JSON response."""
        self._require_contract(self.storage, address)
        return from_binary(contract.query(self._contract_store(self.storage, address), msg))

    def contract_version(self, address: str) -> ContractVersion:
        self._require_contract(self.storage, address)
        return get_contract_version(self._contract_store(self.storage, address))

    def contract_info(self, address: str) -> ContractRecord:
        return self._require_contract(self.storage, address)

    def contracts(self) -> List[str]:
        return list(CONTRACTS.keys(self._app_store(self.storage)))
