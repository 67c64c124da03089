"""Contract name and version recorded at instantiation."""

from pydantic import BaseModel

from openbid.core.state.items import Item
from openbid.core.storage.base import Storage


class ContractVersion(BaseModel):
    contract: str
    version: str


CONTRACT_INFO: Item[ContractVersion] = Item("contract_info", ContractVersion)


def set_contract_version(storage: Storage, contract: str, version: str) -> None:
    CONTRACT_INFO.save(storage, ContractVersion(contract=contract, version=version))


def get_contract_version(storage: Storage) -> ContractVersion:
    return CONTRACT_INFO.load(storage)
