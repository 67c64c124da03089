"""In-process host: bank, application runtime, typed auction client"""
from openbid.host.bank import Bank
from openbid.host.app import App, ContractRecord
from openbid.host.multitest import AuctionContract

__all__ = [
    "Bank",
    "App",
    "ContractRecord",
    "AuctionContract",
]
