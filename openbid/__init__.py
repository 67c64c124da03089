"""
openbid

A single-item, open, ascending-price auction contract with:
- typed key-value state over memory or SQLite storage
- a bid ledger with deterministic highest-bid tracking
- an in-process host that moves attached funds atomically
"""

__version__ = "0.1.0"
