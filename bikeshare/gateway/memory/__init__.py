"""
Provides a simple in-memory implementation of the ledgers,
for development and testing purposes.
"""

from .network import MemoryNetwork, CallContext, Contract, ContractPanic
from .contracts import FleetContract, FungibleTokenContract
from .gateway import MemoryLedgerGateway
