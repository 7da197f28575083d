"""
.. autoclasstree:: bikeshare.gateway

The gateways are the only way the client talks to the ledgers. A
:class:`~bikeshare.gateway.gateway.LedgerGateway` exposes free, read-only
view calls and signed change calls against one contract. Two implementations
exist: one speaking JSON-RPC to a node, and one running the contracts in
memory for development and testing.

The :class:`~bikeshare.gateway.fleet.FleetGateway` and
:class:`~bikeshare.gateway.token.TokenGateway` wrap a ledger gateway with
the typed methods of each contract.
"""

from .gateway import LedgerGateway, GatewayError, GatewayUnavailable, RejectedByLedger, \
    GAS, ONE_YOCTO, STORAGE_DEPOSIT
from .fleet import FleetGateway
from .token import TokenGateway
