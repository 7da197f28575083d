"""
Talks to a ledger node over JSON-RPC.
"""

from .gateway import RpcLedgerGateway, node_breaker
