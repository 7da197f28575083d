"""
App
---

Wires the gateways, the session and the orchestrator together. The
application object is only used as a registry with startup and cleanup
hooks, nothing is served.
"""

import asyncio
from typing import Optional

import sentry_sdk
from aiohttp import web

from bikeshare import logger
from bikeshare.config import client_mode, rpc_url, fleet_contract_id, token_contract_id, account_id, \
    sync_concurrency, sentry_dsn
from bikeshare.gateway import FleetGateway, TokenGateway
from bikeshare.gateway.memory import MemoryNetwork, MemoryLedgerGateway, FleetContract, FungibleTokenContract
from bikeshare.gateway.rpc import RpcLedgerGateway, node_breaker
from bikeshare.service import Session, BikeStatusReader, FleetSynchronizer, RentalOrchestrator
from bikeshare.signals import register_signals
from bikeshare.version import __version__
from bikeshare.wallet import Wallet, DummyWallet, ReadOnlyWallet

DEVELOPMENT_BIKES = 5
DEVELOPMENT_SUPPLY = 1_000_000
DEVELOPMENT_FLEET_FUNDS = 1_000
"""Tokens the fleet ledger holds in development, to pay inspection rewards from."""
DEVELOPMENT_ACCOUNT_FUNDS = 100


def development_network(fleet_id=fleet_contract_id, token_id=token_contract_id, *accounts: str) -> MemoryNetwork:
    """
    Deploys a fleet of available bikes and a token ledger, registering
    the fleet and every given account with some tokens.
    """
    network = MemoryNetwork()
    network.deploy(fleet_id, FleetContract(DEVELOPMENT_BIKES, token_id))
    token = network.deploy(token_id, FungibleTokenContract(token_id, DEVELOPMENT_SUPPLY))
    token.register(fleet_id, DEVELOPMENT_FLEET_FUNDS)
    for account in accounts:
        token.register(account, DEVELOPMENT_ACCOUNT_FUNDS)
    return network


def build_app(mode: Optional[str] = None, *, wallet: Optional[Wallet] = None,
              network: Optional[MemoryNetwork] = None) -> web.Application:
    """
    Sets up the client. In development the ledgers run in memory, otherwise
    they are reached through the configured node.
    """
    mode = mode if mode is not None else client_mode
    app = web.Application()

    if mode == "development":
        network = network if network is not None else development_network(
            fleet_contract_id, token_contract_id, account_id
        )
        wallet = wallet if wallet is not None else DummyWallet(network, account_id)
        app['network'] = network
        app['fleet_ledger'] = MemoryLedgerGateway(fleet_contract_id, wallet, network)
        app['token_ledger'] = MemoryLedgerGateway(token_contract_id, wallet, network)
    else:
        wallet = wallet if wallet is not None else ReadOnlyWallet(account_id)
        breaker = node_breaker()
        app['fleet_ledger'] = RpcLedgerGateway(fleet_contract_id, wallet, rpc_url, breaker=breaker)
        app['token_ledger'] = RpcLedgerGateway(token_contract_id, wallet, rpc_url, breaker=breaker)

    app['wallet'] = wallet
    app['fleet_gateway'] = FleetGateway(app['fleet_ledger'])
    app['token_gateway'] = TokenGateway(app['token_ledger'])
    app['session'] = Session(wallet, app['token_gateway'])
    app['fleet_synchronizer'] = FleetSynchronizer(
        app['fleet_gateway'], BikeStatusReader(app['fleet_gateway']), concurrency=sync_concurrency
    )
    app['rental_orchestrator'] = RentalOrchestrator(
        app['session'], app['fleet_gateway'], app['token_gateway'], app['fleet_synchronizer']
    )

    register_signals(app)

    # set up sentry exception tracking
    if mode != "development" and sentry_dsn:
        logger.info("Starting Sentry Logging")
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=mode,
            release=f"bikeshare@{__version__}"
        )

    if mode == "development" or mode == "testing":
        asyncio.get_event_loop().set_debug(True)

    return app
