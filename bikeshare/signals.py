"""
Signals
-------

The hooks run when the client starts and stops.

Each signal must accept the ``app`` argument.
"""
from aiohttp.web import Application

from bikeshare import logger
from bikeshare.gateway import LedgerGateway
from bikeshare.service.rebuildable import Rebuildable


async def rebuild_states(app: Application):
    """Rebuilds the client state from the ledgers."""
    for rebuildable in (x for x in app.values() if isinstance(x, Rebuildable)):
        await rebuildable._rebuild()


async def close_gateways(app: Application):
    """Closes the connections held by the gateways."""
    logger.debug("Closing gateways")
    for gateway in (x for x in app.values() if isinstance(x, LedgerGateway)):
        await gateway.close()


def register_signals(app: Application):
    """Registers all the signals at the appropriate hooks."""
    app.on_startup.append(rebuild_states)
    app.on_cleanup.append(close_gateways)
