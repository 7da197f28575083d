"""
Bike Status
-----------

Reads one bike. The ledger answers three separate questions about it,
which are asked at once and combined as they come back without any
check that the answers agree.
"""
from asyncio import gather

from bikeshare.gateway import FleetGateway
from bikeshare.models import BikeSnapshot


class BikeStatusReader:

    def __init__(self, fleet_gateway: FleetGateway):
        self._fleet_gateway = fleet_gateway

    async def read(self, index: int) -> BikeSnapshot:
        """
        Reads the bike at the given index.

        :raises GatewayUnavailable: If any of the reads fails. Nothing is retried.
        :raises RejectedByLedger: If the ledger has no bike at that index.
        """
        available, user, inspector = await gather(
            self._fleet_gateway.is_available(index),
            self._fleet_gateway.who_is_using(index),
            self._fleet_gateway.who_is_inspecting(index),
        )
        return BikeSnapshot(index, available, user, inspector)
