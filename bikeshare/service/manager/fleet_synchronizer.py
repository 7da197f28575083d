"""
Fleet Synchronizer
------------------

Builds the snapshot of the whole fleet at startup, and repairs a single
entry of it after an action touched that bike. There is never a full
re-read after an action, the cost of an action stays one bike.
"""
from asyncio import Semaphore, gather

from bikeshare import logger
from bikeshare.gateway import FleetGateway
from bikeshare.models import FleetSnapshot, BikeSnapshot
from bikeshare.service.bike_status import BikeStatusReader


class FleetSynchronizer:

    def __init__(self, fleet_gateway: FleetGateway, reader: BikeStatusReader, *, concurrency: int = 1):
        """
        :param concurrency: How many bikes may be read at the same time.
        """
        if concurrency < 1:
            raise ValueError("At least one bike must be read at a time.")

        self._fleet_gateway = fleet_gateway
        self._reader = reader
        self.concurrency = concurrency

    async def read_all(self) -> FleetSnapshot:
        """
        Reads the size of the fleet once, then every bike in it.

        :raises GatewayUnavailable: If any read fails.
        """
        size = await self._fleet_gateway.num_of_bikes()
        logger.debug("Reading %s bikes, %s at a time", size, self.concurrency)

        semaphore = Semaphore(self.concurrency)

        async def read(index):
            async with semaphore:
                return await self._reader.read(index)

        bikes = await gather(*(read(index) for index in range(size)))
        return FleetSnapshot(bikes)

    async def refresh(self, fleet: FleetSnapshot, index: int) -> BikeSnapshot:
        """Re-reads one bike and replaces only its entry in the fleet."""
        bike = await self._reader.read(index)
        fleet.replace(bike)
        logger.debug("Refreshed bike %s: %s", index, bike.status.value)
        return bike
