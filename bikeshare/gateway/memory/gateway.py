from typing import Any

from bikeshare.gateway.gateway import LedgerGateway, RejectedByLedger
from .network import MemoryNetwork, ContractPanic


class MemoryLedgerGateway(LedgerGateway):
    """
    A gateway to a contract on an in-memory network. Change calls go through
    the wallet exactly like on a real node.
    """

    def __init__(self, contract_id: str, wallet, network: MemoryNetwork):
        super().__init__(contract_id, wallet)
        self._network = network

    async def view(self, method: str, **args) -> Any:
        try:
            return await self._network.view(self.contract_id, method, args)
        except ContractPanic as panic:
            raise RejectedByLedger(str(panic)) from panic
