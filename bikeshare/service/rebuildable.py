"""
Components whose state is reconstructed from the ledgers when the
client starts. Every one of them registered on the app is rebuilt by
the startup signal, before any action can run.
"""

from abc import ABC, abstractmethod


class Rebuildable(ABC):

    @abstractmethod
    async def _rebuild(self):
        """
        Reads the ledgers and replaces the component's state with what they hold.

        :raises GatewayError: If the ledgers cannot be read.
        """
