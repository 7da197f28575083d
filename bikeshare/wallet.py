"""
Wallet
------

The wallet owns the account's keys. The client only asks it who the
account is, whether it is signed in, and to sign and broadcast a change
call, returning the transaction's final outcome.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any

from bikeshare import logger
from bikeshare.gateway.gateway import GatewayUnavailable


class Wallet(ABC):

    def __init__(self, account_id: str):
        self._account_id = account_id

    @property
    def account_id(self) -> str:
        return self._account_id

    @abstractmethod
    def is_signed_in(self) -> bool:
        """Whether the wallet holds a usable key for the account."""

    @abstractmethod
    def sign_in(self):
        pass

    @abstractmethod
    def sign_out(self):
        pass

    @abstractmethod
    async def sign_and_send(self, receiver_id: str, method: str, args: Dict, gas: int, deposit: int) -> Dict[str, Any]:
        """
        Signs a function call transaction, broadcasts it and waits for the final outcome.

        :raises GatewayUnavailable: If the transaction could not be signed or sent.
        """


class DummyWallet(Wallet):
    """
    A wallet that signs for any account on an in-memory network.
    """

    def __init__(self, network, account_id: str, signed_in=True):
        super().__init__(account_id)
        self._network = network
        self._signed_in = signed_in

    def is_signed_in(self) -> bool:
        return self._signed_in

    def sign_in(self):
        logger.info("Signed in as %s", self.account_id)
        self._signed_in = True

    def sign_out(self):
        logger.info("Signed out of %s", self.account_id)
        self._signed_in = False

    async def sign_and_send(self, receiver_id, method, args, gas, deposit):
        if not self._signed_in:
            raise GatewayUnavailable(f"Not signed in, cannot sign {method} for {self.account_id}.")
        return await self._network.call(self.account_id, receiver_id, method, args, gas=gas, deposit=deposit)


class ReadOnlyWallet(Wallet):
    """
    A wallet without keys. View calls work, change calls cannot be signed.
    """

    def is_signed_in(self) -> bool:
        return False

    def sign_in(self):
        raise GatewayUnavailable("No signer is configured for this client.")

    def sign_out(self):
        pass

    async def sign_and_send(self, receiver_id, method, args, gas, deposit):
        raise GatewayUnavailable(f"No signer is configured, cannot send {method}.")
