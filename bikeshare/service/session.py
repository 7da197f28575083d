"""
Session
-------

Whether the account is signed in comes from the wallet, and is cheap.
Whether it is registered comes from the token ledger, and is read again
every time it is asked for: registration can be granted by anyone at
any time, so an earlier answer is never reused.
"""

from bikeshare import logger
from bikeshare.gateway import TokenGateway
from bikeshare.models import Account
from bikeshare.models.account import is_registered
from bikeshare.wallet import Wallet


class Session:

    def __init__(self, wallet: Wallet, token_gateway: TokenGateway):
        self._wallet = wallet
        self._token_gateway = token_gateway

    @property
    def account_id(self) -> str:
        return self._wallet.account_id

    def is_signed_in(self) -> bool:
        return self._wallet.is_signed_in()

    async def is_registered(self, account_id: str = None) -> bool:
        """Checks the token ledger for a storage record of the account."""
        account_id = account_id if account_id is not None else self.account_id
        storage_balance = await self._token_gateway.storage_balance_of(account_id)
        if not is_registered(storage_balance):
            logger.info("%s is not yet registered", account_id)
        return is_registered(storage_balance)

    async def resolve(self) -> Account:
        """
        Builds the account facts for the current session. Registration is
        only looked up when signed in.
        """
        if not self.is_signed_in():
            return Account(self.account_id)
        return Account(self.account_id, signed_in=True, registered=await self.is_registered())

    def sign_in(self):
        self._wallet.sign_in()

    def sign_out(self):
        self._wallet.sign_out()
