"""
Token Gateway
-------------

The typed methods of the fungible token ledger (NEP-141 balances and
transfers, NEP-145 storage registration). An account must hold a
storage deposit before it can receive tokens.
"""
from typing import Optional

from marshmallow import ValidationError

from bikeshare.models import StorageBalance
from bikeshare.serializer.ledger import StorageBalanceSchema
from .fleet import _integer
from .gateway import LedgerGateway, GatewayUnavailable, ONE_YOCTO, STORAGE_DEPOSIT


class TokenGateway:

    def __init__(self, gateway: LedgerGateway):
        self._gateway = gateway
        self._storage_schema = StorageBalanceSchema()

    @property
    def contract_id(self) -> str:
        return self._gateway.contract_id

    async def ft_balance_of(self, account_id: str) -> int:
        return _integer(await self._gateway.view("ft_balance_of", account_id=account_id), "ft_balance_of")

    async def storage_balance_of(self, account_id: str) -> Optional[StorageBalance]:
        value = await self._gateway.view("storage_balance_of", account_id=account_id)
        if value is None:
            return None
        try:
            return self._storage_schema.load(value)
        except ValidationError as error:
            raise GatewayUnavailable(f"storage_balance_of returned {value!r}.") from error

    async def storage_deposit(self, *, deposit: int = STORAGE_DEPOSIT):
        """Registers the signing account."""
        await self._gateway.change("storage_deposit", {}, deposit=deposit)

    async def storage_unregister(self, force: bool = True):
        """Unregisters the signing account. With force, any remaining balance is burned."""
        await self._gateway.change("storage_unregister", {"force": force}, deposit=ONE_YOCTO)

    async def ft_transfer(self, receiver_id: str, amount: int, memo: Optional[str] = None):
        args = {"receiver_id": receiver_id, "amount": str(amount)}
        if memo is not None:
            args["memo"] = memo
        await self._gateway.change("ft_transfer", args, deposit=ONE_YOCTO)

    async def ft_transfer_call(self, receiver_id: str, amount: int, msg: str) -> Optional[int]:
        """
        Transfers tokens to a contract and asks it to react to them with the given message.

        The receiving contract's reaction runs after the transfer, in a separate step the
        caller does not observe. If it fails, the token ledger refunds the sender.

        :return: The amount the receiver kept, as the token ledger reports it.
        """
        used = await self._gateway.change(
            "ft_transfer_call",
            {"receiver_id": receiver_id, "amount": str(amount), "msg": msg},
            deposit=ONE_YOCTO
        )
        return _integer(used, "ft_transfer_call") if used is not None else None
