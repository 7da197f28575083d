"""
Fleet Gateway
-------------

The typed methods of the fleet ledger contract, which keeps each bike
in one of three states: available, in use by an account, or being
inspected by an account.
"""
from typing import Optional

from marshmallow import ValidationError

from bikeshare.serializer.fields import U128
from .gateway import LedgerGateway, GatewayUnavailable


class FleetGateway:

    def __init__(self, gateway: LedgerGateway):
        self._gateway = gateway

    @property
    def contract_id(self) -> str:
        return self._gateway.contract_id

    async def num_of_bikes(self) -> int:
        return _integer(await self._gateway.view("num_of_bikes"), "num_of_bikes")

    async def is_available(self, index: int) -> bool:
        value = await self._gateway.view("is_available", index=index)
        if not isinstance(value, bool):
            raise GatewayUnavailable(f"is_available returned {value!r}, not a bool.")
        return value

    async def who_is_using(self, index: int) -> Optional[str]:
        return _account(await self._gateway.view("who_is_using", index=index), "who_is_using")

    async def who_is_inspecting(self, index: int) -> Optional[str]:
        return _account(await self._gateway.view("who_is_inspecting", index=index), "who_is_inspecting")

    async def amount_to_use_bike(self) -> int:
        return _integer(await self._gateway.view("amount_to_use_bike"), "amount_to_use_bike")

    async def inspect_bike(self, index: int):
        await self._gateway.change("inspect_bike", {"index": index})

    async def return_bike(self, index: int):
        await self._gateway.change("return_bike", {"index": index})


def _integer(value, method) -> int:
    try:
        return U128().deserialize(value)
    except ValidationError as error:
        raise GatewayUnavailable(f"{method} returned {value!r}, not an integer.") from error


def _account(value, method) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise GatewayUnavailable(f"{method} returned {value!r}, not an account id.")
    return value
