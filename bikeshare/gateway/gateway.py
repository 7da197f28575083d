"""
This module hosts the base class for all ledger gateways.

View calls are implemented by each gateway, change calls are the same for
all of them: the wallet signs and broadcasts the call, and the final
outcome it hands back is checked here.
"""
import asyncio
import json
from abc import ABC, abstractmethod
from base64 import b64decode
from binascii import Error as Base64Error
from typing import Any, Dict, Optional

from aiohttp import ClientError
from marshmallow import ValidationError

from bikeshare import logger
from bikeshare.serializer.ledger import ExecutionOutcomeSchema, describe_failure

GAS = 300_000_000_000_000
"""The gas budget attached to every change call (300 Tgas)."""

ONE_YOCTO = 1
"""Token ledger calls that move value require exactly one yoctoNEAR attached."""

STORAGE_DEPOSIT = 1_250_000_000_000_000_000_000
"""The deposit paid to register storage on the token ledger (0.00125 NEAR)."""


class GatewayError(Exception):
    """Base class for failures reaching or using a ledger."""


class GatewayUnavailable(GatewayError):
    """The call could not be completed, nothing is known about whether it had an effect."""


class RejectedByLedger(GatewayError):
    """The ledger processed the call and refused it."""

    def __init__(self, message, cause: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


outcome_schema = ExecutionOutcomeSchema()


def check_outcome(outcome: Dict) -> Any:
    """
    Checks the final outcome of a change call, returning the decoded return value.

    :raises RejectedByLedger: If the transaction failed on the ledger.
    :raises GatewayUnavailable: If the outcome is not understood.
    """
    try:
        outcome = outcome_schema.load(outcome)
    except ValidationError as error:
        raise GatewayUnavailable(f"Malformed transaction outcome: {error.messages}") from error

    status = outcome["status"]
    if "Failure" in status:
        message = describe_failure(status["Failure"]) or json.dumps(status["Failure"])
        raise RejectedByLedger(message)

    if "SuccessValue" in status:
        try:
            raw = b64decode(status["SuccessValue"] or "")
            return json.loads(raw) if raw else None
        except (Base64Error, ValueError) as error:
            raise GatewayUnavailable("Could not decode the transaction's return value.") from error

    if "SuccessReceiptId" in status:
        return None

    raise GatewayUnavailable(f"Transaction did not complete: {status}")


class LedgerGateway(ABC):
    """The gateway to a single contract on a ledger."""

    def __init__(self, contract_id: str, wallet):
        self.contract_id = contract_id
        self._wallet = wallet

    @abstractmethod
    async def view(self, method: str, **args) -> Any:
        """
        Calls a view method, returning the decoded JSON value (``None`` for no record).

        :raises GatewayUnavailable: When the call did not return.
        :raises RejectedByLedger: When the contract refused the call.
        """

    async def change(self, method: str, args: Optional[Dict] = None, *, gas: int = GAS, deposit: int = 0) -> Any:
        """
        Signs and sends a change call through the wallet, waiting for its final outcome.

        :raises GatewayUnavailable: When the call could not be sent, or the outcome is unknown.
        :raises RejectedByLedger: When the transaction failed on the ledger.
        """
        args = args if args is not None else {}
        logger.debug("Calling %s.%s(%s) with %s attached", self.contract_id, method, args, deposit)

        try:
            outcome = await self._wallet.sign_and_send(self.contract_id, method, args, gas, deposit)
        except (ClientError, asyncio.TimeoutError, ConnectionError) as error:
            raise GatewayUnavailable(f"Could not send {method} to {self.contract_id}.") from error

        return check_outcome(outcome)

    async def close(self):
        """Releases any connections held by the gateway."""
