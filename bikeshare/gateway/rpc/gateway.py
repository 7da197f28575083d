"""
RPC Gateway
-----------

View calls are ``query`` requests of type ``call_function`` posted to the
node's JSON-RPC endpoint. The arguments travel as base64 encoded JSON and
the return value comes back as an array of bytes holding JSON.

All requests to a node go through a circuit breaker. When the node keeps
failing, calls fail immediately with :class:`GatewayUnavailable` instead of
waiting on the transport, until the breaker lets a trial call through.
"""
import asyncio
import json
from base64 import b64encode
from datetime import timedelta
from itertools import count
from typing import Any, Dict, Optional

from aiobreaker import CircuitBreaker, CircuitBreakerError
from aiohttp import ClientSession, ClientError, ClientTimeout
from marshmallow import ValidationError

from bikeshare import logger
from bikeshare.gateway.gateway import LedgerGateway, GatewayUnavailable, RejectedByLedger
from bikeshare.serializer.json_rpc import JsonRPCRequest, JsonRPCResponse
from bikeshare.serializer.ledger import QueryResultSchema


def node_breaker() -> CircuitBreaker:
    """If the node fails 5 times in a row, stop calling it for 30 seconds."""
    return CircuitBreaker(fail_max=5, timeout_duration=timedelta(seconds=30))


class RpcLedgerGateway(LedgerGateway):
    """
    A gateway to a contract through a node's JSON-RPC interface.
    """

    _request_ids = count(1)

    def __init__(self, contract_id: str, wallet, rpc_url: str, *,
                 session: Optional[ClientSession] = None, breaker: Optional[CircuitBreaker] = None,
                 finality="final", timeout: timedelta = timedelta(seconds=30)):
        """
        :param session: A session to share with other gateways. One is created when needed otherwise.
        :param breaker: A breaker to share with other gateways talking to the same node.
        :param finality: The block the view calls are answered from.
        """
        super().__init__(contract_id, wallet)
        self.rpc_url = rpc_url
        self.finality = finality
        self._session = session
        self._owns_session = session is None
        self._breaker = breaker if breaker is not None else node_breaker()
        self._timeout = ClientTimeout(total=timeout.total_seconds())
        self._request_schema = JsonRPCRequest()
        self._response_schema = JsonRPCResponse()
        self._result_schema = QueryResultSchema()

    async def view(self, method: str, **args) -> Any:
        request = self._request_schema.dump({
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": "query",
            "params": {
                "request_type": "call_function",
                "finality": self.finality,
                "account_id": self.contract_id,
                "method_name": method,
                "args_base64": b64encode(json.dumps(args).encode()).decode(),
            },
        })

        payload = await self._post(request)

        try:
            response = self._response_schema.load(payload)
        except ValidationError as error:
            raise GatewayUnavailable(f"Malformed response to {method}: {error.messages}") from error

        if "error" in response:
            raise self._error_for(method, response["error"])

        try:
            result = self._result_schema.load(response["result"])
        except ValidationError as error:
            raise GatewayUnavailable(f"Malformed result for {method}: {error.messages}") from error

        if "error" in result:
            raise RejectedByLedger(result["error"])

        try:
            raw = bytes(result["result"])
            return json.loads(raw) if raw else None
        except ValueError as error:
            raise GatewayUnavailable(f"{method} did not return JSON.") from error

    async def close(self):
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def _post(self, request: Dict) -> Any:
        try:
            return await self._breaker.call_async(self._send, request)
        except CircuitBreakerError as error:
            raise GatewayUnavailable(f"{self.rpc_url} is failing, not calling it for now.") from error
        except (ClientError, asyncio.TimeoutError, ValueError) as error:
            raise GatewayUnavailable(f"Could not reach {self.rpc_url}: {error}") from error

    async def _send(self, request: Dict) -> Any:
        if self._session is None:
            self._session = ClientSession(timeout=self._timeout)

        async with self._session.post(self.rpc_url, json=request) as response:
            if response.status != 200:
                raise GatewayUnavailable(f"{self.rpc_url} responded {response.status} {response.reason}")
            return await response.json(content_type=None)

    @staticmethod
    def _error_for(method: str, error: Dict) -> Exception:
        """Handler errors are the ledger answering, anything else is the node failing."""
        cause = error.get("cause", {}).get("name")
        message = error.get("data") or error.get("message") or cause or "Unknown error"
        if not isinstance(message, str):
            message = json.dumps(message)

        logger.debug("%s failed with %s (%s)", method, error.get("name"), cause)
        if error.get("name") == "HANDLER_ERROR":
            return RejectedByLedger(message, cause)
        return GatewayUnavailable(message)
