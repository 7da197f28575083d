"""
Emulates a ledger network in memory. Contracts are deployed under an account id,
view calls run against their current state, and change calls produce the same
final outcome structure that a node returns.

A change call that panics leaves no trace in the contract that panicked, so
contracts check everything before they mutate. Calls into other contracts are
separate steps: if one panics, the steps before it stay committed.
"""
import asyncio
import json
from base64 import b64encode
from dataclasses import dataclass
from itertools import count
from typing import Dict, Any, FrozenSet

from bikeshare import logger


class ContractPanic(Exception):
    """Raised by a contract to abort the current call."""


@dataclass
class CallContext:
    network: "MemoryNetwork"
    current_account_id: str
    predecessor_id: str
    attached_deposit: int = 0


class Contract:
    view_methods: FrozenSet[str] = frozenset()
    change_methods: FrozenSet[str] = frozenset()


class MemoryNetwork:

    def __init__(self, latency: float = 0.0):
        """
        :param latency: How long each call waits before it runs, letting other calls interleave.
        """
        self.contracts: Dict[str, Contract] = {}
        self.latency = latency
        self._nonce = count(1)

    def deploy(self, contract_id: str, contract: Contract) -> Contract:
        self.contracts[contract_id] = contract
        return contract

    async def view(self, contract_id: str, method: str, args: Dict) -> Any:
        """
        Runs a view method.

        :raises ContractPanic: If the contract or method does not exist, or the method panics.
        """
        await asyncio.sleep(self.latency)
        contract = self._contract(contract_id)
        if method not in contract.view_methods:
            raise ContractPanic(f"MethodNotFound: {contract_id} has no view method {method}")
        context = CallContext(self, contract_id, "")
        return self._run(contract, method, context, args)

    async def call(self, signer_id: str, contract_id: str, method: str, args: Dict, *, gas: int, deposit: int) -> Dict:
        """Runs a signed change call, returning its final outcome."""
        await asyncio.sleep(self.latency)
        transaction = {
            "hash": f"tx{next(self._nonce)}",
            "signer_id": signer_id,
            "receiver_id": contract_id,
        }
        try:
            value = self.function_call(signer_id, contract_id, method, args, deposit)
        except ContractPanic as panic:
            logger.debug("%s.%s by %s panicked: %s", contract_id, method, signer_id, panic)
            return {
                "status": {"Failure": {"ActionError": {"index": 0, "kind": {
                    "FunctionCallError": {"ExecutionError": f"Smart contract panicked: {panic}"}
                }}}},
                "transaction": transaction,
            }

        encoded = b64encode(json.dumps(value).encode()).decode() if value is not None else ""
        return {"status": {"SuccessValue": encoded}, "transaction": transaction}

    def function_call(self, predecessor_id: str, contract_id: str, method: str, args: Dict, deposit: int = 0) -> Any:
        """
        Runs a change method on behalf of the predecessor, which is either
        the signer or the contract making a cross-contract call.

        :raises ContractPanic: If the call fails.
        """
        contract = self._contract(contract_id)
        if method not in contract.change_methods:
            raise ContractPanic(f"MethodNotFound: {contract_id} has no method {method}")
        context = CallContext(self, contract_id, predecessor_id, deposit)
        return self._run(contract, method, context, args)

    def _contract(self, contract_id) -> Contract:
        try:
            return self.contracts[contract_id]
        except KeyError:
            raise ContractPanic(f"Account {contract_id} does not exist")

    @staticmethod
    def _run(contract: Contract, method: str, context: CallContext, args: Dict) -> Any:
        try:
            value = getattr(contract, method)(context, **args)
        except TypeError as error:
            raise ContractPanic(f"Failed to deserialize input for {method}: {error}") from error
        # values leave the contract as JSON, exactly like on a real node
        return json.loads(json.dumps(value))
