"""
.. autoclasstree:: bikeshare.serializer

The serializer package houses all the schemas for the data going in and out
of the client: the JSON-RPC envelopes spoken to the ledger nodes, the ledger
values inside them, and the projection handed to the command line.
"""

from .fields import U128, EnumField
from .json_rpc import JsonRPCRequest, JsonRPCResponse, ErrorObject
from .ledger import QueryResultSchema, StorageBalanceSchema, ExecutionOutcomeSchema, describe_failure
from .models import BikeSchema, TokenAccountSchema, WorkflowModeSchema, ClientViewSchema
