"""
Ledger
------

Schemas for the values inside the node responses: the result of a
``call_function`` query, the storage balance record of the token
ledger, and the final outcome of a signed change call.
"""

from typing import Any, Optional

from marshmallow import Schema, fields, post_load, EXCLUDE

from bikeshare.models import StorageBalance
from .fields import U128


class QueryResultSchema(Schema):
    """
    The result of a view call. The return value is the raw bytes of the
    JSON the contract produced. Older nodes report a contract panic in an
    ``error`` string here rather than as a JSON-RPC error.
    """

    class Meta:
        unknown = EXCLUDE

    result = fields.List(fields.Integer(), load_default=list)
    logs = fields.List(fields.String(), load_default=list)
    block_height = fields.Integer()
    block_hash = fields.String()
    error = fields.String()


class StorageBalanceSchema(Schema):

    class Meta:
        unknown = EXCLUDE

    total = U128(required=True)
    available = U128(required=True)

    @post_load
    def make_storage_balance(self, data, **kwargs):
        return StorageBalance(**data)


class ExecutionOutcomeSchema(Schema):
    """
    The final outcome of a transaction. ``status`` is a single key mapping,
    either ``SuccessValue`` (base64 of the return value) or ``Failure``.
    """

    class Meta:
        unknown = EXCLUDE

    status = fields.Dict(required=True)
    transaction = fields.Dict()
    transaction_outcome = fields.Dict()
    receipts_outcome = fields.List(fields.Dict())


def describe_failure(failure: Any) -> Optional[str]:
    """
    Digs the human readable message out of a nested failure structure, such as
    ``{"ActionError": {"kind": {"FunctionCallError": {"ExecutionError": "..."}}}}``.
    """
    if isinstance(failure, str):
        return failure
    if isinstance(failure, dict):
        for key, value in failure.items():
            if key == "index":
                continue
            message = describe_failure(value)
            if message is not None:
                return message
        return None
    if isinstance(failure, list):
        for item in failure:
            message = describe_failure(item)
            if message is not None:
                return message
    return None
