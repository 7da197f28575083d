"""
Model Schemas
-------------

Serializes the orchestrator's projection so that the command line
(or any other renderer) can print it as JSON.
"""

from marshmallow import Schema, fields

from bikeshare.models import BikeStatus, ModeName, TransactionKind
from .fields import U128, EnumField


class BikeSchema(Schema):
    index = fields.Integer()
    available = fields.Boolean()
    user = fields.String(allow_none=True)
    inspector = fields.String(allow_none=True)
    status = EnumField(BikeStatus)


class TokenAccountSchema(Schema):
    account_id = fields.String()
    balance = U128()


class WorkflowModeSchema(Schema):
    name = EnumField(ModeName)
    kind = EnumField(TransactionKind, allow_none=True)
    index = fields.Integer(allow_none=True)


class AccountSchema(Schema):
    account_id = fields.String()
    signed_in = fields.Boolean()
    registered = fields.Boolean()


class ClientViewSchema(Schema):
    mode = fields.Nested(WorkflowModeSchema())
    account = fields.Nested(AccountSchema())
    fee = U128(attribute="fee.amount_to_use_bike", allow_none=True)
    bikes = fields.List(fields.Nested(BikeSchema()), attribute="fleet")
    balance = fields.Nested(TokenAccountSchema(), allow_none=True)
