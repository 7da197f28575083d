"""
JSON RPC
--------

JSON RPC is a light remote procedure calling protocol, and the one the
ledger nodes speak over HTTP. Every view call is a ``query`` request
whose ``params`` name the contract, the method and its base64 encoded
JSON arguments. A response carries either a ``result`` or an ``error``.
"""

from marshmallow import Schema, fields, validates_schema, ValidationError, EXCLUDE


class JsonRPCRequest(Schema):
    jsonrpc = fields.String(required=True)
    method = fields.String(required=True)
    params = fields.Raw()
    id = fields.Raw(required=True)


class ErrorObject(Schema):
    """
    The error object. Nodes put the error class in ``name`` and the
    specific reason (with ``info``) in ``cause``.
    """

    class Meta:
        unknown = EXCLUDE

    name = fields.String()
    cause = fields.Dict()
    code = fields.Int()
    message = fields.String()
    data = fields.Raw()


class JsonRPCResponse(Schema):

    class Meta:
        unknown = EXCLUDE

    jsonrpc = fields.String(required=True)
    id = fields.Raw(required=True)
    result = fields.Raw()
    error = fields.Nested(ErrorObject())

    @validates_schema
    def assert_fields(self, data, **kwargs):
        """A response holds exactly one of ``result`` and ``error``."""
        if ("result" in data) == ("error" in data):
            raise ValidationError("A response must contain exactly one of result or error.")
