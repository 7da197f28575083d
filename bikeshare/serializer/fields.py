"""
Fields
-------

Defines some additional fields so that the Schemas can
serialize to and from additional native python data types.
"""

from enum import Enum
from typing import Union, Optional, Type

from marshmallow import fields, ValidationError


class U128(fields.Field):
    """
    A field for the ledgers' 128 bit unsigned integers, which travel as
    decimal strings since they do not fit in a JSON number.
    """

    def _serialize(self, value: Optional[int], attr, obj, **kwargs) -> Optional[str]:
        if value is None:
            return None
        return str(int(value))

    def _deserialize(self, value: Union[str, int], attr, data, **kwargs) -> int:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValidationError(f"Only accepts type str or int, not {type(value)}")
        try:
            number = int(value)
        except ValueError:
            raise ValidationError(f"String {value} is not a decimal integer.")
        if not 0 <= number < 2 ** 128:
            raise ValidationError(f"{number} does not fit in an unsigned 128 bit integer.")
        return number


class EnumField(fields.Field):
    """
    A field that serializes an :class:`~enum.Enum` to a :class:`str` and back.
    """

    def __init__(self, enum_type: Type[Enum], *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not issubclass(enum_type, Enum):
            raise ValidationError(f"Expected enum type, got {type(enum_type)} instead")
        self._enum_type = enum_type

    def _serialize(self, value: Union[Enum, str], attr, obj, **kwargs):
        if isinstance(value, self._enum_type):
            return value.value
        if isinstance(value, str) and value in (enum.value for enum in self._enum_type):
            return value
        return None

    def _deserialize(self, value: str, attr, data, **kwargs) -> Enum:
        try:
            return self._enum_type(value)
        except ValueError:
            raise ValidationError(f"Field does not exist on {self._enum_type}.")
