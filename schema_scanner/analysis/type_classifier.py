# ==============================================
# TypeClassifier
# ==============================================
#
# PURPOSE:
#   Map one decoded BSON value to a type tag. Classification is
#   structural: any mapping is an "object", any list is an "array",
#   integers are split by the width they need on the wire.
#
# TAGS:
# -----
#   null, string, int32, int64, double, boolean, objectId, date,
#   array, object, binData, regex, decimal, timestamp,
#   unknown(<TypeName>) for everything else.
#
# classify() is total: it never raises.
#
# ==============================================

import datetime
import decimal
import re
import uuid
from collections.abc import Mapping
from typing import Any

from bson import Binary, Code, Decimal128, Int64, ObjectId, Regex, Timestamp
from bson.datetime_ms import DatetimeMS

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

NULL = "null"
STRING = "string"
INT32 = "int32"
INT64 = "int64"
DOUBLE = "double"
BOOLEAN = "boolean"
OBJECT_ID = "objectId"
DATE = "date"
ARRAY = "array"
OBJECT = "object"
BIN_DATA = "binData"
REGEX = "regex"
DECIMAL = "decimal"
TIMESTAMP = "timestamp"

TYPE_TAGS = frozenset({
    NULL, STRING, INT32, INT64, DOUBLE, BOOLEAN, OBJECT_ID, DATE,
    ARRAY, OBJECT, BIN_DATA, REGEX, DECIMAL, TIMESTAMP,
})


class TypeClassifier:
    # Order matters: bool is an int subclass, Int64 is an int subclass,
    # Binary is a bytes subclass.
    _SIMPLE_TYPES = (
        (bool, BOOLEAN),
        (Int64, INT64),
        (float, DOUBLE),
        (str, STRING),
        (ObjectId, OBJECT_ID),
        ((datetime.datetime, DatetimeMS), DATE),
        (Timestamp, TIMESTAMP),
        ((Decimal128, decimal.Decimal), DECIMAL),
        ((Binary, bytes, uuid.UUID), BIN_DATA),
        ((Regex, re.Pattern), REGEX),
    )

    @classmethod
    def classify(cls, value: Any) -> str:
        if value is None:
            return NULL

        # Code subclasses str but is not a string field
        if isinstance(value, Code):
            return cls._unknown(value)

        for python_type, tag in cls._SIMPLE_TYPES:
            if isinstance(value, python_type):
                return tag

        if isinstance(value, int):
            return INT32 if INT32_MIN <= value <= INT32_MAX else INT64

        if isinstance(value, Mapping):
            return OBJECT

        if isinstance(value, (list, tuple)):
            return ARRAY

        return cls._unknown(value)

    @staticmethod
    def _unknown(value: Any) -> str:
        return f"unknown({type(value).__name__})"

    @staticmethod
    def is_unknown(tag: str) -> bool:
        return tag.startswith("unknown(")


def classify(value: Any) -> str:
    """Shortcut for TypeClassifier.classify()."""
    return TypeClassifier.classify(value)
