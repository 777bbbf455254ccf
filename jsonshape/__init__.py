"""jsonshape - reflection-driven JSON <-> typed structure interchange."""

__version__ = "0.1.0"
__author__ = "YC Math"

from .models import (
    DateTimeOffset,
    JsonNull,
    JsonBoolean,
    JsonNumber,
    JsonFloat,
    JsonString,
    JsonArray,
    JsonRecord,
    ScalarKind,
    SequenceKind,
    OptionalShape,
    SequenceShape,
    ScalarShape,
    CompositeShape,
)
from .errors import JsonShapeError, DecodeError, ShapeError
from .classifier import classify
from .decoder import TypedDecoder, decode_typed
from .encoder import JsonEncoder, encode, encode_node
from .dynamic import DynamicDecoder, decode_dynamic

__all__ = [
    "DateTimeOffset",
    "JsonNull",
    "JsonBoolean",
    "JsonNumber",
    "JsonFloat",
    "JsonString",
    "JsonArray",
    "JsonRecord",
    "ScalarKind",
    "SequenceKind",
    "OptionalShape",
    "SequenceShape",
    "ScalarShape",
    "CompositeShape",
    "JsonShapeError",
    "DecodeError",
    "ShapeError",
    "classify",
    "TypedDecoder",
    "decode_typed",
    "JsonEncoder",
    "encode",
    "encode_node",
    "DynamicDecoder",
    "decode_dynamic",
]
