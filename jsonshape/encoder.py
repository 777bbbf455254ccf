"""Value-directed encoder: any runtime value -> JSON AST -> text.

Mirror image of the decoder, but the dispatch looks at the runtime value
rather than a declared type. Inputs must be acyclic trees; a value that
contains itself recurses until Python raises RecursionError.
"""
from __future__ import annotations
import dataclasses
import logging
import math
import uuid
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from . import json_util, leaf
from .classifier import visible_fields
from .config import CODEC_CONFIG
from .models import (
    JsonArray, JsonBoolean, JsonFloat, JsonNode, JsonNull, JsonNumber,
    JsonRecord, JsonString,
)

LOGGER = logging.getLogger("jsonshape.encoder")
LOGGER.addHandler(logging.NullHandler())

_NULL = JsonNull()


def _public_attributes(value: Any) -> List[Tuple[str, Any]]:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        names = visible_fields(type(value))
    elif hasattr(value, "__dict__"):
        names = list(vars(value))
    else:
        names = [
            name for klass in reversed(type(value).__mro__)
            for name in getattr(klass, "__slots__", ())
            if hasattr(value, name)
        ]
    return [(n, getattr(value, n)) for n in names if not n.startswith("_")]


class JsonEncoder:
    def __init__(self, pretty: Optional[bool] = None, config: Optional[Dict[str, Any]] = None):
        self.config = config or CODEC_CONFIG
        self.pretty = self.config["pretty"] if pretty is None else pretty

    def encode(self, value: Any) -> str:
        return json_util.dumps(self.encode_node(value), pretty=self.pretty)

    def encode_node(self, value: Any) -> JsonNode:
        # bool is an int subclass; keep it out of the integer family
        if isinstance(value, (bool, np.bool_)):
            return JsonBoolean(bool(value))
        if isinstance(value, (int, np.integer)):
            return JsonNumber(str(int(value)))
        if isinstance(value, Decimal):
            return JsonFloat(str(value)) if value.is_finite() else _NULL
        if isinstance(value, (float, np.floating)):
            # NaN / Infinity have no JSON spelling
            if not math.isfinite(value):
                return _NULL
            return JsonFloat(repr(value) if type(value) is float else str(value))
        if isinstance(value, str):
            return JsonString(value)
        if isinstance(value, uuid.UUID):
            return JsonString(str(value))
        if isinstance(value, datetime):
            if value.tzinfo is None and leaf.is_midnight(value):
                return JsonString(leaf.format_date(value))
            return JsonString(leaf.format_round_trip(value))
        if isinstance(value, date):
            return JsonString(leaf.format_date(value))
        if value is None:
            return _NULL
        if isinstance(value, Mapping):
            return JsonRecord(tuple((str(k), self.encode_node(v)) for k, v in value.items()))
        if isinstance(value, Iterable):
            return JsonArray(tuple(self.encode_node(v) for v in value))

        LOGGER.debug("encoding %s as a record", type(value).__qualname__)
        return JsonRecord(
            tuple((name, self.encode_node(v)) for name, v in _public_attributes(value))
        )


def encode(value: Any, pretty: Optional[bool] = None) -> str:
    return JsonEncoder(pretty=pretty).encode(value)


def encode_node(value: Any) -> JsonNode:
    return JsonEncoder().encode_node(value)
