"""Untyped decoding: JSON -> nested dict / list / primitives."""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Union

from . import json_util
from .config import CODEC_CONFIG
from .errors import DecodeError
from .models import (
    JsonArray, JsonBoolean, JsonFloat, JsonNode, JsonNull, JsonNumber,
    JsonRecord, JsonString,
)

LOGGER = logging.getLogger("jsonshape.dynamic")
LOGGER.addHandler(logging.NullHandler())


class DynamicDecoder:
    def __init__(self, max_depth: Optional[int] = None, config: Optional[Dict[str, Any]] = None):
        self.config = config or CODEC_CONFIG
        self.max_depth = self.config["max_depth"] if max_depth is None else max_depth

    def decode(self, source: Union[str, bytes, bytearray, JsonNode]) -> Dict[str, Any]:
        """Top level must be a JSON object."""
        node = json_util.parse(source) if isinstance(source, (str, bytes, bytearray)) else source
        if not isinstance(node, JsonRecord):
            raise DecodeError(
                "input JSON could not be decoded to an object", expected="record", actual=node.kind
            )
        return self.decode_value(node)

    def decode_value(self, node: JsonNode) -> Any:
        try:
            return self._convert(node, "$", 0)
        except RecursionError as e:
            raise DecodeError("JSON nesting too deep") from e

    def _convert(self, node: JsonNode, path: str, depth: int) -> Any:
        if depth > self.max_depth:
            raise DecodeError(f"nesting deeper than {self.max_depth} levels", path)
        if isinstance(node, JsonNull):
            return None
        if isinstance(node, (JsonBoolean, JsonString)):
            return node.value
        if isinstance(node, JsonNumber):
            try:
                return int(node.text)
            except ValueError as e:
                # interpreter limit on integer string conversion
                raise DecodeError(f"integer literal too long: {e}", path, actual="number") from e
        if isinstance(node, JsonFloat):
            return float(node.text)
        if isinstance(node, JsonArray):
            return [self._convert(n, f"{path}[{i}]", depth + 1) for i, n in enumerate(node.items)]
        if isinstance(node, JsonRecord):
            out: Dict[str, Any] = {}
            for name, child in node.pairs:
                if name in out:
                    raise DecodeError(f"duplicate key {name!r}", f"{path}.{name}", actual=name)
                out[name] = self._convert(child, f"{path}.{name}", depth + 1)
            return out
        raise TypeError(f"not a JSON node: {type(node).__name__}")


def decode_dynamic(source: Union[str, bytes, bytearray, JsonNode], **kwargs) -> Dict[str, Any]:
    return DynamicDecoder(**kwargs).decode(source)
