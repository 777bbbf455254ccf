"""Type-directed decoder: JSON AST + target descriptor -> typed value.

Dispatch is on the JSON node kind first and on the classified target shape
second. The first mismatch raises :class:`DecodeError`; a composite is only
constructed once all of its fields decoded, so no partially built value is
ever returned.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Union

from . import json_util, leaf
from .classifier import classify, describe
from .config import CODEC_CONFIG
from .errors import DecodeError, LeafConversionError
from .models import (
    CompositeShape, JsonArray, JsonBoolean, JsonFloat, JsonNode, JsonNull,
    JsonNumber, JsonRecord, JsonString, OptionalShape, ScalarKind,
    ScalarShape, SequenceShape, Shape,
)

LOGGER = logging.getLogger("jsonshape.decoder")
LOGGER.addHandler(logging.NullHandler())

_CATEGORY = {
    ScalarKind.STRING: "string",
    ScalarKind.BOOLEAN: "boolean",
    ScalarKind.DATE: "date",
    ScalarKind.DATE_WITH_OFFSET: "date time offset",
    ScalarKind.IDENTIFIER: "identifier",
}


def _label(shape: Shape) -> str:
    """'numeric (int)', 'record (Person)', ... for error messages."""
    if isinstance(shape, OptionalShape):
        shape = shape.inner
    if isinstance(shape, ScalarShape):
        category = "numeric" if leaf.is_numeric(shape) else _CATEGORY[shape.kind]
    elif isinstance(shape, SequenceShape):
        category = "sequence"
    else:
        category = "record"
    return f"{category} ({describe(shape.descriptor)})"


class TypedDecoder:
    def __init__(
        self,
        max_depth: Optional[int] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.config = config or CODEC_CONFIG
        self.max_depth = self.config["max_depth"] if max_depth is None else max_depth

    def decode(self, target: Any, source: Union[str, bytes, bytearray, JsonNode]) -> Any:
        """Decode JSON text (or an already parsed node) into ``target``.

        Raises ShapeError when ``target`` has no supported shape and
        DecodeError when the JSON does not match it.
        """
        shape = classify(target)
        node = json_util.parse(source) if isinstance(source, (str, bytes, bytearray)) else source
        LOGGER.debug("decoding %s into %s", node.kind, describe(target))
        try:
            return self._convert(shape, node, "$", 0)
        except DecodeError as e:
            LOGGER.debug("decode into %s failed: %s", describe(target), e)
            raise
        except RecursionError as e:
            raise DecodeError("JSON nesting too deep", expected=_label(shape)) from e

    # ------------------------------------------------------------------
    def _convert(self, shape: Shape, node: JsonNode, path: str, depth: int) -> Any:
        if depth > self.max_depth:
            raise DecodeError(f"nesting deeper than {self.max_depth} levels", path)

        if isinstance(node, JsonNull):
            if isinstance(shape, OptionalShape):
                return None
            raise DecodeError(
                f"expected non-null {_label(shape)}", path, _label(shape), node.kind
            )

        target = shape.inner if isinstance(shape, OptionalShape) else shape
        if isinstance(node, JsonString):
            return self._string(shape, target, node.value, path)
        if isinstance(node, (JsonNumber, JsonFloat)):
            if not leaf.is_numeric(shape):
                raise self._mismatch(shape, node, path)
            return self._leaf(
                shape, path, node.text, leaf.to_number, target.kind, target.python_type, node.text
            )
        if isinstance(node, JsonBoolean):
            if not leaf.is_boolean(shape):
                raise self._mismatch(shape, node, path)
            return leaf.to_boolean(target.python_type, node.value)
        if isinstance(node, JsonArray):
            if not isinstance(target, SequenceShape):
                raise self._mismatch(shape, node, path)
            items = [
                self._convert(target.element, item, f"{path}[{i}]", depth + 1)
                for i, item in enumerate(node.items)
            ]
            return target.assemble(items)
        if isinstance(node, JsonRecord):
            if not isinstance(target, CompositeShape):
                raise self._mismatch(shape, node, path)
            return self._record(target, node, path, depth)
        raise TypeError(f"not a JSON node: {type(node).__name__}")

    def _string(self, shape: Shape, target: Shape, text: str, path: str) -> Any:
        if leaf.is_string(shape):
            return text
        if leaf.is_date(shape):
            return self._leaf(shape, path, text, leaf.parse_date, text, target.python_type)
        if leaf.is_date_with_offset(shape):
            return self._leaf(shape, path, text, leaf.parse_date_with_offset, text)
        if leaf.is_identifier(shape):
            return self._leaf(shape, path, text, leaf.parse_identifier, text)
        raise self._mismatch(shape, JsonString(text), path)

    def _record(self, target: CompositeShape, node: JsonRecord, path: str, depth: int) -> Any:
        name_of = describe(target.cls)
        values: Dict[str, Any] = {}
        for name, child in node.pairs:
            child_path = f"{path}.{name}"
            spec = target.field_named(name)
            if spec is None:
                raise DecodeError(
                    f"{name_of} has no such field {name!r}", child_path, _label(target), name
                )
            if name in values:
                raise DecodeError(f"duplicate field {name!r}", child_path, _label(target), name)
            values[name] = self._convert(classify(spec.descriptor), child, child_path, depth + 1)

        missing = [f.name for f in target.fields if f.required and f.name not in values]
        if missing:
            raise DecodeError(
                f"missing field(s) {', '.join(missing)} for {name_of}", path, _label(target)
            )
        try:
            return target.construct(values)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"constructing {name_of} failed: {e}", path, _label(target)) from e

    # ------------------------------------------------------------------
    @staticmethod
    def _leaf(shape: Shape, path: str, text: str, fn, *args) -> Any:
        try:
            return fn(*args)
        except LeafConversionError as e:
            raise DecodeError(f"expected {_label(shape)}, {e}", path, _label(shape), text) from e

    @staticmethod
    def _mismatch(shape: Shape, node: JsonNode, path: str) -> DecodeError:
        return DecodeError(
            f"expected {_label(shape)}, got {node.kind}", path, _label(shape), node.kind
        )


def decode_typed(target: Any, source: Union[str, bytes, bytearray, JsonNode], **kwargs) -> Any:
    """``decode_typed(Person, text)`` -> Person instance."""
    return TypedDecoder(**kwargs).decode(target, source)
