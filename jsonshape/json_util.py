"""JSON text <-> AST bridge.

Parsing uses the stdlib tokenizer with hooks so number literals keep their
decimal text and objects keep their key order (duplicates included).
Rendering uses orjson; numbers are written back verbatim as fragments.
"""
from __future__ import annotations
import json
from typing import Any, List, Tuple, Union

import orjson

from .errors import DecodeError
from .models import (
    JsonArray, JsonBoolean, JsonFloat, JsonNode, JsonNull,
    JsonNumber, JsonRecord, JsonString,
)


def _reject_constant(name: str):
    raise DecodeError(f"non-standard JSON constant {name} is not allowed", actual=name)


def _record(pairs: List[Tuple[str, Any]]) -> JsonRecord:
    return JsonRecord(tuple((k, _lift(v)) for k, v in pairs))


def _lift(value: Any) -> JsonNode:
    # numbers and objects arrive as nodes already (hooks); the rest is raw
    if isinstance(value, (JsonNumber, JsonFloat, JsonRecord)):
        return value
    if value is None:
        return JsonNull()
    if value is True or value is False:
        return JsonBoolean(value)
    if isinstance(value, str):
        return JsonString(value)
    if isinstance(value, list):
        return JsonArray(tuple(_lift(v) for v in value))
    raise TypeError(f"unexpected parser value {type(value).__name__}")


def parse(source: Union[str, bytes, bytearray]) -> JsonNode:
    """JSON text -> AST node. Malformed text is reported as DecodeError."""
    try:
        raw = json.loads(
            source,
            parse_int=JsonNumber,
            parse_float=JsonFloat,
            parse_constant=_reject_constant,
            object_pairs_hook=_record,
        )
        return _lift(raw)
    except json.JSONDecodeError as e:
        raise DecodeError(f"malformed JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    except UnicodeDecodeError as e:
        raise DecodeError(f"malformed JSON: {e.reason} at byte {e.start}") from e
    except RecursionError as e:
        raise DecodeError("JSON nesting too deep to parse") from e


# ---------------------------------------------------------------------------

def _utf8(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _escaped(text: str) -> orjson.Fragment:
    # lone surrogates survive parsing but orjson refuses them; write them as \u escapes
    return orjson.Fragment(json.dumps(text))


def _plain(node: JsonNode) -> Any:
    if isinstance(node, JsonNull):
        return None
    if isinstance(node, JsonBoolean):
        return node.value
    if isinstance(node, (JsonNumber, JsonFloat)):
        return orjson.Fragment(node.text)
    if isinstance(node, JsonString):
        return node.value if _utf8(node.value) else _escaped(node.value)
    if isinstance(node, JsonArray):
        return [_plain(n) for n in node.items]
    if isinstance(node, JsonRecord):
        if all(_utf8(name) for name, _ in node.pairs):
            return {name: _plain(n) for name, n in node.pairs}
        members = (
            f"{json.dumps(name)}:{orjson.dumps(_plain(n)).decode()}" for name, n in node.pairs
        )
        return orjson.Fragment("{" + ",".join(members) + "}")
    raise TypeError(f"not a JSON node: {type(node).__name__}")


def dumps(node: JsonNode, pretty: bool = False) -> str:
    option = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(_plain(node), option=option).decode()
