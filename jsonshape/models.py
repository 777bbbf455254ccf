from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, NewType, Optional, Tuple, Union

# A datetime that always carries a zone offset once decoded.
DateTimeOffset = NewType("DateTimeOffset", datetime)

# ===== JSON AST =====

@dataclass(frozen=True)
class JsonNull:
    kind = "null"

@dataclass(frozen=True)
class JsonBoolean:
    value: bool
    kind = "boolean"

@dataclass(frozen=True)
class JsonNumber:
    """Integer literal, kept as its decimal text."""
    text: str
    kind = "number"

@dataclass(frozen=True)
class JsonFloat:
    """Literal with a fraction and/or exponent, kept as its decimal text."""
    text: str
    kind = "float"

@dataclass(frozen=True)
class JsonString:
    value: str
    kind = "string"

@dataclass(frozen=True)
class JsonArray:
    items: Tuple["JsonNode", ...] = ()
    kind = "array"

@dataclass(frozen=True)
class JsonRecord:
    pairs: Tuple[Tuple[str, "JsonNode"], ...] = ()
    kind = "record"

JsonNode = Union[JsonNull, JsonBoolean, JsonNumber, JsonFloat, JsonString, JsonArray, JsonRecord]

# ===== Shapes =====

class ScalarKind(str, Enum):
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    BYTE = "byte"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    SINGLE = "single"
    DOUBLE = "double"
    DECIMAL = "decimal"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    DATE_WITH_OFFSET = "date-with-offset"
    IDENTIFIER = "identifier"

INTEGER_KINDS = frozenset({
    ScalarKind.INT8, ScalarKind.INT16, ScalarKind.INT32, ScalarKind.INT64,
    ScalarKind.BYTE, ScalarKind.UINT16, ScalarKind.UINT32, ScalarKind.UINT64,
})
NUMERIC_KINDS = INTEGER_KINDS | {ScalarKind.SINGLE, ScalarKind.DOUBLE, ScalarKind.DECIMAL}


class SequenceKind(str, Enum):
    FIXED_ARRAY = "fixed-array"
    LINKED_LIST = "linked-list"
    LAZY = "lazy-iterable"


@dataclass(frozen=True)
class ScalarShape:
    kind: ScalarKind
    python_type: Any
    descriptor: Any = None

@dataclass(frozen=True)
class OptionalShape:
    inner: "Shape"
    descriptor: Any = None

@dataclass(frozen=True)
class SequenceShape:
    element: "Shape"
    representation: SequenceKind
    assemble: Callable[[list], Any] = field(compare=False)
    descriptor: Any = None

@dataclass(frozen=True)
class FieldSpec:
    name: str
    descriptor: Any
    required: bool = True

@dataclass(frozen=True)
class CompositeShape:
    cls: type
    fields: Tuple[FieldSpec, ...]
    descriptor: Any = None
    index: Dict[str, FieldSpec] = field(default_factory=dict, compare=False, hash=False)

    def field_named(self, name: str) -> Optional[FieldSpec]:
        return self.index.get(name)

    def construct(self, values: Dict[str, Any]) -> Any:
        """Build the instance from field values, passed in declared order."""
        ordered = {f.name: values[f.name] for f in self.fields if f.name in values}
        return self.cls(**ordered)

Shape = Union[ScalarShape, OptionalShape, SequenceShape, CompositeShape]
