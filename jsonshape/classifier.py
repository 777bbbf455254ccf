"""Type classifier: static type descriptor -> Shape.

Shapes are computed once per descriptor and memoized. Dataclass field
shapes are resolved lazily by the decoder, which keeps self-referential
types (``children: list["Node"]``) finite.
"""
from __future__ import annotations
import collections.abc
import dataclasses
import logging
import types
from functools import lru_cache
from typing import Any, List, Union, get_args, get_origin, get_type_hints

import numpy as np

from .errors import ShapeError
from .leaf import SCALAR_TYPES
from .models import (
    NUMERIC_KINDS, CompositeShape, FieldSpec, OptionalShape,
    ScalarKind, ScalarShape, SequenceKind, SequenceShape, Shape,
)

LOGGER = logging.getLogger("jsonshape.classifier")
LOGGER.addHandler(logging.NullHandler())

_NONE_TYPE = type(None)
_LAZY_ORIGINS = (
    collections.abc.Sequence,
    collections.abc.Iterable,
    collections.abc.Collection,
)


def describe(descriptor: Any) -> str:
    """Short human-readable name of a descriptor, for messages."""
    if get_origin(descriptor) is None and hasattr(descriptor, "__qualname__"):
        return descriptor.__qualname__
    if get_origin(descriptor) is None and hasattr(descriptor, "__name__"):
        return descriptor.__name__
    return (
        repr(descriptor)
        .replace("typing.", "")
        .replace("collections.abc.", "")
        .replace("numpy.", "np.")
    )


@lru_cache(maxsize=None)
def classify(descriptor: Any) -> Shape:
    shape = _classify(descriptor)
    LOGGER.debug("classified %s as %s", describe(descriptor), type(shape).__name__)
    return shape


def _classify(d: Any) -> Shape:
    origin = get_origin(d)

    # Optional sits outside every other shape
    if origin is Union or origin is types.UnionType:
        args = get_args(d)
        members = [a for a in args if a is not _NONE_TYPE]
        if len(members) != 1 or len(members) == len(args):
            raise ShapeError(f"{describe(d)}: only Optional[T] unions are supported")
        return OptionalShape(classify(members[0]), descriptor=d)

    if origin is None and d in SCALAR_TYPES:
        return ScalarShape(SCALAR_TYPES[d], d, descriptor=d)

    if origin is list:
        return SequenceShape(
            _single_element(d), SequenceKind.LINKED_LIST, list, descriptor=d
        )
    if origin is tuple:
        args = get_args(d)
        if len(args) != 2 or args[1] is not Ellipsis:
            raise ShapeError(f"{describe(d)}: only homogeneous tuple[T, ...] is supported")
        return SequenceShape(classify(args[0]), SequenceKind.FIXED_ARRAY, tuple, descriptor=d)
    if origin is np.ndarray:
        return _ndarray(d)
    if origin in _LAZY_ORIGINS:
        return SequenceShape(_single_element(d), SequenceKind.LAZY, tuple, descriptor=d)

    if isinstance(d, type) and dataclasses.is_dataclass(d):
        return _composite(d)

    raise ShapeError(f"{describe(d)} has no supported shape")


def _single_element(d: Any) -> Shape:
    args = get_args(d)
    if len(args) != 1:
        raise ShapeError(f"{describe(d)}: sequence element type is required")
    return classify(args[0])


def _ndarray(d: Any) -> SequenceShape:
    """NDArray[np.int32] -> 1-D fixed array of a numeric scalar."""
    args = get_args(d)
    dtype_args = get_args(args[-1]) if args else ()
    if len(dtype_args) != 1:
        raise ShapeError(f"{describe(d)}: ndarray dtype is required")
    element = classify(dtype_args[0])
    if (
        not isinstance(element, ScalarShape)
        or element.kind not in NUMERIC_KINDS
        or element.kind is ScalarKind.DECIMAL
    ):
        raise ShapeError(f"{describe(d)}: ndarray elements must be numeric scalars")
    dtype = np.dtype(element.python_type)

    def assemble(items: List[Any]) -> np.ndarray:
        return np.array(items, dtype=dtype)

    return SequenceShape(element, SequenceKind.FIXED_ARRAY, assemble, descriptor=d)


def _composite(cls: type) -> CompositeShape:
    try:
        hints = get_type_hints(cls)
    except NameError as e:
        raise ShapeError(f"{cls.__qualname__}: unresolved annotation ({e})") from e
    specs = []
    for f in dataclasses.fields(cls):
        # private and non-init fields are not visible to decoding
        if not f.init or f.name.startswith("_"):
            continue
        required = (
            f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        )
        specs.append(FieldSpec(f.name, hints.get(f.name, f.type), required))
    return CompositeShape(
        cls, tuple(specs), descriptor=cls, index={s.name: s for s in specs}
    )


def visible_fields(cls: type) -> List[str]:
    """Names of the fields a dataclass exchanges with JSON, in declared order."""
    return [
        f.name for f in dataclasses.fields(cls)
        if f.init and not f.name.startswith("_")
    ]
