"""
tests/test_decoder.py
─────────────────────
Type-directed decode: node-kind × shape dispatch, fail-fast errors with
paths, missing / unknown / duplicate fields.
"""
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt
import pytest

from jsonshape import DecodeError, ShapeError, TypedDecoder, decode_typed
from jsonshape.json_util import parse

from sample_types import (
    Contact, Containers, Event, Node, Person, Positive, Widths, WithPrivate,
)


# ── scenarios ────────────────────────────────────────────────

def test_record_into_dataclass():
    assert decode_typed(Person, '{"name":"Alice","age":30}') == Person("Alice", 30)


def test_json_order_does_not_matter():
    assert decode_typed(Person, '{"age":30,"name":"Alice"}') == Person("Alice", 30)


def test_dates():
    assert decode_typed(datetime, '"2020-01-02"') == datetime(2020, 1, 2)
    stamp = decode_typed(datetime, '"2020-01-02T03:04:05.000Z"')
    assert stamp == datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert stamp.utcoffset() == timedelta(0)
    assert decode_typed(date, '"2020-01-02"') == date(2020, 1, 2)


def test_null_into_optional_and_plain():
    assert decode_typed(Optional[int], "null") is None
    with pytest.raises(DecodeError, match="expected non-null"):
        decode_typed(int, "null")


def test_string_into_int_cites_both_sides():
    with pytest.raises(DecodeError) as exc:
        decode_typed(Positive, '{"value":"notanumber"}')
    err = exc.value
    assert err.path == "$.value"
    assert "numeric" in err.expected
    assert err.actual == "string"
    assert str(err) == "$.value: expected numeric (int), got string"


def test_order_preserved():
    assert decode_typed(List[int], "[1,2,3]") == [1, 2, 3]
    assert decode_typed(Tuple[int, ...], "[3,2,1]") == (3, 2, 1)


# ── scalars ──────────────────────────────────────────────────

def test_all_numeric_widths():
    text = (
        '{"i8":-128,"i16":32767,"i32":-5,"i64":9007199254740993,"u8":255,'
        '"u16":65535,"u32":4294967295,"u64":18446744073709551615,'
        '"f32":0.5,"f64":1.25,"dec":0.10000000000000000001}'
    )
    w = decode_typed(Widths, text)
    assert type(w.i8) is np.int8 and w.i8 == -128
    assert type(w.u8) is np.uint8 and w.u8 == 255
    assert w.i64 == 9007199254740993
    assert type(w.f32) is np.float32 and w.f32 == 0.5
    assert w.f64 == 1.25
    assert w.dec == Decimal("0.10000000000000000001")


def test_numeric_overflow_fails():
    with pytest.raises(DecodeError, match="overflows"):
        decode_typed(np.uint8, "256")
    with pytest.raises(DecodeError, match="not an integral"):
        decode_typed(int, "1.5")


def test_float_into_integer_when_integral():
    assert decode_typed(np.int32, "7.0") == 7


def test_integer_into_float_kinds():
    assert decode_typed(float, "3") == 3.0
    assert decode_typed(Decimal, "3") == Decimal(3)


def test_identifier_and_offset():
    e = decode_typed(
        Event,
        '{"id":"6f1c3a9e-2b4d-4c8e-9f00-123456789abc",'
        '"at":"2021-06-01T10:00:00.5+02:00","logged":"2021-06-01"}',
    )
    assert e.id == uuid.UUID("6f1c3a9e-2b4d-4c8e-9f00-123456789abc")
    assert e.at.utcoffset() == timedelta(hours=2)
    assert e.at.microsecond == 500000
    assert e.logged == datetime(2021, 6, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("target, text, needle", [
    (uuid.UUID, '"not-a-guid"', '"not-a-guid"'),
    (datetime, '"yesterday"', '"yesterday"'),
])
def test_scalar_parse_failure_cites_raw_text(target, text, needle):
    with pytest.raises(DecodeError) as exc:
        decode_typed(target, text)
    assert needle in str(exc.value)
    assert exc.value.actual == text.strip('"')


@pytest.mark.parametrize("target, text, actual", [
    (bool, "1", "number"),
    (int, "true", "boolean"),
    (str, "1", "number"),
    (int, '"1"', "string"),
    (bool, '"true"', "string"),
    (str, "[]", "array"),
    (List[int], "{}", "record"),
    (Person, "[]", "array"),
    (float, "{}", "record"),
])
def test_kind_mismatch(target, text, actual):
    with pytest.raises(DecodeError, match=f"got {actual}"):
        decode_typed(target, text)


# ── containers ───────────────────────────────────────────────

def test_container_representations():
    c = decode_typed(
        Containers,
        '{"fixed":[1,2],"linked":[3],"lazy":[4,5],"maybe":[6,null]}',
    )
    assert c.fixed == (1, 2)
    assert c.linked == [3]
    assert tuple(c.lazy) == (4, 5)
    assert c.maybe == [6, None]


def test_optional_sequence_null():
    c = decode_typed(Containers, '{"fixed":[],"linked":[],"lazy":[],"maybe":null}')
    assert c.maybe is None


def test_null_element_in_plain_sequence_fails():
    with pytest.raises(DecodeError) as exc:
        decode_typed(List[int], "[1,null]")
    assert exc.value.path == "$[1]"


def test_ndarray_target():
    arr = decode_typed(npt.NDArray[np.uint16], "[1,2,65535]")
    assert arr.dtype == np.uint16
    assert arr.tolist() == [1, 2, 65535]
    assert decode_typed(npt.NDArray[np.float32], "[]").shape == (0,)


def test_lazy_targets_materialize():
    assert decode_typed(Iterable[str], '["a","b"]') == ("a", "b")
    assert decode_typed(Sequence[Optional[int]], "[null]") == (None,)


def test_recursive_dataclass():
    tree = decode_typed(Node, '{"label":"a","children":[{"label":"b","children":[]}]}')
    assert tree == Node("a", [Node("b", [])])


# ── composite rules ──────────────────────────────────────────

def test_unknown_field():
    with pytest.raises(DecodeError, match="no such field 'nickname'") as exc:
        decode_typed(Person, '{"name":"A","age":1,"nickname":"x"}')
    assert exc.value.path == "$.nickname"


def test_private_field_is_not_addressable():
    with pytest.raises(DecodeError, match="no such field"):
        decode_typed(WithPrivate, '{"visible":1,"_hidden":2}')


def test_missing_required_field():
    with pytest.raises(DecodeError, match="missing field"):
        decode_typed(Person, '{"name":"A"}')


def test_missing_optional_field_without_default_fails():
    with pytest.raises(DecodeError, match="missing field\\(s\\) email"):
        decode_typed(Contact, '{"name":"A"}')


def test_missing_field_with_default():
    assert decode_typed(Contact, '{"name":"A","email":null}') == Contact("A", None, [])


def test_duplicate_field():
    with pytest.raises(DecodeError, match="duplicate field 'age'"):
        decode_typed(Person, '{"name":"A","age":1,"age":2}')


def test_constructor_validation_becomes_decode_error():
    with pytest.raises(DecodeError, match="value must be positive"):
        decode_typed(Positive, '{"value":0}')


def test_nested_path():
    with pytest.raises(DecodeError) as exc:
        decode_typed(Node, '{"label":"a","children":[{"label":"b","children":[{"label":1}]}]}')
    assert exc.value.path == "$.children[0].children[0].label"


def test_first_error_wins():
    with pytest.raises(DecodeError) as exc:
        decode_typed(Person, '{"name":1,"age":"x"}')
    assert exc.value.path == "$.name"


# ── entry points ─────────────────────────────────────────────

def test_accepts_parsed_node_and_bytes():
    node = parse('{"name":"A","age":2}')
    assert TypedDecoder().decode(Person, node) == Person("A", 2)
    assert decode_typed(Person, b'{"name":"A","age":2}') == Person("A", 2)


def test_unsupported_target_is_configuration_error():
    with pytest.raises(ShapeError):
        decode_typed(dict, "{}")


def test_malformed_text_is_decode_error():
    with pytest.raises(DecodeError, match="malformed"):
        decode_typed(Person, '{"name":')
