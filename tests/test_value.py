import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from jsontree.value import (
    JsonArray,
    JsonBoolean,
    JsonError,
    JsonInteger,
    JsonNull,
    JsonObject,
    JsonReal,
    JsonString,
    JsonType,
    boolean,
    equal,
    json_false,
    json_null,
    json_true,
    number_value,
)


# --- arrays ---------------------------------------------------------------

def test_array_misc():
    array = JsonArray()
    five = JsonInteger(5)
    seven = JsonInteger(7)

    assert len(array) == 0
    with pytest.raises(JsonError):
        array.append(None)

    array.append(five)
    assert len(array) == 1
    assert array.get(0) is five

    array.append(seven)
    assert len(array) == 2
    assert array.get(1) is seven

    array.set(0, seven)
    with pytest.raises(JsonError):
        array.set(0, None)
    assert len(array) == 2
    assert array.get(0) is seven

    assert array.get(2) is None
    with pytest.raises(JsonError):
        array.set(2, seven)

    for i in range(2, 30):
        array.append(seven)
        assert len(array) == i + 1

    assert all(array.get(i) is seven for i in range(30))

    array.set(15, JsonInteger(123))
    value = array.get(15)
    assert isinstance(value, JsonInteger) and value.value == 123

    array.append(JsonInteger(321))
    value = array.get(len(array) - 1)
    assert isinstance(value, JsonInteger) and value.value == 321


def test_array_insert():
    array = JsonArray()
    five, seven, eleven = JsonInteger(5), JsonInteger(7), JsonInteger(11)

    with pytest.raises(JsonError):
        array.insert(1, five)

    array.insert(0, five)
    assert array.get(0) is five
    assert len(array) == 1

    array.insert(1, seven)
    assert array.get(0) is five
    assert array.get(1) is seven
    assert len(array) == 2

    array.insert(1, eleven)
    assert [array.get(i) for i in range(3)] == [five, eleven, seven]
    assert array.get(1) is eleven
    assert len(array) == 3

    array.insert(2, JsonInteger(123))
    value = array.get(2)
    assert isinstance(value, JsonInteger) and value.value == 123
    assert len(array) == 4

    for _ in range(20):
        array.insert(0, seven)
    assert all(array.get(i) is seven for i in range(20))
    assert len(array) == 24


def test_array_remove():
    array = JsonArray()
    five, seven = JsonInteger(5), JsonInteger(7)

    with pytest.raises(JsonError):
        array.remove(0)

    array.append(five)
    with pytest.raises(JsonError):
        array.remove(1)
    array.remove(0)
    assert len(array) == 0

    for item in (five, seven, five, seven):
        array.append(item)
    array.remove(2)
    assert len(array) == 3
    assert array.get(0) is five
    assert array.get(1) is seven
    assert array.get(2) is seven

    full = JsonArray()
    for _ in range(4):
        full.append(five)
        full.append(seven)
    assert len(full) == 8
    full.remove(5)
    assert len(full) == 7
    assert full.get(5) is five


def test_array_clear():
    array = JsonArray()
    five, seven = JsonInteger(5), JsonInteger(7)
    for _ in range(10):
        array.append(five)
    for _ in range(10):
        array.append(seven)
    assert len(array) == 20
    array.clear()
    assert len(array) == 0


def test_array_extend():
    array1, array2 = JsonArray(), JsonArray()
    five, seven = JsonInteger(5), JsonInteger(7)
    for _ in range(10):
        array1.append(five)
        array2.append(seven)
    assert len(array1) == 10 and len(array2) == 10

    array1.extend(array2)
    assert all(array1.get(i) is five for i in range(10))
    assert all(array1.get(i) is seven for i in range(10, 20))
    assert len(array2) == 10


def test_array_extend_requires_array():
    with pytest.raises(JsonError):
        JsonArray().extend(JsonObject())


def test_array_circular_simple_cases():
    array1 = JsonArray()
    with pytest.raises(JsonError):
        array1.append(array1)
    with pytest.raises(JsonError):
        array1.insert(0, array1)
    array1.append(json_true())
    with pytest.raises(JsonError):
        array1.set(0, array1)
    assert array1.get(0) is json_true()


def test_array_mutual_references_allowed():
    array1, array2 = JsonArray(), JsonArray()
    array1.append(array2)
    array2.append(array1)
    assert array1.get(0) is array2
    assert array2.get(0) is array1


def test_array_foreach():
    array1 = JsonArray([
        JsonString("foo"), JsonInteger(1),
        JsonString("bar"), JsonInteger(2),
        JsonString("baz"), JsonInteger(3),
    ])
    array2 = JsonArray()
    for value in array1:
        array2.append(value)
    assert equal(array1, array2)
    assert array1 == array2


# --- numbers --------------------------------------------------------------

def test_number_values():
    integer = JsonInteger(5)
    real = JsonReal(100.1)
    assert integer.value == 5
    assert real.value == 100.1
    assert number_value(integer) == 5.0
    assert number_value(real) == 100.1


def test_number_value_of_non_number():
    assert number_value(JsonString("x")) == 0.0
    assert number_value(None) == 0.0


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_real_rejects_non_finite(bad):
    with pytest.raises(JsonError):
        JsonReal(bad)
    real = JsonReal(1.0)
    with pytest.raises(JsonError):
        real.set(bad)
    assert real.value == 1.0


# --- simple values --------------------------------------------------------

def test_boolean():
    assert boolean(1) is json_true()
    assert boolean(-123) is json_true()
    value = boolean(0)
    assert value is json_false()
    assert value.value is False


def test_typeof_integer():
    value = JsonInteger(1)
    assert value.type == JsonType.INTEGER
    assert not isinstance(value, (JsonObject, JsonArray, JsonString, JsonReal))
    assert not isinstance(value, (JsonBoolean, JsonNull))


def test_singleton_types():
    assert json_true().type == JsonType.TRUE
    assert json_false().type == JsonType.FALSE
    assert json_null().type == JsonType.NULL


def test_string_checked():
    value = JsonString("foo")
    assert value.value == b"foo"
    assert len(value) == 3

    value.set("barr")
    assert value.value == b"barr"
    assert len(value) == 4

    value.set(b"hi\0ho")
    assert value.value == b"hi\x00ho"
    assert len(value) == 5


def test_string_rejects_null_and_invalid_utf8():
    with pytest.raises(JsonError):
        JsonString(None)
    with pytest.raises(JsonError):
        JsonString(b"a\xefz")
    value = JsonString("ok")
    with pytest.raises(JsonError):
        value.set(b"\xff")
    assert value.value == b"ok"


def test_string_nocheck():
    value = JsonString.nocheck("foo")
    assert value.value == b"foo"
    assert len(value) == 3

    value.set_nocheck("barr")
    assert value.value == b"barr"
    assert len(value) == 4

    value.set_nocheck(b"hi\0ho")
    assert value.value == b"hi\x00ho"
    assert len(value) == 5

    value = JsonString.nocheck(b"qu\xff")
    assert value.value == b"qu\xff"
    assert len(value) == 3

    value.set_nocheck(b"\xfd\xfe\xff")
    assert value.value == b"\xfd\xfe\xff"
    assert len(value) == 3


def test_integer_set():
    value = JsonInteger(123)
    assert value.value == 123
    assert number_value(value) == 123.0
    value.value = 321
    assert value.value == 321
    assert number_value(value) == 321.0


def test_real_set():
    value = JsonReal(123.123)
    assert value.value == 123.123
    assert number_value(value) == 123.123
    value.set(321.321)
    assert value.value == 321.321
    assert number_value(value) == 321.321


def test_singletons_are_unique():
    assert json_true() is json_true()
    assert json_false() is json_false()
    assert json_null() is json_null()
    assert json_true().copy() is json_true()
    assert json_null().deep_copy() is json_null()


# --- objects --------------------------------------------------------------

def test_object_set_get_delete():
    obj = JsonObject()
    five = JsonInteger(5)
    obj.set("foo", five)
    assert len(obj) == 1
    assert obj.get("foo") is five
    assert "foo" in obj
    assert obj.get("bar") is None

    obj.delete("foo")
    assert len(obj) == 0
    with pytest.raises(JsonError):
        obj.delete("foo")


def test_object_rejects_bad_input():
    obj = JsonObject()
    with pytest.raises(JsonError):
        obj.set("a", None)
    with pytest.raises(JsonError):
        obj.set(None, JsonInteger(1))
    with pytest.raises(JsonError):
        obj.set(b"\xff", JsonInteger(1))
    with pytest.raises(JsonError):
        obj.set("self", obj)
    assert len(obj) == 0


def test_object_keeps_insertion_order():
    obj = JsonObject()
    for key in ("c", "a", "b"):
        obj.set(key, JsonInteger(1))
    assert list(obj) == ["c", "a", "b"]
    assert [key for key, _ in obj.items()] == ["c", "a", "b"]


def test_object_updates():
    base = JsonObject()
    base.set("a", JsonInteger(1))
    base.set("b", JsonInteger(2))
    other = JsonObject()
    other.set("b", JsonInteger(20))
    other.set("c", JsonInteger(30))

    existing = base.copy()
    existing.update_existing(other)
    assert existing.get("b").value == 20
    assert "c" not in existing

    missing = base.copy()
    missing.update_missing(other)
    assert missing.get("b").value == 2
    assert missing.get("c").value == 30

    full = base.copy()
    full.update(other)
    assert full.get("b").value == 20
    assert full.get("c").value == 30
    assert len(full) == 3

    with pytest.raises(JsonError):
        base.update(JsonArray())


def test_object_clear():
    obj = JsonObject()
    obj.set("a", json_null())
    obj.clear()
    assert len(obj) == 0


# --- equality and copying -------------------------------------------------

def test_equal_basic():
    assert equal(JsonInteger(3), JsonInteger(3))
    assert not equal(JsonInteger(3), JsonReal(3.0))
    assert not equal(JsonString("a"), JsonString("b"))
    assert not equal(None, JsonInteger(1))
    assert equal(json_true(), json_true())
    assert not equal(json_true(), json_false())


def test_equal_objects_ignore_order():
    first, second = JsonObject(), JsonObject()
    first.set("x", JsonInteger(1))
    first.set("y", JsonString("z"))
    second.set("y", JsonString("z"))
    second.set("x", JsonInteger(1))
    assert equal(first, second)
    second.set("x", JsonInteger(2))
    assert not equal(first, second)


def test_shallow_copy_shares_children():
    inner = JsonArray([JsonInteger(1)])
    outer = JsonArray([inner])
    clone = outer.copy()
    assert clone is not outer
    assert clone.get(0) is inner


def test_deep_copy_is_independent():
    inner = JsonObject()
    inner.set("k", JsonString("v"))
    outer = JsonArray([inner])
    clone = outer.deep_copy()
    assert equal(clone, outer)
    assert clone.get(0) is not inner
    clone.get(0).set("k", JsonString("changed"))
    assert inner.get("k").value == b"v"


@given(st.lists(st.integers(min_value=-(2 ** 63), max_value=2 ** 63 - 1)))
def test_deep_copy_equals_original(numbers):
    array = JsonArray(JsonInteger(n) for n in numbers)
    clone = array.deep_copy()
    assert equal(array, clone)
    assert len(clone) == len(numbers)
    assert [item.value for item in clone] == numbers