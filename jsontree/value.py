"""In-memory JSON values: objects, arrays, strings, numbers and singletons."""

from __future__ import annotations

import enum
import math
import operator
from collections.abc import Iterable, Iterator

from jsontree.utf import check_string


class JsonType(enum.IntEnum):
    """The kind of a JSON value."""

    OBJECT = 0
    ARRAY = 1
    STRING = 2
    INTEGER = 3
    REAL = 4
    TRUE = 5
    FALSE = 6
    NULL = 7


class JsonError(ValueError):
    """Raised when a JSON value cannot be built or changed as requested."""


def _check_member(container: JsonValue, value: JsonValue | None) -> JsonValue:
    if value is None:
        raise JsonError("NULL value")
    if not isinstance(value, JsonValue):
        raise TypeError(f"expected a JSON value, got {type(value).__name__}")
    if value is container:
        raise JsonError("cannot add a value to itself")
    return value


def _check_key(key: str | bytes | None, check: bool) -> str:
    if key is None:
        raise JsonError("NULL object key")
    if isinstance(key, (bytes, bytearray)):
        data = bytes(key)
        if check and not check_string(data):
            raise JsonError("invalid UTF-8 object key")
        return data.decode("utf-8", "surrogateescape")
    if not isinstance(key, str):
        raise TypeError(f"object keys must be strings, got {type(key).__name__}")
    if check:
        try:
            key.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise JsonError("invalid UTF-8 object key") from exc
    return key


def _string_bytes(value: str | bytes | None, check: bool) -> bytes:
    if value is None:
        raise JsonError("NULL string")
    if isinstance(value, str):
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as exc:
            if check:
                raise JsonError("invalid UTF-8 string") from exc
            data = value.encode("utf-8", "surrogatepass")
    elif isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
    else:
        raise TypeError(f"expected str or bytes, got {type(value).__name__}")
    if check and not check_string(data):
        raise JsonError("invalid UTF-8 string")
    return data


class JsonValue:
    """Base class of every JSON value."""

    type: JsonType

    def copy(self) -> JsonValue:
        """Return a shallow copy; immutable singletons return themselves."""
        return self

    def deep_copy(self) -> JsonValue:
        """Return a copy that shares no mutable value with the original."""
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonValue):
            return NotImplemented
        return equal(self, other)

    __hash__ = None  # type: ignore[assignment]


class JsonObject(JsonValue):
    """A JSON object: string keys mapped to values, in insertion order."""

    type = JsonType.OBJECT

    def __init__(self) -> None:
        self._items: dict[str, JsonValue] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __repr__(self) -> str:
        return f"JsonObject({self._items!r})"

    def get(self, key: str) -> JsonValue | None:
        """Return the value stored under key, or None."""
        if key is None:
            return None
        return self._items.get(key)

    def set(self, key: str | bytes, value: JsonValue) -> None:
        """Store value under key, which must be valid UTF-8."""
        _check_member(self, value)
        self._items[_check_key(key, check=True)] = value

    def set_nocheck(self, key: str | bytes, value: JsonValue) -> None:
        """Store value under key without validating the key's encoding."""
        _check_member(self, value)
        self._items[_check_key(key, check=False)] = value

    def delete(self, key: str) -> None:
        """Remove key; raises JsonError if it is not present."""
        if key is None or key not in self._items:
            raise JsonError(f"no such key: {key!r}")
        del self._items[key]

    def clear(self) -> None:
        """Remove every item."""
        self._items.clear()

    def items(self) -> Iterator[tuple[str, JsonValue]]:
        """Yield (key, value) pairs in insertion order."""
        yield from list(self._items.items())

    @staticmethod
    def _require_object(other: object) -> JsonObject:
        if not isinstance(other, JsonObject):
            raise JsonError("expected a JSON object")
        return other

    def update(self, other: JsonObject) -> None:
        """Copy every item of other into this object."""
        for key, value in self._require_object(other).items():
            self.set_nocheck(key, value)

    def update_existing(self, other: JsonObject) -> None:
        """Copy the items of other whose keys are already present."""
        for key, value in self._require_object(other).items():
            if key in self._items:
                self.set_nocheck(key, value)

    def update_missing(self, other: JsonObject) -> None:
        """Copy the items of other whose keys are not yet present."""
        for key, value in self._require_object(other).items():
            if key not in self._items:
                self.set_nocheck(key, value)

    def copy(self) -> JsonObject:
        result = JsonObject()
        result._items.update(self._items)
        return result

    def deep_copy(self) -> JsonObject:
        result = JsonObject()
        for key, value in self._items.items():
            result._items[key] = value.deep_copy()
        return result


class JsonArray(JsonValue):
    """A JSON array."""

    type = JsonType.ARRAY

    def __init__(self, items: Iterable[JsonValue] = ()) -> None:
        self._items: list[JsonValue] = []
        for item in items:
            self.append(item)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[JsonValue]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"JsonArray({self._items!r})"

    def _in_range(self, index: int, *, allow_end: bool = False) -> int:
        index = operator.index(index)
        limit = len(self._items) + (1 if allow_end else 0)
        if not 0 <= index < limit:
            raise JsonError(f"array index {index} out of range")
        return index

    def get(self, index: int) -> JsonValue | None:
        """Return the item at index, or None if out of range."""
        index = operator.index(index)
        if not 0 <= index < len(self._items):
            return None
        return self._items[index]

    def set(self, index: int, value: JsonValue) -> None:
        """Replace the item at an existing index."""
        _check_member(self, value)
        self._items[self._in_range(index)] = value

    def append(self, value: JsonValue) -> None:
        """Add value at the end."""
        self._items.append(_check_member(self, value))

    def insert(self, index: int, value: JsonValue) -> None:
        """Insert value before index; index may equal the length."""
        _check_member(self, value)
        self._items.insert(self._in_range(index, allow_end=True), value)

    def remove(self, index: int) -> JsonValue:
        """Remove the item at index and return it."""
        position = self._in_range(index)
        return self._items.pop(position)

    def clear(self) -> None:
        """Remove every item."""
        self._items.clear()

    def extend(self, other: JsonArray) -> None:
        """Append every item of another array."""
        if not isinstance(other, JsonArray):
            raise JsonError("expected a JSON array")
        self._items.extend(list(other._items))

    def copy(self) -> JsonArray:
        result = JsonArray()
        result._items.extend(self._items)
        return result

    def deep_copy(self) -> JsonArray:
        result = JsonArray()
        result._items.extend(item.deep_copy() for item in self._items)
        return result


class JsonString(JsonValue):
    """A JSON string, held as UTF-8 bytes that may contain NUL."""

    type = JsonType.STRING

    def __init__(self, value: str | bytes) -> None:
        self._value = _string_bytes(value, check=True)

    @classmethod
    def nocheck(cls, value: str | bytes) -> JsonString:
        """Build a string without validating its encoding."""
        result = cls.__new__(cls)
        result._value = _string_bytes(value, check=False)
        return result

    @property
    def value(self) -> bytes:
        return self._value

    @property
    def text(self) -> str:
        """The value decoded as UTF-8."""
        return self._value.decode("utf-8")

    def __len__(self) -> int:
        return len(self._value)

    def __repr__(self) -> str:
        return f"JsonString({self._value!r})"

    def set(self, value: str | bytes) -> None:
        """Replace the value; it must be valid UTF-8."""
        self._value = _string_bytes(value, check=True)

    def set_nocheck(self, value: str | bytes) -> None:
        """Replace the value without validating its encoding."""
        self._value = _string_bytes(value, check=False)

    def copy(self) -> JsonString:
        return JsonString.nocheck(self._value)


class JsonInteger(JsonValue):
    """A JSON integer."""

    type = JsonType.INTEGER

    def __init__(self, value: int) -> None:
        self._value = operator.index(value)

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, value: int) -> None:
        self._value = operator.index(value)

    def __repr__(self) -> str:
        return f"JsonInteger({self._value!r})"

    def copy(self) -> JsonInteger:
        return JsonInteger(self._value)


class JsonReal(JsonValue):
    """A JSON real number; NaN and infinities are refused."""

    type = JsonType.REAL

    def __init__(self, value: float) -> None:
        self._value = self._checked(value)

    @staticmethod
    def _checked(value: float) -> float:
        value = float(value)
        if math.isnan(value) or math.isinf(value):
            raise JsonError(f"real value must be finite, got {value}")
        return value

    @property
    def value(self) -> float:
        return self._value

    def set(self, value: float) -> None:
        """Replace the value; it is left unchanged if value is not finite."""
        self._value = self._checked(value)

    def __repr__(self) -> str:
        return f"JsonReal({self._value!r})"

    def copy(self) -> JsonReal:
        return JsonReal(self._value)


class JsonBoolean(JsonValue):
    """JSON true or false; there is exactly one instance of each."""

    _instances: dict[bool, JsonBoolean] = {}

    def __new__(cls, value: object = False) -> JsonBoolean:
        flag = bool(value)
        instance = cls._instances.get(flag)
        if instance is None:
            instance = super().__new__(cls)
            instance._value = flag
            cls._instances[flag] = instance
        return instance

    @property
    def type(self) -> JsonType:  # type: ignore[override]
        return JsonType.TRUE if self._value else JsonType.FALSE

    @property
    def value(self) -> bool:
        return self._value

    def __repr__(self) -> str:
        return "JsonBoolean(True)" if self._value else "JsonBoolean(False)"

    __hash__ = object.__hash__


class JsonNull(JsonValue):
    """JSON null; there is exactly one instance."""

    type = JsonType.NULL
    _instance: JsonNull | None = None

    def __new__(cls) -> JsonNull:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "JsonNull()"

    __hash__ = object.__hash__


def json_true() -> JsonBoolean:
    """Return the true singleton."""
    return JsonBoolean(True)


def json_false() -> JsonBoolean:
    """Return the false singleton."""
    return JsonBoolean(False)


def json_null() -> JsonNull:
    """Return the null singleton."""
    return JsonNull()


def boolean(value: object) -> JsonBoolean:
    """Return true or false according to the truth of value."""
    return json_true() if value else json_false()


def number_value(value: JsonValue | None) -> float:
    """Return an integer or real as a float; anything else gives 0.0."""
    if isinstance(value, JsonInteger):
        return float(value.value)
    if isinstance(value, JsonReal):
        return value.value
    return 0.0


def equal(first: JsonValue | None, second: JsonValue | None) -> bool:
    """Compare two values structurally."""
    if first is None or second is None:
        return False
    if first.type != second.type:
        return False
    if first is second:
        return True
    if isinstance(first, JsonObject):
        assert isinstance(second, JsonObject)
        if len(first) != len(second):
            return False
        return all(equal(value, second.get(key)) for key, value in first.items())
    if isinstance(first, JsonArray):
        assert isinstance(second, JsonArray)
        if len(first) != len(second):
            return False
        return all(equal(a, b) for a, b in zip(first, second))
    if isinstance(first, (JsonString, JsonInteger, JsonReal)):
        return first.value == second.value  # type: ignore[attr-defined]
    return False