"""Build and take apart JSON values using compact format strings.

A format string is a sequence of single-character tokens. Spaces, tabs,
newlines, commas and colons are ignored between tokens.

Packing tokens: ``{...}`` object, ``[...]`` array, ``s`` string, ``n`` null,
``b`` boolean, ``i``/``I`` integer, ``f`` real, ``o``/``O`` an existing value.
A string may be followed by ``#`` or ``%`` (take a length argument) and joined
to further strings with ``+``. ``s?``, ``o?`` and ``O?`` turn a None argument
into null; ``s*``, ``o*`` and ``O*`` inside a container drop the member when
the argument is None.

Unpacking tokens are the same, plus ``F`` (real or integer as float),
``?`` after an object key (the key is optional), and ``!`` / ``*`` at the end
of a container (check that every item was unpacked / do not check).
"""

from __future__ import annotations

import enum
import operator
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from jsontree.utf import check_string
from jsontree.value import (
    JsonArray,
    JsonBoolean,
    JsonError,
    JsonInteger,
    JsonNull,
    JsonObject,
    JsonReal,
    JsonString,
    JsonValue,
    boolean,
    json_null,
    number_value,
)

_IGNORED = " \t\n,:"
_NULLABLE_STARTERS = "soO"
_UNPACK_VALUE_STARTERS = "{[siIbfFOon"


class PackFlag(enum.IntFlag):
    """Options for pack and unpack."""

    NONE = 0
    VALIDATE_ONLY = 0x1
    STRICT = 0x2


class PackError(ValueError):
    """A format string, argument or value did not fit.

    ``source`` tells where the problem lies: ``<format>``, ``<args>``,
    ``<validation>``, ``<root>`` or ``<internal>``.
    """

    def __init__(
        self, text: str, source: str, line: int, column: int, position: int
    ) -> None:
        super().__init__(text)
        self.text = text
        self.source = source
        self.line = line
        self.column = column
        self.position = position

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class _Token:
    char: str = ""
    line: int = 0
    column: int = 0
    position: int = 0


def _one_of(chars: str, token: str) -> bool:
    return token != "" and token in chars


def _type_name(value: JsonValue) -> str:
    return value.type.name.lower()


class _Scanner:
    def __init__(self, fmt: str, flags: int, args: Sequence[Any]) -> None:
        self.fmt = fmt
        self.flags = PackFlag(flags)
        self.index = 0
        self.prev = _Token()
        self.current = _Token()
        self.lookahead = _Token()
        self.line = 1
        self.column = 0
        self.position = 0
        self._args: Iterator[Any] = iter(args)

    @property
    def token(self) -> str:
        return self.current.char

    def advance(self) -> None:
        self.prev = self.current
        if self.lookahead.line:
            self.current = self.lookahead
            self.lookahead = _Token()
            return

        self.column += 1
        self.position += 1
        while self.index < len(self.fmt) and self.fmt[self.index] in _IGNORED:
            if self.fmt[self.index] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.position += 1
            self.index += 1

        char = self.fmt[self.index] if self.index < len(self.fmt) else ""
        self.current = _Token(char, self.line, self.column, self.position)
        self.index += 1

    def back(self) -> None:
        self.lookahead = self.current
        self.current = self.prev

    def error(self, source: str, text: str) -> PackError:
        return PackError(
            text, source, self.current.line, self.current.column, self.current.position
        )

    def arg(self) -> Any:
        try:
            return next(self._args)
        except StopIteration:
            raise self.error("<args>", "Not enough arguments") from None


# ----------------------------------------------------------------- packing


def _string_arg(s: _Scanner, value: Any) -> bytes:
    if value is None:
        raise s.error("<args>", "NULL string argument")
    if isinstance(value, str):
        return value.encode("utf-8", "surrogatepass")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise s.error("<args>", f"Expected string argument, got {type(value).__name__}")


def _length_arg(s: _Scanner) -> int:
    value = s.arg()
    try:
        length = operator.index(value)
    except TypeError:
        raise s.error("<args>", "Expected integer string length") from None
    if length < 0:
        raise s.error("<args>", "Negative string length")
    return length


def _read_string(s: _Scanner, purpose: str) -> bytes:
    s.advance()
    following = s.token
    s.back()

    if following not in ("#", "%", "+"):
        data = _string_arg(s, s.arg())
        if not check_string(data):
            raise s.error("<args>", f"Invalid UTF-8 {purpose}")
        return data

    parts: list[bytes] = []
    while True:
        data = _string_arg(s, s.arg())
        s.advance()
        if s.token in ("#", "%"):
            data = data[:_length_arg(s)]
        else:
            s.back()
        parts.append(data)

        s.advance()
        if s.token != "+":
            s.back()
            break

    joined = b"".join(parts)
    if not check_string(joined):
        raise s.error("<args>", f"Invalid UTF-8 {purpose}")
    return joined


def _skip_optional(s: _Scanner) -> bool:
    return _one_of(_NULLABLE_STARTERS, s.token) and s.lookahead.char == "*"


def _pack_object(s: _Scanner) -> JsonObject:
    result = JsonObject()
    s.advance()

    while s.token != "}":
        if not s.token:
            raise s.error("<format>", "Unexpected end of format string")
        if s.token != "s":
            raise s.error("<format>", f"Expected format 's', got '{s.token}'")

        key = _read_string(s, "object key")
        s.advance()

        try:
            value = _pack(s)
        except PackError:
            if _skip_optional(s):
                s.advance()
                s.advance()
                continue
            raise

        try:
            result.set_nocheck(key, value)
        except (JsonError, TypeError):
            raise s.error(
                "<internal>", f'Unable to add key "{key.decode("utf-8")}"'
            ) from None

        if _skip_optional(s):
            s.advance()
        s.advance()

    return result


def _pack_array(s: _Scanner) -> JsonArray:
    result = JsonArray()
    s.advance()

    while s.token != "]":
        if not s.token:
            raise s.error("<format>", "Unexpected end of format string")

        try:
            value = _pack(s)
        except PackError:
            if _skip_optional(s):
                s.advance()
                s.advance()
                continue
            raise

        try:
            result.append(value)
        except (JsonError, TypeError):
            raise s.error("<internal>", "Unable to append to array") from None

        if _skip_optional(s):
            s.advance()
        s.advance()

    return result


def _nullable(s: _Scanner) -> bool:
    s.advance()
    if s.token == "?":
        return True
    s.back()
    return False


def _pack_string(s: _Scanner) -> JsonValue:
    nullable = _nullable(s)
    try:
        data = _read_string(s, "string")
    except PackError:
        if nullable:
            return json_null()
        raise
    return JsonString.nocheck(data)


def _pack_value_arg(s: _Scanner) -> JsonValue:
    nullable = _nullable(s)
    value = s.arg()
    if value is None:
        if nullable:
            return json_null()
        raise s.error("<args>", "NULL value argument")
    if not isinstance(value, JsonValue):
        raise s.error(
            "<args>", f"Expected a JSON value argument, got {type(value).__name__}"
        )
    return value


def _pack(s: _Scanner) -> JsonValue:
    token = s.token
    if token == "{":
        return _pack_object(s)
    if token == "[":
        return _pack_array(s)
    if token == "s":
        return _pack_string(s)
    if token == "n":
        return json_null()
    if token == "b":
        return boolean(s.arg())
    if token in ("i", "I"):
        try:
            return JsonInteger(s.arg())
        except TypeError:
            raise s.error("<args>", "Expected integer argument") from None
    if token == "f":
        try:
            return JsonReal(s.arg())
        except (TypeError, ValueError):
            raise s.error("<args>", "Invalid real argument") from None
    if token in ("o", "O"):
        return _pack_value_arg(s)
    raise s.error("<format>", f"Unexpected format character '{token}'")


def pack(fmt: str, *args: Any, flags: int = 0) -> JsonValue:
    """Build a JSON value from a format string and arguments."""
    if not fmt:
        raise PackError("NULL or empty format string", "<format>", -1, -1, 0)

    s = _Scanner(fmt, flags, args)
    s.advance()
    value = _pack(s)

    s.advance()
    if s.token:
        raise s.error("<format>", "Garbage after format string")
    return value


# --------------------------------------------------------------- unpacking


def _key_arg(s: _Scanner) -> str:
    key = s.arg()
    if key is None:
        raise s.error("<args>", "NULL object key")
    if isinstance(key, (bytes, bytearray)):
        return bytes(key).decode("utf-8", "surrogateescape")
    if not isinstance(key, str):
        raise s.error("<args>", f"Expected string key, got {type(key).__name__}")
    return key


def _strict_mark(token: str) -> int:
    return 1 if token == "!" else -1


def _unpack_object(s: _Scanner, root: JsonValue | None, out: list[Any]) -> None:
    if root is not None and not isinstance(root, JsonObject):
        raise s.error("<validation>", f"Expected object, got {_type_name(root)}")
    s.advance()

    key_set: set[str] = set()
    strict = 0
    gotopt = False

    while s.token != "}":
        if strict != 0:
            mark = "!" if strict == 1 else "*"
            raise s.error(
                "<format>", f"Expected '}}' after '{mark}', got '{s.token}'"
            )
        if not s.token:
            raise s.error("<format>", "Unexpected end of format string")
        if s.token in ("!", "*"):
            strict = _strict_mark(s.token)
            s.advance()
            continue
        if s.token != "s":
            raise s.error("<format>", f"Expected format 's', got '{s.token}'")

        key = _key_arg(s)
        s.advance()

        optional = False
        if s.token == "?":
            optional = gotopt = True
            s.advance()

        value: JsonValue | None = None
        if root is not None:
            value = root.get(key)
            if value is None and not optional:
                raise s.error("<validation>", f"Object item not found: {key}")

        _unpack(s, value, out)
        key_set.add(key)
        s.advance()

    if strict == 0 and s.flags & PackFlag.STRICT:
        strict = 1

    if root is not None and strict == 1:
        unrecognized = [key for key in root if key not in key_set]
        if gotopt:
            unpacked = len(unrecognized)
        else:
            unpacked = len(root) - len(key_set)
        if unpacked:
            raise s.error(
                "<validation>",
                f"{unpacked} object item(s) left unpacked: {', '.join(unrecognized)}",
            )


def _unpack_array(s: _Scanner, root: JsonValue | None, out: list[Any]) -> None:
    if root is not None and not isinstance(root, JsonArray):
        raise s.error("<validation>", f"Expected array, got {_type_name(root)}")
    s.advance()

    index = 0
    strict = 0

    while s.token != "]":
        if strict != 0:
            mark = "!" if strict == 1 else "*"
            raise s.error("<format>", f"Expected ']' after '{mark}', got '{s.token}'")
        if not s.token:
            raise s.error("<format>", "Unexpected end of format string")
        if s.token in ("!", "*"):
            strict = _strict_mark(s.token)
            s.advance()
            continue
        if not _one_of(_UNPACK_VALUE_STARTERS, s.token):
            raise s.error("<format>", f"Unexpected format character '{s.token}'")

        value: JsonValue | None = None
        if root is not None:
            value = root.get(index)
            if value is None:
                raise s.error("<validation>", f"Array index {index} out of range")

        _unpack(s, value, out)
        s.advance()
        index += 1

    if strict == 0 and s.flags & PackFlag.STRICT:
        strict = 1

    if root is not None and strict == 1 and index != len(root):
        raise s.error(
            "<validation>", f"{len(root) - index} array item(s) left unpacked"
        )


def _expect(
    s: _Scanner, root: JsonValue | None, kinds: tuple[type, ...], what: str
) -> None:
    if root is not None and not isinstance(root, kinds):
        raise s.error("<validation>", f"Expected {what}, got {_type_name(root)}")


def _unpack(s: _Scanner, root: JsonValue | None, out: list[Any]) -> None:
    token = s.token
    extracting = not s.flags & PackFlag.VALIDATE_ONLY

    if token == "{":
        _unpack_object(s, root, out)
    elif token == "[":
        _unpack_array(s, root, out)
    elif token == "s":
        _expect(s, root, (JsonString,), "string")
        if extracting:
            s.advance()
            with_length = s.token == "%"
            if not with_length:
                s.back()
            if isinstance(root, JsonString):
                out.append(root.value.decode("utf-8", "surrogateescape"))
                if with_length:
                    out.append(len(root.value))
            else:
                out.append(None)
                if with_length:
                    out.append(None)
    elif token in ("i", "I"):
        _expect(s, root, (JsonInteger,), "integer")
        if extracting:
            out.append(root.value if isinstance(root, JsonInteger) else None)
    elif token == "b":
        _expect(s, root, (JsonBoolean,), "true or false")
        if extracting:
            out.append(root.value if isinstance(root, JsonBoolean) else None)
    elif token == "f":
        _expect(s, root, (JsonReal,), "real")
        if extracting:
            out.append(root.value if isinstance(root, JsonReal) else None)
    elif token == "F":
        _expect(s, root, (JsonInteger, JsonReal), "real or integer")
        if extracting:
            out.append(number_value(root) if root is not None else None)
    elif token in ("o", "O"):
        if extracting:
            out.append(root)
    elif token == "n":
        _expect(s, root, (JsonNull,), "null")
    else:
        raise s.error("<format>", f"Unexpected format character '{token}'")


def unpack(root: JsonValue, fmt: str, *args: Any, flags: int = 0) -> tuple[Any, ...]:
    """Check root against a format string and return the extracted values.

    The arguments are the object keys named by ``s`` tokens inside objects.
    Values come back in format order; an optional key that is absent gives
    None, and ``s%`` gives the string followed by its length in bytes.
    """
    if root is None:
        raise PackError("NULL root value", "<root>", -1, -1, 0)
    if not fmt:
        raise PackError("NULL or empty format string", "<format>", -1, -1, 0)

    s = _Scanner(fmt, flags, args)
    s.advance()

    out: list[Any] = []
    _unpack(s, root, out)

    s.advance()
    if s.token:
        raise s.error("<format>", "Garbage after format string")
    return tuple(out)