# jsontree

`jsontree` holds JSON values as a tree of mutable Python objects. The tree can
hold objects, arrays, strings, integers, reals, booleans and null. Strings are
checked strictly as UTF-8, and reals may not be NaN or infinite. You can build
values from short format strings and take them apart the same way.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Values (`jsontree.value`)

```python
from jsontree.value import JsonArray, JsonInteger, JsonObject, JsonString, equal

config = JsonObject()
config.set("name", JsonString("demo"))
config.set("sizes", JsonArray([JsonInteger(1), JsonInteger(2)]))

config.get("sizes").append(JsonInteger(3))
len(config.get("sizes"))          # 3

copy = config.deep_copy()
equal(config, copy)               # True
config == copy                    # True, same comparison
```

The value classes are:

- `JsonObject` keeps its keys in insertion order. It has these methods:
  - `get` and `set`
  - `set_nocheck`, which skips the UTF-8 check on the key
  - `delete` and `clear`
  - `items`
  - `update`, `update_existing` and `update_missing`
  - `len()`, iteration over keys, and `in`
- `JsonArray` has these methods:
  - `get`, which returns `None` when the index is out of range
  - `set`, `append` and `insert`
  - `remove`, which returns the removed item
  - `clear` and `extend`
  - `len()` and iteration
- `JsonString` stores UTF-8 bytes, and those bytes may contain NUL.
  - `value` gives the bytes and `text` gives the decoded `str`.
  - `set` and `set_nocheck` replace the contents.
  - `JsonString.nocheck(...)` builds a string without checking that it is UTF-8.
- `JsonInteger` has a `value` that you can both read and assign.
- `JsonReal` has `value` and `set`. Both the constructor and `set` refuse NaN and infinities.
- `JsonBoolean` and `JsonNull` are singletons.
  - `json_true()`, `json_false()` and `json_null()` return them.
  - `boolean(value)` returns one of the two booleans, chosen by whether `value` is true.

Every value has a `type` member, which is a `JsonType`. Every value also has
`copy()` and `deep_copy()`:

- `copy()` on an object or an array makes a new container that holds the same items.
- `deep_copy()` copies the items as well.

`number_value(value)` reads an integer or a real as a float. For anything
else it gives `0.0`.

Operations that cannot be done raise `JsonError`. For example:

- adding a container to itself
- passing `None` as a value
- using an array index out of range
- deleting a key that is not there
- giving a string or key that is not valid UTF-8
- giving a real that is not finite

## Packing and unpacking (`jsontree.pack`)

```python
from jsontree.pack import PackFlag, pack, unpack

value = pack("{s:i, s:[s,s]}", "id", 7, "tags", "a", "b")
unpack(value, "{s:i, s:[s,s]}", "id", "tags")   # (7, 'a', 'b')
```

Spaces, tabs, newlines, commas and colons between tokens are ignored.

| Character | Meaning |
|---|---|
| `s` | a string |
| `i` / `I` | an integer |
| `f` | a real |
| `F` | a real or an integer, read as a float (unpacking only) |
| `b` | a boolean |
| `n` | null |
| `o` / `O` | an existing `JsonValue` |
| `{ }` | an object |
| `[ ]` | an array |

Modifiers when packing:

- `s#` or `s%` takes a length argument and keeps only that many bytes of the string.
- `+` joins further strings onto the string.
- `s?`, `o?` and `O?` turn a `None` argument into null.
- Inside a container, `s*`, `o*` and `O*` leave the member out when the argument is `None`.

Unpacking:

- The arguments are the object keys.
- `unpack` returns the values it extracts as a tuple, in format order.
- `s%` returns the string followed by its length in bytes.
- `?` after a key marks the key as optional. An absent optional key gives `None`.
- At the end of an object or array, `!` requires that every item was unpacked.
- At the end of an object or array, `*` allows items to be left unpacked.

`PackFlag.STRICT` makes every container behave as if it ended in `!`.
`PackFlag.VALIDATE_ONLY` checks the tree and extracts nothing.

Errors raise `PackError`. It has these attributes:

- `text`
- `source`, which is one of `<format>`, `<args>`, `<validation>`, `<root>` or `<internal>`
- `line`, `column` and `position`, which locate the error in the format string

## Lower-level helpers

- `jsontree.utf` validates and decodes UTF-8 byte strings. It has
  `check_string`, `check_first`, `check_full` and `iterate`. `encode`
  encodes a single code point.
- `jsontree.strconv` converts reals.
  - `parse_real` parses the text of a number. It raises `RealOverflowError` when the value does not fit in a float.
  - `format_real(value, precision)` formats a float with 17 significant digits by default, or with `precision` digits if you give one.
  - The formatted output always contains a `.` or an exponent.
  - Exponents are written without `+` and without leading zeros.

## What it does not do

The package does not read or write JSON text. It has no parser that turns a
document into a tree. It has no serializer that turns a tree back into a
document, whether a string, a file or a stream. You build trees with the value
classes or with `pack`.