"""Canonical message encoding.

A canonical message is a sequence of ``(field, value)`` pairs. It is not a
mapping: the same field name may occur more than once. The encoded form is
the JSON array of two-element arrays obtained after sorting the pairs with
:func:`canonical_key`, so the bytes do not depend on the order in which the
caller assembled the pairs. The verifying service rebuilds the same bytes
from the API call it receives, which makes this ordering part of the wire
protocol.

Value ordering
--------------
``None`` < booleans < numbers < strings < sequences < mappings.

- booleans: ``False`` < ``True``
- numbers: numeric comparison, ints and floats mixed; an int sorts before
  an equal float
- strings: comparison of their UTF-8 bytes
- sequences: element-wise, a strict prefix sorts first; a sequence made
  only of (field, value) pairs is compared after sorting its pairs
- mappings: by their items sorted on key
"""
from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ninchat_master.errors import SerializationError

_RANK_NONE = 0
_RANK_BOOL = 1
_RANK_NUMBER = 2
_RANK_STRING = 3
_RANK_SEQUENCE = 4
_RANK_MAPPING = 5


def canonical_key(value: Any) -> tuple[Any, ...]:
    """Return the sort key of *value* in the canonical total order.

    Raises
    ------
    SerializationError
        When *value* is not a JSON-compatible type.
    """
    if value is None:
        return (_RANK_NONE,)
    if isinstance(value, bool):
        return (_RANK_BOOL, int(value))
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise SerializationError(f"non-finite number {value!r}")
        return (_RANK_NUMBER, value, isinstance(value, float))
    if isinstance(value, str):
        return (_RANK_STRING, value.encode("utf-8"))
    if isinstance(value, Mapping):
        items = sorted(
            (canonical_key(_field_name(k)), canonical_key(v)) for k, v in value.items()
        )
        return (_RANK_MAPPING, tuple(items))
    if isinstance(value, (list, tuple)):
        keys = [canonical_key(item) for item in value]
        if all(_is_pair(item) for item in value):
            keys.sort()
        return (_RANK_SEQUENCE, tuple(keys))
    raise SerializationError(f"unsupported value type {type(value).__name__}")


def canonical_sort(pairs: Iterable[Sequence[Any]]) -> list[list[Any]]:
    """Return *pairs* as two-element lists sorted in canonical order.

    Parameters
    ----------
    pairs:
        Iterable of ``(field, value)`` pairs. Tuples and lists are both
        accepted.

    Raises
    ------
    SerializationError
        When an entry is not a pair with a string field name.
    """
    normalized = [_as_pair(pair) for pair in pairs]
    return sorted(normalized, key=canonical_key)


def encode_canonical(pairs: Iterable[Sequence[Any]]) -> bytes:
    """Sort *pairs* canonically and serialize them as a compact JSON array."""
    return encode_json(canonical_sort(pairs))


def encode_json(obj: Any) -> bytes:
    """Serialize *obj* as compact, ASCII-only JSON.

    Raises
    ------
    SerializationError
        When *obj* contains values that JSON cannot represent.
    """
    try:
        text = json.dumps(obj, separators=(",", ":"), ensure_ascii=True, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(exc)) from exc
    return text.encode("ascii")


def _as_pair(pair: Sequence[Any]) -> list[Any]:
    if isinstance(pair, (str, bytes)) or not isinstance(pair, Sequence) or len(pair) != 2:
        raise SerializationError(f"expected a (field, value) pair, got {pair!r}")
    field, value = pair
    if not isinstance(field, str):
        raise SerializationError(f"field name must be a string, got {field!r}")
    return [field, value]


def _is_pair(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) == 2 and isinstance(value[0], str)


def _field_name(key: Any) -> str:
    if not isinstance(key, str):
        raise SerializationError(f"mapping keys must be strings, got {key!r}")
    return key


__all__ = ["canonical_key", "canonical_sort", "encode_canonical", "encode_json"]
