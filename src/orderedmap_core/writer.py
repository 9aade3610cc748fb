"""Writer layer: serializes OrderedMap structures to compact JSON text."""

from __future__ import annotations

import json
import math
from typing import IO, Any

from .errors import EncodeError
from .model import OrderedMap, Value


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def encode(om: OrderedMap) -> str:
    """Return *om* as a JSON object whose members follow the key order.

    No whitespace is added.  Raises ``EncodeError`` if any contained value
    cannot be represented; nothing partial is returned in that case.
    """
    out: list[str] = []
    try:
        _encode_object(om.items(), out, {id(om)})
    except RecursionError:
        raise EncodeError("value is nested too deeply to encode") from None
    return "".join(out)


def dump(om: OrderedMap, fp: IO[str]) -> None:
    """Write ``encode(om)`` to the text stream *fp*."""
    fp.write(encode(om))


class OrderedMapEncoder(json.JSONEncoder):
    """``json.JSONEncoder`` that understands OrderedMap.

    Lets the stdlib writer handle layout while keeping member order::

        json.dumps(om, cls=OrderedMapEncoder, indent=2)
    """

    def default(self, o: Any) -> Any:
        if isinstance(o, OrderedMap):
            return dict(o.items())
        return super().default(o)


# ---------------------------------------------------------------------------
# Recursive encoding
# ---------------------------------------------------------------------------

def _encode_key(key: str) -> str:
    return json.dumps(key, ensure_ascii=False)


def _encode_object(items: list[tuple[Any, Value]], out: list[str], markers: set[int]) -> None:
    out.append("{")
    for idx, (key, value) in enumerate(items):
        if idx > 0:
            out.append(",")
        if not isinstance(key, str):
            raise EncodeError(f"object keys must be str, not {type(key).__name__}")
        out.append(_encode_key(key))
        out.append(":")
        _encode_value(value, out, markers)
    out.append("}")


def _encode_value(value: Value, out: list[str], markers: set[int]) -> None:
    if value is None:
        out.append("null")
    elif value is True:
        out.append("true")
    elif value is False:
        out.append("false")
    elif isinstance(value, str):
        out.append(json.dumps(value, ensure_ascii=False))
    elif isinstance(value, int):
        try:
            out.append(int.__repr__(value))
        except ValueError as exc:
            raise EncodeError(str(exc)) from None
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise EncodeError(f"float value {value!r} is not JSON compliant")
        out.append(float.__repr__(value))
    elif isinstance(value, (OrderedMap, dict, list, tuple)):
        marker = id(value)
        if marker in markers:
            raise EncodeError("circular reference detected")
        markers.add(marker)
        if isinstance(value, OrderedMap):
            _encode_object(value.items(), out, markers)
        elif isinstance(value, dict):
            _encode_object(list(value.items()), out, markers)
        else:
            _encode_array(value, out, markers)
        markers.remove(marker)
    else:
        raise EncodeError(f"object of type {type(value).__name__} is not JSON serializable")


def _encode_array(items: list[Value] | tuple, out: list[str], markers: set[int]) -> None:
    out.append("[")
    for idx, item in enumerate(items):
        if idx > 0:
            out.append(",")
        _encode_value(item, out, markers)
    out.append("]")
