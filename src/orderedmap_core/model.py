"""Data model: the OrderedMap container, its value union and the Empty sentinel."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from reprlib import recursive_repr
from typing import IO, Iterator, Union

from .errors import EncodeError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Empty: singleton for missing keys / positions
# ---------------------------------------------------------------------------

class _EmptyType:
    """Sentinel returned when a key or position cannot be resolved.

    Distinct from ``None``, which is a stored JSON ``null``.
    """

    _instance: _EmptyType | None = None

    def __new__(cls) -> _EmptyType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Empty"

    def __bool__(self) -> bool:
        return False


Empty = _EmptyType()


# ---------------------------------------------------------------------------
# Value union
# ---------------------------------------------------------------------------

Value = Union[None, bool, int, float, str, "OrderedMap", "list[Value]"]


# ---------------------------------------------------------------------------
# OrderedMap
# ---------------------------------------------------------------------------

@dataclass(repr=False)
class OrderedMap:
    """A string-keyed map that remembers the order keys were added.

    Values can be fetched by key or by position.  ``_order`` and ``_entries``
    always hold the same key set; a key's position in ``_order`` is its index.

    Not safe for concurrent use: callers sharing a map between threads must
    guard it with their own lock.
    """

    _order: list[str] = field(default_factory=list, init=False)
    _entries: dict[str, Value] = field(default_factory=dict, init=False)

    # -- Lookup ---------------------------------------------------------

    def get(self, key: str) -> Value | _EmptyType:
        """Return the value stored under *key*, or ``Empty``."""
        return self._entries.get(key, Empty)

    def get_at(self, pos: int) -> Value | _EmptyType:
        """Return the value at position *pos*, or ``Empty`` outside ``[0, len)``.

        Negative positions do not count from the end.
        """
        if 0 <= pos < len(self._order):
            return self._entries[self._order[pos]]
        return Empty

    def exists(self, key: str) -> bool:
        return key in self._entries

    def index(self, key: str) -> int:
        """Return the position of *key*, or -1 if it is absent."""
        if key not in self._entries:
            return -1
        return self._order.index(key)

    # -- Mutation -------------------------------------------------------

    def set(self, key: str, value: Value) -> None:
        """Store *value* under *key*.

        A new key is appended; an existing key keeps its position.
        """
        if key not in self._entries:
            self._order.append(key)
        self._entries[key] = value

    def set_at(self, index: int, key: str, value: Value) -> None:
        """Insert *key* at position *index*, or update its value if present.

        - ``index == -1`` or ``index >= len`` appends, like ``set()``.
        - An existing key is never moved; only its value changes.
        - Other negative indexes become ``len + index + 1``, clamped to 0.
          (So ``-2`` lands before the last key, not at ``len - 2``.)
        """
        size = len(self._order)
        if index == -1 or index >= size:
            self.set(key, value)
            return

        if key not in self._entries:
            if index < 0:
                index = max(size + index + 1, 0)
            self._order.insert(index, key)
        self._entries[key] = value

    def delete(self, key: str) -> None:
        """Remove *key*; nothing happens if it is absent."""
        if key not in self._entries:
            return
        self._order.remove(key)
        del self._entries[key]

    def delete_at(self, offset: int) -> None:
        """Remove the key at *offset*; nothing happens outside ``[0, len)``."""
        if offset < 0 or offset >= len(self._order):
            return
        self.delete(self._order[offset])

    # -- Views (snapshots) ----------------------------------------------

    def keys(self) -> list[str]:
        return list(self._order)

    def values(self) -> list[Value]:
        return [self._entries[k] for k in self._order]

    def items(self) -> list[tuple[str, Value]]:
        return [(k, self._entries[k]) for k in self._order]

    # -- Protocols ------------------------------------------------------

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._order))

    @recursive_repr()
    def __repr__(self) -> str:
        return f"OrderedMap({self.items()!r})"

    def __str__(self) -> str:
        """The compact JSON text of the map, or ``""`` if it cannot be encoded."""
        try:
            return self.encode()
        except EncodeError as exc:
            logger.debug("OrderedMap could not be encoded: %s", exc)
            return ""

    # -- Codec ----------------------------------------------------------

    def encode(self) -> str:
        """Serialize to JSON text with members in key order."""
        from .writer import encode
        return encode(self)

    @classmethod
    def decode(cls, data: str | bytes | bytearray | IO, *, max_depth: int | None = None) -> OrderedMap:
        """Build a new map from JSON object text (see ``reader.decode``)."""
        from .reader import DEFAULT_MAX_DEPTH, decode
        if max_depth is None:
            max_depth = DEFAULT_MAX_DEPTH
        return decode(data, cls(), max_depth=max_depth)
