"""orderedmap_core: insertion-ordered string-keyed map with a structural JSON codec."""

from .errors import EncodeError, OrderedMapError, ParseError
from .model import Empty, OrderedMap, Value
from .reader import DEFAULT_MAX_DEPTH, decode
from .writer import OrderedMapEncoder, dump, encode

__all__ = [
    "OrderedMap",
    "Value",
    "Empty",
    "encode",
    "decode",
    "dump",
    "OrderedMapEncoder",
    "DEFAULT_MAX_DEPTH",
    "OrderedMapError",
    "ParseError",
    "EncodeError",
]
