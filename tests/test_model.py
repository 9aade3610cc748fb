"""Tests for orderedmap_core.model."""

import sys

import pytest

from orderedmap_core.model import Empty, OrderedMap, _EmptyType


def _make(*keys):
    om = OrderedMap()
    for i, k in enumerate(keys):
        om.set(k, i)
    return om


class TestEmpty:
    def test_singleton(self):
        assert Empty is _EmptyType()

    def test_falsy(self):
        assert not Empty

    def test_repr(self):
        assert repr(Empty) == "Empty"

    def test_distinct_from_none(self):
        assert Empty is not None


# ---------------------------------------------------------------------------
# Construction / lookup
# ---------------------------------------------------------------------------

def test_new_is_empty():
    om = OrderedMap()
    assert len(om) == 0
    assert om.keys() == []
    assert om.values() == []


def test_get_existing():
    om = OrderedMap()
    om.set("a", 1)
    assert om.get("a") == 1


def test_get_missing_returns_empty():
    assert OrderedMap().get("nope") is Empty


def test_get_stored_none_is_found():
    om = OrderedMap()
    om.set("a", None)
    assert om.get("a") is None
    assert om.exists("a")


def test_get_at():
    om = _make("a", "b", "c")
    assert om.get_at(0) == 0
    assert om.get_at(2) == 2


@pytest.mark.parametrize("pos", [3, 10, -1, -3])
def test_get_at_out_of_range(pos):
    om = _make("a", "b", "c")
    assert om.get_at(pos) is Empty


def test_get_at_on_empty_map():
    assert OrderedMap().get_at(0) is Empty


def test_exists_and_contains():
    om = _make("a")
    assert om.exists("a")
    assert "a" in om
    assert not om.exists("b")
    assert "b" not in om
    assert not OrderedMap().exists("a")


def test_index():
    om = _make("a", "b", "c")
    assert om.index("a") == 0
    assert om.index("c") == 2
    assert om.index("z") == -1


# ---------------------------------------------------------------------------
# set
# ---------------------------------------------------------------------------

def test_keys_follow_first_insertion():
    om = OrderedMap()
    for k in ["z", "a", "m", "b"]:
        om.set(k, k.upper())
    om.set("a", "again")
    om.set("z", 0)
    assert om.keys() == ["z", "a", "m", "b"]


def test_set_existing_keeps_index():
    om = _make("a", "b", "c")
    om.set("b", "new")
    assert om.index("b") == 1
    assert om.get("b") == "new"
    assert len(om) == 3


# ---------------------------------------------------------------------------
# set_at
# ---------------------------------------------------------------------------

def test_set_at_minus_one_appends():
    om = _make("a", "b")
    om.set_at(-1, "c", 9)
    assert om.keys() == ["a", "b", "c"]


def test_set_at_len_appends():
    om = _make("a", "b")
    om.set_at(2, "c", 9)
    assert om.keys() == ["a", "b", "c"]


def test_set_at_beyond_len_appends():
    om = _make("a", "b")
    om.set_at(100, "c", 9)
    assert om.keys() == ["a", "b", "c"]
    assert om.get("c") == 9


def test_set_at_matches_set():
    a = _make("x", "y")
    b = _make("x", "y")
    c = _make("x", "y")
    a.set("k", 1)
    b.set_at(-1, "k", 1)
    c.set_at(len(c), "k", 1)
    assert a == b == c


def test_set_at_inserts_in_middle():
    om = _make("a", "b", "c")
    om.set_at(1, "x", "X")
    assert om.keys() == ["a", "x", "b", "c"]
    assert om.get_at(1) == "X"


def test_set_at_front():
    om = _make("a", "b")
    om.set_at(0, "x", "X")
    assert om.keys() == ["x", "a", "b"]


def test_set_at_on_empty_map():
    om = OrderedMap()
    om.set_at(0, "a", 1)
    assert om.keys() == ["a"]


def test_set_at_existing_key_only_updates_value():
    om = _make("a", "b", "c")
    om.set_at(0, "c", "new")
    assert om.keys() == ["a", "b", "c"]
    assert om.index("c") == 2
    assert om.get("c") == "new"


@pytest.mark.parametrize(
    "index, expected",
    [
        (-2, ["a", "b", "x", "c"]),   # 3 + -2 + 1 = 2
        (-3, ["a", "x", "b", "c"]),   # 3 + -3 + 1 = 1
        (-4, ["x", "a", "b", "c"]),   # 0
        (-50, ["x", "a", "b", "c"]),  # clamped to 0
    ],
)
def test_set_at_negative_index(index, expected):
    om = _make("a", "b", "c")
    om.set_at(index, "x", "X")
    assert om.keys() == expected
    assert om.get("x") == "X"


def test_set_at_keeps_keys_and_entries_in_sync():
    om = _make("a", "b", "c")
    om.set_at(-2, "x", 1)
    om.set_at(1, "y", 2)
    om.set_at(0, "a", 3)
    assert sorted(om.keys()) == sorted(set(om.keys()))
    assert len(om.keys()) == len(om.values()) == len(om)


# ---------------------------------------------------------------------------
# delete / delete_at
# ---------------------------------------------------------------------------

def test_delete():
    om = _make("a", "b", "c")
    om.delete("b")
    assert om.keys() == ["a", "c"]
    assert not om.exists("b")
    assert om.index("b") == -1
    assert om.get("b") is Empty


def test_delete_missing_is_noop():
    om = _make("a")
    om.delete("zzz")
    assert om.keys() == ["a"]


def test_delete_at():
    om = _make("a", "b", "c")
    om.delete_at(0)
    assert om.keys() == ["b", "c"]


@pytest.mark.parametrize("offset", [-1, 3, 99])
def test_delete_at_out_of_range_is_noop(offset):
    om = _make("a", "b", "c")
    om.delete_at(offset)
    assert len(om) == 3


def test_delete_then_set_moves_to_end():
    om = _make("a", "b", "c")
    om.delete("a")
    om.set("a", "back")
    assert om.keys() == ["b", "c", "a"]
    assert om.values() == [1, 2, "back"]


# ---------------------------------------------------------------------------
# Views and protocols
# ---------------------------------------------------------------------------

def test_keys_is_a_snapshot():
    om = _make("a", "b")
    keys = om.keys()
    keys.append("c")
    keys.reverse()
    assert om.keys() == ["a", "b"]
    assert len(om) == 2


def test_values_follow_order():
    om = OrderedMap()
    om.set("b", 2)
    om.set("a", 1)
    om.set("b", 20)
    assert om.values() == [20, 1]


def test_items():
    om = _make("a", "b")
    assert om.items() == [("a", 0), ("b", 1)]


def test_iter_over_keys():
    om = _make("x", "y")
    assert list(om) == ["x", "y"]


def test_iter_survives_mutation():
    om = _make("a", "b", "c")
    for k in om:
        om.delete(k)
    assert len(om) == 0


def test_equality_is_order_sensitive():
    a = OrderedMap()
    a.set("x", 1)
    a.set("y", 2)
    b = OrderedMap()
    b.set("y", 2)
    b.set("x", 1)
    assert a != b
    b.delete("y")
    b.set("y", 2)
    assert a == b


def test_equality_nested():
    def build():
        inner = OrderedMap()
        inner.set("c", [1, 2])
        om = OrderedMap()
        om.set("inner", inner)
        return om
    assert build() == build()


def test_repr():
    om = OrderedMap()
    om.set("a", 1)
    assert repr(om) == "OrderedMap([('a', 1)])"


# ---------------------------------------------------------------------------
# str() / codec shortcuts
# ---------------------------------------------------------------------------

def test_str_is_json():
    om = OrderedMap()
    om.set("b", 1)
    om.set("a", "x")
    assert str(om) == '{"b":1,"a":"x"}'


def test_str_of_empty_map():
    assert str(OrderedMap()) == "{}"


def test_str_swallows_encode_errors():
    om = OrderedMap()
    om.set("bad", object())
    assert str(om) == ""


def test_decode_classmethod():
    om = OrderedMap.decode('{"b":1,"a":2}')
    assert isinstance(om, OrderedMap)
    assert om.keys() == ["b", "a"]
    assert om.encode() == '{"b":1,"a":2}'


def test_repr_self_reference():
    om = OrderedMap()
    om.set("me", om)
    assert repr(om) == "OrderedMap([('me', ...)])"


def test_str_logs_encode_failure(caplog):
    om = OrderedMap()
    om.set("bad", {1, 2})
    with caplog.at_level("DEBUG", logger="orderedmap_core.model"):
        assert str(om) == ""
    assert "could not be encoded" in caplog.text


@pytest.mark.skipif(
    not getattr(sys, "get_int_max_str_digits", lambda: 0)(),
    reason="interpreter has no integer string conversion limit",
)
def test_str_of_int_over_digit_limit_is_empty():
    om = OrderedMap()
    om.set("a", 10 ** sys.get_int_max_str_digits())
    assert str(om) == ""


def test_package_exports_sentinel_not_its_type():
    import orderedmap_core

    assert orderedmap_core.Empty is Empty
    assert "Empty" in orderedmap_core.__all__
    assert "_EmptyType" not in orderedmap_core.__all__
    assert not hasattr(orderedmap_core, "_EmptyType")
