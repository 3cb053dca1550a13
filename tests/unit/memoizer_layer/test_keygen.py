"""
Unit Tests for Cache Key Generation

Tests determinism, argument filtering and the structural fingerprint.
"""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from memocache.memoizer.keygen import derive_key, filter_args, fingerprint


@dataclass
class Point:
    x: int
    y: int


class Account(BaseModel):
    id: int
    name: str


@pytest.mark.unit
class TestFilterArgs:
    """Test positional argument filtering."""

    def test_no_skip_returns_all(self):
        assert filter_args((1, 2, 3), None) == (1, 2, 3)
        assert filter_args((1, 2, 3), []) == (1, 2, 3)

    def test_skip_positions_removed(self):
        """Test that listed indexes are dropped and order is kept."""
        assert filter_args(("a", "b", "c", "d"), {1, 3}) == ("a", "c")

    def test_out_of_range_positions_ignored(self):
        assert filter_args((1, 2), [5]) == (1, 2)


@pytest.mark.unit
class TestDeriveKey:
    """Test key derivation."""

    def test_key_is_md5_hex(self):
        key = derive_key("fetch0", (1,))

        assert len(key) == 32
        assert all(c in "0123456789abcdef" for c in key)

    def test_same_inputs_same_key(self):
        assert derive_key("fetch0", (1, "a"), {"x": 1}) == derive_key("fetch0", (1, "a"), {"x": 1})

    def test_name_is_part_of_key(self):
        """Test that two operations with equal arguments get different keys."""
        assert derive_key("fetch0", (1,)) != derive_key("fetch1", (1,))

    def test_arguments_are_part_of_key(self):
        assert derive_key("fetch0", (1,)) != derive_key("fetch0", (2,))
        assert derive_key("fetch0", (1,)) != derive_key("fetch0", ("1",))

    def test_kwargs_order_irrelevant(self):
        assert derive_key("f", (), {"a": 1, "b": 2}) == derive_key("f", (), {"b": 2, "a": 1})

    def test_empty_kwargs_same_as_none(self):
        assert derive_key("f", (1,), {}) == derive_key("f", (1,), None)

    def test_kwargs_distinguish_calls(self):
        assert derive_key("f", (1,), {"verbose": True}) != derive_key("f", (1,))


@pytest.mark.unit
class TestFingerprint:
    """Test the structural serialization used for keys."""

    def test_dict_insertion_order_irrelevant(self):
        assert fingerprint({"a": 1, "b": [1, 2]}) == fingerprint({"b": [1, 2], "a": 1})

    def test_list_order_matters(self):
        assert fingerprint([1, 2]) != fingerprint([2, 1])

    def test_tuple_and_list_equivalent(self):
        assert fingerprint((1, 2)) == fingerprint([1, 2])

    def test_set_order_irrelevant(self):
        assert fingerprint({3, 1, 2}) == fingerprint({2, 3, 1})
        assert fingerprint(frozenset({"a", "b"})) == fingerprint({"b", "a"})

    def test_non_string_mapping_keys(self):
        """Test that int and str keys are not conflated."""
        assert fingerprint({1: "a"}) != fingerprint({"1": "a"})

    def test_large_integers(self):
        assert fingerprint(2**80) != fingerprint(2**81)

    def test_bytes(self):
        assert fingerprint(b"abc") != fingerprint(b"abd")

    def test_dataclass_fields(self):
        assert fingerprint(Point(1, 2)) == fingerprint(Point(1, 2))
        assert fingerprint(Point(1, 2)) != fingerprint(Point(2, 1))

    def test_pydantic_model_fields(self):
        assert fingerprint(Account(id=1, name="a")) == fingerprint(Account(id=1, name="a"))
        assert fingerprint(Account(id=1, name="a")) != fingerprint(Account(id=2, name="a"))

    def test_plain_object_attributes(self):
        class Query:
            def __init__(self, term):
                self.term = term

        assert fingerprint(Query("x")) == fingerprint(Query("x"))
        assert fingerprint(Query("x")) != fingerprint(Query("y"))

    def test_depth_limit_makes_deep_values_opaque(self):
        """Test that structure below the depth limit does not affect the fingerprint."""
        deep_a = {"l1": {"l2": {"l3": "a"}}}
        deep_b = {"l1": {"l2": {"l3": "b"}}}

        assert fingerprint(deep_a, depth=2) == fingerprint(deep_b, depth=2)
        assert fingerprint(deep_a, depth=4) != fingerprint(deep_b, depth=4)

    def test_self_referencing_value_terminates(self):
        """Test that cycles are cut by the depth limit."""
        cyclic = {"name": "node"}
        cyclic["self"] = cyclic

        assert fingerprint(cyclic) == fingerprint(cyclic)

    def test_callables_fingerprinted_by_name(self):
        assert fingerprint(len) == fingerprint(len)
        assert fingerprint(len) != fingerprint(print)

    def test_slotted_objects_compared_by_value(self):
        """Test that objects without __dict__ are walked through their slots."""

        class Range:
            __slots__ = ("low", "high")

            def __init__(self, low, high):
                self.low = low
                self.high = high

        assert fingerprint(Range(1, 5)) == fingerprint(Range(1, 5))
        assert fingerprint(Range(1, 5)) != fingerprint(Range(1, 6))

    def test_inherited_slots_included(self):
        class Base:
            __slots__ = "kind"

            def __init__(self, kind):
                self.kind = kind

        class Tagged(Base):
            __slots__ = ("tag",)

            def __init__(self, kind, tag):
                super().__init__(kind)
                self.tag = tag

        assert fingerprint(Tagged("a", 1)) == fingerprint(Tagged("a", 1))
        assert fingerprint(Tagged("a", 1)) != fingerprint(Tagged("b", 1))

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_floats_distinct_from_none(self, value):
        assert fingerprint(value) != fingerprint(None)
        assert fingerprint(value) == fingerprint(value)

    def test_infinities_distinct(self):
        assert fingerprint(float("inf")) != fingerprint(float("-inf"))
        assert fingerprint(float("inf")) != fingerprint(float("nan"))

    def test_finite_floats_unchanged(self):
        assert fingerprint(1.5) == b"1.5"
