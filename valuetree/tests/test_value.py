# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Value tree nodes: key identity, overwrite order, widening of big integers and
single-use draining of containers.
"""

from __future__ import annotations

import pytest

from valuetree.value import (
	I64_MAX,
	I64_MIN,
	U64_MAX,
	Bool,
	F64,
	I64,
	Mapping,
	Null,
	Sequence,
	String,
	Value,
	from_python,
	widen_unsigned,
)


def test_mapping_keys_compare_structurally() -> None:
	m = Mapping()
	m.insert(Sequence([I64(1), String("a")]), String("first"))
	m.insert(Sequence([I64(1), String("a")]), String("second"))
	assert len(m) == 1
	assert m.get(Sequence([I64(1), String("a")])) == String("second")


def test_mapping_keeps_bool_and_int_keys_apart() -> None:
	m = Mapping([(Bool(True), Null()), (I64(1), Null()), (F64(1.0), Null())])
	assert len(m) == 3


def test_mapping_overwrite_returns_old_value_and_moves_entry_last() -> None:
	m = from_python({"a": 1, "b": 2})
	old = m.insert(String("a"), I64(3))
	assert old == I64(1)
	assert m.keys() == [String("b"), String("a")]
	assert m.values() == [I64(2), I64(3)]


def test_mapping_remove_and_membership() -> None:
	m = from_python({"a": 1})
	assert String("a") in m
	assert m.remove(String("a")) == I64(1)
	assert String("a") not in m
	assert m.remove(String("a")) is None


def test_mapping_equality_is_order_sensitive() -> None:
	assert from_python({"a": 1, "b": 2}) == from_python({"a": 1, "b": 2})
	assert from_python({"a": 1, "b": 2}) != from_python({"b": 2, "a": 1})


def test_i64_rejects_out_of_range_and_non_int() -> None:
	I64(I64_MAX)
	I64(I64_MIN)
	with pytest.raises(ValueError):
		I64(I64_MAX + 1)
	with pytest.raises(TypeError):
		I64(True)


def test_from_python_builds_nested_tree() -> None:
	tree = from_python({"xs": [1, 2.5, None, True], "k": {"n": "s"}})
	assert tree == Mapping(
		[
			(String("xs"), Sequence([I64(1), F64(2.5), Null(), Bool(True)])),
			(String("k"), Mapping([(String("n"), String("s"))])),
		]
	)
	assert Value.from_python(("a",)) == Sequence([String("a")])


def test_from_python_widens_large_unsigned_to_text() -> None:
	assert from_python(I64_MAX) == I64(I64_MAX)
	assert from_python(I64_MAX + 1) == String("9223372036854775808")
	assert from_python(U64_MAX) == String("18446744073709551615")
	assert widen_unsigned(7) == I64(7)


def test_from_python_rejects_unrepresentable() -> None:
	with pytest.raises(ValueError):
		from_python(I64_MIN - 1)
	with pytest.raises(ValueError):
		from_python(U64_MAX + 1)
	with pytest.raises(TypeError):
		from_python({1, 2})


def test_drain_hands_out_children_once() -> None:
	seq = from_python([1, 2])
	assert seq.drain() == [I64(1), I64(2)]
	assert seq.consumed
	assert len(seq) == 0
	with pytest.raises(AssertionError):
		seq.drain()

	m = from_python({"a": 1})
	assert m.drain() == [(String("a"), I64(1))]
	assert m.consumed
	with pytest.raises(AssertionError):
		m.drain()


def test_clone_is_independent_of_original() -> None:
	tree = from_python({"a": [1]})
	copy = tree.clone()
	tree.drain()
	assert not copy.consumed
	assert copy == from_python({"a": [1]})


def test_kind_names_the_node_class() -> None:
	assert [v.kind for v in (Null(), Bool(False), I64(0), F64(0.0), String(""), Sequence([]), Mapping())] == [
		"Null",
		"Bool",
		"I64",
		"F64",
		"String",
		"Sequence",
		"Mapping",
	]


def test_clone_of_drained_containers_is_never_consumed() -> None:
	seq = from_python([1])
	seq.drain()
	m = from_python({"a": 1})
	m.drain()
	for copy in (seq.clone(), m.clone()):
		assert not copy.consumed
		assert len(copy) == 0
		copy.drain()
