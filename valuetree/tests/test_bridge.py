# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
ValueDecoder: dispatch of each node kind, arity checks after a visitor
returns, option and newtype handling, and single-use consumption.
"""

from __future__ import annotations

from typing import Any

import pytest

from valuetree.decoder import ValueDecoder, decode
from valuetree.errors import Custom, InvalidLength, InvalidType
from valuetree.shapes import IntOrStrShape, IntShape, ListShape, OptionalShape, PlainShape, Shape, StrShape, ValueShape
from valuetree.unexpected import Unexpected
from valuetree.value import Bool, F64, I64, Mapping, Null, Sequence, String, from_python
from valuetree.visitor import EXHAUSTED, Visitor


class Recorder(Visitor[tuple]):
	"""Reports which callback the decoder chose."""

	def visit_bool(self, v):
		return ("bool", v)

	def visit_i64(self, v):
		return ("i64", v)

	def visit_f64(self, v):
		return ("f64", v)

	def visit_str(self, v):
		return ("str", v)

	def visit_string(self, v):
		return ("string", v)

	def visit_unit(self):
		return ("unit",)

	def visit_none(self):
		return ("none",)

	def visit_some(self, decoder):
		return ("some", decoder.decode_any(self))

	def visit_newtype_struct(self, decoder):
		return ("newtype", decoder.decode_any(self))

	def visit_seq(self, access):
		return ("seq", list(access.elements(PlainShape())))

	def visit_map(self, access):
		return ("map", list(access.entries(PlainShape(), PlainShape())))


class TakeN(Visitor[list]):
	"""Consumes at most `n` elements or entries and stops."""

	def __init__(self, n: int) -> None:
		self.n = n

	def visit_seq(self, access):
		out = []
		for _ in range(self.n):
			item = access.next_element_seed(PlainShape())
			if item is EXHAUSTED:
				break
			out.append(item)
		return out

	def visit_map(self, access):
		out = []
		for _ in range(self.n):
			entry = access.next_entry_seed(PlainShape(), PlainShape())
			if entry is EXHAUSTED:
				break
			out.append(entry)
		return out


@pytest.mark.parametrize(
	"value, expected",
	[
		(Null(), ("unit",)),
		(Bool(False), ("bool", False)),
		(I64(7), ("i64", 7)),
		(F64(0.5), ("f64", 0.5)),
		(String("s"), ("string", "s")),
	],
)
def test_scalars_dispatch_to_matching_callback(value, expected) -> None:
	assert ValueDecoder(value).decode_any(Recorder()) == expected


def test_containers_dispatch_to_seq_and_map() -> None:
	assert ValueDecoder(from_python([1, "a"])).decode_any(Recorder()) == ("seq", [1, "a"])
	assert ValueDecoder(from_python({"k": 1})).decode_any(Recorder()) == ("map", [("k", 1)])
	assert ValueDecoder(Sequence([])).decode_any(Recorder()) == ("seq", [])
	assert ValueDecoder(Mapping()).decode_any(Recorder()) == ("map", [])


def test_typed_requests_follow_the_node_not_the_request() -> None:
	assert ValueDecoder(I64(300)).decode_u8(Recorder()) == ("i64", 300)
	assert ValueDecoder(String("x")).decode_bool(Recorder()) == ("string", "x")
	assert ValueDecoder(from_python([1])).decode_struct("S", ("a",), Recorder()) == ("seq", [1])
	assert ValueDecoder(from_python({"a": 1})).decode_tuple(2, Recorder()) == ("map", [("a", 1)])
	assert ValueDecoder(Null()).decode_unit_struct("U", Recorder()) == ("unit",)


def test_sequence_left_unconsumed_is_invalid_length() -> None:
	with pytest.raises(InvalidLength) as excinfo:
		ValueDecoder(from_python([1, 2, 3])).decode_any(TakeN(2))
	assert excinfo.value.length == 3
	assert excinfo.value.expected == "fewer elements in sequence"
	assert str(excinfo.value) == "invalid length 3, expected fewer elements in sequence"


def test_sequence_fully_consumed_succeeds() -> None:
	assert ValueDecoder(from_python([1, 2, 3])).decode_any(TakeN(3)) == [1, 2, 3]
	assert ValueDecoder(from_python([1, 2, 3])).decode_any(TakeN(10)) == [1, 2, 3]


def test_mapping_left_unconsumed_is_invalid_length() -> None:
	with pytest.raises(InvalidLength) as excinfo:
		ValueDecoder(from_python({"a": 1, "b": 2})).decode_any(TakeN(1))
	assert excinfo.value.length == 2
	assert excinfo.value.expected == "fewer elements in map"


def test_option_null_is_absent() -> None:
	assert decode(Null(), OptionalShape(IntShape())) is None
	assert ValueDecoder(Null()).decode_option(Recorder()) == ("none",)


def test_option_present_reoffers_the_same_value() -> None:
	assert decode(I64(5), OptionalShape(IntShape())) == 5
	assert ValueDecoder(I64(5)).decode_option(Recorder()) == ("some", ("i64", 5))
	assert decode(from_python([1, 2]), OptionalShape(ListShape(IntShape()))) == [1, 2]


def test_newtype_struct_reoffers_the_same_value() -> None:
	assert ValueDecoder(String("x")).decode_newtype_struct("Name", Recorder()) == ("newtype", ("string", "x"))


def test_decoder_handle_is_single_use() -> None:
	dec = ValueDecoder(I64(1))
	dec.decode_any(Recorder())
	with pytest.raises(AssertionError):
		dec.decode_any(Recorder())


def test_decoder_requires_a_tree_node() -> None:
	with pytest.raises(TypeError):
		ValueDecoder(5)  # type: ignore[arg-type]


def test_decoding_drains_the_source_tree() -> None:
	tree = from_python([1, [2]])
	expected = tree.clone()
	assert decode(tree, ValueShape()) == expected
	assert tree.consumed
	assert len(tree) == 0
	with pytest.raises(AssertionError):
		decode(tree, ValueShape())


def test_round_trip_through_value_shape_is_identity() -> None:
	tree = from_python({"a": [1, -2, 2.5, None, True, "s"], "b": {"nested": {"deep": []}}, "c": {}})
	expected = tree.clone()
	assert decode(tree, ValueShape()) == expected


def test_round_trip_keeps_non_string_keys() -> None:
	tree = Mapping(
		[
			(Sequence([I64(1)]), Null()),
			(Bool(False), F64(1.0)),
			(Null(), String("n")),
		]
	)
	expected = tree.clone()
	assert decode(tree, ValueShape()) == expected


def test_large_unsigned_decodes_to_its_exact_text() -> None:
	assert decode(from_python(2**64 - 1), IntOrStrShape()) == "18446744073709551615"
	assert decode(from_python(2**63 - 1), IntOrStrShape()) == 2**63 - 1
	assert ValueShape().visit_u64(2**63) == String("9223372036854775808")
	assert ValueShape().visit_u64(5) == I64(5)


def test_declining_visitor_reports_what_was_found() -> None:
	with pytest.raises(InvalidType) as excinfo:
		decode(I64(1), StrShape())
	assert excinfo.value.unexpected == Unexpected.signed(1)
	assert str(excinfo.value) == "invalid type: integer `1`, expected a string"


class _Rejecting(Shape[Any]):
	def __init__(self, error: Exception) -> None:
		self.error = error

	def visit_i64(self, v):
		raise self.error


def test_nested_errors_propagate_unchanged() -> None:
	error = Custom("rejected")
	with pytest.raises(Custom) as excinfo:
		decode(from_python({"a": [0, 1]}), _DeepList(_Rejecting(error)))
	assert excinfo.value is error


class _DeepList(Shape[Any]):
	def __init__(self, inner: Shape[Any]) -> None:
		self.inner = inner

	def visit_map(self, access):
		return dict(access.entries(StrShape(), ListShape(self.inner)))
