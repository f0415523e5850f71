# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shapes derived from type hints, decoded end to end with `decode_into`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, NewType, Optional, Tuple, Union

import pytest

from valuetree import decode_into
from valuetree.errors import InvalidType, MissingField, UnknownVariant
from valuetree.reflect import ShapeResolutionError, shape_for
from valuetree.shapes import ListShape, OptionalShape, TupleShape
from valuetree.value import I64, Value, from_python


class Kind(enum.Enum):
	MOVE = "m"
	QUIT = "q"


@dataclass
class Record:
	name: str
	tags: List[str]
	kind: Kind
	note: Optional[str] = None
	extra: Dict[str, int] = field(default_factory=dict)


@dataclass
class Point:
	x: int
	y: int


@dataclass
class Circle:
	center: Point
	radius: float


@dataclass
class Square:
	corner: Point
	side: float


@dataclass
class Node:
	label: str
	children: List[Node] = field(default_factory=list)


UserId = NewType("UserId", int)


def test_record_decodes_into_dataclass() -> None:
	tree = from_python({"name": "a", "tags": ["x", "y"], "kind": "MOVE"})
	assert decode_into(tree, Record) == Record(name="a", tags=["x", "y"], kind=Kind.MOVE)


def test_record_missing_required_field() -> None:
	with pytest.raises(MissingField) as excinfo:
		decode_into(from_python({"name": "a", "tags": []}), Record)
	assert excinfo.value.field == "kind"


def test_defaults_are_fresh_per_decode() -> None:
	first = decode_into(from_python({"name": "a", "tags": [], "kind": "QUIT"}), Record)
	second = decode_into(from_python({"name": "b", "tags": [], "kind": "QUIT"}), Record)
	assert first.extra == {} and first.note is None
	assert first.extra is not second.extra


def test_enum_members_are_matched_by_name() -> None:
	assert decode_into(from_python("QUIT"), Kind) is Kind.QUIT
	with pytest.raises(UnknownVariant):
		decode_into(from_python("q"), Kind)


def test_union_of_dataclasses_is_tagged_by_class_name() -> None:
	tree = from_python({"Circle": {"center": {"x": 0, "y": 1}, "radius": 2}})
	assert decode_into(tree, Union[Circle, Square]) == Circle(center=Point(0, 1), radius=2.0)
	assert decode_into(from_python(None), Optional[Union[Circle, Square]]) is None


def test_recursive_dataclass() -> None:
	tree = from_python({"label": "root", "children": [{"label": "leaf"}]})
	assert decode_into(tree, Node) == Node("root", [Node("leaf")])


def test_tuples() -> None:
	assert decode_into(from_python([1, "a"]), Tuple[int, str]) == (1, "a")
	assert decode_into(from_python([1, 2, 3]), Tuple[int, ...]) == (1, 2, 3)
	assert isinstance(shape_for(Tuple[int, str]), TupleShape)
	assert isinstance(shape_for(Tuple[int, ...]), ListShape)


def test_builtin_generics_and_optionals() -> None:
	assert decode_into(from_python({"a": [1, None]}), dict[str, list[Optional[int]]]) == {"a": [1, None]}
	assert isinstance(shape_for(Optional[int]), OptionalShape)


def test_newtype_unwraps_to_supertype() -> None:
	assert decode_into(I64(5), UserId) == 5
	with pytest.raises(InvalidType):
		decode_into(from_python("x"), UserId)


def test_any_and_value_hints() -> None:
	assert decode_into(from_python({"a": [1]}), Any) == {"a": [1]}
	tree = from_python([1, {"b": None}])
	expected = tree.clone()
	assert decode_into(tree, Value) == expected


def test_unsupported_hints() -> None:
	with pytest.raises(ShapeResolutionError):
		shape_for(set[int])
	with pytest.raises(ShapeResolutionError):
		shape_for(Union[int, str])
	with pytest.raises(TypeError):
		shape_for(object)
