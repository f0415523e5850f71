# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Dynamic value tree: the already-parsed data model the decoder consumes.

The tree is a closed set of node classes (`Null`, `Bool`, `I64`, `F64`,
`String`, `Sequence`, `Mapping`). Producers (the flow reader, `from_python`)
build a tree once; `valuetree.decoder` then walks it and moves every
sub-value out of its parent exactly once.

Containers are single-use: `Sequence.drain()` / `Mapping.drain()` hand their
contents to the decoder and leave the node empty and marked consumed. Take a
`clone()` first if the same tree must be decoded twice.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1
U64_MAX = 2**64 - 1


class Value:
	"""Base class for value tree nodes."""

	__slots__ = ()

	def clone(self) -> "Value":
		"""Return an independent deep copy (safe to decode separately)."""
		return copy.deepcopy(self)

	@property
	def kind(self) -> str:
		return type(self).__name__

	@staticmethod
	def from_python(obj: Any) -> "Value":
		return from_python(obj)


@dataclass(frozen=True)
class Null(Value):
	"""Absent value (`null` / `~`)."""


@dataclass(frozen=True)
class Bool(Value):
	value: bool


@dataclass(frozen=True)
class I64(Value):
	value: int

	def __post_init__(self) -> None:
		if isinstance(self.value, bool) or not isinstance(self.value, int):
			raise TypeError(f"I64 expects an int, got {type(self.value).__name__}")
		if not I64_MIN <= self.value <= I64_MAX:
			raise ValueError(f"I64 value {self.value} outside the signed 64-bit range")


@dataclass(frozen=True)
class F64(Value):
	value: float


@dataclass(frozen=True)
class String(Value):
	value: str


@dataclass(eq=True)
class Sequence(Value):
	"""Ordered list of values."""

	items: List[Value] = field(default_factory=list)
	_consumed: bool = field(default=False, init=False, compare=False, repr=False)

	def __len__(self) -> int:
		return len(self.items)

	def __iter__(self) -> Iterator[Value]:
		return iter(self.items)

	@property
	def consumed(self) -> bool:
		return self._consumed

	def drain(self) -> List[Value]:
		"""Move all elements out, leaving this node empty and consumed."""
		if self._consumed:
			raise AssertionError("sequence value already consumed by a previous decode")
		items, self.items = self.items, []
		self._consumed = True
		return items

	def __deepcopy__(self, memo: Dict[int, Any]) -> "Sequence":
		# Like Mapping, a copy is never marked consumed.
		return Sequence([copy.deepcopy(item, memo) for item in self.items])


KeyFingerprint = Tuple[Any, ...]


def fingerprint(value: Value) -> KeyFingerprint:
	"""
	Hashable structural identity of a value.

	Two values have equal fingerprints exactly when they are deeply equal
	(same node kinds, same scalars, same ordered children), which is the key
	equality `Mapping` uses.
	"""
	if isinstance(value, Null):
		return ("null",)
	if isinstance(value, Bool):
		return ("bool", value.value)
	if isinstance(value, I64):
		return ("i64", value.value)
	if isinstance(value, F64):
		return ("f64", value.value)
	if isinstance(value, String):
		return ("str", value.value)
	if isinstance(value, Sequence):
		return ("seq", tuple(fingerprint(item) for item in value.items))
	if isinstance(value, Mapping):
		return ("map", tuple((fingerprint(k), fingerprint(v)) for k, v in value.items()))
	raise TypeError(f"not a value tree node: {type(value).__name__}")


class Mapping(Value):
	"""
	Insertion-ordered Value -> Value mapping with deep-equality keys.

	Inserting a key equal to an existing one replaces the old value and moves
	the entry to the end, so the last write wins both in content and order.
	"""

	__slots__ = ("_entries", "_consumed")

	def __init__(self, pairs: Optional[Iterable[Tuple[Value, Value]]] = None) -> None:
		self._entries: Dict[KeyFingerprint, Tuple[Value, Value]] = {}
		self._consumed = False
		for key, value in pairs or ():
			self.insert(key, value)

	def insert(self, key: Value, value: Value) -> Optional[Value]:
		"""Insert `key -> value`; return the replaced value, if any."""
		fp = fingerprint(key)
		old = self._entries.pop(fp, None)
		self._entries[fp] = (key, value)
		return old[1] if old is not None else None

	def get(self, key: Value, default: Optional[Value] = None) -> Optional[Value]:
		entry = self._entries.get(fingerprint(key))
		return entry[1] if entry is not None else default

	def remove(self, key: Value) -> Optional[Value]:
		entry = self._entries.pop(fingerprint(key), None)
		return entry[1] if entry is not None else None

	def __contains__(self, key: object) -> bool:
		return isinstance(key, Value) and fingerprint(key) in self._entries

	def __len__(self) -> int:
		return len(self._entries)

	def __iter__(self) -> Iterator[Value]:
		return (key for key, _ in self._entries.values())

	def keys(self) -> List[Value]:
		return [key for key, _ in self._entries.values()]

	def values(self) -> List[Value]:
		return [value for _, value in self._entries.values()]

	def items(self) -> List[Tuple[Value, Value]]:
		return list(self._entries.values())

	@property
	def consumed(self) -> bool:
		return self._consumed

	def drain(self) -> List[Tuple[Value, Value]]:
		"""Move all pairs out in insertion order, leaving this node empty and consumed."""
		if self._consumed:
			raise AssertionError("mapping value already consumed by a previous decode")
		pairs = list(self._entries.values())
		self._entries = {}
		self._consumed = True
		return pairs

	def __eq__(self, other: object) -> bool:
		# Order-sensitive, like the linked map it models.
		if not isinstance(other, Mapping):
			return NotImplemented
		return self.items() == other.items()

	__hash__ = None  # type: ignore[assignment]

	def __repr__(self) -> str:
		inner = ", ".join(f"{k!r}: {v!r}" for k, v in self._entries.values())
		return f"Mapping({{{inner}}})"

	def __deepcopy__(self, memo: Dict[int, Any]) -> "Mapping":
		clone = Mapping()
		for key, value in self._entries.values():
			clone.insert(copy.deepcopy(key, memo), copy.deepcopy(value, memo))
		return clone


def widen_unsigned(u: int) -> Value:
	"""
	Convert an unsigned 64-bit integer into a tree node.

	Values that fit the signed range become `I64`; larger ones are kept
	exactly as their decimal text instead of being truncated.
	"""
	if u < 0 or u > U64_MAX:
		raise ValueError(f"{u} is not an unsigned 64-bit integer")
	if u <= I64_MAX:
		return I64(u)
	return String(str(u))


def from_python(obj: Any) -> Value:
	"""
	Build a value tree from plain Python data.

	Accepts None, bool, int, float, str, list/tuple, dict and existing
	Value nodes (taken as-is). Integers above the signed range go through
	`widen_unsigned`; anything outside [i64 min, u64 max] is rejected.
	"""
	if isinstance(obj, Value):
		return obj
	if obj is None:
		return Null()
	if isinstance(obj, bool):
		return Bool(obj)
	if isinstance(obj, int):
		if obj < I64_MIN:
			raise ValueError(f"integer {obj} is below the signed 64-bit range")
		if obj > I64_MAX:
			return widen_unsigned(obj)
		return I64(obj)
	if isinstance(obj, float):
		return F64(obj)
	if isinstance(obj, str):
		return String(obj)
	if isinstance(obj, (list, tuple)):
		return Sequence([from_python(item) for item in obj])
	if isinstance(obj, dict):
		return Mapping((from_python(k), from_python(v)) for k, v in obj.items())
	raise TypeError(f"cannot build a value tree node from {type(obj).__name__}")


__all__ = [
	"I64_MIN",
	"I64_MAX",
	"U64_MAX",
	"Value",
	"Null",
	"Bool",
	"I64",
	"F64",
	"String",
	"Sequence",
	"Mapping",
	"fingerprint",
	"widen_unsigned",
	"from_python",
]
