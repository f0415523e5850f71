# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic tokens describing what the decoder actually found.

`Unexpected` is only ever used to build "invalid type / invalid value"
messages; it carries no decoding behavior.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from valuetree.value import Bool, F64, I64, Mapping, Null, Sequence, String, Value


class UnexpectedKind(Enum):
	BOOL = auto()
	UNSIGNED = auto()
	SIGNED = auto()
	FLOAT = auto()
	CHAR = auto()
	STR = auto()
	BYTES = auto()
	UNIT = auto()
	OPTION = auto()
	NEWTYPE_STRUCT = auto()
	SEQ = auto()
	MAP = auto()
	ENUM = auto()
	UNIT_VARIANT = auto()
	NEWTYPE_VARIANT = auto()
	TUPLE_VARIANT = auto()
	STRUCT_VARIANT = auto()
	OTHER = auto()


_FIXED_TEXT = {
	UnexpectedKind.BYTES: "byte array",
	UnexpectedKind.UNIT: "unit value",
	UnexpectedKind.OPTION: "Option value",
	UnexpectedKind.NEWTYPE_STRUCT: "newtype struct",
	UnexpectedKind.SEQ: "sequence",
	UnexpectedKind.MAP: "map",
	UnexpectedKind.ENUM: "enum",
	UnexpectedKind.UNIT_VARIANT: "unit variant",
	UnexpectedKind.NEWTYPE_VARIANT: "newtype variant",
	UnexpectedKind.TUPLE_VARIANT: "tuple variant",
	UnexpectedKind.STRUCT_VARIANT: "struct variant",
}


@dataclass(frozen=True)
class Unexpected:
	"""What was found: a kind plus the offending scalar, when there is one."""

	kind: UnexpectedKind
	payload: Any = None

	@classmethod
	def boolean(cls, b: bool) -> "Unexpected":
		return cls(UnexpectedKind.BOOL, b)

	@classmethod
	def unsigned(cls, u: int) -> "Unexpected":
		return cls(UnexpectedKind.UNSIGNED, u)

	@classmethod
	def signed(cls, i: int) -> "Unexpected":
		return cls(UnexpectedKind.SIGNED, i)

	@classmethod
	def floating(cls, f: float) -> "Unexpected":
		return cls(UnexpectedKind.FLOAT, f)

	@classmethod
	def char(cls, c: str) -> "Unexpected":
		return cls(UnexpectedKind.CHAR, c)

	@classmethod
	def string(cls, s: str) -> "Unexpected":
		return cls(UnexpectedKind.STR, s)

	@classmethod
	def other(cls, description: str) -> "Unexpected":
		return cls(UnexpectedKind.OTHER, description)

	def __str__(self) -> str:
		kind = self.kind
		if kind is UnexpectedKind.BOOL:
			return f"boolean `{'true' if self.payload else 'false'}`"
		if kind in (UnexpectedKind.UNSIGNED, UnexpectedKind.SIGNED):
			return f"integer `{self.payload}`"
		if kind is UnexpectedKind.FLOAT:
			return f"floating point `{self.payload!r}`"
		if kind is UnexpectedKind.CHAR:
			return f"character `{self.payload}`"
		if kind is UnexpectedKind.STR:
			return f"string {json.dumps(self.payload, ensure_ascii=False)}"
		if kind is UnexpectedKind.OTHER:
			return str(self.payload)
		return _FIXED_TEXT[kind]


UNIT = Unexpected(UnexpectedKind.UNIT)
OPTION = Unexpected(UnexpectedKind.OPTION)
NEWTYPE_STRUCT = Unexpected(UnexpectedKind.NEWTYPE_STRUCT)
SEQ = Unexpected(UnexpectedKind.SEQ)
MAP = Unexpected(UnexpectedKind.MAP)
ENUM = Unexpected(UnexpectedKind.ENUM)
UNIT_VARIANT = Unexpected(UnexpectedKind.UNIT_VARIANT)


def classify(value: Value) -> Unexpected:
	"""Map a tree node to the token used in type-error messages."""
	if isinstance(value, Null):
		return UNIT
	if isinstance(value, Bool):
		return Unexpected.boolean(value.value)
	if isinstance(value, I64):
		return Unexpected.signed(value.value)
	if isinstance(value, F64):
		return Unexpected.floating(value.value)
	if isinstance(value, String):
		return Unexpected.string(value.value)
	if isinstance(value, Sequence):
		return SEQ
	if isinstance(value, Mapping):
		return MAP
	raise TypeError(f"not a value tree node: {type(value).__name__}")


__all__ = [
	"UnexpectedKind",
	"Unexpected",
	"UNIT",
	"OPTION",
	"NEWTYPE_STRUCT",
	"SEQ",
	"MAP",
	"ENUM",
	"UNIT_VARIANT",
	"classify",
]
