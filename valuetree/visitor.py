# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Callback surface between the decoder and target shapes.

A target shape implements `Visitor` (the callbacks it accepts) and `Seed`
(`decode(decoder)`: which entry point of the decoder to call). The decoder
inspects the tree node and invokes exactly one visitor callback; aggregates
are handed over as access objects (`SeqAccess`, `MapAccess`, `EnumAccess`)
that the visitor pulls nested values from, passing a seed per element.

Callbacks a visitor does not override decline with `InvalidType`, using
`expecting()` as the "expected ..." text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Iterator, Optional, Protocol, Sequence, Tuple, TypeVar

from valuetree import unexpected as U
from valuetree.errors import InvalidType
from valuetree.unexpected import Unexpected

if TYPE_CHECKING:
	from valuetree.decoder import Decoder

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class _Exhausted:
	"""Sentinel returned by `next_*` once an access has no elements left."""

	_instance: Optional["_Exhausted"] = None

	def __new__(cls) -> "_Exhausted":
		if cls._instance is None:
			cls._instance = super().__new__(cls)
		return cls._instance

	def __repr__(self) -> str:
		return "EXHAUSTED"

	def __bool__(self) -> bool:
		return False


EXHAUSTED: Any = _Exhausted()


class Seed(Protocol[T_co]):
	"""A parametrized decode request for one nested value."""

	def decode(self, decoder: "Decoder") -> T_co:
		...


class Visitor(Generic[T]):
	"""Base visitor: every callback declines unless overridden."""

	def expecting(self) -> str:
		return "a value"

	def visit_bool(self, v: bool) -> T:
		raise InvalidType(Unexpected.boolean(v), self.expecting())

	def visit_i64(self, v: int) -> T:
		raise InvalidType(Unexpected.signed(v), self.expecting())

	def visit_u64(self, v: int) -> T:
		raise InvalidType(Unexpected.unsigned(v), self.expecting())

	def visit_f64(self, v: float) -> T:
		raise InvalidType(Unexpected.floating(v), self.expecting())

	def visit_str(self, v: str) -> T:
		raise InvalidType(Unexpected.string(v), self.expecting())

	def visit_string(self, v: str) -> T:
		# Owned and borrowed strings look the same in Python.
		return self.visit_str(v)

	def visit_unit(self) -> T:
		raise InvalidType(U.UNIT, self.expecting())

	def visit_none(self) -> T:
		raise InvalidType(U.OPTION, self.expecting())

	def visit_some(self, decoder: "Decoder") -> T:
		raise InvalidType(U.OPTION, self.expecting())

	def visit_newtype_struct(self, decoder: "Decoder") -> T:
		raise InvalidType(U.NEWTYPE_STRUCT, self.expecting())

	def visit_seq(self, access: "SeqAccess") -> T:
		raise InvalidType(U.SEQ, self.expecting())

	def visit_map(self, access: "MapAccess") -> T:
		raise InvalidType(U.MAP, self.expecting())

	def visit_enum(self, access: "EnumAccess") -> T:
		raise InvalidType(U.ENUM, self.expecting())


class SeqAccess:
	"""Pull-style access to the elements of a sequence."""

	def next_element_seed(self, seed: Seed[T]) -> T:
		"""Decode the next element with `seed`, or return EXHAUSTED."""
		raise NotImplementedError

	def size_hint(self) -> Optional[int]:
		"""Exact number of remaining elements when known, else None."""
		return None

	def elements(self, seed: Seed[T]) -> Iterator[T]:
		"""Decode every remaining element with the same seed."""
		while True:
			item = self.next_element_seed(seed)
			if item is EXHAUSTED:
				return
			yield item


class MapAccess:
	"""
	Pull-style access to the entries of a mapping.

	Keys and values must be requested alternately: `next_key_seed` first,
	then `next_value_seed` for the same entry.
	"""

	def next_key_seed(self, seed: Seed[T]) -> T:
		"""Decode the next key with `seed`, or return EXHAUSTED."""
		raise NotImplementedError

	def next_value_seed(self, seed: Seed[T]) -> T:
		raise NotImplementedError

	def next_entry_seed(self, key_seed: Seed[Any], value_seed: Seed[Any]) -> Any:
		"""Decode the next (key, value) pair, or return EXHAUSTED."""
		key = self.next_key_seed(key_seed)
		if key is EXHAUSTED:
			return EXHAUSTED
		return key, self.next_value_seed(value_seed)

	def size_hint(self) -> Optional[int]:
		return None

	def entries(self, key_seed: Seed[Any], value_seed: Seed[Any]) -> Iterator[Tuple[Any, Any]]:
		while True:
			entry = self.next_entry_seed(key_seed, value_seed)
			if entry is EXHAUSTED:
				return
			yield entry


class VariantAccess:
	"""Payload access for a resolved enum variant."""

	def unit_variant(self) -> None:
		raise NotImplementedError

	def newtype_variant_seed(self, seed: Seed[T]) -> T:
		raise NotImplementedError

	def tuple_variant(self, length: int, visitor: Visitor[T]) -> T:
		raise NotImplementedError

	def struct_variant(self, fields: Sequence[str], visitor: Visitor[T]) -> T:
		raise NotImplementedError


class EnumAccess:
	"""Resolves the variant tag; the returned VariantAccess decodes the payload."""

	def variant_seed(self, seed: Seed[T]) -> Tuple[T, VariantAccess]:
		raise NotImplementedError


__all__ = [
	"EXHAUSTED",
	"Seed",
	"Visitor",
	"SeqAccess",
	"MapAccess",
	"VariantAccess",
	"EnumAccess",
]
