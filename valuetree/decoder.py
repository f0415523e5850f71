# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Value-to-typed bridge: feeds a value tree into arbitrary target shapes.

`ValueDecoder` wraps one owned `Value` and dispatches on its node kind:
scalars go straight to the matching visitor callback, containers are wrapped
in `SeqDecoder` / `MapDecoder` and offered to `visit_seq` / `visit_map`, and
enum requests resolve the externally tagged convention (bare string = unit
variant, single-entry mapping = tag -> payload) before calling `visit_enum`.

Everything is consumed as it is read: containers are drained into the
decoders, each element is moved out once, and a decoder handle cannot be
used twice.

Length checks:
  - Bridge `Sequence` / `Mapping` arms: leftovers after the visitor returns
    are an `InvalidLength` error.
  - `SeqDecoder` used as a decoder (tuple-variant payload): empty -> unit,
    otherwise the same check.
  - `MapDecoder` used as a decoder (struct-variant payload): no check.
"""

from __future__ import annotations

from collections import deque
from typing import List, Optional, Sequence as Seq, Tuple, TypeVar

from valuetree import unexpected as U
from valuetree.config import DecodeOptions
from valuetree.errors import DepthLimitExceeded, InvalidLength, InvalidType, InvalidValue
from valuetree.log import get_logger
from valuetree.unexpected import classify
from valuetree.value import Bool, F64, I64, Mapping, Null, Sequence, String, Value
from valuetree.visitor import EXHAUSTED, EnumAccess, MapAccess, Seed, SeqAccess, VariantAccess, Visitor

T = TypeVar("T")

logger = get_logger(__name__)

_DEFAULT_OPTIONS = DecodeOptions()


class Decoder:
	"""
	Decoder entry points a seed can call.

	The specific entry points state what the target shape wants; the tree is
	self-describing, so unless a subclass overrides one they all fall back to
	`decode_any`. Width-specific integer requests are not special-cased:
	range checks belong to the visitor receiving the value.
	"""

	options: DecodeOptions = _DEFAULT_OPTIONS

	def decode_any(self, visitor: Visitor[T]) -> T:
		"""Decode whatever the input holds; subclasses must override this."""
		raise NotImplementedError

	def decode_bool(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_i8(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_i16(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_i32(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_i64(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_u8(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_u16(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_u32(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_u64(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_f32(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_f64(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_char(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_str(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_string(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_bytes(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_option(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_unit(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_unit_struct(self, name: str, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_newtype_struct(self, name: str, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_seq(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_tuple(self, length: int, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_tuple_struct(self, name: str, length: int, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_map(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_struct(self, name: str, fields: Seq[str], visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_enum(self, name: str, variants: Seq[str], visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_identifier(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)

	def decode_ignored_any(self, visitor: Visitor[T]) -> T:
		return self.decode_any(visitor)


def _child_depth(options: DecodeOptions, depth: int) -> int:
	"""Depth for the children of a container opened at `depth`."""
	if options.max_depth is not None and depth >= options.max_depth:
		logger.debug("container at depth %d exceeds max_depth=%d", depth, options.max_depth)
		raise DepthLimitExceeded(options.max_depth)
	return depth + 1


class ValueDecoder(Decoder):
	"""Single-use decoder over one owned value."""

	def __init__(self, value: Value, options: Optional[DecodeOptions] = None, depth: int = 0) -> None:
		if not isinstance(value, Value):
			raise TypeError(f"ValueDecoder expects a Value, got {type(value).__name__}")
		self._value: Optional[Value] = value
		self.options = options or _DEFAULT_OPTIONS
		self.depth = depth

	def _take(self) -> Value:
		value = self._value
		if value is None:
			raise AssertionError("ValueDecoder used after its value was consumed (visitor bug)")
		self._value = None
		return value

	def _peek(self) -> Value:
		if self._value is None:
			raise AssertionError("ValueDecoder used after its value was consumed (visitor bug)")
		return self._value

	def decode_any(self, visitor: Visitor[T]) -> T:
		value = self._take()
		if isinstance(value, Null):
			return visitor.visit_unit()
		if isinstance(value, Bool):
			return visitor.visit_bool(value.value)
		if isinstance(value, I64):
			return visitor.visit_i64(value.value)
		if isinstance(value, F64):
			return visitor.visit_f64(value.value)
		if isinstance(value, String):
			return visitor.visit_string(value.value)
		if isinstance(value, Sequence):
			child_depth = _child_depth(self.options, self.depth)
			items = value.drain()
			seq = SeqDecoder(items, self.options, child_depth)
			result = visitor.visit_seq(seq)
			if seq.remaining:
				logger.debug("sequence of %d left %d element(s) unconsumed", len(items), seq.remaining)
				raise InvalidLength(len(items), "fewer elements in sequence")
			return result
		if isinstance(value, Mapping):
			child_depth = _child_depth(self.options, self.depth)
			pairs = value.drain()
			access = MapDecoder(pairs, self.options, child_depth)
			result = visitor.visit_map(access)
			if access.remaining:
				logger.debug("map of %d left %d entr(ies) unconsumed", len(pairs), access.remaining)
				raise InvalidLength(len(pairs), "fewer elements in map")
			return result
		raise TypeError(f"not a value tree node: {type(value).__name__}")

	def decode_option(self, visitor: Visitor[T]) -> T:
		if isinstance(self._peek(), Null):
			self._take()
			return visitor.visit_none()
		# Re-offer the same value; the wrapped shape decides what it must be.
		return visitor.visit_some(self)

	def decode_newtype_struct(self, name: str, visitor: Visitor[T]) -> T:
		return visitor.visit_newtype_struct(self)

	def decode_enum(self, name: str, variants: Seq[str], visitor: Visitor[T]) -> T:
		value = self._take()
		if isinstance(value, Mapping):
			child_depth = _child_depth(self.options, self.depth)
			# Externally tagged: exactly one `tag: payload` entry.
			pairs = value.drain()
			if len(pairs) != 1:
				logger.debug("enum %s: tagging map has %d entries", name, len(pairs))
				raise InvalidValue(U.MAP, "map with a single key")
			tag, payload = pairs[0]
			return visitor.visit_enum(EnumDecoder(tag, payload, self.options, child_depth))
		if isinstance(value, String):
			return visitor.visit_enum(EnumDecoder(value, None, self.options, self.depth))
		raise InvalidType(classify(value), "string or map")


class SeqDecoder(Decoder, SeqAccess):
	"""Forward cursor over an owned element list."""

	def __init__(self, items: List[Value], options: Optional[DecodeOptions] = None, depth: int = 0) -> None:
		self._items: deque[Value] = deque(items)
		self.options = options or _DEFAULT_OPTIONS
		self.depth = depth

	@property
	def remaining(self) -> int:
		return len(self._items)

	def next_element_seed(self, seed: Seed[T]) -> T:
		if not self._items:
			return EXHAUSTED
		value = self._items.popleft()
		return seed.decode(ValueDecoder(value, self.options, self.depth))

	def size_hint(self) -> Optional[int]:
		return len(self._items)

	def decode_any(self, visitor: Visitor[T]) -> T:
		length = len(self._items)
		if length == 0:
			return visitor.visit_unit()
		result = visitor.visit_seq(self)
		if self._items:
			logger.debug("sequence of %d left %d element(s) unconsumed", length, len(self._items))
			raise InvalidLength(length, "fewer elements in sequence")
		return result


class MapDecoder(Decoder, MapAccess):
	"""
	Cursor over owned key/value pairs with a one-entry pending value slot.

	States: idle (slot empty) and key-pending-value (slot full).
	`next_key_seed` fills the slot, `next_value_seed` empties it; asking for a
	value while idle is a caller bug and raises AssertionError.
	"""

	def __init__(
		self,
		pairs: List[Tuple[Value, Value]],
		options: Optional[DecodeOptions] = None,
		depth: int = 0,
	) -> None:
		self._pairs: deque[Tuple[Value, Value]] = deque(pairs)
		self._pending: Optional[Value] = None
		self.options = options or _DEFAULT_OPTIONS
		self.depth = depth

	@property
	def remaining(self) -> int:
		return len(self._pairs)

	@property
	def value_pending(self) -> bool:
		return self._pending is not None

	def next_key_seed(self, seed: Seed[T]) -> T:
		if not self._pairs:
			return EXHAUSTED
		key, value = self._pairs.popleft()
		self._pending = value
		return seed.decode(ValueDecoder(key, self.options, self.depth))

	def next_value_seed(self, seed: Seed[T]) -> T:
		value = self._pending
		if value is None:
			raise AssertionError("next_value_seed called before next_key_seed (visitor bug)")
		self._pending = None
		return seed.decode(ValueDecoder(value, self.options, self.depth))

	def size_hint(self) -> Optional[int]:
		return len(self._pairs)

	def decode_any(self, visitor: Visitor[T]) -> T:
		return visitor.visit_map(self)


class EnumDecoder(EnumAccess):
	"""Resolved externally tagged enum: the tag node plus an optional payload."""

	def __init__(
		self,
		tag: Value,
		payload: Optional[Value],
		options: Optional[DecodeOptions] = None,
		depth: int = 0,
	) -> None:
		self._tag = tag
		self._payload = payload
		self.options = options or _DEFAULT_OPTIONS
		self.depth = depth

	def variant_seed(self, seed: Seed[T]) -> Tuple[T, "VariantDecoder"]:
		variant = VariantDecoder(self._payload, self.options, self.depth)
		return seed.decode(ValueDecoder(self._tag, self.options, self.depth)), variant


class _UnitVisitor(Visitor[None]):
	def expecting(self) -> str:
		return "unit"

	def visit_unit(self) -> None:
		return None


class VariantDecoder(VariantAccess):
	def __init__(self, payload: Optional[Value], options: Optional[DecodeOptions] = None, depth: int = 0) -> None:
		self._payload = payload
		self.options = options or _DEFAULT_OPTIONS
		self.depth = depth

	def unit_variant(self) -> None:
		payload = self._payload
		if payload is None:
			return None
		if not self.options.null_satisfies_unit_variant:
			raise InvalidType(classify(payload), "unit variant")
		# A present payload must itself decode as unit (explicit null).
		return ValueDecoder(payload, self.options, self.depth).decode_unit(_UnitVisitor())

	def newtype_variant_seed(self, seed: Seed[T]) -> T:
		if self._payload is None:
			raise InvalidType(U.UNIT_VARIANT, "newtype variant")
		return seed.decode(ValueDecoder(self._payload, self.options, self.depth))

	def tuple_variant(self, length: int, visitor: Visitor[T]) -> T:
		payload = self._payload
		if payload is None:
			raise InvalidType(U.UNIT_VARIANT, "tuple variant")
		if not isinstance(payload, Sequence):
			raise InvalidType(classify(payload), "tuple variant")
		child_depth = _child_depth(self.options, self.depth)
		return SeqDecoder(payload.drain(), self.options, child_depth).decode_any(visitor)

	def struct_variant(self, fields: Seq[str], visitor: Visitor[T]) -> T:
		payload = self._payload
		if payload is None:
			raise InvalidType(U.UNIT_VARIANT, "struct variant")
		if not isinstance(payload, Mapping):
			raise InvalidType(classify(payload), "struct variant")
		child_depth = _child_depth(self.options, self.depth)
		return MapDecoder(payload.drain(), self.options, child_depth).decode_any(visitor)


def decode(value: Value, seed: Seed[T], options: Optional[DecodeOptions] = None) -> T:
	"""Decode `value` into the shape described by `seed`, consuming the tree."""
	return seed.decode(ValueDecoder(value, options))


__all__ = [
	"Decoder",
	"ValueDecoder",
	"SeqDecoder",
	"MapDecoder",
	"EnumDecoder",
	"VariantDecoder",
	"decode",
]
