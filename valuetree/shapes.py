# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Ready-made target shapes.

Each shape is both a `Seed` (it picks the decoder entry point in `decode`)
and a `Visitor` (it accepts the callbacks that make sense for it). Shapes
compose: containers hold the shapes of their elements and pass them down as
seeds, so nested decoding needs no knowledge of the tree beyond the current
node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping as TMapping, Optional, Sequence as Seq, Set, Tuple, TypeVar

from valuetree.decoder import Decoder
from valuetree.errors import (
	Custom,
	DuplicateField,
	InvalidLength,
	InvalidValue,
	MissingField,
	UnknownField,
	UnknownVariant,
)
from valuetree.unexpected import Unexpected
from valuetree.value import F64, I64, Bool, Mapping, Null, Sequence, String, Value, widen_unsigned
from valuetree.visitor import EXHAUSTED, EnumAccess, MapAccess, SeqAccess, VariantAccess, Visitor

T = TypeVar("T")


class Shape(Visitor[T]):
	"""A visitor that also knows how to request its own decode."""

	def decode(self, decoder: Decoder) -> T:
		return decoder.decode_any(self)


# Scalars


class UnitShape(Shape[None]):
	def expecting(self) -> str:
		return "unit"

	def visit_unit(self) -> None:
		return None

	def decode(self, decoder: Decoder) -> None:
		return decoder.decode_unit(self)


class BoolShape(Shape[bool]):
	def expecting(self) -> str:
		return "a boolean"

	def visit_bool(self, v: bool) -> bool:
		return v

	def decode(self, decoder: Decoder) -> bool:
		return decoder.decode_bool(self)


class IntShape(Shape[int]):
	"""
	Fixed-width integer. The tree only has 64-bit signed integers, so
	narrowing (and the unsigned range) is checked here, not in the decoder.
	"""

	def __init__(self, bits: int = 64, signed: bool = True) -> None:
		if bits not in (8, 16, 32, 64):
			raise ValueError(f"unsupported integer width {bits}")
		self.bits = bits
		self.signed = signed
		if signed:
			self.lo, self.hi = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
		else:
			self.lo, self.hi = 0, 2**bits - 1

	@property
	def type_name(self) -> str:
		return f"{'i' if self.signed else 'u'}{self.bits}"

	def expecting(self) -> str:
		return self.type_name

	def _check(self, v: int, unexpected: Unexpected) -> int:
		if not self.lo <= v <= self.hi:
			raise InvalidValue(unexpected, self.type_name)
		return v

	def visit_i64(self, v: int) -> int:
		return self._check(v, Unexpected.signed(v))

	def visit_u64(self, v: int) -> int:
		return self._check(v, Unexpected.unsigned(v))

	def decode(self, decoder: Decoder) -> int:
		return getattr(decoder, f"decode_{self.type_name}")(self)


class FloatShape(Shape[float]):
	def expecting(self) -> str:
		return "f64"

	def visit_f64(self, v: float) -> float:
		return v

	def visit_i64(self, v: int) -> float:
		return float(v)

	def visit_u64(self, v: int) -> float:
		return float(v)

	def decode(self, decoder: Decoder) -> float:
		return decoder.decode_f64(self)


class StrShape(Shape[str]):
	def expecting(self) -> str:
		return "a string"

	def visit_str(self, v: str) -> str:
		return v

	def decode(self, decoder: Decoder) -> str:
		return decoder.decode_string(self)


class IntOrStrShape(Shape[Any]):
	"""
	Accepts integers or text.

	Unsigned values too large for the tree's signed integers arrive as their
	decimal text, so this is the shape to use for ids that may exceed i64.
	"""

	def expecting(self) -> str:
		return "an integer or string"

	def visit_i64(self, v: int) -> int:
		return v

	def visit_u64(self, v: int) -> int:
		return v

	def visit_str(self, v: str) -> str:
		return v


class IgnoredShape(Shape[None]):
	"""Consumes any value and discards it."""

	def expecting(self) -> str:
		return "anything at all"

	def visit_bool(self, v: bool) -> None:
		return None

	def visit_i64(self, v: int) -> None:
		return None

	def visit_u64(self, v: int) -> None:
		return None

	def visit_f64(self, v: float) -> None:
		return None

	def visit_str(self, v: str) -> None:
		return None

	def visit_unit(self) -> None:
		return None

	def visit_none(self) -> None:
		return None

	def visit_some(self, decoder: Decoder) -> None:
		return self.decode(decoder)

	def visit_newtype_struct(self, decoder: Decoder) -> None:
		return self.decode(decoder)

	def visit_seq(self, access: SeqAccess) -> None:
		for _ in access.elements(self):
			pass
		return None

	def visit_map(self, access: MapAccess) -> None:
		for _ in access.entries(self, self):
			pass
		return None

	def decode(self, decoder: Decoder) -> None:
		return decoder.decode_ignored_any(self)


# Whole-tree shapes


class ValueShape(Shape[Value]):
	"""Rebuilds a value tree; decoding a tree into this shape is the identity."""

	def expecting(self) -> str:
		return "any value"

	def visit_bool(self, v: bool) -> Value:
		return Bool(v)

	def visit_i64(self, v: int) -> Value:
		return I64(v)

	def visit_u64(self, v: int) -> Value:
		return widen_unsigned(v)

	def visit_f64(self, v: float) -> Value:
		return F64(v)

	def visit_str(self, v: str) -> Value:
		return String(v)

	def visit_unit(self) -> Value:
		return Null()

	def visit_none(self) -> Value:
		return Null()

	def visit_some(self, decoder: Decoder) -> Value:
		return self.decode(decoder)

	def visit_seq(self, access: SeqAccess) -> Value:
		return Sequence(list(access.elements(self)))

	def visit_map(self, access: MapAccess) -> Value:
		values = Mapping()
		for key, value in access.entries(self, self):
			values.insert(key, value)
		return values


def _hashable(obj: Any) -> Any:
	if isinstance(obj, list):
		return tuple(_hashable(item) for item in obj)
	if isinstance(obj, dict):
		raise Custom("a mapping cannot be used as a dict key")
	return obj


def _put_key(out: Dict[Any, Any], key: Any, value: Any) -> None:
	# Distinct tree keys (true, 1, 1.0) can be equal as Python dict keys.
	hashed = _hashable(key)
	if hashed in out:
		kept = next(k for k in out if k == hashed)
		raise Custom(f"keys {kept!r} and {hashed!r} collide as Python dict keys")
	out[hashed] = value


class PlainShape(Shape[Any]):
	"""Decodes to plain Python data (None, bool, int, float, str, list, dict)."""

	def expecting(self) -> str:
		return "any value"

	def visit_bool(self, v: bool) -> Any:
		return v

	def visit_i64(self, v: int) -> Any:
		return v

	def visit_u64(self, v: int) -> Any:
		return v

	def visit_f64(self, v: float) -> Any:
		return v

	def visit_str(self, v: str) -> Any:
		return v

	def visit_unit(self) -> Any:
		return None

	def visit_none(self) -> Any:
		return None

	def visit_some(self, decoder: Decoder) -> Any:
		return self.decode(decoder)

	def visit_seq(self, access: SeqAccess) -> Any:
		return list(access.elements(self))

	def visit_map(self, access: MapAccess) -> Any:
		out: Dict[Any, Any] = {}
		for key, value in access.entries(self, self):
			_put_key(out, key, value)
		return out


# Wrappers and containers


class OptionalShape(Shape[Optional[T]]):
	def __init__(self, inner: Shape[T]) -> None:
		self.inner = inner

	def expecting(self) -> str:
		return "option"

	def visit_none(self) -> None:
		return None

	def visit_unit(self) -> None:
		return None

	def visit_some(self, decoder: Decoder) -> T:
		return self.inner.decode(decoder)

	def decode(self, decoder: Decoder) -> Optional[T]:
		return decoder.decode_option(self)


class NewtypeShape(Shape[Any]):
	"""A named wrapper with no tree shape of its own."""

	def __init__(self, name: str, inner: Shape[Any], factory: Optional[Callable[[Any], Any]] = None) -> None:
		self.name = name
		self.inner = inner
		self.factory = factory

	def expecting(self) -> str:
		return f"tuple struct {self.name}"

	def visit_newtype_struct(self, decoder: Decoder) -> Any:
		inner = self.inner.decode(decoder)
		return self.factory(inner) if self.factory is not None else inner

	def decode(self, decoder: Decoder) -> Any:
		return decoder.decode_newtype_struct(self.name, self)


class ListShape(Shape[List[T]]):
	def __init__(self, elem: Shape[T], factory: Optional[Callable[[List[T]], Any]] = None) -> None:
		self.elem = elem
		self.factory = factory

	def expecting(self) -> str:
		return "a sequence"

	def visit_seq(self, access: SeqAccess) -> Any:
		items = list(access.elements(self.elem))
		return self.factory(items) if self.factory is not None else items

	def decode(self, decoder: Decoder) -> Any:
		return decoder.decode_seq(self)


class TupleShape(Shape[Tuple[Any, ...]]):
	"""Fixed-arity sequence; too few elements fail here, too many in the decoder."""

	def __init__(self, *elems: Shape[Any]) -> None:
		self.elems = elems

	def expecting(self) -> str:
		return f"a tuple of size {len(self.elems)}"

	def visit_seq(self, access: SeqAccess) -> Tuple[Any, ...]:
		out: List[Any] = []
		for index, elem in enumerate(self.elems):
			item = access.next_element_seed(elem)
			if item is EXHAUSTED:
				raise InvalidLength(index, self.expecting())
			out.append(item)
		return tuple(out)

	def visit_unit(self) -> Tuple[Any, ...]:
		# An empty tuple-variant payload is offered as unit.
		if self.elems:
			return super().visit_unit()
		return ()

	def decode(self, decoder: Decoder) -> Tuple[Any, ...]:
		return decoder.decode_tuple(len(self.elems), self)


class DictShape(Shape[Dict[Any, Any]]):
	def __init__(self, key: Shape[Any], value: Shape[Any]) -> None:
		self.key = key
		self.value = value

	def expecting(self) -> str:
		return "a map"

	def visit_map(self, access: MapAccess) -> Dict[Any, Any]:
		out: Dict[Any, Any] = {}
		for key, value in access.entries(self.key, self.value):
			_put_key(out, key, value)
		return out

	def decode(self, decoder: Decoder) -> Dict[Any, Any]:
		return decoder.decode_map(self)


class _FieldName(Shape[str]):
	def expecting(self) -> str:
		return "field identifier"

	def visit_str(self, v: str) -> str:
		return v

	def decode(self, decoder: Decoder) -> str:
		return decoder.decode_identifier(self)


_NO_DEFAULT = object()


class StructShape(Shape[Any]):
	"""
	Named record decoded from a mapping (by field name) or a sequence (by
	position).

	Fields missing from the input take their default, become None when their
	shape is optional, and otherwise raise `MissingField`. Unknown keys are
	skipped unless `deny_unknown` is set.
	"""

	def __init__(
		self,
		name: str,
		fields: Optional[TMapping[str, Shape[Any]]] = None,
		*,
		defaults: Optional[TMapping[str, Any]] = None,
		factory: Optional[Callable[..., Any]] = None,
		deny_unknown: bool = False,
	) -> None:
		self.name = name
		self.fields: Dict[str, Shape[Any]] = dict(fields or {})
		self.defaults: Dict[str, Any] = dict(defaults or {})
		self.default_factories: Dict[str, Callable[[], Any]] = {}
		self.factory = factory
		self.deny_unknown = deny_unknown

	def expecting(self) -> str:
		return f"struct {self.name}"

	def _missing(self, field: str) -> Any:
		if field in self.default_factories:
			return self.default_factories[field]()
		default = self.defaults.get(field, _NO_DEFAULT)
		if default is not _NO_DEFAULT:
			return default
		if isinstance(self.fields[field], OptionalShape):
			return None
		raise MissingField(field)

	def _build(self, values: Dict[str, Any]) -> Any:
		if self.factory is None:
			return values
		return self.factory(**values)

	def visit_map(self, access: MapAccess) -> Any:
		values: Dict[str, Any] = {}
		seen: Set[str] = set()
		names = _FieldName()
		while True:
			key = access.next_key_seed(names)
			if key is EXHAUSTED:
				break
			shape = self.fields.get(key)
			if shape is None:
				if self.deny_unknown:
					raise UnknownField(key, list(self.fields))
				access.next_value_seed(IgnoredShape())
				continue
			if key in seen:
				raise DuplicateField(key)
			seen.add(key)
			values[key] = access.next_value_seed(shape)
		for field in self.fields:
			if field not in seen:
				values[field] = self._missing(field)
		return self._build(values)

	def visit_seq(self, access: SeqAccess) -> Any:
		values: Dict[str, Any] = {}
		for index, (field, shape) in enumerate(self.fields.items()):
			item = access.next_element_seed(shape)
			if item is EXHAUSTED:
				raise InvalidLength(index, f"struct {self.name} with {len(self.fields)} elements")
			values[field] = item
		return self._build(values)

	def decode(self, decoder: Decoder) -> Any:
		return decoder.decode_struct(self.name, tuple(self.fields), self)


# Enums


@dataclass(frozen=True)
class Variant:
	"""Decoded enum value when a variant has no factory: tag plus payload."""

	tag: str
	payload: Any = None


class VariantSpec:
	"""How one enum variant's payload is decoded."""

	factory: Optional[Callable[[Any], Any]] = None

	def decode_payload(self, access: VariantAccess) -> Any:
		raise NotImplementedError

	def build(self, tag: str, payload: Any) -> Any:
		if self.factory is not None:
			return self.factory(payload)
		return Variant(tag, payload)


class UnitVariant(VariantSpec):
	def __init__(self, value: Any = _NO_DEFAULT) -> None:
		self.value = value

	def decode_payload(self, access: VariantAccess) -> Any:
		access.unit_variant()
		return None

	def build(self, tag: str, payload: Any) -> Any:
		if self.value is not _NO_DEFAULT:
			return self.value
		return Variant(tag)


class NewtypeVariant(VariantSpec):
	def __init__(self, shape: Shape[Any], factory: Optional[Callable[[Any], Any]] = None) -> None:
		self.shape = shape
		self.factory = factory

	def decode_payload(self, access: VariantAccess) -> Any:
		return access.newtype_variant_seed(self.shape)


class TupleVariant(VariantSpec):
	def __init__(self, *shapes: Shape[Any], factory: Optional[Callable[[Any], Any]] = None) -> None:
		self.shape = TupleShape(*shapes)
		self.factory = factory

	def decode_payload(self, access: VariantAccess) -> Any:
		return access.tuple_variant(len(self.shape.elems), self.shape)


class StructVariant(VariantSpec):
	def __init__(self, shape: StructShape) -> None:
		self.shape = shape

	@classmethod
	def of(cls, name: str, fields: TMapping[str, Shape[Any]], **kwargs: Any) -> "StructVariant":
		return cls(StructShape(name, fields, **kwargs))

	def decode_payload(self, access: VariantAccess) -> Any:
		return access.struct_variant(tuple(self.shape.fields), self.shape)

	def build(self, tag: str, payload: Any) -> Any:
		if self.shape.factory is not None:
			return payload
		return Variant(tag, payload)


class _VariantName(Shape[str]):
	def __init__(self, variants: Iterable[str]) -> None:
		self.variants = list(variants)

	def expecting(self) -> str:
		return "variant identifier"

	def visit_str(self, v: str) -> str:
		if v not in self.variants:
			raise UnknownVariant(v, self.variants)
		return v

	def decode(self, decoder: Decoder) -> str:
		return decoder.decode_identifier(self)


class EnumShape(Shape[Any]):
	"""Externally tagged enum with per-variant payload specs."""

	def __init__(self, name: str, variants: Optional[TMapping[str, VariantSpec]] = None) -> None:
		self.name = name
		self.variants: Dict[str, VariantSpec] = dict(variants or {})

	@classmethod
	def units(cls, name: str, tags: Seq[str]) -> "EnumShape":
		return cls(name, {tag: UnitVariant() for tag in tags})

	def expecting(self) -> str:
		return f"enum {self.name}"

	def visit_enum(self, access: EnumAccess) -> Any:
		tag, variant = access.variant_seed(_VariantName(self.variants))
		spec = self.variants[tag]
		return spec.build(tag, spec.decode_payload(variant))

	def decode(self, decoder: Decoder) -> Any:
		return decoder.decode_enum(self.name, tuple(self.variants), self)


__all__ = [
	"Shape",
	"UnitShape",
	"BoolShape",
	"IntShape",
	"FloatShape",
	"StrShape",
	"IntOrStrShape",
	"IgnoredShape",
	"ValueShape",
	"PlainShape",
	"OptionalShape",
	"NewtypeShape",
	"ListShape",
	"TupleShape",
	"DictShape",
	"StructShape",
	"Variant",
	"VariantSpec",
	"UnitVariant",
	"NewtypeVariant",
	"TupleVariant",
	"StructVariant",
	"EnumShape",
]
