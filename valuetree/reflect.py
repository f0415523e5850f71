# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Derive target shapes from Python type hints.

`shape_for(hint)` maps annotations onto the shapes in `valuetree.shapes`:

  bool / int / float / str / None   -> scalar shapes
  Any                               -> PlainShape
  Value (or a node class)           -> ValueShape
  list[T], Sequence[T]              -> ListShape
  tuple[A, B] / tuple[T, ...]       -> TupleShape / ListShape(tuple)
  dict[K, V], Mapping[K, V]         -> DictShape
  Optional[T]                       -> OptionalShape
  typing.NewType                    -> NewtypeShape
  enum.Enum subclass                -> EnumShape of unit variants (by member name)
  dataclass                         -> StructShape (fields with defaults are optional)
  Union of dataclasses              -> EnumShape tagged by class name

Dataclass shapes are cached before their fields are resolved, so
self-referential dataclasses work.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import types
from typing import Any, Dict, Union, get_args, get_origin, get_type_hints

from valuetree import shapes as S
from valuetree.value import Value

_UNION_TYPES: tuple[Any, ...] = (Union, types.UnionType) if hasattr(types, "UnionType") else (Union,)

_SCALARS: Dict[Any, Any] = {
	bool: S.BoolShape,
	int: S.IntShape,
	float: S.FloatShape,
	str: S.StrShape,
	type(None): S.UnitShape,
}


class ShapeResolutionError(TypeError):
	"""A type hint has no corresponding shape."""


def _is_class(hint: Any) -> bool:
	# Parametrized generics (list[int]) pass isinstance(.., type) on older Pythons.
	return isinstance(hint, type) and get_origin(hint) is None


def shape_for(hint: Any) -> S.Shape[Any]:
	return _Resolver().resolve(hint)


class _Resolver:
	def __init__(self) -> None:
		self._structs: Dict[type, S.StructShape] = {}

	def resolve(self, hint: Any) -> S.Shape[Any]:
		if hint is Any:
			return S.PlainShape()
		if hint is None:
			return S.UnitShape()
		if _is_class(hint) and issubclass(hint, Value):
			return S.ValueShape()
		scalar = _SCALARS.get(hint)
		if scalar is not None:
			return scalar()
		supertype = getattr(hint, "__supertype__", None)
		if supertype is not None:
			return S.NewtypeShape(hint.__name__, self.resolve(supertype))

		origin = get_origin(hint)
		args = get_args(hint)
		if origin in _UNION_TYPES:
			return self._union(hint, args)
		if origin in (list, collections.abc.Sequence, collections.abc.MutableSequence):
			return S.ListShape(self.resolve(args[0] if args else Any))
		if origin is tuple:
			if len(args) == 2 and args[1] is Ellipsis:
				return S.ListShape(self.resolve(args[0]), factory=tuple)
			return S.TupleShape(*(self.resolve(arg) for arg in args))
		if origin in (dict, collections.abc.Mapping, collections.abc.MutableMapping):
			key, value = args if args else (Any, Any)
			return S.DictShape(self.resolve(key), self.resolve(value))
		if hint is list:
			return S.ListShape(S.PlainShape())
		if hint is tuple:
			return S.ListShape(S.PlainShape(), factory=tuple)
		if hint is dict:
			return S.DictShape(S.PlainShape(), S.PlainShape())

		if _is_class(hint) and issubclass(hint, enum.Enum):
			return S.EnumShape(
				hint.__name__,
				{member.name: S.UnitVariant(member) for member in hint},
			)
		if _is_class(hint) and dataclasses.is_dataclass(hint):
			return self._dataclass(hint)
		raise ShapeResolutionError(f"no shape for type hint {hint!r}")

	def _union(self, hint: Any, args: tuple[Any, ...]) -> S.Shape[Any]:
		members = [arg for arg in args if arg is not type(None)]
		optional = len(members) != len(args)
		if len(members) == 1:
			inner = self.resolve(members[0])
		elif all(_is_class(m) and dataclasses.is_dataclass(m) for m in members):
			inner = S.EnumShape(
				" | ".join(m.__name__ for m in members),
				{m.__name__: S.StructVariant(self._dataclass(m)) for m in members},
			)
		else:
			raise ShapeResolutionError(f"only Optional[T] and unions of dataclasses are supported, got {hint!r}")
		return S.OptionalShape(inner) if optional else inner

	def _dataclass(self, cls: type) -> S.StructShape:
		cached = self._structs.get(cls)
		if cached is not None:
			return cached
		shape = S.StructShape(cls.__name__, factory=cls)
		self._structs[cls] = shape
		hints = get_type_hints(cls)
		for field in dataclasses.fields(cls):
			if not field.init:
				continue
			shape.fields[field.name] = self.resolve(hints.get(field.name, Any))
			if field.default is not dataclasses.MISSING:
				shape.defaults[field.name] = field.default
			elif field.default_factory is not dataclasses.MISSING:
				shape.default_factories[field.name] = field.default_factory
		return shape


__all__ = ["shape_for", "ShapeResolutionError"]
