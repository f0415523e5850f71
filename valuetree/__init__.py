# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
valuetree: type-directed decoding of dynamic value trees.

Modules:
  value:       Value tree nodes and the ordered Mapping container
  unexpected:  classification of nodes for error messages
  errors:      DecodeError taxonomy
  visitor:     Visitor / Seed / access interfaces target shapes implement
  decoder:     the value-to-typed bridge (sequence, mapping, enum decoders)
  shapes:      ready-made target shapes
  reflect:     shapes derived from type hints and dataclasses
  reader:      flow-literal text reader (lark)
  config:      DecodeOptions
  cli:         `python -m valuetree`
"""

from __future__ import annotations

from typing import Any, Optional

from valuetree.config import DecodeOptions
from valuetree.decoder import ValueDecoder, decode
from valuetree.errors import DecodeError
from valuetree.reflect import shape_for
from valuetree.value import Value, from_python


def decode_into(value: Value, hint: Any, options: Optional[DecodeOptions] = None) -> Any:
	"""Decode `value` into the Python type described by `hint`."""
	return decode(value, shape_for(hint), options)


__all__ = [
	"DecodeOptions",
	"DecodeError",
	"Value",
	"ValueDecoder",
	"decode",
	"decode_into",
	"from_python",
	"shape_for",
]
