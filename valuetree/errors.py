# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Decode error taxonomy.

Every data-shape failure is a `DecodeError` subclass carrying structured
fields plus a serde-style message. The first error raised anywhere in a
decode propagates unchanged to the caller.

Contract violations by a visitor (e.g. asking a map for a value before a key)
are not data errors: they raise `AssertionError` instead.
"""

from __future__ import annotations

from typing import Optional, Sequence

from valuetree.diagnostics import Diagnostic, Span
from valuetree.unexpected import Unexpected


class DecodeError(ValueError):
	"""Base class for all errors caused by the shape or content of the input tree."""

	code = "decode-error"

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message

	def to_diagnostic(self, *, file: Optional[str] = None) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase="decode",
			severity="error",
			span=Span(file=file),
		)


class InvalidType(DecodeError):
	"""The node's kind is not what the visitor or decoder required."""

	code = "invalid-type"

	def __init__(self, unexpected: Unexpected, expected: str) -> None:
		super().__init__(f"invalid type: {unexpected}, expected {expected}")
		self.unexpected = unexpected
		self.expected = expected


class InvalidValue(DecodeError):
	"""Right kind of node, but it violates a semantic constraint."""

	code = "invalid-value"

	def __init__(self, unexpected: Unexpected, expected: str) -> None:
		super().__init__(f"invalid value: {unexpected}, expected {expected}")
		self.unexpected = unexpected
		self.expected = expected


class InvalidLength(DecodeError):
	"""A sequence or mapping had a different number of elements than was consumed."""

	code = "invalid-length"

	def __init__(self, length: int, expected: str) -> None:
		super().__init__(f"invalid length {length}, expected {expected}")
		self.length = length
		self.expected = expected


class Custom(DecodeError):
	"""Domain-specific failure raised by a target shape."""

	code = "custom"


class MissingField(DecodeError):
	code = "missing-field"

	def __init__(self, field: str) -> None:
		super().__init__(f"missing field `{field}`")
		self.field = field


class DuplicateField(DecodeError):
	code = "duplicate-field"

	def __init__(self, field: str) -> None:
		super().__init__(f"duplicate field `{field}`")
		self.field = field


def one_of(names: Sequence[str]) -> str:
	if len(names) == 1:
		return f"`{names[0]}`"
	if len(names) == 2:
		return f"`{names[0]}` or `{names[1]}`"
	return "one of " + ", ".join(f"`{n}`" for n in names)


class UnknownField(DecodeError):
	code = "unknown-field"

	def __init__(self, field: str, expected: Sequence[str]) -> None:
		if expected:
			message = f"unknown field `{field}`, expected {one_of(expected)}"
		else:
			message = f"unknown field `{field}`, there are no fields"
		super().__init__(message)
		self.field = field
		self.expected = tuple(expected)


class UnknownVariant(DecodeError):
	code = "unknown-variant"

	def __init__(self, variant: str, expected: Sequence[str]) -> None:
		if expected:
			message = f"unknown variant `{variant}`, expected {one_of(expected)}"
		else:
			message = f"unknown variant `{variant}`, there are no variants"
		super().__init__(message)
		self.variant = variant
		self.expected = tuple(expected)


class DepthLimitExceeded(DecodeError):
	"""Input nests containers deeper than `DecodeOptions.max_depth` allows."""

	code = "depth-limit"

	def __init__(self, limit: int) -> None:
		super().__init__(f"recursion limit exceeded: containers nested deeper than {limit}")
		self.limit = limit


__all__ = [
	"DecodeError",
	"InvalidType",
	"InvalidValue",
	"InvalidLength",
	"Custom",
	"MissingField",
	"DuplicateField",
	"UnknownField",
	"UnknownVariant",
	"DepthLimitExceeded",
	"one_of",
]
