# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Flow-literal reader: builds value trees from a small JSON-like text syntax.

	{name: a, tags: [x, "y z"], kind: Move, big: 18446744073709551615}

Plain words are resolved the way YAML resolves plain scalars: `null`/`~`,
`true`/`false`, integers, floats (`.inf`, `.nan` included) and otherwise
strings. Integers above the signed 64-bit range are widened to their decimal
text; duplicate mapping keys keep the last value. This is a convenience
producer for tests and the CLI, not a YAML implementation.
"""

from __future__ import annotations

import json
import math
import re
from pathlib import Path
from typing import Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from valuetree.diagnostics import Diagnostic, Span
from valuetree.log import get_logger
from valuetree.value import I64_MIN, U64_MAX, Bool, F64, Mapping, Null, Sequence, String, Value, from_python

logger = get_logger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("flow.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

_INT_RE = re.compile(r"[-+]?[0-9]+")
_FLOAT_RE = re.compile(r"[-+]?(\.[0-9]+|[0-9]+(\.[0-9]*)?)([eE][-+]?[0-9]+)?")
_NULL_WORDS = {"null", "Null", "NULL", "~"}
_TRUE_WORDS = {"true", "True", "TRUE"}
_FALSE_WORDS = {"false", "False", "FALSE"}
_SPECIAL_FLOATS = {
	".inf": math.inf,
	".Inf": math.inf,
	".INF": math.inf,
	"+.inf": math.inf,
	"+.Inf": math.inf,
	"+.INF": math.inf,
	"-.inf": -math.inf,
	"-.Inf": -math.inf,
	"-.INF": -math.inf,
	".nan": math.nan,
	".NaN": math.nan,
	".NAN": math.nan,
}


class ReadError(ValueError):
	"""Malformed flow-literal input."""

	code = "read-error"

	def __init__(self, message: str, *, line: Optional[int] = None, column: Optional[int] = None) -> None:
		super().__init__(message)
		self.message = message
		self.line = line
		self.column = column

	def to_diagnostic(self, *, file: Optional[str] = None) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase="read",
			severity="error",
			span=Span.from_loc(self, file=file),
		)


def _name(tree: Tree) -> str:
	return tree.data if isinstance(tree.data, str) else tree.data.value


def resolve_plain(text: str, tok: Optional[Token] = None) -> Value:
	"""Resolve an unquoted scalar to the node it denotes."""
	if text in _NULL_WORDS:
		return Null()
	if text in _TRUE_WORDS:
		return Bool(True)
	if text in _FALSE_WORDS:
		return Bool(False)
	if _INT_RE.fullmatch(text):
		number = int(text)
		if number < I64_MIN or number > U64_MAX:
			raise ReadError(
				f"integer {text} does not fit in 64 bits",
				line=getattr(tok, "line", None),
				column=getattr(tok, "column", None),
			)
		return from_python(number)
	if text in _SPECIAL_FLOATS:
		return F64(_SPECIAL_FLOATS[text])
	if _FLOAT_RE.fullmatch(text):
		return F64(float(text))
	return String(text)


def _decode_double_quoted(tok: Token) -> str:
	try:
		return json.loads(tok.value)
	except json.JSONDecodeError as err:
		raise ReadError(f"invalid escape in string: {err.msg}", line=tok.line, column=tok.column) from None


def _decode_single_quoted(tok: Token) -> str:
	return tok.value[1:-1].replace("''", "'")


def _build(node: Tree | Token) -> Value:
	if isinstance(node, Token):
		raise ReadError(f"unexpected token {node.value!r}", line=node.line, column=node.column)
	kind = _name(node)
	if kind == "plain":
		tok = node.children[0]
		return resolve_plain(tok.value, tok)
	if kind == "quoted":
		tok = node.children[0]
		if tok.type == "DOUBLE_QUOTED":
			return String(_decode_double_quoted(tok))
		return String(_decode_single_quoted(tok))
	if kind == "sequence":
		return Sequence([_build(child) for child in node.children])
	if kind == "mapping":
		mapping = Mapping()
		for pair in node.children:
			key_node, value_node = pair.children
			key = _build(key_node)
			if mapping.insert(key, _build(value_node)) is not None:
				logger.debug("duplicate key %r at line %s; keeping the later value", key, pair.meta.line)
		return mapping
	raise AssertionError(f"flow reader bug: unhandled grammar node {kind!r}")


def _describe(err: UnexpectedInput) -> str:
	if isinstance(err, UnexpectedCharacters):
		return f"unexpected character {err.char!r}"
	if isinstance(err, UnexpectedEOF):
		return "unexpected end of input"
	if isinstance(err, UnexpectedToken):
		if err.token.type == "$END":
			return "unexpected end of input"
		return f"unexpected {err.token.value!r}"
	return err.__class__.__name__


def read_value(text: str) -> Value:
	"""Parse one flow literal; an empty document is `Null`."""
	try:
		tree = _PARSER.parse(text)
	except UnexpectedInput as err:
		line = getattr(err, "line", -1)
		column = getattr(err, "column", -1)
		raise ReadError(
			f"syntax error: {_describe(err)}",
			line=line if line and line > 0 else None,
			column=column if column and column > 0 else None,
		) from None
	if not tree.children:
		return Null()
	return _build(tree.children[0])


def read_file(path: Path | str) -> Value:
	return read_value(Path(path).read_text(encoding="utf-8"))


__all__ = ["ReadError", "read_value", "read_file", "resolve_plain"]
