# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the reader, decoder and CLI.

Errors raised while reading or decoding are converted into `Diagnostic`
records so the CLI can print them uniformly (human-readable or JSON).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Span:
	"""Best-effort source location (file/line/column plus the raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a parser token/meta object.

		If `loc` is already a Span it is returned unchanged (with `file`
		filled in when it was missing).
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if loc.file is None and file is not None:
				return cls(file=file, line=loc.line, column=loc.column, raw=loc.raw)
			return loc
		return cls(
			file=file or getattr(loc, "file", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			raw=loc,
		)


@dataclass
class Diagnostic:
	"""A reportable problem (error/warning) with an optional location."""

	message: str
	code: str | None = None
	# Which layer produced it: "read" for syntax errors, "decode" for tree/shape
	# mismatches.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self) -> str:
		"""`file:line:col: severity: message` with `?` for unknown parts."""
		where = ":".join(
			[
				self.span.file or "<input>",
				str(self.span.line) if self.span.line is not None else "?",
				str(self.span.column) if self.span.column is not None else "?",
			]
		)
		text = f"{where}: {self.severity}: {self.message}"
		for note in self.notes:
			text += f"\n  note: {note}"
		return text

	def to_json(self) -> Dict[str, Any]:
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"code": self.code,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


__all__ = ["Span", "Diagnostic"]
