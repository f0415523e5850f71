# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`valuetree` command: read flow literals, decode them, summarize the result.

Each file is read into a value tree and decoded back into a tree through the
full decoder, so every container goes through the arity checks and the depth
limit. On success a per-file summary (node counts per kind, nesting depth) is
printed; on failure diagnostics are printed and the exit code is 1.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections import Counter
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from valuetree.config import DecodeOptions
from valuetree.decoder import decode
from valuetree.diagnostics import Diagnostic, Span
from valuetree.errors import DecodeError
from valuetree.log import configure_logging, get_logger
from valuetree.reader import ReadError, read_value
from valuetree.shapes import ValueShape
from valuetree.value import Mapping, Sequence, Value

logger = get_logger(__name__)


def summarize(value: Value) -> Dict[str, Any]:
	"""Node counts per kind and container nesting depth of a tree."""
	counts: Counter[str] = Counter()
	max_depth = 0
	stack: List[Tuple[Value, int]] = [(value, 0)]
	while stack:
		node, depth = stack.pop()
		counts[node.kind] += 1
		if isinstance(node, Sequence):
			max_depth = max(max_depth, depth + 1)
			stack.extend((item, depth + 1) for item in node.items)
		elif isinstance(node, Mapping):
			max_depth = max(max_depth, depth + 1)
			for key, item in node.items():
				stack.append((key, depth + 1))
				stack.append((item, depth + 1))
	return {"nodes": dict(sorted(counts.items())), "depth": max_depth}


def check_source(text: str, options: DecodeOptions, *, file: Optional[str] = None) -> Tuple[Optional[Dict[str, Any]], List[Diagnostic]]:
	phase = "read"
	try:
		tree = read_value(text)
		phase = "decode"
		decoded = decode(tree, ValueShape(), options)
	except (ReadError, DecodeError) as err:
		logger.debug("%s: %s", file or "<input>", err)
		return None, [err.to_diagnostic(file=file)]
	except RecursionError:
		logger.debug("%s: nesting exceeded the interpreter recursion limit (%s phase)", file or "<input>", phase)
		return None, [
			Diagnostic(
				message="input nests too deeply for the interpreter recursion limit",
				code="recursion-limit",
				phase=phase,
				span=Span(file=file),
			)
		]
	return summarize(decoded), []


def main(argv: list[str] | None = None) -> int:
	"""
	Check one or more flow-literal files.

	With --json, prints `{"exit_code", "files", "diagnostics"}` on stdout;
	otherwise summaries go to stdout and diagnostics to stderr.
	"""
	parser = argparse.ArgumentParser(prog="valuetree", description="Decode flow-literal value trees and report their shape")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to flow-literal files ('-' reads stdin)")
	parser.add_argument("--max-depth", type=int, default=None, help="Reject input nesting containers deeper than this")
	parser.add_argument(
		"--strict-unit-variants",
		action="store_true",
		help="Do not accept an explicit null payload for unit enum variants",
	)
	parser.add_argument("--json", action="store_true", help="Emit summaries and diagnostics as JSON")
	parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging")
	args = parser.parse_args(argv)

	configure_logging(args.debug)
	try:
		options = DecodeOptions.from_env()
		if args.max_depth is not None:
			options = replace(options, max_depth=args.max_depth)
		if args.strict_unit_variants:
			options = replace(options, null_satisfies_unit_variant=False)
	except ValueError as err:
		parser.error(str(err))

	files: List[Dict[str, Any]] = []
	diagnostics: List[Diagnostic] = []
	for path in args.source:
		name = str(path)
		if name == "-":
			text = sys.stdin.read()
		else:
			try:
				text = path.read_text(encoding="utf-8")
			except OSError as err:
				diagnostics.append(Diagnostic(message=f"cannot read file: {err.strerror}", code="io-error", phase="read", span=Span(file=name)))
				continue
		summary, diags = check_source(text, options, file=name)
		diagnostics.extend(diags)
		if summary is not None:
			files.append({"file": name, **summary})

	exit_code = 1 if any(d.severity == "error" for d in diagnostics) else 0
	if args.json:
		print(
			json.dumps(
				{
					"exit_code": exit_code,
					"files": files,
					"diagnostics": [d.to_json() for d in diagnostics],
				}
			)
		)
		return exit_code
	for entry in files:
		counts = ", ".join(f"{kind}={count}" for kind, count in entry["nodes"].items())
		print(f"{entry['file']}: ok (depth {entry['depth']}; {counts})")
	for diag in diagnostics:
		print(diag.render(), file=sys.stderr)
	return exit_code


__all__ = ["main", "check_source", "summarize"]
