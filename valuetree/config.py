# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Decode options threaded through every decoder built during one decode.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

MAX_DEPTH_ENV = "VALUETREE_MAX_DEPTH"
STRICT_UNIT_ENV = "VALUETREE_STRICT_UNIT_VARIANTS"

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class DecodeOptions:
	"""
	Knobs for a single decode call.

	max_depth:
	  None (default) decodes arbitrarily deep trees, limited only by the
	  interpreter's recursion limit. An int bounds how many container levels
	  (sequences, mappings, enum wrappers) may nest; deeper input raises
	  `DepthLimitExceeded`.
	null_satisfies_unit_variant:
	  When True (default) `{"Tag": null}` is accepted wherever the unit
	  variant `"Tag"` is.
	"""

	max_depth: Optional[int] = None
	null_satisfies_unit_variant: bool = True

	def __post_init__(self) -> None:
		if self.max_depth is not None and self.max_depth < 0:
			raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DecodeOptions":
		env = os.environ if environ is None else environ
		max_depth: Optional[int] = None
		raw_depth = env.get(MAX_DEPTH_ENV)
		if raw_depth is not None and raw_depth.strip():
			try:
				max_depth = int(raw_depth)
			except ValueError:
				raise ValueError(f"{MAX_DEPTH_ENV} must be an integer, got {raw_depth!r}") from None
		strict = _parse_flag(STRICT_UNIT_ENV, env.get(STRICT_UNIT_ENV, ""))
		return cls(max_depth=max_depth, null_satisfies_unit_variant=not strict)


def _parse_flag(name: str, raw: str) -> bool:
	word = raw.strip().lower()
	if word in _TRUE_WORDS:
		return True
	if word in _FALSE_WORDS:
		return False
	raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


__all__ = ["DecodeOptions", "MAX_DEPTH_ENV", "STRICT_UNIT_ENV"]
