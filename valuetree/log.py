# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Package logging: one `valuetree` logger hierarchy, no root-logger mutation.

Modules call `get_logger(__name__)`. Output stays silent until an
application (or the CLI) calls `configure_logging`. Setting
VALUETREE_DEBUG=1 turns on debug output for this package only.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

BASE_LOGGER_NAME = "valuetree"
DEBUG_ENV = "VALUETREE_DEBUG"

_HANDLER: Optional[logging.Handler] = None


def get_logger(name: str = BASE_LOGGER_NAME) -> logging.Logger:
	if name != BASE_LOGGER_NAME and not name.startswith(BASE_LOGGER_NAME + "."):
		name = f"{BASE_LOGGER_NAME}.{name}"
	return logging.getLogger(name)


def debug_from_env() -> bool:
	return os.environ.get(DEBUG_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(debug: Optional[bool] = None) -> logging.Logger:
	"""
	Set the package log level; in debug mode also attach one stderr handler.

	Calling it again only adjusts the level (the handler is installed once).
	"""
	global _HANDLER
	if debug is None:
		debug = debug_from_env()
	base = logging.getLogger(BASE_LOGGER_NAME)
	base.setLevel(logging.DEBUG if debug else logging.WARNING)
	if debug and _HANDLER is None:
		_HANDLER = logging.StreamHandler()
		_HANDLER.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
		base.addHandler(_HANDLER)
	return base


logging.getLogger(BASE_LOGGER_NAME).addHandler(logging.NullHandler())

__all__ = ["BASE_LOGGER_NAME", "DEBUG_ENV", "get_logger", "configure_logging", "debug_from_env"]
