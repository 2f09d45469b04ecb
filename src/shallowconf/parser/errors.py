# src/shallowconf/parser/errors.py

from __future__ import annotations

import errno as _errno
import os
from typing import Optional

__all__ = ["ConfigError", "FatalParseError", "IncludeError"]


class ConfigError(Exception):
	"""
	Generic configuration error.

	Raised directly for misuse of the API (e.g., a perfect-hash table built from
	duplicate keys); the parse-time fatal errors derive from it.
	"""


class FatalParseError(ConfigError):
	"""
	A condition that aborts the whole parse (I/O failure, callback failure).

	:param errno: Positive errno value describing the failure.
	:param message: Human readable description.
	:param filename: File being parsed when the failure happened.
	:param line: Line number, 0 when not tied to a line.
	"""
	def __init__(
			self,
			errno: int,
			message: Optional[str] = None,
			*,
			filename: Optional[str] = None,
			line: int = 0
	) -> None:
		self.errno = abs(int(errno)) or _errno.EIO
		self.filename = filename
		self.line = line
		text = message or os.strerror(self.errno)
		if filename:
			text = f"{filename}:{line}: {text}" if line else f"{filename}: {text}"
		super().__init__(text)


class IncludeError(FatalParseError):
	"""An ``.include`` directive could not be honoured (missing target, loop, depth)."""
