# src/shallowconf/parser/context.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from ..logutil import log_syntax

__all__ = ["Assignment", "Callback", "ParseContext"]


@dataclass(frozen=True)
class Assignment:
	"""
	Everything a value callback gets to see about one ``key = value`` line.

	:param unit: Owning unit label, used for diagnostics only.
	:param filename: File the assignment came from.
	:param line: Line number of the assignment.
	:param section: Current section name (None before the first header).
	:param section_line: Line of the section header (0 before the first header).
	:param key: Left-hand side of the assignment.
	:param discriminator: Integer tag from the schema entry.
	:param value: Trimmed right-hand side; may be the empty string.
	:param data: Storage location from the schema entry (a :class:`~.storage.Ref` or
				 whatever the schema put there).
	:param userdata: Opaque object passed to the parse call.
	"""
	unit: Optional[str]
	filename: Optional[str]
	line: int
	section: Optional[str]
	section_line: int
	key: str
	discriminator: int
	value: str
	data: Any = None
	userdata: Any = None

	def log_syntax(self, level: int, error: int, message: str, *args: Any) -> None:
		"""Log a diagnostic tied to this assignment's file and line."""
		log_syntax(self.unit, level, self.filename, self.line, error, message, *args)

	def log_error(self, error: int, message: str, *args: Any) -> None:
		self.log_syntax(logging.ERROR, error, message, *args)


Callback = Callable[[Assignment], Union[int, None]]


@dataclass
class ParseContext:
	"""Transient state for the parse of one file."""
	unit: Optional[str]
	filename: Optional[str]
	relaxed: bool = False
	section: Optional[str] = None
	section_line: int = 0
	section_ignored: bool = False
	line: int = 0
	depth: int = 0
	stack: tuple = field(default_factory=tuple)

	@property
	def in_include(self) -> bool:
		return self.depth > 0

	def enter_section(self, name: Optional[str], *, ignored: bool = False) -> None:
		self.section = name
		self.section_line = self.line if name is not None else 0
		self.section_ignored = ignored

	def log(self, level: int, error: int, message: str, *args: Any) -> None:
		log_syntax(self.unit, level, self.filename, self.line, error, message, *args)
