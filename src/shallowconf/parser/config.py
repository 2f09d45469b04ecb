# src/shallowconf/parser/config.py

from __future__ import annotations

import io
import logging
from pathlib import Path
from types import TracebackType
from typing import Any, Iterable, Optional, TextIO, Union

from . import engine, merge, templates
from .schema import ItemLookup
from .store import Ordering

LOG = logging.getLogger(__name__)
PathLike = Union[str, Path]


class ShallowConfig:
	"""
	Holds a schema lookup plus parse options and applies them to files.

	Internally delegates to shallowconf.parser.{engine,merge,templates}.

	Typical flow:
		settings = Settings()
		cfg = ShallowConfig(PerfectHashLookup(ITEMS), sections=["Time"], userdata=settings)
		cfg.parse_many("/etc/myapp/daemon.conf", ["/etc/myapp/daemon.conf.d"])

	:param lookup: Schema lookup strategy.
	:param sections: Allowed section names; None accepts every section.
	:param relaxed: Lower unknown-setting diagnostics and tolerate broken includes.
	:param allow_include: Honour ``.include`` directives.
	:param unit: Unit label used in diagnostics.
	:param userdata: Object handed to every callback.
	:param max_include_depth: Maximum nesting of ``.include``.
	"""
	def __init__(
			self,
			lookup: ItemLookup,
			*,
			sections: Optional[Iterable[str]] = None,
			relaxed: bool = False,
			allow_include: bool = False,
			unit: Optional[str] = None,
			userdata: Any = None,
			max_include_depth: int = engine.MAX_INCLUDE_DEPTH
	) -> None:
		self.lookup = lookup
		self.sections = frozenset(sections) if sections is not None else None
		self.relaxed = relaxed
		self.allow_include = allow_include
		self.unit = unit
		self.userdata = userdata
		self.max_include_depth = max_include_depth

	def __repr__(self) -> str:
		"""Returns string like ``ShallowConfig(lookup=TableLookup(items=3), sections=['Time'])``."""
		sections = sorted(self.sections) if self.sections is not None else None
		return f"{self.__class__.__name__}(lookup={self.lookup!r}, sections={sections})"

	def __enter__(self) -> "ShallowConfig":
		"""
		Enable ``with ShallowConfig(...) as cfg: ...`` usage.
		No resources are acquired here; this returns ``self`` for convenience.
		"""
		return self

	def __exit__(
			self,
			exc_type: Optional[type[BaseException]],
			exc_val: Optional[BaseException],
			exc_tb: Optional[TracebackType]
	) -> bool:
		"""
		Log any exception raised inside the ``with`` block and let it propagate.

		:return: ``False`` - do not suppress exceptions.
		"""
		if exc_type is not None:
			LOG.error("Exception inside ShallowConfig context: %s", exc_type, exc_info=(exc_type, exc_val, exc_tb))
		return False

	# --- parse ---
	def parse_stream(
			self,
			stream: Union[TextIO, Iterable[str]],
			*,
			filename: Optional[PathLike] = None,
			warn: bool = True
	) -> "ShallowConfig":
		"""
		Parse an already open text stream.

		:param stream: Text stream or iterable of lines.
		:param filename: Name used in diagnostics and for relative includes.
		:param warn: See :func:`~.engine.parse_one`.
		:return: self.
		:raises FatalParseError: When the parse has to be aborted.
		"""
		engine.parse_one(
			self.unit,
			filename,
			stream,
			lookup=self.lookup,
			sections=self.sections,
			relaxed=self.relaxed,
			allow_include=self.allow_include,
			warn=warn,
			userdata=self.userdata,
			max_include_depth=self.max_include_depth
		)
		return self

	def parse_text(self, text: str, *, filename: Optional[PathLike] = None) -> "ShallowConfig":
		"""Parse configuration *text* held in memory."""
		return self.parse_stream(io.StringIO(text), filename=filename)

	def parse_file(self, path: PathLike, *, warn: bool = True) -> "ShallowConfig":
		"""
		Parse one file; a missing file is skipped.

		:param path: Configuration file.
		:param warn: See :func:`~.engine.parse_one`.
		:return: self.
		:raises FatalParseError: When the file cannot be read or the parse aborts.
		"""
		engine.parse_one(
			self.unit,
			path,
			lookup=self.lookup,
			sections=self.sections,
			relaxed=self.relaxed,
			allow_include=self.allow_include,
			warn=warn,
			userdata=self.userdata,
			max_include_depth=self.max_include_depth
		)
		LOG.debug("Parsed %s", path)
		return self

	def parse_many(
			self,
			conf_file: Optional[PathLike],
			conf_file_dirs: Iterable[PathLike] = (),
			*,
			suffix: str = ".conf",
			ordering: Ordering = "directory"
	) -> "ShallowConfig":
		"""
		Parse a primary file followed by its drop-in fragments.

		:param conf_file: Primary file or None.
		:param conf_file_dirs: Drop-in directories in precedence order.
		:param suffix: Fragment file name suffix.
		:param ordering: ``"directory"`` or ``"basename"``.
		:return: self.
		:raises FatalParseError: On the first fatal error.
		"""
		merge.parse_many(
			conf_file,
			conf_file_dirs,
			lookup=self.lookup,
			sections=self.sections,
			relaxed=self.relaxed,
			userdata=self.userdata,
			suffix=suffix,
			ordering=ordering,
			allow_include=self.allow_include,
			unit=self.unit,
			max_include_depth=self.max_include_depth
		)
		return self

	# --- create ---
	def render_skeleton(self, defaults: Optional[dict] = None, *, header_comment: Optional[str] = None) -> str:
		"""Render a commented-out default file for this schema, see :func:`~.templates.render_skeleton`."""
		return templates.render_skeleton(self.lookup, defaults, header_comment=header_comment)
