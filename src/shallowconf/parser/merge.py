# src/shallowconf/parser/merge.py

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional, Union

from ..logutil import get_logger
from .engine import MAX_INCLUDE_DEPTH, ParseOptions, parse_path
from .schema import ItemLookup
from .store import Ordering, list_fragments

LOG = get_logger(__name__)

PathLike = Union[str, Path]

__all__ = ["parse_many"]


def parse_many(
		conf_file: Optional[PathLike],
		conf_file_dirs: Iterable[PathLike],
		*,
		lookup: ItemLookup,
		sections: Optional[Iterable[str]] = None,
		relaxed: bool = False,
		userdata: Any = None,
		suffix: str = ".conf",
		ordering: Ordering = "directory",
		allow_include: bool = False,
		unit: Optional[str] = None,
		max_include_depth: int = MAX_INCLUDE_DEPTH
) -> None:
	"""
	Parse a primary file followed by its drop-in fragments into the same storage.

	Later files win simply because their callbacks run later and overwrite the
	stored values. A missing primary file or drop-in directory is skipped; the
	first fatal error from any file aborts the whole merge.

	:param conf_file: Primary configuration file, or None.
	:param conf_file_dirs: Drop-in directories in precedence order.
	:param lookup: Schema lookup strategy shared by all files.
	:param sections: Allowed section names (None accepts all).
	:param relaxed: See :func:`~.engine.parse_one`.
	:param userdata: Opaque object handed to callbacks.
	:param suffix: Fragment file name suffix.
	:param ordering: ``"directory"`` or ``"basename"``, see :func:`~.store.list_fragments`.
	:param allow_include: Honour ``.include`` directives in every file.
	:param unit: Unit label for diagnostics.
	:param max_include_depth: Maximum nesting of ``.include``.
	:raises FatalParseError: On the first fatal error.
	"""
	options = ParseOptions(
		lookup=lookup,
		sections=frozenset(sections) if sections is not None else None,
		relaxed=relaxed,
		allow_include=allow_include,
		warn=True,
		userdata=userdata,
		max_include_depth=max_include_depth,
		unit=unit,
	)

	fragments = list_fragments(conf_file_dirs, suffix=suffix, ordering=ordering)

	if conf_file is not None:
		parse_path(Path(conf_file), options)

	for fragment in fragments:
		LOG.debug("Parsing drop-in fragment %s", fragment)
		parse_path(fragment, options)
