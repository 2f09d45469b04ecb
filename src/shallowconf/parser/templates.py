# src/shallowconf/parser/templates.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .schema import PerfectHashLookup, PerfItem, TableItem, TableLookup
from .store import atomic_write_text

LOG = logging.getLogger(__name__)
PathLike = Union[str, Path]

SchemaLike = Union[TableLookup, PerfectHashLookup, Iterable[Union[TableItem, PerfItem]]]

__all__ = ["schema_keys", "render_skeleton", "write_skeleton"]


# --- Internal helpers
def _split_composite(section_and_key: str) -> Tuple[Optional[str], str]:
	section, dot, key = section_and_key.partition(".")
	if not dot:
		return None, section_and_key
	return section, key


def _to_conf_scalar(value: Any) -> str:
	"""
	Convert a Python default to its configuration-file spelling.

	Strategy:
		* None -> "" (empty assignment resets most settings)
		* bool -> "yes"/"no" (accepted by :func:`~.callbacks.parse_boolean`)
		* enums -> their value
		* lists/tuples/sets -> space separated items
		* anything else -> str(value)
	"""
	if value is None:
		return ""
	if isinstance(value, bool):
		return "yes" if value else "no"
	if isinstance(value, (list, tuple, set, frozenset)):
		return " ".join(_to_conf_scalar(v) for v in value)
	return str(getattr(value, "value", value))


def schema_keys(schema: SchemaLike) -> List[Tuple[Optional[str], str]]:
	"""
	List the ``(section, key)`` pairs a schema recognizes, in emission order.

	Table schemas keep their own order; perfect-hash schemas have none and are
	sorted by section, then key. Entries without a callback are left out.
	"""
	if isinstance(schema, PerfectHashLookup):
		items: Iterable[Union[TableItem, PerfItem]] = [
			schema.table.get(k) for k in schema.keys()
		]
		pairs = [_split_composite(i.section_and_key) for i in items if i is not None and i.callback is not None]
		return sorted(pairs, key=lambda p: (p[0] or "", p[1]))

	out: List[Tuple[Optional[str], str]] = []
	for item in schema:
		if item.callback is None:
			continue
		pair = (item.section, item.key) if isinstance(item, TableItem) else _split_composite(item.section_and_key)
		if pair not in out:
			out.append(pair)
	return out


# --- Public API
def render_skeleton(
		schema: SchemaLike,
		defaults: Optional[Mapping[str, Any]] = None,
		*,
		header_comment: Optional[str] = None
) -> str:
	"""
	Render a configuration file listing every known setting as a commented default.

	The output follows the usual convention for shipped defaults::

		[Time]
		#NTP=
		#PollIntervalMinSec=32

	:param schema: Table/perfect-hash lookup or an iterable of schema entries.
	:param defaults: Mapping ``"Section.Key"`` (or ``"Key"`` for the implicit section) -> value.
	:param header_comment: Optional text placed at the top as ``#`` comments.
	:return: The file text.
	"""
	defaults = defaults or {}
	grouped: Dict[Optional[str], List[str]] = {}
	for section, key in schema_keys(schema):
		grouped.setdefault(section, []).append(key)

	lines: List[str] = []
	if header_comment:
		for line in header_comment.strip("\n").splitlines():
			lines.append(f"# {line}".rstrip())
		lines.append("")

	order = ([None] if None in grouped else []) + [s for s in grouped if s is not None]
	for section in order:
		if section is not None:
			lines.append(f"[{section}]")
		for key in grouped[section]:
			composite = key if section is None else f"{section}.{key}"
			lines.append(f"#{key}={_to_conf_scalar(defaults.get(composite))}")
		lines.append("")

	return "\n".join(lines).rstrip() + "\n"


def write_skeleton(
		schema: SchemaLike,
		dest_path: PathLike,
		defaults: Optional[Mapping[str, Any]] = None,
		*,
		header_comment: Optional[str] = None,
		overwrite: bool = False
) -> Path:
	"""
	Render :func:`render_skeleton` output and write it atomically.

	:param schema: Schema to document.
	:param dest_path: Destination file.
	:param defaults: See :func:`render_skeleton`.
	:param header_comment: See :func:`render_skeleton`.
	:param overwrite: When False and the file exists, raise ``FileExistsError``.
	:return: Absolute path of the written file.
	:raises FileExistsError: If the destination exists and ``overwrite=False``.
	:raises OSError: On write errors.
	"""
	dest = Path(dest_path).resolve()
	if dest.exists() and not overwrite:
		raise FileExistsError(f"Destination already exists: {dest}")

	text = render_skeleton(schema, defaults, header_comment=header_comment)
	try:
		atomic_write_text(dest, text)
	except OSError as exc:
		LOG.exception("Failed writing skeleton to %s: %s", dest, exc)
		raise
	LOG.info("Wrote configuration skeleton to %s", dest)
	return dest
