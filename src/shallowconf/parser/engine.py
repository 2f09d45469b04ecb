# src/shallowconf/parser/engine.py

from __future__ import annotations

import errno
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, FrozenSet, Iterable, Optional, TextIO, Tuple, Union

from ..logutil import get_logger
from .context import Assignment, ParseContext
from .errors import FatalParseError, IncludeError
from .lines import classify_line, iter_logical_lines, split_assignment
from .schema import INCLUDE_KEY, ItemLookup

LOG = get_logger(__name__)

PathLike = Union[str, Path]

MAX_INCLUDE_DEPTH = 16
EXTENSION_PREFIX = "X-"

__all__ = ["MAX_INCLUDE_DEPTH", "ParseOptions", "parse_one"]


@dataclass(frozen=True)
class ParseOptions:
	"""Settings shared by a file and everything it includes."""
	lookup: ItemLookup
	sections: Optional[FrozenSet[str]] = None
	relaxed: bool = False
	allow_include: bool = False
	warn: bool = True
	userdata: Any = None
	max_include_depth: int = MAX_INCLUDE_DEPTH
	unit: Optional[str] = None


def parse_one(
		unit: Optional[str],
		filename: Optional[PathLike],
		stream: Optional[Iterable[str]] = None,
		*,
		lookup: ItemLookup,
		sections: Optional[Iterable[str]] = None,
		relaxed: bool = False,
		allow_include: bool = False,
		warn: bool = True,
		userdata: Any = None,
		max_include_depth: int = MAX_INCLUDE_DEPTH
) -> None:
	"""
	Parse one configuration file and dispatch every assignment to its callback.

	Syntax problems and unknown settings are logged and skipped; only resource
	failures, callback failures and (unless *relaxed*) broken includes abort.

	:param unit: Owning unit label used in diagnostics.
	:param filename: File name; opened when *stream* is None, otherwise only used in
					 diagnostics and to resolve relative includes.
	:param stream: Already open text stream (any iterable of lines).
	:param lookup: Schema lookup strategy (:class:`~.schema.TableLookup` or
				   :class:`~.schema.PerfectHashLookup`).
	:param sections: Allowed section names; None accepts every section including the
					 implicit one before the first header.
	:param relaxed: Lower unknown-setting diagnostics to warnings and tolerate broken includes.
	:param allow_include: Honour ``.include`` directives.
	:param warn: Log unknown settings and open failures at their normal level
				 (DEBUG when False).
	:param userdata: Opaque object handed to callbacks (base object for perfect-hash schemas).
	:param max_include_depth: Maximum nesting of ``.include``.
	:raises FatalParseError: When the parse has to be aborted.
	"""
	options = ParseOptions(
		lookup=lookup,
		sections=frozenset(sections) if sections is not None else None,
		relaxed=relaxed,
		allow_include=allow_include,
		warn=warn,
		userdata=userdata,
		max_include_depth=max_include_depth,
		unit=unit,
	)
	name = os.fspath(filename) if filename is not None else None

	if stream is not None:
		stack: Tuple[str, ...] = (os.path.realpath(name),) if name else ()
		ctx = ParseContext(unit, name, relaxed, stack=stack)
		_parse_stream(ctx, stream, options)
		return

	if name is None:
		raise ValueError("parse_one() needs either a filename or a stream")
	parse_path(Path(name), options)


def parse_path(path: Path, options: ParseOptions) -> None:
	"""
	Open *path* and parse it with *options*; a missing file is not an error.

	:raises FatalParseError: When the file exists but cannot be read, or the parse aborts.
	"""
	try:
		fh = path.open("r", encoding="utf-8")
	except OSError as exc:
		if exc.errno == errno.ENOENT:
			LOG.debug("Configuration file '%s' does not exist, skipping.", path)
			return
		LOG.log(
			logging.ERROR if options.warn else logging.DEBUG,
			"Failed to open configuration file '%s': %s", path, exc.strerror or exc
		)
		raise FatalParseError(
			exc.errno or errno.EIO,
			f"Failed to open configuration file: {exc.strerror or exc}",
			filename=str(path)
		) from exc

	with fh:
		ctx = ParseContext(options.unit, str(path), options.relaxed, stack=(os.path.realpath(path),))
		_parse_stream(ctx, fh, options)


# ------------------------------- Line handling -------------------------------
def _parse_stream(ctx: ParseContext, stream: Union[TextIO, Iterable[str]], options: ParseOptions) -> None:
	try:
		for logical in iter_logical_lines(stream):
			ctx.line = logical.line
			_parse_line(ctx, logical.text, options)
	except UnicodeDecodeError as exc:
		ctx.log(logging.ERROR, errno.EILSEQ, "File is not valid UTF-8: %s", exc.reason)
		raise FatalParseError(errno.EILSEQ, "File is not valid UTF-8", filename=ctx.filename, line=ctx.line) from exc
	except OSError as exc:
		ctx.log(logging.ERROR, exc.errno or errno.EIO, "Failed to read configuration file: %s", exc.strerror or exc)
		raise FatalParseError(
			exc.errno or errno.EIO,
			f"Failed to read configuration file: {exc.strerror or exc}",
			filename=ctx.filename,
			line=ctx.line
		) from exc


def _is_include_directive(text: str) -> bool:
	return text.startswith(INCLUDE_KEY) and text[len(INCLUDE_KEY):len(INCLUDE_KEY) + 1].isspace()


def _parse_line(ctx: ParseContext, text: str, options: ParseOptions) -> None:
	kind, name = classify_line(text)
	if kind == "malformed":
		ctx.log(logging.ERROR, errno.EBADMSG, "Invalid section header '%s', ignoring.", text)
		return
	if kind == "header":
		_enter_section(ctx, name, options)
		return

	pair = split_assignment(text)
	if options.allow_include:
		if pair is not None and pair[0] == INCLUDE_KEY:
			_include(ctx, pair[1], options)
			return
		if _is_include_directive(text):
			_include(ctx, text[len(INCLUDE_KEY):].strip(), options)
			return

	if options.sections is not None and ctx.section is None:
		if not options.relaxed and not ctx.section_ignored:
			ctx.log(logging.WARNING, errno.EINVAL, "Assignment outside of section, ignoring.")
		return

	if pair is None:
		ctx.log(logging.WARNING, errno.EINVAL, "Missing '=', ignoring line.")
		return

	key, value = pair
	_dispatch(ctx, key, value, options)


def _enter_section(ctx: ParseContext, name: Optional[str], options: ParseOptions) -> None:
	if options.sections is not None and name not in options.sections:
		if not options.relaxed and not (name or "").startswith(EXTENSION_PREFIX):
			ctx.log(logging.WARNING, errno.EINVAL, "Unknown section '%s', ignoring.", name)
		ctx.enter_section(None, ignored=True)
		return
	ctx.enter_section(name)


def _dispatch(ctx: ParseContext, key: str, value: str, options: ParseOptions) -> None:
	resolved = options.lookup.resolve(ctx.section, key, options.userdata)

	if resolved is None:
		if key.startswith(EXTENSION_PREFIX):
			return
		if not options.warn:
			level = logging.DEBUG
		else:
			level = logging.WARNING if options.relaxed else logging.ERROR
		ctx.log(level, errno.EINVAL, "Unknown key '%s' in section '%s', ignoring.", key, ctx.section or "")
		return

	if resolved.callback is None:
		return

	assignment = Assignment(
		unit=ctx.unit,
		filename=ctx.filename,
		line=ctx.line,
		section=ctx.section,
		section_line=ctx.section_line,
		key=key,
		discriminator=resolved.discriminator,
		value=value,
		data=resolved.data,
		userdata=options.userdata,
	)

	try:
		result = resolved.callback(assignment)
	except MemoryError as exc:
		ctx.log(logging.ERROR, errno.ENOMEM, "Out of memory while parsing '%s'.", key)
		raise FatalParseError(errno.ENOMEM, f"Out of memory while parsing '{key}'",
		                      filename=ctx.filename, line=ctx.line) from exc

	if result is not None and result < 0:
		ctx.log(logging.ERROR, -result, "Failed to parse '%s': %s", key, os.strerror(-result))
		raise FatalParseError(-result, f"Failed to parse '{key}'", filename=ctx.filename, line=ctx.line)


# ---------------------------------- Includes ---------------------------------
def _include_failed(ctx: ParseContext, options: ParseOptions, error: int, message: str, *args: Any) -> None:
	if options.relaxed:
		ctx.log(logging.WARNING, error, message + ", ignoring.", *args)
		return
	ctx.log(logging.ERROR, error, message + ".", *args)
	raise IncludeError(error, message % args, filename=ctx.filename, line=ctx.line)


def _include(ctx: ParseContext, target: str, options: ParseOptions) -> None:
	if not target:
		ctx.log(logging.WARNING, errno.EINVAL, "Include directive without a file name, ignoring.")
		return

	if os.path.isabs(target):
		path = Path(target)
	else:
		base = Path(ctx.filename).parent if ctx.filename else Path.cwd()
		path = base / target

	if ctx.depth >= options.max_include_depth:
		_include_failed(ctx, options, errno.ELOOP,
		                "Maximum include depth %d exceeded including '%s'", options.max_include_depth, path)
		return

	real = os.path.realpath(path)
	if real in ctx.stack:
		_include_failed(ctx, options, errno.ELOOP, "Include loop detected at '%s'", path)
		return

	try:
		fh = path.open("r", encoding="utf-8")
	except OSError as exc:
		_include_failed(ctx, options, exc.errno or errno.EIO,
		                "Failed to open included file '%s': %s", path, exc.strerror or exc)
		return

	LOG.debug("Including '%s' from %s:%d", path, ctx.filename, ctx.line)
	with fh:
		child = ParseContext(
			ctx.unit,
			str(path),
			options.relaxed,
			depth=ctx.depth + 1,
			stack=ctx.stack + (real,),
		)
		_parse_stream(child, fh, options)
