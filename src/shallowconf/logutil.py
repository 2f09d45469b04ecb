# src/shallowconf/logutil.py

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal, Optional, Union

PathLike = Union[str, Path]

PACKAGE_LOGGER = "shallowconf"

ConsoleLevelName = Literal[
	"CRITICAL",
	"FATAL",
	"ERROR",
	"WARNING",
	"WARN",
	"INFO",
	"DEBUG",
	"NOTSET",
]

LevelLike = Union[int, ConsoleLevelName]


def _normalize_level(value: LevelLike, *, param_name: str) -> int:
	if isinstance(value, int):
		return value

	resolved = logging.getLevelName(value.upper())
	if isinstance(resolved, int):
		return resolved

	raise ValueError(f"Unknown logging level name for {param_name}: {value}")


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
	"""
	Return a package logger; the shared ``shallowconf`` logger gets a console handler once.

	Child loggers (``shallowconf.parser.engine`` ...) carry no handlers of their own
	and propagate to the package logger.

	:param name: Logger name.
	:return: The logger.
	"""
	root = logging.getLogger(PACKAGE_LOGGER)
	if not root.handlers:
		handler = logging.StreamHandler()
		handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
		root.addHandler(handler)
		root.setLevel(logging.INFO)
	return logging.getLogger(name)


def configure_logging(
		*,
		name: str = PACKAGE_LOGGER,
		console_level: ConsoleLevelName = "INFO",
		file_path: Optional[PathLike] = None,
		file_level: Optional[LevelLike] = None,
		mode: str = "w",
		rotate: bool = False,
		max_bytes: int = 2_000_000,
		backup_count: int = 3,
		formatter: Optional[logging.Formatter] = None,
		propagate: bool = False
) -> logging.Logger:
	"""
	Configure the shared logger that receives parser diagnostics.

	:param name: Logger name.
	:param console_level: Console handler level.
	:param file_path: Optional log file path to add a file handler.
	:param file_level: File handler level (int or level name,
					   defaults to console-level if None).
	:param mode: 'w' for overwriting or 'a' for appending.
	:param rotate: Use RotatingFileHandler when True.
	:param max_bytes: Rotation threshold per file.
	:param backup_count: Number of rotated backups.
	:param formatter: Custom formatter; default includes timestamp.
	:param propagate: Whether to propagate to parent loggers.
	:return: The configured logger.
	"""
	console_level_value = _normalize_level(console_level, param_name="console_level")
	file_level_value = (
		_normalize_level(file_level, param_name="file_level")
		if file_level is not None
		else None
	)

	log = get_logger(name)
	effective_level = min(
		console_level_value,
		file_level_value if file_level_value is not None else console_level_value
	)
	log.setLevel(effective_level)
	log.propagate = propagate

	fmt = formatter or logging.Formatter(
		"%(asctime)s [%(levelname)s] %(name)s: %(message)s"
	)

	has_stream = False
	for handler in log.handlers:
		if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
			handler.setLevel(console_level_value)
			handler.setFormatter(fmt)
			has_stream = True
	if not has_stream:
		stream_handler = logging.StreamHandler()
		stream_handler.setLevel(console_level_value)
		stream_handler.setFormatter(fmt)
		log.addHandler(stream_handler)

	if file_path:
		path = Path(file_path)
		path.parent.mkdir(parents=True, exist_ok=True)
		if not any(
				getattr(handler, "baseFilename", None) == str(path.resolve())
				for handler in log.handlers
		):
			file_handler: logging.Handler
			if rotate:
				file_handler = RotatingFileHandler(
					path,
					mode=mode,
					maxBytes=max_bytes,
					backupCount=backup_count,
					encoding="utf-8"
				)
			else:
				file_handler = logging.FileHandler(path, mode=mode, encoding="utf-8")
			file_handler.setLevel(
				file_level_value if file_level_value is not None else console_level_value
			)
			file_handler.setFormatter(fmt)
			log.addHandler(file_handler)

	return log


def log_syntax(
		unit: Optional[str],
		level: int,
		filename: Optional[str],
		line: int,
		error: int,
		message: str,
		*args: Any,
		logger: Optional[logging.Logger] = None
) -> None:
	"""
	Emit one structured configuration diagnostic.

	The record's message reads ``<filename>:<line>: <message>``; the raw fields are
	attached as ``config_unit``, ``config_file``, ``config_line`` and ``config_errno``
	so handlers and tests can inspect them without parsing text.

	:param unit: Owning unit label (may be None).
	:param level: Logging level, e.g. ``logging.WARNING``.
	:param filename: File being parsed (``None`` for anonymous streams).
	:param line: 1-based line number, 0 when not tied to a line.
	:param error: Positive errno value describing the problem.
	:param message: %-style format string.
	:param args: Format arguments.
	:param logger: Logger to use; defaults to ``shallowconf.parser``.
	"""
	log = logger or get_logger(f"{PACKAGE_LOGGER}.parser")
	extra = {
		"config_unit": unit,
		"config_file": filename,
		"config_line": line,
		"config_errno": error,
	}
	where = filename or "<stdin>"
	if unit:
		log.log(level, "[%s] %s:%d: " + message, unit, where, line, *args, extra=extra)
	else:
		log.log(level, "%s:%d: " + message, where, line, *args, extra=extra)
