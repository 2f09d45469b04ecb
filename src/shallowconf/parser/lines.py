# src/shallowconf/parser/lines.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Literal, Optional, Tuple

__all__ = [
	"COMMENT_MARKERS",
	"LogicalLine",
	"iter_logical_lines",
	"classify_line",
	"split_assignment",
]

COMMENT_MARKERS = "#;"

LineKind = Literal["header", "malformed", "body"]


@dataclass(frozen=True)
class LogicalLine:
	"""
	One assignment or header after continuation joining and trimming.

	:param text: Trimmed logical line.
	:param line: 1-based number of the first physical line it was built from.
	"""
	text: str
	line: int


def _strip_terminator(raw: str) -> str:
	if raw.endswith("\r\n"):
		return raw[:-2]
	if raw.endswith("\n") or raw.endswith("\r"):
		return raw[:-1]
	return raw


def _is_continued(text: str) -> bool:
	"""True when *text* ends in an odd number of backslashes (the last one is unescaped)."""
	count = len(text) - len(text.rstrip("\\"))
	return count % 2 == 1


def _is_comment(text: str) -> bool:
	stripped = text.lstrip()
	return bool(stripped) and stripped[0] in COMMENT_MARKERS


def iter_logical_lines(stream: Iterable[str]) -> Iterator[LogicalLine]:
	"""
	Yield logical lines from a text stream.

	A physical line ending in an unescaped backslash continues onto the next one:
	the backslash and the line terminator are removed and the next line is appended
	as-is (no separator is inserted). Comment lines (``#`` or ``;`` as the first
	non-whitespace character) are dropped; inside a continuation they are skipped
	without ending it. Blank logical lines are dropped, and end-of-stream inside a
	continuation yields the partial line.

	:param stream: Any iterable of physical lines (an open text file, ``io.StringIO``...).
	:return: Iterator of :class:`LogicalLine`.
	"""
	parts: List[str] = []
	start = 0

	for number, raw in enumerate(stream, start=1):
		text = _strip_terminator(raw)

		if _is_comment(text):
			continue

		if not parts:
			start = number

		if _is_continued(text):
			parts.append(text[:-1])
			continue

		parts.append(text)
		joined = "".join(parts).strip()
		parts = []
		if joined:
			yield LogicalLine(joined, start)

	if parts:
		joined = "".join(parts).strip()
		if joined:
			yield LogicalLine(joined, start)


def classify_line(text: str) -> Tuple[LineKind, Optional[str]]:
	"""
	Classify a trimmed logical line as a section header, a malformed header or a body line.

	:param text: Trimmed logical line.
	:return: ``("header", name)``, ``("malformed", None)`` or ``("body", None)``.
	"""
	if not text.startswith("["):
		return "body", None
	if len(text) < 3 or not text.endswith("]"):
		return "malformed", None
	name = text[1:-1]
	if "]" in name:
		return "malformed", None
	return "header", name


def split_assignment(text: str) -> Optional[Tuple[str, str]]:
	"""
	Split a body line at the first unescaped ``=``.

	Escapes are only honoured for finding the separator; key and value are returned
	verbatim apart from trimming.

	:param text: Logical body line.
	:return: ``(key, value)`` or ``None`` when the line has no separator.
	"""
	escaped = False
	for index, ch in enumerate(text):
		if escaped:
			escaped = False
		elif ch == "\\":
			escaped = True
		elif ch == "=":
			return text[:index].strip(), text[index + 1:].strip()
	return None
