# src/shallowconf/parser/callbacks.py

"""
Stock value callbacks.

Every callback takes one :class:`~.context.Assignment` and stores into
``assignment.data`` (a :class:`~.storage.Ref`). Bad values are logged and leave the
stored value untouched; only a negative errno return aborts the parse.
"""

from __future__ import annotations

import errno
from enum import Enum
from typing import Any, Callable, List, Optional, Type, Union

from .context import Assignment, Callback
from .storage import Ref

__all__ = [
	"parse_boolean",
	"parse_string",
	"parse_bool",
	"enum_from_string",
	"define_enum_parser",
	"define_enum_set_parser",
]

EnumLookup = Union[Type[Enum], Callable[[str], Any]]

_TRUE = {"1", "yes", "y", "true", "t", "on"}
_FALSE = {"0", "no", "n", "false", "f", "off"}


def _ref(assignment: Assignment) -> Ref:
	if assignment.data is None:
		raise ValueError(f"No storage configured for '{assignment.key}'")
	return assignment.data


def parse_boolean(text: str) -> Optional[bool]:
	"""Interpret *text* as a boolean; None when it is not one."""
	lowered = text.strip().lower()
	if lowered in _TRUE:
		return True
	if lowered in _FALSE:
		return False
	return None


def parse_string(assignment: Assignment) -> int:
	"""Store the raw value; an empty value resets the setting to None."""
	_ref(assignment).set(assignment.value or None)
	return 0


def parse_bool(assignment: Assignment) -> int:
	value = parse_boolean(assignment.value)
	if value is None:
		assignment.log_error(errno.EINVAL, "Failed to parse boolean value, ignoring: %s", assignment.value)
		return 0
	_ref(assignment).set(value)
	return 0


def enum_from_string(lookup: EnumLookup) -> Callable[[str], Any]:
	"""
	Turn *lookup* into a ``text -> value or None`` function.

	An :class:`~enum.Enum` subclass is matched by member value first, then by member
	name. Any other callable is used as-is; ``KeyError``/``ValueError`` from it count as
	"unknown".
	"""
	if isinstance(lookup, type) and issubclass(lookup, Enum):
		enum_cls = lookup

		def from_enum(text: str) -> Any:
			for member in enum_cls:
				if member.value == text:
					return member
			return enum_cls.__members__.get(text)

		return from_enum

	def from_callable(text: str) -> Any:
		try:
			return lookup(text)
		except (KeyError, ValueError):
			return None

	return from_callable


def define_enum_parser(lookup: EnumLookup, message: str) -> Callback:
	"""
	Build a callback storing one enum value.

	:param lookup: Enum class or ``text -> value`` function.
	:param message: Diagnostic prefix for unknown values (e.g. ``"Failed to parse log level"``).
	:return: The callback.
	"""
	from_string = enum_from_string(lookup)

	def parse_enum(assignment: Assignment) -> int:
		value = from_string(assignment.value)
		if value is None:
			assignment.log_error(errno.EINVAL, message + ", ignoring: %s", assignment.value)
			return 0
		_ref(assignment).set(value)
		return 0

	return parse_enum


def define_enum_set_parser(lookup: EnumLookup, message: str) -> Callback:
	"""
	Build a callback storing a whitespace separated list of distinct enum values.

	Unknown tokens and duplicates are logged and skipped; the stored list keeps the
	order of first occurrence. The previous list is replaced only once the new one is
	complete, so a failure midway leaves the old value in place.

	:param lookup: Enum class or ``text -> value`` function.
	:param message: Diagnostic prefix for unknown tokens.
	:return: The callback.
	"""
	from_string = enum_from_string(lookup)

	def parse_enum_set(assignment: Assignment) -> int:
		ref = _ref(assignment)
		values: List[Any] = []
		try:
			for token in assignment.value.split():
				value = from_string(token)
				if value is None:
					assignment.log_error(errno.EINVAL, message + ", ignoring: %s", token)
					continue
				if value in values:
					assignment.log_error(errno.EINVAL, "Duplicate entry, ignoring: %s", token)
					continue
				values.append(value)
		except MemoryError:
			return -errno.ENOMEM

		ref.set(values)
		return 0

	return parse_enum_set
