# src/shallowconf/parser/storage.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, MutableMapping, Optional, Protocol, runtime_checkable

__all__ = ["Ref", "AttrRef", "ItemRef", "Box", "field_ref"]


@runtime_checkable
class Ref(Protocol):
	"""Writable location a callback stores a parsed value into."""
	def get(self) -> Any: ...

	def set(self, value: Any) -> None: ...


@dataclass(frozen=True)
class AttrRef:
	"""Attribute *name* of *target*."""
	target: Any
	name: str

	def get(self) -> Any:
		return getattr(self.target, self.name)

	def set(self, value: Any) -> None:
		setattr(self.target, self.name, value)


@dataclass(frozen=True)
class ItemRef:
	"""Key *key* of a mutable mapping; a missing key reads as ``None``."""
	target: MutableMapping[Any, Any]
	key: Hashable

	def get(self) -> Any:
		return self.target.get(self.key)

	def set(self, value: Any) -> None:
		self.target[self.key] = value


class Box:
	"""
	Standalone mutable cell, handy for table schemas whose settings are plain variables.

	    level = Box("info")
	    TableItem("Log", "Level", parse_string, data=level)
	"""
	__slots__ = ("value",)

	def __init__(self, value: Any = None) -> None:
		self.value = value

	def get(self) -> Any:
		return self.value

	def set(self, value: Any) -> None:
		self.value = value

	def __repr__(self) -> str:
		return f"Box({self.value!r})"


def field_ref(base: Any, field: Optional[str]) -> Any:
	"""
	Resolve a named field of *base* into a :class:`Ref`.

	Mappings are addressed by key, any other object by attribute. Dotted names walk
	nested objects (``"network.servers"``). ``field=None`` returns *base* itself.

	:param base: Caller-owned configuration object (the parse ``userdata``).
	:param field: Field name, dotted path or None.
	:return: A reference into *base*, or *base* when *field* is None.
	"""
	if field is None:
		return base
	*parents, leaf = field.split(".")
	target = base
	for part in parents:
		target = target[part] if isinstance(target, MutableMapping) else getattr(target, part)
	if isinstance(target, MutableMapping):
		return ItemRef(target, leaf)
	return AttrRef(target, leaf)
