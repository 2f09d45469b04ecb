# src/shallowconf/parser/schema.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple

from .context import Callback
from .perfhash import PerfectHashTable
from .storage import field_ref

__all__ = [
	"INCLUDE_KEY",
	"TableItem",
	"PerfItem",
	"Resolved",
	"ItemLookup",
	"TableLookup",
	"PerfectHashLookup",
	"composite_key",
]

INCLUDE_KEY = ".include"


# ------------------------------- Schema entries -----------------------------
@dataclass(frozen=True)
class TableItem:
	"""
	Schema entry for a linearly searched table.

	:param section: Section name, or None for assignments before the first header.
	:param key: Name of the setting.
	:param callback: Value parser; None marks a recognized setting that is ignored.
	:param discriminator: Tag letting one callback serve several entries.
	:param data: Where the callback stores the value (usually a Ref).
	"""
	section: Optional[str]
	key: str
	callback: Optional[Callback]
	discriminator: int = 0
	data: Any = None


@dataclass(frozen=True)
class PerfItem:
	"""
	Schema entry for a perfect-hash table.

	:param section_and_key: ``"Section.Key"`` (just ``"Key"`` for the implicit section).
	:param callback: Value parser; None marks a recognized setting that is ignored.
	:param discriminator: Tag letting one callback serve several entries.
	:param field: Attribute/key of the parse ``userdata`` the value is stored in
				  (dotted paths allowed); None passes ``userdata`` itself.
	"""
	section_and_key: str
	callback: Optional[Callback]
	discriminator: int = 0
	field: Optional[str] = None


@dataclass(frozen=True)
class Resolved:
	"""Result of a successful lookup."""
	callback: Optional[Callback]
	discriminator: int
	data: Any


def composite_key(section: Optional[str], key: str) -> str:
	"""Join *section* and *key* the way perfect-hash tables are keyed."""
	return key if section is None else f"{section}.{key}"


# --------------------------------- Lookups ----------------------------------
class ItemLookup(Protocol):
	"""Strategy turning ``(section, key)`` into a callback and its storage."""
	def resolve(self, section: Optional[str], key: str, userdata: Any = None) -> Optional[Resolved]: ...


class TableLookup:
	"""
	Linear search over an ordered sequence of :class:`TableItem`.

	Matching is exact and case-sensitive for both section and key. When a table lists
	the same ``(section, key)`` twice, the first entry wins.
	"""
	def __init__(self, items: Iterable[TableItem]) -> None:
		self._items: Tuple[TableItem, ...] = tuple(items)

	def __iter__(self) -> Iterator[TableItem]:
		return iter(self._items)

	def __len__(self) -> int:
		return len(self._items)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(items={len(self._items)})"

	def resolve(self, section: Optional[str], key: str, userdata: Any = None) -> Optional[Resolved]:
		for item in self._items:
			if item.key != key:
				continue
			if item.section != section:
				continue
			return Resolved(item.callback, item.discriminator, item.data)
		return None


class PerfectHashLookup:
	"""
	Perfect-hash lookup over :class:`PerfItem` entries keyed by ``"Section.Key"``.

	Storage is addressed relative to the parse ``userdata``: every entry names the
	field of that single configuration object its callback writes to.

	:param items: Entries; composite keys must be unique.
	:raises ConfigError: On duplicate composite keys.
	"""
	def __init__(self, items: Iterable[PerfItem]) -> None:
		entries: Sequence[PerfItem] = list(items)
		self._table: PerfectHashTable[PerfItem] = PerfectHashTable.build(
			(item.section_and_key, item) for item in entries
		)

	@property
	def table(self) -> PerfectHashTable[PerfItem]:
		return self._table

	def __len__(self) -> int:
		return len(self._table)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(items={len(self._table)})"

	def keys(self) -> List[str]:
		return self._table.keys()

	def resolve(self, section: Optional[str], key: str, userdata: Any = None) -> Optional[Resolved]:
		item = self._table.get(composite_key(section, key))
		if item is None:
			return None
		return Resolved(item.callback, item.discriminator, field_ref(userdata, item.field))
