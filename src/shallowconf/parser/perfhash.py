# src/shallowconf/parser/perfhash.py

"""
Minimal perfect hashing over a fixed set of string keys.

The table uses the hash-and-displace scheme: keys are first spread into buckets
with seed 0, then every bucket of two or more keys searches for a seed that maps
all of its keys to free slots; single-key buckets take any remaining free slot
directly (stored as a negative displacement). Lookups cost two hash evaluations
at most and never chain.

The hash is a seeded 32-bit FNV-1a over the UTF-8 bytes, so tables are stable
across processes (unlike the built-in ``hash``).
"""

from __future__ import annotations

from typing import Dict, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from .errors import ConfigError

__all__ = ["fnv1a", "PerfectHashTable"]

T = TypeVar("T")

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193
_MAX_SEED = 1 << 20


def fnv1a(seed: int, key: str) -> int:
	"""Seeded 32-bit FNV-1a of *key*."""
	h = (_FNV_OFFSET ^ seed) & 0xFFFFFFFF
	for byte in key.encode("utf-8"):
		h ^= byte
		h = (h * _FNV_PRIME) & 0xFFFFFFFF
	return h


class PerfectHashTable(Generic[T]):
	"""
	Immutable key -> value table addressed by a minimal perfect hash.

	Build it once (e.g., at import time of the module owning the schema) with
	:meth:`build`; :meth:`get` verifies the stored key so that absent keys are
	reported as missing even when they hash onto an occupied slot.
	"""
	def __init__(self, displacements: Sequence[int], slots: Sequence[Optional[Tuple[str, T]]]) -> None:
		if len(displacements) != len(slots):
			raise ConfigError("Perfect hash displacement and slot tables must have equal size.")
		self._displacements = tuple(displacements)
		self._slots = tuple(slots)

	def __len__(self) -> int:
		return len(self._slots)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(size={len(self)})"

	@classmethod
	def build(cls, pairs: Iterable[Tuple[str, T]]) -> "PerfectHashTable[T]":
		"""
		Construct a table from ``(key, value)`` pairs.

		:param pairs: Unique keys with their values.
		:return: A new table.
		:raises ConfigError: On duplicate keys or if no displacement can be found.
		"""
		items: Dict[str, T] = {}
		for key, value in pairs:
			if key in items:
				raise ConfigError(f"Duplicate key in perfect hash table: {key!r}")
			items[key] = value

		size = len(items)
		if size == 0:
			return cls([], [])

		buckets: List[List[str]] = [[] for _ in range(size)]
		for key in items:
			buckets[fnv1a(0, key) % size].append(key)
		buckets.sort(key=len, reverse=True)

		displacements = [0] * size
		slots: List[Optional[Tuple[str, T]]] = [None] * size

		index = 0
		while index < size and len(buckets[index]) > 1:
			bucket = buckets[index]
			seed = 1
			taken: List[int] = []
			pos = 0
			while pos < len(bucket):
				slot = fnv1a(seed, bucket[pos]) % size
				if slots[slot] is not None or slot in taken:
					seed += 1
					if seed > _MAX_SEED:
						raise ConfigError("Unable to find a perfect hash displacement.")
					taken = []
					pos = 0
				else:
					taken.append(slot)
					pos += 1
			displacements[fnv1a(0, bucket[0]) % size] = seed
			for key, slot in zip(bucket, taken):
				slots[slot] = (key, items[key])
			index += 1

		free = [i for i, entry in enumerate(slots) if entry is None]
		while index < size and buckets[index]:
			key = buckets[index][0]
			slot = free.pop()
			displacements[fnv1a(0, key) % size] = -slot - 1
			slots[slot] = (key, items[key])
			index += 1

		return cls(displacements, slots)

	def slot_of(self, key: str) -> Optional[int]:
		"""Return the slot *key* hashes to (whether or not it is stored there)."""
		if not self._slots:
			return None
		size = len(self._slots)
		d = self._displacements[fnv1a(0, key) % size]
		if d < 0:
			return -d - 1
		return fnv1a(d, key) % size

	def get(self, key: str) -> Optional[T]:
		"""
		Look up *key*.

		:param key: Query string.
		:return: The stored value, or None when *key* is not in the table.
		"""
		slot = self.slot_of(key)
		if slot is None:
			return None
		entry = self._slots[slot]
		if entry is None or entry[0] != key:
			return None
		return entry[1]

	def __contains__(self, key: object) -> bool:
		return isinstance(key, str) and self.get(key) is not None

	def keys(self) -> List[str]:
		return [entry[0] for entry in self._slots if entry is not None]
