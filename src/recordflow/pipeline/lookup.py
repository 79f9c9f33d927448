"""
Lookups provide keyed access to an auxiliary data set, typically used by
filter-style transformers to test membership.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Generic, Hashable, Iterable, Mapping, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class Lookup(ABC, Generic[K, V]):
    @abstractmethod
    def get(self, key: K) -> Optional[V]:
        """
        Get the value stored for ``key``.

        Returns:
            The stored value, or None if the data set has no entry for the key
        """


class MappingLookup(Lookup[K, V]):
    """Lookup backed by an in-memory dictionary."""

    def __init__(self, mapping: Mapping[K, V]) -> None:
        self._mapping: Dict[K, V] = dict(mapping)

    @classmethod
    def from_iterable(cls, items: Iterable[K]) -> MappingLookup[K, K]:
        """Build a set-membership lookup where each item maps to itself."""
        return MappingLookup({item: item for item in items})

    def get(self, key: K) -> Optional[V]:
        return self._mapping.get(key)

    def __len__(self) -> int:
        return len(self._mapping)
