"""
Canonical record store.

The store is the shape-independent ground truth of one logical record: a flat
mapping from field path to a stored leaf value. Views are projected out of it
and merged back into it; anything a view does not declare simply stays put.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union

from recordflow.exceptions import FieldPathError

from .coercion import ScalarKind


@dataclass(frozen=True)
class FieldPath:
    """
    An ordered, non-empty sequence of field name or map key segments.

    >>> FieldPath.parse("outer.first")
    FieldPath('outer.first')
    >>> FieldPath.parse("outer").child("key.with.dots").segments
    ('outer', 'key.with.dots')
    >>> FieldPath.parse("a..b")
    Traceback (most recent call last):
     ...
    recordflow.exceptions.FieldPathError: Malformed field path: 'a..b'
    """

    segments: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments or not all(isinstance(segment, str) for segment in self.segments):
            raise FieldPathError(self.segments)

    @classmethod
    def parse(cls, path: str) -> FieldPath:
        segments = tuple(path.split("."))
        if any(segment == "" for segment in segments):
            raise FieldPathError(path)
        return cls(segments)

    @classmethod
    def of(cls, path: PathLike) -> FieldPath:
        if isinstance(path, FieldPath):
            return path
        if isinstance(path, str):
            return cls.parse(path)
        raise FieldPathError(path)

    def child(self, segment: str) -> FieldPath:
        return FieldPath(self.segments + (segment,))

    def is_prefix_of(self, other: FieldPath) -> bool:
        return other.segments[: len(self.segments)] == self.segments

    def __str__(self) -> str:
        return ".".join(self.segments)

    def __repr__(self) -> str:
        return f"FieldPath({str(self)!r})"


PathLike = Union[FieldPath, str]


@dataclass(frozen=True)
class StoredValue:
    """A leaf of the store: the kind it was written as and its canonical text."""

    kind: ScalarKind
    text: Optional[str] = None

    @property
    def is_structural(self) -> bool:
        return self.kind.is_structured


class CanonicalRecordStore:
    """
    Flattened, type-erased representation of a single record.

    Paths are unique; the store has no schema and never remembers the kind a
    path held before it was overwritten.
    """

    def __init__(self, values: Optional[Dict[FieldPath, StoredValue]] = None) -> None:
        self._values: Dict[FieldPath, StoredValue] = dict(values or {})

    def set_path(self, path: PathLike, value: StoredValue) -> None:
        self._values[FieldPath.of(path)] = value

    def get_path(self, path: PathLike) -> Optional[StoredValue]:
        return self._values.get(FieldPath.of(path))

    def all_paths(self) -> Set[FieldPath]:
        return set(self._values)

    def clear_path(self, path: PathLike) -> None:
        self._values.pop(FieldPath.of(path), None)

    def clear_subtree(self, path: PathLike) -> None:
        root = FieldPath.of(path)
        for candidate in [p for p in self._values if root.is_prefix_of(p)]:
            del self._values[candidate]

    def has_subtree(self, path: PathLike) -> bool:
        root = FieldPath.of(path)
        return any(root.is_prefix_of(p) for p in self._values)

    def child_segments(self, path: PathLike) -> List[str]:
        """Distinct segments directly below ``path``, in first-written order."""
        root = FieldPath.of(path)
        depth = len(root.segments)
        children: Dict[str, None] = {}
        for candidate in self._values:
            if len(candidate.segments) > depth and root.is_prefix_of(candidate):
                children.setdefault(candidate.segments[depth], None)
        return list(children)

    def copy(self) -> CanonicalRecordStore:
        return CanonicalRecordStore(self._values)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {str(path): value.text for path, value in self._values.items() if not value.is_structural}

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (FieldPath, str)):
            return False
        return FieldPath.of(path) in self._values

    def __iter__(self) -> Iterator[FieldPath]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CanonicalRecordStore):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"CanonicalRecordStore({self.to_dict()})"
