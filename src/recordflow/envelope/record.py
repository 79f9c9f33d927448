"""
Record envelope: the unit that moves through a pipeline.
"""

from __future__ import annotations

from typing import Any, Optional, Set, Type, TypeVar

from .materializer import materialize
from .merger import merge
from .shape import shape_of
from .store import CanonicalRecordStore, FieldPath

T = TypeVar("T")


class RecordEnvelope:
    """
    A single in-flight record that can be read and written as any typed view.

    The envelope owns one canonical store. ``get`` projects it into a view
    without changing it; ``set`` writes a view's fields back and leaves every
    path the view does not declare as it was. An envelope carries no locking
    and is meant to be held by one stage at a time.

    Example:
        >>> from typing import Optional
        >>> from recordflow.models import BaseModel
        >>> class Wide(BaseModel):
        ...   first: Optional[str] = None
        ...   second: Optional[str] = None
        >>> class Narrow(BaseModel):
        ...   first: Optional[str] = None
        >>> record = RecordEnvelope.with_initial(Wide(first="f", second="s"))
        >>> view = record.get(Narrow)
        >>> view.first = "f2"
        >>> record.set(view)
        >>> record.get(Wide)
        Wide(first='f2', second='s')
    """

    def __init__(self, store: Optional[CanonicalRecordStore] = None) -> None:
        self._store = store if store is not None else CanonicalRecordStore()

    @classmethod
    def with_initial(cls, instance: Any) -> RecordEnvelope:
        envelope = cls()
        envelope.set(instance)
        return envelope

    @property
    def store(self) -> CanonicalRecordStore:
        return self._store

    def get(self, shape_type: Type[T]) -> T:
        return materialize(shape_type, self._store)

    def set(self, instance: Any) -> None:
        """
        Write the fields ``instance`` declares over this record.

        The write is all or nothing: on ``TypeMismatchError`` the record is left
        as it was.
        """
        self._store = merge(shape_of(instance), instance, self._store.copy())

    def derive(self, instance: Any) -> RecordEnvelope:
        """Copy of this envelope with ``instance`` written over it."""
        derived = self.copy()
        derived.set(instance)
        return derived

    def copy(self) -> RecordEnvelope:
        return RecordEnvelope(self._store.copy())

    def paths(self) -> Set[FieldPath]:
        return self._store.all_paths()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordEnvelope):
            return NotImplemented
        return self._store == other._store

    def __repr__(self) -> str:
        return f"RecordEnvelope({self._store.to_dict()})"
