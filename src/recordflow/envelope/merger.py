"""
Flattening of a typed view back into a canonical record store.

Only paths reachable through the view's declared fields are written or
cleared. Everything else in the store is carried through untouched, which is
what lets a narrow view be written without losing what a wider view put there.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from recordflow.exceptions import TypeMismatchError

from .coercion import ScalarKind, render
from .shape import ValueType, ViewShape, resolve_shape
from .store import CanonicalRecordStore, FieldPath, StoredValue


def merge(shape: ViewShape, instance: Any, store: CanonicalRecordStore) -> CanonicalRecordStore:
    """
    Write the fields ``shape`` declares on ``instance`` into ``store``.

    Args:
        shape: Resolved shape of ``instance``
        instance: The view whose field values are written
        store: Store updated in place

    Returns:
        The updated store

    Raises:
        TypeMismatchError: If a field value does not fit its declared kind
    """
    _write_fields(shape, instance, store, None)
    return store


def _write_fields(shape: ViewShape, instance: Any, store: CanonicalRecordStore, root: Optional[FieldPath]) -> None:
    for descriptor in shape.fields:
        path = root.child(descriptor.name) if root is not None else FieldPath((descriptor.name,))
        _write(descriptor.value_type, getattr(instance, descriptor.name, None), store, path)


def _write(value_type: ValueType, value: Any, store: CanonicalRecordStore, path: FieldPath) -> None:
    if value is None:
        _clear(value_type, store, path)
        return

    kind = value_type.kind

    if kind is ScalarKind.OBJECT:
        if not isinstance(value, value_type.python_type):
            raise TypeMismatchError(path, type(value).__name__, kind.value)
        store.set_path(path, StoredValue(ScalarKind.OBJECT))
        _write_fields(resolve_shape(value_type.python_type), value, store, path)
        return

    if kind is ScalarKind.MAP:
        if not isinstance(value, Mapping):
            raise TypeMismatchError(path, type(value).__name__, kind.value)
        entry_type = value_type.value_type
        assert entry_type is not None
        store.set_path(path, StoredValue(ScalarKind.MAP))
        for key, entry in value.items():
            if not isinstance(key, str):
                raise TypeMismatchError(path, f"{type(key).__name__} key", "text key")
            _write(entry_type, entry, store, path.child(key))
        return

    store.set_path(path, StoredValue(kind, render(kind, value, path)))


def _clear(value_type: ValueType, store: CanonicalRecordStore, path: FieldPath) -> None:
    if value_type.kind is ScalarKind.MAP:
        # every key below a map is reachable through it
        store.clear_subtree(path)
    elif value_type.kind is ScalarKind.OBJECT:
        if not store.has_subtree(path):
            return
        store.clear_path(path)
        for descriptor in resolve_shape(value_type.python_type).fields:
            _clear(descriptor.value_type, store, path.child(descriptor.name))
    else:
        store.clear_path(path)
