"""
Projection of a canonical record store into a typed view.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Set, Tuple, Type, TypeVar

from recordflow.exceptions import TypeMismatchError

from .coercion import ScalarKind, coerce
from .shape import ValueType, ViewShape, resolve_shape
from .store import CanonicalRecordStore, FieldPath

T = TypeVar("T")

_ABSENT = object()


def materialize(shape_type: Type[T], store: CanonicalRecordStore) -> T:
    """
    Read ``store`` as an instance of ``shape_type``.

    Fields whose paths are absent keep the shape's default. The universal
    ``object`` shape is returned without looking at the store.

    Raises:
        TypeMismatchError: If a stored value cannot be read as the declared type
        ShapeResolutionError: If ``shape_type`` cannot be used as a shape
    """
    shape = resolve_shape(shape_type)
    if shape.is_universal:
        return shape_type()
    return _build(shape, store, None)


def _build(shape: ViewShape, store: CanonicalRecordStore, root: Optional[FieldPath]) -> Any:
    values, present = _collect(shape, store, root)
    return shape.shape_type.model_construct(_fields_set=present, **values)


def _collect(
    shape: ViewShape, store: CanonicalRecordStore, root: Optional[FieldPath]
) -> Tuple[Dict[str, Any], Set[str]]:
    values: Dict[str, Any] = {}
    present: Set[str] = set()
    for descriptor in shape.fields:
        path = root.child(descriptor.name) if root is not None else FieldPath((descriptor.name,))
        value = _read(descriptor.value_type, store, path)
        if value is not _ABSENT:
            values[descriptor.name] = value
            present.add(descriptor.name)
        elif descriptor.required:
            values[descriptor.name] = None
    return values, present


def _structure_present(value_type: ValueType, store: CanonicalRecordStore, path: FieldPath) -> bool:
    marker = store.get_path(path)
    if marker is not None and not marker.is_structural:
        raise TypeMismatchError(path, marker.kind.value, value_type.kind.value)
    return store.has_subtree(path)


def _read(value_type: ValueType, store: CanonicalRecordStore, path: FieldPath) -> Any:
    kind = value_type.kind

    if kind is ScalarKind.OBJECT:
        if not _structure_present(value_type, store, path):
            return _ABSENT
        nested = resolve_shape(value_type.python_type)
        values, present = _collect(nested, store, path)
        if not present and store.get_path(path) is None:
            # only paths other views declared are left below it
            return _ABSENT
        return nested.shape_type.model_construct(_fields_set=present, **values)

    if kind is ScalarKind.MAP:
        if not _structure_present(value_type, store, path):
            return _ABSENT
        entries: Dict[str, Any] = {}
        assert value_type.value_type is not None
        for key in store.child_segments(path):
            entry = _read(value_type.value_type, store, path.child(key))
            if entry is not _ABSENT:
                entries[key] = entry
        return entries

    stored = store.get_path(path)
    if stored is None:
        return _ABSENT
    return coerce(stored.kind, stored.text, kind, value_type.python_type, path)
