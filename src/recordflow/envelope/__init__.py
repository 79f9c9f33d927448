"""
Record Envelope

Canonical record store, view shapes, type coercion, and the envelope that ties
them together into typed ``get`` / ``set`` access.
"""

from .coercion import ScalarKind, coerce, kind_of_type, render
from .materializer import materialize
from .merger import merge
from .record import RecordEnvelope
from .shape import FieldDescriptor, ValueType, ViewShape, resolve_shape, shape_of
from .store import CanonicalRecordStore, FieldPath, StoredValue

__all__ = [
    "CanonicalRecordStore",
    "FieldDescriptor",
    "FieldPath",
    "RecordEnvelope",
    "ScalarKind",
    "StoredValue",
    "ValueType",
    "ViewShape",
    "coerce",
    "kind_of_type",
    "materialize",
    "merge",
    "render",
    "resolve_shape",
    "shape_of",
]
