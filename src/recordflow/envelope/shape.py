"""
View shape resolution.

A shape is a pydantic model class. Its field declarations are turned, once per
class, into a table of field descriptors that the materializer and the merger
walk instead of inspecting instances at runtime.
"""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple, Union, get_args, get_origin

from pydantic import BaseModel as PydanticBaseModel

from recordflow.exceptions import ShapeResolutionError

from .coercion import ScalarKind, kind_of_type


@dataclass(frozen=True)
class ValueType:
    """
    Declared type of a field or of a map's values.

    ``python_type`` is the scalar type for scalar kinds and the nested model
    class for ``OBJECT``. For ``MAP`` it is ``dict`` and ``value_type`` describes
    the values.
    """

    kind: ScalarKind
    python_type: Any
    value_type: Optional[ValueType] = None


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    value_type: ValueType
    required: bool = False


@dataclass(frozen=True)
class ViewShape:
    shape_type: Any
    fields: Tuple[FieldDescriptor, ...] = ()

    @property
    def is_universal(self) -> bool:
        return self.shape_type is object

    def field_names(self) -> Tuple[str, ...]:
        return tuple(descriptor.name for descriptor in self.fields)


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def is_shape_type(candidate: Any) -> bool:
    return inspect.isclass(candidate) and issubclass(candidate, PydanticBaseModel)


def _value_type(shape_type: Any, field_name: str, annotation: Any) -> ValueType:
    annotation = _unwrap_optional(annotation)

    kind = kind_of_type(annotation)
    if kind is not None:
        return ValueType(kind, annotation)

    if is_shape_type(annotation):
        return ValueType(ScalarKind.OBJECT, annotation)

    origin = get_origin(annotation)
    if origin in (dict, Dict):
        args = get_args(annotation)
        if len(args) != 2 or args[0] is not str:
            raise ShapeResolutionError(shape_type, f"field '{field_name}' must be a map keyed by string")
        return ValueType(ScalarKind.MAP, dict, _value_type(shape_type, field_name, args[1]))

    raise ShapeResolutionError(shape_type, f"field '{field_name}' has unsupported type {annotation!r}")


@lru_cache(maxsize=None)
def resolve_shape(shape_type: Any) -> ViewShape:
    """
    Build the field descriptor table for ``shape_type``.

    ``object`` is the universal shape: it declares no fields and reads as an
    empty object. Nested model types are only referenced here, not resolved, so
    a model may contain itself.

    Raises:
        ShapeResolutionError: If the type is not a pydantic model or declares a
            field whose type has no kind
    """
    if shape_type is object:
        return ViewShape(object)
    if not is_shape_type(shape_type):
        raise ShapeResolutionError(shape_type, "shapes must be pydantic models")

    fields = tuple(
        FieldDescriptor(name, _value_type(shape_type, name, info.annotation), info.is_required())
        for name, info in shape_type.model_fields.items()
    )
    return ViewShape(shape_type, fields)


def shape_of(instance: Any) -> ViewShape:
    return resolve_shape(type(instance))
