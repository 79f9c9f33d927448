"""
Type coercion between the scalar kinds a record field can be written and read as.

Every leaf is kept in the store as canonical text tagged with the kind it was
written as. Reading converts that text to the kind the reading view declares,
following a closed table of rules; a pair without a rule is a type mismatch.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from recordflow.exceptions import TypeMismatchError

_INTEGER_GRAMMAR = re.compile(r"^[+-]?[0-9]+$")
_DECIMAL_GRAMMAR = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?$")
_NON_FINITE_FLOATS = ("inf", "+inf", "-inf", "infinity", "+infinity", "-infinity", "nan")


class ScalarKind(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    OBJECT = "object"
    MAP = "map"

    @property
    def is_structured(self) -> bool:
        return self in (ScalarKind.OBJECT, ScalarKind.MAP)


def kind_of_type(python_type: Any) -> Optional[ScalarKind]:
    """
    Scalar kind for a declared Python type, or None when it is not a scalar.

    >>> kind_of_type(bool)
    <ScalarKind.BOOLEAN: 'boolean'>
    >>> kind_of_type(float)
    <ScalarKind.DECIMAL: 'decimal'>
    >>> kind_of_type(list) is None
    True
    """
    # bool before int: bool is an int subclass
    if python_type is bool:
        return ScalarKind.BOOLEAN
    if python_type is int:
        return ScalarKind.INTEGER
    if python_type in (Decimal, float):
        return ScalarKind.DECIMAL
    if python_type is str:
        return ScalarKind.TEXT
    if python_type is datetime:
        return ScalarKind.TIMESTAMP
    return None


def _kind_of_value(value: Any) -> str:
    kind = kind_of_type(type(value))
    return kind.value if kind is not None else type(value).__name__


def render(kind: ScalarKind, value: Any, path: Any) -> str:
    """
    Canonical text for ``value`` written as ``kind``.

    >>> render(ScalarKind.INTEGER, 123, "first")
    '123'
    >>> render(ScalarKind.BOOLEAN, False, "flag")
    'false'
    >>> render(ScalarKind.TIMESTAMP, datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc), "at")
    '2020-01-02T03:04:05+00:00'
    >>> render(ScalarKind.DECIMAL, float("-inf"), "score")
    '-inf'
    """
    if kind is ScalarKind.TEXT and isinstance(value, str):
        return value
    if kind is ScalarKind.INTEGER and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if kind is ScalarKind.BOOLEAN and isinstance(value, bool):
        return "true" if value else "false"
    if kind is ScalarKind.DECIMAL and isinstance(value, (Decimal, float)) and not isinstance(value, bool):
        if isinstance(value, float):
            return repr(value)
        if value.is_finite():
            return str(value)
        raise TypeMismatchError(path, _kind_of_value(value), kind.value, "non-finite decimals are not supported")
    if kind is ScalarKind.TIMESTAMP and isinstance(value, datetime):
        if value.utcoffset() is None:
            raise TypeMismatchError(path, "naive timestamp", kind.value, "timestamps must carry an offset")
        return value.isoformat()
    raise TypeMismatchError(path, _kind_of_value(value), kind.value)


def _parse_integer(text: str) -> int:
    if not _INTEGER_GRAMMAR.match(text):
        raise ValueError(f"{text!r} is not an integer")
    return int(text)


def _parse_decimal(text: str) -> Decimal:
    if not _DECIMAL_GRAMMAR.match(text):
        raise ValueError(f"{text!r} is not a decimal number")
    return Decimal(text)


def _parse_float(text: str) -> float:
    if text.lower() in _NON_FINITE_FLOATS:
        return float(text)
    return float(_parse_decimal(text))


def _parse_boolean(text: str) -> bool:
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"{text!r} is not a boolean")


def _parse_timestamp(text: str) -> datetime:
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _identity(text: str) -> str:
    return text


_PARSERS: Dict[ScalarKind, Callable[[str], Any]] = {
    ScalarKind.TEXT: _identity,
    ScalarKind.INTEGER: _parse_integer,
    ScalarKind.DECIMAL: _parse_decimal,
    ScalarKind.BOOLEAN: _parse_boolean,
    ScalarKind.TIMESTAMP: _parse_timestamp,
}

# (stored kind, requested kind) pairs that have a defined conversion
_RULES: Tuple[Tuple[ScalarKind, ScalarKind], ...] = (
    (ScalarKind.TEXT, ScalarKind.INTEGER),
    (ScalarKind.TEXT, ScalarKind.DECIMAL),
    (ScalarKind.TEXT, ScalarKind.BOOLEAN),
    (ScalarKind.TEXT, ScalarKind.TIMESTAMP),
    (ScalarKind.INTEGER, ScalarKind.TEXT),
    (ScalarKind.DECIMAL, ScalarKind.TEXT),
    (ScalarKind.BOOLEAN, ScalarKind.TEXT),
    (ScalarKind.TIMESTAMP, ScalarKind.TEXT),
    (ScalarKind.INTEGER, ScalarKind.DECIMAL),
)


def has_rule(source: ScalarKind, target: ScalarKind) -> bool:
    if source.is_structured or target.is_structured:
        return False
    return source is target or (source, target) in _RULES


def coerce(source: ScalarKind, text: Optional[str], target: ScalarKind, target_type: Any, path: Any) -> Any:
    """
    Convert stored ``text`` of kind ``source`` into ``target_type``.

    >>> coerce(ScalarKind.INTEGER, "123", ScalarKind.TEXT, str, "first")
    '123'
    >>> coerce(ScalarKind.TEXT, "123", ScalarKind.INTEGER, int, "first")
    123
    >>> coerce(ScalarKind.TEXT, "12x", ScalarKind.INTEGER, int, "first")
    Traceback (most recent call last):
     ...
    recordflow.exceptions.TypeMismatchError: Cannot coerce text to integer at path 'first': '12x' is not an integer
    """
    if text is None or not has_rule(source, target):
        raise TypeMismatchError(path, source.value, target.value)
    parser = _parse_float if target is ScalarKind.DECIMAL and target_type is float else _PARSERS[target]
    try:
        return parser(text)
    except ValueError as e:
        raise TypeMismatchError(path, source.value, target.value, str(e)) from e


__all__ = [
    "ScalarKind",
    "coerce",
    "has_rule",
    "kind_of_type",
    "render",
]
