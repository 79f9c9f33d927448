"""
Transformers turn one input view into zero, one or many output views.

Returning an empty list filters a record out; returning several fans it out.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable, Generic, List, Optional, TypeVar

from .lookup import Lookup
from .stage import PipelineStage

T = TypeVar("T")
R = TypeVar("R")

FilterPredicate = Callable[[T, Lookup[Any, Any]], bool]


class Transformer(PipelineStage, Generic[T, R]):
    """
    Abstract base class for all transformers.

    Concrete transformers implement ``transform``; lifecycle hooks default to
    doing nothing.
    """

    @abstractmethod
    def transform(self, value: T) -> List[R]:
        """
        Transform a single input.

        Args:
            value: The materialized input view

        Returns:
            Outputs for this input, possibly none
        """
        pass


class MapTransformer(Transformer[T, R]):
    """Maps each input to exactly one output."""

    def __init__(self, map_function: Callable[[T], R], name: Optional[str] = None) -> None:
        super().__init__(name)
        self.map_function = map_function

    @classmethod
    def of(cls, map_function: Callable[[T], R], name: Optional[str] = None) -> MapTransformer[T, R]:
        return cls(map_function, name)

    def transform(self, value: T) -> List[R]:
        return [self.map_function(value)]


class FilterTransformer(Transformer[T, T]):
    """
    Passes inputs through unchanged when a predicate accepts them.

    The predicate receives the input and a lookup it may test against.
    """

    def __init__(
        self,
        predicate: FilterPredicate[T],
        lookup: Lookup[Any, Any],
        name: Optional[str] = None,
    ) -> None:
        super().__init__(name)
        self.predicate = predicate
        self.lookup = lookup

    def transform(self, value: T) -> List[T]:
        return [value] if self.predicate(value, self.lookup) else []


class ContainsFilter(Generic[T]):
    """
    Predicate that accepts values the lookup has an entry for.

    ``key_function`` selects what to look up; by default the value itself.
    """

    def __init__(self, key_function: Optional[Callable[[T], Any]] = None) -> None:
        self.key_function = key_function

    def __call__(self, value: T, lookup: Lookup[Any, Any]) -> bool:
        key = self.key_function(value) if self.key_function is not None else value
        return lookup.get(key) is not None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key_function={self.key_function!r})"
