from typing import Optional

from recordflow.models import BaseModel
from recordflow.pipeline import ContainsFilter, FilterTransformer, MapTransformer, MappingLookup


class Item(BaseModel):
    sku: Optional[str] = None
    quantity: Optional[int] = None


def test_map_transformer_produces_exactly_one_output() -> None:
    transformer = MapTransformer.of(lambda item: Item(sku=item.sku, quantity=(item.quantity or 0) * 2), name="double")

    assert transformer.name == "double"
    assert transformer.transform(Item(sku="a", quantity=2)) == [Item(sku="a", quantity=4)]


def test_filter_transformer_keeps_accepted_values() -> None:
    lookup = MappingLookup.from_iterable(["a", "c"])
    transformer = FilterTransformer(ContainsFilter(lambda item: item.sku), lookup)

    assert transformer.transform(Item(sku="a")) == [Item(sku="a")]
    assert transformer.transform(Item(sku="b")) == []


def test_contains_filter_defaults_to_the_value_itself() -> None:
    lookup = MappingLookup({"x": 1})
    predicate: ContainsFilter[str] = ContainsFilter()

    assert predicate("x", lookup)
    assert not predicate("y", lookup)


def test_mapping_lookup() -> None:
    lookup = MappingLookup({"key": "value"})

    assert lookup.get("key") == "value"
    assert lookup.get("missing") is None
    assert len(lookup) == 1
