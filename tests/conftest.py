from decimal import Decimal
from typing import Dict, Optional, Type

from polyfactory.factories.pydantic_factory import ModelFactory
from pytest import fixture

from recordflow.models import BaseModel
from recordflow.pipeline import InMemoryMetrics


class Address(BaseModel):
    street: Optional[str] = None
    number: Optional[int] = None


class Customer(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = None
    balance: Optional[Decimal] = None
    score: Optional[float] = None
    active: Optional[bool] = None
    address: Optional[Address] = None
    tags: Optional[Dict[str, str]] = None
    addresses: Optional[Dict[str, Address]] = None


@fixture
def customer_factory() -> Type[ModelFactory[Customer]]:
    class CustomerFactory(ModelFactory[Customer]):
        __model__ = Customer
        __allow_none_optionals__ = False

    return CustomerFactory


@fixture
def metrics() -> InMemoryMetrics:
    return InMemoryMetrics()
