from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


class BaseModel(PydanticBaseModel):
    """
    Base class for record shapes (DTOs).

    Any pydantic model can be used as a shape; this base adds camelCase aliases
    for JSON output and validation on assignment, so a stage that mutates a
    materialized view cannot store a value of the wrong type.

    >>> from typing import Optional
    >>> class OrderLine(BaseModel):
    ...   order_id: Optional[int] = None
    >>> x = OrderLine(order_id=7)
    >>> x
    OrderLine(order_id=7)
    >>> x.model_dump()
    {'order_id': 7}
    >>> x.model_dump_json()
    '{"orderId":7}'
    >>> OrderLine.model_validate_json('{"orderId":8}')
    OrderLine(order_id=8)
    >>> OrderLine.model_validate_json('{"order_id":9}')
    OrderLine(order_id=9)
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, validate_assignment=True)

    def model_dump_json(self, **kwargs: Any) -> str:
        kwargs.setdefault("by_alias", True)
        return super(BaseModel, self).model_dump_json(**kwargs)
