"""
Shared schema base

The storefront and back-office clients speak camelCase JSON; Python code
uses snake_case attributes. Either spelling is accepted on input.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
