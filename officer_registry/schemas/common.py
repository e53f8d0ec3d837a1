"""
Shared schema base.

The HTTP contract uses camelCase keys. Models accept either
camelCase or snake_case on input and emit camelCase.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class MessageResponse(BaseModel):
    message: str
