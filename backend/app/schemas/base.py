"""
Shared schema configuration.

The API speaks camelCase JSON (userId, firstName, createdAt) while Python
code uses snake_case attributes. CamelModel maps one onto the other.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema with camelCase aliases.

    - alias_generator: field first_name is read and written as "firstName"
    - populate_by_name: snake_case input is accepted too
    - from_attributes: ORM objects can be returned from endpoints directly
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
