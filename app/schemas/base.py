"""Schema Base — shared Pydantic config for every API boundary model.

Invariants:
    - Wire format is camelCase; snake_case field names also accepted on input
    - Unknown fields are rejected (extra="forbid") before reaching core logic
    - Strings are stripped on input
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for request and response schemas."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )
