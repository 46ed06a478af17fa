"""Shared pydantic configuration for the domain models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """Immutable model serialized with camelCase field names.

    Python code uses snake_case attributes; JSON documents use camelCase
    (typeId, schemaVersion, plannedWeight). Both spellings are accepted when
    validating input.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )
