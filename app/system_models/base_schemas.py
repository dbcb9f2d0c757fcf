# app/system_models/base_schemas.py
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ClinicSchema(BaseModel):
    """
    Base for every clinic schema.

    Python code uses snake_case attributes; the JSON API speaks camelCase
    (patientId, createdAt, ...). Input is accepted in either form.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def blank_to_none(value: Any) -> Any:
    """Form inputs send "" for untouched optional fields."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
