"""Shared base model for wire-format (camelCase) payloads."""
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model that reads and writes camelCase keys but is used with snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Dump using the remote service's field names."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


def parse_date_only(value: Any) -> Any:
    """Keep only the date part of ISO strings like '2025-01-15T00:00:00'."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        return value.split("T")[0]
    return value
