"""JsonModel base class for backend communication."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JsonModel(BaseModel):
    """Base model for backend payloads with camelCase/snake_case conversion.

    - Wire JSON uses camelCase (the backend contract)
    - Internal Python uses snake_case
    - Instances are immutable once parsed
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    def model_dump(self, **kwargs) -> dict:
        """Override model_dump - snake_case, JSON-safe values for internal use."""
        kwargs.setdefault("mode", "json")
        return super().model_dump(**kwargs)

    def model_dump_json(self, **kwargs) -> str:
        """Override to ensure camelCase in JSON output."""
        kwargs.setdefault("by_alias", True)
        return super().model_dump_json(**kwargs)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to a camelCase dict suitable for an HTTP JSON body."""
        return self.model_dump(by_alias=True, exclude_none=True)
