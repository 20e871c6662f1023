from typing import Any
from pydantic import BaseModel, Field, field_validator
from pydantic.types import JsonValue


class _Options(BaseModel):
    query: str = ""
    operationName: str = ""

    @field_validator("query", "operationName", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class RequestOptions(_Options):
    """Canonical form of a GraphQL request, whatever wire format carried it."""

    variables: dict[str, JsonValue] = Field(default_factory=dict)

    @field_validator("variables", mode="before")
    @classmethod
    def null_as_empty_mapping(cls, value: Any) -> Any:
        return {} if value is None else value


class RequestOptionsCompatibility(_Options):
    # Some clients send `variables` as a JSON encoded string instead of an object
    variables: JsonValue = None
