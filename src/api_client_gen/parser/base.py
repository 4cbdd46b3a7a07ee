"""Unified models for extracted endpoint descriptions.

All parsers (endpoint description documents, OpenAPI) convert their input
into these models; ``ClientModelBuilder`` turns them into clients.
"""

from typing import Any, Literal

from pydantic import BaseModel, field_validator

from api_client_gen.model import HTTP_METHODS


class TypeTraits(BaseModel):
    """Trait overrides for a type the built-in tables don't know (e.g. an enum)."""

    value_type: bool | None = None
    enumerable: bool | None = None
    dictionary: bool | None = None


class ApiParameterDescription(BaseModel):
    """A single parameter as extracted from the API."""

    name: str  # wire name
    parameter_name: str | None = None  # call-site identifier, derived from name if missing
    type: str = "string"  # C# type expression
    source: Literal["body", "form", "header", "query", "file", "path"] = "query"
    default: Any = None  # only used when explicitly set
    default_literal: str | None = None  # raw C# literal, wins over default
    constant: bool = False

    @field_validator("source", mode="before")
    @classmethod
    def _lower_source(cls, value):
        return value.lower() if isinstance(value, str) else value

    @property
    def has_default(self) -> bool:
        return self.default_literal is not None or "default" in self.model_fields_set


class ApiDescription(BaseModel):
    """A single extracted endpoint with all its metadata."""

    controller: str = ""
    action: str = ""
    method: str  # GET / POST / PUT / DELETE / PATCH / HEAD / OPTIONS
    path: str  # api/users/{id}
    group: str = ""  # API group, e.g. a version
    summary: str = ""
    response_type: str = "void"
    multipart: bool = False
    parameters: list[ApiParameterDescription] = []

    @field_validator("method")
    @classmethod
    def _check_method(cls, value: str) -> str:
        method = value.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method '{value}'")
        return method


class DescriptionDocument(BaseModel):
    """Everything a parser extracted from one input document."""

    types: dict[str, TypeTraits] = {}
    endpoints: list[ApiDescription] = []

    def type_overrides(self) -> dict[str, dict[str, bool]]:
        return {name: traits.model_dump(exclude_none=True) for name, traits in self.types.items()}
