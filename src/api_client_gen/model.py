"""Client model consumed by the generators.

The model is built once (see ``builder.py``) and treated as an immutable
snapshot afterwards; every model here is frozen.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from api_client_gen.types import VOID, TypeRef

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")


class ParameterSource(str, Enum):
    BODY = "Body"
    FORM = "Form"
    HEADER = "Header"
    QUERY = "Query"
    FILE = "File"
    PATH = "Path"


class Parameter(BaseModel):
    """One call-site argument of a generated method."""

    model_config = ConfigDict(frozen=True)

    name: str  # wire name
    parameter_name: str  # call-site identifier
    type: TypeRef
    source: ParameterSource
    is_constant: bool = False
    default_value_literal: str | None = None


class EndpointMethod(BaseModel):
    """One generated client method."""

    model_config = ConfigDict(frozen=True)

    name: str
    http_method: str  # GET / POST / PUT / DELETE / PATCH / HEAD / OPTIONS
    path: str  # api/users/{id}
    parameters: tuple[Parameter, ...] = ()
    response_type: TypeRef = VOID
    is_multipart: bool = False
    documentation: str | None = None

    @property
    def display_name(self) -> str:
        """Short identity used to locate the endpoint in error messages."""
        return f"{self.http_method} {self.path}"


class Client(BaseModel):
    """One generated interface document."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    location: str = ""
    access_modifier: str = "public"
    endpoint_methods: tuple[EndpointMethod, ...] = ()
    imported_namespaces: tuple[str, ...] = ()


class ClientCollection(BaseModel):
    """All clients of a generation run plus the type names that need qualifying."""

    model_config = ConfigDict(frozen=True)

    clients: tuple[Client, ...] = ()
    ambiguous_types: frozenset[TypeRef] = frozenset()
