"""Client synthesizer: renders one Refit interface document per client."""

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict

from api_client_gen.errors import ConstantParameterError, GenerationError, TypeNameError
from api_client_gen.generator.collisions import Diagnostic, resolve_collisions
from api_client_gen.generator.parameters import render_parameter, render_static_headers, split_parameters
from api_client_gen.generator.responses import response_type_name
from api_client_gen.model import Client, ClientCollection, EndpointMethod
from api_client_gen.naming import to_pascal_case
from api_client_gen.options import GenerateClientOptions
from api_client_gen.types import TypeRef, resolve_type_name

AUTO_GENERATED_HEADER = "//<auto-generated />"
MEMBER_INDENT = "        "


class GenerationResult(BaseModel):
    """Documents keyed by relative output path, plus what went wrong on the way."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    documents: dict[str, str] = {}
    diagnostics: list[Diagnostic] = []
    failures: dict[str, GenerationError] = {}


def document_path(client: Client) -> str:
    """Relative output path of a client document, e.g. ``V1/IUsersApi.cs``."""
    return str(PurePosixPath(client.location) / f"{client.name}.cs")


def _indent(text: str, prefix: str = MEMBER_INDENT) -> str:
    return "\n".join(prefix + line if line else line for line in text.split("\n"))


class ClientGenerator:
    """Generates Refit interface source text from a ``ClientCollection``."""

    def __init__(self, options: GenerateClientOptions | None = None):
        self.options = options or GenerateClientOptions()

    def generate(self, collection: ClientCollection) -> GenerationResult:
        """Render every client of the collection.

        A client with malformed metadata is recorded in ``failures`` and gets
        no document; the other clients are still generated.
        """
        result = GenerationResult()
        for client in collection.clients:
            path = document_path(client)
            if path in result.documents or path in result.failures:
                result.failures[path] = GenerationError(
                    f"Document {path} is already generated by another client", client.name
                )
                continue
            try:
                text, diagnostics = self.render_client(client, collection.ambiguous_types)
            except GenerationError as e:
                result.failures[path] = e
                continue
            result.diagnostics.extend(diagnostics)
            result.documents[path] = text
        return result

    def render_client(
        self,
        client: Client,
        ambiguous_types: frozenset[TypeRef] = frozenset(),
    ) -> tuple[str, list[Diagnostic]]:
        """Render a single client document. Returns (text, collision diagnostics)."""
        for endpoint in client.endpoint_methods:
            validate_endpoint(endpoint, ambiguous_types)

        endpoints, diagnostics = resolve_collisions(client.endpoint_methods, ambiguous_types)
        methods = "\n\n".join(self.render_method(endpoint, ambiguous_types) for endpoint in endpoints)
        usings = "\n".join(f"using {namespace};" for namespace in client.imported_namespaces)

        text = (
            f"{AUTO_GENERATED_HEADER}\n"
            "\n"
            f"{usings}\n"
            "\n"
            f"namespace {client.namespace}\n"
            "{\n"
            f"    {client.access_modifier} partial interface {client.name}\n"
            "    {\n"
            f"{_indent(methods)}\n"
            "    }\n"
            "}\n"
        )
        return text, diagnostics

    def render_method(self, endpoint: EndpointMethod, ambiguous_types: frozenset[TypeRef] = frozenset()) -> str:
        """Render the attribute lines and the declaration of one method."""
        lines = []
        if endpoint.documentation:
            lines.append(endpoint.documentation)
        if endpoint.is_multipart:
            lines.append("[Multipart]")

        parameters = split_parameters(endpoint)
        static_headers = render_static_headers(parameters.static_headers)
        if static_headers:
            lines.append(static_headers)

        lines.append(route_attribute(endpoint))

        return_type = response_type_name(endpoint.response_type, ambiguous_types, self.options.use_api_responses)
        arguments = ", ".join(render_parameter(p, ambiguous_types) for p in parameters.call_parameters)
        lines.append(f"{return_type} {endpoint.name}({arguments});")
        return "\n".join(lines)


def route_attribute(endpoint: EndpointMethod) -> str:
    """``[Get("/api/users/{id}")]`` style route marker."""
    path = "/" + endpoint.path.lstrip("/")
    return f'[{to_pascal_case(endpoint.http_method)}("{path}")]'


def validate_endpoint(endpoint: EndpointMethod, ambiguous_types: frozenset[TypeRef] = frozenset()) -> None:
    """Check the invariants rendering relies on, naming the endpoint on failure."""
    for p in endpoint.parameters:
        if p.is_constant and p.default_value_literal is None:
            raise ConstantParameterError(p.name, endpoint.display_name)
        try:
            resolve_type_name(p.type, ambiguous_types)
        except TypeNameError as e:
            raise TypeNameError(f"parameter '{p.name}': {e.context}", endpoint.display_name) from e

    try:
        resolve_type_name(endpoint.response_type, ambiguous_types)
    except TypeNameError as e:
        raise TypeNameError(f"response type: {e.context}", endpoint.display_name) from e
