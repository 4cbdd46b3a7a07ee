"""Client model builder: turns endpoint descriptions into a ClientCollection.

Endpoints are grouped into one client per controller (and API group), type
expressions are parsed into descriptors, and the set of ambiguous type names
is computed once for the whole collection.
"""

import html
import math
import re
from fnmatch import fnmatch

from api_client_gen.errors import DescriptionError
from api_client_gen.model import Client, ClientCollection, EndpointMethod, Parameter, ParameterSource
from api_client_gen.naming import sanitize_identifier, to_pascal_case
from api_client_gen.options import GenerateClientOptions
from api_client_gen.parser.base import ApiDescription, ApiParameterDescription, DescriptionDocument
from api_client_gen.types import KEYWORD_ALIASES, TypeRef, find_ambiguous_types, iter_types, parse_type

DEFAULT_CONTROLLER = "Default"

STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\0": "\\0",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}

# C# treats these as line terminators inside string literals
LINE_SEPARATORS = "\x85\u2028\u2029"

NUMERIC_SUFFIXES = {"System.Single": "f", "System.Decimal": "m"}


def _escape(char: str) -> str:
    if char in STRING_ESCAPES:
        return STRING_ESCAPES[char]
    if ord(char) < 0x20 or ord(char) == 0x7F or char in LINE_SEPARATORS:
        return f"\\u{ord(char):04x}"
    return char


def csharp_literal(value, type_ref: TypeRef | None = None) -> str:
    """Format a plain default value as a C# literal.

    ``type_ref`` is the declared parameter type; real numbers get the suffix
    that type needs (``1.5f`` for float, ``1.5m`` for decimal).
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return repr(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Unsupported default value {value!r}")
        if type_ref is not None and type_ref.full_name == "System.Nullable" and type_ref.arguments:
            type_ref = type_ref.arguments[0]
        suffix = NUMERIC_SUFFIXES.get(type_ref.full_name, "") if type_ref is not None else ""
        return f"{value!r}{suffix}"
    if isinstance(value, str):
        return '"' + "".join(_escape(char) for char in value) + '"'
    raise ValueError(f"Unsupported default value {value!r}")


def xml_doc(summary: str) -> str | None:
    """Render a summary as a ``/// <summary>`` block."""
    lines = [line.strip() for line in summary.strip().splitlines()]
    if not lines:
        return None
    body = "\n".join(f"/// {html.escape(line, quote=False)}" for line in lines)
    return f"/// <summary>\n{body}\n/// </summary>"


class ClientModelBuilder:
    """Builds the immutable client model from a DescriptionDocument."""

    def __init__(self, document: DescriptionDocument, options: GenerateClientOptions | None = None):
        self.document = document
        self.options = options or GenerateClientOptions()
        self._overrides = document.type_overrides()

    def build(self) -> ClientCollection:
        groups = self._group_by_client(self.document.endpoints)
        methods_by_group = {
            key: [self._build_method(description) for description in descriptions]
            for key, descriptions in groups.items()
        }

        used_types = [
            type_ref
            for methods in methods_by_group.values()
            for method in methods
            for type_ref in (method.response_type, *(p.type for p in method.parameters))
        ]
        ambiguous_types = find_ambiguous_types(used_types)

        clients = tuple(
            self._build_client(name, location, methods, ambiguous_types)
            for (name, location), methods in methods_by_group.items()
        )
        return ClientCollection(clients=clients, ambiguous_types=ambiguous_types)

    def client_name(self, controller: str) -> str:
        return self.options.type_name_pattern.replace("[controller]", to_pascal_case(controller or DEFAULT_CONTROLLER))

    def _group_by_client(self, endpoints: list[ApiDescription]) -> dict[tuple[str, str], list[ApiDescription]]:
        """Group endpoints by (client name, location). Untagged endpoints go to 'Default'.

        Controllers that spell the same client differently (``user-accounts``,
        ``UserAccounts``) share one client and one output document.
        """
        groups: dict[tuple[str, str], list[ApiDescription]] = {}
        for ep in endpoints:
            controller = ep.controller or DEFAULT_CONTROLLER
            if any(fnmatch(controller, pattern) for pattern in self.options.exclude_controllers):
                continue
            groups.setdefault((self.client_name(controller), to_pascal_case(ep.group)), []).append(ep)
        return groups

    def _build_client(
        self,
        name: str,
        location: str,
        methods: list[EndpointMethod],
        ambiguous_types: frozenset[TypeRef],
    ) -> Client:
        namespace = self.options.namespace
        if location:
            namespace = f"{namespace}.{location}"

        return Client(
            name=name,
            namespace=namespace,
            location=location,
            access_modifier=self.options.access_modifier,
            endpoint_methods=tuple(methods),
            imported_namespaces=self._imported_namespaces(methods, namespace, ambiguous_types),
        )

    def _imported_namespaces(
        self,
        methods: list[EndpointMethod],
        own_namespace: str,
        ambiguous_types: frozenset[TypeRef],
    ) -> tuple[str, ...]:
        used: set[str] = set()
        for method in methods:
            roots = [method.response_type] + [p.type for p in method.parameters if p.source != ParameterSource.FILE]
            for root in roots:
                for type_ref in iter_types(root):
                    if type_ref.element is not None or type_ref.full_name in KEYWORD_ALIASES:
                        continue
                    if type_ref.full_name == "System.Nullable" or type_ref.definition in ambiguous_types:
                        continue
                    if type_ref.namespace:
                        used.add(type_ref.namespace)

        namespaces: list[str] = []
        for namespace in [*self.options.additional_namespaces, *sorted(used)]:
            if namespace != own_namespace and namespace not in namespaces:
                namespaces.append(namespace)
        return tuple(namespaces)

    def _build_method(self, description: ApiDescription) -> EndpointMethod:
        context = f"{description.method} {description.path}"
        try:
            response_type = parse_type(description.response_type, self._overrides)
            parameters = tuple(self._build_parameter(p) for p in description.parameters)
        except ValueError as e:
            raise DescriptionError(f"[{context}] {e}") from e

        return EndpointMethod(
            name=self._method_name(description),
            http_method=description.method,
            path=description.path,
            parameters=parameters,
            response_type=response_type,
            is_multipart=description.multipart,
            documentation=xml_doc(description.summary),
        )

    def _build_parameter(self, description: ApiParameterDescription) -> Parameter:
        type_ref = parse_type(description.type, self._overrides)
        literal = description.default_literal
        if literal is None and description.has_default:
            literal = csharp_literal(description.default, type_ref)

        return Parameter(
            name=description.name,
            parameter_name=description.parameter_name or sanitize_identifier(description.name),
            type=type_ref,
            source=ParameterSource[description.source.upper()],
            is_constant=description.constant,
            default_value_literal=literal,
        )

    def _method_name(self, description: ApiDescription) -> str:
        action = description.action
        if action.isidentifier():
            return action[0].upper() + action[1:]
        if action:
            return to_pascal_case(action)
        path = re.sub(r"\{(\w+)[^}]*\}", r"by_\1", description.path)
        return to_pascal_case(f"{description.method.lower()}_{path}")
