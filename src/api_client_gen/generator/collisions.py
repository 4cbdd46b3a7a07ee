"""Collision resolver: drops endpoints that would clash in a generated client.

Two passes run in sequence over the same ordered input:

* endpoint identity: same verb, path and parameter wire shape,
* method signature: same method name and call-site parameter types.

Both keep the last endpoint registered under a key and report every
collision as a ``Diagnostic`` instead of failing.
"""

from collections.abc import Callable, Iterable
from typing import Literal

from pydantic import BaseModel, ConfigDict

from api_client_gen.model import EndpointMethod
from api_client_gen.types import TypeRef, resolve_type_name


class Diagnostic(BaseModel):
    """A non-fatal data-quality warning raised during generation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["endpoint", "signature"]
    key: str

    @property
    def message(self) -> str:
        label = "API endpoint" if self.kind == "endpoint" else "API method"
        return f"Duplicate {label} {self.key}"


def endpoint_key(endpoint: EndpointMethod, ambiguous_types: frozenset[TypeRef]) -> str:
    parameters = ", ".join(
        f"{p.source.value} {resolve_type_name(p.type, ambiguous_types)} {p.name} "
        f"{': ' + str(p.default_value_literal) if p.is_constant else ''}"
        for p in endpoint.parameters
    )
    return f"{endpoint.http_method} {endpoint.path} ({parameters})"


def signature_key(endpoint: EndpointMethod, ambiguous_types: frozenset[TypeRef]) -> str:
    parameter_types = ",".join(
        resolve_type_name(p.type, ambiguous_types) for p in endpoint.parameters if not p.is_constant
    )
    return f"{endpoint.name}({parameter_types})"


def _keep_last(
    endpoints: Iterable[EndpointMethod],
    key_for: Callable[[EndpointMethod], str],
    kind: str,
) -> tuple[list[EndpointMethod], list[Diagnostic]]:
    """Deduplicate by key. A later endpoint replaces the earlier one in its slot."""
    kept: list[EndpointMethod] = []
    slots: dict[str, int] = {}
    diagnostics: list[Diagnostic] = []

    for endpoint in endpoints:
        key = key_for(endpoint)
        if key in slots:
            diagnostics.append(Diagnostic(kind=kind, key=key))
            kept[slots[key]] = endpoint
        else:
            slots[key] = len(kept)
            kept.append(endpoint)

    return kept, diagnostics


def remove_endpoint_duplicates(
    endpoints: Iterable[EndpointMethod],
    ambiguous_types: frozenset[TypeRef] = frozenset(),
) -> tuple[list[EndpointMethod], list[Diagnostic]]:
    return _keep_last(endpoints, lambda e: endpoint_key(e, ambiguous_types), "endpoint")


def remove_signature_duplicates(
    endpoints: Iterable[EndpointMethod],
    ambiguous_types: frozenset[TypeRef] = frozenset(),
) -> tuple[list[EndpointMethod], list[Diagnostic]]:
    return _keep_last(endpoints, lambda e: signature_key(e, ambiguous_types), "signature")


def resolve_collisions(
    endpoints: Iterable[EndpointMethod],
    ambiguous_types: frozenset[TypeRef] = frozenset(),
) -> tuple[list[EndpointMethod], list[Diagnostic]]:
    """Run the identity pass, then the signature pass on its survivors."""
    survivors, diagnostics = remove_endpoint_duplicates(endpoints, ambiguous_types)
    survivors, signature_diagnostics = remove_signature_duplicates(survivors, ambiguous_types)
    return survivors, diagnostics + signature_diagnostics
