"""Parameter classifier: maps parameters to Refit binding attributes."""

from pydantic import BaseModel, ConfigDict

from api_client_gen.errors import ConstantParameterError
from api_client_gen.model import EndpointMethod, Parameter, ParameterSource
from api_client_gen.types import TypeRef, resolve_type_name

MULTIPART_ITEM_TYPE = "MultipartItem"


class MethodParameters(BaseModel):
    """Classified parameters of one endpoint."""

    model_config = ConfigDict(frozen=True)

    static_headers: tuple[Parameter, ...]
    call_parameters: tuple[Parameter, ...]


def split_parameters(endpoint: EndpointMethod) -> MethodParameters:
    """Separate constant headers from call-site parameters.

    Call-site parameters are stably reordered so that parameters with a
    default value come after all parameters without one.
    """
    static_headers = []
    call_parameters = []
    for p in endpoint.parameters:
        if p.is_constant and p.default_value_literal is None:
            raise ConstantParameterError(p.name, endpoint.display_name)
        if p.source == ParameterSource.HEADER and p.is_constant:
            static_headers.append(p)
        else:
            call_parameters.append(p)

    call_parameters.sort(key=lambda p: p.default_value_literal is not None)
    return MethodParameters(static_headers=tuple(static_headers), call_parameters=tuple(call_parameters))


def _unquote(literal: str) -> str:
    return literal.strip('"')


def render_static_headers(headers: tuple[Parameter, ...]) -> str:
    """Render ``[Headers(...)]`` for constant headers, or "" when there are none."""
    if not headers:
        return ""
    values = ", ".join(f'"{h.name}: {_unquote(h.default_value_literal)}"' for h in headers)
    return f"[Headers({values})]"


def query_attribute(parameter: Parameter) -> str:
    """Decide how a query parameter is declared.

    Complex objects (and dictionaries) are flattened with ``[Query]``; simple
    values and collections only need ``[AliasAs]`` when the wire name differs
    from the identifier.
    """
    type_ref = parameter.type
    is_key_value_pairs = (
        not type_ref.is_string
        and not type_ref.is_dictionary
        and type_ref.is_enumerable
    )

    if not type_ref.is_string and not type_ref.is_value_type and not is_key_value_pairs:
        return "[Query] "

    if parameter.name.casefold() != parameter.parameter_name.casefold():
        return f'[AliasAs("{parameter.name}")] '

    return ""


def parameter_attribute(parameter: Parameter) -> str:
    if parameter.source == ParameterSource.BODY:
        return "[Body] "
    elif parameter.source == ParameterSource.FORM:
        return "[Body(BodySerializationMethod.UrlEncoded)] "
    elif parameter.source == ParameterSource.HEADER:
        return f'[Header("{parameter.name}")] '
    elif parameter.source == ParameterSource.QUERY:
        return query_attribute(parameter)
    return ""


def render_parameter(parameter: Parameter, ambiguous_types: frozenset[TypeRef] = frozenset()) -> str:
    if parameter.source == ParameterSource.FILE:
        type_name = MULTIPART_ITEM_TYPE
    else:
        type_name = resolve_type_name(parameter.type, ambiguous_types)
    default_value = "" if parameter.default_value_literal is None else f" = {parameter.default_value_literal}"
    return f"{parameter_attribute(parameter)}{type_name} {parameter.parameter_name}{default_value}"
