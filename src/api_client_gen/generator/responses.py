"""Response type wrapper: picks the declared return type of a client method."""

from api_client_gen.types import TypeRef, resolve_type_name, wrap_in_task


def response_type_name(
    response_type: TypeRef,
    ambiguous_types: frozenset[TypeRef] = frozenset(),
    use_api_responses: bool = False,
) -> str:
    """Return ``Task<T>`` or, with ``use_api_responses``, ``Task<IApiResponse<T>>``."""
    if use_api_responses:
        if response_type.is_void:
            return "Task<IApiResponse>"
        return f"Task<IApiResponse<{resolve_type_name(response_type, ambiguous_types)}>>"

    return resolve_type_name(wrap_in_task(response_type), ambiguous_types)
