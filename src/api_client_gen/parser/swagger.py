"""OpenAPI document parser.

Converts OpenAPI 3.x documents into endpoint descriptions. Schemas referenced
with ``$ref`` are assumed to exist as C# types in ``models_namespace``.
"""

from pathlib import Path

import yaml

from api_client_gen.errors import DescriptionError
from api_client_gen.model import HTTP_METHODS

from .base import ApiDescription, ApiParameterDescription, DescriptionDocument, TypeTraits
from .detect import load_document

SOURCES_BY_LOCATION = {"query": "query", "header": "header", "path": "path"}

VALUE_KEYWORDS = {"int", "long", "float", "double", "bool", "System.DateTime", "System.Guid"}


def parse_openapi(file_path: Path, models_namespace: str = "Models") -> DescriptionDocument:
    """Parse an OpenAPI file into a DescriptionDocument."""
    try:
        doc = load_document(file_path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        raise DescriptionError(f"Failed to load OpenAPI document: {e}", str(file_path)) from e
    if not isinstance(doc, dict):
        raise DescriptionError("OpenAPI root must be a mapping", str(file_path))

    components = doc.get("components") or {}
    schemas = components.get("schemas", {})
    enums = {
        f"{models_namespace}.{name}"
        for name, schema in schemas.items()
        if isinstance(schema, dict) and "enum" in schema and schema.get("type") != "object"
    }

    endpoints = []
    for path, methods in doc.get("paths", {}).items():
        path_level_params = methods.get("parameters", [])
        for method, operation in methods.items():
            if method.upper() not in HTTP_METHODS:
                continue

            try:
                params = _parse_parameters(
                    [
                        _resolve(p, components, "parameters")
                        for p in list(path_level_params) + list(operation.get("parameters", []))
                    ],
                    models_namespace,
                    enums,
                )
                body = operation.get("requestBody")
                if body:
                    body = _resolve(body, components, "requestBodies")
            except DescriptionError as e:
                raise DescriptionError(f"{method.upper()} {path}: {e}", str(file_path)) from e

            body_params, multipart = _parse_request_body(body, models_namespace)
            tags = operation.get("tags") or []

            endpoints.append(
                ApiDescription(
                    controller=tags[0] if tags else "",
                    action=operation.get("operationId", ""),
                    method=method,
                    path=path.lstrip("/"),
                    summary=operation.get("summary", ""),
                    response_type=_parse_responses(operation.get("responses", {}), models_namespace),
                    multipart=multipart,
                    parameters=params + body_params,
                )
            )

    return DescriptionDocument(
        types={name: TypeTraits(value_type=True) for name in sorted(enums)},
        endpoints=endpoints,
    )


def _resolve(item: dict, components: dict, section: str) -> dict:
    """Follow a local ``#/components/<section>/<name>`` reference, if any."""
    ref = item.get("$ref") if isinstance(item, dict) else None
    if ref is None:
        return item

    prefix = f"#/components/{section}/"
    target = components.get(section, {}).get(ref[len(prefix):]) if ref.startswith(prefix) else None
    if not isinstance(target, dict):
        raise DescriptionError(f"Unresolvable reference '{ref}'")
    return target


def schema_type(schema: dict | None, models_namespace: str) -> str:
    """Map a JSON schema to a C# type expression."""
    if not schema:
        return "object"
    if "$ref" in schema:
        return f"{models_namespace}.{schema['$ref'].split('/')[-1]}"

    schema_type_name = schema.get("type")
    schema_format = schema.get("format")
    if schema_type_name == "string":
        if schema_format == "date-time":
            return "System.DateTime"
        if schema_format == "uuid":
            return "System.Guid"
        if schema_format == "binary":
            return "System.IO.Stream"
        return "string"
    if schema_type_name == "integer":
        return "long" if schema_format == "int64" else "int"
    if schema_type_name == "number":
        return "float" if schema_format == "float" else "double"
    if schema_type_name == "boolean":
        return "bool"
    if schema_type_name == "array":
        return f"{schema_type(schema.get('items'), models_namespace)}[]"
    if schema_type_name == "object" and isinstance(schema.get("additionalProperties"), dict):
        value_type = schema_type(schema["additionalProperties"], models_namespace)
        return f"System.Collections.Generic.Dictionary<string, {value_type}>"
    return "object"


def _parse_parameters(params: list[dict], models_namespace: str, enums: set[str]) -> list[ApiParameterDescription]:
    result = []
    for p in params:
        source = SOURCES_BY_LOCATION.get(p.get("in", "query"))
        if source is None:
            continue  # cookies are not bound by the client
        if not p.get("name"):
            raise DescriptionError("Parameter without a name")

        schema = p.get("schema", {})
        type_name = schema_type(schema, models_namespace)
        required = p.get("required", source == "path")
        values = schema.get("enum") or []

        fields = {"name": p["name"], "source": source}
        if required and len(values) == 1:
            fields.update(default=values[0], constant=True)
        elif not required:
            if type_name in VALUE_KEYWORDS or type_name in enums:
                type_name += "?"
            if "default" in schema:
                fields["default"] = schema["default"]
            else:
                fields["default_literal"] = "null"
        result.append(ApiParameterDescription(type=type_name, **fields))
    return result


def _parse_request_body(body: dict | None, models_namespace: str) -> tuple[list[ApiParameterDescription], bool]:
    if not body:
        return [], False
    content = body.get("content", {})

    if "multipart/form-data" in content:
        schema = content["multipart/form-data"].get("schema", {})
        params = []
        for name, prop in schema.get("properties", {}).items():
            is_file = prop.get("format") == "binary" or prop.get("items", {}).get("format") == "binary"
            params.append(
                ApiParameterDescription(
                    name=name,
                    type=schema_type(prop, models_namespace),
                    source="file" if is_file else "form",
                )
            )
        return params, True

    if "application/x-www-form-urlencoded" in content:
        schema = content["application/x-www-form-urlencoded"].get("schema")
        return [ApiParameterDescription(name="form", type=_body_type(schema, models_namespace), source="form")], False

    for content_type, media in content.items():
        if content_type == "application/json" or content_type.endswith("+json"):
            schema = media.get("schema")
            return [ApiParameterDescription(name="body", type=_body_type(schema, models_namespace), source="body")], False

    return [], False


def _body_type(schema: dict | None, models_namespace: str) -> str:
    type_name = schema_type(schema, models_namespace)
    if type_name == "object" and schema and "properties" in schema:
        return "System.Collections.Generic.Dictionary<string, object>"
    return type_name


def _parse_responses(responses: dict, models_namespace: str) -> str:
    for status_code, resp in responses.items():
        if not str(status_code).startswith("2") or not isinstance(resp, dict):
            continue
        for content_type, media in resp.get("content", {}).items():
            if "json" in content_type or content_type.startswith("text/"):
                return schema_type(media.get("schema"), models_namespace)
        return "void"
    return "void"
