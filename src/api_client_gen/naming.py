"""Identifier helpers for generated C# code."""

import re
from functools import lru_cache

CSHARP_KEYWORDS = frozenset({
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char",
    "checked", "class", "const", "continue", "decimal", "default", "delegate",
    "do", "double", "else", "enum", "event", "explicit", "extern", "false",
    "finally", "fixed", "float", "for", "foreach", "goto", "if", "implicit",
    "in", "int", "interface", "internal", "is", "lock", "long", "namespace",
    "new", "null", "object", "operator", "out", "override", "params",
    "private", "protected", "public", "readonly", "ref", "return", "sbyte",
    "sealed", "short", "sizeof", "stackalloc", "static", "string", "struct",
    "switch", "this", "throw", "true", "try", "typeof", "uint", "ulong",
    "unchecked", "unsafe", "ushort", "using", "virtual", "void", "volatile",
    "while",
})


def _words(value: str) -> list[str]:
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    value = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", value)
    return [part for part in re.split(r"[^A-Za-z0-9]+", value) if part]


@lru_cache(maxsize=1024)
def to_pascal_case(value: str) -> str:
    """Convert a string to PascalCase.

    Examples:
        >>> to_pascal_case("get_user")
        'GetUser'
        >>> to_pascal_case("GET")
        'Get'
        >>> to_pascal_case("listUsers")
        'ListUsers'
    """
    return "".join(part[:1].upper() + part[1:].lower() for part in _words(value))


@lru_cache(maxsize=1024)
def to_camel_case(value: str) -> str:
    """Convert a string to camelCase, e.g. ``X-Api-Version`` -> ``xApiVersion``."""
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


@lru_cache(maxsize=1024)
def sanitize_identifier(value: str) -> str:
    """Turn a wire name into a usable C# parameter identifier."""
    identifier = to_camel_case(value) or "value"
    if identifier[0].isdigit():
        identifier = f"_{identifier}"
    if identifier in CSHARP_KEYWORDS:
        return f"@{identifier}"
    return identifier
