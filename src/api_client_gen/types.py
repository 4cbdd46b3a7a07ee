"""Type descriptors and the type name resolver.

Types are described explicitly instead of being discovered at runtime:
a descriptor carries its namespace, generic arguments and the handful of
traits the generator cares about (value type, enumerable, dictionary).
"""

import re
from collections.abc import Iterable, Iterator, Mapping

from pydantic import BaseModel, ConfigDict

from api_client_gen.errors import TypeNameError


class TypeRef(BaseModel):
    """A C# type referenced by an endpoint."""

    model_config = ConfigDict(frozen=True)

    name: str  # short name without generic arity
    namespace: str = ""
    arguments: tuple["TypeRef", ...] = ()
    element: "TypeRef | None" = None  # set for arrays only
    is_value_type: bool = False
    is_enumerable: bool = False
    is_dictionary: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @property
    def definition(self) -> "TypeRef":
        """The bare type identity (namespace and name) without arguments or traits."""
        return TypeRef(name=self.name, namespace=self.namespace)

    @property
    def is_string(self) -> bool:
        return self.element is None and self.full_name == "System.String"

    @property
    def is_void(self) -> bool:
        return self.element is None and self.full_name == "System.Void"


TypeRef.model_rebuild()


KEYWORD_ALIASES: dict[str, str] = {
    "System.Boolean": "bool",
    "System.Byte": "byte",
    "System.SByte": "sbyte",
    "System.Char": "char",
    "System.Decimal": "decimal",
    "System.Double": "double",
    "System.Single": "float",
    "System.Int16": "short",
    "System.Int32": "int",
    "System.Int64": "long",
    "System.UInt16": "ushort",
    "System.UInt32": "uint",
    "System.UInt64": "ulong",
    "System.Object": "object",
    "System.String": "string",
    "System.Void": "void",
}

_KEYWORD_TYPES = {alias: full_name for full_name, alias in KEYWORD_ALIASES.items()}

VALUE_TYPES = frozenset({
    "System.Boolean",
    "System.Byte",
    "System.SByte",
    "System.Char",
    "System.Decimal",
    "System.Double",
    "System.Single",
    "System.Int16",
    "System.Int32",
    "System.Int64",
    "System.UInt16",
    "System.UInt32",
    "System.UInt64",
    "System.Void",
    "System.Guid",
    "System.DateTime",
    "System.DateTimeOffset",
    "System.DateOnly",
    "System.TimeOnly",
    "System.TimeSpan",
    "System.Nullable",
    "System.Collections.Generic.KeyValuePair",
})

# Only types assignable to the non-generic IDictionary count as dictionaries.
# IDictionary<K, V> and IReadOnlyDictionary<K, V> are plain enumerables.
DICTIONARY_TYPES = frozenset({
    "System.Collections.IDictionary",
    "System.Collections.Hashtable",
    "System.Collections.SortedList",
    "System.Collections.Generic.Dictionary",
    "System.Collections.Generic.SortedDictionary",
    "System.Collections.Generic.SortedList",
    "System.Collections.Concurrent.ConcurrentDictionary",
})

ENUMERABLE_TYPES = DICTIONARY_TYPES | frozenset({
    "System.String",
    "System.Collections.IEnumerable",
    "System.Collections.ICollection",
    "System.Collections.IList",
    "System.Collections.ArrayList",
    "System.Collections.Generic.IEnumerable",
    "System.Collections.Generic.ICollection",
    "System.Collections.Generic.IList",
    "System.Collections.Generic.List",
    "System.Collections.Generic.IReadOnlyCollection",
    "System.Collections.Generic.IReadOnlyList",
    "System.Collections.Generic.ISet",
    "System.Collections.Generic.HashSet",
    "System.Collections.Generic.IDictionary",
    "System.Collections.Generic.IReadOnlyDictionary",
})

VOID = TypeRef(name="Void", namespace="System", is_value_type=True)
STRING = TypeRef(name="String", namespace="System", is_enumerable=True)
TASK = TypeRef(name="Task", namespace="System.Threading.Tasks")


def resolve_type_name(type_ref: TypeRef, ambiguous_types: frozenset[TypeRef] = frozenset()) -> str:
    """Return the name to print for ``type_ref``.

    Ambiguous definitions are fully qualified; everything else gets the
    shortest correct spelling (keyword aliases, ``T?``, ``T[]``).
    """
    if type_ref.element is not None:
        return f"{resolve_type_name(type_ref.element, ambiguous_types)}[]"
    if not type_ref.name:
        raise TypeNameError(f"empty type name in namespace '{type_ref.namespace}'")

    if type_ref.full_name == "System.Nullable" and len(type_ref.arguments) == 1:
        return f"{resolve_type_name(type_ref.arguments[0], ambiguous_types)}?"

    if type_ref.full_name in KEYWORD_ALIASES:
        name = KEYWORD_ALIASES[type_ref.full_name]
    elif type_ref.definition in ambiguous_types:
        name = type_ref.full_name
    else:
        name = type_ref.name

    if type_ref.arguments:
        arguments = ", ".join(resolve_type_name(a, ambiguous_types) for a in type_ref.arguments)
        name = f"{name}<{arguments}>"
    return name


def wrap_in_task(type_ref: TypeRef) -> TypeRef:
    """Wrap a payload type in ``Task<T>``; the no-payload marker becomes ``Task``."""
    if type_ref.is_void:
        return TASK
    return TASK.model_copy(update={"arguments": (type_ref,)})


def iter_types(type_ref: TypeRef) -> Iterator[TypeRef]:
    """Yield ``type_ref`` and every type nested in it."""
    yield type_ref
    if type_ref.element is not None:
        yield from iter_types(type_ref.element)
    for argument in type_ref.arguments:
        yield from iter_types(argument)


def find_ambiguous_types(types: Iterable[TypeRef]) -> frozenset[TypeRef]:
    """Find type definitions whose short name appears in more than one namespace."""
    namespaces_by_name: dict[str, set[str]] = {}
    definitions: set[TypeRef] = set()
    for type_ref in types:
        for nested in iter_types(type_ref):
            if nested.element is not None:
                continue
            namespaces_by_name.setdefault(nested.name, set()).add(nested.namespace)
            definitions.add(nested.definition)
    return frozenset(d for d in definitions if len(namespaces_by_name[d.name]) > 1)


# -- parsing ------------------------------------------------------------------

_TOKEN_RE = re.compile(r"\s*(?:(?P<name>[A-Za-z_][\w.]*)|(?P<punct>\[\]|[<>,?]))")


def parse_type(text: str, overrides: Mapping[str, Mapping[str, bool]] | None = None) -> TypeRef:
    """Parse a C# type expression such as ``System.Collections.Generic.List<MyApp.User>``.

    ``overrides`` maps full type names to trait flags (``value_type``,
    ``enumerable``, ``dictionary``) for types the built-in tables don't know,
    e.g. enums declared by the API.
    """
    parser = _TypeParser(text, overrides or {})
    result = parser.parse_type()
    if parser.peek() is not None:
        raise ValueError(f"Unexpected '{parser.peek()}' in type expression '{text}'")
    return result


class _TypeParser:
    def __init__(self, text: str, overrides: Mapping[str, Mapping[str, bool]]):
        self.text = text
        self.overrides = overrides
        self.tokens = self._tokenize(text)
        self.pos = 0

    def _tokenize(self, text: str) -> list[str]:
        tokens = []
        index = 0
        stripped = text.rstrip()
        while index < len(stripped):
            match = _TOKEN_RE.match(stripped, index)
            if not match:
                raise ValueError(f"Invalid type expression '{text}'")
            tokens.append(match.group("name") or match.group("punct"))
            index = match.end()
        if not tokens:
            raise ValueError("Empty type expression")
        return tokens

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> str:
        token = self.peek()
        if token is None:
            raise ValueError(f"Unexpected end of type expression '{self.text}'")
        self.pos += 1
        return token

    def parse_type(self) -> TypeRef:
        full_name = self.next()
        if not re.match(r"[A-Za-z_]", full_name):
            raise ValueError(f"Expected a type name in '{self.text}', got '{full_name}'")
        full_name = _KEYWORD_TYPES.get(full_name, full_name)

        arguments: list[TypeRef] = []
        if self.peek() == "<":
            self.next()
            arguments.append(self.parse_type())
            while self.peek() == ",":
                self.next()
                arguments.append(self.parse_type())
            if self.next() != ">":
                raise ValueError(f"Unclosed generic argument list in '{self.text}'")

        result = self._make(full_name, tuple(arguments))
        while self.peek() in ("[]", "?"):
            if self.next() == "[]":
                result = TypeRef(name="Array", namespace="System", element=result, is_enumerable=True)
            else:
                result = self._make("System.Nullable", (result,))
        return result

    def _make(self, full_name: str, arguments: tuple[TypeRef, ...]) -> TypeRef:
        namespace, _, name = full_name.rpartition(".")
        traits = self.overrides.get(full_name, {})
        return TypeRef(
            name=name,
            namespace=namespace,
            arguments=arguments,
            is_value_type=traits.get("value_type", full_name in VALUE_TYPES),
            is_enumerable=traits.get("enumerable", full_name in ENUMERABLE_TYPES),
            is_dictionary=traits.get("dictionary", full_name in DICTIONARY_TYPES),
        )
