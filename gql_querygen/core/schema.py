"""Schema model for GraphQL introspection results.

The models mirror the standard introspection response (field aliases are the
JSON keys), so a payload deserializes with ``Schema.model_validate``. All
models are frozen: a schema is built once and only read during generation.
"""

import json
import logging
from collections.abc import Iterator, Mapping
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Any

from graphql import GraphQLError, build_schema, introspection_from_schema
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import SchemaIntegrityError

logger = logging.getLogger(__name__)

INTROSPECTION_PREFIX = "__"
BUILT_IN_SCALARS = ("Int", "Float", "String", "Boolean", "ID")


class TypeKind(str, Enum):
    """Kind tag of a schema type or type reference."""
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    SCALAR = "SCALAR"
    INPUT_OBJECT = "INPUT_OBJECT"
    LIST = "LIST"
    NON_NULL = "NON_NULL"

    @property
    def is_complex(self) -> bool:
        """True for kinds that are selected with a sub-selection."""
        return self in (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION)

    @property
    def is_wrapper(self) -> bool:
        return self in (TypeKind.LIST, TypeKind.NON_NULL)


class _SchemaModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class TypeRef(_SchemaModel):
    """A possibly wrapped reference to a named schema type.

    Terminal references carry ``name``; ``LIST`` and ``NON_NULL`` wrappers
    carry the wrapped reference in ``of_type``.
    """
    kind: TypeKind
    name: str | None = None
    of_type: "TypeRef | None" = None

    @property
    def is_non_null(self) -> bool:
        return self.kind is TypeKind.NON_NULL

    @property
    def is_list(self) -> bool:
        return self.kind is TypeKind.LIST

    def unwrap_non_null(self) -> "TypeRef":
        """Strip one leading NON_NULL wrapper; other references are returned as-is."""
        if self.kind is TypeKind.NON_NULL:
            if self.of_type is None:
                raise SchemaIntegrityError("NON_NULL type reference without 'ofType'")
            return self.of_type
        return self

    def element_type(self) -> "TypeRef":
        """Return the item reference of a LIST reference."""
        if self.kind is not TypeKind.LIST or self.of_type is None:
            raise SchemaIntegrityError(f"'{self.describe()}' is not a list type reference")
        return self.of_type

    def named_type(self) -> "TypeRef":
        """Return the innermost named reference, through any wrapping."""
        ref = self
        while ref.kind.is_wrapper:
            if ref.of_type is None:
                raise SchemaIntegrityError(f"{ref.kind.value} type reference without 'ofType'")
            ref = ref.of_type
        return ref

    def describe(self) -> str:
        """Render the reference in GraphQL notation, e.g. ``[User!]!``."""
        if self.kind is TypeKind.NON_NULL and self.of_type is not None:
            return f"{self.of_type.describe()}!"
        if self.kind is TypeKind.LIST and self.of_type is not None:
            return f"[{self.of_type.describe()}]"
        return self.name or "?"


class InputValue(_SchemaModel):
    """An argument or an input-object field."""
    name: str
    description: str | None = None
    type: TypeRef
    default_value: str | None = None


class Field(_SchemaModel):
    """A field of an object or interface type."""
    name: str
    description: str | None = None
    type: TypeRef
    args: tuple[InputValue, ...] = ()
    is_deprecated: bool = False
    deprecation_reason: str | None = None


class EnumValue(_SchemaModel):
    name: str
    description: str | None = None
    is_deprecated: bool = False
    deprecation_reason: str | None = None


class SchemaType(_SchemaModel):
    """A named type of the schema."""
    kind: TypeKind
    name: str
    description: str | None = None
    fields: tuple[Field, ...] | None = None
    input_fields: tuple[InputValue, ...] | None = None
    enum_values: tuple[EnumValue, ...] | None = None
    interfaces: tuple[TypeRef, ...] | None = None
    possible_types: tuple[TypeRef, ...] | None = None

    @property
    def is_reserved(self) -> bool:
        """True for introspection types such as ``__Schema``."""
        return self.name.startswith(INTROSPECTION_PREFIX)

    @property
    def members(self) -> tuple[Field | InputValue, ...]:
        """Input fields for input objects, fields otherwise."""
        if self.input_fields is not None:
            return self.input_fields
        return self.fields or ()


class NamedTypeRef(_SchemaModel):
    name: str


class Schema(_SchemaModel):
    """An ordered collection of schema types plus the operation root types."""
    types: tuple[SchemaType, ...]
    query_type: NamedTypeRef | None = None
    mutation_type: NamedTypeRef | None = None
    subscription_type: NamedTypeRef | None = None

    @field_validator("query_type", "mutation_type", "subscription_type", mode="before")
    @classmethod
    def _accept_type_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": value}
        return value

    @cached_property
    def types_by_name(self) -> dict[str, SchemaType]:
        return {schema_type.name: schema_type for schema_type in self.types}

    def with_types(self, types: tuple[SchemaType, ...]) -> "Schema":
        """Return a schema with the same root types and the given type list."""
        return Schema(
            types=types,
            query_type=self.query_type,
            mutation_type=self.mutation_type,
            subscription_type=self.subscription_type,
        )

    def get_type(self, name: str) -> SchemaType:
        """Look up a type by name.

        Raises:
            SchemaIntegrityError: If no type has that name
        """
        try:
            return self.types_by_name[name]
        except KeyError:
            raise SchemaIntegrityError(f"Type '{name}' is referenced but not defined") from None

    def has_type(self, name: str) -> bool:
        return name in self.types_by_name

    def root_operations(self) -> dict[str, str]:
        """Map root type names to their operation keyword."""
        roots: dict[str, str] = {}
        for keyword, root_name in self._root_names():
            roots.setdefault(root_name, keyword)
        return roots

    def types_of_kind(self, *kinds: TypeKind, include_reserved: bool = False) -> list[SchemaType]:
        """Return types of the given kinds in declared order."""
        return [
            schema_type for schema_type in self.types
            if schema_type.kind in kinds and (include_reserved or not schema_type.is_reserved)
        ]

    def validate_integrity(self) -> None:
        """Check the structural invariants code generation relies on.

        Raises:
            SchemaIntegrityError: On duplicate names, unresolved references,
                or root types that are not object types
        """
        seen: set[str] = set()
        for schema_type in self.types:
            if schema_type.name in seen:
                raise SchemaIntegrityError(f"Type '{schema_type.name}' is defined more than once")
            seen.add(schema_type.name)

        for keyword, root_name in self._root_names():
            if not self.has_type(root_name):
                raise SchemaIntegrityError(f"{keyword} root type '{root_name}' is not defined")
            if self.get_type(root_name).kind is not TypeKind.OBJECT:
                raise SchemaIntegrityError(f"{keyword} root type '{root_name}' is not an OBJECT type")

        for owner, ref in self._iter_references():
            named = ref.named_type()
            if named.kind.is_wrapper or not named.name:
                raise SchemaIntegrityError(f"Unnamed type reference in '{owner}'")
            if named.name in BUILT_IN_SCALARS and named.kind is TypeKind.SCALAR:
                continue
            if not self.has_type(named.name):
                raise SchemaIntegrityError(
                    f"Type '{named.name}' referenced from '{owner}' is not defined"
                )

    def _root_names(self) -> Iterator[tuple[str, str]]:
        for keyword, root in (
            ("query", self.query_type),
            ("mutation", self.mutation_type),
            ("subscription", self.subscription_type),
        ):
            if root is not None:
                yield keyword, root.name

    def _iter_references(self) -> Iterator[tuple[str, TypeRef]]:
        for schema_type in self.types:
            for ref in schema_type.interfaces or ():
                yield schema_type.name, ref
            for ref in schema_type.possible_types or ():
                yield schema_type.name, ref
            for member in schema_type.members:
                yield f"{schema_type.name}.{member.name}", member.type
                for arg in getattr(member, "args", ()):
                    yield f"{schema_type.name}.{member.name}({arg.name})", arg.type


def parse_introspection(payload: str | bytes | Mapping[str, Any]) -> Schema:
    """Deserialize an introspection response into a Schema.

    Accepts the full response (``{"data": {"__schema": ...}}``) or just the
    result object (``{"__schema": ...}``), as a mapping or JSON text.

    Raises:
        SchemaIntegrityError: If the payload is not a GraphQL schema
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise SchemaIntegrityError(f"Introspection payload is not valid JSON: {e}") from e

    if not isinstance(payload, Mapping):
        raise SchemaIntegrityError("not a GraphQL schema")

    data = payload.get("data", payload)
    schema_payload = data.get("__schema") if isinstance(data, Mapping) else None
    if not isinstance(schema_payload, Mapping):
        raise SchemaIntegrityError("not a GraphQL schema")

    try:
        schema = Schema.model_validate(schema_payload)
    except ValidationError as e:
        raise SchemaIntegrityError(f"Malformed introspection schema: {e}") from e

    logger.debug("Parsed introspection schema with %d types", len(schema.types))
    return schema


def load_schema_from_sdl(sdl: str) -> Schema:
    """Build a Schema from SDL text using graphql-core."""
    try:
        graphql_schema = build_schema(sdl)
    except (GraphQLError, TypeError) as e:
        raise SchemaIntegrityError(f"Invalid schema definition: {e}") from e
    return parse_introspection(introspection_from_schema(graphql_schema))


def load_schema(path: str | Path) -> Schema:
    """Load a schema from an introspection JSON file or an SDL file."""
    path = Path(path)
    content = path.read_text(encoding="utf-8")
    logger.debug("Loading schema from %s", path)
    if path.suffix.lower() == ".json":
        return parse_introspection(content)
    return load_schema_from_sdl(content)
