"""Core modules for GraphQL query builder generation."""

from .closure import find_input_reachable_types, find_referenced_object_types
from .config import (
    CommentGeneration,
    FloatType,
    GeneratorConfiguration,
    IdType,
    IntegerType,
    ScalarTypeMapping,
    SyntaxStyle,
)
from .errors import (
    ConfigurationError,
    GeneratedCodeError,
    GeneratorError,
    IdentifierError,
    SchemaFetchError,
    SchemaIntegrityError,
)
from .fetcher import fetch_schema
from .generator import QueryBuilderGenerator
from .hooks import (
    AddHeaderHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .scalars import (
    DateHandler,
    DateTimeHandler,
    JSONHandler,
    ScalarHandler,
    ScalarRegistry,
    StringHandler,
    UUIDHandler,
)
from .schema import (
    EnumValue,
    Field,
    InputValue,
    Schema,
    SchemaType,
    TypeKind,
    TypeRef,
    load_schema,
    load_schema_from_sdl,
    parse_introspection,
)
from .type_resolver import ResolvedType, TypeResolver

__all__ = [
    # Schema
    "EnumValue",
    "Field",
    "InputValue",
    "Schema",
    "SchemaType",
    "TypeKind",
    "TypeRef",
    "load_schema",
    "load_schema_from_sdl",
    "parse_introspection",
    "fetch_schema",
    # Configuration
    "CommentGeneration",
    "FloatType",
    "GeneratorConfiguration",
    "IdType",
    "IntegerType",
    "ScalarTypeMapping",
    "SyntaxStyle",
    # Scalars
    "ScalarHandler",
    "ScalarRegistry",
    "StringHandler",
    "DateTimeHandler",
    "DateHandler",
    "UUIDHandler",
    "JSONHandler",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterTypesHook",
    "HookRunner",
    # Generation
    "QueryBuilderGenerator",
    "ResolvedType",
    "TypeResolver",
    "find_input_reachable_types",
    "find_referenced_object_types",
    # Errors
    "GeneratorError",
    "ConfigurationError",
    "SchemaIntegrityError",
    "IdentifierError",
    "GeneratedCodeError",
    "SchemaFetchError",
]
