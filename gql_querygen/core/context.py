"""Per-run state shared by the emitters.

An ``EmissionContext`` is created once per generation from the (already
pre-hooked and validated) schema and the configuration. It is read-only;
emitters return the lines they produce and never write into it.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .closure import find_input_reachable_types
from .config import CommentGeneration, GeneratorConfiguration
from .naming import safe_comment, safe_docstring, string_literal, validate_class_name
from .schema import Field, InputValue, Schema, SchemaType, TypeKind
from .type_resolver import TypeResolver

INDENT = "    "


@dataclass(frozen=True)
class EmissionContext:
    """Schema, configuration and derived lookups for one generation run.

    Attributes:
        schema: The schema being generated
        config: Generator configuration
        resolver: Type resolver over ``schema``
        input_reachable_types: OBJECT types that may appear inside input values
        root_operations: Root type name -> operation keyword
    """

    schema: Schema
    config: GeneratorConfiguration
    resolver: TypeResolver
    input_reachable_types: frozenset[str]
    root_operations: Mapping[str, str]

    @classmethod
    def create(cls, schema: Schema, config: GeneratorConfiguration) -> "EmissionContext":
        return cls(
            schema=schema,
            config=config,
            resolver=TypeResolver(schema, config),
            input_reachable_types=find_input_reachable_types(schema),
            root_operations=MappingProxyType(schema.root_operations()),
        )

    def class_name(self, type_name: str) -> str:
        """Validated generated class name for a schema type."""
        return validate_class_name(self.config.class_name(type_name), "class name")

    def is_input_capable(self, schema_type: SchemaType) -> bool:
        return (
            schema_type.kind is TypeKind.INPUT_OBJECT
            or schema_type.name in self.input_reachable_types
        )

    def fields_to_generate(self, schema_type: SchemaType) -> list[Field | InputValue]:
        """Members of ``schema_type`` that are emitted, in declared order."""
        return [
            member for member in schema_type.members
            if self.config.include_deprecated_fields
            or not getattr(member, "is_deprecated", False)
        ]

    def docstring(self, description: str | None, indent: str = INDENT) -> list[str]:
        """Docstring lines for ``description`` when code summaries are enabled."""
        if CommentGeneration.CODE_SUMMARY not in self.config.comment_generation:
            return []
        text = _normalize(description)
        if not text:
            return []

        lines = safe_docstring(text).split("\n")
        if len(lines) == 1:
            return [f'{indent}"""{lines[0]}"""']
        result = [f'{indent}"""{lines[0]}']
        result.extend(f"{indent}{line}" if line else "" for line in lines[1:])
        result.append(f'{indent}"""')
        return result

    def member_comments(self, description: str | None, indent: str = INDENT) -> list[str]:
        """``#:`` comment lines documenting a property or enum member."""
        if CommentGeneration.CODE_SUMMARY not in self.config.comment_generation:
            return []
        text = _normalize(description)
        return [f"{indent}#: {safe_comment(line)}" for line in text.split("\n") if line.strip()]

    def description_literal(self, description: str | None) -> str | None:
        """String literal carrying ``description``, or None when not emitted."""
        if CommentGeneration.DESCRIPTION_ATTRIBUTE not in self.config.comment_generation:
            return None
        text = _normalize(description)
        return string_literal(text) if text else None


def _normalize(description: str | None) -> str:
    if not description:
        return ""
    lines = [line.strip() for line in description.replace("\r\n", "\n").split("\n")]
    return "\n".join(lines).strip()
