"""Enum class emission.

Each schema enum becomes a ``GraphQlEnum`` subclass. Members whose sanitized
name equals the wire value use ``auto()`` (the runtime base turns it into the
member name); all others spell the wire value out.
"""

from .context import INDENT, EmissionContext
from .naming import (
    safe_comment,
    string_literal,
    to_enum_member_name,
    unique_name,
    validate_class_name,
)
from .schema import SchemaType


class EnumEmitter:
    """Emits ``class Name(GraphQlEnum)`` definitions."""

    def __init__(self, context: EmissionContext):
        self.context = context

    def emit(self, enum_type: SchemaType) -> list[str]:
        class_name = validate_class_name(enum_type.name, "enum name")
        body = self.context.docstring(enum_type.description)

        description = self.context.description_literal(enum_type.description)
        if description:
            body.append(f"{INDENT}__description__ = {description}")

        used: set[str] = set()
        for value in enum_type.enum_values or ():
            member_name = unique_name(to_enum_member_name(value.name), used, "enum member name")
            body.extend(self.context.member_comments(value.description))

            if member_name == value.name:
                line = f"{INDENT}{member_name} = auto()"
            else:
                line = f"{INDENT}{member_name} = {string_literal(value.name)}"
            if value.is_deprecated:
                reason = safe_comment(value.deprecation_reason or "")
                line += f"  # deprecated: {reason}" if reason else "  # deprecated"
            body.append(line)

        if not body:
            body.append(f"{INDENT}pass")
        return [f"class {class_name}(GraphQlEnum):", *body]
