"""Data and input class emission.

Every input object and every complex type with emittable fields (or that can
appear inside an input value) becomes a pydantic model. Properties are
PascalCase, aliased to the wire name, and always optional because responses
only carry the selected fields.

Interfaces additionally produce a capability class ``I<Name>`` holding the
property annotations only; implementing objects inherit it.

pydantic evaluates annotations with the class body as local namespace, so a
property named like a type its class references (``Status: Optional[Status]``)
would resolve to the property's default. Such references go through a
module-level alias (``_Status``) bound before the models are rebuilt.
"""

import keyword
import logging
import re

from .context import INDENT, EmissionContext
from .naming import pascal_case, string_literal, unique_name, validate_class_name
from .schema import SchemaType, TypeKind
from .type_resolver import TypeResolver

logger = logging.getLogger(__name__)

# Config is interpreted by pydantic; Field is called by later lines of the class body
RESERVED_PROPERTY_NAMES = {"Config", "Field"}

# Used for wire names with no letters or digits (``_``), and as prefix before a leading digit
PROPERTY_FALLBACK_NAME = "Value"

# Names in an annotation that are not attribute lookups (``typing.Any`` keeps ``Any``)
_ANNOTATION_NAME = re.compile(r"(?<![\w.])[A-Za-z_]\w*")


def property_name(wire_name: str) -> str:
    """PascalCase property for a wire name; the wire name itself stays in ``alias=``."""
    name = pascal_case(wire_name)
    if not name or name[0].isdigit():
        name = f"{PROPERTY_FALLBACK_NAME}{name}"
    if name in RESERVED_PROPERTY_NAMES or keyword.iskeyword(name):
        name = f"{name}_"
    return name


def property_names(wire_names) -> list[str]:
    """Property names for the members of one class, suffixed ``_2``, ``_3``... on collision."""
    used: set[str] = set()
    return [unique_name(property_name(wire_name), used, "property name") for wire_name in wire_names]


def shadow_alias(name: str) -> str:
    """Module-level alias used where ``name`` is shadowed by a property."""
    return f"_{name}"


class DataClassEmitter:
    """Emits pydantic models for input and response data.

    Args:
        context: The emission context of the run
        resolver: Resolver restricted to the classes this module defines
    """

    def __init__(self, context: EmissionContext, resolver: TypeResolver):
        self.context = context
        self.resolver = resolver
        # Names referenced through shadow_alias by the classes emitted so far
        self.aliased_names: set[str] = set()

    def interface_name(self, schema_type: SchemaType) -> str:
        return validate_class_name(f"I{self.context.class_name(schema_type.name)}", "interface name")

    def emit_interface(self, schema_type: SchemaType) -> list[str]:
        """Capability class with bare annotations for an interface."""
        lines = [f"class {self.interface_name(schema_type)}(GraphQlModel):"]
        body = self.context.docstring(schema_type.description)
        fields = self.context.fields_to_generate(schema_type)
        for field, name in zip(fields, property_names(field.name for field in fields)):
            resolved = self.resolver.resolve(field.type, schema_type, field.name)
            annotation = self.resolver.render(resolved, force_nullable=True)
            body.append(f"{INDENT}{name}: {annotation}")
        if not body:
            body.append(f"{INDENT}pass")
        return lines + body

    def emit(self, schema_type: SchemaType, interface_bases: list[str]) -> list[str]:
        """Model class for an object, interface, union or input object.

        Args:
            schema_type: The type to emit
            interface_bases: Capability classes the model inherits
        """
        class_name = self.context.class_name(schema_type.name)
        input_capable = self.context.is_input_capable(schema_type)
        fields = self.context.fields_to_generate(schema_type)

        bases = list(interface_bases) or ["GraphQlModel"]
        if input_capable:
            bases.append("GraphQlInputObject")

        body = self.context.docstring(schema_type.description)
        description = self.context.description_literal(schema_type.description)
        if description:
            body.append(f"{INDENT}__description__ = {description}")

        wire_names = [field.name for field in fields]
        properties = list(zip(wire_names, property_names(wire_names)))
        shadowed = {name for _, name in properties}
        for field, (_, name) in zip(fields, properties):
            body.extend(self.context.member_comments(field.description))
            body.append(self._property(schema_type, field, name, input_capable, shadowed))

        if input_capable:
            if body:
                body.append("")
            body.extend(self._property_values_method(properties))

        if not body:
            body.append(f"{INDENT}pass")
        logger.debug("Emitting data class %s (%d properties)", class_name, len(properties))
        return [f"class {class_name}({', '.join(bases)}):", *body]

    def _property(self, owner: SchemaType, field, name: str, input_capable: bool, shadowed: set[str]) -> str:
        resolved = self.resolver.resolve(field.type, owner, field.name)
        annotation = self._unshadow(self.resolver.render(resolved, force_nullable=True), shadowed)

        arguments = []
        if name != field.name:
            arguments.append(f"alias={string_literal(field.name)}")
        description = self.context.description_literal(field.description)
        if description:
            arguments.append(f"description={description}")
        if getattr(field, "is_deprecated", False) and not input_capable:
            reason = field.deprecation_reason
            arguments.append(f"deprecated={string_literal(reason) if reason else 'True'}")

        if not arguments:
            return f"{INDENT}{name}: {annotation} = None"
        return f"{INDENT}{name}: {annotation} = Field(default=None, {', '.join(arguments)})"

    def _unshadow(self, annotation: str, shadowed: set[str]) -> str:
        def replace(match: re.Match) -> str:
            name = match.group(0)
            if name not in shadowed:
                return name
            self.aliased_names.add(name)
            return shadow_alias(name)

        return _ANNOTATION_NAME.sub(replace, annotation)

    @staticmethod
    def _property_values_method(properties: list[tuple[str, str]]) -> list[str]:
        lines = [f"{INDENT}def get_property_values(self) -> Iterator[InputPropertyInfo]:"]
        if not properties:
            lines.append(f"{INDENT * 2}yield from ()")
        for wire_name, name in properties:
            lines.append(f"{INDENT * 2}yield InputPropertyInfo({string_literal(wire_name)}, self.{name})")
        return lines


def should_emit(context: EmissionContext, schema_type: SchemaType) -> bool:
    """True when ``schema_type`` produces a data or input class."""
    if schema_type.kind is TypeKind.INPUT_OBJECT:
        return True
    return bool(context.fields_to_generate(schema_type)) or context.is_input_capable(schema_type)
