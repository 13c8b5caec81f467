"""Type resolution: schema type references to Python type expressions.

``TypeResolver.resolve`` unwraps NON_NULL and LIST wrappers recursively and
dispatches terminal named types on their kind. Scalars go through the
configured width/representation choices; every scalar that is not one of the
built-in ``Int``/``Float``/``Boolean``/``ID`` is resolved by the configured
``custom_scalar_mapping`` callback.
"""

from collections.abc import Collection
from dataclasses import dataclass

from .config import FloatType, GeneratorConfiguration, IdType, IntegerType, SyntaxStyle
from .errors import ConfigurationError, SchemaIntegrityError
from .scalars import is_placeholder
from .schema import Schema, SchemaType, TypeKind, TypeRef

PLACEHOLDER_TYPE = "Any"

INTEGER_TYPES = {
    IntegerType.INT16: "Int16",
    IntegerType.INT32: "Int32",
    IntegerType.INT64: "Int64",
}

FLOAT_TYPES = {
    FloatType.DECIMAL: "Decimal",
    FloatType.FLOAT: "float",
    FloatType.DOUBLE: "float",
}


@dataclass(frozen=True)
class ResolvedType:
    """Result of resolving a type reference.

    Attributes:
        expression: The Python type expression, without outer optionality
        nullable: False when the reference is wrapped in NON_NULL
        item: The resolved element type when the reference is a list
    """
    expression: str
    nullable: bool
    item: "ResolvedType | None" = None

    @property
    def is_list(self) -> bool:
        return self.item is not None


class TypeResolver:
    """Maps type references of one schema to Python type expressions.

    Args:
        schema: The schema the references belong to
        config: Type mapping configuration
        available_classes: When given, complex and input types whose generated
            class is not in this collection resolve to ``Any``
    """

    def __init__(
        self,
        schema: Schema,
        config: GeneratorConfiguration,
        available_classes: Collection[str] | None = None,
    ):
        self.schema = schema
        self.config = config
        self.available_classes = available_classes

    def restricted_to(self, available_classes: Collection[str]) -> "TypeResolver":
        """Return a resolver that only references the given generated classes."""
        return TypeResolver(self.schema, self.config, frozenset(available_classes))

    def resolve(self, type_ref: TypeRef, owner: SchemaType, member_name: str) -> ResolvedType:
        """Resolve ``type_ref`` declared by ``owner.member_name``."""
        nullable = not type_ref.is_non_null
        ref = type_ref.unwrap_non_null()

        if ref.is_list:
            item = self.resolve_list_item(ref.element_type(), owner, member_name)
            return ResolvedType(self.list_of(self.render(item)), nullable, item)

        return ResolvedType(self._named_type(ref, owner, member_name), nullable)

    def resolve_list_item(self, item_ref: TypeRef, owner: SchemaType, member_name: str) -> ResolvedType:
        """Resolve the element reference of a list.

        The scalar policy is asked for the item type as well; its answer wins
        unless it is the untyped placeholder, in which case the kind-derived
        type is kept. This only applies to list items.
        """
        resolved = self.resolve(item_ref, owner, member_name)
        if resolved.is_list:
            return resolved

        suggestion = self._suggest_item_type(item_ref.named_type(), owner, member_name)
        if suggestion is None or is_placeholder(suggestion) or suggestion == resolved.expression:
            return resolved
        return ResolvedType(suggestion, resolved.nullable)

    def scalar_type(self, ref: TypeRef, owner: SchemaType, member_name: str) -> str:
        """Resolve a SCALAR reference through the configured scalar policy."""
        name = ref.name
        if name == "Int":
            return INTEGER_TYPES[self.config.integer_type]
        if name == "Float":
            return FLOAT_TYPES[self.config.float_type]
        if name == "Boolean":
            return "bool"
        if name == "ID":
            return self._id_type(ref, owner, member_name)
        return self._custom_scalar_type(ref, owner, member_name)

    def is_untyped_scalar(self, type_ref: TypeRef, owner: SchemaType, member_name: str) -> bool:
        """True when ``type_ref`` is a scalar the policy maps to ``Any``."""
        ref = type_ref.unwrap_non_null()
        if ref.kind is not TypeKind.SCALAR:
            return False
        return is_placeholder(self.scalar_type(ref, owner, member_name))

    def render(self, resolved: ResolvedType, force_nullable: bool = False) -> str:
        """Render an annotation, adding optionality for nullable results."""
        if resolved.nullable or force_nullable:
            return self.optional(resolved.expression)
        return resolved.expression

    def optional(self, expression: str) -> str:
        if self.config.syntax is SyntaxStyle.MODERN:
            return f"{expression} | None"
        return f"Optional[{expression}]"

    def list_of(self, expression: str) -> str:
        if self.config.syntax is SyntaxStyle.MODERN:
            return f"list[{expression}]"
        return f"List[{expression}]"

    def _named_type(self, ref: TypeRef, owner: SchemaType, member_name: str) -> str:
        kind = ref.kind
        if kind.is_complex or kind is TypeKind.INPUT_OBJECT:
            class_name = self.config.class_name(ref.name)
            if self.available_classes is not None and class_name not in self.available_classes:
                return PLACEHOLDER_TYPE
            return class_name
        if kind is TypeKind.ENUM:
            return ref.name
        if kind is TypeKind.SCALAR:
            return self.scalar_type(ref, owner, member_name)
        raise SchemaIntegrityError(
            f"Cannot resolve type '{ref.describe()}' of '{owner.name}.{member_name}'"
        )

    def _id_type(self, ref: TypeRef, owner: SchemaType, member_name: str) -> str:
        id_type = self.config.id_type
        if id_type is IdType.STRING:
            return "str"
        if id_type is IdType.UUID:
            return "UUID"
        if id_type is IdType.OBJECT:
            return PLACEHOLDER_TYPE
        return self._custom_scalar_type(ref, owner, member_name)

    def _custom_scalar_type(self, ref: TypeRef, owner: SchemaType, member_name: str) -> str:
        mapping = self.config.custom_scalar_mapping
        if mapping is None:
            raise ConfigurationError(
                f"'custom_scalar_mapping' missing; cannot resolve scalar '{ref.name}' "
                f"of '{owner.name}.{member_name}'",
                key="custom_scalar_mapping",
                type_name=owner.name,
                member_name=member_name,
            )

        python_type = mapping(owner, ref, member_name)
        if not python_type or not python_type.strip():
            raise ConfigurationError(
                f"Python type for '{owner.name}.{member_name}' ({ref.name}) cannot be resolved. "
                f"Please check the 'custom_scalar_mapping' implementation.",
                key="custom_scalar_mapping",
                type_name=owner.name,
                member_name=member_name,
            )
        return python_type.strip()

    def _suggest_item_type(self, named: TypeRef, owner: SchemaType, member_name: str) -> str | None:
        if named.kind is TypeKind.SCALAR:
            return self.scalar_type(named, owner, member_name)
        mapping = self.config.custom_scalar_mapping
        if mapping is None:
            return None
        return mapping(owner, named, member_name)
