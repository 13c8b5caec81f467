"""Selection builder emission.

Every complex type gets a ``GraphQlQueryBuilder`` subclass with one
``with_<field>`` and one ``except_<field>`` method per field, plus the field
metadata used by ``include_all_fields``. Root types also carry the operation
keyword as ``_PREFIX``.
"""

import logging

from .context import INDENT, EmissionContext
from .naming import safe_param_name, snake_case, string_literal, unique_name, validate_class_name
from .schema import Field, InputValue, SchemaType, TypeKind, TypeRef

logger = logging.getLogger(__name__)

BUILDER_SUFFIX = "QueryBuilder"

_ARGUMENT_KINDS = (TypeKind.SCALAR, TypeKind.ENUM, TypeKind.INPUT_OBJECT)


def is_supported_argument_type(type_ref: TypeRef) -> bool:
    """True for scalar, enum and input object types, or lists of them."""
    ref = type_ref.unwrap_non_null()
    if ref.is_list:
        return is_supported_argument_type(ref.element_type())
    return ref.kind in _ARGUMENT_KINDS


class QueryBuilderEmitter:
    """Emits ``<Type>QueryBuilder`` classes."""

    def __init__(self, context: EmissionContext):
        self.context = context

    def builder_name(self, type_name: str) -> str:
        config = self.context.config
        name = config.custom_class_name_mapping.get(type_name, type_name)
        return validate_class_name(f"{name}{BUILDER_SUFFIX}{config.class_suffix}", "query builder name")

    def emit(self, schema_type: SchemaType) -> list[str]:
        class_name = self.builder_name(schema_type.name)
        # Deprecated fields stay selectable; include_deprecated_fields only affects data classes
        fields = list(schema_type.fields or ())

        lines = [f"class {class_name}(GraphQlQueryBuilder):"]
        lines.extend(self.context.docstring(schema_type.description))
        lines.extend(self._metadata(schema_type, fields))

        prefix = self.context.root_operations.get(schema_type.name)
        if prefix:
            lines.append(f"{INDENT}_PREFIX = {string_literal(prefix)}")

        used_methods: set[str] = set()
        for field in fields:
            suffix = self._method_suffix(field, used_methods)
            lines.append("")
            lines.extend(self._with_method(schema_type, class_name, field, suffix))
            lines.append("")
            lines.extend(self._except_method(class_name, field, suffix))

        logger.debug("Emitting query builder %s (%d fields)", class_name, len(fields))
        return lines

    def _metadata(self, owner: SchemaType, fields: list[Field]) -> list[str]:
        if not fields:
            return [f"{INDENT}_ALL_FIELD_METADATA = ()"]

        lines = [f"{INDENT}_ALL_FIELD_METADATA = ("]
        for field in fields:
            named = field.type.named_type()
            arguments = [string_literal(field.name)]
            if named.kind.is_complex:
                arguments.append("is_complex=True")
                arguments.append(f"query_builder_type={string_literal(self.builder_name(named.name))}")
            elif (
                not self.context.config.treat_unknown_object_as_scalar
                and self.context.resolver.is_untyped_scalar(named, owner, field.name)
            ):
                arguments.append("is_complex=True")
            lines.append(f"{INDENT * 2}FieldMetadata({', '.join(arguments)}),")
        lines.append(f"{INDENT})")
        return lines

    @staticmethod
    def _method_suffix(field: Field, used: set[str]) -> str:
        """Snake-case name shared by the field's ``with_``/``except_`` pair."""
        method_name = unique_name(f"with_{snake_case(field.name)}", used, "method name")
        return method_name[len("with_"):]

    def _with_method(self, owner: SchemaType, class_name: str, field: Field, suffix: str) -> list[str]:
        method_name = f"with_{suffix}"
        named = field.type.named_type()
        is_object = named.kind.is_complex

        used: set[str] = set()
        arguments = [arg for arg in field.args if is_supported_argument_type(arg.type)]
        required = [arg for arg in arguments if arg.type.is_non_null]
        optional = [arg for arg in arguments if not arg.type.is_non_null]

        parameters = ["self"]
        required_names = [self._parameter(owner, arg, used, parameters) for arg in required]

        builder_parameter = None
        if is_object:
            builder_type = self.builder_name(named.name)
            base = snake_case(self.context.config.custom_class_name_mapping.get(named.name, named.name))
            builder_parameter = unique_name(safe_param_name(f"{base}_query_builder"), used, "parameter name")
            parameters.append(f"{builder_parameter}: {builder_type}")

        optional_names = [self._parameter(owner, arg, used, parameters) for arg in optional]
        if not is_object:
            parameters.append(f"alias: {self.context.resolver.optional('str')} = None")

        lines = [f"{INDENT}def {method_name}({', '.join(parameters)}) -> {class_name}:"]
        body = INDENT * 2
        args_name = "args" if arguments else "None"
        if arguments:
            lines.append(f"{body}args = {{}}")
            for arg, name in zip(required, required_names):
                lines.append(f"{body}args[{string_literal(arg.name)}] = {name}")
            for arg, name in zip(optional, optional_names):
                lines.append(f"{body}if {name} is not None:")
                lines.append(f"{body}{INDENT}args[{string_literal(arg.name)}] = {name}")

        wire_name = string_literal(field.name)
        if is_object:
            lines.append(f"{body}return self._with_object_field({wire_name}, {builder_parameter}, {args_name})")
        else:
            lines.append(f"{body}return self._with_scalar_field({wire_name}, alias, {args_name})")
        return lines

    def _parameter(self, owner: SchemaType, arg: InputValue, used: set[str], parameters: list[str]) -> str:
        name = unique_name(safe_param_name(snake_case(arg.name)), used, "parameter name")
        resolved = self.context.resolver.resolve(arg.type, owner, arg.name)
        annotation = self.context.resolver.render(resolved)
        if arg.type.is_non_null:
            parameters.append(f"{name}: {annotation}")
        else:
            parameters.append(f"{name}: {annotation} = None")
        return name

    @staticmethod
    def _except_method(class_name: str, field: Field, suffix: str) -> list[str]:
        return [
            f"{INDENT}def except_{suffix}(self) -> {class_name}:",
            f"{INDENT * 2}return self._except_field({string_literal(field.name)})",
        ]
