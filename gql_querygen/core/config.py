"""Generator configuration.

A ``GeneratorConfiguration`` is built once before a run and is read-only
while generating. Mappings are copied into read-only proxies and the default
scalar registry is created per instance, so separate runs never share
mutable configuration state.

Example:
    config = GeneratorConfiguration(
        id_type=IdType.UUID,
        class_suffix="Dto",
        custom_class_name_mapping={"User": "Account"},
        comment_generation=CommentGeneration.ALL,
    )
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum, Flag
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .errors import ConfigurationError
from .scalars import ScalarRegistry

if TYPE_CHECKING:
    from .schema import SchemaType, TypeRef

# (owner type, scalar type reference, field/argument name) -> Python type expression
ScalarTypeMapping = Callable[["SchemaType", "TypeRef", str], "str | None"]


class IntegerType(str, Enum):
    """Integer width used for the Int scalar."""
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"


class FloatType(str, Enum):
    """Python representation of the Float scalar."""
    DECIMAL = "decimal"
    FLOAT = "float"
    DOUBLE = "double"


class IdType(str, Enum):
    """Python representation of the ID scalar."""
    STRING = "string"
    UUID = "uuid"
    OBJECT = "object"
    CUSTOM = "custom"


class SyntaxStyle(str, Enum):
    """Annotation syntax of the generated module.

    COMPATIBLE emits ``Optional[X]``/``List[X]``; MODERN emits ``X | None``/
    ``list[X]``. The choice never changes what is generated, only how.
    """
    COMPATIBLE = "compatible"
    MODERN = "modern"


class CommentGeneration(Flag):
    """Which documentation is emitted for schema descriptions."""
    DISABLED = 0
    CODE_SUMMARY = 1
    DESCRIPTION_ATTRIBUTE = 2
    ALL = 3


def _coerce_choice(enum_type: type[Enum], value: Any, key: str) -> Any:
    if isinstance(value, enum_type):
        return value
    try:
        if isinstance(value, str):
            return enum_type(value.lower())
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(
            f"Invalid value {value!r} for '{key}'; expected one of: {choices}", key=key
        ) from None


def _coerce_comment_generation(value: Any) -> CommentGeneration:
    if isinstance(value, CommentGeneration):
        return value
    if isinstance(value, str):
        result = CommentGeneration.DISABLED
        for part in filter(None, (p.strip().upper() for p in value.split(","))):
            if part == "NONE":
                continue
            try:
                result |= CommentGeneration[part]
            except KeyError:
                raise ConfigurationError(
                    f"Invalid value {value!r} for 'comment_generation'", key="comment_generation"
                ) from None
        return result
    raise ConfigurationError(
        f"Invalid value {value!r} for 'comment_generation'", key="comment_generation"
    )


@dataclass(frozen=True)
class GeneratorConfiguration:
    """Options controlling type mapping, naming and emitted documentation.

    Attributes:
        integer_type: Width of the Int scalar
        float_type: Representation of the Float scalar
        id_type: Representation of the ID scalar
        custom_scalar_mapping: Callback resolving every other scalar; None
            makes any custom scalar a configuration error
        custom_class_name_mapping: Schema type name -> generated class name
        class_suffix: Suffix appended to every generated class name
        include_deprecated_fields: Emit deprecated fields, marked deprecated
        comment_generation: Documentation emitted for descriptions
        syntax: Annotation syntax of the generated module
        treat_unknown_object_as_scalar: Untyped scalar fields count as scalar
            fields in selection metadata
        additional_imports: Extra import statements for the generated module
    """

    integer_type: IntegerType = IntegerType.INT32
    float_type: FloatType = FloatType.DOUBLE
    id_type: IdType = IdType.STRING
    custom_scalar_mapping: ScalarTypeMapping | None = field(default_factory=ScalarRegistry)
    custom_class_name_mapping: Mapping[str, str] = field(default_factory=dict)
    class_suffix: str = ""
    include_deprecated_fields: bool = False
    comment_generation: CommentGeneration = CommentGeneration.CODE_SUMMARY
    syntax: SyntaxStyle = SyntaxStyle.COMPATIBLE
    treat_unknown_object_as_scalar: bool = False
    additional_imports: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "integer_type", _coerce_choice(IntegerType, self.integer_type, "integer_type"))
        object.__setattr__(self, "float_type", _coerce_choice(FloatType, self.float_type, "float_type"))
        object.__setattr__(self, "id_type", _coerce_choice(IdType, self.id_type, "id_type"))
        object.__setattr__(self, "syntax", _coerce_choice(SyntaxStyle, self.syntax, "syntax"))
        object.__setattr__(self, "comment_generation", _coerce_comment_generation(self.comment_generation))
        object.__setattr__(
            self, "custom_class_name_mapping", MappingProxyType(dict(self.custom_class_name_mapping))
        )
        object.__setattr__(self, "additional_imports", tuple(self.additional_imports))

        if self.custom_scalar_mapping is not None and not callable(self.custom_scalar_mapping):
            raise ConfigurationError(
                "'custom_scalar_mapping' must be callable", key="custom_scalar_mapping"
            )

    def class_name(self, type_name: str) -> str:
        """Generated class name for a schema type (rename table, then suffix)."""
        return f"{self.custom_class_name_mapping.get(type_name, type_name)}{self.class_suffix}"

    def import_statements(self) -> set[str]:
        """Import statements the generated module needs beyond its preamble."""
        statements = set(self.additional_imports)
        if isinstance(self.custom_scalar_mapping, ScalarRegistry):
            statements |= self.custom_scalar_mapping.import_statements()
        return statements
