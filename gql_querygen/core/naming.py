"""Naming policy: deterministic string transforms for generated identifiers."""

import json
import keyword
import re

from .errors import IdentifierError

# Names a generated selection method reserves for its own parameters
RESERVED_PARAMETER_NAMES = {"self", "alias", "args"}

# Names Enum refuses as member names
RESERVED_ENUM_MEMBER_NAMES = {"mro"}

ENUM_FALLBACK_NAME = "VALUE"

_INVALID_IDENTIFIER_CHARS = re.compile(r"[^0-9A-Za-z_]")


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def pascal_case(name: str) -> str:
    """Convert camelCase or snake_case to PascalCase.

    Only the first letter of each underscore-separated part is changed, so
    ``userName`` becomes ``UserName`` and ``created_at`` becomes ``CreatedAt``.
    """
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


def camel_case(name: str) -> str:
    """Convert to camelCase (PascalCase with a lower-case first letter)."""
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def to_enum_member_name(name: str) -> str:
    """Turn an enum wire value into a usable Enum member name.

    Invalid characters become underscores, leading digits get an underscore
    prefix, keywords get an underscore suffix, and names with nothing usable
    left fall back to ``VALUE``. The wire value itself is kept by the caller.
    """
    candidate = _INVALID_IDENTIFIER_CHARS.sub("_", name).strip("_")
    if not candidate:
        candidate = ENUM_FALLBACK_NAME
    elif candidate[0].isdigit():
        candidate = f"_{candidate}"
    if keyword.iskeyword(candidate) or candidate in RESERVED_ENUM_MEMBER_NAMES:
        candidate = f"{candidate}_"
    return candidate


def unique_name(base: str, used: set[str], what: str) -> str:
    """Return ``base``, or ``base_2``, ``base_3``... if taken, and record it in ``used``.

    Raises:
        IdentifierError: If the chosen name is not a legal Python identifier
    """
    candidate = base
    counter = 2
    while candidate in used:
        candidate = f"{base}_{counter}"
        counter += 1
    used.add(candidate)
    return validate_identifier(candidate, what)


def safe_param_name(name: str) -> str:
    """Make a parameter name safe for Python by suffixing keywords with underscore."""
    if keyword.iskeyword(name) or name in RESERVED_PARAMETER_NAMES:
        return f"{name}_"
    return name


def is_valid_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def validate_identifier(name: str, what: str) -> str:
    """Return ``name`` unchanged, or raise if it cannot be emitted.

    Raises:
        IdentifierError: If ``name`` is not a legal Python identifier
    """
    if not is_valid_identifier(name):
        raise IdentifierError(name, what)
    return name


def safe_docstring(text: str) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def safe_comment(text: str) -> str:
    """Make text safe for a single-line Python comment.

    Removes newlines and collapses whitespace so the text cannot escape the
    comment.
    """
    if not text:
        return ""
    text = text.replace("\n", " ").replace("\r", "")
    return re.sub(r"\s+", " ", text).strip()


def string_literal(text: str) -> str:
    """Render ``text`` as a double-quoted Python string literal."""
    return json.dumps(text, ensure_ascii=False)


# Names bound by the runtime preamble of every generated module
PREAMBLE_NAMES = frozenset({
    "ABC", "Annotated", "Any", "BaseModel", "ClassVar", "ConfigDict", "Decimal", "Dict",
    "Enum", "Field", "FieldMetadata", "Formatting", "GraphQlEnum", "GraphQlInputObject",
    "GraphQlModel", "GraphQlQueryBuilder", "InputPropertyInfo", "Int16", "Int32", "Int64",
    "Iterable", "Iterator", "List", "Mapping", "NamedTuple", "Optional", "Tuple", "Type",
    "UUID", "abstractmethod", "annotations", "auto", "build_argument_value", "dataclass",
    "date", "datetime", "json", "time", "_FieldCriteria", "_ObjectFieldCriteria",
    "_build_arguments", "_build_object",
})

# Builtins used by the preamble or by generated annotations
PREAMBLE_BUILTINS = frozenset({
    "TypeError", "bool", "dict", "float", "frozenset", "int", "isinstance", "list",
    "object", "str", "super", "tuple", "type",
})

RESERVED_CLASS_NAMES = PREAMBLE_NAMES | PREAMBLE_BUILTINS


def validate_class_name(name: str, what: str) -> str:
    """Like ``validate_identifier``, also rejecting names the preamble binds.

    Raises:
        IdentifierError: If ``name`` is not usable as a top-level class name
    """
    if name in RESERVED_CLASS_NAMES:
        raise IdentifierError(name, what, reason="clashes with a name of the generated module runtime")
    return validate_identifier(name, what)
