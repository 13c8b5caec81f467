"""Custom scalar mapping for GraphQL code generation.

Every scalar other than ``Int``, ``Float``, ``Boolean`` and ``ID`` (including
``String``) is a custom scalar whose Python type comes from the configured
``custom_scalar_mapping`` callback. ``ScalarRegistry`` is the default
callback: it maps scalar names to handlers and answers its fallback type for
names it does not know.

Example usage:
    from gql_querygen.core.scalars import ScalarRegistry

    class MoneyHandler:
        python_type = "Decimal"
        import_statement = "from decimal import Decimal"

    registry = ScalarRegistry().register("Money", MoneyHandler())
    config = GeneratorConfiguration(custom_scalar_mapping=registry)
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .schema import SchemaType, TypeRef

# Type expressions that carry no type information
PLACEHOLDER_TYPES = ("Any", "typing.Any", "object")


def is_placeholder(expression: str | None) -> bool:
    """True if ``expression`` is the untyped placeholder."""
    return expression is not None and expression.strip() in PLACEHOLDER_TYPES


@runtime_checkable
class ScalarHandler(Protocol):
    """What a scalar maps to in generated code.

    Attributes:
        python_type: Type expression written into annotations, e.g. "Decimal"
        import_statement: Line the generated module needs for it, None for builtins
    """

    python_type: str
    import_statement: str | None


class StringHandler:
    python_type = "str"
    import_statement = None


class DateTimeHandler:
    """ISO 8601 timestamps, validated by pydantic as ``datetime``."""

    python_type = "datetime"
    import_statement = "from datetime import datetime"


class DateHandler:
    python_type = "date"
    import_statement = "from datetime import date"


class UUIDHandler:
    python_type = "UUID"
    import_statement = "from uuid import UUID"


class JSONHandler:
    """Arbitrary JSON; left untyped, which marks the member as complex."""

    python_type = "Any"
    import_statement = "from typing import Any"


DEFAULT_HANDLERS: dict[str, type[ScalarHandler]] = {
    "String": StringHandler,
    "DateTime": DateTimeHandler,
    "Date": DateHandler,
    "UUID": UUIDHandler,
    "JSON": JSONHandler,
    "JSONObject": JSONHandler,
}


class ScalarRegistry:
    """Scalar name to handler table, usable as a ``custom_scalar_mapping``.

    Each registry starts from its own copy of ``DEFAULT_HANDLERS``; handlers
    registered later replace defaults of the same name.
    """

    def __init__(self, fallback_type: str = "Any"):
        self.fallback_type = fallback_type
        self._handlers: dict[str, ScalarHandler] = {
            name: handler_class() for name, handler_class in DEFAULT_HANDLERS.items()
        }

    def register(self, scalar_name: str, handler: ScalarHandler) -> "ScalarRegistry":
        self._handlers[scalar_name] = handler
        return self

    def get(self, scalar_name: str) -> ScalarHandler | None:
        return self._handlers.get(scalar_name)

    def __contains__(self, scalar_name: str) -> bool:
        return scalar_name in self._handlers

    def import_statements(self) -> set[str]:
        """Imports of every registered handler that needs one."""
        return {
            handler.import_statement
            for handler in self._handlers.values()
            if handler.import_statement
        }

    def __call__(self, owner: "SchemaType", value_type: "TypeRef", member_name: str) -> str:
        handler = self._handlers.get(value_type.name or "")
        return self.fallback_type if handler is None else handler.python_type
