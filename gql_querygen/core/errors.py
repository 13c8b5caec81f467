"""Exceptions raised while loading schemas and generating code.

Generation is all-or-nothing: every error below aborts the run before any
output is returned or written.
"""

from __future__ import annotations

from typing import Optional


class GeneratorError(Exception):
    """Base class for all gql-querygen errors."""


class ConfigurationError(GeneratorError):
    """Raised when the generator configuration cannot satisfy the schema.

    Attributes:
        key: The configuration key at fault (e.g. ``custom_scalar_mapping``)
        type_name: The schema type being generated, if any
        member_name: The field/argument being generated, if any
    """

    def __init__(
        self,
        message: str,
        key: str,
        type_name: Optional[str] = None,
        member_name: Optional[str] = None,
    ):
        super().__init__(message)
        self.key = key
        self.type_name = type_name
        self.member_name = member_name


class SchemaIntegrityError(GeneratorError):
    """Raised when a payload or schema lacks the expected structure."""


class IdentifierError(GeneratorError):
    """Raised when a computed name is not a legal Python identifier."""

    def __init__(self, name: str, what: str, reason: Optional[str] = None):
        super().__init__(f"Resulting {what} '{name}' {reason or 'is not a valid Python identifier'}")
        self.name = name
        self.what = what


class GeneratedCodeError(GeneratorError):
    """Raised when the assembled module does not parse as Python."""


class SchemaFetchError(GeneratorError):
    """Raised when the introspection request fails or gets a non-success status.

    ``status_code`` is None when no response arrived (connection errors, timeouts).
    """

    def __init__(self, status_code: int | None, body_snippet: str, message: str | None = None):
        super().__init__(message or f"Unexpected HTTP status {status_code}; content: {body_snippet}")
        self.status_code = status_code
        self.body_snippet = body_snippet
