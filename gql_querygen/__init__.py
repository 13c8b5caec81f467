"""Generate typed GraphQL query builders for Python from a GraphQL schema."""

__version__ = "0.1.0"
