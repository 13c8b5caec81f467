"""Extension points around module generation.

A pre-generate hook swaps the schema for another one before anything is
emitted (typically a filtered copy); a post-generate hook rewrites the
finished module text before it is syntax-checked.

Example usage:
    from gql_querygen.core.hooks import HookRunner, FilterTypesHook, AddHeaderHook

    hooks = HookRunner()
    hooks.add_pre_hook(FilterTypesHook(exclude_prefix="Internal"))
    hooks.add_post_hook(AddHeaderHook("Copyright 2024 My Company"))
    QueryBuilderGenerator(schema, hooks=hooks).generate()
"""

import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from .schema import BUILT_IN_SCALARS, Schema, TypeKind

logger = logging.getLogger(__name__)


@runtime_checkable
class PreGenerateHook(Protocol):
    """Receives the loaded schema and returns the schema to generate from.

    Schemas are frozen, so a hook returns a new one (``Schema.with_types``,
    ``model_copy``) rather than editing its argument.

    Example:
        class DropSubscriptions:
            def pre_generate(self, schema: Schema) -> Schema:
                return schema.model_copy(update={"subscription_type": None})
    """

    def pre_generate(self, schema: Schema) -> Schema:
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Receives the assembled module text and returns replacement text.

    The result still has to parse as Python; otherwise generation fails with
    ``GeneratedCodeError``.

    Example:
        class FormatWithBlack:
            def post_generate(self, filename: str, content: str) -> str:
                import black
                return black.format_str(content, mode=black.FileMode())
    """

    def post_generate(self, filename: str, content: str) -> str:
        ...


class AddHeaderHook:
    """Prepends a comment block to the generated module.

    Header lines that are not comments yet are turned into comments, so
    plain text such as a license notice can be passed as is.

    Example:
        hook = AddHeaderHook("Auto-generated - do not edit")
    """

    def __init__(self, header: str):
        self.header = header

    def post_generate(self, _filename: str, content: str) -> str:
        lines = [
            line if not line.strip() or line.lstrip().startswith("#") else f"# {line}"
            for line in self.header.rstrip("\n").split("\n")
        ]
        return "\n".join(lines) + "\n\n" + content


class FilterTypesHook:
    """Drops schema types by name prefix/suffix or kind.

    A type is kept when it passes every configured criterion. Root operation
    types, built-in scalars and introspection types are never dropped.
    Dropping a type that kept types still reference makes generation fail the
    schema integrity check.

    Example:
        # Remove every type starting with "Internal" plus all unions
        hook = FilterTypesHook(exclude_prefix="Internal", exclude_kinds=[TypeKind.UNION])
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
        exclude_kinds: Iterable[TypeKind] = (),
    ):
        self.exclude_prefix = exclude_prefix
        self.exclude_suffix = exclude_suffix
        self.include_prefix = include_prefix
        self.include_suffix = include_suffix
        self.exclude_kinds = frozenset(exclude_kinds)

    def matches(self, name: str, kind: TypeKind) -> bool:
        """True when a type with this name and kind passes the filter."""
        if kind in self.exclude_kinds:
            return False
        if self.exclude_prefix and name.startswith(self.exclude_prefix):
            return False
        if self.exclude_suffix and name.endswith(self.exclude_suffix):
            return False
        if self.include_prefix and not name.startswith(self.include_prefix):
            return False
        if self.include_suffix and not name.endswith(self.include_suffix):
            return False
        return True

    def pre_generate(self, schema: Schema) -> Schema:
        protected = set(schema.root_operations()) | set(BUILT_IN_SCALARS)
        kept = tuple(
            schema_type for schema_type in schema.types
            if schema_type.is_reserved
            or schema_type.name in protected
            or self.matches(schema_type.name, schema_type.kind)
        )
        logger.debug("FilterTypesHook dropped %d types", len(schema.types) - len(kept))
        return schema.with_types(kept)


class HookRunner:
    """Ordered pre- and post-generate hooks of one generator."""

    def __init__(
        self,
        pre_hooks: Iterable[PreGenerateHook] = (),
        post_hooks: Iterable[PostGenerateHook] = (),
    ):
        self.pre_hooks: list[PreGenerateHook] = list(pre_hooks)
        self.post_hooks: list[PostGenerateHook] = list(post_hooks)

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, schema: Schema) -> Schema:
        """Thread the schema through every pre hook, in registration order."""
        for hook in self.pre_hooks:
            schema = hook.pre_generate(schema)
        return schema

    def run_post_hooks(self, filename: str, content: str) -> str:
        """Thread the module text through every post hook, in registration order."""
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
