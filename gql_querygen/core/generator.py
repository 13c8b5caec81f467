"""Query builder generator for GraphQL schemas.

Turns a ``Schema`` into a single Python module: a runtime preamble rendered
from a Jinja2 template, followed by enums, input classes, data classes and
selection builders, each section delimited by ``# region`` comments.

Supports custom templates via the template_dir parameter:
    generator = QueryBuilderGenerator(schema, config, template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import ast
import logging
from pathlib import Path
from typing import Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .config import GeneratorConfiguration
from .context import EmissionContext
from .data_class_emitter import DataClassEmitter, shadow_alias, should_emit
from .enum_emitter import EnumEmitter
from .errors import GeneratedCodeError, IdentifierError
from .hooks import HookRunner
from .query_builder_emitter import QueryBuilderEmitter
from .schema import Schema, SchemaType, TypeKind

logger = logging.getLogger(__name__)

PREAMBLE_TEMPLATE = "base_classes.py.j2"

# Imports the preamble already contains
PREAMBLE_IMPORTS = {
    "from datetime import date",
    "from datetime import datetime",
    "from datetime import time",
    "from decimal import Decimal",
    "from typing import Any",
    "from uuid import UUID",
}

Block = list[str]


class QueryBuilderGenerator:
    """Generates a query builder module from a GraphQL schema.

    Generation is all-or-nothing: the whole module is assembled, passed
    through post-generate hooks and parsed before anything is returned or
    written.

    Example:
        schema = load_schema("schema.graphql")
        generator = QueryBuilderGenerator(schema, GeneratorConfiguration(id_type="uuid"))
        generator.generate_to_file("client.py")
    """

    def __init__(
        self,
        schema: Schema,
        config: Optional[GeneratorConfiguration] = None,
        hooks: Optional[HookRunner] = None,
        template_dir: Optional[str] = None,
        filename: str = "client.py",
    ):
        """Initialize the generator.

        Args:
            schema: The schema to generate code for
            config: Generator configuration, defaults when omitted
            hooks: Pre- and post-generate hooks to apply
            template_dir: Optional directory with a custom preamble template.
                          Templates here override the built-in templates.
            filename: File name handed to post-generate hooks
        """
        self.schema = schema
        self.config = config or GeneratorConfiguration()
        self.hooks = hooks or HookRunner()
        self.filename = filename

        # Build template loader - custom templates take precedence
        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("gql_querygen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def generate(self) -> str:
        """Generate the module source.

        Raises:
            ConfigurationError: If the configuration cannot map a schema type
            SchemaIntegrityError: If the schema violates its invariants
            IdentifierError: If a computed name is not a legal identifier
            GeneratedCodeError: If the assembled module does not parse
        """
        schema = self.hooks.run_pre_hooks(self.schema)
        schema.validate_integrity()
        context = EmissionContext.create(schema, self.config)
        generated_names = self._check_unique_names(context)

        logger.debug(
            "Generating module for %d types (%d input-reachable object types)",
            len(schema.types), len(context.input_reachable_types),
        )

        parts = [self._render_preamble()]
        parts.extend(filter(None, [
            self._section("shared types", self._enum_blocks(context)),
            *self._data_class_sections(context, generated_names),
            self._section("builder classes", self._builder_blocks(context)),
        ]))
        content = "\n\n\n".join(parts) + "\n"

        content = self.hooks.run_post_hooks(self.filename, content)
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise GeneratedCodeError(f"Generated invalid Python for {self.filename}: {e}") from e

        logger.debug("Generated %d lines", content.count("\n"))
        return content

    def generate_to_file(self, path: str | Path) -> Path:
        """Generate the module and write it to ``path``.

        Nothing is written when generation fails.
        """
        content = self.generate()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)
        return path

    def _render_preamble(self) -> str:
        imports = sorted(self.config.import_statements() - PREAMBLE_IMPORTS)
        template = self.env.get_template(PREAMBLE_TEMPLATE)
        return template.render(imports=imports).rstrip("\n")

    @staticmethod
    def _section(title: str, blocks: list[Block]) -> str:
        if not blocks:
            return ""
        body = "\n\n\n".join("\n".join(block) for block in blocks)
        return f"# region {title}\n{body}\n# endregion"

    def _enum_blocks(self, context: EmissionContext) -> list[Block]:
        emitter = EnumEmitter(context)
        return [emitter.emit(enum_type) for enum_type in context.schema.types_of_kind(TypeKind.ENUM)]

    def _data_class_sections(self, context: EmissionContext, generated_names: set[str]) -> list[str]:
        schema = context.schema
        input_types = schema.types_of_kind(TypeKind.INPUT_OBJECT)
        data_types = [
            schema_type
            for schema_type in schema.types_of_kind(TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION)
            if should_emit(context, schema_type)
        ]

        available = {context.class_name(schema_type.name) for schema_type in input_types + data_types}
        emitter = DataClassEmitter(context, context.resolver.restricted_to(available))
        interfaces = {
            schema_type.name: emitter.interface_name(schema_type)
            for schema_type in data_types
            if schema_type.kind is TypeKind.INTERFACE
        }

        input_blocks = [emitter.emit(schema_type, []) for schema_type in input_types]

        data_blocks = [
            emitter.emit_interface(schema.get_type(name)) for name in interfaces
        ]
        data_blocks.extend(
            emitter.emit(schema_type, self._interface_bases(schema_type, interfaces))
            for schema_type in data_types
        )

        alias_lines = []
        for name in sorted(emitter.aliased_names):
            alias = shadow_alias(name)
            if alias in generated_names:
                raise IdentifierError(alias, "type alias", reason="clashes with a generated class name")
            alias_lines.append(f"{alias} = {name}")

        model_names = [context.class_name(schema_type.name) for schema_type in input_types]
        model_names.extend(interfaces.values())
        model_names.extend(context.class_name(schema_type.name) for schema_type in data_types)

        reference_blocks = [alias_lines] if alias_lines else []
        if model_names:
            reference_blocks.append([f"{name}.model_rebuild()" for name in model_names])

        return [
            self._section("input classes", input_blocks),
            self._section("data classes", data_blocks),
            self._section("forward references", reference_blocks),
        ]

    @staticmethod
    def _interface_bases(schema_type: SchemaType, interfaces: dict[str, str]) -> list[str]:
        names = [schema_type.name] if schema_type.kind is TypeKind.INTERFACE else []
        names.extend(ref.name for ref in schema_type.interfaces or () if ref.name)

        bases: list[str] = []
        for name in names:
            base = interfaces.get(name)
            if base and base not in bases:
                bases.append(base)
        return bases

    def _builder_blocks(self, context: EmissionContext) -> list[Block]:
        emitter = QueryBuilderEmitter(context)
        return [
            emitter.emit(schema_type)
            for schema_type in context.schema.types_of_kind(
                TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION
            )
        ]

    @staticmethod
    def _check_unique_names(context: EmissionContext) -> set[str]:
        """Reject schemas whose generated top-level names collide; return the names."""
        data_classes = DataClassEmitter(context, context.resolver)
        builders = QueryBuilderEmitter(context)

        names: list[str] = [enum_type.name for enum_type in context.schema.types_of_kind(TypeKind.ENUM)]
        for schema_type in context.schema.types_of_kind(
            TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION, TypeKind.INPUT_OBJECT
        ):
            if should_emit(context, schema_type):
                names.append(context.class_name(schema_type.name))
                if schema_type.kind is TypeKind.INTERFACE:
                    names.append(data_classes.interface_name(schema_type))
            if schema_type.kind.is_complex:
                names.append(builders.builder_name(schema_type.name))

        seen: set[str] = set()
        for name in names:
            if name in seen:
                raise IdentifierError(name, "class name", reason="is generated more than once")
            seen.add(name)
        return seen
