"""Command-line interface for gql-querygen."""

import asyncio
import logging
from pathlib import Path

import click

from .core.config import CommentGeneration, FloatType, GeneratorConfiguration, IdType, IntegerType, SyntaxStyle
from .core.errors import GeneratorError
from .core.fetcher import fetch_schema
from .core.generator import QueryBuilderGenerator
from .core.hooks import AddHeaderHook, FilterTypesHook, HookRunner
from .core.schema import Schema, TypeKind, load_schema


def _parse_pairs(values: tuple[str, ...], separator: str, option: str) -> dict[str, str]:
    """Parse repeated ``KEY<separator>VALUE`` options into a dict."""
    pairs: dict[str, str] = {}
    for value in values:
        key, found, item = value.partition(separator)
        if not found or not key.strip():
            raise click.BadParameter(f"expected KEY{separator}VALUE, got {value!r}", param_hint=option)
        pairs[key.strip()] = item.strip()
    return pairs


def _load(schema: str, http_headers: dict[str, str]) -> Schema:
    if schema.startswith(("http://", "https://")):
        return asyncio.run(fetch_schema(schema, headers=http_headers))
    path = Path(schema)
    if not path.is_file():
        raise click.BadParameter(f"file {schema!r} does not exist", param_hint="--schema")
    return load_schema(path)


@click.group()
@click.version_option(package_name="gql-querygen")
def main():
    """GraphQL query builder generator for Python.

    Generate typed query builders and data classes from GraphQL schemas.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    help="Introspection JSON file, SDL file (.graphql/.graphqls), or endpoint URL.",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(dir_okay=False),
    help="Output file for generated code (e.g., client.py).",
)
@click.option(
    "--integer-type",
    type=click.Choice([choice.value for choice in IntegerType]),
    default=IntegerType.INT32.value,
    show_default=True,
    help="Width of the Int scalar.",
)
@click.option(
    "--float-type",
    type=click.Choice([choice.value for choice in FloatType]),
    default=FloatType.DOUBLE.value,
    show_default=True,
    help="Python representation of the Float scalar.",
)
@click.option(
    "--id-type",
    type=click.Choice([IdType.STRING.value, IdType.UUID.value, IdType.OBJECT.value]),
    default=IdType.STRING.value,
    show_default=True,
    help="Python representation of the ID scalar.",
)
@click.option("--class-suffix", default="", help="Suffix appended to every generated class name.")
@click.option(
    "--rename",
    multiple=True,
    metavar="TYPE=CLASS",
    help="Generate CLASS for schema type TYPE. Can be repeated.",
)
@click.option("--include-deprecated", is_flag=True, help="Generate deprecated fields.")
@click.option(
    "--comments",
    default="code_summary",
    show_default=True,
    help="Comma-separated documentation kinds: none, code_summary, description_attribute, all.",
)
@click.option(
    "--syntax",
    type=click.Choice([choice.value for choice in SyntaxStyle]),
    default=SyntaxStyle.COMPATIBLE.value,
    show_default=True,
    help="Annotation syntax of the generated module.",
)
@click.option(
    "--treat-unknown-as-scalar",
    is_flag=True,
    help="Select untyped scalar fields like regular scalar fields.",
)
@click.option("--exclude-prefix", default=None, help="Skip schema types whose name starts with this prefix.")
@click.option("--file-header", default=None, help="Comment placed at the top of the generated file.")
@click.option(
    "--http-header",
    "-H",
    multiple=True,
    metavar="NAME:VALUE",
    help="Request header used when fetching the schema from a URL. Can be repeated.",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory with templates overriding the built-in ones.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str,
    output: str,
    integer_type: str,
    float_type: str,
    id_type: str,
    class_suffix: str,
    rename: tuple[str, ...],
    include_deprecated: bool,
    comments: str,
    syntax: str,
    treat_unknown_as_scalar: bool,
    exclude_prefix: str | None,
    file_header: str | None,
    http_header: tuple[str, ...],
    template_dir: str | None,
    verbose: bool,
):
    """Generate query builders from a GraphQL schema.

    Examples:

        gql-querygen generate --schema ./schema.graphql --output ./client.py

        gql-querygen generate -s ./introspection.json -o ./client.py --id-type uuid

        gql-querygen generate -s https://api.example.com/graphql -o ./client.py -H "Authorization: Bearer TOKEN"
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    output_path = Path(output).resolve()
    try:
        config = GeneratorConfiguration(
            integer_type=integer_type,
            float_type=float_type,
            id_type=id_type,
            custom_class_name_mapping=_parse_pairs(rename, "=", "--rename"),
            class_suffix=class_suffix,
            include_deprecated_fields=include_deprecated,
            comment_generation=comments,
            syntax=syntax,
            treat_unknown_object_as_scalar=treat_unknown_as_scalar,
        )

        hooks = HookRunner()
        if exclude_prefix:
            hooks.add_pre_hook(FilterTypesHook(exclude_prefix=exclude_prefix))
        if file_header:
            hooks.add_post_hook(AddHeaderHook(file_header))

        click.echo("Loading schema...")
        loaded = _load(schema, _parse_pairs(http_header, ":", "--http-header"))

        if verbose:
            click.echo(f"Schema: {schema}")
            click.echo(f"Output: {output_path}")
            click.echo(f"  Types: {len(loaded.types_of_kind(TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION))}")
            click.echo(f"  Inputs: {len(loaded.types_of_kind(TypeKind.INPUT_OBJECT))}")
            click.echo(f"  Enums: {len(loaded.types_of_kind(TypeKind.ENUM))}")
            if config.comment_generation is CommentGeneration.DISABLED:
                click.echo("  Comments: disabled")

        click.echo("Generating code...")
        generator = QueryBuilderGenerator(
            loaded,
            config,
            hooks=hooks,
            template_dir=template_dir,
            filename=output_path.name,
        )
        generator.generate_to_file(output_path)
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Done! Generated code in {output_path}")


if __name__ == "__main__":
    main()
