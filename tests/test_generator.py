"""End-to-end tests for QueryBuilderGenerator.

Most tests execute the generated module and exercise the runtime it
contains: building query strings and validating response data.
"""

import ast
from datetime import datetime

import pytest

from gql_querygen.core.config import GeneratorConfiguration
from gql_querygen.core.errors import ConfigurationError, GeneratedCodeError, IdentifierError, SchemaIntegrityError
from gql_querygen.core.generator import QueryBuilderGenerator
from gql_querygen.core.hooks import AddHeaderHook, FilterTypesHook, HookRunner
from gql_querygen.core.scalars import ScalarRegistry
from gql_querygen.core.schema import load_schema_from_sdl

from helpers import enum_type, exec_module, field, make_schema, named, object_type, scalar


@pytest.fixture
def code(sample_schema):
    return QueryBuilderGenerator(sample_schema).generate()


@pytest.fixture
def client(code, cleanup_modules):
    return exec_module(code)


# =============================================================================
# Module layout
# =============================================================================


class TestModuleLayout:
    """Tests for the structure of the generated source."""

    def test_parses(self, code):
        ast.parse(code)

    def test_deterministic(self, sample_schema, code):
        assert QueryBuilderGenerator(sample_schema).generate() == code

    def test_section_order(self, code):
        titles = [
            "# region base classes",
            "# region shared types",
            "# region input classes",
            "# region data classes",
            "# region forward references",
            "# region builder classes",
        ]
        positions = [code.index(title) for title in titles]
        assert positions == sorted(positions)
        assert code.count("# endregion") == len(titles)

    def test_ends_with_single_newline(self, code):
        assert code.endswith("# endregion\n")
        assert not code.endswith("\n\n")

    def test_union_without_fields_has_no_data_class(self, code):
        assert "class SearchResult(" not in code
        assert "class SearchResultQueryBuilder(GraphQlQueryBuilder):" in code

    def test_interface_capability_class(self, code):
        assert "class INode(GraphQlModel):\n    Id: Optional[str]\n" in code
        assert "class User(INode):" in code
        assert "class Node(INode):" in code

    def test_forward_references(self, code):
        assert "UserFilter.model_rebuild()\n" in code
        assert "User.model_rebuild()\n" in code

    def test_shadowed_type_aliases(self, code):
        assert "# region forward references\n_Node = Node\n_Status = Status\n_User = User\n\n\n" in code
        assert '    Status: Optional[_Status] = Field(default=None, alias="status")\n' in code
        assert '    Users: Optional[List[_User]] = Field(default=None, alias="users")\n' in code

    def test_empty_sections_omitted(self):
        schema = make_schema(object_type("Query", [field("version", scalar("String"))]))
        generated = QueryBuilderGenerator(schema).generate()
        assert "# region shared types" not in generated
        assert "# region input classes" not in generated
        assert "# region data classes" in generated

    def test_extra_scalar_import(self, sample_schema):
        registry = ScalarRegistry()

        class AddressHandler:
            python_type = "IPv4Address"
            import_statement = "from ipaddress import IPv4Address"

        registry.register("DateTime", AddressHandler())
        generated = QueryBuilderGenerator(sample_schema, GeneratorConfiguration(custom_scalar_mapping=registry)).generate()
        assert "\nfrom ipaddress import IPv4Address\n" in generated
        assert "CreatedAt: Optional[IPv4Address]" in generated


# =============================================================================
# Query building
# =============================================================================


class TestQueryBuilding:
    """Tests for query strings built with the generated builders."""

    def test_minified(self, client):
        query = client.QueryQueryBuilder().with_user("1", client.UserQueryBuilder().with_id())
        assert query.build() == 'query{user(id:"1"){id}}'

    def test_scalar_alias(self, client):
        builder = client.UserQueryBuilder().with_id().with_name(alias="n")
        assert builder.build() == "{id,n:name}"

    def test_builder_alias(self, client):
        query = client.QueryQueryBuilder().with_user("1", client.UserQueryBuilder("me").with_id())
        assert query.build() == 'query{me:user(id:"1"){id}}'

    def test_same_field_twice_with_aliases(self, client):
        query = (
            client.QueryQueryBuilder()
            .with_user("1", client.UserQueryBuilder("a").with_id())
            .with_user("2", client.UserQueryBuilder("b").with_id())
        )
        assert query.build() == 'query{a:user(id:"1"){id},b:user(id:"2"){id}}'

    def test_indented(self, client):
        query = client.QueryQueryBuilder().with_user("1", client.UserQueryBuilder().with_id().with_name())
        assert query.build(client.Formatting.INDENTED) == (
            "query {\n"
            '  user(id: "1") {\n'
            "    id\n"
            "    name\n"
            "  }\n"
            "}"
        )

    def test_indentation_size(self, client):
        builder = client.UserQueryBuilder().with_id()
        assert builder.build(client.Formatting.INDENTED, indentation_size=4) == "{\n    id\n}"

    def test_optional_arguments_omitted(self, client):
        query = client.QueryQueryBuilder().with_users(client.UserQueryBuilder().with_id(), first=10)
        assert query.build() == "query{users(first:10){id}}"

    def test_enum_list_argument(self, client):
        query = client.QueryQueryBuilder().with_users(
            client.UserQueryBuilder().with_id(), status=[client.Status.ACTIVE, client.Status.INACTIVE]
        )
        assert query.build() == "query{users(status:[ACTIVE,INACTIVE]){id}}"

    def test_input_object_argument(self, client):
        query = client.MutationQueryBuilder().with_create_user(
            client.CreateUserInput(name="Ann"), client.UserQueryBuilder().with_id()
        )
        assert query.build() == 'mutation{createUser(input:{name:"Ann"}){id}}'

    def test_nested_input_values(self, client):
        query = client.QueryQueryBuilder().with_users(
            client.UserQueryBuilder().with_id(),
            filter=client.UserFilter(Name="A", Status=client.Status.ACTIVE, CreatedAfter=datetime(2024, 1, 2)),
        )
        assert query.build() == (
            'query{users(filter:{name:"A",status:ACTIVE,createdAfter:"2024-01-02T00:00:00"}){id}}'
        )

    def test_except_field(self, client):
        builder = client.UserQueryBuilder().include_all_scalar_fields().except_tags().except_created_at()
        assert builder.included_fields == ["id", "name", "status", "legacyName"]

    def test_include_all_scalar_fields(self, client):
        assert client.UserQueryBuilder().include_all_scalar_fields().build() == (
            "{id,name,status,tags,legacyName,createdAt}"
        )

    def test_include_all_fields(self, client):
        assert client.QueryQueryBuilder().include_all_fields().build() == (
            "query{user{id,name,status,tags,legacyName,createdAt},"
            "users{id,name,status,tags,legacyName,createdAt},"
            "node{id},"
            "version}"
        )

    def test_clear(self, client):
        builder = client.UserQueryBuilder().with_id().clear()
        assert builder.included_fields == []

    def test_prefix_and_metadata(self, client):
        assert client.MutationQueryBuilder().prefix == "mutation"
        assert client.UserQueryBuilder().prefix is None
        friends = client.UserQueryBuilder().all_fields[3]
        assert (friends.name, friends.is_complex, friends.query_builder_type) == ("friends", True, "UserQueryBuilder")


class TestArgumentValues:
    """Tests for build_argument_value in the generated runtime."""

    @pytest.mark.parametrize("value, expected", [
        (None, "null"),
        (True, "true"),
        (3, "3"),
        (1.5, "1.5"),
        ('say "hi"', '"say \\"hi\\""'),
        ([1, 2], "[1,2]"),
        ({"a": 1, "b": None}, "{a:1,b:null}"),
    ])
    def test_values(self, client, value, expected):
        assert client.build_argument_value(value) == expected

    def test_enum_before_string(self, client):
        assert client.build_argument_value(client.Status.ACTIVE) == "ACTIVE"

    def test_indented_list(self, client):
        assert client.build_argument_value([1, 2], client.Formatting.INDENTED) == "[1, 2]"

    def test_unsupported_value(self, client):
        with pytest.raises(TypeError):
            client.build_argument_value(object())


# =============================================================================
# Data classes
# =============================================================================


class TestGeneratedModels:
    """Tests for the generated pydantic models and enums."""

    def test_validate_response(self, client):
        user = client.User.model_validate({
            "id": "1",
            "name": "Ann",
            "status": "ACTIVE",
            "friends": [{"id": "2"}, None],
            "createdAt": "2024-01-02T03:04:05",
        })
        assert user.Id == "1"
        assert user.Status is client.Status.ACTIVE
        assert user.Friends[0].Id == "2"
        assert user.Friends[1] is None
        assert user.CreatedAt == datetime(2024, 1, 2, 3, 4, 5)
        assert user.Tags is None

    def test_populate_by_property_name(self, client):
        assert client.User(Name="Ann").Name == "Ann"

    def test_input_property_values_order(self, client):
        value = client.CreateUserInput(name="Ann", tags=["a"])
        assert list(value.get_property_values()) == [("name", "Ann"), ("email", None), ("tags", ["a"])]

    def test_enum_str(self, client):
        assert str(client.Status.INACTIVE) == "INACTIVE"
        assert client.Status("ACTIVE") is client.Status.ACTIVE

    def test_enum_wire_values(self, cleanup_modules):
        schema = make_schema(
            object_type("Query", [field("grade", named("ENUM", "Grade"))]),
            enum_type("Grade", ["1X", "ok", "class"]),
        )
        module = exec_module(QueryBuilderGenerator(schema).generate(), "generated_grades")
        assert module.Grade._1X.value == "1X"
        assert module.Grade.ok.value == "ok"
        assert module.Grade.class_.value == "class"

    def test_modern_syntax_executes(self, sample_schema, cleanup_modules):
        generated = QueryBuilderGenerator(sample_schema, GeneratorConfiguration(syntax="modern")).generate()
        assert "Name: str | None = Field(" in generated
        module = exec_module(generated, "generated_modern")
        assert module.User.model_validate({"tags": ["x"]}).Tags == ["x"]

    def test_all_options_execute(self, sample_schema, cleanup_modules):
        config = GeneratorConfiguration(
            integer_type="int64",
            float_type="decimal",
            id_type="uuid",
            class_suffix="Dto",
            include_deprecated_fields=True,
            comment_generation="all",
        )
        module = exec_module(QueryBuilderGenerator(sample_schema, config).generate(), "generated_options")
        assert module.UserDto.__description__ == "A registered person."
        assert module.UserDto.model_fields["LegacyName"].deprecated == "Use name"
        assert "legacyName" in module.UserQueryBuilderDto().include_all_scalar_fields().included_fields

    def test_underscore_field(self, cleanup_modules):
        schema = load_schema_from_sdl("type Query { _: Boolean\n name: String }")
        module = exec_module(QueryBuilderGenerator(schema).generate(), "generated_placeholder")
        assert module.QueryQueryBuilder().with__().with_name().build() == "query{_,name}"
        assert module.Query.model_validate({"_": True, "name": "x"}).Value is True

    def test_case_style_variants(self, cleanup_modules):
        schema = load_schema_from_sdl("type Query { userName: String\n user_name: Int }")
        module = exec_module(QueryBuilderGenerator(schema).generate(), "generated_variants")
        assert list(module.Query.model_fields) == ["UserName", "UserName_2"]
        data = module.Query.model_validate({"userName": "a", "user_name": 2})
        assert (data.UserName, data.UserName_2) == ("a", 2)
        builder = module.QueryQueryBuilder().with_user_name().with_user_name_2()
        assert builder.build() == "query{userName,user_name}"
        assert builder.except_user_name().build() == "query{user_name}"


# =============================================================================
# Failures
# =============================================================================


class TestFailures:
    """Tests for all-or-nothing failure behavior."""

    def test_missing_scalar_mapping(self, sample_schema, tmp_path):
        generator = QueryBuilderGenerator(sample_schema, GeneratorConfiguration(custom_scalar_mapping=None))
        output = tmp_path / "client.py"
        with pytest.raises(ConfigurationError) as exc_info:
            generator.generate_to_file(output)
        assert exc_info.value.key == "custom_scalar_mapping"
        assert not output.exists()

    def test_invalid_post_hook_output(self, sample_schema):
        class BreakCode:
            def post_generate(self, filename, content):
                return content + "def broken(:\n"

        hooks = HookRunner(post_hooks=[BreakCode()])
        with pytest.raises(GeneratedCodeError):
            QueryBuilderGenerator(sample_schema, hooks=hooks).generate()

    def test_duplicate_generated_names(self, sample_schema):
        config = GeneratorConfiguration(custom_class_name_mapping={"Post": "User"})
        with pytest.raises(IdentifierError, match="more than once"):
            QueryBuilderGenerator(sample_schema, config).generate()

    def test_reserved_class_name(self):
        schema = make_schema(
            object_type("Query", [field("field", named("OBJECT", "Field"))]),
            object_type("Field", [field("id", scalar("ID"))]),
        )
        with pytest.raises(IdentifierError, match="runtime"):
            QueryBuilderGenerator(schema).generate()

    @pytest.mark.parametrize("type_name", ["date", "datetime", "json", "auto", "dataclass", "str", "int", "bool"])
    def test_type_named_like_runtime_binding(self, type_name):
        schema = make_schema(
            object_type("Query", [field("value", named("OBJECT", type_name))]),
            object_type(type_name, [field("id", scalar("ID"))]),
        )
        with pytest.raises(IdentifierError, match="runtime"):
            QueryBuilderGenerator(schema).generate()

    def test_alias_clash(self):
        schema = make_schema(
            object_type("Query", [field("user", named("OBJECT", "User")), field("other", named("OBJECT", "_User"))]),
            object_type("User", [field("id", scalar("ID"))]),
            object_type("_User", [field("id", scalar("ID"))]),
        )
        with pytest.raises(IdentifierError, match="_User"):
            QueryBuilderGenerator(schema).generate()

    def test_unresolved_reference(self):
        schema = make_schema(object_type("Query", [field("user", named("OBJECT", "User"))]))
        with pytest.raises(SchemaIntegrityError):
            QueryBuilderGenerator(schema).generate()


# =============================================================================
# Hooks and templates
# =============================================================================


class TestCustomization:
    """Tests for hooks and template overrides."""

    def test_header_hook(self, sample_schema):
        hooks = HookRunner()
        hooks.add_post_hook(AddHeaderHook("# generated"))
        assert QueryBuilderGenerator(sample_schema, hooks=hooks).generate().startswith("# generated\n\n")

    def test_filter_hook(self):
        schema = make_schema(
            object_type("Query", [field("version", scalar("String"))]),
            object_type("InternalAudit", [field("id", scalar("ID"))]),
        )
        hooks = HookRunner()
        hooks.add_pre_hook(FilterTypesHook(exclude_prefix="Internal"))
        generated = QueryBuilderGenerator(schema, hooks=hooks).generate()
        assert "InternalAudit" not in generated
        assert "class QueryQueryBuilder(GraphQlQueryBuilder):" in generated

    def test_template_override(self, sample_schema, tmp_path):
        (tmp_path / "base_classes.py.j2").write_text(
            '"""Custom preamble."""\n{% for statement in imports %}{{ statement }}\n{% endfor %}'
        )
        generated = QueryBuilderGenerator(sample_schema, template_dir=str(tmp_path)).generate()
        assert generated.startswith('"""Custom preamble."""\n')
        assert "# region base classes" not in generated
        assert "class UserQueryBuilder(GraphQlQueryBuilder):" in generated

    def test_post_hook_receives_filename(self, sample_schema):
        seen = []

        class Recorder:
            def post_generate(self, filename, content):
                seen.append(filename)
                return content

        hooks = HookRunner()
        hooks.add_post_hook(Recorder())
        QueryBuilderGenerator(sample_schema, hooks=hooks, filename="api.py").generate()
        assert seen == ["api.py"]

    def test_generate_to_file(self, sample_schema, tmp_path):
        output = tmp_path / "nested" / "client.py"
        path = QueryBuilderGenerator(sample_schema).generate_to_file(output)
        assert path == output
        assert output.read_text(encoding="utf-8").startswith('"""GraphQL query builders')
