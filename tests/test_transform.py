"""Tests for the schema transformation."""

from graphql import (
  GraphQLInt,
  GraphQLList,
  GraphQLNonNull,
  build_schema,
  get_introspection_query,
  get_named_type,
  graphql_sync,
  print_schema,
  validate_schema,
)
import pytest

from schemawarden import (
  ConstraintDefinitionError,
  ConstraintError,
  apply_constraints,
  build_constrained_schema,
  constraint_directive_type_defs,
  find_constraint_error,
  is_constrained_scalar,
)
from schemawarden.config import overrides, reset_config
from schemawarden.scalar import get_coercer

TYPE_DEFS = """
  type Query {
    books(first: Int @constraint(min: 1, max: 50)): [Book]
  }
  type Book {
    title: String @constraint(maxLength: 100)
    pages: Int
  }
  type Mutation {
    createBook(input: BookInput): Book
  }
  input BookInput {
    title: Int! @constraint(min: 3)
    subtitle: String @constraint(minLength: 2, pattern: "^[A-Z]")
    tags: [String!] @constraint(maxLength: 5)
    pages: Int
    edition: Int @constraint(min: 3)
  }
"""


def execute(schema, query, variables=None):
  return graphql_sync(schema, query, variable_values=variables)


class TestApplyConstraints:
  """Tests for apply_constraints and build_constrained_schema."""

  def setup_method(self):
    reset_config()

  def teardown_method(self):
    reset_config()

  def test_constrained_input_fields_are_rewired(self):
    schema = build_constrained_schema(TYPE_DEFS)
    fields = schema.get_type("BookInput").fields

    title_type = fields["title"].type
    assert isinstance(title_type, GraphQLNonNull)
    assert is_constrained_scalar(title_type.of_type)
    assert get_coercer(title_type.of_type).base is GraphQLInt

  def test_unconstrained_fields_keep_their_type(self):
    """Test fields without the directive keep the original scalar."""
    schema = build_constrained_schema(TYPE_DEFS)
    assert schema.get_type("BookInput").fields["pages"].type is GraphQLInt
    assert schema.get_type("Book").fields["pages"].type is GraphQLInt

  def test_list_wrappers_are_preserved(self):
    schema = build_constrained_schema(TYPE_DEFS)
    tags_type = schema.get_type("BookInput").fields["tags"].type
    assert isinstance(tags_type, GraphQLList)
    assert isinstance(tags_type.of_type, GraphQLNonNull)
    assert is_constrained_scalar(tags_type.of_type.of_type)

  def test_arguments_are_rewired(self):
    schema = build_constrained_schema(TYPE_DEFS)
    first = schema.query_type.fields["books"].args["first"]
    assert is_constrained_scalar(first.type)

  def test_output_fields_are_rewired(self):
    schema = build_constrained_schema(TYPE_DEFS)
    assert is_constrained_scalar(schema.get_type("Book").fields["title"].type)

  def test_identical_constraints_share_a_scalar(self):
    """Test same field name, base and constraints map to one wrapped scalar."""
    schema = build_constrained_schema(
      """
      type Query { a(input: A, other: B): Int }
      input A { size: Int @constraint(min: 1) }
      input B { size: Int @constraint(min: 1) }
      """
    )
    a = schema.get_type("A").fields["size"].type
    b = schema.get_type("B").fields["size"].type
    assert a is b

  def test_different_fields_get_different_scalars(self):
    schema = build_constrained_schema(TYPE_DEFS)
    fields = schema.get_type("BookInput").fields
    assert fields["title"].type.of_type is not fields["edition"].type

  def test_unique_type_name(self):
    schema = build_constrained_schema(
      """
      type Query { a(input: A): Int }
      input A { size: Int @constraint(min: 1, uniqueTypeName: "Size") }
      """
    )
    assert schema.get_type("A").fields["size"].type.name == "Size"
    assert schema.get_type("Size") is not None

  def test_source_schema_is_not_mutated(self):
    """Test the transformation returns a new schema."""
    source = build_schema(constraint_directive_type_defs() + TYPE_DEFS)
    transformed = apply_constraints(source)
    assert transformed is not source
    assert source.get_type("BookInput").fields["title"].type.of_type is GraphQLInt
    assert source.get_directive("constraint") is not None

  def test_directive_is_hidden(self):
    """Test the directive is absent from the emitted schema and introspection."""
    schema = build_constrained_schema(TYPE_DEFS)
    assert schema.get_directive("constraint") is None
    assert "@constraint" not in print_schema(schema)

    result = execute(schema, get_introspection_query())
    assert result.errors is None
    names = [d["name"] for d in result.data["__schema"]["directives"]]
    assert "constraint" not in names

  def test_directive_is_stripped_from_ast(self):
    schema = build_constrained_schema(TYPE_DEFS)
    node = schema.get_type("BookInput").fields["title"].ast_node
    assert [d.name.value for d in node.directives] == []

  def test_idempotent(self):
    """Test a second transformation changes nothing."""
    once = build_constrained_schema(TYPE_DEFS)
    twice = apply_constraints(once)

    assert set(once.type_map) == set(twice.type_map)
    once_title = once.get_type("BookInput").fields["title"].type.of_type
    twice_title = twice.get_type("BookInput").fields["title"].type.of_type
    assert once_title is twice_title

    query = "mutation($input: BookInput) { createBook(input: $input) { title } }"
    for schema in (once, twice):
      ok = execute(schema, query, {"input": {"title": 3}})
      bad = execute(schema, query, {"input": {"title": 2}})
      assert ok.errors is None
      assert find_constraint_error(bad.errors[0]).message == "Must be at least 3"

  def test_existing_directive_definition_is_reused(self):
    schema = build_constrained_schema(constraint_directive_type_defs() + TYPE_DEFS)
    assert schema.get_directive("constraint") is None

  def test_custom_directive_name(self):
    with overrides(directive_name="check"):
      schema = build_constrained_schema(
        """
        type Query { a(n: Int @check(min: 2)): Int }
        """
      )
    assert is_constrained_scalar(schema.query_type.fields["a"].args["n"].type)

  def test_other_directives_survive(self):
    schema = build_constrained_schema(
      """
      directive @tag(name: String) on FIELD_DEFINITION
      type Query { a: Int @tag(name: "x") @deprecated(reason: "old") }
      """
    )
    assert schema.get_directive("tag") is not None
    assert schema.query_type.fields["a"].deprecation_reason == "old"

  def test_types_interfaces_and_unions_are_rebuilt(self):
    schema = build_constrained_schema(
      """
      interface Node { id: ID! @constraint(minLength: 1) }
      type Book implements Node { id: ID! @constraint(minLength: 1) }
      type Author implements Node { id: ID! @constraint(minLength: 1) }
      union Item = Book | Author
      enum Kind { A B }
      type Query { item(kind: Kind): Item node: Node }
      """
    )
    book = schema.get_type("Book")
    assert schema.get_type("Node") in book.interfaces
    assert book in schema.get_type("Item").types
    assert is_constrained_scalar(get_named_type(book.fields["id"].type))
    author_id = schema.get_type("Author").fields["id"].type
    assert author_id.of_type is book.fields["id"].type.of_type
    assert validate_schema(schema) == []


class TestBuildTimeErrors:
  """Tests for schema-build errors."""

  def test_incompatible_kind(self):
    with pytest.raises(
      ConstraintDefinitionError, match="'minLength' cannot be applied"
    ):
      build_constrained_schema(
        "type Query { a(n: Int @constraint(minLength: 2)): Int }"
      )

  def test_non_scalar_field(self):
    with pytest.raises(ConstraintDefinitionError, match="requires a scalar type"):
      build_constrained_schema(
        """
        type Query { a(input: A): Int }
        input A { b: B @constraint(min: 1) }
        input B { c: Int }
        """
      )

  def test_unsupported_scalar(self):
    with pytest.raises(ConstraintDefinitionError, match="cannot carry constraints"):
      build_constrained_schema(
        "type Query { a(n: Boolean @constraint(min: 1)): Int }"
      )

  def test_empty_constraint(self):
    with pytest.raises(ConstraintDefinitionError, match="declares no constraint"):
      build_constrained_schema("type Query { a(n: Int @constraint): Int }")

  def test_duplicate_unique_type_name(self):
    with pytest.raises(ConstraintDefinitionError, match="already used"):
      build_constrained_schema(
        """
        type Query { a(x: Int @constraint(min: 1, uniqueTypeName: "N"),
                       y: Int @constraint(min: 2, uniqueTypeName: "N")): Int }
        """
      )

  def test_unique_type_name_clash(self):
    with pytest.raises(ConstraintDefinitionError, match="clashes"):
      build_constrained_schema(
        """
        type Query { a(x: Int @constraint(min: 1, uniqueTypeName: "Query")): Int }
        """
      )


class TestExecution:
  """Tests for values flowing through a transformed schema."""

  def setup_method(self):
    reset_config()
    self.schema = build_constrained_schema(TYPE_DEFS)

  def teardown_method(self):
    reset_config()

  def test_variable_violation(self):
    """Test variables are rejected with the host's invalid-value message."""
    result = execute(
      self.schema,
      "mutation($input: BookInput) { createBook(input: $input) { title } }",
      {"input": {"title": 2}},
    )
    assert result.data is None
    message = result.errors[0].message
    assert message.startswith("Variable '$input' got invalid value 2 at 'input.title'")
    assert message.endswith("Must be at least 3")
    assert isinstance(find_constraint_error(result.errors[0]), ConstraintError)

  def test_literal_violation(self):
    """Test inline literals are rejected during validation."""
    result = execute(
      self.schema, "mutation { createBook(input: {title: 2}) { title } }"
    )
    assert result.data is None
    assert "Must be at least 3" in result.errors[0].message
    assert find_constraint_error(result.errors[0]).field_name == "title"

  def test_argument_violation(self):
    result = execute(self.schema, "{ books(first: 100) { title } }")
    assert find_constraint_error(result.errors[0]).message == (
      "Must be no greater than 50"
    )

  def test_argument_variable_declares_unique_type_name(self):
    """Test variables feeding a constrained argument use its wrapped type."""
    schema = build_constrained_schema(
      """
      type Query {
        books(first: Int @constraint(max: 50, uniqueTypeName: "PageSize")): [Int]
      }
      """
    )
    query = "query($n: PageSize) { books(first: $n) }"
    assert execute(schema, query, {"n": 10}).errors is None
    bad = execute(schema, query, {"n": 100})
    assert find_constraint_error(bad.errors[0]).message == (
      "Must be no greater than 50"
    )

    mismatch = execute(schema, "query($n: Int) { books(first: $n) }", {"n": 10})
    assert "used in position expecting type 'PageSize'" in (
      mismatch.errors[0].message
    )

  def test_list_elements_are_validated(self):
    result = execute(
      self.schema,
      "mutation($input: BookInput) { createBook(input: $input) { title } }",
      {"input": {"title": 3, "tags": ["ok", "too long"]}},
    )
    error = find_constraint_error(result.errors[0])
    assert error.message == "Must be no more than 5 characters in length"
    assert "input.tags[1]" in result.errors[0].message

  def test_type_errors_pass_through(self):
    """Test shape errors keep the host's own message and carry no payload."""
    result = execute(
      self.schema,
      "mutation($input: BookInput) { createBook(input: $input) { title } }",
      {"input": {"title": "abc"}},
    )
    assert "Int cannot represent non-integer value" in result.errors[0].message
    assert find_constraint_error(result.errors[0]) is None

  def test_first_failure_only(self):
    """Test only the first canonical violation is reported."""
    result = execute(
      self.schema,
      "mutation($input: BookInput) { createBook(input: $input) { title } }",
      {"input": {"title": 3, "subtitle": "a"}},
    )
    error = find_constraint_error(result.errors[0])
    assert error.context == [{"arg": "minLength", "value": 2}]

  def test_outbound_values_are_not_validated(self):
    """Test resolvers may return values outside the declared constraints."""
    result = graphql_sync(
      self.schema,
      "{ books { title } }",
      root_value={"books": [{"title": "x" * 200}]},
    )
    assert result.errors is None
    assert result.data == {"books": [{"title": "x" * 200}]}

  def test_skip_validation(self):
    with overrides(skip_validation=True):
      result = execute(
        self.schema,
        "mutation($input: BookInput) { createBook(input: $input) { title } }",
        {"input": {"title": 2}},
      )
    assert result.errors is None
