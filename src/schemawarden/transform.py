"""Schema transformation: rewire constrained fields to wrapped scalars."""

from __future__ import annotations

from copy import copy
from typing import TYPE_CHECKING, Any

from graphql import (
  DirectiveDefinitionNode,
  GraphQLArgument,
  GraphQLDirective,
  GraphQLEnumType,
  GraphQLField,
  GraphQLInputField,
  GraphQLInputObjectType,
  GraphQLInterfaceType,
  GraphQLList,
  GraphQLNonNull,
  GraphQLObjectType,
  GraphQLScalarType,
  GraphQLSchema,
  GraphQLUnionType,
  build_schema,
  get_named_type,
  is_introspection_type,
  is_specified_directive,
  parse,
)
from loguru import logger

from schemawarden.config import get_config
from schemawarden.directive import (
  UNIQUE_TYPE_NAME,
  constraint_directive_type_defs,
  directive_arguments,
  find_directive,
)
from schemawarden.exceptions import ConstraintDefinitionError
from schemawarden.resolver import resolve_constraints
from schemawarden.scalar import default_type_name, get_coercer, wrap_scalar

if TYPE_CHECKING:
  from graphql import GraphQLNamedType, GraphQLType, Node

# (owner type, field, argument or None)
DeclarationKey = tuple[str, str, str | None]


class SchemaTransformer:
  """Builds a new schema in which every constrained declaration uses a
  wrapped scalar.

  Runs in two phases. ``_plan`` walks every declaration eagerly, so
  malformed constraints fail while the transformer runs. ``_rebuild`` then
  recreates the named types with field thunks that only look up the planned
  replacements. Scalars and enums carry no references and are reused.
  """

  def __init__(self, schema: GraphQLSchema) -> None:
    super().__init__()
    self.schema = schema
    self.directive_name = get_config().directive_name
    self.type_map: dict[str, GraphQLNamedType] = {}
    self.replacements: dict[DeclarationKey, GraphQLScalarType] = {}
    self._wrapped: dict[tuple[Any, ...], GraphQLScalarType] = {}
    self._wrapped_names: dict[str, tuple[Any, ...]] = {}

  def transform(self) -> GraphQLSchema:
    self._plan()
    return self._rebuild()

  # Phase 1: resolve every constraint declaration

  def _plan(self) -> None:
    for type_ in self.schema.type_map.values():
      if is_introspection_type(type_):
        continue
      if isinstance(type_, GraphQLInputObjectType):
        for name, input_field in type_.fields.items():
          self._plan_declaration(
            (type_.name, name, None), name, input_field.type, input_field.ast_node
          )
      elif isinstance(type_, (GraphQLObjectType, GraphQLInterfaceType)):
        for name, field in type_.fields.items():
          self._plan_declaration(
            (type_.name, name, None), name, field.type, field.ast_node
          )
          for arg_name, arg in field.args.items():
            self._plan_declaration(
              (type_.name, name, arg_name), arg_name, arg.type, arg.ast_node
            )

    logger.debug(
      "Planned {} constrained declaration(s) using {} wrapped scalar(s)",
      len(self.replacements),
      len(self._wrapped),
    )

  def _plan_declaration(
    self,
    key: DeclarationKey,
    field_name: str,
    type_: GraphQLType,
    ast_node: Node | None,
  ) -> None:
    directive = find_directive(ast_node, self.directive_name)
    if directive is None:
      return

    location = ".".join(part for part in key if part)
    named = get_named_type(type_)
    if get_coercer(named) is not None:
      # Already wrapped by an earlier transformation
      return
    if not isinstance(named, GraphQLScalarType):
      raise ConstraintDefinitionError(
        f"@{self.directive_name} on '{location}' requires a scalar type, "
        f"got {named}"
      )

    arguments = directive_arguments(directive)
    unique_name = arguments.pop(UNIQUE_TYPE_NAME, None)
    if unique_name is not None and not isinstance(unique_name, str):
      raise ConstraintDefinitionError(
        f"'{UNIQUE_TYPE_NAME}' on '{location}' must be a string"
      )

    spec = resolve_constraints(field_name, arguments, named)
    memo_key = (field_name, named.name, spec.arguments, unique_name)
    scalar = self._wrapped.get(memo_key)
    if scalar is None:
      name = unique_name or default_type_name(named, spec)
      if name in self.schema.type_map:
        raise ConstraintDefinitionError(
          f"Wrapped scalar name '{name}' for '{location}' clashes with an "
          "existing schema type"
        )
      if name in self._wrapped_names:
        raise ConstraintDefinitionError(
          f"Wrapped scalar name '{name}' for '{location}' is already used by "
          "a different constraint"
        )
      scalar = wrap_scalar(named, spec, name)
      self._wrapped[memo_key] = scalar
      self._wrapped_names[name] = memo_key

    self.replacements[key] = scalar
    logger.debug(
      "Constrained '{}' with {} ({})", location, scalar.name, spec.describe()
    )

  # Phase 2: rebuild the type graph

  def _rebuild(self) -> GraphQLSchema:
    for name, type_ in self.schema.type_map.items():
      if not is_introspection_type(type_):
        self.type_map[name] = self._rebuild_named(type_)
    for scalar in self._wrapped.values():
      self.type_map[scalar.name] = scalar

    kwargs = self.schema.to_kwargs()
    kwargs.update(
      query=self._root(self.schema.query_type),
      mutation=self._root(self.schema.mutation_type),
      subscription=self._root(self.schema.subscription_type),
      types=list(self.type_map.values()),
      directives=[
        self._rebuild_directive(directive)
        for directive in self.schema.directives
        if directive.name != self.directive_name
      ],
    )
    return GraphQLSchema(**kwargs)

  def _root(self, type_: GraphQLObjectType | None) -> Any:
    return None if type_ is None else self.type_map[type_.name]

  def _rebuild_named(self, type_: GraphQLNamedType) -> GraphQLNamedType:
    if isinstance(type_, (GraphQLScalarType, GraphQLEnumType)):
      return type_

    kwargs = type_.to_kwargs()
    if isinstance(type_, GraphQLObjectType):
      kwargs["fields"] = lambda: self._output_fields(type_)
      kwargs["interfaces"] = lambda: [self.type_map[i.name] for i in type_.interfaces]
      return GraphQLObjectType(**kwargs)
    if isinstance(type_, GraphQLInterfaceType):
      kwargs["fields"] = lambda: self._output_fields(type_)
      kwargs["interfaces"] = lambda: [self.type_map[i.name] for i in type_.interfaces]
      return GraphQLInterfaceType(**kwargs)
    if isinstance(type_, GraphQLUnionType):
      kwargs["types"] = lambda: [self.type_map[t.name] for t in type_.types]
      return GraphQLUnionType(**kwargs)
    if isinstance(type_, GraphQLInputObjectType):
      kwargs["fields"] = lambda: self._input_fields(type_)
      return GraphQLInputObjectType(**kwargs)
    raise TypeError(f"Unexpected named type: {type_!r}")

  def _output_fields(
    self, type_: GraphQLObjectType | GraphQLInterfaceType
  ) -> dict[str, GraphQLField]:
    fields = {}
    for name, field in type_.fields.items():
      kwargs = field.to_kwargs()
      kwargs["type_"], kwargs["ast_node"] = self._rewire(
        (type_.name, name, None), field.type, field.ast_node
      )
      kwargs["args"] = {
        arg_name: self._argument((type_.name, name, arg_name), arg)
        for arg_name, arg in field.args.items()
      }
      fields[name] = GraphQLField(**kwargs)
    return fields

  def _input_fields(
    self, type_: GraphQLInputObjectType
  ) -> dict[str, GraphQLInputField]:
    fields = {}
    for name, input_field in type_.fields.items():
      kwargs = input_field.to_kwargs()
      kwargs["type_"], kwargs["ast_node"] = self._rewire(
        (type_.name, name, None), input_field.type, input_field.ast_node
      )
      fields[name] = GraphQLInputField(**kwargs)
    return fields

  def _argument(self, key: DeclarationKey, arg: GraphQLArgument) -> GraphQLArgument:
    kwargs = arg.to_kwargs()
    kwargs["type_"], kwargs["ast_node"] = self._rewire(key, arg.type, arg.ast_node)
    return GraphQLArgument(**kwargs)

  def _rebuild_directive(self, directive: GraphQLDirective) -> GraphQLDirective:
    if is_specified_directive(directive):
      return directive
    kwargs = directive.to_kwargs()
    kwargs["args"] = {
      name: GraphQLArgument(**{**arg.to_kwargs(), "type_": self._remap(arg.type)})
      for name, arg in directive.args.items()
    }
    return GraphQLDirective(**kwargs)

  def _rewire(
    self, key: DeclarationKey, type_: GraphQLType, ast_node: Node | None
  ) -> tuple[GraphQLType, Node | None]:
    """Return the new type reference and AST node for a declaration."""
    scalar = self.replacements.get(key)
    if scalar is None:
      return self._remap(type_), ast_node
    return self._remap(type_, scalar), self._strip_directive(ast_node)

  def _remap(self, type_: GraphQLType, scalar: GraphQLScalarType | None = None) -> Any:
    """Rebuild list/non-null wrappers around the new named type."""
    if isinstance(type_, GraphQLNonNull):
      return GraphQLNonNull(self._remap(type_.of_type, scalar))
    if isinstance(type_, GraphQLList):
      return GraphQLList(self._remap(type_.of_type, scalar))
    return scalar or self.type_map[type_.name]  # type: ignore[union-attr]

  def _strip_directive(self, node: Node | None) -> Node | None:
    if node is None:
      return None
    stripped = copy(node)
    stripped.directives = tuple(  # type: ignore[attr-defined]
      d for d in node.directives or ()  # type: ignore[attr-defined]
      if d.name.value != self.directive_name
    )
    return stripped


def apply_constraints(schema: GraphQLSchema) -> GraphQLSchema:
  """Return a copy of ``schema`` whose constrained declarations validate input.

  Every field, input field and argument carrying the constraint directive is
  retyped to a wrapped scalar; the directive itself disappears from the
  result. The given schema is left untouched, and applying the function to
  its own output changes nothing.

  Raises:
    ConstraintDefinitionError: If any declared constraint is malformed or
      does not fit its field's type. No schema is produced in that case.
  """
  return SchemaTransformer(schema).transform()


def build_constrained_schema(type_defs: str, **kwargs: Any) -> GraphQLSchema:
  """Build a schema from SDL and apply its constraints.

  The directive definition is added unless ``type_defs`` already declares
  it. Extra keyword arguments are passed to ``graphql.build_schema``.

  Example:
    ```python
    schema = build_constrained_schema('''
      type Query { book(id: ID!): String }
      input BookInput { title: String! @constraint(minLength: 3) }
    ''')
    ```
  """
  name = get_config().directive_name
  declared = any(
    isinstance(d, DirectiveDefinitionNode) and d.name.value == name
    for d in parse(type_defs).definitions
  )
  if not declared:
    type_defs = f"{constraint_directive_type_defs(name)}\n\n{type_defs}"
  return apply_constraints(build_schema(type_defs, **kwargs))
