"""The ``@constraint`` schema directive: definition and AST extraction."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from graphql import (
  DirectiveLocation,
  GraphQLArgument,
  GraphQLDirective,
  GraphQLFloat,
  GraphQLInt,
  GraphQLString,
  value_from_ast_untyped,
)

from schemawarden.config import get_config

if TYPE_CHECKING:
  from graphql import DirectiveNode, Node

# Directive argument that names the wrapped scalar instead of constraining it
UNIQUE_TYPE_NAME = "uniqueTypeName"

_ARGUMENT_TYPES = {
  "minLength": GraphQLInt,
  "maxLength": GraphQLInt,
  "startsWith": GraphQLString,
  "endsWith": GraphQLString,
  "contains": GraphQLString,
  "notContains": GraphQLString,
  "pattern": GraphQLString,
  "format": GraphQLString,
  "min": GraphQLFloat,
  "max": GraphQLFloat,
  "exclusiveMin": GraphQLFloat,
  "exclusiveMax": GraphQLFloat,
  "multipleOf": GraphQLFloat,
  UNIQUE_TYPE_NAME: GraphQLString,
}


def constraint_directive(name: str | None = None) -> GraphQLDirective:
  """Return the directive definition (named after the config by default)."""
  return GraphQLDirective(
    name=name or get_config().directive_name,
    locations=(
      DirectiveLocation.INPUT_FIELD_DEFINITION,
      DirectiveLocation.FIELD_DEFINITION,
      DirectiveLocation.ARGUMENT_DEFINITION,
    ),
    args={arg: GraphQLArgument(type_) for arg, type_ in _ARGUMENT_TYPES.items()},
    description="Validates inbound scalar values against the given constraints.",
  )


def constraint_directive_type_defs(name: str | None = None) -> str:
  """Return the SDL declaring the directive, to prepend to type definitions."""
  directive = constraint_directive(name)
  args = "\n".join(
    f"  {arg}: {type_.name}" for arg, type_ in _ARGUMENT_TYPES.items()
  )
  locations = " | ".join(location.name for location in directive.locations)
  return f"directive @{directive.name}(\n{args}\n) on {locations}"


def find_directive(node: Node | None, name: str) -> DirectiveNode | None:
  """Return the first directive called ``name`` on an AST node, if any."""
  for directive in getattr(node, "directives", None) or ():
    if directive.name.value == name:
      return directive
  return None


def directive_arguments(directive: DirectiveNode) -> dict[str, Any]:
  """Read a directive's literal arguments.

  Literals keep their own type: ``min: 3`` yields ``3`` even though the
  argument is declared ``Float``, so thresholds are reported as written.
  """
  return {
    arg.name.value: value_from_ast_untyped(arg.value)
    for arg in directive.arguments or ()
  }
