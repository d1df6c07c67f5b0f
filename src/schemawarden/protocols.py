"""Protocols for schemawarden."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
  from graphql import ValueNode


@runtime_checkable
class Coercer(Protocol):
  """The coercion capability of a GraphQL scalar.

  ``graphql.GraphQLScalarType`` satisfies it, and so does the constraint
  decorator that wraps one.
  """

  def serialize(self, output_value: Any) -> Any:
    """Coerce an outbound (result) value."""
    ...

  def parse_value(self, input_value: Any) -> Any:
    """Coerce an inbound value supplied through variables."""
    ...

  def parse_literal(
    self, value_node: ValueNode, variables: dict[str, Any] | None = None
  ) -> Any:
    """Coerce an inbound value written inline in the document."""
    ...
