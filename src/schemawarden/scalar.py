"""Scalars whose inbound coercion also enforces declared constraints."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Any

from graphql import GraphQLNamedType, GraphQLScalarType, Undefined
from loguru import logger

from schemawarden.config import get_config
from schemawarden.reporting import build_constraint_error

if TYPE_CHECKING:
  from graphql import ValueNode

  from schemawarden.protocols import Coercer
  from schemawarden.resolver import ConstraintSpec

# Key under which a wrapped scalar exposes its coercer in ``extensions``
EXTENSION_KEY = "constraint"


class ConstrainedCoercer:
  """Decorates a base scalar's coercion with constraint checks.

  Inbound values (``parse_value``/``parse_literal``) go through the base
  scalar first; its errors propagate untouched. Only an accepted value is
  checked against its ``ConstraintSpec``, and the first violation in
  canonical order is raised as a ``ConstraintError``. Outbound values
  (``serialize``) are never checked.

  ``base`` is any ``Coercer``: a ``GraphQLScalarType`` or another coercer.
  """

  def __init__(self, base: Coercer, spec: ConstraintSpec) -> None:
    super().__init__()
    self.base = base
    self.spec = spec

  def __repr__(self) -> str:
    return f"ConstrainedCoercer({self.spec.field_name}: {self.spec.describe()})"

  def serialize(self, output_value: Any) -> Any:
    return self.base.serialize(output_value)

  def parse_value(self, input_value: Any) -> Any:
    return self._enforce(self.base.parse_value(input_value))

  def parse_literal(
    self, value_node: ValueNode, variables: dict[str, Any] | None = None
  ) -> Any:
    return self._enforce(self.base.parse_literal(value_node, variables))

  def _enforce(self, value: Any) -> Any:
    if value is None or value is Undefined:
      return value
    config = get_config()
    if config.skip_validation:
      return value

    violation = self.spec.check(value)
    if violation is None:
      return value

    if config.log_violations:
      logger.debug(
        "Rejected value for field '{}' ({}): {}",
        self.spec.field_name,
        violation.kind,
        violation.reason,
      )
    raise build_constraint_error(self.spec.field_name, violation)


def default_type_name(base: GraphQLScalarType, spec: ConstraintSpec) -> str:
  """Derive a stable, schema-unique name for a wrapped scalar.

  Example: ``ConstraintNumber_title_1f0e3dad`` for ``title: Int @constraint(min: 3)``.
  """
  digest = hashlib.sha1(
    f"{base.name}:{spec.arguments!r}".encode(), usedforsecurity=False
  ).hexdigest()[:8]
  return f"Constraint{spec.scalar_kind.value}_{spec.field_name}_{digest}"


def wrap_scalar(
  base: GraphQLScalarType,
  spec: ConstraintSpec,
  name: str | None = None,
) -> GraphQLScalarType:
  """Build the constrained variant of ``base`` described by ``spec``."""
  coercer = ConstrainedCoercer(base, spec)
  return GraphQLScalarType(
    name=name or default_type_name(base, spec),
    serialize=coercer.serialize,
    parse_value=coercer.parse_value,
    parse_literal=coercer.parse_literal,
    description=f"{base.name} constrained by {spec.describe()}",
    specified_by_url=base.specified_by_url,
    extensions={EXTENSION_KEY: coercer},
  )


def get_coercer(type_: GraphQLNamedType) -> ConstrainedCoercer | None:
  """Return the coercer of a wrapped scalar, or None for any other type."""
  if not isinstance(type_, GraphQLScalarType):
    return None
  coercer = (type_.extensions or {}).get(EXTENSION_KEY)
  return coercer if isinstance(coercer, ConstrainedCoercer) else None


def is_constrained_scalar(type_: GraphQLNamedType) -> bool:
  return get_coercer(type_) is not None
