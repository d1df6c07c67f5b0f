"""Resolution of declared constraint arguments into ordered validators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from graphql import GraphQLScalarType

from schemawarden.base import ScalarKind, Validator, Violation
from schemawarden.exceptions import ConstraintDefinitionError
from schemawarden.validators import (
  Contains,
  EndsWith,
  ExclusiveMax,
  ExclusiveMin,
  Format,
  Max,
  MaxLength,
  Min,
  MinLength,
  MultipleOf,
  NotContains,
  Pattern,
  StartsWith,
)

if TYPE_CHECKING:
  from collections.abc import Mapping

VALIDATORS: dict[str, type[Validator[Any]]] = {
  cls.kind: cls
  for cls in sorted(
    (
      Min,
      Max,
      ExclusiveMin,
      ExclusiveMax,
      MultipleOf,
      MinLength,
      MaxLength,
      StartsWith,
      EndsWith,
      Contains,
      NotContains,
      Pattern,
      Format,
    ),
    key=lambda cls: cls.priority,
  )
}

# Canonical kind order; also the order constraints are checked in
CONSTRAINT_KINDS: tuple[str, ...] = tuple(VALIDATORS)

SCALAR_KINDS: dict[str, ScalarKind] = {
  "Int": ScalarKind.NUMBER,
  "Float": ScalarKind.NUMBER,
  "String": ScalarKind.STRING,
  "ID": ScalarKind.STRING,
}


@dataclass(frozen=True)
class ConstraintSpec:
  """The resolved, canonically ordered constraints of one declaration."""

  field_name: str
  scalar_kind: ScalarKind
  validators: tuple[Validator[Any], ...]

  @property
  def arguments(self) -> tuple[tuple[str, Any], ...]:
    """The ``(kind, threshold)`` pairs in canonical order."""
    return tuple((v.kind, v.threshold) for v in self.validators)

  def check(self, value: Any) -> Violation | None:
    """Return the first violation in canonical order, if any."""
    for validator in self.validators:
      violation = validator.check(value)
      if violation is not None:
        return violation
    return None

  def describe(self) -> str:
    return ", ".join(v.describe() for v in self.validators)


def scalar_kind_of(scalar: GraphQLScalarType, field_name: str = "") -> ScalarKind:
  """Map a base scalar to the constraint family it supports.

  Raises:
    ConstraintDefinitionError: If the scalar is not Int, Float, String or ID.
  """
  kind = SCALAR_KINDS.get(scalar.name)
  if kind is None:
    supported = ", ".join(SCALAR_KINDS)
    raise ConstraintDefinitionError(
      f"Field '{field_name}' of type {scalar.name} cannot carry constraints "
      f"(supported scalars: {supported})"
    )
  return kind


def resolve_constraints(
  field_name: str,
  arguments: Mapping[str, Any],
  base: GraphQLScalarType,
) -> ConstraintSpec:
  """Build the ConstraintSpec for one declaration.

  Args:
    field_name: Name of the declaring field, input field or argument.
    arguments: Declared constraint arguments; ``None`` values count as absent.
    base: The scalar the declaration decorates.

  Returns:
    The ``ConstraintSpec``, with validators in canonical order whatever the
    declaration order was.

  Raises:
    ConstraintDefinitionError: If the declaration is empty, names an unknown
      kind, mixes in a kind the scalar does not support, or has a malformed
      threshold.
  """
  scalar_kind = scalar_kind_of(base, field_name)
  declared = {k: v for k, v in arguments.items() if v is not None}
  if not declared:
    raise ConstraintDefinitionError(
      f"Constraint on field '{field_name}' declares no constraint arguments"
    )

  unknown = sorted(k for k in declared if k not in VALIDATORS)
  if unknown:
    raise ConstraintDefinitionError(
      f"Unknown constraint argument(s) on field '{field_name}': {unknown}"
    )

  validators: list[Validator[Any]] = []
  for kind in CONSTRAINT_KINDS:
    if kind not in declared:
      continue
    cls = VALIDATORS[kind]
    if cls.scalar_kind is not scalar_kind:
      raise ConstraintDefinitionError(
        f"Constraint '{kind}' cannot be applied to {base.name} field "
        f"'{field_name}': it requires a {cls.scalar_kind.value} scalar"
      )
    try:
      validators.append(cls(declared[kind]))
    except (TypeError, ValueError) as e:
      raise ConstraintDefinitionError(
        f"Invalid '{kind}' constraint on field '{field_name}': {e}"
      ) from e

  return ConstraintSpec(field_name, scalar_kind, tuple(validators))
