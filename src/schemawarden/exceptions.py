"""Custom exceptions for schemawarden."""

from __future__ import annotations

from typing import Any

CONSTRAINT_ERROR_CODE = "ERR_GRAPHQL_CONSTRAINT_VALIDATION"


class ConstraintDefinitionError(Exception):
  """Raised at schema-build time when a declared constraint is unusable."""


class ConstraintError(ValueError):
  """Raised when a coerced value violates a declared constraint.

  Attributes:
    message: The failing validator's reason (e.g. 'Must be at least 3').
    code: Always ``ERR_GRAPHQL_CONSTRAINT_VALIDATION``.
    field_name: Name of the field, input field or argument being coerced.
    context: One ``{"arg": kind, "value": threshold}`` entry for the failed kind.
  """

  code = CONSTRAINT_ERROR_CODE

  def __init__(
    self, message: str, field_name: str, context: list[dict[str, Any]]
  ) -> None:
    super().__init__(message)
    self.message = message
    self.field_name = field_name
    self.context = context

  def to_dict(self) -> dict[str, Any]:
    """Return the boundary shape of this error."""
    return {
      "message": self.message,
      "code": self.code,
      "fieldName": self.field_name,
      "context": [dict(entry) for entry in self.context],
    }
