"""Conversion of violations into errors and boundary error shapes."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from graphql import GraphQLError

from schemawarden.exceptions import ConstraintError

if TYPE_CHECKING:
  from schemawarden.base import Violation

ErrorFormatter = Callable[[GraphQLError], Any]


def build_constraint_error(field_name: str, violation: Violation) -> ConstraintError:
  """Turn a failed validator run into the error raised to the host."""
  return ConstraintError(
    violation.reason,
    field_name,
    [{"arg": violation.kind, "value": violation.threshold}],
  )


def find_constraint_error(error: BaseException | None) -> ConstraintError | None:
  """Return the ConstraintError behind a host error, if there is one.

  graphql-core wraps coercion failures in its own invalid-value error and
  keeps the cause in ``original_error``; the chain is followed to the end.
  """
  seen: set[int] = set()
  while error is not None and id(error) not in seen:
    if isinstance(error, ConstraintError):
      return error
    seen.add(id(error))
    error = getattr(error, "original_error", None)
  return None


def default_format_error(error: GraphQLError) -> dict[str, Any]:
  """Format an error the way the boundary reports it without a custom hook.

  The host's own formatting is kept; a constraint failure additionally
  carries its payload under ``extensions.originalError``.
  """
  formatted: dict[str, Any] = dict(error.formatted)
  constraint_error = find_constraint_error(error.original_error)
  if constraint_error is not None:
    extensions = dict(formatted.get("extensions") or {})
    extensions["originalError"] = constraint_error.to_dict()
    formatted["extensions"] = extensions
  return formatted
