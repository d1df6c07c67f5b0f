"""Numeric validators for Int and Float scalars."""

from __future__ import annotations

from fractions import Fraction
import operator
from typing import TYPE_CHECKING, Any, ClassVar, override

from schemawarden.base import Priority, ScalarKind, Validator, format_threshold

if TYPE_CHECKING:
  from collections.abc import Callable

Number = int | float


def _require_number(kind: str, threshold: Any) -> Number:
  """Ensure a threshold is an int or float (bool is rejected)."""
  if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
    raise TypeError(
      f"'{kind}' requires a numeric threshold, got {type(threshold).__name__}"
    )
  return threshold


class _NumericValidator(Validator[Number]):
  """Base class for numeric validators."""

  scalar_kind = ScalarKind.NUMBER

  @override
  @classmethod
  def coerce_threshold(cls, threshold: Any) -> Number:
    return _require_number(cls.kind, threshold)


class _ComparisonValidator(_NumericValidator):
  """Base class for comparison validators (min, max, exclusiveMin, exclusiveMax).

  Eliminates code duplication by providing common validation logic.
  """

  # Subclasses must define these
  op_func: ClassVar[Callable[[Any, Any], bool]]
  message: ClassVar[str] = ""

  @override
  def is_valid(self, value: Number) -> bool:
    return bool(self.op_func(value, self.threshold))

  @override
  def reason(self) -> str:
    return f"{self.message} {format_threshold(self.threshold)}"


class Min(_ComparisonValidator):
  """Value must be greater than or equal to the threshold."""

  kind = "min"
  priority = Priority.MIN
  op_func = operator.ge
  message = "Must be at least"


class Max(_ComparisonValidator):
  """Value must be less than or equal to the threshold."""

  kind = "max"
  priority = Priority.MAX
  op_func = operator.le
  message = "Must be no greater than"


class ExclusiveMin(_ComparisonValidator):
  """Value must be strictly greater than the threshold."""

  kind = "exclusiveMin"
  priority = Priority.EXCLUSIVE_MIN
  op_func = operator.gt
  message = "Must be greater than"


class ExclusiveMax(_ComparisonValidator):
  """Value must be strictly less than the threshold.

  Reports with the same wording as ``Max``; clients match on that message.
  """

  kind = "exclusiveMax"
  priority = Priority.EXCLUSIVE_MAX
  op_func = operator.lt
  message = "Must be no greater than"


class MultipleOf(_NumericValidator):
  """Value must divide evenly by the threshold.

  Float operands are compared as exact fractions of their decimal form, so
  ``0.3`` is a multiple of ``0.1`` and values of any magnitude are handled.
  """

  kind = "multipleOf"
  priority = Priority.MULTIPLE_OF

  @override
  @classmethod
  def coerce_threshold(cls, threshold: Any) -> Number:
    number = _require_number(cls.kind, threshold)
    if number == 0:
      raise ValueError("'multipleOf' threshold must be non-zero")
    return number

  @override
  def is_valid(self, value: Number) -> bool:
    if isinstance(value, int) and isinstance(self.threshold, int):
      return value % self.threshold == 0
    return Fraction(str(value)) % Fraction(str(self.threshold)) == 0

  @override
  def reason(self) -> str:
    return f"Must be a multiple of {format_threshold(self.threshold)}"
