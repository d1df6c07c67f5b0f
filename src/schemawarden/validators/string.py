"""String validators for String and ID scalars."""

from __future__ import annotations

import re
from typing import Any, ClassVar, override

from schemawarden.base import Priority, ScalarKind, Validator


class _StringValidator(Validator[str]):
  """Base class for validators comparing a string against a string threshold."""

  scalar_kind = ScalarKind.STRING
  message: ClassVar[str] = ""

  @override
  @classmethod
  def coerce_threshold(cls, threshold: Any) -> str:
    if not isinstance(threshold, str):
      raise TypeError(
        f"'{cls.kind}' requires a string threshold, got {type(threshold).__name__}"
      )
    return threshold

  @override
  def reason(self) -> str:
    return f"{self.message} {self.threshold}"


class _LengthValidator(Validator[str]):
  """Base class for length bounds (minLength, maxLength)."""

  scalar_kind = ScalarKind.STRING

  @override
  @classmethod
  def coerce_threshold(cls, threshold: Any) -> int:
    if isinstance(threshold, float) and threshold.is_integer():
      threshold = int(threshold)
    if isinstance(threshold, bool) or not isinstance(threshold, int):
      raise TypeError(
        f"'{cls.kind}' requires an integer threshold, got {type(threshold).__name__}"
      )
    if threshold < 0:
      raise ValueError(f"'{cls.kind}' threshold must be >= 0, got {threshold}")
    return threshold


class MinLength(_LengthValidator):
  """String must have at least ``threshold`` characters."""

  kind = "minLength"
  priority = Priority.MIN_LENGTH

  @override
  def is_valid(self, value: str) -> bool:
    return len(value) >= self.threshold

  @override
  def reason(self) -> str:
    return f"Must be at least {self.threshold} characters in length"


class MaxLength(_LengthValidator):
  """String must have at most ``threshold`` characters."""

  kind = "maxLength"
  priority = Priority.MAX_LENGTH

  @override
  def is_valid(self, value: str) -> bool:
    return len(value) <= self.threshold

  @override
  def reason(self) -> str:
    return f"Must be no more than {self.threshold} characters in length"


class StartsWith(_StringValidator):
  kind = "startsWith"
  priority = Priority.STARTS_WITH
  message = "Must start with"

  @override
  def is_valid(self, value: str) -> bool:
    return value.startswith(self.threshold)


class EndsWith(_StringValidator):
  kind = "endsWith"
  priority = Priority.ENDS_WITH
  message = "Must end with"

  @override
  def is_valid(self, value: str) -> bool:
    return value.endswith(self.threshold)


class Contains(_StringValidator):
  kind = "contains"
  priority = Priority.CONTAINS
  message = "Must contain"

  @override
  def is_valid(self, value: str) -> bool:
    return self.threshold in value


class NotContains(_StringValidator):
  kind = "notContains"
  priority = Priority.NOT_CONTAINS
  message = "Must not contain"

  @override
  def is_valid(self, value: str) -> bool:
    return self.threshold not in value


class Pattern(_StringValidator):
  """String must contain a match for the regular expression.

  The expression is searched, not anchored: use ``^...$`` to match the whole
  value.
  """

  kind = "pattern"
  priority = Priority.PATTERN
  message = "Must match"

  def __init__(self, threshold: Any) -> None:
    super().__init__(threshold)
    try:
      self._regex = re.compile(self.threshold)
    except re.error as e:
      raise ValueError(f"'pattern' is not a valid regular expression: {e}") from e

  @override
  def is_valid(self, value: str) -> bool:
    return self._regex.search(value) is not None
