"""Base classes for constraint validators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, ClassVar, override


class ScalarKind(Enum):
  """Coercion family of a base scalar a constraint can decorate."""

  NUMBER = "Number"
  STRING = "String"


class Priority(IntEnum):
  """Canonical execution order of constraint kinds (lower runs earlier).

  The first failing validator in this order is the one reported.
  """

  MIN = 0
  MAX = 1
  EXCLUSIVE_MIN = 2
  EXCLUSIVE_MAX = 3
  MULTIPLE_OF = 4
  MIN_LENGTH = 10
  MAX_LENGTH = 11
  STARTS_WITH = 12
  ENDS_WITH = 13
  CONTAINS = 14
  NOT_CONTAINS = 15
  PATTERN = 16
  FORMAT = 17


@dataclass(frozen=True, slots=True)
class Violation:
  """A failed validator run: which kind failed, its threshold and why."""

  kind: str
  threshold: Any
  reason: str


def format_threshold(threshold: object) -> str:
  """Render a threshold for a reason string (``3.0`` renders as ``3``)."""
  if isinstance(threshold, float) and threshold.is_integer():
    return str(int(threshold))
  return str(threshold)


class Validator[T]:
  """Base class for validators.

  A validator is bound to one declared threshold. ``check`` is pure: it
  returns ``None`` when the value passes and a ``Violation`` otherwise.
  """

  kind: ClassVar[str] = ""
  scalar_kind: ClassVar[ScalarKind]
  priority: ClassVar[int] = 100

  def __init__(self, threshold: Any) -> None:
    super().__init__()
    self.threshold = self.coerce_threshold(threshold)

  @classmethod
  def coerce_threshold(cls, threshold: Any) -> Any:
    """Check the declared threshold shape and return the value to keep.

    Raises:
      TypeError: If the threshold has the wrong type for this kind.
      ValueError: If the threshold has the right type but an unusable value.
    """
    return threshold

  def is_valid(self, value: T) -> bool:
    """Return True if the value satisfies the constraint."""
    raise NotImplementedError(
      f"Validator {self.__class__.__name__} does not implement is_valid"
    )

  def reason(self) -> str:
    """Return the human-readable failure message."""
    return f"Must satisfy {self.kind} {format_threshold(self.threshold)}"

  def check(self, value: T) -> Violation | None:
    """Run the validator against an already-coerced value."""
    if self.is_valid(value):
      return None
    return Violation(self.kind, self.threshold, self.reason())

  def describe(self) -> str:
    """Return a descriptive string for the validator (e.g. 'min: 3')."""
    return f"{self.kind}: {self.threshold!r}"

  @override
  def __repr__(self) -> str:
    return f"{self.__class__.__name__}({self.threshold!r})"

  @override
  def __eq__(self, other: object) -> bool:
    """Check equality based on type and threshold."""
    if not isinstance(other, type(self)):
      return NotImplemented
    return self.threshold == other.threshold

  @override
  def __hash__(self) -> int:
    return hash((type(self), self.threshold))
