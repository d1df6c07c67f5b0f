"""Re-export all validators from submodules."""

from schemawarden.validators.format import FORMATS, Format
from schemawarden.validators.numeric import (
  ExclusiveMax,
  ExclusiveMin,
  Max,
  Min,
  MultipleOf,
)
from schemawarden.validators.string import (
  Contains,
  EndsWith,
  MaxLength,
  MinLength,
  NotContains,
  Pattern,
  StartsWith,
)

__all__ = [
  "FORMATS",
  "Contains",
  "EndsWith",
  "ExclusiveMax",
  "ExclusiveMin",
  "Format",
  "Max",
  "MaxLength",
  "Min",
  "MinLength",
  "MultipleOf",
  "NotContains",
  "Pattern",
  "StartsWith",
]
