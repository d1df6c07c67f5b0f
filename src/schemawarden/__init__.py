"""Schemawarden - declarative value constraints for GraphQL schemas."""

__version__ = "0.1.0"

# Base classes
from schemawarden.base import ScalarKind, Validator, Violation

# Configuration
from schemawarden.config import get_config, overrides, reset_config

# Directive
from schemawarden.directive import constraint_directive, constraint_directive_type_defs

# Exceptions
from schemawarden.exceptions import (
  CONSTRAINT_ERROR_CODE,
  ConstraintDefinitionError,
  ConstraintError,
)

# Error reporting
from schemawarden.reporting import default_format_error, find_constraint_error

# Resolution and wrapping
from schemawarden.resolver import CONSTRAINT_KINDS, ConstraintSpec, resolve_constraints
from schemawarden.scalar import ConstrainedCoercer, is_constrained_scalar, wrap_scalar

# Request boundary
from schemawarden.server import GraphQLRequestHandler

# Schema transformation
from schemawarden.transform import apply_constraints, build_constrained_schema

# All validators
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

__all__ = [
  "CONSTRAINT_ERROR_CODE",
  "CONSTRAINT_KINDS",
  "ConstrainedCoercer",
  "ConstraintDefinitionError",
  "ConstraintError",
  "ConstraintSpec",
  "Contains",
  "EndsWith",
  "ExclusiveMax",
  "ExclusiveMin",
  "Format",
  "GraphQLRequestHandler",
  "Max",
  "MaxLength",
  "Min",
  "MinLength",
  "MultipleOf",
  "NotContains",
  "Pattern",
  "ScalarKind",
  "StartsWith",
  "Validator",
  "Violation",
  "__version__",
  "apply_constraints",
  "build_constrained_schema",
  "constraint_directive",
  "constraint_directive_type_defs",
  "default_format_error",
  "find_constraint_error",
  "get_config",
  "is_constrained_scalar",
  "overrides",
  "reset_config",
  "resolve_constraints",
  "wrap_scalar",
]
