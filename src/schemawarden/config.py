"""Global configuration for the schemawarden library."""

from __future__ import annotations

import contextlib
import dataclasses
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
  from collections.abc import Iterator


@dataclasses.dataclass
class Config:
  """Global configuration settings.

  Attributes:
    directive_name: Name of the schema directive carrying constraint
      arguments (default: "constraint").
    skip_validation: Whether wrapped scalars skip constraint checks and only
      run the base coercion (default: False).
    log_violations: Whether rejected values are logged at debug level
      (default: True).
  """

  directive_name: str = "constraint"
  skip_validation: bool = False
  log_violations: bool = True


# Singleton instance
_config = Config()


def get_config() -> Config:
  """Get the global configuration."""
  return _config


def reset_config() -> None:
  """Reset configuration to defaults (mostly for testing)."""
  global _config
  _config = Config()


@contextlib.contextmanager
def overrides(**kwargs: Any) -> Iterator[None]:
  """Context manager to temporarily override configuration.

  Useful for:
  - Trusted bulk imports that must bypass constraints (skip_validation=True)
  - Silencing violation logs in noisy test suites (log_violations=False)
  - Building a schema that spells the directive differently

  Example:
    ```python
    with overrides(directive_name="check"):
      schema = build_constrained_schema(type_defs)
    ```
  """
  original = {}
  for key, value in kwargs.items():
    if hasattr(_config, key):
      original[key] = getattr(_config, key)
      setattr(_config, key, value)
    else:
      raise AttributeError(f"Config has no attribute '{key}'")

  try:
    yield
  finally:
    for key, value in original.items():
      setattr(_config, key, value)
