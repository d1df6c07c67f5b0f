"""The format validator and its named format checks."""

from __future__ import annotations

import base64
import binascii
import datetime
import ipaddress
import re
from typing import TYPE_CHECKING, Any, override
from urllib.parse import urlsplit
import uuid

from schemawarden.base import Priority, ScalarKind, Validator

if TYPE_CHECKING:
  from collections.abc import Callable

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_TIME_RE = re.compile(
  r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)
_EMAIL_RE = re.compile(
  r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@"
  r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
  r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$"
)
_UUID_RE = re.compile(
  r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


def is_byte(value: str) -> bool:
  """Check for strict base64 (padding required)."""
  if len(value) % 4:
    return False
  try:
    base64.b64decode(value, validate=True)
  except (binascii.Error, ValueError):
    return False
  return True


def is_date(value: str) -> bool:
  if not _DATE_RE.match(value):
    return False
  try:
    datetime.date.fromisoformat(value)
  except ValueError:
    return False
  return True


def is_date_time(value: str) -> bool:
  """Check for an RFC 3339 date-time; the offset is mandatory."""
  if not _DATE_TIME_RE.match(value):
    return False
  # fraction digits are already checked by the regex
  normalized = value[:10] + "T" + value[11:19]
  offset = value[-6:] if value[-1] not in "Zz" else "+00:00"
  normalized += offset
  try:
    datetime.datetime.fromisoformat(normalized)
  except ValueError:
    return False
  return True


def is_email(value: str) -> bool:
  return len(value) <= 254 and _EMAIL_RE.match(value) is not None


def is_ipv4(value: str) -> bool:
  try:
    ipaddress.IPv4Address(value)
  except ValueError:
    return False
  return True


def is_ipv6(value: str) -> bool:
  try:
    ipaddress.IPv6Address(value)
  except ValueError:
    return False
  return True


def is_uri(value: str) -> bool:
  """Check for an absolute URI: a scheme plus something after it."""
  if any(c.isspace() for c in value):
    return False
  try:
    parts = urlsplit(value)
  except ValueError:
    return False
  if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
    return False
  return bool(parts.netloc or parts.path)


def is_uuid(value: str) -> bool:
  if not _UUID_RE.match(value):
    return False
  try:
    uuid.UUID(value)
  except ValueError:
    return False
  return True


# format name -> (check, reason)
FORMATS: dict[str, tuple[Callable[[str], bool], str]] = {
  "byte": (is_byte, "Must be in byte format"),
  "date-time": (is_date_time, "Must be a date-time in RFC 3339 format"),
  "date": (is_date, "Must be a date in ISO 8601 format"),
  "email": (is_email, "Must be in email format"),
  "ipv4": (is_ipv4, "Must be in IP v4 format"),
  "ipv6": (is_ipv6, "Must be in IP v6 format"),
  "uri": (is_uri, "Must be in URI format"),
  "uuid": (is_uuid, "Must be in UUID format"),
}


class Format(Validator[str]):
  """String must be in one of the named formats.

  Example:
    ```graphql
    input SignupInput {
      email: String! @constraint(format: "email")
    }
    ```
  """

  kind = "format"
  scalar_kind = ScalarKind.STRING
  priority = Priority.FORMAT

  @override
  @classmethod
  def coerce_threshold(cls, threshold: Any) -> str:
    if not isinstance(threshold, str):
      raise TypeError(
        f"'format' requires a string threshold, got {type(threshold).__name__}"
      )
    if threshold not in FORMATS:
      known = ", ".join(sorted(FORMATS))
      raise ValueError(f"Invalid format type {threshold} (known formats: {known})")
    return threshold

  @override
  def is_valid(self, value: str) -> bool:
    check, _ = FORMATS[self.threshold]
    return check(value)

  @override
  def reason(self) -> str:
    return FORMATS[self.threshold][1]
