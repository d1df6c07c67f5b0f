"""A transport-agnostic GraphQL request boundary.

Turns a request payload into an HTTP-style ``(status, body)`` pair so that any
web framework can serve a constrained schema:

- ``200`` whenever the operation executed, even if its result is null;
- ``400`` when the request is malformed or is rejected before execution
  (syntax, validation, or variable coercion, constraint violations included).
"""

from __future__ import annotations

from collections.abc import Mapping
import json
from typing import TYPE_CHECKING, Any

from graphql import GraphQLError, graphql_sync
from loguru import logger

from schemawarden.reporting import default_format_error
from schemawarden.transform import build_constrained_schema

if TYPE_CHECKING:
  from graphql import GraphQLSchema

  from schemawarden.reporting import ErrorFormatter

HTTP_OK = 200
HTTP_BAD_REQUEST = 400


class BadRequestError(ValueError):
  """Raised for payloads that are not a GraphQL request."""


def parse_payload(payload: Mapping[str, Any] | str | bytes) -> dict[str, Any]:
  """Normalize a JSON request body into query, variables and operation name."""
  if isinstance(payload, (str, bytes)):
    try:
      payload = json.loads(payload)
    except ValueError as e:
      raise BadRequestError(f"Request body is not valid JSON: {e}") from e
  if not isinstance(payload, Mapping):
    raise BadRequestError("Request body must be a JSON object")

  query = payload.get("query")
  if not isinstance(query, str) or not query.strip():
    raise BadRequestError("Request must contain a 'query' string")
  variables = payload.get("variables")
  if variables is not None and not isinstance(variables, Mapping):
    raise BadRequestError("'variables' must be a JSON object")
  operation_name = payload.get("operationName")
  if operation_name is not None and not isinstance(operation_name, str):
    raise BadRequestError("'operationName' must be a string")

  return {
    "query": query,
    "variables": dict(variables) if variables is not None else None,
    "operation_name": operation_name,
  }


class GraphQLRequestHandler:
  """Executes requests against a schema and formats the response.

  Args:
    schema: The (already constrained) schema to execute against.
    format_error: Optional hook applied to every error; its return value is
      the error as it appears in the response. Defaults to
      ``default_format_error``.
    root_value: Root value passed to resolvers.
    context_value: Context passed to resolvers.
  """

  def __init__(
    self,
    schema: GraphQLSchema,
    format_error: ErrorFormatter | None = None,
    *,
    root_value: Any = None,
    context_value: Any = None,
  ) -> None:
    super().__init__()
    self.schema = schema
    self.format_error = format_error or default_format_error
    self.root_value = root_value
    self.context_value = context_value

  @classmethod
  def from_type_defs(
    cls,
    type_defs: str,
    format_error: ErrorFormatter | None = None,
    **kwargs: Any,
  ) -> GraphQLRequestHandler:
    """Build the constrained schema from SDL and a handler serving it."""
    return cls(build_constrained_schema(type_defs), format_error, **kwargs)

  def handle(
    self, payload: Mapping[str, Any] | str | bytes
  ) -> tuple[int, dict[str, Any]]:
    """Execute one request and return ``(status, body)``."""
    try:
      request = parse_payload(payload)
    except BadRequestError as e:
      logger.debug("Rejected malformed request: {}", e)
      error = GraphQLError(str(e), original_error=e)
      return HTTP_BAD_REQUEST, {"errors": [self.format_error(error)]}

    result = graphql_sync(
      self.schema,
      request["query"],
      root_value=self.root_value,
      context_value=self.context_value,
      variable_values=request["variables"],
      operation_name=request["operation_name"],
    )

    # Errors raised before execution carry no response path
    if (
      result.errors
      and result.data is None
      and all(e.path is None for e in result.errors)
    ):
      logger.debug(
        "Rejected request before execution: {}",
        "; ".join(e.message for e in result.errors),
      )
      return HTTP_BAD_REQUEST, {
        "errors": [self.format_error(e) for e in result.errors]
      }

    body: dict[str, Any] = {"data": result.data}
    if result.errors:
      body["errors"] = [self.format_error(e) for e in result.errors]
    return HTTP_OK, body
