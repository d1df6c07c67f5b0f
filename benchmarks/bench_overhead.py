import timeit

from graphql import GraphQLInt, graphql_sync

from schemawarden import build_constrained_schema, resolve_constraints, wrap_scalar
from schemawarden.config import overrides

# Wrapped scalar
spec = resolve_constraints(
  "title", {"min": 3, "max": 1000, "multipleOf": 1}, GraphQLInt
)
wrapped = wrap_scalar(GraphQLInt, spec)

# Schemas with and without constraints
TYPE_DEFS = """
  type Query {{ books: [Int] }}
  type Mutation {{ createBook(input: BookInput): Int }}
  input BookInput {{ title: Int! {directive} }}
"""
plain_schema = build_constrained_schema(TYPE_DEFS.format(directive=""))
constrained_schema = build_constrained_schema(
  TYPE_DEFS.format(directive="@constraint(min: 3, max: 1000)")
)
QUERY = "mutation($input: BookInput) { createBook(input: $input) }"
VARIABLES = {"input": {"title": 42}}


def run_benchmarks() -> None:
  n = 100_000

  print("--- Scalar Coercion Overhead ---")
  t_base = timeit.timeit(lambda: GraphQLInt.parse_value(42), number=n)
  t_wrapped = timeit.timeit(lambda: wrapped.parse_value(42), number=n)
  with overrides(skip_validation=True):
    t_skip = timeit.timeit(lambda: wrapped.parse_value(42), number=n)

  print(f"Base Int.parse_value: {t_base:.4f}s")
  print(f"Wrapped parse_value: {t_wrapped:.4f}s")
  print(f"Wrapped (skip_validation=True): {t_skip:.4f}s")
  print(f"Overhead: {(t_wrapped - t_base) / t_base * 100:.1f}%")

  print("\n--- Request Overhead ---")
  n_requests = 2_000

  def run(schema):
    return graphql_sync(schema, QUERY, variable_values=VARIABLES)

  t_plain = timeit.timeit(lambda: run(plain_schema), number=n_requests)
  t_constrained = timeit.timeit(lambda: run(constrained_schema), number=n_requests)

  print(f"Unconstrained request (n={n_requests}): {t_plain:.4f}s")
  print(f"Constrained request (n={n_requests}): {t_constrained:.4f}s")
  print(f"Overhead: {(t_constrained - t_plain) / t_plain * 100:.1f}%")


if __name__ == "__main__":
  run_benchmarks()
