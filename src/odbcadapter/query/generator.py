"""
SQL generation translating criteria, aggregates and value maps into SQL text.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, List, Mapping, Sequence

from ..errors import QuerySyntaxError
from .criteria import Criteria
from .elements import Aggregate, Collection, Field
from .expressions import Predicate, Q

if TYPE_CHECKING:
    from ..dialects.base import Dialect


COMPARISON_OPERATORS = {
    "eq": "=",
    "ne": "<>",
    "lt": "<",
    "lte": "<=",
    "gt": ">",
    "gte": ">=",
    "like": "LIKE",
}

# Quoted literals and bracketed identifiers are matched first so that
# placeholders inside them are left untouched.
_PLACEHOLDER_RE = re.compile(r"'(?:[^']|'')*'|\[(?:[^\]]|\]\])*\]|\?|(?<![:\w]):([A-Za-z_]\w*)")


class SQLGenerator:
    """
    Render complete statements from structured input.

    Clause assembly lives here once; every engine-specific decision is
    delegated to the dialect, and every value reaches the SQL text through
    ``dialect.escape_value``.
    """

    def __init__(self, dialect: "Dialect") -> None:
        self.dialect = dialect

    # Escaping shortcuts ------------------------------------------------
    def escape_identifier(self, name: str) -> str:
        return self.dialect.escape_identifier(name)

    def escape_field(self, field: Field) -> str:
        return self.dialect.escape_field(field)

    def escape_value(self, value: Any) -> str:
        return self.dialect.escape_value(value)

    def render_regex(self, field_sql: str, pattern: Any) -> str:
        return self.dialect.render_regex(field_sql, pattern)

    # Statements --------------------------------------------------------
    def generate_select(self, criteria: Criteria) -> str:
        return self._select(
            criteria, self._select_list(criteria), paged=True, distinct=criteria.is_distinct
        )

    def generate_count(self, criteria: Criteria) -> str:
        if criteria.is_distinct:
            inner = self._select(criteria, self._select_list(criteria), paged=False, distinct=True)
            return f"SELECT COUNT(*) FROM ({inner}) AS {self.escape_identifier('distinct_rows')}"
        return self._select(criteria, "COUNT(*)", paged=False)

    def generate_aggregate(self, aggregate: Aggregate, criteria: Criteria) -> str:
        if aggregate.field is None:
            target = "*"
        else:
            target = self._column(aggregate.field, self._scope(criteria))
        if aggregate.distinct:
            target = f"DISTINCT {target}"
        expression = f"{aggregate.operation.upper()}({target})"
        return self._select(criteria, expression, paged=False)

    def generate_insert(self, values: Mapping[str, Any], collection: Collection) -> str:
        if not values:
            raise ValueError("Cannot generate an INSERT without values.")
        header = self.dialect.insert_header(self._table(collection), list(values.keys()))
        return f"{header} VALUES {self._values_row(values.values())}"

    def generate_multiple_insert(
        self, values_list: Sequence[Mapping[str, Any]], collection: Collection
    ) -> str:
        if not values_list:
            raise ValueError("Cannot generate a multi-row INSERT without rows.")
        columns = list(values_list[0].keys())
        expected = set(columns)
        rows: List[str] = []
        for index, values in enumerate(values_list):
            if set(values.keys()) != expected:
                raise ValueError(
                    f"Row {index} has columns {sorted(values.keys())}, expected {sorted(expected)}."
                )
            rows.append(self._values_row(values[column] for column in columns))
        header = self.dialect.insert_header(self._table(collection), columns)
        return f"{header} VALUES {', '.join(rows)}"

    def generate_update(self, values: Mapping[str, Any], criteria: Criteria) -> str:
        if not values:
            raise ValueError("Cannot generate an UPDATE without values.")
        assignments = ", ".join(
            f"{self.escape_identifier(column)} = {self.escape_value(value)}"
            for column, value in values.items()
        )
        sql_parts = ["UPDATE", self._table(criteria.collection), "SET", assignments]
        sql_parts.extend(self._where(criteria))
        return " ".join(sql_parts)

    def generate_delete(self, criteria: Criteria) -> str:
        sql_parts = ["DELETE FROM", self._table(criteria.collection)]
        sql_parts.extend(self._where(criteria))
        return " ".join(sql_parts)

    def interpolate_parameters(
        self, sql: str, parameters: Sequence[Any] | Mapping[str, Any]
    ) -> str:
        """
        Replace ``?`` (sequence) or ``:name`` (mapping) placeholders with escaped literals.
        """

        named = isinstance(parameters, Mapping)
        values = [] if named else list(parameters)
        positional = iter(values)
        used = 0

        def substitute(match: re.Match) -> str:
            nonlocal used
            token = match.group(0)
            if token.startswith("'") or token.startswith("["):
                return token
            if token == "?":
                if named:
                    raise QuerySyntaxError("Positional placeholder used with named parameters.")
                try:
                    value = next(positional)
                except StopIteration:
                    raise QuerySyntaxError(
                        f"Not enough parameters for statement: {sql}"
                    ) from None
                used += 1
                return self.escape_value(value)
            name = match.group(1)
            if not named:
                return token
            if name not in parameters:
                raise QuerySyntaxError(f"Missing value for parameter ':{name}'")
            return self.escape_value(parameters[name])

        rendered = _PLACEHOLDER_RE.sub(substitute, sql)
        if not named and used != len(values):
            raise QuerySyntaxError(
                f"Parameter count mismatch: expected {used}, received {len(values)}."
            )
        return rendered

    # Helpers -----------------------------------------------------------
    def _table(self, collection: Collection) -> str:
        table = self.escape_identifier(collection.name)
        if collection.alias:
            table += f" AS {self.escape_identifier(collection.alias)}"
        return table

    def _values_row(self, values) -> str:
        return "(" + ", ".join(self.escape_value(value) for value in values) + ")"

    def _scope(self, criteria: Criteria) -> Collection | None:
        # Bare names become ambiguous once another table is joined in.
        return criteria.collection if criteria.joins else None

    def _column(self, field: Field, scope: Collection | None) -> str:
        if scope is not None and field.collection is None and field.name != "*":
            field = Field(field.name, scope)
        return self.escape_field(field)

    def _select_list(self, criteria: Criteria) -> str:
        if not criteria.projection:
            return "*"
        scope = self._scope(criteria)
        return ", ".join(self._column(field, scope) for field in criteria.projection)

    def _select(
        self, criteria: Criteria, select_list: str, *, paged: bool, distinct: bool = False
    ) -> str:
        scope = self._scope(criteria)
        limit = self.dialect.limit_clause(
            criteria.max_results if paged else None,
            criteria.skip if paged else None,
        )
        head = "SELECT"
        if distinct:
            head += " DISTINCT"
        if limit.prefix:
            head += f" {limit.prefix}"

        sql_parts: List[str] = [head, select_list, "FROM", self._table(criteria.collection)]
        for join in criteria.joins:
            on_sql = self._compile_q(join.on, scope)
            if not on_sql:
                raise QuerySyntaxError(f"Join on '{join.collection.name}' requires a condition.")
            sql_parts.append(f"{join.kind} JOIN {self._table(join.collection)} ON {on_sql}")
        sql_parts.extend(self._where(criteria, scope))

        if paged and criteria.ordering:
            order_sql = ", ".join(
                self._column(order.field, scope) + (" DESC" if order.descending else "")
                for order in criteria.ordering
            )
            sql_parts.extend(["ORDER BY", order_sql])
        elif limit.suffix and self.dialect.capabilities.requires_order_for_offset:
            sql_parts.append("ORDER BY (SELECT NULL)")

        if limit.suffix:
            sql_parts.append(limit.suffix)
        return " ".join(sql_parts)

    def _where(self, criteria: Criteria, scope: Collection | None = None) -> List[str]:
        where_sql = self._compile_q(criteria.predicate, scope)
        if not where_sql:
            return []
        return ["WHERE", where_sql]

    # Predicate compilation ---------------------------------------------
    def _compile_q(self, q: Q, scope: Collection | None = None) -> str:
        parts: List[str] = []
        for child in q.children:
            if isinstance(child, Q):
                child_sql = self._compile_q(child, scope)
                if child_sql:
                    parts.append(f"({child_sql})")
            else:
                parts.append(self._compile_predicate(child, scope))

        if not parts:
            return ""

        sql = f" {q.connector} ".join(parts)
        if q.negated:
            sql = f"NOT ({sql})"
        return sql

    def _operand(self, value: Any, scope: Collection | None) -> str:
        if isinstance(value, Field):
            return self._column(value, scope)
        return self.escape_value(value)

    def _compile_predicate(self, predicate: Predicate, scope: Collection | None = None) -> str:
        column = self._column(predicate.field, scope)
        operator = predicate.operator
        value = predicate.value

        if operator == "regex":
            return self.render_regex(column, value)
        if operator == "isnull":
            return f"{column} IS NULL" if value or value is None else f"{column} IS NOT NULL"
        if value is None and operator in ("eq", "ne"):
            return f"{column} IS NULL" if operator == "eq" else f"{column} IS NOT NULL"
        if operator == "in":
            items = list(value)
            if not items:
                return "1=0"
            return f"{column} IN ({', '.join(self._operand(item, scope) for item in items)})"
        if operator == "between":
            bounds = list(value)
            if len(bounds) != 2:
                raise ValueError("between lookup requires exactly two bounds.")
            low, high = (self._operand(bound, scope) for bound in bounds)
            return f"{column} BETWEEN {low} AND {high}"
        return f"{column} {COMPARISON_OPERATORS[operator]} {self._operand(value, scope)}"
