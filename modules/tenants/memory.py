"""
In-memory evaluator for ``QuerySpec``.

Backs the tenant simulation mode (fixture data served to superadmins and on
backend errors) and the Supabase test double. Semantics follow PostgREST
closely enough for the queries this service issues: equality and range
filters, case-insensitive patterns, ``or`` expressions, ordering with nulls
last, limits, exact counts and the single-object modifier.
"""

import copy
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from supabase import PostgrestAPIError

from shared.exceptions import NO_ROWS_CODE

from .query import Filter, QuerySpec


@dataclass
class MemoryResponse:
    """Mirrors the ``data`` / ``count`` attributes of a supabase-py response."""

    data: Any
    count: Optional[int] = None


def _pattern_to_regex(pattern: str) -> re.Pattern:
    parts = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def _coerce(left: Any, right: Any) -> tuple[Any, Any]:
    if isinstance(left, (int, float)) and isinstance(right, str):
        return left, float(right)
    if isinstance(left, str) and isinstance(right, (int, float)) and not isinstance(right, bool):
        return float(left), right
    return left, right


def _matches(row: dict[str, Any], f: Filter) -> bool:
    value = row.get(f.column)

    if f.op == "is_":
        if f.value in (None, "null"):
            return value is None
        return value is f.value
    if f.op == "in_":
        return value in list(f.value)
    if f.op == "eq":
        if value is None:
            return False
        left, right = _coerce(value, f.value)
        return left == right
    if f.op == "neq":
        if value is None:
            return False
        left, right = _coerce(value, f.value)
        return left != right
    if f.op == "ilike":
        if value is None:
            return False
        return _pattern_to_regex(str(f.value)).fullmatch(str(value)) is not None

    if value is None:
        return False
    try:
        left, right = _coerce(value, f.value)
        if f.op == "gt":
            return left > right
        if f.op == "gte":
            return left >= right
        if f.op == "lt":
            return left < right
        if f.op == "lte":
            return left <= right
    except (TypeError, ValueError):
        return False
    raise ValueError(f"Unsupported filter operator: {f.op}")


def parse_or_expression(expression: str) -> list[Filter]:
    """Parse a PostgREST ``or`` expression such as ``name.ilike.%a%,position.eq.GK``."""
    filters = []
    for part in expression.split(","):
        column, op, value = part.strip().split(".", 2)
        filters.append(Filter(column, "in_" if op == "in" else op, value))
    return filters


def _project(row: dict[str, Any], columns: str) -> dict[str, Any]:
    wanted = [c.strip() for c in columns.split(",")]
    if "*" in wanted or not any(wanted):
        return dict(row)
    # Embedded resources ("trainers(email)") are not modelled in memory.
    return {c: row.get(c) for c in wanted if c and "(" not in c}


class MemoryStore:
    """
    A set of named tables held in memory.

    Rows are deep-copied in and out, so callers never share mutable state
    with the store.
    """

    def __init__(self, tables: Optional[dict[str, list[dict[str, Any]]]] = None):
        self._tables: dict[str, list[dict[str, Any]]] = copy.deepcopy(tables or {})

    def rows(self, table: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self._tables.get(table, []))

    def seed(self, table: str, rows: list[dict[str, Any]]) -> None:
        self._tables.setdefault(table, []).extend(copy.deepcopy(rows))

    def has_table(self, table: str) -> bool:
        return table in self._tables

    def _select_rows(self, spec: QuerySpec) -> list[dict[str, Any]]:
        rows = self._tables.get(spec.table, [])
        matched = [r for r in rows if all(_matches(r, f) for f in spec.filters)]
        for expression in spec.or_filters:
            alternatives = parse_or_expression(expression)
            matched = [r for r in matched if any(_matches(r, f) for f in alternatives)]
        return matched

    def execute(self, spec: QuerySpec) -> MemoryResponse:
        """Evaluate a spec and return a response shaped like supabase-py's."""
        if spec.action == "select":
            return self._execute_select(spec)
        if spec.action == "insert":
            return self._execute_insert(spec)
        if spec.action == "update":
            matched = self._select_rows(spec)
            for row in matched:
                row.update(copy.deepcopy(spec.payload))
            return MemoryResponse(data=copy.deepcopy(matched))
        if spec.action == "delete":
            matched = self._select_rows(spec)
            ids = {id(r) for r in matched}
            self._tables[spec.table] = [
                r for r in self._tables.get(spec.table, []) if id(r) not in ids
            ]
            return MemoryResponse(data=copy.deepcopy(matched))
        raise ValueError(f"Unsupported query action: {spec.action}")

    def _execute_select(self, spec: QuerySpec) -> MemoryResponse:
        matched = self._select_rows(spec)
        count = len(matched) if spec.count else None

        ordered = list(matched)
        for column, descending in reversed(spec.order):
            present = [r for r in ordered if r.get(column) is not None]
            missing = [r for r in ordered if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=descending)
            ordered = present + missing
        if spec.limit is not None:
            ordered = ordered[: spec.limit]

        data = [_project(r, spec.columns) for r in ordered]
        if spec.single:
            if len(data) != 1:
                raise PostgrestAPIError({
                    "message": "JSON object requested, multiple (or no) rows returned",
                    "code": NO_ROWS_CODE,
                    "hint": None,
                    "details": f"The result contains {len(data)} rows",
                })
            return MemoryResponse(data=copy.deepcopy(data[0]), count=count)
        return MemoryResponse(data=copy.deepcopy(data), count=count)

    def _execute_insert(self, spec: QuerySpec) -> MemoryResponse:
        payload = spec.payload if isinstance(spec.payload, list) else [spec.payload]
        now = datetime.now(timezone.utc).isoformat()
        inserted = []
        for item in payload:
            row = copy.deepcopy(item)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", now)
            self._tables.setdefault(spec.table, []).append(row)
            inserted.append(copy.deepcopy(row))
        return MemoryResponse(data=inserted)
