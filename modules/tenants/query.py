"""
Backend-independent description of a table query.

A ``QuerySpec`` records what a caller asked for (action, columns, filters,
ordering, limit). The same spec is either replayed onto a supabase-py
request builder (live mode) or evaluated by ``MemoryStore`` (simulation
mode and tests).
"""

from dataclasses import dataclass, field
from typing import Any, Optional

FILTER_OPERATORS = frozenset({"eq", "neq", "gt", "gte", "lt", "lte", "ilike", "in_", "is_"})


@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any


@dataclass
class QuerySpec:
    """A single table query, independent of where it runs."""

    table: str
    action: str = "select"  # select | insert | update | delete
    columns: str = "*"
    count: Optional[str] = None
    filters: list[Filter] = field(default_factory=list)
    # PostgREST "or" expressions, e.g. "name.ilike.%jo%,position.ilike.%jo%"
    or_filters: list[str] = field(default_factory=list)
    order: list[tuple[str, bool]] = field(default_factory=list)  # (column, descending)
    limit: Optional[int] = None
    single: bool = False
    payload: Any = None


def apply_to_builder(builder: Any, spec: QuerySpec) -> Any:
    """
    Replay a spec onto a supabase-py table request builder.

    Args:
        builder: Result of ``client.table(...)`` or ``client.schema(...).table(...)``
        spec: The recorded query

    Returns:
        A request builder ready for ``.execute()``
    """
    if spec.action == "select":
        query = builder.select(spec.columns, count=spec.count)
    elif spec.action == "insert":
        return builder.insert(spec.payload)
    elif spec.action == "update":
        query = builder.update(spec.payload)
    elif spec.action == "delete":
        query = builder.delete()
    else:
        raise ValueError(f"Unsupported query action: {spec.action}")

    for f in spec.filters:
        query = getattr(query, f.op)(f.column, f.value)
    for expression in spec.or_filters:
        query = query.or_(expression)

    if spec.action != "select":
        return query

    for column, descending in spec.order:
        query = query.order(column, desc=descending)
    if spec.limit is not None:
        query = query.limit(spec.limit)
    if spec.single:
        query = query.single()
    return query
