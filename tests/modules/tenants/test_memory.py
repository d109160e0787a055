"""Tests for the in-memory query evaluator."""

import pytest
from supabase import PostgrestAPIError

from modules.tenants.memory import MemoryStore, parse_or_expression
from modules.tenants.query import Filter, QuerySpec


@pytest.fixture
def store():
    return MemoryStore(
        {
            "players": [
                {"id": "1", "name": "John Doe", "position": "Forward", "created_at": "2024-01-03"},
                {"id": "2", "name": "Sarah Smith", "position": "Midfielder", "created_at": "2024-01-02"},
                {"id": "3", "name": "Mike Johnson", "position": None, "created_at": None},
            ]
        }
    )


class TestSelect:
    def test_filters_and_order(self, store):
        spec = QuerySpec(table="players", order=[("created_at", True)])
        names = [r["name"] for r in store.execute(spec).data]
        assert names == ["John Doe", "Sarah Smith", "Mike Johnson"]  # nulls last

    def test_or_expression(self, store):
        spec = QuerySpec(table="players", or_filters=["name.ilike.%jo%,position.ilike.%jo%"])
        names = {r["name"] for r in store.execute(spec).data}
        assert names == {"John Doe", "Mike Johnson"}

    def test_count_and_projection(self, store):
        spec = QuerySpec(table="players", columns="id", count="exact", limit=1)
        response = store.execute(spec)
        assert response.count == 3
        assert response.data == [{"id": "1"}]

    def test_single_without_match_raises_no_rows(self, store):
        spec = QuerySpec(table="players", filters=[Filter("id", "eq", "9")], single=True)
        with pytest.raises(PostgrestAPIError) as exc_info:
            store.execute(spec)
        assert exc_info.value.code == "PGRST116"

    def test_unknown_table_is_empty(self, store):
        assert store.execute(QuerySpec(table="homework")).data == []


class TestWrites:
    def test_insert_assigns_id(self, store):
        response = store.execute(QuerySpec(table="players", action="insert", payload={"name": "New"}))
        assert response.data[0]["id"]
        assert len(store.rows("players")) == 4

    def test_update_and_delete(self, store):
        store.execute(
            QuerySpec(table="players", action="update", payload={"position": "GK"}, filters=[Filter("id", "eq", "3")])
        )
        assert store.rows("players")[2]["position"] == "GK"

        deleted = store.execute(QuerySpec(table="players", action="delete", filters=[Filter("id", "eq", "1")]))
        assert [r["id"] for r in deleted.data] == ["1"]
        assert len(store.rows("players")) == 2

    def test_rows_are_copies(self, store):
        store.rows("players")[0]["name"] = "Changed"
        assert store.rows("players")[0]["name"] == "John Doe"


def test_parse_or_expression():
    assert parse_or_expression("name.ilike.%a%,position.eq.GK") == [
        Filter("name", "ilike", "%a%"),
        Filter("position", "eq", "GK"),
    ]
