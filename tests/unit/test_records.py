"""Tests for neighbors.core.records — record writer and listing reader."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fakes import FakeRecordStore

from neighbors.core.errors import PersistenceError, QueryError
from neighbors.core.outcome import Fatal, Ok
from neighbors.core.records import (
    LISTING_COLUMNS,
    MemberRecord,
    SupabaseRecordStore,
    list_records,
    write_record,
)


def _record(**overrides) -> MemberRecord:
    fields = {"name": "Ada Lovelace", "email": "ada@example.com"}
    fields.update(overrides)
    return MemberRecord(**fields)


class TestMemberRecord:
    def test_row_has_nullable_image_fields(self):
        row = _record().to_row()
        assert row["image_url"] is None
        assert row["original_image_url"] is None

    def test_row_never_sets_created_at(self):
        assert "created_at" not in _record().to_row()


class TestWriteRecord:
    """write_record inserts exactly one row."""

    def test_success(self):
        store = FakeRecordStore()
        record = _record(image_url="https://x/community/a.png")
        assert write_record(store, record) == Ok(record)
        assert store.inserts == [record.to_row()]

    def test_rejected_insert_is_fatal(self):
        store = FakeRecordStore(fail_insert=True)
        outcome = write_record(store, _record())
        assert isinstance(outcome, Fatal)
        assert isinstance(outcome.error, PersistenceError)
        assert len(store.inserts) == 1

    def test_unexpected_error_is_classified(self):
        store = MagicMock()
        store.insert.side_effect = TimeoutError("read timeout")
        outcome = write_record(store, _record())
        assert isinstance(outcome, Fatal)
        assert isinstance(outcome.error, PersistenceError)


class TestListRecords:
    """list_records returns rows newest first."""

    def test_empty_store_returns_empty_list(self):
        assert list_records(FakeRecordStore()) == []

    def test_requests_descending_created_at(self):
        store = FakeRecordStore()
        list_records(store)
        assert store.selects == [
            {"columns": LISTING_COLUMNS, "order_by": "created_at", "descending": True}
        ]

    def test_order_is_non_increasing(self):
        store = FakeRecordStore()
        for i in range(5):
            store.insert(_record(name=f"Member {i}").to_row())
        rows = list_records(store)
        stamps = [row["created_at"] for row in rows]
        assert stamps == sorted(stamps, reverse=True)
        assert rows[0]["name"] == "Member 4"

    def test_projection(self):
        store = FakeRecordStore()
        store.insert(_record().to_row())
        assert set(list_records(store)[0]) == set(LISTING_COLUMNS)

    def test_query_error_propagates(self):
        with pytest.raises(QueryError):
            list_records(FakeRecordStore(fail_select=True))

    def test_unexpected_error_is_classified(self):
        store = MagicMock()
        store.select.side_effect = OSError("network unreachable")
        with pytest.raises(QueryError, match="network unreachable"):
            list_records(store)


class TestSupabaseRecordStore:
    """SupabaseRecordStore translates to PostgREST query builder calls."""

    def test_insert(self):
        client = MagicMock()
        SupabaseRecordStore(client, "community_members").insert({"name": "Ada"})
        client.table.assert_called_once_with("community_members")
        client.table.return_value.insert.assert_called_once_with([{"name": "Ada"}])
        client.table.return_value.insert.return_value.execute.assert_called_once()

    def test_insert_error_is_wrapped(self):
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.side_effect = Exception(
            "violates not-null constraint"
        )
        with pytest.raises(PersistenceError, match="not-null"):
            SupabaseRecordStore(client, "community_members").insert({"name": "Ada"})

    def test_select(self):
        client = MagicMock()
        query = client.table.return_value.select.return_value.order.return_value
        query.execute.return_value = SimpleNamespace(data=[{"name": "Ada"}])

        rows = SupabaseRecordStore(client, "community_members").select(
            ("name", "created_at"), "created_at"
        )

        assert rows == [{"name": "Ada"}]
        client.table.return_value.select.assert_called_once_with("name,created_at")
        client.table.return_value.select.return_value.order.assert_called_once_with(
            "created_at", desc=True
        )

    def test_select_none_data_is_empty(self):
        client = MagicMock()
        query = client.table.return_value.select.return_value.order.return_value
        query.execute.return_value = SimpleNamespace(data=None)
        assert SupabaseRecordStore(client, "t").select(("name",), "created_at") == []

    def test_select_error_is_wrapped(self):
        client = MagicMock()
        client.table.return_value.select.side_effect = Exception("JWT expired")
        with pytest.raises(QueryError, match="JWT expired"):
            SupabaseRecordStore(client, "t").select(("name",), "created_at")
