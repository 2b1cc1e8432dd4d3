# =============================================================================
# tests/unit/test_local_database.py
# Unit Tests for LocalMirrorStore
# =============================================================================

import json
import sqlite3
import threading
import pytest

from maintenance_core.errors import LocalStoreError
from maintenance_core.offline.local_database import (
    MIGRATIONS,
    SCHEMA_VERSION,
    LocalMirrorStore,
)


class TestLocalMirrorRecords:
    """Test get/put/delete by key"""

    def test_put_then_get(self, local_store, sample_job):
        local_store.put("jobs", sample_job)
        assert local_store.get("jobs", "job-1") == sample_job

    def test_get_missing_returns_none(self, local_store):
        assert local_store.get("jobs", "nope") is None

    def test_put_same_key_twice_keeps_one_row(self, local_store, sample_job):
        local_store.put("jobs", sample_job)
        local_store.put("jobs", {**sample_job, "status": "ปิดงานแล้ว"})

        assert local_store.count("jobs") == 1
        assert local_store.get("jobs", "job-1")["status"] == "ปิดงานแล้ว"

    def test_record_without_key_is_rejected(self, local_store):
        with pytest.raises(LocalStoreError):
            local_store.put("jobs", {"department": "x"})

    def test_user_roles_are_keyed_by_email(self, local_store):
        local_store.put("user_roles", {"email": "a@example.com", "role": "HEAD"})
        assert local_store.get("user_roles", "a@example.com")["role"] == "HEAD"

    def test_settings_integer_key(self, local_store):
        local_store.put("settings", {"id": 1, "themeColor": "INDIGO"})
        assert local_store.get("settings", 1)["themeColor"] == "INDIGO"

    def test_delete_reports_whether_row_existed(self, local_store, sample_job):
        local_store.put("jobs", sample_job)
        assert local_store.delete("jobs", "job-1") is True
        assert local_store.delete("jobs", "job-1") is False

    def test_unknown_table_raises(self, local_store):
        with pytest.raises(KeyError):
            local_store.get("patients", "1")

    def test_put_many_returns_count(self, local_store):
        written = local_store.put_many("holidays", [
            {"id": "h1", "date": "2026-01-01", "name": "New Year"},
            {"id": "h2", "date": "2026-04-13", "name": "Songkran"},
        ])
        assert written == 2
        assert local_store.put_many("holidays", []) == 0


class TestLocalMirrorFilters:
    """Test find/count/delete_where filters"""

    @pytest.fixture
    def budgets(self, local_store):
        rows = [
            {"id": "b1", "year": 2567, "category": "A", "owner": "x"},
            {"id": "b2", "year": 2568, "category": "A", "owner": "y"},
            {"id": "b3", "year": 2569, "category": "B", "owner": "x"},
        ]
        local_store.put_many("budgets", rows)
        return rows

    def test_indexed_equality(self, local_store, budgets):
        assert [r["id"] for r in local_store.find("budgets", [("year", "eq", 2569)])] == ["b3"]

    def test_indexed_ordering(self, local_store, budgets):
        found = local_store.find("budgets", [("year", "lte", 2568)])
        assert [r["id"] for r in found] == ["b1", "b2"]

    def test_non_indexed_field_filters_in_python(self, local_store, budgets):
        found = local_store.find("budgets", [("owner", "eq", "x"), ("category", "eq", "A")])
        assert [r["id"] for r in found] == ["b1"]

    def test_count_with_filters(self, local_store, budgets):
        assert local_store.count("budgets", [("category", "eq", "A")]) == 2
        assert local_store.count("budgets", [("owner", "eq", "x")]) == 2

    def test_missing_field_never_matches_ordering(self, local_store, budgets):
        assert local_store.find("budgets", [("score", "gt", 1)]) == []

    def test_unsupported_operator(self, local_store, budgets):
        with pytest.raises(ValueError):
            local_store.find("budgets", [("year", "like", "25%")])

    def test_delete_where(self, local_store, budgets):
        assert local_store.delete_where("budgets", [("year", "lt", 2569)]) == 2
        assert [r["id"] for r in local_store.get_all("budgets")] == ["b3"]

    def test_delete_where_nothing_matches(self, local_store, budgets):
        assert local_store.delete_where("budgets", [("year", "eq", 2500)]) == 0

    def test_daily_expense_composite_filter(self, local_store, make_expense):
        local_store.put_many("daily_expenses", [
            make_expense("e1", 100, month=3),
            make_expense("e2", 200, month=4),
            make_expense("e3", 300, month=3, division="MOT"),
        ])
        found = local_store.find("daily_expenses", [
            ("year", "eq", 2569), ("month", "eq", 3), ("division", "eq", "MTN"),
        ])
        assert [r["id"] for r in found] == ["e1"]


class TestLocalMirrorHelpers:

    def test_to_dataframe(self, local_store, sample_job):
        local_store.put("jobs", sample_job)
        df = local_store.to_dataframe("jobs")
        assert len(df) == 1
        assert df.loc[0, "jobRunningId"] == "MTN03001/69"

    def test_to_dataframe_empty(self, local_store):
        assert local_store.to_dataframe("pm_plans").empty

    def test_table_counts_cover_every_entity(self, local_store, sample_job):
        local_store.put("jobs", sample_job)
        counts = local_store.table_counts()
        assert counts["jobs"] == 1
        assert counts["standard_items"] == 0
        assert len(counts) == 9

    def test_clear(self, local_store, sample_job):
        local_store.put("jobs", sample_job)
        local_store.clear("jobs")
        assert local_store.count("jobs") == 0


class TestLocalMirrorSchema:
    """Test PRAGMA user_version migrations"""

    def test_new_database_is_at_current_version(self, local_store):
        assert local_store.schema_version == SCHEMA_VERSION == 2

    def test_standard_items_arrive_in_version_two(self):
        assert not any("standard_items" in stmt for stmt in MIGRATIONS[1])
        assert any("standard_items" in stmt for stmt in MIGRATIONS[2])

    def test_version_one_file_is_upgraded_in_place(self, tmp_path):
        db_path = tmp_path / "registry.db"
        conn = sqlite3.connect(db_path)
        for statement in MIGRATIONS[1]:
            conn.execute(statement)
        conn.execute(
            "INSERT INTO jobs (key, data) VALUES (?, ?)",
            ["job-1", json.dumps({"id": "job-1", "status": "ดำเนินการ"})],
        )
        conn.execute("PRAGMA user_version = 1")
        conn.commit()
        conn.close()

        store = LocalMirrorStore(db_path)
        store.initialize()
        try:
            assert store.schema_version == 2
            assert store.get("jobs", "job-1") == {"id": "job-1", "status": "ดำเนินการ"}
            store.put("standard_items", {"id": "s1", "division": "MTN", "category": "A"})
            assert store.count("standard_items") == 1
        finally:
            store.close()

    def test_reopening_file_keeps_data(self, tmp_path, sample_job):
        db_path = tmp_path / "nested" / "registry.db"
        store = LocalMirrorStore(db_path)
        store.put("jobs", sample_job)
        store.close()

        reopened = LocalMirrorStore(db_path)
        try:
            assert reopened.get("jobs", "job-1") == sample_job
        finally:
            reopened.close()


class TestLocalMirrorThreads:

    def run_in_thread(self, func):
        results = []
        worker = threading.Thread(target=lambda: results.append(func()))
        worker.start()
        worker.join()
        return results[0]

    def test_memory_database_is_per_thread(self, local_store, sample_job):
        local_store.put("jobs", sample_job)

        def read_in_other_thread():
            try:
                return local_store.find("jobs"), local_store.schema_version
            finally:
                local_store.close()

        rows, version = self.run_in_thread(read_in_other_thread)

        assert rows == []
        assert version == SCHEMA_VERSION
        assert local_store.find("jobs") == [sample_job]

    def test_file_database_is_shared_across_threads(self, tmp_path, sample_job):
        store = LocalMirrorStore(tmp_path / "registry.db")
        store.put("jobs", sample_job)

        def read_in_other_thread():
            try:
                return store.get("jobs", "job-1")
            finally:
                store.close()

        try:
            assert self.run_in_thread(read_in_other_thread) == sample_job
        finally:
            store.close()
