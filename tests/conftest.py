# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import copy
import operator
import pytest
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

from maintenance_core.config import RegistryConfig
from maintenance_core.errors import RemoteStoreError
from maintenance_core.offline.cache_manager import ReadCache
from maintenance_core.offline.connection_manager import ConnectionManager
from maintenance_core.offline.local_database import LocalMirrorStore
from maintenance_core.offline.unified_data_service import MaintenanceDataService


REMOTE_URL = "https://abcdefghijklmnop.supabase.co"

_OPS = {
    "eq": operator.eq,
    "lt": operator.lt,
    "lte": operator.le,
    "gt": operator.gt,
    "gte": operator.ge,
}


# =============================================================================
# TEST DOUBLES
# =============================================================================

class ManualClock:
    """Monotonic clock the tests move by hand"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRemote:
    """
    In-memory stand-in for SupabaseRemote.

    Rows are stored exactly as given (remote column names). Set fail_reads
    or fail_writes to make the matching calls raise RemoteStoreError.
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.calls: List[tuple] = []
        self.last_order_by: Optional[str] = None

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    @staticmethod
    def _match(row, filters) -> bool:
        for column, op, value in filters or ():
            try:
                if not _OPS[op](row.get(column), value):
                    return False
            except TypeError:
                return False
        return True

    def _check(self, table: str, operation: str, failing: bool) -> None:
        self.calls.append((operation, table))
        if failing:
            raise RemoteStoreError(f"{operation} on {table} failed", table=table, operation=operation)

    def fetch(self, table, filters=None, columns="*", order_by="id"):
        self._check(table, "select", self.fail_reads)
        self.last_order_by = order_by
        return [copy.deepcopy(r) for r in self._rows(table) if self._match(r, filters)]

    def fetch_one(self, table, column, value):
        self._check(table, "select", self.fail_reads)
        for row in self._rows(table):
            if row.get(column) == value:
                return copy.deepcopy(row)
        return None

    def upsert(self, table, rows, on_conflict="id"):
        self._check(table, "upsert", self.fail_writes)
        stored = self._rows(table)
        for row in rows:
            stored[:] = [r for r in stored if r.get(on_conflict) != row.get(on_conflict)]
            stored.append(copy.deepcopy(row))

    def insert(self, table, rows):
        self._check(table, "insert", self.fail_writes)
        self._rows(table).extend(copy.deepcopy(r) for r in rows)

    def delete(self, table, filters):
        self._check(table, "delete", self.fail_writes)
        self.tables[table] = [r for r in self._rows(table) if not self._match(r, filters)]

    def count(self, table, filters=None):
        self._check(table, "count", self.fail_reads)
        return sum(1 for r in self._rows(table) if self._match(r, filters))


# =============================================================================
# STORE & SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def remote_config():
    return RegistryConfig(supabase_url=REMOTE_URL, supabase_key="anon-key", db_path=":memory:")


@pytest.fixture
def local_store():
    """Fresh in-memory local mirror"""
    store = LocalMirrorStore(":memory:")
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def fake_remote():
    return FakeRemote()


@pytest.fixture
def service(local_store, fake_remote, clock, remote_config):
    """Data service wired to the fake remote"""
    return MaintenanceDataService(
        local=local_store,
        remote=fake_remote,
        cache=ReadCache(30, clock=clock),
        connection=ConnectionManager(remote_config),
        config=remote_config,
    )


@pytest.fixture
def offline_service(local_store, clock):
    """Data service with no remote configured"""
    return MaintenanceDataService(local=local_store, cache=ReadCache(30, clock=clock))


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_job():
    return {
        "id": "job-1",
        "jobRunningId": "MTN03001/69",
        "jobType": "ไฟฟ้า",
        "department": "แผนกวิศวกรรมซ่อมบำรุง (MTN)",
        "dateReceived": "2026-03-15",
        "status": "ดำเนินการ",
        "technicianIds": ["tech-1"],
        "costs": [],
        "attachments": [],
    }


@pytest.fixture
def sample_budget():
    return {
        "id": "budget-1",
        "year": 2569,
        "category": "หมวด 1 อุปกรณ์เครื่องจักร",
        "itemCode": "1.1",
        "name": "ค่าบำรุงรักษา",
        "totalBudget": 12000,
        "monthlyPlan": [1000] * 12,
        "monthlyActual": [0] * 12,
    }


@pytest.fixture
def make_expense():
    """Factory for DailyExpense records"""
    def _make(expense_id: str, total_price: float, budget_id: str = "budget-1",
              year: int = 2569, month: int = 3, division: str = "MTN") -> Dict[str, Any]:
        return {
            "id": expense_id,
            "year": year,
            "month": month,
            "division": division,
            "budgetId": budget_id,
            "productCode": "P-01",
            "productName": "สายไฟ",
            "unit": "ม้วน",
            "pricePerUnit": total_price,
            "quantityDays": [1] + [0] * 30,
            "totalQuantity": 1,
            "totalPrice": total_price,
        }
    return _make


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def mock_streamlit(monkeypatch):
    """Mock Streamlit for testing (secrets start empty)"""
    mock_st = MagicMock()
    mock_st.session_state = {}
    mock_st.secrets = {}

    monkeypatch.setattr("maintenance_core.config.st", mock_st)
    monkeypatch.setattr("maintenance_core.errors.handlers.st", mock_st)

    yield mock_st


@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    mock_client.table.return_value.select.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value = MagicMock()
    return mock_client


@pytest.fixture
def clean_env(monkeypatch):
    """Remove registry environment variables for the duration of a test"""
    for name in (
        "SUPABASE_URL", "SUPABASE_KEY", "REGISTRY_DB_PATH",
        "REGISTRY_CACHE_TTL", "REGISTRY_REMOTE_TIMEOUT", "REGISTRY_LOG_LEVEL",
    ):
        # setenv first so the removal is recorded and undone
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
