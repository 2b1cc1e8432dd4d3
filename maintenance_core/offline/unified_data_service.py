# =============================================================================
# maintenance_core/offline/unified_data_service.py
# Maintenance Data Service - Single API for Online/Offline Operations
# =============================================================================
"""
MaintenanceDataService - The primary API for all registry data operations.

Reads:  read cache -> Supabase (when configured) -> local mirror
Writes: invalidate cache -> local mirror -> Supabase (when configured)

The local mirror is always written, so the registry keeps working when the
remote is down or not configured. A remote write failure is reported to the
caller as RemoteWriteError after the local write has been kept.

Usage:
------
from maintenance_core.offline import get_data_service

service = get_data_service()

jobs = service.get_jobs()
job_id = service.generate_next_job_id("ไฟฟ้า", "2026-03-15")
service.save_job({**job, "jobRunningId": job_id})
"""

from __future__ import annotations
import copy
import uuid
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence
import logging

from maintenance_core.config import RegistryConfig, load_config
from maintenance_core.data.constants import (
    DEFAULT_DIVISION,
    DEFAULT_JOB_TYPE,
    SETTINGS_ID,
    default_settings,
    seed_budget_items,
)
from maintenance_core.data.entities import (
    BUDGETS,
    DAILY_EXPENSES,
    HOLIDAYS,
    JOBS,
    PM_PLANS,
    SETTINGS,
    STANDARD_ITEMS,
    TECHNICIANS,
    USER_ROLES,
    EntitySpec,
    normalize_row,
    to_remote_row,
)
from maintenance_core.data.supabase_client import (
    SupabaseRemote,
    get_cached_supabase_client,
    get_supabase_client,
)
from maintenance_core.errors import LocalStoreError, RemoteWriteError, SequenceAllocationError
from maintenance_core.offline.cache_manager import ReadCache, cache_key
from maintenance_core.offline.connection_manager import ConnectionManager, ConnectionState, ConnectionStatus
from maintenance_core.offline.local_database import Filter, LocalMirrorStore
from maintenance_core.services import job_numbering

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.1"
COST_FIELDS = ("category", "company")


def _received_date(job: Dict[str, Any]) -> Optional[date]:
    value = job.get("dateReceived")
    if not value:
        return None
    try:
        return job_numbering.parse_date_received(value)
    except SequenceAllocationError:
        return None


class MaintenanceDataService:
    """
    Synchronizing access layer over the local mirror and the remote store.

    All dependencies are injectable; get_data_service() builds the
    process-wide instance from configuration.
    """

    def __init__(
        self,
        local: LocalMirrorStore,
        remote: Optional[SupabaseRemote] = None,
        cache: Optional[ReadCache] = None,
        connection: Optional[ConnectionManager] = None,
        config: Optional[RegistryConfig] = None,
    ):
        self.config = config if config is not None else RegistryConfig()
        self.local = local
        self.remote = remote
        self.cache = cache if cache is not None else ReadCache(self.config.cache_ttl_seconds)
        self.connection = connection if connection is not None else ConnectionManager(self.config)
        self.connection.register_callback(self._on_connection_change)
        self.local.initialize()

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def remote_enabled(self) -> bool:
        """Whether reads and writes go to the remote at all."""
        return self.remote is not None

    @property
    def is_online(self) -> bool:
        return self.connection.is_online

    def _on_connection_change(self, state: ConnectionState) -> None:
        # Entries cached while the remote was failing came from the local mirror
        if state.status == ConnectionStatus.ONLINE:
            self.cache.clear()

    # =========================================================================
    # GENERIC READ / WRITE / DELETE
    # =========================================================================

    @staticmethod
    def _remote_filters(spec: EntitySpec, filters: Sequence[Filter]) -> List[Filter]:
        return [(spec.remote_column(f), op, value) for f, op, value in filters]

    def _fetch_remote(self, spec: EntitySpec, filters: Sequence[Filter] = ()) -> Optional[List[Dict[str, Any]]]:
        """Normalized remote rows, or None when the remote is unavailable."""
        if not self.remote_enabled:
            return None
        try:
            rows = self.remote.fetch(
                spec.remote_table,
                self._remote_filters(spec, filters),
                order_by=spec.remote_key,
            )
        except Exception as e:
            self.connection.record_failure(e)
            logger.warning(f"Remote read failed for {spec.name}, using local mirror: {e}")
            return None
        self.connection.record_success()
        return [normalize_row(spec, row) for row in rows]

    def _find_local(self, spec: EntitySpec, filters: Sequence[Filter] = ()) -> List[Dict[str, Any]]:
        try:
            return self.local.find(spec.name, filters)
        except LocalStoreError as e:
            logger.warning(f"Local read failed for {spec.name}: {e}")
            return []

    def _read(self, spec: EntitySpec, key: str, filters: Sequence[Filter] = ()) -> List[Dict[str, Any]]:
        """
        Cached read with remote-then-local fallback.

        Never raises because the remote is unreachable; a failing local
        mirror yields an empty list.
        """
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        records = self._fetch_remote(spec, filters)
        if records is not None:
            try:
                self.local.put_many(spec.name, records)
            except LocalStoreError as e:
                logger.warning(f"Could not mirror {spec.name} locally: {e}")
            logger.debug(f"Fetched {len(records)} rows from Supabase: {spec.name}")
        else:
            records = self._find_local(spec, filters)
            logger.debug(f"Fetched {len(records)} rows from local mirror: {spec.name}")

        self.cache.set(key, records)
        return records

    def _write(self, spec: EntitySpec, record: Dict[str, Any], raise_remote: bool = True) -> Dict[str, Any]:
        """
        Invalidate, write locally, then upsert remotely.

        Raises:
            RemoteWriteError: remote upsert failed (only when raise_remote)
        """
        self.cache.invalidate(spec.cache_prefix)
        self.local.put(spec.name, record)

        if self.remote_enabled:
            try:
                self.remote.upsert(
                    spec.remote_table,
                    [to_remote_row(spec, record)],
                    on_conflict=spec.remote_key,
                )
                self.connection.record_success()
            except Exception as e:
                self.connection.record_failure(e)
                key = spec.key_of(record)
                if raise_remote:
                    raise RemoteWriteError(
                        f"Saved locally but remote upsert failed for {spec.name} {key}: {e}",
                        table=spec.remote_table,
                        key=key,
                    ) from e
                logger.warning(f"Remote upsert failed for {spec.name} {key}: {e}")
        return record

    def _delete(self, spec: EntitySpec, key: Any) -> bool:
        """Delete locally, then best-effort remotely."""
        self.cache.invalidate(spec.cache_prefix)
        removed = self.local.delete(spec.name, key)

        if self.remote_enabled:
            try:
                self.remote.delete(spec.remote_table, [(spec.remote_key, "eq", key)])
                self.connection.record_success()
            except Exception as e:
                self.connection.record_failure(e)
                logger.warning(f"Remote delete failed for {spec.name} {key}: {e}")
        return removed

    def _delete_where(self, spec: EntitySpec, filters: Sequence[Filter]) -> int:
        """
        Delete matching records from both stores.

        Returns:
            The remote count when the remote answered, otherwise the local count
        """
        self.cache.invalidate(spec.cache_prefix)
        removed = self.local.delete_where(spec.name, filters)

        if self.remote_enabled:
            remote_filters = self._remote_filters(spec, filters)
            try:
                remote_count = self.remote.count(spec.remote_table, remote_filters)
                if remote_count > 0:
                    self.remote.delete(spec.remote_table, remote_filters)
                self.connection.record_success()
                removed = remote_count
            except Exception as e:
                self.connection.record_failure(e)
                logger.warning(f"Remote cleanup failed for {spec.name}: {e}")
        return removed

    def _bulk_rename(self, spec: EntitySpec, records: List[Dict[str, Any]], field: str, old_value: Any, new_value: Any) -> int:
        touched = [r for r in records if r.get(field) == old_value]
        for record in touched:
            self._write(spec, {**record, field: new_value}, raise_remote=False)
        logger.info(f"Renamed {spec.name}.{field} {old_value!r} -> {new_value!r} on {len(touched)} records")
        return len(touched)

    @staticmethod
    def _with_id(record: Dict[str, Any]) -> Dict[str, Any]:
        record = copy.deepcopy(dict(record))
        if not record.get("id"):
            record["id"] = str(uuid.uuid4())
        return record

    # =========================================================================
    # JOBS
    # =========================================================================

    def get_jobs(self) -> List[Dict[str, Any]]:
        return self._read(JOBS, JOBS.cache_prefix)

    def save_job(self, job: Dict[str, Any]) -> Dict[str, Any]:
        return self._write(JOBS, self._with_id(job))

    def delete_job(self, job_id: str) -> bool:
        return self._delete(JOBS, job_id)

    def bulk_update_job_field(self, field: str, old_value: Any, new_value: Any) -> int:
        """Rename a value of one job field everywhere; returns jobs touched."""
        return self._bulk_rename(JOBS, self.get_jobs(), field, old_value, new_value)

    def bulk_update_cost_field(self, field: str, old_value: Any, new_value: Any) -> int:
        """
        Rename a cost item's category or company inside every job.

        Returns:
            Number of jobs with at least one cost item changed
        """
        if field not in COST_FIELDS:
            raise ValueError(f"Cost field must be one of {COST_FIELDS}, got {field!r}")

        updated = 0
        for job in self.get_jobs():
            costs = job.get("costs") or []
            if not any(c.get(field) == old_value for c in costs):
                continue
            new_costs = [
                {**c, field: new_value} if c.get(field) == old_value else c
                for c in costs
            ]
            self._write(JOBS, {**job, "costs": new_costs}, raise_remote=False)
            updated += 1
        return updated

    def generate_next_job_id(self, job_type: str, date_received: Any) -> str:
        """
        Next running id for the job type in the month received.

        Reads the current max and returns max + 1; it does not reserve the
        id, so concurrent callers can get the same value.
        """
        settings = self.get_settings()
        prefix = job_numbering.prefix_for(settings.get("idMappings"), job_type)
        existing = [job.get("jobRunningId") for job in self.get_jobs()]
        return job_numbering.next_job_id(prefix, date_received, existing, job_type=job_type)

    def get_jobs_for_archive(self, year: int) -> List[Dict[str, Any]]:
        """Jobs received in a Gregorian year."""
        jobs = []
        for job in self.get_jobs():
            received = _received_date(job)
            if received is not None and received.year == year:
                jobs.append(job)
        return jobs

    def delete_jobs_by_period(self, year: int, month: int = -1) -> int:
        """
        Delete jobs received in a Gregorian year, and month (0-11) unless -1.

        Returns:
            Number of jobs deleted
        """
        doomed = []
        for job in self.get_jobs():
            received = _received_date(job)
            if received is None or received.year != year:
                continue
            if month == -1 or received.month - 1 == month:
                doomed.append(job)

        for job in doomed:
            self.delete_job(job["id"])
        logger.info(f"Deleted {len(doomed)} jobs for {year}/{month}")
        return len(doomed)

    def fix_duplicate_job_ids(self) -> int:
        """
        Renumber jobs that share a running id.

        The earliest-received job keeps the id; every later one gets a fresh
        id from generate_next_job_id.

        Returns:
            Number of jobs renumbered
        """
        groups: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        for job in self.get_jobs():
            if job.get("jobRunningId"):
                groups[job["jobRunningId"]].append(job)

        fixed = 0
        for running_id, group in groups.items():
            if len(group) < 2:
                continue
            group.sort(key=lambda j: _received_date(j) or date.max)
            for job in group[1:]:
                new_id = self.generate_next_job_id(
                    job.get("jobType") or DEFAULT_JOB_TYPE,
                    job.get("dateReceived"),
                )
                logger.info(f"Renumbering job {job['id']}: {running_id} -> {new_id}")
                self.save_job({**job, "jobRunningId": new_id})
                fixed += 1
        return fixed

    # =========================================================================
    # TECHNICIANS
    # =========================================================================

    def get_technicians(self) -> List[Dict[str, Any]]:
        return self._read(TECHNICIANS, TECHNICIANS.cache_prefix)

    def save_technician(self, technician: Dict[str, Any]) -> Dict[str, Any]:
        return self._write(TECHNICIANS, self._with_id(technician))

    def delete_technician(self, technician_id: str) -> bool:
        return self._delete(TECHNICIANS, technician_id)

    def bulk_update_technician_field(self, field: str, old_value: Any, new_value: Any) -> int:
        return self._bulk_rename(TECHNICIANS, self.get_technicians(), field, old_value, new_value)

    # =========================================================================
    # SETTINGS
    # =========================================================================

    @staticmethod
    def _merge_settings(stored: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Built-in defaults overlaid with every non-empty stored value."""
        merged = default_settings()
        for name, value in (stored or {}).items():
            if value is not None and value != "" and value != [] and value != {}:
                merged[name] = value
        merged["id"] = SETTINGS_ID
        return merged

    def get_settings(self) -> Dict[str, Any]:
        cached = self.cache.get(SETTINGS.cache_prefix)
        if cached is not None:
            return cached

        settings = None
        if self.remote_enabled:
            try:
                row = self.remote.fetch_one(SETTINGS.remote_table, SETTINGS.remote_key, SETTINGS_ID)
                self.connection.record_success()
            except Exception as e:
                self.connection.record_failure(e)
                logger.warning(f"Remote settings read failed, using local mirror: {e}")
                row = None
            if row:
                settings = self._merge_settings(normalize_row(SETTINGS, row))
                try:
                    self.local.put(SETTINGS.name, settings)
                except LocalStoreError as e:
                    logger.warning(f"Could not mirror settings locally: {e}")

        if settings is None:
            try:
                stored = self.local.get(SETTINGS.name, SETTINGS_ID)
            except LocalStoreError as e:
                logger.warning(f"Local settings read failed: {e}")
                stored = None
            settings = self._merge_settings(stored)

        self.cache.set(SETTINGS.cache_prefix, settings)
        return settings

    def save_settings(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        record = copy.deepcopy(dict(settings))
        record["id"] = SETTINGS_ID
        return self._write(SETTINGS, record)

    # =========================================================================
    # PM PLANS
    # =========================================================================

    def get_pm_plans(self) -> List[Dict[str, Any]]:
        return self._read(PM_PLANS, PM_PLANS.cache_prefix)

    def save_pm_plan(self, plan: Dict[str, Any]) -> Dict[str, Any]:
        return self._write(PM_PLANS, self._with_id(plan))

    def delete_pm_plan(self, plan_id: str) -> bool:
        return self._delete(PM_PLANS, plan_id)

    def bulk_update_pm_plan_field(self, field: str, old_value: Any, new_value: Any) -> int:
        return self._bulk_rename(PM_PLANS, self.get_pm_plans(), field, old_value, new_value)

    def recalculate_all_pm_dates(self, today: Optional[date] = None) -> int:
        """
        Give every plan that has a frequency but no next due date today's date.

        Returns:
            Number of plans updated
        """
        today = today or date.today()
        updated = 0
        for plan in self.get_pm_plans():
            if plan.get("frequency") and not plan.get("nextDueDate"):
                self.save_pm_plan({**plan, "nextDueDate": today.isoformat()})
                updated += 1
        return updated

    @staticmethod
    def calculate_smart_pm_date(year: int, month: int) -> str:
        """First weekday (Mon-Fri) of a Gregorian month given as 0-11."""
        day = date(year, month + 1, 1)
        while day.weekday() >= 5:
            day += timedelta(days=1)
        return day.isoformat()

    # =========================================================================
    # HOLIDAYS
    # =========================================================================

    def get_holidays(self) -> List[Dict[str, Any]]:
        return self._read(HOLIDAYS, HOLIDAYS.cache_prefix)

    def save_holiday(self, holiday: Dict[str, Any]) -> Dict[str, Any]:
        return self._write(HOLIDAYS, self._with_id(holiday))

    def delete_holiday(self, holiday_id: str) -> bool:
        return self._delete(HOLIDAYS, holiday_id)

    # =========================================================================
    # USER ROLES
    # =========================================================================

    def get_user_roles(self) -> List[Dict[str, Any]]:
        return self._read(USER_ROLES, USER_ROLES.cache_prefix)

    def save_user_role(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        if not profile.get("email"):
            raise ValueError("User role profile needs an email")
        return self._write(USER_ROLES, copy.deepcopy(dict(profile)))

    def delete_user_role(self, email: str) -> bool:
        return self._delete(USER_ROLES, email)

    # =========================================================================
    # BUDGETS
    # =========================================================================

    def get_budgets(self, year: Optional[int] = None) -> List[Dict[str, Any]]:
        """Budget items of one Buddhist year, or of every year when None."""
        if year is None:
            return self._read(BUDGETS, cache_key(BUDGETS.cache_prefix, "all"))
        return self._read(BUDGETS, cache_key(BUDGETS.cache_prefix, year), [("year", "eq", year)])

    def save_budget(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return self._write(BUDGETS, self._with_id(item))

    def delete_budget(self, budget_id: str) -> bool:
        return self._delete(BUDGETS, budget_id)

    def _count(self, spec: EntitySpec, filters: Sequence[Filter]) -> int:
        """Remote count when the remote answers, otherwise the local count."""
        if self.remote_enabled:
            try:
                count = self.remote.count(spec.remote_table, self._remote_filters(spec, filters))
                self.connection.record_success()
                return count
            except Exception as e:
                self.connection.record_failure(e)
                logger.warning(f"Remote count failed for {spec.name}, using local mirror: {e}")
        return self.local.count(spec.name, filters)

    def seed_budgets(self, year: int) -> int:
        """
        Insert the built-in budget plan for a year that has no budgets yet.

        Returns:
            Number of items seeded (0 when the year already has budgets or
            no seed plan exists for it)

        Raises:
            RemoteWriteError: seeded locally but the remote insert failed
        """
        items = seed_budget_items(year)
        if not items:
            return 0
        if self._count(BUDGETS, [("year", "eq", year)]) > 0:
            return 0

        self.cache.invalidate(BUDGETS.cache_prefix)
        self.local.put_many(BUDGETS.name, items)
        logger.info(f"Seeded {len(items)} budget items for {year}")

        if self.remote_enabled:
            try:
                self.remote.insert(BUDGETS.remote_table, [to_remote_row(BUDGETS, i) for i in items])
                self.connection.record_success()
            except Exception as e:
                self.connection.record_failure(e)
                raise RemoteWriteError(
                    f"Seeded locally but remote insert failed for budgets {year}: {e}",
                    table=BUDGETS.remote_table,
                ) from e
        return len(items)

    def cleanup_old_budgets(self, year: int) -> int:
        """Delete budgets of every Buddhist year up to and including year."""
        return self._delete_where(BUDGETS, [("year", "lte", year)])

    # =========================================================================
    # DAILY EXPENSES
    # =========================================================================

    def get_daily_expenses(self, year: int, month: int, division: Optional[str] = None) -> List[Dict[str, Any]]:
        """Expense rows of one month (0-11) for a division (default MTN)."""
        division = division or DEFAULT_DIVISION
        filters = [("year", "eq", year), ("month", "eq", month), ("division", "eq", division)]
        key = cache_key(DAILY_EXPENSES.cache_prefix, year, month, division)
        return self._read(DAILY_EXPENSES, key, filters)

    def save_daily_expense(self, expense: Dict[str, Any]) -> Dict[str, Any]:
        """
        Save an expense row and recompute its budget's monthly actual.

        The recompute runs even when the remote upsert failed; the
        RemoteWriteError is raised afterwards. If remote reads still work at
        that point, the sum comes from remote rows that lack this expense, so
        monthlyActual stays behind the local expenses until the next recompute.
        """
        record = self._with_id(expense)
        if not record.get("division"):
            record["division"] = DEFAULT_DIVISION

        remote_error: Optional[RemoteWriteError] = None
        try:
            self._write(DAILY_EXPENSES, record)
        except RemoteWriteError as e:
            remote_error = e

        if record.get("budgetId"):
            self.sync_budget_actual(record["budgetId"], record["year"], record["month"])

        if remote_error is not None:
            raise remote_error
        return record

    def delete_daily_expense(self, expense_id: str) -> bool:
        """Delete an expense row and recompute its budget's monthly actual."""
        expense = self.local.get(DAILY_EXPENSES.name, expense_id)
        if expense is None:
            logger.info(f"Daily expense {expense_id} not in local mirror; nothing to delete")
            return False

        self._delete(DAILY_EXPENSES, expense_id)
        if expense.get("budgetId"):
            self.sync_budget_actual(expense["budgetId"], expense["year"], expense["month"])
        return True

    def sync_budget_actual(self, budget_id: str, year: int, month: int) -> float:
        """
        Set budget.monthlyActual[month] to the summed totalPrice of its expenses.

        Sums remote rows when the remote answers, otherwise local rows. Local
        expenses not yet upserted are not counted while the remote answers.

        Returns:
            The recomputed total
        """
        filters = [("budgetId", "eq", budget_id), ("year", "eq", year), ("month", "eq", month)]
        rows = self._fetch_remote(DAILY_EXPENSES, filters)
        if rows is None:
            rows = self._find_local(DAILY_EXPENSES, filters)
        total = sum(row.get("totalPrice") or 0 for row in rows)

        budget = self.local.get(BUDGETS.name, budget_id)
        if budget is None and self.remote_enabled:
            try:
                row = self.remote.fetch_one(BUDGETS.remote_table, BUDGETS.remote_key, budget_id)
            except Exception as e:
                logger.warning(f"Remote budget lookup failed for {budget_id}: {e}")
                row = None
            budget = normalize_row(BUDGETS, row) if row else None

        if budget is None:
            logger.warning(f"Budget {budget_id} not found; monthly actual not updated")
            return total

        actual = list(budget.get("monthlyActual") or [])
        actual += [0] * (12 - len(actual))
        actual[month] = total
        self.save_budget({**budget, "monthlyActual": actual})
        return total

    def cleanup_historical_expenses(self, today: Optional[date] = None) -> int:
        """
        Delete expense rows older than last Buddhist year.

        Returns:
            Number of rows removed (remote count when the remote answered)
        """
        cutoff = job_numbering.thai_year(today or date.today()) - 1
        return self._delete_where(DAILY_EXPENSES, [("year", "lt", cutoff)])

    # =========================================================================
    # STANDARD ITEMS
    # =========================================================================

    def get_standard_items(self) -> List[Dict[str, Any]]:
        """The full catalog; items are shared across divisions, months and years."""
        return self._read(STANDARD_ITEMS, STANDARD_ITEMS.cache_prefix)

    def save_standard_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        record = self._with_id(item)
        if not record.get("division"):
            record["division"] = DEFAULT_DIVISION
        return self._write(STANDARD_ITEMS, record)

    def delete_standard_item(self, item_id: str) -> bool:
        return self._delete(STANDARD_ITEMS, item_id)

    # =========================================================================
    # BACKUP
    # =========================================================================

    def export_full_system_backup(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Snapshot of jobs, technicians, settings, PM plans and all budgets."""
        return {
            "version": BACKUP_VERSION,
            "timestamp": (now or datetime.now()).isoformat(),
            "data": {
                "jobs": self.get_jobs(),
                "technicians": self.get_technicians(),
                "settings": self.get_settings(),
                "pmPlans": self.get_pm_plans(),
                "budgets": self.get_budgets(),
            },
        }

    # =========================================================================
    # STATUS & DIAGNOSTICS
    # =========================================================================

    def get_status(self) -> Dict[str, Any]:
        """
        Get comprehensive status information.

        Returns:
            Dict with status information for UI display
        """
        try:
            tables = self.local.table_counts()
        except LocalStoreError as e:
            logger.warning(f"Could not count local tables: {e}")
            tables = {}
        return {
            "connection": self.connection.get_status_display(),
            "remote_enabled": self.remote_enabled,
            "cache": self.cache.stats(),
            "local_tables": tables,
        }

    def check_connection(self) -> Dict[str, Any]:
        """Force an immediate reachability check of the remote host."""
        self.connection.check_connection()
        return self.connection.get_status_display()

    def clear_cache(self) -> None:
        self.cache.clear()

    def close(self) -> None:
        self.connection.unregister_callback(self._on_connection_change)
        self.local.close()


def build_data_service(config: RegistryConfig, client: Any = None) -> MaintenanceDataService:
    """
    Wire a MaintenanceDataService from configuration.

    Args:
        config: Resolved configuration
        client: Optional Supabase client (default: created from config)
    """
    if client is None and config.is_remote_configured:
        client = get_supabase_client(config)

    return MaintenanceDataService(
        local=LocalMirrorStore(config.db_path),
        remote=SupabaseRemote(client) if client is not None else None,
        cache=ReadCache(config.cache_ttl_seconds),
        connection=ConnectionManager(config),
        config=config,
    )


# Singleton accessor
_data_service: Optional[MaintenanceDataService] = None


def get_data_service() -> MaintenanceDataService:
    """
    Get the process-wide MaintenanceDataService instance.

    Usage:
        from maintenance_core.offline import get_data_service

        service = get_data_service()
        budgets = service.get_budgets(2569)
    """
    global _data_service
    if _data_service is None:
        config = load_config()
        client = None
        if config.is_remote_configured:
            client = get_cached_supabase_client(
                config.supabase_url,
                config.supabase_key,
                config.remote_timeout_seconds,
            )
        _data_service = build_data_service(config, client=client)
        logger.info(
            f"MaintenanceDataService initialized. Remote: "
            f"{'configured' if _data_service.remote_enabled else 'offline mode'}"
        )
    return _data_service


def reset_data_service() -> None:
    """Drop the process-wide instance (closes its local connection)."""
    global _data_service
    if _data_service is not None:
        _data_service.close()
        _data_service = None
