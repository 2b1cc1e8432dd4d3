# =============================================================================
# maintenance_core/services/report_service.py
# Report Service - Dashboard Aggregations
# =============================================================================

from __future__ import annotations
import json
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import pandas as pd

from maintenance_core.data.constants import JobStatus, UNSPECIFIED_CATEGORY
from .base_service import BaseService, ServiceResult

if TYPE_CHECKING:
    from maintenance_core.offline.unified_data_service import MaintenanceDataService

TOTAL_COLUMN = "รวมทั้งหมด"
GRAND_TOTAL_ROW = "ยอดรวมสุทธิ"
DEPARTMENT_LABEL = "แผนก"

COST_COLUMNS = [
    "jobId", "jobRunningId", "jobType", "department", "repairGroup",
    "effectiveDate", "category", "company", "totalPrice",
]


def _sum_list(value: Any) -> float:
    return sum(value) if isinstance(value, list) else 0


def flatten_costs(jobs: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    One row per cost item, carrying its job's department and type.

    A cost's own date wins over the job's dateReceived; a missing category
    becomes UNSPECIFIED_CATEGORY.
    """
    rows = []
    for job in jobs:
        for cost in job.get("costs") or []:
            rows.append({
                "jobId": job.get("id"),
                "jobRunningId": job.get("jobRunningId"),
                "jobType": job.get("jobType") or "",
                "department": job.get("department"),
                "repairGroup": job.get("repairGroup"),
                "effectiveDate": cost.get("date") or job.get("dateReceived"),
                "category": cost.get("category") or UNSPECIFIED_CATEGORY,
                "company": cost.get("company"),
                "totalPrice": cost.get("totalPrice"),
            })

    df = pd.DataFrame(rows, columns=COST_COLUMNS)
    df["totalPrice"] = pd.to_numeric(df["totalPrice"], errors="coerce").fillna(0)
    df["effectiveDate"] = pd.to_datetime(df["effectiveDate"].str[:10], errors="coerce")
    return df


class ReportService(BaseService):
    """
    pandas aggregations over the registry data for dashboards and exports.

    Usage:
        reports = ReportService(get_data_service())
        result = reports.department_cost_matrix(2026, month=2)
        if result.success:
            st.dataframe(result.data)
    """

    def __init__(self, data_service: MaintenanceDataService):
        super().__init__()
        self.data_service = data_service

    def department_cost_matrix(self, year: int, month: int = -1) -> ServiceResult:
        """
        Department x expense category cost matrix.

        Args:
            year: Gregorian year of the cost's effective date
            month: Month 0-11, or -1 for the whole year

        Returns:
            ServiceResult with a DataFrame indexed by department. Columns are
            the configured expense categories, UNSPECIFIED_CATEGORY for any
            other category, and TOTAL_COLUMN. Departments without cost are
            dropped, the rest sorted by total, and a GRAND_TOTAL_ROW appended.
        """
        def _matrix() -> pd.DataFrame:
            settings = self.data_service.get_settings()
            categories = list(settings.get("expenseCategories") or [])
            columns = categories + [UNSPECIFIED_CATEGORY]

            costs = flatten_costs(self.data_service.get_jobs())
            dates = costs["effectiveDate"]
            mask = dates.dt.year == year
            if month != -1:
                mask &= dates.dt.month == month + 1
            costs = costs[mask & costs["department"].isin(settings.get("departments") or [])]

            if costs.empty:
                empty = pd.DataFrame(columns=columns + [TOTAL_COLUMN], dtype=float)
                empty.index.name = DEPARTMENT_LABEL
                return empty

            costs = costs.assign(
                bucket=costs["category"].where(costs["category"].isin(categories), UNSPECIFIED_CATEGORY)
            )
            matrix = costs.pivot_table(
                index="department",
                columns="bucket",
                values="totalPrice",
                aggfunc="sum",
                fill_value=0,
            )
            matrix = matrix.reindex(columns=columns, fill_value=0)
            matrix.columns.name = None
            matrix[TOTAL_COLUMN] = matrix.sum(axis=1)
            matrix = matrix[matrix[TOTAL_COLUMN] > 0].sort_values(TOTAL_COLUMN, ascending=False)
            if not matrix.empty:
                matrix.loc[GRAND_TOTAL_ROW] = matrix.sum()
            matrix.index.name = DEPARTMENT_LABEL
            return matrix

        return self.safe_execute(f"Building cost matrix for {year}/{month}", _matrix)

    def budget_summary(self, year: int) -> ServiceResult:
        """
        Plan vs actual per budget item of a Buddhist year.

        Returns:
            ServiceResult with columns category, itemCode, name, totalBudget,
            plan, actual, remaining, usedPercent
        """
        def _summary() -> pd.DataFrame:
            budgets = self.data_service.get_budgets(year)
            df = pd.DataFrame(
                budgets,
                columns=["id", "category", "itemCode", "name", "totalBudget", "monthlyPlan", "monthlyActual"],
            )
            df["totalBudget"] = pd.to_numeric(df["totalBudget"], errors="coerce").fillna(0)
            df["plan"] = df["monthlyPlan"].apply(_sum_list)
            df["actual"] = df["monthlyActual"].apply(_sum_list)
            df["remaining"] = df["totalBudget"] - df["actual"]
            df["usedPercent"] = (
                (df["actual"] / df["totalBudget"].where(df["totalBudget"] > 0)) * 100
            ).fillna(0).round(2)
            return (
                df.drop(columns=["monthlyPlan", "monthlyActual"])
                .sort_values(["category", "itemCode"])
                .reset_index(drop=True)
            )

        return self.safe_execute(f"Summarizing budgets for {year}", _summary)

    def technician_workload(self, year: Optional[int] = None) -> ServiceResult:
        """
        Job count per technician and status.

        Args:
            year: Optional Gregorian year of dateReceived

        Returns:
            ServiceResult with a DataFrame indexed by technician id, columns
            name, one per JobStatus value, and total
        """
        def _workload() -> pd.DataFrame:
            statuses = [s.value for s in JobStatus]
            jobs = self.data_service.get_jobs()
            rows = [
                {"technicianId": tech_id, "status": job.get("status"), "dateReceived": job.get("dateReceived")}
                for job in jobs
                for tech_id in job.get("technicianIds") or []
            ]
            df = pd.DataFrame(rows, columns=["technicianId", "status", "dateReceived"])
            if year is not None:
                received = pd.to_datetime(df["dateReceived"].str[:10], errors="coerce")
                df = df[received.dt.year == year]

            counts = pd.crosstab(df["technicianId"], df["status"]) if not df.empty else pd.DataFrame()
            counts = counts.reindex(columns=statuses, fill_value=0)
            counts.columns.name = None
            counts["total"] = counts.sum(axis=1)

            names = {
                t.get("id"): t.get("nickName") or t.get("firstName") or t.get("id")
                for t in self.data_service.get_technicians()
            }
            counts.insert(0, "name", [names.get(i, i) for i in counts.index])
            counts.index.name = "technicianId"
            return counts.sort_values("total", ascending=False)

        return self.safe_execute("Computing technician workload", _workload)

    def system_usage_stats(self) -> ServiceResult:
        """Serialized size of the main datasets, as the settings page shows it."""
        def _usage() -> Dict[str, Any]:
            datasets = {
                "jobs": self.data_service.get_jobs(),
                "technicians": self.data_service.get_technicians(),
                "pmPlans": self.data_service.get_pm_plans(),
                "budgets": self.data_service.get_budgets(),
            }
            breakdown = {
                name: len(json.dumps(records, ensure_ascii=False, default=str))
                for name, records in datasets.items()
            }
            total = sum(breakdown.values())
            breakdown["totalBytes"] = total
            return {"formatted": f"{total / 1024:.2f} KB", "breakdown": breakdown}

        return self.safe_execute("Measuring system usage", _usage)
