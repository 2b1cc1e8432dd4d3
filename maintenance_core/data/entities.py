# =============================================================================
# maintenance_core/data/entities.py
# Entity Registry and Field-Name Normalization
# =============================================================================
"""
One EntitySpec per entity type. It tells every layer how that entity is
stored:

- local table name (also the read-cache prefix)
- remote Supabase table name and the column that upserts conflict on
- key field and the fields the local mirror indexes for filtering
- defaults for fields the remote may omit or return as NULL
- fields the remote may hand back as JSON strings
- whether the remote table uses camelCase (quoted) or snake_case columns

Remote rows may use either spelling for a column. normalize_row() runs once
at the read boundary and returns records with camelCase keys only.
"""

from __future__ import annotations
import copy
import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from maintenance_core.data.constants import LEGACY_STATUS_MAP

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def camel_to_snake(name: str) -> str:
    """totalBudget -> total_budget"""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def snake_to_camel(name: str) -> str:
    """total_budget -> totalBudget (names without '_' are returned unchanged)"""
    if "_" not in name:
        return name
    parts = [part for part in name.split("_") if part]
    if not parts:
        return name
    head, *rest = parts
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


@dataclass(frozen=True, eq=False)
class EntitySpec:
    """Storage description of one entity type."""
    name: str
    remote_table: str
    key_field: str = "id"
    index_fields: Tuple[str, ...] = ()
    composite_indexes: Tuple[Tuple[str, ...], ...] = ()
    defaults: Mapping[str, Callable[[], Any]] = field(default_factory=dict)
    json_fields: Tuple[str, ...] = ()
    remote_style: str = "camel"  # "camel" or "snake"
    # Schema version that introduced the local table
    since_version: int = 1

    @property
    def cache_prefix(self) -> str:
        return self.name

    @property
    def remote_key(self) -> str:
        return self.remote_column(self.key_field)

    def remote_column(self, field_name: str) -> str:
        """Remote column name for a camelCase field."""
        if self.remote_style == "snake":
            return camel_to_snake(field_name)
        return field_name

    def key_of(self, record: Mapping[str, Any]) -> Any:
        return record.get(self.key_field)


def _zeros(n: int) -> Callable[[], List[int]]:
    return lambda: [0] * n


JOBS = EntitySpec(
    name="jobs",
    remote_table="jobs",
    index_fields=("jobRunningId", "dateReceived", "status", "department", "jobType"),
    defaults={
        "technicianIds": list,
        "costs": list,
        "attachments": list,
    },
    json_fields=("costs", "attachments", "technicianIds", "evaluation"),
)

TECHNICIANS = EntitySpec(
    name="technicians",
    remote_table="technicians",
    index_fields=("firstName", "position", "category"),
    defaults={"schedule": dict},
    json_fields=("schedule",),
)

SETTINGS = EntitySpec(
    name="settings",
    remote_table="app_settings",
    json_fields=(
        "idMappings", "divisionMappings", "divisions", "departmentGroupMappings",
    ),
    remote_style="snake",
)

PM_PLANS = EntitySpec(
    name="pm_plans",
    remote_table="pm_plans",
    index_fields=("nextDueDate", "department"),
)

HOLIDAYS = EntitySpec(
    name="holidays",
    remote_table="factory_holidays",
    index_fields=("date",),
)

USER_ROLES = EntitySpec(
    name="user_roles",
    remote_table="user_roles",
    key_field="email",
    index_fields=("role",),
)

BUDGETS = EntitySpec(
    name="budgets",
    remote_table="budgets",
    index_fields=("year", "category"),
    defaults={
        "monthlyPlan": _zeros(12),
        "monthlyActual": _zeros(12),
        "totalBudget": int,
        "itemCode": str,
    },
    json_fields=("monthlyPlan", "monthlyActual"),
)

DAILY_EXPENSES = EntitySpec(
    name="daily_expenses",
    remote_table="daily_expenses",
    index_fields=("year", "month", "division", "budgetId"),
    composite_indexes=(("year", "month"),),
    defaults={
        "quantityDays": _zeros(31),
        "totalQuantity": int,
        "totalPrice": int,
        "pricePerUnit": int,
        "productCode": str,
    },
    json_fields=("quantityDays",),
)

STANDARD_ITEMS = EntitySpec(
    name="standard_items",
    remote_table="standard_items",
    index_fields=("division", "category", "budgetId"),
    defaults={"pricePerUnit": int},
    since_version=2,
)

ALL_ENTITIES: Tuple[EntitySpec, ...] = (
    JOBS,
    TECHNICIANS,
    SETTINGS,
    PM_PLANS,
    HOLIDAYS,
    USER_ROLES,
    BUDGETS,
    DAILY_EXPENSES,
    STANDARD_ITEMS,
)

ENTITIES_BY_NAME: Dict[str, EntitySpec] = {spec.name: spec for spec in ALL_ENTITIES}


def get_entity(name: str) -> EntitySpec:
    try:
        return ENTITIES_BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown entity type: {name}") from None


def _decode_json(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def normalize_row(spec: EntitySpec, row: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert a remote row into the canonical camelCase record.

    When a row carries both spellings of a column, a non-null camelCase value
    wins over the snake_case one.
    """
    record: Dict[str, Any] = {}
    for column, value in row.items():
        name = snake_to_camel(column)
        if name == column:
            if value is not None or name not in record:
                record[name] = value
        elif record.get(name) is None:
            record[name] = value

    for name in spec.json_fields:
        if name in record:
            record[name] = _decode_json(record[name])

    for name, factory in spec.defaults.items():
        if record.get(name) is None:
            record[name] = factory()

    if spec is JOBS and record.get("status") in LEGACY_STATUS_MAP:
        record["status"] = LEGACY_STATUS_MAP[record["status"]]

    return record


def to_remote_row(spec: EntitySpec, record: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate a canonical record into the remote table's column names."""
    payload = copy.deepcopy(dict(record))
    if spec is JOBS:
        # An empty evaluation object is stored as NULL
        payload["evaluation"] = payload.get("evaluation") or None
    if spec.remote_style == "snake":
        return {camel_to_snake(k): v for k, v in payload.items()}
    return payload
