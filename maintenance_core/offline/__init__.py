# =============================================================================
# maintenance_core/offline/__init__.py
# Offline-First Data Access for the Maintenance Registry
# =============================================================================
"""
Offline-First Data Access Module

The registry works the same whether Supabase is reachable, unreachable or not
configured at all.

Architecture:
------------
┌─────────────────────────────────────────────────────────────────┐
│                    OFFLINE-FIRST ARCHITECTURE                    │
├─────────────────────────────────────────────────────────────────┤
│                                                                  │
│   ┌──────────────────────────────────────────────────────────┐  │
│   │               MaintenanceDataService                      │  │
│   │         (Single API - pages and scripts use this)         │  │
│   └──────────────────────────────────────────────────────────┘  │
│                            │                                     │
│              ┌─────────────┴─────────────┐                      │
│              ▼                           ▼                      │
│   ┌──────────────────┐        ┌──────────────────┐             │
│   │  ConnectionMgr   │        │    ReadCache     │             │
│   │ (Online/Degraded)│        │   (30 s TTL)     │             │
│   └──────────────────┘        └──────────────────┘             │
│              │                                                   │
│   ┌──────────┴──────────┐                                       │
│   ▼                     ▼                                       │
│ ┌────────┐        ┌──────────┐                                  │
│ │Supabase│        │  SQLite  │                                  │
│ │(Remote)│        │ (Mirror) │                                  │
│ └────────┘        └──────────┘                                  │
└─────────────────────────────────────────────────────────────────┘

Usage:
------
from maintenance_core.offline import get_data_service

service = get_data_service()

budgets = service.get_budgets(2569)
service.save_daily_expense(expense)     # also recomputes the budget actual

print(service.get_status()["connection"]["status"])
"""

from maintenance_core.offline.connection_manager import (
    ConnectionManager,
    ConnectionState,
    ConnectionStatus,
)

from maintenance_core.offline.local_database import (
    LocalMirrorStore,
    SCHEMA_VERSION,
)

from maintenance_core.offline.cache_manager import (
    ReadCache,
    cache_key,
)

from maintenance_core.offline.unified_data_service import (
    MaintenanceDataService,
    build_data_service,
    get_data_service,
    reset_data_service,
)

__all__ = [
    # Connection Management
    "ConnectionManager",
    "ConnectionState",
    "ConnectionStatus",
    # Local Mirror
    "LocalMirrorStore",
    "SCHEMA_VERSION",
    # Read Cache
    "ReadCache",
    "cache_key",
    # Data Service (Main API)
    "MaintenanceDataService",
    "build_data_service",
    "get_data_service",
    "reset_data_service",
]
