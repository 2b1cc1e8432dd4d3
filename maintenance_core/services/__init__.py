# =============================================================================
# maintenance_core/services/__init__.py
# Service Layer for the Maintenance Registry
# =============================================================================
"""
Services built on top of MaintenanceDataService.

Usage Example:
-------------
    from maintenance_core.offline import get_data_service
    from maintenance_core.services import ArchiveService, ReportService

    data = get_data_service()

    result = ArchiveService(data, archive_dir="archives").archive_year(2024)
    if result.success:
        print(f"Archived {result.data['count']} jobs to {result.data['path']}")

    matrix = ReportService(data).department_cost_matrix(2026)
"""

from .base_service import BaseService, ServiceResult
from .archive_service import ArchiveService, archive_filename
from .report_service import ReportService, flatten_costs
from . import job_numbering

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Archives and backups
    "ArchiveService",
    "archive_filename",
    # Reports
    "ReportService",
    "flatten_costs",
    # Running ids
    "job_numbering",
]
