# =============================================================================
# maintenance_core/services/archive_service.py
# Yearly Job Archives and Full-System Backups
# =============================================================================

from __future__ import annotations
import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .base_service import BaseService, ServiceResult
from .job_numbering import thai_year

if TYPE_CHECKING:
    from maintenance_core.offline.unified_data_service import MaintenanceDataService

DEFAULT_ARCHIVE_DIR = Path("archives")


def archive_filename(year: int) -> str:
    """maintenance_archive_{buddhist_year}.json for a Gregorian year."""
    return f"maintenance_archive_{thai_year(year)}.json"


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, default=str)


class ArchiveService(BaseService):
    """
    Export jobs and system snapshots to JSON files.

    Usage:
        service = ArchiveService(get_data_service(), archive_dir="archives")

        result = service.archive_year(2024)
        if result.success:
            print(result.data["path"], result.data["count"])
    """

    def __init__(
        self,
        data_service: MaintenanceDataService,
        archive_dir: Optional[Union[str, Path]] = None,
    ):
        super().__init__()
        self.data_service = data_service
        self.archive_dir = Path(archive_dir) if archive_dir else DEFAULT_ARCHIVE_DIR

    def archive_year(self, year: int, delete_after: bool = True) -> ServiceResult:
        """
        Write every job received in a Gregorian year to an archive file.

        Args:
            year: Gregorian year
            delete_after: Remove the archived jobs from both stores

        Returns:
            ServiceResult with {"path", "count", "deleted"}
        """
        def _archive() -> Dict[str, Any]:
            jobs = self.data_service.get_jobs_for_archive(year)
            path = self.archive_dir / archive_filename(year)
            _write_json(path, jobs)

            deleted = 0
            if delete_after and jobs:
                deleted = self.data_service.delete_jobs_by_period(year)
            return {"path": str(path), "count": len(jobs), "deleted": deleted}

        return self.safe_execute(f"Archiving jobs of {year}", _archive)

    def load_archive(self, path: Union[str, Path]) -> ServiceResult:
        """Read the job list back from an archive file."""
        def _load() -> List[Dict[str, Any]]:
            with open(path, "r", encoding="utf-8") as f:
                jobs = json.load(f)
            if not isinstance(jobs, list):
                raise ValueError(f"{path} is not a job archive")
            return jobs

        return self.safe_execute(f"Loading archive {path}", _load)

    def write_full_backup(
        self,
        path: Optional[Union[str, Path]] = None,
        now: Optional[datetime] = None,
    ) -> ServiceResult:
        """
        Write export_full_system_backup() to a JSON file.

        Returns:
            ServiceResult with the written path
        """
        def _backup() -> str:
            now_ = now or datetime.now()
            target = Path(path) if path else (
                self.archive_dir / f"maintenance_backup_{now_.strftime('%Y%m%d_%H%M%S')}.json"
            )
            _write_json(target, self.data_service.export_full_system_backup(now=now_))
            return str(target)

        return self.safe_execute("Exporting full system backup", _backup)
