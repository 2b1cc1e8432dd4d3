"""
Maintenance Registry administration commands.

Runs the housekeeping operations of the settings page from a shell, against
the same local mirror and Supabase project as the app.

Usage:
    python scripts/registry_admin.py status
    python scripts/registry_admin.py archive 2024 [--keep] [--dir archives]
    python scripts/registry_admin.py backup [--out backup.json]
    python scripts/registry_admin.py seed-budgets 2569
    python scripts/registry_admin.py cleanup-budgets 2567
    python scripts/registry_admin.py cleanup-expenses
    python scripts/registry_admin.py fix-duplicates
    python scripts/registry_admin.py recalc-pm

Requirements:
    - Supabase credentials in .streamlit/secrets.toml or SUPABASE_URL /
      SUPABASE_KEY (optional; without them only the local mirror is used)
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from maintenance_core.config import load_config
from maintenance_core.errors import MaintenanceRegistryError, handle_error
from maintenance_core.logging import setup_logging
from maintenance_core.offline import MaintenanceDataService, build_data_service
from maintenance_core.services import ArchiveService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maintenance registry administration")
    parser.add_argument("--db", help="Local mirror path (overrides configuration)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show connection, cache and local table status")
    sub.add_parser("check", help="Probe the Supabase host")

    archive = sub.add_parser("archive", help="Archive the jobs of a Gregorian year to JSON")
    archive.add_argument("year", type=int)
    archive.add_argument("--keep", action="store_true", help="Do not delete archived jobs")
    archive.add_argument("--dir", default="archives", help="Archive directory")

    backup = sub.add_parser("backup", help="Write a full system backup")
    backup.add_argument("--out", default=None, help="Backup file path")
    backup.add_argument("--dir", default="archives", help="Directory for the default file name")

    seed = sub.add_parser("seed-budgets", help="Seed the budget plan of a Buddhist year")
    seed.add_argument("year", type=int)

    cleanup = sub.add_parser("cleanup-budgets", help="Delete budgets up to a Buddhist year")
    cleanup.add_argument("year", type=int)

    sub.add_parser("cleanup-expenses", help="Delete daily expenses older than last year")
    sub.add_parser("fix-duplicates", help="Renumber jobs sharing a running id")
    sub.add_parser("recalc-pm", help="Set missing PM next due dates to today")
    return parser


def run(args: argparse.Namespace, service: MaintenanceDataService) -> int:
    """Execute one parsed command. Returns the process exit code."""
    if args.command == "status":
        print(json.dumps(service.get_status(), ensure_ascii=False, indent=2))
    elif args.command == "check":
        print(json.dumps(service.check_connection(), ensure_ascii=False, indent=2))
    elif args.command == "archive":
        result = ArchiveService(service, archive_dir=args.dir).archive_year(
            args.year, delete_after=not args.keep
        )
        if not result.success:
            print(f"Archive failed: {result.error}", file=sys.stderr)
            return 1
        print(f"Archived {result.data['count']} jobs to {result.data['path']} "
              f"(deleted {result.data['deleted']})")
    elif args.command == "backup":
        result = ArchiveService(service, archive_dir=args.dir).write_full_backup(path=args.out)
        if not result.success:
            print(f"Backup failed: {result.error}", file=sys.stderr)
            return 1
        print(f"Backup written to {result.data}")
    elif args.command == "seed-budgets":
        print(f"Seeded {service.seed_budgets(args.year)} budget items for {args.year}")
    elif args.command == "cleanup-budgets":
        print(f"Deleted {service.cleanup_old_budgets(args.year)} budgets up to {args.year}")
    elif args.command == "cleanup-expenses":
        print(f"Deleted {service.cleanup_historical_expenses()} historical expense rows")
    elif args.command == "fix-duplicates":
        print(f"Renumbered {service.fix_duplicate_job_ids()} jobs")
    elif args.command == "recalc-pm":
        print(f"Updated {service.recalculate_all_pm_dates()} PM plans")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config().with_overrides(db_path=args.db, log_level=args.log_level)
    setup_logging(config.log_level, log_to_file=config.log_to_file)

    service = build_data_service(config)
    try:
        return run(args, service)
    except MaintenanceRegistryError as e:
        message = handle_error(e, show_user_message=False)
        print(f"Error: {message}", file=sys.stderr)
        return 1
    finally:
        service.close()


if __name__ == "__main__":
    sys.exit(main())
