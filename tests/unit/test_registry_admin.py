# =============================================================================
# tests/unit/test_registry_admin.py
# Unit Tests for the registry_admin script
# =============================================================================

import importlib.util
from pathlib import Path
import pytest

from maintenance_core.config import RegistryConfig
from maintenance_core.data.constants import seed_budget_items

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "registry_admin.py"


@pytest.fixture(scope="module")
def admin():
    spec = importlib.util.spec_from_file_location("registry_admin", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run_command(admin, service, *argv):
    args = admin.build_parser().parse_args(list(argv))
    return admin.run(args, service)


class TestRegistryAdminCommands:

    def test_seed_budgets(self, admin, offline_service, capsys):
        assert run_command(admin, offline_service, "seed-budgets", "2569") == 0

        assert f"Seeded {len(seed_budget_items(2569))} budget items" in capsys.readouterr().out
        assert len(offline_service.get_budgets(2569)) == len(seed_budget_items(2569))

    def test_archive_keep(self, admin, offline_service, sample_job, tmp_path, capsys):
        offline_service.save_job({**sample_job, "dateReceived": "2024-05-01"})

        code = run_command(admin, offline_service, "archive", "2024", "--keep", "--dir", str(tmp_path))

        assert code == 0
        assert "Archived 1 jobs" in capsys.readouterr().out
        assert (tmp_path / "maintenance_archive_2567.json").exists()
        assert len(offline_service.get_jobs()) == 1

    def test_status_prints_json(self, admin, offline_service, capsys):
        run_command(admin, offline_service, "status")
        out = capsys.readouterr().out
        assert '"not_configured"' in out
        assert '"local_tables"' in out

    def test_unknown_command_exits(self, admin):
        with pytest.raises(SystemExit):
            admin.build_parser().parse_args(["explode"])


class TestRegistryAdminMain:

    def test_main_uses_db_override(self, admin, monkeypatch, tmp_path, capsys):
        monkeypatch.setattr(admin, "load_config", lambda: RegistryConfig())
        monkeypatch.setattr(admin, "setup_logging", lambda *args, **kwargs: None)
        db_path = tmp_path / "registry.db"

        assert admin.main(["--db", str(db_path), "recalc-pm"]) == 0
        assert "Updated 0 PM plans" in capsys.readouterr().out
        assert db_path.exists()

    def test_main_reports_registry_errors(self, admin, monkeypatch, tmp_path, capsys):
        from maintenance_core.errors import RemoteWriteError

        def failing_run(args, service):
            raise RemoteWriteError("Seeded locally but remote insert failed", table="budgets")

        monkeypatch.setattr(admin, "load_config", lambda: RegistryConfig())
        monkeypatch.setattr(admin, "setup_logging", lambda *args, **kwargs: None)
        monkeypatch.setattr(admin, "run", failing_run)

        assert admin.main(["--db", str(tmp_path / "r.db"), "seed-budgets", "2569"]) == 1
        assert "remote insert failed" in capsys.readouterr().err
