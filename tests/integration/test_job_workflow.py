# =============================================================================
# tests/integration/test_job_workflow.py
# Integration Tests for Jobs, Bulk Renames, Running Ids and PM Plans
# =============================================================================

from datetime import date
import pytest


@pytest.fixture
def ten_jobs(service, sample_job):
    """Five jobs in department A, five in C"""
    for i in range(10):
        service.save_job({
            **sample_job,
            "id": f"job-{i}",
            "jobRunningId": f"MTN03{i + 1:03d}/69",
            "department": "A" if i % 2 == 0 else "C",
        })


class TestBulkRename:

    def test_department_rename(self, service, ten_jobs):
        assert service.bulk_update_job_field("department", "A", "B") == 5

        departments = [job["department"] for job in service.get_jobs()]
        assert "A" not in departments
        assert departments.count("B") == 5
        assert departments.count("C") == 5

    def test_rename_without_matches(self, service, ten_jobs):
        assert service.bulk_update_job_field("department", "Z", "B") == 0

    def test_rename_survives_remote_write_failure(self, service, fake_remote, local_store, ten_jobs):
        fake_remote.fail_writes = True

        assert service.bulk_update_job_field("department", "A", "B") == 5
        assert local_store.count("jobs", [("department", "eq", "B")]) == 5

    def test_cost_category_rename(self, offline_service, sample_job):
        offline_service.save_job({**sample_job, "id": "j1", "costs": [
            {"category": "old", "company": "BG", "totalPrice": 10},
            {"category": "keep", "company": "BG", "totalPrice": 20},
        ]})
        offline_service.save_job({**sample_job, "id": "j2", "costs": [{"category": "keep"}]})

        assert offline_service.bulk_update_cost_field("category", "old", "new") == 1

        costs = {j["id"]: j["costs"] for j in offline_service.get_jobs()}
        assert [c["category"] for c in costs["j1"]] == ["new", "keep"]
        assert costs["j2"] == [{"category": "keep"}]

    def test_cost_company_rename(self, offline_service, sample_job):
        offline_service.save_job({**sample_job, "costs": [{"company": "BG"}, {"company": "BG"}]})

        assert offline_service.bulk_update_cost_field("company", "BG", "BWG") == 1
        assert offline_service.get_jobs()[0]["costs"] == [{"company": "BWG"}, {"company": "BWG"}]

    def test_cost_rename_rejects_other_fields(self, offline_service):
        with pytest.raises(ValueError):
            offline_service.bulk_update_cost_field("totalPrice", 1, 2)

    def test_technician_and_pm_plan_rename(self, offline_service):
        offline_service.save_technician({"id": "t1", "position": "ช่าง"})
        offline_service.save_technician({"id": "t2", "position": "แอดมิน"})
        offline_service.save_pm_plan({"id": "p1", "department": "A", "frequency": 3})

        assert offline_service.bulk_update_technician_field("position", "ช่าง", "ช่างอาวุโส") == 1
        assert offline_service.bulk_update_pm_plan_field("department", "A", "B") == 1
        assert offline_service.get_pm_plans()[0]["department"] == "B"


class TestJobRunningIds:

    def test_first_and_next_id(self, service):
        job_id = service.generate_next_job_id("ไฟฟ้า", "2026-03-15")
        assert job_id == "MTN03001/69"

        service.save_job({"jobRunningId": job_id, "jobType": "ไฟฟ้า", "dateReceived": "2026-03-15"})

        assert service.generate_next_job_id("ไฟฟ้า", "2026-03-15") == "MTN03002/69"

    def test_vehicle_jobs_use_their_own_prefix(self, service):
        service.save_job({"jobRunningId": "MTN03001/69", "dateReceived": "2026-03-01"})
        assert service.generate_next_job_id("ยานยนต์", "2026-03-20") == "MOT03001/69"

    def test_unmapped_job_type(self, offline_service):
        assert offline_service.generate_next_job_id("งานพิเศษ", "2026-01-05") == "JOB01001/69"

    def test_custom_id_mappings(self, offline_service):
        settings = offline_service.get_settings()
        settings["idMappings"] = [{"category": "ไฟฟ้า", "prefix": "ELE"}]
        offline_service.save_settings(settings)

        assert offline_service.generate_next_job_id("ไฟฟ้า", "2026-03-15") == "ELE03001/69"

    def test_fix_duplicate_job_ids(self, service, sample_job):
        service.save_job({**sample_job, "id": "late", "dateReceived": "2026-03-12"})
        service.save_job({**sample_job, "id": "early", "dateReceived": "2026-03-10"})
        service.save_job({**sample_job, "id": "other", "jobRunningId": "MTN03005/69"})
        service.save_job({**sample_job, "id": "blank-1", "jobRunningId": ""})
        service.save_job({**sample_job, "id": "blank-2", "jobRunningId": ""})

        assert service.fix_duplicate_job_ids() == 1

        ids = {job["id"]: job["jobRunningId"] for job in service.get_jobs()}
        assert ids["early"] == "MTN03001/69"
        assert ids["late"] == "MTN03006/69"
        assert ids["blank-1"] == ids["blank-2"] == ""

    def test_fix_duplicates_noop(self, service, ten_jobs):
        assert service.fix_duplicate_job_ids() == 0


class TestJobPeriods:

    @pytest.fixture
    def jobs_by_month(self, offline_service, sample_job):
        for job_id, received in [
            ("jan", "2026-01-10"),
            ("mar-1", "2026-03-01"),
            ("mar-2", "2026-03-31T23:00:00"),
            ("last-year", "2025-03-15"),
        ]:
            offline_service.save_job({**sample_job, "id": job_id, "dateReceived": received})

    def test_jobs_for_archive(self, offline_service, jobs_by_month):
        assert {j["id"] for j in offline_service.get_jobs_for_archive(2026)} == {"jan", "mar-1", "mar-2"}

    def test_delete_by_month(self, offline_service, jobs_by_month):
        assert offline_service.delete_jobs_by_period(2026, month=2) == 2
        assert {j["id"] for j in offline_service.get_jobs()} == {"jan", "last-year"}

    def test_delete_by_year(self, offline_service, jobs_by_month):
        assert offline_service.delete_jobs_by_period(2025) == 1


class TestPmPlans:

    def test_recalculate_missing_due_dates(self, offline_service):
        offline_service.save_pm_plan({"id": "p1", "frequency": 3})
        offline_service.save_pm_plan({"id": "p2", "frequency": 1, "nextDueDate": "2026-05-01"})
        offline_service.save_pm_plan({"id": "p3", "frequency": None})

        assert offline_service.recalculate_all_pm_dates(today=date(2026, 3, 15)) == 1

        plans = {p["id"]: p for p in offline_service.get_pm_plans()}
        assert plans["p1"]["nextDueDate"] == "2026-03-15"
        assert plans["p2"]["nextDueDate"] == "2026-05-01"
        assert "nextDueDate" not in plans["p3"]

    @pytest.mark.parametrize("year,month,expected", [
        (2026, 1, "2026-02-02"),   # Feb 1 2026 is a Sunday
        (2026, 7, "2026-08-03"),   # Aug 1 2026 is a Saturday
        (2026, 3, "2026-04-01"),   # weekday already
    ])
    def test_smart_pm_date(self, offline_service, year, month, expected):
        assert offline_service.calculate_smart_pm_date(year, month) == expected

    def test_delete_pm_plan(self, service, fake_remote):
        service.save_pm_plan({"id": "p1", "frequency": 6})

        assert service.delete_pm_plan("p1") is True
        assert fake_remote.tables["pm_plans"] == []


class TestFullBackup:

    def test_backup_uses_getters(self, service, sample_job, sample_budget):
        service.save_job(sample_job)
        service.save_budget(sample_budget)
        service.save_budget({**sample_budget, "id": "budget-old", "year": 2568})

        backup = service.export_full_system_backup()

        assert backup["version"] == "1.1"
        assert [j["id"] for j in backup["data"]["jobs"]] == ["job-1"]
        assert len(backup["data"]["budgets"]) == 2
        assert backup["data"]["settings"]["id"] == 1
