"""Tests for the report repository and the saved-list filters."""

from datetime import date

import pytest

from fieldreports.db.reports import ReportRepository, filter_reports, REPORTS_COLLECTION
from fieldreports.models import results
from fieldreports.models.report import ReportData


@pytest.fixture
def repository(store) -> ReportRepository:
    return ReportRepository(store)


def _seed(store, report_id: str, user_id: str, day: date, text: str = "testo"):
    store.set(
        REPORTS_COLLECTION,
        report_id,
        {"date": day.isoformat(), "text": text, "userId": user_id},
    )


class TestListReports:
    def test_standard_user_sees_only_own_reports(self, store, repository):
        _seed(store, "r1", "user-1", date(2024, 3, 1))
        _seed(store, "r2", "user-2", date(2024, 3, 2))

        reports = repository.list_reports("user-1", is_master=False)

        assert [report.id for report in reports] == ["r1"]

    def test_master_sees_all_newest_first(self, store, repository):
        _seed(store, "r1", "user-1", date(2024, 3, 1))
        _seed(store, "r2", "user-2", date(2024, 3, 5))
        _seed(store, "r3", "user-1", date(2024, 2, 28))

        reports = repository.list_reports("master-1", is_master=True)

        assert [report.id for report in reports] == ["r2", "r1", "r3"]

    def test_store_failure_yields_empty_list(self, store, repository):
        _seed(store, "r1", "user-1", date(2024, 3, 1))
        store.fail_reads = True

        assert repository.list_reports("user-1", is_master=False) == []

    def test_malformed_document_yields_empty_list(self, store, repository):
        _seed(store, "r1", "user-1", date(2024, 3, 1))
        store.set(REPORTS_COLLECTION, "r2", {"date": "2024-03-02", "text": ""})

        assert repository.list_reports("master-1", is_master=True) == []
        assert repository.get_report("r2") is None

    def test_stored_date_is_a_calendar_date(self, store, repository):
        _seed(store, "r1", "user-1", date(2024, 3, 10))

        report = repository.list_reports("user-1", is_master=False)[0]

        assert report.date == date(2024, 3, 10)


class TestCreateReport:
    def test_returns_new_id(self, store, repository):
        result = repository.create_report(
            ReportData(date=date(2024, 3, 10), text="x", user_id="user-1")
        )

        assert result.success
        stored = store.get(REPORTS_COLLECTION, result.id)
        assert stored.data == {"date": "2024-03-10", "text": "x", "userId": "user-1"}

    def test_same_day_reports_are_distinct(self, repository):
        data = ReportData(date=date(2024, 3, 10), text="x", user_id="user-1")

        first = repository.create_report(data)
        second = repository.create_report(data)

        assert first.id != second.id

    def test_write_failure(self, store, repository):
        store.fail_writes = True

        result = repository.create_report(
            ReportData(date=date(2024, 3, 10), text="x", user_id="user-1")
        )

        assert not result.success
        assert result.error == "write-failure"
        assert result.message == results.REPORT_SAVE_FAILED


class TestUpdateAndDelete:
    def test_update_replaces_fields(self, store, repository):
        _seed(store, "r1", "user-1", date(2024, 3, 1), text="old")

        result = repository.update_report(
            "r1", ReportData(date=date(2024, 3, 2), text="new", user_id="user-1")
        )

        assert result.success
        report = repository.get_report("r1")
        assert report.text == "new"
        assert report.date == date(2024, 3, 2)

    def test_update_missing_report_fails(self, repository):
        result = repository.update_report(
            "ghost", ReportData(date=date(2024, 3, 2), text="x", user_id="user-1")
        )

        assert not result.success
        assert result.message == results.REPORT_UPDATE_FAILED

    def test_non_owner_cannot_update(self, store, repository, user_factory):
        _seed(store, "r1", "user-2", date(2024, 3, 1), text="theirs")
        caller = user_factory.make()

        result = repository.update_report(
            "r1",
            ReportData(date=date(2024, 3, 1), text="mine now", user_id="user-2"),
            caller=caller,
        )

        assert result.error == "not-authorized"
        assert repository.get_report("r1").text == "theirs"

    def test_master_can_update_any_report(self, store, repository, user_factory):
        _seed(store, "r1", "user-2", date(2024, 3, 1))

        result = repository.update_report(
            "r1",
            ReportData(date=date(2024, 3, 1), text="fixed", user_id="user-2"),
            caller=user_factory.make_master(),
        )

        assert result.success

    def test_delete(self, store, repository):
        _seed(store, "r1", "user-1", date(2024, 3, 1))

        result = repository.delete_report("r1")

        assert result.success
        assert repository.get_report("r1") is None

    def test_non_owner_cannot_delete(self, store, repository, user_factory):
        _seed(store, "r1", "user-2", date(2024, 3, 1))

        result = repository.delete_report("r1", caller=user_factory.make())

        assert result.error == "not-authorized"
        assert repository.get_report("r1") is not None

    def test_delete_failure(self, store, repository):
        _seed(store, "r1", "user-1", date(2024, 3, 1))
        store.fail_writes = True

        result = repository.delete_report("r1")

        assert result.message == results.REPORT_DELETE_FAILED


class TestFilterReports:
    @pytest.fixture
    def reports(self, report_factory):
        return [
            report_factory.make({"id": "a", "date": date(2024, 3, 1), "user_id": "u1"}),
            report_factory.make({"id": "b", "date": date(2024, 3, 10), "user_id": "u2"}),
            report_factory.make({"id": "c", "date": date(2024, 3, 20), "user_id": "u1"}),
        ]

    def test_date_bounds_are_inclusive(self, reports):
        filtered = filter_reports(
            reports, start=date(2024, 3, 1), end=date(2024, 3, 10)
        )

        assert [report.id for report in filtered] == ["b", "a"]

    def test_owner_filter_applies_to_masters(self, reports):
        filtered = filter_reports(reports, user_id="u1", is_master=True)

        assert [report.id for report in filtered] == ["c", "a"]

    def test_owner_filter_ignored_for_standard_users(self, reports):
        filtered = filter_reports(reports, user_id="u1", is_master=False)

        assert len(filtered) == 3

    def test_sorted_newest_first(self, reports):
        filtered = filter_reports(list(reversed(reports)))

        assert [report.id for report in filtered] == ["c", "b", "a"]
