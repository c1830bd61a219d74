"""Report repository: CRUD and queries on report documents."""

import logging
from datetime import date
from typing import Any

from fieldreports.models.report import ReportData, SavedReport
from fieldreports.models.user import User
from fieldreports.models import results
from fieldreports.models.results import OperationResult
from fieldreports.utils.dates import parse_report_date
from .documents import DocumentStore, Document

logger = logging.getLogger(__name__)

REPORTS_COLLECTION = "reports"


class ReportRepository:
    """Access to report documents, scoped by owner unless the caller is a master."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def list_reports(self, caller_user_id: str, is_master: bool) -> list[SavedReport]:
        """Get reports visible to the caller, newest date first.

        Masters see every report; everyone else sees only their own.
        Store failures are logged and yield an empty list.
        """
        filters = None if is_master else {"userId": caller_user_id}
        try:
            docs = self.store.query(
                REPORTS_COLLECTION, filters=filters, order_by=("date", "desc")
            )
            return [_doc_to_report(doc) for doc in docs]
        except Exception as e:
            logger.error(f"Error fetching reports: {e}")
            return []

    def get_report(self, report_id: str) -> SavedReport | None:
        try:
            doc = self.store.get(REPORTS_COLLECTION, report_id)
            return _doc_to_report(doc) if doc else None
        except Exception as e:
            logger.error(f"Error fetching report {report_id}: {e}")
            return None

    def create_report(self, data: ReportData) -> OperationResult:
        """Save a new report. Several reports per day and user are allowed."""
        try:
            report_id = self.store.add(REPORTS_COLLECTION, _data_to_doc(data))
        except Exception as e:
            logger.error(f"Error saving report: {e}")
            return OperationResult.fail("write-failure", results.REPORT_SAVE_FAILED)
        logger.info(f"Created report {report_id} for user {data.user_id}")
        return OperationResult.ok(id=report_id)

    def update_report(
        self, report_id: str, data: ReportData, caller: User | None = None
    ) -> OperationResult:
        """Replace a report's date, text and owner. Last writer wins."""
        if caller is not None:
            denied = self._deny_unless_allowed(report_id, caller)
            if denied is not None:
                return denied
        try:
            self.store.update(REPORTS_COLLECTION, report_id, _data_to_doc(data))
        except Exception as e:
            logger.error(f"Error updating report {report_id}: {e}")
            return OperationResult.fail("write-failure", results.REPORT_UPDATE_FAILED)
        return OperationResult.ok(id=report_id)

    def delete_report(
        self, report_id: str, caller: User | None = None
    ) -> OperationResult:
        if caller is not None:
            denied = self._deny_unless_allowed(report_id, caller)
            if denied is not None:
                return denied
        try:
            self.store.delete(REPORTS_COLLECTION, report_id)
        except Exception as e:
            logger.error(f"Error deleting report {report_id}: {e}")
            return OperationResult.fail("write-failure", results.REPORT_DELETE_FAILED)
        logger.info(f"Deleted report {report_id}")
        return OperationResult.ok(id=report_id)

    def _deny_unless_allowed(
        self, report_id: str, caller: User
    ) -> OperationResult | None:
        """Return a failure if the caller may not modify the report."""
        if caller.is_master:
            return None
        report = self.get_report(report_id)
        if report is not None and report.user_id != caller.id:
            logger.warning(
                f"User {caller.id} attempted to modify report {report_id} "
                f"owned by {report.user_id}"
            )
            return OperationResult.fail("not-authorized", results.REPORT_NOT_OWNED)
        return None


def filter_reports(
    reports: list[SavedReport],
    start: date | None = None,
    end: date | None = None,
    user_id: str | None = None,
    is_master: bool = False,
) -> list[SavedReport]:
    """Apply the saved-list filters and sort newest first.

    Date bounds are inclusive. The owner filter only applies to masters.
    """
    filtered = list(reports)
    if is_master and user_id is not None:
        filtered = [report for report in filtered if report.user_id == user_id]
    if start is not None:
        filtered = [report for report in filtered if report.date >= start]
    if end is not None:
        filtered = [report for report in filtered if report.date <= end]
    return sorted(filtered, key=lambda report: report.date, reverse=True)


def _doc_to_report(doc: Document) -> SavedReport:
    """Convert a stored report document to a SavedReport."""
    data = doc.data
    return SavedReport(
        id=doc.id,
        date=parse_report_date(data["date"]),
        text=data.get("text", ""),
        user_id=data["userId"],
    )


def _data_to_doc(data: ReportData) -> dict[str, Any]:
    return {
        "date": data.date.isoformat(),
        "text": data.text,
        "userId": data.user_id,
    }
