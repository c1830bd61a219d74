"""In-progress report being composed in the editor."""

import asyncio
import logging
from datetime import date

from pydantic import BaseModel, PrivateAttr

from fieldreports.db.reports import ReportRepository
from fieldreports.models.report import ReportData, SavedReport, Visit
from fieldreports.models.user import User
from fieldreports.models import results
from fieldreports.models.results import OperationResult
from . import template
from .export import DocExport, export_report

logger = logging.getLogger(__name__)


class ReportDraft(BaseModel):
    """Editor state: the bound date, the text, and the report being edited (if any)."""

    date: date
    text: str
    report_id: str | None = None

    _is_saving: bool = PrivateAttr(default=False)

    @classmethod
    def new(cls, today: date) -> "ReportDraft":
        """Start a fresh report from the template."""
        return cls(date=today, text=template.default_text(today))

    @classmethod
    def from_saved(cls, report: SavedReport) -> "ReportDraft":
        """Open a saved report for editing."""
        return cls(
            date=report.date,
            text=report.text,
            report_id=report.id,
        )

    @property
    def is_saving(self) -> bool:
        return self._is_saving

    @property
    def visit_count(self) -> int:
        return template.count_visits(self.text)

    @property
    def visits(self) -> list[Visit]:
        return template.parse_visits(self.text)

    def add_visit(self) -> None:
        self.text = template.add_visit(self.text)

    def change_date(self, new_date: date) -> None:
        """Bind a new date and rewrite the header line to match."""
        self.date = new_date
        self.text = template.replace_header_date(self.text, new_date)

    def to_report_data(self, owner_id: str) -> ReportData:
        return ReportData(date=self.date, text=self.text, user_id=owner_id)

    def export(self) -> DocExport:
        return export_report(self.date, self.text)

    async def save(
        self,
        repository: ReportRepository,
        owner_id: str,
        caller: User | None = None,
    ) -> OperationResult:
        """Persist the draft: update in place if it has an id, else create.

        A second call while a save is still running is rejected rather than
        creating a duplicate report.
        """
        if self._is_saving:
            logger.warning("Ignoring save while another save is in progress")
            return OperationResult.fail("invalid-input", results.SAVE_IN_PROGRESS)

        self._is_saving = True
        try:
            data = self.to_report_data(owner_id)
            if self.report_id:
                result = await asyncio.to_thread(
                    repository.update_report, self.report_id, data, caller
                )
            else:
                result = await asyncio.to_thread(repository.create_report, data)
                if result.success:
                    self.report_id = result.id
            return result
        finally:
            self._is_saving = False
