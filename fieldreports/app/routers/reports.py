"""Saved report routes."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from fieldreports.db.reports import ReportRepository, filter_reports
from fieldreports.editor.draft import ReportDraft
from fieldreports.editor.export import DocExport
from fieldreports.editor.template import parse_visits
from fieldreports.models.report import ReportData, SavedReport, Visit
from fieldreports.models.user import User
from fieldreports.app.auth import require_user
from fieldreports.app.dependencies import get_report_repository
from fieldreports.app.errors import created_id, raise_for_result
from fieldreports.app.models import ReportRequest, CreatedResponse

router = APIRouter(prefix="/reports", tags=["reports"])


def doc_download(export: DocExport) -> Response:
    """Offer an export as a file download."""
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


def get_visible_report(
    report_id: str,
    user: User = Depends(require_user),
    repository: ReportRepository = Depends(get_report_repository),
) -> SavedReport:
    """Get a report the caller may see, or 404.

    Reports owned by someone else are reported as missing to non-masters.
    """
    report = repository.get_report(report_id)
    if report is None or (not user.is_master and report.user_id != user.id):
        raise HTTPException(
            status_code=404, detail=f"Report with ID '{report_id}' not found"
        )
    return report


@router.get("", response_model=list[SavedReport])
def read_reports(
    start: Optional[date] = None,
    end: Optional[date] = None,
    user_id: Optional[str] = None,
    user: User = Depends(require_user),
    repository: ReportRepository = Depends(get_report_repository),
) -> list[SavedReport]:
    """Get the caller's reports (all reports for masters), newest first.

    Args:
        start: Inclusive lower date bound.
        end: Inclusive upper date bound.
        user_id: Only reports owned by this user. Ignored for non-masters.
    """
    reports = repository.list_reports(user.id, user.is_master)
    return filter_reports(
        reports, start=start, end=end, user_id=user_id, is_master=user.is_master
    )


@router.get("/{report_id}", response_model=SavedReport)
def read_report(report: SavedReport = Depends(get_visible_report)) -> SavedReport:
    return report


@router.post("", response_model=CreatedResponse, status_code=201)
def create_report(
    request: ReportRequest,
    user: User = Depends(require_user),
    repository: ReportRepository = Depends(get_report_repository),
) -> CreatedResponse:
    """Save a new report owned by the caller."""
    result = repository.create_report(
        ReportData(date=request.date, text=request.text, user_id=user.id)
    )
    return CreatedResponse(id=created_id(result))


@router.put("/{report_id}", response_model=SavedReport)
def update_report(
    request: ReportRequest,
    report: SavedReport = Depends(get_visible_report),
    user: User = Depends(require_user),
    repository: ReportRepository = Depends(get_report_repository),
) -> SavedReport:
    """Replace a report's date and text. The owner never changes."""
    data = ReportData(date=request.date, text=request.text, user_id=report.user_id)
    result = repository.update_report(report.id, data, caller=user)
    raise_for_result(result)
    return SavedReport(id=report.id, **data.model_dump())


@router.delete("/{report_id}")
def delete_report(
    report: SavedReport = Depends(get_visible_report),
    user: User = Depends(require_user),
    repository: ReportRepository = Depends(get_report_repository),
) -> dict[str, str]:
    result = repository.delete_report(report.id, caller=user)
    raise_for_result(result)
    return {"message": f"Report '{report.id}' has been deleted"}


@router.get("/{report_id}/export")
def export_report(report: SavedReport = Depends(get_visible_report)) -> Response:
    """Download a saved report as a `.doc` file."""
    return doc_download(ReportDraft.from_saved(report).export())


@router.get("/{report_id}/draft", response_model=ReportDraft)
def open_report_in_editor(
    report: SavedReport = Depends(get_visible_report),
) -> ReportDraft:
    """Get the editor state for an existing report."""
    return ReportDraft.from_saved(report)


@router.get("/{report_id}/visits", response_model=list[Visit])
def read_report_visits(
    report: SavedReport = Depends(get_visible_report),
) -> list[Visit]:
    """Get the visit blocks of a report as structured records."""
    return parse_visits(report.text)
