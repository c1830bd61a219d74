"""Report editor routes.

The editor is stateless on the server: each call receives the current draft
and returns the updated one.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response

from fieldreports.db.reports import ReportRepository
from fieldreports.editor.draft import ReportDraft
from fieldreports.models.user import User
from fieldreports.app.auth import require_user
from fieldreports.app.dependencies import get_report_repository
from fieldreports.app.errors import created_id
from fieldreports.app.models import NewDraftRequest, ChangeDateRequest, CreatedResponse
from .reports import doc_download

router = APIRouter(prefix="/editor", tags=["editor"])


@router.post("/new", response_model=ReportDraft)
def new_draft(
    request: NewDraftRequest,
    _user: User = Depends(require_user),
) -> ReportDraft:
    """Start a report from the template, dated today unless a date is given."""
    return ReportDraft.new(request.date or date.today())


@router.post("/add-visit", response_model=ReportDraft)
def add_visit(
    draft: ReportDraft,
    _user: User = Depends(require_user),
) -> ReportDraft:
    draft.add_visit()
    return draft


@router.post("/change-date", response_model=ReportDraft)
def change_date(
    request: ChangeDateRequest,
    _user: User = Depends(require_user),
) -> ReportDraft:
    """Bind a new date; only the header line of the text is rewritten."""
    draft = ReportDraft(
        date=request.date, text=request.text, report_id=request.report_id
    )
    draft.change_date(request.date)
    return draft


@router.post("/save", response_model=CreatedResponse)
async def save_draft(
    draft: ReportDraft,
    user: User = Depends(require_user),
    repository: ReportRepository = Depends(get_report_repository),
) -> CreatedResponse:
    """Save the draft: update the report it was opened from, or create one.

    Updating keeps the report's original owner.
    """
    owner_id = user.id
    if draft.report_id:
        existing = repository.get_report(draft.report_id)
        if existing is None or (not user.is_master and existing.user_id != user.id):
            raise HTTPException(
                status_code=404,
                detail=f"Report with ID '{draft.report_id}' not found",
            )
        owner_id = existing.user_id

    result = await draft.save(repository, owner_id, caller=user)
    return CreatedResponse(id=created_id(result))


@router.post("/export")
def export_draft(
    draft: ReportDraft,
    _user: User = Depends(require_user),
) -> Response:
    """Download the current draft as a `.doc` file."""
    return doc_download(draft.export())
