"""Page selection for the role-gated report views."""

from __future__ import annotations
import logging
from datetime import date
from typing import Callable, Literal

from fieldreports.editor.draft import ReportDraft
from fieldreports.models.report import SavedReport
from .manager import SessionManager, SessionState

logger = logging.getLogger(__name__)

Page = Literal["landing", "creator", "saved", "user_management"]
Screen = Literal["loading", "login", "landing", "creator", "saved", "user_management"]


class ViewRouter:
    """In-memory page state driven by navigation and by the session.

    The router observes a `SessionManager`: when the session ends it returns
    to the landing page and drops any draft being edited.
    """

    def __init__(self, session: SessionManager):
        self.session = session
        self.page: Page = "landing"
        self.draft: ReportDraft | None = None
        self._remove_observer: Callable[[], None] | None = session.add_observer(
            self._on_session_state
        )

    def close(self) -> None:
        if self._remove_observer is not None:
            self._remove_observer()
            self._remove_observer = None

    def _on_session_state(self, state: SessionState) -> None:
        if not state.is_logged_in:
            if self.draft is not None:
                logger.debug("Session ended; discarding editor draft")
            self.page = "landing"
            self.draft = None

    @property
    def current_screen(self) -> Screen:
        """The screen to render for the current page and session."""
        state = self.session.state
        if state.is_auth_loading:
            return "loading"
        if not state.is_logged_in:
            return "login"
        if self.page == "user_management" and not state.is_master_user:
            return "landing"
        return self.page

    def navigate_to(self, page: Page) -> Screen:
        self.page = page
        return self.current_screen

    def new_report(self, today: date) -> Screen:
        self.draft = ReportDraft.new(today)
        return self.navigate_to("creator")

    def edit_report(self, report: SavedReport) -> Screen:
        self.draft = ReportDraft.from_saved(report)
        return self.navigate_to("creator")
