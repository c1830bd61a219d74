from datetime import date

from pydantic import BaseModel


class ReportData(BaseModel):
    """The three mutable fields of a report, as written on create/update."""

    date: date
    text: str
    user_id: str


class SavedReport(ReportData):
    """A persisted report with its store-assigned id."""

    id: str

    def data(self) -> ReportData:
        return ReportData(date=self.date, text=self.text, user_id=self.user_id)


class Visit(BaseModel):
    """One visit block of a report body.

    `index` is the block's ordinal position in the text (1-based), while
    `label_number` is whatever numeral the text carries after `Visita n°`.
    The two diverge when a user deletes a block by hand.
    """

    index: int
    label_number: int
    client: str = ""
    summary: str = ""
    next_objective: str = ""
    next_due: str = ""
