"""Report composition: template text operations, drafts, and export."""

from .draft import ReportDraft
from .export import DocExport, DOC_MEDIA_TYPE, export_report
from .template import add_visit, replace_header_date, parse_visits, default_text

__all__ = [
    "ReportDraft",
    "DocExport",
    "DOC_MEDIA_TYPE",
    "export_report",
    "add_visit",
    "replace_header_date",
    "parse_visits",
    "default_text",
]
