"""Export of report text as a Word-compatible (HTML) `.doc` file.

The content is HTML declared as `application/msword`; word processors open
it, but it is not a binary Word document.
"""

import html
import re
from datetime import date

from pydantic import BaseModel

from fieldreports.utils.dates import format_date_for_filename

DOC_MEDIA_TYPE = "application/msword"

LINE_STYLE = "font-family:Calibri,sans-serif;font-size:11.0pt;"
LABEL_PREFIX = re.compile(
    r"^(Visita n°\d+:|Riassunto visita:|Obiettivo prox visita:|Prox visita entro:)"
)
HEADER_PREFIX = re.compile(r"^Report del")


class DocExport(BaseModel):
    """A rendered export ready to be offered as a download."""

    filename: str
    content: str
    media_type: str = DOC_MEDIA_TYPE


def _paragraph(inner: str) -> str:
    return f'<p style="margin:0;"><span style="{LINE_STYLE}">{inner}</span></p>'


def format_line_for_doc(line: str) -> str:
    if line.strip() == "":
        return _paragraph("&nbsp;")
    if HEADER_PREFIX.match(line):
        return _paragraph(f"<b>{html.escape(line)}</b>")

    match = LABEL_PREFIX.match(line)
    if match:
        prefix = match.group(0)
        rest = line[len(prefix) :]
        return _paragraph(f"<b>{html.escape(prefix)}</b>{html.escape(rest)}")

    return _paragraph(html.escape(line))


def format_text_for_doc(text: str) -> str:
    """Render each line of the report as one paragraph."""
    return "".join(format_line_for_doc(line) for line in text.split("\n"))


def build_doc_html(text: str) -> str:
    """Wrap the rendered paragraphs in an Office-flavoured HTML document."""
    return (
        "<html xmlns:o='urn:schemas-microsoft-com:office:office' "
        "xmlns:w='urn:schemas-microsoft-com:office:word' "
        "xmlns='http://www.w3.org/TR/REC-html40'>"
        "<head><meta charset='utf-8'><title>Report</title></head>"
        f"<body><div>{format_text_for_doc(text)}</div></body>"
        "</html>"
    )


def export_filename(d: date) -> str:
    """File name for a report dated `d`, e.g. `Report 10-03-2024.doc`."""
    return f"Report {format_date_for_filename(d)}.doc"


def export_report(d: date, text: str) -> DocExport:
    return DocExport(filename=export_filename(d), content=build_doc_html(text))
