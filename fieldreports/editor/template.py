"""Report text template and the text operations of the editor.

A report body is free text structured by convention: a header line
`Report del <date>`, then one or more visit blocks each opened by a
`Visita n°<N>:` line followed by labelled detail lines.
"""

import re
from datetime import date

from fieldreports.models.report import Visit
from fieldreports.utils.dates import format_date_for_display

HEADER_PREFIX = "Report del "
VISIT_LABEL = "Visita n°"
SUMMARY_LABEL = "Riassunto visita:"
OBJECTIVE_LABEL = "Obiettivo prox visita:"
DUE_LABEL = "Prox visita entro:"

REPORT_VISIT_DETAILS_TEMPLATE = (
    f"\n{SUMMARY_LABEL} \n{OBJECTIVE_LABEL} \n{DUE_LABEL} "
)
REPORT_CONTENT_TEMPLATE = f"{VISIT_LABEL}1: {REPORT_VISIT_DETAILS_TEMPLATE}"

# Only the very first line of the text is ever treated as the header.
HEADER_LINE = re.compile(r"^Report del .*(\r\n|\n|\r)")
VISIT_LINE = re.compile(r"^Visita n°(\d+):(.*)$")


def header_line(d: date) -> str:
    return f"{HEADER_PREFIX}{format_date_for_display(d)}"


def default_text(d: date) -> str:
    """The text a new report starts from."""
    return f"{header_line(d)}\n\n{REPORT_CONTENT_TEMPLATE}"


def count_visits(text: str) -> int:
    """Count `Visita n°` occurrences anywhere in the text."""
    return text.count(VISIT_LABEL)


def next_visit_number(text: str) -> int:
    """Number for the next visit block.

    This is one more than the number of existing blocks, not one more than
    the highest numeral: a text holding only `Visita n°5:` gets `n°2` next.
    """
    return count_visits(text) + 1


def add_visit(text: str) -> str:
    """Append a new, empty visit block."""
    number = next_visit_number(text)
    return f"{text}\n\n{VISIT_LABEL}{number}: {REPORT_VISIT_DETAILS_TEMPLATE}"


def replace_header_date(text: str, d: date) -> str:
    """Rewrite the header line's date, leaving every other line untouched.

    Only a header that is the first line and is followed by a line break is
    rewritten; a text without one is returned unchanged.
    """
    return HEADER_LINE.sub(lambda _: f"{header_line(d)}\n", text, count=1)


def parse_visits(text: str) -> list[Visit]:
    """Read the visit blocks of a report as structured records, in text order."""
    visits: list[Visit] = []
    current: dict | None = None

    for line in text.splitlines():
        match = VISIT_LINE.match(line)
        if match:
            if current is not None:
                visits.append(Visit(**current))
            current = {
                "index": len(visits) + 1,
                "label_number": int(match.group(1)),
                "client": match.group(2).strip(),
            }
            continue
        if current is None:
            continue
        if line.startswith(SUMMARY_LABEL):
            current["summary"] = line[len(SUMMARY_LABEL) :].strip()
        elif line.startswith(OBJECTIVE_LABEL):
            current["next_objective"] = line[len(OBJECTIVE_LABEL) :].strip()
        elif line.startswith(DUE_LABEL):
            current["next_due"] = line[len(DUE_LABEL) :].strip()

    if current is not None:
        visits.append(Visit(**current))
    return visits
