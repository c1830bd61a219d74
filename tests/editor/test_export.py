"""Tests for `.doc` export."""

from datetime import date

from fieldreports.editor.export import (
    DOC_MEDIA_TYPE,
    export_report,
    export_filename,
    format_line_for_doc,
    format_text_for_doc,
)
from fieldreports.editor.template import default_text


def test_filename_uses_day_month_year():
    assert export_filename(date(2024, 3, 5)) == "Report 05-03-2024.doc"


def test_header_line_is_bold():
    html = format_line_for_doc("Report del 10 marzo 2024")

    assert "<b>Report del 10 marzo 2024</b>" in html


def test_label_prefix_is_bold_and_rest_plain():
    html = format_line_for_doc("Riassunto visita: tutto ok")

    assert "<b>Riassunto visita:</b> tutto ok" in html


def test_visit_label_with_number_is_bold():
    html = format_line_for_doc("Visita n°12: Rossi")

    assert "<b>Visita n°12:</b> Rossi" in html


def test_blank_line_is_non_breaking_space():
    assert "&nbsp;" in format_line_for_doc("   ")


def test_plain_line_is_escaped():
    html = format_line_for_doc("prezzo < 10 & sconto")

    assert "prezzo &lt; 10 &amp; sconto" in html
    assert "<b>" not in html


def test_one_paragraph_per_line():
    rendered = format_text_for_doc("a\n\nb")

    assert rendered.count("<p ") == 3


def test_export_report():
    export = export_report(date(2024, 3, 10), default_text(date(2024, 3, 10)))

    assert export.filename == "Report 10-03-2024.doc"
    assert export.media_type == DOC_MEDIA_TYPE
    assert export.content.startswith("<html")
    assert "urn:schemas-microsoft-com:office:word" in export.content
    assert "<b>Visita n°1:</b>" in export.content
    assert "Calibri" in export.content
