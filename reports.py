# reports.py
# Export of the filtered timesheet rows: CSV, XLSX and PDF.
from __future__ import annotations

import io
import logging

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger("timesheet.reports")

EXPORT_FORMATS = ("csv", "xlsx", "pdf")
MIME_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}


class NothingToExportError(ValueError):
    """Raised when the current filters leave no rows to export."""


def export_filename(fmt: str, start_iso: str, end_iso: str) -> str:
    return f"timesheet_{start_iso}_{end_iso}.{fmt}"


def _require_rows(df: pd.DataFrame) -> None:
    if df.empty:
        raise NothingToExportError("No data to export for current filters.")


def export_csv(df: pd.DataFrame) -> bytes:
    _require_rows(df)
    data = df.to_csv(index=False).encode("utf-8")
    logger.info("Exported %d rows as CSV", len(df))
    return data


def export_xlsx(df: pd.DataFrame, sheet_name: str = "Timesheet") -> bytes:
    _require_rows(df)
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    logger.info("Exported %d rows as XLSX", len(df))
    return buf.getvalue()


def export_pdf(df: pd.DataFrame, title: str, summary_line: str | None = None) -> bytes:
    _require_rows(df)
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=landscape(A4), topMargin=24, bottomMargin=24, leftMargin=24, rightMargin=24)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(name="TitleCentered", parent=styles["Title"], alignment=TA_CENTER)
    summary_style = ParagraphStyle(
        name="Summary", parent=styles["Normal"], alignment=TA_CENTER,
        textColor=colors.black, fontSize=11, leading=13, spaceBefore=4, spaceAfter=2
    )
    story = [Paragraph(title, title_style), Spacer(1, 8)]
    data = [list(df.columns)] + df.astype(str).values.tolist()
    table = Table(data, repeatRows=1, hAlign="CENTER")
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F5F5F7")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#E0E0E0")),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.white]),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story.append(table)
    if summary_line:
        box = Table([[Paragraph(summary_line, summary_style)]], colWidths=[min(520, 0.65 * doc.width)], hAlign="CENTER")
        box.setStyle(TableStyle([
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ("BOX", (0, 0), (-1, -1), 0.6, colors.HexColor("#C7CCD6")),
            ("INNERPADDING", (0, 0), (-1, -1), 8),
        ]))
        story += [Spacer(1, 12), box]

    def draw_page_border(canvas, doc_obj):
        canvas.saveState()
        w, h = doc_obj.pagesize
        canvas.setStrokeColor(colors.HexColor("#C7CCD6"))
        canvas.setLineWidth(0.8)
        margin = 12
        canvas.rect(margin, margin, w - 2*margin, h - 2*margin)
        canvas.restoreState()

    doc.build(story, onFirstPage=draw_page_border, onLaterPages=draw_page_border)
    logger.info("Exported %d rows as PDF", len(df))
    return buf.getvalue()


def export(df: pd.DataFrame, fmt: str, title: str = "Timesheet", summary_line: str | None = None) -> bytes:
    if fmt == "csv":
        return export_csv(df)
    if fmt == "xlsx":
        return export_xlsx(df)
    if fmt == "pdf":
        return export_pdf(df, title, summary_line)
    raise ValueError(f"Unknown export format: {fmt!r}")
