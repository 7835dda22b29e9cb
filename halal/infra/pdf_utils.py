import io
import logging
from pathlib import Path
from datetime import datetime
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from halal.domain.ActivityRecord import ActivityRecord
from halal.domain.Product import display_name, brand
from halal.utilities.config import PDF_FONT_PATH

logger = logging.getLogger(__name__)

REPORT_FONT = "HalalReportFont"

VERDICT_COLORS = {
    "halal": colors.HexColor("#d1fae5"),
    "doubtful": colors.HexColor("#fef3c7"),
    "haram": colors.HexColor("#fee2e2"),
}


def _format_ts(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%d.%m.%Y %H:%M") if ms else "-"


def resolve_font(font_path: str = PDF_FONT_PATH) -> str:
    """Register the configured TrueType font and return its name, or Helvetica.

    Glyphs are embedded as-is: Arabic letters render in isolated forms, not
    joined right-to-left.
    """
    if not font_path:
        return "Helvetica"
    if not Path(font_path).is_file():
        logger.warning(f"PDF font {font_path} not found, falling back to Helvetica")
        return "Helvetica"
    if REPORT_FONT in pdfmetrics.getRegisteredFontNames():
        return REPORT_FONT
    try:
        pdfmetrics.registerFont(TTFont(REPORT_FONT, font_path))
    except TTFError as e:
        logger.warning(f"PDF font {font_path} could not be loaded ({e}), falling back to Helvetica")
        return "Helvetica"
    return REPORT_FONT


def _records_table(records: List[ActivityRecord], cell, font: str):
    data = [["Barcode", "Product", "Brand", "Verdict", "Reasons", "Date"]]
    for r in records:
        data.append([
            r.identifier,
            Paragraph(escape(display_name(r.payload, "en")), cell),
            Paragraph(escape(brand(r.payload)), cell),
            r.classification.verdict,
            Paragraph("<br/>".join(escape(reason) for reason in r.classification.reasons), cell),
            _format_ts(r.recorded_at),
        ])

    table = Table(data, repeatRows=1, colWidths=[90, 150, 100, 60, 240, 90])
    style = [
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#10b981")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("FONTNAME", (0,1), (-1,-1), font),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 11),
        ("BOTTOMPADDING", (0,0), (-1,0), 8),
        ("VALIGN", (0,0), (-1,-1), "TOP"),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]
    for row, r in enumerate(records, start=1):
        bg = VERDICT_COLORS.get(r.classification.verdict)
        if bg is not None:
            style.append(("BACKGROUND", (3,row), (3,row), bg))
    table.setStyle(TableStyle(style))
    return table


def generate_pdf_report(history: List[ActivityRecord], favorites: List[ActivityRecord], generated_at: int,
                        font_path: str = PDF_FONT_PATH):
    """Generate a PDF with one table for the history log and one for favorites.

    Product names and brands use the font from PDF_FONT_PATH when one is set.
    """
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    font = resolve_font(font_path)
    cell = styles["BodyText"].clone("ReportCell", fontName=font)
    elements = [
        Paragraph("HalalCheck report", styles["Title"]),
        Paragraph(f"Generated {_format_ts(generated_at)}", styles["Normal"]),
        Spacer(1, 16),
    ]
    for title, records in (("History", history), ("Favorites", favorites)):
        elements.append(Paragraph(f"{title} ({len(records)})", styles["Heading2"]))
        if records:
            elements.append(_records_table(records, cell, font))
        else:
            elements.append(Paragraph("No entries.", styles["Normal"]))
        elements.append(Spacer(1, 12))

    doc.build(elements)
    return buf.getvalue()
