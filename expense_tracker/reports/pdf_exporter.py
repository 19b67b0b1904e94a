"""
PDF Report Exporter

Renders a MonthlyReport into a paginated PDF:
- title block (report title, month, generation time)
- four summary cards (total, transactions, average, highest daily)
- category breakdown table
- every expense of the month, newest first

Every page carries the generation timestamp and "Page i of N" in its
footer. Page totals are only known once the whole document is laid out,
so footers are drawn in a second pass by a numbered canvas.

Currency is written as 'Rs. 1,23,456.70' because the built-in PDF
fonts have no rupee glyph.

An empty month produces no document at all (``export`` returns None).
"""

import io
from dataclasses import dataclass
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from expense_tracker.audit import AuditLogger
from expense_tracker.config import AppSettings, ReportSettings
from expense_tracker.formatting import format_date, format_inr_text, format_month
from expense_tracker.models.report import MonthlyReport


PAGE_SIZES = {"A4": A4, "LETTER": letter}

HEADER_BG = colors.HexColor("#2563EB")
CARD_BG = colors.HexColor("#EFF6FF")
ROW_ALT_BG = colors.HexColor("#F8FAFC")
GRID = colors.HexColor("#CBD5E1")
MUTED = colors.HexColor("#64748B")

MISSING = "-"


class ReportExportError(Exception):
    """The document could not be laid out."""
    pass


@dataclass(frozen=True)
class ExportedReport:
    """A rendered report ready for download."""

    month: str
    filename: str
    content: bytes
    page_count: int

    @property
    def mime_type(self) -> str:
        return "application/pdf"


def report_filename(month: str) -> str:
    """'2024-03' -> 'Expense_Report_March_2024.pdf'."""
    name, year = format_month(month).split(" ")
    return f"Expense_Report_{name}_{year}.pdf"


def _numbered_canvas(footer_text: str, page_counts: list[int]):
    """
    Build a canvas class that defers every page until the document is
    complete, then stamps each one with ``footer_text`` and 'Page i of N'.
    The final page count is appended to ``page_counts``.
    """

    class NumberedCanvas(canvas.Canvas):
        def __init__(self, *args, **kwargs):
            canvas.Canvas.__init__(self, *args, **kwargs)
            self._saved_page_states = []

        def showPage(self):
            self._saved_page_states.append(dict(self.__dict__))
            self._startPage()

        def save(self):
            total = len(self._saved_page_states)
            for page_number, state in enumerate(self._saved_page_states, start=1):
                self.__dict__.update(state)
                self._draw_footer(page_number, total)
                canvas.Canvas.showPage(self)
            page_counts.append(total)
            canvas.Canvas.save(self)

        def _draw_footer(self, page_number: int, total: int):
            width, _ = self._pagesize
            self.saveState()
            self.setFont("Helvetica", 8)
            self.setFillColor(MUTED)
            self.drawString(15 * mm, 10 * mm, footer_text)
            self.drawRightString(width - 15 * mm, 10 * mm, f"Page {page_number} of {total}")
            self.restoreState()

    return NumberedCanvas


class PdfReportExporter:
    """
    Lays out MonthlyReports with reportlab.

    Args:
        app_settings: Supplies the currency text marker
        report_settings: Page size, margins and title
        audit_logger: Receives export / skipped-export events
    """

    def __init__(
        self,
        app_settings: Optional[AppSettings] = None,
        report_settings: Optional[ReportSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._app = app_settings or AppSettings()
        self._report = report_settings or ReportSettings()
        self._audit = audit_logger or AuditLogger()
        self._styles = self._build_styles()

    def _build_styles(self) -> dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()
        return {
            "title": ParagraphStyle("ReportTitle", parent=base["Title"], fontSize=20, spaceAfter=4),
            "subtitle": ParagraphStyle(
                "ReportSubtitle", parent=base["Normal"], fontSize=12, alignment=TA_CENTER, spaceAfter=2
            ),
            "meta": ParagraphStyle(
                "ReportMeta", parent=base["Normal"], fontSize=8, textColor=MUTED, alignment=TA_CENTER
            ),
            "heading": ParagraphStyle("SectionHeading", parent=base["Heading2"], spaceBefore=10, spaceAfter=6),
            "card_label": ParagraphStyle(
                "CardLabel", parent=base["Normal"], fontSize=8, textColor=MUTED, alignment=TA_CENTER
            ),
            "card_value": ParagraphStyle(
                "CardValue", parent=base["Normal"], fontSize=12, leading=15,
                fontName="Helvetica-Bold", alignment=TA_CENTER
            ),
            "cell": ParagraphStyle("Cell", parent=base["Normal"], fontSize=8, leading=10),
        }

    def _money(self, amount) -> str:
        return format_inr_text(amount, marker=self._app.currency_text_marker)

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _title_block(self, report: MonthlyReport, generated: str) -> list:
        return [
            Paragraph(escape(self._report.title), self._styles["title"]),
            Paragraph(escape(format_month(report.month)), self._styles["subtitle"]),
            Paragraph(f"Generated on {escape(generated)}", self._styles["meta"]),
            Spacer(1, 8 * mm),
        ]

    def _summary_cards(self, report: MonthlyReport, width: float) -> list:
        summary = report.summary
        cards = [
            ("Total Spent", self._money(summary.total)),
            ("Transactions", str(summary.count)),
            ("Average per Transaction", self._money(summary.average)),
            ("Highest Daily Spending", self._money(summary.max_daily)),
        ]
        row = [
            [Paragraph(escape(label), self._styles["card_label"]),
             Paragraph(escape(value), self._styles["card_value"])]
            for label, value in cards
        ]
        table = Table([row], colWidths=[width / 4] * 4)
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), CARD_BG),
            ("BOX", (0, 0), (-1, -1), 0.5, GRID),
            ("INNERGRID", (0, 0), (-1, -1), 0.5, colors.white),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 8),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
        ]))
        return [table, Spacer(1, 6 * mm)]

    def _data_table(self, header: list[str], rows: list[list], col_widths: list[float],
                    right_aligned: tuple[int, ...]) -> Table:
        table = Table([header, *rows], colWidths=col_widths, repeatRows=1)
        style = [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 8),
            ("GRID", (0, 0), (-1, -1), 0.25, GRID),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]
        for column in right_aligned:
            style.append(("ALIGN", (column, 0), (column, -1), "RIGHT"))
        for index in range(2, len(rows) + 1, 2):
            style.append(("BACKGROUND", (0, index), (-1, index), ROW_ALT_BG))
        table.setStyle(TableStyle(style))
        return table

    def _category_section(self, report: MonthlyReport, width: float) -> list:
        rows = [
            [item.category.value, self._money(item.total), str(item.count), self._money(item.average)]
            for item in report.categories
        ]
        table = self._data_table(
            ["Category", "Total", "Count", "Average"],
            rows,
            [width * 0.4, width * 0.22, width * 0.14, width * 0.24],
            right_aligned=(1, 2, 3),
        )
        return [Paragraph("Category Breakdown", self._styles["heading"]), table]

    def _expense_section(self, report: MonthlyReport, width: float) -> list:
        cell = self._styles["cell"]
        rows = [
            [
                format_date(expense.date),
                expense.payment_method.value if expense.payment_method else MISSING,
                self._money(expense.amount),
                Paragraph(escape(expense.description), cell),
                expense.category.value,
                expense.paid_by.value if expense.paid_by else MISSING,
            ]
            for expense in report.expenses
        ]
        table = self._data_table(
            ["Date", "Payment Method", "Amount", "Description", "Category", "Paid By"],
            rows,
            [width * 0.14, width * 0.15, width * 0.16, width * 0.28, width * 0.16, width * 0.11],
            right_aligned=(2,),
        )
        return [Paragraph("All Expenses", self._styles["heading"]), table]

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def render(self, report: MonthlyReport) -> tuple[bytes, int]:
        """
        Lay out the document.

        Returns:
            (pdf_bytes, page_count)

        Raises:
            ReportExportError: If reportlab fails to build the document
        """
        page_size = PAGE_SIZES[self._report.page_size]
        margin = self._report.margin_mm * mm
        generated = report.generated_at.strftime("%d %b %Y, %I:%M %p")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=page_size,
            leftMargin=margin,
            rightMargin=margin,
            topMargin=margin,
            bottomMargin=margin + 6 * mm,
            title=f"{self._report.title} - {format_month(report.month)}",
        )
        width = doc.width

        story = [
            *self._title_block(report, generated),
            *self._summary_cards(report, width),
            *self._category_section(report, width),
            Spacer(1, 4 * mm),
            *self._expense_section(report, width),
        ]

        page_counts: list[int] = []
        try:
            doc.build(story, canvasmaker=_numbered_canvas(f"Generated on {generated}", page_counts))
        except Exception as e:
            raise ReportExportError(f"Failed to build report for {report.month}: {e}")

        return buffer.getvalue(), page_counts[-1] if page_counts else 0

    def export(self, report: MonthlyReport) -> Optional[ExportedReport]:
        """
        Render a report for download.

        Returns None when the month has no expenses ("nothing to export").
        """
        if report.is_empty:
            self._audit.log_export_skipped(report.month)
            return None

        content, page_count = self.render(report)
        exported = ExportedReport(
            month=report.month,
            filename=report_filename(report.month),
            content=content,
            page_count=page_count,
        )
        self._audit.log_report_exported(report.month, exported.filename, page_count)
        return exported
