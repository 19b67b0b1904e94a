"""Reporting package: aggregation, charts and PDF export."""

from expense_tracker.reports.aggregation import (
    available_months,
    build_monthly_report,
    category_summaries,
    compare_with_previous_month,
    daily_intensity,
    daily_summaries,
    filter_by_month,
    group_by_paid_by,
    group_by_payment_method,
    month_of,
    newest_first,
    period_summary,
    recent_daily_trend,
    top_expenses,
)
from expense_tracker.reports.pdf_exporter import (
    ExportedReport,
    PdfReportExporter,
    ReportExportError,
    report_filename,
)

__all__ = [
    "available_months",
    "build_monthly_report",
    "category_summaries",
    "compare_with_previous_month",
    "daily_intensity",
    "daily_summaries",
    "filter_by_month",
    "group_by_paid_by",
    "group_by_payment_method",
    "month_of",
    "newest_first",
    "period_summary",
    "recent_daily_trend",
    "top_expenses",
    "ExportedReport",
    "PdfReportExporter",
    "ReportExportError",
    "report_filename",
]
