"""
Excel export of availability reports.
"""

from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from core.config import (
    DAILY_HEADERS,
    DETAIL_HEADERS,
    FUNGIBLE_HEADERS,
    PROJECT_SUMMARY_HEADERS,
    PROJECT_TASK_HEADERS,
)
from models.availability import Report

SHEET_DAILY = "Daily Availability"
SHEET_PROJECT_TASKS = "Project Tasks"
SHEET_PROJECT_SUMMARY = "Project Summary"
SHEET_FUNGIBLE = "Fungible Time"
SHEET_DETAILS = "Event Details"


def format_date_display(d) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def color_fill(color: str) -> PatternFill:
    """Solid fill from a '#RRGGBB' colour."""
    rgb = color.lstrip("#").upper()
    return PatternFill(start_color=rgb, end_color=rgb, fill_type="solid")


def write_headers(ws, headers: list[str]):
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)


def write_daily_sheet(ws, report: Report):
    """Sheet 1 - one row per day of the range."""
    write_headers(ws, DAILY_HEADERS)
    for row_idx, day in enumerate(report.daily_availability, start=2):
        row_data = [
            format_date_display(day.date),
            day.label,
            round(day.capacity_hours, 2),
            round(day.fungible_hours, 2),
            round(day.task_hours, 2),
            round(day.total_hours, 2),
            round(day.available_hours, 2),
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def write_colored_rows(ws, headers: list[str], rows: list[list]):
    """
    Write rows whose last column is a '#RRGGBB' colour.

    The colour cell is filled with the colour itself as a swatch.
    """
    write_headers(ws, headers)
    for row_idx, row_data in enumerate(rows, start=2):
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)
        ws.cell(row=row_idx, column=len(row_data)).fill = color_fill(row_data[-1])


def write_details_sheet(ws, report: Report):
    """Sheet 5 - every event that affected the report, grouped by day."""
    write_headers(ws, DETAIL_HEADERS)
    row_idx = 2
    for day in report.daily_details:
        for detail in day.events:
            row_data = [
                format_date_display(day.date),
                detail.summary,
                detail.calendar_name,
                detail.category.value,
                detail.local_start,
                detail.local_end,
                round(detail.duration_hours, 2),
                detail.impact_type,
            ]
            for col_idx, value in enumerate(row_data, start=1):
                ws.cell(row=row_idx, column=col_idx, value=value)
            row_idx += 1


def create_availability_workbook(report: Report) -> Workbook:
    """
    Build the availability workbook.

    Sheet 1: Daily Availability
    Sheet 2: Project Tasks (sorted by project, task)
    Sheet 3: Project Summary (most hours first)
    Sheet 4: Fungible Time (most hours first)
    Sheet 5: Event Details
    """
    wb = Workbook()

    ws_daily = wb.active
    ws_daily.title = SHEET_DAILY
    write_daily_sheet(ws_daily, report)

    write_colored_rows(
        wb.create_sheet(title=SHEET_PROJECT_TASKS),
        PROJECT_TASK_HEADERS,
        [[pt.project, pt.task, round(pt.hours, 2), pt.color] for pt in report.project_tasks],
    )
    write_colored_rows(
        wb.create_sheet(title=SHEET_PROJECT_SUMMARY),
        PROJECT_SUMMARY_HEADERS,
        [[ps.project, round(ps.total_hours, 2), ps.color] for ps in report.project_summaries],
    )
    write_colored_rows(
        wb.create_sheet(title=SHEET_FUNGIBLE),
        FUNGIBLE_HEADERS,
        [[fs.calendar_name, round(fs.total_hours, 2), fs.color] for fs in report.fungible_summaries],
    )

    write_details_sheet(wb.create_sheet(title=SHEET_DETAILS), report)
    return wb


def workbook_to_bytes(wb: Workbook) -> bytes:
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def save_availability_report(report: Report, output_path: Path) -> Path:
    """Write the availability workbook to disk."""
    wb = create_availability_workbook(report)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}")
    return output_path


def format_console_summary(report: Report) -> str:
    """Plain-text summary for script output."""
    lines = ["Daily availability:"]
    for day in report.daily_availability:
        lines.append(
            f"  {day.label:<10} {day.available_hours:5.1f}h available "
            f"of {day.total_hours:5.1f}h (tasks {day.task_hours:.1f}h)"
        )

    if report.project_summaries:
        lines.append("")
        lines.append("Projects:")
        for summary in report.project_summaries:
            lines.append(f"  {summary.project}: {summary.total_hours:.1f}h")

    if report.fungible_summaries:
        lines.append("")
        lines.append("Fungible time:")
        for summary in report.fungible_summaries:
            lines.append(f"  {summary.calendar_name}: {summary.total_hours:.1f}h")

    return "\n".join(lines)
