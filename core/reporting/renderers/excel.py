from decimal import Decimal
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from core.reporting.contexts import PeriodReportContext

MONEY_FORMAT = "#,##0.00"


def _cell_value(value):
    # dates as ISO text, enums as their stored value
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return value


class PeriodExcelRenderer:
    def render(self, ctx: PeriodReportContext, output_path: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()
        stats = ctx.stats

        header_font = Font(bold=True)
        title_font = Font(bold=True, size=14)
        center = Alignment(horizontal="center")
        thin_border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin"),
        )
        header_fill = PatternFill("solid", fgColor="DDDDDD")

        def table(ws, headers, rows, widths):
            for col_index, h in enumerate(headers, start=1):
                cell = ws.cell(row=1, column=col_index, value=h)
                cell.font = header_font
                cell.alignment = center
                cell.fill = header_fill
                cell.border = thin_border
            for row_index, values in enumerate(rows, start=2):
                for col_index, v in enumerate(values, start=1):
                    cell = ws.cell(row=row_index, column=col_index, value=_cell_value(v))
                    cell.border = thin_border
                    if isinstance(v, Decimal):
                        cell.number_format = MONEY_FORMAT
            for col_index, width in enumerate(widths, start=1):
                ws.column_dimensions[ws.cell(row=1, column=col_index).column_letter].width = width

        # ---------------- Summary ----------------
        ws = wb.active
        ws.title = "Summary"

        ws["A1"] = f"Gig Income Summary - {stats.period.label}"
        ws["A1"].font = title_font

        row = 3

        def kv(key, value):
            nonlocal row
            ws[f"A{row}"] = key
            ws[f"B{row}"] = _cell_value(value)
            ws[f"A{row}"].font = header_font
            ws[f"A{row}"].border = thin_border
            ws[f"B{row}"].border = thin_border
            if isinstance(value, Decimal):
                ws[f"B{row}"].number_format = MONEY_FORMAT
            row += 1

        kv("Period start", stats.period.start)
        kv("Period end", stats.period.end)
        kv("Generated on", ctx.generated_on)

        row += 1
        kv("Gigs - total", stats.total_gigs)
        kv("Gigs - completed", stats.completed_gigs)
        kv("Gigs - upcoming", stats.upcoming_gigs)

        row += 1
        kv("Taxable income", stats.actual_earnings)
        kv("Projected earnings", stats.projected_earnings)
        kv("Tips", stats.total_tips)
        kv("Business deductions", stats.total_expenses)
        kv("Mileage (miles)", stats.total_miles)
        kv("Mileage deduction", stats.mileage_deduction)
        kv("Net income", stats.net_income)
        kv("Estimated tax", stats.estimated_tax)

        if stats.notes:
            row += 1
            ws[f"A{row}"] = "Notes"
            ws[f"A{row}"].font = header_font
            row += 1
            for note in stats.notes:
                ws[f"A{row}"] = note
                row += 1

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 22

        # ---------------- Income ----------------
        table(
            wb.create_sheet("Income"),
            ["Gig ID", "Event", "Client", "Start", "End", "Mode", "Received", "Reimbursed", "Tips", "Taxable"],
            [
                (
                    r.gig_id,
                    r.event_name,
                    r.client_name,
                    r.start_date,
                    r.end_date,
                    r.mode,
                    r.received,
                    r.reimbursed,
                    r.tips,
                    r.taxable,
                )
                for r in stats.income_rows
            ],
            [10, 30, 24, 12, 12, 12, 14, 14, 12, 14],
        )

        # ---------------- Deductions ----------------
        table(
            wb.create_sheet("Gig Deductions"),
            ["Gig ID", "Event", "Date", "Status", "Parking", "Other", "Miles", "Mileage", "Total"],
            [
                (r.gig_id, r.event_name, r.day, r.status, r.parking, r.other, r.miles, r.mileage_deduction, r.total)
                for r in stats.gig_expense_rows
            ],
            [10, 30, 12, 16, 12, 12, 10, 12, 12],
        )
        table(
            wb.create_sheet("Expenses"),
            ["Expense ID", "Date", "Category", "Merchant", "Purpose", "Amount", "Reimbursed", "Net"],
            [
                (r.expense_id, r.day, r.category, r.merchant or "", r.business_purpose, r.amount, r.reimbursed, r.net)
                for r in stats.expense_rows
            ],
            [12, 12, 34, 22, 30, 12, 12, 12],
        )

        # ---------------- Tax ----------------
        table(
            wb.create_sheet("Estimated Tax"),
            ["Gig ID", "Event", "Date", "Taxable", "Rate (%)", "Gig override", "Tax"],
            [
                (r.gig_id, r.event_name, r.day, r.taxable, float(r.rate), "Yes" if r.rate_overridden else "No", r.tax)
                for r in stats.tax_rows
            ],
            [10, 30, 12, 14, 10, 12, 12],
        )

        # ---------------- Analytics ----------------
        if ctx.by_category:
            table(
                wb.create_sheet("By Category"),
                ["Category", "Entries", "Amount", "Reimbursed", "Net"],
                [(r.label, r.count, r.amount, r.reimbursed, r.net) for r in ctx.by_category],
                [40, 10, 14, 14, 14],
            )
        if ctx.cashflow:
            table(
                wb.create_sheet("Monthly"),
                ["Month", "Start", "End", "Taxable income", "Deductions", "Estimated tax"],
                [
                    (r.period_key, r.period_start, r.period_end, r.taxable_income, r.deductions, r.estimated_tax)
                    for r in ctx.cashflow
                ],
                [12, 12, 12, 16, 14, 14],
            )

        wb.save(output_path)
        return output_path
