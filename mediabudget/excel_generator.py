"""
MediaBudget - Excel Workbook Generation Module.

This module exports budget plans to an Excel workbook alongside the PDF
report. The Budget Summary tab mirrors the on-screen calculator for the
lead brand; the Brand Comparison tab lists every plan side by side.

Workbook Layout:
    - Budget Summary: headline budgets, market structure, GRP table
    - Brand Comparison: one row per plan, Contender rows highlighted

Classes:
    ExcelReporter: Generates Excel workbooks from budget plans.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Sequence, Union

from openpyxl import Workbook
from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    PatternFill,
    Side,
)
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from mediabudget.schema import NOT_SPECIFIED, BudgetPlan, MarketType

logger = logging.getLogger(__name__)


class ExcelReporter:
    """
    Generates Excel workbooks for budget plans.

    Creates workbooks with Budget Summary and Brand Comparison sheets,
    applying currency and percentage number formats.

    Attributes:
        CURRENCY_FORMAT: Excel number format for budgets.
        DECIMAL_FORMAT: Excel number format for percentages and ratios.

    Example:
        >>> reporter = ExcelReporter()
        >>> reporter.generate_report([plan], "budget_plans.xlsx")
    """

    # Excel number formats
    CURRENCY_FORMAT = '#,##0'
    DECIMAL_FORMAT = '0.00'

    # Market type colours
    CONTENDER_FILL = PatternFill(
        start_color="FFEB9C",
        end_color="FFEB9C",
        fill_type="solid"
    )
    LARGE_FILL = PatternFill(
        start_color="C6EFCE",
        end_color="C6EFCE",
        fill_type="solid"
    )

    # Header styling
    HEADER_FONT = Font(bold=True, color="FFFFFF")
    HEADER_FILL = PatternFill(
        start_color="4299E1",
        end_color="4299E1",
        fill_type="solid"
    )
    HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")

    # Border styling
    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    COMPARISON_HEADERS = [
        "Brand",
        "Next Year",
        "Current SOM %",
        "Target SOM %",
        "SOM Growth",
        "Market Type",
        "Ratio",
        "Required SOV %",
        "Brand GRP",
        "Competitor GRP",
        "Total Market GRP",
        "TV Budget",
        "Total Media Budget",
    ]

    def generate_report(
        self,
        plans: Sequence[BudgetPlan],
        output_path: Union[str, Path]
    ) -> Path:
        """
        Generates a complete Excel workbook from budget plans.

        Creates a workbook with two sheets:
        1. Budget Summary - the first plan in detail
        2. Brand Comparison - every plan, one row each

        Args:
            plans: Budget plans, lead brand first.
            output_path: Path for the output .xlsx file.

        Returns:
            Path of the written workbook.

        Raises:
            ValueError: If no plans are given.
        """
        if not plans:
            raise ValueError("At least one budget plan is required")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        workbook = Workbook()

        # Remove default sheet
        default_sheet = workbook.active
        workbook.remove(default_sheet)

        self._create_summary_sheet(workbook, plans[0])
        self._create_comparison_sheet(workbook, plans)

        workbook.save(output_path)
        logger.info("Excel workbook written to %s (%d plans)", output_path, len(plans))
        return output_path

    def _create_summary_sheet(self, workbook: Workbook, plan: BudgetPlan) -> None:
        """
        Creates the Budget Summary sheet for a single plan.

        Args:
            workbook: Target workbook.
            plan: Plan to summarise.
        """
        ws = workbook.create_sheet("Budget Summary")
        inputs = plan.inputs
        ny = inputs.next_year

        # Title
        ws["A1"] = "Budget Planning Report"
        ws["A1"].font = Font(bold=True, size=16)
        ws.merge_cells("A1:D1")

        ws["A3"] = "Report Generated:"
        ws["B3"] = datetime.now().strftime("%Y-%m-%d %H:%M")
        ws["A4"] = "Brand:"
        ws["B4"] = inputs.brand.strip() or NOT_SPECIFIED
        ws["A5"] = "Category Leader:"
        ws["B5"] = inputs.leader_name.strip() or NOT_SPECIFIED

        # Headline budgets
        ws["A7"] = "BUDGET"
        ws["A7"].font = Font(bold=True, size=14)
        ws.merge_cells("A7:D7")

        budget_rows = [
            (f"TV Budget {ny}", plan.next_year_tv_budget),
            (f"Total Media Budget {ny}", plan.total_budget),
            ("CPRP (TV)", inputs.cprp),
            ("TV to All Media Factor", inputs.tv_to_all_media_factor),
        ]

        row = 9
        for label, value in budget_rows:
            ws[f"A{row}"] = label
            ws[f"A{row}"].font = Font(bold=True)
            ws[f"B{row}"] = float(value)
            ws[f"B{row}"].number_format = self.CURRENCY_FORMAT
            row += 1
        ws["B12"].number_format = self.DECIMAL_FORMAT

        # Market structure
        ws["A14"] = "MARKET STRUCTURE"
        ws["A14"].font = Font(bold=True, size=14)
        ws.merge_cells("A14:D14")

        market_rows = [
            ("Current SOM (%)", inputs.current_som),
            (f"{ny} SOM (%)", inputs.next_som),
            ("SOM Growth", plan.growth),
            ("Leader SOM (%)", inputs.leader_som),
            ("Applied SOV/SOM Ratio", plan.ratio),
            (f"Required SOV {ny} (%)", plan.expected_sov),
        ]

        row = 16
        for label, value in market_rows:
            ws[f"A{row}"] = label
            ws[f"A{row}"].font = Font(bold=True)
            ws[f"B{row}"] = float(value)
            ws[f"B{row}"].number_format = self.DECIMAL_FORMAT
            row += 1

        ws[f"A{row}"] = "Market Type"
        ws[f"A{row}"].font = Font(bold=True)
        ws[f"B{row}"] = plan.market_type.value
        ws[f"B{row}"].fill = self._get_market_fill(plan.market_type)

        # GRP table
        grp_top = row + 2
        ws[f"A{grp_top}"] = "GRP CALCULATION"
        ws[f"A{grp_top}"].font = Font(bold=True, size=14)
        ws.merge_cells(f"A{grp_top}:D{grp_top}")

        brand_label = inputs.brand.strip() or "Brand"
        grp_data = [
            ("", "Current", "Increase %", str(ny)),
            (f"{brand_label} GRP", inputs.brand_grp, None, plan.next_year_brand_grp),
            ("Competitor GRP", inputs.comp_grp, inputs.comp_grp_increase, plan.next_comp_grp),
            ("Total Market GRP (100%)", None, None, plan.total_market_grp),
        ]

        row = grp_top + 2
        for i, values in enumerate(grp_data):
            for col_idx, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col_idx)
                if i == 0:
                    cell.value = value
                    cell.font = self.HEADER_FONT
                    cell.fill = self.HEADER_FILL
                    cell.alignment = self.HEADER_ALIGNMENT
                elif col_idx == 1:
                    cell.value = value
                    cell.font = Font(bold=True)
                elif value is not None:
                    cell.value = float(value)
                    cell.number_format = self.DECIMAL_FORMAT
                cell.border = self.THIN_BORDER
            row += 1

        self._auto_adjust_columns(ws)

    def _create_comparison_sheet(
        self,
        workbook: Workbook,
        plans: Sequence[BudgetPlan]
    ) -> None:
        """
        Creates the Brand Comparison sheet with one row per plan.

        Args:
            workbook: Target workbook.
            plans: Plans to list.
        """
        ws = workbook.create_sheet("Brand Comparison")

        for col, header in enumerate(self.COMPARISON_HEADERS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.THIN_BORDER

        for row_idx, plan in enumerate(plans, start=2):
            inputs = plan.inputs
            row_data = [
                inputs.brand.strip() or NOT_SPECIFIED,
                inputs.next_year,
                float(inputs.current_som),
                float(inputs.next_som),
                float(plan.growth),
                plan.market_type.value,
                float(plan.ratio),
                float(plan.expected_sov),
                float(plan.next_year_brand_grp),
                float(plan.next_comp_grp),
                float(plan.total_market_grp),
                float(plan.next_year_tv_budget),
                float(plan.total_budget),
            ]

            for col_idx, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.THIN_BORDER

                if col_idx in [12, 13]:  # Budget columns
                    cell.number_format = self.CURRENCY_FORMAT
                elif col_idx in [3, 4, 5, 7, 8, 9, 10, 11]:
                    cell.number_format = self.DECIMAL_FORMAT

            ws.cell(row=row_idx, column=6).fill = self._get_market_fill(plan.market_type)

        self._auto_adjust_columns(ws)

    def _get_market_fill(self, market_type: MarketType) -> PatternFill:
        """Returns the fill colour for a market type."""
        if market_type == MarketType.CONTENDER:
            return self.CONTENDER_FILL
        return self.LARGE_FILL

    def _auto_adjust_columns(self, worksheet: Worksheet) -> None:
        """
        Auto-adjusts column widths based on content.

        Args:
            worksheet: Target worksheet.
        """
        for col_idx in range(1, worksheet.max_column + 1):
            max_length = 0
            column_letter = get_column_letter(col_idx)

            for row_idx in range(1, worksheet.max_row + 1):
                value = worksheet.cell(row=row_idx, column=col_idx).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))

            worksheet.column_dimensions[column_letter].width = max(max_length + 2, 10)

    def generate_filename(self, prefix: str = "budget_plans") -> str:
        """
        Generates a timestamped filename for workbooks.

        Args:
            prefix: Filename prefix. Defaults to "budget_plans".

        Returns:
            Filename like "budget_plans_2026-10-19_143052.xlsx".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.xlsx"
