"""
MediaBudget - Excel Generator Tests.

Unit tests for ExcelReporter class.
Tests ensure correct sheet creation, data population,
and formatting application.
"""

from decimal import Decimal
from pathlib import Path

import pytest
from openpyxl import load_workbook

from mediabudget.calculator import BudgetEngine
from mediabudget.excel_generator import ExcelReporter
from mediabudget.schema import BudgetInputs, MarketType


def create_test_plans(num_plans: int = 3) -> list:
    """Creates plans alternating between LARGE and CONTENDER markets."""
    engine = BudgetEngine()
    plans = []

    for i in range(num_plans):
        inputs = BudgetInputs(
            brand=f"Brand_{i + 1}",
            current_som=Decimal("10"),
            next_som=Decimal("12"),
            leader_som=Decimal("15") if i % 2 == 0 else Decimal("30"),
            brand_grp=Decimal("150"),
            comp_grp=Decimal(str(1000 * (i + 1))),
            comp_grp_increase=Decimal("10"),
            cprp=Decimal("500"),
            tv_to_all_media_factor=Decimal("1.2"),
        )
        plans.append(engine.build_plan(inputs))

    return plans


def sheet_values(ws) -> list:
    """Returns every non-empty cell value as a string."""
    return [str(cell.value) for row in ws.iter_rows() for cell in row if cell.value is not None]


class TestExcelReporterUnit:
    """Unit tests for ExcelReporter."""

    def setup_method(self) -> None:
        """Initialise ExcelReporter for each test."""
        self.reporter = ExcelReporter()

    def test_generate_report_creates_file(self, tmp_path: Path) -> None:
        """Verify report generation creates a file."""
        output_path = tmp_path / "plans.xlsx"

        result = self.reporter.generate_report(create_test_plans(), output_path)

        assert result == output_path
        assert output_path.exists()

    def test_report_has_two_sheets(self, tmp_path: Path) -> None:
        """Verify report has Budget Summary and Brand Comparison sheets."""
        output_path = tmp_path / "plans.xlsx"
        self.reporter.generate_report(create_test_plans(), output_path)

        workbook = load_workbook(output_path)

        assert workbook.sheetnames == ["Budget Summary", "Brand Comparison"]

    def test_empty_plans_rejected(self, tmp_path: Path) -> None:
        """Verify at least one plan is required."""
        with pytest.raises(ValueError, match="At least one budget plan"):
            self.reporter.generate_report([], tmp_path / "plans.xlsx")

    def test_summary_sheet_content(self, tmp_path: Path) -> None:
        """Verify the summary describes the first plan."""
        output_path = tmp_path / "plans.xlsx"
        self.reporter.generate_report(create_test_plans(), output_path)

        ws = load_workbook(output_path)["Budget Summary"]
        values = sheet_values(ws)

        assert ws["A1"].value == "Budget Planning Report"
        assert ws["B4"].value == "Brand_1"
        assert ws["B5"].value == "Not specified"
        assert any("Total Media Budget 2027" in v for v in values)
        assert "GRP CALCULATION" in values
        assert "Brand_1 GRP" in values
        assert "Large" in values

    def test_summary_budget_values(self, tmp_path: Path) -> None:
        """Verify headline budgets are stored as numbers."""
        plans = create_test_plans(1)
        output_path = tmp_path / "plans.xlsx"
        self.reporter.generate_report(plans, output_path)

        ws = load_workbook(output_path)["Budget Summary"]

        assert ws["A10"].value == "Total Media Budget 2027"
        assert ws["B10"].value == pytest.approx(float(plans[0].total_budget))
        assert ws["B10"].number_format == "#,##0"

    def test_comparison_headers(self, tmp_path: Path) -> None:
        """Verify the comparison sheet headers."""
        output_path = tmp_path / "plans.xlsx"
        self.reporter.generate_report(create_test_plans(), output_path)

        ws = load_workbook(output_path)["Brand Comparison"]
        headers = [cell.value for cell in ws[1]]

        assert headers == ExcelReporter.COMPARISON_HEADERS

    def test_comparison_row_count_matches_plans(self, tmp_path: Path) -> None:
        """Verify one comparison row per plan."""
        output_path = tmp_path / "plans.xlsx"
        self.reporter.generate_report(create_test_plans(7), output_path)

        ws = load_workbook(output_path)["Brand Comparison"]
        data_rows = sum(1 for row in ws.iter_rows(min_row=2) if row[0].value)

        assert data_rows == 7

    def test_comparison_market_types(self, tmp_path: Path) -> None:
        """Verify market types and their fills."""
        plans = create_test_plans(2)
        output_path = tmp_path / "plans.xlsx"
        self.reporter.generate_report(plans, output_path)

        ws = load_workbook(output_path)["Brand Comparison"]

        assert plans[1].market_type == MarketType.CONTENDER
        assert ws.cell(row=2, column=6).value == "Large"
        assert ws.cell(row=3, column=6).value == "Contender"
        assert ws.cell(row=3, column=6).fill.start_color.rgb.endswith("FFEB9C")

    def test_comparison_budget_formatting(self, tmp_path: Path) -> None:
        """Verify budget columns use the currency format."""
        output_path = tmp_path / "plans.xlsx"
        self.reporter.generate_report(create_test_plans(1), output_path)

        ws = load_workbook(output_path)["Brand Comparison"]

        assert ws.cell(row=2, column=13).number_format == "#,##0"
        assert ws.cell(row=2, column=8).number_format == "0.00"

    def test_generate_filename(self) -> None:
        """Verify filename generation format."""
        filename = self.reporter.generate_filename("budget_plans")

        assert filename.startswith("budget_plans_")
        assert filename.endswith(".xlsx")
