"""
MediaBudget - PDF Generator Tests.

Unit tests for PdfReporter class.
Tests ensure correct filenames, section content, placeholders,
pagination, and file output.
"""

import io
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from pypdf import PdfReader

from mediabudget.calculator import BudgetEngine
from mediabudget.pdf_generator import PdfReporter, pdf_safe
from mediabudget.schema import BudgetInputs, BudgetPlan


def create_test_plan(brand: str = "Acme", leader_name: str = "Globex") -> BudgetPlan:
    """Creates the worked-example plan."""
    inputs = BudgetInputs(
        brand=brand,
        current_year=2026,
        current_som=Decimal("10"),
        next_som=Decimal("12"),
        leader_name=leader_name,
        leader_som=Decimal("15"),
        comp_grp=Decimal("1000"),
        comp_grp_increase=Decimal("10"),
        cprp=Decimal("500"),
        tv_to_all_media_factor=Decimal("1.2"),
    )
    return BudgetEngine().build_plan(inputs)


def extract_text(data: bytes) -> str:
    """Extracts the text of every page."""
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() for page in reader.pages)


class TestPdfReporterUnit:
    """Unit tests for PdfReporter."""

    def setup_method(self) -> None:
        """Initialise PdfReporter for each test."""
        self.reporter = PdfReporter()
        self.generated_at = datetime(2026, 10, 19, 9, 30)

    def test_filename_uses_brand(self) -> None:
        """Verify the brand names the file."""
        assert self.reporter.generate_filename("Acme") == "Budget_Plan_Acme.pdf"

    @pytest.mark.parametrize("brand", ["", "   "])
    def test_filename_defaults_to_report(self, brand: str) -> None:
        """Verify a blank brand falls back to Report."""
        assert self.reporter.generate_filename(brand) == "Budget_Plan_Report.pdf"

    @pytest.mark.parametrize("brand,expected", [
        ("AC/DC", "Budget_Plan_AC_DC.pdf"),
        ("../x", "Budget_Plan_.._x.pdf"),
        ("a\\b:c*d?", "Budget_Plan_a_b_c_d_.pdf"),
        ("Ben & Jerry's", "Budget_Plan_Ben & Jerry's.pdf"),
    ])
    def test_filename_replaces_unsafe_characters(self, brand: str, expected: str) -> None:
        """Verify path separators and reserved characters become underscores."""
        assert self.reporter.generate_filename(brand) == expected

    def test_sections_in_order(self) -> None:
        """Verify the five sections appear in report order."""
        titles = [title for title, _ in self.reporter.build_sections(create_test_plan())]

        assert titles == [
            "Basic Information",
            "Market Structure",
            "Share of Voice (SOV)",
            "GRP Analysis",
            "Financial Impact",
        ]

    def test_section_values(self) -> None:
        """Verify formatted values for the worked example."""
        sections = dict(self.reporter.build_sections(create_test_plan()))

        assert dict(sections["Basic Information"]) == {
            "Current Year": "2026",
            "Current SOM (%)": "10.00",
            "2027 SOM (%)": "12.00",
            "SOM Growth": "2.00%",
        }
        assert dict(sections["Market Structure"]) == {
            "Category Leader": "Globex",
            "Leader SOM (%)": "15.00",
            "Market Type": "Large",
            "Applied SOV/SOM Ratio": "1.20",
        }
        assert dict(sections["Share of Voice (SOV)"]) == {
            "Target SOM 2027 (%)": "12.00",
            "Required SOV 2027 (%)": "14.40",
        }
        assert dict(sections["GRP Analysis"]) == {
            "Acme GRP 2027": "185.05",
            "Competitor GRP 2027": "1100",
            "Total Market GRP (100%)": "1285",
        }
        assert dict(sections["Financial Impact"]) == {
            "CPRP (TV)": "500",
            "TV → All Media Factor": "1.2",
            "TV Budget 2027": "92,523",
            "Total Media Budget 2027": "111,028",
        }

    def test_blank_text_placeholders(self) -> None:
        """Verify blank leader and brand fall back to placeholders."""
        sections = dict(self.reporter.build_sections(create_test_plan("", "")))

        assert dict(sections["Market Structure"])["Category Leader"] == "Not specified"
        assert "Brand GRP 2027" in dict(sections["GRP Analysis"])

    def test_render_returns_pdf_bytes(self) -> None:
        """Verify render produces a PDF document."""
        data = self.reporter.render(create_test_plan(), self.generated_at)

        assert isinstance(data, bytes)
        assert data.startswith(b"%PDF")

    def test_render_headline_and_brand(self) -> None:
        """Verify the title, brand line and budget headline."""
        text = extract_text(self.reporter.render(create_test_plan(), self.generated_at))

        assert "Budget Planning Report" in text
        assert "Brand: Acme" in text
        assert "Total Projected Budget (All Media): 111,028" in text
        assert "MTM Group" in text

    def test_render_blank_brand(self) -> None:
        """Verify a blank brand renders as Not specified."""
        text = extract_text(self.reporter.render(create_test_plan(""), self.generated_at))

        assert "Brand: Not specified" in text

    def test_render_sections_present(self) -> None:
        """Verify every section title is rendered."""
        text = extract_text(self.reporter.render(create_test_plan(), self.generated_at))

        for title in ("Basic Information", "Market Structure", "Share of Voice (SOV)",
                      "GRP Analysis", "Financial Impact"):
            assert title in text
        assert "TV -> All Media Factor" in text

    def test_render_paginates_with_footer(self) -> None:
        """Verify the report breaks onto a second page with numbered footers."""
        data = self.reporter.render(create_test_plan(), self.generated_at)
        reader = PdfReader(io.BytesIO(data))

        assert len(reader.pages) == 2
        assert "2026 MTM Group. Page 1 of 2" in reader.pages[0].extract_text()
        assert "2026 MTM Group. Page 2 of 2" in reader.pages[1].extract_text()
        assert "MTM Group" in reader.pages[1].extract_text()

    def test_render_non_latin_brand(self) -> None:
        """Verify characters outside Latin-1 do not break rendering."""
        data = self.reporter.render(create_test_plan("Brand → 品牌"), self.generated_at)

        assert data.startswith(b"%PDF")

    def test_custom_company(self) -> None:
        """Verify the company name is configurable."""
        reporter = PdfReporter(company="Acme Media")
        text = extract_text(reporter.render(create_test_plan(), self.generated_at))

        assert "Acme Media" in text

    def test_generate_report_writes_file(self, tmp_path: Path) -> None:
        """Verify the report is written under the brand filename."""
        output_dir = tmp_path / "reports"

        path = self.reporter.generate_report(create_test_plan(), output_dir, self.generated_at)

        assert path == output_dir / "Budget_Plan_Acme.pdf"
        assert path.read_bytes().startswith(b"%PDF")

    def test_generate_report_default_filename(self, tmp_path: Path) -> None:
        """Verify an unnamed brand writes Budget_Plan_Report.pdf."""
        path = self.reporter.generate_report(create_test_plan(""), tmp_path)

        assert path.name == "Budget_Plan_Report.pdf"
        assert path.exists()

    def test_generate_report_stays_in_output_dir(self, tmp_path: Path) -> None:
        """Verify a brand with path separators writes inside the directory."""
        output_dir = tmp_path / "reports"

        for brand in ("AC/DC", "../x"):
            path = self.reporter.generate_report(create_test_plan(brand), output_dir)

            assert path.parent == output_dir
            assert path.exists()

        assert sorted(p.name for p in output_dir.iterdir()) == [
            "Budget_Plan_.._x.pdf",
            "Budget_Plan_AC_DC.pdf",
        ]
        assert not (tmp_path / "x.pdf").exists()

    def test_render_keeps_brand_as_typed(self) -> None:
        """Verify the brand line is not affected by filename cleaning."""
        text = extract_text(self.reporter.render(create_test_plan("AC/DC"), self.generated_at))

        assert "Brand: AC/DC" in text


class TestPdfSafe:
    """Unit tests for Latin-1 text mapping."""

    def test_arrow_mapped(self) -> None:
        assert pdf_safe("TV → All Media") == "TV -> All Media"

    def test_latin1_kept(self) -> None:
        assert pdf_safe("© Café") == "© Café"

    def test_unencodable_replaced(self) -> None:
        assert pdf_safe("品牌") == "??"
