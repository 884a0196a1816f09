"""
MediaBudget - PDF Report Generation Module.

This module renders a BudgetPlan as a paginated PDF report. The report
leads with the all-media budget headline, followed by five sections
of label/value rows.

Report Layout:
    - Company name and rule in the header of every page
    - Title, brand line, and total budget headline on page one
    - Basic Information, Market Structure, Share of Voice (SOV),
      GRP Analysis, and Financial Impact sections
    - "© <year> MTM Group. Page i of n" footer on every page

Classes:
    BudgetPdf: FPDF document with the report header and footer.
    PdfReporter: Generates PDF reports from budget plans.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from fpdf import FPDF

from mediabudget.formatting import format_fixed, format_grouped, format_plain
from mediabudget.schema import COMPANY_NAME, NOT_SPECIFIED, BudgetPlan

logger = logging.getLogger(__name__)

Row = Tuple[str, str]

# Characters the core Helvetica font cannot encode
_PDF_REPLACEMENTS = {
    "–": "-",
    "—": "-",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "…": "...",
    "•": "*",
    "→": "->",
}


def pdf_safe(text: object) -> str:
    """Replaces characters Helvetica can't render with Latin-1 equivalents."""
    s = str(text)
    for char, replacement in _PDF_REPLACEMENTS.items():
        s = s.replace(char, replacement)
    return s.encode("latin-1", "replace").decode("latin-1")


class BudgetPdf(FPDF):
    """
    A4 document with the repeated report header and footer.

    Args:
        company: Name shown in the header and footer.
        copyright_year: Year shown in the footer.
    """

    MARGIN = 20

    def __init__(self, company: str, copyright_year: int):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.company = company
        self.copyright_year = copyright_year
        self.set_margins(self.MARGIN, self.MARGIN, self.MARGIN)
        self.set_auto_page_break(auto=False)

    def header(self) -> None:
        self.set_font("helvetica", "", 10)
        self.set_text_color(150)
        self.set_xy(self.MARGIN, 9)
        self.cell(self.epw, 8, pdf_safe(self.company), align="R")
        self.set_draw_color(226, 232, 240)
        self.line(self.MARGIN, 20, self.w - self.MARGIN, 20)

    def footer(self) -> None:
        self.set_y(-15)
        self.set_font("helvetica", "", 9)
        self.set_text_color(160, 174, 192)
        self.cell(
            0,
            8,
            pdf_safe(
                f"© {self.copyright_year} {self.company}. "
                f"Page {self.page_no()} of {{nb}}"
            ),
            align="C",
        )


class PdfReporter:
    """
    Generates PDF budget reports.

    Each report is built from a single BudgetPlan snapshot. Page breaks
    are inserted before a section when less than SECTION_SPACE remains,
    and before any row that would run into the footer.

    Example:
        >>> reporter = PdfReporter()
        >>> path = reporter.generate_report(plan, "reports/")
    """

    TITLE = "Budget Planning Report"
    FILENAME_PREFIX = "Budget_Plan"
    DEFAULT_FILENAME_BRAND = "Report"
    DEFAULT_BRAND_LABEL = "Brand"

    # Path separators, reserved and control characters in filenames
    FILENAME_UNSAFE_PATTERN = re.compile(r'[\\/:*?"<>|\x00-\x1f]')

    # Vertical layout (mm)
    CONTENT_TOP = 30
    SECTION_SPACE = 50
    ROW_HEIGHT = 8
    BOTTOM_LIMIT = 20
    VALUE_COLUMN_WIDTH = 40

    # Colours
    TITLE_COLOR = (45, 55, 72)
    SUBTITLE_COLOR = (100, 100, 100)
    HEADLINE_COLOR = (66, 153, 225)
    RULE_COLOR = (226, 232, 240)

    def __init__(self, company: str = COMPANY_NAME):
        """
        Initialises the PdfReporter.

        Args:
            company: Name shown in the page header and footer.
        """
        self._company = company

    def generate_filename(self, brand: str = "") -> str:
        """
        Generates the report filename for a brand.

        Args:
            brand: Brand name; blank falls back to "Report".

        Returns:
            Filename like "Budget_Plan_Acme.pdf". Characters not allowed
            in filenames are replaced with "_".
        """
        brand = self.FILENAME_UNSAFE_PATTERN.sub("_", (brand or "").strip())
        return f"{self.FILENAME_PREFIX}_{brand or self.DEFAULT_FILENAME_BRAND}.pdf"

    def build_sections(self, plan: BudgetPlan) -> List[Tuple[str, Sequence[Row]]]:
        """
        Builds the labelled rows of every report section.

        Args:
            plan: Budget plan to describe.

        Returns:
            List of (section title, rows) in report order.
        """
        inputs = plan.inputs
        ny = inputs.next_year
        brand_label = inputs.brand.strip() or self.DEFAULT_BRAND_LABEL

        return [
            ("Basic Information", [
                ("Current Year", str(inputs.current_year)),
                ("Current SOM (%)", format_fixed(inputs.current_som)),
                (f"{ny} SOM (%)", format_fixed(inputs.next_som)),
                ("SOM Growth", f"{format_fixed(plan.growth)}%"),
            ]),
            ("Market Structure", [
                ("Category Leader", inputs.leader_name.strip() or NOT_SPECIFIED),
                ("Leader SOM (%)", format_fixed(inputs.leader_som)),
                ("Market Type", plan.market_type.value),
                ("Applied SOV/SOM Ratio", format_fixed(plan.ratio)),
            ]),
            ("Share of Voice (SOV)", [
                (f"Target SOM {ny} (%)", format_fixed(inputs.next_som)),
                (f"Required SOV {ny} (%)", format_fixed(plan.expected_sov)),
            ]),
            ("GRP Analysis", [
                (f"{brand_label} GRP {ny}", format_fixed(plan.next_year_brand_grp)),
                (f"Competitor GRP {ny}", format_fixed(plan.next_comp_grp, 0)),
                ("Total Market GRP (100%)", format_fixed(plan.total_market_grp, 0)),
            ]),
            ("Financial Impact", [
                ("CPRP (TV)", format_plain(inputs.cprp)),
                ("TV → All Media Factor", format_plain(inputs.tv_to_all_media_factor)),
                (f"TV Budget {ny}", format_grouped(plan.next_year_tv_budget)),
                (f"Total Media Budget {ny}", format_grouped(plan.total_budget)),
            ]),
        ]

    def render(
        self,
        plan: BudgetPlan,
        generated_at: Optional[datetime] = None
    ) -> bytes:
        """
        Renders a budget plan to PDF bytes.

        Args:
            plan: Budget plan snapshot.
            generated_at: Report timestamp for the copyright year.
                          Defaults to now.

        Returns:
            The PDF document as bytes.
        """
        generated_at = generated_at or datetime.now()
        brand = plan.inputs.brand.strip()

        pdf = BudgetPdf(self._company, generated_at.year)
        pdf.set_title(pdf_safe(f"{self.TITLE} - {brand or NOT_SPECIFIED}"))
        pdf.set_author(pdf_safe(self._company))
        pdf.add_page()

        # Title block
        pdf.set_y(self.CONTENT_TOP)
        pdf.set_font("helvetica", "", 20)
        pdf.set_text_color(*self.TITLE_COLOR)
        pdf.cell(0, 10, self.TITLE, new_x="LMARGIN", new_y="NEXT")

        pdf.set_font("helvetica", "", 12)
        pdf.set_text_color(*self.SUBTITLE_COLOR)
        pdf.cell(0, 8, pdf_safe(f"Brand: {brand or NOT_SPECIFIED}"), new_x="LMARGIN", new_y="NEXT")

        pdf.ln(5)
        pdf.set_font("helvetica", "", 14)
        pdf.set_text_color(*self.HEADLINE_COLOR)
        pdf.cell(
            0,
            10,
            f"Total Projected Budget (All Media): {format_grouped(plan.total_budget)}",
            new_x="LMARGIN",
            new_y="NEXT",
        )

        for title, rows in self.build_sections(plan):
            self._draw_section(pdf, title, rows)

        logger.debug("Rendered %d page(s) for %s", pdf.page_no(), brand or NOT_SPECIFIED)
        return bytes(pdf.output())

    def generate_report(
        self,
        plan: BudgetPlan,
        output_dir: Union[str, Path],
        generated_at: Optional[datetime] = None
    ) -> Path:
        """
        Writes the PDF report for a plan into a directory.

        Args:
            plan: Budget plan snapshot.
            output_dir: Target directory, created if missing.
            generated_at: Report timestamp. Defaults to now.

        Returns:
            Path of the written file.

        Raises:
            OSError: If the file cannot be written.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        output_path = output_dir / self.generate_filename(plan.inputs.brand)
        output_path.write_bytes(self.render(plan, generated_at))

        logger.info("PDF report written to %s", output_path)
        return output_path

    def _ensure_space(self, pdf: BudgetPdf, needed: float) -> None:
        """Starts a new page when `needed` mm would cross the bottom limit."""
        if pdf.get_y() + needed > pdf.h - self.BOTTOM_LIMIT:
            pdf.add_page()
            pdf.set_y(self.CONTENT_TOP)

    def _draw_section(self, pdf: BudgetPdf, title: str, rows: Sequence[Row]) -> None:
        """
        Draws a section title, rule, and label/value rows.

        Args:
            pdf: Target document.
            title: Section heading.
            rows: (label, value) pairs.
        """
        self._ensure_space(pdf, self.SECTION_SPACE)

        pdf.ln(7)
        pdf.set_font("helvetica", "B", 12)
        pdf.set_text_color(*self.TITLE_COLOR)
        pdf.cell(0, 8, pdf_safe(title), new_x="LMARGIN", new_y="NEXT")

        pdf.set_draw_color(*self.RULE_COLOR)
        rule_y = pdf.get_y() + 1
        pdf.line(pdf.l_margin, rule_y, pdf.w - pdf.r_margin, rule_y)
        pdf.set_y(rule_y + 3)

        pdf.set_font("helvetica", "", 12)
        label_width = pdf.epw - self.VALUE_COLUMN_WIDTH
        for label, value in rows:
            self._ensure_space(pdf, self.ROW_HEIGHT)
            pdf.cell(label_width, self.ROW_HEIGHT, pdf_safe(label))
            pdf.cell(
                self.VALUE_COLUMN_WIDTH,
                self.ROW_HEIGHT,
                pdf_safe(value),
                new_x="LMARGIN",
                new_y="NEXT",
            )
