"""PDF export of the trial summary.

Uses reportlab to create a summary document with:
- Page numbering in the footer
- Per-side segment tables
- Overall usage tables ("used / allotted")
"""

from pathlib import Path
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from ..exceptions import ExportError
from ..utils.logging import get_logger
from ..utils.timefmt import format_time
from .summary import SideSummary, TrialSummary

logger = get_logger(__name__)


class PageNumberedCanvas(canvas.Canvas):
    """Canvas subclass that stamps a page number on each page."""

    def __init__(self, *args, footer: str = "Mock Trial Summary", **kwargs):
        super().__init__(*args, **kwargs)
        self.footer = footer
        self._page_number = 0

    def showPage(self):
        """Called at the end of each page."""
        self._page_number += 1
        self.saveState()
        self.setFont("Helvetica", 9)
        self.drawString(0.75 * inch, 0.5 * inch, self.footer)
        self.drawRightString(letter[0] - 0.75 * inch, 0.5 * inch, f"Page {self._page_number}")
        self.restoreState()
        super().showPage()


class PdfGenerator:
    """Generator for trial summary PDFs."""

    def __init__(self, title: str = "Mock Trial Summary"):
        self.title = title
        self.styles = getSampleStyleSheet()
        self._setup_styles()
        self.elements = []

    def _setup_styles(self) -> None:
        """Configure custom styles."""
        self.styles.add(ParagraphStyle(
            name="ReportTitle",
            parent=self.styles["Heading1"],
            fontSize=22,
            spaceAfter=18,
            alignment=1,  # Center
        ))

        self.styles.add(ParagraphStyle(
            name="SectionHeader",
            parent=self.styles["Heading2"],
            fontSize=14,
            spaceBefore=16,
            spaceAfter=8,
            textColor=colors.darkblue,
        ))

    def add_title(self, title: str, subtitle: Optional[str] = None) -> None:
        self.elements.append(Paragraph(title, self.styles["ReportTitle"]))
        if subtitle:
            self.elements.append(Paragraph(subtitle, self.styles["Normal"]))
        self.elements.append(Spacer(1, 12))

    def add_heading(self, text: str) -> None:
        self.elements.append(Paragraph(text, self.styles["SectionHeader"]))

    def add_paragraph(self, text: str, style: Optional[str] = None) -> None:
        self.elements.append(Paragraph(text, self.styles[style or "Normal"]))
        self.elements.append(Spacer(1, 6))

    def add_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        col_widths: Optional[list[float]] = None,
        highlight_rows: Optional[list[int]] = None,
    ) -> None:
        """
        Add a table.

        Args:
            headers: Column headers
            rows: Table data
            col_widths: Column widths in inches
            highlight_rows: 0-based data rows to print in red
        """
        if col_widths:
            col_widths = [w * inch for w in col_widths]

        data = [headers] + rows
        style = [
            # Header styling
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, 0), 10),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
            ("TOPPADDING", (0, 0), (-1, 0), 6),

            # Data styling
            ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 1), (-1, -1), 9),
            ("ALIGN", (-1, 1), (-1, -1), "RIGHT"),

            # Grid
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.Color(0.95, 0.95, 0.95)]),
        ]
        for row in highlight_rows or []:
            style.append(("TEXTCOLOR", (0, row + 1), (-1, row + 1), colors.red))

        table = Table(data, colWidths=col_widths)
        table.setStyle(TableStyle(style))
        self.elements.append(table)
        self.elements.append(Spacer(1, 12))

    def add_side(self, side: SideSummary) -> None:
        """Add one side's segment and usage tables."""
        self.add_heading(f"{side.title} (Total {format_time(side.total)})")

        if side.segments:
            self.add_table(
                ["Phase", "Elapsed"],
                [[row.label, row.formatted] for row in side.segments],
                col_widths=[4.0, 1.2],
            )
        else:
            self.add_paragraph("No time recorded.")

        over = [i for i, a in enumerate(side.allotments) if a.over]
        self.add_table(
            ["Overall Usage", "Used / Allotted"],
            [[a.label, a.formatted] for a in side.allotments],
            col_widths=[4.0, 1.2],
            highlight_rows=over,
        )

    def save(self, path: Path) -> Path:
        """Build the document and write it to ``path``."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        def make_canvas(*args, **kwargs):
            return PageNumberedCanvas(*args, footer=self.title, **kwargs)

        doc = SimpleDocTemplate(
            str(path),
            pagesize=letter,
            rightMargin=0.75 * inch,
            leftMargin=0.75 * inch,
            topMargin=0.75 * inch,
            bottomMargin=0.75 * inch,
            title=self.title,
        )
        doc.build(self.elements, canvasmaker=make_canvas)
        return path


def generate_summary_pdf(summary: TrialSummary, output_path: Path) -> Path:
    """
    Export a trial summary as PDF.

    Args:
        summary: Summary snapshot
        output_path: Where to save the PDF

    Returns:
        Path to the generated PDF

    Raises:
        ExportError: If the document cannot be written
    """
    gen = PdfGenerator()
    gen.add_title(
        "MOCK TRIAL SUMMARY",
        f"Generated {summary.generated_at.strftime('%B %d, %Y %H:%M')}",
    )
    if summary.ended:
        gen.add_paragraph("Trial ended.")
    elif summary.active_label:
        gen.add_paragraph(f"<b>Current phase:</b> {summary.active_label}")

    for side in summary.sides:
        gen.add_side(side)

    try:
        path = gen.save(output_path)
    except OSError as e:
        raise ExportError(f"Could not write {output_path}: {e}") from e

    logger.info(f"Exported summary PDF to {path}")
    return path
