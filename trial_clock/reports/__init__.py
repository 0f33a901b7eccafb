"""Summary reporting for Trial Clock.

Builds read-only summaries of a run and exports them as:
- Plain text
- PDF
"""

from pathlib import Path

from .pdf_generator import (
    PdfGenerator,
    generate_summary_pdf,
)
from .summary import (
    AllotmentRow,
    SegmentRow,
    SideSummary,
    TrialSummary,
    build_summary,
    format_summary_text,
    write_summary_text,
)


def export_summary(summary: TrialSummary, output_path: Path) -> Path:
    """
    Export a summary, choosing the format from the file extension.

    Args:
        summary: Summary snapshot
        output_path: Target file (.pdf or .txt)

    Returns:
        Path to the written file
    """
    output_path = Path(output_path)
    if output_path.suffix.lower() == ".pdf":
        return generate_summary_pdf(summary, output_path)
    return write_summary_text(summary, output_path)


__all__ = [
    "export_summary",
    # Summary
    "AllotmentRow",
    "SegmentRow",
    "SideSummary",
    "TrialSummary",
    "build_summary",
    "format_summary_text",
    "write_summary_text",
    # PDF
    "PdfGenerator",
    "generate_summary_pdf",
]
