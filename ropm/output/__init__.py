"""Output generation modules for ROPM bulletins.

This package builds the document definition for an incident record and
renders it to PDF.
"""

from ropm.output.composer import ReportComposer
from ropm.output.pdf_renderer import PDFRenderer, resolve_widths
from ropm.output.pdf_report import ROPMReportGenerator, generate_pdf_report
from ropm.output.styles import ReportStyles

__all__ = [
    # Document definition
    "ReportComposer",
    # Rendering
    "PDFRenderer",
    "ReportStyles",
    "resolve_widths",
    # Pipeline
    "ROPMReportGenerator",
    "generate_pdf_report",
]
