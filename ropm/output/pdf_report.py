"""
ROPM Generator - PDF Report Generator

Ties the pipeline together: raw submission -> IncidentRecord -> document
definition -> sanitized tree -> PDF bytes. One generator is built per process
and shared by every request; it holds no per-request state.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from ropm.config import AppConfig
from ropm.core.intake import parse_record
from ropm.core.normalize import sanitize_tree
from ropm.models import IncidentRecord
from ropm.output.composer import ReportComposer
from ropm.output.pdf_renderer import PDFRenderer
from ropm.utils.assets import FontSet, resolve_font_set

logger = logging.getLogger(__name__)


class ROPMReportGenerator:
    """
    Generates ROPM bulletin PDFs.

    Fonts are resolved and registered once, when the generator is created.
    """

    def __init__(self, config: Optional[AppConfig] = None, font_set: Optional[FontSet] = None):
        """
        Initialize the report generator.

        Args:
            config: Application configuration (defaults to the working directory layout)
            font_set: Font files to use; resolved from config.fonts_dir when omitted
        """
        self.config = config or AppConfig()
        if font_set is None:
            font_set = resolve_font_set(self.config.fonts_dir)
        self.font_set = font_set
        self.composer = ReportComposer(self.config.asset_dirs)
        self.renderer = PDFRenderer(font_set)

    def compose(self, record: IncidentRecord) -> Dict[str, Any]:
        """Sanitized document definition for a record."""
        return sanitize_tree(self.composer.compose(record))

    def generate(self, record: IncidentRecord) -> bytes:
        """
        Render a record to PDF.

        Args:
            record: Normalized incident record

        Returns:
            PDF document bytes

        Raises:
            RenderError: If the document cannot be rendered
        """
        pdf = self.renderer.render(self.compose(record))
        logger.info(
            "Generated ROPM %s (%d bytes, %d persons)",
            record.bulletin_number or "<sem número>",
            len(pdf),
            len(record.persons),
        )
        return pdf

    def generate_from_payload(self, payload: Any) -> Tuple[IncidentRecord, bytes]:
        """
        Parse a raw submission and render it.

        Returns:
            The parsed record and the PDF bytes

        Raises:
            RecordError: If the submission is malformed
            RenderError: If the document cannot be rendered
        """
        record = parse_record(payload)
        return record, self.generate(record)


def generate_pdf_report(
    payload: Any,
    output_path: Union[str, Path],
    config: Optional[AppConfig] = None,
) -> Path:
    """
    Convenience function to render a submission to a PDF file.

    Args:
        payload: Raw submission (JSON-like mapping)
        output_path: Path to save the PDF
        config: Optional application configuration

    Returns:
        Path to the generated PDF file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    _, pdf = ROPMReportGenerator(config).generate_from_payload(payload)
    output_path.write_bytes(pdf)
    return output_path
