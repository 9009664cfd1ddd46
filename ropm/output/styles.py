"""
ROPM Generator - Report Styles

Paragraph styles referenced by name from the document definition.
"""

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT
from reportlab.lib.styles import ParagraphStyle, StyleSheet1

from ropm.output.blocks import DARK_RED, LIGHT_GREY, NAVY

# Cell background implied by a style when the cell sets no fillColor
STYLE_FILLS = {
    "SectionHeader": NAVY,
    "SectionHeaderRed": DARK_RED,
    "TableHeader": LIGHT_GREY,
}

# Styles that only mark a container cell; their children carry the text styles
CONTAINER_STYLES = {"FieldBox"}

DEFAULT_STYLE = "Cell"


class ReportStyles:
    """Paragraph styles for the ROPM document."""

    def __init__(self, font_name: str = "Helvetica", bold_font_name: str = "Helvetica-Bold"):
        """
        Initialize report styles.

        Args:
            font_name: Registered name of the regular face
            bold_font_name: Registered name of the bold face
        """
        self.font_name = font_name
        self.bold_font_name = bold_font_name
        self.styles = StyleSheet1()
        self._add_styles()

    def _style(self, name: str, size: float, bold: bool = False, **kwargs) -> None:
        kwargs.setdefault("leading", size * 1.2)
        self.styles.add(ParagraphStyle(
            name=name,
            fontName=self.bold_font_name if bold else self.font_name,
            fontSize=size,
            **kwargs,
        ))

    def _add_styles(self) -> None:
        """Add the named paragraph styles."""
        navy = colors.HexColor(NAVY)

        # Title stack
        self._style("HeaderSmall", 8, alignment=TA_CENTER)
        self._style("HeaderLarge", 14, bold=True, alignment=TA_CENTER, textColor=navy)
        self._style("HeaderMedium", 10, bold=True, alignment=TA_CENTER, textColor=navy)

        # Section banners
        self._style("SectionHeader", 10, bold=True, alignment=TA_CENTER, textColor=colors.white)
        self._style("SectionHeaderRed", 10, bold=True, alignment=TA_CENTER, textColor=colors.white)
        self._style("SubHeader", 9, bold=True, textColor=colors.black)

        # Field boxes
        self._style("FieldLabel", 6, bold=True, textColor=colors.HexColor("#444444"))
        self._style("FieldValue", 8, bold=True, textColor=colors.black)

        self._style("PersonType", 7, bold=True, alignment=TA_CENTER, spaceBefore=10, spaceAfter=10)
        self._style("TableHeader", 7, bold=True, alignment=TA_CENTER)
        self._style("Cell", 8, alignment=TA_LEFT)
        self._style("Placeholder", 9)

        self._style("NarrativeText", 9, alignment=TA_JUSTIFY, leading=9 * 1.2 * 1.2)
        self._style("Signature", 8, alignment=TA_CENTER)

    def get(self, name: str) -> ParagraphStyle:
        return self.styles[name]

    def __contains__(self, name: str) -> bool:
        return name in self.styles
