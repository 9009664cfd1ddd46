"""
ROPM Generator - PDF Renderer

Renders a document definition (see ropm.output.blocks) into PDF bytes using
ReportLab. The renderer owns everything page-related: page size and margins,
the page border, font registration, column width resolution, cell spans,
fills, rules and minimum cell heights.

A malformed tree is rejected with RenderError rather than rendered
approximately: rows whose cell count disagrees with the width template,
unknown node kinds, unknown styles and values with no text form.
"""

import base64
import binascii
import io
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ropm import __version__
from ropm.output.styles import CONTAINER_STYLES, DEFAULT_STYLE, STYLE_FILLS, ReportStyles
from ropm.output.text_utils import escape_markup
from ropm.utils.assets import FontSet
from ropm.utils.exceptions import RenderError

logger = logging.getLogger(__name__)

FONT_FAMILY = "Roboto"

BUILTIN_FONTS = {
    "normal": "Helvetica",
    "bold": "Helvetica-Bold",
    "italics": "Helvetica-Oblique",
    "bolditalics": "Helvetica-BoldOblique",
}

PAGE_SIZES = {"A4": A4, "LETTER": letter}

ALIGNMENTS = {
    "left": TA_LEFT,
    "center": TA_CENTER,
    "right": TA_RIGHT,
    "justify": TA_JUSTIFY,
}

GRID_COLOR = colors.HexColor("#333333")
GRID_WIDTH = 0.5
CELL_PADDING_H = 4
CELL_PADDING_V = 2


def register_fonts(font_set: Optional[FontSet]) -> Dict[str, str]:
    """
    Register the TrueType family and return the font names to use per face.

    Falls back to the built-in Helvetica family when no font files are
    available or a file cannot be loaded.
    """
    if font_set is None or font_set.is_empty:
        logger.warning("No TrueType fonts configured; rendering with Helvetica")
        return dict(BUILTIN_FONTS)

    names = {
        "normal": FONT_FAMILY,
        "bold": f"{FONT_FAMILY}-Bold",
        "italics": f"{FONT_FAMILY}-Italic",
        "bolditalics": f"{FONT_FAMILY}-BoldItalic",
    }
    try:
        for face, path in font_set.as_dict().items():
            pdfmetrics.registerFont(TTFont(names[face], str(path)))
    except (TTFError, OSError) as e:
        logger.warning("Could not load fonts (%s); rendering with Helvetica", e)
        return dict(BUILTIN_FONTS)

    pdfmetrics.registerFontFamily(
        FONT_FAMILY,
        normal=names["normal"],
        bold=names["bold"],
        italic=names["italics"],
        boldItalic=names["bolditalics"],
    )
    return names


def resolve_widths(widths: Sequence[Any], total: float) -> List[float]:
    """
    Convert a width template to points.

    Percentages are taken of the total width, numbers are points and each
    '*' (or 'auto') gets an equal share of what remains.
    """
    resolved: List[Optional[float]] = []
    for width in widths:
        if isinstance(width, bool):
            raise RenderError(f"Invalid column width: {width!r}")
        if isinstance(width, (int, float)):
            resolved.append(float(width))
        elif isinstance(width, str) and width.endswith("%"):
            try:
                resolved.append(total * float(width[:-1]) / 100.0)
            except ValueError as e:
                raise RenderError(f"Invalid column width: {width!r}", cause=e) from e
        elif width in ("*", "auto"):
            resolved.append(None)
        else:
            raise RenderError(f"Invalid column width: {width!r}")

    stars = resolved.count(None)
    if stars:
        fixed = sum(w for w in resolved if w is not None)
        share = max(total - fixed, 0.0) / stars
        resolved = [share if w is None else w for w in resolved]
    return resolved


class PDFRenderer:
    """
    Renders document definitions to PDF bytes.

    Fonts are registered once at construction; a renderer can then be
    shared by every request of the process.
    """

    def __init__(self, font_set: Optional[FontSet] = None):
        """
        Initialize the renderer.

        Args:
            font_set: TrueType faces to register (None for built-in fonts)
        """
        self.fonts = register_fonts(font_set)
        self.report_styles = ReportStyles(self.fonts["normal"], self.fonts["bold"])
        self._derived_styles: Dict[str, ParagraphStyle] = {}

    @property
    def uses_builtin_fonts(self) -> bool:
        return self.fonts["normal"] == BUILTIN_FONTS["normal"]

    def render(self, definition: Dict[str, Any]) -> bytes:
        """
        Render a document definition.

        Args:
            definition: Document definition produced by ReportComposer

        Returns:
            The PDF document as bytes

        Raises:
            RenderError: If the tree is malformed or ReportLab fails
        """
        if not isinstance(definition, dict):
            raise RenderError("Document definition must be a mapping")

        page_name = str(definition.get("pageSize", "A4")).upper()
        if page_name not in PAGE_SIZES:
            raise RenderError(f"Unsupported page size: {page_name}")
        left, top, right, bottom = definition.get("pageMargins", [20, 20, 20, 20])
        info = definition.get("info", {})

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=PAGE_SIZES[page_name],
            leftMargin=left,
            rightMargin=right,
            topMargin=top,
            bottomMargin=bottom,
            title=info.get("title", ""),
            subject=info.get("subject", ""),
            creator=f"ropm-generator {__version__}",
        )

        story = []
        for node in definition.get("content", []):
            story.extend(self._block(node, doc.width))

        on_page = self._page_decorator(definition.get("pageBorder"))
        try:
            doc.build(story, onFirstPage=on_page, onLaterPages=on_page)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError("ReportLab failed to build the document", cause=e) from e

        return buffer.getvalue()

    def _page_decorator(self, border: Optional[Dict[str, Any]]) -> Callable:
        """Draw the outer page border on every page."""
        def decorate(canvas, doc):
            if not border:
                return
            inset = border.get("inset", 10)
            width, height = doc.pagesize
            canvas.saveState()
            canvas.setLineWidth(border.get("lineWidth", 1))
            canvas.setStrokeColor(colors.HexColor(border.get("color", "#000000")))
            canvas.rect(inset, inset, width - 2 * inset, height - 2 * inset)
            canvas.restoreState()
        return decorate

    def _block(self, node: Any, width: float) -> List:
        """Flowables for one top-level block, margins included."""
        if not isinstance(node, dict):
            raise RenderError(f"Unrenderable block of type {type(node).__name__}")

        section = node.get("section")
        margin = node.get("margin", [0, 0, 0, 0])
        flowables = []
        if margin[1]:
            flowables.append(Spacer(1, margin[1]))

        if "table" in node:
            flowables.append(self._table(node, width))
        elif "columns" in node:
            flowables.append(self._columns(node, width))
        elif "text" in node or "stack" in node:
            inner = {key: value for key, value in node.items() if key != "margin"}
            flowables.extend(self._content(inner, width, section))
        else:
            raise RenderError("Unknown block kind", node=section or str(sorted(node)))

        if margin[3]:
            flowables.append(Spacer(1, margin[3]))
        return flowables

    def _table(self, node: Dict[str, Any], width: float) -> Table:
        section = node.get("section")
        content = node["table"]
        col_widths = resolve_widths(content.get("widths", []), width)
        columns = len(col_widths)
        grid = node.get("layout", "grid") == "grid"

        data = []
        commands = [
            ("VALIGN", (0, 0), (-1, -1), "TOP" if grid else "MIDDLE"),
            ("LEFTPADDING", (0, 0), (-1, -1), CELL_PADDING_H),
            ("RIGHTPADDING", (0, 0), (-1, -1), CELL_PADDING_H),
            ("TOPPADDING", (0, 0), (-1, -1), CELL_PADDING_V),
            ("BOTTOMPADDING", (0, 0), (-1, -1), CELL_PADDING_V),
        ]
        if grid:
            commands.append(("GRID", (0, 0), (-1, -1), GRID_WIDTH, GRID_COLOR))

        for r, row in enumerate(content.get("body", [])):
            if len(row) != columns:
                raise RenderError(
                    f"Row {r} has {len(row)} cells but the table has {columns} columns",
                    node=section,
                )
            out_row = []
            for c, cell in enumerate(row):
                span = cell.get("colSpan", 1) if isinstance(cell, dict) else 1
                if span == 0:
                    out_row.append("")
                    continue
                if span < 0 or c + span > columns:
                    raise RenderError(f"Cell ({r}, {c}) spans outside the table", node=section)

                last = c + span - 1
                if span > 1:
                    commands.append(("SPAN", (c, r), (last, r)))
                inner = sum(col_widths[c:last + 1]) - 2 * CELL_PADDING_H
                out_row.append(self._content(cell, inner, section))
                commands.extend(self._cell_commands(cell, (c, r), (last, r)))
            data.append(out_row)

        if not data:
            raise RenderError("Table has no rows", node=section)

        return Table(
            data,
            colWidths=col_widths,
            style=TableStyle(commands),
            hAlign="CENTER",
            splitInRow=1,
        )

    def _cell_commands(self, cell: Any, start, end) -> List:
        if not isinstance(cell, dict):
            return []
        commands = []
        fill = cell.get("fillColor") or STYLE_FILLS.get(cell.get("style"))
        if fill:
            commands.append(("BACKGROUND", start, end, colors.HexColor(fill)))
        if "image" in cell and cell.get("alignment"):
            commands.append(("ALIGN", start, end, cell["alignment"].upper()))
        border = cell.get("border")
        if border:
            for flag, command in zip(border, ("LINEBEFORE", "LINEABOVE", "LINEAFTER", "LINEBELOW")):
                if flag:
                    commands.append((command, start, end, GRID_WIDTH, colors.black))
        return commands

    def _columns(self, node: Dict[str, Any], width: float) -> Table:
        section = node.get("section")
        cells = node["columns"]
        if not cells:
            raise RenderError("Columns block is empty", node=section)
        col_width = width / len(cells)
        row = [self._content(cell, col_width, section) for cell in cells]
        return Table(
            [row],
            colWidths=[col_width] * len(cells),
            style=TableStyle([
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ]),
        )

    def _content(self, cell: Any, width: float, section: Optional[str] = None) -> List:
        """Flowables inside one cell (or a standalone text/stack block)."""
        if isinstance(cell, str):
            return [Paragraph(escape_markup(cell), self._style(DEFAULT_STYLE, None, section))]
        if not isinstance(cell, dict):
            raise RenderError(f"Unrenderable value type: {type(cell).__name__}", node=section)

        flowables: List = []
        margin = cell.get("margin")
        if margin and margin[1]:
            flowables.append(Spacer(1, margin[1]))

        if "image" in cell:
            flowables.append(self._image(cell, section))
        elif "stack" in cell:
            for child in cell["stack"]:
                if isinstance(child, dict) and "alignment" not in child and cell.get("alignment"):
                    child = dict(child, alignment=cell["alignment"])
                flowables.extend(self._content(child, width, section))
        elif "text" in cell:
            style = self._style(cell.get("style"), cell.get("alignment"), section)
            paragraph = Paragraph(self._markup(cell["text"], section), style)
            flowables.append(paragraph)
            min_height = cell.get("minHeight")
            if min_height:
                _, height = paragraph.wrap(width, 10 ** 6)
                if height < min_height:
                    flowables.append(Spacer(1, min_height - height))
        return flowables

    def _markup(self, text: Any, section: Optional[str]) -> str:
        """Paragraph markup for a text value or a list of runs."""
        if isinstance(text, str):
            return escape_markup(text)
        if isinstance(text, list):
            parts = []
            for run in text:
                if isinstance(run, str):
                    parts.append(escape_markup(run))
                elif isinstance(run, dict) and isinstance(run.get("text", ""), str):
                    fragment = escape_markup(run.get("text", ""))
                    parts.append(f"<b>{fragment}</b>" if run.get("bold") else fragment)
                else:
                    raise RenderError(
                        f"Unrenderable value type in text run: {type(run).__name__}",
                        node=section,
                    )
            return "".join(parts)
        raise RenderError(f"Unrenderable value type: {type(text).__name__}", node=section)

    def _style(self, name: Optional[str], alignment: Optional[str], section: Optional[str]) -> ParagraphStyle:
        if name is None or name in CONTAINER_STYLES:
            name = DEFAULT_STYLE
        if name not in self.report_styles:
            raise RenderError(f"Unknown style: {name}", node=section)
        base = self.report_styles.get(name)
        if not alignment:
            return base
        if alignment not in ALIGNMENTS:
            raise RenderError(f"Unknown alignment: {alignment}", node=section)

        key = f"{name}-{alignment}"
        if key not in self._derived_styles:
            self._derived_styles[key] = ParagraphStyle(key, parent=base, alignment=ALIGNMENTS[alignment])
        return self._derived_styles[key]

    def _image(self, cell: Dict[str, Any], section: Optional[str]) -> Image:
        uri = cell["image"]
        if not isinstance(uri, str) or not uri.startswith("data:") or "," not in uri:
            raise RenderError("Images must be base64 data URIs", node=section)
        try:
            data = base64.b64decode(uri.split(",", 1)[1], validate=True)
            img_width, img_height = ImageReader(io.BytesIO(data)).getSize()
        except (binascii.Error, ValueError, OSError) as e:
            raise RenderError("Image data could not be decoded", node=section, cause=e) from e

        width = float(cell.get("width", img_width))
        height = width * img_height / img_width if img_width else width
        flowable = Image(io.BytesIO(data), width=width, height=height)
        flowable.hAlign = (cell.get("alignment") or "center").upper()
        return flowable
