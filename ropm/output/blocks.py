"""
Document tree building blocks.

Section builders describe the report as a tree of plain dicts and lists
(a document definition) that the PDF renderer walks. Keeping the tree as
plain data means it can be sanitized, inspected in tests and dumped as JSON.

Node shapes:

- Table:   {"table": {"widths": [...], "body": [[cell, ...], ...]},
            "layout": "grid" | "noBorders", "margin": [l, t, r, b]}
- Columns: {"columns": [cell, ...], "margin": [l, t, r, b]}
- Cell:    {"text": str | [run, ...]} or {"stack": [cell, ...]} or
           {"image": data_uri, "width": pt}, plus optional "style",
           "colSpan", "fillColor", "alignment", "minHeight" and "border".
           A run is a str or {"text": str, "bold": True}.

Widths are "NN%", "*" or a number of points. Every body row must have
exactly len(widths) cells; a spanning cell is followed by span-1 fillers
(see empty()).
"""

from typing import Any, Dict, List, Optional, Sequence

from ropm.output.text_utils import upper

NAVY = "#003366"
DARK_RED = "#8b0000"
LIGHT_GREY = "#eeeeee"
PALE_GREY = "#f0f0f0"
PERSON_GREY = "#e0e0e0"

Node = Dict[str, Any]


def field(label: str, value: Any = "", span: int = 1) -> Node:
    """
    Labelled field box: the label stacked above the value.

    Both are upper-cased; an absent value shows as an empty line.

    Args:
        label: Field caption
        value: Field value (None/"" render empty)
        span: Number of grid columns the box covers
    """
    return {
        "stack": [
            {"text": label.upper(), "style": "FieldLabel"},
            {"text": upper(value), "style": "FieldValue"},
        ],
        "colSpan": span,
        "style": "FieldBox",
    }


def empty(span: int = 1) -> Node:
    """Filler cell. span=0 marks the cells covered by a preceding colSpan."""
    return {"text": "", "colSpan": span}


def fillers(count: int) -> List[Node]:
    """The zero-width placeholders that follow a cell spanning count+1 columns."""
    return [empty(0) for _ in range(count)]


def spanning(node: Node, columns: int) -> List[Node]:
    """A full row made of one cell spanning every column."""
    return [dict(node, colSpan=columns)] + fillers(columns - 1)


def section_header(text: str, columns: int, red: bool = False) -> List[Node]:
    """Coloured title row spanning the whole table."""
    cell = {
        "text": text,
        "style": "SectionHeaderRed" if red else "SectionHeader",
        "fillColor": DARK_RED if red else NAVY,
    }
    return spanning(cell, columns)


def sub_header(text: str, columns: int, fill: str = LIGHT_GREY) -> List[Node]:
    """Grey sub-title row spanning the whole table."""
    return spanning({"text": text, "style": "SubHeader", "fillColor": fill}, columns)


def column_header(text: str, span: int = 1) -> Node:
    return {"text": text, "style": "TableHeader", "colSpan": span}


def cell(value: Any, span: int = 1) -> Node:
    """Plain data cell with the value upper-cased."""
    return {"text": upper(value), "style": "Cell", "colSpan": span}


def placeholder(text: str) -> Node:
    """The single row shown when a group has no entries."""
    return {"text": text, "style": "Placeholder"}


def image(data_uri: Optional[str], width: float, border: Optional[Sequence[bool]] = None) -> Node:
    """Image cell, or an empty cell when the image is unavailable."""
    node: Node = {"alignment": "center"}
    if border is not None:
        node["border"] = list(border)
    if data_uri:
        node.update(image=data_uri, width=width)
    else:
        node["text"] = ""
    return node


def grid_table(
    widths: Sequence[Any],
    body: List[List[Node]],
    margin: Sequence[float] = (0, 0, 0, 5),
    section: Optional[str] = None,
) -> Node:
    """Table drawn with the thin 'spreadsheet' grid used across the report."""
    node: Node = {
        "table": {"widths": list(widths), "body": body},
        "layout": "grid",
        "margin": list(margin),
    }
    if section:
        node["section"] = section
    return node
