"""Tests for document tree building blocks and text helpers."""

from ropm.output.blocks import (
    DARK_RED,
    NAVY,
    cell,
    field,
    grid_table,
    image,
    section_header,
    spanning,
)
from ropm.output.text_utils import escape_markup, upper


class TestField:
    """Tests for field boxes."""

    def test_label_and_value_upper_cased(self):
        """Test caption and value are upper-cased and the span is kept."""
        node = field("Nome da mãe", "ana da silva", 3)
        assert node["stack"][0] == {"text": "NOME DA MÃE", "style": "FieldLabel"}
        assert node["stack"][1] == {"text": "ANA DA SILVA", "style": "FieldValue"}
        assert node["colSpan"] == 3

    def test_absent_value(self):
        """Test a missing value prints as an empty string."""
        assert field("RG")["stack"][1]["text"] == ""


class TestRows:
    """Tests for row helpers."""

    def test_spanning_row_length(self):
        """Test a spanning row pads with colSpan 0 fillers."""
        row = spanning({"text": "X"}, 4)
        assert len(row) == 4
        assert row[0]["colSpan"] == 4
        assert all(c["colSpan"] == 0 for c in row[1:])

    def test_section_header_colors(self):
        """Test navy and dark red section banners."""
        assert section_header("T", 2)[0]["fillColor"] == NAVY
        assert section_header("T", 2, red=True)[0]["fillColor"] == DARK_RED

    def test_cell_upper_cases(self):
        """Test plain cells are upper-cased."""
        assert cell("taurus")["text"] == "TAURUS"

    def test_image_placeholder(self):
        """Test a missing image becomes an empty text cell."""
        assert image(None, 50) == {"alignment": "center", "text": ""}
        assert image("data:image/png;base64,AA==", 50)["width"] == 50

    def test_grid_table(self):
        """Test grid tables carry layout, margin and section."""
        node = grid_table(["*"], [[cell("x")]], section="narrative")
        assert node["layout"] == "grid"
        assert node["margin"] == [0, 0, 0, 5]
        assert node["section"] == "narrative"


class TestTextUtils:
    """Tests for text helpers."""

    def test_upper(self):
        """Test display form of None, text and numbers."""
        assert upper(None) == ""
        assert upper("joão") == "JOÃO"
        assert upper(12) == "12"

    def test_escape_markup(self):
        """Test markup characters are escaped."""
        assert escape_markup("a < b & c > d") == "a &lt; b &amp; c &gt; d"

    def test_line_breaks(self):
        """Test newlines become line break tags."""
        assert escape_markup("um\r\ndois\nTrês") == "um<br/>dois<br/>Três"

    def test_control_characters_dropped(self):
        """Test control characters are removed."""
        assert escape_markup("a\x00b\x07c") == "abc"

    def test_empty(self):
        """Test the empty string is left alone."""
        assert escape_markup("") == ""
