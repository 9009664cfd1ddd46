"""Tests for the ReportLab PDF renderer."""

import pytest

from ropm.output.blocks import field, fillers, grid_table
from ropm.output.pdf_renderer import BUILTIN_FONTS, PDFRenderer, register_fonts, resolve_widths
from ropm.output.pdf_report import ROPMReportGenerator, generate_pdf_report
from ropm.utils.assets import FontSet
from ropm.utils.exceptions import RenderError


def document(*blocks):
    """Minimal page definition around some blocks."""
    return {"pageSize": "A4", "pageMargins": [20, 20, 20, 20], "content": list(blocks)}


@pytest.fixture(scope="module")
def renderer():
    """Renderer with the built-in font family."""
    return PDFRenderer()


class TestResolveWidths:
    """Tests for column width resolution."""

    def test_percentages_and_stars(self):
        """Test percentages take their share and stars split the rest."""
        assert resolve_widths(["50%", "*", "*"], 200) == [100.0, 50.0, 50.0]

    def test_points_and_star(self):
        """Test fixed point widths with a star column."""
        assert resolve_widths([60, "*", 60], 200) == [60.0, 80.0, 60.0]

    def test_invalid(self):
        """Test an unparseable width raises RenderError."""
        with pytest.raises(RenderError):
            resolve_widths(["wide"], 200)


class TestFontRegistration:
    """Tests for font fallback."""

    def test_empty_font_set_uses_helvetica(self):
        """Test an empty font set registers Helvetica."""
        assert register_fonts(FontSet()) == BUILTIN_FONTS
        assert PDFRenderer(FontSet()).uses_builtin_fonts

    def test_unreadable_font_falls_back(self, temp_dir):
        """Test a corrupt TrueType file falls back to Helvetica."""
        broken = temp_dir / "Broken-Regular.ttf"
        broken.write_bytes(b"this is not a font")
        assert register_fonts(FontSet(broken, broken, broken, broken)) == BUILTIN_FONTS


class TestRender:
    """Tests for rendering document definitions."""

    def test_simple_table(self, renderer):
        """Test rendering a grid table of field boxes."""
        body = [[field("NOME", "MARIA", 2), *fillers(1)], [field("RG", "123"), field("CPF", "456")]]
        pdf = renderer.render(document(grid_table(["50%", "50%"], body)))
        assert pdf.startswith(b"%PDF")

    def test_rich_text_runs(self, renderer):
        """Test mixed plain and bold text runs."""
        block = {"text": ["Acusado ", {"text": "FULANO", "bold": True}, "."], "style": "NarrativeText"}
        assert renderer.render(document(block)).startswith(b"%PDF")

    def test_row_length_mismatch(self, renderer):
        """Test a short row raises RenderError."""
        body = [[field("A"), field("B")], [field("C")]]
        with pytest.raises(RenderError, match="has 1 cells"):
            renderer.render(document(grid_table(["50%", "50%"], body, section="units")))

    def test_non_text_value(self, renderer):
        """Test a dict in a text slot raises RenderError."""
        block = grid_table(["*"], [[{"text": {"nested": "object"}}]])
        with pytest.raises(RenderError, match="Unrenderable value type"):
            renderer.render(document(block))

    def test_unknown_block(self, renderer):
        """Test an unrecognized block kind raises RenderError."""
        with pytest.raises(RenderError, match="Unknown block kind"):
            renderer.render(document({"canvas": []}))

    def test_unknown_style(self, renderer):
        """Test an undefined style name raises RenderError."""
        with pytest.raises(RenderError, match="Unknown style"):
            renderer.render(document({"text": "x", "style": "Nope"}))

    def test_invalid_image(self, renderer):
        """Test an undecodable image data URI raises RenderError."""
        block = grid_table(["*"], [[{"image": "data:image/png;base64,@@@", "width": 50}]])
        with pytest.raises(RenderError):
            renderer.render(document(block))

    def test_markup_characters_escaped(self, renderer):
        """Test markup characters in values are printed literally."""
        block = {"text": "<b>A & B</b> <unclosed", "style": "Cell"}
        assert renderer.render(document(block)).startswith(b"%PDF")


class TestReportGenerator:
    """Tests for the full pipeline."""

    def test_full_record(self, config, full_record):
        """Test generating a PDF for the full record."""
        pdf = ROPMReportGenerator(config).generate(full_record)
        assert pdf.startswith(b"%PDF")

    def test_empty_payload(self, bare_config):
        """Test an empty payload still produces a PDF."""
        record, pdf = ROPMReportGenerator(bare_config).generate_from_payload({})
        assert record.download_filename == "ROPM_Gerado.pdf"
        assert pdf.startswith(b"%PDF")

    def test_long_narrative_spans_pages(self, bare_config):
        """Test a long narrative flows onto further pages."""
        narrative = "\n".join(f"Parágrafo {i}: " + "texto do relato " * 30 for i in range(60))
        record, pdf = ROPMReportGenerator(bare_config).generate_from_payload({"historico": narrative})
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > len(ROPMReportGenerator(bare_config).generate(record.model_copy(update={"narrative": ""})))

    def test_compose_is_sanitized(self, config, full_record):
        """Test the composed tree holds no None values."""
        def has_none(node):
            if node is None:
                return True
            if isinstance(node, dict):
                return any(has_none(v) for v in node.values())
            if isinstance(node, list):
                return any(has_none(v) for v in node)
            return False

        assert not has_none(ROPMReportGenerator(config).compose(full_record))

    def test_generate_pdf_report(self, config, full_payload, temp_dir):
        """Test the convenience function writes the PDF to disk."""
        output = generate_pdf_report(full_payload, temp_dir / "out" / "ropm.pdf", config)
        assert output.exists()
        assert output.read_bytes().startswith(b"%PDF")
