"""Tests for field normalization helpers."""

from ropm.core.normalize import format_date, sanitize_tree, strip_accents, to_list, value_at


class TestToList:
    """Tests for to_list."""

    def test_none_gives_empty_list(self):
        """Test None is an absent field."""
        assert to_list(None) == []

    def test_scalar_is_wrapped(self):
        """Test a scalar becomes a one-item list."""
        assert to_list("x") == ["x"]

    def test_list_is_kept(self):
        """Test lists pass through."""
        assert to_list(["a", "b"]) == ["a", "b"]

    def test_tuple_becomes_list(self):
        """Test tuples are converted to lists."""
        assert to_list(("a", "b")) == ["a", "b"]

    def test_empty_string_is_a_scalar(self):
        """Test an empty string is one blank entry, not an absent field."""
        assert to_list("") == [""]

    def test_returns_a_copy(self):
        """Test the input list is not shared."""
        values = ["a"]
        result = to_list(values)
        result.append("b")
        assert values == ["a"]


class TestValueAt:
    """Tests for value_at."""

    def test_existing_index(self):
        """Test reading a present position."""
        assert value_at(["a", "b"], 1) == "b"

    def test_missing_index(self):
        """Test a position past the end gives an empty string."""
        assert value_at(["a"], 3) == ""

    def test_falsy_value(self):
        """Test None and empty values give an empty string."""
        assert value_at(["a", None, ""], 1) == ""
        assert value_at(["a", None, ""], 2) == ""


class TestSanitizeTree:
    """Tests for sanitize_tree."""

    def test_removes_none_from_lists(self):
        """Test None entries are dropped from lists."""
        assert sanitize_tree([1, None, 2, None]) == [1, 2]

    def test_removes_none_valued_keys(self):
        """Test keys holding None are dropped."""
        assert sanitize_tree({"a": 1, "b": None}) == {"a": 1}

    def test_nested(self):
        """Test nested lists and dicts are cleaned."""
        tree = {"content": [{"text": "x", "style": None}, None, [None, "y"]]}
        assert sanitize_tree(tree) == {"content": [{"text": "x"}, ["y"]]}

    def test_preserves_order_and_duplicates(self):
        """Test remaining entries keep order and duplicates."""
        assert sanitize_tree(["b", None, "a", "b"]) == ["b", "a", "b"]

    def test_keeps_falsy_non_none_values(self):
        """Test empty strings, zero and False are kept."""
        assert sanitize_tree({"text": "", "n": 0, "flag": False}) == {"text": "", "n": 0, "flag": False}

    def test_does_not_mutate_input(self):
        """Test the input tree is left untouched."""
        tree = {"a": [1, None]}
        sanitize_tree(tree)
        assert tree == {"a": [1, None]}

    def test_scalar_passthrough(self):
        """Test scalars are returned as is."""
        assert sanitize_tree("x") == "x"


class TestFormatDate:
    """Tests for format_date."""

    def test_iso_date(self):
        """Test YYYY-MM-DD becomes DD/MM/YYYY."""
        assert format_date("2024-03-05") == "05/03/2024"

    def test_absent(self):
        """Test missing dates give an empty string."""
        assert format_date(None) == ""
        assert format_date("") == ""

    def test_malformed_passed_through(self):
        """Test other formats are returned unchanged."""
        assert format_date("05/03/2024") == "05/03/2024"
        assert format_date("ontem") == "ontem"
        assert format_date("2024-3-5") == "2024-3-5"

    def test_surrounding_whitespace(self):
        """Test whitespace around an ISO date is ignored."""
        assert format_date(" 2024-03-05 ") == "05/03/2024"


class TestStripAccents:
    """Tests for strip_accents."""

    def test_removes_diacritics(self):
        """Test accents and cedillas are removed."""
        assert strip_accents("VÍTIMA") == "VITIMA"
        assert strip_accents("Guarnição") == "Guarnicao"

    def test_plain_text_unchanged(self):
        """Test ASCII text is unchanged."""
        assert strip_accents("ACUSADO") == "ACUSADO"
