"""Unit tests for the whitespace-run column segmenter."""

import pytest

from tabifyer.segmenter import Field, segment, segment_fields


@pytest.mark.unit
class TestSegment:
    """Field splitting on single and multiple space runs."""

    def test_single_space_stays_inside_field(self):
        assert segment("a b") == ["a b"]

    def test_double_space_splits(self):
        assert segment("a  b") == ["a", "b"]

    def test_longer_space_run_splits_once(self):
        assert segment("a   b") == ["a", "b"]
        assert segment("a          b") == ["a", "b"]

    def test_leading_and_trailing_spaces(self):
        assert segment("  a b  ") == ["a b"]

    def test_empty_line(self):
        assert segment("") == []

    def test_all_space_line(self):
        assert segment("   ") == []
        assert segment(" ") == []

    def test_multi_field_line(self):
        assert segment("Name  Age  City") == ["Name", "Age", "City"]

    def test_field_at_first_character_is_kept(self):
        """A field starting at index 0 must not be dropped."""
        assert segment("abc") == ["abc"]
        assert segment("a") == ["a"]
        assert segment("x  y") == ["x", "y"]

    def test_trailing_single_space_is_folded(self):
        assert segment("a ") == ["a"]
        assert segment("Name  Age ") == ["Name", "Age"]

    def test_single_leading_space(self):
        assert segment(" a") == ["a"]

    def test_mixed_runs(self):
        assert segment("a b  c d") == ["a b", "c d"]
        assert segment("New York   10001  NY") == ["New York", "10001", "NY"]

    def test_tabs_are_field_content(self):
        assert segment("a\tb  c") == ["a\tb", "c"]
        assert segment("\t") == ["\t"]

    def test_punctuation_and_numbers(self):
        line = "Item #12    $1,234.56   (net)  -"
        assert segment(line) == ["Item #12", "$1,234.56", "(net)", "-"]

    def test_pdftotext_table_row(self):
        line = "Alice Smith     34     New York"
        assert segment(line) == ["Alice Smith", "34", "New York"]

    def test_unicode_characters(self):
        assert segment("Zürich  Genève") == ["Zürich", "Genève"]

    def test_calls_do_not_share_state(self):
        """A field left open by one call must not leak into the next."""
        assert segment("abc  de") == ["abc", "de"]
        assert segment("x") == ["x"]
        assert segment("  y") == ["y"]


@pytest.mark.unit
class TestSegmentFields:
    """Offsets reported for each field."""

    def test_offsets_are_inclusive(self):
        fields = segment_fields("ab  c")
        assert fields == [Field(0, 1, "ab"), Field(4, 4, "c")]

    def test_offsets_skip_leading_spaces(self):
        fields = segment_fields("   New York   ")
        assert fields == [Field(3, 10, "New York")]

    def test_text_matches_span(self):
        line = "  Name   Age  City of  London "
        for field in segment_fields(line):
            assert line[field.start : field.end + 1] == field.text
            assert len(field) == len(field.text)

    def test_field_is_frozen(self):
        field = segment_fields("a")[0]
        with pytest.raises(AttributeError):
            field.text = "b"

    def test_segment_returns_field_texts(self):
        line = "one  two three   four"
        assert segment(line) == [f.text for f in segment_fields(line)]
