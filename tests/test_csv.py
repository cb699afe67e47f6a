"""Unit tests for sheet CSV parsing."""
import pytest

from stockchat.scanning import split_quoted
from stockchat.sheet import parse_csv, parse_csv_line


class TestParseCsvLine:
    """Tests for single-line splitting."""

    def test_quoted_commas(self):
        """Test that commas inside quotes do not split."""
        assert parse_csv_line('"A,1","Widget, Inc"') == ["A,1", "Widget, Inc"]

    def test_fields_are_trimmed(self):
        """Test whitespace trimming around fields."""
        assert parse_csv_line("  a , b ,c  ") == ["a", "b", "c"]

    def test_empty_fields(self):
        """Test that consecutive delimiters give empty fields."""
        assert parse_csv_line("a,,c,") == ["a", "", "c", ""]


class TestParseCsv:
    """Tests for parse_csv."""

    def test_quoted_row(self):
        """Test the canonical quoted-comma example."""
        assert parse_csv('sku,name\n"A,1","Widget, Inc"') == [
            {"sku": "A,1", "name": "Widget, Inc"}
        ]

    def test_byte_order_mark_removed_from_first_header(self):
        """Test that a leading BOM does not leak into the first column name."""
        rows = parse_csv("\ufeffsku,qty\nA,3\n")

        assert rows == [{"sku": "A", "qty": "3"}]

    def test_short_rows_are_padded(self):
        """Test that missing trailing fields become empty strings."""
        assert parse_csv("sku,name,qty\nA,Apple") == [
            {"sku": "A", "name": "Apple", "qty": ""}
        ]

    def test_blank_rows_are_skipped(self):
        """Test that rows with no content are dropped."""
        text = "sku,qty\r\nA,1\r\n\r\n , \r\nB,2\r\n"

        assert parse_csv(text) == [{"sku": "A", "qty": "1"}, {"sku": "B", "qty": "2"}]

    @pytest.mark.parametrize("text", ["", "sku,name", "sku,name\n"])
    def test_no_data_rows(self, text: str):
        """Test documents without data rows."""
        assert parse_csv(text) == []


class TestSplitQuoted:
    """Tests for the shared quote-aware splitter."""

    def test_predicate_delimiter_and_two_quote_kinds(self):
        """Test splitting on whitespace with single and double quotes."""
        tokens = split_quoted("a='x y' b=\"it's\" c", delimiter=str.isspace, quotes="\"'")

        assert tokens == ["a=x y", "b=it's", "c"]

    def test_unstripped_fields(self):
        """Test that strip=False keeps surrounding whitespace."""
        assert split_quoted(" a , b ", strip=False) == [" a ", " b "]
